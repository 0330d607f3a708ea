"""
Object storage for uploaded files (Cloudflare R2 over the S3 API)
"""

import logging
import uuid

import boto3
from botocore.config import Config

from .config import R2_ACCESS_KEY_ID, R2_ACCOUNT_ID, R2_BUCKET_NAME, R2_SECRET_ACCESS_KEY

logger = logging.getLogger(__name__)

# Presigned URL expiration time (1 hour)
PRESIGNED_URL_EXPIRATION = 3600

# Characters never allowed in an uploaded filename
DANGEROUS_FILENAME_CHARS = ["..", "/", "\\", "<", ">", ":", '"', "|", "?", "*"]


def get_r2_client():
    """Create and return an R2 client."""
    return boto3.client(
        "s3",
        endpoint_url=f"https://{R2_ACCOUNT_ID}.r2.cloudflarestorage.com",
        aws_access_key_id=R2_ACCESS_KEY_ID,
        aws_secret_access_key=R2_SECRET_ACCESS_KEY,
        config=Config(signature_version="s3v4"),
    )


def build_attachment_key(company_id: str, owner_id: str, filename: str, folder: str = "it-assets") -> str:
    """<folder>/<company>/<asset or ticket>/<uuid>.<ext>"""
    ext = filename.rsplit(".", 1)[-1].lower() if filename and "." in filename else "bin"
    return f"{folder}/{company_id}/{owner_id}/{uuid.uuid4()}.{ext}"


def is_safe_filename(filename: str) -> bool:
    return bool(filename) and len(filename) <= 255 and not any(c in filename for c in DANGEROUS_FILENAME_CHARS)


def put_object(key: str, body: bytes, content_type: str) -> None:
    r2 = get_r2_client()
    r2.put_object(Bucket=R2_BUCKET_NAME, Key=key, Body=body, ContentType=content_type)
    logger.info(f"✅ Uploaded object to R2: {key}")


def delete_object(key: str) -> None:
    r2 = get_r2_client()
    try:
        r2.delete_object(Bucket=R2_BUCKET_NAME, Key=key)
        logger.info(f"✅ Deleted object from R2: {key}")
    except Exception as e:
        # The row goes away regardless; an orphaned object is only wasted space
        logger.warning(f"⚠️ Failed to delete R2 object {key}: {e}")


def generate_presigned_url(key: str, expiration: int = PRESIGNED_URL_EXPIRATION) -> str:
    """Generate a presigned URL for accessing a private object in R2."""
    r2 = get_r2_client()
    try:
        url = r2.generate_presigned_url(
            "get_object",
            Params={"Bucket": R2_BUCKET_NAME, "Key": key},
            ExpiresIn=expiration,
        )
        logger.info(f"✅ Generated presigned URL for key: {key}")
        return url
    except Exception as e:
        logger.error(f"❌ Failed to generate presigned URL for key {key}: {e}")
        raise
