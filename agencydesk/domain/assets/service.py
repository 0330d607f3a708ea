"""IT asset service - Business logic and transactions for asset operations"""

import logging
from typing import Optional

from fastapi import HTTPException, UploadFile
from sqlalchemy.orm import Session

from ... import storage
from ...config import MAX_ATTACHMENT_SIZE, MAX_ATTACHMENTS_PER_UPLOAD
from ...errors import ValidationError
from ...models_it import ItAsset
from . import rules
from .repository import AssetRepository
from .schemas import AssetCreate, AssetUpdate, to_column_data

logger = logging.getLogger(__name__)

USER_TYPES = ["client", "employee", "agency"]


class AssetService:
    """Service layer for IT asset business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = AssetRepository()

    def get_asset(self, asset_id: str, company_id: str) -> ItAsset:
        asset = self.repo.get_asset(self.db, asset_id, company_id)
        if not asset:
            raise HTTPException(status_code=404, detail="Asset not found")
        return asset

    def list_assets(
        self,
        company_id: str,
        client_id: Optional[str] = None,
        asset_type: Optional[str] = None,
        category_id: Optional[str] = None,
    ) -> list[ItAsset]:
        return self.repo.list_assets(self.db, company_id, client_id, asset_type, category_id)

    def _resolve_owner(self, user_type: str, user_id: str, company_id: str) -> dict:
        """Map the acting user onto client_id / employee_id columns"""
        user_type = (user_type or "").lower()
        if user_type not in USER_TYPES:
            raise ValidationError("Invalid userType value.")

        if user_type == "client":
            client = self.repo.get_client_for_user(self.db, user_id, company_id)
            if not client:
                raise ValidationError("Client not found for given userId and companyId")
            return {"client_id": client.id, "employee_id": None}

        if user_type == "employee":
            employee = self.repo.get_employee_for_user(self.db, user_id, company_id)
            if not employee:
                raise ValidationError("Employee not found for given userId and companyId")
            return {"client_id": None, "employee_id": employee.id}

        if not self.repo.get_company_user(self.db, user_id, company_id):
            raise ValidationError("Agency user not found for given userId and companyId")
        return {"client_id": None, "employee_id": None}

    def create_asset(self, data: AssetCreate) -> ItAsset:
        """Create an asset after category, owner and lifecycle checks"""
        logger.info(f"📥 Creating {data.assetType} asset for company_id: {data.companyId}")
        try:
            values = rules.prepare_asset_for_create(to_column_data(data))

            category = self.repo.get_active_category(self.db, values["category_id"], data.companyId)
            if not category:
                raise ValidationError("Invalid or inactive category")
            if category.category_type != values["asset_type"]:
                raise ValidationError(f"{values['asset_type']} asset must use {values['asset_type']} category")

            values.update(self._resolve_owner(data.userType, data.userId, data.companyId))

            asset = self.repo.create_asset(self.db, data.companyId, **values)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info(f"✅ Asset created: {asset.id} (reminder on {asset.renewal_reminder_date})")
        return self.get_asset(asset.id, data.companyId)

    def update_asset(self, asset_id: str, company_id: str, data: AssetUpdate) -> ItAsset:
        try:
            asset = self.get_asset(asset_id, company_id)
            changes = rules.prepare_asset_update(asset, to_column_data(data))
            self.repo.update_asset(self.db, asset, **changes)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        if "is_renewal_reminder_sent" in changes:
            logger.info(f"🔄 Asset {asset_id} expiry extended, reminder cycle restarted")
        logger.info(f"✅ Asset updated: {asset_id} ({', '.join(sorted(changes))})")
        self.db.refresh(asset)
        return asset

    def delete_asset(self, asset_id: str, company_id: str) -> ItAsset:
        try:
            asset = self.get_asset(asset_id, company_id)
            self.repo.soft_delete_asset(self.db, asset)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info(f"🗑️ Asset soft-deleted: {asset_id}")
        return asset

    async def add_attachments(self, asset_id: str, company_id: str, files: list[UploadFile]) -> ItAsset:
        """Upload files to object storage and record one attachment row per file"""
        if not files:
            raise ValidationError("At least one attachment is required")
        if len(files) > MAX_ATTACHMENTS_PER_UPLOAD:
            raise ValidationError(f"At most {MAX_ATTACHMENTS_PER_UPLOAD} attachments per upload")

        asset = self.get_asset(asset_id, company_id)

        uploaded_keys: list[str] = []
        try:
            for file in files:
                if not storage.is_safe_filename(file.filename):
                    raise ValidationError(f"Invalid filename: {file.filename}")
                contents = await file.read()
                if len(contents) > MAX_ATTACHMENT_SIZE:
                    raise ValidationError(
                        f"File {file.filename} exceeds {MAX_ATTACHMENT_SIZE // (1024 * 1024)}MB limit"
                    )
                key = storage.build_attachment_key(company_id, asset_id, file.filename)
                storage.put_object(key, contents, file.content_type or "application/octet-stream")
                uploaded_keys.append(key)

            self.repo.add_attachments(self.db, asset, uploaded_keys)
            self.db.commit()
        except Exception:
            self.db.rollback()
            for key in uploaded_keys:
                storage.delete_object(key)
            raise

        logger.info(f"📎 Added {len(uploaded_keys)} attachment(s) to asset {asset_id}")
        self.db.refresh(asset)
        return asset

    def remove_attachment(self, asset_id: str, company_id: str, attachment_id: str) -> str:
        try:
            self.get_asset(asset_id, company_id)
            attachment = self.repo.get_attachment(self.db, asset_id, attachment_id)
            if not attachment:
                raise HTTPException(status_code=404, detail="Attachment not found")
            key = attachment.attachment_path
            self.repo.delete_attachment(self.db, attachment)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        storage.delete_object(key)
        logger.info(f"✅ Attachment {attachment_id} removed from asset {asset_id}")
        return attachment_id

    def get_attachment_url(self, asset_id: str, company_id: str, attachment_id: str) -> str:
        self.get_asset(asset_id, company_id)
        attachment = self.repo.get_attachment(self.db, asset_id, attachment_id)
        if not attachment:
            raise HTTPException(status_code=404, detail="Attachment not found")
        return storage.generate_presigned_url(attachment.attachment_path)
