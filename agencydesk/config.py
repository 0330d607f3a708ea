import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

# Local SQLite file unless a real database is configured
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./agencydesk.db")

# Cloudflare R2 Configuration (asset attachments)
R2_ACCOUNT_ID = os.getenv("R2_ACCOUNT_ID")
R2_ACCESS_KEY_ID = os.getenv("R2_ACCESS_KEY_ID")
R2_SECRET_ACCESS_KEY = os.getenv("R2_SECRET_ACCESS_KEY")
R2_BUCKET_NAME = os.getenv("R2_BUCKET_NAME", "agencydesk")

# Frontend base URL used in email links
FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:5173")

# Resend Email Configuration
RESEND_API_KEY = os.getenv("RESEND_API_KEY")
EMAIL_FROM_ADDRESS = os.getenv("EMAIL_FROM_ADDRESS", "AgencyDesk <noreply@agencydesk.app>")

# IT asset renewal reminders
ASSET_REMINDER_DAYS_BEFORE = int(os.getenv("ASSET_REMINDER_DAYS_BEFORE", "30"))
DEFAULT_CURRENCY_CODE = os.getenv("DEFAULT_CURRENCY_CODE", "INR")

# Attachments
MAX_ATTACHMENT_SIZE = int(os.getenv("MAX_ATTACHMENT_SIZE", str(10 * 1024 * 1024)))  # 10MB
MAX_ATTACHMENTS_PER_UPLOAD = int(os.getenv("MAX_ATTACHMENTS_PER_UPLOAD", "100"))
