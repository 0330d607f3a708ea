"""
Asset expiry reminders

Daily sweep over IT assets whose renewal reminder date has arrived. Each asset
is classified by how many days remain until its governing expiry date
(warranty end for products, service end for services) and the owner is
emailed when the asset falls in one of the reminder bands.
"""

import logging
from datetime import date, datetime, timezone
from enum import Enum
from typing import Optional

from sqlalchemy.orm import Session

from .. import email_service
from ..domain.assets.repository import AssetRepository
from ..domain.assets.rules import governing_expiry_date
from ..models import utcnow

logger = logging.getLogger(__name__)


class ReminderType(str, Enum):
    DAYS_30 = "DAYS_30"
    DAYS_15 = "DAYS_15"
    DAILY = "DAILY"
    EXPIRED = "EXPIRED"


def classify_reminder(days_left: int) -> Optional[ReminderType]:
    """Reminder band for the given number of days until expiry, None when no mail is due"""
    if days_left == 30:
        return ReminderType.DAYS_30
    if days_left == 15:
        return ReminderType.DAYS_15
    if 0 <= days_left <= 7:
        return ReminderType.DAILY
    if days_left < 0:
        return ReminderType.EXPIRED
    return None


def already_sent_on(asset, today: date) -> bool:
    return asset.last_reminder_sent_at is not None and asset.last_reminder_sent_at.date() == today


def resolve_recipient(db: Session, asset) -> tuple[Optional[str], str]:
    """Client contact when the asset belongs to a client, otherwise the company"""
    if asset.client_id:
        client = AssetRepository.get_client(db, asset.client_id)
        if not client:
            return None, "Client"
        return client.business_email or client.email, client.first_name or "Client"

    company = AssetRepository.get_company(db, asset.company_id)
    if not company:
        return None, "Company"
    return company.email, company.name or "Company"


def to_naive_utc(moment: datetime) -> datetime:
    """Aware datetimes are converted to UTC; naive ones are taken as UTC already"""
    if moment.tzinfo is None:
        return moment
    return moment.astimezone(timezone.utc).replace(tzinfo=None)


async def run_asset_expiry_reminders(db: Session, now: Optional[datetime] = None) -> dict:
    """
    Send due expiry reminders and stamp the assets that were notified.

    A failed send is logged and leaves the asset unstamped so the next run
    retries it. Returns counters for the run.
    """
    now = to_naive_utc(now) if now else utcnow()
    today = now.date()
    summary = {"checked": 0, "sent": 0, "skipped": 0, "failed": 0}

    assets = AssetRepository.get_assets_due_for_reminder(db, today)
    logger.info(f"⏰ Asset expiry sweep started: {len(assets)} assets due on or before {today}")

    for asset in assets:
        summary["checked"] += 1

        expiry = governing_expiry_date(asset.asset_type, asset.end_date, asset.warranty_end_date)
        if not expiry:
            logger.info(f"⏭️ No expiry date on asset {asset.id}, skipping")
            summary["skipped"] += 1
            continue

        days_left = (expiry - today).days
        reminder_type = classify_reminder(days_left)
        if reminder_type is None:
            summary["skipped"] += 1
            continue

        if already_sent_on(asset, today):
            logger.info(f"⏭️ Reminder already sent today for asset {asset.id}")
            summary["skipped"] += 1
            continue

        email, user_name = resolve_recipient(db, asset)
        if not email:
            logger.warning(
                f"⚠️ No recipient email for asset {asset.id} "
                f"(company={asset.company_id}, client={asset.client_id})"
            )
            summary["skipped"] += 1
            continue

        try:
            await email_service.send_asset_expiry_reminder(
                to=email,
                user_name=user_name,
                asset_name=asset.asset_name,
                asset_type=asset.asset_type,
                expiry_date=expiry,
                reminder_type=reminder_type.value,
                days_left=days_left,
            )
        except Exception as e:
            logger.error(f"❌ Failed to send {reminder_type.value} reminder for asset {asset.id}: {e}")
            summary["failed"] += 1
            continue

        try:
            asset.last_reminder_sent_at = now
            if reminder_type == ReminderType.EXPIRED:
                asset.is_renewal_reminder_sent = True
            db.commit()
        except Exception:
            db.rollback()
            raise

        summary["sent"] += 1
        logger.info(f"✅ {reminder_type.value} reminder sent for asset {asset.id} to {email}")

    logger.info(f"🏁 Asset expiry sweep finished: {summary}")
    return summary
