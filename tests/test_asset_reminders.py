"""Tests for the asset expiry reminder sweep."""

from datetime import date, datetime, timedelta, timezone
from unittest.mock import AsyncMock, patch

import pytest

from agencydesk.domain.assets.rules import calculate_renewal_reminder_date
from agencydesk.models_it import ItAsset
from agencydesk.services.asset_reminders import (
    ReminderType,
    classify_reminder,
    run_asset_expiry_reminders,
)

NOW = datetime(2026, 3, 1, 0, 30, tzinfo=timezone.utc)
TODAY = NOW.date()


def make_asset(db, company, category, asset_type="Product", days_left=15, **overrides) -> ItAsset:
    expiry = TODAY + timedelta(days=days_left)
    values = {
        "company_id": company.id,
        "category_id": category.id,
        "asset_type": asset_type,
        "asset_name": "Dell Monitor" if asset_type == "Product" else "Domain renewal",
        "payment_mode": "Card",
        "payment_status": "Paid",
        "purchased_by": "Company",
        "paid_by": "Company",
        "start_date": date(2024, 1, 1),
        "end_date": expiry if asset_type == "Service" else date(2030, 1, 1),
        "warranty_end_date": expiry if asset_type == "Product" else None,
        "renewal_reminder_date": calculate_renewal_reminder_date(expiry),
    }
    values.update(overrides)
    asset = ItAsset(**values)
    db.add(asset)
    db.commit()
    db.refresh(asset)
    return asset


@pytest.fixture
def send_reminder():
    with patch(
        "agencydesk.email_service.send_asset_expiry_reminder", new_callable=AsyncMock
    ) as send:
        send.return_value = {"id": "email-1"}
        yield send


class TestClassifyReminder:
    @pytest.mark.parametrize(
        "days_left,expected",
        [
            (30, ReminderType.DAYS_30),
            (15, ReminderType.DAYS_15),
            (7, ReminderType.DAILY),
            (0, ReminderType.DAILY),
            (-1, ReminderType.EXPIRED),
            (-40, ReminderType.EXPIRED),
            (8, None),
            (20, None),
            (29, None),
        ],
    )
    def test_bands(self, days_left, expected):
        assert classify_reminder(days_left) == expected


class TestReminderSweep:
    """run_asset_expiry_reminders against an in-memory database"""

    @pytest.mark.asyncio
    async def test_days_15_sent_to_company_and_stamped(self, db, company, product_category, send_reminder):
        asset = make_asset(db, company, product_category, days_left=15)

        summary = await run_asset_expiry_reminders(db, now=NOW)

        assert summary == {"checked": 1, "sent": 1, "skipped": 0, "failed": 0}
        send_reminder.assert_awaited_once()
        kwargs = send_reminder.await_args.kwargs
        assert kwargs["to"] == "ops@acme.test"
        assert kwargs["user_name"] == "Acme Agency"
        assert kwargs["reminder_type"] == "DAYS_15"
        assert kwargs["days_left"] == 15
        assert kwargs["expiry_date"] == TODAY + timedelta(days=15)

        db.refresh(asset)
        assert asset.last_reminder_sent_at.date() == TODAY
        assert asset.is_renewal_reminder_sent is False

    @pytest.mark.asyncio
    async def test_second_run_same_day_sends_nothing(self, db, company, product_category, send_reminder):
        make_asset(db, company, product_category, days_left=15)

        await run_asset_expiry_reminders(db, now=NOW)
        summary = await run_asset_expiry_reminders(db, now=NOW + timedelta(hours=3))

        assert summary == {"checked": 1, "sent": 0, "skipped": 1, "failed": 0}
        assert send_reminder.await_count == 1

    @pytest.mark.asyncio
    async def test_daily_band_sends_again_next_day(self, db, company, product_category, send_reminder):
        make_asset(
            db,
            company,
            product_category,
            days_left=5,
            last_reminder_sent_at=datetime(2026, 2, 28, 0, 30),
        )

        summary = await run_asset_expiry_reminders(db, now=NOW)

        assert summary["sent"] == 1
        assert send_reminder.await_args.kwargs["reminder_type"] == "DAILY"

    @pytest.mark.asyncio
    async def test_expired_sets_flag(self, db, company, product_category, send_reminder):
        asset = make_asset(db, company, product_category, days_left=-2)

        await run_asset_expiry_reminders(db, now=NOW)

        assert send_reminder.await_args.kwargs["reminder_type"] == "EXPIRED"
        db.refresh(asset)
        assert asset.is_renewal_reminder_sent is True
        assert asset.last_reminder_sent_at is not None

    @pytest.mark.asyncio
    async def test_service_uses_end_date(self, db, company, service_category, send_reminder):
        make_asset(db, company, service_category, asset_type="Service", days_left=30)

        await run_asset_expiry_reminders(db, now=NOW)

        kwargs = send_reminder.await_args.kwargs
        assert kwargs["reminder_type"] == "DAYS_30"
        assert kwargs["asset_type"] == "Service"
        assert kwargs["expiry_date"] == TODAY + timedelta(days=30)

    @pytest.mark.asyncio
    async def test_between_bands_is_skipped(self, db, company, product_category, send_reminder):
        asset = make_asset(db, company, product_category, days_left=20)

        summary = await run_asset_expiry_reminders(db, now=NOW)

        assert summary == {"checked": 1, "sent": 0, "skipped": 1, "failed": 0}
        send_reminder.assert_not_awaited()
        db.refresh(asset)
        assert asset.last_reminder_sent_at is None

    @pytest.mark.asyncio
    async def test_client_asset_mails_business_email(
        self, db, company, product_category, client_user, send_reminder
    ):
        _, client_row = client_user
        make_asset(db, company, product_category, days_left=7, client_id=client_row.id)

        await run_asset_expiry_reminders(db, now=NOW)

        kwargs = send_reminder.await_args.kwargs
        assert kwargs["to"] == "accounts@client.test"
        assert kwargs["user_name"] == "Ravi"

    @pytest.mark.asyncio
    async def test_future_reminder_date_not_selected(self, db, company, product_category, send_reminder):
        make_asset(db, company, product_category, days_left=45)

        summary = await run_asset_expiry_reminders(db, now=NOW)

        assert summary["checked"] == 0
        send_reminder.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_deleted_assets_ignored(self, db, company, product_category, send_reminder):
        make_asset(db, company, product_category, days_left=15, is_deleted=True)

        summary = await run_asset_expiry_reminders(db, now=NOW)

        assert summary["checked"] == 0

    @pytest.mark.asyncio
    async def test_failed_send_leaves_asset_unstamped_and_continues(
        self, db, company, product_category, send_reminder
    ):
        failing = make_asset(db, company, product_category, days_left=15, asset_name="Broken")
        working = make_asset(db, company, product_category, days_left=15, asset_name="Fine")

        async def flaky_send(**kwargs):
            if kwargs["asset_name"] == "Broken":
                raise Exception("Failed to send email: provider down")
            return {"id": "email-2"}

        send_reminder.side_effect = flaky_send

        summary = await run_asset_expiry_reminders(db, now=NOW)

        assert summary == {"checked": 2, "sent": 1, "skipped": 0, "failed": 1}
        db.refresh(failing)
        db.refresh(working)
        assert failing.last_reminder_sent_at is None
        assert working.last_reminder_sent_at is not None

    @pytest.mark.asyncio
    async def test_missing_recipient_is_skipped(self, db, company, product_category, send_reminder):
        company.email = None
        db.commit()
        make_asset(db, company, product_category, days_left=15)

        summary = await run_asset_expiry_reminders(db, now=NOW)

        assert summary == {"checked": 1, "sent": 0, "skipped": 1, "failed": 0}
        send_reminder.assert_not_awaited()


class TestReminderTimestamps:
    """lastReminderSentAt is stored as naive UTC"""

    @pytest.mark.asyncio
    async def test_aware_now_stored_as_naive_utc(self, db, company, product_category, send_reminder):
        ist = timezone(timedelta(hours=5, minutes=30))
        local_now = datetime(2026, 3, 1, 2, 0, tzinfo=ist)  # 2026-02-28 20:30 UTC
        utc_today = date(2026, 2, 28)
        asset = make_asset(
            db,
            company,
            product_category,
            warranty_end_date=utc_today + timedelta(days=15),
            renewal_reminder_date=calculate_renewal_reminder_date(utc_today + timedelta(days=15)),
        )

        summary = await run_asset_expiry_reminders(db, now=local_now)

        assert summary["sent"] == 1
        assert send_reminder.await_args.kwargs["days_left"] == 15
        db.refresh(asset)
        assert asset.last_reminder_sent_at == datetime(2026, 2, 28, 20, 30)
        assert asset.last_reminder_sent_at.tzinfo is None

        later_same_utc_day = datetime(2026, 2, 28, 23, 0, tzinfo=timezone.utc)
        summary = await run_asset_expiry_reminders(db, now=later_same_utc_day)

        assert summary == {"checked": 1, "sent": 0, "skipped": 1, "failed": 0}
