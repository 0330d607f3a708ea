"""Tests for the IT asset lifecycle rules."""

from datetime import date, datetime
from decimal import Decimal
from types import SimpleNamespace

import pytest

from agencydesk.domain.assets import rules
from agencydesk.errors import ValidationError


def product_payload(**overrides) -> dict:
    data = {
        "asset_type": "Product",
        "asset_name": "MacBook Pro",
        "category_id": "cat-1",
        "payment_mode": "Card",
        "payment_status": "Paid",
        "purchased_by": "Company",
        "paid_by": "Company",
        "purchase_date": "2025-01-01",
        "start_date": "2025-01-05",
        "end_date": "2027-01-05",
        "warranty_start_date": "2025-01-05",
        "warranty_end_date": "2026-01-05",
        "price": 10,
        "quantity": 3,
    }
    data.update(overrides)
    return data


def service_payload(**overrides) -> dict:
    data = {
        "asset_type": "Service",
        "asset_name": "Cloud hosting",
        "category_id": "cat-2",
        "payment_mode": "UPI",
        "payment_status": "Pending",
        "purchased_by": "Company",
        "paid_by": "Company",
        "start_date": "2025-01-01",
        "end_date": "2026-01-01",
        "price": 50,
    }
    data.update(overrides)
    return data


def stored_product(**overrides) -> SimpleNamespace:
    values = {
        "asset_type": "Product",
        "client_id": None,
        "purchased_by": "Company",
        "paid_by": "Company",
        "purchase_date": date(2025, 1, 1),
        "start_date": date(2025, 1, 5),
        "end_date": date(2027, 1, 5),
        "warranty_start_date": date(2025, 1, 5),
        "warranty_end_date": date(2026, 1, 5),
        "renewal_reminder_date": date(2025, 12, 6),
        "price": Decimal("10.00"),
        "quantity": 3,
        "last_reminder_sent_at": datetime(2025, 12, 6, 0, 30),
        "is_renewal_reminder_sent": True,
    }
    values.update(overrides)
    return SimpleNamespace(**values)


def stored_service(**overrides) -> SimpleNamespace:
    values = {
        "asset_type": "Service",
        "client_id": None,
        "purchased_by": "Company",
        "paid_by": "Company",
        "purchase_date": None,
        "start_date": date(2025, 1, 1),
        "end_date": date(2026, 1, 1),
        "warranty_start_date": None,
        "warranty_end_date": None,
        "renewal_reminder_date": date(2025, 12, 2),
        "price": Decimal("50.00"),
        "quantity": 1,
        "last_reminder_sent_at": datetime(2025, 12, 2, 0, 30),
        "is_renewal_reminder_sent": True,
    }
    values.update(overrides)
    return SimpleNamespace(**values)


class TestDateValidation:
    """Temporal consistency of create and update payloads."""

    def test_service_requires_start_and_end(self):
        with pytest.raises(ValidationError, match="required for service assets"):
            rules.validate_asset_dates(service_payload(start_date=None))
        with pytest.raises(ValidationError, match="required for service assets"):
            rules.validate_asset_dates(service_payload(end_date=""))

    def test_product_requires_all_lifecycle_dates(self):
        with pytest.raises(ValidationError, match="required for product assets"):
            rules.validate_asset_dates(product_payload(warranty_start_date=None))

    def test_purchase_after_start_rejected(self):
        with pytest.raises(ValidationError, match="Purchase date cannot be after start date"):
            rules.validate_asset_dates(product_payload(purchase_date="2025-02-01"))

    def test_start_after_end_rejected(self):
        with pytest.raises(ValidationError, match="Start date cannot be after end date"):
            rules.validate_asset_dates(service_payload(start_date="2026-06-01"))

    def test_warranty_start_after_warranty_end_rejected(self):
        with pytest.raises(ValidationError, match="Warranty start date cannot be after"):
            rules.validate_asset_dates(product_payload(warranty_start_date="2026-02-01"))

    def test_reminder_must_precede_warranty_end(self):
        with pytest.raises(ValidationError, match="Renewal reminder date must be before"):
            rules.validate_asset_dates(product_payload(renewal_reminder_date="2026-01-05"))

    def test_warranty_end_cannot_exceed_end_date_on_create(self):
        with pytest.raises(ValidationError, match="cannot exceed asset end date"):
            rules.validate_asset_dates(product_payload(warranty_end_date="2027-06-01"))

    def test_unparseable_date_names_the_field(self):
        with pytest.raises(ValidationError, match="Invalid startDate"):
            rules.validate_asset_dates(service_payload(start_date="not-a-date"))

    def test_datetime_strings_are_reduced_to_dates(self):
        assert rules.parse_date("2025-03-04T10:00:00Z", "start_date") == date(2025, 3, 4)


class TestPrepareCreate:
    """Derived values on create."""

    def test_product_total_is_price_times_quantity(self):
        values = rules.prepare_asset_for_create(product_payload(price=10, quantity=3))
        assert values["total_amount"] == Decimal("30")
        assert values["quantity"] == 3

    def test_service_total_is_price(self):
        values = rules.prepare_asset_for_create(service_payload(price=50))
        assert values["total_amount"] == Decimal("50")
        assert values["quantity"] == 1

    def test_product_reminder_from_warranty_end(self):
        values = rules.prepare_asset_for_create(product_payload())
        assert values["renewal_reminder_date"] == date(2025, 12, 6)

    def test_service_reminder_from_end_date(self):
        values = rules.prepare_asset_for_create(service_payload())
        assert values["renewal_reminder_date"] == date(2025, 12, 2)

    def test_supplied_reminder_is_not_stored(self):
        values = rules.prepare_asset_for_create(product_payload(renewal_reminder_date="2025-06-01"))
        assert values["renewal_reminder_date"] == date(2025, 12, 6)

    def test_service_clears_product_only_dates(self):
        values = rules.prepare_asset_for_create(
            service_payload(purchase_date="2025-01-01", warranty_end_date="2025-06-01")
        )
        assert values["purchase_date"] is None
        assert values["warranty_start_date"] is None
        assert values["warranty_end_date"] is None

    def test_product_requires_positive_quantity(self):
        with pytest.raises(ValidationError, match="Quantity is required"):
            rules.prepare_asset_for_create(product_payload(quantity=0))

    @pytest.mark.parametrize("price", [-1, "abc"])
    def test_invalid_price_rejected(self, price):
        with pytest.raises(ValidationError, match="Price must be a valid positive number"):
            rules.prepare_asset_for_create(service_payload(price=price))

    def test_currency_defaults_and_normalises(self):
        assert rules.prepare_asset_for_create(service_payload())["currency_code"] == "INR"
        assert rules.prepare_asset_for_create(service_payload(currency_code="usd"))["currency_code"] == "USD"
        with pytest.raises(ValidationError, match="Invalid currency code"):
            rules.prepare_asset_for_create(service_payload(currency_code="US"))

    def test_blank_name_rejected(self):
        with pytest.raises(ValidationError, match="Asset name is required"):
            rules.prepare_asset_for_create(service_payload(asset_name="   "))

    @pytest.mark.parametrize(
        "field,value,label",
        [
            ("asset_type", "Hardware", "assetType"),
            ("payment_mode", "Crypto", "paymentMode"),
            ("payment_status", "Overdue", "paymentStatus"),
            ("purchased_by", "Vendor", "purchasedBy"),
            ("paid_by", "Vendor", "paidBy"),
        ],
    )
    def test_enum_allow_lists(self, field, value, label):
        with pytest.raises(ValidationError, match=f"Invalid {label}"):
            rules.prepare_asset_for_create(service_payload(**{field: value}))


class TestPrepareUpdate:
    """Partial updates merged over the stored asset."""

    def test_empty_payload_rejected(self):
        with pytest.raises(ValidationError, match="At least one field is required"):
            rules.prepare_asset_update(stored_product(), {})

    def test_warranty_extension_resets_reminder_state(self):
        changes = rules.prepare_asset_update(stored_product(), {"warranty_end_date": "2026-06-30"})
        assert changes["warranty_end_date"] == date(2026, 6, 30)
        assert changes["renewal_reminder_date"] == date(2026, 5, 31)
        assert changes["last_reminder_sent_at"] is None
        assert changes["is_renewal_reminder_sent"] is False

    def test_warranty_only_extension_may_pass_end_date(self):
        changes = rules.prepare_asset_update(stored_product(), {"warranty_end_date": "2027-06-01"})
        assert changes["warranty_end_date"] == date(2027, 6, 1)

    def test_shortened_warranty_keeps_reminder_state(self):
        changes = rules.prepare_asset_update(stored_product(), {"warranty_end_date": "2025-12-01"})
        assert changes["renewal_reminder_date"] == date(2025, 11, 1)
        assert "last_reminder_sent_at" not in changes
        assert "is_renewal_reminder_sent" not in changes

    def test_service_end_extension_resets_reminder_state(self):
        changes = rules.prepare_asset_update(stored_service(), {"end_date": "2026-06-01"})
        assert changes["renewal_reminder_date"] == date(2026, 5, 2)
        assert changes["last_reminder_sent_at"] is None
        assert changes["is_renewal_reminder_sent"] is False

    def test_product_start_date_is_not_updatable(self):
        changes = rules.prepare_asset_update(stored_product(), {"start_date": "2030-01-01"})
        assert "start_date" not in changes

    def test_service_ignores_warranty_dates(self):
        changes = rules.prepare_asset_update(stored_service(), {"warranty_end_date": "2030-01-01"})
        assert "warranty_end_date" not in changes
        assert "renewal_reminder_date" not in changes

    def test_clearing_required_date_rejected(self):
        with pytest.raises(ValidationError, match="required for service assets"):
            rules.prepare_asset_update(stored_service(), {"end_date": None})

    def test_supplied_reminder_after_new_warranty_end_rejected(self):
        with pytest.raises(ValidationError, match="Renewal reminder date must be before"):
            rules.prepare_asset_update(
                stored_product(),
                {"warranty_end_date": "2026-03-01", "renewal_reminder_date": "2026-04-01"},
            )

    def test_price_change_recomputes_total(self):
        changes = rules.prepare_asset_update(stored_product(), {"price": "12.50"})
        assert changes["total_amount"] == Decimal("37.50")
        assert changes["quantity"] == 3

    def test_service_quantity_stays_one(self):
        changes = rules.prepare_asset_update(stored_service(), {"price": 80, "quantity": 5})
        assert changes["quantity"] == 1
        assert changes["total_amount"] == Decimal("80")


class TestClientPaymentToggle:
    """isClientPaymentReceived drives paymentStatus."""

    def client_paid_asset(self, **overrides):
        values = {"client_id": "client-1", "purchased_by": "Company", "paid_by": "Client"}
        values.update(overrides)
        return stored_product(**values)

    def test_received_sets_paid(self):
        changes = rules.prepare_asset_update(self.client_paid_asset(), {"is_client_payment_received": True})
        assert changes["is_client_payment_received"] is True
        assert changes["payment_status"] == "Paid"

    def test_string_false_sets_pending(self):
        changes = rules.prepare_asset_update(
            self.client_paid_asset(), {"is_client_payment_received": "false"}
        )
        assert changes["is_client_payment_received"] is False
        assert changes["payment_status"] == "Pending"

    def test_paid_by_company_rejected(self):
        with pytest.raises(ValidationError, match="purchasedBy is Company and paidBy is Client"):
            rules.prepare_asset_update(
                self.client_paid_asset(paid_by="Company"), {"is_client_payment_received": True}
            )

    def test_requires_client_asset(self):
        with pytest.raises(ValidationError, match="only be updated for client assets"):
            rules.prepare_asset_update(
                self.client_paid_asset(client_id=None), {"is_client_payment_received": True}
            )

    def test_garbage_value_rejected(self):
        with pytest.raises(ValidationError):
            rules.prepare_asset_update(self.client_paid_asset(), {"is_client_payment_received": "yes"})
