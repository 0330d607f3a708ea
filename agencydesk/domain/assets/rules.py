"""
IT asset lifecycle rules

Pure validation and derivation for Product and Service assets. Nothing here
touches the database: the service layer resolves categories and owners,
then hands plain dicts (snake_case keys, only the fields the caller sent)
to these functions.
"""

from datetime import date, datetime, timedelta
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from dateutil.parser import isoparse

from ...config import ASSET_REMINDER_DAYS_BEFORE, DEFAULT_CURRENCY_CODE
from ...errors import ValidationError

PRODUCT = "Product"
SERVICE = "Service"

ASSET_TYPES = [PRODUCT, SERVICE]
PAYMENT_MODES = ["UPI", "Cash", "Card", "Cheque", "Net Banking", "RTGS", "Bank Transfer", "NEFT", "Other"]
PAYMENT_STATUSES = ["Paid", "Pending"]
PURCHASED_BY = ["Company", "Client"]
PAID_BY = ["Company", "Client"]

# Payload name used in error messages
FIELD_LABELS = {
    "purchase_date": "purchaseDate",
    "start_date": "startDate",
    "end_date": "endDate",
    "warranty_start_date": "warrantyStartDate",
    "warranty_end_date": "warrantyEndDate",
    "renewal_reminder_date": "renewalReminderDate",
}

# Dates each asset type may change after creation
UPDATABLE_DATES = {
    PRODUCT: ("purchase_date", "end_date", "warranty_start_date", "warranty_end_date"),
    SERVICE: ("start_date", "end_date"),
}

UPDATABLE_FIELDS = ("asset_name", "payment_mode", "purchased_by", "paid_by", "currency_code")


def validate_enum(value: Any, valid_values: list[str], field_name: str) -> None:
    if value and value not in valid_values:
        raise ValidationError(f"Invalid {field_name}. Must be one of: {', '.join(valid_values)}")


def validate_asset_enums(data: dict) -> None:
    validate_enum(data.get("asset_type"), ASSET_TYPES, "assetType")
    validate_enum(data.get("payment_mode"), PAYMENT_MODES, "paymentMode")
    validate_enum(data.get("payment_status"), PAYMENT_STATUSES, "paymentStatus")
    validate_enum(data.get("purchased_by"), PURCHASED_BY, "purchasedBy")
    validate_enum(data.get("paid_by"), PAID_BY, "paidBy")


def parse_date(value: Any, field: str) -> Optional[date]:
    """Parse an ISO date/datetime; empty values mean "no date" """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return isoparse(str(value).strip()).date()
    except (ValueError, OverflowError) as e:
        raise ValidationError(f"Invalid {FIELD_LABELS.get(field, field)}") from e


def calculate_renewal_reminder_date(
    expiry_date: Optional[date], days_before: int = ASSET_REMINDER_DAYS_BEFORE
) -> Optional[date]:
    if expiry_date is None:
        return None
    return expiry_date - timedelta(days=days_before)


def governing_expiry_date(asset_type: str, end_date: Optional[date], warranty_end_date: Optional[date]):
    """Products expire with their warranty, services with their service period"""
    return warranty_end_date if asset_type == PRODUCT else end_date


def governing_expiry_field(asset_type: str) -> str:
    return "warranty_end_date" if asset_type == PRODUCT else "end_date"


def validate_asset_dates(data: dict, existing: Any = None) -> None:
    """
    Check temporal consistency of the merged view (payload over stored row).

    A payload `renewal_reminder_date` is checked but never stored. When the
    payload moves the governing expiry date the stored reminder is stale and
    is left out of the check; it gets re-derived afterwards.
    """
    asset_type = data.get("asset_type") or getattr(existing, "asset_type", None)

    def merged(field: str) -> Optional[date]:
        if field in data:
            return parse_date(data[field], field)
        return getattr(existing, field, None)

    purchase_date = merged("purchase_date")
    start_date = merged("start_date")
    end_date = merged("end_date")
    warranty_start_date = merged("warranty_start_date")
    warranty_end_date = merged("warranty_end_date")

    renewal_reminder_date = parse_date(data.get("renewal_reminder_date"), "renewal_reminder_date")
    if renewal_reminder_date is None and asset_type and governing_expiry_field(asset_type) not in data:
        renewal_reminder_date = getattr(existing, "renewal_reminder_date", None)

    if asset_type == SERVICE and (not start_date or not end_date):
        raise ValidationError("Start date and End date are required for service assets.")

    if asset_type == PRODUCT and not all(
        [start_date, end_date, purchase_date, warranty_start_date, warranty_end_date]
    ):
        raise ValidationError(
            "Start date, End date, Purchase date, Warranty start date and Warranty end date "
            "are required for product assets."
        )

    if purchase_date and start_date and purchase_date > start_date:
        raise ValidationError("Purchase date cannot be after start date.")

    if start_date and end_date and start_date > end_date:
        raise ValidationError("Start date cannot be after end date.")

    if asset_type == PRODUCT:
        if warranty_start_date and warranty_end_date and warranty_start_date > warranty_end_date:
            raise ValidationError("Warranty start date cannot be after warranty end date.")

        if renewal_reminder_date and warranty_end_date and renewal_reminder_date >= warranty_end_date:
            raise ValidationError("Renewal reminder date must be before warranty end date.")

        # Warranty renewals may run past the asset end date
        is_warranty_only_update = bool(data.get("warranty_end_date")) and not data.get("end_date")
        if not is_warranty_only_update and end_date and warranty_end_date and warranty_end_date > end_date:
            raise ValidationError("Warranty end date cannot exceed asset end date.")


def parse_price(value: Any) -> Decimal:
    try:
        price = Decimal(str(value))
    except (InvalidOperation, ValueError) as e:
        raise ValidationError("Price must be a valid positive number") from e
    if not price.is_finite() or price < 0:
        raise ValidationError("Price must be a valid positive number")
    return price


def parse_quantity(value: Any) -> int:
    if value is None or value == "":
        return 0
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ValidationError("Quantity must be a whole number") from e


def calculate_total_amount(asset_type: str, price: Decimal, quantity: int) -> Decimal:
    return price if asset_type == SERVICE else price * quantity


def validate_currency_code(value: Any) -> str:
    if not isinstance(value, str) or len(value) != 3:
        raise ValidationError("Invalid currency code")
    return value.upper()


def coerce_payment_received(value: Any) -> bool:
    if value == "true":
        return True
    if value == "false":
        return False
    if not isinstance(value, bool):
        raise ValidationError("Invalid value for client payment status")
    return value


def prepare_asset_for_create(data: dict) -> dict:
    """
    Validate a create payload and return the column values to insert.
    Category and owner lookups happen in the service before this runs.
    """
    if not data.get("asset_name") or not str(data["asset_name"]).strip():
        raise ValidationError("Asset name is required")
    if not data.get("category_id"):
        raise ValidationError("Category is required")

    price = parse_price(data["price"]) if data.get("price") is not None else Decimal("0")
    validate_asset_enums(data)
    validate_asset_dates(data)

    asset_type = data["asset_type"]
    values = {
        "asset_type": asset_type,
        "asset_name": str(data["asset_name"]).strip(),
        "category_id": data["category_id"],
        "payment_mode": data.get("payment_mode"),
        "payment_status": data.get("payment_status"),
        "purchased_by": data.get("purchased_by"),
        "paid_by": data.get("paid_by"),
        "is_client_payment_received": False,
        "start_date": parse_date(data.get("start_date"), "start_date"),
        "end_date": parse_date(data.get("end_date"), "end_date"),
    }

    if asset_type == SERVICE:
        values["purchase_date"] = None
        values["warranty_start_date"] = None
        values["warranty_end_date"] = None
        quantity = 1
    else:
        values["purchase_date"] = parse_date(data.get("purchase_date"), "purchase_date")
        values["warranty_start_date"] = parse_date(data.get("warranty_start_date"), "warranty_start_date")
        values["warranty_end_date"] = parse_date(data.get("warranty_end_date"), "warranty_end_date")
        quantity = parse_quantity(data.get("quantity"))
        if quantity <= 0:
            raise ValidationError("Quantity is required for product assets.")

    values["renewal_reminder_date"] = calculate_renewal_reminder_date(
        governing_expiry_date(asset_type, values["end_date"], values["warranty_end_date"])
    )

    currency_code = data.get("currency_code")
    values["currency_code"] = validate_currency_code(currency_code) if currency_code else DEFAULT_CURRENCY_CODE
    values["price"] = price
    values["quantity"] = quantity
    values["total_amount"] = calculate_total_amount(asset_type, price, quantity)
    return values


def prepare_asset_update(asset: Any, data: dict) -> dict:
    """
    Validate a partial update against the stored asset and return the
    column changes, including re-derived totals, reminder date and flags.
    """
    if not data:
        raise ValidationError("At least one field is required to update.")

    validate_asset_enums(data)

    # Dates the asset type does not own are ignored before validation
    date_fields = UPDATABLE_DATES.get(asset.asset_type, ())
    patch = {key: value for key, value in data.items() if key not in FIELD_LABELS or key in date_fields}
    if "renewal_reminder_date" in data:
        patch["renewal_reminder_date"] = data["renewal_reminder_date"]
    patch.pop("asset_type", None)

    validate_asset_dates(patch, asset)

    changes: dict = {key: patch[key] for key in UPDATABLE_FIELDS if patch.get(key) is not None}

    if "asset_name" in changes:
        if not str(changes["asset_name"]).strip():
            raise ValidationError("Asset name is required")
        changes["asset_name"] = str(changes["asset_name"]).strip()

    if "currency_code" in changes:
        changes["currency_code"] = validate_currency_code(changes["currency_code"])

    if "is_client_payment_received" in patch:
        received = coerce_payment_received(patch["is_client_payment_received"])
        if not asset.client_id:
            raise ValidationError("Client payment status can only be updated for client assets.")
        if asset.purchased_by != "Company" or asset.paid_by != "Client":
            raise ValidationError(
                "Client payment status can only be updated when purchasedBy is Company and paidBy is Client."
            )
        changes["is_client_payment_received"] = received
        changes["payment_status"] = "Paid" if received else "Pending"

    if patch.get("price") is not None or patch.get("quantity") is not None:
        price = parse_price(patch["price"]) if patch.get("price") is not None else Decimal(asset.price or 0)
        if asset.asset_type == PRODUCT:
            quantity = (
                parse_quantity(patch["quantity"]) if patch.get("quantity") is not None else (asset.quantity or 0)
            )
            if quantity <= 0:
                raise ValidationError("Quantity is required for product assets.")
        else:
            quantity = asset.quantity or 1
        changes["price"] = price
        changes["quantity"] = quantity
        changes["total_amount"] = calculate_total_amount(asset.asset_type, price, quantity)

    for field in date_fields:
        if field in patch:
            changes[field] = parse_date(patch[field], field)

    expiry_field = governing_expiry_field(asset.asset_type)
    if expiry_field in changes:
        new_expiry = changes[expiry_field]
        old_expiry = getattr(asset, expiry_field)
        if new_expiry and (old_expiry is None or new_expiry > old_expiry):
            changes["last_reminder_sent_at"] = None
            changes["is_renewal_reminder_sent"] = False
        changes["renewal_reminder_date"] = calculate_renewal_reminder_date(new_expiry)

    return changes
