"""IT asset domain schemas - Pydantic models for requests and responses"""

from datetime import date, datetime
from typing import Optional, Union

from pydantic import BaseModel

# Request field -> column name
ASSET_FIELD_MAP = {
    "assetType": "asset_type",
    "assetName": "asset_name",
    "categoryId": "category_id",
    "purchaseDate": "purchase_date",
    "startDate": "start_date",
    "endDate": "end_date",
    "warrantyStartDate": "warranty_start_date",
    "warrantyEndDate": "warranty_end_date",
    "renewalReminderDate": "renewal_reminder_date",
    "paymentMode": "payment_mode",
    "paymentStatus": "payment_status",
    "purchasedBy": "purchased_by",
    "paidBy": "paid_by",
    "isClientPaymentReceived": "is_client_payment_received",
    "price": "price",
    "quantity": "quantity",
    "currencyCode": "currency_code",
}

DateInput = Optional[Union[date, str]]


def to_column_data(payload: BaseModel) -> dict:
    """Only the fields the caller actually sent, keyed by column name"""
    sent = payload.model_dump(exclude_unset=True)
    return {ASSET_FIELD_MAP[key]: value for key, value in sent.items() if key in ASSET_FIELD_MAP}


class AssetCreate(BaseModel):
    """Schema for creating a new IT asset"""

    userId: str
    companyId: str
    userType: str
    assetType: str
    assetName: str
    categoryId: str
    paymentMode: str
    paymentStatus: str
    purchasedBy: str
    paidBy: str
    purchaseDate: DateInput = None
    startDate: DateInput = None
    endDate: DateInput = None
    warrantyStartDate: DateInput = None
    warrantyEndDate: DateInput = None
    renewalReminderDate: DateInput = None
    price: Optional[Union[float, str]] = None
    quantity: Optional[Union[int, str]] = None
    currencyCode: Optional[str] = None


class AssetUpdate(BaseModel):
    """Schema for a partial asset update; unset fields are left alone"""

    assetName: Optional[str] = None
    purchaseDate: DateInput = None
    startDate: DateInput = None
    endDate: DateInput = None
    warrantyStartDate: DateInput = None
    warrantyEndDate: DateInput = None
    renewalReminderDate: DateInput = None
    paymentMode: Optional[str] = None
    paymentStatus: Optional[str] = None
    purchasedBy: Optional[str] = None
    paidBy: Optional[str] = None
    price: Optional[Union[float, str]] = None
    quantity: Optional[Union[int, str]] = None
    currencyCode: Optional[str] = None
    isClientPaymentReceived: Optional[Union[bool, str]] = None


class AttachmentResponse(BaseModel):
    id: str
    attachmentPath: str
    createdAt: Optional[datetime] = None


class CategorySummary(BaseModel):
    id: str
    categoryName: str
    categoryType: str


class AssetResponse(BaseModel):
    """Schema for asset response"""

    id: str
    companyId: str
    clientId: Optional[str] = None
    employeeId: Optional[str] = None
    categoryId: str
    assetType: str
    assetName: str
    purchaseDate: Optional[date] = None
    startDate: Optional[date] = None
    endDate: Optional[date] = None
    warrantyStartDate: Optional[date] = None
    warrantyEndDate: Optional[date] = None
    renewalReminderDate: Optional[date] = None
    paymentMode: str
    paymentStatus: str
    purchasedBy: str
    paidBy: str
    isClientPaymentReceived: bool
    price: float
    quantity: Optional[int] = None
    totalAmount: Optional[float] = None
    currencyCode: str
    lastReminderSentAt: Optional[datetime] = None
    isRenewalReminderSent: bool
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None
    category: Optional[CategorySummary] = None
    attachments: list[AttachmentResponse] = []


def attachment_to_response(attachment) -> AttachmentResponse:
    return AttachmentResponse(
        id=attachment.id,
        attachmentPath=attachment.attachment_path,
        createdAt=attachment.created_at,
    )


def asset_to_response(asset) -> AssetResponse:
    category = asset.category
    return AssetResponse(
        id=asset.id,
        companyId=asset.company_id,
        clientId=asset.client_id,
        employeeId=asset.employee_id,
        categoryId=asset.category_id,
        assetType=asset.asset_type,
        assetName=asset.asset_name,
        purchaseDate=asset.purchase_date,
        startDate=asset.start_date,
        endDate=asset.end_date,
        warrantyStartDate=asset.warranty_start_date,
        warrantyEndDate=asset.warranty_end_date,
        renewalReminderDate=asset.renewal_reminder_date,
        paymentMode=asset.payment_mode,
        paymentStatus=asset.payment_status,
        purchasedBy=asset.purchased_by,
        paidBy=asset.paid_by,
        isClientPaymentReceived=asset.is_client_payment_received,
        price=float(asset.price or 0),
        quantity=asset.quantity,
        totalAmount=float(asset.total_amount) if asset.total_amount is not None else None,
        currencyCode=asset.currency_code,
        lastReminderSentAt=asset.last_reminder_sent_at,
        isRenewalReminderSent=asset.is_renewal_reminder_sent,
        createdAt=asset.created_at,
        updatedAt=asset.updated_at,
        category=(
            CategorySummary(
                id=category.id,
                categoryName=category.category_name,
                categoryType=category.category_type,
            )
            if category
            else None
        ),
        attachments=[attachment_to_response(a) for a in asset.attachments],
    )
