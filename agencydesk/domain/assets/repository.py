"""IT asset repository - Database operations for assets and attachments"""

from datetime import date
from typing import Optional

from sqlalchemy.orm import Session, joinedload

from ...models import Client, Company, Employee, ItemCategory, User
from ...models_it import ItAsset, ItAssetAttachment


class AssetRepository:
    """Repository for IT asset database operations. Callers own the transaction."""

    @staticmethod
    def get_asset(db: Session, asset_id: str, company_id: str) -> Optional[ItAsset]:
        return (
            db.query(ItAsset)
            .options(joinedload(ItAsset.category), joinedload(ItAsset.attachments))
            .filter(ItAsset.id == asset_id, ItAsset.company_id == company_id, ItAsset.is_deleted.is_(False))
            .first()
        )

    @staticmethod
    def list_assets(
        db: Session,
        company_id: str,
        client_id: Optional[str] = None,
        asset_type: Optional[str] = None,
        category_id: Optional[str] = None,
    ) -> list[ItAsset]:
        query = (
            db.query(ItAsset)
            .options(joinedload(ItAsset.category), joinedload(ItAsset.attachments))
            .filter(ItAsset.company_id == company_id, ItAsset.is_deleted.is_(False))
        )

        if client_id:
            query = query.filter(ItAsset.client_id == client_id)
        if category_id:
            query = query.filter(ItAsset.category_id == category_id)
        if asset_type:
            query = query.filter(ItAsset.asset_type == asset_type)

        return query.order_by(ItAsset.created_at.desc()).all()

    @staticmethod
    def get_assets_due_for_reminder(db: Session, today: date) -> list[ItAsset]:
        """Assets whose renewal reminder date has arrived"""
        return (
            db.query(ItAsset)
            .filter(
                ItAsset.is_deleted.is_(False),
                ItAsset.renewal_reminder_date.isnot(None),
                ItAsset.renewal_reminder_date <= today,
            )
            .all()
        )

    @staticmethod
    def create_asset(db: Session, company_id: str, **asset_data) -> ItAsset:
        asset = ItAsset(company_id=company_id, **asset_data)
        db.add(asset)
        db.flush()
        return asset

    @staticmethod
    def update_asset(db: Session, asset: ItAsset, **changes) -> ItAsset:
        for key, value in changes.items():
            setattr(asset, key, value)
        db.flush()
        return asset

    @staticmethod
    def soft_delete_asset(db: Session, asset: ItAsset) -> None:
        asset.is_deleted = True
        db.flush()

    # Attachments
    @staticmethod
    def add_attachments(db: Session, asset: ItAsset, keys: list[str]) -> list[ItAssetAttachment]:
        attachments = [ItAssetAttachment(it_asset_id=asset.id, attachment_path=key) for key in keys]
        db.add_all(attachments)
        db.flush()
        return attachments

    @staticmethod
    def get_attachment(db: Session, asset_id: str, attachment_id: str) -> Optional[ItAssetAttachment]:
        return (
            db.query(ItAssetAttachment)
            .filter(ItAssetAttachment.id == attachment_id, ItAssetAttachment.it_asset_id == asset_id)
            .first()
        )

    @staticmethod
    def delete_attachment(db: Session, attachment: ItAssetAttachment) -> None:
        db.delete(attachment)
        db.flush()

    # Lookups used by create-time checks and reminders
    @staticmethod
    def get_active_category(db: Session, category_id: str, company_id: str) -> Optional[ItemCategory]:
        return (
            db.query(ItemCategory)
            .filter(
                ItemCategory.id == category_id,
                ItemCategory.company_id == company_id,
                ItemCategory.is_active.is_(True),
                ItemCategory.is_deleted.is_(False),
            )
            .first()
        )

    @staticmethod
    def get_client_for_user(db: Session, user_id: str, company_id: str) -> Optional[Client]:
        return (
            db.query(Client)
            .filter(Client.user_id == user_id, Client.company_id == company_id, Client.is_deleted.is_(False))
            .first()
        )

    @staticmethod
    def get_employee_for_user(db: Session, user_id: str, company_id: str) -> Optional[Employee]:
        return (
            db.query(Employee)
            .filter(
                Employee.user_id == user_id,
                Employee.company_id == company_id,
                Employee.is_deleted.is_(False),
            )
            .first()
        )

    @staticmethod
    def get_company_user(db: Session, user_id: str, company_id: str) -> Optional[User]:
        return (
            db.query(User)
            .filter(User.id == user_id, User.company_id == company_id, User.is_deleted.is_(False))
            .first()
        )

    @staticmethod
    def get_client(db: Session, client_id: str) -> Optional[Client]:
        return db.query(Client).filter(Client.id == client_id).first()

    @staticmethod
    def get_company(db: Session, company_id: str) -> Optional[Company]:
        return db.query(Company).filter(Company.id == company_id).first()
