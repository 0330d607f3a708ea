"""Item category service - categories that IT assets are filed under"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...errors import ValidationError
from ...models import ItemCategory
from ..assets.rules import ASSET_TYPES, validate_enum
from .schemas import CategoryCreate, CategoryUpdate

logger = logging.getLogger(__name__)


class CategoryService:
    """Service layer for item categories"""

    def __init__(self, db: Session):
        self.db = db

    def _find(self, category_id: str, company_id: str) -> Optional[ItemCategory]:
        return (
            self.db.query(ItemCategory)
            .filter(
                ItemCategory.id == category_id,
                ItemCategory.company_id == company_id,
                ItemCategory.is_deleted.is_(False),
            )
            .first()
        )

    def get_category(self, category_id: str, company_id: str) -> ItemCategory:
        category = self._find(category_id, company_id)
        if not category:
            raise HTTPException(status_code=404, detail="Category not found")
        return category

    def list_active_categories(self, company_id: str) -> list[ItemCategory]:
        return (
            self.db.query(ItemCategory)
            .filter(
                ItemCategory.company_id == company_id,
                ItemCategory.is_active.is_(True),
                ItemCategory.is_deleted.is_(False),
            )
            .order_by(ItemCategory.category_name.asc())
            .all()
        )

    def create_category(self, data: CategoryCreate) -> ItemCategory:
        if not data.categoryName.strip():
            raise ValidationError("Category name is required")
        if not data.categoryType:
            raise ValidationError("Category type is required")
        validate_enum(data.categoryType, ASSET_TYPES, "categoryType")

        try:
            category = ItemCategory(
                company_id=data.companyId,
                category_name=data.categoryName.strip(),
                category_type=data.categoryType,
            )
            self.db.add(category)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(category)
        logger.info(f"✅ Item category created: {category.id} ({category.category_type})")
        return category

    def update_category(self, category_id: str, company_id: str, data: CategoryUpdate) -> ItemCategory:
        try:
            category = self.get_category(category_id, company_id)
            if data.categoryName is not None:
                if not data.categoryName.strip():
                    raise ValidationError("Category name cannot be empty")
                category.category_name = data.categoryName.strip()
            if data.isActive is not None:
                category.is_active = data.isActive
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(category)
        return category

    def deactivate_category(self, category_id: str, company_id: str) -> ItemCategory:
        return self.update_category(category_id, company_id, CategoryUpdate(isActive=False))

    def delete_category(self, category_id: str, company_id: str) -> None:
        try:
            category = self.get_category(category_id, company_id)
            category.is_deleted = True
            category.is_active = False
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        logger.info(f"🗑️ Item category soft-deleted: {category_id}")
