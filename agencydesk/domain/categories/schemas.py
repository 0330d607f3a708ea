"""Item category schemas"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class CategoryCreate(BaseModel):
    companyId: str
    categoryName: str
    categoryType: str


class CategoryUpdate(BaseModel):
    categoryName: Optional[str] = None
    isActive: Optional[bool] = None


class CategoryResponse(BaseModel):
    id: str
    companyId: str
    categoryName: str
    categoryType: str
    isActive: bool
    createdAt: Optional[datetime] = None


def category_to_response(category) -> CategoryResponse:
    return CategoryResponse(
        id=category.id,
        companyId=category.company_id,
        categoryName=category.category_name,
        categoryType=category.category_type,
        isActive=category.is_active,
        createdAt=category.created_at,
    )
