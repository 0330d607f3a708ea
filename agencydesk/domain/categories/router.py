"""Item category router"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...database import get_db
from ...errors import ValidationError
from .schemas import CategoryCreate, CategoryUpdate, category_to_response
from .service import CategoryService

router = APIRouter(prefix="/item-categories", tags=["Item Categories"])


def get_category_service(db: Session = Depends(get_db)) -> CategoryService:
    return CategoryService(db)


@router.post("")
async def create_category(data: CategoryCreate, service: CategoryService = Depends(get_category_service)):
    category = service.create_category(data)
    return {"success": True, "message": "Category created successfully", "data": category_to_response(category)}


@router.get("")
async def list_categories(
    companyId: Optional[str] = Query(None),
    service: CategoryService = Depends(get_category_service),
):
    """Active categories of a company, by name"""
    if not companyId:
        raise ValidationError("companyId is required")
    categories = service.list_active_categories(companyId)
    return {"success": True, "data": [category_to_response(c) for c in categories]}


@router.get("/{category_id}")
async def get_category(
    category_id: str,
    companyId: Optional[str] = Query(None),
    service: CategoryService = Depends(get_category_service),
):
    if not companyId:
        raise ValidationError("companyId is required")
    return {"success": True, "data": category_to_response(service.get_category(category_id, companyId))}


@router.patch("/{category_id}/{company_id}")
async def update_category(
    category_id: str,
    company_id: str,
    data: CategoryUpdate,
    service: CategoryService = Depends(get_category_service),
):
    category = service.update_category(category_id, company_id, data)
    return {"success": True, "message": "Category updated successfully", "data": category_to_response(category)}


@router.patch("/{category_id}/{company_id}/deactivate")
async def deactivate_category(
    category_id: str,
    company_id: str,
    service: CategoryService = Depends(get_category_service),
):
    category = service.deactivate_category(category_id, company_id)
    return {"success": True, "message": "Category deactivated", "data": category_to_response(category)}


@router.delete("/{category_id}/{company_id}")
async def delete_category(
    category_id: str,
    company_id: str,
    service: CategoryService = Depends(get_category_service),
):
    service.delete_category(category_id, company_id)
    return {"success": True, "message": "Category deleted successfully", "id": category_id}
