"""IT asset router - FastAPI endpoints for asset operations"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Query, UploadFile
from sqlalchemy.orm import Session

from ...database import get_db
from ...errors import ValidationError
from .schemas import AssetCreate, AssetUpdate, asset_to_response
from .service import AssetService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/it-management/assets", tags=["IT Assets"])


def get_asset_service(db: Session = Depends(get_db)) -> AssetService:
    """Dependency injection for AssetService"""
    return AssetService(db)


# ============================================================================
# CORE CRUD OPERATIONS
# ============================================================================


@router.post("")
async def create_asset(
    data: AssetCreate,
    service: AssetService = Depends(get_asset_service),
):
    """Create a Product or Service asset"""
    asset = service.create_asset(data)
    return {
        "success": True,
        "message": "Asset created successfully",
        "data": asset_to_response(asset),
    }


@router.get("")
async def list_assets(
    companyId: Optional[str] = Query(None),
    clientId: Optional[str] = Query(None),
    assetType: Optional[str] = Query(None),
    categoryId: Optional[str] = Query(None),
    service: AssetService = Depends(get_asset_service),
):
    """List a company's assets, optionally filtered by client, type or category"""
    if not companyId:
        raise ValidationError("companyId is required")
    assets = service.list_assets(companyId, clientId, assetType, categoryId)
    return {"success": True, "data": [asset_to_response(a) for a in assets]}


@router.post("/reminders/run")
async def run_reminders_now(db: Session = Depends(get_db)):
    """Run the expiry reminder sweep immediately (operator trigger)"""
    from ...services.asset_reminders import run_asset_expiry_reminders

    logger.info("📣 Asset expiry reminder sweep triggered manually")
    summary = await run_asset_expiry_reminders(db)
    return {"success": True, "message": "Asset expiry reminder executed", "data": summary}


@router.get("/{asset_id}")
async def get_asset(
    asset_id: str,
    companyId: Optional[str] = Query(None),
    service: AssetService = Depends(get_asset_service),
):
    """Get an asset with its category and attachments"""
    if not companyId:
        raise ValidationError("companyId is required")
    asset = service.get_asset(asset_id, companyId)
    return {"success": True, "data": asset_to_response(asset)}


@router.patch("/{asset_id}/{company_id}")
async def update_asset(
    asset_id: str,
    company_id: str,
    data: AssetUpdate,
    service: AssetService = Depends(get_asset_service),
):
    """Partially update an asset; derived fields are recalculated"""
    asset = service.update_asset(asset_id, company_id, data)
    return {
        "success": True,
        "message": "Asset updated successfully",
        "data": asset_to_response(asset),
    }


@router.delete("/{asset_id}/{company_id}")
async def delete_asset(
    asset_id: str,
    company_id: str,
    service: AssetService = Depends(get_asset_service),
):
    """Soft delete an asset"""
    asset = service.delete_asset(asset_id, company_id)
    return {"success": True, "message": "Asset deleted successfully", "id": asset.id}


# ============================================================================
# ATTACHMENTS
# ============================================================================


@router.post("/{asset_id}/{company_id}/attachments")
async def upload_attachments(
    asset_id: str,
    company_id: str,
    attachments: list[UploadFile] = File(...),
    service: AssetService = Depends(get_asset_service),
):
    """Attach one or more files to an asset"""
    asset = await service.add_attachments(asset_id, company_id, attachments)
    return {
        "success": True,
        "message": "Attachments uploaded successfully",
        "data": asset_to_response(asset),
    }


@router.delete("/{asset_id}/{company_id}/attachments/{attachment_id}")
async def remove_attachment(
    asset_id: str,
    company_id: str,
    attachment_id: str,
    service: AssetService = Depends(get_asset_service),
):
    """Remove an attachment and its stored file"""
    removed_id = service.remove_attachment(asset_id, company_id, attachment_id)
    return {"success": True, "message": "Attachment removed successfully", "result": {"id": removed_id}}


@router.get("/{asset_id}/{company_id}/attachments/{attachment_id}/url")
async def get_attachment_url(
    asset_id: str,
    company_id: str,
    attachment_id: str,
    service: AssetService = Depends(get_asset_service),
):
    """Short-lived download link for an attachment"""
    url = service.get_attachment_url(asset_id, company_id, attachment_id)
    return {"success": True, "url": url}


__all__ = [
    "router",
    "create_asset",
    "list_assets",
    "get_asset",
    "update_asset",
    "delete_asset",
    "upload_attachments",
    "remove_attachment",
    "get_attachment_url",
    "run_reminders_now",
]
