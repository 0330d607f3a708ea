"""IT ticket router"""

from typing import Optional

from fastapi import APIRouter, Depends, File, Query, UploadFile
from sqlalchemy.orm import Session

from ...database import get_db
from ...errors import ValidationError
from .schemas import (
    TicketCreate,
    TicketPriorityUpdate,
    TicketStatusUpdate,
    TicketUpdate,
    ticket_to_response,
    timeline_to_response,
)
from .service import TicketService

router = APIRouter(prefix="/it-management/tickets", tags=["IT Tickets"])


def get_ticket_service(db: Session = Depends(get_db)) -> TicketService:
    return TicketService(db)


@router.post("")
async def create_ticket(data: TicketCreate, service: TicketService = Depends(get_ticket_service)):
    """Raise a ticket (employees only)"""
    ticket = service.create_ticket(data)
    return {"success": True, "message": "Ticket created successfully", "data": ticket_to_response(ticket)}


@router.get("/employee/{employee_id}")
async def list_employee_tickets(employee_id: str, service: TicketService = Depends(get_ticket_service)):
    tickets = service.list_by_employee(employee_id)
    return {"success": True, "data": [ticket_to_response(t) for t in tickets]}


@router.get("/company/{company_id}")
async def list_company_tickets(company_id: str, service: TicketService = Depends(get_ticket_service)):
    tickets = service.list_by_company(company_id)
    return {"success": True, "data": [ticket_to_response(t) for t in tickets]}


@router.get("/{ticket_id}")
async def get_ticket(
    ticket_id: str,
    companyId: Optional[str] = Query(None),
    service: TicketService = Depends(get_ticket_service),
):
    if not companyId:
        raise ValidationError("companyId is required")
    return {"success": True, "data": ticket_to_response(service.get_ticket(ticket_id, companyId))}


@router.get("/{ticket_id}/timeline")
async def get_ticket_timeline(
    ticket_id: str,
    companyId: Optional[str] = Query(None),
    service: TicketService = Depends(get_ticket_service),
):
    """Status history, newest first"""
    if not companyId:
        raise ValidationError("companyId is required")
    entries = service.get_timeline(ticket_id, companyId)
    return {"success": True, "data": [timeline_to_response(e) for e in entries]}


@router.patch("/{ticket_id}/employee/{employee_id}")
async def update_ticket_by_employee(
    ticket_id: str,
    employee_id: str,
    data: TicketUpdate,
    service: TicketService = Depends(get_ticket_service),
):
    ticket = service.update_by_employee(ticket_id, employee_id, data)
    return {"success": True, "message": "Ticket updated successfully", "data": ticket_to_response(ticket)}


@router.patch("/{ticket_id}/{employee_id}/{company_id}/status")
async def update_ticket_status(
    ticket_id: str,
    employee_id: str,
    company_id: str,
    data: TicketStatusUpdate,
    service: TicketService = Depends(get_ticket_service),
):
    """Change status; employee_id is the acting employee recorded on the timeline"""
    ticket = service.update_status(ticket_id, employee_id, company_id, data.status)
    return {"success": True, "message": "Ticket status updated", "data": ticket_to_response(ticket)}


@router.patch("/{ticket_id}/{company_id}/priority")
async def update_ticket_priority(
    ticket_id: str,
    company_id: str,
    data: TicketPriorityUpdate,
    service: TicketService = Depends(get_ticket_service),
):
    ticket = service.update_priority(ticket_id, company_id, data.priority)
    return {"success": True, "message": "Ticket priority updated", "data": ticket_to_response(ticket)}


@router.delete("/{ticket_id}/{company_id}")
async def delete_ticket(
    ticket_id: str,
    company_id: str,
    service: TicketService = Depends(get_ticket_service),
):
    ticket = service.delete_ticket(ticket_id, company_id)
    return {"success": True, "message": "Ticket deleted successfully", "id": ticket.id}


# ============================================================================
# ATTACHMENTS
# ============================================================================


@router.post("/{ticket_id}/{employee_id}/{company_id}/attachments")
async def upload_ticket_attachments(
    ticket_id: str,
    employee_id: str,
    company_id: str,
    attachments: list[UploadFile] = File(...),
    service: TicketService = Depends(get_ticket_service),
):
    """Attach files to the employee's own ticket"""
    ticket = await service.add_attachments(ticket_id, employee_id, company_id, attachments)
    return {
        "success": True,
        "message": "Attachments uploaded successfully",
        "data": ticket_to_response(ticket),
    }


@router.delete("/{ticket_id}/{employee_id}/{company_id}/attachments/{attachment_id}")
async def remove_ticket_attachment(
    ticket_id: str,
    employee_id: str,
    company_id: str,
    attachment_id: str,
    service: TicketService = Depends(get_ticket_service),
):
    removed_id = service.remove_attachment(ticket_id, employee_id, company_id, attachment_id)
    return {"success": True, "message": "Attachment removed successfully", "result": {"id": removed_id}}
