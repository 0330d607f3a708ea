"""IT ticket schemas"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class TicketCreate(BaseModel):
    userId: str
    companyId: str
    userType: str
    subject: Optional[str] = None
    description: Optional[str] = None
    preferredDate: Optional[str] = None
    priority: Optional[str] = None


class TicketUpdate(BaseModel):
    """Fields an employee may edit on their own ticket"""

    subject: Optional[str] = None
    description: Optional[str] = None
    preferredDate: Optional[str] = None


class TicketStatusUpdate(BaseModel):
    status: Optional[str] = None


class TicketPriorityUpdate(BaseModel):
    priority: Optional[str] = None


class TicketAttachmentResponse(BaseModel):
    id: str
    attachmentPath: str
    createdAt: Optional[datetime] = None


class TimelineEntryResponse(BaseModel):
    id: str
    employeeId: Optional[str] = None
    status: str
    createdAt: datetime


class TicketResponse(BaseModel):
    id: str
    companyId: str
    userId: str
    employeeId: str
    subject: str
    description: str
    preferredDate: Optional[datetime] = None
    priority: str
    status: str
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None
    attachments: list[TicketAttachmentResponse] = []
    timeline: list[TimelineEntryResponse] = []


def timeline_to_response(entry) -> TimelineEntryResponse:
    return TimelineEntryResponse(
        id=entry.id,
        employeeId=entry.employee_id,
        status=entry.status,
        createdAt=entry.created_at,
    )


def ticket_to_response(ticket) -> TicketResponse:
    return TicketResponse(
        id=ticket.id,
        companyId=ticket.company_id,
        userId=ticket.user_id,
        employeeId=ticket.employee_id,
        subject=ticket.subject,
        description=ticket.description,
        preferredDate=ticket.preferred_date,
        priority=ticket.priority,
        status=ticket.status,
        createdAt=ticket.created_at,
        updatedAt=ticket.updated_at,
        attachments=[
            TicketAttachmentResponse(id=a.id, attachmentPath=a.attachment_path, createdAt=a.created_at)
            for a in ticket.attachments
        ],
        timeline=[timeline_to_response(entry) for entry in ticket.timeline],
    )
