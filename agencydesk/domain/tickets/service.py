"""IT ticket service - employee support requests"""

import logging
from datetime import datetime
from typing import Optional

from dateutil.parser import isoparse
from fastapi import HTTPException, UploadFile
from sqlalchemy.orm import Session

from ... import storage
from ...config import MAX_ATTACHMENT_SIZE, MAX_ATTACHMENTS_PER_UPLOAD
from ...errors import UnauthorizedError, ValidationError
from ...models import Employee
from ...models_it import ItTicket, ItTicketAttachment, ItTicketTimeline
from ..assets.rules import validate_enum
from .schemas import TicketCreate, TicketUpdate

logger = logging.getLogger(__name__)

PRIORITIES = ["Low", "Medium", "High"]
STATUSES = ["Pending", "In Progress", "Hold", "Completed", "Rejected"]


def parse_preferred_date(value: Optional[str]) -> Optional[datetime]:
    if value is None:
        return None
    if not str(value).strip():
        raise ValidationError("preferredDate cannot be empty")
    try:
        return isoparse(str(value).strip())
    except (ValueError, OverflowError) as e:
        raise ValidationError("Invalid preferredDate") from e


def require_choice(value: Optional[str], valid_values: list[str], field_name: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    validate_enum(value, valid_values, field_name)
    return value


class TicketService:
    """Service layer for IT tickets"""

    def __init__(self, db: Session):
        self.db = db

    def _query(self):
        return self.db.query(ItTicket).filter(ItTicket.is_deleted.is_(False))

    def _find_employee(self, company_id: str, user_id: str = None, employee_id: str = None) -> Employee:
        query = self.db.query(Employee).filter(
            Employee.company_id == company_id, Employee.is_deleted.is_(False)
        )
        if user_id is not None:
            query = query.filter(Employee.user_id == user_id)
        if employee_id is not None:
            query = query.filter(Employee.id == employee_id)
        employee = query.first()
        if not employee:
            raise ValidationError("Employee not found.")
        return employee

    def _own_ticket(self, ticket_id: str, employee_id: str, company_id: Optional[str] = None) -> ItTicket:
        query = self._query().filter(ItTicket.id == ticket_id, ItTicket.employee_id == employee_id)
        if company_id is not None:
            query = query.filter(ItTicket.company_id == company_id)
        ticket = query.first()
        if not ticket:
            raise HTTPException(status_code=404, detail="Ticket not found")
        return ticket

    def get_ticket(self, ticket_id: str, company_id: str) -> ItTicket:
        ticket = self._query().filter(ItTicket.id == ticket_id, ItTicket.company_id == company_id).first()
        if not ticket:
            raise HTTPException(status_code=404, detail="Ticket not found")
        return ticket

    def get_timeline(self, ticket_id: str, company_id: str) -> list[ItTicketTimeline]:
        """Status history, newest first"""
        return list(self.get_ticket(ticket_id, company_id).timeline)

    def list_by_employee(self, employee_id: str) -> list[ItTicket]:
        return self._query().filter(ItTicket.employee_id == employee_id).order_by(ItTicket.created_at.desc()).all()

    def list_by_company(self, company_id: str) -> list[ItTicket]:
        return self._query().filter(ItTicket.company_id == company_id).order_by(ItTicket.created_at.desc()).all()

    def create_ticket(self, data: TicketCreate) -> ItTicket:
        if not data.subject or not data.subject.strip():
            raise ValidationError("Subject is required")
        if not data.description or not data.description.strip():
            raise ValidationError("Description is required")
        validate_enum(data.priority, PRIORITIES, "priority")

        if data.userType.lower() != "employee":
            raise UnauthorizedError("Only employees are allowed to create it tickets.")

        employee = self._find_employee(data.companyId, user_id=data.userId)

        try:
            ticket = ItTicket(
                company_id=data.companyId,
                user_id=data.userId,
                employee_id=employee.id,
                subject=data.subject.strip(),
                description=data.description.strip(),
                preferred_date=parse_preferred_date(data.preferredDate),
                priority=data.priority or "Low",
                status="Pending",
            )
            self.db.add(ticket)
            self.db.flush()
            self.db.add(ItTicketTimeline(it_ticket_id=ticket.id, employee_id=employee.id, status=ticket.status))
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(ticket)
        logger.info(f"🎫 IT ticket created: {ticket.id} by employee {employee.id}")
        return ticket

    def update_by_employee(self, ticket_id: str, employee_id: str, data: TicketUpdate) -> ItTicket:
        sent = data.model_dump(exclude_unset=True)
        try:
            ticket = self._own_ticket(ticket_id, employee_id)

            if "subject" in sent:
                if sent["subject"] is None or not str(sent["subject"]).strip():
                    raise ValidationError("Subject cannot be empty")
                ticket.subject = sent["subject"].strip()

            if "description" in sent:
                if sent["description"] is None or not str(sent["description"]).strip():
                    raise ValidationError("Description cannot be empty")
                ticket.description = sent["description"].strip()

            if "preferredDate" in sent:
                ticket.preferred_date = parse_preferred_date(sent["preferredDate"])

            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(ticket)
        return ticket

    def update_status(self, ticket_id: str, employee_id: str, company_id: str, status: Optional[str]) -> ItTicket:
        """Change the status and record who changed it on the timeline"""
        status = require_choice(status, STATUSES, "status")
        try:
            ticket = self.get_ticket(ticket_id, company_id)
            employee = self._find_employee(company_id, employee_id=employee_id)
            ticket.status = status
            self.db.add(ItTicketTimeline(it_ticket_id=ticket.id, employee_id=employee.id, status=status))
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(ticket)
        logger.info(f"✅ IT ticket {ticket_id} moved to {status} by employee {employee_id}")
        return ticket

    def update_priority(self, ticket_id: str, company_id: str, priority: Optional[str]) -> ItTicket:
        priority = require_choice(priority, PRIORITIES, "priority")
        return self._set(ticket_id, company_id, priority=priority)

    def delete_ticket(self, ticket_id: str, company_id: str) -> ItTicket:
        return self._set(ticket_id, company_id, is_deleted=True)

    def _set(self, ticket_id: str, company_id: str, **values) -> ItTicket:
        try:
            ticket = self.get_ticket(ticket_id, company_id)
            for key, value in values.items():
                setattr(ticket, key, value)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(ticket)
        logger.info(f"✅ IT ticket {ticket_id} updated: {values}")
        return ticket

    # Attachments

    async def add_attachments(
        self, ticket_id: str, employee_id: str, company_id: str, files: list[UploadFile]
    ) -> ItTicket:
        """Upload files for the employee's own ticket, one row per file"""
        if not files:
            raise ValidationError("At least one attachment is required")
        if len(files) > MAX_ATTACHMENTS_PER_UPLOAD:
            raise ValidationError(f"At most {MAX_ATTACHMENTS_PER_UPLOAD} attachments per upload")

        ticket = self._own_ticket(ticket_id, employee_id, company_id)

        uploaded_keys: list[str] = []
        try:
            for file in files:
                if not storage.is_safe_filename(file.filename):
                    raise ValidationError(f"Invalid filename: {file.filename}")
                contents = await file.read()
                if len(contents) > MAX_ATTACHMENT_SIZE:
                    raise ValidationError(
                        f"File {file.filename} exceeds {MAX_ATTACHMENT_SIZE // (1024 * 1024)}MB limit"
                    )
                key = storage.build_attachment_key(company_id, ticket_id, file.filename, folder="it-tickets")
                storage.put_object(key, contents, file.content_type or "application/octet-stream")
                uploaded_keys.append(key)

            self.db.add_all([ItTicketAttachment(it_ticket_id=ticket.id, attachment_path=key) for key in uploaded_keys])
            self.db.commit()
        except Exception:
            self.db.rollback()
            for key in uploaded_keys:
                storage.delete_object(key)
            raise

        logger.info(f"📎 Added {len(uploaded_keys)} attachment(s) to ticket {ticket_id}")
        self.db.refresh(ticket)
        return ticket

    def remove_attachment(self, ticket_id: str, employee_id: str, company_id: str, attachment_id: str) -> str:
        try:
            self._own_ticket(ticket_id, employee_id, company_id)
            attachment = (
                self.db.query(ItTicketAttachment)
                .filter(ItTicketAttachment.id == attachment_id, ItTicketAttachment.it_ticket_id == ticket_id)
                .first()
            )
            if not attachment:
                raise HTTPException(status_code=404, detail="Attachment not found")
            key = attachment.attachment_path
            self.db.delete(attachment)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        storage.delete_object(key)
        logger.info(f"✅ Attachment {attachment_id} removed from ticket {ticket_id}")
        return attachment_id
