"""
IT Management Models
Assets (products and services), support tickets, and their attachments and timeline
"""

from sqlalchemy import Boolean, Column, Date, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base
from .models import generate_uuid, utcnow


class ItAsset(Base):
    """A company- or client-owned Product or Service tracked for renewal"""

    __tablename__ = "it_assets"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    company_id = Column(String(36), ForeignKey("companies.id"), nullable=False, index=True)
    client_id = Column(String(36), ForeignKey("clients.id"), nullable=True, index=True)
    employee_id = Column(String(36), ForeignKey("employees.id"), nullable=True)
    category_id = Column(String(36), ForeignKey("item_categories.id"), nullable=False)

    asset_type = Column(String(20), nullable=False)  # Product, Service
    asset_name = Column(String(255), nullable=False)

    # Lifecycle dates
    purchase_date = Column(Date, nullable=True)
    start_date = Column(Date, nullable=True)
    end_date = Column(Date, nullable=True)
    warranty_start_date = Column(Date, nullable=True)
    warranty_end_date = Column(Date, nullable=True)
    renewal_reminder_date = Column(Date, nullable=True, index=True)  # Derived, never client-set

    # Payment
    payment_mode = Column(String(30), nullable=False)
    payment_status = Column(String(20), nullable=False)  # Paid, Pending
    purchased_by = Column(String(20), nullable=False)  # Company, Client
    paid_by = Column(String(20), nullable=False)  # Company, Client
    is_client_payment_received = Column(Boolean, default=False, nullable=False)
    price = Column(Numeric(10, 2), default=0, nullable=False)
    quantity = Column(Integer, nullable=True)
    total_amount = Column(Numeric(12, 2), nullable=True)
    currency_code = Column(String(3), default="INR", nullable=False)

    # Reminder tracking
    last_reminder_sent_at = Column(DateTime, nullable=True)
    is_renewal_reminder_sent = Column(Boolean, default=False, nullable=False)

    is_deleted = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    category = relationship("ItemCategory")
    client = relationship("Client")
    company = relationship("Company")
    attachments = relationship(
        "ItAssetAttachment", back_populates="asset", cascade="all, delete-orphan"
    )


class ItAssetAttachment(Base):
    __tablename__ = "it_asset_attachments"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    it_asset_id = Column(
        String(36), ForeignKey("it_assets.id", ondelete="CASCADE"), nullable=False, index=True
    )
    attachment_path = Column(String(500), nullable=False)  # Object storage key
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    asset = relationship("ItAsset", back_populates="attachments")


class ItTicket(Base):
    """Support ticket raised by an employee"""

    __tablename__ = "it_tickets"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    company_id = Column(String(36), ForeignKey("companies.id"), nullable=False, index=True)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False)
    employee_id = Column(String(36), ForeignKey("employees.id"), nullable=False, index=True)
    subject = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    preferred_date = Column(DateTime, nullable=True)
    priority = Column(String(20), default="Low", nullable=False)  # Low, Medium, High
    # Pending → In Progress → Hold → Completed / Rejected
    status = Column(String(20), default="Pending", nullable=False, index=True)
    is_deleted = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    employee = relationship("Employee")
    attachments = relationship(
        "ItTicketAttachment", back_populates="ticket", cascade="all, delete-orphan"
    )
    timeline = relationship(
        "ItTicketTimeline",
        back_populates="ticket",
        cascade="all, delete-orphan",
        order_by="ItTicketTimeline.created_at.desc()",
    )


class ItTicketAttachment(Base):
    __tablename__ = "it_ticket_attachments"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    it_ticket_id = Column(
        String(36), ForeignKey("it_tickets.id", ondelete="CASCADE"), nullable=False, index=True
    )
    attachment_path = Column(String(500), nullable=False)  # Object storage key
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    ticket = relationship("ItTicket", back_populates="attachments")


class ItTicketTimeline(Base):
    """One row per status a ticket passed through, with the employee who set it"""

    __tablename__ = "it_ticket_timeline"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    it_ticket_id = Column(
        String(36), ForeignKey("it_tickets.id", ondelete="CASCADE"), nullable=False, index=True
    )
    employee_id = Column(String(36), ForeignKey("employees.id"), nullable=True)
    status = Column(String(20), default="Pending", nullable=False)
    # Sub-second precision keeps same-second entries ordered
    created_at = Column(DateTime, default=utcnow, nullable=False)

    ticket = relationship("ItTicket", back_populates="timeline")
