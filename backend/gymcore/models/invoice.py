import uuid
from enum import Enum

from sqlalchemy import Column, Date, DateTime, ForeignKey, Numeric, String, func
from sqlalchemy.dialects.sqlite import JSON

from gymcore.core.database import Base
from gymcore.models.shared import DEFAULT_ORGANIZATION_ID, UUIDType


class InvoiceStatus(str, Enum):
    DRAFT = "draft"
    FINALIZED = "finalized"
    PAID = "paid"
    VOIDED = "voided"


class Invoice(Base):
    __tablename__ = "invoices"

    id = Column(UUIDType, primary_key=True, default=lambda: uuid.uuid4())
    organization_id = Column(
        UUIDType,
        ForeignKey("organizations.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
        default=DEFAULT_ORGANIZATION_ID,
    )
    branch_id = Column(UUIDType, nullable=True, index=True)
    invoice_number = Column(String(50), unique=True, index=True, nullable=False)
    member_id = Column(UUIDType, ForeignKey("members.id", ondelete="RESTRICT"), nullable=True)
    source = Column(String(50), nullable=True)
    status = Column(String(20), nullable=False, default=InvoiceStatus.FINALIZED.value)
    invoice_date = Column(Date, nullable=False, index=True)

    # Amounts (stored as Decimal with 4 decimal places for precision)
    total = Column(Numeric(12, 4), nullable=False, default=0)

    # Service line items stored as JSON array
    line_items = Column(JSON, nullable=False, default=list)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
