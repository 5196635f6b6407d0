"""Payment model for tracking invoice collections."""

from enum import Enum

from sqlalchemy import Column, DateTime, ForeignKey, Numeric, String, func

from gymcore.core.database import Base
from gymcore.models.shared import DEFAULT_ORGANIZATION_ID, UUIDType, generate_uuid


class PaymentStatus(str, Enum):
    """Payment status enum."""

    PENDING = "pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    REFUNDED = "refunded"


class Payment(Base):
    """Payment model - one collection recorded against an invoice."""

    __tablename__ = "payments"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    organization_id = Column(
        UUIDType,
        ForeignKey("organizations.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
        default=DEFAULT_ORGANIZATION_ID,
    )
    invoice_id = Column(
        UUIDType, ForeignKey("invoices.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    amount = Column(Numeric(12, 4), nullable=False)
    status = Column(String(20), nullable=False, default=PaymentStatus.SUCCEEDED.value)
    paid_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
