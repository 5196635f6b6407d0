from datetime import date
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field

from gymcore.models.invoice import InvoiceStatus


class InvoiceLineItem(BaseModel):
    """One billed service on an invoice with its own service period."""

    description: str
    plan_id: UUID | None = None
    amount: Decimal
    # Amount after discount and tax; the amortization base
    total: Decimal | None = None
    start_date: date | None = None
    expiry_date: date | None = None

    @property
    def net_total(self) -> Decimal:
        return self.total if self.total is not None else self.amount


class InvoiceCreate(BaseModel):
    invoice_number: str = Field(..., min_length=1, max_length=50)
    member_id: UUID | None = None
    branch_id: UUID | None = None
    source: str | None = None
    status: InvoiceStatus = InvoiceStatus.FINALIZED
    invoice_date: date
    line_items: list[InvoiceLineItem] = Field(default_factory=list)
    total: Decimal | None = None


class ItemFreezeRequest(BaseModel):
    freeze_days: int | None = Field(default=None, gt=0)
    start_date: date | None = None
    end_date: date | None = None
    reason: str | None = None


class ItemFreezeResponse(BaseModel):
    invoice_id: UUID
    item_index: int
    freeze_days: int
    original_expiry_date: date
    new_expiry_date: date
    total_freeze_days_used: int | None
