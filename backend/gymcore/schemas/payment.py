from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field

from gymcore.models.payment import PaymentStatus


class PaymentCreate(BaseModel):
    invoice_id: UUID
    amount: Decimal = Field(..., gt=0)
    status: PaymentStatus = PaymentStatus.SUCCEEDED
    paid_at: datetime | None = None
