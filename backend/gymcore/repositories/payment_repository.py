"""Payment repository for data access."""

from collections.abc import Iterable
from decimal import Decimal
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session

from gymcore.models.payment import Payment, PaymentStatus
from gymcore.schemas.payment import PaymentCreate


class PaymentRepository:
    """Repository for Payment model."""

    def __init__(self, db: Session):
        self.db = db

    def create(self, data: PaymentCreate, organization_id: UUID) -> Payment:
        payment = Payment(
            organization_id=organization_id,
            invoice_id=data.invoice_id,
            amount=data.amount,
            status=data.status.value,
            paid_at=data.paid_at,
        )
        self.db.add(payment)
        self.db.commit()
        self.db.refresh(payment)
        return payment

    def collected_by_invoice(self, invoice_ids: Iterable[UUID]) -> dict[UUID, Decimal]:
        """Sum of succeeded payments per invoice.

        Invoices without any succeeded payment are absent from the result.
        """
        ids = list(invoice_ids)
        if not ids:
            return {}
        rows = (
            self.db.query(Payment.invoice_id, func.sum(Payment.amount))
            .filter(
                Payment.invoice_id.in_(ids),
                Payment.status == PaymentStatus.SUCCEEDED.value,
            )
            .group_by(Payment.invoice_id)
            .all()
        )
        return {invoice_id: Decimal(str(total)) for invoice_id, total in rows}
