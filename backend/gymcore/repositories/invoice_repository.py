from datetime import date
from decimal import Decimal
from typing import Any
from uuid import UUID

from sqlalchemy.orm import Session

from gymcore.models.invoice import Invoice, InvoiceStatus
from gymcore.schemas.invoice import InvoiceCreate, InvoiceLineItem


class InvoiceRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, invoice_id: UUID, organization_id: UUID | None = None) -> Invoice | None:
        query = self.db.query(Invoice).filter(Invoice.id == invoice_id)
        if organization_id is not None:
            query = query.filter(Invoice.organization_id == organization_id)
        return query.first()

    def get_for_period(
        self,
        organization_id: UUID,
        from_date: date | None = None,
        to_date: date | None = None,
        branch_id: UUID | None = None,
    ) -> list[Invoice]:
        """Non-void invoices issued within the (inclusive) date range."""
        query = self.db.query(Invoice).filter(
            Invoice.organization_id == organization_id,
            Invoice.status != InvoiceStatus.VOIDED.value,
        )
        if from_date is not None:
            query = query.filter(Invoice.invoice_date >= from_date)
        if to_date is not None:
            query = query.filter(Invoice.invoice_date <= to_date)
        if branch_id is not None:
            query = query.filter(Invoice.branch_id == branch_id)
        return query.order_by(Invoice.invoice_date.asc(), Invoice.invoice_number.asc()).all()

    def create(self, data: InvoiceCreate, organization_id: UUID) -> Invoice:
        total = data.total
        if total is None:
            total = sum((item.net_total for item in data.line_items), Decimal("0"))
        line_items_json = [item.model_dump(mode="json") for item in data.line_items]
        invoice = Invoice(
            organization_id=organization_id,
            branch_id=data.branch_id,
            invoice_number=data.invoice_number,
            member_id=data.member_id,
            source=data.source,
            status=data.status.value,
            invoice_date=data.invoice_date,
            total=total,
            line_items=line_items_json,
        )
        self.db.add(invoice)
        self.db.commit()
        self.db.refresh(invoice)
        return invoice

    @staticmethod
    def parse_line_items(invoice: Invoice) -> list[InvoiceLineItem]:
        raw: list[dict[str, Any]] = invoice.line_items or []  # type: ignore[assignment]
        return [InvoiceLineItem.model_validate(item) for item in raw]

    def update_line_items(self, invoice: Invoice, items: list[InvoiceLineItem]) -> Invoice:
        # Reassign the whole list so the JSON column is flagged dirty
        invoice.line_items = [item.model_dump(mode="json") for item in items]  # type: ignore[assignment]
        self.db.commit()
        self.db.refresh(invoice)
        return invoice
