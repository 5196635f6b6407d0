"""Service for freezing a billed service line: extends its expiry within the member's allowance."""

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from uuid import UUID

from sqlalchemy.orm import Session

from gymcore.core.config import settings
from gymcore.core.errors import NotFoundError, ValidationError
from gymcore.repositories.invoice_repository import InvoiceRepository
from gymcore.repositories.member_repository import MemberRepository

logger = logging.getLogger(__name__)


@dataclass
class ItemFreezeResult:
    """Result of freezing one invoice line."""

    invoice_id: UUID
    item_index: int
    freeze_days: int
    original_expiry_date: date
    new_expiry_date: date
    total_freeze_days_used: int | None


def freeze_days_for(
    freeze_days: int | None,
    start_date: date | None,
    end_date: date | None,
    max_days: int,
) -> int:
    """Resolve the number of freeze days from a count or an inclusive date range."""
    days = freeze_days
    if start_date is not None and end_date is not None:
        if start_date >= end_date:
            raise ValidationError("End date must be after start date")
        days = (end_date - start_date).days + 1
    if not days or days <= 0 or days > max_days:
        raise ValidationError(f"Freeze days must be between 1 and {max_days}")
    return days


class InvoiceItemFreezeService:
    """Freeze-with-extension applied to a single billed service line."""

    def __init__(self, db: Session, max_freeze_days: int | None = None):
        self.db = db
        self.invoice_repo = InvoiceRepository(db)
        self.member_repo = MemberRepository(db)
        self.max_freeze_days = max_freeze_days or settings.MAX_ITEM_FREEZE_DAYS

    def freeze_item(
        self,
        organization_id: UUID,
        invoice_id: UUID,
        item_index: int,
        freeze_days: int | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
        reason: str | None = None,
    ) -> ItemFreezeResult:
        """Push the expiry of one invoice line out by the freeze length.

        The days count against the member's lifetime freeze allowance, so a
        member can never be credited more than ``max_freeze_days`` in total.
        """
        days = freeze_days_for(freeze_days, start_date, end_date, self.max_freeze_days)

        invoice = self.invoice_repo.get_by_id(invoice_id, organization_id)
        if not invoice:
            raise NotFoundError(f"Invoice {invoice_id} not found")

        items = self.invoice_repo.parse_line_items(invoice)
        if item_index < 0 or item_index >= len(items):
            raise ValidationError("Invalid item index")
        item = items[item_index]
        if item.expiry_date is None:
            raise ValidationError("Item does not have an expiry date")

        member = None
        if invoice.member_id is not None:
            member = self.member_repo.get_by_id(invoice.member_id, organization_id)  # type: ignore[arg-type]
        if member is not None:
            remaining = self.max_freeze_days - int(member.total_freeze_days_used or 0)
            if days > remaining:
                raise ValidationError(
                    f"Cannot freeze. The selected period ({days} days) exceeds "
                    f"remaining freeze days ({remaining} days)."
                )

        original_expiry = item.expiry_date
        item.expiry_date = original_expiry + timedelta(days=days)
        if member is not None:
            member.total_freeze_days_used = int(member.total_freeze_days_used or 0) + days  # type: ignore[assignment]
        self.invoice_repo.update_line_items(invoice, items)

        logger.info(
            "Froze item %d of invoice %s for %d days (%s): expiry %s -> %s",
            item_index,
            invoice.id,
            days,
            reason or "no reason given",
            original_expiry,
            item.expiry_date,
        )
        return ItemFreezeResult(
            invoice_id=invoice.id,  # type: ignore[arg-type]
            item_index=item_index,
            freeze_days=days,
            original_expiry_date=original_expiry,
            new_expiry_date=item.expiry_date,
            total_freeze_days_used=(
                member.total_freeze_days_used if member is not None else None  # type: ignore[arg-type]
            ),
        )
