"""Revenue realization: amortized billed services rolled up by month."""

import logging
from collections import defaultdict
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from uuid import UUID

from sqlalchemy.orm import Session

from gymcore.repositories.invoice_repository import InvoiceRepository
from gymcore.repositories.payment_repository import PaymentRepository
from gymcore.services.revenue_amortization import CENT, MonthlyBucket, amortize

logger = logging.getLogger(__name__)

UNASSIGNED = "unassigned"


class RealizationMode(str, Enum):
    PAID_AMOUNT = "paid-amount"
    BASE_VALUE = "base-value"


class RealizationGroupBy(str, Enum):
    MEMBER = "member"
    BRANCH = "branch"
    SOURCE = "source"


@dataclass
class BilledLineItem:
    """A billed service flattened out of its invoice."""

    invoice_id: UUID
    item_total: Decimal
    start_date: date | None
    expiry_date: date | None
    invoice_total: Decimal | None = None
    member_id: UUID | None = None
    branch_id: UUID | None = None
    source: str | None = None
    bill_number: str | None = None
    service_name: str | None = None


@dataclass
class RealizedLine:
    """Amortization of a single line item."""

    item: BilledLineItem
    base_amount: Decimal
    monthly: dict[str, MonthlyBucket]


@dataclass
class RealizationRow:
    """Monthly revenue merged over every line item of one group."""

    key: str
    sale_amount: Decimal = Decimal("0")
    monthly: dict[str, MonthlyBucket] = field(default_factory=dict)


@dataclass
class RealizationMatrix:
    rows: dict[str, RealizationRow]
    months: list[str]
    lines: list[RealizedLine]


def _group_key(item: BilledLineItem, group_by: RealizationGroupBy) -> str:
    if group_by == RealizationGroupBy.MEMBER:
        value: object = item.member_id
    elif group_by == RealizationGroupBy.BRANCH:
        value = item.branch_id
    else:
        value = item.source
    return str(value) if value else UNASSIGNED


def _invoice_item_totals(items: list[BilledLineItem]) -> dict[UUID, Decimal]:
    totals: dict[UUID, Decimal] = defaultdict(lambda: Decimal("0"))
    for item in items:
        totals[item.invoice_id] += item.item_total
    return totals


def _paid_base(
    item: BilledLineItem,
    items_total: Decimal,
    collected: Decimal | None,
) -> Decimal:
    """Share of the invoice's collections attributable to ``item``.

    Invoices with nothing collected fall back to their nominal total so the
    item still shows up in the report.
    """
    if items_total <= 0:
        return Decimal("0")
    proportion = item.item_total / items_total
    if not collected:
        collected = item.invoice_total if item.invoice_total is not None else items_total
    return collected * proportion


def aggregate_realization(
    items: Iterable[BilledLineItem],
    mode: RealizationMode,
    group_by: RealizationGroupBy,
    collected_for: Callable[[UUID], Decimal | None] | None = None,
) -> RealizationMatrix:
    """Amortize each line item and merge the buckets per group and month.

    In ``paid-amount`` mode an item's base is its proportional share of what
    was collected on its invoice; shares are computed against every item of
    the invoice, including items skipped for missing dates. In ``base-value``
    mode the item's own total is used.

    Items missing a service date or ending before they start are skipped
    with the rest of the report intact, as are items with nothing to amortize.
    """
    all_items = list(items)
    invoice_totals = _invoice_item_totals(all_items)

    rows: dict[str, RealizationRow] = {}
    lines: list[RealizedLine] = []
    months: set[str] = set()

    for item in all_items:
        if item.start_date is None or item.expiry_date is None:
            logger.debug("Skipping item on invoice %s without service dates", item.invoice_id)
            continue
        if item.expiry_date < item.start_date:
            logger.warning(
                "Skipping item on invoice %s: service ends %s before it starts %s",
                item.invoice_id,
                item.expiry_date,
                item.start_date,
            )
            continue

        if mode == RealizationMode.PAID_AMOUNT:
            collected = collected_for(item.invoice_id) if collected_for else None
            base = _paid_base(item, invoice_totals[item.invoice_id], collected)
        else:
            base = item.item_total
        if base <= 0:
            logger.debug("Skipping item on invoice %s with base %s", item.invoice_id, base)
            continue

        monthly = amortize(base, item.start_date, item.expiry_date)
        lines.append(RealizedLine(item=item, base_amount=base, monthly=monthly))
        months.update(monthly)

        key = _group_key(item, group_by)
        row = rows.setdefault(key, RealizationRow(key=key))
        row.sale_amount += base
        for month, bucket in monthly.items():
            merged = row.monthly.get(month)
            if merged is None:
                row.monthly[month] = MonthlyBucket(label=bucket.label, amount=bucket.amount)
            else:
                merged.amount += bucket.amount

    for row in rows.values():
        row.sale_amount = row.sale_amount.quantize(CENT, rounding=ROUND_HALF_UP)

    return RealizationMatrix(rows=rows, months=sorted(months), lines=lines)


class RevenueRealizationService:
    """Builds realization reports from stored invoices and payments."""

    def __init__(self, db: Session):
        self.db = db
        self.invoice_repo = InvoiceRepository(db)
        self.payment_repo = PaymentRepository(db)

    def line_items(
        self,
        organization_id: UUID,
        from_date: date | None = None,
        to_date: date | None = None,
        branch_id: UUID | None = None,
    ) -> list[BilledLineItem]:
        """Flatten the service lines of invoices issued in the date range."""
        items: list[BilledLineItem] = []
        invoices = self.invoice_repo.get_for_period(organization_id, from_date, to_date, branch_id)
        for invoice in invoices:
            for line in self.invoice_repo.parse_line_items(invoice):
                items.append(
                    BilledLineItem(
                        invoice_id=invoice.id,  # type: ignore[arg-type]
                        item_total=line.net_total,
                        start_date=line.start_date,
                        expiry_date=line.expiry_date,
                        invoice_total=Decimal(str(invoice.total)),
                        member_id=invoice.member_id,  # type: ignore[arg-type]
                        branch_id=invoice.branch_id,  # type: ignore[arg-type]
                        source=invoice.source,  # type: ignore[arg-type]
                        bill_number=invoice.invoice_number,  # type: ignore[arg-type]
                        service_name=line.description,
                    )
                )
        return items

    def build_report(
        self,
        organization_id: UUID,
        mode: RealizationMode,
        group_by: RealizationGroupBy,
        from_date: date | None = None,
        to_date: date | None = None,
        branch_id: UUID | None = None,
    ) -> RealizationMatrix:
        items = self.line_items(organization_id, from_date, to_date, branch_id)
        collected: dict[UUID, Decimal] = {}
        if mode == RealizationMode.PAID_AMOUNT:
            collected = self.payment_repo.collected_by_invoice({i.invoice_id for i in items})
        matrix = aggregate_realization(items, mode, group_by, collected_for=collected.get)
        logger.info(
            "Built %s realization report: %d lines, %d groups, %d months",
            mode.value,
            len(matrix.lines),
            len(matrix.rows),
            len(matrix.months),
        )
        return matrix
