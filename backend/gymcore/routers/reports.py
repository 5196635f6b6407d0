from datetime import date
from decimal import Decimal
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from gymcore.core.auth import get_current_organization
from gymcore.core.database import get_db
from gymcore.core.errors import MembershipError
from gymcore.routers.members import raise_http_error
from gymcore.schemas.revenue import (
    MonthlyRevenue,
    RealizationLineResponse,
    RealizationRowResponse,
    RevenueRealizationResponse,
)
from gymcore.services.revenue_amortization import MonthlyBucket
from gymcore.services.revenue_realization import (
    RealizationGroupBy,
    RealizationMode,
    RevenueRealizationService,
)

router = APIRouter()


def _monthly(buckets: dict[str, MonthlyBucket]) -> dict[str, MonthlyRevenue]:
    return {
        month: MonthlyRevenue(label=bucket.label, amount=bucket.amount)
        for month, bucket in buckets.items()
    }


@router.get(
    "/revenue_realization",
    response_model=RevenueRealizationResponse,
    summary="Revenue realization by month",
    responses={400: {"description": "Invalid date range"}},
)
async def revenue_realization(
    mode: RealizationMode = Query(default=RealizationMode.BASE_VALUE),
    group_by: RealizationGroupBy = Query(default=RealizationGroupBy.MEMBER),
    from_date: date | None = None,
    to_date: date | None = None,
    branch_id: UUID | None = None,
    db: Session = Depends(get_db),
    organization_id: UUID = Depends(get_current_organization),
) -> RevenueRealizationResponse:
    """Amortize billed services of invoices issued in the range over their service months."""
    if from_date and to_date and from_date > to_date:
        raise HTTPException(status_code=400, detail="from_date must not be after to_date")

    service = RevenueRealizationService(db)
    try:
        matrix = service.build_report(
            organization_id,
            mode,
            group_by,
            from_date=from_date,
            to_date=to_date,
            branch_id=branch_id,
        )
    except MembershipError as e:
        raise_http_error(e)
    return RevenueRealizationResponse(
        mode=mode,
        group_by=group_by,
        months=matrix.months,
        rows=[
            RealizationRowResponse(
                key=row.key,
                sale_amount=row.sale_amount,
                monthly_revenue=_monthly(row.monthly),
            )
            for row in matrix.rows.values()
        ],
        lines=[
            RealizationLineResponse(
                invoice_id=line.item.invoice_id,
                bill_number=line.item.bill_number,
                service_name=line.item.service_name,
                member_id=line.item.member_id,
                start_date=line.item.start_date,  # type: ignore[arg-type]
                end_date=line.item.expiry_date,  # type: ignore[arg-type]
                sale_amount=line.base_amount.quantize(Decimal("0.01")),
                monthly_revenue=_monthly(line.monthly),
            )
            for line in matrix.lines
        ],
    )
