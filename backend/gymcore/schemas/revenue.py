"""Schemas for the revenue realization report."""

from datetime import date
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel

from gymcore.services.revenue_realization import RealizationGroupBy, RealizationMode


class MonthlyRevenue(BaseModel):
    label: str
    amount: Decimal


class RealizationLineResponse(BaseModel):
    """One billed service with its month-by-month recognition."""

    invoice_id: UUID
    bill_number: str | None
    service_name: str | None
    member_id: UUID | None
    start_date: date
    end_date: date
    sale_amount: Decimal
    monthly_revenue: dict[str, MonthlyRevenue]


class RealizationRowResponse(BaseModel):
    key: str
    sale_amount: Decimal
    monthly_revenue: dict[str, MonthlyRevenue]


class RevenueRealizationResponse(BaseModel):
    mode: RealizationMode
    group_by: RealizationGroupBy
    months: list[str]
    rows: list[RealizationRowResponse]
    lines: list[RealizationLineResponse]
