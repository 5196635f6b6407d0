"""Straight-line revenue amortization over calendar months."""

import calendar as cal
from dataclasses import dataclass
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from gymcore.core.errors import ValidationError

CENT = Decimal("0.01")


@dataclass
class MonthlyBucket:
    """Revenue recognized in one calendar month."""

    label: str
    amount: Decimal


def _as_date(value: date) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def _to_decimal(amount: Decimal | float | int | str) -> Decimal:
    try:
        value = amount if isinstance(amount, Decimal) else Decimal(str(amount))
    except InvalidOperation:
        raise ValidationError(f"Invalid amount: {amount!r}") from None
    if not value.is_finite():
        raise ValidationError(f"Amount must be finite, got {amount!r}")
    return value


def month_key(d: date) -> str:
    return f"{d.year:04d}-{d.month:02d}"


def month_label(d: date) -> str:
    return f"{cal.month_abbr[d.month]} {d.year}"


def _month_end(month_start: date) -> date:
    return month_start.replace(day=cal.monthrange(month_start.year, month_start.month)[1])


def _next_month(month_start: date) -> date:
    if month_start.month == 12:
        return date(month_start.year + 1, 1, 1)
    return date(month_start.year, month_start.month + 1, 1)


def amortize(
    amount: Decimal | float | int | str,
    start_date: date | None,
    end_date: date | None,
) -> dict[str, MonthlyBucket]:
    """Spread ``amount`` evenly per day over ``[start_date, end_date]``.

    Both endpoints are service days, so a period that starts and ends on the
    same day has one day. Each month gets ``daily_rate * days_in_month``
    rounded half-up to cents on its own; the buckets may therefore add up to
    a few cents more or less than ``amount``, and no bucket is adjusted to
    absorb the difference.

    Returns an empty mapping when either date is missing.

    Raises:
        ValidationError: If the amount is not a finite positive number or
            the period ends before it starts.
    """
    if start_date is None or end_date is None:
        return {}

    value = _to_decimal(amount)
    if value <= 0:
        raise ValidationError(f"Amount must be positive, got {value}")

    start = _as_date(start_date)
    end = _as_date(end_date)
    if end < start:
        raise ValidationError(f"Service period ends ({end}) before it starts ({start})")

    total_days = (end - start).days + 1
    daily_rate = value / Decimal(total_days)

    buckets: dict[str, MonthlyBucket] = {}
    cursor = start.replace(day=1)
    while cursor <= end:
        overlap_start = max(start, cursor)
        overlap_end = min(end, _month_end(cursor))
        overlap_days = (overlap_end - overlap_start).days + 1
        buckets[month_key(cursor)] = MonthlyBucket(
            label=month_label(cursor),
            amount=(daily_rate * overlap_days).quantize(CENT, rounding=ROUND_HALF_UP),
        )
        cursor = _next_month(cursor)
    return buckets
