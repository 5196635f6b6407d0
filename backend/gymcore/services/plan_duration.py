"""Plan duration arithmetic: where a plan that starts on a given day ends."""

import calendar as cal
from datetime import date, timedelta
from typing import Any

from gymcore.core.errors import ValidationError
from gymcore.models.plan import DurationUnit, PlanType


def _add_months(d: date, months: int) -> date:
    """Add months to a date, clamping to last day of month."""
    month = d.month - 1 + months
    year = d.year + month // 12
    month = month % 12 + 1
    max_day = cal.monthrange(year, month)[1]
    day = min(d.day, max_day)
    return d.replace(year=year, month=month, day=day)


def add_duration(start_date: date, value: int, unit: str) -> date:
    """Add ``value`` units of a plan duration to ``start_date``."""
    if unit == DurationUnit.DAYS.value:
        return start_date + timedelta(days=value)
    elif unit == DurationUnit.WEEKS.value:
        return start_date + timedelta(days=value * 7)
    elif unit == DurationUnit.MONTHS.value:
        return _add_months(start_date, value)
    elif unit == DurationUnit.YEARS.value:
        return _add_months(start_date, value * 12)
    raise ValidationError(f"Unknown duration unit: {unit}")


def _value(field: Any) -> str:
    return str(getattr(field, "value", field))


def compute_end_date(start_date: date, plan: Any) -> date | None:
    """Compute the end date of a plan starting on ``start_date``.

    Session plans do not expire by date and yield ``None``. Duration plans add
    ``plan.duration_value`` in ``plan.duration_unit``; month and year steps
    land on the same day of month, clamped to the end of shorter months.
    """
    if _value(plan.plan_type) == PlanType.SESSIONS.value:
        return None
    return add_duration(start_date, int(plan.duration_value), _value(plan.duration_unit))
