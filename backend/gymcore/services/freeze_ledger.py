"""Freeze history bookkeeping for a single membership."""

import math
from datetime import date, datetime
from typing import Any

from gymcore.core.errors import ConflictError, ValidationError
from gymcore.models.member import MemberFreeze
from gymcore.models.shared import utc_now

SECONDS_PER_DAY = 86400


def _elapsed_days(start: date, end: date) -> int:
    """Whole days from ``start`` to ``end``, rounding partial days up."""
    if isinstance(start, datetime) and isinstance(end, datetime):
        return math.ceil((end - start).total_seconds() / SECONDS_PER_DAY)
    if isinstance(start, datetime):
        start = start.date()
    if isinstance(end, datetime):
        end = end.date()
    return (end - start).days


def is_open(interval: Any, now: date) -> bool:
    """An interval is open while it has no end date or ends after ``now``."""
    return interval.end_date is None or interval.end_date > now


class FreezeLedger:
    """Append-only view over a member's freeze intervals.

    ``intervals`` are ordered oldest first. Closed intervals are never removed;
    the open one is found by predicate rather than tracked separately.
    """

    def __init__(self, intervals: list[Any]):
        self.intervals = intervals

    def find_active_freeze(self, now: date) -> Any | None:
        """Return the open interval, preferring the most recently created."""
        active = [interval for interval in self.intervals if is_open(interval, now)]
        if not active:
            return None
        return active[-1]

    def add_freeze(
        self,
        start_date: date,
        end_date: date | None,
        reason: str | None,
        requested_by: str | None,
        now: date,
    ) -> MemberFreeze:
        if end_date is not None and end_date <= start_date:
            raise ValidationError("Freeze end date must be after start date")
        if self.find_active_freeze(now) is not None:
            raise ConflictError("Membership is already frozen")

        freeze = MemberFreeze(
            start_date=start_date,
            end_date=end_date,
            reason=reason,
            requested_by=requested_by,
            created_at=utc_now(),
        )
        self.intervals.append(freeze)
        return freeze

    def close_freeze(self, interval: Any, now: date, approved_by: str | None) -> None:
        interval.end_date = now
        interval.approved_by = approved_by

    def total_freeze_days(self, interval: Any, now: date) -> int:
        """Days credited for a freeze ending at ``now``.

        Measured from the freeze start to the actual unfreeze, not to the
        requested end. A freeze lifted before it started credits nothing.
        """
        return max(0, _elapsed_days(interval.start_date, now))
