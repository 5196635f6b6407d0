"""Read-time membership status.

Expiry is never written by a background job. Whoever needs to know whether a
membership is usable derives it here from the stored plan end date, leaving
the stored ``membership_status`` untouched.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date
from typing import Any

from gymcore.models.member import MembershipStatus

# Explicit transitions that expiry never overrides
_STICKY_STATUSES = frozenset(
    {
        MembershipStatus.FROZEN.value,
        MembershipStatus.CANCELLED.value,
        MembershipStatus.PENDING.value,
    }
)


@dataclass
class CheckInDecision:
    """Whether a member may be admitted, and why not."""

    allowed: bool
    status: MembershipStatus
    reason: str | None = None


def effective_status(member: Any, today: date) -> MembershipStatus:
    """Status of a membership as of ``today``.

    A plan is usable through its end date and expired from the day after.
    Plans without an end date (session plans) never expire by date.
    """
    stored = getattr(member.membership_status, "value", member.membership_status)
    if stored in _STICKY_STATUSES:
        return MembershipStatus(stored)
    end_date = member.current_plan_end_date
    if end_date is not None and end_date < today:
        return MembershipStatus.EXPIRED
    return MembershipStatus(stored)


def has_active_plan(member: Any, today: date) -> bool:
    return effective_status(member, today) == MembershipStatus.ACTIVE


def check_in_eligibility(member: Any, today: date) -> CheckInDecision:
    status = effective_status(member, today)
    if status == MembershipStatus.ACTIVE:
        return CheckInDecision(allowed=True, status=status)
    if status == MembershipStatus.EXPIRED:
        reason = "Membership has expired"
    elif status == MembershipStatus.FROZEN:
        reason = "Membership is frozen"
    elif status == MembershipStatus.CANCELLED:
        reason = "Membership is cancelled"
    else:
        reason = "Membership is not active"
    return CheckInDecision(allowed=False, status=status, reason=reason)


def days_until_expiry(member: Any, today: date) -> int | None:
    """Days from ``today`` to the plan end date; negative once expired."""
    end_date = member.current_plan_end_date
    if end_date is None:
        return None
    return (end_date - today).days


def reminder_due(member: Any, today: date, thresholds: Iterable[int]) -> bool:
    """True when today is one of the reminder days before the plan ends."""
    if effective_status(member, today) != MembershipStatus.ACTIVE:
        return False
    remaining = days_until_expiry(member, today)
    return remaining is not None and remaining in set(thresholds)
