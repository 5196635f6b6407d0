"""Service for membership lifecycle management: enrollment, renewal, freezes and plan changes."""

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from uuid import UUID

from sqlalchemy.orm import Session

from gymcore.core.errors import ConflictError, InvalidStateError, NotFoundError
from gymcore.models.member import Member, MembershipStatus
from gymcore.models.plan import Plan
from gymcore.models.shared import utc_today
from gymcore.repositories.member_repository import MemberRepository
from gymcore.repositories.plan_repository import PlanRepository
from gymcore.services.freeze_ledger import FreezeLedger
from gymcore.services.membership_status import days_until_expiry, effective_status, reminder_due
from gymcore.services.plan_duration import compute_end_date

logger = logging.getLogger(__name__)


@dataclass
class MembershipChange:
    """Outcome of a lifecycle transition.

    Carries what the invoicing side needs to bill an enrollment or renewal.
    """

    member: Member
    action: str
    plan_id: UUID | None
    plan_name: str | None
    start_date: date | None
    end_date: date | None
    discount_code: str | None = None
    freeze_days: int | None = None


class MembershipLifecycleService:
    """Service for managing membership state transitions."""

    def __init__(self, db: Session):
        self.db = db
        self.member_repo = MemberRepository(db)
        self.plan_repo = PlanRepository(db)

    def _get_member(self, organization_id: UUID, member_id: UUID) -> Member:
        member = self.member_repo.get_by_id(member_id, organization_id)
        if not member:
            raise NotFoundError(f"Member {member_id} not found")
        return member

    def _get_plan(self, organization_id: UUID, plan_id: UUID) -> Plan:
        plan = self.plan_repo.get_by_id(plan_id, organization_id)
        if not plan:
            raise NotFoundError(f"Plan {plan_id} not found")
        return plan

    def _apply_plan(self, member: Member, plan: Plan, start_date: date) -> None:
        """Replace the current plan snapshot with a fresh one for ``plan``."""
        member.current_plan_id = plan.id
        member.current_plan_name = plan.name
        member.current_plan_start_date = start_date  # type: ignore[assignment]
        member.current_plan_end_date = compute_end_date(start_date, plan)  # type: ignore[assignment]
        member.sessions_total = plan.sessions
        member.sessions_used = 0  # type: ignore[assignment]
        member.sessions_remaining = plan.sessions
        member.membership_status = MembershipStatus.ACTIVE.value  # type: ignore[assignment]
        member.is_active = True  # type: ignore[assignment]

    def _change(self, member: Member, action: str, **kwargs: object) -> MembershipChange:
        return MembershipChange(
            member=member,
            action=action,
            plan_id=member.current_plan_id,  # type: ignore[arg-type]
            plan_name=member.current_plan_name,  # type: ignore[arg-type]
            start_date=member.current_plan_start_date,  # type: ignore[arg-type]
            end_date=member.current_plan_end_date,  # type: ignore[arg-type]
            **kwargs,  # type: ignore[arg-type]
        )

    def get_freeze_ledger(self, member: Member) -> FreezeLedger:
        return FreezeLedger(self.member_repo.get_freeze_history(member.id))  # type: ignore[arg-type]

    def _close_open_freeze(self, member: Member, today: date) -> None:
        """Close a freeze the member is leaving without an unfreeze; no days are credited."""
        ledger = self.get_freeze_ledger(member)
        active = ledger.find_active_freeze(today)
        if active is not None:
            ledger.close_freeze(active, today, None)
            logger.info("Closed open freeze %s of member %s without credit", active.id, member.id)

    def enroll(
        self,
        organization_id: UUID,
        member_id: UUID,
        plan_id: UUID,
        start_date: date | None = None,
        discount_code: str | None = None,
        today: date | None = None,
    ) -> MembershipChange:
        """Put a member on a plan starting ``start_date`` (default today).

        The invoice for the enrollment is raised by the billing side from the
        returned change; the discount code is passed through untouched.
        """
        today = today or utc_today()
        member = self._get_member(organization_id, member_id)
        plan = self._get_plan(organization_id, plan_id)
        start = start_date or today

        self._close_open_freeze(member, today)
        self._apply_plan(member, plan, start)
        self.member_repo.save(member)
        logger.info(
            "Enrolled member %s on plan %s (%s to %s)",
            member.id,
            plan.id,
            member.current_plan_start_date,
            member.current_plan_end_date,
        )
        return self._change(member, "enrolled", discount_code=discount_code)

    def renew(
        self,
        organization_id: UUID,
        member_id: UUID,
        plan_id: UUID,
        start_date: date | None = None,
        today: date | None = None,
    ) -> MembershipChange:
        """Start a new plan period for a member.

        Without ``start_date`` the new period continues from the stored end of
        the current plan, even when that date lies in the past. Renewing a
        long-expired membership this way backdates the new period and leaves
        a gap; pass ``start_date`` explicitly to anchor elsewhere.
        """
        today = today or utc_today()
        member = self._get_member(organization_id, member_id)
        plan = self._get_plan(organization_id, plan_id)

        start = start_date
        if start is None:
            if member.current_plan_id is None and member.current_plan_start_date is None:
                raise InvalidStateError(
                    "Member has no plan to renew; a start date is required"
                )
            start = member.current_plan_end_date or today

        self._close_open_freeze(member, today)
        self._apply_plan(member, plan, start)  # type: ignore[arg-type]
        self.member_repo.save(member)
        logger.info(
            "Renewed member %s on plan %s (%s to %s)",
            member.id,
            plan.id,
            member.current_plan_start_date,
            member.current_plan_end_date,
        )
        return self._change(member, "renewed")

    def freeze(
        self,
        organization_id: UUID,
        member_id: UUID,
        start_date: date,
        end_date: date | None,
        reason: str | None,
        requested_by: str | None,
        today: date | None = None,
    ) -> MembershipChange:
        """Suspend a membership.

        The plan end date is left alone here; the days are credited back on
        unfreeze, measured to the actual unfreeze day.
        """
        today = today or utc_today()
        member = self._get_member(organization_id, member_id)
        ledger = self.get_freeze_ledger(member)

        if ledger.find_active_freeze(today) is not None:
            raise ConflictError("Membership is already frozen")
        status = effective_status(member, today)
        if status != MembershipStatus.ACTIVE:
            raise ConflictError(f"Cannot freeze a membership that is {status.value}")

        freeze = ledger.add_freeze(start_date, end_date, reason, requested_by, now=today)
        freeze.member_id = member.id
        self.member_repo.add_freeze(freeze)
        member.membership_status = MembershipStatus.FROZEN.value  # type: ignore[assignment]
        self.member_repo.save(member)
        logger.info("Froze member %s from %s to %s", member.id, start_date, end_date)
        return self._change(member, "frozen")

    def unfreeze(
        self,
        organization_id: UUID,
        member_id: UUID,
        approved_by: str | None,
        today: date | None = None,
    ) -> MembershipChange:
        """Lift the active freeze and push the plan end date out by its length."""
        today = today or utc_today()
        member = self._get_member(organization_id, member_id)
        if member.membership_status != MembershipStatus.FROZEN.value:
            raise InvalidStateError("Membership is not frozen")

        ledger = self.get_freeze_ledger(member)
        active = ledger.find_active_freeze(today)
        if active is None:
            logger.warning("Member %s is frozen but has no open freeze interval", member.id)
            raise ConflictError("Membership is frozen but no active freeze was found")

        freeze_days = ledger.total_freeze_days(active, today)
        if member.current_plan_end_date is not None:
            member.current_plan_end_date = member.current_plan_end_date + timedelta(  # type: ignore[assignment]
                days=freeze_days
            )
        ledger.close_freeze(active, today, approved_by)
        member.membership_status = MembershipStatus.ACTIVE.value  # type: ignore[assignment]
        self.member_repo.save(member)
        logger.info(
            "Unfroze member %s after %d days, plan now ends %s",
            member.id,
            freeze_days,
            member.current_plan_end_date,
        )
        return self._change(member, "unfrozen", freeze_days=freeze_days)

    def change_plan(
        self,
        organization_id: UUID,
        member_id: UUID,
        new_plan_id: UUID,
        proration_method: str | None = None,
    ) -> MembershipChange:
        """Upgrade or downgrade a member to ``new_plan_id``.

        Only the plan reference and name change. Dates, session counters and
        price are left as they are; ``proration_method`` is accepted but not
        applied because no proration rule has been defined for plan changes.
        """
        member = self._get_member(organization_id, member_id)
        new_plan = self._get_plan(organization_id, new_plan_id)
        if member.current_plan_id is None:
            raise InvalidStateError("Member has no current plan to change")

        previous_plan_id = member.current_plan_id
        member.current_plan_id = new_plan.id
        member.current_plan_name = new_plan.name
        self.member_repo.save(member)
        logger.info(
            "Changed member %s from plan %s to %s (proration %s not applied)",
            member.id,
            previous_plan_id,
            new_plan.id,
            proration_method,
        )
        return self._change(member, "plan_changed")

    def cancel(
        self, organization_id: UUID, member_id: UUID, today: date | None = None
    ) -> MembershipChange:
        """Cancel a membership. The member record and its history are kept."""
        today = today or utc_today()
        member = self._get_member(organization_id, member_id)
        self._close_open_freeze(member, today)
        member.membership_status = MembershipStatus.CANCELLED.value  # type: ignore[assignment]
        member.is_active = False  # type: ignore[assignment]
        self.member_repo.save(member)
        logger.info("Cancelled membership of member %s", member.id)
        return self._change(member, "cancelled")

    def expiring_members(
        self,
        organization_id: UUID,
        thresholds: tuple[int, ...],
        today: date | None = None,
    ) -> list[tuple[Member, int]]:
        """Active members for whom a renewal reminder is due today."""
        today = today or utc_today()
        if not thresholds:
            return []
        candidates = self.member_repo.get_with_end_date_between(
            organization_id,
            today + timedelta(days=min(thresholds)),
            today + timedelta(days=max(thresholds)),
        )
        return [
            (member, days_until_expiry(member, today))  # type: ignore[misc]
            for member in candidates
            if reminder_due(member, today, thresholds)
        ]
