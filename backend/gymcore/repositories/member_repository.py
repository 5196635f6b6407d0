from datetime import date
from uuid import UUID

from sqlalchemy.orm import Session

from gymcore.models.member import Member, MemberFreeze, MembershipStatus
from gymcore.schemas.member import MemberCreate


class MemberRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, member_id: UUID, organization_id: UUID | None = None) -> Member | None:
        query = self.db.query(Member).filter(Member.id == member_id)
        if organization_id is not None:
            query = query.filter(Member.organization_id == organization_id)
        return query.first()

    def create(self, data: MemberCreate, organization_id: UUID) -> Member:
        member = Member(
            organization_id=organization_id,
            branch_id=data.branch_id,
            member_code=data.member_code.strip().upper(),
            first_name=data.first_name.strip(),
            last_name=data.last_name.strip(),
            email=data.email.strip().lower() if data.email else None,
            phone=data.phone,
            source=data.source.value,
            membership_status=MembershipStatus.PENDING.value,
        )
        self.db.add(member)
        self.db.commit()
        self.db.refresh(member)
        return member

    def save(self, member: Member) -> Member:
        """Persist pending changes on a member (last write wins)."""
        self.db.add(member)
        self.db.commit()
        self.db.refresh(member)
        return member

    def get_freeze_history(self, member_id: UUID) -> list[MemberFreeze]:
        """Freeze intervals of a member, oldest first."""
        return (
            self.db.query(MemberFreeze)
            .filter(MemberFreeze.member_id == member_id)
            .order_by(MemberFreeze.created_at.asc())
            .all()
        )

    def add_freeze(self, freeze: MemberFreeze) -> None:
        self.db.add(freeze)

    def get_with_end_date_between(
        self,
        organization_id: UUID,
        start: date,
        end: date,
    ) -> list[Member]:
        """Members whose current plan ends within [start, end], soonest first."""
        return (
            self.db.query(Member)
            .filter(
                Member.organization_id == organization_id,
                Member.is_active.is_(True),
                Member.current_plan_end_date.isnot(None),
                Member.current_plan_end_date >= start,
                Member.current_plan_end_date <= end,
            )
            .order_by(Member.current_plan_end_date.asc())
            .all()
        )
