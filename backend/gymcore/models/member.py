import uuid
from enum import Enum

from sqlalchemy import Boolean, Column, Date, DateTime, ForeignKey, Integer, String, Text, func

from gymcore.core.database import Base
from gymcore.models.shared import DEFAULT_ORGANIZATION_ID, UUIDType, utc_now


class MembershipStatus(str, Enum):
    PENDING = "pending"
    ACTIVE = "active"
    FROZEN = "frozen"
    EXPIRED = "expired"
    CANCELLED = "cancelled"


class MemberSource(str, Enum):
    WALK_IN = "walk-in"
    REFERRAL = "referral"
    ONLINE = "online"
    SOCIAL_MEDIA = "social-media"
    OTHER = "other"


class Member(Base):
    __tablename__ = "members"

    id = Column(UUIDType, primary_key=True, default=lambda: uuid.uuid4())
    organization_id = Column(
        UUIDType,
        ForeignKey("organizations.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
        default=DEFAULT_ORGANIZATION_ID,
    )
    branch_id = Column(UUIDType, nullable=True, index=True)
    member_code = Column(String(50), nullable=False, index=True)
    first_name = Column(String(255), nullable=False)
    last_name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=False)
    source = Column(String(20), nullable=False, default=MemberSource.WALK_IN.value)

    # Stored status is a hint; expiry is derived from current_plan_end_date on read
    membership_status = Column(
        String(20), nullable=False, default=MembershipStatus.PENDING.value, index=True
    )

    # current plan snapshot, replaced wholesale on enroll/renew
    current_plan_id = Column(
        UUIDType,
        ForeignKey("plans.id", ondelete="SET NULL"),
        nullable=True,
    )
    current_plan_name = Column(String(255), nullable=True)
    current_plan_start_date = Column(Date, nullable=True)
    current_plan_end_date = Column(Date, nullable=True, index=True)
    sessions_total = Column(Integer, nullable=True)
    sessions_used = Column(Integer, nullable=False, default=0)
    sessions_remaining = Column(Integer, nullable=True)

    total_freeze_days_used = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    @property
    def full_name(self) -> str:
        return f"{self.first_name or ''} {self.last_name or ''}".strip()


class MemberFreeze(Base):
    """One interval of a member's append-only freeze history."""

    __tablename__ = "member_freezes"

    id = Column(UUIDType, primary_key=True, default=lambda: uuid.uuid4())
    member_id = Column(
        UUIDType,
        ForeignKey("members.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=True)
    reason = Column(Text, nullable=True)
    requested_by = Column(String(255), nullable=True)
    approved_by = Column(String(255), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
