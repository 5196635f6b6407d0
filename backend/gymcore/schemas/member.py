from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, Field

from gymcore.models.member import MembershipStatus, MemberSource


class MemberCreate(BaseModel):
    member_code: str = Field(..., min_length=1, max_length=50)
    first_name: str = Field(..., min_length=1, max_length=255)
    last_name: str = Field(..., min_length=1, max_length=255)
    phone: str = Field(..., min_length=1, max_length=50)
    email: str | None = None
    branch_id: UUID | None = None
    source: MemberSource = MemberSource.WALK_IN


class SessionsSnapshot(BaseModel):
    total: int | None
    used: int
    remaining: int | None


class CurrentPlanResponse(BaseModel):
    plan_id: UUID | None
    plan_name: str | None
    start_date: date | None
    end_date: date | None
    sessions: SessionsSnapshot


class FreezeIntervalResponse(BaseModel):
    id: UUID
    start_date: date
    end_date: date | None
    reason: str | None
    requested_by: str | None
    approved_by: str | None
    created_at: datetime

    model_config = {"from_attributes": True}


class MemberResponse(BaseModel):
    id: UUID
    member_code: str
    first_name: str
    last_name: str
    phone: str
    email: str | None
    branch_id: UUID | None
    source: MemberSource
    membership_status: MembershipStatus
    effective_status: MembershipStatus
    current_plan: CurrentPlanResponse | None
    total_freeze_days_used: int
    freeze_history: list[FreezeIntervalResponse] = Field(default_factory=list)
    created_at: datetime


class EnrollRequest(BaseModel):
    plan_id: UUID
    start_date: date | None = None
    discount_code: str | None = None


class RenewRequest(BaseModel):
    plan_id: UUID
    start_date: date | None = None


class FreezeRequest(BaseModel):
    start_date: date
    end_date: date | None = None
    reason: str | None = None
    requested_by: str | None = None


class UnfreezeRequest(BaseModel):
    approved_by: str | None = None


class ChangePlanRequest(BaseModel):
    new_plan_id: UUID
    # Accepted for API compatibility; plan changes are not prorated
    proration_method: str | None = None


class MembershipChangeResponse(BaseModel):
    member_id: UUID
    action: str
    plan_id: UUID | None
    plan_name: str | None
    start_date: date | None
    end_date: date | None
    membership_status: MembershipStatus
    discount_code: str | None = None
    freeze_days: int | None = None


class CheckInResponse(BaseModel):
    allowed: bool
    status: MembershipStatus
    reason: str | None = None


class ExpiringMemberResponse(BaseModel):
    member_id: UUID
    member_code: str
    member_name: str
    plan_name: str | None
    end_date: date
    days_until_expiry: int
