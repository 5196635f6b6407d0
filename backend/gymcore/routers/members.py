from typing import Any, NoReturn
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from gymcore.core.auth import get_current_organization
from gymcore.core.config import settings
from gymcore.core.database import get_db
from gymcore.core.errors import (
    ConflictError,
    InvalidStateError,
    MembershipError,
    NotFoundError,
)
from gymcore.models.member import Member
from gymcore.models.shared import utc_today
from gymcore.repositories.member_repository import MemberRepository
from gymcore.schemas.member import (
    ChangePlanRequest,
    CheckInResponse,
    EnrollRequest,
    ExpiringMemberResponse,
    FreezeRequest,
    MemberCreate,
    MemberResponse,
    MembershipChangeResponse,
    RenewRequest,
    UnfreezeRequest,
)
from gymcore.services.membership_lifecycle import MembershipChange, MembershipLifecycleService
from gymcore.services.membership_status import check_in_eligibility, effective_status

router = APIRouter()

_ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    400: {"description": "Invalid dates or amounts"},
    404: {"description": "Member or plan not found"},
    409: {"description": "Operation conflicts with the membership state"},
}


def raise_http_error(error: MembershipError) -> NoReturn:
    """Translate a membership error into the matching HTTP status."""
    if isinstance(error, NotFoundError):
        status_code = 404
    elif isinstance(error, ConflictError | InvalidStateError):
        status_code = 409
    else:
        status_code = 400
    raise HTTPException(status_code=status_code, detail=str(error)) from error


def _member_to_response(db: Session, member: Member) -> dict[str, Any]:
    """Convert Member model to response dict with plan snapshot and freeze history."""
    current_plan = None
    if member.current_plan_start_date is not None:
        current_plan = {
            "plan_id": member.current_plan_id,
            "plan_name": member.current_plan_name,
            "start_date": member.current_plan_start_date,
            "end_date": member.current_plan_end_date,
            "sessions": {
                "total": member.sessions_total,
                "used": member.sessions_used,
                "remaining": member.sessions_remaining,
            },
        }
    return {
        "id": member.id,
        "member_code": member.member_code,
        "first_name": member.first_name,
        "last_name": member.last_name,
        "phone": member.phone,
        "email": member.email,
        "branch_id": member.branch_id,
        "source": member.source,
        "membership_status": member.membership_status,
        "effective_status": effective_status(member, utc_today()),
        "current_plan": current_plan,
        "total_freeze_days_used": member.total_freeze_days_used,
        "freeze_history": MemberRepository(db).get_freeze_history(member.id),  # type: ignore[arg-type]
        "created_at": member.created_at,
    }


def _change_to_response(change: MembershipChange) -> MembershipChangeResponse:
    return MembershipChangeResponse(
        member_id=change.member.id,  # type: ignore[arg-type]
        action=change.action,
        plan_id=change.plan_id,
        plan_name=change.plan_name,
        start_date=change.start_date,
        end_date=change.end_date,
        membership_status=change.member.membership_status,  # type: ignore[arg-type]
        discount_code=change.discount_code,
        freeze_days=change.freeze_days,
    )


@router.post(
    "/",
    response_model=MemberResponse,
    status_code=201,
    summary="Create member",
)
async def create_member(
    data: MemberCreate,
    db: Session = Depends(get_db),
    organization_id: UUID = Depends(get_current_organization),
) -> dict[str, Any]:
    """Create a member with no plan (status pending)."""
    member = MemberRepository(db).create(data, organization_id)
    return _member_to_response(db, member)


@router.get(
    "/expiring",
    response_model=list[ExpiringMemberResponse],
    summary="List members due a renewal reminder",
)
async def list_expiring_members(
    db: Session = Depends(get_db),
    organization_id: UUID = Depends(get_current_organization),
) -> list[ExpiringMemberResponse]:
    """Members whose plan ends in one of the configured reminder windows."""
    service = MembershipLifecycleService(db)
    due = service.expiring_members(organization_id, settings.expiry_reminder_days)
    return [
        ExpiringMemberResponse(
            member_id=member.id,  # type: ignore[arg-type]
            member_code=member.member_code,  # type: ignore[arg-type]
            member_name=member.full_name,
            plan_name=member.current_plan_name,  # type: ignore[arg-type]
            end_date=member.current_plan_end_date,  # type: ignore[arg-type]
            days_until_expiry=days,
        )
        for member, days in due
    ]


@router.get(
    "/{member_id}",
    response_model=MemberResponse,
    summary="Get member",
    responses={404: {"description": "Member not found"}},
)
async def get_member(
    member_id: UUID,
    db: Session = Depends(get_db),
    organization_id: UUID = Depends(get_current_organization),
) -> dict[str, Any]:
    """Get a member with its computed membership status."""
    member = MemberRepository(db).get_by_id(member_id, organization_id)
    if not member:
        raise HTTPException(status_code=404, detail="Member not found")
    return _member_to_response(db, member)


@router.get(
    "/{member_id}/check_in",
    response_model=CheckInResponse,
    summary="Check whether a member may be admitted",
    responses={404: {"description": "Member not found"}},
)
async def check_in(
    member_id: UUID,
    db: Session = Depends(get_db),
    organization_id: UUID = Depends(get_current_organization),
) -> CheckInResponse:
    member = MemberRepository(db).get_by_id(member_id, organization_id)
    if not member:
        raise HTTPException(status_code=404, detail="Member not found")
    decision = check_in_eligibility(member, utc_today())
    return CheckInResponse(allowed=decision.allowed, status=decision.status, reason=decision.reason)


@router.post(
    "/{member_id}/enroll",
    response_model=MembershipChangeResponse,
    summary="Enroll member on a plan",
    responses=_ERROR_RESPONSES,
)
async def enroll_member(
    member_id: UUID,
    data: EnrollRequest,
    db: Session = Depends(get_db),
    organization_id: UUID = Depends(get_current_organization),
) -> MembershipChangeResponse:
    service = MembershipLifecycleService(db)
    try:
        change = service.enroll(
            organization_id,
            member_id,
            data.plan_id,
            start_date=data.start_date,
            discount_code=data.discount_code,
        )
    except MembershipError as e:
        raise_http_error(e)
    return _change_to_response(change)


@router.post(
    "/{member_id}/renew",
    response_model=MembershipChangeResponse,
    summary="Renew membership",
    responses=_ERROR_RESPONSES,
)
async def renew_membership(
    member_id: UUID,
    data: RenewRequest,
    db: Session = Depends(get_db),
    organization_id: UUID = Depends(get_current_organization),
) -> MembershipChangeResponse:
    service = MembershipLifecycleService(db)
    try:
        change = service.renew(organization_id, member_id, data.plan_id, start_date=data.start_date)
    except MembershipError as e:
        raise_http_error(e)
    return _change_to_response(change)


@router.post(
    "/{member_id}/freeze",
    response_model=MembershipChangeResponse,
    summary="Freeze membership",
    responses=_ERROR_RESPONSES,
)
async def freeze_membership(
    member_id: UUID,
    data: FreezeRequest,
    db: Session = Depends(get_db),
    organization_id: UUID = Depends(get_current_organization),
) -> MembershipChangeResponse:
    service = MembershipLifecycleService(db)
    try:
        change = service.freeze(
            organization_id,
            member_id,
            start_date=data.start_date,
            end_date=data.end_date,
            reason=data.reason,
            requested_by=data.requested_by,
        )
    except MembershipError as e:
        raise_http_error(e)
    return _change_to_response(change)


@router.post(
    "/{member_id}/unfreeze",
    response_model=MembershipChangeResponse,
    summary="Unfreeze membership",
    responses=_ERROR_RESPONSES,
)
async def unfreeze_membership(
    member_id: UUID,
    data: UnfreezeRequest,
    db: Session = Depends(get_db),
    organization_id: UUID = Depends(get_current_organization),
) -> MembershipChangeResponse:
    service = MembershipLifecycleService(db)
    try:
        change = service.unfreeze(organization_id, member_id, approved_by=data.approved_by)
    except MembershipError as e:
        raise_http_error(e)
    return _change_to_response(change)


@router.post(
    "/{member_id}/change_plan",
    response_model=MembershipChangeResponse,
    summary="Upgrade or downgrade plan",
    responses=_ERROR_RESPONSES,
)
async def change_plan(
    member_id: UUID,
    data: ChangePlanRequest,
    db: Session = Depends(get_db),
    organization_id: UUID = Depends(get_current_organization),
) -> MembershipChangeResponse:
    """Swap the member's plan. Dates and price are not recomputed."""
    service = MembershipLifecycleService(db)
    try:
        change = service.change_plan(
            organization_id,
            member_id,
            data.new_plan_id,
            proration_method=data.proration_method,
        )
    except MembershipError as e:
        raise_http_error(e)
    return _change_to_response(change)


@router.post(
    "/{member_id}/cancel",
    response_model=MembershipChangeResponse,
    summary="Cancel membership",
    responses={404: {"description": "Member not found"}},
)
async def cancel_membership(
    member_id: UUID,
    db: Session = Depends(get_db),
    organization_id: UUID = Depends(get_current_organization),
) -> MembershipChangeResponse:
    service = MembershipLifecycleService(db)
    try:
        change = service.cancel(organization_id, member_id)
    except MembershipError as e:
        raise_http_error(e)
    return _change_to_response(change)
