from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from gymcore.core.auth import get_current_organization
from gymcore.core.database import get_db
from gymcore.models.plan import Plan
from gymcore.repositories.plan_repository import PlanRepository
from gymcore.schemas.plan import PlanCreate, PlanResponse

router = APIRouter()


@router.get(
    "/{plan_id}",
    response_model=PlanResponse,
    summary="Get plan",
    responses={404: {"description": "Plan not found"}},
)
async def get_plan(
    plan_id: UUID,
    db: Session = Depends(get_db),
    organization_id: UUID = Depends(get_current_organization),
) -> Plan:
    """Get a plan by ID."""
    plan = PlanRepository(db).get_by_id(plan_id, organization_id)
    if not plan:
        raise HTTPException(status_code=404, detail="Plan not found")
    return plan


@router.post(
    "/",
    response_model=PlanResponse,
    status_code=201,
    summary="Create plan",
    responses={422: {"description": "Invalid plan duration or session quota"}},
)
async def create_plan(
    data: PlanCreate,
    db: Session = Depends(get_db),
    organization_id: UUID = Depends(get_current_organization),
) -> Plan:
    """Create a plan. Duration units and quotas are validated here, not at enrollment."""
    return PlanRepository(db).create(data, organization_id)
