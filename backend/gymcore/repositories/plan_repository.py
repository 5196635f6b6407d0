from uuid import UUID

from sqlalchemy.orm import Session

from gymcore.models.plan import Plan
from gymcore.schemas.plan import PlanCreate


class PlanRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, plan_id: UUID, organization_id: UUID | None = None) -> Plan | None:
        query = self.db.query(Plan).filter(Plan.id == plan_id)
        if organization_id is not None:
            query = query.filter(Plan.organization_id == organization_id)
        return query.first()

    def create(self, data: PlanCreate, organization_id: UUID) -> Plan:
        plan = Plan(
            organization_id=organization_id,
            name=data.name,
            description=data.description,
            plan_type=data.plan_type.value,
            duration_value=data.duration_value,
            duration_unit=data.duration_unit.value if data.duration_unit else None,
            sessions=data.sessions,
            price=data.price,
        )
        self.db.add(plan)
        self.db.commit()
        self.db.refresh(plan)
        return plan
