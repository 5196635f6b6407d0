from datetime import datetime
from decimal import Decimal
from typing import Self
from uuid import UUID

from pydantic import BaseModel, Field, model_validator

from gymcore.models.plan import DurationUnit, PlanType


class PlanCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    plan_type: PlanType = PlanType.DURATION
    duration_value: int | None = Field(default=None, gt=0)
    duration_unit: DurationUnit | None = None
    sessions: int | None = Field(default=None, gt=0)
    price: Decimal = Field(default=Decimal("0"), ge=0)

    @model_validator(mode="after")
    def check_plan_shape(self) -> Self:
        """Reject plans the duration calculator could not evaluate."""
        if self.plan_type == PlanType.DURATION:
            if self.duration_value is None or self.duration_unit is None:
                raise ValueError("Duration plans require duration_value and duration_unit")
        elif self.sessions is None:
            raise ValueError("Session plans require a sessions quota")
        return self


class PlanResponse(BaseModel):
    id: UUID
    name: str
    description: str | None
    plan_type: PlanType
    duration_value: int | None
    duration_unit: DurationUnit | None
    sessions: int | None
    price: Decimal
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
