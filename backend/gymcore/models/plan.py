import uuid
from enum import Enum

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Numeric, String, Text, func

from gymcore.core.database import Base
from gymcore.models.shared import DEFAULT_ORGANIZATION_ID, UUIDType


class PlanType(str, Enum):
    DURATION = "duration"
    SESSIONS = "sessions"


class DurationUnit(str, Enum):
    DAYS = "days"
    WEEKS = "weeks"
    MONTHS = "months"
    YEARS = "years"


class Plan(Base):
    __tablename__ = "plans"

    id = Column(UUIDType, primary_key=True, default=lambda: uuid.uuid4())
    organization_id = Column(
        UUIDType,
        ForeignKey("organizations.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
        default=DEFAULT_ORGANIZATION_ID,
    )
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    plan_type = Column(String(20), nullable=False, default=PlanType.DURATION.value)
    duration_value = Column(Integer, nullable=True)
    duration_unit = Column(String(20), nullable=True)
    sessions = Column(Integer, nullable=True)
    price = Column(Numeric(12, 4), nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
