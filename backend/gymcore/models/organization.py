from sqlalchemy import Column, DateTime, String, func

from gymcore.core.database import Base
from gymcore.models.shared import UUIDType, generate_uuid


class Organization(Base):
    __tablename__ = "organizations"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    name = Column(String(255), nullable=False)
    # Callers normalize membership dates to this zone before calling in
    timezone = Column(String(50), nullable=False, default="UTC")

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
