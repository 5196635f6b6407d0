from uuid import UUID

from sqlalchemy.orm import Session

from gymcore.models.organization import Organization


class OrganizationRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, org_id: UUID) -> Organization | None:
        return self.db.query(Organization).filter(Organization.id == org_id).first()

    def create(self, name: str, timezone: str = "UTC", org_id: UUID | None = None) -> Organization:
        org = Organization(name=name, timezone=timezone)
        if org_id is not None:
            org.id = org_id
        self.db.add(org)
        self.db.commit()
        self.db.refresh(org)
        return org
