"""Child lookups. Child records are owned elsewhere; the engine only checks existence."""

from datetime import date
from uuid import UUID

from sqlalchemy.orm import Session

from family_contact.core.exceptions import NotFoundError
from family_contact.db.enums import CounterType
from family_contact.db.models import Child
from family_contact.services import number_service


def get_child(db: Session, org_id: UUID, child_id: UUID) -> Child | None:
    """Get child by ID (org-scoped)."""
    return db.query(Child).filter(
        Child.id == child_id,
        Child.organization_id == org_id,
    ).first()


def require_child(db: Session, org_id: UUID, child_id: UUID) -> Child:
    child = get_child(db, org_id, child_id)
    if not child:
        raise NotFoundError("Child", child_id)
    return child


def create_child(
    db: Session,
    org_id: UUID,
    first_name: str,
    last_name: str,
    date_of_birth: date | None = None,
) -> Child:
    """Create a minimal child record (admin CLI and fixtures)."""
    child = Child(
        organization_id=org_id,
        child_number=number_service.next_number(db, org_id, CounterType.CHILD),
        first_name=first_name,
        last_name=last_name,
        date_of_birth=date_of_birth,
    )
    db.add(child)
    db.flush()
    return child
