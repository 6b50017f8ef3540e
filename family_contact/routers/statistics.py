"""Organization statistics endpoint."""

from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from family_contact.core.deps import get_db
from family_contact.schemas.statistics import FamilyContactStatistics
from family_contact.services import statistics_service

router = APIRouter()


@router.get("", response_model=FamilyContactStatistics)
def get_statistics(
    organization_id: UUID,
    db: Session = Depends(get_db),
):
    """Counts for dashboards; recomputed on every request."""
    return statistics_service.get_statistics(db, organization_id)
