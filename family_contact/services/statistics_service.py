"""Read-only rollups over family members, schedules, sessions and assessments."""

from datetime import date
from uuid import UUID

from sqlalchemy.orm import Session

from family_contact.db.enums import ContactScheduleStatus
from family_contact.db.models import ContactSchedule, FamilyMember
from family_contact.schemas.statistics import (
    FamilyContactStatistics,
    FamilyMemberStats,
    RiskAssessmentStats,
    ScheduleStats,
    SessionStats,
)
from family_contact.services import (
    contact_schedule_service,
    contact_session_service,
    risk_assessment_service,
)
from family_contact.utils.cadence import today_utc


def get_statistics(
    db: Session,
    org_id: UUID,
    as_of: date | None = None,
) -> FamilyContactStatistics:
    """Counts for an organization, recomputed on every call."""
    as_of = as_of or today_utc()

    total_members = db.query(FamilyMember).filter(
        FamilyMember.organization_id == org_id,
    ).count()
    active_schedules = db.query(ContactSchedule).filter(
        ContactSchedule.organization_id == org_id,
        ContactSchedule.status == ContactScheduleStatus.ACTIVE.value,
    ).count()
    due_for_review = len(contact_schedule_service.list_schedules_due_for_review(db, org_id, as_of))

    return FamilyContactStatistics(
        family_members=FamilyMemberStats(total=total_members),
        schedules=ScheduleStats(active=active_schedules, due_for_review=due_for_review),
        sessions=SessionStats(
            upcoming=contact_session_service.count_upcoming(db, org_id),
            requiring_urgent_review=len(
                contact_session_service.list_sessions_requiring_urgent_review(db, org_id)
            ),
        ),
        risk_assessments=RiskAssessmentStats(
            high_risk=risk_assessment_service.count_high_risk(db, org_id),
            overdue_review=len(risk_assessment_service.list_overdue_assessments(db, org_id, as_of)),
        ),
    )
