"""
Contact session lifecycle.

scheduled → completed | cancelled. Both end states are terminal.

A session linked to a schedule drives that schedule's counters. The
session change and the counter update share the caller's transaction;
the counter update runs in a savepoint and is retried before giving up
with CascadeInconsistencyError. If the linked schedule no longer exists
the update is skipped and logged.
"""

import logging
from datetime import date, datetime, timezone
from typing import Callable
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from family_contact.core.config import settings
from family_contact.core.exceptions import (
    CascadeInconsistencyError,
    ContactNotAllowedError,
    InvalidTransitionError,
    NotFoundError,
    ValidationFailure,
)
from family_contact.core.structured_logging import build_log_context
from family_contact.db.enums import (
    ContactSessionStatus,
    CounterType,
    IncidentSeverity,
    InteractionQuality,
)
from family_contact.db.models import ContactSchedule, ContactSession
from family_contact.schemas.contact_session import (
    ContactSessionCancel,
    ContactSessionComplete,
    ContactSessionCreate,
)
from family_contact.services import (
    child_service,
    contact_schedule_service,
    family_member_service,
    number_service,
)
from family_contact.utils.cadence import duration_minutes, parse_clock_time

logger = logging.getLogger(__name__)

UrgentReviewPredicate = Callable[[ContactSession], bool]

URGENT_INCIDENT_SEVERITIES = {
    IncidentSeverity.HIGH.value,
    IncidentSeverity.CRITICAL.value,
}


# =============================================================================
# Schedule cascade
# =============================================================================


def _cascade(
    db: Session,
    session: ContactSession,
    operation: str,
    apply: Callable[[], ContactSchedule | None],
) -> None:
    """
    Apply a schedule counter update inside a savepoint, retrying on database errors.

    Raises:
        CascadeInconsistencyError: if every attempt failed.
    """
    schedule_id = session.contact_schedule_id
    max_attempts = max(1, settings.CASCADE_MAX_ATTEMPTS)
    log_context = build_log_context(
        org_id=session.organization_id,
        child_id=session.child_id,
        entity_id=session.id,
        operation=operation,
    )

    for attempt in range(1, max_attempts + 1):
        try:
            with db.begin_nested():
                schedule = apply()
        except SQLAlchemyError as exc:
            if attempt < max_attempts:
                logger.warning(
                    "Schedule %s cascade failed (attempt %d/%d): %s",
                    schedule_id,
                    attempt,
                    max_attempts,
                    exc.__class__.__name__,
                    extra=log_context,
                )
                continue
            logger.error(
                "Schedule %s cascade failed after %d attempts",
                schedule_id,
                max_attempts,
                extra=log_context,
            )
            raise CascadeInconsistencyError(schedule_id, max_attempts) from exc

        if schedule is None:
            logger.warning(
                "Linked schedule %s no longer exists; counter update skipped",
                schedule_id,
                extra=log_context,
            )
        return


# =============================================================================
# Lifecycle
# =============================================================================


def _require_linked_schedule(db: Session, data: ContactSessionCreate) -> ContactSchedule:
    schedule = contact_schedule_service.require_schedule(
        db, data.organization_id, data.contact_schedule_id
    )
    if schedule.child_id != data.child_id or schedule.family_member_id != data.family_member_id:
        raise ValidationFailure(
            "Contact schedule belongs to a different child or family member",
            field="contact_schedule_id",
        )
    if not schedule.is_active():
        raise ContactNotAllowedError(
            schedule.family_member.full_name,
            f"contact schedule {schedule.contact_schedule_number} is {schedule.status}",
        )
    denial = schedule.family_member.contact_denial_reason()
    if denial:
        raise ContactNotAllowedError(schedule.family_member.full_name, denial)
    return schedule


def schedule_session(db: Session, data: ContactSessionCreate) -> ContactSession:
    """
    Create a session in scheduled status.

    Sessions without a contact_schedule_id are ad-hoc and touch no counters.
    """
    org_id = data.organization_id
    child_service.require_child(db, org_id, data.child_id)
    family_member_service.require_member_of_child(
        db, org_id, data.child_id, data.family_member_id
    )

    if data.contact_schedule_id:
        _require_linked_schedule(db, data)

    if parse_clock_time(data.scheduled_end_time) <= parse_clock_time(data.scheduled_start_time):
        raise ValidationFailure(
            "Scheduled end time must be after start time", field="scheduled_end_time"
        )

    session = ContactSession(
        session_number=number_service.next_number(db, org_id, CounterType.CONTACT_SESSION),
        child_id=data.child_id,
        family_member_id=data.family_member_id,
        contact_schedule_id=data.contact_schedule_id,
        organization_id=org_id,
        session_date=data.session_date,
        scheduled_start_time=data.scheduled_start_time,
        scheduled_end_time=data.scheduled_end_time,
        supervised=data.supervised,
        supervisor_name=data.supervisor_name,
        status=ContactSessionStatus.SCHEDULED.value,
        created_by=data.created_by,
        version=1,
    )
    db.add(session)
    db.flush()

    if session.contact_schedule_id:
        _cascade(
            db,
            session,
            "schedule_session",
            lambda: contact_schedule_service.record_session_scheduled(
                db, session.contact_schedule_id
            ),
        )

    logger.info(
        "Contact session %s scheduled for %s",
        session.session_number,
        session.session_date.isoformat(),
        extra=build_log_context(
            org_id=org_id,
            child_id=session.child_id,
            entity_id=session.id,
            operation="schedule_session",
            actor=data.created_by,
        ),
    )
    return session


def get_session(db: Session, org_id: UUID, session_id: UUID) -> ContactSession | None:
    """Get contact session by ID (org-scoped)."""
    return db.query(ContactSession).filter(
        ContactSession.id == session_id,
        ContactSession.organization_id == org_id,
    ).first()


def require_session(db: Session, org_id: UUID, session_id: UUID) -> ContactSession:
    session = get_session(db, org_id, session_id)
    if not session:
        raise NotFoundError("Contact session", session_id)
    return session


def complete_session(
    db: Session,
    org_id: UUID,
    session_id: UUID,
    data: ContactSessionComplete,
) -> ContactSession:
    """
    Record a session as having taken place.

    duration_minutes is derived from the actual start and end times when
    both are given. A linked schedule has its completed counter and next
    contact date moved on.
    """
    session = require_session(db, org_id, session_id)
    if session.is_terminal():
        raise InvalidTransitionError("Contact session", session.status, "complete")

    duration = duration_minutes(data.actual_start_time, data.actual_end_time)
    if duration is not None and duration <= 0:
        raise ValidationFailure("Actual end time must be after start time", field="actual_end_time")

    session.status = ContactSessionStatus.COMPLETED.value
    session.completed_date = datetime.now(timezone.utc)
    session.completed_by = data.completed_by
    session.updated_by = data.completed_by
    session.actual_start_time = data.actual_start_time
    session.actual_end_time = data.actual_end_time
    session.duration_minutes = duration
    session.child_attendance = data.child_attendance.value
    session.family_member_attendance = data.family_member_attendance.value
    session.interaction_quality = (
        data.interaction_quality.value if data.interaction_quality else None
    )
    session.overall_assessment = data.overall_assessment
    session.child_views_summary = data.child_views_summary
    session.safeguarding_concerns_raised = data.safeguarding_concerns_raised
    session.safeguarding_concerns_details = data.safeguarding_concerns_details
    session.incidents_occurred = data.incidents_occurred or bool(data.incident_details)
    session.incident_details = [i.model_dump(mode="json") for i in data.incident_details] or None
    session.contact_terminated_early = data.contact_terminated_early
    session.termination_reason = data.termination_reason
    session.general_notes = data.general_notes
    session.version += 1
    db.flush()

    if session.contact_schedule_id:
        _cascade(
            db,
            session,
            "complete_session",
            lambda: contact_schedule_service.record_session_completed(
                db, session.contact_schedule_id, session.session_date
            ),
        )

    logger.info(
        "Contact session %s completed (duration=%s)",
        session.session_number,
        session.duration_minutes,
        extra=build_log_context(
            org_id=org_id,
            child_id=session.child_id,
            entity_id=session.id,
            operation="complete_session",
            actor=data.completed_by,
        ),
    )
    if session.safeguarding_concerns_raised:
        logger.warning(
            "Contact session %s raised safeguarding concerns",
            session.session_number,
            extra=build_log_context(
                org_id=org_id,
                child_id=session.child_id,
                entity_id=session.id,
                operation="complete_session",
            ),
        )
    return session


def cancel_session(
    db: Session,
    org_id: UUID,
    session_id: UUID,
    data: ContactSessionCancel,
) -> ContactSession:
    session = require_session(db, org_id, session_id)
    if session.is_terminal():
        raise InvalidTransitionError("Contact session", session.status, "cancel")
    if data.rescheduled and not data.rescheduled_date:
        raise ValidationFailure(
            "Rescheduled sessions need a rescheduled date", field="rescheduled_date"
        )

    session.status = ContactSessionStatus.CANCELLED.value
    session.cancellation_date = datetime.now(timezone.utc)
    session.cancellation_reason = data.cancellation_reason
    session.cancelled_by = data.cancelled_by
    session.rescheduled = data.rescheduled
    session.rescheduled_date = data.rescheduled_date
    session.updated_by = data.cancelled_by
    session.version += 1
    db.flush()

    if session.contact_schedule_id:
        _cascade(
            db,
            session,
            "cancel_session",
            lambda: contact_schedule_service.record_session_cancelled(
                db, session.contact_schedule_id
            ),
        )

    logger.info(
        "Contact session %s cancelled (rescheduled=%s)",
        session.session_number,
        session.rescheduled,
        extra=build_log_context(
            org_id=org_id,
            child_id=session.child_id,
            entity_id=session.id,
            operation="cancel_session",
            actor=data.cancelled_by,
        ),
    )
    return session


# =============================================================================
# Queries
# =============================================================================


def default_urgent_review(session: ContactSession) -> bool:
    """Safeguarding concern, early termination, concerning interaction or a serious incident."""
    if session.safeguarding_concerns_raised or session.contact_terminated_early:
        return True
    if session.interaction_quality == InteractionQuality.CONCERNING.value:
        return True
    return any(
        incident.get("severity") in URGENT_INCIDENT_SEVERITIES
        for incident in session.incident_details or []
    )


def requires_urgent_review(
    session: ContactSession,
    predicate: UrgentReviewPredicate = default_urgent_review,
) -> bool:
    """Only completed sessions are candidates; the criteria come from the predicate."""
    if session.status != ContactSessionStatus.COMPLETED.value:
        return False
    return predicate(session)


def list_sessions(
    db: Session,
    org_id: UUID,
    child_id: UUID,
    family_member_id: UUID | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
) -> list[ContactSession]:
    """Sessions for a child, newest first. Date bounds are inclusive."""
    query = db.query(ContactSession).filter(
        ContactSession.organization_id == org_id,
        ContactSession.child_id == child_id,
    )
    if family_member_id:
        query = query.filter(ContactSession.family_member_id == family_member_id)
    if start_date:
        query = query.filter(ContactSession.session_date >= start_date)
    if end_date:
        query = query.filter(ContactSession.session_date <= end_date)
    return query.order_by(
        ContactSession.session_date.desc(),
        ContactSession.scheduled_start_time.desc(),
    ).all()


def list_sessions_requiring_urgent_review(
    db: Session,
    org_id: UUID,
    predicate: UrgentReviewPredicate = default_urgent_review,
) -> list[ContactSession]:
    completed = (
        db.query(ContactSession)
        .filter(
            ContactSession.organization_id == org_id,
            ContactSession.status == ContactSessionStatus.COMPLETED.value,
        )
        .order_by(ContactSession.session_date.desc())
        .all()
    )
    return [s for s in completed if requires_urgent_review(s, predicate)]


def count_upcoming(db: Session, org_id: UUID) -> int:
    return db.query(ContactSession).filter(
        ContactSession.organization_id == org_id,
        ContactSession.status == ContactSessionStatus.SCHEDULED.value,
    ).count()
