"""
Contact schedule manager.

Creates schedules behind the family member permission check, tracks the
scheduled/completed/cancelled counters driven by the session lifecycle,
and works out next contact and next review dates.

Counter updates (record_session_*) are only called by
contact_session_service inside the same transaction as the session
change. They return None when the schedule no longer exists so the
caller can skip the cascade.
"""

import logging
from datetime import date, datetime, timezone
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from family_contact.core.config import settings
from family_contact.core.exceptions import (
    ContactNotAllowedError,
    InvalidTransitionError,
    NotFoundError,
    ValidationFailure,
)
from family_contact.core.structured_logging import build_log_context
from family_contact.db.enums import ContactFrequency, ContactScheduleStatus, CounterType
from family_contact.db.models import ContactSchedule
from family_contact.schemas.contact_schedule import (
    ContactScheduleCreate,
    ContactScheduleEnd,
    ContactScheduleReactivate,
    ContactScheduleReview,
    ContactScheduleSuspend,
)
from family_contact.services import (
    child_service,
    family_member_service,
    number_service,
    risk_assessment_service,
)
from family_contact.utils.cadence import add_months, next_contact_date, today_utc

logger = logging.getLogger(__name__)


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def _check_risk_gate(db: Session, org_id: UUID, child_id: UUID, member) -> None:
    """Require a current approved assessment that recommends contact."""
    assessment = risk_assessment_service.get_current_assessment(
        db, org_id, child_id, member.id
    )
    if assessment is None:
        raise ContactNotAllowedError(member.full_name, "no current approved risk assessment")
    if not assessment.contact_recommended:
        raise ContactNotAllowedError(
            member.full_name,
            f"risk assessment {assessment.assessment_number} does not recommend contact",
        )


# =============================================================================
# Schedule CRUD
# =============================================================================


def create_schedule(db: Session, data: ContactScheduleCreate) -> ContactSchedule:
    """
    Create a contact schedule.

    Validates:
    - Child and family member exist in the organization
    - Family member belongs to the child
    - Family member currently allows contact
    - (optional) a current approved risk assessment recommends contact

    next_review_date = start_date + SCHEDULE_REVIEW_MONTHS.
    """
    org_id = data.organization_id
    child_service.require_child(db, org_id, data.child_id)
    member = family_member_service.require_member_of_child(
        db, org_id, data.child_id, data.family_member_id
    )

    denial = member.contact_denial_reason()
    if denial:
        raise ContactNotAllowedError(member.full_name, denial)

    if settings.REQUIRE_CURRENT_RISK_ASSESSMENT:
        _check_risk_gate(db, org_id, data.child_id, member)

    schedule = ContactSchedule(
        contact_schedule_number=number_service.next_number(
            db, org_id, CounterType.CONTACT_SCHEDULE
        ),
        child_id=data.child_id,
        family_member_id=data.family_member_id,
        organization_id=org_id,
        contact_type=data.contact_type.value,
        contact_frequency=data.contact_frequency.value,
        supervision_required=data.supervision_required,
        supervision_level=data.supervision_level.value if data.supervision_level else None,
        duration_minutes=data.duration_minutes,
        location=data.location,
        status=ContactScheduleStatus.ACTIVE.value,
        start_date=data.start_date,
        next_review_date=add_months(data.start_date, settings.SCHEDULE_REVIEW_MONTHS),
        total_contacts_scheduled=0,
        total_contacts_completed=0,
        total_contacts_cancelled=0,
        created_by=data.created_by,
        version=1,
    )
    db.add(schedule)
    db.flush()

    logger.info(
        "Contact schedule %s created (frequency=%s)",
        schedule.contact_schedule_number,
        schedule.contact_frequency,
        extra=build_log_context(
            org_id=org_id,
            child_id=schedule.child_id,
            entity_id=schedule.id,
            operation="create_schedule",
            actor=data.created_by,
        ),
    )
    return schedule


def get_schedule(db: Session, org_id: UUID, schedule_id: UUID) -> ContactSchedule | None:
    """Get contact schedule by ID (org-scoped)."""
    return db.query(ContactSchedule).filter(
        ContactSchedule.id == schedule_id,
        ContactSchedule.organization_id == org_id,
    ).first()


def require_schedule(db: Session, org_id: UUID, schedule_id: UUID) -> ContactSchedule:
    schedule = get_schedule(db, org_id, schedule_id)
    if not schedule:
        raise NotFoundError("Contact schedule", schedule_id)
    return schedule


def list_schedules(db: Session, org_id: UUID, child_id: UUID) -> list[ContactSchedule]:
    """All schedules for a child, newest start date first."""
    return (
        db.query(ContactSchedule)
        .filter(
            ContactSchedule.organization_id == org_id,
            ContactSchedule.child_id == child_id,
        )
        .order_by(ContactSchedule.start_date.desc())
        .all()
    )


def list_active_schedules(db: Session, org_id: UUID, child_id: UUID) -> list[ContactSchedule]:
    return [s for s in list_schedules(db, org_id, child_id) if s.is_active()]


def list_schedules_due_for_review(
    db: Session,
    org_id: UUID,
    as_of: date | None = None,
) -> list[ContactSchedule]:
    """Active schedules whose next review date is today or earlier (inclusive)."""
    as_of = as_of or today_utc()
    return (
        db.query(ContactSchedule)
        .filter(
            ContactSchedule.organization_id == org_id,
            ContactSchedule.status == ContactScheduleStatus.ACTIVE.value,
            ContactSchedule.next_review_date <= as_of,
        )
        .order_by(ContactSchedule.next_review_date)
        .all()
    )


# =============================================================================
# Status changes
# =============================================================================


def suspend_schedule(
    db: Session,
    org_id: UUID,
    schedule_id: UUID,
    data: ContactScheduleSuspend,
) -> ContactSchedule:
    """
    Suspend a schedule.

    Re-suspending an already suspended schedule appends another note.
    Ended schedules cannot be suspended.
    """
    schedule = require_schedule(db, org_id, schedule_id)
    if schedule.status == ContactScheduleStatus.ENDED.value:
        raise InvalidTransitionError("Contact schedule", schedule.status, "suspend")

    schedule.status = ContactScheduleStatus.SUSPENDED.value
    schedule.append_note(f"Suspended: {data.reason} ({_timestamp()})")
    schedule.updated_by = data.suspended_by
    schedule.version += 1
    db.flush()

    logger.info(
        "Contact schedule %s suspended",
        schedule.contact_schedule_number,
        extra=build_log_context(
            org_id=org_id,
            entity_id=schedule.id,
            operation="suspend_schedule",
            actor=data.suspended_by,
        ),
    )
    return schedule


def reactivate_schedule(
    db: Session,
    org_id: UUID,
    schedule_id: UUID,
    data: ContactScheduleReactivate,
) -> ContactSchedule:
    """Return a suspended schedule to active. The member must still allow contact."""
    schedule = require_schedule(db, org_id, schedule_id)
    if schedule.status != ContactScheduleStatus.SUSPENDED.value:
        raise InvalidTransitionError("Contact schedule", schedule.status, "reactivate")

    member = family_member_service.require_family_member(db, org_id, schedule.family_member_id)
    denial = member.contact_denial_reason()
    if denial:
        raise ContactNotAllowedError(member.full_name, denial)

    schedule.status = ContactScheduleStatus.ACTIVE.value
    note = f"Reactivated ({_timestamp()})"
    if data.reason:
        note = f"Reactivated: {data.reason} ({_timestamp()})"
    schedule.append_note(note)
    schedule.updated_by = data.reactivated_by
    schedule.version += 1
    db.flush()

    logger.info(
        "Contact schedule %s reactivated",
        schedule.contact_schedule_number,
        extra=build_log_context(
            org_id=org_id,
            entity_id=schedule.id,
            operation="reactivate_schedule",
            actor=data.reactivated_by,
        ),
    )
    return schedule


def end_schedule(
    db: Session,
    org_id: UUID,
    schedule_id: UUID,
    data: ContactScheduleEnd,
) -> ContactSchedule:
    schedule = require_schedule(db, org_id, schedule_id)
    if schedule.status == ContactScheduleStatus.ENDED.value:
        raise InvalidTransitionError("Contact schedule", schedule.status, "end")

    schedule.status = ContactScheduleStatus.ENDED.value
    schedule.ended_date = today_utc()
    schedule.append_note(f"Ended: {data.reason} ({_timestamp()})")
    schedule.updated_by = data.ended_by
    schedule.version += 1
    db.flush()

    logger.info(
        "Contact schedule %s ended",
        schedule.contact_schedule_number,
        extra=build_log_context(
            org_id=org_id,
            entity_id=schedule.id,
            operation="end_schedule",
            actor=data.ended_by,
        ),
    )
    return schedule


def review_schedule(
    db: Session,
    org_id: UUID,
    schedule_id: UUID,
    data: ContactScheduleReview,
) -> ContactSchedule:
    """Record an explicit review and push next_review_date out from the review date."""
    schedule = require_schedule(db, org_id, schedule_id)
    if schedule.status == ContactScheduleStatus.ENDED.value:
        raise InvalidTransitionError("Contact schedule", schedule.status, "review")

    review_date = data.review_date or today_utc()
    schedule.last_review_date = review_date
    schedule.next_review_date = add_months(review_date, settings.SCHEDULE_REVIEW_MONTHS)
    entry = f"Reviewed on {review_date.isoformat()} by {data.reviewed_by}"
    if data.notes:
        entry += f": {data.notes}"
    schedule.append_note(f"{entry} ({_timestamp()})")
    schedule.updated_by = data.reviewed_by
    schedule.version += 1
    db.flush()

    logger.info(
        "Contact schedule %s reviewed (next_review=%s)",
        schedule.contact_schedule_number,
        schedule.next_review_date.isoformat(),
        extra=build_log_context(
            org_id=org_id,
            entity_id=schedule.id,
            operation="review_schedule",
            actor=data.reviewed_by,
        ),
    )
    return schedule


# =============================================================================
# Session counter cascades
# =============================================================================


def _lock_schedule(db: Session, schedule_id: UUID) -> ContactSchedule | None:
    return db.execute(
        select(ContactSchedule)
        .where(ContactSchedule.id == schedule_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    ).scalar_one_or_none()


def _require_outstanding(schedule: ContactSchedule) -> None:
    if schedule.outstanding_sessions <= 0:
        raise ValidationFailure(
            f"Contact schedule {schedule.contact_schedule_number} has no outstanding sessions"
        )


def record_session_scheduled(db: Session, schedule_id: UUID) -> ContactSchedule | None:
    """Increment the scheduled counter. Returns None if the schedule is gone."""
    schedule = _lock_schedule(db, schedule_id)
    if schedule is None:
        return None
    schedule.total_contacts_scheduled += 1
    schedule.version += 1
    db.flush()
    return schedule


def record_session_completed(
    db: Session,
    schedule_id: UUID,
    session_date: date,
    frequency: ContactFrequency | str | None = None,
) -> ContactSchedule | None:
    """
    Count a completed session and move the next contact date.

    last_contact_date = session_date;
    next_contact_date = session_date + offset(frequency). The schedule's own
    frequency is used when none is given.
    """
    schedule = _lock_schedule(db, schedule_id)
    if schedule is None:
        return None
    _require_outstanding(schedule)
    schedule.total_contacts_completed += 1
    schedule.last_contact_date = session_date
    schedule.next_contact_date = next_contact_date(
        session_date, frequency or schedule.contact_frequency
    )
    schedule.version += 1
    db.flush()
    return schedule


def record_session_cancelled(db: Session, schedule_id: UUID) -> ContactSchedule | None:
    """Increment the cancelled counter. Returns None if the schedule is gone."""
    schedule = _lock_schedule(db, schedule_id)
    if schedule is None:
        return None
    _require_outstanding(schedule)
    schedule.total_contacts_cancelled += 1
    schedule.version += 1
    db.flush()
    return schedule
