"""Tests for the contact session lifecycle and its schedule counter cascade."""

import logging
import uuid
from datetime import date

import pytest
from sqlalchemy.exc import OperationalError

from family_contact.core.config import settings
from family_contact.core.exceptions import (
    CascadeInconsistencyError,
    ContactNotAllowedError,
    InvalidTransitionError,
    NotFoundError,
    ValidationFailure,
)
from family_contact.db.enums import (
    AttendanceStatus,
    ContactFrequency,
    ContactSessionStatus,
    FamilyMemberStatus,
    IncidentSeverity,
    InteractionQuality,
)
from family_contact.db.models import ContactSchedule
from family_contact.schemas.contact_schedule import ContactScheduleSuspend
from family_contact.schemas.contact_session import (
    ContactSessionCancel,
    ContactSessionComplete,
    ContactSessionCreate,
    IncidentDetail,
)
from family_contact.services import contact_schedule_service, contact_session_service


@pytest.fixture
def schedule(db, schedule_data):
    return contact_schedule_service.create_schedule(db, schedule_data())


def _session_data(org, child, member, schedule=None, **overrides) -> ContactSessionCreate:
    values = dict(
        child_id=child.id,
        family_member_id=member.id,
        organization_id=org.id,
        contact_schedule_id=schedule.id if schedule else None,
        session_date=date(2025, 1, 8),
        scheduled_start_time="14:00",
        scheduled_end_time="16:00",
        created_by="sw-1",
    )
    values.update(overrides)
    return ContactSessionCreate(**values)


def _completion(**overrides) -> ContactSessionComplete:
    values = dict(
        actual_start_time="14:05",
        actual_end_time="15:50",
        child_attendance=AttendanceStatus.ATTENDED,
        family_member_attendance=AttendanceStatus.ATTENDED,
        interaction_quality=InteractionQuality.GOOD,
        completed_by="cw-1",
    )
    values.update(overrides)
    return ContactSessionComplete(**values)


def _cancellation(**overrides) -> ContactSessionCancel:
    values = dict(cancelled_by="sw-1", cancellation_reason="Child unwell")
    values.update(overrides)
    return ContactSessionCancel(**values)


def test_weekly_scenario(db, test_org, test_child, test_member, schedule):
    """Weekly schedule from 2025-01-01, session on 2025-01-08 completed."""
    session = contact_session_service.schedule_session(
        db, _session_data(test_org, test_child, test_member, schedule)
    )
    assert session.status == ContactSessionStatus.SCHEDULED.value
    assert session.session_number.startswith("SESS-")
    assert schedule.total_contacts_scheduled == 1

    contact_session_service.complete_session(db, test_org.id, session.id, _completion())

    assert session.status == ContactSessionStatus.COMPLETED.value
    assert session.duration_minutes == 105
    assert session.completed_date is not None
    assert session.version == 2
    assert schedule.total_contacts_completed == 1
    assert schedule.last_contact_date == date(2025, 1, 8)
    assert schedule.next_contact_date == date(2025, 1, 15)


def test_monthly_schedule_clamps_month_end(db, test_org, test_child, test_member, schedule_data):
    schedule = contact_schedule_service.create_schedule(
        db, schedule_data(contact_frequency=ContactFrequency.MONTHLY)
    )
    session = contact_session_service.schedule_session(
        db,
        _session_data(test_org, test_child, test_member, schedule, session_date=date(2025, 1, 31)),
    )
    contact_session_service.complete_session(db, test_org.id, session.id, _completion())

    assert schedule.next_contact_date == date(2025, 2, 28)


def test_cancel_then_complete_fails(db, test_org, test_child, test_member, schedule):
    session = contact_session_service.schedule_session(
        db, _session_data(test_org, test_child, test_member, schedule)
    )
    contact_session_service.cancel_session(db, test_org.id, session.id, _cancellation())

    assert session.status == ContactSessionStatus.CANCELLED.value
    assert session.cancellation_date is not None
    assert schedule.total_contacts_scheduled == 1
    assert schedule.total_contacts_cancelled == 1

    with pytest.raises(InvalidTransitionError):
        contact_session_service.complete_session(db, test_org.id, session.id, _completion())
    assert schedule.total_contacts_completed == 0


def test_completed_session_cannot_be_cancelled(db, test_org, test_child, test_member):
    session = contact_session_service.schedule_session(
        db, _session_data(test_org, test_child, test_member)
    )
    contact_session_service.complete_session(db, test_org.id, session.id, _completion())
    with pytest.raises(InvalidTransitionError):
        contact_session_service.cancel_session(db, test_org.id, session.id, _cancellation())


def test_counter_invariant_holds_over_mixed_sequence(db, test_org, test_child, test_member, schedule):
    sessions = [
        contact_session_service.schedule_session(
            db,
            _session_data(
                test_org, test_child, test_member, schedule, session_date=date(2025, 1, 8 + i)
            ),
        )
        for i in range(4)
    ]
    contact_session_service.complete_session(db, test_org.id, sessions[0].id, _completion())
    contact_session_service.cancel_session(db, test_org.id, sessions[1].id, _cancellation())
    contact_session_service.complete_session(db, test_org.id, sessions[2].id, _completion())

    assert schedule.total_contacts_scheduled == 4
    assert schedule.total_contacts_completed == 2
    assert schedule.total_contacts_cancelled == 1
    assert schedule.total_contacts_scheduled >= (
        schedule.total_contacts_completed + schedule.total_contacts_cancelled
    )
    assert schedule.outstanding_sessions == 1


def test_ad_hoc_session_touches_no_schedule(db, test_org, test_child, test_member, schedule):
    session = contact_session_service.schedule_session(
        db, _session_data(test_org, test_child, test_member)
    )
    contact_session_service.complete_session(db, test_org.id, session.id, _completion())

    assert session.contact_schedule_id is None
    assert schedule.total_contacts_scheduled == 0
    assert schedule.total_contacts_completed == 0


def test_linked_schedule_must_exist(db, test_org, test_child, test_member):
    data = _session_data(test_org, test_child, test_member, contact_schedule_id=uuid.uuid4())
    with pytest.raises(NotFoundError):
        contact_session_service.schedule_session(db, data)


def test_linked_schedule_must_be_active(db, test_org, test_child, test_member, schedule):
    contact_schedule_service.suspend_schedule(
        db, test_org.id, schedule.id, ContactScheduleSuspend(reason="Paused", suspended_by="sw-2")
    )
    with pytest.raises(ContactNotAllowedError):
        contact_session_service.schedule_session(
            db, _session_data(test_org, test_child, test_member, schedule)
        )


def test_linked_session_rechecks_member_permission(db, test_org, test_child, test_member, schedule):
    test_member.status = FamilyMemberStatus.DECEASED.value
    db.flush()

    assert schedule.is_active()
    with pytest.raises(ContactNotAllowedError):
        contact_session_service.schedule_session(
            db, _session_data(test_org, test_child, test_member, schedule)
        )
    assert schedule.total_contacts_scheduled == 0


def test_ad_hoc_session_member_must_belong_to_child(db, test_org, test_child, other_child_member):
    with pytest.raises(ValidationFailure):
        contact_session_service.schedule_session(
            db, _session_data(test_org, test_child, other_child_member)
        )


def test_existing_session_completes_after_schedule_suspended(
    db, test_org, test_child, test_member, schedule
):
    session = contact_session_service.schedule_session(
        db, _session_data(test_org, test_child, test_member, schedule)
    )
    contact_schedule_service.suspend_schedule(
        db, test_org.id, schedule.id, ContactScheduleSuspend(reason="Paused", suspended_by="sw-2")
    )

    contact_session_service.complete_session(db, test_org.id, session.id, _completion())
    assert schedule.total_contacts_completed == 1


def test_scheduled_end_must_follow_start(db, test_org, test_child, test_member):
    data = _session_data(
        test_org, test_child, test_member, scheduled_start_time="16:00", scheduled_end_time="15:00"
    )
    with pytest.raises(ValidationFailure):
        contact_session_service.schedule_session(db, data)


def test_actual_end_must_follow_start(db, test_org, test_child, test_member):
    session = contact_session_service.schedule_session(
        db, _session_data(test_org, test_child, test_member)
    )
    with pytest.raises(ValidationFailure):
        contact_session_service.complete_session(
            db,
            test_org.id,
            session.id,
            _completion(actual_start_time="15:00", actual_end_time="14:00"),
        )
    assert session.status == ContactSessionStatus.SCHEDULED.value


def test_rescheduled_cancellation_needs_date(db, test_org, test_child, test_member):
    session = contact_session_service.schedule_session(
        db, _session_data(test_org, test_child, test_member)
    )
    with pytest.raises(ValidationFailure):
        contact_session_service.cancel_session(
            db, test_org.id, session.id, _cancellation(rescheduled=True)
        )

    contact_session_service.cancel_session(
        db,
        test_org.id,
        session.id,
        _cancellation(rescheduled=True, rescheduled_date=date(2025, 1, 15)),
    )
    assert session.rescheduled_date == date(2025, 1, 15)


def test_unknown_session_is_not_found(db, test_org):
    with pytest.raises(NotFoundError):
        contact_session_service.complete_session(db, test_org.id, uuid.uuid4(), _completion())
    with pytest.raises(NotFoundError):
        contact_session_service.cancel_session(db, test_org.id, uuid.uuid4(), _cancellation())


def test_vanished_schedule_skips_cascade(db, test_org, test_child, test_member, schedule, caplog):
    session = contact_session_service.schedule_session(
        db, _session_data(test_org, test_child, test_member, schedule)
    )
    db.query(ContactSchedule).filter(ContactSchedule.id == schedule.id).delete()
    db.flush()

    with caplog.at_level(logging.WARNING):
        contact_session_service.complete_session(db, test_org.id, session.id, _completion())

    assert session.status == ContactSessionStatus.COMPLETED.value
    assert "no longer exists" in caplog.text


def test_cascade_retries_transient_failure(db, test_org, test_child, test_member, schedule, monkeypatch):
    session = contact_session_service.schedule_session(
        db, _session_data(test_org, test_child, test_member, schedule)
    )
    original = contact_schedule_service.record_session_completed
    calls = {"count": 0}

    def flaky(*args, **kwargs):
        calls["count"] += 1
        if calls["count"] == 1:
            raise OperationalError("UPDATE contact_schedules", {}, Exception("database is locked"))
        return original(*args, **kwargs)

    monkeypatch.setattr(contact_schedule_service, "record_session_completed", flaky)
    contact_session_service.complete_session(db, test_org.id, session.id, _completion())

    assert calls["count"] == 2
    assert schedule.total_contacts_completed == 1


def test_cascade_exhaustion_raises(db, test_org, test_child, test_member, schedule, monkeypatch):
    session = contact_session_service.schedule_session(
        db, _session_data(test_org, test_child, test_member, schedule)
    )
    db.commit()

    def broken(*args, **kwargs):
        raise OperationalError("UPDATE contact_schedules", {}, Exception("database is locked"))

    monkeypatch.setattr(contact_schedule_service, "record_session_cancelled", broken)

    with pytest.raises(CascadeInconsistencyError) as exc_info:
        contact_session_service.cancel_session(db, test_org.id, session.id, _cancellation())
    assert exc_info.value.attempts == settings.CASCADE_MAX_ATTEMPTS

    db.rollback()
    assert schedule.total_contacts_cancelled == 0
    assert session.status == ContactSessionStatus.SCHEDULED.value


def test_list_sessions_filters_inclusive_range(db, test_org, test_child, test_member):
    for day in (5, 8, 12, 20):
        contact_session_service.schedule_session(
            db, _session_data(test_org, test_child, test_member, session_date=date(2025, 1, day))
        )

    result = contact_session_service.list_sessions(
        db,
        test_org.id,
        test_child.id,
        family_member_id=test_member.id,
        start_date=date(2025, 1, 8),
        end_date=date(2025, 1, 12),
    )
    assert [s.session_date for s in result] == [date(2025, 1, 12), date(2025, 1, 8)]


def test_clock_times_stored_zero_padded(db, test_org, test_child, test_member):
    early = contact_session_service.schedule_session(
        db,
        _session_data(
            test_org, test_child, test_member, scheduled_start_time="9:00", scheduled_end_time="9:45"
        ),
    )
    late = contact_session_service.schedule_session(
        db, _session_data(test_org, test_child, test_member)
    )

    assert early.scheduled_start_time == "09:00"
    assert early.scheduled_end_time == "09:45"
    result = contact_session_service.list_sessions(db, test_org.id, test_child.id)
    assert [s.id for s in result] == [late.id, early.id]


def test_clock_time_rejects_out_of_range_seconds(test_org, test_child, test_member):
    with pytest.raises(ValueError):
        _session_data(test_org, test_child, test_member, scheduled_start_time="14:00:75")


def test_urgent_review_default_predicate(db, test_org, test_child, test_member):
    calm = contact_session_service.schedule_session(
        db, _session_data(test_org, test_child, test_member)
    )
    serious = contact_session_service.schedule_session(
        db, _session_data(test_org, test_child, test_member, session_date=date(2025, 1, 9))
    )
    pending = contact_session_service.schedule_session(
        db, _session_data(test_org, test_child, test_member, session_date=date(2025, 1, 10))
    )
    contact_session_service.complete_session(db, test_org.id, calm.id, _completion())
    contact_session_service.complete_session(
        db,
        test_org.id,
        serious.id,
        _completion(
            incidents_occurred=True,
            incident_details=[
                IncidentDetail(
                    incident_type="verbal",
                    description="Raised voice",
                    action_taken="Contact paused",
                    severity=IncidentSeverity.HIGH,
                )
            ],
        ),
    )

    assert contact_session_service.requires_urgent_review(serious) is True
    assert contact_session_service.requires_urgent_review(calm) is False
    assert contact_session_service.requires_urgent_review(pending) is False
    assert serious.has_concerns() is True
    assert calm.was_successful() is True

    urgent = contact_session_service.list_sessions_requiring_urgent_review(db, test_org.id)
    assert [s.id for s in urgent] == [serious.id]


def test_urgent_review_accepts_caller_predicate(db, test_org, test_child, test_member):
    session = contact_session_service.schedule_session(
        db, _session_data(test_org, test_child, test_member)
    )
    contact_session_service.complete_session(
        db, test_org.id, session.id, _completion(interaction_quality=InteractionQuality.POOR)
    )

    assert contact_session_service.requires_urgent_review(session) is False
    assert contact_session_service.requires_urgent_review(
        session, lambda s: s.interaction_quality == InteractionQuality.POOR.value
    ) is True
