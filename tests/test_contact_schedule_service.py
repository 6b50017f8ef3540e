"""Tests for contact schedule creation, status changes and review dates."""

import uuid
from datetime import date

import pytest

from family_contact.core.config import settings
from family_contact.core.exceptions import (
    ContactNotAllowedError,
    InvalidTransitionError,
    NotFoundError,
    ValidationFailure,
)
from family_contact.db.enums import ContactScheduleStatus, FamilyMemberStatus, RelationshipType, RiskLevel
from family_contact.schemas.contact_schedule import (
    ContactScheduleEnd,
    ContactScheduleReactivate,
    ContactScheduleReview,
    ContactScheduleSuspend,
)
from family_contact.schemas.family_member import FamilyMemberCreate
from family_contact.schemas.risk_assessment import RiskAssessmentApprove, RiskAssessmentCreate
from family_contact.services import (
    child_service,
    contact_schedule_service,
    family_member_service,
    risk_assessment_service,
)
from family_contact.utils.cadence import today_utc


def test_create_schedule_sets_review_date_and_counters(db, schedule_data):
    schedule = contact_schedule_service.create_schedule(db, schedule_data())

    assert schedule.status == ContactScheduleStatus.ACTIVE.value
    assert schedule.next_review_date == date(2025, 7, 1)
    assert schedule.contact_schedule_number.startswith("CS-")
    assert schedule.total_contacts_scheduled == 0
    assert schedule.total_contacts_completed == 0
    assert schedule.total_contacts_cancelled == 0
    assert schedule.next_contact_date is None
    assert schedule.version == 1


def test_review_date_clamps_at_month_end(db, schedule_data):
    schedule = contact_schedule_service.create_schedule(
        db, schedule_data(start_date=date(2025, 8, 31))
    )
    assert schedule.next_review_date == date(2026, 2, 28)


@pytest.mark.parametrize(
    "status",
    [
        FamilyMemberStatus.SUSPENDED,
        FamilyMemberStatus.RESTRICTED,
        FamilyMemberStatus.DECEASED,
        FamilyMemberStatus.NO_CONTACT,
    ],
)
def test_create_schedule_rejects_inactive_member(db, test_member, schedule_data, status):
    test_member.status = status.value
    db.flush()

    with pytest.raises(ContactNotAllowedError) as exc_info:
        contact_schedule_service.create_schedule(db, schedule_data())

    assert exc_info.value.member_name == "Alex Taylor"
    assert "Alex Taylor" in str(exc_info.value)


def test_create_schedule_requires_existing_member(db, schedule_data):
    with pytest.raises(NotFoundError):
        contact_schedule_service.create_schedule(db, schedule_data(family_member_id=uuid.uuid4()))


def test_create_schedule_requires_existing_child(db, schedule_data):
    with pytest.raises(NotFoundError):
        contact_schedule_service.create_schedule(db, schedule_data(child_id=uuid.uuid4()))


def test_create_schedule_rejects_member_of_another_child(db, test_org, schedule_data):
    other_child = child_service.create_child(db, test_org.id, "Robin", "Lee")
    with pytest.raises(ValidationFailure):
        contact_schedule_service.create_schedule(db, schedule_data(child_id=other_child.id))


def test_list_active_schedules(db, test_org, test_child, schedule_data):
    active = contact_schedule_service.create_schedule(db, schedule_data())
    suspended = contact_schedule_service.create_schedule(db, schedule_data())
    contact_schedule_service.suspend_schedule(
        db, test_org.id, suspended.id, ContactScheduleSuspend(reason="Court order", suspended_by="sw-2")
    )

    result = contact_schedule_service.list_active_schedules(db, test_org.id, test_child.id)
    assert [s.id for s in result] == [active.id]


def test_due_for_review_boundary_is_inclusive(db, test_org, schedule_data):
    schedule = contact_schedule_service.create_schedule(db, schedule_data())

    before = contact_schedule_service.list_schedules_due_for_review(
        db, test_org.id, as_of=date(2025, 6, 30)
    )
    on_the_day = contact_schedule_service.list_schedules_due_for_review(
        db, test_org.id, as_of=date(2025, 7, 1)
    )

    assert before == []
    assert [s.id for s in on_the_day] == [schedule.id]
    assert schedule.is_review_due(date(2025, 7, 1)) is True
    assert schedule.is_review_due(date(2025, 6, 30)) is False


def test_suspended_schedules_are_not_due_for_review(db, test_org, schedule_data):
    schedule = contact_schedule_service.create_schedule(db, schedule_data())
    contact_schedule_service.suspend_schedule(
        db, test_org.id, schedule.id, ContactScheduleSuspend(reason="Paused", suspended_by="sw-2")
    )
    assert contact_schedule_service.list_schedules_due_for_review(
        db, test_org.id, as_of=date(2026, 1, 1)
    ) == []


def test_suspend_appends_note_each_time(db, test_org, schedule_data):
    schedule = contact_schedule_service.create_schedule(db, schedule_data())

    contact_schedule_service.suspend_schedule(
        db, test_org.id, schedule.id, ContactScheduleSuspend(reason="First", suspended_by="sw-2")
    )
    contact_schedule_service.suspend_schedule(
        db, test_org.id, schedule.id, ContactScheduleSuspend(reason="Second", suspended_by="sw-3")
    )

    assert schedule.status == ContactScheduleStatus.SUSPENDED.value
    assert "Suspended: First" in schedule.notes
    assert "Suspended: Second" in schedule.notes
    assert schedule.updated_by == "sw-3"
    assert schedule.version == 3


def test_suspend_unknown_schedule(db, test_org):
    with pytest.raises(NotFoundError):
        contact_schedule_service.suspend_schedule(
            db, test_org.id, uuid.uuid4(), ContactScheduleSuspend(reason="x", suspended_by="sw-2")
        )


def test_ended_schedule_cannot_be_suspended(db, test_org, schedule_data):
    schedule = contact_schedule_service.create_schedule(db, schedule_data())
    contact_schedule_service.end_schedule(
        db, test_org.id, schedule.id, ContactScheduleEnd(reason="Placement ended", ended_by="sw-2")
    )

    assert schedule.status == ContactScheduleStatus.ENDED.value
    assert schedule.ended_date is not None
    with pytest.raises(InvalidTransitionError):
        contact_schedule_service.suspend_schedule(
            db, test_org.id, schedule.id, ContactScheduleSuspend(reason="x", suspended_by="sw-2")
        )


def test_reactivate_rechecks_member(db, test_org, test_member, schedule_data):
    schedule = contact_schedule_service.create_schedule(db, schedule_data())
    contact_schedule_service.suspend_schedule(
        db, test_org.id, schedule.id, ContactScheduleSuspend(reason="Paused", suspended_by="sw-2")
    )

    test_member.status = FamilyMemberStatus.SUSPENDED.value
    db.flush()
    with pytest.raises(ContactNotAllowedError):
        contact_schedule_service.reactivate_schedule(
            db, test_org.id, schedule.id, ContactScheduleReactivate(reactivated_by="sw-2")
        )

    test_member.status = FamilyMemberStatus.ACTIVE.value
    db.flush()
    contact_schedule_service.reactivate_schedule(
        db, test_org.id, schedule.id, ContactScheduleReactivate(reactivated_by="sw-2", reason="Resumed")
    )
    assert schedule.status == ContactScheduleStatus.ACTIVE.value
    assert "Reactivated: Resumed" in schedule.notes


def test_reactivate_requires_suspended(db, test_org, schedule_data):
    schedule = contact_schedule_service.create_schedule(db, schedule_data())
    with pytest.raises(InvalidTransitionError):
        contact_schedule_service.reactivate_schedule(
            db, test_org.id, schedule.id, ContactScheduleReactivate(reactivated_by="sw-2")
        )


def test_review_moves_next_review_date(db, test_org, schedule_data):
    schedule = contact_schedule_service.create_schedule(db, schedule_data())
    contact_schedule_service.review_schedule(
        db,
        test_org.id,
        schedule.id,
        ContactScheduleReview(reviewed_by="iro-1", review_date=date(2025, 6, 20), notes="Going well"),
    )

    assert schedule.last_review_date == date(2025, 6, 20)
    assert schedule.next_review_date == date(2025, 12, 20)
    assert "Going well" in schedule.notes
    assert schedule.version == 2


def test_record_session_counters(db, schedule_data):
    schedule = contact_schedule_service.create_schedule(db, schedule_data())

    contact_schedule_service.record_session_scheduled(db, schedule.id)
    contact_schedule_service.record_session_scheduled(db, schedule.id)
    contact_schedule_service.record_session_completed(db, schedule.id, date(2025, 1, 8))
    contact_schedule_service.record_session_cancelled(db, schedule.id)

    assert schedule.total_contacts_scheduled == 2
    assert schedule.total_contacts_completed == 1
    assert schedule.total_contacts_cancelled == 1
    assert schedule.last_contact_date == date(2025, 1, 8)
    assert schedule.next_contact_date == date(2025, 1, 15)
    assert schedule.version == 5


def test_record_completed_without_outstanding_session(db, schedule_data):
    schedule = contact_schedule_service.create_schedule(db, schedule_data())
    with pytest.raises(ValidationFailure):
        contact_schedule_service.record_session_completed(db, schedule.id, date(2025, 1, 8))
    assert schedule.total_contacts_completed == 0


def test_record_on_missing_schedule_returns_none(db):
    assert contact_schedule_service.record_session_scheduled(db, uuid.uuid4()) is None


def test_risk_gate_requires_current_assessment(db, test_org, test_child, test_member, schedule_data, monkeypatch):
    monkeypatch.setattr(settings, "REQUIRE_CURRENT_RISK_ASSESSMENT", True)

    with pytest.raises(ContactNotAllowedError):
        contact_schedule_service.create_schedule(db, schedule_data())

    assessment = risk_assessment_service.create_assessment(
        db,
        RiskAssessmentCreate(
            child_id=test_child.id,
            family_member_id=test_member.id,
            organization_id=test_org.id,
            assessment_date=today_utc(),
            assessed_by_name="Dana Social Worker",
            overall_risk_level=RiskLevel.LOW,
            risk_summary="Low risk",
            contact_recommended=True,
            recommendation_rationale="Positive relationship",
            created_by="sw-1",
        ),
    )
    risk_assessment_service.approve_assessment(
        db,
        test_org.id,
        assessment.id,
        RiskAssessmentApprove(approved_by="mgr-1", approved_by_name="Morgan", approved_by_role="Manager"),
    )

    schedule = contact_schedule_service.create_schedule(db, schedule_data())
    assert schedule.is_active()


def test_risk_gate_blocks_when_contact_not_recommended(db, test_org, test_child, schedule_data, monkeypatch):
    monkeypatch.setattr(settings, "REQUIRE_CURRENT_RISK_ASSESSMENT", True)
    member = family_member_service.register_family_member(
        db,
        FamilyMemberCreate(
            child_id=test_child.id,
            organization_id=test_org.id,
            first_name="Chris",
            last_name="Taylor",
            relationship_type=RelationshipType.PARENT,
            created_by="sw-1",
        ),
    )
    assessment = risk_assessment_service.create_assessment(
        db,
        RiskAssessmentCreate(
            child_id=test_child.id,
            family_member_id=member.id,
            organization_id=test_org.id,
            assessment_date=today_utc(),
            assessed_by_name="Dana Social Worker",
            overall_risk_level=RiskLevel.HIGH,
            risk_summary="High risk",
            contact_recommended=False,
            recommendation_rationale="Recent incidents",
            created_by="sw-1",
        ),
    )
    risk_assessment_service.approve_assessment(
        db,
        test_org.id,
        assessment.id,
        RiskAssessmentApprove(approved_by="mgr-1", approved_by_name="Morgan", approved_by_role="Manager"),
    )

    with pytest.raises(ContactNotAllowedError, match="does not recommend contact"):
        contact_schedule_service.create_schedule(db, schedule_data(family_member_id=member.id))
