"""Contact schedule endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from family_contact.core.deps import get_db
from family_contact.core.exceptions import FamilyContactError
from family_contact.schemas.contact_schedule import (
    ContactScheduleCreate,
    ContactScheduleEnd,
    ContactScheduleRead,
    ContactScheduleReactivate,
    ContactScheduleReview,
    ContactScheduleSuspend,
)
from family_contact.services import contact_schedule_service

router = APIRouter()


@router.post("", response_model=ContactScheduleRead, status_code=status.HTTP_201_CREATED)
def create_schedule(
    data: ContactScheduleCreate,
    db: Session = Depends(get_db),
):
    """
    Create a contact schedule.

    Returns 409 if the family member does not currently allow contact.
    """
    try:
        schedule = contact_schedule_service.create_schedule(db, data)
        db.commit()
    except FamilyContactError:
        db.rollback()
        raise
    return schedule


@router.get("", response_model=list[ContactScheduleRead])
def list_schedules(
    organization_id: UUID,
    child_id: UUID,
    db: Session = Depends(get_db),
):
    return contact_schedule_service.list_schedules(db, organization_id, child_id)


@router.get("/active", response_model=list[ContactScheduleRead])
def list_active_schedules(
    organization_id: UUID,
    child_id: UUID,
    db: Session = Depends(get_db),
):
    return contact_schedule_service.list_active_schedules(db, organization_id, child_id)


@router.get("/due-for-review", response_model=list[ContactScheduleRead])
def list_schedules_due_for_review(
    organization_id: UUID,
    db: Session = Depends(get_db),
):
    return contact_schedule_service.list_schedules_due_for_review(db, organization_id)


@router.get("/{schedule_id}", response_model=ContactScheduleRead)
def get_schedule(
    schedule_id: UUID,
    organization_id: UUID,
    db: Session = Depends(get_db),
):
    return contact_schedule_service.require_schedule(db, organization_id, schedule_id)


@router.post("/{schedule_id}/suspend", response_model=ContactScheduleRead)
def suspend_schedule(
    schedule_id: UUID,
    organization_id: UUID,
    data: ContactScheduleSuspend,
    db: Session = Depends(get_db),
):
    try:
        schedule = contact_schedule_service.suspend_schedule(db, organization_id, schedule_id, data)
        db.commit()
    except FamilyContactError:
        db.rollback()
        raise
    return schedule


@router.post("/{schedule_id}/reactivate", response_model=ContactScheduleRead)
def reactivate_schedule(
    schedule_id: UUID,
    organization_id: UUID,
    data: ContactScheduleReactivate,
    db: Session = Depends(get_db),
):
    try:
        schedule = contact_schedule_service.reactivate_schedule(
            db, organization_id, schedule_id, data
        )
        db.commit()
    except FamilyContactError:
        db.rollback()
        raise
    return schedule


@router.post("/{schedule_id}/review", response_model=ContactScheduleRead)
def review_schedule(
    schedule_id: UUID,
    organization_id: UUID,
    data: ContactScheduleReview,
    db: Session = Depends(get_db),
):
    try:
        schedule = contact_schedule_service.review_schedule(db, organization_id, schedule_id, data)
        db.commit()
    except FamilyContactError:
        db.rollback()
        raise
    return schedule


@router.post("/{schedule_id}/end", response_model=ContactScheduleRead)
def end_schedule(
    schedule_id: UUID,
    organization_id: UUID,
    data: ContactScheduleEnd,
    db: Session = Depends(get_db),
):
    try:
        schedule = contact_schedule_service.end_schedule(db, organization_id, schedule_id, data)
        db.commit()
    except FamilyContactError:
        db.rollback()
        raise
    return schedule
