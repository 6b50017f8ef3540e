"""Contact session endpoints."""

from datetime import date
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from family_contact.core.deps import get_db
from family_contact.core.exceptions import FamilyContactError
from family_contact.schemas.contact_session import (
    ContactSessionCancel,
    ContactSessionComplete,
    ContactSessionCreate,
    ContactSessionRead,
)
from family_contact.services import contact_session_service

router = APIRouter()


@router.post("", response_model=ContactSessionRead, status_code=status.HTTP_201_CREATED)
def schedule_session(
    data: ContactSessionCreate,
    db: Session = Depends(get_db),
):
    """
    Schedule a contact session.

    Linked sessions increment the schedule's scheduled counter in the
    same transaction.
    """
    try:
        session = contact_session_service.schedule_session(db, data)
        db.commit()
    except FamilyContactError:
        db.rollback()
        raise
    return session


@router.get("", response_model=list[ContactSessionRead])
def list_sessions(
    organization_id: UUID,
    child_id: UUID,
    family_member_id: UUID | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
    db: Session = Depends(get_db),
):
    """List a child's sessions. start_date and end_date are inclusive."""
    return contact_session_service.list_sessions(
        db,
        organization_id,
        child_id,
        family_member_id=family_member_id,
        start_date=start_date,
        end_date=end_date,
    )


@router.get("/urgent-review", response_model=list[ContactSessionRead])
def list_sessions_requiring_urgent_review(
    organization_id: UUID,
    db: Session = Depends(get_db),
):
    return contact_session_service.list_sessions_requiring_urgent_review(db, organization_id)


@router.get("/{session_id}", response_model=ContactSessionRead)
def get_session(
    session_id: UUID,
    organization_id: UUID,
    db: Session = Depends(get_db),
):
    return contact_session_service.require_session(db, organization_id, session_id)


@router.post("/{session_id}/complete", response_model=ContactSessionRead)
def complete_session(
    session_id: UUID,
    organization_id: UUID,
    data: ContactSessionComplete,
    db: Session = Depends(get_db),
):
    try:
        session = contact_session_service.complete_session(db, organization_id, session_id, data)
        db.commit()
    except FamilyContactError:
        db.rollback()
        raise
    return session


@router.post("/{session_id}/cancel", response_model=ContactSessionRead)
def cancel_session(
    session_id: UUID,
    organization_id: UUID,
    data: ContactSessionCancel,
    db: Session = Depends(get_db),
):
    try:
        session = contact_session_service.cancel_session(db, organization_id, session_id, data)
        db.commit()
    except FamilyContactError:
        db.rollback()
        raise
    return session
