"""Family member registry endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from family_contact.core.deps import get_db
from family_contact.core.exceptions import FamilyContactError
from family_contact.db.models import FamilyMember
from family_contact.schemas.family_member import (
    FamilyMemberCreate,
    FamilyMemberRead,
    FamilyMemberUpdate,
)
from family_contact.services import family_member_service

router = APIRouter()


def _member_to_response(member: FamilyMember) -> FamilyMemberRead:
    response = FamilyMemberRead.model_validate(member)
    response.contact_allowed = member.is_contact_allowed()
    return response


@router.post("", response_model=FamilyMemberRead, status_code=status.HTTP_201_CREATED)
def register_family_member(
    data: FamilyMemberCreate,
    db: Session = Depends(get_db),
):
    """Register a family member against a child."""
    try:
        member = family_member_service.register_family_member(db, data)
        db.commit()
    except FamilyContactError:
        db.rollback()
        raise
    return _member_to_response(member)


@router.get("", response_model=list[FamilyMemberRead])
def list_family_members(
    organization_id: UUID,
    child_id: UUID,
    active_only: bool = False,
    db: Session = Depends(get_db),
):
    members = family_member_service.list_family_members(
        db, organization_id, child_id, active_only=active_only
    )
    return [_member_to_response(m) for m in members]


@router.get("/expired-background-checks", response_model=list[FamilyMemberRead])
def list_expired_background_checks(
    organization_id: UUID,
    db: Session = Depends(get_db),
):
    """Members who need a DBS check but have none in date."""
    members = family_member_service.list_expired_background_checks(db, organization_id)
    return [_member_to_response(m) for m in members]


@router.get("/{member_id}", response_model=FamilyMemberRead)
def get_family_member(
    member_id: UUID,
    organization_id: UUID,
    db: Session = Depends(get_db),
):
    member = family_member_service.require_family_member(db, organization_id, member_id)
    return _member_to_response(member)


@router.patch("/{member_id}", response_model=FamilyMemberRead)
def update_family_member(
    member_id: UUID,
    organization_id: UUID,
    data: FamilyMemberUpdate,
    db: Session = Depends(get_db),
):
    """Update whitelisted fields; omitted fields are left unchanged."""
    try:
        member = family_member_service.update_family_member(db, organization_id, member_id, data)
        db.commit()
    except FamilyContactError:
        db.rollback()
        raise
    return _member_to_response(member)
