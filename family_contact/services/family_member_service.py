"""Family member registry - registration, updates and the contact permission check."""

import logging
from datetime import date
from uuid import UUID

from dateutil.relativedelta import relativedelta
from sqlalchemy.orm import Session

from family_contact.core.config import settings
from family_contact.core.exceptions import NotFoundError, ValidationFailure
from family_contact.core.structured_logging import build_log_context
from family_contact.db.enums import CounterType, FamilyMemberStatus
from family_contact.db.models import FamilyMember
from family_contact.schemas.family_member import FamilyMemberCreate, FamilyMemberUpdate
from family_contact.services import child_service, number_service

logger = logging.getLogger(__name__)

# Fields that can be cleared (set to None) through an update
CLEARABLE_FIELDS = {"phone", "email", "dbs_check_date", "dbs_check_expiry_date", "notes"}


def _default_dbs_expiry(check_date: date | None) -> date | None:
    if check_date is None:
        return None
    return check_date + relativedelta(years=settings.BACKGROUND_CHECK_VALIDITY_YEARS)


def register_family_member(db: Session, data: FamilyMemberCreate) -> FamilyMember:
    """
    Register a family member against a child.

    The child must exist in the organization. New members start ACTIVE.
    """
    child_service.require_child(db, data.organization_id, data.child_id)

    member = FamilyMember(
        family_member_number=number_service.next_number(
            db, data.organization_id, CounterType.FAMILY_MEMBER
        ),
        child_id=data.child_id,
        organization_id=data.organization_id,
        first_name=data.first_name,
        last_name=data.last_name,
        relationship_type=data.relationship_type.value,
        has_parental_responsibility=data.has_parental_responsibility,
        contact_restriction_level=data.contact_restriction_level.value,
        phone=data.phone,
        email=data.email,
        dbs_check_required=data.dbs_check_required,
        dbs_check_date=data.dbs_check_date,
        dbs_check_expiry_date=data.dbs_check_expiry_date or _default_dbs_expiry(data.dbs_check_date),
        notes=data.notes,
        status=FamilyMemberStatus.ACTIVE.value,
        created_by=data.created_by,
        version=1,
    )
    db.add(member)
    db.flush()

    logger.info(
        "Family member %s registered",
        member.family_member_number,
        extra=build_log_context(
            org_id=member.organization_id,
            child_id=member.child_id,
            entity_id=member.id,
            operation="register_family_member",
            actor=data.created_by,
        ),
    )
    return member


def get_family_member(db: Session, org_id: UUID, member_id: UUID) -> FamilyMember | None:
    """Get family member by ID (org-scoped)."""
    return db.query(FamilyMember).filter(
        FamilyMember.id == member_id,
        FamilyMember.organization_id == org_id,
    ).first()


def require_family_member(db: Session, org_id: UUID, member_id: UUID) -> FamilyMember:
    member = get_family_member(db, org_id, member_id)
    if not member:
        raise NotFoundError("Family member", member_id)
    return member


def require_member_of_child(
    db: Session, org_id: UUID, child_id: UUID, member_id: UUID
) -> FamilyMember:
    """Load a family member and check they are registered against child_id."""
    member = require_family_member(db, org_id, member_id)
    if member.child_id != child_id:
        raise ValidationFailure(
            "Family member is not registered against this child", field="family_member_id"
        )
    return member


def list_family_members(
    db: Session,
    org_id: UUID,
    child_id: UUID,
    active_only: bool = False,
) -> list[FamilyMember]:
    """List a child's family members ordered by relationship type, then surname."""
    query = db.query(FamilyMember).filter(
        FamilyMember.organization_id == org_id,
        FamilyMember.child_id == child_id,
    )
    if active_only:
        query = query.filter(FamilyMember.status == FamilyMemberStatus.ACTIVE.value)
    return query.order_by(FamilyMember.relationship_type, FamilyMember.last_name).all()


def update_family_member(
    db: Session,
    org_id: UUID,
    member_id: UUID,
    data: FamilyMemberUpdate,
) -> FamilyMember:
    """
    Update family member fields.

    Uses exclude_unset=True so only explicitly provided fields are updated.
    None values are applied only to clearable fields. Always bumps version.
    """
    member = require_family_member(db, org_id, member_id)
    update_data = data.model_dump(exclude_unset=True)
    updated_by = update_data.pop("updated_by")

    for field, value in update_data.items():
        if value is None and field not in CLEARABLE_FIELDS:
            continue
        setattr(member, field, getattr(value, "value", value))

    if "dbs_check_date" in update_data and "dbs_check_expiry_date" not in update_data:
        member.dbs_check_expiry_date = _default_dbs_expiry(member.dbs_check_date)

    member.updated_by = updated_by
    member.version += 1
    db.flush()

    logger.info(
        "Family member %s updated (fields=%s)",
        member.family_member_number,
        ",".join(sorted(update_data)),
        extra=build_log_context(
            org_id=org_id,
            entity_id=member.id,
            operation="update_family_member",
            actor=updated_by,
        ),
    )
    return member


def is_contact_allowed(member: FamilyMember, as_of: date | None = None) -> bool:
    """Contact permission predicate used to gate schedule creation."""
    return member.is_contact_allowed(as_of)


def list_expired_background_checks(
    db: Session,
    org_id: UUID,
    as_of: date | None = None,
) -> list[FamilyMember]:
    """Members who require a DBS check that is missing or out of date."""
    members = db.query(FamilyMember).filter(
        FamilyMember.organization_id == org_id,
        FamilyMember.dbs_check_required.is_(True),
    ).all()
    return [m for m in members if not m.has_valid_dbs_check(as_of)]
