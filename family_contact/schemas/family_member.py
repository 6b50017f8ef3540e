"""Pydantic schemas for family members."""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, Field

from family_contact.db.enums import ContactRestrictionLevel, FamilyMemberStatus, RelationshipType


class FamilyMemberCreate(BaseModel):
    """Request to register a family member against a child."""
    child_id: UUID
    organization_id: UUID
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    relationship_type: RelationshipType
    has_parental_responsibility: bool = False
    contact_restriction_level: ContactRestrictionLevel = ContactRestrictionLevel.NONE
    phone: str | None = Field(None, max_length=30)
    email: str | None = Field(None, max_length=255)
    dbs_check_required: bool = False
    dbs_check_date: date | None = None
    dbs_check_expiry_date: date | None = None
    notes: str | None = Field(None, max_length=5000)
    created_by: str = Field(..., min_length=1, max_length=200)


class FamilyMemberUpdate(BaseModel):
    """
    Request to update a family member (partial).

    Only the fields listed here can change; identity and ownership
    (child, organization, number) are fixed at registration.
    """
    first_name: str | None = Field(None, min_length=1, max_length=100)
    last_name: str | None = Field(None, min_length=1, max_length=100)
    relationship_type: RelationshipType | None = None
    has_parental_responsibility: bool | None = None
    status: FamilyMemberStatus | None = None
    contact_restriction_level: ContactRestrictionLevel | None = None
    phone: str | None = Field(None, max_length=30)
    email: str | None = Field(None, max_length=255)
    dbs_check_required: bool | None = None
    dbs_check_date: date | None = None
    dbs_check_expiry_date: date | None = None
    notes: str | None = Field(None, max_length=5000)
    updated_by: str = Field(..., min_length=1, max_length=200)


class FamilyMemberRead(BaseModel):
    """Full family member response."""
    id: UUID
    family_member_number: str
    child_id: UUID
    organization_id: UUID
    first_name: str
    last_name: str
    relationship_type: RelationshipType
    has_parental_responsibility: bool
    status: FamilyMemberStatus
    contact_restriction_level: ContactRestrictionLevel
    phone: str | None
    email: str | None
    dbs_check_required: bool
    dbs_check_date: date | None
    dbs_check_expiry_date: date | None
    notes: str | None
    contact_allowed: bool = False
    created_by: str
    updated_by: str | None
    created_at: datetime
    updated_at: datetime
    version: int

    model_config = {"from_attributes": True}
