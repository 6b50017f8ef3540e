"""Pydantic schemas for contact schedules."""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, Field

from family_contact.db.enums import (
    ContactFrequency,
    ContactScheduleStatus,
    ContactType,
    SupervisionLevel,
)


class ContactScheduleCreate(BaseModel):
    """Request to create a contact schedule."""
    child_id: UUID
    family_member_id: UUID
    organization_id: UUID
    contact_type: ContactType
    contact_frequency: ContactFrequency
    supervision_required: bool = False
    supervision_level: SupervisionLevel | None = None
    duration_minutes: int | None = Field(None, ge=1, le=24 * 60)
    location: str | None = Field(None, max_length=255)
    start_date: date
    created_by: str = Field(..., min_length=1, max_length=200)


class ContactScheduleSuspend(BaseModel):
    reason: str = Field(..., min_length=1, max_length=2000)
    suspended_by: str = Field(..., min_length=1, max_length=200)


class ContactScheduleReview(BaseModel):
    """Record an explicit review; next review date is recomputed from review_date."""
    reviewed_by: str = Field(..., min_length=1, max_length=200)
    review_date: date | None = None
    notes: str | None = Field(None, max_length=2000)


class ContactScheduleEnd(BaseModel):
    reason: str = Field(..., min_length=1, max_length=2000)
    ended_by: str = Field(..., min_length=1, max_length=200)


class ContactScheduleReactivate(BaseModel):
    reactivated_by: str = Field(..., min_length=1, max_length=200)
    reason: str | None = Field(None, max_length=2000)


class ContactScheduleRead(BaseModel):
    """Full contact schedule response."""
    id: UUID
    contact_schedule_number: str
    child_id: UUID
    family_member_id: UUID
    organization_id: UUID
    contact_type: ContactType
    contact_frequency: ContactFrequency
    supervision_required: bool
    supervision_level: SupervisionLevel | None
    duration_minutes: int | None
    location: str | None
    status: ContactScheduleStatus
    start_date: date
    last_contact_date: date | None
    next_contact_date: date | None
    last_review_date: date | None
    next_review_date: date
    ended_date: date | None
    total_contacts_scheduled: int
    total_contacts_completed: int
    total_contacts_cancelled: int
    notes: str | None
    created_by: str
    updated_by: str | None
    created_at: datetime
    updated_at: datetime
    version: int

    model_config = {"from_attributes": True}
