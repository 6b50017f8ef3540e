"""Pydantic schemas for contact sessions."""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from family_contact.db.enums import (
    AttendanceStatus,
    ContactSessionStatus,
    IncidentSeverity,
    InteractionQuality,
)
from family_contact.utils.cadence import format_clock_time, parse_clock_time


def _check_clock_time(value: str | None) -> str | None:
    if value is None:
        return value
    # Always stored as zero-padded HH:MM
    return format_clock_time(parse_clock_time(value))


class ContactSessionCreate(BaseModel):
    """Request to schedule a contact session (ad-hoc when no schedule is linked)."""
    child_id: UUID
    family_member_id: UUID
    organization_id: UUID
    contact_schedule_id: UUID | None = None
    session_date: date
    scheduled_start_time: str = Field(..., description="HH:MM")
    scheduled_end_time: str = Field(..., description="HH:MM")
    supervised: bool = False
    supervisor_name: str | None = Field(None, max_length=200)
    created_by: str = Field(..., min_length=1, max_length=200)

    @field_validator("scheduled_start_time", "scheduled_end_time")
    @classmethod
    def validate_times(cls, v: str) -> str:
        return _check_clock_time(v)


class IncidentDetail(BaseModel):
    """Incident recorded during a session."""
    time: str | None = None
    incident_type: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1, max_length=2000)
    action_taken: str = Field(..., min_length=1, max_length=2000)
    severity: IncidentSeverity
    reported_to: str | None = None


class ContactSessionComplete(BaseModel):
    """Observations recorded when a session took place."""
    actual_start_time: str | None = Field(None, description="HH:MM")
    actual_end_time: str | None = Field(None, description="HH:MM")
    child_attendance: AttendanceStatus
    family_member_attendance: AttendanceStatus
    interaction_quality: InteractionQuality | None = None
    overall_assessment: str | None = Field(None, max_length=5000)
    child_views_summary: str | None = Field(None, max_length=5000)
    safeguarding_concerns_raised: bool = False
    safeguarding_concerns_details: str | None = Field(None, max_length=5000)
    incidents_occurred: bool = False
    incident_details: list[IncidentDetail] = Field(default_factory=list)
    contact_terminated_early: bool = False
    termination_reason: str | None = Field(None, max_length=2000)
    general_notes: str | None = Field(None, max_length=5000)
    completed_by: str = Field(..., min_length=1, max_length=200)

    @field_validator("actual_start_time", "actual_end_time")
    @classmethod
    def validate_times(cls, v: str | None) -> str | None:
        return _check_clock_time(v)


class ContactSessionCancel(BaseModel):
    cancelled_by: str = Field(..., min_length=1, max_length=200)
    cancellation_reason: str = Field(..., min_length=1, max_length=2000)
    rescheduled: bool = False
    rescheduled_date: date | None = None


class ContactSessionRead(BaseModel):
    """Full contact session response."""
    id: UUID
    session_number: str
    child_id: UUID
    family_member_id: UUID
    contact_schedule_id: UUID | None
    organization_id: UUID
    status: ContactSessionStatus
    session_date: date
    scheduled_start_time: str
    scheduled_end_time: str
    supervised: bool
    supervisor_name: str | None
    actual_start_time: str | None
    actual_end_time: str | None
    duration_minutes: int | None
    child_attendance: AttendanceStatus | None
    family_member_attendance: AttendanceStatus | None
    interaction_quality: InteractionQuality | None
    overall_assessment: str | None
    child_views_summary: str | None
    safeguarding_concerns_raised: bool
    incidents_occurred: bool
    incident_details: list[IncidentDetail] | None
    contact_terminated_early: bool
    general_notes: str | None
    cancellation_reason: str | None
    cancelled_by: str | None
    cancellation_date: datetime | None
    rescheduled: bool
    rescheduled_date: date | None
    completed_by: str | None
    completed_date: datetime | None
    created_by: str
    created_at: datetime
    updated_at: datetime
    version: int

    model_config = {"from_attributes": True}
