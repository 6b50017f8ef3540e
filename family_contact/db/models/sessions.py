"""Contact session model."""

from __future__ import annotations

import uuid
from datetime import date, datetime

from sqlalchemy import (
    JSON,
    Boolean,
    Date,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    Uuid,
    false,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from family_contact.db.base import Base
from family_contact.db.enums import (
    ContactSessionStatus,
    DEFAULT_CONTACT_SESSION_STATUS,
    InteractionQuality,
)
from family_contact.db.models.family import FamilyMember


class ContactSession(Base):
    """
    A single contact event, optionally linked to a schedule.

    Status flow: scheduled → completed | cancelled (both terminal).
    The schedule link is a back-reference used to cascade counter updates;
    the session does not own the schedule.
    """

    __tablename__ = "contact_sessions"
    __table_args__ = (
        UniqueConstraint("organization_id", "session_number", name="uq_contact_session_number"),
        Index("idx_contact_sessions_child_date", "child_id", "session_date"),
        Index("idx_contact_sessions_member_date", "family_member_id", "session_date"),
        Index("idx_contact_sessions_schedule", "contact_schedule_id", "status"),
        Index("idx_contact_sessions_org_status", "organization_id", "status"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    session_number: Mapped[str] = mapped_column(String(50), nullable=False)
    child_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("children.id", ondelete="CASCADE"), nullable=False
    )
    family_member_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("family_members.id", ondelete="CASCADE"), nullable=False
    )
    # No FK: a vanished schedule must not block session updates
    contact_schedule_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True)
    organization_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False
    )

    # Planning
    session_date: Mapped[date] = mapped_column(Date, nullable=False)
    scheduled_start_time: Mapped[str] = mapped_column(String(8), nullable=False)
    scheduled_end_time: Mapped[str] = mapped_column(String(8), nullable=False)
    supervised: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default=false(), nullable=False
    )
    supervisor_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), default=DEFAULT_CONTACT_SESSION_STATUS.value, nullable=False
    )

    # Actuals
    actual_start_time: Mapped[str | None] = mapped_column(String(8), nullable=True)
    actual_end_time: Mapped[str | None] = mapped_column(String(8), nullable=True)
    duration_minutes: Mapped[int | None] = mapped_column(Integer, nullable=True)
    child_attendance: Mapped[str | None] = mapped_column(String(20), nullable=True)
    family_member_attendance: Mapped[str | None] = mapped_column(String(20), nullable=True)

    # Observations
    interaction_quality: Mapped[str | None] = mapped_column(String(20), nullable=True)
    overall_assessment: Mapped[str | None] = mapped_column(Text, nullable=True)
    child_views_summary: Mapped[str | None] = mapped_column(Text, nullable=True)
    safeguarding_concerns_raised: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default=false(), nullable=False
    )
    safeguarding_concerns_details: Mapped[str | None] = mapped_column(Text, nullable=True)
    incidents_occurred: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default=false(), nullable=False
    )
    incident_details: Mapped[list[dict] | None] = mapped_column(JSON, nullable=True)
    contact_terminated_early: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default=false(), nullable=False
    )
    termination_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    general_notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Cancellation
    cancellation_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    cancelled_by: Mapped[str | None] = mapped_column(String(200), nullable=True)
    cancellation_date: Mapped[datetime | None] = mapped_column(nullable=True)
    rescheduled: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default=false(), nullable=False
    )
    rescheduled_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    # Audit
    created_by: Mapped[str] = mapped_column(String(200), nullable=False)
    updated_by: Mapped[str | None] = mapped_column(String(200), nullable=True)
    completed_by: Mapped[str | None] = mapped_column(String(200), nullable=True)
    completed_date: Mapped[datetime | None] = mapped_column(nullable=True)
    created_at: Mapped[datetime] = mapped_column(server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        server_default=func.now(), onupdate=func.now(), nullable=False
    )
    version: Mapped[int] = mapped_column(Integer, default=1, nullable=False)

    family_member: Mapped[FamilyMember] = relationship()

    def is_terminal(self) -> bool:
        return self.status != ContactSessionStatus.SCHEDULED.value

    def has_concerns(self) -> bool:
        return (
            self.safeguarding_concerns_raised
            or self.incidents_occurred
            or self.contact_terminated_early
            or self.interaction_quality == InteractionQuality.CONCERNING.value
        )

    def was_successful(self) -> bool:
        return (
            self.status == ContactSessionStatus.COMPLETED.value
            and self.interaction_quality
            not in (InteractionQuality.POOR.value, InteractionQuality.CONCERNING.value)
            and not self.safeguarding_concerns_raised
            and not self.contact_terminated_early
        )
