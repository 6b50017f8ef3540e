"""Contact schedule model."""

from __future__ import annotations

import uuid
from datetime import date, datetime

from sqlalchemy import (
    Boolean,
    CheckConstraint,
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
from family_contact.db.enums import ContactScheduleStatus, DEFAULT_CONTACT_SCHEDULE_STATUS
from family_contact.db.models.family import FamilyMember
from family_contact.utils.cadence import today_utc


class ContactSchedule(Base):
    """
    Recurring contact arrangement between a child and one family member.

    Owns the running session counters and the next contact / next review
    dates. Counters only move through the session lifecycle; the check
    constraint mirrors scheduled >= completed + cancelled.
    """

    __tablename__ = "contact_schedules"
    __table_args__ = (
        UniqueConstraint("organization_id", "contact_schedule_number", name="uq_contact_schedule_number"),
        Index("idx_contact_schedules_child", "child_id", "status"),
        Index("idx_contact_schedules_org_review", "organization_id", "status", "next_review_date"),
        CheckConstraint(
            "total_contacts_scheduled >= total_contacts_completed + total_contacts_cancelled",
            name="ck_contact_schedule_counters",
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    contact_schedule_number: Mapped[str] = mapped_column(String(50), nullable=False)
    child_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("children.id", ondelete="CASCADE"), nullable=False
    )
    family_member_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("family_members.id", ondelete="CASCADE"), nullable=False
    )
    organization_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False
    )

    # Arrangement
    contact_type: Mapped[str] = mapped_column(String(30), nullable=False)
    contact_frequency: Mapped[str] = mapped_column(String(20), nullable=False)
    supervision_required: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default=false(), nullable=False
    )
    supervision_level: Mapped[str | None] = mapped_column(String(30), nullable=True)
    duration_minutes: Mapped[int | None] = mapped_column(Integer, nullable=True)
    location: Mapped[str | None] = mapped_column(String(255), nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), default=DEFAULT_CONTACT_SCHEDULE_STATUS.value, nullable=False
    )

    # Dates
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    last_contact_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    next_contact_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    last_review_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    next_review_date: Mapped[date] = mapped_column(Date, nullable=False)
    ended_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    # Counters
    total_contacts_scheduled: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    total_contacts_completed: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    total_contacts_cancelled: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    # Append-only log of suspensions, reviews and endings
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Audit
    created_by: Mapped[str] = mapped_column(String(200), nullable=False)
    updated_by: Mapped[str | None] = mapped_column(String(200), nullable=True)
    created_at: Mapped[datetime] = mapped_column(server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        server_default=func.now(), onupdate=func.now(), nullable=False
    )
    version: Mapped[int] = mapped_column(Integer, default=1, nullable=False)

    family_member: Mapped[FamilyMember] = relationship()

    def is_active(self) -> bool:
        return self.status == ContactScheduleStatus.ACTIVE.value

    def is_review_due(self, as_of: date | None = None) -> bool:
        """Active and on or past the next review date."""
        return self.is_active() and (as_of or today_utc()) >= self.next_review_date

    @property
    def outstanding_sessions(self) -> int:
        """Sessions scheduled but neither completed nor cancelled."""
        return (
            self.total_contacts_scheduled
            - self.total_contacts_completed
            - self.total_contacts_cancelled
        )

    def append_note(self, entry: str) -> None:
        self.notes = f"{self.notes or ''}\n\n{entry}".lstrip("\n")
