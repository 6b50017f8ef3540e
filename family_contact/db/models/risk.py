"""Contact risk assessment model."""

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
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from family_contact.db.base import Base
from family_contact.db.enums import DEFAULT_RISK_ASSESSMENT_STATUS, RiskAssessmentStatus
from family_contact.db.models.family import FamilyMember
from family_contact.utils.cadence import today_utc


class ContactRiskAssessment(Base):
    """
    Risk determination for contact between a child and a family member.

    Only approved assessments can be current. Overdue review is a query-time
    predicate on next_review_date; nothing expires in storage.
    """

    __tablename__ = "contact_risk_assessments"
    __table_args__ = (
        UniqueConstraint("organization_id", "assessment_number", name="uq_risk_assessment_number"),
        Index("idx_risk_assessments_pair", "child_id", "family_member_id", "status"),
        Index("idx_risk_assessments_org", "organization_id", "status"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    assessment_number: Mapped[str] = mapped_column(String(50), nullable=False)
    child_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("children.id", ondelete="CASCADE"), nullable=False
    )
    family_member_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("family_members.id", ondelete="CASCADE"), nullable=False
    )
    organization_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False
    )

    assessment_type: Mapped[str] = mapped_column(
        String(100), default="Contact Risk Assessment", nullable=False
    )
    assessment_date: Mapped[date] = mapped_column(Date, nullable=False)
    assessed_by_name: Mapped[str] = mapped_column(String(200), nullable=False)
    assessed_by_role: Mapped[str | None] = mapped_column(String(100), nullable=True)

    # Determination
    overall_risk_level: Mapped[str] = mapped_column(String(20), nullable=False)
    risk_summary: Mapped[str] = mapped_column(Text, nullable=False)
    key_concerns: Mapped[str | None] = mapped_column(Text, nullable=True)
    identified_risks: Mapped[list[dict]] = mapped_column(JSON, default=list, nullable=False)
    mitigation_strategies: Mapped[list[dict]] = mapped_column(JSON, default=list, nullable=False)
    contact_recommended: Mapped[bool] = mapped_column(Boolean, nullable=False)
    recommendation_rationale: Mapped[str] = mapped_column(Text, nullable=False)
    supervision_recommendation: Mapped[str | None] = mapped_column(String(30), nullable=True)

    # Approval
    status: Mapped[str] = mapped_column(
        String(20), default=DEFAULT_RISK_ASSESSMENT_STATUS.value, nullable=False
    )
    approved_by: Mapped[str | None] = mapped_column(String(200), nullable=True)
    approved_by_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    approved_by_role: Mapped[str | None] = mapped_column(String(100), nullable=True)
    approval_date: Mapped[datetime | None] = mapped_column(nullable=True)
    approval_comments: Mapped[str | None] = mapped_column(Text, nullable=True)
    rejection_reason: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Review cadence
    review_frequency_months: Mapped[int] = mapped_column(Integer, nullable=False)
    next_review_date: Mapped[date] = mapped_column(Date, nullable=False)

    # Audit
    created_by: Mapped[str] = mapped_column(String(200), nullable=False)
    updated_by: Mapped[str | None] = mapped_column(String(200), nullable=True)
    created_at: Mapped[datetime] = mapped_column(server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        server_default=func.now(), onupdate=func.now(), nullable=False
    )
    version: Mapped[int] = mapped_column(Integer, default=1, nullable=False)

    family_member: Mapped[FamilyMember] = relationship()

    def is_approved(self) -> bool:
        return self.status == RiskAssessmentStatus.APPROVED.value

    def is_current(self, as_of: date | None = None) -> bool:
        """Approved and before its next review date."""
        return self.is_approved() and (as_of or today_utc()) < self.next_review_date

    def is_review_overdue(self, as_of: date | None = None) -> bool:
        """Approved and on or past its next review date."""
        return self.is_approved() and (as_of or today_utc()) >= self.next_review_date
