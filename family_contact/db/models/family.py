"""Family member registry model."""

from __future__ import annotations

import uuid
from datetime import date, datetime

from sqlalchemy import (
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
    false,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from family_contact.db.base import Base
from family_contact.db.enums import (
    ContactRestrictionLevel,
    DEFAULT_FAMILY_MEMBER_STATUS,
    FamilyMemberStatus,
)
from family_contact.db.models.children import Child
from family_contact.utils.cadence import today_utc


class FamilyMember(Base):
    """
    A family member registered against a child.

    Never hard-deleted: removal is a status change. Contact is allowed only
    while status is active, the restriction level permits contact and any
    required DBS check is in date.
    """

    __tablename__ = "family_members"
    __table_args__ = (
        UniqueConstraint("organization_id", "family_member_number", name="uq_family_member_number"),
        Index("idx_family_members_child", "child_id", "status"),
        Index("idx_family_members_org", "organization_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    family_member_number: Mapped[str] = mapped_column(String(50), nullable=False)
    child_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("children.id", ondelete="CASCADE"), nullable=False
    )
    organization_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False
    )

    # Identity
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    relationship_type: Mapped[str] = mapped_column(String(30), nullable=False)
    has_parental_responsibility: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default=false(), nullable=False
    )
    phone: Mapped[str | None] = mapped_column(String(30), nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)

    # Contact permission
    status: Mapped[str] = mapped_column(
        String(20), default=DEFAULT_FAMILY_MEMBER_STATUS.value, nullable=False
    )
    contact_restriction_level: Mapped[str] = mapped_column(
        String(30), default=ContactRestrictionLevel.NONE.value, nullable=False
    )
    dbs_check_required: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default=false(), nullable=False
    )
    dbs_check_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    dbs_check_expiry_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Audit
    created_by: Mapped[str] = mapped_column(String(200), nullable=False)
    updated_by: Mapped[str | None] = mapped_column(String(200), nullable=True)
    created_at: Mapped[datetime] = mapped_column(server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        server_default=func.now(), onupdate=func.now(), nullable=False
    )
    version: Mapped[int] = mapped_column(Integer, default=1, nullable=False)

    child: Mapped[Child] = relationship()

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def has_valid_dbs_check(self, as_of: date | None = None) -> bool:
        """True when a DBS check is on record and has not passed its expiry date."""
        if not self.dbs_check_date:
            return False
        if self.dbs_check_expiry_date is None:
            return True
        return (as_of or today_utc()) <= self.dbs_check_expiry_date

    def contact_denial_reason(self, as_of: date | None = None) -> str | None:
        """Why contact is currently not allowed, or None if it is."""
        if self.status != FamilyMemberStatus.ACTIVE.value:
            return f"status is {self.status}"
        if self.contact_restriction_level == ContactRestrictionLevel.NO_CONTACT.value:
            return "contact restriction level forbids contact"
        if self.dbs_check_required and not self.has_valid_dbs_check(as_of):
            return "DBS check missing or expired"
        return None

    def is_contact_allowed(self, as_of: date | None = None) -> bool:
        return self.contact_denial_reason(as_of) is None
