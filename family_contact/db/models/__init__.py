"""SQLAlchemy ORM models."""

from family_contact.db.models.organizations import Organization, OrgCounter
from family_contact.db.models.children import Child
from family_contact.db.models.family import FamilyMember
from family_contact.db.models.schedules import ContactSchedule
from family_contact.db.models.sessions import ContactSession
from family_contact.db.models.risk import ContactRiskAssessment

__all__ = [
    "Child",
    "ContactRiskAssessment",
    "ContactSchedule",
    "ContactSession",
    "FamilyMember",
    "OrgCounter",
    "Organization",
]
