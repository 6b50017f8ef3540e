"""Enum definitions for application constants."""

from family_contact.db.enums.family import (
    ContactRestrictionLevel,
    DEFAULT_FAMILY_MEMBER_STATUS,
    FamilyMemberStatus,
    RelationshipType,
)
from family_contact.db.enums.risk import (
    DEFAULT_RISK_ASSESSMENT_STATUS,
    IncidentSeverity,
    RiskAssessmentStatus,
    RiskLevel,
)
from family_contact.db.enums.schedules import (
    ContactFrequency,
    ContactScheduleStatus,
    ContactType,
    DEFAULT_CONTACT_SCHEDULE_STATUS,
    SupervisionLevel,
)
from family_contact.db.enums.sessions import (
    AttendanceStatus,
    ContactSessionStatus,
    DEFAULT_CONTACT_SESSION_STATUS,
    InteractionQuality,
)
from family_contact.db.enums.counters import CounterType

__all__ = [
    "AttendanceStatus",
    "ContactFrequency",
    "ContactRestrictionLevel",
    "ContactScheduleStatus",
    "ContactSessionStatus",
    "ContactType",
    "CounterType",
    "DEFAULT_CONTACT_SCHEDULE_STATUS",
    "DEFAULT_CONTACT_SESSION_STATUS",
    "DEFAULT_FAMILY_MEMBER_STATUS",
    "DEFAULT_RISK_ASSESSMENT_STATUS",
    "FamilyMemberStatus",
    "IncidentSeverity",
    "InteractionQuality",
    "RelationshipType",
    "RiskAssessmentStatus",
    "RiskLevel",
    "SupervisionLevel",
]
