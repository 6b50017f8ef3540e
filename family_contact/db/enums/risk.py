"""Contact risk assessment enums."""

from enum import Enum


class RiskLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    VERY_HIGH = "very_high"
    CRITICAL = "critical"


class RiskAssessmentStatus(str, Enum):
    """
    Risk assessment approval status.

    Flow: draft → pending_approval → approved
              ↘          ↘ rejected
               approved / rejected

    Only approved assessments can be current. Expiry is never stored;
    overdue is evaluated at query time.
    """

    DRAFT = "draft"
    PENDING_APPROVAL = "pending_approval"
    APPROVED = "approved"
    REJECTED = "rejected"


class IncidentSeverity(str, Enum):
    """Severity of an incident recorded during a contact session."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


DEFAULT_RISK_ASSESSMENT_STATUS = RiskAssessmentStatus.DRAFT
