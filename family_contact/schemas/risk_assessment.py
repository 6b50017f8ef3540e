"""Pydantic schemas for contact risk assessments."""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, Field

from family_contact.db.enums import RiskAssessmentStatus, RiskLevel, SupervisionLevel


class RiskAssessmentCreate(BaseModel):
    """Request to create a contact risk assessment (starts as draft)."""
    child_id: UUID
    family_member_id: UUID
    organization_id: UUID
    assessment_date: date
    assessed_by_name: str = Field(..., min_length=1, max_length=200)
    assessed_by_role: str | None = Field(None, max_length=100)
    overall_risk_level: RiskLevel
    risk_summary: str = Field(..., min_length=1, max_length=5000)
    key_concerns: str | None = Field(None, max_length=5000)
    contact_recommended: bool
    recommendation_rationale: str = Field(..., min_length=1, max_length=5000)
    supervision_recommendation: SupervisionLevel | None = None
    created_by: str = Field(..., min_length=1, max_length=200)


class IdentifiedRisk(BaseModel):
    category: str = Field(..., min_length=1, max_length=100)
    risk_level: RiskLevel
    description: str = Field(..., min_length=1, max_length=2000)
    likelihood: str = Field(..., min_length=1, max_length=50)
    impact: str = Field(..., min_length=1, max_length=50)
    added_by: str = Field(..., min_length=1, max_length=200)


class MitigationStrategy(BaseModel):
    strategy: str = Field(..., min_length=1, max_length=2000)
    target_risk: str = Field(..., min_length=1, max_length=100)
    implementation: str = Field(..., min_length=1, max_length=2000)
    responsible_person: str = Field(..., min_length=1, max_length=200)
    added_by: str = Field(..., min_length=1, max_length=200)


class RiskAssessmentSubmit(BaseModel):
    submitted_by: str = Field(..., min_length=1, max_length=200)


class RiskAssessmentApprove(BaseModel):
    approved_by: str = Field(..., min_length=1, max_length=200)
    approved_by_name: str = Field(..., min_length=1, max_length=200)
    approved_by_role: str = Field(..., min_length=1, max_length=100)
    approval_comments: str | None = Field(None, max_length=5000)


class RiskAssessmentReject(BaseModel):
    rejected_by: str = Field(..., min_length=1, max_length=200)
    reason: str = Field(..., min_length=1, max_length=5000)


class RiskAssessmentRead(BaseModel):
    """Full risk assessment response."""
    id: UUID
    assessment_number: str
    child_id: UUID
    family_member_id: UUID
    organization_id: UUID
    assessment_type: str
    assessment_date: date
    assessed_by_name: str
    assessed_by_role: str | None
    overall_risk_level: RiskLevel
    risk_summary: str
    key_concerns: str | None
    identified_risks: list[dict]
    mitigation_strategies: list[dict]
    contact_recommended: bool
    recommendation_rationale: str
    supervision_recommendation: SupervisionLevel | None
    status: RiskAssessmentStatus
    approved_by: str | None
    approved_by_name: str | None
    approved_by_role: str | None
    approval_date: datetime | None
    approval_comments: str | None
    rejection_reason: str | None
    review_frequency_months: int
    next_review_date: date
    created_by: str
    created_at: datetime
    updated_at: datetime
    version: int

    model_config = {"from_attributes": True}
