"""Contact risk assessment tracker."""

import logging
from datetime import date, datetime, timezone
from uuid import UUID

from sqlalchemy.orm import Session

from family_contact.core.exceptions import InvalidTransitionError, NotFoundError, ValidationFailure
from family_contact.core.structured_logging import build_log_context
from family_contact.db.enums import CounterType, RiskAssessmentStatus, RiskLevel
from family_contact.db.models import ContactRiskAssessment
from family_contact.schemas.risk_assessment import (
    IdentifiedRisk,
    MitigationStrategy,
    RiskAssessmentApprove,
    RiskAssessmentCreate,
    RiskAssessmentReject,
    RiskAssessmentSubmit,
)
from family_contact.services import child_service, family_member_service, number_service
from family_contact.utils.cadence import add_months, review_months_for_risk_level, today_utc

logger = logging.getLogger(__name__)

# Statuses from which an assessment can still be edited, approved or rejected
OPEN_STATUSES = {
    RiskAssessmentStatus.DRAFT.value,
    RiskAssessmentStatus.PENDING_APPROVAL.value,
}


def create_assessment(db: Session, data: RiskAssessmentCreate) -> ContactRiskAssessment:
    """
    Create a draft risk assessment.

    Review cadence comes from the overall risk level:
    critical/very high → 3 months, high → 6, medium/low → 12.
    """
    org_id = data.organization_id
    child_service.require_child(db, org_id, data.child_id)
    family_member_service.require_member_of_child(
        db, org_id, data.child_id, data.family_member_id
    )

    review_months = review_months_for_risk_level(data.overall_risk_level)
    assessment = ContactRiskAssessment(
        assessment_number=number_service.next_number(db, org_id, CounterType.RISK_ASSESSMENT),
        child_id=data.child_id,
        family_member_id=data.family_member_id,
        organization_id=org_id,
        assessment_type="Contact Risk Assessment",
        assessment_date=data.assessment_date,
        assessed_by_name=data.assessed_by_name,
        assessed_by_role=data.assessed_by_role,
        overall_risk_level=data.overall_risk_level.value,
        risk_summary=data.risk_summary,
        key_concerns=data.key_concerns,
        identified_risks=[],
        mitigation_strategies=[],
        contact_recommended=data.contact_recommended,
        recommendation_rationale=data.recommendation_rationale,
        supervision_recommendation=(
            data.supervision_recommendation.value if data.supervision_recommendation else None
        ),
        status=RiskAssessmentStatus.DRAFT.value,
        review_frequency_months=review_months,
        next_review_date=add_months(data.assessment_date, review_months),
        created_by=data.created_by,
        version=1,
    )
    db.add(assessment)
    db.flush()

    logger.info(
        "Risk assessment %s created (risk_level=%s)",
        assessment.assessment_number,
        assessment.overall_risk_level,
        extra=build_log_context(
            org_id=org_id,
            child_id=assessment.child_id,
            entity_id=assessment.id,
            operation="create_assessment",
            actor=data.created_by,
        ),
    )
    return assessment


def get_assessment(db: Session, org_id: UUID, assessment_id: UUID) -> ContactRiskAssessment | None:
    """Get risk assessment by ID (org-scoped)."""
    return db.query(ContactRiskAssessment).filter(
        ContactRiskAssessment.id == assessment_id,
        ContactRiskAssessment.organization_id == org_id,
    ).first()


def require_assessment(db: Session, org_id: UUID, assessment_id: UUID) -> ContactRiskAssessment:
    assessment = get_assessment(db, org_id, assessment_id)
    if not assessment:
        raise NotFoundError("Risk assessment", assessment_id)
    return assessment


def _require_open(assessment: ContactRiskAssessment, action: str) -> None:
    if assessment.status not in OPEN_STATUSES:
        raise InvalidTransitionError("Risk assessment", assessment.status, action)


def add_identified_risk(
    db: Session,
    org_id: UUID,
    assessment_id: UUID,
    risk: IdentifiedRisk,
) -> ContactRiskAssessment:
    """Append a risk to the ordered list (draft or pending approval only)."""
    assessment = require_assessment(db, org_id, assessment_id)
    _require_open(assessment, "add a risk to")
    # Reassign so the JSON column is marked dirty
    assessment.identified_risks = [*assessment.identified_risks, risk.model_dump(mode="json")]
    assessment.updated_by = risk.added_by
    assessment.version += 1
    db.flush()
    return assessment


def add_mitigation_strategy(
    db: Session,
    org_id: UUID,
    assessment_id: UUID,
    strategy: MitigationStrategy,
) -> ContactRiskAssessment:
    """Append a mitigation strategy to the ordered list (draft or pending approval only)."""
    assessment = require_assessment(db, org_id, assessment_id)
    _require_open(assessment, "add a mitigation to")
    assessment.mitigation_strategies = [
        *assessment.mitigation_strategies,
        strategy.model_dump(mode="json"),
    ]
    assessment.updated_by = strategy.added_by
    assessment.version += 1
    db.flush()
    return assessment


def submit_for_approval(
    db: Session,
    org_id: UUID,
    assessment_id: UUID,
    data: RiskAssessmentSubmit,
) -> ContactRiskAssessment:
    assessment = require_assessment(db, org_id, assessment_id)
    if assessment.status != RiskAssessmentStatus.DRAFT.value:
        raise InvalidTransitionError("Risk assessment", assessment.status, "submit")

    assessment.status = RiskAssessmentStatus.PENDING_APPROVAL.value
    assessment.updated_by = data.submitted_by
    assessment.version += 1
    db.flush()
    return assessment


def approve_assessment(
    db: Session,
    org_id: UUID,
    assessment_id: UUID,
    data: RiskAssessmentApprove,
) -> ContactRiskAssessment:
    """
    Approve an assessment, stamping approver identity and date.

    It becomes current immediately if today is before its next review date.
    """
    assessment = require_assessment(db, org_id, assessment_id)
    _require_open(assessment, "approve")

    assessment.status = RiskAssessmentStatus.APPROVED.value
    assessment.approved_by = data.approved_by
    assessment.approved_by_name = data.approved_by_name
    assessment.approved_by_role = data.approved_by_role
    assessment.approval_date = datetime.now(timezone.utc)
    if data.approval_comments is not None:
        assessment.approval_comments = data.approval_comments
    assessment.updated_by = data.approved_by
    assessment.version += 1
    db.flush()

    logger.info(
        "Risk assessment %s approved",
        assessment.assessment_number,
        extra=build_log_context(
            org_id=org_id,
            entity_id=assessment.id,
            operation="approve_assessment",
            actor=data.approved_by,
        ),
    )
    return assessment


def reject_assessment(
    db: Session,
    org_id: UUID,
    assessment_id: UUID,
    data: RiskAssessmentReject,
) -> ContactRiskAssessment:
    assessment = require_assessment(db, org_id, assessment_id)
    _require_open(assessment, "reject")
    if not data.reason.strip():
        raise ValidationFailure("Rejection reason is required", field="reason")

    assessment.status = RiskAssessmentStatus.REJECTED.value
    assessment.rejection_reason = data.reason
    assessment.updated_by = data.rejected_by
    assessment.version += 1
    db.flush()

    logger.info(
        "Risk assessment %s rejected",
        assessment.assessment_number,
        extra=build_log_context(
            org_id=org_id,
            entity_id=assessment.id,
            operation="reject_assessment",
            actor=data.rejected_by,
        ),
    )
    return assessment


def list_assessments(
    db: Session,
    org_id: UUID,
    child_id: UUID,
    family_member_id: UUID | None = None,
) -> list[ContactRiskAssessment]:
    """Assessments for a child (optionally one family member), newest first."""
    query = db.query(ContactRiskAssessment).filter(
        ContactRiskAssessment.organization_id == org_id,
        ContactRiskAssessment.child_id == child_id,
    )
    if family_member_id:
        query = query.filter(ContactRiskAssessment.family_member_id == family_member_id)
    return query.order_by(
        ContactRiskAssessment.assessment_date.desc(),
        ContactRiskAssessment.created_at.desc(),
    ).all()


def get_current_assessment(
    db: Session,
    org_id: UUID,
    child_id: UUID,
    family_member_id: UUID,
    as_of: date | None = None,
) -> ContactRiskAssessment | None:
    """Most recent approved assessment for the pair that is still current, or None."""
    approved = (
        db.query(ContactRiskAssessment)
        .filter(
            ContactRiskAssessment.organization_id == org_id,
            ContactRiskAssessment.child_id == child_id,
            ContactRiskAssessment.family_member_id == family_member_id,
            ContactRiskAssessment.status == RiskAssessmentStatus.APPROVED.value,
        )
        .order_by(ContactRiskAssessment.assessment_date.desc())
        .all()
    )
    as_of = as_of or today_utc()
    for assessment in approved:
        if assessment.is_current(as_of):
            return assessment
    return None


def list_overdue_assessments(
    db: Session,
    org_id: UUID,
    as_of: date | None = None,
) -> list[ContactRiskAssessment]:
    """Approved assessments on or past their next review date."""
    as_of = as_of or today_utc()
    return (
        db.query(ContactRiskAssessment)
        .filter(
            ContactRiskAssessment.organization_id == org_id,
            ContactRiskAssessment.status == RiskAssessmentStatus.APPROVED.value,
            ContactRiskAssessment.next_review_date <= as_of,
        )
        .order_by(ContactRiskAssessment.next_review_date)
        .all()
    )


def count_high_risk(db: Session, org_id: UUID) -> int:
    return db.query(ContactRiskAssessment).filter(
        ContactRiskAssessment.organization_id == org_id,
        ContactRiskAssessment.overall_risk_level == RiskLevel.HIGH.value,
    ).count()
