"""Contact risk assessment endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from family_contact.core.deps import get_db
from family_contact.core.exceptions import FamilyContactError
from family_contact.schemas.risk_assessment import (
    IdentifiedRisk,
    MitigationStrategy,
    RiskAssessmentApprove,
    RiskAssessmentCreate,
    RiskAssessmentRead,
    RiskAssessmentReject,
    RiskAssessmentSubmit,
)
from family_contact.services import risk_assessment_service

router = APIRouter()


@router.post("", response_model=RiskAssessmentRead, status_code=status.HTTP_201_CREATED)
def create_assessment(
    data: RiskAssessmentCreate,
    db: Session = Depends(get_db),
):
    try:
        assessment = risk_assessment_service.create_assessment(db, data)
        db.commit()
    except FamilyContactError:
        db.rollback()
        raise
    return assessment


@router.get("", response_model=list[RiskAssessmentRead])
def list_assessments(
    organization_id: UUID,
    child_id: UUID,
    family_member_id: UUID | None = None,
    db: Session = Depends(get_db),
):
    return risk_assessment_service.list_assessments(
        db, organization_id, child_id, family_member_id=family_member_id
    )


@router.get("/current", response_model=RiskAssessmentRead | None)
def get_current_assessment(
    organization_id: UUID,
    child_id: UUID,
    family_member_id: UUID,
    db: Session = Depends(get_db),
):
    """Most recent approved, in-date assessment for the pair (null if none)."""
    return risk_assessment_service.get_current_assessment(
        db, organization_id, child_id, family_member_id
    )


@router.get("/overdue", response_model=list[RiskAssessmentRead])
def list_overdue_assessments(
    organization_id: UUID,
    db: Session = Depends(get_db),
):
    return risk_assessment_service.list_overdue_assessments(db, organization_id)


@router.get("/{assessment_id}", response_model=RiskAssessmentRead)
def get_assessment(
    assessment_id: UUID,
    organization_id: UUID,
    db: Session = Depends(get_db),
):
    return risk_assessment_service.require_assessment(db, organization_id, assessment_id)


@router.post("/{assessment_id}/risks", response_model=RiskAssessmentRead)
def add_identified_risk(
    assessment_id: UUID,
    organization_id: UUID,
    data: IdentifiedRisk,
    db: Session = Depends(get_db),
):
    try:
        assessment = risk_assessment_service.add_identified_risk(
            db, organization_id, assessment_id, data
        )
        db.commit()
    except FamilyContactError:
        db.rollback()
        raise
    return assessment


@router.post("/{assessment_id}/mitigations", response_model=RiskAssessmentRead)
def add_mitigation_strategy(
    assessment_id: UUID,
    organization_id: UUID,
    data: MitigationStrategy,
    db: Session = Depends(get_db),
):
    try:
        assessment = risk_assessment_service.add_mitigation_strategy(
            db, organization_id, assessment_id, data
        )
        db.commit()
    except FamilyContactError:
        db.rollback()
        raise
    return assessment


@router.post("/{assessment_id}/submit", response_model=RiskAssessmentRead)
def submit_for_approval(
    assessment_id: UUID,
    organization_id: UUID,
    data: RiskAssessmentSubmit,
    db: Session = Depends(get_db),
):
    try:
        assessment = risk_assessment_service.submit_for_approval(
            db, organization_id, assessment_id, data
        )
        db.commit()
    except FamilyContactError:
        db.rollback()
        raise
    return assessment


@router.post("/{assessment_id}/approve", response_model=RiskAssessmentRead)
def approve_assessment(
    assessment_id: UUID,
    organization_id: UUID,
    data: RiskAssessmentApprove,
    db: Session = Depends(get_db),
):
    try:
        assessment = risk_assessment_service.approve_assessment(
            db, organization_id, assessment_id, data
        )
        db.commit()
    except FamilyContactError:
        db.rollback()
        raise
    return assessment


@router.post("/{assessment_id}/reject", response_model=RiskAssessmentRead)
def reject_assessment(
    assessment_id: UUID,
    organization_id: UUID,
    data: RiskAssessmentReject,
    db: Session = Depends(get_db),
):
    try:
        assessment = risk_assessment_service.reject_assessment(
            db, organization_id, assessment_id, data
        )
        db.commit()
    except FamilyContactError:
        db.rollback()
        raise
    return assessment
