"""Pydantic schemas for family contact statistics."""

from pydantic import BaseModel


class FamilyMemberStats(BaseModel):
    total: int


class ScheduleStats(BaseModel):
    active: int
    due_for_review: int


class SessionStats(BaseModel):
    upcoming: int
    requiring_urgent_review: int


class RiskAssessmentStats(BaseModel):
    high_risk: int
    overdue_review: int


class FamilyContactStatistics(BaseModel):
    """Organization-wide rollup; recomputed on every call."""
    family_members: FamilyMemberStats
    schedules: ScheduleStats
    sessions: SessionStats
    risk_assessments: RiskAssessmentStats
