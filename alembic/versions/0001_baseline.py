"""Baseline: organizations, children, family members, contact schedules, sessions, risk assessments

Revision ID: 0001_baseline
Revises:
Create Date: 2026-10-16

Tables:
- organizations / org_counters: tenants and per-year number sequences
- children: looked-after children (existence checks only)
- family_members: registry and contact permission inputs
- contact_schedules: recurring arrangements with session counters
- contact_sessions: individual contact events
- contact_risk_assessments: risk determinations with review cadence
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "0001_baseline"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    ]


def _audit() -> list[sa.Column]:
    return [
        sa.Column("created_by", sa.String(200), nullable=False),
        sa.Column("updated_by", sa.String(200), nullable=True),
        *_timestamps(),
        sa.Column("version", sa.Integer, nullable=False, server_default="1"),
    ]


def _org_fk() -> sa.Column:
    return sa.Column(
        "organization_id",
        sa.Uuid,
        sa.ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
    )


def _child_fk() -> sa.Column:
    return sa.Column(
        "child_id",
        sa.Uuid,
        sa.ForeignKey("children.id", ondelete="CASCADE"),
        nullable=False,
    )


def _member_fk() -> sa.Column:
    return sa.Column(
        "family_member_id",
        sa.Uuid,
        sa.ForeignKey("family_members.id", ondelete="CASCADE"),
        nullable=False,
    )


def upgrade() -> None:
    op.create_table(
        "organizations",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("slug", sa.String(100), nullable=False, unique=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    )

    op.create_table(
        "org_counters",
        sa.Column(
            "organization_id",
            sa.Uuid,
            sa.ForeignKey("organizations.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column("counter_type", sa.String(50), primary_key=True),
        sa.Column("year", sa.Integer, primary_key=True),
        sa.Column("current_value", sa.Integer, nullable=False, server_default="0"),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    )

    op.create_table(
        "children",
        sa.Column("id", sa.Uuid, primary_key=True),
        _org_fk(),
        sa.Column("child_number", sa.String(50), nullable=True),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False),
        sa.Column("date_of_birth", sa.Date, nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    )
    op.create_index("idx_children_org", "children", ["organization_id"])

    op.create_table(
        "family_members",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("family_member_number", sa.String(50), nullable=False),
        _child_fk(),
        _org_fk(),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False),
        sa.Column("relationship_type", sa.String(30), nullable=False),
        sa.Column(
            "has_parental_responsibility", sa.Boolean, nullable=False, server_default=sa.false()
        ),
        sa.Column("phone", sa.String(30), nullable=True),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="active"),
        sa.Column(
            "contact_restriction_level", sa.String(30), nullable=False, server_default="none"
        ),
        sa.Column("dbs_check_required", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("dbs_check_date", sa.Date, nullable=True),
        sa.Column("dbs_check_expiry_date", sa.Date, nullable=True),
        sa.Column("notes", sa.Text, nullable=True),
        *_audit(),
        sa.UniqueConstraint(
            "organization_id", "family_member_number", name="uq_family_member_number"
        ),
    )
    op.create_index("idx_family_members_child", "family_members", ["child_id", "status"])
    op.create_index("idx_family_members_org", "family_members", ["organization_id"])

    op.create_table(
        "contact_schedules",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("contact_schedule_number", sa.String(50), nullable=False),
        _child_fk(),
        _member_fk(),
        _org_fk(),
        sa.Column("contact_type", sa.String(30), nullable=False),
        sa.Column("contact_frequency", sa.String(20), nullable=False),
        sa.Column(
            "supervision_required", sa.Boolean, nullable=False, server_default=sa.false()
        ),
        sa.Column("supervision_level", sa.String(30), nullable=True),
        sa.Column("duration_minutes", sa.Integer, nullable=True),
        sa.Column("location", sa.String(255), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="active"),
        sa.Column("start_date", sa.Date, nullable=False),
        sa.Column("last_contact_date", sa.Date, nullable=True),
        sa.Column("next_contact_date", sa.Date, nullable=True),
        sa.Column("last_review_date", sa.Date, nullable=True),
        sa.Column("next_review_date", sa.Date, nullable=False),
        sa.Column("ended_date", sa.Date, nullable=True),
        sa.Column("total_contacts_scheduled", sa.Integer, nullable=False, server_default="0"),
        sa.Column("total_contacts_completed", sa.Integer, nullable=False, server_default="0"),
        sa.Column("total_contacts_cancelled", sa.Integer, nullable=False, server_default="0"),
        sa.Column("notes", sa.Text, nullable=True),
        *_audit(),
        sa.UniqueConstraint(
            "organization_id", "contact_schedule_number", name="uq_contact_schedule_number"
        ),
        sa.CheckConstraint(
            "total_contacts_scheduled >= total_contacts_completed + total_contacts_cancelled",
            name="ck_contact_schedule_counters",
        ),
    )
    op.create_index("idx_contact_schedules_child", "contact_schedules", ["child_id", "status"])
    op.create_index(
        "idx_contact_schedules_org_review",
        "contact_schedules",
        ["organization_id", "status", "next_review_date"],
    )

    op.create_table(
        "contact_sessions",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("session_number", sa.String(50), nullable=False),
        _child_fk(),
        _member_fk(),
        sa.Column("contact_schedule_id", sa.Uuid, nullable=True),  # no FK
        _org_fk(),
        sa.Column("session_date", sa.Date, nullable=False),
        sa.Column("scheduled_start_time", sa.String(8), nullable=False),
        sa.Column("scheduled_end_time", sa.String(8), nullable=False),
        sa.Column("supervised", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("supervisor_name", sa.String(200), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="scheduled"),
        sa.Column("actual_start_time", sa.String(8), nullable=True),
        sa.Column("actual_end_time", sa.String(8), nullable=True),
        sa.Column("duration_minutes", sa.Integer, nullable=True),
        sa.Column("child_attendance", sa.String(20), nullable=True),
        sa.Column("family_member_attendance", sa.String(20), nullable=True),
        sa.Column("interaction_quality", sa.String(20), nullable=True),
        sa.Column("overall_assessment", sa.Text, nullable=True),
        sa.Column("child_views_summary", sa.Text, nullable=True),
        sa.Column(
            "safeguarding_concerns_raised", sa.Boolean, nullable=False, server_default=sa.false()
        ),
        sa.Column("safeguarding_concerns_details", sa.Text, nullable=True),
        sa.Column("incidents_occurred", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("incident_details", sa.JSON, nullable=True),
        sa.Column(
            "contact_terminated_early", sa.Boolean, nullable=False, server_default=sa.false()
        ),
        sa.Column("termination_reason", sa.Text, nullable=True),
        sa.Column("general_notes", sa.Text, nullable=True),
        sa.Column("cancellation_reason", sa.Text, nullable=True),
        sa.Column("cancelled_by", sa.String(200), nullable=True),
        sa.Column("cancellation_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("rescheduled", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("rescheduled_date", sa.Date, nullable=True),
        sa.Column("completed_by", sa.String(200), nullable=True),
        sa.Column("completed_date", sa.DateTime(timezone=True), nullable=True),
        *_audit(),
        sa.UniqueConstraint("organization_id", "session_number", name="uq_contact_session_number"),
    )
    op.create_index(
        "idx_contact_sessions_child_date", "contact_sessions", ["child_id", "session_date"]
    )
    op.create_index(
        "idx_contact_sessions_member_date", "contact_sessions", ["family_member_id", "session_date"]
    )
    op.create_index(
        "idx_contact_sessions_schedule", "contact_sessions", ["contact_schedule_id", "status"]
    )
    op.create_index(
        "idx_contact_sessions_org_status", "contact_sessions", ["organization_id", "status"]
    )

    op.create_table(
        "contact_risk_assessments",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("assessment_number", sa.String(50), nullable=False),
        _child_fk(),
        _member_fk(),
        _org_fk(),
        sa.Column(
            "assessment_type",
            sa.String(100),
            nullable=False,
            server_default="Contact Risk Assessment",
        ),
        sa.Column("assessment_date", sa.Date, nullable=False),
        sa.Column("assessed_by_name", sa.String(200), nullable=False),
        sa.Column("assessed_by_role", sa.String(100), nullable=True),
        sa.Column("overall_risk_level", sa.String(20), nullable=False),
        sa.Column("risk_summary", sa.Text, nullable=False),
        sa.Column("key_concerns", sa.Text, nullable=True),
        sa.Column("identified_risks", sa.JSON, nullable=False),
        sa.Column("mitigation_strategies", sa.JSON, nullable=False),
        sa.Column("contact_recommended", sa.Boolean, nullable=False),
        sa.Column("recommendation_rationale", sa.Text, nullable=False),
        sa.Column("supervision_recommendation", sa.String(30), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="draft"),
        sa.Column("approved_by", sa.String(200), nullable=True),
        sa.Column("approved_by_name", sa.String(200), nullable=True),
        sa.Column("approved_by_role", sa.String(100), nullable=True),
        sa.Column("approval_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("approval_comments", sa.Text, nullable=True),
        sa.Column("rejection_reason", sa.Text, nullable=True),
        sa.Column("review_frequency_months", sa.Integer, nullable=False),
        sa.Column("next_review_date", sa.Date, nullable=False),
        *_audit(),
        sa.UniqueConstraint(
            "organization_id", "assessment_number", name="uq_risk_assessment_number"
        ),
    )
    op.create_index(
        "idx_risk_assessments_pair",
        "contact_risk_assessments",
        ["child_id", "family_member_id", "status"],
    )
    op.create_index(
        "idx_risk_assessments_org", "contact_risk_assessments", ["organization_id", "status"]
    )


def downgrade() -> None:
    op.drop_table("contact_risk_assessments")
    op.drop_table("contact_sessions")
    op.drop_table("contact_schedules")
    op.drop_table("family_members")
    op.drop_table("children")
    op.drop_table("org_counters")
    op.drop_table("organizations")
