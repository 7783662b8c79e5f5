"""meal mis schema

Revision ID: 20261019_0001
Revises:
Create Date: 2026-10-19
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "20261019_0001"
down_revision = None
branch_labels = None
depends_on = None


baseline_survey_status = postgresql.ENUM(
    "draft", "in_progress", "completed", "archived", name="baseline_survey_status", create_type=False
)
monthly_report_status = postgresql.ENUM(
    "draft", "submitted", "approved", "feedback", name="monthly_report_status", create_type=False
)
evaluation_type = postgresql.ENUM(
    "baseline", "midterm", "endline", "special", name="evaluation_type", create_type=False
)
story_type = postgresql.ENUM("case", "success", "impact", name="story_type", create_type=False)
finding_type = postgresql.ENUM("negative", "positive", name="finding_type", create_type=False)
finding_severity = postgresql.ENUM("minor", "major", "critical", name="finding_severity", create_type=False)
finding_status = postgresql.ENUM("pending", "in_progress", "solved", name="finding_status", create_type=False)
complaint_status = postgresql.ENUM("open", "in_review", "resolved", name="complaint_status", create_type=False)
user_role = postgresql.ENUM("administrator", "editor", "viewer", name="user_role", create_type=False)

ENUM_TYPES = (
    baseline_survey_status,
    monthly_report_status,
    evaluation_type,
    story_type,
    finding_type,
    finding_severity,
    finding_status,
    complaint_status,
    user_role,
)

PROJECT_VALUE_TABLES = (
    ("project_provinces", "province", 128),
    ("project_districts", "district", 128),
    ("project_communities", "community", 255),
    ("project_clusters", "cluster", 255),
    ("project_standard_sectors", "standard_sector", 255),
)


def _project_fk(nullable: bool = True) -> sa.Column:
    return sa.Column(
        "project_id",
        postgresql.UUID(as_uuid=True),
        sa.ForeignKey("projects.id"),
        nullable=nullable,
    )


def upgrade() -> None:
    for enum_type in ENUM_TYPES:
        enum_type.create(op.get_bind(), checkfirst=True)

    op.create_table(
        "projects",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("code", sa.String(length=64), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("sector", sa.String(length=255), nullable=True),
        sa.Column("donor", sa.String(length=255), nullable=True),
        sa.Column("country", sa.String(length=128), nullable=True),
        sa.Column("start_date", sa.Date(), nullable=True),
        sa.Column("end_date", sa.Date(), nullable=True),
        sa.Column("budget", sa.Numeric(14, 2), nullable=True),
        sa.Column("staff", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("goal", sa.Text(), nullable=True),
        sa.Column("objectives", sa.Text(), nullable=True),
        sa.Column("major_achievements", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint("code", name="uq_projects_code"),
        sa.CheckConstraint("staff >= 0", name="ck_projects_staff_non_negative"),
    )

    for table_name, column_name, length in PROJECT_VALUE_TABLES:
        op.create_table(
            table_name,
            sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True, nullable=False),
            _project_fk(nullable=False),
            sa.Column(column_name, sa.String(length=length), nullable=False),
        )
        op.create_index(f"ix_{table_name}_project_id", table_name, ["project_id"])

    op.create_table(
        "project_beneficiaries",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True, nullable=False),
        _project_fk(nullable=False),
        sa.Column("type_key", sa.String(length=32), nullable=False),
        sa.Column("direct", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("indirect", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("include_in_totals", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.CheckConstraint("direct >= 0", name="ck_project_beneficiaries_direct_non_negative"),
        sa.CheckConstraint("indirect >= 0", name="ck_project_beneficiaries_indirect_non_negative"),
        sa.UniqueConstraint("project_id", "type_key", name="uq_project_beneficiaries_project_type"),
    )

    op.create_table(
        "baseline_surveys",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        _project_fk(),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("status", baseline_survey_status, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_baseline_surveys_project_id", "baseline_surveys", ["project_id"])

    op.create_table(
        "enumerators",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("full_name", sa.String(length=255), nullable=False),
        sa.Column("province", sa.String(length=128), nullable=True),
    )

    op.create_table(
        "field_visits",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        _project_fk(),
        sa.Column("visit_date", sa.Date(), nullable=True),
        sa.Column("location", sa.String(length=255), nullable=True),
    )
    op.create_index("ix_field_visits_project_id", "field_visits", ["project_id"])

    op.create_table(
        "monthly_reports",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        _project_fk(),
        sa.Column("report_month", sa.Date(), nullable=True),
        sa.Column("status", monthly_report_status, nullable=False),
    )
    op.create_index("ix_monthly_reports_project_id", "monthly_reports", ["project_id"])

    op.create_table(
        "evaluations",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        _project_fk(),
        sa.Column("evaluation_type", evaluation_type, nullable=False),
        sa.Column("completed_at", sa.Date(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_evaluations_project_id", "evaluations", ["project_id"])

    op.create_table(
        "stories",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        _project_fk(),
        sa.Column("story_type", story_type, nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_stories_project_id", "stories", ["project_id"])

    op.create_table(
        "findings",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        _project_fk(),
        sa.Column("finding_type", finding_type, nullable=False),
        sa.Column("severity", finding_severity, nullable=False),
        sa.Column("status", finding_status, nullable=False),
        sa.Column("department", sa.String(length=128), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_findings_project_id", "findings", ["project_id"])

    op.create_table(
        "distributions",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        _project_fk(),
        sa.Column("assistance_type", sa.String(length=128), nullable=False),
        sa.Column("distribution_date", sa.Date(), nullable=True),
    )
    op.create_index("ix_distributions_project_id", "distributions", ["project_id"])

    op.create_table(
        "pdm_surveys",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        _project_fk(),
        sa.Column("completed_at", sa.Date(), nullable=True),
    )
    op.create_index("ix_pdm_surveys_project_id", "pdm_surveys", ["project_id"])

    op.create_table(
        "pdm_reports",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        _project_fk(),
        sa.Column("report_date", sa.Date(), nullable=True),
    )
    op.create_index("ix_pdm_reports_project_id", "pdm_reports", ["project_id"])

    op.create_table(
        "complaints",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        _project_fk(),
        sa.Column("full_name", sa.String(length=255), nullable=True),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("phone", sa.String(length=64), nullable=True),
        sa.Column("message", sa.Text(), nullable=True),
        sa.Column("status", complaint_status, nullable=False),
        sa.Column("province", sa.String(length=128), nullable=True),
        sa.Column("submitted_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_complaints_project_id", "complaints", ["project_id"])

    op.create_table(
        "crm_awareness_records",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        _project_fk(),
        sa.Column("district", sa.String(length=128), nullable=True),
        sa.Column("awareness_date", sa.Date(), nullable=True),
    )
    op.create_index("ix_crm_awareness_project_id", "crm_awareness_records", ["project_id"])

    op.create_table(
        "branding_settings",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("organization_name", sa.String(length=255), nullable=False),
        sa.Column("logo_data", sa.LargeBinary(), nullable=True),
        sa.Column("logo_mime", sa.String(length=64), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )

    op.create_table(
        "users",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=320), nullable=False),
        sa.Column("role", user_role, nullable=False),
        sa.Column("organization", sa.String(length=255), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint("email", name="uq_users_email"),
    )


def downgrade() -> None:
    op.drop_table("users")
    op.drop_table("branding_settings")

    for table_name, index_name in (
        ("crm_awareness_records", "ix_crm_awareness_project_id"),
        ("complaints", "ix_complaints_project_id"),
        ("pdm_reports", "ix_pdm_reports_project_id"),
        ("pdm_surveys", "ix_pdm_surveys_project_id"),
        ("distributions", "ix_distributions_project_id"),
        ("findings", "ix_findings_project_id"),
        ("stories", "ix_stories_project_id"),
        ("evaluations", "ix_evaluations_project_id"),
        ("monthly_reports", "ix_monthly_reports_project_id"),
        ("field_visits", "ix_field_visits_project_id"),
    ):
        op.drop_index(index_name, table_name=table_name)
        op.drop_table(table_name)

    op.drop_table("enumerators")
    op.drop_index("ix_baseline_surveys_project_id", table_name="baseline_surveys")
    op.drop_table("baseline_surveys")
    op.drop_table("project_beneficiaries")

    for table_name, _, _ in reversed(PROJECT_VALUE_TABLES):
        op.drop_index(f"ix_{table_name}_project_id", table_name=table_name)
        op.drop_table(table_name)

    op.drop_table("projects")

    for enum_type in reversed(ENUM_TYPES):
        enum_type.drop(op.get_bind(), checkfirst=True)
