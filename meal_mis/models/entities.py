"""ORM entities for the MEAL MIS schema."""

from __future__ import annotations

import enum
import uuid
from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    LargeBinary,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy import Enum as SQLEnum
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from meal_mis.db.base import Base


class BaselineSurveyStatus(str, enum.Enum):
    DRAFT = "draft"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    ARCHIVED = "archived"


class MonthlyReportStatus(str, enum.Enum):
    DRAFT = "draft"
    SUBMITTED = "submitted"
    APPROVED = "approved"
    FEEDBACK = "feedback"


class EvaluationType(str, enum.Enum):
    BASELINE = "baseline"
    MIDTERM = "midterm"
    ENDLINE = "endline"
    SPECIAL = "special"


class StoryType(str, enum.Enum):
    CASE = "case"
    SUCCESS = "success"
    IMPACT = "impact"


class FindingType(str, enum.Enum):
    NEGATIVE = "negative"
    POSITIVE = "positive"


class FindingSeverity(str, enum.Enum):
    MINOR = "minor"
    MAJOR = "major"
    CRITICAL = "critical"


class FindingStatus(str, enum.Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    SOLVED = "solved"


class ComplaintStatus(str, enum.Enum):
    OPEN = "open"
    IN_REVIEW = "in_review"
    RESOLVED = "resolved"


class UserRole(str, enum.Enum):
    ADMINISTRATOR = "administrator"
    EDITOR = "editor"
    VIEWER = "viewer"


def _enum_column(enum_cls: type[enum.Enum], name: str) -> SQLEnum:
    return SQLEnum(
        enum_cls,
        name=name,
        values_callable=lambda members: [member.value for member in members],
    )


class Project(Base):
    __tablename__ = "projects"
    __table_args__ = (
        UniqueConstraint("code", name="uq_projects_code"),
        CheckConstraint("staff >= 0", name="ck_projects_staff_non_negative"),
    )

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    code: Mapped[str] = mapped_column(String(64), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    sector: Mapped[str | None] = mapped_column(String(255), nullable=True)
    donor: Mapped[str | None] = mapped_column(String(255), nullable=True)
    country: Mapped[str | None] = mapped_column(String(128), nullable=True)
    start_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    end_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    budget: Mapped[Decimal | None] = mapped_column(Numeric(14, 2), nullable=True)
    staff: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    goal: Mapped[str | None] = mapped_column(Text, nullable=True)
    objectives: Mapped[str | None] = mapped_column(Text, nullable=True)
    major_achievements: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=datetime.utcnow)

    provinces: Mapped[list[ProjectProvince]] = relationship(
        cascade="all, delete-orphan", order_by="ProjectProvince.id"
    )
    districts: Mapped[list[ProjectDistrict]] = relationship(
        cascade="all, delete-orphan", order_by="ProjectDistrict.id"
    )
    communities: Mapped[list[ProjectCommunity]] = relationship(
        cascade="all, delete-orphan", order_by="ProjectCommunity.id"
    )
    clusters: Mapped[list[ProjectCluster]] = relationship(
        cascade="all, delete-orphan", order_by="ProjectCluster.id"
    )
    standard_sectors: Mapped[list[ProjectStandardSector]] = relationship(
        cascade="all, delete-orphan", order_by="ProjectStandardSector.id"
    )
    beneficiaries: Mapped[list[ProjectBeneficiary]] = relationship(
        cascade="all, delete-orphan", order_by="ProjectBeneficiary.type_key"
    )


class ProjectProvince(Base):
    __tablename__ = "project_provinces"
    __table_args__ = (Index("ix_project_provinces_project_id", "project_id"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    project_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), ForeignKey("projects.id"), nullable=False)
    province: Mapped[str] = mapped_column(String(128), nullable=False)


class ProjectDistrict(Base):
    __tablename__ = "project_districts"
    __table_args__ = (Index("ix_project_districts_project_id", "project_id"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    project_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), ForeignKey("projects.id"), nullable=False)
    district: Mapped[str] = mapped_column(String(128), nullable=False)


class ProjectCommunity(Base):
    __tablename__ = "project_communities"
    __table_args__ = (Index("ix_project_communities_project_id", "project_id"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    project_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), ForeignKey("projects.id"), nullable=False)
    community: Mapped[str] = mapped_column(String(255), nullable=False)


class ProjectCluster(Base):
    __tablename__ = "project_clusters"
    __table_args__ = (Index("ix_project_clusters_project_id", "project_id"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    project_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), ForeignKey("projects.id"), nullable=False)
    cluster: Mapped[str] = mapped_column(String(255), nullable=False)


class ProjectStandardSector(Base):
    __tablename__ = "project_standard_sectors"
    __table_args__ = (Index("ix_project_standard_sectors_project_id", "project_id"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    project_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), ForeignKey("projects.id"), nullable=False)
    standard_sector: Mapped[str] = mapped_column(String(255), nullable=False)


class ProjectBeneficiary(Base):
    __tablename__ = "project_beneficiaries"
    __table_args__ = (
        CheckConstraint("direct >= 0", name="ck_project_beneficiaries_direct_non_negative"),
        CheckConstraint("indirect >= 0", name="ck_project_beneficiaries_indirect_non_negative"),
        UniqueConstraint("project_id", "type_key", name="uq_project_beneficiaries_project_type"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    project_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), ForeignKey("projects.id"), nullable=False)
    type_key: Mapped[str] = mapped_column(String(32), nullable=False)
    direct: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    indirect: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    include_in_totals: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)


class BaselineSurvey(Base):
    __tablename__ = "baseline_surveys"
    __table_args__ = (Index("ix_baseline_surveys_project_id", "project_id"),)

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    project_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("projects.id"), nullable=True
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    status: Mapped[BaselineSurveyStatus] = mapped_column(
        _enum_column(BaselineSurveyStatus, "baseline_survey_status"),
        nullable=False,
        default=BaselineSurveyStatus.DRAFT,
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=datetime.utcnow)


class Enumerator(Base):
    __tablename__ = "enumerators"

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    province: Mapped[str | None] = mapped_column(String(128), nullable=True)


class FieldVisit(Base):
    __tablename__ = "field_visits"
    __table_args__ = (Index("ix_field_visits_project_id", "project_id"),)

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    project_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("projects.id"), nullable=True
    )
    visit_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    location: Mapped[str | None] = mapped_column(String(255), nullable=True)


class MonthlyReport(Base):
    __tablename__ = "monthly_reports"
    __table_args__ = (Index("ix_monthly_reports_project_id", "project_id"),)

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    project_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("projects.id"), nullable=True
    )
    report_month: Mapped[date | None] = mapped_column(Date, nullable=True)
    status: Mapped[MonthlyReportStatus] = mapped_column(
        _enum_column(MonthlyReportStatus, "monthly_report_status"),
        nullable=False,
        default=MonthlyReportStatus.DRAFT,
    )


class Evaluation(Base):
    __tablename__ = "evaluations"
    __table_args__ = (Index("ix_evaluations_project_id", "project_id"),)

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    project_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("projects.id"), nullable=True
    )
    evaluation_type: Mapped[EvaluationType] = mapped_column(
        _enum_column(EvaluationType, "evaluation_type"), nullable=False
    )
    completed_at: Mapped[date | None] = mapped_column(Date, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=datetime.utcnow)


class Story(Base):
    __tablename__ = "stories"
    __table_args__ = (Index("ix_stories_project_id", "project_id"),)

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    project_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("projects.id"), nullable=True
    )
    story_type: Mapped[StoryType] = mapped_column(_enum_column(StoryType, "story_type"), nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=datetime.utcnow)


class Finding(Base):
    __tablename__ = "findings"
    __table_args__ = (Index("ix_findings_project_id", "project_id"),)

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    project_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("projects.id"), nullable=True
    )
    finding_type: Mapped[FindingType] = mapped_column(_enum_column(FindingType, "finding_type"), nullable=False)
    severity: Mapped[FindingSeverity] = mapped_column(
        _enum_column(FindingSeverity, "finding_severity"), nullable=False
    )
    status: Mapped[FindingStatus] = mapped_column(
        _enum_column(FindingStatus, "finding_status"),
        nullable=False,
        default=FindingStatus.PENDING,
    )
    department: Mapped[str | None] = mapped_column(String(128), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=datetime.utcnow)


class Distribution(Base):
    __tablename__ = "distributions"
    __table_args__ = (Index("ix_distributions_project_id", "project_id"),)

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    project_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("projects.id"), nullable=True
    )
    assistance_type: Mapped[str] = mapped_column(String(128), nullable=False)
    distribution_date: Mapped[date | None] = mapped_column(Date, nullable=True)


class PdmSurvey(Base):
    __tablename__ = "pdm_surveys"
    __table_args__ = (Index("ix_pdm_surveys_project_id", "project_id"),)

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    project_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("projects.id"), nullable=True
    )
    completed_at: Mapped[date | None] = mapped_column(Date, nullable=True)


class PdmReport(Base):
    __tablename__ = "pdm_reports"
    __table_args__ = (Index("ix_pdm_reports_project_id", "project_id"),)

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    project_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("projects.id"), nullable=True
    )
    report_date: Mapped[date | None] = mapped_column(Date, nullable=True)


class Complaint(Base):
    __tablename__ = "complaints"
    __table_args__ = (Index("ix_complaints_project_id", "project_id"),)

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    project_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("projects.id"), nullable=True
    )
    full_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(64), nullable=True)
    message: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[ComplaintStatus] = mapped_column(
        _enum_column(ComplaintStatus, "complaint_status"),
        nullable=False,
        default=ComplaintStatus.OPEN,
    )
    province: Mapped[str | None] = mapped_column(String(128), nullable=True)
    submitted_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=datetime.utcnow)


class CrmAwareness(Base):
    __tablename__ = "crm_awareness_records"
    __table_args__ = (Index("ix_crm_awareness_project_id", "project_id"),)

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    project_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("projects.id"), nullable=True
    )
    district: Mapped[str | None] = mapped_column(String(128), nullable=True)
    awareness_date: Mapped[date | None] = mapped_column(Date, nullable=True)


class BrandingSettings(Base):
    __tablename__ = "branding_settings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, default=1)
    organization_name: Mapped[str] = mapped_column(String(255), nullable=False)
    logo_data: Mapped[bytes | None] = mapped_column(LargeBinary, nullable=True)
    logo_mime: Mapped[str | None] = mapped_column(String(64), nullable=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=datetime.utcnow)


class User(Base):
    __tablename__ = "users"
    __table_args__ = (UniqueConstraint("email", name="uq_users_email"),)

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(320), nullable=False)
    role: Mapped[UserRole] = mapped_column(_enum_column(UserRole, "user_role"), nullable=False)
    organization: Mapped[str | None] = mapped_column(String(255), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=datetime.utcnow)
