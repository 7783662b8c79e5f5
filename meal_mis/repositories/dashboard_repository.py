"""Repository helpers for the portfolio snapshot and project registry."""

from __future__ import annotations

import base64
from collections.abc import Sequence
from datetime import date
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from meal_mis.models.entities import (
    BaselineSurvey,
    BrandingSettings,
    Complaint,
    CrmAwareness,
    Distribution,
    Enumerator,
    Evaluation,
    FieldVisit,
    Finding,
    MonthlyReport,
    PdmReport,
    PdmSurvey,
    Project,
    Story,
)
from meal_mis.services.snapshot import (
    DEFAULT_ORGANIZATION_NAME,
    BaselineSurveyRecord,
    BeneficiaryBreakdown,
    Branding,
    ComplaintRecord,
    CrmAwarenessRecord,
    DashboardSnapshot,
    DistributionRecord,
    EnumeratorRecord,
    EvaluationData,
    EvaluationRecord,
    FieldVisitRecord,
    FindingRecord,
    FindingsData,
    MonitoringData,
    MonthlyReportRecord,
    PdmData,
    PdmReportRecord,
    PdmSurveyRecord,
    ProjectRecord,
    StoryRecord,
)

BRANDING_ROW_ID = 1


def _id(value: UUID | None) -> str | None:
    return str(value) if value is not None else None


def _iso(value: date | None) -> str | None:
    return value.isoformat() if value is not None else None


def project_to_record(project: Project) -> ProjectRecord:
    breakdown = BeneficiaryBreakdown.from_partial(
        direct={row.type_key: row.direct for row in project.beneficiaries},
        indirect={row.type_key: row.indirect for row in project.beneficiaries},
        include={row.type_key: row.include_in_totals for row in project.beneficiaries},
    )
    return ProjectRecord(
        id=str(project.id),
        code=project.code,
        name=project.name,
        sector=project.sector,
        donor=project.donor,
        country=project.country,
        start=_iso(project.start_date),
        end=_iso(project.end_date),
        budget=float(project.budget) if project.budget is not None else None,
        staff=project.staff or 0,
        goal=project.goal,
        objectives=project.objectives,
        major_achievements=project.major_achievements,
        provinces=tuple(row.province for row in project.provinces),
        districts=tuple(row.district for row in project.districts),
        communities=tuple(row.community for row in project.communities),
        clusters=tuple(row.cluster for row in project.clusters),
        standard_sectors=tuple(row.standard_sector for row in project.standard_sectors),
        beneficiaries=breakdown,
    )


def branding_to_record(row: BrandingSettings | None) -> Branding:
    if row is None:
        return Branding()
    logo_data_url = None
    if row.logo_data and row.logo_mime:
        logo_data_url = f"data:{row.logo_mime};base64,{base64.b64encode(row.logo_data).decode('ascii')}"
    return Branding(
        organization_name=row.organization_name or DEFAULT_ORGANIZATION_NAME,
        logo_data_url=logo_data_url,
    )


class DashboardRepository:
    """Persistence operations backing dashboards, reports and the project registry."""

    def __init__(self, db: Session) -> None:
        self.db = db

    # ---------- Projects ----------
    def _projects_query(self):
        return select(Project).options(
            selectinload(Project.provinces),
            selectinload(Project.districts),
            selectinload(Project.communities),
            selectinload(Project.clusters),
            selectinload(Project.standard_sectors),
            selectinload(Project.beneficiaries),
        )

    def list_projects(self) -> Sequence[Project]:
        return self.db.scalars(self._projects_query().order_by(Project.code.asc())).all()

    def get_project(self, project_id: UUID) -> Project | None:
        return self.db.scalar(self._projects_query().where(Project.id == project_id))

    # ---------- Branding ----------
    def get_branding(self) -> BrandingSettings | None:
        return self.db.scalar(select(BrandingSettings).where(BrandingSettings.id == BRANDING_ROW_ID))

    def upsert_branding(self, row: BrandingSettings) -> BrandingSettings:
        merged = self.db.merge(row)
        self.db.flush()
        return merged

    # ---------- Snapshot ----------
    def _monitoring(self) -> MonitoringData:
        surveys = self.db.scalars(select(BaselineSurvey).order_by(BaselineSurvey.created_at.desc())).all()
        enumerators = self.db.scalars(select(Enumerator).order_by(Enumerator.full_name.asc())).all()
        visits = self.db.scalars(select(FieldVisit).order_by(FieldVisit.visit_date.desc())).all()
        monthly = self.db.scalars(select(MonthlyReport).order_by(MonthlyReport.report_month.desc())).all()
        return MonitoringData(
            baseline_surveys=tuple(
                BaselineSurveyRecord(id=str(row.id), project_id=_id(row.project_id), title=row.title, status=row.status)
                for row in surveys
            ),
            enumerators=tuple(
                EnumeratorRecord(id=str(row.id), full_name=row.full_name, province=row.province)
                for row in enumerators
            ),
            field_visits=tuple(
                FieldVisitRecord(
                    id=str(row.id),
                    project_id=_id(row.project_id),
                    visit_date=_iso(row.visit_date),
                    location=row.location,
                )
                for row in visits
            ),
            monthly_reports=tuple(
                MonthlyReportRecord(
                    id=str(row.id),
                    project_id=_id(row.project_id),
                    status=row.status,
                    report_month=_iso(row.report_month),
                )
                for row in monthly
            ),
        )

    def _evaluation(self) -> EvaluationData:
        evaluations = self.db.scalars(select(Evaluation).order_by(Evaluation.created_at.desc())).all()
        stories = self.db.scalars(select(Story).order_by(Story.created_at.desc())).all()
        return EvaluationData(
            evaluations=tuple(
                EvaluationRecord(
                    id=str(row.id),
                    project_id=_id(row.project_id),
                    evaluation_type=row.evaluation_type,
                    completed_at=_iso(row.completed_at),
                )
                for row in evaluations
            ),
            stories=tuple(
                StoryRecord(id=str(row.id), project_id=_id(row.project_id), story_type=row.story_type, title=row.title)
                for row in stories
            ),
        )

    def _findings(self) -> FindingsData:
        rows = self.db.scalars(select(Finding).order_by(Finding.created_at.desc())).all()
        return FindingsData(
            findings=tuple(
                FindingRecord(
                    id=str(row.id),
                    project_id=_id(row.project_id),
                    finding_type=row.finding_type,
                    severity=row.severity,
                    status=row.status,
                    department=row.department,
                )
                for row in rows
            )
        )

    def _pdm(self) -> PdmData:
        distributions = self.db.scalars(select(Distribution).order_by(Distribution.distribution_date.desc())).all()
        surveys = self.db.scalars(select(PdmSurvey).order_by(PdmSurvey.completed_at.desc())).all()
        reports = self.db.scalars(select(PdmReport).order_by(PdmReport.report_date.desc())).all()
        return PdmData(
            distributions=tuple(
                DistributionRecord(
                    id=str(row.id),
                    project_id=_id(row.project_id),
                    assistance_type=row.assistance_type,
                    distribution_date=_iso(row.distribution_date),
                )
                for row in distributions
            ),
            surveys=tuple(
                PdmSurveyRecord(id=str(row.id), project_id=_id(row.project_id), completed_at=_iso(row.completed_at))
                for row in surveys
            ),
            reports=tuple(
                PdmReportRecord(id=str(row.id), project_id=_id(row.project_id), report_date=_iso(row.report_date))
                for row in reports
            ),
        )

    def fetch_snapshot(self) -> DashboardSnapshot:
        complaints = self.db.scalars(select(Complaint).order_by(Complaint.submitted_at.desc())).all()
        awareness = self.db.scalars(select(CrmAwareness).order_by(CrmAwareness.awareness_date.desc())).all()

        return DashboardSnapshot(
            projects=tuple(project_to_record(project) for project in self.list_projects()),
            monitoring=self._monitoring(),
            evaluation=self._evaluation(),
            findings=self._findings(),
            pdm=self._pdm(),
            branding=branding_to_record(self.get_branding()),
            complaints=tuple(
                ComplaintRecord(
                    id=str(row.id),
                    project_id=_id(row.project_id),
                    status=row.status,
                    province=row.province,
                )
                for row in complaints
            ),
            crm_awareness=tuple(
                CrmAwarenessRecord(
                    id=str(row.id),
                    project_id=_id(row.project_id),
                    district=row.district,
                    awareness_date=_iso(row.awareness_date),
                )
                for row in awareness
            ),
        )
