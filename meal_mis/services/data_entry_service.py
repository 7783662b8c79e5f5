"""Data entry for monitoring, evaluation, accountability and PDM records."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from meal_mis.models.entities import (
    BaselineSurvey,
    BaselineSurveyStatus,
    CrmAwareness,
    Distribution,
    Enumerator,
    Evaluation,
    EvaluationType,
    FieldVisit,
    Finding,
    FindingSeverity,
    FindingStatus,
    FindingType,
    MonthlyReport,
    MonthlyReportStatus,
    PdmReport,
    PdmSurvey,
    Story,
    StoryType,
)
from meal_mis.repositories.records_repository import RecordsRepository
from meal_mis.services.validation import optional_text, required_text


@dataclass(slots=True)
class BaselineSurveyCreateData:
    project_id: UUID
    title: str
    status: BaselineSurveyStatus = BaselineSurveyStatus.DRAFT


@dataclass(slots=True)
class EnumeratorCreateData:
    full_name: str
    province: str | None = None


@dataclass(slots=True)
class FieldVisitCreateData:
    project_id: UUID
    visit_date: date
    location: str | None = None


@dataclass(slots=True)
class MonthlyReportCreateData:
    project_id: UUID
    report_month: date
    status: MonthlyReportStatus = MonthlyReportStatus.DRAFT


@dataclass(slots=True)
class EvaluationCreateData:
    evaluation_type: EvaluationType
    project_id: UUID | None = None
    completed_at: date | None = None


@dataclass(slots=True)
class StoryCreateData:
    story_type: StoryType
    title: str
    project_id: UUID | None = None


@dataclass(slots=True)
class FindingCreateData:
    finding_type: FindingType
    severity: FindingSeverity
    status: FindingStatus = FindingStatus.PENDING
    project_id: UUID | None = None
    department: str | None = None


@dataclass(slots=True)
class CrmAwarenessCreateData:
    project_id: UUID | None = None
    district: str | None = None
    awareness_date: date | None = None


@dataclass(slots=True)
class DistributionCreateData:
    assistance_type: str
    project_id: UUID | None = None
    distribution_date: date | None = None


@dataclass(slots=True)
class PdmSurveyCreateData:
    project_id: UUID | None = None
    completed_at: date | None = None


@dataclass(slots=True)
class PdmReportCreateData:
    project_id: UUID | None = None
    report_date: date | None = None


def normalize_month_start(value: date) -> date:
    if value.day != 1:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="report_month must be first day of calendar month.",
        )
    return value


def _id(value: UUID | None) -> str | None:
    return str(value) if value is not None else None


def _iso(value: date | datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


class DataEntryService:
    """Creates and lists the records that feed dashboards and reports."""

    def __init__(self, db: Session) -> None:
        self.db = db
        self.repo = RecordsRepository(db)

    # ---------- Serialization ----------
    @staticmethod
    def serialize_baseline_survey(survey: BaselineSurvey) -> dict[str, object]:
        return {
            "id": str(survey.id),
            "project_id": _id(survey.project_id),
            "title": survey.title,
            "status": survey.status.value,
            "created_at": _iso(survey.created_at),
        }

    @staticmethod
    def serialize_enumerator(enumerator: Enumerator) -> dict[str, object]:
        return {"id": str(enumerator.id), "full_name": enumerator.full_name, "province": enumerator.province}

    @staticmethod
    def serialize_field_visit(visit: FieldVisit) -> dict[str, object]:
        return {
            "id": str(visit.id),
            "project_id": _id(visit.project_id),
            "visit_date": _iso(visit.visit_date),
            "location": visit.location,
        }

    @staticmethod
    def serialize_monthly_report(report: MonthlyReport) -> dict[str, object]:
        return {
            "id": str(report.id),
            "project_id": _id(report.project_id),
            "report_month": _iso(report.report_month),
            "status": report.status.value,
        }

    @staticmethod
    def serialize_evaluation(evaluation: Evaluation) -> dict[str, object]:
        return {
            "id": str(evaluation.id),
            "project_id": _id(evaluation.project_id),
            "evaluation_type": evaluation.evaluation_type.value,
            "completed_at": _iso(evaluation.completed_at),
            "created_at": _iso(evaluation.created_at),
        }

    @staticmethod
    def serialize_story(story: Story) -> dict[str, object]:
        return {
            "id": str(story.id),
            "project_id": _id(story.project_id),
            "story_type": story.story_type.value,
            "title": story.title,
            "created_at": _iso(story.created_at),
        }

    @staticmethod
    def serialize_finding(finding: Finding) -> dict[str, object]:
        return {
            "id": str(finding.id),
            "project_id": _id(finding.project_id),
            "finding_type": finding.finding_type.value,
            "severity": finding.severity.value,
            "status": finding.status.value,
            "department": finding.department,
            "created_at": _iso(finding.created_at),
        }

    @staticmethod
    def serialize_crm_awareness(record: CrmAwareness) -> dict[str, object]:
        return {
            "id": str(record.id),
            "project_id": _id(record.project_id),
            "district": record.district,
            "awareness_date": _iso(record.awareness_date),
        }

    @staticmethod
    def serialize_distribution(distribution: Distribution) -> dict[str, object]:
        return {
            "id": str(distribution.id),
            "project_id": _id(distribution.project_id),
            "assistance_type": distribution.assistance_type,
            "distribution_date": _iso(distribution.distribution_date),
        }

    @staticmethod
    def serialize_pdm_survey(survey: PdmSurvey) -> dict[str, object]:
        return {"id": str(survey.id), "project_id": _id(survey.project_id), "completed_at": _iso(survey.completed_at)}

    @staticmethod
    def serialize_pdm_report(report: PdmReport) -> dict[str, object]:
        return {"id": str(report.id), "project_id": _id(report.project_id), "report_date": _iso(report.report_date)}

    # ---------- Helpers ----------
    def _ensure_project(self, project_id: UUID | None) -> None:
        if project_id is not None and not self.repo.project_exists(project_id):
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail="project_id must reference an existing project.",
            )

    def _save(self, record):
        self.db.add(record)
        self.db.commit()
        self.db.refresh(record)
        return record

    # ---------- Monitoring ----------
    def list_baseline_surveys(self, project_id: UUID | None = None) -> list[BaselineSurvey]:
        return list(
            self.repo.list_records(BaselineSurvey, order_by=BaselineSurvey.created_at.desc(), project_id=project_id)
        )

    def create_baseline_survey(self, data: BaselineSurveyCreateData) -> BaselineSurvey:
        self._ensure_project(data.project_id)
        return self._save(
            BaselineSurvey(
                project_id=data.project_id,
                title=required_text(data.title, "title"),
                status=data.status,
                created_at=datetime.utcnow(),
            )
        )

    def list_enumerators(self) -> list[Enumerator]:
        return list(self.repo.list_records(Enumerator, order_by=Enumerator.full_name.asc()))

    def create_enumerator(self, data: EnumeratorCreateData) -> Enumerator:
        return self._save(
            Enumerator(full_name=required_text(data.full_name, "full_name"), province=optional_text(data.province))
        )

    def list_field_visits(self, project_id: UUID | None = None) -> list[FieldVisit]:
        return list(self.repo.list_records(FieldVisit, order_by=FieldVisit.visit_date.desc(), project_id=project_id))

    def create_field_visit(self, data: FieldVisitCreateData) -> FieldVisit:
        self._ensure_project(data.project_id)
        return self._save(
            FieldVisit(project_id=data.project_id, visit_date=data.visit_date, location=optional_text(data.location))
        )

    def list_monthly_reports(self, project_id: UUID | None = None) -> list[MonthlyReport]:
        return list(
            self.repo.list_records(MonthlyReport, order_by=MonthlyReport.report_month.desc(), project_id=project_id)
        )

    def create_monthly_report(self, data: MonthlyReportCreateData) -> MonthlyReport:
        self._ensure_project(data.project_id)
        return self._save(
            MonthlyReport(
                project_id=data.project_id,
                report_month=normalize_month_start(data.report_month),
                status=data.status,
            )
        )

    # ---------- Evaluation ----------
    def list_evaluations(self, project_id: UUID | None = None) -> list[Evaluation]:
        return list(self.repo.list_records(Evaluation, order_by=Evaluation.created_at.desc(), project_id=project_id))

    def create_evaluation(self, data: EvaluationCreateData) -> Evaluation:
        self._ensure_project(data.project_id)
        return self._save(
            Evaluation(
                project_id=data.project_id,
                evaluation_type=data.evaluation_type,
                completed_at=data.completed_at,
                created_at=datetime.utcnow(),
            )
        )

    def list_stories(self, project_id: UUID | None = None) -> list[Story]:
        return list(self.repo.list_records(Story, order_by=Story.created_at.desc(), project_id=project_id))

    def create_story(self, data: StoryCreateData) -> Story:
        self._ensure_project(data.project_id)
        return self._save(
            Story(
                project_id=data.project_id,
                story_type=data.story_type,
                title=required_text(data.title, "title"),
                created_at=datetime.utcnow(),
            )
        )

    # ---------- Accountability ----------
    def list_findings(self, project_id: UUID | None = None) -> list[Finding]:
        return list(self.repo.list_records(Finding, order_by=Finding.created_at.desc(), project_id=project_id))

    def create_finding(self, data: FindingCreateData) -> Finding:
        self._ensure_project(data.project_id)
        return self._save(
            Finding(
                project_id=data.project_id,
                finding_type=data.finding_type,
                severity=data.severity,
                status=data.status,
                department=optional_text(data.department),
                created_at=datetime.utcnow(),
            )
        )

    def list_crm_awareness(self, project_id: UUID | None = None) -> list[CrmAwareness]:
        return list(
            self.repo.list_records(CrmAwareness, order_by=CrmAwareness.awareness_date.desc(), project_id=project_id)
        )

    def create_crm_awareness(self, data: CrmAwarenessCreateData) -> CrmAwareness:
        self._ensure_project(data.project_id)
        return self._save(
            CrmAwareness(
                project_id=data.project_id,
                district=optional_text(data.district),
                awareness_date=data.awareness_date,
            )
        )

    # ---------- Post-distribution monitoring ----------
    def list_distributions(self, project_id: UUID | None = None) -> list[Distribution]:
        return list(
            self.repo.list_records(
                Distribution, order_by=Distribution.distribution_date.desc(), project_id=project_id
            )
        )

    def create_distribution(self, data: DistributionCreateData) -> Distribution:
        self._ensure_project(data.project_id)
        return self._save(
            Distribution(
                project_id=data.project_id,
                assistance_type=required_text(data.assistance_type, "assistance_type"),
                distribution_date=data.distribution_date,
            )
        )

    def list_pdm_surveys(self, project_id: UUID | None = None) -> list[PdmSurvey]:
        return list(self.repo.list_records(PdmSurvey, order_by=PdmSurvey.completed_at.desc(), project_id=project_id))

    def create_pdm_survey(self, data: PdmSurveyCreateData) -> PdmSurvey:
        self._ensure_project(data.project_id)
        return self._save(PdmSurvey(project_id=data.project_id, completed_at=data.completed_at))

    def list_pdm_reports(self, project_id: UUID | None = None) -> list[PdmReport]:
        return list(self.repo.list_records(PdmReport, order_by=PdmReport.report_date.desc(), project_id=project_id))

    def create_pdm_report(self, data: PdmReportCreateData) -> PdmReport:
        self._ensure_project(data.project_id)
        return self._save(PdmReport(project_id=data.project_id, report_date=data.report_date))
