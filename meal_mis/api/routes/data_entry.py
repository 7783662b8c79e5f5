"""Data-entry endpoints for monitoring, evaluation, accountability and PDM records."""

from __future__ import annotations

from datetime import date
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from meal_mis.db.dependencies import get_db_session
from meal_mis.models.entities import (
    BaselineSurveyStatus,
    EvaluationType,
    FindingSeverity,
    FindingStatus,
    FindingType,
    MonthlyReportStatus,
    StoryType,
)
from meal_mis.services.data_entry_service import (
    BaselineSurveyCreateData,
    CrmAwarenessCreateData,
    DataEntryService,
    DistributionCreateData,
    EnumeratorCreateData,
    EvaluationCreateData,
    FieldVisitCreateData,
    FindingCreateData,
    MonthlyReportCreateData,
    PdmReportCreateData,
    PdmSurveyCreateData,
    StoryCreateData,
)

router = APIRouter(prefix="/data-entry", tags=["data-entry"])


class BaselineSurveyPayload(BaseModel):
    project_id: UUID
    title: str = Field(min_length=1, max_length=255)
    status: BaselineSurveyStatus = BaselineSurveyStatus.DRAFT


class EnumeratorPayload(BaseModel):
    full_name: str = Field(min_length=1, max_length=255)
    province: str | None = Field(default=None, max_length=128)


class FieldVisitPayload(BaseModel):
    project_id: UUID
    visit_date: date
    location: str | None = Field(default=None, max_length=255)


class MonthlyReportPayload(BaseModel):
    project_id: UUID
    report_month: date
    status: MonthlyReportStatus = MonthlyReportStatus.DRAFT


class EvaluationPayload(BaseModel):
    evaluation_type: EvaluationType
    project_id: UUID | None = None
    completed_at: date | None = None


class StoryPayload(BaseModel):
    story_type: StoryType
    title: str = Field(min_length=1, max_length=255)
    project_id: UUID | None = None


class FindingPayload(BaseModel):
    finding_type: FindingType
    severity: FindingSeverity
    status: FindingStatus = FindingStatus.PENDING
    project_id: UUID | None = None
    department: str | None = Field(default=None, max_length=128)


class CrmAwarenessPayload(BaseModel):
    project_id: UUID | None = None
    district: str | None = Field(default=None, max_length=128)
    awareness_date: date | None = None


class DistributionPayload(BaseModel):
    assistance_type: str = Field(min_length=1, max_length=128)
    project_id: UUID | None = None
    distribution_date: date | None = None


class PdmSurveyPayload(BaseModel):
    project_id: UUID | None = None
    completed_at: date | None = None


class PdmReportPayload(BaseModel):
    project_id: UUID | None = None
    report_date: date | None = None


def _data_entry_service(db: Session) -> DataEntryService:
    return DataEntryService(db)


# ---------- Monitoring ----------
@router.get("/monitoring/baseline-surveys")
def list_baseline_surveys(
    project_id: UUID | None = Query(default=None),
    db: Session = Depends(get_db_session),
) -> dict[str, list[object]]:
    service = _data_entry_service(db)
    return {"items": [service.serialize_baseline_survey(item) for item in service.list_baseline_surveys(project_id)]}


@router.post("/monitoring/baseline-surveys", status_code=status.HTTP_201_CREATED)
def create_baseline_survey(payload: BaselineSurveyPayload, db: Session = Depends(get_db_session)) -> dict[str, object]:
    service = _data_entry_service(db)
    survey = service.create_baseline_survey(
        BaselineSurveyCreateData(project_id=payload.project_id, title=payload.title, status=payload.status)
    )
    return service.serialize_baseline_survey(survey)


@router.get("/monitoring/enumerators")
def list_enumerators(db: Session = Depends(get_db_session)) -> dict[str, list[object]]:
    service = _data_entry_service(db)
    return {"items": [service.serialize_enumerator(item) for item in service.list_enumerators()]}


@router.post("/monitoring/enumerators", status_code=status.HTTP_201_CREATED)
def create_enumerator(payload: EnumeratorPayload, db: Session = Depends(get_db_session)) -> dict[str, object]:
    service = _data_entry_service(db)
    enumerator = service.create_enumerator(
        EnumeratorCreateData(full_name=payload.full_name, province=payload.province)
    )
    return service.serialize_enumerator(enumerator)


@router.get("/monitoring/field-visits")
def list_field_visits(
    project_id: UUID | None = Query(default=None),
    db: Session = Depends(get_db_session),
) -> dict[str, list[object]]:
    service = _data_entry_service(db)
    return {"items": [service.serialize_field_visit(item) for item in service.list_field_visits(project_id)]}


@router.post("/monitoring/field-visits", status_code=status.HTTP_201_CREATED)
def create_field_visit(payload: FieldVisitPayload, db: Session = Depends(get_db_session)) -> dict[str, object]:
    service = _data_entry_service(db)
    visit = service.create_field_visit(
        FieldVisitCreateData(project_id=payload.project_id, visit_date=payload.visit_date, location=payload.location)
    )
    return service.serialize_field_visit(visit)


@router.get("/monitoring/monthly-reports")
def list_monthly_reports(
    project_id: UUID | None = Query(default=None),
    db: Session = Depends(get_db_session),
) -> dict[str, list[object]]:
    service = _data_entry_service(db)
    return {"items": [service.serialize_monthly_report(item) for item in service.list_monthly_reports(project_id)]}


@router.post("/monitoring/monthly-reports", status_code=status.HTTP_201_CREATED)
def create_monthly_report(payload: MonthlyReportPayload, db: Session = Depends(get_db_session)) -> dict[str, object]:
    service = _data_entry_service(db)
    report = service.create_monthly_report(
        MonthlyReportCreateData(
            project_id=payload.project_id,
            report_month=payload.report_month,
            status=payload.status,
        )
    )
    return service.serialize_monthly_report(report)


# ---------- Evaluation ----------
@router.get("/evaluation/evaluations")
def list_evaluations(
    project_id: UUID | None = Query(default=None),
    db: Session = Depends(get_db_session),
) -> dict[str, list[object]]:
    service = _data_entry_service(db)
    return {"items": [service.serialize_evaluation(item) for item in service.list_evaluations(project_id)]}


@router.post("/evaluation/evaluations", status_code=status.HTTP_201_CREATED)
def create_evaluation(payload: EvaluationPayload, db: Session = Depends(get_db_session)) -> dict[str, object]:
    service = _data_entry_service(db)
    evaluation = service.create_evaluation(
        EvaluationCreateData(
            evaluation_type=payload.evaluation_type,
            project_id=payload.project_id,
            completed_at=payload.completed_at,
        )
    )
    return service.serialize_evaluation(evaluation)


@router.get("/evaluation/stories")
def list_stories(
    project_id: UUID | None = Query(default=None),
    db: Session = Depends(get_db_session),
) -> dict[str, list[object]]:
    service = _data_entry_service(db)
    return {"items": [service.serialize_story(item) for item in service.list_stories(project_id)]}


@router.post("/evaluation/stories", status_code=status.HTTP_201_CREATED)
def create_story(payload: StoryPayload, db: Session = Depends(get_db_session)) -> dict[str, object]:
    service = _data_entry_service(db)
    story = service.create_story(
        StoryCreateData(story_type=payload.story_type, title=payload.title, project_id=payload.project_id)
    )
    return service.serialize_story(story)


# ---------- Accountability ----------
@router.get("/accountability/findings")
def list_findings(
    project_id: UUID | None = Query(default=None),
    db: Session = Depends(get_db_session),
) -> dict[str, list[object]]:
    service = _data_entry_service(db)
    return {"items": [service.serialize_finding(item) for item in service.list_findings(project_id)]}


@router.post("/accountability/findings", status_code=status.HTTP_201_CREATED)
def create_finding(payload: FindingPayload, db: Session = Depends(get_db_session)) -> dict[str, object]:
    service = _data_entry_service(db)
    finding = service.create_finding(
        FindingCreateData(
            finding_type=payload.finding_type,
            severity=payload.severity,
            status=payload.status,
            project_id=payload.project_id,
            department=payload.department,
        )
    )
    return service.serialize_finding(finding)


@router.get("/accountability/crm-awareness")
def list_crm_awareness(
    project_id: UUID | None = Query(default=None),
    db: Session = Depends(get_db_session),
) -> dict[str, list[object]]:
    service = _data_entry_service(db)
    return {"items": [service.serialize_crm_awareness(item) for item in service.list_crm_awareness(project_id)]}


@router.post("/accountability/crm-awareness", status_code=status.HTTP_201_CREATED)
def create_crm_awareness(payload: CrmAwarenessPayload, db: Session = Depends(get_db_session)) -> dict[str, object]:
    service = _data_entry_service(db)
    record = service.create_crm_awareness(
        CrmAwarenessCreateData(
            project_id=payload.project_id,
            district=payload.district,
            awareness_date=payload.awareness_date,
        )
    )
    return service.serialize_crm_awareness(record)


# ---------- Post-distribution monitoring ----------
@router.get("/pdm/distributions")
def list_distributions(
    project_id: UUID | None = Query(default=None),
    db: Session = Depends(get_db_session),
) -> dict[str, list[object]]:
    service = _data_entry_service(db)
    return {"items": [service.serialize_distribution(item) for item in service.list_distributions(project_id)]}


@router.post("/pdm/distributions", status_code=status.HTTP_201_CREATED)
def create_distribution(payload: DistributionPayload, db: Session = Depends(get_db_session)) -> dict[str, object]:
    service = _data_entry_service(db)
    distribution = service.create_distribution(
        DistributionCreateData(
            assistance_type=payload.assistance_type,
            project_id=payload.project_id,
            distribution_date=payload.distribution_date,
        )
    )
    return service.serialize_distribution(distribution)


@router.get("/pdm/surveys")
def list_pdm_surveys(
    project_id: UUID | None = Query(default=None),
    db: Session = Depends(get_db_session),
) -> dict[str, list[object]]:
    service = _data_entry_service(db)
    return {"items": [service.serialize_pdm_survey(item) for item in service.list_pdm_surveys(project_id)]}


@router.post("/pdm/surveys", status_code=status.HTTP_201_CREATED)
def create_pdm_survey(payload: PdmSurveyPayload, db: Session = Depends(get_db_session)) -> dict[str, object]:
    service = _data_entry_service(db)
    survey = service.create_pdm_survey(
        PdmSurveyCreateData(project_id=payload.project_id, completed_at=payload.completed_at)
    )
    return service.serialize_pdm_survey(survey)


@router.get("/pdm/reports")
def list_pdm_reports(
    project_id: UUID | None = Query(default=None),
    db: Session = Depends(get_db_session),
) -> dict[str, list[object]]:
    service = _data_entry_service(db)
    return {"items": [service.serialize_pdm_report(item) for item in service.list_pdm_reports(project_id)]}


@router.post("/pdm/reports", status_code=status.HTTP_201_CREATED)
def create_pdm_report(payload: PdmReportPayload, db: Session = Depends(get_db_session)) -> dict[str, object]:
    service = _data_entry_service(db)
    report = service.create_pdm_report(
        PdmReportCreateData(project_id=payload.project_id, report_date=payload.report_date)
    )
    return service.serialize_pdm_report(report)
