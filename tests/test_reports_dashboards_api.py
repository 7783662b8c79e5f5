from __future__ import annotations

import csv
import io
import uuid
from datetime import date

import pdfplumber
import pytest
from fastapi.testclient import TestClient
from openpyxl import load_workbook
from sqlalchemy.orm import Session

from meal_mis.models.entities import (
    BaselineSurvey,
    BaselineSurveyStatus,
    Complaint,
    ComplaintStatus,
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
from meal_mis.services.report_renderer import ReportGenerationError
from meal_mis.services.report_service import ReportService


def _create_portfolio(client: TestClient) -> tuple[str, str]:
    health = client.post(
        "/api/v1/projects",
        json={
            "code": "P1",
            "name": "Kabul Health",
            "sector": "Health",
            "start_date": "2023-01-01",
            "end_date": "2023-12-31",
            "provinces": ["Kabul"],
            "clusters": ["Health"],
            "beneficiaries": {"direct": {"households": 10, "adults_women": 25}},
        },
    )
    education = client.post(
        "/api/v1/projects",
        json={
            "code": "P2",
            "name": "Balkh Schools",
            "sector": "Education",
            "start_date": "2024-01-01",
            "end_date": "2024-12-31",
            "provinces": ["Balkh"],
            "clusters": ["Education"],
            "beneficiaries": {"direct": {"households": 5}},
        },
    )
    assert health.status_code == 201
    assert education.status_code == 201
    return health.json()["id"], education.json()["id"]


def _seed_activity(db: Session, health_id: str, education_id: str) -> None:
    health = uuid.UUID(health_id)
    education = uuid.UUID(education_id)
    db.add_all(
        [
            BaselineSurvey(project_id=health, title="Kabul baseline", status=BaselineSurveyStatus.COMPLETED),
            BaselineSurvey(project_id=education, title="Balkh baseline", status=BaselineSurveyStatus.DRAFT),
            Enumerator(full_name="Enumerator One", province="Kabul"),
            FieldVisit(project_id=health, visit_date=date(2023, 5, 3), location="Bagrami"),
            MonthlyReport(project_id=health, report_month=date(2023, 5, 1), status=MonthlyReportStatus.APPROVED),
            Evaluation(project_id=health, evaluation_type=EvaluationType.MIDTERM, completed_at=date(2023, 7, 1)),
            Evaluation(project_id=education, evaluation_type=EvaluationType.ENDLINE),
            Story(project_id=None, story_type=StoryType.SUCCESS, title="Clean water"),
            Finding(
                project_id=education,
                finding_type=FindingType.NEGATIVE,
                severity=FindingSeverity.MAJOR,
                status=FindingStatus.IN_PROGRESS,
            ),
            Distribution(project_id=health, assistance_type="Hygiene kits", distribution_date=date(2023, 8, 1)),
            PdmSurvey(project_id=health, completed_at=date(2023, 9, 1)),
            PdmReport(project_id=health, report_date=date(2023, 9, 15)),
            Complaint(project_id=health, status=ComplaintStatus.OPEN, province="Kabul"),
        ]
    )
    db.commit()


def _pdf_text(content: bytes) -> str:
    with pdfplumber.open(io.BytesIO(content)) as pdf:
        return "\n".join(page.extract_text() or "" for page in pdf.pages)


def test_generate_report_for_filtered_year(client: TestClient, db_session: Session) -> None:
    health_id, education_id = _create_portfolio(client)
    _seed_activity(db_session, health_id, education_id)

    response = client.post("/api/v1/reports/generate", json={"years": [2023, "oops"]})

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert response.headers["cache-control"] == "no-store"
    disposition = response.headers["content-disposition"]
    assert disposition.startswith('attachment; filename="nsdo-dashboard-report-')
    assert disposition.endswith('.pdf"')

    text = _pdf_text(response.content)
    assert "Years: 2023" in text
    assert "1 project(s) included" in text
    assert "Kabul Health" in text
    assert "Balkh Schools" not in text
    assert "Midterm evaluations" in text
    assert "Endline evaluations" not in text
    assert "Stories collected" in text
    assert "No findings captured for the selected filters." in text
    assert "1 completed / 1 total" in text


def test_generate_report_without_body_covers_everything(client: TestClient) -> None:
    _create_portfolio(client)

    response = client.post("/api/v1/reports/generate")

    assert response.status_code == 200
    text = _pdf_text(response.content)
    assert "Filters: none (full portfolio report)" in text
    assert "2 project(s) included" in text


def test_generate_report_failure_returns_500(client: TestClient, monkeypatch: pytest.MonkeyPatch) -> None:
    def failing_generate(self, filters, *, generated_at=None):
        raise ReportGenerationError("boom")

    monkeypatch.setattr(ReportService, "generate_report", failing_generate)

    response = client.post("/api/v1/reports/generate", json={})

    assert response.status_code == 500
    assert response.json() == {"detail": "Failed to generate report."}


def test_report_header_uses_saved_branding(client: TestClient) -> None:
    client.put("/api/v1/branding", json={"organization_name": "Relief Partners"})

    response = client.post("/api/v1/reports/generate", json={})

    assert "Relief Partners" in _pdf_text(response.content)


def test_dashboard_overview_and_filters(client: TestClient, db_session: Session) -> None:
    health_id, education_id = _create_portfolio(client)
    _seed_activity(db_session, health_id, education_id)

    overview = client.get("/api/v1/dashboards/overview", params={"province": "Kabul"})
    assert overview.status_code == 200
    body = overview.json()
    assert body["total_projects"] == 1
    assert body["total_beneficiaries"] == 25
    assert body["covered_provinces"] == ["Kabul"]
    assert body["complaints"]["open"] == 1
    assert body["findings"]["total"] == 0

    filters = client.get("/api/v1/dashboards/filters")
    assert filters.status_code == 200
    assert filters.json()["years"] == [2024, 2023]
    assert filters.json()["sectors"] == ["Education", "Health"]


def test_export_projects_csv_and_xlsx(client: TestClient) -> None:
    _create_portfolio(client)

    csv_response = client.get("/api/v1/exports/projects", params={"format": "csv", "year": 2024})
    assert csv_response.status_code == 200
    assert csv_response.headers["content-disposition"] == 'attachment; filename="nsdo-dashboard-projects.csv"'
    rows = list(csv.DictReader(io.StringIO(csv_response.text)))
    assert [row["code"] for row in rows] == ["P2"]
    assert rows[0]["direct_beneficiaries"] == "5"

    xlsx_response = client.get("/api/v1/exports/projects", params={"format": "xlsx"})
    assert xlsx_response.status_code == 200
    sheet = load_workbook(io.BytesIO(xlsx_response.content)).active
    values = list(sheet.iter_rows(values_only=True))
    assert values[0][0] == "code"
    assert [row[0] for row in values[1:]] == ["P1", "P2"]


def test_export_rejects_unknown_format(client: TestClient) -> None:
    response = client.get("/api/v1/exports/projects", params={"format": "pdf"})

    assert response.status_code == 422
