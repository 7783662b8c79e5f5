from __future__ import annotations

import io
import uuid

import pdfplumber
from fastapi.testclient import TestClient


def _create_project(client: TestClient, code: str, name: str, sector: str, start: str, end: str) -> str:
    response = client.post(
        "/api/v1/projects",
        json={"code": code, "name": name, "sector": sector, "start_date": start, "end_date": end},
    )
    assert response.status_code == 201
    return response.json()["id"]


def _pdf_text(content: bytes) -> str:
    with pdfplumber.open(io.BytesIO(content)) as pdf:
        return "\n".join(page.extract_text() or "" for page in pdf.pages)


def test_monitoring_records_round_trip(client: TestClient) -> None:
    project_id = _create_project(client, "P1", "Kabul Health", "Health", "2023-01-01", "2023-12-31")

    survey = client.post(
        "/api/v1/data-entry/monitoring/baseline-surveys",
        json={"project_id": project_id, "title": " Kabul baseline ", "status": "completed"},
    )
    enumerator = client.post(
        "/api/v1/data-entry/monitoring/enumerators", json={"full_name": "Enumerator One", "province": "Kabul"}
    )
    visit = client.post(
        "/api/v1/data-entry/monitoring/field-visits",
        json={"project_id": project_id, "visit_date": "2023-05-03", "location": "Bagrami"},
    )
    monthly = client.post(
        "/api/v1/data-entry/monitoring/monthly-reports",
        json={"project_id": project_id, "report_month": "2023-05-01", "status": "approved"},
    )

    assert survey.status_code == 201
    assert survey.json()["title"] == "Kabul baseline"
    assert enumerator.status_code == 201
    assert visit.status_code == 201
    assert visit.json()["visit_date"] == "2023-05-03"
    assert monthly.status_code == 201
    assert monthly.json()["status"] == "approved"

    listing = client.get("/api/v1/data-entry/monitoring/baseline-surveys", params={"project_id": project_id})
    assert [item["status"] for item in listing.json()["items"]] == ["completed"]
    assert len(client.get("/api/v1/data-entry/monitoring/enumerators").json()["items"]) == 1
    assert len(client.get("/api/v1/data-entry/monitoring/field-visits").json()["items"]) == 1
    assert len(client.get("/api/v1/data-entry/monitoring/monthly-reports").json()["items"]) == 1


def test_required_fields_and_references_are_validated(client: TestClient) -> None:
    project_id = _create_project(client, "P1", "Kabul Health", "Health", "2023-01-01", "2023-12-31")

    missing_project = client.post("/api/v1/data-entry/monitoring/baseline-surveys", json={"title": "Baseline"})
    blank_title = client.post(
        "/api/v1/data-entry/monitoring/baseline-surveys", json={"project_id": project_id, "title": "  "}
    )
    unknown_project = client.post(
        "/api/v1/data-entry/monitoring/field-visits",
        json={"project_id": str(uuid.uuid4()), "visit_date": "2023-05-03"},
    )
    mid_month = client.post(
        "/api/v1/data-entry/monitoring/monthly-reports",
        json={"project_id": project_id, "report_month": "2023-05-15"},
    )
    bad_severity = client.post(
        "/api/v1/data-entry/accountability/findings",
        json={"finding_type": "negative", "severity": "catastrophic"},
    )

    assert missing_project.status_code == 422
    assert blank_title.status_code == 422
    assert unknown_project.status_code == 422
    assert unknown_project.json()["detail"] == "project_id must reference an existing project."
    assert mid_month.status_code == 422
    assert bad_severity.status_code == 422
    assert client.get("/api/v1/data-entry/monitoring/baseline-surveys").json()["items"] == []


def test_list_filters_by_project(client: TestClient) -> None:
    health_id = _create_project(client, "P1", "Kabul Health", "Health", "2023-01-01", "2023-12-31")
    education_id = _create_project(client, "P2", "Balkh Schools", "Education", "2024-01-01", "2024-12-31")

    client.post("/api/v1/data-entry/pdm/distributions", json={"project_id": health_id, "assistance_type": "Kits"})
    client.post("/api/v1/data-entry/pdm/distributions", json={"project_id": education_id, "assistance_type": "Books"})
    client.post("/api/v1/data-entry/pdm/distributions", json={"assistance_type": "Cash"})

    scoped = client.get("/api/v1/data-entry/pdm/distributions", params={"project_id": education_id})
    everything = client.get("/api/v1/data-entry/pdm/distributions")

    assert [item["assistance_type"] for item in scoped.json()["items"]] == ["Books"]
    assert len(everything.json()["items"]) == 3


def test_entered_records_feed_report_and_overview(client: TestClient) -> None:
    health_id = _create_project(client, "P1", "Kabul Health", "Health", "2023-01-01", "2023-12-31")
    education_id = _create_project(client, "P2", "Balkh Schools", "Education", "2024-01-01", "2024-12-31")

    entries = [
        ("/evaluation/evaluations", {"project_id": health_id, "evaluation_type": "midterm", "completed_at": "2023-07-01"}),
        ("/evaluation/evaluations", {"project_id": education_id, "evaluation_type": "endline"}),
        ("/evaluation/stories", {"story_type": "success", "title": "Clean water"}),
        (
            "/accountability/findings",
            {"project_id": health_id, "finding_type": "negative", "severity": "major", "status": "in_progress"},
        ),
        (
            "/accountability/findings",
            {"project_id": health_id, "finding_type": "positive", "severity": "minor", "department": "Programs"},
        ),
        (
            "/accountability/crm-awareness",
            {"project_id": health_id, "district": "Bagrami", "awareness_date": "2023-06-10"},
        ),
        (
            "/pdm/distributions",
            {"project_id": health_id, "assistance_type": "Hygiene kits", "distribution_date": "2023-08-01"},
        ),
        ("/pdm/surveys", {"project_id": health_id, "completed_at": "2023-09-01"}),
        ("/pdm/reports", {"project_id": health_id, "report_date": "2023-09-15"}),
    ]
    for path, payload in entries:
        response = client.post(f"/api/v1/data-entry{path}", json=payload)
        assert response.status_code == 201, path

    report = client.post("/api/v1/reports/generate", json={"years": [2023]})
    text = _pdf_text(report.content)
    assert "Midterm evaluations" in text
    assert "Endline evaluations" not in text
    assert "Findings in progress" in text
    assert "Findings pending" in text
    assert "Distributions recorded" in text

    overview = client.get("/api/v1/dashboards/overview", params={"year": 2023}).json()
    assert overview["findings"]["total"] == 2
    assert overview["findings"]["by_status"]["in_progress"] == 1

    findings = client.get("/api/v1/data-entry/accountability/findings").json()["items"]
    assert {item["status"] for item in findings} == {"in_progress", "pending"}
    assert len(client.get("/api/v1/data-entry/accountability/crm-awareness").json()["items"]) == 1
    assert len(client.get("/api/v1/data-entry/evaluation/stories").json()["items"]) == 1
    assert len(client.get("/api/v1/data-entry/pdm/surveys").json()["items"]) == 1
    assert len(client.get("/api/v1/data-entry/pdm/reports").json()["items"]) == 1
