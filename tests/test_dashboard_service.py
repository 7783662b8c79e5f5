from __future__ import annotations

from datetime import date

from meal_mis.models.entities import ComplaintStatus, FindingSeverity, FindingStatus, FindingType
from meal_mis.services.dashboard_service import DashboardService, project_status_counts
from meal_mis.services.snapshot import (
    ComplaintRecord,
    DashboardSnapshot,
    FindingRecord,
    FindingsData,
    ReportFilters,
)
from tests.factories import make_project

TODAY = date(2024, 6, 1)


def _snapshot() -> DashboardSnapshot:
    return DashboardSnapshot(
        projects=(
            make_project(
                "p1",
                sector="Health",
                provinces=("Kabul",),
                start="2023-01-01",
                end="2023-12-31",
                staff=4,
                direct={"adults_women": 100, "households": 30},
                indirect={"adults_women": 20},
            ),
            make_project(
                "p2",
                sector="Education",
                provinces=("Balkh", "Kabul"),
                clusters=("Protection",),
                start="2024-01-01",
                end="2024-12-31",
                staff=6,
                direct={"children_boys": 50},
                include={"children_boys": False},
            ),
            make_project("p3", sector="Health", provinces=("Herat",), start="2025-01-01", staff=2),
        ),
        findings=FindingsData(
            findings=(
                FindingRecord(
                    id="f1",
                    project_id="p1",
                    finding_type=FindingType.NEGATIVE,
                    severity=FindingSeverity.CRITICAL,
                    status=FindingStatus.PENDING,
                ),
                FindingRecord(
                    id="f2",
                    project_id="p2",
                    finding_type=FindingType.POSITIVE,
                    severity=FindingSeverity.MINOR,
                    status=FindingStatus.SOLVED,
                ),
            )
        ),
        complaints=(
            ComplaintRecord(id="c1", project_id="p1", status=ComplaintStatus.OPEN),
            ComplaintRecord(id="c2", project_id=None, status=ComplaintStatus.RESOLVED),
            ComplaintRecord(id="c3", project_id="p2", status=ComplaintStatus.IN_REVIEW),
        ),
    )


def test_status_counts_split_completed_from_active() -> None:
    counts = project_status_counts(_snapshot().projects, TODAY)

    assert counts == {"active": 2, "ongoing": 1, "completed": 1}


def test_overview_honours_inclusion_flags() -> None:
    overview = DashboardService.overview_from_snapshot(_snapshot(), ReportFilters(), today=TODAY)

    assert overview["total_projects"] == 3
    assert overview["active_projects"] == 2
    # households and p2's children_boys are excluded from people totals
    assert overview["total_beneficiaries"] == 120
    assert overview["covered_provinces"] == ["Balkh", "Herat", "Kabul"]
    assert overview["staff"] == 12
    assert overview["sectors"]["Health"] == {
        "projects": 2,
        "staff": 6,
        "provinces": ["Herat", "Kabul"],
        "beneficiaries": 120,
    }


def test_overview_scopes_complaints_and_findings() -> None:
    overview = DashboardService.overview_from_snapshot(_snapshot(), ReportFilters(sectors=("Health",)), today=TODAY)

    assert overview["complaints"] == {"total": 2, "open": 1, "in_review": 0, "resolved": 1}
    assert overview["findings"]["total"] == 1
    assert overview["findings"]["by_severity"]["critical"] == 1
    assert overview["findings"]["by_status"] == {"pending": 1, "in_progress": 0, "solved": 0}


def test_available_filters_expand_project_years() -> None:
    options = DashboardService.available_filters_from_snapshot(_snapshot())

    assert options["years"] == [2025, 2024, 2023]
    assert options["provinces"] == ["Balkh", "Herat", "Kabul"]
    assert options["sectors"] == ["Education", "Health"]
    assert options["clusters"] == ["Protection"]
    assert [item["code"] for item in options["projects"]] == ["P1", "P2", "P3"]
