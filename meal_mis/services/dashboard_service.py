"""Dashboard statistics computed over the filtered portfolio."""

from __future__ import annotations

from collections import Counter
from datetime import date

from meal_mis.models.entities import ComplaintStatus, FindingSeverity, FindingStatus, FindingType
from meal_mis.services.report_filters import FilteredSnapshot, project_year_bounds, scope_snapshot
from meal_mis.services.snapshot import DashboardSnapshot, ProjectRecord, ReportFilters, SnapshotProvider


def _parse_date(value: str | None) -> date | None:
    if not value:
        return None
    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        return None


def project_status_counts(projects: tuple[ProjectRecord, ...], today: date) -> dict[str, int]:
    """Completed projects ended before today; everything else is active."""

    active = ongoing = completed = 0
    for project in projects:
        start = _parse_date(project.start)
        end = _parse_date(project.end)
        if end is not None and end < today:
            completed += 1
            continue
        active += 1
        if start is not None and start <= today:
            ongoing += 1
    return {"active": active, "ongoing": ongoing, "completed": completed}


def _sector_breakdown(projects: tuple[ProjectRecord, ...]) -> dict[str, dict[str, object]]:
    sectors: dict[str, dict[str, object]] = {}
    for project in projects:
        if not project.sector:
            continue
        entry = sectors.setdefault(
            project.sector,
            {"projects": 0, "staff": 0, "provinces": set(), "beneficiaries": 0},
        )
        entry["projects"] += 1
        entry["staff"] += project.staff
        entry["provinces"].update(project.provinces)
        entry["beneficiaries"] += project.beneficiaries.included_total()

    return {
        sector: {**entry, "provinces": sorted(entry["provinces"])}
        for sector, entry in sorted(sectors.items())
    }


def _complaint_metrics(scoped: FilteredSnapshot) -> dict[str, int]:
    counts = Counter(record.status for record in scoped.complaints)
    return {
        "total": len(scoped.complaints),
        "open": counts[ComplaintStatus.OPEN],
        "in_review": counts[ComplaintStatus.IN_REVIEW],
        "resolved": counts[ComplaintStatus.RESOLVED],
    }


def _findings_metrics(scoped: FilteredSnapshot) -> dict[str, object]:
    findings = scoped.findings.findings
    by_type = Counter(record.finding_type for record in findings)
    by_severity = Counter(record.severity for record in findings)
    by_status = Counter(record.status for record in findings)
    return {
        "total": len(findings),
        "by_type": {member.value: by_type[member] for member in FindingType},
        "by_severity": {member.value: by_severity[member] for member in FindingSeverity},
        "by_status": {member.value: by_status[member] for member in FindingStatus},
    }


class DashboardService:
    """Overview statistics and filter options for the public dashboard."""

    def __init__(self, provider: SnapshotProvider) -> None:
        self.provider = provider

    @staticmethod
    def overview_from_snapshot(
        snapshot: DashboardSnapshot,
        filters: ReportFilters,
        *,
        today: date,
    ) -> dict[str, object]:
        scoped = scope_snapshot(snapshot, filters)
        projects = scoped.projects
        provinces = sorted({province for project in projects for province in project.provinces})
        status_counts = project_status_counts(projects, today)

        return {
            "total_projects": len(projects),
            "active_projects": status_counts["active"],
            "total_beneficiaries": sum(project.beneficiaries.included_total() for project in projects),
            "covered_provinces": provinces,
            "staff": sum(project.staff for project in projects),
            "sectors": _sector_breakdown(projects),
            "project_status_counts": status_counts,
            "complaints": _complaint_metrics(scoped),
            "findings": _findings_metrics(scoped),
        }

    def overview(self, filters: ReportFilters, *, today: date | None = None) -> dict[str, object]:
        return self.overview_from_snapshot(
            self.provider.fetch_snapshot(),
            filters,
            today=today or date.today(),
        )

    @staticmethod
    def available_filters_from_snapshot(snapshot: DashboardSnapshot) -> dict[str, list[object]]:
        years: set[int] = set()
        for project in snapshot.projects:
            start_year, end_year = project_year_bounds(project)
            if start_year is not None and end_year is not None and start_year <= end_year:
                years.update(range(start_year, end_year + 1))
            else:
                years.update(year for year in (start_year, end_year) if year is not None)

        return {
            "years": sorted(years, reverse=True),
            "projects": [
                {"id": project.id, "code": project.code, "name": project.name}
                for project in sorted(snapshot.projects, key=lambda item: item.code)
            ],
            "provinces": sorted({province for project in snapshot.projects for province in project.provinces}),
            "sectors": sorted({project.sector for project in snapshot.projects if project.sector}),
            "clusters": sorted({cluster for project in snapshot.projects for cluster in project.clusters}),
        }

    def available_filters(self) -> dict[str, list[object]]:
        return self.available_filters_from_snapshot(self.provider.fetch_snapshot())
