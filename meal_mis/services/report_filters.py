"""Portfolio filtering: narrows projects and scopes their dependent records."""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Protocol, TypeVar

from meal_mis.services.snapshot import (
    ComplaintRecord,
    CrmAwarenessRecord,
    DashboardSnapshot,
    EvaluationData,
    FindingsData,
    MonitoringData,
    PdmData,
    ProjectRecord,
    ReportFilters,
)

_YEAR_PREFIX = re.compile(r"^(\d{4})")


class _ProjectScoped(Protocol):
    project_id: str | None


RecordT = TypeVar("RecordT", bound=_ProjectScoped)


@dataclass(frozen=True, slots=True)
class FilteredSnapshot:
    """Projects matching the filters plus the records they own."""

    projects: tuple[ProjectRecord, ...]
    monitoring: MonitoringData
    evaluation: EvaluationData
    findings: FindingsData
    pdm: PdmData
    complaints: tuple[ComplaintRecord, ...]
    crm_awareness: tuple[CrmAwarenessRecord, ...]

    @property
    def project_ids(self) -> frozenset[str]:
        return frozenset(project.id for project in self.projects)


def parse_year(value: str | None) -> int | None:
    if not value:
        return None
    match = _YEAR_PREFIX.match(value.strip())
    if match is None:
        return None
    return int(match.group(1))


def project_year_bounds(project: ProjectRecord) -> tuple[int | None, int | None]:
    return parse_year(project.start), parse_year(project.end)


def matches_year(project: ProjectRecord, years: Sequence[int]) -> bool:
    """A lone start or end year bounds the project on that side only."""

    if not years:
        return True
    start_year, end_year = project_year_bounds(project)
    if start_year is None and end_year is None:
        return True
    for year in years:
        if start_year is not None and year < start_year:
            continue
        if end_year is not None and year > end_year:
            continue
        return True
    return False


def _folded(values: Iterable[str]) -> set[str]:
    return {value.casefold() for value in values}


def project_matches(project: ProjectRecord, filters: ReportFilters) -> bool:
    if filters.project_ids and project.id not in filters.project_ids:
        return False

    # unlabelled projects are not excluded by a sector filter
    if filters.sectors and project.sector:
        if project.sector.casefold() not in _folded(filters.sectors):
            return False

    if filters.clusters:
        wanted = _folded(filters.clusters)
        if not any(cluster.casefold() in wanted for cluster in project.clusters):
            return False

    if filters.provinces:
        wanted = _folded(filters.provinces)
        if not any(province.casefold() in wanted for province in project.provinces):
            return False

    return matches_year(project, filters.years)


def filter_projects(projects: Sequence[ProjectRecord], filters: ReportFilters) -> list[ProjectRecord]:
    if filters.is_empty:
        return list(projects)
    return [project for project in projects if project_matches(project, filters)]


def scope_records(records: Iterable[RecordT], allowed_project_ids: frozenset[str]) -> tuple[RecordT, ...]:
    """Keep unscoped records and records owned by an allowed project."""

    return tuple(
        record
        for record in records
        if record.project_id is None or record.project_id in allowed_project_ids
    )


def scope_snapshot(snapshot: DashboardSnapshot, filters: ReportFilters) -> FilteredSnapshot:
    projects = tuple(filter_projects(snapshot.projects, filters))
    allowed = frozenset(project.id for project in projects)

    monitoring = MonitoringData(
        baseline_surveys=scope_records(snapshot.monitoring.baseline_surveys, allowed),
        # Enumerators form an organisation-wide roster.
        enumerators=snapshot.monitoring.enumerators,
        field_visits=scope_records(snapshot.monitoring.field_visits, allowed),
        monthly_reports=scope_records(snapshot.monitoring.monthly_reports, allowed),
    )
    evaluation = EvaluationData(
        evaluations=scope_records(snapshot.evaluation.evaluations, allowed),
        stories=scope_records(snapshot.evaluation.stories, allowed),
    )
    pdm = PdmData(
        distributions=scope_records(snapshot.pdm.distributions, allowed),
        surveys=scope_records(snapshot.pdm.surveys, allowed),
        reports=scope_records(snapshot.pdm.reports, allowed),
    )

    return FilteredSnapshot(
        projects=projects,
        monitoring=monitoring,
        evaluation=evaluation,
        findings=FindingsData(findings=scope_records(snapshot.findings.findings, allowed)),
        pdm=pdm,
        complaints=scope_records(snapshot.complaints, allowed),
        crm_awareness=scope_records(snapshot.crm_awareness, allowed),
    )
