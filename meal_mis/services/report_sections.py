"""Report content as an ordered list of layout-free section descriptors.

The renderer in ``report_renderer`` turns these into pages; nothing here knows
about fonts, coordinates or page geometry.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass

from meal_mis.models.entities import BaselineSurveyStatus, MonthlyReportStatus
from meal_mis.services.report_aggregation import PortfolioSummary, aggregate
from meal_mis.services.report_filters import FilteredSnapshot, scope_snapshot
from meal_mis.services.snapshot import (
    BENEFICIARY_TYPE_KEYS,
    BENEFICIARY_TYPE_LABELS,
    DashboardSnapshot,
    EvaluationData,
    FindingsData,
    MonitoringData,
    PdmData,
    ProjectRecord,
    ReportFilters,
)

DEFAULT_PROJECT_ROW_LIMIT = 15
MAX_TABLE_PROVINCES = 3
EMPTY_VALUE = "—"

NO_FILTERS_LINE = "Filters: none (full portfolio report)"
NO_BENEFICIARY_DATA = "No beneficiary data available."
NO_PROJECTS = "No projects match the selected filters."
NO_EVALUATIONS = "No evaluation records available for the selected filters."
NO_FINDINGS = "No findings captured for the selected filters."

PROJECT_TABLE_HEADERS = ("Code", "Project name", "Sector", "Donor", "Provinces")

NARRATIVE_TITLE = "Narrative summary"
NARRATIVE_TEXT = (
    "This report consolidates monitoring, evaluation, accountability, and learning indicators "
    "across the selected programme scope. It is intended for donor engagement, internal oversight, "
    "and strategic planning. Data reflects the current MIS snapshot at the time of report generation."
)


@dataclass(frozen=True, slots=True)
class TitleBlock:
    title: str
    subtitle: str


@dataclass(frozen=True, slots=True)
class FilterScope:
    heading: str
    lines: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class SectionHeading:
    title: str
    subtitle: str | None = None


@dataclass(frozen=True, slots=True)
class KeyValues:
    items: tuple[tuple[str, str], ...]


@dataclass(frozen=True, slots=True)
class BarChartRow:
    label: str
    direct: int
    indirect: int


@dataclass(frozen=True, slots=True)
class BeneficiaryChart:
    rows: tuple[BarChartRow, ...]
    max_value: int


@dataclass(frozen=True, slots=True)
class ProjectTable:
    headers: tuple[str, ...]
    rows: tuple[tuple[str, ...], ...]


@dataclass(frozen=True, slots=True)
class Placeholder:
    text: str


@dataclass(frozen=True, slots=True)
class Notice:
    text: str


@dataclass(frozen=True, slots=True)
class PageBreak:
    pass


@dataclass(frozen=True, slots=True)
class Narrative:
    title: str
    text: str


ReportSection = (
    TitleBlock
    | FilterScope
    | SectionHeading
    | KeyValues
    | BeneficiaryChart
    | ProjectTable
    | Placeholder
    | Notice
    | PageBreak
    | Narrative
)


def format_number(value: int | float) -> str:
    return f"{value:,}"


def _join_or_empty(values: tuple[str, ...] | list[str]) -> str:
    return ", ".join(values) if values else EMPTY_VALUE


def filter_scope_lines(filters: ReportFilters) -> tuple[str, ...]:
    lines: list[str] = []
    if filters.years:
        lines.append(f"Years: {', '.join(str(year) for year in filters.years)}")
    if filters.project_ids:
        lines.append(f"Projects: {len(filters.project_ids)} selected")
    if filters.provinces:
        lines.append(f"Provinces: {', '.join(filters.provinces)}")
    if filters.sectors:
        lines.append(f"Sectors: {', '.join(filters.sectors)}")
    if filters.clusters:
        lines.append(f"Clusters: {', '.join(filters.clusters)}")
    if not lines:
        lines.append(NO_FILTERS_LINE)
    return tuple(lines)


def overview_items(summary: PortfolioSummary) -> tuple[tuple[str, str], ...]:
    return (
        ("Total beneficiaries (direct)", format_number(summary.direct_total)),
        ("Total beneficiaries (indirect)", format_number(summary.indirect_total)),
        ("Provinces covered", _join_or_empty(summary.provinces)),
        ("Sectors involved", _join_or_empty(summary.sectors)),
        ("Clusters engaged", _join_or_empty(summary.clusters)),
    )


def beneficiary_chart(summary: PortfolioSummary) -> BeneficiaryChart:
    breakdown = summary.beneficiaries
    rows = tuple(
        BarChartRow(
            label=BENEFICIARY_TYPE_LABELS[key],
            direct=breakdown.direct[key],
            indirect=breakdown.indirect[key],
        )
        for key in BENEFICIARY_TYPE_KEYS
    )
    max_value = max((max(row.direct, row.indirect) for row in rows), default=0)
    return BeneficiaryChart(rows=rows, max_value=max_value)


def project_row(project: ProjectRecord) -> tuple[str, ...]:
    provinces = ", ".join(project.provinces[:MAX_TABLE_PROVINCES])
    if len(project.provinces) > MAX_TABLE_PROVINCES:
        provinces += "…"
    return (
        project.code,
        project.name,
        project.sector or EMPTY_VALUE,
        project.donor or EMPTY_VALUE,
        provinces or EMPTY_VALUE,
    )


def project_portfolio_sections(
    projects: tuple[ProjectRecord, ...], row_limit: int = DEFAULT_PROJECT_ROW_LIMIT
) -> list[ReportSection]:
    if not projects:
        return [Placeholder(NO_PROJECTS)]

    shown = projects[:row_limit]
    sections: list[ReportSection] = [
        ProjectTable(headers=PROJECT_TABLE_HEADERS, rows=tuple(project_row(project) for project in shown))
    ]
    hidden = len(projects) - len(shown)
    if hidden > 0:
        sections.append(Notice(f"+{hidden} additional projects not shown"))
    return sections


def monitoring_items(data: MonitoringData) -> tuple[tuple[str, str], ...]:
    baseline_completed = sum(
        1 for survey in data.baseline_surveys if survey.status is BaselineSurveyStatus.COMPLETED
    )
    monthly_approved = sum(
        1 for report in data.monthly_reports if report.status is MonthlyReportStatus.APPROVED
    )
    return (
        ("Baseline surveys", f"{baseline_completed} completed / {len(data.baseline_surveys)} total"),
        ("Monthly narratives", f"{monthly_approved} approved / {len(data.monthly_reports)} total"),
        ("Field visits logged", str(len(data.field_visits))),
        ("Enumerators on roster", str(len(data.enumerators))),
    )


def evaluation_sections(data: EvaluationData) -> list[ReportSection]:
    if not data.evaluations and not data.stories:
        return [Placeholder(NO_EVALUATIONS)]

    by_type = Counter(record.evaluation_type.value for record in data.evaluations)
    items = [(f"{evaluation_type.capitalize()} evaluations", str(count)) for evaluation_type, count in by_type.items()]
    items.append(("Stories collected", str(len(data.stories))))
    return [KeyValues(tuple(items))]


def findings_sections(data: FindingsData) -> list[ReportSection]:
    if not data.findings:
        return [Placeholder(NO_FINDINGS)]

    by_status = Counter(record.status.value for record in data.findings)
    return [
        KeyValues(
            tuple((f"Findings {status.replace('_', ' ')}", str(count)) for status, count in by_status.items())
        )
    ]


def pdm_items(data: PdmData) -> tuple[tuple[str, str], ...]:
    return (
        ("Distributions recorded", str(len(data.distributions))),
        ("PDM surveys completed", str(len(data.surveys))),
        ("PDM reports filed", str(len(data.reports))),
    )


def build_report_sections(
    snapshot: DashboardSnapshot,
    filters: ReportFilters,
    *,
    title: str = "MIS Programme Report",
    subtitle: str = "NSDO Monitoring, Evaluation, Accountability & Learning",
    row_limit: int = DEFAULT_PROJECT_ROW_LIMIT,
) -> list[ReportSection]:
    """Produce the report body in its fixed section order."""

    return build_scoped_sections(
        scope_snapshot(snapshot, filters), filters, title=title, subtitle=subtitle, row_limit=row_limit
    )


def build_scoped_sections(
    scoped: FilteredSnapshot,
    filters: ReportFilters,
    *,
    title: str = "MIS Programme Report",
    subtitle: str = "NSDO Monitoring, Evaluation, Accountability & Learning",
    row_limit: int = DEFAULT_PROJECT_ROW_LIMIT,
) -> list[ReportSection]:
    summary = aggregate(scoped.projects)

    sections: list[ReportSection] = [
        TitleBlock(title=title, subtitle=subtitle),
        FilterScope(heading="Scope & filters", lines=filter_scope_lines(filters)),
        SectionHeading("Portfolio overview", f"{len(scoped.projects)} project(s) included"),
        KeyValues(overview_items(summary)),
        SectionHeading("Beneficiary reach"),
    ]

    chart = beneficiary_chart(summary)
    sections.append(chart if chart.max_value > 0 else Placeholder(NO_BENEFICIARY_DATA))

    sections.append(SectionHeading("Project portfolio"))
    sections.extend(project_portfolio_sections(scoped.projects, row_limit))

    sections.append(SectionHeading("Monitoring highlights"))
    sections.append(KeyValues(monitoring_items(scoped.monitoring)))

    sections.append(PageBreak())

    sections.append(SectionHeading("Evaluation & learning"))
    sections.extend(evaluation_sections(scoped.evaluation))

    sections.append(SectionHeading("Accountability & findings"))
    sections.extend(findings_sections(scoped.findings))

    sections.append(SectionHeading("Post-distribution monitoring"))
    sections.append(KeyValues(pdm_items(scoped.pdm)))

    sections.append(Narrative(title=NARRATIVE_TITLE, text=NARRATIVE_TEXT))
    return sections
