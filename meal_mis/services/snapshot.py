"""Read-only portfolio snapshot consumed by dashboards, reports and exports."""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol

from meal_mis.models.entities import (
    BaselineSurveyStatus,
    ComplaintStatus,
    EvaluationType,
    FindingSeverity,
    FindingStatus,
    FindingType,
    MonthlyReportStatus,
    StoryType,
)

BENEFICIARY_TYPE_KEYS: tuple[str, ...] = (
    "children_girls",
    "children_boys",
    "adults_women",
    "adults_men",
    "households",
    "idps",
    "returnees",
    "pwds",
)

BENEFICIARY_TYPE_LABELS: dict[str, str] = {
    "children_girls": "Children: Girls",
    "children_boys": "Children: Boys",
    "adults_women": "Adults: Women",
    "adults_men": "Adults: Men",
    "households": "Households",
    "idps": "IDPs",
    "returnees": "Returnees",
    "pwds": "PwDs",
}

# Households count units, not people, so they stay out of people totals by default.
DEFAULT_INCLUDE_IN_TOTALS: dict[str, bool] = {key: key != "households" for key in BENEFICIARY_TYPE_KEYS}

DEFAULT_ORGANIZATION_NAME = "NSDO"

_DATA_URL_PATTERN = re.compile(r"^data:(?P<mime>[^;,]+);base64,(?P<payload>.*)$", re.DOTALL)


@dataclass(frozen=True, slots=True)
class BeneficiaryBreakdown:
    """Direct/indirect reach per category; always carries every category key."""

    direct: Mapping[str, int]
    indirect: Mapping[str, int]
    include: Mapping[str, bool]

    @classmethod
    def empty(cls) -> BeneficiaryBreakdown:
        return cls.from_partial()

    @classmethod
    def from_partial(
        cls,
        direct: Mapping[str, int] | None = None,
        indirect: Mapping[str, int] | None = None,
        include: Mapping[str, bool] | None = None,
    ) -> BeneficiaryBreakdown:
        direct = direct or {}
        indirect = indirect or {}
        include = include or {}
        return cls(
            direct={key: int(direct.get(key) or 0) for key in BENEFICIARY_TYPE_KEYS},
            indirect={key: int(indirect.get(key) or 0) for key in BENEFICIARY_TYPE_KEYS},
            include={
                key: bool(include[key]) if key in include else DEFAULT_INCLUDE_IN_TOTALS[key]
                for key in BENEFICIARY_TYPE_KEYS
            },
        )

    @property
    def direct_total(self) -> int:
        return sum(self.direct[key] for key in BENEFICIARY_TYPE_KEYS)

    @property
    def indirect_total(self) -> int:
        return sum(self.indirect[key] for key in BENEFICIARY_TYPE_KEYS)

    def included_total(self) -> int:
        """Direct plus indirect reach over categories flagged for totals."""

        return sum(
            self.direct[key] + self.indirect[key] for key in BENEFICIARY_TYPE_KEYS if self.include[key]
        )


@dataclass(frozen=True, slots=True)
class ProjectRecord:
    id: str
    code: str
    name: str
    sector: str | None = None
    donor: str | None = None
    country: str | None = None
    start: str | None = None
    end: str | None = None
    budget: float | None = None
    staff: int = 0
    goal: str | None = None
    objectives: str | None = None
    major_achievements: str | None = None
    provinces: tuple[str, ...] = ()
    districts: tuple[str, ...] = ()
    communities: tuple[str, ...] = ()
    clusters: tuple[str, ...] = ()
    standard_sectors: tuple[str, ...] = ()
    beneficiaries: BeneficiaryBreakdown = field(default_factory=BeneficiaryBreakdown.empty)


@dataclass(frozen=True, slots=True)
class BaselineSurveyRecord:
    id: str
    project_id: str | None
    title: str
    status: BaselineSurveyStatus


@dataclass(frozen=True, slots=True)
class EnumeratorRecord:
    id: str
    full_name: str
    province: str | None = None


@dataclass(frozen=True, slots=True)
class FieldVisitRecord:
    id: str
    project_id: str | None
    visit_date: str | None = None
    location: str | None = None


@dataclass(frozen=True, slots=True)
class MonthlyReportRecord:
    id: str
    project_id: str | None
    status: MonthlyReportStatus
    report_month: str | None = None


@dataclass(frozen=True, slots=True)
class EvaluationRecord:
    id: str
    project_id: str | None
    evaluation_type: EvaluationType
    completed_at: str | None = None


@dataclass(frozen=True, slots=True)
class StoryRecord:
    id: str
    project_id: str | None
    story_type: StoryType
    title: str


@dataclass(frozen=True, slots=True)
class FindingRecord:
    id: str
    project_id: str | None
    finding_type: FindingType
    severity: FindingSeverity
    status: FindingStatus
    department: str | None = None


@dataclass(frozen=True, slots=True)
class DistributionRecord:
    id: str
    project_id: str | None
    assistance_type: str
    distribution_date: str | None = None


@dataclass(frozen=True, slots=True)
class PdmSurveyRecord:
    id: str
    project_id: str | None
    completed_at: str | None = None


@dataclass(frozen=True, slots=True)
class PdmReportRecord:
    id: str
    project_id: str | None
    report_date: str | None = None


@dataclass(frozen=True, slots=True)
class ComplaintRecord:
    id: str
    project_id: str | None
    status: ComplaintStatus
    province: str | None = None


@dataclass(frozen=True, slots=True)
class CrmAwarenessRecord:
    id: str
    project_id: str | None
    district: str | None = None
    awareness_date: str | None = None


@dataclass(frozen=True, slots=True)
class MonitoringData:
    baseline_surveys: tuple[BaselineSurveyRecord, ...] = ()
    enumerators: tuple[EnumeratorRecord, ...] = ()
    field_visits: tuple[FieldVisitRecord, ...] = ()
    monthly_reports: tuple[MonthlyReportRecord, ...] = ()


@dataclass(frozen=True, slots=True)
class EvaluationData:
    evaluations: tuple[EvaluationRecord, ...] = ()
    stories: tuple[StoryRecord, ...] = ()


@dataclass(frozen=True, slots=True)
class FindingsData:
    findings: tuple[FindingRecord, ...] = ()


@dataclass(frozen=True, slots=True)
class PdmData:
    distributions: tuple[DistributionRecord, ...] = ()
    surveys: tuple[PdmSurveyRecord, ...] = ()
    reports: tuple[PdmReportRecord, ...] = ()


@dataclass(frozen=True, slots=True)
class Branding:
    organization_name: str = DEFAULT_ORGANIZATION_NAME
    logo_data_url: str | None = None


@dataclass(frozen=True, slots=True)
class DashboardSnapshot:
    """Everything the reporting core needs, fetched once per request."""

    projects: tuple[ProjectRecord, ...] = ()
    monitoring: MonitoringData = field(default_factory=MonitoringData)
    evaluation: EvaluationData = field(default_factory=EvaluationData)
    findings: FindingsData = field(default_factory=FindingsData)
    pdm: PdmData = field(default_factory=PdmData)
    branding: Branding = field(default_factory=Branding)
    complaints: tuple[ComplaintRecord, ...] = ()
    crm_awareness: tuple[CrmAwarenessRecord, ...] = ()


class SnapshotProvider(Protocol):
    def fetch_snapshot(self) -> DashboardSnapshot: ...


@dataclass(frozen=True, slots=True)
class ReportFilters:
    """Filter criteria; an empty tuple leaves that dimension unconstrained."""

    years: tuple[int, ...] = ()
    project_ids: tuple[str, ...] = ()
    provinces: tuple[str, ...] = ()
    sectors: tuple[str, ...] = ()
    clusters: tuple[str, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not (self.years or self.project_ids or self.provinces or self.sectors or self.clusters)

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any] | None) -> ReportFilters:
        """Build filters from a loosely-typed JSON body, dropping malformed entries.

        Accepts both camelCase (``projectIds``) and snake_case keys.
        """

        if not isinstance(payload, Mapping):
            return cls()

        def _strings(*keys: str) -> tuple[str, ...]:
            for key in keys:
                values = payload.get(key)
                if isinstance(values, list):
                    return tuple(value for value in values if isinstance(value, str))
            return ()

        years: list[int] = []
        raw_years = payload.get("years")
        if isinstance(raw_years, list):
            for value in raw_years:
                year = _coerce_year(value)
                if year is not None:
                    years.append(year)

        return cls(
            years=tuple(years),
            project_ids=_strings("projectIds", "project_ids"),
            provinces=_strings("provinces"),
            sectors=_strings("sectors"),
            clusters=_strings("clusters"),
        )


def _coerce_year(value: object) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        stripped = value.strip()
        if stripped.lstrip("-").isdigit():
            return int(stripped)
    return None


def parse_data_url(value: str | None) -> tuple[str, str] | None:
    """Split a ``data:<mime>;base64,<payload>`` URI into (mime, payload)."""

    if not value:
        return None
    match = _DATA_URL_PATTERN.match(value)
    if match is None:
        return None
    return match.group("mime"), match.group("payload")
