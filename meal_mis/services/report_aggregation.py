"""Portfolio aggregation over an already-filtered project set."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from meal_mis.services.snapshot import BENEFICIARY_TYPE_KEYS, BeneficiaryBreakdown, ProjectRecord


@dataclass(frozen=True, slots=True)
class PortfolioSummary:
    beneficiaries: BeneficiaryBreakdown
    provinces: tuple[str, ...]
    # Distinct values in first-seen order.
    sectors: tuple[str, ...]
    clusters: tuple[str, ...]

    @property
    def direct_total(self) -> int:
        return self.beneficiaries.direct_total

    @property
    def indirect_total(self) -> int:
        return self.beneficiaries.indirect_total


def sum_beneficiaries(projects: Iterable[ProjectRecord]) -> BeneficiaryBreakdown:
    """Sum direct and indirect reach per category; inclusion flags are ignored."""

    direct = dict.fromkeys(BENEFICIARY_TYPE_KEYS, 0)
    indirect = dict.fromkeys(BENEFICIARY_TYPE_KEYS, 0)
    for project in projects:
        for key in BENEFICIARY_TYPE_KEYS:
            direct[key] += project.beneficiaries.direct.get(key, 0)
            indirect[key] += project.beneficiaries.indirect.get(key, 0)
    return BeneficiaryBreakdown.from_partial(direct=direct, indirect=indirect)


def aggregate(projects: Iterable[ProjectRecord]) -> PortfolioSummary:
    projects = list(projects)

    provinces: set[str] = set()
    sectors: dict[str, None] = {}
    clusters: dict[str, None] = {}
    for project in projects:
        provinces.update(project.provinces)
        if project.sector:
            sectors.setdefault(project.sector)
        for cluster in project.clusters:
            clusters.setdefault(cluster)

    return PortfolioSummary(
        beneficiaries=sum_beneficiaries(projects),
        provinces=tuple(sorted(provinces)),
        sectors=tuple(sectors),
        clusters=tuple(clusters),
    )
