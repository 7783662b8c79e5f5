from __future__ import annotations

from meal_mis.services.report_aggregation import aggregate, sum_beneficiaries
from meal_mis.services.report_filters import filter_projects
from meal_mis.services.snapshot import BENEFICIARY_TYPE_KEYS, ReportFilters
from tests.factories import make_project


def test_year_filter_then_aggregate_example_portfolio() -> None:
    projects = (
        make_project(
            "p1",
            sector="Health",
            provinces=("Kabul",),
            start="2023-01-01",
            end="2023-12-31",
            direct={"households": 10},
        ),
        make_project(
            "p2",
            sector="Education",
            provinces=("Balkh",),
            start="2024-01-01",
            end="2024-12-31",
            direct={"households": 5},
        ),
    )

    filtered = filter_projects(projects, ReportFilters(years=(2023,)))
    summary = aggregate(filtered)

    assert [project.id for project in filtered] == ["p1"]
    assert summary.beneficiaries.direct["households"] == 10
    assert summary.provinces == ("Kabul",)
    assert set(summary.sectors) == {"Health"}


def test_aggregate_of_nothing_is_zero() -> None:
    summary = aggregate([])

    assert summary.direct_total == 0
    assert summary.indirect_total == 0
    assert summary.provinces == ()
    assert summary.sectors == ()
    assert summary.clusters == ()
    assert set(summary.beneficiaries.direct) == set(BENEFICIARY_TYPE_KEYS)


def test_beneficiary_sums_are_additive_over_partitions() -> None:
    projects = [
        make_project("a", direct={"children_girls": 4, "idps": 2}, indirect={"adults_men": 7}),
        make_project("b", direct={"children_girls": 1}, indirect={"adults_men": 3, "pwds": 9}),
        make_project("c", direct={"returnees": 11}),
    ]

    whole = sum_beneficiaries(projects)
    left = sum_beneficiaries(projects[:1])
    right = sum_beneficiaries(projects[1:])

    for key in BENEFICIARY_TYPE_KEYS:
        assert whole.direct[key] == left.direct[key] + right.direct[key]
        assert whole.indirect[key] == left.indirect[key] + right.indirect[key]
    assert whole.direct_total == 18
    assert whole.indirect_total == 19


def test_inclusion_flags_do_not_change_report_totals() -> None:
    projects = [make_project("a", direct={"households": 6, "adults_women": 4}, include={"adults_women": False})]

    summary = aggregate(projects)

    assert summary.direct_total == 10


def test_distinct_labels_keep_first_seen_order() -> None:
    projects = [
        make_project("a", sector="WASH", provinces=("Kabul", "Balkh"), clusters=("Shelter",)),
        make_project("b", sector="Health", provinces=("Balkh",), clusters=("Food", "Shelter")),
        make_project("c", sector="WASH", provinces=("Herat",)),
    ]

    summary = aggregate(projects)

    assert summary.provinces == ("Balkh", "Herat", "Kabul")
    assert summary.sectors == ("WASH", "Health")
    assert summary.clusters == ("Shelter", "Food")
