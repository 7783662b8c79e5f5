"""Query-string report filters shared by dashboard and export endpoints."""

from __future__ import annotations

from fastapi import Query

from meal_mis.services.snapshot import ReportFilters


def get_query_filters(
    year: list[int] | None = Query(default=None),
    project_id: list[str] | None = Query(default=None),
    province: list[str] | None = Query(default=None),
    sector: list[str] | None = Query(default=None),
    cluster: list[str] | None = Query(default=None),
) -> ReportFilters:
    return ReportFilters(
        years=tuple(year or ()),
        project_ids=tuple(project_id or ()),
        provinces=tuple(province or ()),
        sectors=tuple(sector or ()),
        clusters=tuple(cluster or ()),
    )
