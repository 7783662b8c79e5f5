"""Export endpoint for the filtered project portfolio."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response
from sqlalchemy.orm import Session

from meal_mis.api.filters import get_query_filters
from meal_mis.db.dependencies import get_db_session
from meal_mis.repositories.dashboard_repository import DashboardRepository
from meal_mis.services.report_service import ReportService
from meal_mis.services.snapshot import ReportFilters

router = APIRouter(prefix="/exports", tags=["exports"])


@router.get("/projects")
def export_projects(
    format: str = Query(default="xlsx"),
    filters: ReportFilters = Depends(get_query_filters),
    db: Session = Depends(get_db_session),
) -> Response:
    service = ReportService(DashboardRepository(db))
    exported = service.export_projects(filters=filters, format_name=format)
    return Response(
        content=exported.content,
        media_type=exported.media_type,
        headers={"Content-Disposition": f'attachment; filename="{exported.filename}"'},
    )
