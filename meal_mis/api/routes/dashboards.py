"""Dashboard endpoints for the filtered portfolio overview."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from meal_mis.api.filters import get_query_filters
from meal_mis.db.dependencies import get_db_session
from meal_mis.repositories.dashboard_repository import DashboardRepository
from meal_mis.services.dashboard_service import DashboardService
from meal_mis.services.snapshot import ReportFilters

router = APIRouter(prefix="/dashboards", tags=["dashboards"])


def _service(db: Session) -> DashboardService:
    return DashboardService(DashboardRepository(db))


@router.get("/overview")
def get_overview(
    filters: ReportFilters = Depends(get_query_filters),
    db: Session = Depends(get_db_session),
) -> dict[str, object]:
    return _service(db).overview(filters)


@router.get("/filters")
def get_available_filters(db: Session = Depends(get_db_session)) -> dict[str, list[object]]:
    return _service(db).available_filters()
