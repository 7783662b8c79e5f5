"""PDF programme report endpoint."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, status
from fastapi.responses import Response
from sqlalchemy.orm import Session

from meal_mis.db.dependencies import get_db_session
from meal_mis.repositories.dashboard_repository import DashboardRepository
from meal_mis.services.report_renderer import ReportGenerationError
from meal_mis.services.report_service import ReportService
from meal_mis.services.snapshot import ReportFilters

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reports", tags=["reports"])


@router.post("/generate")
def generate_report(
    payload: Any = Body(default=None),
    db: Session = Depends(get_db_session),
) -> Response:
    filters = ReportFilters.from_payload(payload)
    service = ReportService(DashboardRepository(db))
    try:
        exported = service.generate_report(filters)
    except ReportGenerationError as exc:
        logger.exception("Report generation failed")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to generate report.",
        ) from exc

    return Response(
        content=exported.content,
        media_type=exported.media_type,
        headers={
            "Content-Disposition": f'attachment; filename="{exported.filename}"',
            "Cache-Control": "no-store",
        },
    )
