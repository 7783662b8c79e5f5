"""Report generation and portfolio export service."""

from __future__ import annotations

import csv
import io
import logging
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from io import BytesIO

from fastapi import HTTPException, status

from meal_mis.core.config import Settings, get_settings
from meal_mis.services.report_filters import FilteredSnapshot, filter_projects, scope_snapshot
from meal_mis.services.report_renderer import ReportRenderer, decode_logo
from meal_mis.services.report_sections import build_scoped_sections
from meal_mis.services.snapshot import DashboardSnapshot, ProjectRecord, ReportFilters, SnapshotProvider

logger = logging.getLogger(__name__)

EXPORT_COLUMNS = (
    "code",
    "name",
    "sector",
    "donor",
    "country",
    "start",
    "end",
    "provinces",
    "clusters",
    "direct_beneficiaries",
    "indirect_beneficiaries",
)


@dataclass(slots=True)
class ExportFilePayload:
    media_type: str
    filename: str
    content: bytes


def _slug(value: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", value.strip().lower()).strip("-")
    return slug or "report"


class ReportService:
    """Compiles the PDF programme report and tabular portfolio exports."""

    def __init__(self, provider: SnapshotProvider, settings: Settings | None = None) -> None:
        self.provider = provider
        self.settings = settings or get_settings()

    # ---------- PDF report ----------
    def compile(
        self,
        snapshot: DashboardSnapshot,
        filters: ReportFilters,
        *,
        generated_at: datetime | None = None,
    ) -> bytes:
        return self._render(snapshot, scope_snapshot(snapshot, filters), filters, generated_at=generated_at)

    def _render(
        self,
        snapshot: DashboardSnapshot,
        scoped: FilteredSnapshot,
        filters: ReportFilters,
        *,
        generated_at: datetime | None = None,
    ) -> bytes:
        sections = build_scoped_sections(
            scoped,
            filters,
            title=self.settings.report_title,
            subtitle=self.settings.report_subtitle,
            row_limit=self.settings.report_project_row_limit,
        )
        organization_name = snapshot.branding.organization_name or self.settings.report_organization_name
        renderer = ReportRenderer(
            organization_name=organization_name,
            logo=decode_logo(snapshot.branding.logo_data_url),
            generated_at=generated_at or datetime.now(timezone.utc),
            title=f"{organization_name} Dashboard Report",
        )
        return renderer.render(sections)

    def generate_report(self, filters: ReportFilters, *, generated_at: datetime | None = None) -> ExportFilePayload:
        generated_at = generated_at or datetime.now(timezone.utc)
        snapshot = self.provider.fetch_snapshot()
        scoped = scope_snapshot(snapshot, filters)
        content = self._render(snapshot, scoped, filters, generated_at=generated_at)
        logger.info(
            "Generated programme report: %d of %d project(s) in scope, %d bytes",
            len(scoped.projects),
            len(snapshot.projects),
            len(content),
        )
        return ExportFilePayload(
            media_type="application/pdf",
            filename=f"{_slug(self.settings.report_filename_prefix)}-report-{generated_at.strftime('%Y%m%d%H%M%S')}.pdf",
            content=content,
        )

    # ---------- Tabular exports ----------
    @staticmethod
    def _export_row(project: ProjectRecord) -> dict[str, str]:
        return {
            "code": project.code,
            "name": project.name,
            "sector": project.sector or "",
            "donor": project.donor or "",
            "country": project.country or "",
            "start": project.start or "",
            "end": project.end or "",
            "provinces": "; ".join(project.provinces),
            "clusters": "; ".join(project.clusters),
            "direct_beneficiaries": str(project.beneficiaries.direct_total),
            "indirect_beneficiaries": str(project.beneficiaries.indirect_total),
        }

    def export_projects(self, *, filters: ReportFilters, format_name: str) -> ExportFilePayload:
        normalized_format = format_name.strip().lower()
        if normalized_format not in {"csv", "xlsx"}:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail="format must be one of: csv, xlsx.",
            )

        snapshot = self.provider.fetch_snapshot()
        rows = [self._export_row(project) for project in filter_projects(snapshot.projects, filters)]
        base_filename = f"{_slug(self.settings.report_filename_prefix)}-projects"

        if normalized_format == "csv":
            sio = io.StringIO()
            writer = csv.DictWriter(sio, fieldnames=list(EXPORT_COLUMNS))
            writer.writeheader()
            writer.writerows(rows)
            return ExportFilePayload(
                media_type="text/csv; charset=utf-8",
                filename=f"{base_filename}.csv",
                content=sio.getvalue().encode("utf-8"),
            )

        # XLSX
        from openpyxl import Workbook

        workbook = Workbook()
        sheet = workbook.active
        sheet.title = "projects"
        sheet.append(list(EXPORT_COLUMNS))
        for row in rows:
            sheet.append([row[column] for column in EXPORT_COLUMNS])

        output = BytesIO()
        workbook.save(output)
        return ExportFilePayload(
            media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
            filename=f"{base_filename}.xlsx",
            content=output.getvalue(),
        )
