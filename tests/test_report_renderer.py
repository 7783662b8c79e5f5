from __future__ import annotations

import io
import logging
from datetime import datetime

import pdfplumber
import pytest

from meal_mis.services.report_renderer import (
    LogoDecodeError,
    LogoImage,
    ReportGenerationError,
    ReportRenderer,
    decode_logo,
)
from meal_mis.services.report_service import ReportService
from meal_mis.services.snapshot import Branding, DashboardSnapshot, ReportFilters
from tests.factories import PNG_PIXEL_BASE64, make_project, truncated_png_base64

GENERATED_AT = datetime(2026, 1, 15, 9, 30)


class StaticProvider:
    def __init__(self, snapshot: DashboardSnapshot) -> None:
        self.snapshot = snapshot

    def fetch_snapshot(self) -> DashboardSnapshot:
        return self.snapshot


def _pdf_text(content: bytes) -> str:
    with pdfplumber.open(io.BytesIO(content)) as pdf:
        return "\n".join(page.extract_text() or "" for page in pdf.pages)


def _page_count(content: bytes) -> int:
    with pdfplumber.open(io.BytesIO(content)) as pdf:
        return len(pdf.pages)


def _service(snapshot: DashboardSnapshot) -> ReportService:
    return ReportService(StaticProvider(snapshot))


def test_empty_snapshot_still_produces_a_pdf() -> None:
    service = _service(DashboardSnapshot())

    content = service.compile(DashboardSnapshot(), ReportFilters(), generated_at=GENERATED_AT)

    assert content.startswith(b"%PDF")
    text = _pdf_text(content)
    assert "MIS Programme Report" in text
    assert "Filters: none (full portfolio report)" in text
    assert "No projects match the selected filters." in text
    assert "No beneficiary data available." in text
    assert "2026-01-15 09:30" in text
    assert "NSDO" in text


def test_report_bytes_are_deterministic_for_fixed_timestamp() -> None:
    snapshot = DashboardSnapshot(
        projects=(make_project("p1", sector="Health", provinces=("Kabul",), direct={"idps": 12}),)
    )
    service = _service(snapshot)

    first = service.compile(snapshot, ReportFilters(), generated_at=GENERATED_AT)
    second = service.compile(snapshot, ReportFilters(), generated_at=GENERATED_AT)

    assert first == second


def test_capped_portfolio_mentions_hidden_projects() -> None:
    snapshot = DashboardSnapshot(
        projects=tuple(make_project(f"p{index:02d}", direct={"adults_men": index + 1}) for index in range(20))
    )

    content = _service(snapshot).compile(snapshot, ReportFilters(), generated_at=GENERATED_AT)

    text = _pdf_text(content)
    assert "+5 additional projects not shown" in text
    assert "P14" in text
    assert "P15" not in text
    assert _page_count(content) >= 2


def test_branding_name_appears_in_header() -> None:
    snapshot = DashboardSnapshot(branding=Branding(organization_name="Relief Partners"))

    content = _service(snapshot).compile(snapshot, ReportFilters(), generated_at=GENERATED_AT)

    assert "Relief Partners" in _pdf_text(content)
    with pdfplumber.open(io.BytesIO(content)) as pdf:
        assert pdf.metadata["Title"] == "Relief Partners Dashboard Report"


def test_decode_logo_results() -> None:
    assert decode_logo(None) is None
    assert decode_logo("") is None
    assert isinstance(decode_logo("https://example.org/logo.png"), LogoDecodeError)
    assert isinstance(decode_logo("data:image/png;base64,###"), LogoDecodeError)
    assert isinstance(decode_logo("data:image/png;base64,aGVsbG8="), LogoDecodeError)

    logo = decode_logo(f"data:image/png;base64,{PNG_PIXEL_BASE64}")
    assert isinstance(logo, LogoImage)
    assert logo.mime == "image/png"


def test_unreadable_logo_is_skipped_with_warning(caplog: pytest.LogCaptureFixture) -> None:
    snapshot = DashboardSnapshot(branding=Branding(logo_data_url="data:image/png;base64,aGVsbG8="))

    with caplog.at_level(logging.WARNING, logger="meal_mis.services.report_renderer"):
        content = _service(snapshot).compile(snapshot, ReportFilters(), generated_at=GENERATED_AT)

    assert content.startswith(b"%PDF")
    assert "Skipping branding logo" in caplog.text


def test_truncated_logo_is_rejected_and_report_still_renders(caplog: pytest.LogCaptureFixture) -> None:
    data_url = f"data:image/png;base64,{truncated_png_base64()}"
    assert isinstance(decode_logo(data_url), LogoDecodeError)

    snapshot = DashboardSnapshot(branding=Branding(logo_data_url=data_url))
    with caplog.at_level(logging.WARNING, logger="meal_mis.services.report_renderer"):
        content = _service(snapshot).compile(snapshot, ReportFilters(), generated_at=GENERATED_AT)

    assert content.startswith(b"%PDF")
    assert "Skipping branding logo" in caplog.text
    with pdfplumber.open(io.BytesIO(content)) as pdf:
        assert not pdf.pages[0].images


def test_valid_logo_is_drawn() -> None:
    snapshot = DashboardSnapshot(branding=Branding(logo_data_url=f"data:image/png;base64,{PNG_PIXEL_BASE64}"))

    content = _service(snapshot).compile(snapshot, ReportFilters(), generated_at=GENERATED_AT)

    with pdfplumber.open(io.BytesIO(content)) as pdf:
        assert pdf.pages[0].images


def test_rendering_failure_is_wrapped(monkeypatch: pytest.MonkeyPatch) -> None:
    def broken_build(self, *args, **kwargs):
        raise ValueError("layout exploded")

    monkeypatch.setattr("meal_mis.services.report_renderer.SimpleDocTemplate.build", broken_build)
    renderer = ReportRenderer(organization_name="NSDO", logo=None, generated_at=GENERATED_AT, title="Report")

    with pytest.raises(ReportGenerationError):
        renderer.render([])


def test_generate_report_names_the_file_after_the_timestamp(caplog: pytest.LogCaptureFixture) -> None:
    snapshot = DashboardSnapshot(projects=(make_project("p1", start="2023-01-01"), make_project("p2", start="2025-01-01", end="2025-06-01")))

    with caplog.at_level(logging.INFO, logger="meal_mis.services.report_service"):
        exported = _service(snapshot).generate_report(ReportFilters(years=(2023,)), generated_at=GENERATED_AT)

    assert exported.media_type == "application/pdf"
    assert exported.filename == "nsdo-dashboard-report-20260115093000.pdf"
    assert exported.content.startswith(b"%PDF")
    assert "1 of 2 project(s)" in caplog.text
