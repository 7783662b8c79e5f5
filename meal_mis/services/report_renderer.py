"""reportlab renderer for report section descriptors."""

from __future__ import annotations

import base64
import binascii
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from io import BytesIO
from xml.sax.saxutils import escape

from reportlab.graphics.shapes import Drawing, Rect, String
from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.utils import ImageReader
from reportlab.platypus import (
    Flowable,
    HRFlowable,
    PageBreak as PageBreakFlowable,
    Paragraph,
    SimpleDocTemplate,
    Spacer,
    Table,
    TableStyle,
)

from meal_mis.services.report_sections import (
    BeneficiaryChart,
    FilterScope,
    KeyValues,
    Narrative,
    Notice,
    PageBreak,
    Placeholder,
    ProjectTable,
    ReportSection,
    SectionHeading,
    TitleBlock,
    format_number,
)
from meal_mis.services.snapshot import parse_data_url

logger = logging.getLogger(__name__)

PAGE_MARGIN_TOP = 80
PAGE_MARGIN_BOTTOM = 60
PAGE_MARGIN_SIDE = 50

LOGO_BOX = (80, 40)

C_TEXT = colors.HexColor("#111111")
C_MUTED = colors.HexColor("#555555")
C_NOTICE = colors.HexColor("#777777")
C_RULE = colors.HexColor("#CCCCCC")
C_SECTION_RULE = colors.HexColor("#DDDDDD")
C_DIRECT = colors.HexColor("#2f855a")
C_INDIRECT = colors.HexColor("#2b6cb0")

CHART_LABEL_WIDTH = 100
CHART_VALUE_SPACE = 80
CHART_BAR_HEIGHT = 14
CHART_ROW_GAP = 6

TABLE_COLUMN_SHARES = (0.12, 0.30, 0.18, 0.18, 0.22)


class ReportGenerationError(RuntimeError):
    """Raised when the PDF document cannot be produced."""


@dataclass(frozen=True, slots=True)
class LogoImage:
    reader: ImageReader
    mime: str


@dataclass(frozen=True, slots=True)
class LogoDecodeError:
    reason: str


def decode_logo(data_url: str | None) -> LogoImage | LogoDecodeError | None:
    """Decode a branding logo data URI; ``None`` means no logo is configured."""

    if not data_url:
        return None

    parsed = parse_data_url(data_url)
    if parsed is None:
        return LogoDecodeError("logo is not a base64 data URI")
    mime, payload = parsed

    try:
        raw = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as exc:
        return LogoDecodeError(f"invalid base64 payload: {exc}")
    if not raw:
        return LogoDecodeError("empty logo payload")

    try:
        reader = ImageReader(BytesIO(raw))
        reader.getSize()
        # header parsing alone accepts truncated files; decode every pixel
        reader.getRGBData()
    except Exception as exc:  # reportlab/Pillow raise assorted errors for unreadable images
        return LogoDecodeError(f"unreadable {mime} image: {exc}")
    return LogoImage(reader=reader, mime=mime)


def _styles() -> dict[str, ParagraphStyle]:
    base = getSampleStyleSheet()["Normal"]
    return {
        "title": ParagraphStyle(
            "ReportTitle", parent=base, fontName="Helvetica-Bold", fontSize=20, leading=24, alignment=TA_CENTER
        ),
        "subtitle": ParagraphStyle(
            "ReportSubtitle", parent=base, fontName="Helvetica", fontSize=12, leading=15, alignment=TA_CENTER
        ),
        "scope_heading": ParagraphStyle("ScopeHeading", parent=base, fontName="Helvetica-Bold", fontSize=10),
        "body": ParagraphStyle("Body", parent=base, fontName="Helvetica", fontSize=10, leading=13, textColor=C_TEXT),
        "section": ParagraphStyle(
            "Section", parent=base, fontName="Helvetica-Bold", fontSize=14, leading=18, textColor=C_TEXT
        ),
        "section_sub": ParagraphStyle(
            "SectionSub", parent=base, fontName="Helvetica", fontSize=10, leading=13, textColor=C_MUTED
        ),
        "label": ParagraphStyle("Label", parent=base, fontName="Helvetica-Bold", fontSize=10, leading=13),
        "placeholder": ParagraphStyle(
            "Placeholder", parent=base, fontName="Helvetica", fontSize=10, leading=13, textColor=C_MUTED
        ),
        "notice": ParagraphStyle(
            "Notice", parent=base, fontName="Helvetica", fontSize=9, leading=12, textColor=C_NOTICE
        ),
        "table_head": ParagraphStyle("TableHead", parent=base, fontName="Helvetica-Bold", fontSize=10, leading=12),
        "table_cell": ParagraphStyle("TableCell", parent=base, fontName="Helvetica", fontSize=9, leading=11),
        "narrative_title": ParagraphStyle(
            "NarrativeTitle", parent=base, fontName="Helvetica-Bold", fontSize=12, leading=15
        ),
        "narrative": ParagraphStyle(
            "Narrative", parent=base, fontName="Helvetica", fontSize=10, leading=13, textColor=colors.HexColor("#333333")
        ),
    }


class ReportRenderer:
    """Lay out section descriptors on A4 pages with a branded header per page."""

    def __init__(
        self,
        *,
        organization_name: str,
        logo: LogoImage | LogoDecodeError | None,
        generated_at: datetime,
        title: str,
    ) -> None:
        self.organization_name = organization_name
        self.logo = logo
        self.generated_at = generated_at
        self.title = title
        self.styles = _styles()

    # ---------- Page chrome ----------
    def _draw_page_chrome(self, canvas, doc) -> None:
        width, height = doc.pagesize
        left = doc.leftMargin
        right = width - doc.rightMargin

        canvas.saveState()
        text_x = left
        if isinstance(self.logo, LogoImage):
            logo_width, logo_height = LOGO_BOX
            canvas.drawImage(
                self.logo.reader,
                left,
                height - PAGE_MARGIN_TOP + 18,
                width=logo_width,
                height=logo_height,
                preserveAspectRatio=True,
                anchor="sw",
                mask="auto",
            )
            text_x = left + logo_width + 10

        canvas.setFillColor(C_TEXT)
        canvas.setFont("Helvetica-Bold", 16)
        canvas.drawString(text_x, height - PAGE_MARGIN_TOP + 30, self.organization_name)

        canvas.setFillColor(C_MUTED)
        canvas.setFont("Helvetica", 9)
        canvas.drawRightString(right, height - PAGE_MARGIN_TOP + 42, self.generated_at.strftime("%Y-%m-%d %H:%M"))

        canvas.setStrokeColor(C_RULE)
        canvas.line(left, height - PAGE_MARGIN_TOP + 10, right, height - PAGE_MARGIN_TOP + 10)

        canvas.drawCentredString(width / 2, PAGE_MARGIN_BOTTOM - 25, f"Page {canvas.getPageNumber()}")
        canvas.restoreState()

    # ---------- Section flowables ----------
    def _paragraph(self, text: str, style: str) -> Paragraph:
        return Paragraph(escape(text), self.styles[style])

    def _title_block(self, section: TitleBlock) -> list[Flowable]:
        return [
            self._paragraph(section.title, "title"),
            Spacer(1, 4),
            self._paragraph(section.subtitle, "subtitle"),
            Spacer(1, 14),
        ]

    def _filter_scope(self, section: FilterScope) -> list[Flowable]:
        flowables: list[Flowable] = [
            Paragraph(f"<u>{escape(section.heading)}</u>", self.styles["scope_heading"]),
            Spacer(1, 6),
        ]
        flowables.extend(self._paragraph(line, "body") for line in section.lines)
        flowables.append(Spacer(1, 12))
        return flowables

    def _section_heading(self, section: SectionHeading) -> list[Flowable]:
        flowables: list[Flowable] = [Spacer(1, 18), self._paragraph(section.title, "section")]
        if section.subtitle:
            flowables.append(self._paragraph(section.subtitle, "section_sub"))
        flowables.extend(
            [
                Spacer(1, 4),
                HRFlowable(width="100%", thickness=0.5, color=C_SECTION_RULE, spaceBefore=2, spaceAfter=6),
            ]
        )
        return flowables

    def _key_values(self, section: KeyValues) -> list[Flowable]:
        flowables: list[Flowable] = []
        for label, value in section.items:
            flowables.append(self._paragraph(label, "label"))
            flowables.append(self._paragraph(value, "body"))
            flowables.append(Spacer(1, 4))
        return flowables

    def _beneficiary_chart(self, section: BeneficiaryChart, available_width: float) -> list[Flowable]:
        row_height = CHART_BAR_HEIGHT + CHART_ROW_GAP
        drawing = Drawing(available_width, row_height * len(section.rows))
        bar_max_width = available_width - CHART_LABEL_WIDTH - CHART_VALUE_SPACE

        for index, row in enumerate(section.rows):
            y = drawing.height - (index + 1) * row_height
            direct_width = row.direct / section.max_value * bar_max_width
            indirect_width = row.indirect / section.max_value * bar_max_width
            bar_x = CHART_LABEL_WIDTH

            drawing.add(String(0, y + 3, row.label, fontName="Helvetica", fontSize=9, fillColor=colors.HexColor("#333333")))
            drawing.add(Rect(bar_x, y, direct_width, CHART_BAR_HEIGHT, fillColor=C_DIRECT, strokeColor=None))
            drawing.add(
                Rect(bar_x + direct_width + 4, y, indirect_width, CHART_BAR_HEIGHT, fillColor=C_INDIRECT, strokeColor=None)
            )
            drawing.add(
                String(bar_x + direct_width + 6, y + 3, format_number(row.direct), fontName="Helvetica", fontSize=8)
            )
            drawing.add(
                String(
                    bar_x + direct_width + indirect_width + 12,
                    y + 3,
                    format_number(row.indirect),
                    fontName="Helvetica",
                    fontSize=8,
                )
            )
        return [drawing, Spacer(1, 12)]

    def _project_table(self, section: ProjectTable, available_width: float) -> list[Flowable]:
        data = [[self._paragraph(header, "table_head") for header in section.headers]]
        data.extend([self._paragraph(value, "table_cell") for value in row] for row in section.rows)
        table = Table(
            data,
            colWidths=[available_width * share for share in TABLE_COLUMN_SHARES],
            repeatRows=1,
        )
        table.setStyle(
            TableStyle(
                [
                    ("VALIGN", (0, 0), (-1, -1), "TOP"),
                    ("LINEBELOW", (0, 0), (-1, 0), 0.5, C_SECTION_RULE),
                    ("BOTTOMPADDING", (0, 0), (-1, -1), 3),
                    ("TOPPADDING", (0, 0), (-1, -1), 3),
                    ("LEFTPADDING", (0, 0), (-1, -1), 2),
                ]
            )
        )
        return [table, Spacer(1, 10)]

    def _flowables_for(self, section: ReportSection, available_width: float) -> list[Flowable]:
        if isinstance(section, TitleBlock):
            return self._title_block(section)
        if isinstance(section, FilterScope):
            return self._filter_scope(section)
        if isinstance(section, SectionHeading):
            return self._section_heading(section)
        if isinstance(section, KeyValues):
            return self._key_values(section)
        if isinstance(section, BeneficiaryChart):
            return self._beneficiary_chart(section, available_width)
        if isinstance(section, ProjectTable):
            return self._project_table(section, available_width)
        if isinstance(section, Placeholder):
            return [self._paragraph(section.text, "placeholder"), Spacer(1, 10)]
        if isinstance(section, Notice):
            return [self._paragraph(section.text, "notice"), Spacer(1, 10)]
        if isinstance(section, PageBreak):
            return [PageBreakFlowable()]
        if isinstance(section, Narrative):
            return [
                Spacer(1, 20),
                self._paragraph(section.title, "narrative_title"),
                Spacer(1, 4),
                self._paragraph(section.text, "narrative"),
            ]
        raise ReportGenerationError(f"Unsupported report section: {type(section).__name__}")

    def render(self, sections: Sequence[ReportSection]) -> bytes:
        if isinstance(self.logo, LogoDecodeError):
            logger.warning("Skipping branding logo in report header: %s", self.logo.reason)

        buffer = BytesIO()
        try:
            doc = SimpleDocTemplate(
                buffer,
                pagesize=A4,
                topMargin=PAGE_MARGIN_TOP,
                bottomMargin=PAGE_MARGIN_BOTTOM,
                leftMargin=PAGE_MARGIN_SIDE,
                rightMargin=PAGE_MARGIN_SIDE,
                title=self.title,
                author=f"{self.organization_name} MIS",
                creator=f"{self.organization_name} MIS",
                # Fixed document id and metadata dates; the header carries the timestamp.
                invariant=1,
            )
            story: list[Flowable] = []
            for section in sections:
                story.extend(self._flowables_for(section, doc.width))
            doc.build(story, onFirstPage=self._draw_page_chrome, onLaterPages=self._draw_page_chrome)
        except ReportGenerationError:
            raise
        except Exception as exc:
            raise ReportGenerationError("Failed to render report document.") from exc
        finally:
            content = buffer.getvalue()
            buffer.close()
        return content
