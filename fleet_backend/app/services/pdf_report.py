"""
PDF rendering for fleet reports.

Draws a ``ReportData`` onto A4 pages with reportlab: branded header band,
executive summary grid, section bars, tables, paragraphs and label/value
lists, with a numbered footer on every page. Layout coordinates are in
millimetres measured from the top of the page.
"""

import io
import math
from datetime import datetime
from typing import List, Optional, Sequence, Tuple

from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.lib.utils import simpleSplit
from reportlab.pdfgen import canvas

from fleet_backend.app.core.config import settings
from fleet_backend.app.core.dates import as_utc, utcnow
from fleet_backend.app.schemas.report import ReportData, ReportSection, SectionType

PAGE_WIDTH = A4[0] / mm
PAGE_HEIGHT = A4[1] / mm
MARGIN = 15
CONTENT_WIDTH = PAGE_WIDTH - MARGIN * 2
HEADER_HEIGHT = 45
FOOTER_HEIGHT = 15
SECTION_BREAK_AT = PAGE_HEIGHT - 60
LINE_BREAK_AT = PAGE_HEIGHT - 20
TABLE_BOTTOM = PAGE_HEIGHT - FOOTER_HEIGHT - 5
METRICS_PER_ROW = 4
METRIC_ROW_HEIGHT = 22

TABLE_FONT_SIZE = 8
TABLE_LINE_HEIGHT = 3.5
TABLE_PADDING = 2

PRIMARY = (0, 0, 0)
ACCENT = (200, 16, 46)
SUCCESS = (0, 100, 0)
TEXT = (51, 51, 51)
MUTED = (128, 128, 128)
WHITE = (255, 255, 255)
SUMMARY_BACKGROUND = (245, 245, 245)
ALTERNATE_ROW = (248, 248, 248)
GRID = (200, 200, 200)


def _rgb(color: Tuple[int, int, int]) -> Tuple[float, float, float]:
    return tuple(v / 255 for v in color)


def _y(top_mm: float) -> float:
    """Top-based millimetres to reportlab's bottom-based points."""
    return (PAGE_HEIGHT - top_mm) * mm


def _font(bold: bool) -> str:
    return "Helvetica-Bold" if bold else "Helvetica"


def draw_text(c, x, y, text, size=10, bold=False, color=TEXT, align="left"):
    c.setFont(_font(bold), size)
    c.setFillColorRGB(*_rgb(color))
    if align == "right":
        c.drawRightString(x * mm, _y(y), text)
    else:
        c.drawString(x * mm, _y(y), text)


def fill_rect(c, x, y, width, height, color, rounded=0):
    c.setFillColorRGB(*_rgb(color))
    if rounded:
        c.roundRect(x * mm, _y(y + height), width * mm, height * mm, rounded * mm, stroke=0, fill=1)
    else:
        c.rect(x * mm, _y(y + height), width * mm, height * mm, stroke=0, fill=1)


class NumberedCanvas(canvas.Canvas):
    """
    Canvas that defers page output until ``save`` so each footer can show
    the total page count.
    """

    def __init__(self, *args, footer_text: str = "", **kwargs):
        canvas.Canvas.__init__(self, *args, **kwargs)
        self.footer_text = footer_text
        self.page_count = 0
        self._saved_page_states = []

    def showPage(self):
        self._saved_page_states.append(dict(self.__dict__))
        self._startPage()

    def save(self):
        page_count = len(self._saved_page_states)
        for state in self._saved_page_states:
            self.__dict__.update(state)
            self.draw_footer(page_count)
            canvas.Canvas.showPage(self)
        self.page_count = page_count
        canvas.Canvas.save(self)

    def draw_footer(self, page_count: int):
        fill_rect(self, 0, PAGE_HEIGHT - FOOTER_HEIGHT, PAGE_WIDTH, FOOTER_HEIGHT, PRIMARY)
        draw_text(self, MARGIN, PAGE_HEIGHT - 6, self.footer_text, size=8, color=WHITE)
        draw_text(
            self, PAGE_WIDTH - MARGIN, PAGE_HEIGHT - 6,
            f"Page {self._pageNumber} of {page_count}",
            size=8, color=WHITE, align="right",
        )


class ReportRenderer:
    def __init__(
        self,
        report: ReportData,
        now: Optional[datetime] = None,
        brand_name: Optional[str] = None,
        tagline: Optional[str] = None,
        compress: bool = True,
    ):
        self.report = report
        self.now = as_utc(now) if now else utcnow()
        self.brand_name = brand_name or settings.brand_name
        self.tagline = tagline or settings.brand_tagline
        self.compress = compress
        self.page_count = 0
        self.c: Optional[NumberedCanvas] = None
        self.y = MARGIN

    def render(self) -> bytes:
        buffer = io.BytesIO()
        self.c = NumberedCanvas(
            buffer,
            pagesize=A4,
            pageCompression=1 if self.compress else 0,
            footer_text=f"{self.brand_name} - Confidential Report",
        )
        self.c.setTitle(self.report.title)
        self.c.setAuthor(self.report.generated_by)

        self._draw_header()
        self._draw_summary()
        for section in self.report.sections:
            self._draw_section(section)

        self.c.showPage()
        self.c.save()
        self.page_count = self.c.page_count
        return buffer.getvalue()

    def _new_page(self):
        self.c.showPage()
        self.y = MARGIN

    def _draw_header(self):
        c = self.c
        fill_rect(c, 0, 0, PAGE_WIDTH, HEADER_HEIGHT, PRIMARY)
        # accent stripes
        fill_rect(c, 0, HEADER_HEIGHT, PAGE_WIDTH, 3, ACCENT)
        fill_rect(c, 0, HEADER_HEIGHT + 3, PAGE_WIDTH, 2, SUCCESS)

        draw_text(c, MARGIN, 25, self.brand_name, size=28, bold=True, color=WHITE)
        draw_text(c, MARGIN, 33, self.tagline, size=10, color=WHITE)
        draw_text(c, PAGE_WIDTH - MARGIN, 25, self.report.title.upper(), size=12, bold=True, color=WHITE, align="right")
        draw_text(
            c, PAGE_WIDTH - MARGIN, 33,
            f"Generated: {self.now.strftime('%d %B %Y, %H:%M')}",
            size=9, color=WHITE, align="right",
        )

        self.y = 60
        draw_text(c, MARGIN, self.y, f"Prepared by: {self.report.generated_by}", size=10)
        if self.report.date_range:
            draw_text(c, PAGE_WIDTH - MARGIN, self.y, f"Period: {self.report.date_range}", size=10, align="right")
        self.y += 15

    def _draw_summary(self):
        summary = self.report.summary
        if not summary:
            return

        c = self.c
        rows = math.ceil(len(summary) / METRICS_PER_ROW)
        fill_rect(c, MARGIN, self.y - 5, CONTENT_WIDTH, 10 + rows * 25, SUMMARY_BACKGROUND, rounded=3)
        draw_text(c, MARGIN + 5, self.y + 3, "EXECUTIVE SUMMARY", size=12, bold=True, color=PRIMARY)
        self.y += 12

        metric_width = (CONTENT_WIDTH - 20) / METRICS_PER_ROW
        for index, metric in enumerate(summary):
            col = index % METRICS_PER_ROW
            row = index // METRICS_PER_ROW
            x = MARGIN + 5 + col * metric_width
            y = self.y + row * METRIC_ROW_HEIGHT
            draw_text(c, x, y, metric.label, size=8, color=MUTED)
            draw_text(c, x, y + 6, metric.value, size=14, bold=True, color=PRIMARY)
            if metric.subtext:
                draw_text(c, x, y + 11, metric.subtext, size=7, color=MUTED)

        self.y += 15 + rows * METRIC_ROW_HEIGHT

    def _draw_section(self, section: ReportSection):
        if self.y > SECTION_BREAK_AT:
            self._new_page()

        fill_rect(self.c, MARGIN, self.y, CONTENT_WIDTH, 8, PRIMARY)
        draw_text(self.c, MARGIN + 3, self.y + 5.5, section.title.upper(), size=10, bold=True, color=WHITE)
        self.y += 12

        if section.type == SectionType.TABLE and section.table is not None:
            self._draw_table(section.table.head, section.table.body)
        elif section.type == SectionType.TEXT and section.text:
            self._draw_paragraph(section.text)
        elif section.type == SectionType.METRICS:
            self._draw_metrics(section)

    def _wrap_row(self, cells: Sequence[str], col_width: float, bold: bool) -> List[List[str]]:
        width = (col_width - TABLE_PADDING * 2) * mm
        return [simpleSplit(str(cell), _font(bold), TABLE_FONT_SIZE, width) or [""] for cell in cells]

    def _draw_row(self, cells: Sequence[str], col_width: float, background, bold: bool, color) -> None:
        wrapped = self._wrap_row(cells, col_width, bold)
        height = self._row_height(wrapped)
        c = self.c

        if background is not None:
            fill_rect(c, MARGIN, self.y, col_width * len(cells), height, background)

        c.setStrokeColorRGB(*_rgb(GRID))
        c.setLineWidth(0.1 * mm)
        for col, lines in enumerate(wrapped):
            x = MARGIN + col * col_width
            c.rect(x * mm, _y(self.y + height), col_width * mm, height * mm, stroke=1, fill=0)
            for i, line in enumerate(lines):
                baseline = self.y + TABLE_PADDING + (i + 1) * TABLE_LINE_HEIGHT - 0.8
                draw_text(c, x + TABLE_PADDING, baseline, line, size=TABLE_FONT_SIZE, bold=bold, color=color)

        self.y += height

    @staticmethod
    def _row_height(wrapped: List[List[str]]) -> float:
        return max(len(lines) for lines in wrapped) * TABLE_LINE_HEIGHT + TABLE_PADDING * 2

    def _draw_table(self, head: List[str], body: List[List[str]]):
        if not body:
            draw_text(self.c, MARGIN, self.y + 3, "No records for the selected period.", size=9, color=MUTED)
            self.y += 13
            return

        col_width = CONTENT_WIDTH / len(head)
        self._draw_row(head, col_width, SUCCESS, True, WHITE)

        for index, row in enumerate(body):
            if self.y + self._row_height(self._wrap_row(row, col_width, False)) > TABLE_BOTTOM:
                self._new_page()
                self._draw_row(head, col_width, SUCCESS, True, WHITE)
            background = ALTERNATE_ROW if index % 2 == 1 else None
            self._draw_row(row, col_width, background, False, TEXT)

        self.y += 10

    def _draw_paragraph(self, text: str):
        lines = simpleSplit(text, _font(False), 9, CONTENT_WIDTH * mm)
        for line in lines:
            if self.y > LINE_BREAK_AT:
                self._new_page()
            draw_text(self.c, MARGIN, self.y, line, size=9)
            self.y += 5
        self.y += 10

    def _draw_metrics(self, section: ReportSection):
        for item in section.items:
            if self.y > LINE_BREAK_AT:
                self._new_page()
            draw_text(self.c, MARGIN, self.y, f"{item.label}:", size=9, color=MUTED)
            draw_text(self.c, MARGIN + 60, self.y, item.value, size=9, bold=True)
            self.y += 6
        self.y += 5


def render_report_pdf(report: ReportData, now: Optional[datetime] = None, compress: bool = True) -> bytes:
    return ReportRenderer(report, now=now, compress=compress).render()
