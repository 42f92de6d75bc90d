"""
PDF report generator — paints a laid-out report card onto a PDF page.

The layout itself (what goes where) is computed by report_layout.py as a
list of draw commands. This module is the ReportLab side:
1. Supplies the font-metrics function the layout engine measures text with
2. Paints each command onto a pdfgen Canvas and returns the PDF bytes

Unlike a Platypus document, a report card is a fixed single page, so we
draw directly on the canvas with absolute coordinates.

Key ReportLab concepts:
- canvas.Canvas: Low-level drawing surface (drawString, line, rect)
- pdfmetrics.stringWidth: Width of a string in a standard font, in points
- invariant=1: Pins the creation date and document ID so identical input
  produces byte-identical output
"""

from datetime import date
from io import BytesIO
from typing import Optional

from reportlab.lib import colors
from reportlab.pdfbase.pdfmetrics import stringWidth
from reportlab.pdfgen import canvas

from reportcard.services.report_layout import (
    DEFAULT_LAYOUT,
    LayoutConstants,
    Line,
    Page,
    Rect,
    SchoolInfo,
    TextRun,
    layout_report,
)

# --- Colors ---
INK = colors.black
PDF_AUTHOR = "Report Card Service"


def reportlab_measure(text: str, font: str, size: float) -> float:
    """Measure text with ReportLab's built-in font metrics."""
    return stringWidth(text, font, size)


class ReportCardPDFGenerator:
    """Generates single-page academic report sheets.

    Usage:
        generator = ReportCardPDFGenerator(school=SchoolInfo("MagMax", (...)))
        pdf_bytes = generator.generate(record, today=date(2026, 10, 19))
    """

    def __init__(
        self,
        school: SchoolInfo,
        layout: LayoutConstants = DEFAULT_LAYOUT,
        term_number: str = "3",
        max_component_score: float = 50.0,
    ):
        self.school = school
        self.layout = layout
        self.term_number = term_number
        self.max_component_score = max_component_score

    # ------------------------------------------------------------------
    # PUBLIC API
    # ------------------------------------------------------------------

    def build_page(self, record, today: date) -> Page:
        """Lay out the record without painting it (useful for inspection)."""
        return layout_report(
            record,
            today=today,
            measure=reportlab_measure,
            school=self.school,
            constants=self.layout,
            term_number=self.term_number,
            max_component_score=self.max_component_score,
        )

    def generate(self, record, today: date) -> bytes:
        """Generate the report card PDF for one student.

        Raises ReportRenderError if the record does not fit on the page.
        Returns raw PDF bytes (ready to save to disk or stream via HTTP).
        """
        page = self.build_page(record, today)
        return self.paint(page, title=f"Academic Report - {record.student.name}")

    @staticmethod
    def paint(page: Page, title: Optional[str] = None) -> bytes:
        """Paint draw commands onto a fresh canvas and return the PDF bytes."""
        buffer = BytesIO()
        pdf = canvas.Canvas(
            buffer,
            pagesize=(page.width, page.height),
            invariant=1,
        )
        if title:
            pdf.setTitle(title)
        pdf.setAuthor(PDF_AUTHOR)

        for command in page.commands:
            if isinstance(command, Rect):
                _paint_rect(pdf, command)
            elif isinstance(command, Line):
                pdf.setStrokeColor(INK)
                pdf.setLineWidth(command.width)
                pdf.line(command.x1, command.y1, command.x2, command.y2)
            elif isinstance(command, TextRun):
                pdf.setFillColor(colors.HexColor(command.color))
                pdf.setFont(command.font, command.size)
                pdf.drawString(command.x, command.y, command.text)
            else:
                raise TypeError(f"Unknown draw command: {command!r}")

        pdf.showPage()
        pdf.save()
        return buffer.getvalue()


def _paint_rect(pdf: canvas.Canvas, rect: Rect) -> None:
    pdf.setStrokeColor(INK)
    pdf.setLineWidth(rect.line_width)
    if rect.fill:
        pdf.setFillColor(colors.HexColor(rect.fill))
    pdf.rect(
        rect.x, rect.y, rect.width, rect.height,
        stroke=1 if rect.stroke else 0,
        fill=1 if rect.fill else 0,
    )
