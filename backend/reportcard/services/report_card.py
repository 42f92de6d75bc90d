"""
Report card generation — picks the PDF backend and owns the HTML fallback.

Two ways to produce the document:
1. "reportlab" (default): lay out and draw the page locally. Always
   available, deterministic, no network.
2. "remote": render HTML and post it to the conversion service. If the
   service fails, return the HTML instead, flagged with is_html=True.

The caller always learns which one it got from ReportDocument.is_html,
never by looking at the bytes.
"""

import base64
from dataclasses import dataclass
from datetime import date
from typing import Optional

from reportcard.config import settings
from reportcard.services.pdf_conversion import HtmlToPdfConverter, PdfConversionError
from reportcard.services.pdf_report import ReportCardPDFGenerator
from reportcard.services.report_html import ReportCardHTMLRenderer
from reportcard.services.report_layout import SchoolInfo

FALLBACK_MESSAGE = "PDF generation service unavailable. Returning HTML content."


@dataclass(frozen=True)
class ReportDocument:
    """A generated report: PDF bytes, or UTF-8 HTML when is_html is set."""
    content: bytes
    is_html: bool = False
    message: Optional[str] = None

    @property
    def media_type(self) -> str:
        return "text/html; charset=utf-8" if self.is_html else "application/pdf"

    @property
    def extension(self) -> str:
        return "html" if self.is_html else "pdf"

    def as_base64(self) -> str:
        return base64.b64encode(self.content).decode("ascii")


class ReportCardService:
    """Generates report documents for ReportRecords.

    Usage:
        service = ReportCardService(pdf_generator, html_renderer)
        document = service.generate(record, today=date.today())

    Pass a converter to switch to remote conversion with HTML fallback.
    """

    def __init__(
        self,
        pdf_generator: ReportCardPDFGenerator,
        html_renderer: ReportCardHTMLRenderer,
        converter: Optional[HtmlToPdfConverter] = None,
    ):
        self.pdf_generator = pdf_generator
        self.html_renderer = html_renderer
        self.converter = converter

    def generate(self, record, today: date) -> ReportDocument:
        """Produce the report document for one student.

        Raises ReportRenderError (local backend) if the page cannot be laid
        out. Remote conversion failures never raise: they fall back to HTML.
        """
        if self.converter is None:
            return ReportDocument(content=self.pdf_generator.generate(record, today))

        html = self.html_renderer.render(record, today)
        try:
            pdf_bytes = self.converter.convert(html)
        except PdfConversionError as e:
            print(f"⚠️ {e} - returning HTML report for {record.student.name}")
            return ReportDocument(
                content=html.encode("utf-8"),
                is_html=True,
                message=FALLBACK_MESSAGE,
            )
        return ReportDocument(content=pdf_bytes)


def get_report_service() -> ReportCardService:
    """FastAPI dependency: a ReportCardService configured from settings."""
    school = SchoolInfo.from_settings(settings)
    pdf_generator = ReportCardPDFGenerator(
        school=school,
        term_number=settings.TERM_NUMBER,
        max_component_score=settings.MAX_COMPONENT_SCORE,
    )
    html_renderer = ReportCardHTMLRenderer(
        school=school,
        term_number=settings.TERM_NUMBER,
        max_component_score=settings.MAX_COMPONENT_SCORE,
    )
    converter = None
    if settings.PDF_BACKEND == "remote":
        converter = HtmlToPdfConverter(
            settings.PDF_SERVICE_URL, timeout=settings.PDF_SERVICE_TIMEOUT,
        )
    return ReportCardService(pdf_generator, html_renderer, converter)
