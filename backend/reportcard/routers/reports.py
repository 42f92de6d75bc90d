"""
Report card API endpoints.

1. GET /students/{id}/report — The assembled report record (JSON)
2. GET /students/{id}/report/pdf — Download the report card
3. POST /reports/pdf — Render a caller-supplied record, base64 in JSON

Documents are generated on demand, never stored. Generation is blocking
(ReportLab drawing, or an HTTP call to the conversion service), so it
runs in a worker thread to keep the event loop free.

The "today" used for term dates comes from the get_today dependency so
tests (and back-dated reprints) can pin the clock.
"""

import asyncio
import re
import unicodedata
from datetime import date
from urllib.parse import quote
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession

from reportcard.database import get_db
from reportcard.schemas.reports import ReportPdfRequest, ReportPdfResponse, ReportRecord
from reportcard.services.report_card import (
    ReportCardService,
    ReportDocument,
    get_report_service,
)
from reportcard.services.report_data import StoredScoreError, build_report_record
from reportcard.services.report_layout import ReportRenderError

router = APIRouter(prefix="/api/v1", tags=["reports"])


def get_today() -> date:
    """Clock dependency. Override in tests to pin term dates."""
    return date.today()


@router.get("/students/{student_id}/report", response_model=ReportRecord)
async def get_report(
    student_id: UUID,
    db: AsyncSession = Depends(get_db),
):
    """Get the aggregated report record for a student."""
    return await _get_record_or_404(db, student_id)


@router.get("/students/{student_id}/report/pdf")
async def download_report_pdf(
    student_id: UUID,
    db: AsyncSession = Depends(get_db),
    service: ReportCardService = Depends(get_report_service),
    today: date = Depends(get_today),
):
    """Download the report card.

    Normally a PDF. When remote conversion is configured and the service
    is down, the HTML version is returned instead; the Content-Type and
    the X-Report-Format header say which one it is.
    """
    record = await _get_record_or_404(db, student_id)
    document = await _generate(service, record, today)

    filename = f"report-{_slug(record.student.name)}.{document.extension}"
    return Response(
        content=document.content,
        media_type=document.media_type,
        headers={
            "Content-Disposition": _content_disposition(filename),
            "X-Report-Format": document.extension,
        },
    )


@router.post("/reports/pdf", response_model=ReportPdfResponse)
async def generate_report_pdf(
    request: ReportPdfRequest,
    service: ReportCardService = Depends(get_report_service),
    today: date = Depends(get_today),
):
    """Render a report record supplied in the request body.

    Returns the document base64-encoded. is_html is true when the
    conversion service was unavailable and the payload is HTML.
    """
    document = await _generate(service, request.report_data, today)
    return ReportPdfResponse(
        pdf=document.as_base64(),
        is_html=document.is_html,
        message=document.message,
    )


# --- Helpers ---

async def _get_record_or_404(db: AsyncSession, student_id: UUID) -> ReportRecord:
    try:
        record = await build_report_record(db, student_id)
    except StoredScoreError as e:
        raise HTTPException(status_code=409, detail=str(e))
    if record is None:
        raise HTTPException(status_code=404, detail="Student not found")
    return record


async def _generate(service: ReportCardService, record: ReportRecord, today: date) -> ReportDocument:
    """Run the blocking generator off the event loop; map layout failures to 500."""
    try:
        return await asyncio.to_thread(service.generate, record, today)
    except ReportRenderError as e:
        print(f"❌ Report generation failed: {e}")
        raise HTTPException(status_code=500, detail=str(e))


def _slug(name: str) -> str:
    """Whitespace to hyphens; quotes and slashes dropped."""
    return re.sub(r"\s+", "-", re.sub(r'["\\/]', "", name.strip()))


def _content_disposition(filename: str) -> str:
    """Attachment header that survives non-Latin-1 names.

    Headers are Latin-1 on the wire, so filename= gets an accent-stripped
    ASCII version and filename* (RFC 5987) carries the real name as UTF-8.
    """
    ascii_name = (
        unicodedata.normalize("NFKD", filename).encode("ascii", "ignore").decode("ascii")
    )
    if ascii_name == filename:
        return f'attachment; filename="{filename}"'
    return f"attachment; filename=\"{ascii_name}\"; filename*=UTF-8''{quote(filename, safe='')}"
