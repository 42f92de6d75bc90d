"""
Client for a remote HTML -> PDF conversion service.

The service takes raw HTML and returns raw PDF bytes:
    POST {PDF_SERVICE_URL}
    {"html": "...", "format": "A4", "printBackground": true}

This is a single BLOCKING call with a timeout. Any failure (non-2xx
status, timeout, connection error) is raised as PdfConversionError so the
caller can fall back to returning the HTML itself.
"""

from typing import Optional

import httpx


class PdfConversionError(Exception):
    """The conversion service did not return a PDF."""


class HtmlToPdfConverter:
    """Wraps the conversion service's HTTP API.

    Usage:
        converter = HtmlToPdfConverter("https://api.html2pdf.app/v1/generate")
        pdf_bytes = converter.convert("<html>...</html>")

    A custom httpx transport can be passed for tests (httpx.MockTransport).
    """

    def __init__(
        self,
        url: str,
        timeout: float = 15.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.url = url
        self.timeout = timeout
        self.transport = transport

    def convert(self, html: str) -> bytes:
        """Convert an HTML document to PDF bytes.

        Raises:
            PdfConversionError: If the service is unreachable, times out,
                or answers with a non-success status.
        """
        payload = {"html": html, "format": "A4", "printBackground": True}
        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                response = client.post(self.url, json=payload)
        except httpx.HTTPError as e:
            raise PdfConversionError(f"PDF service unreachable: {e}") from e

        if not response.is_success:
            raise PdfConversionError(
                f"PDF service returned HTTP {response.status_code}"
            )
        return response.content
