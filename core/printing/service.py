"""
Core PDF Render Service

Central service for rendering document layouts to PDF.
"""

import asyncio
import logging
from typing import Optional

from django.conf import settings

from core.services.exceptions import RenderError
from core.services.reporting.layout import DocumentLayout

from .dto import PdfResult
from .interfaces import IPdfRenderer
from .reportlab_renderer import ReportLabRenderer


logger = logging.getLogger(__name__)


class PdfRenderService:
    """
    Core service for the PDF rendering pipeline.

    Responsibilities:
    1. Submit a layout to an IPdfRenderer implementation
    2. Collect the emitted byte chunks, in order, into one document
    3. Turn engine failures and timeouts into RenderError, dropping partial output

    Usage:
        service = PdfRenderService()
        result = await service.render(layout, filename='invoice_001.pdf')
    """

    def __init__(self, renderer: Optional[IPdfRenderer] = None, timeout: Optional[float] = None):
        """
        Initialize the service.

        Args:
            renderer: PDF renderer implementation. If None, uses the ReportLab renderer.
            timeout: Seconds allowed for consuming the whole render stream
                (defaults to the DOCVAULT_RENDER_TIMEOUT setting)
        """
        self.renderer = renderer or self._get_default_renderer()
        self.timeout = timeout if timeout is not None else getattr(settings, 'DOCVAULT_RENDER_TIMEOUT', 30)

    async def render(self, layout: DocumentLayout, *, filename: Optional[str] = None) -> PdfResult:
        """
        Render a layout to PDF.

        Args:
            layout: Document layout built by a report template
            filename: Optional filename for the PDF (defaults to 'document.pdf')

        Returns:
            PdfResult with the complete PDF bytes

        Raises:
            RenderError: If the stream fails, times out or yields nothing
        """
        try:
            pdf_bytes = await asyncio.wait_for(self._collect(layout), timeout=self.timeout)
        except asyncio.TimeoutError as e:
            logger.error(f"Rendering '{layout.title}' timed out after {self.timeout}s")
            raise RenderError(f"Rendering timed out after {self.timeout}s") from e
        except Exception as e:
            logger.error(f"Failed to render PDF '{layout.title}': {e}", exc_info=True)
            raise RenderError(f"Failed to render PDF: {e}") from e

        if not pdf_bytes:
            logger.error(f"Renderer returned an empty document for '{layout.title}'")
            raise RenderError("Renderer returned an empty document")

        result = PdfResult(
            pdf_bytes=pdf_bytes,
            filename=filename or 'document.pdf',
            content_type='application/pdf'
        )

        logger.info(
            f"Successfully generated PDF: {result.filename} "
            f"({len(result.pdf_bytes)} bytes)"
        )

        return result

    async def _collect(self, layout: DocumentLayout) -> bytes:
        chunks = []
        async for chunk in self.renderer.stream(layout):
            chunks.append(chunk)
        return b''.join(chunks)

    def _get_default_renderer(self) -> IPdfRenderer:
        return ReportLabRenderer()
