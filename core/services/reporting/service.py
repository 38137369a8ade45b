"""
Core Report Service

Builds layouts from requests, renders them, and delivers the result either
directly (preview) or through the artifact store (generate).
"""

import logging
import uuid
from dataclasses import dataclass
from typing import Any, Optional

from django.conf import settings

from .registry import ReportTemplate, get_template


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GeneratedArtifact:
    """Outcome of the generate path"""

    id: uuid.UUID
    filename: str
    size_bytes: int


class ReportService:
    """
    Core service for PDF report generation and delivery.

    This service provides:
    - Layout building via the template registry
    - Rendering through the PdfRenderService
    - Preview delivery (bytes only, nothing persisted)
    - Generate delivery (persist, then acknowledge)

    Each step finishes before the next starts; a failure anywhere leaves
    nothing behind in the store.
    """

    def __init__(self, render_service=None, store=None, strict_totals: Optional[bool] = None):
        """
        Initialize the service.

        Args:
            render_service: PdfRenderService (defaults to the ReportLab pipeline)
            store: ArtifactStore (defaults to the database store)
            strict_totals: Recompute submitted totals and reject mismatches
                (defaults to the DOCVAULT_STRICT_TOTALS setting)
        """
        # Import here to avoid circular imports
        from core.printing import PdfRenderService
        from core.services.storage import ArtifactStore

        self.render_service = render_service or PdfRenderService()
        self.store = store or ArtifactStore()
        self.strict_totals = (
            strict_totals if strict_totals is not None
            else getattr(settings, 'DOCVAULT_STRICT_TOTALS', False)
        )

    def prepare(self, report_key: str, payload: Any) -> tuple[ReportTemplate, Any]:
        """
        Resolve the template and coerce the payload into its request type.

        Raises:
            KeyError: If report_key is not registered
            TotalsMismatch: In strict mode, if the invoice totals disagree
        """
        template = get_template(report_key)
        request = template.parse_request(payload)
        if self.strict_totals and hasattr(template, 'verify'):
            template.verify(request)
        return template, request

    async def preview(self, report_key: str, payload: Any):
        """
        Render a document without persisting it.

        Args:
            report_key: Report template identifier (e.g., 'invoice.v1')
            payload: Raw request data (JSON body or form data)

        Returns:
            PdfResult for an inline response

        Raises:
            RenderError: If rendering fails
        """
        template, request = self.prepare(report_key, payload)
        layout = template.build_layout(request)
        result = await self.render_service.render(layout, filename=template.get_filename(request, preview=True))
        logger.info(f"Rendered preview {result.filename}")
        return result

    async def generate(self, report_key: str, payload: Any) -> GeneratedArtifact:
        """
        Render a document and store it as an artifact.

        Args:
            report_key: Report template identifier (e.g., 'invoice.v1')
            payload: Raw request data (JSON body or form data)

        Returns:
            GeneratedArtifact with the new identifier and filename

        Raises:
            RenderError: If rendering fails (nothing is stored)
            StorageError / ServiceUnavailable: If the artifact cannot be stored
        """
        template, request = self.prepare(report_key, payload)
        layout = template.build_layout(request)
        result = await self.render_service.render(layout, filename=template.get_filename(request))

        artifact_id = await self.store.put(
            result.filename,
            result.content_type,
            result.pdf_bytes,
            template.get_source_data(request),
            kind=template.kind,
            invoice_number=template.get_reference(request),
        )

        logger.info(f"Generated {report_key} artifact {result.filename} (ID: {artifact_id})")
        return GeneratedArtifact(id=artifact_id, filename=result.filename, size_bytes=len(result))
