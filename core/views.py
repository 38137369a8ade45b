import json
import logging

from django.contrib import messages
from django.http import HttpResponse, HttpResponseBadRequest
from django.shortcuts import redirect, render
from django.views.decorators.http import require_GET, require_POST

from .services.exceptions import RenderError, ServiceUnavailable
from .services.finance import TotalsMismatch
from .services.reporting import ReportService
from .services.storage import (
    ArtifactNotFound,
    ArtifactStore,
    InvalidArtifactId,
    StorageError,
)

# Configure logging
logger = logging.getLogger(__name__)

STORE_UNAVAILABLE_MESSAGE = "Database not connected. Please try again later."


def _parse_payload(request):
    """
    Return the request data as a mapping.

    Browser previews post JSON, the generate forms post form data; a
    malformed JSON body counts as an empty request.
    """
    if request.content_type == 'application/json':
        try:
            payload = json.loads(request.body or b'{}')
        except ValueError:
            logger.warning("Ignoring malformed JSON request body")
            return {}
        return payload if isinstance(payload, dict) else {}
    return request.POST


def _store_unavailable():
    return HttpResponse(STORE_UNAVAILABLE_MESSAGE, status=503)


@require_GET
async def index(request):
    """List stored artifacts, newest first, with any pending status message."""
    try:
        artifacts = await ArtifactStore().list()
    except ServiceUnavailable:
        return _store_unavailable()

    return render(request, 'core/index.html', {'artifacts': artifacts})


async def _generate(request, report_key, label):
    """Persist a document, then redirect to the listing with a one-time status message."""
    try:
        generated = await ReportService().generate(report_key, _parse_payload(request))
    except ServiceUnavailable as e:
        logger.error(f"Store unavailable while generating {report_key}: {e}")
        return _store_unavailable()
    except TotalsMismatch as e:
        logger.warning(f"Rejected {report_key}: {e}")
        messages.error(request, f"{label} was not generated: {e}")
    except (RenderError, StorageError) as e:
        logger.error(f"Error generating {report_key}: {e}", exc_info=True)
        messages.error(request, f"Failed to generate {label.lower()}. Check server logs for details.")
    else:
        messages.success(request, f'{label} "{generated.filename}" generated successfully!')

    return redirect('index')


async def _preview(request, report_key):
    """Render a document and send it back inline without storing it."""
    try:
        result = await ReportService().preview(report_key, _parse_payload(request))
    except TotalsMismatch as e:
        return HttpResponseBadRequest(str(e))
    except RenderError as e:
        logger.error(f"Error previewing {report_key}: {e}")
        return HttpResponse("Failed to generate PDF for preview.", status=500)

    response = HttpResponse(result.pdf_bytes, content_type=result.content_type)
    response['Content-Disposition'] = result.content_disposition(inline=True)
    response['Content-Length'] = len(result)
    return response


@require_POST
async def generate_document(request):
    return await _generate(request, 'document.v1', 'Document')


@require_POST
async def generate_invoice(request):
    return await _generate(request, 'invoice.v1', 'Invoice')


@require_POST
async def preview_document(request):
    return await _preview(request, 'document.v1')


@require_POST
async def preview_invoice(request):
    return await _preview(request, 'invoice.v1')


@require_GET
async def artifact_download(request, artifact_id):
    """Download a stored artifact."""
    try:
        artifact = await ArtifactStore().get(artifact_id)
    except InvalidArtifactId:
        return HttpResponseBadRequest("Invalid PDF ID format.")
    except ArtifactNotFound:
        return HttpResponse("PDF not found", status=404)
    except ServiceUnavailable:
        return _store_unavailable()

    data = bytes(artifact.data)
    response = HttpResponse(data, content_type=artifact.content_type)
    response['Content-Disposition'] = f'attachment; filename="{artifact.filename}"'
    response['Content-Length'] = len(data)
    return response
