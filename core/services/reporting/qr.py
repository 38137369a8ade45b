"""
Scannable code encoder

Encodes arbitrary strings as QR code PNG images embedded in data URIs.
"""

import base64
import logging
from io import BytesIO

import qrcode
from django.conf import settings


logger = logging.getLogger(__name__)


def encode_qr_data_uri(data: str | None, *, box_size: int = 10, border: int = 2) -> str:
    """
    Encode a string as a QR code image.

    Args:
        data: Text to encode; falls back to DOCVAULT_DEFAULT_QR_URL when empty
        box_size: Pixel size of a single module
        border: Quiet zone width in modules

    Returns:
        'data:image/png;base64,...' URI
    """
    payload = data or getattr(settings, 'DOCVAULT_DEFAULT_QR_URL', 'https://example.com')

    code = qrcode.QRCode(
        error_correction=qrcode.constants.ERROR_CORRECT_M,
        box_size=box_size,
        border=border,
    )
    code.add_data(payload)
    code.make(fit=True)

    buffer = BytesIO()
    code.make_image().save(buffer)

    logger.debug(f"Encoded QR code for {len(payload)} characters")
    return 'data:image/png;base64,' + base64.b64encode(buffer.getvalue()).decode('ascii')


def decode_data_uri(data_uri: str) -> tuple[str, bytes]:
    """
    Split a base64 data URI into its media type and raw bytes.

    Raises:
        ValueError: If the URI is not a base64 data URI
    """
    if not data_uri.startswith('data:') or ';base64,' not in data_uri:
        raise ValueError("Expected a base64 data URI")
    header, encoded = data_uri.split(',', 1)
    media_type = header[len('data:'):].split(';', 1)[0]
    return media_type, base64.b64decode(encoded)
