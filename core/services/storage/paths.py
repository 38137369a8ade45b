"""
Filename generation and sanitization for stored artifacts
"""

import os
import re
from datetime import datetime
from typing import Optional

from django.utils import timezone

# Configuration constants
MAX_FILENAME_LENGTH = 100  # Maximum length for sanitized filename (excluding extension)


def sanitize_filename(filename: str) -> str:
    """
    Sanitize filename so it is safe in paths and Content-Disposition headers.

    Args:
        filename: Original filename

    Returns:
        Sanitized filename
    """
    # Get basename to prevent directory traversal
    filename = os.path.basename(filename or '')

    # Split filename and extension
    name_parts = filename.rsplit('.', 1)
    name = name_parts[0]
    ext = f".{name_parts[1]}" if len(name_parts) > 1 else ""

    # Keep alphanumeric, dash, underscore, and spaces
    name = re.sub(r'[^a-zA-Z0-9\-_ ]', '_', name)

    # Collapse multiple underscores/spaces
    name = re.sub(r'[_\s]+', '_', name)

    name = name.strip('_')

    if not name:
        name = "file"

    if len(name) > MAX_FILENAME_LENGTH:
        name = name[:MAX_FILENAME_LENGTH]

    ext = re.sub(r'[^a-zA-Z0-9]', '', ext[1:])
    return f"{name}.{ext}" if ext else name


def build_artifact_filename(prefix: str, reference: Optional[str] = None, now: Optional[datetime] = None) -> str:
    """
    Build a unique-ish PDF filename.

    Format: {prefix}_{reference}_{epoch milliseconds}.pdf, or
    {prefix}_{epoch milliseconds}.pdf without a reference.

    Args:
        prefix: Leading part, e.g. 'Invoice' or 'Preview_Invoice'
        reference: Optional business reference such as the invoice number
        now: Timestamp to use (defaults to the current time)
    """
    now = now or timezone.now()
    millis = int(now.timestamp() * 1000)
    parts = [prefix, reference, str(millis)] if reference else [prefix, str(millis)]
    return sanitize_filename('_'.join(parts) + '.pdf')
