"""
Core Printing Framework

Renders document layouts to PDF with ReportLab. The engine emits the
document as an asynchronous chunk stream which the render service
collects into a complete PdfResult.
"""

from .service import PdfRenderService
from .dto import PdfResult
from .interfaces import IPdfRenderer

__all__ = [
    'PdfRenderService',
    'PdfResult',
    'IPdfRenderer',
]
