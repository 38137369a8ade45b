"""
Layouts package

Contains the report templates that turn requests into document layouts.
"""

from core.services.reporting.registry import register_template
from .templates.document_v1 import DocumentReportV1
from .templates.invoice_v1 import InvoiceReportV1


def register_all_templates():
    """Register all available report templates"""
    register_template('document.v1', DocumentReportV1)
    register_template('invoice.v1', InvoiceReportV1)


# Auto-register templates when module is imported
register_all_templates()
