"""
Invoice Template (v1)

Template for invoice PDFs: company header, billing block, services table,
totals and optional notes. Amounts are rendered exactly as submitted; the
Financial Calculator only formats them (see ``verify`` for strict mode).
"""

import base64
import logging
from datetime import date
from decimal import Decimal
from functools import lru_cache
from pathlib import Path
from typing import Any, Optional

from django.conf import settings

from core.models import DocumentKind
from core.services.finance import format_amount, verify_totals
from core.services.reporting.canvas import create_header, page_number_footer
from core.services.reporting.dto import InvoiceRequest, ServiceLine
from core.services.reporting.layout import (
    Column,
    Columns,
    DocumentLayout,
    LayoutNode,
    Table,
    Text,
)
from core.services.reporting.styles import get_invoice_styles
from core.services.storage.paths import build_artifact_filename


logger = logging.getLogger(__name__)

NOT_AVAILABLE = 'N/A'

SERVICE_COLUMNS = ['Description', 'Service Date', 'Qty', 'Unit Price', 'Line Total']
SERVICE_COLUMN_WIDTHS = ['*', 'auto', 'auto', 'auto', 'auto']

# Columns right-aligned in the services table (Qty, Unit Price, Line Total)
NUMERIC_COLUMNS = {2, 3, 4}


@lru_cache(maxsize=None)
def load_logo_data_uri(path: Optional[Path]) -> Optional[str]:
    """Read the company logo once; None when it is not configured or unreadable"""
    if not path:
        return None
    path = Path(path)
    if not path.is_file():
        logger.warning(f"Logo file not found at {path}. Using text mark.")
        return None
    try:
        encoded = base64.b64encode(path.read_bytes()).decode('ascii')
    except OSError as e:
        logger.warning(f"Could not read logo file: {e}")
        return None
    return 'data:image/png;base64,' + encoded


def format_date(value: Optional[date], default: str = NOT_AVAILABLE) -> str:
    return value.strftime('%Y-%m-%d') if value else default


def format_quantity(value: Decimal) -> str:
    return format(value.normalize(), 'f') if value else '0'


class InvoiceReportV1:
    """Template for invoices version 1"""

    kind = DocumentKind.INVOICE

    def __init__(self):
        self.styles = get_invoice_styles()

    def parse_request(self, payload: Any) -> InvoiceRequest:
        return InvoiceRequest.from_payload(payload)

    def get_filename(self, request: InvoiceRequest, *, preview: bool = False) -> str:
        prefix = 'Preview_Invoice' if preview else 'Invoice'
        return build_artifact_filename(prefix, request.invoice_number or 'INV')

    def get_source_data(self, request: InvoiceRequest) -> dict:
        return request.to_source_data()

    def get_reference(self, request: InvoiceRequest) -> str:
        return request.invoice_number

    def verify(self, request: InvoiceRequest) -> None:
        """
        Strict mode: recompute the totals and reject mismatches.

        Raises:
            TotalsMismatch: If a submitted total differs from the recomputed one
        """
        verify_totals(request)

    def build_layout(self, request: InvoiceRequest) -> DocumentLayout:
        """
        Build the invoice layout.

        Missing names and dates render as 'N/A', missing optional lines as
        empty text; the node structure is the same for any input.
        """
        content = [
            self._billing_block(request),
            Text(text='Services / Items', style='subheader', margin=(0, 0, 0, 5)),
            self._services_table(request.services),
            self._totals_block(request),
            *self._notes_block(request.additional_notes),
        ]

        return DocumentLayout(
            title=f"Invoice {request.invoice_number or NOT_AVAILABLE}",
            author=settings.DOCVAULT_AUTHOR,
            content=content,
            styles=self.styles,
            page_margins=(40, 100, 40, 60),
            header=create_header(
                'INVOICE',
                logo_data_uri=load_logo_data_uri(getattr(settings, 'DOCVAULT_LOGO_PATH', None)),
                company_name=getattr(settings, 'DOCVAULT_COMPANY_NAME', 'Your Company'),
            ),
            header_margin=(40, 30, 40, 10),
            footer=page_number_footer,
        )

    def _billing_block(self, request: InvoiceRequest) -> Columns:
        bill_to = [
            Text(text='Bill To:', style='subheader', margin=(0, 0, 0, 2)),
            Text(text=request.client_company_name or NOT_AVAILABLE),
            Text(text=request.client_contact_person),
            Text(text=request.client_email),
            Text(text=request.client_billing_address or NOT_AVAILABLE),
        ]
        details = [
            Text(text=f"Invoice #: {request.invoice_number or NOT_AVAILABLE}", style='subheaderRight'),
            Text(text=f"Date: {format_date(request.invoice_date)}", style='textRight'),
            Text(text=f"Due Date: {format_date(request.due_date)}", style='textRight'),
        ]
        return Columns(
            columns=[
                Column(content=bill_to, width='*'),
                Column(content=details, width='auto'),
            ],
            margin=(0, 20, 0, 30),
        )

    def _services_table(self, services: list[ServiceLine]) -> Table:
        header = [
            Text(text=label, style='tableHeader', alignment='right' if index in NUMERIC_COLUMNS else None)
            for index, label in enumerate(SERVICE_COLUMNS)
        ]
        body = [
            [
                Text(text=service.description, style='tableCell'),
                Text(text=format_date(service.date, default=''), style='tableCell'),
                Text(text=format_quantity(service.qty), style='tableCell', alignment='right'),
                Text(text=format_amount(service.unit_price), style='tableCell', alignment='right'),
                Text(text=format_amount(service.line_total), style='tableCell', alignment='right'),
            ]
            for service in services
        ]
        return Table(
            header=header,
            body=body,
            widths=SERVICE_COLUMN_WIDTHS,
            layout='lightHorizontalLines',
            margin=(0, 0, 0, 30),
        )

    def _totals_block(self, request: InvoiceRequest) -> Columns:
        totals = Table(
            body=[
                [Text(text='Subtotal:', style='totalsLabel'),
                 Text(text=format_amount(request.subtotal), style='totalsValue')],
                [Text(text='Tax (%):', style='totalsLabel'),
                 Text(text=format_amount(request.tax_percentage), style='totalsValue')],
                [Text(text='Grand Total:', style='totalsLabelBold'),
                 Text(text=format_amount(request.grand_total), style='totalsValueBold')],
            ],
            widths=['*', '*'],
            layout='noBorders',
        )
        return Columns(
            columns=[
                Column(content=[Text(text='')], width='*'),
                Column(content=[totals], width='auto'),
            ],
            margin=(0, 0, 0, 30),
        )

    def _notes_block(self, notes: str) -> list[LayoutNode]:
        if not notes:
            # Empty placeholders keep the node structure independent of input
            return [Text(text=''), Text(text='')]
        return [
            Text(text='Additional Notes', style='subheader', margin=(0, 10, 0, 5)),
            Text(text=notes, style='notesText', margin=(0, 0, 0, 30)),
        ]
