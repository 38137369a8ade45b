"""
Request DTOs for the document generation pipeline.

Requests arrive as loosely typed payloads (JSON bodies or HTML form posts).
The ``from_payload`` constructors coerce every field instead of rejecting
input: missing text becomes an empty string, unparsable numbers become 0
and unparsable dates become None.
"""

import json
import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any, Optional

from django.utils.dateparse import parse_date

from core.services.finance import to_decimal


logger = logging.getLogger(__name__)

DEFAULT_DOCUMENT_TITLE = 'Generated Document'
DEFAULT_DOCUMENT_BODY = 'This is a dynamically generated PDF document.'


def _get(payload: Any, *keys: str, default: Any = None) -> Any:
    """Return the first present, non-None value among ``keys``."""
    for key in keys:
        value = payload.get(key)
        if value is not None:
            return value
    return default


def _text(value: Any) -> str:
    if value is None:
        return ''
    return str(value).strip()


def _date(value: Any) -> Optional[date]:
    if isinstance(value, date):
        return value
    text = _text(value)
    if not text:
        return None
    try:
        # Accept full ISO timestamps as well as plain dates
        return parse_date(text[:10])
    except ValueError:
        return None


def _number(value: Any) -> float:
    return float(to_decimal(value))


@dataclass
class DocumentRequest:
    """Input for the generic document ('document.v1')"""

    title: str = DEFAULT_DOCUMENT_TITLE
    body: str = DEFAULT_DOCUMENT_BODY
    auxiliary_code: str = ''

    @classmethod
    def from_payload(cls, payload: Any) -> 'DocumentRequest':
        payload = payload or {}
        return cls(
            title=_text(_get(payload, 'title')) or DEFAULT_DOCUMENT_TITLE,
            body=_text(_get(payload, 'body', 'content')) or DEFAULT_DOCUMENT_BODY,
            auxiliary_code=_text(_get(payload, 'auxiliaryCode', 'auxiliary_code', 'qrData')),
        )


@dataclass
class ServiceLine:
    """One row of the invoice services table"""

    description: str = ''
    date: Optional[date] = None
    qty: Decimal = Decimal(0)
    unit_price: Decimal = Decimal(0)
    line_total: Decimal = Decimal(0)

    @classmethod
    def from_payload(cls, payload: Any) -> 'ServiceLine':
        if not isinstance(payload, dict):
            return cls()
        return cls(
            description=_text(_get(payload, 'description')),
            date=_date(_get(payload, 'date')),
            qty=to_decimal(_get(payload, 'qty')),
            unit_price=to_decimal(_get(payload, 'unitPrice', 'unit_price')),
            line_total=to_decimal(_get(payload, 'lineTotal', 'line_total')),
        )

    def to_dict(self) -> dict:
        return {
            'description': self.description,
            'date': self.date.isoformat() if self.date else None,
            'qty': _number(self.qty),
            'unitPrice': _number(self.unit_price),
            'lineTotal': _number(self.line_total),
        }


@dataclass
class InvoiceRequest:
    """
    Input for the invoice document ('invoice.v1').

    Totals are supplied by the caller and rendered as given; see
    ``core.services.finance.verify_totals`` for the strict check.
    """

    client_company_name: str = ''
    client_contact_person: str = ''
    client_email: str = ''
    client_billing_address: str = ''
    invoice_number: str = ''
    invoice_date: Optional[date] = None
    due_date: Optional[date] = None
    services: list[ServiceLine] = field(default_factory=list)
    subtotal: Decimal = Decimal(0)
    tax_percentage: Decimal = Decimal(0)
    grand_total: Decimal = Decimal(0)
    additional_notes: str = ''

    @classmethod
    def from_payload(cls, payload: Any) -> 'InvoiceRequest':
        """
        Build an invoice from a JSON body or a form post.

        Form posts carry the services table as a JSON string in
        ``servicesData`` and the browser-computed totals as
        ``calculatedSubtotal``/``calculatedTaxPercentage``/``calculatedGrandTotal``.
        """
        payload = payload or {}

        services = _get(payload, 'services')
        if services is None:
            services = _parse_services_data(_get(payload, 'servicesData', default=''))
        if not isinstance(services, list):
            services = []

        return cls(
            client_company_name=_text(_get(payload, 'clientCompanyName', 'client_company_name')),
            client_contact_person=_text(_get(payload, 'clientContactPerson', 'client_contact_person')),
            client_email=_text(_get(payload, 'clientEmail', 'client_email')),
            client_billing_address=_text(_get(payload, 'clientBillingAddress', 'client_billing_address')),
            invoice_number=_text(_get(payload, 'invoiceNumber', 'invoice_number')),
            invoice_date=_date(_get(payload, 'invoiceDate', 'invoice_date')),
            due_date=_date(_get(payload, 'dueDate', 'due_date')),
            services=[ServiceLine.from_payload(item) for item in services],
            subtotal=to_decimal(_get(payload, 'subtotal', 'calculatedSubtotal')),
            tax_percentage=to_decimal(_get(payload, 'taxPercentage', 'calculatedTaxPercentage', 'tax_percentage')),
            grand_total=to_decimal(_get(payload, 'grandTotal', 'calculatedGrandTotal', 'grand_total')),
            additional_notes=_text(_get(payload, 'additionalNotes', 'additional_notes')),
        )

    def to_source_data(self) -> dict:
        """JSON-serializable snapshot stored next to the generated artifact"""
        return {
            'clientCompanyName': self.client_company_name,
            'clientContactPerson': self.client_contact_person,
            'clientEmail': self.client_email,
            'clientBillingAddress': self.client_billing_address,
            'invoiceNumber': self.invoice_number,
            'invoiceDate': self.invoice_date.isoformat() if self.invoice_date else None,
            'dueDate': self.due_date.isoformat() if self.due_date else None,
            'services': [service.to_dict() for service in self.services],
            'subtotal': _number(self.subtotal),
            'taxPercentage': _number(self.tax_percentage),
            'grandTotal': _number(self.grand_total),
            'additionalNotes': self.additional_notes,
        }


def _parse_services_data(raw: Any) -> list:
    if isinstance(raw, list):
        return raw
    if not raw:
        return []
    try:
        parsed = json.loads(raw)
    except (TypeError, ValueError):
        logger.warning("Ignoring malformed servicesData payload")
        return []
    return parsed if isinstance(parsed, list) else []
