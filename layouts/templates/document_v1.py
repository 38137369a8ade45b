"""
Generic Document Template (v1)

Fixed demonstration layout: title, body text, a sample table, a QR code,
a forced page break and a nested bulleted list. Only the title, body and
QR code data come from the request.
"""

from typing import Any

from django.conf import settings

from core.models import DocumentKind
from core.services.reporting.canvas import create_title_header, page_number_footer
from core.services.reporting.dto import DocumentRequest
from core.services.reporting.layout import (
    BulletList,
    DocumentLayout,
    Image,
    PageBreak,
    Table,
    Text,
)
from core.services.reporting.qr import encode_qr_data_uri
from core.services.reporting.styles import get_document_styles
from core.services.storage.paths import build_artifact_filename


SAMPLE_TABLE_HEADER = ['Column 1', 'Column 2', 'Column 3']
SAMPLE_TABLE_ROWS = [
    ['Value 1', 'Value 2', 'Value 3'],
    ['Value 4', 'Value 5', 'Value 6'],
]


class DocumentReportV1:
    """Template for generic documents version 1"""

    kind = DocumentKind.DOCUMENT

    def __init__(self):
        self.styles = get_document_styles()

    def parse_request(self, payload: Any) -> DocumentRequest:
        return DocumentRequest.from_payload(payload)

    def get_filename(self, request: DocumentRequest, *, preview: bool = False) -> str:
        return build_artifact_filename('Preview_Document' if preview else 'Document')

    def get_source_data(self, request: DocumentRequest) -> None:
        # Only invoices keep their input next to the artifact
        return None

    def get_reference(self, request: DocumentRequest) -> str:
        return ''

    def build_layout(self, request: DocumentRequest) -> DocumentLayout:
        content = [
            Text(text=request.title, style='header'),
            Text(text=request.body, style='body'),

            Text(text='Sample Table', style='subheader'),
            Table(
                header=[Text(text=label, style='tableHeader') for label in SAMPLE_TABLE_HEADER],
                body=[[Text(text=value) for value in row] for row in SAMPLE_TABLE_ROWS],
                widths=['*', '*', '*'],
                layout='grid',
                margin=(0, 0, 0, 15),
            ),

            Text(text='Scan Me', style='subheader'),
            Image(data_uri=encode_qr_data_uri(request.auxiliary_code), width=100, alignment='left'),
            Text(text=request.auxiliary_code or settings.DOCVAULT_DEFAULT_QR_URL, style='caption', alignment='left'),

            PageBreak(),

            Text(text='Lists', style='subheader'),
            BulletList(
                style='body',
                items=[
                    'First item',
                    'Second item',
                    BulletList(items=['Nested item 1', 'Nested item 2']),
                    'Third item',
                ],
            ),
        ]

        return DocumentLayout(
            title=request.title,
            author=settings.DOCVAULT_AUTHOR,
            content=content,
            styles=self.styles,
            page_margins=(40, 60, 40, 60),
            header=create_title_header(request.title),
            footer=page_number_footer,
        )
