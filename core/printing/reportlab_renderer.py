"""
ReportLab Renderer Implementation

Adapter for rendering layout trees to PDF using the ReportLab Platypus engine.
"""

import asyncio
import logging
from functools import partial
from io import BytesIO, RawIOBase
from typing import AsyncIterator, Optional

from asgiref.sync import sync_to_async
from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER, TA_JUSTIFY, TA_LEFT, TA_RIGHT
from reportlab.lib.pagesizes import A4, LETTER
from reportlab.lib.styles import ParagraphStyle
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas as pdf_canvas
from reportlab.platypus import (
    Flowable,
    Frame,
    Image as ImageFlowable,
    KeepInFrame,
    ListFlowable,
    PageBreak as PageBreakFlowable,
    Paragraph,
    SimpleDocTemplate,
    Spacer,
    Table as TableFlowable,
    TableStyle,
)

from core.services.reporting.layout import (
    BulletList,
    Columns,
    DocumentLayout,
    Image,
    LayoutNode,
    PageBreak,
    Table,
    Text,
    Width,
)
from core.services.reporting.qr import decode_data_uri

from .fonts import FontSet, load_fonts
from .interfaces import IPdfRenderer
from .sanitizer import sanitize_text


logger = logging.getLogger(__name__)

# Size in bytes of the chunks emitted by the render stream
CHUNK_SIZE = 8192

ALIGNMENTS = {
    'left': TA_LEFT,
    'center': TA_CENTER,
    'right': TA_RIGHT,
    'justify': TA_JUSTIFY,
}

PAGE_SIZES = {
    'A4': A4,
    'LETTER': LETTER,
}

# Share of the remaining width taken by '*' columns relative to 'auto' columns
STAR_WEIGHT = 2
AUTO_WEIGHT = 1

NESTED_LIST_INDENT = 18


def resolve_widths(widths: list[Width], count: int, available: float) -> list[float]:
    """
    Turn column width specs into points.

    Numbers are taken as points. '*' and 'auto' columns share what is left,
    '*' columns getting twice the share of 'auto' columns.
    """
    specs = list(widths)[:count] + ['*'] * max(0, count - len(widths))
    fixed = sum(w for w in specs if isinstance(w, (int, float)))
    weights = [STAR_WEIGHT if w == '*' else AUTO_WEIGHT for w in specs if not isinstance(w, (int, float))]
    remaining = max(available - fixed, 0)
    unit = remaining / sum(weights) if weights else 0

    resolved = []
    for spec in specs:
        if isinstance(spec, (int, float)):
            resolved.append(float(spec))
        else:
            resolved.append(unit * (STAR_WEIGHT if spec == '*' else AUTO_WEIGHT))
    return resolved


def get_table_style(table: Table) -> TableStyle:
    """
    Get the ReportLab table style for a table's border preset.

    Presets: 'lightHorizontalLines' (rule under the header, hairlines between
    rows), 'grid' (full grid, shaded header) and 'noBorders'.
    """
    commands = [
        ('VALIGN', (0, 0), (-1, -1), 'TOP'),
        ('LEFTPADDING', (0, 0), (-1, -1), 4),
        ('RIGHTPADDING', (0, 0), (-1, -1), 4),
        ('TOPPADDING', (0, 0), (-1, -1), 3),
        ('BOTTOMPADDING', (0, 0), (-1, -1), 3),
    ]
    header_rows = table.header_rows

    if table.layout == 'lightHorizontalLines':
        if header_rows:
            commands.append(('LINEBELOW', (0, 0), (-1, header_rows - 1), 1, colors.black))
        if len(table.body) > 1:
            commands.append(('LINEBELOW', (0, header_rows), (-1, -2), 0.5, colors.HexColor('#aaaaaa')))
    elif table.layout == 'grid':
        commands.append(('GRID', (0, 0), (-1, -1), 0.5, colors.grey))
        if header_rows:
            commands.append(('BACKGROUND', (0, 0), (-1, header_rows - 1), colors.HexColor('#eeeeee')))

    return TableStyle(commands)


class _FlowableBuilder:
    """Translates layout nodes into ReportLab flowables for one document"""

    def __init__(self, layout: DocumentLayout, fonts: FontSet):
        self.layout = layout
        self.fonts = fonts
        self.page_size = PAGE_SIZES.get(layout.page_size.upper(), A4)

    def paragraph_style(self, node: Text) -> ParagraphStyle:
        named = self.layout.styles.get(node.style) if node.style else None
        default = self.layout.default_style

        def pick(attribute, fallback):
            for source in (node, named, default):
                value = getattr(source, attribute, None) if source is not None else None
                if value is not None:
                    return value
            return fallback

        font_size = pick('font_size', 10)
        left, top, right, bottom = node.margin or (named.margin if named else None) or (0, 0, 0, 0)
        alignment = node.alignment or (named.alignment if named else default.alignment)
        color = (named.color if named else None) or default.color or '#000000'

        return ParagraphStyle(
            node.style or 'default',
            fontName=self.fonts.resolve(pick('bold', False), pick('italics', False)),
            fontSize=font_size,
            leading=font_size * 1.2,
            alignment=ALIGNMENTS.get(alignment, TA_LEFT),
            textColor=colors.HexColor(color),
            leftIndent=left,
            spaceBefore=top,
            rightIndent=right,
            spaceAfter=bottom,
        )

    def build(self, nodes: list[LayoutNode], width: float) -> list[Flowable]:
        flowables = []
        for node in nodes:
            flowables.extend(self.convert(node, width))
        return flowables

    def convert(self, node: LayoutNode, width: float) -> list[Flowable]:
        if isinstance(node, Text):
            return [self.paragraph(node)]
        if isinstance(node, Table):
            return self._with_margin(node, self.table(node, width))
        if isinstance(node, Image):
            return self._with_margin(node, self.image(node, width))
        if isinstance(node, Columns):
            return self._with_margin(node, self.columns(node, width))
        if isinstance(node, PageBreak):
            return [PageBreakFlowable()]
        if isinstance(node, BulletList):
            return self._with_margin(node, [self.bullet_list(node, depth=0)])
        raise TypeError(f"Unsupported layout node: {type(node).__name__}")

    def paragraph(self, node: Text) -> Paragraph:
        return Paragraph(sanitize_text(node.text), self.paragraph_style(node))

    def table(self, node: Table, width: float) -> list[Flowable]:
        rows = [[self.paragraph(cell) for cell in row] for row in node.rows]
        if not rows:
            return []
        column_count = max(len(row) for row in rows)
        rows = [row + [''] * (column_count - len(row)) for row in rows]

        flowable = TableFlowable(
            rows,
            colWidths=resolve_widths(node.widths, column_count, width),
            repeatRows=node.header_rows,
            hAlign='LEFT',
        )
        flowable.setStyle(get_table_style(node))
        return [flowable]

    def image(self, node: Image, width: float) -> list[Flowable]:
        _, raw = decode_data_uri(node.data_uri)
        image_width, image_height = ImageReader(BytesIO(raw)).getSize()

        draw_width = min(node.width or image_width, width)
        if node.height and node.width and draw_width == node.width:
            draw_height = node.height
        else:
            draw_height = draw_width * image_height / image_width

        flowable = ImageFlowable(BytesIO(raw), width=draw_width, height=draw_height)
        flowable.hAlign = (node.alignment or 'left').upper()
        return [flowable]

    def columns(self, node: Columns, width: float) -> list[Flowable]:
        if not node.columns:
            return []
        widths = resolve_widths([column.width for column in node.columns], len(node.columns), width)
        cells = [self.build(column.content, column_width) for column, column_width in zip(node.columns, widths)]

        flowable = TableFlowable([cells], colWidths=widths, hAlign='LEFT')
        flowable.setStyle(TableStyle([
            ('VALIGN', (0, 0), (-1, -1), 'TOP'),
            ('LEFTPADDING', (0, 0), (-1, -1), 0),
            ('RIGHTPADDING', (0, 0), (-1, -1), 0),
            ('TOPPADDING', (0, 0), (-1, -1), 0),
            ('BOTTOMPADDING', (0, 0), (-1, -1), 0),
        ]))
        return [flowable]

    def bullet_list(self, node: BulletList, depth: int) -> ListFlowable:
        style = self.paragraph_style(Text(style=node.style))
        items = []
        for item in node.items:
            if isinstance(item, BulletList):
                items.append(self.bullet_list(item, depth + 1))
            else:
                items.append(Paragraph(sanitize_text(str(item)), style))

        return ListFlowable(
            items,
            bulletType='bullet',
            start='bulletchar' if depth == 0 else '-',
            bulletFontName=self.fonts.normal,
            bulletFontSize=style.fontSize,
            leftIndent=NESTED_LIST_INDENT,
        )

    def _with_margin(self, node: LayoutNode, flowables: list[Flowable]) -> list[Flowable]:
        if not node.margin or not flowables:
            return flowables
        _, top, _, bottom = node.margin
        before = [Spacer(1, top)] if top else []
        after = [Spacer(1, bottom)] if bottom else []
        return before + flowables + after

    def decorate(self, canvas, page_count: int) -> None:
        """Draw header and footer for the canvas' current page"""
        page_width, page_height = self.page_size
        current_page = canvas.getPageNumber()
        _, content_top, _, content_bottom = self.layout.page_margins

        if self.layout.header:
            left, top, right, bottom = self.layout.header_margin
            nodes = self.layout.header(current_page, page_count, self.page_size)
            self._draw_region(
                canvas, nodes,
                x=left,
                y=page_height - content_top + bottom,
                width=page_width - left - right,
                height=content_top - top - bottom,
            )

        if self.layout.footer:
            left, top, right, bottom = self.layout.footer_margin
            nodes = self.layout.footer(current_page, page_count, self.page_size)
            self._draw_region(
                canvas, nodes,
                x=left,
                y=bottom,
                width=page_width - left - right,
                height=content_bottom - top - bottom,
            )

    def _draw_region(self, canvas, nodes: list[LayoutNode], *, x: float, y: float, width: float, height: float) -> None:
        if not nodes or width <= 0 or height <= 0:
            return
        frame = Frame(x, y, width, height, leftPadding=0, rightPadding=0, topPadding=0, bottomPadding=0)
        frame.addFromList([KeepInFrame(width, height, self.build(nodes, width), mode='shrink')], canvas)


class DecoratedCanvas(pdf_canvas.Canvas):
    """
    Canvas that defers page decorations until the document is complete.

    Pages are buffered on showPage() and decorated on save(), when the total
    page count is known ('Page X of Y').
    """

    def __init__(self, *args, decorate=None, **kwargs):
        super().__init__(*args, **kwargs)
        self._decorate = decorate
        self._saved_page_states = []

    def showPage(self):
        self._saved_page_states.append(dict(self.__dict__))
        self._startPage()

    def save(self):
        page_count = len(self._saved_page_states)
        for state in self._saved_page_states:
            self.__dict__.update(state)
            if self._decorate:
                self._decorate(self, page_count)
            super().showPage()
        super().save()


class _ChunkWriter(RawIOBase):
    """File-like sink that forwards everything written as fixed-size chunks"""

    def __init__(self, emit):
        super().__init__()
        self._emit = emit

    def writable(self) -> bool:
        return True

    def write(self, data) -> int:
        data = bytes(data)
        for offset in range(0, len(data), CHUNK_SIZE):
            self._emit(data[offset:offset + CHUNK_SIZE])
        return len(data)


class _StreamFailure:
    def __init__(self, error: Exception):
        self.error = error


_END_OF_STREAM = object()


class ReportLabRenderer(IPdfRenderer):
    """
    PDF renderer using the ReportLab Platypus engine.

    Supports:
    - Named styles with per-node overrides
    - Tables with repeating header rows
    - Header/footer generators evaluated per page with the final page count
    - Embedded images from data URIs
    """

    def __init__(self, fonts: Optional[FontSet] = None):
        """
        Initialize the renderer.

        Args:
            fonts: Font family to use (defaults to the configured family)
        """
        self.fonts = fonts or load_fonts()

    def build(self, layout: DocumentLayout, output) -> None:
        """
        Render a layout synchronously into a writable file-like object.

        Raises:
            Exception: If the layout cannot be rendered
        """
        builder = _FlowableBuilder(layout, self.fonts)
        left, top, right, bottom = layout.page_margins

        doc = SimpleDocTemplate(
            output,
            pagesize=builder.page_size,
            leftMargin=left,
            rightMargin=right,
            topMargin=top,
            bottomMargin=bottom,
            title=layout.title,
            author=layout.author,
        )
        story = builder.build(layout.content, doc.width)
        doc.build(story, canvasmaker=partial(DecoratedCanvas, decorate=builder.decorate))

    async def stream(self, layout: DocumentLayout) -> AsyncIterator[bytes]:
        """
        Render a layout to PDF chunks.

        The ReportLab build runs in a worker thread and hands its output to
        the event loop chunk by chunk; errors are re-raised from the iterator.
        """
        loop = asyncio.get_running_loop()
        queue: asyncio.Queue = asyncio.Queue()

        def emit(item) -> None:
            loop.call_soon_threadsafe(queue.put_nowait, item)

        def produce() -> None:
            try:
                self.build(layout, _ChunkWriter(emit))
            except Exception as e:
                emit(_StreamFailure(e))
            else:
                emit(_END_OF_STREAM)

        producer = asyncio.ensure_future(sync_to_async(produce, thread_sensitive=False)())

        while True:
            item = await queue.get()
            if item is _END_OF_STREAM:
                break
            if isinstance(item, _StreamFailure):
                raise item.error
            yield item

        await producer
