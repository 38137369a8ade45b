"""
Tests for Core Printing Framework

Tests the printing framework components:
- PDF rendering service
- ReportLab renderer
- Text sanitizer
- Font registration
"""

import asyncio
from io import BytesIO
from pathlib import Path
from tempfile import TemporaryDirectory

from django.test import SimpleTestCase, override_settings

from core.printing import IPdfRenderer, PdfRenderService, PdfResult
from core.printing.fonts import HELVETICA, find_missing_fonts, register_font_family
from core.printing.reportlab_renderer import CHUNK_SIZE, ReportLabRenderer, resolve_widths
from core.printing.sanitizer import sanitize_text
from core.services.exceptions import RenderError
from core.services.reporting.dto import DocumentRequest, InvoiceRequest
from core.services.reporting.layout import DocumentLayout, Text
from layouts.templates.document_v1 import DocumentReportV1
from layouts.templates.invoice_v1 import InvoiceReportV1


class ChunkRenderer(IPdfRenderer):
    """Renderer yielding fixed chunks, optionally failing afterwards"""

    def __init__(self, chunks, error=None, delay=0):
        self.chunks = chunks
        self.error = error
        self.delay = delay

    async def stream(self, layout):
        for chunk in self.chunks:
            if self.delay:
                await asyncio.sleep(self.delay)
            yield chunk
        if self.error:
            raise self.error


def simple_layout(**kwargs):
    return DocumentLayout(title='Test', author='Tests', content=[Text(text='Hello')], **kwargs)


class PdfRenderServiceTestCase(SimpleTestCase):
    """Test cases for PdfRenderService"""

    def test_service_initialization(self):
        service = PdfRenderService(timeout=5)
        self.assertIsInstance(service.renderer, IPdfRenderer)
        self.assertEqual(service.timeout, 5)

    async def test_chunks_are_joined_in_order(self):
        service = PdfRenderService(renderer=ChunkRenderer([b'%PDF-', b'1.4 ', b'body']))

        result = await service.render(simple_layout(), filename='test.pdf')

        self.assertIsInstance(result, PdfResult)
        self.assertEqual(result.pdf_bytes, b'%PDF-1.4 body')
        self.assertEqual(result.filename, 'test.pdf')
        self.assertEqual(result.content_type, 'application/pdf')

    async def test_default_filename(self):
        service = PdfRenderService(renderer=ChunkRenderer([b'%PDF']))
        result = await service.render(simple_layout())
        self.assertEqual(result.filename, 'document.pdf')

    async def test_failure_mid_stream_raises_render_error(self):
        service = PdfRenderService(renderer=ChunkRenderer([b'%PDF-partial'], error=ValueError("boom")))

        with self.assertRaises(RenderError) as cm:
            await service.render(simple_layout())

        self.assertIn('boom', str(cm.exception))

    async def test_empty_stream_raises_render_error(self):
        service = PdfRenderService(renderer=ChunkRenderer([]))

        with self.assertRaises(RenderError):
            await service.render(simple_layout())

    async def test_slow_stream_times_out(self):
        service = PdfRenderService(renderer=ChunkRenderer([b'a', b'b'], delay=1), timeout=0.05)

        with self.assertRaises(RenderError) as cm:
            await service.render(simple_layout())

        self.assertIn('timed out', str(cm.exception))

    def test_result_headers(self):
        result = PdfResult(pdf_bytes=b'%PDF', filename='a.pdf')

        self.assertEqual(len(result), 4)
        self.assertEqual(result.content_disposition(), 'inline; filename="a.pdf"')
        self.assertEqual(result.content_disposition(inline=False), 'attachment; filename="a.pdf"')


class ReportLabRendererTestCase(SimpleTestCase):
    """Test cases for the ReportLab renderer"""

    def setUp(self):
        self.renderer = ReportLabRenderer(fonts=HELVETICA)

    def render(self, layout) -> bytes:
        output = BytesIO()
        self.renderer.build(layout, output)
        return output.getvalue()

    def test_invoice_renders_pdf(self):
        template = InvoiceReportV1()
        request = InvoiceRequest.from_payload({
            'invoiceNumber': 'INV-1',
            'services': [{'description': 'Line <b>one</b> & more', 'qty': 1, 'unitPrice': 5, 'lineTotal': 5}],
            'additionalNotes': 'Paid <script>alert(1)</script> in full',
        })

        pdf = self.render(template.build_layout(request))

        self.assertTrue(pdf.startswith(b'%PDF'))
        self.assertIn(b'%%EOF', pdf[-32:])

    def test_sparse_invoice_renders(self):
        pdf = self.render(InvoiceReportV1().build_layout(InvoiceRequest()))
        self.assertTrue(pdf.startswith(b'%PDF'))

    def test_page_decorations_know_page_count(self):
        calls = []

        def footer(current_page, page_count, page_size):
            calls.append((current_page, page_count))
            return [Text(text=f"Page {current_page} of {page_count}")]

        layout = DocumentReportV1().build_layout(DocumentRequest())
        layout.footer = footer
        self.render(layout)

        # The document layout forces a page break before the lists
        self.assertEqual(calls, [(1, 2), (2, 2)])

    def test_long_services_table_spans_pages(self):
        calls = []
        services = [{'description': f'Item {i}', 'qty': 1, 'unitPrice': 1, 'lineTotal': 1} for i in range(120)]
        layout = InvoiceReportV1().build_layout(InvoiceRequest.from_payload({'services': services}))
        layout.footer = lambda current, count, size: calls.append(count) or []

        self.render(layout)

        self.assertGreater(len(calls), 1)
        self.assertEqual(set(calls), {len(calls)})

    def test_unknown_node_type_is_rejected(self):
        layout = simple_layout()
        layout.content.append(object())

        with self.assertRaises(TypeError):
            self.render(layout)

    async def test_stream_matches_build(self):
        layout = DocumentReportV1().build_layout(DocumentRequest(title='Streamed'))

        chunks = [chunk async for chunk in self.renderer.stream(layout)]

        self.assertTrue(chunks)
        self.assertTrue(all(0 < len(chunk) <= CHUNK_SIZE for chunk in chunks))
        self.assertTrue(b''.join(chunks).startswith(b'%PDF'))

    async def test_stream_raises_build_errors(self):
        layout = simple_layout()
        layout.content.append(object())

        with self.assertRaises(TypeError):
            async for _ in self.renderer.stream(layout):
                pass

    async def test_service_with_reportlab_renderer(self):
        service = PdfRenderService(renderer=self.renderer)
        result = await service.render(simple_layout(), filename='hello.pdf')
        self.assertTrue(result.pdf_bytes.startswith(b'%PDF'))


class ResolveWidthsTestCase(SimpleTestCase):
    """Test column width resolution"""

    def test_fixed_widths(self):
        self.assertEqual(resolve_widths([100, 50], 2, 500), [100.0, 50.0])

    def test_star_gets_twice_the_auto_share(self):
        widths = resolve_widths(['*', 'auto', 'auto'], 3, 400)
        self.assertEqual(widths, [200.0, 100.0, 100.0])

    def test_missing_specs_default_to_star(self):
        widths = resolve_widths([100], 3, 500)
        self.assertEqual(widths, [100.0, 200.0, 200.0])


class SanitizerTestCase(SimpleTestCase):
    """Test cases for the text sanitizer"""

    def test_empty_text(self):
        self.assertEqual(sanitize_text(''), '')
        self.assertEqual(sanitize_text(None), '')

    def test_escapes_special_characters(self):
        self.assertEqual(sanitize_text('Fish & Chips < 5'), 'Fish &amp; Chips &lt; 5')

    def test_strips_unknown_tags(self):
        result = sanitize_text('<script>x</script><a href="y">link</a>')
        self.assertNotIn('<script>', result)
        self.assertNotIn('<a', result)
        self.assertIn('link', result)

    def test_keeps_inline_formatting(self):
        self.assertEqual(sanitize_text('<strong>bold</strong> <em>it</em>'), '<b>bold</b> <i>it</i>')

    def test_line_breaks(self):
        self.assertEqual(sanitize_text('one\r\ntwo\nthree'), 'one<br/>two<br/>three')


class FontRegistrationTestCase(SimpleTestCase):
    """Test font family registration"""

    def test_missing_files_fall_back_to_helvetica(self):
        with TemporaryDirectory() as tmp:
            paths = {variant: Path(tmp) / f'{variant}.ttf' for variant in ('normal', 'bold', 'italic', 'bolditalic')}

            with self.assertLogs('core.printing.fonts', level='WARNING') as logs:
                font_set = register_font_family(paths, family='Missing')

        self.assertIs(font_set, HELVETICA)
        self.assertEqual(len(logs.records), 4)

    def test_find_missing_fonts(self):
        missing = find_missing_fonts({})

        self.assertEqual(list(missing), ['normal', 'bold', 'italic', 'bolditalic'])
        self.assertTrue(all(path is None for path in missing.values()))

    def test_partial_mapping_falls_back_to_helvetica(self):
        with TemporaryDirectory() as tmp:
            paths = {'normal': Path(tmp) / 'normal.ttf'}

            with self.assertLogs('core.printing.fonts', level='WARNING') as logs:
                font_set = register_font_family(paths, family='Partial')

        self.assertIs(font_set, HELVETICA)
        self.assertEqual(len(logs.records), 4)
        self.assertIn('not configured', logs.output[1])

    @override_settings(DOCVAULT_FONTS=None)
    def test_unset_setting_falls_back_to_helvetica(self):
        with self.assertLogs('core.printing.fonts', level='WARNING'):
            self.assertIs(register_font_family(), HELVETICA)

    def test_resolve_variants(self):
        self.assertEqual(HELVETICA.resolve(), 'Helvetica')
        self.assertEqual(HELVETICA.resolve(bold=True), 'Helvetica-Bold')
        self.assertEqual(HELVETICA.resolve(italics=True), 'Helvetica-Oblique')
        self.assertEqual(HELVETICA.resolve(bold=True, italics=True), 'Helvetica-BoldOblique')
