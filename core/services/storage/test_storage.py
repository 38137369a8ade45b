"""
Tests for Artifact Storage Service
"""

import time
import uuid
from datetime import datetime, timedelta, timezone as dt_timezone
from unittest.mock import AsyncMock, patch

from django.db import DatabaseError, IntegrityError
from django.test import SimpleTestCase, TestCase
from django.utils import timezone

from core.models import Artifact, DocumentKind
from core.services.exceptions import ServiceUnavailable
from core.services.storage import (
    ArtifactNotFound,
    ArtifactStore,
    ArtifactSummary,
    ArtifactWriteError,
    InvalidArtifactId,
    StorageError,
    StoreUnavailable,
)
from core.services.storage.paths import build_artifact_filename, sanitize_filename
from core.services.storage.service import _PendingWrite


PDF_BYTES = b'%PDF-1.4\n%test document\n%%EOF\n'


class SanitizeFilenameTestCase(SimpleTestCase):
    """Test filename sanitization."""

    def test_basic_sanitization(self):
        self.assertEqual(sanitize_filename('test.pdf'), 'test.pdf')
        self.assertEqual(sanitize_filename('Test File.pdf'), 'Test_File.pdf')
        self.assertEqual(sanitize_filename('file@#$%.pdf'), 'file.pdf')

    def test_directory_traversal_prevention(self):
        self.assertEqual(sanitize_filename('../../../etc/passwd'), 'passwd')
        self.assertEqual(sanitize_filename('/var/tmp/report.pdf'), 'report.pdf')

    def test_header_injection_characters(self):
        self.assertEqual(sanitize_filename('a"b\r\nc.pdf'), 'a_b_c.pdf')

    def test_empty_filename(self):
        self.assertEqual(sanitize_filename(''), 'file')
        self.assertEqual(sanitize_filename('...'), 'file')

    def test_long_filename(self):
        result = sanitize_filename('a' * 300 + '.pdf')
        self.assertEqual(result, 'a' * 100 + '.pdf')


class BuildArtifactFilenameTestCase(SimpleTestCase):
    """Test artifact filename generation."""

    def setUp(self):
        self.now = datetime(2024, 3, 1, 12, 0, tzinfo=dt_timezone.utc)
        self.millis = int(self.now.timestamp() * 1000)

    def test_with_reference(self):
        self.assertEqual(
            build_artifact_filename('Invoice', 'INV-7', now=self.now),
            f'Invoice_INV-7_{self.millis}.pdf',
        )

    def test_without_reference(self):
        self.assertEqual(build_artifact_filename('Document', now=self.now), f'Document_{self.millis}.pdf')

    def test_reference_is_sanitized(self):
        self.assertEqual(
            build_artifact_filename('Invoice', '2024/../01', now=self.now),
            f'01_{self.millis}.pdf',
        )


class ArtifactStoreTestCase(TestCase):
    """Test ArtifactStore against the test database."""

    def setUp(self):
        self.store = ArtifactStore(timeout=5)

    async def test_put_and_get(self):
        artifact_id = await self.store.put(
            'Invoice_INV-1_1.pdf',
            'application/pdf',
            PDF_BYTES,
            {'invoiceNumber': 'INV-1', 'grandTotal': 220.0},
            kind=DocumentKind.INVOICE,
            invoice_number='INV-1',
        )

        self.assertIsInstance(artifact_id, uuid.UUID)

        artifact = await self.store.get(str(artifact_id))
        self.assertEqual(bytes(artifact.data), PDF_BYTES)
        self.assertEqual(artifact.filename, 'Invoice_INV-1_1.pdf')
        self.assertEqual(artifact.content_type, 'application/pdf')
        self.assertEqual(artifact.kind, DocumentKind.INVOICE)
        self.assertEqual(artifact.size_bytes, len(PDF_BYTES))
        self.assertEqual(len(artifact.sha256), 64)
        self.assertEqual(artifact.source_data['grandTotal'], 220.0)
        self.assertEqual(artifact.invoice_number, 'INV-1')

    async def test_put_sanitizes_filename(self):
        artifact_id = await self.store.put('../evil name.pdf', 'application/pdf', PDF_BYTES)

        artifact = await self.store.get(artifact_id)
        self.assertEqual(artifact.filename, 'evil_name.pdf')
        self.assertIsNone(artifact.source_data)

    async def test_get_invalid_id(self):
        with self.assertRaises(InvalidArtifactId):
            await self.store.get('not-an-id')

    async def test_invalid_id_checked_before_query(self):
        with patch('core.services.storage.service.Artifact.objects.aget', new=AsyncMock()) as aget:
            with self.assertRaises(InvalidArtifactId):
                await self.store.get('12345')

        aget.assert_not_called()

    async def test_get_missing(self):
        with self.assertRaises(ArtifactNotFound):
            await self.store.get(str(uuid.uuid4()))

    async def test_list_newest_first(self):
        older = await self.store.put('older.pdf', 'application/pdf', PDF_BYTES)
        newer = await self.store.put('newer.pdf', 'application/pdf', PDF_BYTES)
        await Artifact.objects.filter(pk=older).aupdate(created_at=timezone.now() - timedelta(hours=1))

        listing = await self.store.list()

        self.assertEqual([entry.id for entry in listing], [newer, older])
        self.assertIsInstance(listing[0], ArtifactSummary)
        self.assertEqual(listing[0].filename, 'newer.pdf')
        self.assertFalse(hasattr(listing[0], 'data'))

    async def test_list_empty(self):
        self.assertEqual(await self.store.list(), [])

    async def test_stored_artifacts_are_immutable(self):
        artifact_id = await self.store.put('a.pdf', 'application/pdf', PDF_BYTES)
        artifact = await self.store.get(artifact_id)

        artifact.filename = 'b.pdf'
        with self.assertRaises(ValueError):
            await artifact.asave()

    async def test_integrity_error_becomes_write_error(self):
        with patch.object(Artifact, 'save', side_effect=IntegrityError('duplicate')):
            with self.assertRaises(ArtifactWriteError):
                await self.store.put('a.pdf', 'application/pdf', PDF_BYTES)

    async def test_database_error_becomes_unavailable(self):
        with patch.object(Artifact, 'save', side_effect=DatabaseError('connection refused')):
            with self.assertRaises(StoreUnavailable) as cm:
                await self.store.put('a.pdf', 'application/pdf', PDF_BYTES)

        self.assertIsInstance(cm.exception, StorageError)
        self.assertIsInstance(cm.exception, ServiceUnavailable)

    async def test_slow_write_times_out(self):
        original_save = Artifact.save

        def slow_save(artifact, *args, **kwargs):
            time.sleep(0.3)
            original_save(artifact, *args, **kwargs)

        store = ArtifactStore(timeout=0.05)
        with patch.object(Artifact, 'save', new=slow_save):
            with self.assertLogs('core.services.storage.service', level='WARNING') as logs:
                with self.assertRaises(StoreUnavailable):
                    await store.put('a.pdf', 'application/pdf', PDF_BYTES)

                # The INSERT finishes after the caller gave up and is rolled back
                self.assertEqual(await Artifact.objects.acount(), 0)

        self.assertTrue(any('Rolled back late write' in line for line in logs.output))
        self.assertEqual(await store.list(), [])

    async def test_list_unavailable(self):
        with patch('core.services.storage.service.Artifact.objects.order_by', side_effect=DatabaseError('down')):
            with self.assertRaises(StoreUnavailable):
                await self.store.list()


class PendingWriteTestCase(SimpleTestCase):
    """Test the hand-off between a timed-out caller and the writer."""

    def test_abandoned_write_cannot_commit(self):
        pending = _PendingWrite()
        self.assertTrue(pending.abandon())
        self.assertFalse(pending.begin_commit())

    def test_committing_write_cannot_be_abandoned(self):
        pending = _PendingWrite()
        self.assertTrue(pending.begin_commit())
        self.assertFalse(pending.abandon())
