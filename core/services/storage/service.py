"""
Artifact Storage Service

Stores generated PDFs in the database. Artifacts are written with a single
INSERT, so readers either see a complete row or nothing. A write that outlives
its timeout is rolled back, so a caller told the store was unavailable never
finds the artifact listed later.
"""

import asyncio
import hashlib
import logging
import threading
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Union

from asgiref.sync import sync_to_async
from django.conf import settings
from django.db import DatabaseError, IntegrityError, transaction
from django.utils import timezone

from core.models import Artifact, DocumentKind
from .errors import ArtifactNotFound, ArtifactWriteError, InvalidArtifactId, StoreUnavailable
from .paths import sanitize_filename


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ArtifactSummary:
    """Listing entry; never carries the PDF payload"""

    id: uuid.UUID
    filename: str
    created_at: datetime


class _PendingWrite:
    """Hand-off between a waiting put() and the thread running its INSERT"""

    def __init__(self):
        self._lock = threading.Lock()
        self._abandoned = False
        self._committing = False

    def abandon(self) -> bool:
        """Give up on the write; False when it is already committing"""
        with self._lock:
            if self._committing:
                return False
            self._abandoned = True
            return True

    def begin_commit(self) -> bool:
        """Claim the commit; False when the caller has given up"""
        with self._lock:
            if self._abandoned:
                return False
            self._committing = True
            return True


def _insert(artifact: Artifact, pending: _PendingWrite) -> None:
    with transaction.atomic():
        artifact.save(force_insert=True)
        if not pending.begin_commit():
            transaction.set_rollback(True)
            logger.warning(f"Rolled back late write of artifact {artifact.filename}")


def _discard_result(future: asyncio.Future) -> None:
    if not future.cancelled():
        future.exception()


class ArtifactStore:
    """
    Service for persisting and retrieving generated artifacts.
    """

    def __init__(self, timeout: Optional[float] = None):
        """
        Initialize the store.

        Args:
            timeout: Seconds allowed per database operation
                (defaults to the DOCVAULT_STORE_TIMEOUT setting)
        """
        self.timeout = timeout if timeout is not None else getattr(settings, 'DOCVAULT_STORE_TIMEOUT', 10)

    @staticmethod
    def parse_id(artifact_id: Union[str, uuid.UUID]) -> uuid.UUID:
        """
        Validate an identifier without touching the database.

        Raises:
            InvalidArtifactId: If the value is not a UUID
        """
        if isinstance(artifact_id, uuid.UUID):
            return artifact_id
        try:
            return uuid.UUID(str(artifact_id))
        except (TypeError, ValueError, AttributeError):
            raise InvalidArtifactId(f"Invalid artifact ID format: {artifact_id!r}")

    async def put(
        self,
        filename: str,
        content_type: str,
        data: bytes,
        source_data: Optional[dict] = None,
        *,
        kind: str = DocumentKind.DOCUMENT,
        invoice_number: str = '',
    ) -> uuid.UUID:
        """
        Persist a generated document.

        Args:
            filename: Download filename (sanitized before storing)
            content_type: MIME type, normally 'application/pdf'
            data: Complete document bytes
            source_data: Optional structured request the document was built from
            kind: DocumentKind value
            invoice_number: Business reference for invoices

        Returns:
            The new artifact's identifier

        Raises:
            ArtifactWriteError: If the row cannot be written
            StoreUnavailable: If the database cannot be reached in time
        """
        artifact = Artifact(
            filename=sanitize_filename(filename),
            content_type=content_type,
            kind=kind,
            data=bytes(data),
            size_bytes=len(data),
            sha256=hashlib.sha256(data).hexdigest(),
            created_at=timezone.now(),
            source_data=source_data,
            invoice_number=invoice_number or '',
        )

        pending = _PendingWrite()
        write = asyncio.ensure_future(sync_to_async(_insert)(artifact, pending))

        try:
            done, _ = await asyncio.wait({write}, timeout=self.timeout)
            if not done and pending.abandon():
                write.add_done_callback(_discard_result)
                logger.error(f"Timed out storing artifact {artifact.filename}")
                raise StoreUnavailable(f"Timed out after {self.timeout}s storing {artifact.filename}")
            # Finished, or committing already: the outcome is final either way
            await write
        except IntegrityError as e:
            logger.error(f"Failed to store artifact {artifact.filename}: {e}", exc_info=True)
            raise ArtifactWriteError(f"Failed to store artifact: {e}") from e
        except DatabaseError as e:
            logger.error(f"Artifact store unavailable: {e}", exc_info=True)
            raise StoreUnavailable(f"Artifact store unavailable: {e}") from e

        logger.info(f"Stored artifact {artifact.filename} ({artifact.size_bytes} bytes, ID: {artifact.id})")
        return artifact.id

    async def get(self, artifact_id: Union[str, uuid.UUID]) -> Artifact:
        """
        Load an artifact including its payload.

        Raises:
            InvalidArtifactId: If the identifier is malformed (checked first)
            ArtifactNotFound: If no artifact has this identifier
            StoreUnavailable: If the database cannot be reached in time
        """
        pk = self.parse_id(artifact_id)

        try:
            return await asyncio.wait_for(Artifact.objects.aget(pk=pk), timeout=self.timeout)
        except Artifact.DoesNotExist:
            raise ArtifactNotFound(f"Artifact not found: {pk}")
        except asyncio.TimeoutError as e:
            raise StoreUnavailable(f"Timed out after {self.timeout}s loading artifact {pk}") from e
        except DatabaseError as e:
            logger.error(f"Artifact store unavailable: {e}", exc_info=True)
            raise StoreUnavailable(f"Artifact store unavailable: {e}") from e

    async def list(self) -> list[ArtifactSummary]:
        """
        List stored artifacts, newest first, without loading their payloads.

        Raises:
            StoreUnavailable: If the database cannot be reached in time
        """
        async def fetch():
            rows = Artifact.objects.order_by('-created_at').values('id', 'filename', 'created_at')
            return [ArtifactSummary(**row) async for row in rows]

        try:
            return await asyncio.wait_for(fetch(), timeout=self.timeout)
        except asyncio.TimeoutError as e:
            raise StoreUnavailable(f"Timed out after {self.timeout}s listing artifacts") from e
        except DatabaseError as e:
            logger.error(f"Artifact store unavailable: {e}", exc_info=True)
            raise StoreUnavailable(f"Artifact store unavailable: {e}") from e
