"""
Artifact Storage Service

Persists generated PDFs with their metadata and reads them back by identifier.
"""

from .service import ArtifactStore, ArtifactSummary
from .errors import (
    StorageError,
    InvalidArtifactId,
    ArtifactNotFound,
    ArtifactWriteError,
    StoreUnavailable,
)

__all__ = [
    'ArtifactStore',
    'ArtifactSummary',
    'StorageError',
    'InvalidArtifactId',
    'ArtifactNotFound',
    'ArtifactWriteError',
    'StoreUnavailable',
]
