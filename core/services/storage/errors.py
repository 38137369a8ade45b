"""
Storage-specific exceptions
"""

from core.services.exceptions import ServiceUnavailable


class StorageError(Exception):
    """Base exception for storage-related errors"""
    pass


class InvalidArtifactId(StorageError):
    """Raised when an identifier is not in the store's identifier format"""
    pass


class ArtifactNotFound(StorageError):
    """Raised when no artifact exists for a well-formed identifier"""
    pass


class ArtifactWriteError(StorageError):
    """Raised when an artifact cannot be written to storage"""
    pass


class StoreUnavailable(StorageError, ServiceUnavailable):
    """Raised when the backing database cannot be reached or does not answer in time"""
    pass
