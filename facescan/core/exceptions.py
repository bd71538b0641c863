"""Custom exceptions for the face scanning service."""
from typing import Optional


class FaceScanError(Exception):
    """Base exception for face scanning operations."""

    def __init__(self, message: str, details: Optional[dict] = None):
        """
        Initialize face scan error.

        Args:
            message: Error description
            details: Additional error context
        """
        super().__init__(message)
        self.details = details or {}


class ScanPreconditionError(FaceScanError):
    """Raised when a scan cannot start because there is nothing to compare against."""
    pass


class NoActiveIdentitiesError(ScanPreconditionError):
    """Raised when no enrolled person is selected for scanning."""
    pass


class EmptyIdentityPoolError(ScanPreconditionError):
    """Raised when the selected people have no embedding samples."""
    pass


class EmbeddingMismatchError(FaceScanError):
    """Raised when two embeddings have different dimensionality.

    Signals a corrupted profile store or a model version mismatch.
    """
    pass


class DetectorError(FaceScanError):
    """Raised when the external face detector fails on an image."""
    pass


class ProfileStoreError(FaceScanError):
    """Base exception for profile store operations."""
    pass


class ProfileNotFoundError(ProfileStoreError):
    """Raised when a profile id is not present in the store."""
    pass


class ProfileImportError(ProfileStoreError):
    """Raised when an imported people document is malformed."""
    pass


class ServiceNotInitializedError(FaceScanError):
    """Raised when a service is requested before the container is initialized."""
    pass
