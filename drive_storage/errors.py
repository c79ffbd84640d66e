"""
Error types for drive-storage.

Every failure leaving this package is one of the classes below, so callers
can branch on the class instead of parsing messages:

    DriveStorageError
    ├── ConfigError
    ├── NotConfigured
    ├── TransferError
    └── CatalogError
        └── NotFound
"""

from typing import Optional

# HTTP statuses worth retrying at the caller's discretion
RETRYABLE_STATUSES = {408, 429, 500, 502, 503, 504}


class DriveStorageError(Exception):
    """
    Base class for all drive-storage errors.

    Args:
        message: Human-readable description
        file_id: Remote file ID involved, if any
        cause: Underlying exception, if any
    """

    def __init__(
        self,
        message: str = "",
        *,
        file_id: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ):
        self.file_id = file_id
        self.cause = cause
        super().__init__(message)

    def _context(self) -> list[str]:
        parts = []
        if self.file_id is not None:
            parts.append(f"file_id={self.file_id!r}")
        return parts

    def __str__(self) -> str:
        parts = [super().__str__(), *self._context()]
        return " | ".join(p for p in parts if p)

    def __repr__(self) -> str:
        args = [repr(super().__str__()), *self._context()]
        return f"{type(self).__name__}({', '.join(args)})"


class ConfigError(DriveStorageError):
    """
    Credentials are missing or the session could not be built.

    Not retryable without fixing the configuration.
    """

    def __init__(self, message: str = "", *, fields: tuple = (), cause: Optional[BaseException] = None):
        self.fields = tuple(fields)
        super().__init__(message, cause=cause)

    def _context(self) -> list[str]:
        parts = super()._context()
        if self.fields:
            parts.append(f"fields={list(self.fields)!r}")
        return parts


class NotConfigured(DriveStorageError):
    """Operation attempted while Drive is disabled or not yet initialized."""


class _RemoteError(DriveStorageError):
    """Shared fields for errors raised after talking to (or trying to reach) Drive."""

    def __init__(
        self,
        message: str = "",
        *,
        file_id: Optional[str] = None,
        status: Optional[int] = None,
        reason: Optional[str] = None,
        cause: Optional[BaseException] = None,
        retryable: Optional[bool] = None,
    ):
        self.status = status
        self.reason = reason
        self._retryable = retryable
        super().__init__(message, file_id=file_id, cause=cause)

    @property
    def retryable(self) -> bool:
        """
        Whether a caller-side retry could plausibly succeed.

        True for throttling and server errors, and for network failures
        where no HTTP status was received. This layer never retries itself.
        """
        if self._retryable is not None:
            return self._retryable
        if self.status is None:
            return self.cause is not None
        return self.status in RETRYABLE_STATUSES

    def _context(self) -> list[str]:
        parts = super()._context()
        if self.status is not None:
            parts.append(f"status={self.status}")
        if self.reason:
            parts.append(f"reason={self.reason!r}")
        return parts


class TransferError(_RemoteError):
    """
    A streaming upload or download failed.

    A failed download may leave a partial file behind; ``partial_path`` points
    at it and the caller is responsible for removing it.
    """

    def __init__(self, message: str = "", *, partial_path=None, **kwargs):
        self.partial_path = partial_path
        super().__init__(message, **kwargs)

    def _context(self) -> list[str]:
        parts = super()._context()
        if self.partial_path is not None:
            parts.append(f"partial_path={str(self.partial_path)!r}")
        return parts


class CatalogError(_RemoteError):
    """A list, metadata or delete call failed."""


class NotFound(CatalogError):
    """The file ID does not resolve on Drive (never created, or already removed)."""
