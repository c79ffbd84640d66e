"""
drive-storage - Google Drive object storage with delegated OAuth credentials.

Uploads, downloads, lists, inspects and deletes Drive files on behalf of a
single account, using a long-lived refresh token from the environment.

    from drive_storage import DriveStorage
    storage = DriveStorage.from_env()
    storage.initialize()
"""

from .config import DriveSettings
from .errors import (
    CatalogError,
    ConfigError,
    DriveStorageError,
    NotConfigured,
    NotFound,
    TransferError,
)
from .models import RemoteObject, TransferRequest
from .service import DriveStorage


def _get_version():
    """Read version from VERSION file (source checkout) or package metadata."""
    from importlib.metadata import PackageNotFoundError, version
    from pathlib import Path
    version_file = Path(__file__).parent.parent / "VERSION"
    if version_file.exists():
        return version_file.read_text().strip()
    try:
        return version("drive-storage")
    except PackageNotFoundError:
        return "0.0.0"


__version__ = _get_version()

__all__ = [
    "DriveStorage",
    "DriveSettings",
    "RemoteObject",
    "TransferRequest",
    "DriveStorageError",
    "ConfigError",
    "NotConfigured",
    "TransferError",
    "CatalogError",
    "NotFound",
    "__version__",
]
