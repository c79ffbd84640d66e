"""
Google Drive interaction module.

Handles authentication, the shared HTTP client, streaming transfers and
file metadata operations.
"""

from .auth import CredentialManager, Session, authorize_user
from .client import DriveClient, DriveClientConfig
from .transfer import TransferClient
from .catalog import ObjectCatalog
from .utils import parse_drive_file_url

__all__ = [
    "CredentialManager",
    "Session",
    "authorize_user",
    "DriveClient",
    "DriveClientConfig",
    "TransferClient",
    "ObjectCatalog",
    "parse_drive_file_url",
]
