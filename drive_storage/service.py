"""
Caller-facing entry points for drive-storage.

DriveStorage wires the credential manager, transfer client and catalog
together. Build one explicitly at startup and pass it to whatever needs
Drive access; there is no module-level client.

    storage = DriveStorage.from_env()
    if storage.initialize():
        remote = await storage.upload("/tmp/a.txt", "a.txt", "text/plain")
"""

from pathlib import Path
from typing import Mapping, Optional, Union

from .config import DriveSettings
from .drive.auth import CredentialManager
from .drive.catalog import ObjectCatalog
from .drive.client import DriveClient, DriveClientConfig
from .drive.transfer import TransferClient
from .models import RemoteObject, TransferRequest


class DriveStorage:
    """Drive integration with one explicitly constructed session."""

    def __init__(self, settings: DriveSettings, config: Optional[DriveClientConfig] = None):
        self.settings = settings
        self.credentials = CredentialManager(settings)
        self.client = DriveClient(self.credentials, config)
        self.transfers = TransferClient(self.client)
        self.catalog = ObjectCatalog(self.client)

    @classmethod
    def from_env(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        config: Optional[DriveClientConfig] = None,
    ) -> "DriveStorage":
        return cls(DriveSettings.from_env(environ), config)

    def initialize(self) -> bool:
        """Build the session. False means Drive is intentionally disabled."""
        return self.credentials.initialize()

    def is_configured(self) -> bool:
        return self.credentials.is_ready

    async def upload(self, path: Union[str, Path], name: str, mime_type: Optional[str] = None) -> RemoteObject:
        request = TransferRequest(name=name, mime_type=mime_type, source_path=path)
        return await self.transfers.upload(request)

    async def download(self, file_id: str, destination: Union[str, Path]) -> Path:
        return await self.transfers.download(file_id, destination)

    async def remove(self, file_id: str) -> bool:
        return await self.catalog.remove(file_id)

    async def list_files(self, page_size: int = 10) -> list[RemoteObject]:
        return await self.catalog.list(page_size)

    async def get_file_info(self, file_id: str) -> RemoteObject:
        return await self.catalog.get_metadata(file_id)
