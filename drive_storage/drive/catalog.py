"""
Metadata operations for drive-storage: list, get and delete files.
"""

import logging
from typing import Optional

from ..constants import FILE_FIELDS, MAX_PAGE_SIZE
from ..errors import CatalogError
from ..models import RemoteObject
from .client import DriveClient

logger = logging.getLogger(__name__)


class ObjectCatalog:
    """Non-streaming file operations against the shared Drive session."""

    def __init__(self, client: DriveClient):
        self.client = client

    async def list(self, page_size: int = 10, query: Optional[str] = None) -> list[RemoteObject]:
        """
        List up to ``page_size`` files in the order Drive returns them.

        Only the first page is fetched; callers needing everything must
        know this is a bounded prefix.

        Args:
            page_size: Maximum files to return (1-1000)
            query: Optional Drive search expression (``q`` parameter),
                e.g. "mimeType contains 'video/' and trashed = false"

        Returns:
            List of RemoteObject snapshots

        Raises:
            ValueError: page_size out of range
            NotConfigured: client not initialized
            CatalogError: the listing failed
        """
        self.client.require_session()
        if not 1 <= page_size <= MAX_PAGE_SIZE:
            raise ValueError(f"page_size must be between 1 and {MAX_PAGE_SIZE}, got {page_size}")

        params = {"pageSize": str(page_size), "fields": f"files({FILE_FIELDS})"}
        if query:
            params["q"] = query

        action = "Listing Drive files"
        with self.client.errors(CatalogError, action):
            async with self.client.http() as http:
                async with self.client.request(http, "GET", self.client.files_url(), params=params) as response:
                    await self.client.check_response(response, CatalogError, action, map_not_found=False)
                    data = await self.client.read_json(response, CatalogError, action, required=None)

        files = data.get("files", [])
        if not isinstance(files, list) or not all(isinstance(item, dict) and "id" in item for item in files):
            raise CatalogError(f"{action} failed: unexpected response body", status=response.status)
        # Drive honours pageSize, but never hand back more than asked for
        return [RemoteObject.from_api(item) for item in files[:page_size]]

    async def get_metadata(self, file_id: str) -> RemoteObject:
        """
        Fetch a single file's metadata.

        Raises:
            NotConfigured: client not initialized
            NotFound: file ID doesn't exist
            CatalogError: the request failed
        """
        self.client.require_session()
        action = f"Metadata fetch for {file_id}"

        with self.client.errors(CatalogError, action, file_id=file_id):
            async with self.client.http() as http:
                url = self.client.files_url(file_id)
                async with self.client.request(http, "GET", url, params={"fields": FILE_FIELDS}) as response:
                    await self.client.check_response(response, CatalogError, action, file_id=file_id)
                    data = await self.client.read_json(response, CatalogError, action, file_id=file_id)

        return RemoteObject.from_api(data)

    async def remove(self, file_id: str) -> bool:
        """
        Permanently delete a file.

        Deleting an ID that is already gone raises NotFound rather than
        reporting success; the caller decides whether that is acceptable.

        Returns:
            True on success

        Raises:
            NotConfigured: client not initialized
            NotFound: file ID doesn't exist
            CatalogError: the request failed
        """
        self.client.require_session()
        action = f"Delete of {file_id}"

        with self.client.errors(CatalogError, action, file_id=file_id):
            async with self.client.http() as http:
                url = self.client.files_url(file_id)
                async with self.client.request(http, "DELETE", url) as response:
                    await self.client.check_response(response, CatalogError, action, file_id=file_id)

        logger.info("Deleted %s from Google Drive", file_id)
        return True
