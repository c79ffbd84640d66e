"""
Streaming transfers for drive-storage.

Uploads use Drive's resumable protocol with the whole payload sent in one
streamed PUT; downloads stream the media response straight to disk. Nothing
is buffered in full and nothing is retried.
"""

import logging
import os
from pathlib import Path
from typing import BinaryIO, Callable, Optional, Union

import aiohttp

from ..constants import FILE_FIELDS
from ..errors import TransferError
from ..models import RemoteObject, TransferRequest
from .client import DriveClient

logger = logging.getLogger(__name__)

# Called with (bytes_done, total_bytes); total is 0 when unknown
ProgressCallback = Callable[[int, int], None]


class TransferClient:
    """Streaming upload and download against the shared Drive session."""

    def __init__(self, client: DriveClient):
        self.client = client

    @property
    def chunk_size(self) -> int:
        return self.client.config.chunk_size

    async def upload(self, request: TransferRequest, progress: Optional[ProgressCallback] = None) -> RemoteObject:
        """
        Upload a new file to Drive.

        The source is read once, front to back, in chunk_size blocks. A file
        opened from ``source_path`` is closed on every exit path; a caller's
        ``stream`` is left open.

        Args:
            request: What to upload and under which name/MIME type
            progress: Optional callback for bytes sent

        Returns:
            RemoteObject as created by Drive (always a new file)

        Raises:
            NotConfigured: client not initialized
            TransferError: the upload failed at any stage
        """
        self.client.require_session()
        action = f"Upload of {request.name!r}"

        with self.client.errors(TransferError, action):
            if request.source_path is not None:
                with open(request.source_path, "rb") as source:
                    total = os.fstat(source.fileno()).st_size
                    data = await self._send(request, source, total, action, progress)
            else:
                data = await self._send(request, request.stream, request.size, action, progress)

        remote = RemoteObject.from_api(data)
        logger.info("Uploaded %s to Google Drive as %s", request.name, remote.id)
        return remote

    async def _send(
        self,
        request: TransferRequest,
        source: BinaryIO,
        total: Optional[int],
        action: str,
        progress: Optional[ProgressCallback],
    ) -> dict:
        async with self.client.http() as http:
            location = await self._start_session(http, request, total, action)

            headers = {"Content-Type": request.content_type}
            if total is not None:
                headers["Content-Length"] = str(total)
            body = self._read_chunks(source, total, progress)

            async with self.client.request(http, "PUT", location, data=body, headers=headers) as response:
                await self.client.check_response(response, TransferError, action, map_not_found=False)
                return await self.client.read_json(response, TransferError, action)

    async def _start_session(
        self,
        http: aiohttp.ClientSession,
        request: TransferRequest,
        total: Optional[int],
        action: str,
    ) -> str:
        """Open a resumable upload session and return its URL."""
        headers = {"X-Upload-Content-Type": request.content_type}
        if total is not None:
            headers["X-Upload-Content-Length"] = str(total)
        metadata = {"name": request.name, "mimeType": request.content_type}
        params = {"uploadType": "resumable", "fields": FILE_FIELDS}

        async with self.client.request(
            http, "POST", self.client.upload_url(), json=metadata, params=params, headers=headers
        ) as response:
            await self.client.check_response(response, TransferError, action, map_not_found=False)
            location = response.headers.get("Location")
            if not location:
                raise TransferError(f"{action} failed: no upload session URL", status=response.status)
            return location

    async def _read_chunks(self, source: BinaryIO, total: Optional[int], progress: Optional[ProgressCallback]):
        sent = 0
        while True:
            chunk = source.read(self.chunk_size)
            if not chunk:
                break
            sent += len(chunk)
            if progress:
                progress(sent, total or 0)
            yield chunk

    async def download(
        self,
        file_id: str,
        destination: Union[str, Path],
        progress: Optional[ProgressCallback] = None,
    ) -> Path:
        """
        Download a file's content to ``destination``.

        Parent directories are created as needed. The write is not atomic:
        if the transfer fails midway, the partial file is left at
        ``destination`` (see TransferError.partial_path) and the caller must
        remove it. A missing file ID fails before anything is written.

        Args:
            file_id: Drive file ID
            destination: Local file path to write
            progress: Optional callback for bytes received

        Returns:
            The destination path

        Raises:
            NotConfigured: client not initialized
            NotFound: file ID doesn't exist
            TransferError: the download failed
        """
        self.client.require_session()
        destination = Path(destination)
        action = f"Download of {file_id}"

        with self.client.errors(TransferError, action, file_id=file_id):
            async with self.client.http() as http:
                url = self.client.files_url(file_id)
                async with self.client.request(http, "GET", url, params={"alt": "media"}) as response:
                    await self.client.check_response(response, TransferError, action, file_id=file_id)
                    written = await self._write_response(response, destination, file_id, action, progress)

        logger.info("Downloaded %s from Google Drive to %s (%d bytes)", file_id, destination, written)
        return destination

    async def _write_response(
        self,
        response: aiohttp.ClientResponse,
        destination: Path,
        file_id: str,
        action: str,
        progress: Optional[ProgressCallback],
    ) -> int:
        """Stream response content to file. Returns bytes written."""
        destination.parent.mkdir(parents=True, exist_ok=True)

        total = response.content_length or 0
        written = 0
        with open(destination, "wb") as f:
            with self.client.errors(TransferError, action, file_id=file_id, partial_path=destination):
                async for chunk in response.content.iter_chunked(self.chunk_size):
                    f.write(chunk)
                    written += len(chunk)
                    if progress:
                        progress(written, total)
        return written
