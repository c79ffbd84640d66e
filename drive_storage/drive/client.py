"""
Google Drive API client core for drive-storage.

Owns the HTTP plumbing shared by uploads, downloads and catalog calls:
aiohttp session setup, bearer headers, and translating every failure into
a drive-storage error. Retry policy is left to callers.
"""

import asyncio
import logging
import ssl
from contextlib import asynccontextmanager, contextmanager
from dataclasses import dataclass
from typing import Optional, Tuple

import aiohttp
import certifi
from google.auth.exceptions import GoogleAuthError, RefreshError

from ..constants import API_BASE, UPLOAD_BASE
from ..errors import DriveStorageError, NotFound
from .auth import CredentialManager, Session

logger = logging.getLogger(__name__)


@dataclass
class DriveClientConfig:
    """Configuration for DriveClient."""
    api_base: str = API_BASE
    upload_base: str = UPLOAD_BASE
    timeout: Tuple[int, int] = (10, 120)  # (connect, sock_read) seconds
    chunk_size: int = 65536


async def _read_error(response: aiohttp.ClientResponse) -> Tuple[Optional[str], Optional[str]]:
    """
    Pull (reason, message) out of a Drive error body.

    Drive errors look like:
        {"error": {"code": 404, "message": "...", "errors": [{"reason": "notFound"}]}}
    """
    try:
        body = await response.json(content_type=None)
    except (ValueError, aiohttp.ClientError):
        return None, None

    error = body.get("error") if isinstance(body, dict) else None
    if not isinstance(error, dict):
        return None, None

    reason = error.get("status")
    details = error.get("errors")
    if details and isinstance(details[0], dict):
        reason = details[0].get("reason", reason)
    return reason, error.get("message")


class DriveClient:
    """
    Shared HTTP layer for Drive calls.

    Every operation opens its own aiohttp session through http(), so sockets
    are released on every exit path and operations can run concurrently.
    """

    def __init__(self, credentials: CredentialManager, config: Optional[DriveClientConfig] = None):
        """
        Initialize the Drive client.

        Args:
            credentials: Manager owning the authenticated Session
            config: Client configuration
        """
        self.credentials = credentials
        self.config = config or DriveClientConfig()
        self._api_calls = 0

    @property
    def api_calls(self) -> int:
        """Total API requests issued by this client."""
        return self._api_calls

    def require_session(self) -> Session:
        """Raise NotConfigured unless the credential manager is ready."""
        return self.credentials.require_session()

    def files_url(self, file_id: Optional[str] = None) -> str:
        base = f"{self.config.api_base}/files"
        return f"{base}/{file_id}" if file_id else base

    def upload_url(self) -> str:
        return f"{self.config.upload_base}/files"

    @asynccontextmanager
    async def http(self):
        """Open an aiohttp session for a single operation."""
        connect, sock_read = self.config.timeout
        timeout = aiohttp.ClientTimeout(connect=connect, sock_read=sock_read)
        ssl_context = ssl.create_default_context(cafile=certifi.where())
        connector = aiohttp.TCPConnector(ssl=ssl_context)
        async with aiohttp.ClientSession(timeout=timeout, connector=connector) as session:
            yield session

    @asynccontextmanager
    async def request(self, http: aiohttp.ClientSession, method: str, url: str, **kwargs):
        """
        Issue an authenticated request.

        Yields the response; it is released when the block exits.
        """
        session = self.require_session()
        headers = dict(kwargs.pop("headers", None) or {})
        headers.update(await session.authorization_header())

        self._api_calls += 1
        logger.debug("%s %s", method, url)
        async with http.request(method, url, headers=headers, **kwargs) as response:
            yield response

    async def check_response(
        self,
        response: aiohttp.ClientResponse,
        error_cls: type,
        action: str,
        file_id: Optional[str] = None,
        map_not_found: bool = True,
    ):
        """
        Raise a typed error for a non-2xx response.

        404 becomes NotFound when ``map_not_found`` is set (the target file ID
        doesn't exist); anything else becomes ``error_cls``.
        """
        if response.status < 400:
            return

        reason, message = await _read_error(response)
        cls = NotFound if map_not_found and response.status == 404 else error_cls
        text = f"{action} failed: HTTP {response.status}"
        if message:
            text = f"{text} - {message}"
        logger.warning("%s", text)
        raise cls(text, file_id=file_id, status=response.status, reason=reason)

    async def read_json(
        self,
        response: aiohttp.ClientResponse,
        error_cls: type,
        action: str,
        file_id: Optional[str] = None,
        required: Optional[str] = "id",
    ) -> dict:
        """
        Decode a success body as a Drive JSON object.

        A 2xx that isn't JSON (a proxy or captive-portal page) or lacks the
        ``required`` key raises ``error_cls`` instead of leaking a decode error.
        """
        try:
            data = await response.json(content_type=None)
        except (ValueError, aiohttp.ContentTypeError) as e:
            text = f"{action} failed: response body is not JSON"
            logger.warning("%s", text)
            raise error_cls(text, file_id=file_id, status=response.status, cause=e) from e

        if not isinstance(data, dict) or (required and required not in data):
            text = f"{action} failed: unexpected response body"
            logger.warning("%s", text)
            raise error_cls(text, file_id=file_id, status=response.status)
        return data

    @contextmanager
    def errors(self, error_cls: type, action: str, file_id: Optional[str] = None, **extra):
        """
        Map network, auth and local I/O failures to ``error_cls``.

        drive-storage errors pass through untouched; cancellation is never
        converted.
        """
        try:
            yield
        except DriveStorageError:
            raise
        except RefreshError as e:
            logger.warning("%s failed: credentials rejected: %s", action, e)
            raise error_cls(
                f"{action} failed: credentials rejected: {e}",
                file_id=file_id,
                reason="authError",
                cause=e,
                retryable=False,
                **extra,
            ) from e
        except (aiohttp.ClientError, asyncio.TimeoutError, GoogleAuthError, OSError) as e:
            detail = str(e) or type(e).__name__
            logger.warning("%s failed: %s", action, detail)
            raise error_cls(f"{action} failed: {detail}", file_id=file_id, cause=e, **extra) from e
