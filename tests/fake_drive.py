"""
In-process fake of the Google Drive v3 API for tests.

Implements just enough of the real API for drive-storage: the OAuth token
endpoint, resumable uploads, file get/list/delete and media download. Every
request is recorded so tests can assert how many network calls happened.
"""

import asyncio
import uuid
from typing import Optional

from aiohttp import web
from aiohttp.test_utils import TestServer

CREATED_TIME = "2024-05-01T12:00:00.000Z"


def _error(status: int, reason: str, message: str) -> web.Response:
    body = {"error": {"code": status, "message": message, "errors": [{"reason": reason, "message": message}]}}
    return web.json_response(body, status=status)


class FakeDrive:
    """Fake Drive API server. Use start()/close() inside a running loop."""

    def __init__(self):
        self.files: dict[str, dict] = {}
        self.content: dict[str, bytes] = {}
        self.sessions: dict[str, dict] = {}
        self.requests: list[tuple[str, str]] = []
        self.access_token = "fake-access-token"
        self.reject_refresh = False
        self.truncate_downloads = False
        self.stall_downloads = False
        # operation name -> HTTP status to return instead of handling it
        self.failures: dict[str, int] = {}
        # operation name -> "html" or "no-id" to answer 200 with a bad body
        self.malformed: dict[str, str] = {}
        self.last_list_query: dict = {}
        self.server: Optional[TestServer] = None
        self._release: Optional[asyncio.Event] = None

        self.app = web.Application(middlewares=[self._track])
        self.app.router.add_post("/token", self._token)
        self.app.router.add_post("/upload/drive/v3/files", self._start_upload)
        self.app.router.add_put("/upload/drive/v3/files", self._finish_upload)
        self.app.router.add_get("/drive/v3/files", self._list)
        self.app.router.add_get("/drive/v3/files/{file_id}", self._get)
        self.app.router.add_delete("/drive/v3/files/{file_id}", self._delete)

    async def start(self):
        self._release = asyncio.Event()
        self.server = TestServer(self.app, host="127.0.0.1")
        await self.server.start_server()

    async def close(self):
        if self._release is not None:
            self._release.set()
        if self.server is not None:
            await self.server.close()

    def url(self, path: str) -> str:
        return str(self.server.make_url(path))

    @property
    def api_base(self) -> str:
        return self.url("/drive/v3")

    @property
    def upload_base(self) -> str:
        return self.url("/upload/drive/v3")

    @property
    def token_uri(self) -> str:
        return self.url("/token")

    @property
    def api_requests(self) -> list[tuple[str, str]]:
        """Recorded requests excluding token refreshes."""
        return [r for r in self.requests if r[1] != "/token"]

    @property
    def token_requests(self) -> int:
        return len(self.requests) - len(self.api_requests)

    def add_file(self, name: str, content: bytes, mime_type: str = "application/octet-stream") -> str:
        """Seed a file directly, as if uploaded earlier."""
        file_id = "1" + uuid.uuid4().hex[:27]
        self.files[file_id] = {
            "id": file_id,
            "name": name,
            "mimeType": mime_type,
            "size": str(len(content)),
            "createdTime": CREATED_TIME,
            "modifiedTime": CREATED_TIME,
            "webViewLink": f"https://drive.google.com/file/d/{file_id}/view",
            "webContentLink": f"https://drive.google.com/uc?id={file_id}&export=download",
        }
        self.content[file_id] = content
        return file_id

    # region: handlers

    @web.middleware
    async def _track(self, request: web.Request, handler):
        self.requests.append((request.method, request.path))
        if request.path != "/token":
            if request.headers.get("Authorization") != f"Bearer {self.access_token}":
                return _error(401, "authError", "Invalid Credentials")
        return await handler(request)

    def _garbled(self, operation: str) -> Optional[web.Response]:
        kind = self.malformed.get(operation)
        if kind == "html":
            return web.Response(body=b"<html>proxy error</html>", content_type="text/html")
        if kind == "no-id":
            orphan = {"kind": "drive#file", "name": "orphan"}
            return web.json_response({"files": [orphan]} if operation == "list" else orphan)
        return None

    def _injected(self, operation: str) -> Optional[web.Response]:
        status = self.failures.get(operation)
        if status is None:
            return None
        reason = "rateLimitExceeded" if status == 429 else "backendError"
        return _error(status, reason, f"Injected failure for {operation}")

    async def _token(self, request: web.Request) -> web.Response:
        form = await request.post()
        if self.reject_refresh or form.get("grant_type") != "refresh_token":
            return web.json_response(
                {"error": "invalid_grant", "error_description": "Token has been expired or revoked."},
                status=400,
            )
        return web.json_response({"access_token": self.access_token, "expires_in": 3600, "token_type": "Bearer"})

    async def _start_upload(self, request: web.Request) -> web.Response:
        failure = self._injected("start_upload")
        if failure is not None:
            return failure
        if request.query.get("uploadType") != "resumable":
            return _error(400, "badRequest", "Only resumable uploads are supported")

        metadata = await request.json()
        upload_id = uuid.uuid4().hex
        self.sessions[upload_id] = {
            "name": metadata.get("name", "Untitled"),
            "mimeType": metadata.get("mimeType") or request.headers.get("X-Upload-Content-Type"),
        }
        location = self.url("/upload/drive/v3/files") + f"?uploadType=resumable&upload_id={upload_id}"
        return web.Response(status=200, headers={"Location": location})

    async def _finish_upload(self, request: web.Request) -> web.Response:
        failure = self._injected("finish_upload")
        if failure is not None:
            return failure
        session = self.sessions.pop(request.query.get("upload_id", ""), None)
        if session is None:
            return _error(404, "notFound", "Upload session not found")

        body = await request.read()
        garbled = self._garbled("finish_upload")
        if garbled is not None:
            return garbled
        file_id = self.add_file(session["name"], body, session["mimeType"])
        return web.json_response(self.files[file_id])

    async def _list(self, request: web.Request) -> web.Response:
        failure = self._injected("list")
        if failure is not None:
            return failure
        self.last_list_query = dict(request.query)
        garbled = self._garbled("list")
        if garbled is not None:
            return garbled
        page_size = int(request.query.get("pageSize", "100"))
        return web.json_response({"files": list(self.files.values())[:page_size]})

    async def _get(self, request: web.Request) -> web.StreamResponse:
        failure = self._injected("get")
        if failure is not None:
            return failure
        file_id = request.match_info["file_id"]
        if file_id not in self.files:
            return _error(404, "notFound", f"File not found: {file_id}.")

        if request.query.get("alt") != "media":
            garbled = self._garbled("get")
            if garbled is not None:
                return garbled
            return web.json_response(self.files[file_id])

        content = self.content[file_id]
        if not (self.truncate_downloads or self.stall_downloads):
            return web.Response(body=content, content_type="application/octet-stream")

        # Promise the full length and send only half
        response = web.StreamResponse(status=200)
        response.content_type = "application/octet-stream"
        response.content_length = len(content)
        await response.prepare(request)
        await response.write(content[: len(content) // 2])
        if self.stall_downloads:
            # Hold the stream open until the server shuts down
            await self._release.wait()
        else:
            request.transport.close()
        return response

    async def _delete(self, request: web.Request) -> web.Response:
        failure = self._injected("delete")
        if failure is not None:
            return failure
        file_id = request.match_info["file_id"]
        if file_id not in self.files:
            return _error(404, "notFound", f"File not found: {file_id}.")
        del self.files[file_id]
        del self.content[file_id]
        return web.Response(status=204)

    # endregion
