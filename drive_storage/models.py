"""
Data models for drive-storage.

RemoteObject is a snapshot of a Drive file as reported by the API.
TransferRequest describes an upload before it happens.
"""

import mimetypes
import os
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import BinaryIO, Optional, Union

from .constants import DEFAULT_MIME_TYPE


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse a Drive RFC 3339 timestamp (e.g. 2024-01-02T03:04:05.678Z)."""
    if not value:
        return None
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return datetime.fromisoformat(value)


@dataclass(frozen=True, eq=False)
class RemoteObject:
    """
    A file stored on Drive.

    Only ever built from an API response; the ID is assigned by Drive.
    Instances are disconnected snapshots: re-fetch to observe changes.
    """
    id: str
    name: str
    mime_type: str
    size_bytes: int = 0
    created_at: Optional[datetime] = None
    modified_at: Optional[datetime] = None
    view_url: Optional[str] = None
    download_url: Optional[str] = None

    def __eq__(self, other: object) -> bool:
        if isinstance(other, RemoteObject):
            return self.id == other.id
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.id)

    @classmethod
    def from_api(cls, data: dict) -> "RemoteObject":
        """
        Build from a Drive file resource.

        Google-native documents report no size; those become 0.
        """
        return cls(
            id=data["id"],
            name=data.get("name", ""),
            mime_type=data.get("mimeType", ""),
            size_bytes=int(data.get("size") or 0),
            created_at=parse_timestamp(data.get("createdTime")),
            modified_at=parse_timestamp(data.get("modifiedTime")),
            view_url=data.get("webViewLink"),
            download_url=data.get("webContentLink"),
        )


@dataclass(frozen=True)
class TransferRequest:
    """
    A pending upload.

    Exactly one of ``source_path`` or ``stream`` must be given. A stream is
    owned by the caller and is not closed by the upload.
    """
    name: str
    mime_type: Optional[str] = None
    source_path: Optional[Union[str, Path]] = None
    stream: Optional[BinaryIO] = field(default=None, repr=False)

    def __post_init__(self):
        if not self.name or not self.name.strip():
            raise ValueError("name must be a non-empty string")
        if (self.source_path is None) == (self.stream is None):
            raise ValueError("exactly one of source_path or stream is required")

    @property
    def content_type(self) -> str:
        """Declared MIME type, or one guessed from the name."""
        if self.mime_type:
            return self.mime_type
        guessed, _ = mimetypes.guess_type(self.name)
        return guessed or DEFAULT_MIME_TYPE

    @property
    def size(self) -> Optional[int]:
        """Payload length in bytes, or None when it can't be known up front."""
        if self.source_path is not None:
            return os.stat(self.source_path).st_size
        try:
            if not self.stream.seekable():
                return None
            pos = self.stream.tell()
            end = self.stream.seek(0, os.SEEK_END)
            self.stream.seek(pos)
            return end - pos
        except (AttributeError, OSError):
            return None
