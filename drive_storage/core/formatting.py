"""
Formatting helpers for drive-storage's command line.

Drive allows characters in file names that local filesystems don't, so
names coming back from the API are sanitized before being used as paths.
"""

import time
import unicodedata
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional


# ============================================================================
# Filename sanitization (cross-platform)
# ============================================================================

# Illegal characters mapped to safe alternatives
ILLEGAL_CHAR_MAP = {
    "<": "-",
    ">": "-",
    ":": " -",
    '"': "'",
    "\\": "-",
    "/": "-",
    "|": "-",
    "?": "",
    "*": "",
}

CONTROL_CHARS = set(chr(i) for i in range(32)) | {chr(127)}

WINDOWS_RESERVED_NAMES = {
    "CON", "PRN", "AUX", "NUL",
    "COM1", "COM2", "COM3", "COM4", "COM5", "COM6", "COM7", "COM8", "COM9",
    "LPT1", "LPT2", "LPT3", "LPT4", "LPT5", "LPT6", "LPT7", "LPT8", "LPT9",
}


def sanitize_filename(filename: str) -> str:
    """
    Turn a Drive file name into something safe to create locally.

    Handles:
    - Illegal characters: < > : " \\ / | ? * → safe equivalents
    - Control characters → _
    - Windows reserved names (CON, NUL, COM1...) → prefixed with _
    - Trailing dots and spaces → stripped
    """
    filename = unicodedata.normalize("NFC", filename or "")

    cleaned = []
    for char in filename:
        if char in ILLEGAL_CHAR_MAP:
            cleaned.append(ILLEGAL_CHAR_MAP[char])
        elif char in CONTROL_CHARS:
            cleaned.append("_")
        else:
            cleaned.append(char)
    filename = "".join(cleaned).rstrip(". ")

    if filename.upper().split(".")[0] in WINDOWS_RESERVED_NAMES:
        filename = "_" + filename

    return filename or "_"


def unique_filename(name: str, timestamp: Optional[float] = None) -> str:
    """
    Make an import filename that won't collide with earlier imports.

    "clip.mp4" -> "clip_1700000000000.mp4" (millisecond timestamp)
    """
    path = Path(sanitize_filename(name))
    stamp = int((time.time() if timestamp is None else timestamp) * 1000)
    return f"{path.stem}_{stamp}{path.suffix}"


# ============================================================================
# Display formatting
# ============================================================================

def format_size(size_bytes: int) -> str:
    """Format bytes as human readable string."""
    for unit in ["B", "KB", "MB", "GB", "TB"]:
        if size_bytes < 1024:
            return f"{size_bytes:.1f} {unit}"
        size_bytes /= 1024
    return f"{size_bytes:.1f} PB"


def format_timestamp(value: Optional[datetime]) -> str:
    """Short UTC timestamp for listings, or '-' when unknown."""
    if value is None:
        return "-"
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%d %H:%M")
