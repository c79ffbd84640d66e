"""
Core utilities shared across drive-storage.
"""

from .formatting import format_size, format_timestamp, sanitize_filename, unique_filename

__all__ = [
    "format_size",
    "format_timestamp",
    "sanitize_filename",
    "unique_filename",
]
