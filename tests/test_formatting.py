"""
Tests for formatting helpers.
"""

from datetime import datetime, timedelta, timezone

import pytest

from drive_storage.core.formatting import (
    format_size,
    format_timestamp,
    sanitize_filename,
    unique_filename,
)


class TestSanitizeFilename:
    """Tests for sanitize_filename() - Drive names made safe for local disk."""

    def test_colon_becomes_space_dash(self):
        """Colon → ' -' (common in titles with subtitles)."""
        assert sanitize_filename("Title: Subtitle") == "Title - Subtitle"

    def test_question_mark_and_asterisk_removed(self):
        assert sanitize_filename("What?") == "What"
        assert sanitize_filename("Best*Clip*Ever") == "BestClipEver"

    def test_slashes_become_dash(self):
        """Drive allows / in names; locally it would create directories."""
        assert sanitize_filename("2024/05/report.pdf") == "2024-05-report.pdf"
        assert sanitize_filename("AC\\DC") == "AC-DC"

    def test_double_quote_becomes_single(self):
        assert sanitize_filename('Say "Hello"') == "Say 'Hello'"

    def test_trailing_dots_and_spaces_stripped(self):
        assert sanitize_filename("file...") == "file"
        assert sanitize_filename("file   ") == "file"

    def test_windows_reserved_names_prefixed(self):
        assert sanitize_filename("CON") == "_CON"
        assert sanitize_filename("nul.txt") == "_nul.txt"
        assert sanitize_filename("COM1") == "_COM1"

    def test_control_characters_become_underscore(self):
        assert sanitize_filename("file\tname") == "file_name"
        assert sanitize_filename("a\x7fb") == "a_b"

    def test_multiple_illegal_chars(self):
        assert sanitize_filename('What?: "Yes" <No>') == "What - 'Yes' -No-"

    def test_normal_filename_unchanged(self):
        assert sanitize_filename("clip.mp4") == "clip.mp4"

    @pytest.mark.parametrize("name", ["", "...", "?*"])
    def test_nothing_left_becomes_underscore(self, name):
        """A name that sanitizes to nothing still yields a usable file name."""
        assert sanitize_filename(name) == "_"


class TestUniqueFilename:
    def test_timestamp_before_extension(self):
        assert unique_filename("clip.mp4", timestamp=1700000000) == "clip_1700000000000.mp4"

    def test_no_extension(self):
        assert unique_filename("README", timestamp=1.5) == "README_1500"

    def test_sanitizes_first(self):
        assert unique_filename("a/b.txt", timestamp=2) == "a-b_2000.txt"

    def test_defaults_to_now(self):
        name = unique_filename("a.txt")
        stem, _, _ = name.rpartition(".")
        assert stem.startswith("a_")
        assert int(stem[2:]) > 1_600_000_000_000


class TestFormatSize:
    @pytest.mark.parametrize("size,expected", [
        (0, "0.0 B"),
        (512, "512.0 B"),
        (1024, "1.0 KB"),
        (1536, "1.5 KB"),
        (1024 ** 2, "1.0 MB"),
        (5 * 1024 ** 3, "5.0 GB"),
    ])
    def test_sizes(self, size, expected):
        assert format_size(size) == expected


class TestFormatTimestamp:
    def test_none(self):
        assert format_timestamp(None) == "-"

    def test_datetime(self):
        value = datetime(2024, 5, 1, 12, 30, 45, tzinfo=timezone.utc)
        assert format_timestamp(value) == "2024-05-01 12:30"

    def test_converted_to_utc(self):
        value = datetime(2024, 5, 1, 14, 30, tzinfo=timezone(timedelta(hours=2)))
        assert format_timestamp(value) == "2024-05-01 12:30"
