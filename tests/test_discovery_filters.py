"""
Unit tests for discovery filters.

Covers vendor segment matching, .gitignore handling (including the
fail-open cases), binary detection and custom patterns.
"""

import logging
import os
import stat
import sys
import tempfile
from pathlib import Path

import pytest

from are.core.discovery import (
    BinaryFilter,
    CustomPatternFilter,
    FileFilter,
    GitignoreFilter,
    VendorFilter,
)


class TestVendorFilter:
    """Segment-based vendor directory exclusion."""

    @pytest.mark.asyncio
    async def test_node_modules_file_is_excluded(self):
        vendor = VendorFilter(["node_modules", "vendor"])
        path = Path("/repo/node_modules/lodash/index.js")

        assert await vendor.should_exclude(path)
        assert vendor.name == "vendor"
        assert "node_modules" in vendor.exclusion_reason(path)

    @pytest.mark.asyncio
    async def test_source_file_is_included(self):
        vendor = VendorFilter(["node_modules", "vendor"])
        assert not await vendor.should_exclude(Path("/repo/src/utils.js"))

    @pytest.mark.asyncio
    async def test_substring_does_not_match(self):
        vendor = VendorFilter(["vendor"])
        assert not await vendor.should_exclude(Path("/repo/vendored/lib.js"))
        assert not await vendor.should_exclude(Path("/repo/src/my_vendor.js"))

    @pytest.mark.asyncio
    async def test_matching_is_case_sensitive(self):
        vendor = VendorFilter(["build"])
        assert not await vendor.should_exclude(Path("/repo/Build/out.js"))

    @pytest.mark.asyncio
    async def test_segments_above_root_are_ignored(self):
        vendor = VendorFilter(["build"], root=Path("/home/build/project"))

        assert not await vendor.should_exclude(Path("/home/build/project/src/main.js"))
        assert await vendor.should_exclude(Path("/home/build/project/build/out.js"))

    def test_default_denylist(self):
        vendor = VendorFilter()
        assert {"node_modules", "vendor", ".git", "dist", "build", "__pycache__"} <= vendor.vendor_dirs

    def test_is_a_file_filter(self):
        assert isinstance(VendorFilter(), FileFilter)


class TestGitignoreFilter:
    """Root .gitignore matching."""

    @pytest.mark.asyncio
    async def test_matching_file_is_excluded(self, tmp_path):
        (tmp_path / ".gitignore").write_text("*.log\nbuild/\n")
        gitignore = GitignoreFilter.from_root(tmp_path)

        assert gitignore.name == "gitignore"
        assert gitignore.pattern_count == 2
        assert await gitignore.should_exclude(tmp_path / "debug.log")
        assert await gitignore.should_exclude(tmp_path / "build" / "main.js")
        assert not await gitignore.should_exclude(tmp_path / "src" / "main.js")

    @pytest.mark.asyncio
    async def test_negation_pattern(self, tmp_path):
        (tmp_path / ".gitignore").write_text("*.log\n!keep.log\n")
        gitignore = GitignoreFilter.from_root(tmp_path)

        assert await gitignore.should_exclude(tmp_path / "other.log")
        assert not await gitignore.should_exclude(tmp_path / "keep.log")

    @pytest.mark.asyncio
    async def test_comments_and_blank_lines_are_ignored(self, tmp_path):
        (tmp_path / ".gitignore").write_text("# comment\n\n*.tmp\n")
        gitignore = GitignoreFilter.from_root(tmp_path)

        assert gitignore.pattern_count == 1
        assert await gitignore.should_exclude(tmp_path / "a.tmp")

    @pytest.mark.asyncio
    async def test_missing_gitignore_excludes_nothing(self, tmp_path):
        gitignore = GitignoreFilter.from_root(tmp_path)

        assert gitignore.pattern_count == 0
        assert not await gitignore.should_exclude(tmp_path / "anything.log")

    @pytest.mark.asyncio
    async def test_path_outside_root_is_not_excluded(self, tmp_path):
        (tmp_path / ".gitignore").write_text("*.log\n")
        gitignore = GitignoreFilter.from_root(tmp_path)

        with tempfile.TemporaryDirectory() as other:
            assert not await gitignore.should_exclude(Path(other) / "debug.log")

    @pytest.mark.asyncio
    async def test_root_itself_is_not_excluded(self, tmp_path):
        (tmp_path / ".gitignore").write_text("*\n")
        gitignore = GitignoreFilter.from_root(tmp_path)

        assert not await gitignore.should_exclude(tmp_path)

    @pytest.mark.asyncio
    async def test_invalid_utf8_excludes_nothing(self, tmp_path, caplog):
        (tmp_path / ".gitignore").write_bytes(b"*.log\n\xff\xfe invalid\n")

        with caplog.at_level(logging.WARNING):
            gitignore = GitignoreFilter.from_root(tmp_path)

        assert gitignore.pattern_count == 0
        assert not await gitignore.should_exclude(tmp_path / "debug.log")
        assert any("Invalid UTF-8" in record.message for record in caplog.records)

    @pytest.mark.asyncio
    @pytest.mark.skipif(sys.platform == "win32", reason="POSIX permissions")
    @pytest.mark.skipif(hasattr(os, "geteuid") and os.geteuid() == 0, reason="root ignores permissions")
    async def test_unreadable_gitignore_excludes_nothing(self, tmp_path):
        gitignore_path = tmp_path / ".gitignore"
        gitignore_path.write_text("*.log\n")
        gitignore_path.chmod(0)
        try:
            gitignore = GitignoreFilter.from_root(tmp_path)
        finally:
            gitignore_path.chmod(stat.S_IRUSR | stat.S_IWUSR)

        assert not await gitignore.should_exclude(tmp_path / "debug.log")


class TestBinaryFilter:
    """Binary and oversized file exclusion."""

    @pytest.mark.asyncio
    async def test_binary_extension_is_excluded_without_reading(self, tmp_path):
        binary = BinaryFilter()
        missing = tmp_path / "logo.PNG"

        assert await binary.should_exclude(missing)
        assert "binary extension" in binary.exclusion_reason(missing)

    @pytest.mark.asyncio
    async def test_nul_byte_content_is_excluded(self, tmp_path):
        path = tmp_path / "data.bin2"
        path.write_bytes(b"abc\x00def")

        assert await BinaryFilter().should_exclude(path)

    @pytest.mark.asyncio
    async def test_text_file_is_included(self, tmp_path):
        path = tmp_path / "main.py"
        path.write_text("print('hello')\n")

        assert not await BinaryFilter().should_exclude(path)

    @pytest.mark.asyncio
    async def test_oversized_file_is_excluded(self, tmp_path):
        path = tmp_path / "huge.txt"
        path.write_text("x" * 200)

        assert await BinaryFilter(max_size_bytes=100).should_exclude(path)

    @pytest.mark.asyncio
    async def test_size_from_stats_is_used(self, tmp_path):
        path = tmp_path / "small.txt"
        path.write_text("x")
        stats = os.stat_result((0, 0, 0, 0, 0, 0, 10_000, 0, 0, 0))

        assert await BinaryFilter(max_size_bytes=100).should_exclude(path, stats)

    @pytest.mark.asyncio
    async def test_missing_file_is_not_excluded(self, tmp_path):
        assert not await BinaryFilter().should_exclude(tmp_path / "gone.txt")


class TestCustomPatternFilter:
    """User-supplied exclude patterns."""

    @pytest.mark.asyncio
    async def test_patterns_match_relative_paths(self, tmp_path):
        custom = CustomPatternFilter(tmp_path, ["*.generated.ts", "fixtures/"])

        assert custom.name == "custom"
        assert await custom.should_exclude(tmp_path / "src" / "api.generated.ts")
        assert await custom.should_exclude(tmp_path / "fixtures" / "data.json")
        assert not await custom.should_exclude(tmp_path / "src" / "api.ts")

    @pytest.mark.asyncio
    async def test_empty_patterns_exclude_nothing(self, tmp_path):
        custom = CustomPatternFilter(tmp_path, [])
        assert not await custom.should_exclude(tmp_path / "src" / "api.ts")
