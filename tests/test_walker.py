"""
Unit tests for the directory walker.
"""

import logging
import os
import sys
from pathlib import Path

import pytest

from are.core.discovery import WalkerOptions, walk_directory, walk_directory_sync


def make_tree(root: Path, files: list[str]) -> None:
    for rel in files:
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(rel)


def relative(root: Path, paths: list[Path]) -> list[str]:
    return [p.relative_to(root).as_posix() for p in paths]


class TestWalkDirectory:
    """Enumeration order and built-in skips."""

    @pytest.mark.asyncio
    async def test_lists_files_depth_first_sorted(self, tmp_path):
        make_tree(tmp_path, ["b.txt", "a/z.py", "a/b/c.py", "c/d.js"])

        files = await walk_directory(tmp_path)

        assert relative(tmp_path, files) == ["a/b/c.py", "a/z.py", "b.txt", "c/d.js"]
        assert all(p.is_absolute() for p in files)

    @pytest.mark.asyncio
    async def test_version_control_dirs_are_skipped(self, tmp_path):
        make_tree(tmp_path, [".git/HEAD", ".hg/store", ".svn/entries", "src/main.py"])

        files = await walk_directory(tmp_path)

        assert relative(tmp_path, files) == ["src/main.py"]

    @pytest.mark.asyncio
    async def test_vendor_dirs_are_not_skipped_by_walker(self, tmp_path):
        make_tree(tmp_path, ["node_modules/x/index.js"])

        files = await walk_directory(tmp_path)

        assert relative(tmp_path, files) == ["node_modules/x/index.js"]

    @pytest.mark.asyncio
    async def test_dotfiles_included_by_default(self, tmp_path):
        make_tree(tmp_path, [".env.example", ".github/workflow.yml", "main.py"])

        files = await walk_directory(tmp_path)

        assert relative(tmp_path, files) == [".env.example", ".github/workflow.yml", "main.py"]

    @pytest.mark.asyncio
    async def test_dotfiles_can_be_excluded(self, tmp_path):
        make_tree(tmp_path, [".env.example", ".github/workflow.yml", "main.py"])

        files = await walk_directory(tmp_path, WalkerOptions(include_dotfiles=False))

        assert relative(tmp_path, files) == ["main.py"]

    def test_missing_root_returns_empty(self, tmp_path, caplog):
        with caplog.at_level(logging.ERROR):
            files = walk_directory_sync(tmp_path / "missing")

        assert files == []
        assert any("not a directory" in record.message for record in caplog.records)

    def test_file_root_returns_empty(self, tmp_path):
        make_tree(tmp_path, ["single.py"])
        assert walk_directory_sync(tmp_path / "single.py") == []


@pytest.mark.skipif(sys.platform == "win32", reason="symlinks need privileges on Windows")
class TestSymlinks:
    """Symlink handling."""

    def test_symlinks_skipped_by_default(self, tmp_path):
        make_tree(tmp_path, ["real/a.py"])
        (tmp_path / "link").symlink_to(tmp_path / "real", target_is_directory=True)
        (tmp_path / "alias.py").symlink_to(tmp_path / "real" / "a.py")

        files = walk_directory_sync(tmp_path)

        assert relative(tmp_path, files) == ["real/a.py"]

    def test_followed_symlinks_are_listed(self, tmp_path):
        make_tree(tmp_path, ["real/a.py"])
        (tmp_path / "link").symlink_to(tmp_path / "real", target_is_directory=True)

        files = walk_directory_sync(tmp_path, WalkerOptions(follow_symlinks=True))

        assert relative(tmp_path, files) == ["link/a.py", "real/a.py"]

    def test_symlink_cycle_terminates(self, tmp_path):
        make_tree(tmp_path, ["real/a.py"])
        (tmp_path / "real" / "loop").symlink_to(tmp_path / "real", target_is_directory=True)

        files = walk_directory_sync(tmp_path, WalkerOptions(follow_symlinks=True))

        assert relative(tmp_path, files) == ["real/a.py"]


@pytest.mark.skipif(sys.platform == "win32", reason="POSIX permissions")
@pytest.mark.skipif(hasattr(os, "geteuid") and os.geteuid() == 0, reason="root ignores permissions")
def test_unreadable_directory_is_skipped(tmp_path, caplog):
    make_tree(tmp_path, ["locked/secret.py", "open/main.py"])
    locked = tmp_path / "locked"
    locked.chmod(0)
    try:
        with caplog.at_level(logging.WARNING):
            files = walk_directory_sync(tmp_path)
    finally:
        locked.chmod(0o755)

    assert relative(tmp_path, files) == ["open/main.py"]
    assert any("Cannot list" in record.message for record in caplog.records)
