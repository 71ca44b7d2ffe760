"""
Discovery filter implementations.

Each filter owns an immutable configuration built once at construction time
(compiled pattern set, denylist) and decides exclusion per file. Filters fail
open: a configuration that cannot be read or parsed yields a filter that
excludes nothing.
"""

import asyncio
import logging
import os
from pathlib import Path
from typing import Iterable, Optional

import pathspec

from .interfaces import FileFilter
from .models import BINARY_EXTENSIONS, DEFAULT_VENDOR_DIRS

logger = logging.getLogger(__name__)

GITIGNORE_FILENAME = ".gitignore"

# Bytes sniffed for NUL characters when deciding if a file is binary.
BINARY_SNIFF_BYTES = 8192

# Files larger than this are excluded by the binary filter (10 MB).
DEFAULT_MAX_FILE_SIZE = 10 * 1024 * 1024


def _read_pattern_lines(pattern_file: Path) -> list[str]:
    """
    Read gitignore-style pattern lines from a file.

    Returns an empty list when the file is missing or unreadable.
    """
    if not pattern_file.exists():
        logger.debug(f"Pattern file not found: {pattern_file}")
        return []

    try:
        content = pattern_file.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        logger.warning(f"Invalid UTF-8 encoding in {pattern_file}: {e}")
        return []
    except PermissionError as e:
        logger.warning(f"Permission denied reading {pattern_file}: {e}")
        return []
    except OSError as e:
        logger.warning(f"Error reading {pattern_file}: {e}")
        return []

    return content.splitlines()


def _compile_patterns(lines: Iterable[str], source: str) -> Optional[pathspec.PathSpec]:
    """
    Compile gitignore-style lines into a PathSpec.

    Returns None (match nothing) for an empty or malformed pattern set.
    """
    lines = [line for line in lines if line.strip() and not line.lstrip().startswith("#")]
    if not lines:
        return None

    try:
        return pathspec.GitIgnoreSpec.from_lines(lines)
    except (ValueError, TypeError) as e:
        logger.warning(f"Malformed ignore patterns in {source}, ignoring them: {e}")
        return None


def _relative_posix(root: Path, path: Path) -> Optional[str]:
    """Root-relative POSIX path, or None for paths outside or equal to root."""
    try:
        rel = Path(path).relative_to(root)
    except ValueError:
        return None
    rel_str = rel.as_posix()
    if not rel_str or rel_str == ".":
        return None
    return rel_str


class GitignoreFilter(FileFilter):
    """
    Excludes files matching the root .gitignore.

    Only the root's .gitignore is consulted. Paths outside the root, and the
    root itself, are never excluded.
    """

    def __init__(self, root: Path, spec: Optional[pathspec.PathSpec] = None):
        self._root = Path(root).resolve()
        self._spec = spec

    @classmethod
    def from_root(cls, root: Path) -> "GitignoreFilter":
        """
        Create a filter from ``<root>/.gitignore``.

        A missing or unreadable file yields a filter that excludes nothing.
        """
        root = Path(root).resolve()
        gitignore_path = root / GITIGNORE_FILENAME
        spec = _compile_patterns(_read_pattern_lines(gitignore_path), str(gitignore_path))
        if spec is not None:
            logger.debug(f"Loaded {len(spec.patterns)} patterns from {gitignore_path}")
        return cls(root, spec)

    @property
    def name(self) -> str:
        return "gitignore"

    @property
    def pattern_count(self) -> int:
        return len(self._spec.patterns) if self._spec is not None else 0

    async def should_exclude(
        self, path: Path, stats: Optional[os.stat_result] = None
    ) -> bool:
        if self._spec is None:
            return False
        rel_path = _relative_posix(self._root, path)
        if rel_path is None:
            return False
        return self._spec.match_file(rel_path)

    def exclusion_reason(self, path: Path) -> str:
        return "matches .gitignore pattern"


class VendorFilter(FileFilter):
    """
    Excludes files inside dependency or build-artifact directories.

    A path is excluded when any of its segments exactly equals a denylisted
    directory name. Matching is case-sensitive and never on substrings.
    With a root, only segments below the root are considered.
    """

    def __init__(
        self,
        vendor_dirs: Iterable[str] = DEFAULT_VENDOR_DIRS,
        root: Optional[Path] = None,
    ):
        self._vendor_dirs: frozenset[str] = frozenset(vendor_dirs)
        self._root = Path(root).resolve() if root is not None else None

    @property
    def name(self) -> str:
        return "vendor"

    @property
    def vendor_dirs(self) -> frozenset[str]:
        return self._vendor_dirs

    def _matching_segment(self, path: Path) -> Optional[str]:
        parts = Path(path).parts
        if self._root is not None:
            rel_path = _relative_posix(self._root, path)
            if rel_path is not None:
                parts = tuple(rel_path.split("/"))
        for segment in parts:
            if segment in self._vendor_dirs:
                return segment
        return None

    async def should_exclude(
        self, path: Path, stats: Optional[os.stat_result] = None
    ) -> bool:
        return self._matching_segment(path) is not None

    def exclusion_reason(self, path: Path) -> str:
        segment = self._matching_segment(path)
        return f"inside vendor directory '{segment}'"


class BinaryFilter(FileFilter):
    """
    Excludes binary and oversized files.

    Checks, in order: known binary extensions, file size, and a NUL byte in
    the first 8 KiB of content. Files that cannot be read are not excluded.
    """

    def __init__(
        self,
        extensions: Iterable[str] = BINARY_EXTENSIONS,
        max_size_bytes: int = DEFAULT_MAX_FILE_SIZE,
    ):
        self._extensions = frozenset(ext.lower() for ext in extensions)
        self._max_size_bytes = max_size_bytes

    @property
    def name(self) -> str:
        return "binary"

    async def should_exclude(
        self, path: Path, stats: Optional[os.stat_result] = None
    ) -> bool:
        path = Path(path)
        if path.suffix.lower() in self._extensions:
            return True
        return await asyncio.to_thread(self._inspect, path, stats)

    def _inspect(self, path: Path, stats: Optional[os.stat_result]) -> bool:
        try:
            size = stats.st_size if stats is not None else path.stat().st_size
            if size > self._max_size_bytes:
                logger.debug(f"Excluding large file ({size} bytes): {path}")
                return True
            with open(path, "rb") as f:
                head = f.read(BINARY_SNIFF_BYTES)
        except OSError as e:
            logger.debug(f"Could not inspect {path}, keeping it: {e}")
            return False
        return b"\x00" in head

    def exclusion_reason(self, path: Path) -> str:
        if Path(path).suffix.lower() in self._extensions:
            return f"binary extension '{Path(path).suffix}'"
        return "binary or oversized content"


class CustomPatternFilter(FileFilter):
    """
    Excludes files matching user-supplied gitignore-style patterns.

    Patterns are evaluated relative to the project root.
    """

    def __init__(self, root: Path, patterns: Iterable[str]):
        self._root = Path(root).resolve()
        self._spec = _compile_patterns(patterns, "custom patterns")

    @property
    def name(self) -> str:
        return "custom"

    async def should_exclude(
        self, path: Path, stats: Optional[os.stat_result] = None
    ) -> bool:
        if self._spec is None:
            return False
        rel_path = _relative_posix(self._root, path)
        if rel_path is None:
            return False
        return self._spec.match_file(rel_path)

    def exclusion_reason(self, path: Path) -> str:
        return "matches custom exclude pattern"
