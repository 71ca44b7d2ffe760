"""
Data models and constants for the discovery module.
"""

from dataclasses import dataclass, field
from pathlib import Path

# Version-control metadata directories the walker never descends into,
# regardless of user filters.
ALWAYS_EXCLUDED_DIRS: frozenset[str] = frozenset([".git", ".hg", ".svn"])

# Dependency and build-artifact directories excluded by the vendor filter.
DEFAULT_VENDOR_DIRS: tuple[str, ...] = (
    "node_modules",
    "vendor",
    ".git",
    "dist",
    "build",
    "__pycache__",
    ".next",
    "venv",
    ".venv",
    "target",
)

# Extensions treated as binary without reading the file.
BINARY_EXTENSIONS: frozenset[str] = frozenset([
    # Images
    ".png", ".jpg", ".jpeg", ".gif", ".bmp", ".ico", ".webp", ".tiff",
    # Archives
    ".zip", ".tar", ".gz", ".tgz", ".bz2", ".xz", ".7z", ".rar", ".jar",
    # Compiled artifacts
    ".exe", ".dll", ".so", ".dylib", ".o", ".a", ".class", ".pyc", ".pyo", ".wasm",
    # Documents and media
    ".pdf", ".mp3", ".mp4", ".mov", ".avi", ".wav", ".ogg",
    # Fonts
    ".woff", ".woff2", ".ttf", ".otf", ".eot",
    # Databases
    ".db", ".sqlite", ".sqlite3",
])


@dataclass(frozen=True)
class ExcludedFile:
    """
    Record of a discovered file that a filter excluded.

    Attributes:
        path: Absolute path to the excluded file
        reason: Human-readable reason for the exclusion
        filter_name: Name of the filter that excluded the file
    """

    path: Path
    reason: str
    filter_name: str


@dataclass
class FilterResult:
    """
    Result of running the filter chain over discovered paths.

    Every discovered path appears in exactly one of the two lists;
    ``included`` keeps walker discovery order.
    """

    included: list[Path] = field(default_factory=list)
    excluded: list[ExcludedFile] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.included) + len(self.excluded)

    def excluded_by(self, filter_name: str) -> list[ExcludedFile]:
        """Return exclusions attributed to one filter."""
        return [e for e in self.excluded if e.filter_name == filter_name]


@dataclass
class WalkerOptions:
    """
    Options for the directory walker.

    Attributes:
        follow_symlinks: Follow symbolic links (default False to avoid cycles)
        include_dotfiles: Include files and directories starting with '.'
    """

    follow_symlinks: bool = False
    include_dotfiles: bool = True
