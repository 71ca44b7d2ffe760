"""
Change detection data models.

Contains dataclasses for change sets, work units and run results.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional

from are.core.chunker import Chunk
from are.core.detection import FileType


class ChangeKind(str, Enum):
    """How a discovered file relates to its stored record."""

    UNCHANGED = "unchanged"
    CHANGED = "changed"
    NEW = "new"
    VANISHED = "vanished"


@dataclass
class ChangedFile:
    """A file that needs processing this run."""

    path: str
    absolute_path: Path
    content_hash: str
    kind: ChangeKind


@dataclass
class ChangeSet:
    """
    Partition of discovered and stored files.

    Paths are relative to the project root. ``unreadable`` lists discovered
    files whose content could not be hashed; they are left out of the
    partition and retried next run.
    """

    unchanged: list[str] = field(default_factory=list)
    changed: list[ChangedFile] = field(default_factory=list)
    new: list[ChangedFile] = field(default_factory=list)
    vanished: list[str] = field(default_factory=list)
    unreadable: list[str] = field(default_factory=list)

    @property
    def to_process(self) -> list[ChangedFile]:
        """New and changed files, in path order."""
        return sorted(self.new + self.changed, key=lambda f: f.path)

    @property
    def has_changes(self) -> bool:
        return bool(self.changed or self.new or self.vanished)


@dataclass
class WorkUnit:
    """
    A file or chunk scheduled for the summarization collaborator.

    ``chunk`` is None when the whole file fits the token budget.
    """

    path: str
    absolute_path: Path
    file_type: FileType
    content: str
    token_count: int
    chunk: Optional[Chunk] = None
    total_chunks: int = 1

    @property
    def is_chunk(self) -> bool:
        return self.chunk is not None


class ProcessingError(Exception):
    """Raised (and collected) when processing a single file fails."""

    def __init__(self, path: str, message: str):
        self.path = path
        super().__init__(f"{path}: {message}")


@dataclass
class RunResult:
    """Result of one generation run."""

    run_id: Optional[int] = None
    commit_hash: str = ""
    files_analyzed: int = 0
    files_skipped: int = 0
    files_deleted: int = 0
    failures: list[ProcessingError] = field(default_factory=list)
    duration_seconds: float = 0.0

    @property
    def files_failed(self) -> int:
        return len(self.failures)

    @property
    def failed_paths(self) -> list[str]:
        return [failure.path for failure in self.failures]
