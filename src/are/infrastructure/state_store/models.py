"""
Data models for the state store.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


class StateStoreError(Exception):
    """Base exception for state store errors."""
    pass


class SchemaVersionError(StateStoreError):
    """Raised when the on-disk schema is newer than this code supports."""

    def __init__(self, stored_version: int, expected_version: int):
        self.stored_version = stored_version
        self.expected_version = expected_version
        super().__init__(
            f"State database schema version {stored_version} is newer than the "
            f"supported version {expected_version}; refusing to downgrade. "
            f"Upgrade the tool or remove the state database to start over."
        )


class MigrationError(StateStoreError):
    """Raised when a schema migration fails and is rolled back."""

    def __init__(self, message: str, from_version: int, target_version: int):
        self.from_version = from_version
        self.target_version = target_version
        super().__init__(message)


@dataclass
class FileRecord:
    """
    Generation state of one project file.

    Attributes:
        path: Path relative to the project root (POSIX separators), unique key
        content_hash: SHA-256 hex digest of the file's bytes
        generated_at: When the summary was generated (None if never)
        last_analyzed_commit: Commit id at the time of the last analysis
    """
    path: str
    content_hash: str
    generated_at: Optional[datetime] = None
    last_analyzed_commit: Optional[str] = None


@dataclass
class RunRecord:
    """
    Ledger entry for one completed run.

    ``id`` is assigned by the store on insert and is None before that.
    """
    commit_hash: str
    completed_at: datetime
    files_analyzed: int
    files_skipped: int
    id: Optional[int] = None
