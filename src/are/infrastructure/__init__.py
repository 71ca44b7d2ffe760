"""
Infrastructure Layer - State store and version control access.
"""

from are.infrastructure.fakes import FakeTokenizer, RecordingSummarizer
from are.infrastructure.git import NO_COMMIT, get_current_commit
from are.infrastructure.state_store import (
    FileRecord,
    MigrationError,
    RunRecord,
    SchemaVersionError,
    StateStore,
    StateStoreError,
    create_state_store,
    default_state_path,
)

__all__ = [
    # State store
    "StateStore",
    "FileRecord",
    "RunRecord",
    "StateStoreError",
    "SchemaVersionError",
    "MigrationError",
    "create_state_store",
    "default_state_path",
    # Git
    "get_current_commit",
    "NO_COMMIT",
    # Fakes for testing
    "FakeTokenizer",
    "RecordingSummarizer",
]
