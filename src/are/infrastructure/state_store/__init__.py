"""
State Store module for the generation engine.

SQLite-based storage for per-file content hashes and the run ledger.
"""

from .models import (
    FileRecord,
    MigrationError,
    RunRecord,
    SchemaVersionError,
    StateStoreError,
)
from .schema import (
    CURRENT_SCHEMA_VERSION,
    MIGRATIONS,
    Migration,
    get_schema_version,
    migrate_schema,
)
from .store import (
    STATE_DB_NAME,
    STATE_DIR_NAME,
    StateStore,
    create_state_store,
    default_state_path,
)

__all__ = [
    # Main classes
    "StateStore",
    "FileRecord",
    "RunRecord",
    # Errors
    "StateStoreError",
    "SchemaVersionError",
    "MigrationError",
    # Schema
    "Migration",
    "MIGRATIONS",
    "CURRENT_SCHEMA_VERSION",
    "get_schema_version",
    "migrate_schema",
    # Factory
    "create_state_store",
    "default_state_path",
    # Constants
    "STATE_DIR_NAME",
    "STATE_DB_NAME",
]
