"""
State store schema definitions and migrations.

The schema version lives in SQLite's ``user_version`` header field, next to
the data. Migrations form an ordered list, each tagged with the version it
produces; pending steps and the version bump commit in one transaction.
"""

import logging
import sqlite3
from dataclasses import dataclass
from typing import Sequence

from .models import MigrationError, SchemaVersionError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Migration:
    """One schema step producing ``version``."""
    version: int
    description: str
    statements: tuple[str, ...]


MIGRATIONS: tuple[Migration, ...] = (
    Migration(
        version=1,
        description="create files and runs tables",
        statements=(
            """
            CREATE TABLE files (
                path TEXT PRIMARY KEY,
                content_hash TEXT NOT NULL,
                sum_generated_at TEXT,
                last_analyzed_commit TEXT
            )
            """,
            """
            CREATE TABLE runs (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                commit_hash TEXT NOT NULL,
                completed_at TEXT NOT NULL,
                files_analyzed INTEGER NOT NULL,
                files_skipped INTEGER NOT NULL
            )
            """,
            "CREATE INDEX idx_runs_commit ON runs(commit_hash)",
        ),
    ),
)

CURRENT_SCHEMA_VERSION = max(m.version for m in MIGRATIONS)


def get_schema_version(conn: sqlite3.Connection) -> int:
    """Read the stored schema version (0 for a fresh database)."""
    return conn.execute("PRAGMA user_version").fetchone()[0]


def migrate_schema(
    conn: sqlite3.Connection,
    target_version: int = CURRENT_SCHEMA_VERSION,
    migrations: Sequence[Migration] = MIGRATIONS,
) -> int:
    """
    Bring the database schema up to ``target_version``.

    The version is read inside the write transaction, so a second process
    opening the same database waits for a running migration and then finds
    the schema current. The connection must be in autocommit mode
    (``isolation_level=None``) so the transaction boundaries here are the
    only ones in effect.

    Args:
        conn: Open SQLite connection
        target_version: Version the code expects
        migrations: Ordered migration steps

    Returns:
        The schema version after reconciliation

    Raises:
        SchemaVersionError: If the stored version is above target_version
        MigrationError: If a step fails; nothing is applied in that case
    """
    conn.execute("BEGIN IMMEDIATE")
    try:
        stored_version = get_schema_version(conn)
        if stored_version > target_version:
            raise SchemaVersionError(stored_version, target_version)
    except BaseException:
        conn.execute("ROLLBACK")
        raise

    if stored_version == target_version:
        conn.execute("COMMIT")
        return stored_version

    pending = sorted(
        (m for m in migrations if stored_version < m.version <= target_version),
        key=lambda m: m.version,
    )

    try:
        for migration in pending:
            logger.info(
                f"Migrating state database to version {migration.version}: "
                f"{migration.description}"
            )
            for statement in migration.statements:
                conn.execute(statement)
        conn.execute(f"PRAGMA user_version = {int(target_version)}")
        conn.execute("COMMIT")
    except BaseException as e:
        conn.execute("ROLLBACK")
        if isinstance(e, sqlite3.Error):
            raise MigrationError(
                f"Schema migration from version {stored_version} to {target_version} "
                f"failed and was rolled back: {e}",
                from_version=stored_version,
                target_version=target_version,
            ) from e
        raise

    return target_version
