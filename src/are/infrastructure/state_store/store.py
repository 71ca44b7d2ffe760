"""
State store implementation.

SQLite-based durable record of per-file content hashes and the run ledger,
the source of truth for what changed since the last run.
"""

import logging
import sqlite3
import threading
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Iterator, List, Optional

from .models import FileRecord, RunRecord, StateStoreError
from .schema import CURRENT_SCHEMA_VERSION, migrate_schema

logger = logging.getLogger(__name__)

STATE_DIR_NAME = ".are"
STATE_DB_NAME = "state.db"


def _format_timestamp(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    return datetime.fromisoformat(value) if value else None


def _row_to_file(row: sqlite3.Row) -> FileRecord:
    return FileRecord(
        path=row["path"],
        content_hash=row["content_hash"],
        generated_at=_parse_timestamp(row["sum_generated_at"]),
        last_analyzed_commit=row["last_analyzed_commit"],
    )


def _row_to_run(row: sqlite3.Row) -> RunRecord:
    return RunRecord(
        id=row["id"],
        commit_hash=row["commit_hash"],
        completed_at=datetime.fromisoformat(row["completed_at"]),
        files_analyzed=row["files_analyzed"],
        files_skipped=row["files_skipped"],
    )


class StateStore:
    """
    SQLite-based generation state storage.

    Tracks file content hashes and an append-only run ledger for
    incremental generation. The schema version is reconciled when the
    connection is opened, before any read or write. All statements go
    through one connection guarded by a lock, so writes are serialized.
    """

    def __init__(self, db_path: Path | str):
        self._db_path = Path(db_path)
        self._conn: Optional[sqlite3.Connection] = None
        self._lock = threading.RLock()
        self._schema_version: Optional[int] = None

    @property
    def db_path(self) -> Path:
        return self._db_path

    @property
    def schema_version(self) -> Optional[int]:
        """Schema version after opening, None while closed."""
        return self._schema_version

    def open(self) -> "StateStore":
        """
        Open the database and reconcile its schema version.

        Raises:
            SchemaVersionError: If the database was written by a newer version
            MigrationError: If a migration failed (rolled back)
            StateStoreError: If the database cannot be opened
        """
        self._get_connection()
        return self

    def _get_connection(self) -> sqlite3.Connection:
        """Get or create database connection."""
        with self._lock:
            if self._conn is not None:
                return self._conn

            try:
                self._db_path.parent.mkdir(parents=True, exist_ok=True)
                conn = sqlite3.connect(
                    str(self._db_path), isolation_level=None, check_same_thread=False
                )
            except (OSError, sqlite3.Error) as e:
                raise StateStoreError(f"Failed to open state database {self._db_path}: {e}") from e

            try:
                conn.row_factory = sqlite3.Row
                conn.execute("PRAGMA journal_mode=WAL;")
                conn.execute("PRAGMA busy_timeout=5000;")
                self._schema_version = migrate_schema(conn, CURRENT_SCHEMA_VERSION)
            except sqlite3.Error as e:
                conn.close()
                raise StateStoreError(f"Failed to initialize state database: {e}") from e
            except StateStoreError:
                conn.close()
                raise

            self._conn = conn
            logger.debug(
                f"Opened state store: {self._db_path} (schema version {self._schema_version})"
            )
            return conn

    @contextmanager
    def _transaction(self) -> Iterator[sqlite3.Connection]:
        """Serialized write transaction; rolled back on any error."""
        with self._lock:
            conn = self._get_connection()
            conn.execute("BEGIN IMMEDIATE")
            try:
                yield conn
            except BaseException:
                conn.execute("ROLLBACK")
                raise
            conn.execute("COMMIT")

    # ─────────────────────────────────────────────────────────────────
    # File Operations
    # ─────────────────────────────────────────────────────────────────

    def get_file(self, path: str) -> Optional[FileRecord]:
        """Get the record for a file, or None if absent."""
        try:
            with self._lock:
                row = self._get_connection().execute(
                    "SELECT * FROM files WHERE path = ?", (path,)
                ).fetchone()
        except sqlite3.Error as e:
            raise StateStoreError(f"Failed to get file record: {e}") from e
        return _row_to_file(row) if row is not None else None

    def upsert_file(self, record: FileRecord) -> None:
        """Insert or fully replace the record for ``record.path``."""
        try:
            with self._transaction() as conn:
                conn.execute(
                    """
                    INSERT INTO files (path, content_hash, sum_generated_at, last_analyzed_commit)
                    VALUES (?, ?, ?, ?)
                    ON CONFLICT(path) DO UPDATE SET
                        content_hash = excluded.content_hash,
                        sum_generated_at = excluded.sum_generated_at,
                        last_analyzed_commit = excluded.last_analyzed_commit
                    """,
                    (
                        record.path,
                        record.content_hash,
                        _format_timestamp(record.generated_at),
                        record.last_analyzed_commit,
                    ),
                )
        except sqlite3.Error as e:
            raise StateStoreError(f"Failed to upsert file record: {e}") from e

    def delete_file(self, path: str) -> bool:
        """Delete a file record. Returns True if deleted, False if absent."""
        try:
            with self._transaction() as conn:
                cursor = conn.execute("DELETE FROM files WHERE path = ?", (path,))
                return cursor.rowcount > 0
        except sqlite3.Error as e:
            raise StateStoreError(f"Failed to delete file record: {e}") from e

    def get_all_files(self) -> List[FileRecord]:
        """Get all file records (order not significant)."""
        try:
            with self._lock:
                rows = self._get_connection().execute("SELECT * FROM files").fetchall()
        except sqlite3.Error as e:
            raise StateStoreError(f"Failed to get all file records: {e}") from e
        return [_row_to_file(row) for row in rows]

    def get_all_file_hashes(self) -> dict[str, str]:
        """Get all file paths and their content hashes."""
        return {record.path: record.content_hash for record in self.get_all_files()}

    # ─────────────────────────────────────────────────────────────────
    # Run Ledger
    # ─────────────────────────────────────────────────────────────────

    def get_last_run(self) -> Optional[RunRecord]:
        """Get the most recent run by id, or None if no run was recorded."""
        try:
            with self._lock:
                row = self._get_connection().execute(
                    "SELECT * FROM runs ORDER BY id DESC LIMIT 1"
                ).fetchone()
        except sqlite3.Error as e:
            raise StateStoreError(f"Failed to get last run: {e}") from e
        return _row_to_run(row) if row is not None else None

    def get_runs(self, limit: Optional[int] = None) -> List[RunRecord]:
        """Get recorded runs, newest first."""
        query = "SELECT * FROM runs ORDER BY id DESC"
        params: tuple = ()
        if limit is not None:
            query += " LIMIT ?"
            params = (limit,)
        try:
            with self._lock:
                rows = self._get_connection().execute(query, params).fetchall()
        except sqlite3.Error as e:
            raise StateStoreError(f"Failed to get runs: {e}") from e
        return [_row_to_run(row) for row in rows]

    def insert_run(self, run: RunRecord) -> int:
        """
        Append a run to the ledger.

        Args:
            run: Run to record; its id must be None

        Returns:
            The id assigned to the run
        """
        if run.id is not None:
            raise ValueError("Run ids are assigned by the store; pass a run without id")
        try:
            with self._transaction() as conn:
                cursor = conn.execute(
                    """
                    INSERT INTO runs (commit_hash, completed_at, files_analyzed, files_skipped)
                    VALUES (?, ?, ?, ?)
                    """,
                    (
                        run.commit_hash,
                        run.completed_at.isoformat(),
                        run.files_analyzed,
                        run.files_skipped,
                    ),
                )
                run_id = cursor.lastrowid
        except sqlite3.Error as e:
            raise StateStoreError(f"Failed to insert run: {e}") from e
        if run_id is None:
            raise StateStoreError("Failed to insert run: no row id was assigned")
        return run_id

    # ─────────────────────────────────────────────────────────────────
    # Lifecycle
    # ─────────────────────────────────────────────────────────────────

    def close(self) -> None:
        """Close the database connection. Safe to call more than once."""
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None
                self._schema_version = None

    def __enter__(self) -> "StateStore":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def default_state_path(root: Path | str) -> Path:
    """Fixed state database location relative to a project root."""
    return Path(root) / STATE_DIR_NAME / STATE_DB_NAME


def create_state_store(db_path: Path | str) -> StateStore:
    """Factory function to create and open a state store."""
    return StateStore(db_path).open()
