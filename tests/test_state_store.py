"""
Tests for the StateStore.

Covers file record CRUD, the run ledger and connection lifecycle.
"""

import tempfile
from contextlib import contextmanager
from datetime import datetime, timedelta, timezone
from pathlib import Path
from types import SimpleNamespace

import pytest
from hypothesis import given, settings, strategies as st

from are.infrastructure.state_store import (
    FileRecord,
    RunRecord,
    StateStore,
    StateStoreError,
    create_state_store,
    default_state_path,
)

# Strategies for generating test data
file_path_strategy = st.text(
    alphabet=st.characters(whitelist_categories=("L", "N"), whitelist_characters="/._-"),
    min_size=1,
    max_size=100,
).filter(lambda x: x.strip() != "")

content_hash_strategy = st.text(alphabet="0123456789abcdef", min_size=64, max_size=64)

commit_strategy = st.one_of(st.none(), st.text(alphabet="0123456789abcdef", min_size=40, max_size=40))


@st.composite
def file_record_strategy(draw):
    """Generate a valid FileRecord."""
    generated_at = draw(
        st.one_of(
            st.none(),
            st.datetimes(
                min_value=datetime(2000, 1, 1), max_value=datetime(2100, 1, 1), timezones=st.just(timezone.utc)
            ),
        )
    )
    return FileRecord(
        path=draw(file_path_strategy),
        content_hash=draw(content_hash_strategy),
        generated_at=generated_at,
        last_analyzed_commit=draw(commit_strategy),
    )


@pytest.fixture
def store(tmp_path):
    state_store = create_state_store(tmp_path / ".are" / "state.db")
    yield state_store
    state_store.close()


@given(record=file_record_strategy())
@settings(max_examples=100, deadline=None)
def test_file_record_round_trip(record: FileRecord):
    """
    *For any* FileRecord, storing and retrieving should return the same data.
    """
    with tempfile.TemporaryDirectory() as tmpdir:
        with StateStore(Path(tmpdir) / "state.db") as state_store:
            state_store.upsert_file(record)
            assert state_store.get_file(record.path) == record


class TestFileRecords:
    """File record operations."""

    def test_get_missing_file(self, store):
        assert store.get_file("src/missing.ts") is None

    def test_upsert_replaces_existing_record(self, store):
        store.upsert_file(FileRecord("src/a.ts", "h1", last_analyzed_commit="c1"))
        store.upsert_file(FileRecord("src/a.ts", "h2"))

        record = store.get_file("src/a.ts")
        assert record == FileRecord("src/a.ts", "h2", generated_at=None, last_analyzed_commit=None)
        assert len(store.get_all_files()) == 1

    def test_delete_file(self, store):
        store.upsert_file(FileRecord("src/a.ts", "h1"))

        assert store.delete_file("src/a.ts") is True
        assert store.get_file("src/a.ts") is None

    def test_delete_missing_file_is_noop(self, store):
        assert store.delete_file("src/missing.ts") is False

    def test_get_all_file_hashes(self, store):
        store.upsert_file(FileRecord("a.ts", "h1"))
        store.upsert_file(FileRecord("b.ts", "h2"))

        assert store.get_all_file_hashes() == {"a.ts": "h1", "b.ts": "h2"}

    def test_records_survive_reopen(self, tmp_path):
        db_path = tmp_path / "state.db"
        with StateStore(db_path) as first:
            first.upsert_file(FileRecord("a.ts", "h1"))

        with StateStore(db_path) as second:
            assert second.get_file("a.ts") == FileRecord("a.ts", "h1")


class TestRunLedger:
    """Append-only run records."""

    def test_no_runs(self, store):
        assert store.get_last_run() is None
        assert store.get_runs() == []

    def test_insert_assigns_increasing_ids(self, store):
        now = datetime.now(timezone.utc)
        first = store.insert_run(RunRecord("c1", now, files_analyzed=3, files_skipped=1))
        second = store.insert_run(RunRecord("c2", now + timedelta(seconds=1), 1, 4))

        assert second > first
        last = store.get_last_run()
        assert last == RunRecord("c2", now + timedelta(seconds=1), 1, 4, id=second)

    def test_get_runs_newest_first_with_limit(self, store):
        now = datetime.now(timezone.utc)
        for i in range(5):
            store.insert_run(RunRecord(f"c{i}", now, i, 0))

        runs = store.get_runs(limit=2)
        assert [run.commit_hash for run in runs] == ["c4", "c3"]
        assert len(store.get_runs()) == 5

    def test_insert_with_id_is_rejected(self, store):
        with pytest.raises(ValueError):
            store.insert_run(RunRecord("c1", datetime.now(timezone.utc), 0, 0, id=7))

    def test_insert_without_row_id_raises_store_error(self, tmp_path):
        class NoRowIdStore(StateStore):
            @contextmanager
            def _transaction(self):
                yield SimpleNamespace(execute=lambda *args: SimpleNamespace(lastrowid=None))

        with pytest.raises(StateStoreError):
            NoRowIdStore(tmp_path / "state.db").insert_run(
                RunRecord("c1", datetime.now(timezone.utc), 0, 0)
            )


class TestLifecycle:
    """Opening and closing."""

    def test_creates_parent_directory(self, tmp_path):
        db_path = tmp_path / "nested" / "dir" / "state.db"
        with StateStore(db_path):
            pass
        assert db_path.exists()

    def test_close_twice_is_safe(self, tmp_path):
        state_store = create_state_store(tmp_path / "state.db")
        state_store.close()
        state_store.close()

    def test_schema_version_reported_while_open(self, tmp_path):
        state_store = StateStore(tmp_path / "state.db")
        assert state_store.schema_version is None
        state_store.open()
        assert state_store.schema_version == 1
        state_store.close()
        assert state_store.schema_version is None

    def test_operations_reopen_after_close(self, tmp_path):
        state_store = create_state_store(tmp_path / "state.db")
        state_store.upsert_file(FileRecord("a.ts", "h1"))
        state_store.close()

        assert state_store.get_file("a.ts") == FileRecord("a.ts", "h1")
        state_store.close()

    def test_default_state_path(self, tmp_path):
        assert default_state_path(tmp_path) == tmp_path / ".are" / "state.db"
