"""
Change Detector for the incremental generation engine.

Coordinates discovery, content hashing and the state store to decide which
files need (re)processing, dispatches work units to the summarization
collaborator, and commits successful results back to the store.
"""

import asyncio
import hashlib
import logging
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Optional

from are.core.chunker import ChunkerInterface, create_chunker
from are.core.detection import detect_file_type
from are.core.discovery import FilterChain, FilterResult, WalkerOptions, walk_directory
from are.infrastructure.state_store import FileRecord, RunRecord, StateStore
from are.services.change_models import (
    ChangedFile,
    ChangeKind,
    ChangeSet,
    ProcessingError,
    RunResult,
    WorkUnit,
)
from are.services.summarizer import SummarizerInterface

logger = logging.getLogger(__name__)

HASH_BLOCK_SIZE = 64 * 1024

# The database file and the sidecars SQLite keeps next to it
STATE_FILE_SUFFIXES = ("", "-wal", "-shm", "-journal")


def compute_content_hash(data: bytes) -> str:
    """SHA-256 hex digest of raw bytes."""
    return hashlib.sha256(data).hexdigest()


def hash_file(path: Path) -> str:
    """
    Hash a file's bytes.

    Only content contributes to the digest; path, timestamps and
    permissions do not.
    """
    digest = hashlib.sha256()
    with open(path, "rb") as f:
        for block in iter(lambda: f.read(HASH_BLOCK_SIZE), b""):
            digest.update(block)
    return digest.hexdigest()


class ChangeDetector:
    """
    Detects changed files and drives one incremental run.

    Combines the walker, a filter chain and the state store. The store is
    the only shared mutable resource; every write goes through its
    serialized transactions.
    """

    def __init__(
        self,
        root: Path,
        filter_chain: FilterChain,
        state_store: StateStore,
        walker_options: Optional[WalkerOptions] = None,
        chunker: Optional[ChunkerInterface] = None,
        max_concurrency: int = 8,
        progress_callback: Optional[Callable[[int, int, str], None]] = None,
    ):
        """
        Initialize the change detector.

        Args:
            root: Project root directory
            filter_chain: Filters applied to discovered files
            state_store: Open state store for this project
            walker_options: Walker options (default: WalkerOptions())
            chunker: Budget chunker (default: create_chunker())
            max_concurrency: Maximum files hashed or processed concurrently
            progress_callback: Optional callback(current, total, message)
        """
        self._root = Path(root).resolve()
        self._filter_chain = filter_chain
        self._state_store = state_store
        self._walker_options = walker_options or WalkerOptions()
        self._chunker = chunker or create_chunker()
        self._max_concurrency = max(1, max_concurrency)
        self._progress_callback = progress_callback
        db_path = Path(state_store.db_path).resolve()
        self._state_files = frozenset(
            db_path.with_name(db_path.name + suffix) for suffix in STATE_FILE_SUFFIXES
        )
        state_dir = db_path.parent
        # A state directory at or above the root only hides the database files
        self._state_dir: Optional[Path] = None
        if state_dir != self._root and state_dir.is_relative_to(self._root):
            self._state_dir = state_dir

    @property
    def root(self) -> Path:
        return self._root

    @property
    def chunker(self) -> ChunkerInterface:
        return self._chunker

    @property
    def filter_chain(self) -> FilterChain:
        return self._filter_chain

    @property
    def state_store(self) -> StateStore:
        return self._state_store

    def _report_progress(self, current: int, total: int, message: str) -> None:
        """Report progress if callback is set."""
        if self._progress_callback:
            self._progress_callback(current, total, message)
        logger.debug(f"Progress: {current}/{total} - {message}")

    def _relative(self, path: Path) -> str:
        return Path(path).relative_to(self._root).as_posix()

    def _is_state_path(self, path: Path) -> bool:
        path = Path(path).resolve()
        if path in self._state_files:
            return True
        return self._state_dir is not None and path.is_relative_to(self._state_dir)

    # ─────────────────────────────────────────────────────────────────
    # Discovery and detection
    # ─────────────────────────────────────────────────────────────────

    async def discover(self) -> FilterResult:
        """
        Walk the project and run the filter chain.

        The state database is never reported, nor is a dedicated state
        directory below the root.
        """
        paths = await walk_directory(self._root, self._walker_options)
        paths = [p for p in paths if not self._is_state_path(p)]
        result = await self._filter_chain.apply(paths)
        logger.info(
            f"Discovered {len(result.included)} files ({len(result.excluded)} excluded)",
            extra={
                "included_count": len(result.included),
                "excluded_count": len(result.excluded),
            },
        )
        return result

    async def _hash_files(self, paths: list[Path]) -> list[Optional[str]]:
        semaphore = asyncio.Semaphore(self._max_concurrency)

        async def _hash(path: Path) -> Optional[str]:
            async with semaphore:
                try:
                    return await asyncio.to_thread(hash_file, path)
                except OSError as e:
                    logger.warning(f"Could not read {path} for hashing: {e}")
                    return None

        return list(await asyncio.gather(*(_hash(p) for p in paths)))

    async def detect(
        self,
        dry_run: bool = False,
        filter_result: Optional[FilterResult] = None,
    ) -> ChangeSet:
        """
        Partition files into unchanged, changed, new and vanished.

        Vanished records are deleted from the state store unless
        ``dry_run`` is set.

        Args:
            dry_run: Report vanished files without deleting their records
            filter_result: Reuse an earlier discovery instead of walking again

        Returns:
            ChangeSet with project-relative paths
        """
        if filter_result is None:
            filter_result = await self.discover()

        stored_hashes = self._state_store.get_all_file_hashes()
        paths = list(filter_result.included)
        hashes = await self._hash_files(paths)

        change_set = ChangeSet()
        discovered: set[str] = set()

        for path, content_hash in zip(paths, hashes):
            rel_path = self._relative(path)
            discovered.add(rel_path)

            if content_hash is None:
                change_set.unreadable.append(rel_path)
                continue

            stored_hash = stored_hashes.get(rel_path)
            if stored_hash is None:
                change_set.new.append(
                    ChangedFile(rel_path, path, content_hash, ChangeKind.NEW)
                )
            elif stored_hash != content_hash:
                change_set.changed.append(
                    ChangedFile(rel_path, path, content_hash, ChangeKind.CHANGED)
                )
            else:
                change_set.unchanged.append(rel_path)

        change_set.vanished = sorted(set(stored_hashes) - discovered)

        if change_set.vanished and not dry_run:
            for rel_path in change_set.vanished:
                self._state_store.delete_file(rel_path)
            logger.info(f"Removed {len(change_set.vanished)} vanished files from state")

        logger.info(
            f"Detected changes: {len(change_set.new)} new, "
            f"{len(change_set.changed)} changed, {len(change_set.vanished)} vanished, "
            f"{len(change_set.unchanged)} unchanged",
            extra={
                "new_files": len(change_set.new),
                "changed_files": len(change_set.changed),
                "vanished_files": len(change_set.vanished),
                "unchanged_files": len(change_set.unchanged),
                "dry_run": dry_run,
            },
        )
        return change_set

    # ─────────────────────────────────────────────────────────────────
    # Work planning and commits
    # ─────────────────────────────────────────────────────────────────

    async def plan_work_units(self, changed_file: ChangedFile) -> list[WorkUnit]:
        """
        Turn a changed file into work units.

        Files within the chunking threshold become a single unit; larger
        files become one unit per chunk.
        """
        data = await asyncio.to_thread(Path(changed_file.absolute_path).read_bytes)
        content = data.decode("utf-8", errors="replace")
        file_type = detect_file_type(changed_file.path, content)

        if not self._chunker.needs_chunking(content):
            return [
                WorkUnit(
                    path=changed_file.path,
                    absolute_path=changed_file.absolute_path,
                    file_type=file_type,
                    content=content,
                    token_count=self._chunker.count_tokens(content),
                )
            ]

        chunks = self._chunker.chunk(content)
        logger.debug(f"Chunked {changed_file.path} into {len(chunks)} chunks")
        return [
            WorkUnit(
                path=changed_file.path,
                absolute_path=changed_file.absolute_path,
                file_type=file_type,
                content=chunk.content,
                token_count=chunk.token_count,
                chunk=chunk,
                total_chunks=len(chunks),
            )
            for chunk in chunks
        ]

    def commit_file(self, changed_file: ChangedFile, commit_hash: str) -> FileRecord:
        """Record a successfully processed file in the state store."""
        record = FileRecord(
            path=changed_file.path,
            content_hash=changed_file.content_hash,
            generated_at=datetime.now(timezone.utc),
            last_analyzed_commit=commit_hash,
        )
        self._state_store.upsert_file(record)
        return record

    async def _process_file(
        self,
        changed_file: ChangedFile,
        summarizer: SummarizerInterface,
        commit_hash: str,
        semaphore: asyncio.Semaphore,
    ) -> Optional[ProcessingError]:
        async with semaphore:
            try:
                units = await self.plan_work_units(changed_file)
                for unit in units:
                    await summarizer.summarize(unit)
            except Exception as e:
                logger.warning(f"Failed to process {changed_file.path}: {e}")
                return ProcessingError(changed_file.path, str(e))

            self.commit_file(changed_file, commit_hash)
            return None

    async def run(
        self,
        summarizer: SummarizerInterface,
        commit_hash: str,
        change_set: Optional[ChangeSet] = None,
    ) -> RunResult:
        """
        Perform one incremental run.

        Failed files keep their previous record so they are retried next
        run. The run is recorded in the ledger only when every file has been
        handled; an interrupted run records nothing.

        Args:
            summarizer: Collaborator receiving the work units
            commit_hash: Current commit id stamped on records and the run
            change_set: Reuse an earlier detection instead of detecting again

        Returns:
            RunResult with per-run counts and failures
        """
        start_time = time.time()
        result = RunResult(commit_hash=commit_hash)

        if change_set is None:
            change_set = await self.detect()

        to_process = change_set.to_process
        total = len(to_process)
        result.files_skipped = len(change_set.unchanged)
        result.files_deleted = len(change_set.vanished)

        self._report_progress(0, total, "Processing files...")
        semaphore = asyncio.Semaphore(self._max_concurrency)
        processed = 0

        async def _tracked(changed_file: ChangedFile) -> Optional[ProcessingError]:
            nonlocal processed
            failure = await self._process_file(changed_file, summarizer, commit_hash, semaphore)
            processed += 1
            if processed % 10 == 0 or processed == total:
                self._report_progress(processed, total, f"Processed {processed} files")
            return failure

        outcomes = await asyncio.gather(*(_tracked(f) for f in to_process))

        result.failures = [failure for failure in outcomes if failure is not None]
        result.files_analyzed = total - len(result.failures)

        result.run_id = self._state_store.insert_run(
            RunRecord(
                commit_hash=commit_hash,
                completed_at=datetime.now(timezone.utc),
                files_analyzed=result.files_analyzed,
                files_skipped=result.files_skipped,
            )
        )
        result.duration_seconds = time.time() - start_time

        if result.failures:
            logger.warning(
                f"{len(result.failures)} files failed and will be retried next run: "
                f"{', '.join(result.failed_paths)}"
            )

        logger.info(
            "Run completed",
            extra={
                "run_id": result.run_id,
                "commit_hash": commit_hash,
                "files_analyzed": result.files_analyzed,
                "files_skipped": result.files_skipped,
                "files_failed": result.files_failed,
                "files_deleted": result.files_deleted,
                "duration_seconds": result.duration_seconds,
            },
        )
        return result
