"""
Filter chain applying discovery filters in a fixed order.
"""

import asyncio
import logging
import os
from pathlib import Path
from typing import Iterable, Optional, Sequence

from .interfaces import FileFilter
from .models import ExcludedFile, FilterResult

logger = logging.getLogger(__name__)

DEFAULT_MAX_CONCURRENCY = 64


class FilterChain:
    """
    Ordered collection of FileFilter instances.

    The first filter that excludes a path wins and is named in the
    resulting ExcludedFile. A filter that raises is logged and treated as
    not excluding the path.
    """

    def __init__(
        self,
        filters: Sequence[FileFilter],
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
    ):
        """
        Initialize the chain.

        Args:
            filters: Filters in evaluation order
            max_concurrency: Maximum number of paths checked concurrently
        """
        self._filters: tuple[FileFilter, ...] = tuple(filters)
        self._max_concurrency = max(1, max_concurrency)

    @property
    def filters(self) -> tuple[FileFilter, ...]:
        return self._filters

    @property
    def filter_names(self) -> list[str]:
        return [f.name for f in self._filters]

    async def check(
        self, path: Path, stats: Optional[os.stat_result] = None
    ) -> Optional[ExcludedFile]:
        """
        Run the filters against one path.

        Args:
            path: Absolute path to the file
            stats: Optional file stats passed through to each filter

        Returns:
            ExcludedFile for the first excluding filter, or None if included
        """
        for file_filter in self._filters:
            try:
                excluded = await file_filter.should_exclude(path, stats)
            except Exception as e:
                logger.warning(
                    f"Filter '{file_filter.name}' failed on {path}, not excluding: {e}"
                )
                continue

            if excluded:
                return ExcludedFile(
                    path=path,
                    reason=file_filter.exclusion_reason(path),
                    filter_name=file_filter.name,
                )
        return None

    async def apply(self, paths: Iterable[Path]) -> FilterResult:
        """
        Partition discovered paths into included and excluded files.

        Args:
            paths: Absolute paths in discovery order

        Returns:
            FilterResult whose ``included`` list preserves the input order
        """
        paths = list(paths)
        semaphore = asyncio.Semaphore(self._max_concurrency)

        async def _check(path: Path) -> Optional[ExcludedFile]:
            async with semaphore:
                return await self.check(path)

        outcomes = await asyncio.gather(*(_check(p) for p in paths))

        result = FilterResult()
        for path, excluded in zip(paths, outcomes):
            if excluded is None:
                result.included.append(path)
            else:
                result.excluded.append(excluded)

        logger.debug(
            f"Filter chain kept {len(result.included)} of {len(paths)} files",
            extra={
                "included_count": len(result.included),
                "excluded_count": len(result.excluded),
                "filters": self.filter_names,
            },
        )
        return result
