"""
Abstract interfaces for discovery filters.
"""

import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional


class FileFilter(ABC):
    """
    Abstract interface for a pluggable discovery filter.

    Every call is awaited by the filter chain. Implementations that do no I/O
    simply return without suspending.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Name of the filter, reported with each exclusion."""
        pass

    @abstractmethod
    async def should_exclude(
        self, path: Path, stats: Optional[os.stat_result] = None
    ) -> bool:
        """
        Decide whether a discovered file is excluded.

        Args:
            path: Absolute path to the file
            stats: Optional file stats, for size-based decisions

        Returns:
            True if the file should be excluded, False to include it
        """
        pass

    def exclusion_reason(self, path: Path) -> str:
        """Human-readable reason reported when this filter excludes ``path``."""
        return f"excluded by {self.name} filter"
