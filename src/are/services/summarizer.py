"""
Interface for the external summarization collaborator.
"""

from abc import ABC, abstractmethod
from typing import Any

from are.services.change_models import WorkUnit


class SummarizerInterface(ABC):
    """Abstract interface consuming work units produced by the engine."""

    @abstractmethod
    async def summarize(self, unit: WorkUnit) -> Any:
        """
        Summarize one work unit.

        Args:
            unit: Whole file or chunk to summarize

        Returns:
            Collaborator-specific result; the engine ignores it

        Raises:
            Exception: Any error marks the unit's file as failed for this run
        """
        pass


class NullSummarizer(SummarizerInterface):
    """Summarizer that accepts every unit and produces nothing."""

    async def summarize(self, unit: WorkUnit) -> None:
        return None
