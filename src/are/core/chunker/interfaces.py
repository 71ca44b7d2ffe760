"""
Abstract interfaces for the chunker module.
"""

from abc import ABC, abstractmethod

from .models import Chunk, ChunkerConfig


class ChunkerInterface(ABC):
    """Abstract interface for budget chunking operations."""

    @abstractmethod
    def count_tokens(self, content: str) -> int:
        """Count tokens with the chunker's tokenizer."""
        pass

    @abstractmethod
    def needs_chunking(self, content: str) -> bool:
        """
        Decide whether content is too large to be handled as a single unit.

        Args:
            content: File content

        Returns:
            True if the token count exceeds the chunking threshold
        """
        pass

    @abstractmethod
    def chunk(self, content: str) -> list[Chunk]:
        """
        Split content into overlapping, size-bounded chunks.

        Args:
            content: File content to split

        Returns:
            Ordered list of chunks covering every line of the content

        Notes:
            - Lines are never split
            - Consecutive chunks share the configured number of overlap lines
        """
        pass

    @abstractmethod
    def get_config(self) -> ChunkerConfig:
        """
        Get the chunker configuration.

        Returns:
            ChunkerConfig with current settings
        """
        pass
