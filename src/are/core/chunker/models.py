"""
Data models for the chunker module.
"""

from dataclasses import dataclass


@dataclass
class Chunk:
    """
    A size-bounded segment of one file's content.

    Attributes:
        index: Position of the chunk in the file's sequence (0-based)
        content: Lines of the chunk joined with newlines
        token_count: Tokens accounted to the chunk, overlap lines included
        start_line: First line of the chunk (0-based, inclusive)
        end_line: Last line of the chunk (0-based, inclusive)
    """

    index: int
    content: str
    token_count: int
    start_line: int
    end_line: int

    @property
    def line_count(self) -> int:
        return self.end_line - self.start_line + 1


@dataclass
class ChunkerConfig:
    """Token budget settings for a chunker instance."""

    chunk_size: int = 3000
    overlap_lines: int = 10
    chunk_threshold: int = 4000
