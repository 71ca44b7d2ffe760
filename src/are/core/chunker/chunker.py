"""
Budget chunker implementation.

Splits oversized file content into overlapping, token-bounded chunks built
from whole lines, so each chunk can be summarized on its own while keeping
local context across chunk boundaries.
"""

import logging
from typing import Optional

from are.core.tokenizer import TokenizerInterface, get_default_tokenizer

from .interfaces import ChunkerInterface
from .models import Chunk, ChunkerConfig

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 3000
DEFAULT_OVERLAP_LINES = 10
DEFAULT_CHUNK_THRESHOLD = 4000


class BudgetChunker(ChunkerInterface):
    """
    Concrete implementation of ChunkerInterface.

    Provides:
    - Threshold check deciding whether a file is processed whole
    - Line-based accumulation up to a per-chunk token budget
    - Fixed line overlap between consecutive chunks
    """

    def __init__(
        self,
        tokenizer: Optional[TokenizerInterface] = None,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        overlap_lines: int = DEFAULT_OVERLAP_LINES,
        chunk_threshold: int = DEFAULT_CHUNK_THRESHOLD,
    ):
        """
        Initialize the BudgetChunker.

        Args:
            tokenizer: Tokenizer for token counting (default: tiktoken cl100k_base)
            chunk_size: Target tokens per chunk (default: 3000)
            overlap_lines: Lines carried over from the previous chunk (default: 10)
            chunk_threshold: Files above this token count are chunked (default: 4000)

        Raises:
            ValueError: If the budget settings are inconsistent
        """
        if chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")
        if overlap_lines < 0:
            raise ValueError(f"overlap_lines must not be negative, got {overlap_lines}")
        if chunk_threshold < chunk_size:
            raise ValueError(
                f"chunk_threshold ({chunk_threshold}) must not be smaller than "
                f"chunk_size ({chunk_size})"
            )

        self._tokenizer = tokenizer or get_default_tokenizer()
        self._chunk_size = chunk_size
        self._overlap_lines = overlap_lines
        self._chunk_threshold = chunk_threshold

    @property
    def tokenizer(self) -> TokenizerInterface:
        return self._tokenizer

    def get_config(self) -> ChunkerConfig:
        return ChunkerConfig(
            chunk_size=self._chunk_size,
            overlap_lines=self._overlap_lines,
            chunk_threshold=self._chunk_threshold,
        )

    def count_tokens(self, content: str) -> int:
        return self._tokenizer.count_tokens(content)

    def needs_chunking(self, content: str) -> bool:
        """Content exactly at the threshold is still handled as a single unit."""
        return self._tokenizer.count_tokens(content) > self._chunk_threshold

    def chunk(self, content: str) -> list[Chunk]:
        """
        Split content into overlapping chunks of whole lines.

        A chunk is closed before the line that would push it past chunk_size,
        provided it already holds at least one line of its own (not carried
        over from the previous chunk). A single line larger than the budget
        therefore becomes an oversized chunk instead of being cut.
        """
        lines = content.split("\n")
        chunks: list[Chunk] = []

        current_lines: list[str] = []
        current_costs: list[int] = []
        current_tokens = 0
        start_line = 0
        carried = 0

        for i, line in enumerate(lines):
            line_tokens = self._tokenizer.count_tokens(line + "\n")

            if (
                len(current_lines) > carried
                and current_tokens + line_tokens > self._chunk_size
            ):
                chunks.append(
                    Chunk(
                        index=len(chunks),
                        content="\n".join(current_lines),
                        token_count=current_tokens,
                        start_line=start_line,
                        end_line=i - 1,
                    )
                )

                keep = min(self._overlap_lines, len(current_lines))
                if keep:
                    current_lines = current_lines[-keep:]
                    current_costs = current_costs[-keep:]
                else:
                    current_lines = []
                    current_costs = []
                current_tokens = sum(current_costs)
                start_line = i - keep
                carried = keep

            current_lines.append(line)
            current_costs.append(line_tokens)
            current_tokens += line_tokens

        if current_lines:
            chunks.append(
                Chunk(
                    index=len(chunks),
                    content="\n".join(current_lines),
                    token_count=current_tokens,
                    start_line=start_line,
                    end_line=len(lines) - 1,
                )
            )

        logger.debug(
            f"Split {len(lines)} lines into {len(chunks)} chunks "
            f"(chunk_size={self._chunk_size}, overlap_lines={self._overlap_lines})"
        )
        return chunks


def get_total_chunk_tokens(chunks: list[Chunk]) -> int:
    """Get total tokens across all chunks, overlap lines counted once per chunk."""
    return sum(chunk.token_count for chunk in chunks)


def create_chunker(
    tokenizer: Optional[TokenizerInterface] = None,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    overlap_lines: int = DEFAULT_OVERLAP_LINES,
    chunk_threshold: int = DEFAULT_CHUNK_THRESHOLD,
) -> BudgetChunker:
    """
    Factory function to create a BudgetChunker.

    Args:
        tokenizer: Tokenizer for token counting (uses default if None)
        chunk_size: Target tokens per chunk
        overlap_lines: Lines of overlap between consecutive chunks
        chunk_threshold: Token count above which a file is chunked

    Returns:
        Configured BudgetChunker instance
    """
    return BudgetChunker(
        tokenizer=tokenizer,
        chunk_size=chunk_size,
        overlap_lines=overlap_lines,
        chunk_threshold=chunk_threshold,
    )
