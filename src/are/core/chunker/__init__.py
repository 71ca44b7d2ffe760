"""
Chunker module for the incremental generation engine.

Provides token-budgeted, line-based chunking of oversized files.
"""

from .chunker import (
    DEFAULT_CHUNK_SIZE,
    DEFAULT_CHUNK_THRESHOLD,
    DEFAULT_OVERLAP_LINES,
    BudgetChunker,
    create_chunker,
    get_total_chunk_tokens,
)
from .interfaces import ChunkerInterface
from .models import Chunk, ChunkerConfig

__all__ = [
    # Main classes
    "BudgetChunker",
    "ChunkerInterface",
    "Chunk",
    "ChunkerConfig",
    # Helpers
    "get_total_chunk_tokens",
    # Factory
    "create_chunker",
    # Constants
    "DEFAULT_CHUNK_SIZE",
    "DEFAULT_OVERLAP_LINES",
    "DEFAULT_CHUNK_THRESHOLD",
]
