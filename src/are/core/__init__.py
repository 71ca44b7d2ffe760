"""
Core Layer - Discovery, chunking, tokenization and file kind detection.
"""

from are.core.chunker import (
    BudgetChunker,
    Chunk,
    ChunkerConfig,
    ChunkerInterface,
    create_chunker,
    get_total_chunk_tokens,
)
from are.core.config import (
    AREConfig,
    BudgetConfig,
    DiscoveryConfig,
    GenerationConfig,
    LoggingConfig,
    StateConfig,
    find_config,
    load_config,
)
from are.core.detection import FileType, detect_file_type
from are.core.discovery import (
    BinaryFilter,
    CustomPatternFilter,
    ExcludedFile,
    FileFilter,
    FilterChain,
    FilterResult,
    GitignoreFilter,
    VendorFilter,
    WalkerOptions,
    walk_directory,
)
from are.core.logging_setup import configure_logging
from are.core.tokenizer import (
    TiktokenTokenizer,
    TokenizerInterface,
    estimate_prompt_overhead,
    get_default_tokenizer,
)

__all__ = [
    # Config
    "AREConfig",
    "DiscoveryConfig",
    "BudgetConfig",
    "StateConfig",
    "GenerationConfig",
    "LoggingConfig",
    "find_config",
    "load_config",
    "configure_logging",
    # Discovery
    "FileFilter",
    "FilterChain",
    "FilterResult",
    "ExcludedFile",
    "GitignoreFilter",
    "VendorFilter",
    "BinaryFilter",
    "CustomPatternFilter",
    "WalkerOptions",
    "walk_directory",
    # Chunker
    "BudgetChunker",
    "Chunk",
    "ChunkerConfig",
    "ChunkerInterface",
    "create_chunker",
    "get_total_chunk_tokens",
    # Detection
    "FileType",
    "detect_file_type",
    # Tokenizer
    "TokenizerInterface",
    "TiktokenTokenizer",
    "estimate_prompt_overhead",
    "get_default_tokenizer",
]
