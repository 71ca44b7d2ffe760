"""
Discovery module for the incremental generation engine.

Provides directory walking and a pluggable filter chain deciding which
discovered files take part in generation.
"""

from .filter_chain import FilterChain
from .filters import (
    BinaryFilter,
    CustomPatternFilter,
    GitignoreFilter,
    VendorFilter,
)
from .interfaces import FileFilter
from .models import (
    ALWAYS_EXCLUDED_DIRS,
    BINARY_EXTENSIONS,
    DEFAULT_VENDOR_DIRS,
    ExcludedFile,
    FilterResult,
    WalkerOptions,
)
from .walker import walk_directory, walk_directory_sync

__all__ = [
    # Interfaces and models
    "FileFilter",
    "ExcludedFile",
    "FilterResult",
    "WalkerOptions",
    # Filters
    "FilterChain",
    "GitignoreFilter",
    "VendorFilter",
    "BinaryFilter",
    "CustomPatternFilter",
    # Walker
    "walk_directory",
    "walk_directory_sync",
    # Constants
    "ALWAYS_EXCLUDED_DIRS",
    "BINARY_EXTENSIONS",
    "DEFAULT_VENDOR_DIRS",
]
