"""
Services Layer - change detection and run orchestration.
"""

from .change_detector import ChangeDetector, compute_content_hash, hash_file
from .change_models import (
    ChangedFile,
    ChangeKind,
    ChangeSet,
    ProcessingError,
    RunResult,
    WorkUnit,
)
from .container import (
    EngineContainer,
    build_change_detector,
    build_filter_chain,
    create_engine,
)
from .summarizer import NullSummarizer, SummarizerInterface

__all__ = [
    # Change detection
    "ChangeDetector",
    "ChangeKind",
    "ChangedFile",
    "ChangeSet",
    "WorkUnit",
    "RunResult",
    "ProcessingError",
    "compute_content_hash",
    "hash_file",
    # Summarizer
    "SummarizerInterface",
    "NullSummarizer",
    # Factories
    "build_filter_chain",
    "build_change_detector",
    "create_engine",
    "EngineContainer",
]
