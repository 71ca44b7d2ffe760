"""
Centralized engine container.

Wires configuration into the filter chain, chunker, state store and change
detector so every entry point builds the engine the same way.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from are.core.chunker import ChunkerInterface, create_chunker
from are.core.config import AREConfig, DiscoveryConfig, find_config, load_config
from are.core.discovery import (
    BinaryFilter,
    CustomPatternFilter,
    FileFilter,
    FilterChain,
    GitignoreFilter,
    VendorFilter,
    WalkerOptions,
)
from are.core.tokenizer import TiktokenTokenizer
from are.infrastructure.state_store import StateStore, create_state_store
from are.services.change_detector import ChangeDetector


@dataclass
class EngineContainer:
    """
    Container holding the engine components for one project.

    Attributes:
        root: Project root directory
        config: Effective configuration
        state_store: Open state store (close via ``close()``)
        filter_chain: Discovery filters in evaluation order
        chunker: Budget chunker
        detector: Change detector composed from the above
    """

    root: Path
    config: AREConfig
    state_store: StateStore
    filter_chain: FilterChain
    chunker: ChunkerInterface
    detector: ChangeDetector

    def close(self) -> None:
        self.state_store.close()


def build_filter_chain(root: Path, config: Optional[DiscoveryConfig] = None) -> FilterChain:
    """
    Build the filter chain for a project.

    Order: gitignore, vendor, custom patterns, binary. Any exclusion is
    final; the order only decides which filter is reported.
    """
    config = config or DiscoveryConfig()
    filters: list[FileFilter] = []

    if config.use_gitignore:
        filters.append(GitignoreFilter.from_root(root))
    filters.append(VendorFilter(config.vendor_dirs, root=root))
    if config.exclude_patterns:
        filters.append(CustomPatternFilter(root, config.exclude_patterns))
    if config.exclude_binary:
        filters.append(BinaryFilter())

    return FilterChain(filters)


def build_change_detector(
    root: Path,
    state_store: StateStore,
    config: Optional[AREConfig] = None,
    progress_callback: Optional[Callable[[int, int, str], None]] = None,
) -> ChangeDetector:
    """Build a change detector from configuration."""
    config = config or AREConfig()
    chunker = create_chunker(
        tokenizer=TiktokenTokenizer(config.budget.encoding),
        chunk_size=config.budget.chunk_size,
        overlap_lines=config.budget.overlap_lines,
        chunk_threshold=config.budget.chunk_threshold,
    )
    return ChangeDetector(
        root=root,
        filter_chain=build_filter_chain(root, config.discovery),
        state_store=state_store,
        walker_options=WalkerOptions(
            follow_symlinks=config.discovery.follow_symlinks,
            include_dotfiles=config.discovery.include_dotfiles,
        ),
        chunker=chunker,
        max_concurrency=config.generation.max_concurrency,
        progress_callback=progress_callback,
    )


def create_engine(
    root: Path | str,
    config_path: Optional[Path] = None,
    progress_callback: Optional[Callable[[int, int, str], None]] = None,
) -> EngineContainer:
    """
    Create and initialize the engine for a project.

    The state store is opened (and its schema reconciled) before anything
    else, so version errors surface before any file is processed.

    Args:
        root: Project root directory
        config_path: Optional config file. Defaults to ``<root>/.are/config.yaml``
                     when present, otherwise built-in defaults.
        progress_callback: Optional callback(current, total, message)

    Returns:
        EngineContainer with all components initialized

    Raises:
        SchemaVersionError: If the state database is newer than supported
        MigrationError: If the state database could not be migrated
        yaml.YAMLError: If the project config file is not valid YAML
        ValueError: If the configuration is invalid
    """
    root = Path(root).resolve()
    config = load_config(config_path or find_config(root))

    state_store = create_state_store(config.state.db_path(root))
    try:
        detector = build_change_detector(root, state_store, config, progress_callback)
    except Exception:
        state_store.close()
        raise

    return EngineContainer(
        root=root,
        config=config,
        state_store=state_store,
        filter_chain=detector.filter_chain,
        chunker=detector.chunker,
        detector=detector,
    )
