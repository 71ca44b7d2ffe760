"""
Directory walker for file discovery.

Enumerates every candidate file under a root. Filtering is applied
separately by the filter chain; the walker only skips version-control
metadata directories.
"""

import asyncio
import logging
from pathlib import Path
from typing import Optional

from .models import ALWAYS_EXCLUDED_DIRS, WalkerOptions

logger = logging.getLogger(__name__)


async def walk_directory(
    root: Path, options: Optional[WalkerOptions] = None
) -> list[Path]:
    """
    Walk a directory tree and return all files.

    Args:
        root: Root directory to walk
        options: Walker options (defaults: no symlinks, dotfiles included)

    Returns:
        Absolute file paths in deterministic (name-sorted, depth-first) order

    Notes:
        - Inaccessible entries and subtrees are logged and omitted
        - Never raises for filesystem errors below the root
    """
    return await asyncio.to_thread(walk_directory_sync, root, options)


def walk_directory_sync(
    root: Path, options: Optional[WalkerOptions] = None
) -> list[Path]:
    """Blocking implementation of walk_directory."""
    options = options or WalkerOptions()
    root_dir = Path(root).resolve()

    if not root_dir.is_dir():
        logger.error(f"Cannot walk {root_dir}: missing or not a directory")
        return []

    found: list[Path] = []
    _walk(root_dir, options, set(), found)
    return found


def _walk(
    directory: Path,
    options: WalkerOptions,
    ancestors: set[Path],
    found: list[Path],
) -> None:
    try:
        target = directory.resolve()
        if target in ancestors:
            logger.debug(f"Symlink cycle at {directory} (already inside {target})")
            return
        ancestors.add(target)

        children = sorted(directory.iterdir(), key=lambda p: p.name)
    except OSError as e:
        logger.warning(f"Cannot list {directory}, skipping subtree: {e}")
        return

    for child in children:
        if child.name.startswith(".") and not options.include_dotfiles:
            continue

        try:
            if not options.follow_symlinks and child.is_symlink():
                logger.debug(f"Not following symlink {child}")
                continue

            if child.is_dir():
                if child.name not in ALWAYS_EXCLUDED_DIRS:
                    _walk(child, options, ancestors, found)
            elif child.is_file():
                found.append(child)
        except OSError as e:
            logger.warning(f"Cannot stat {child}, skipping: {e}")

    # Only the current branch counts; a sibling may reach the same directory again.
    ancestors.discard(target)
