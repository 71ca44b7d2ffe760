"""
Git commit lookup.

The engine only needs an opaque commit identifier to stamp file records
and run ledger entries.
"""

import logging
import subprocess
from pathlib import Path

logger = logging.getLogger(__name__)

# Commit id recorded when the project is not a git work tree.
NO_COMMIT = "none"


def get_current_commit(root: Path | str) -> str:
    """
    Return the HEAD commit hash of the repository containing ``root``.

    Args:
        root: Project root directory

    Returns:
        Full commit hash, or NO_COMMIT if git is unavailable, the directory
        is not a repository, or the repository has no commits yet
    """
    try:
        result = subprocess.run(
            ["git", "rev-parse", "HEAD"],
            cwd=str(root),
            capture_output=True,
            text=True,
            check=False,
        )
    except (FileNotFoundError, OSError) as e:
        logger.debug(f"git not available: {e}")
        return NO_COMMIT

    if result.returncode != 0:
        logger.debug(f"git rev-parse failed in {root}: {result.stderr.strip()}")
        return NO_COMMIT

    return result.stdout.strip() or NO_COMMIT
