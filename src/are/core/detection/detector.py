"""
File kind detector.

Detection order:
1. File name patterns (tests, configs) - most specific
2. Nearest known parent directory name - fast path for standard layouts
3. Content analysis - fallback for edge cases
"""

import re
from pathlib import PurePath

from .patterns import DIRECTORY_PATTERNS, FileType, detect_from_content

TEST_FILE_PATTERNS = [
    re.compile(r"\.test\.[jt]sx?$"),
    re.compile(r"\.spec\.[jt]sx?$"),
    re.compile(r"_test\.[jt]sx?$"),
    re.compile(r"^test_.*\.py$"),
    re.compile(r"_test\.(py|go)$"),
]

CONFIG_FILE_PATTERNS = [
    re.compile(r"\.config\.m?[jt]s$"),
    re.compile(r"rc\.m?[jt]s$"),
    re.compile(r"\.json$"),
    re.compile(r"\.ya?ml$"),
    re.compile(r"\.toml$"),
    re.compile(r"^setup\.cfg$"),
]


def detect_file_type(file_path: str | PurePath, content: str) -> FileType:
    """
    Detect the semantic kind of a file.

    Args:
        file_path: Path to the file (relative or absolute)
        content: File content for the fallback detection

    Returns:
        Detected FileType
    """
    path = PurePath(file_path)
    file_name = path.name

    if any(pattern.search(file_name) for pattern in TEST_FILE_PATTERNS):
        return FileType.TEST

    if any(pattern.search(file_name) for pattern in CONFIG_FILE_PATTERNS):
        return FileType.CONFIG

    # Inner to outer directory levels
    for dir_name in reversed(path.parent.parts):
        file_type = DIRECTORY_PATTERNS.get(dir_name.lower())
        if file_type is not None:
            return file_type

    return detect_from_content(content)
