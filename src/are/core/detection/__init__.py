"""
File kind detection for choosing a summarization strategy.
"""

from .detector import CONFIG_FILE_PATTERNS, TEST_FILE_PATTERNS, detect_file_type
from .patterns import DIRECTORY_PATTERNS, FileType, detect_from_content

__all__ = [
    "FileType",
    "detect_file_type",
    "detect_from_content",
    "DIRECTORY_PATTERNS",
    "TEST_FILE_PATTERNS",
    "CONFIG_FILE_PATTERNS",
]
