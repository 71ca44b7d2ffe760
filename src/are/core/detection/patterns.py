"""
File kind detection patterns.

Directory-name patterns give a fast path for conventional layouts; content
heuristics are the fallback for files in non-standard locations.
"""

import re
from enum import Enum


class FileType(str, Enum):
    """Semantic file kind used to pick a summarization strategy."""

    COMPONENT = "component"
    SERVICE = "service"
    UTIL = "util"
    TYPE = "type"
    TEST = "test"
    API = "api"
    MODEL = "model"
    HOOK = "hook"
    SCHEMA = "schema"
    CONFIG = "config"
    GENERIC = "generic"


# Directory name -> FileType (matched case-insensitively)
DIRECTORY_PATTERNS: dict[str, FileType] = {
    # Component directories
    "components": FileType.COMPONENT,
    "pages": FileType.COMPONENT,
    "views": FileType.COMPONENT,
    "screens": FileType.COMPONENT,
    "layouts": FileType.COMPONENT,
    # Service directories
    "services": FileType.SERVICE,
    "providers": FileType.SERVICE,
    # Utility directories
    "utils": FileType.UTIL,
    "helpers": FileType.UTIL,
    "lib": FileType.UTIL,
    "common": FileType.UTIL,
    # Type directories
    "types": FileType.TYPE,
    "interfaces": FileType.TYPE,
    "@types": FileType.TYPE,
    "typings": FileType.TYPE,
    # Test directories
    "__tests__": FileType.TEST,
    "tests": FileType.TEST,
    "test": FileType.TEST,
    "spec": FileType.TEST,
    "__mocks__": FileType.TEST,
    # API directories
    "api": FileType.API,
    "routes": FileType.API,
    "handlers": FileType.API,
    "endpoints": FileType.API,
    "controllers": FileType.API,
    # Model directories
    "models": FileType.MODEL,
    "entities": FileType.MODEL,
    "domain": FileType.MODEL,
    # Hook directories
    "hooks": FileType.HOOK,
    # Schema directories
    "schemas": FileType.SCHEMA,
    "validators": FileType.SCHEMA,
    "validation": FileType.SCHEMA,
    # Config directories
    "config": FileType.CONFIG,
    "configs": FileType.CONFIG,
}

_TEST_CALL = re.compile(r"\b(describe|it|test|expect)\s*\(")
_TEST_FRAMEWORK = re.compile(r"\b(jest|vitest|mocha|chai|pytest|unittest)\b")
_PY_TEST_FUNC = re.compile(r"^\s*(async\s+)?def\s+test_\w+\s*\(", re.MULTILINE)
_HOOK = re.compile(r"export\s+(function|const)\s+use[A-Z]")
_SCHEMA = re.compile(
    r"\bz\.(object|string|number|boolean|array|enum|union)\b"
    r"|\byup\.(object|string|number|boolean|array)\b"
    r"|\bclass\s+\w+\((BaseModel|Schema)\)"
)
_COMPONENT_EXPORT = re.compile(r"export\s+(default\s+)?(function|const)\s+[A-Z][a-zA-Z]*")
_JSX_MARKERS = re.compile(r"<[A-Z]|</|jsx|tsx|React|'react'|\"react\"")
_TYPE_DECL = re.compile(r"^(export\s+)?(interface|type)\s+", re.MULTILINE)
_RUNTIME_DECL = re.compile(r"^(export\s+)?(function|const|let|var|class)\s+(?!type\s)", re.MULTILINE)
_API = re.compile(
    r"export\s+(async\s+)?function\s+(GET|POST|PUT|DELETE|PATCH|HEAD|OPTIONS)\b"
    r"|\.(get|post|put|delete|patch)\s*\("
    r"|router\.(get|post|put|delete)"
)
_CONFIG_EXPORT = re.compile(r"export\s+(default\s+)?{[\s\S]*?}")
_CONFIG_WORDS = re.compile(r"\b(config|options|settings|env)\b", re.IGNORECASE)
_SERVICE = re.compile(r"class\s+\w+Service\b|export\s+const\s+\w+Service\s*=")
_MODEL = re.compile(
    r"class\s+\w+(Entity|Model)\b"
    r"|interface\s+\w+(Entity|Model)\b"
    r"|prisma\.|@Entity|@Table|mongoose\."
)


def detect_from_content(content: str) -> FileType:
    """
    Detect file kind from content using ordered heuristics.

    Checks run from most to least specific; the first match wins.

    Args:
        content: File content to analyze

    Returns:
        Detected FileType, or FileType.GENERIC if nothing matches
    """
    # Tests can contain every other pattern, so they go first
    if _TEST_CALL.search(content) or _TEST_FRAMEWORK.search(content) or _PY_TEST_FUNC.search(content):
        return FileType.TEST

    if _HOOK.search(content):
        return FileType.HOOK

    if _SCHEMA.search(content):
        return FileType.SCHEMA

    if _COMPONENT_EXPORT.search(content) and _JSX_MARKERS.search(content):
        return FileType.COMPONENT

    # Type-only file: declarations without runtime code
    if _TYPE_DECL.search(content) and not _RUNTIME_DECL.search(content):
        return FileType.TYPE

    if _API.search(content):
        return FileType.API

    if _CONFIG_EXPORT.search(content) and _CONFIG_WORDS.search(content):
        return FileType.CONFIG

    if _SERVICE.search(content):
        return FileType.SERVICE

    if _MODEL.search(content):
        return FileType.MODEL

    return FileType.GENERIC
