"""
Tokenizer module for token counting and budget checks.

Uses tiktoken library for deterministic BPE token counting, so the same
content always yields the same count and chunk boundaries are reproducible
across runs.
"""

from abc import ABC, abstractmethod
from typing import Optional

import tiktoken

DEFAULT_ENCODING = "cl100k_base"

# Prompt overhead estimates, in tokens, for the summarization collaborator.
BASE_PROMPT_OVERHEAD = 500
FILE_TYPE_OVERHEAD: dict[str, int] = {
    "component": 200,
    "service": 150,
    "api": 180,
    "model": 120,
    "schema": 100,
    "generic": 100,
}


class TokenizerInterface(ABC):
    """Abstract interface for tokenization operations."""

    @abstractmethod
    def count_tokens(self, text: str) -> int:
        """
        Count the number of tokens in the given text.

        Args:
            text: The text to tokenize.

        Returns:
            The number of tokens in the text.
        """
        pass

    def is_within_limit(self, text: str, limit: int) -> bool:
        """Return True if text fits within ``limit`` tokens."""
        return self.count_tokens(text) <= limit


class TiktokenTokenizer(TokenizerInterface):
    """
    Tokenizer implementation using tiktoken library.

    Default encoding is 'cl100k_base'.
    """

    def __init__(self, encoding_name: str = DEFAULT_ENCODING):
        """
        Initialize the tokenizer with the specified encoding.

        Args:
            encoding_name: The tiktoken encoding name. Common options:
                - 'cl100k_base': Used by gpt-4, gpt-3.5-turbo and compatible models
                - 'o200k_base': Used by gpt-4o family models
                - 'p50k_base': Used by older models like text-davinci-003
        """
        self._encoding_name = encoding_name
        self._encoding: Optional[tiktoken.Encoding] = None

    @property
    def encoding_name(self) -> str:
        return self._encoding_name

    @property
    def encoding(self) -> tiktoken.Encoding:
        """Lazy-load the encoding to avoid initialization overhead."""
        if self._encoding is None:
            self._encoding = tiktoken.get_encoding(self._encoding_name)
        return self._encoding

    def count_tokens(self, text: str) -> int:
        if not text:
            return 0
        return len(self.encoding.encode(text, disallowed_special=()))

    def is_within_limit(self, text: str, limit: int) -> bool:
        """
        Check whether text fits within a token limit.

        Cheaper than a full count for very large inputs: the UTF-8 byte length
        is an upper bound on the BPE token count, so anything that short is
        accepted without encoding.
        """
        if limit < 0:
            return False
        if len(text.encode("utf-8")) <= limit:
            return True
        return self.count_tokens(text) <= limit


def estimate_prompt_overhead(file_type: str) -> int:
    """
    Estimate the prompt overhead for summarizing a file of the given kind.

    Args:
        file_type: File kind label (see ``are.core.detection.FileType``)

    Returns:
        Estimated overhead in tokens (system instructions plus template)
    """
    kind = getattr(file_type, "value", file_type)
    return BASE_PROMPT_OVERHEAD + FILE_TYPE_OVERHEAD.get(kind, 100)


def get_default_tokenizer() -> TokenizerInterface:
    """
    Get the default tokenizer instance.

    Returns:
        A TiktokenTokenizer with cl100k_base encoding.
    """
    return TiktokenTokenizer(encoding_name=DEFAULT_ENCODING)
