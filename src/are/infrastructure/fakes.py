"""
Fake implementations for testing.

Provides deterministic stand-ins for the tokenizer and the summarization
collaborator so engine behavior can be tested without tiktoken downloads
or a language model.
"""

from __future__ import annotations

from collections.abc import Iterable

from are.core.tokenizer import TokenizerInterface
from are.services.change_models import WorkUnit
from are.services.summarizer import SummarizerInterface


class FakeTokenizer(TokenizerInterface):
    """
    Tokenizer counting whitespace-separated words.

    Every word is one token and whitespace is free, so a line of ``n`` words
    costs exactly ``n`` tokens with or without its trailing newline.
    """

    def count_tokens(self, text: str) -> int:
        return len(text.split())


class RecordingSummarizer(SummarizerInterface):
    """
    Summarizer that records every unit it receives.

    Units whose path is listed in ``fail_paths`` raise RuntimeError, which
    the engine treats as a per-file failure.
    """

    def __init__(self, fail_paths: Iterable[str] = ()):
        self.fail_paths = set(fail_paths)
        self.units: list[WorkUnit] = []

    @property
    def paths(self) -> list[str]:
        """Distinct paths seen, in first-seen order."""
        seen: dict[str, None] = {}
        for unit in self.units:
            seen.setdefault(unit.path, None)
        return list(seen)

    def units_for(self, path: str) -> list[WorkUnit]:
        return [unit for unit in self.units if unit.path == path]

    async def summarize(self, unit: WorkUnit) -> str:
        self.units.append(unit)
        if unit.path in self.fail_paths:
            raise RuntimeError(f"summarization failed for {unit.path}")
        return f"summary of {unit.path}"
