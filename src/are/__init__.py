"""
Incremental generation engine.

Decides which files of a project need (re)summarization, splits oversized
files into token-budgeted chunks and keeps per-file state between runs.
"""

__version__ = "0.1.0"
