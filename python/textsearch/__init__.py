"""
Text Search Package - Concurrent streaming literal search over a directory tree.

Modules:
    - config: Centralized configuration
    - validator: Request checks run before any traversal
    - walker: Depth-first directory traversal with exclusion policy
    - scanner: Line-by-line search inside one file, bounded concurrency
    - searcher: Main entry point (walk → scan → stream)

Usage:
    from textsearch import search_for_text_occurrences

    async for occurrence in search_for_text_occurrences("TODO", "src"):
        print(occurrence.file, occurrence.line, occurrence.offset)
"""

from .errors import (
    InvalidSearchArgument,
    RootNotFoundError,
    RootPermissionError,
    SearchError,
    SearchRequestError,
    TraversalError,
)
from .models import Occurrence
from .searcher import Searcher, find_occurrences, search_for_text_occurrences

__all__ = [
    "Occurrence",
    "Searcher",
    "search_for_text_occurrences",
    "find_occurrences",
    "SearchError",
    "SearchRequestError",
    "RootNotFoundError",
    "RootPermissionError",
    "InvalidSearchArgument",
    "TraversalError",
]
