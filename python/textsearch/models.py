"""
Data Models - Type definitions for the search pipeline.

These dataclasses represent the data flowing between the validator,
the walker and the scanner.
"""

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class Occurrence:
    """
    A single located match of the search pattern.

    ``line`` is 1-based, ``offset`` is the 0-based character index
    within that line where the match starts.
    """
    file: Path
    line: int
    offset: int

    def __str__(self) -> str:
        return f"{self.file}:{self.line}:{self.offset}"


@dataclass(frozen=True)
class SearchRequest:
    """A validated search request. Only the validator creates these."""
    pattern: str
    root: Path
    search_hidden: bool = False


@dataclass
class SearchStats:
    """Statistics from a single search."""
    directories_visited: int = 0
    directories_skipped: int = 0
    files_scanned: int = 0
    files_skipped: int = 0
    file_errors: int = 0
    occurrences: int = 0
    duration_seconds: float = 0.0

    def __str__(self) -> str:
        return (
            f"Found {self.occurrences} occurrences "
            f"in {self.files_scanned} files "
            f"({self.directories_visited} directories, "
            f"{self.directories_skipped} directories skipped, "
            f"{self.files_skipped} files skipped, "
            f"{self.file_errors} errors) "
            f"in {self.duration_seconds:.1f}s"
        )
