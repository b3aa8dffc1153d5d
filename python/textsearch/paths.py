"""Path policy helpers shared by the validator and the walker."""

import os
import stat
from pathlib import Path
from typing import Iterable


def absolute_normalized(path: os.PathLike | str) -> str:
    """Absolute, normalized path. Symlinks are not resolved."""
    return os.path.abspath(os.fspath(path))


def is_hidden(path: os.PathLike | str, st: os.stat_result | None = None) -> bool:
    """
    Check if a file or directory is hidden.

    Dot-names are hidden everywhere; on Windows the hidden attribute
    counts as well. The name is taken from the normalized path so that
    "." or "dir/.." are judged by the directory they point at.
    """
    name = os.path.basename(absolute_normalized(path))
    if name.startswith("."):
        return True

    attributes = getattr(st, "st_file_attributes", 0) if st is not None else 0
    return bool(attributes & getattr(stat, "FILE_ATTRIBUTE_HIDDEN", 0))


def is_under_prefix(path: os.PathLike | str, prefixes: Iterable[str]) -> bool:
    """Check if the absolute path equals or lies below one of the prefixes."""
    candidate = Path(absolute_normalized(path))
    return any(candidate.is_relative_to(prefix) for prefix in prefixes)
