"""
Validator - Precondition checks run before any traversal.

Checks run in a fixed order and the first failure is raised:
existence, readability, directory, empty pattern, newline in
pattern, hidden root, virtual filesystem root.
"""

import os
from pathlib import Path

from .config import get_config, SearchConfig
from .errors import InvalidSearchArgument, RootNotFoundError, RootPermissionError
from .models import SearchRequest
from .paths import is_hidden, is_under_prefix


NEWLINE_CHARACTERS = ("\n", "\r")


def validate_request(
    pattern: str,
    root: os.PathLike | str,
    search_hidden: bool = False,
    config: SearchConfig | None = None,
) -> SearchRequest:
    """
    Validate a search and freeze it into a SearchRequest.

    Only metadata is touched; nothing is listed or opened.

    Raises:
        RootNotFoundError: root does not exist
        RootPermissionError: root is not readable
        InvalidSearchArgument: root is not a directory, the pattern is
            empty or has a newline, root is hidden while hidden search
            is disabled, or root lies in a virtual filesystem
    """
    config = config or get_config()
    root = Path(root)

    if not root.exists():
        raise RootNotFoundError(f"Directory {root} does not exist")

    if not os.access(root, os.R_OK):
        raise RootPermissionError(f"Main directory {root} is not readable")

    if not root.is_dir():
        raise InvalidSearchArgument(f"Provided path: {root} does not lead to a directory")

    if not pattern:
        raise InvalidSearchArgument("A pattern string cannot be empty!")

    if any(ch in pattern for ch in NEWLINE_CHARACTERS):
        raise InvalidSearchArgument("A pattern string cannot contain newlines!")

    if not search_hidden and is_hidden(root, root.stat()):
        raise InvalidSearchArgument(
            f"The starting directory {root} is hidden, but hidden search is disabled"
        )

    if is_under_prefix(root, config.virtual_filesystems):
        raise InvalidSearchArgument(f"The starting directory {root} is in a virtual filesystem")

    return SearchRequest(pattern=pattern, root=root, search_hidden=search_hidden)
