"""
Error Handling - Centralized error policies and custom exceptions.

Three kinds of failure exist in a search:

- Request errors are raised synchronously before any traversal.
- Per-entry errors (an unreadable or vanished file or directory) are
  logged and skipped according to ERROR_POLICIES.
- Traversal errors and cancellation terminate the result stream.
"""

import logging
from dataclasses import dataclass
from enum import Enum, auto
from pathlib import Path
from typing import Optional


logger = logging.getLogger(__name__)


class ErrorAction(Enum):
    """What to do when an error occurs."""
    SKIP = auto()   # Skip this entry, continue the search
    ABORT = auto()  # Stop the entire search


@dataclass
class ErrorPolicy:
    """Policy for handling a specific error type."""
    action: ErrorAction
    log_level: int
    message_template: str = "{file}: {error}"


# Error type to policy mapping. Order matters: subclasses first.
ERROR_POLICIES: dict[type, ErrorPolicy] = {
    FileNotFoundError: ErrorPolicy(
        action=ErrorAction.SKIP,
        log_level=logging.WARNING,
        message_template="Skipped missing file (possibly deleted): {file}"
    ),
    PermissionError: ErrorPolicy(
        action=ErrorAction.SKIP,
        log_level=logging.WARNING,
        message_template="Permission denied: {file}"
    ),
    NotADirectoryError: ErrorPolicy(
        action=ErrorAction.SKIP,
        log_level=logging.DEBUG,
        message_template="Expected directory, got file: {file}"
    ),
    IsADirectoryError: ErrorPolicy(
        action=ErrorAction.SKIP,
        log_level=logging.DEBUG,
        message_template="Expected file, got directory: {file}"
    ),
    UnicodeDecodeError: ErrorPolicy(
        action=ErrorAction.SKIP,
        log_level=logging.WARNING,
        message_template="Cannot decode file: {file} - {error}"
    ),
    OSError: ErrorPolicy(
        action=ErrorAction.SKIP,
        log_level=logging.ERROR,
        message_template="Problem reading: {file} - {error}"
    ),
}


class SearchError(Exception):
    """Base exception for search errors."""
    pass


class SearchRequestError(SearchError):
    """The request was rejected before traversal started."""
    pass


class RootNotFoundError(SearchRequestError, FileNotFoundError):
    """The root directory does not exist."""
    pass


class RootPermissionError(SearchRequestError, PermissionError):
    """The root directory exists but cannot be read."""
    pass


class InvalidSearchArgument(SearchRequestError, ValueError):
    """The pattern or the root is not acceptable for a search."""
    pass


class TraversalError(SearchError):
    """The tree walk itself broke down. The cause is chained."""
    def __init__(self, root: Path, cause: BaseException):
        self.root = root
        super().__init__(f"Critical error during file walk of {root}: {cause}")


def handle_error(
    error: Exception,
    file_path: Optional[Path] = None,
    context: str = ""
) -> ErrorAction:
    """
    Handle a per-entry error according to the defined policies.

    Args:
        error: The exception that occurred
        file_path: Path to the entry being processed (if applicable)
        context: Additional context for logging

    Returns:
        The action to take
    """
    # Look up policy for this error type (or its base classes)
    policy = None
    for error_type, p in ERROR_POLICIES.items():
        if isinstance(error, error_type):
            policy = p
            break

    # Unknown errors are not per-entry problems
    if policy is None:
        policy = ErrorPolicy(
            action=ErrorAction.ABORT,
            log_level=logging.ERROR,
            message_template="Unexpected error: {file} - {error}"
        )

    file_str = str(file_path) if file_path else "<unknown>"
    message = policy.message_template.format(file=file_str, error=str(error))
    if context:
        message = f"[{context}] {message}"

    logger.log(policy.log_level, message)

    return policy.action


@dataclass
class ScanOutcome:
    """Result of scanning a single file."""
    path: Path
    occurrences: int = 0
    error: Optional[Exception] = None
    action_taken: Optional[ErrorAction] = None

    @property
    def success(self) -> bool:
        return self.error is None

    @classmethod
    def ok(cls, path: Path, occurrences: int) -> "ScanOutcome":
        return cls(path=path, occurrences=occurrences)

    @classmethod
    def failed(cls, path: Path, error: Exception, action: ErrorAction) -> "ScanOutcome":
        return cls(path=path, error=error, action_taken=action)
