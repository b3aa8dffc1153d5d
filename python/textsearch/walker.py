"""
Walker - Depth-first directory traversal for the search.

A single sequential walk that yields eligible regular files. Exclusion
is decided when a directory is reached, before its children are listed,
so excluded subtrees cost nothing.
"""

import asyncio
import logging
import os
from pathlib import Path
from typing import AsyncGenerator, List

from .cancellation import CancellationToken
from .config import get_config, SearchConfig
from .errors import handle_error, ErrorAction
from .models import SearchRequest, SearchStats
from .paths import is_hidden, is_under_prefix


logger = logging.getLogger(__name__)

_WINDOWS = os.name == "nt"


def _list_directory(directory: Path) -> List[os.DirEntry]:
    """List a directory (runs in a worker thread)."""
    with os.scandir(directory) as it:
        return list(it)


class Walker:
    """
    Depth-first walker over the subtree of a validated request.

    Directory listing runs in a worker thread so the event loop stays
    free for the scanners, but only one directory is listed at a time.
    """

    def __init__(
        self,
        request: SearchRequest,
        token: CancellationToken,
        config: SearchConfig | None = None,
        stats: SearchStats | None = None,
    ):
        self.request = request
        self.config = config or get_config()
        self.stats = stats or SearchStats()
        self._token = token

    async def walk(self) -> AsyncGenerator[Path, None]:
        """
        Yield eligible file paths under the request root.

        Directories wait on an explicit stack rather than the call stack,
        so tree depth is bounded by the filesystem only. Subdirectories
        are pushed in reverse so they are visited in listing order.
        """
        pending = [self.request.root]

        while pending:
            directory = pending.pop()
            self._token.ensure_active()

            entries = await self._enter_directory(directory)
            if entries is None:
                continue

            subdirectories = []
            for entry in entries:
                self._token.ensure_active()
                path = Path(entry.path)

                try:
                    if entry.is_dir(follow_symlinks=False):
                        subdirectories.append(path)
                        continue
                    if not self._is_eligible_file(entry):
                        self.stats.files_skipped += 1
                        continue
                except OSError as e:
                    if handle_error(e, path, "visit_entry") is ErrorAction.ABORT:
                        raise
                    self.stats.files_skipped += 1
                    continue

                yield path

            pending.extend(reversed(subdirectories))

    async def _enter_directory(self, directory: Path) -> List[os.DirEntry] | None:
        """List a directory, or return None if it is excluded or unreadable."""
        try:
            if self._should_skip_dir(directory):
                self.stats.directories_skipped += 1
                return None
            entries = await asyncio.to_thread(_list_directory, directory)
        except OSError as e:
            # Not critical if a directory couldn't be visited
            if handle_error(e, directory, "visit_directory") is ErrorAction.ABORT:
                raise
            return None

        self.stats.directories_visited += 1
        return entries

    def _should_skip_dir(self, directory: Path) -> bool:
        """Check if a directory subtree should be skipped."""
        if is_under_prefix(directory, self.config.virtual_filesystems):
            logger.warning(f"Skipping known virtual filesystem: {directory}")
            return True

        if not self.request.search_hidden:
            st = directory.stat() if _WINDOWS else None
            if is_hidden(directory, st):
                logger.warning(f"Skipping hidden directory: {directory}")
                return True

        return False

    def _is_eligible_file(self, entry: os.DirEntry) -> bool:
        """
        Check if a directory entry is a file the scanner should read.

        Symlinks are followed here, so a link to a regular file is
        searched while links to devices, sockets or nothing are not.
        """
        if not entry.is_file(follow_symlinks=True):
            return False

        if not self.request.search_hidden:
            st = entry.stat() if _WINDOWS else None
            if is_hidden(entry.path, st):
                return False

        return os.access(entry.path, os.R_OK)
