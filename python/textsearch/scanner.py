"""
Scanner - Line-by-line pattern search inside a single file.

Every file scan takes a slot from a shared semaphore before opening the
file, so only a bounded number of files are read at the same time.
Blocking reads run in worker threads, a chunk of lines at a time.
"""

import asyncio
import logging
from functools import partial
from pathlib import Path
from typing import Awaitable, Callable, Iterator, TextIO

from .cancellation import CancellationToken
from .config import get_config, SearchConfig
from .errors import handle_error, ErrorAction, ScanOutcome
from .models import Occurrence, SearchStats


logger = logging.getLogger(__name__)

Emit = Callable[[Occurrence], Awaitable[None]]


def find_offsets(line: str, pattern: str) -> Iterator[int]:
    """
    Yield every offset in ``line`` where ``pattern`` starts.

    The search resumes one character after each match, so overlapping
    matches are reported ("AA" in "AAA" gives 0 and 1).
    """
    index = line.find(pattern)
    while index != -1:
        yield index
        index = line.find(pattern, index + 1)


def _close_opened(opening: asyncio.Future) -> None:
    """Close a file whose open finished after its scan was cancelled."""
    if opening.cancelled() or opening.exception() is not None:
        return
    opening.result().close()


def _close_after_read(handle: TextIO, reading: asyncio.Future) -> None:
    """Close a file once the read that outlived its scan is done."""
    if not reading.cancelled():
        reading.exception()  # mark retrieved
    handle.close()


class Scanner:
    """
    Concurrent file scanner.

    One instance is shared by all scan tasks of a search; its semaphore
    is the admission limiter for the whole search.
    """

    def __init__(
        self,
        pattern: str,
        emit: Emit,
        token: CancellationToken,
        config: SearchConfig | None = None,
        stats: SearchStats | None = None,
    ):
        self.pattern = pattern
        self.config = config or get_config()
        self.stats = stats or SearchStats()
        self._emit = emit
        self._token = token
        self._semaphore = asyncio.Semaphore(self.config.scanner_concurrency)

    async def scan(self, path: Path) -> ScanOutcome:
        """
        Scan one file and emit its occurrences.

        Per-file errors are logged and reported in the outcome, never
        raised. Cancellation is always raised.
        """
        async with self._semaphore:
            self._token.ensure_active()
            try:
                count = await self._scan_file(path)
            except Exception as e:
                action = handle_error(e, path, "scan_file")
                if action is ErrorAction.SKIP:
                    self.stats.file_errors += 1
                return ScanOutcome.failed(path, e, action)

        self.stats.files_scanned += 1
        return ScanOutcome.ok(path, count)

    async def _scan_file(self, path: Path) -> int:
        """Read the file in line order and emit matches. Returns the count."""
        opening = asyncio.ensure_future(
            asyncio.to_thread(
                open,
                path,
                "r",
                encoding=self.config.encoding,
                errors=self.config.encoding_errors,
            )
        )
        try:
            handle = await asyncio.shield(opening)
        except asyncio.CancelledError:
            # The worker thread still finishes the open
            opening.add_done_callback(_close_opened)
            raise

        count = 0
        line_number = 0
        reading = None
        try:
            while True:
                reading = asyncio.ensure_future(
                    asyncio.to_thread(handle.readlines, self.config.read_chunk_hint)
                )
                lines = await asyncio.shield(reading)
                reading = None
                if not lines:
                    break

                for line in lines:
                    self._token.ensure_active()
                    line_number += 1
                    for offset in find_offsets(line, self.pattern):
                        await self._emit(Occurrence(path, line_number, offset))
                        count += 1
                        self.stats.occurrences += 1
        finally:
            if reading is not None and not reading.done():
                # Never close under a read still running in a worker thread
                reading.add_done_callback(partial(_close_after_read, handle))
            else:
                handle.close()

        return count
