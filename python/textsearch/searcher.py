"""
Searcher - Main entry point for the text search.

Wires the pipeline together:
    Validator → Walker → Scanner tasks → queue → caller

The walker dispatches one scan task per eligible file without waiting
for it; the tasks queue on the scanner's semaphore and push occurrences
into a single queue that the caller drains as an async iterator.
"""

import asyncio
import logging
import os
import sys
import time
from dataclasses import dataclass
from typing import AsyncGenerator, AsyncIterator, List, Optional, Set

from .cancellation import CancellationToken
from .config import get_config, SearchConfig
from .errors import ErrorAction, ScanOutcome, SearchRequestError, TraversalError
from .models import Occurrence, SearchRequest, SearchStats
from .scanner import Scanner
from .validator import validate_request
from .walker import Walker


logger = logging.getLogger(__name__)


@dataclass
class _StreamEnd:
    """Last item on the queue. Carries the fatal error, if any."""
    error: Optional[Exception] = None


class Searcher:
    """
    Runs a single validated search.

    A Searcher is single use: ``stream()`` may be iterated once.
    """

    def __init__(self, request: SearchRequest, config: Optional[SearchConfig] = None):
        self.request = request
        self.config = config or get_config()
        self.stats = SearchStats()
        self._token = CancellationToken()
        self._tasks: Set[asyncio.Task] = set()
        self._failure: Optional[Exception] = None
        self._started = False

    async def stream(self) -> AsyncGenerator[Occurrence, None]:
        """
        Yield occurrences as the scanners find them.

        Nothing runs until the first item is requested. Closing the
        generator early cancels the walk and every pending scan.

        Raises:
            TraversalError: the walk itself failed
            RuntimeError: the searcher was already used
        """
        if self._started:
            raise RuntimeError("A search cannot be restarted")
        self._started = True

        queue: asyncio.Queue = asyncio.Queue(maxsize=self.config.queue_size)
        producer = asyncio.create_task(self._produce(queue))

        try:
            while True:
                item = await queue.get()
                if isinstance(item, _StreamEnd):
                    await producer
                    if item.error is not None:
                        raise TraversalError(self.request.root, item.error) from item.error
                    return
                yield item
        finally:
            self._token.cancel()
            if not producer.done():
                producer.cancel()
                try:
                    await producer
                except asyncio.CancelledError:
                    pass

    async def _produce(self, queue: asyncio.Queue) -> None:
        """Walk the tree and dispatch scans, then close the stream."""
        start_time = time.monotonic()
        error: Optional[Exception] = None

        try:
            await self._walk_and_dispatch(queue)
            error = self._failure
        except asyncio.CancelledError:
            raise
        except Exception as e:
            error = e
        finally:
            pending = list(self._tasks)
            for task in pending:
                task.cancel()
            if pending:
                await asyncio.gather(*pending, return_exceptions=True)
            self.stats.duration_seconds = time.monotonic() - start_time

        if error is not None:
            logger.error(f"Critical error during file walk: {error}", exc_info=error)
        else:
            logger.info(str(self.stats))

        await queue.put(_StreamEnd(error))

    async def _walk_and_dispatch(self, queue: asyncio.Queue) -> None:
        scanner = Scanner(self.request.pattern, queue.put, self._token, self.config, self.stats)
        walker = Walker(self.request, self._token, self.config, self.stats)

        async for path in walker.walk():
            if self._failure is not None:
                return
            task = asyncio.create_task(scanner.scan(path))
            self._tasks.add(task)
            task.add_done_callback(self._on_scan_done)

        while self._tasks and self._failure is None:
            await asyncio.wait(list(self._tasks), return_when=asyncio.FIRST_COMPLETED)

    def _on_scan_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return

        outcome: ScanOutcome = task.result()
        if outcome.action_taken is ErrorAction.ABORT and self._failure is None:
            self._failure = outcome.error


def search_for_text_occurrences(
    pattern: str,
    root_directory: os.PathLike | str,
    search_hidden: bool = False,
    config: Optional[SearchConfig] = None,
) -> AsyncIterator[Occurrence]:
    """
    Search for occurrences of ``pattern`` inside files under ``root_directory``.

    The request is validated immediately, so malformed requests raise
    here, before any iteration. The walk starts when the caller begins
    iterating.

    Args:
        pattern: Non-empty literal string without newlines
        root_directory: Starting directory
        search_hidden: Whether to search hidden files and directories

    Returns:
        Async iterator of Occurrence (file, line, offset). Order across
        files is unspecified; within a file it follows (line, offset).

    Raises:
        RootNotFoundError, RootPermissionError, InvalidSearchArgument
    """
    config = config or get_config()
    request = validate_request(pattern, root_directory, search_hidden, config)
    return Searcher(request, config).stream()


async def find_occurrences(
    pattern: str,
    root_directory: os.PathLike | str,
    search_hidden: bool = False,
    config: Optional[SearchConfig] = None,
) -> List[Occurrence]:
    """
    Convenience function to collect all occurrences.

    Usage:
        occurrences = await find_occurrences("TODO", Path.home() / "src")
        for occurrence in occurrences:
            print(occurrence)
    """
    return [
        occurrence
        async for occurrence in search_for_text_occurrences(
            pattern, root_directory, search_hidden, config
        )
    ]


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point. Exit status follows grep: 0 found, 1 none, 2 error."""
    import argparse

    parser = argparse.ArgumentParser(description="Concurrent literal text search")
    parser.add_argument("pattern", help="Literal text to search for")
    parser.add_argument("root", nargs="?", default=".", help="Directory to search (default: .)")
    parser.add_argument("--hidden", action="store_true", help="Search hidden files and directories")
    parser.add_argument("--stats", action="store_true", help="Print statistics when done")
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose output")

    args = parser.parse_args(argv)

    # Configure logging
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="[%(levelname)s] %(name)s: %(message)s"
    )

    config = get_config()
    try:
        request = validate_request(args.pattern, args.root, args.hidden, config)
    except SearchRequestError as e:
        print(f"textsearch: {e}", file=sys.stderr)
        return 2

    searcher = Searcher(request, config)

    async def _main() -> int:
        found = 0
        async for occurrence in searcher.stream():
            print(occurrence)
            found += 1
        return 0 if found else 1

    try:
        status = asyncio.run(_main())
    except TraversalError as e:
        print(f"textsearch: {e}", file=sys.stderr)
        return 2
    except KeyboardInterrupt:
        print("\nStopped.", file=sys.stderr)
        return 130

    if args.stats:
        print(f"\n{searcher.stats}", file=sys.stderr)

    return status


if __name__ == "__main__":
    sys.exit(main())
