"""
Cancellation - Cooperative cancellation shared by every search stage.

asyncio only delivers task cancellation at await points. The token is
checked explicitly between directory entries and between lines, where
long stretches of work may run without awaiting.
"""

import asyncio
import threading


class CancellationToken:
    """A one-shot flag that, once set, stops the whole search."""

    def __init__(self):
        self._event = threading.Event()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        self._event.set()

    def ensure_active(self) -> None:
        """Raise CancelledError if the search was cancelled."""
        if self._event.is_set():
            raise asyncio.CancelledError()
