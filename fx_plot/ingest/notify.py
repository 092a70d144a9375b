"""Redraw notification between the ingestion thread and the renderer."""

import threading
from typing import Optional


class RedrawSignal:
    """
    Dirty flag set by the ingestion thread after each applied quote.

    Calling the instance fires the signal without blocking. The renderer
    either polls consume() once per frame or blocks in wait(); in both
    cases it re-reads the latest store snapshot.
    """

    def __init__(self):
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._fired = 0

    def __call__(self) -> None:
        with self._lock:
            self._fired += 1
        self._event.set()

    @property
    def fired_count(self) -> int:
        """Total notifications since creation."""
        with self._lock:
            return self._fired

    def is_set(self) -> bool:
        return self._event.is_set()

    def consume(self) -> bool:
        """Clear the flag, returning whether new data had been signalled."""
        was_set = self._event.is_set()
        if was_set:
            self._event.clear()
        return was_set

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until signalled or timeout, then clear the flag."""
        signalled = self._event.wait(timeout)
        if signalled:
            self._event.clear()
        return signalled
