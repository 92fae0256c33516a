"""Data version channel.

A monotonically increasing counter bumped after every successful mutation.
Read-only collaborators poll ``current()`` (or subscribe) to know when cached
pages must be refetched.
"""

import logging
import threading
from typing import Callable, List

logger = logging.getLogger("mealcount.data_version")

Listener = Callable[[int], None]


class DataVersionChannel:
    def __init__(self, start: int = 0):
        self._version = start
        self._lock = threading.Lock()
        self._listeners: List[Listener] = []

    def current(self) -> int:
        with self._lock:
            return self._version

    def bump(self) -> int:
        """Advance the version and notify subscribers; returns the new version"""
        with self._lock:
            self._version += 1
            version = self._version
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(version)
            except Exception:
                # a broken subscriber must not fail the mutation that already committed
                logger.exception("Data version listener failed at version %d", version)
        return version

    def subscribe(self, listener: Listener) -> None:
        with self._lock:
            self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)
