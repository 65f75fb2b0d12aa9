"""Application rate limiting – shared rolling-window bookkeeping."""
from __future__ import annotations

import threading
from collections import deque

from doc_optimizer.kernel.errors import ValidationError
from doc_optimizer.kernel.time import Clock, SystemClock

# (timestamp, weight); timestamps are appended in non-decreasing order
Entry = tuple[float, int]


class RollingWindowStore:
    """Per-identifier deques of weighted timestamps inside a rolling window.

    An entry expires once ``now - timestamp >= window_seconds``. Identifiers
    whose deque is empty after a purge are dropped by :meth:`sweep`.
    Callers hold :attr:`lock` around every mutating sequence.
    """

    def __init__(self, window_seconds: float, clock: Clock | None = None) -> None:
        if window_seconds <= 0:
            raise ValidationError(
                "Invalid rate limit window",
                errors=[{"field": "window_seconds", "message": "must be > 0"}],
            )
        self.window_seconds = window_seconds
        self.clock = clock or SystemClock()
        self.lock = threading.Lock()
        self._windows: dict[str, deque[Entry]] = {}

    def now(self) -> float:
        return self.clock.timestamp()

    def _expired(self, timestamp: float, now: float) -> bool:
        return now - timestamp >= self.window_seconds

    def purge(self, identifier: str, now: float) -> deque[Entry] | None:
        window = self._windows.get(identifier)
        if window is None:
            return None
        while window and self._expired(window[0][0], now):
            window.popleft()
        return window

    def append(self, identifier: str, now: float, weight: int = 1) -> None:
        self._windows.setdefault(identifier, deque()).append((now, weight))

    def sweep(self, now: float) -> None:
        for identifier in list(self._windows):
            window = self.purge(identifier, now)
            if not window:
                del self._windows[identifier]

    def live(self, identifier: str, now: float) -> list[Entry]:
        """Entries still inside the window, without mutating anything."""
        window = self._windows.get(identifier, ())
        return [entry for entry in window if not self._expired(entry[0], now)]

    def used(self, identifier: str, now: float) -> int:
        return sum(weight for _, weight in self.live(identifier, now))

    def reset_at(self, identifier: str, now: float) -> float:
        entries = self.live(identifier, now)
        if not entries:
            return 0.0
        return entries[0][0] + self.window_seconds

    def discard(self, identifier: str) -> None:
        self._windows.pop(identifier, None)

    def total(self, now: float) -> int:
        return sum(self.used(identifier, now) for identifier in list(self._windows))

    def __len__(self) -> int:
        return len(self._windows)

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._windows


__all__ = ["Entry", "RollingWindowStore"]
