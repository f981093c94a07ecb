"""A simple stopwatch."""

from __future__ import annotations

import time


class Stopwatch:
    """Measures wall-clock time between a start and a stop mark, in seconds."""

    def __init__(self) -> None:
        now = time.perf_counter()
        self._start = now
        self._end = now
        self.accumulated = 0.0

    def start(self) -> None:
        """Set the start mark to now."""
        self._start = time.perf_counter()

    def stop(self) -> None:
        """Set the end mark to now."""
        self._end = time.perf_counter()

    def elapsed(self) -> float:
        """Seconds between the start and end marks."""
        return self._end - self._start

    def running_elapsed(self) -> float:
        """Seconds between the start mark and now."""
        return time.perf_counter() - self._start

    def accumulate(self) -> float:
        """Set the end mark, add the time since start to the total and return the total."""
        self._end = time.perf_counter()
        self.accumulated += self._end - self._start
        return self.accumulated

    def __enter__(self) -> "Stopwatch":
        self.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()