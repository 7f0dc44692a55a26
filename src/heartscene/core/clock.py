from __future__ import annotations

import time
from typing import Callable, Optional


class AnimationClock:
    """Monotonic elapsed-time counter started with the animation loop.

    ``time_fn`` must be monotonic; tests pass a scripted source to step the
    loop with synthetic deltas.
    """

    def __init__(self, time_fn: Callable[[], float] = time.perf_counter) -> None:
        self._time_fn = time_fn
        self._start: Optional[float] = None
        self.elapsed = 0.0
        self.previous = 0.0

    @property
    def started(self) -> bool:
        return self._start is not None

    def start(self) -> None:
        if self._start is None:
            self._start = self._time_fn()

    def advance(self) -> float:
        """Read the clock, update elapsed/previous, return the frame delta."""
        if self._start is None:
            self.start()
        self.elapsed = self._time_fn() - self._start
        delta = self.elapsed - self.previous
        self.previous = self.elapsed
        return delta
