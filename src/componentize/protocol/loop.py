"""Single-threaded timer loop shared by a host and its surfaces.

Callbacks run one at a time in (due time, scheduling order). Time comes from
an injectable clock and waiting goes through an injectable sleep, so tests
drive the loop with a fake clock instead of real timers.
"""

import heapq
import itertools
import time
from typing import Callable

from componentize.logger import get_logger


logger = get_logger(__name__)


class EventLoop:

    def __init__(
        self,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
        ):
        self._clock = clock
        self._sleep = sleep
        self._queue: list[tuple[float, int, Callable[[], None]]] = []
        self._seq = itertools.count()

    def now_ms(self) -> float:
        return self._clock() * 1000.0

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> None:
        """Schedule callback after delay_ms; equal due times keep scheduling order."""
        due = self.now_ms() + max(delay_ms, 0)
        heapq.heappush(self._queue, (due, next(self._seq), callback))

    def call_soon(self, callback: Callable[[], None]) -> None:
        self.call_later(0, callback)

    @property
    def pending(self) -> int:
        return len(self._queue)

    def run_once(self) -> bool:
        """Wait for and run the next callback. Returns False when nothing is scheduled."""
        if not self._queue:
            return False
        due, _, callback = heapq.heappop(self._queue)
        wait_ms = due - self.now_ms()
        if wait_ms > 0:
            self._sleep(wait_ms / 1000.0)
        callback()
        return True

    def run_until_idle(self, max_callbacks: int = 100_000) -> int:
        """Run callbacks until none remain. Returns how many ran."""
        ran = 0
        while ran < max_callbacks and self.run_once():
            ran += 1
        if self._queue:
            logger.warning("Loop stopped with %d callback(s) still pending", len(self._queue))
        return ran
