"""60 Hz delay/sound timer clock.

The counters decay on their own thread at a fixed wall-clock rate, decoupled
from instruction throughput. Ticks are scheduled against absolute monotonic
deadlines so a slow or fast host neither speeds up nor slows down the decay.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Optional

from chip8vm.interfaces.clock import ITimerClock
from chip8vm.utils.consts import ConstUtils

logger = logging.getLogger(__name__)


def _clamp(value: int) -> int:
    return max(0, min(ConstUtils.MASK_8_BITS, int(value)))


class TimerClock(ITimerClock):
    """Thread-safe delay and sound counters.

    THREAD SAFETY: get/set/tick may be called from any thread. Each access
    holds a private lock only for the duration of the read or update.
    """

    def __init__(
        self,
        frequency: int = ConstUtils.TIMER_FREQUENCY,
        time_source: Callable[[], float] = time.monotonic,
    ):
        if frequency <= 0:
            raise ValueError("Timer frequency must be positive")
        self._frequency = frequency
        self._period = 1.0 / frequency
        self._time_source = time_source
        self._lock = threading.Lock()
        self._delay = 0
        self._sound = 0
        self._interval_count = 0
        self._thread: Optional[threading.Thread] = None
        self._stop_event = threading.Event()

    @property
    def frequency(self) -> int:
        return self._frequency

    @property
    def interval_count(self) -> int:
        """Total decrement intervals applied since construction or reset."""
        with self._lock:
            return self._interval_count

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def get_delay(self) -> int:
        with self._lock:
            return self._delay

    def set_delay(self, value: int) -> None:
        with self._lock:
            self._delay = _clamp(value)

    def get_sound(self) -> int:
        with self._lock:
            return self._sound

    def set_sound(self, value: int) -> None:
        with self._lock:
            self._sound = _clamp(value)

    def tick(self, intervals: int = 1) -> None:
        if intervals < 0:
            raise ValueError("intervals must be >= 0")
        if intervals == 0:
            return
        with self._lock:
            self._delay = max(0, self._delay - intervals)
            self._sound = max(0, self._sound - intervals)
            self._interval_count += intervals

    def reset(self) -> None:
        with self._lock:
            self._delay = 0
            self._sound = 0
            self._interval_count = 0

    # Background pacing -----------------------------------------------------

    def start(self) -> None:
        """Start decrementing on a daemon thread. No-op if already running."""
        if self.running:
            return
        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._run, name="chip8-timer", daemon=True
        )
        self._thread.start()
        logger.debug("Timer clock started at %d Hz", self._frequency)

    def stop(self, timeout: Optional[float] = 1.0) -> None:
        """Stop the background thread and wait for it to exit."""
        thread = self._thread
        if thread is None:
            return
        self._stop_event.set()
        thread.join(timeout)
        self._thread = None
        logger.debug("Timer clock stopped")

    def _run(self) -> None:
        deadline = self._time_source() + self._period
        while not self._stop_event.is_set():
            remaining = deadline - self._time_source()
            if remaining > 0 and self._stop_event.wait(remaining):
                break
            due = self._intervals_due(deadline, self._time_source())
            self.tick(due)
            deadline += due * self._period

    def _intervals_due(self, deadline: float, now: float) -> int:
        """Number of whole intervals elapsed once ``deadline`` has passed."""
        if now < deadline:
            return 0
        return 1 + int((now - deadline) // self._period)
