"""
Loop rate limiting for periodic control loops.

**Conceptual**: A sensor-polling or control loop should tick at a fixed rate,
say 10 Hz. Each iteration records its start time, does its work, and then
calls schedule_rate(). If the work finished early, the call sleeps away the
rest of the period; if the work overran, the call returns immediately and the
returned elapsed time tells the caller by how much.

**Timing model**:
  - Elapsed time is measured on a monotonic clock, in whole milliseconds.
  - The target period is 1000 // rate milliseconds.
  - When ahead of schedule the sleep is (1000 / rate - elapsed - compensation)
    ms; the compensation (2 ms by default) offsets the thread's wake-up
    latency so the loop does not run systematically slow.
  - The limiter never spins; it sleeps or returns.

schedule_rate() is stateless: the caller owns the start time. LoopRateLimiter
wraps the common "remember when this tick started" bookkeeping and keeps a
bounded history of tick durations for toolbelt.analytics.timing.
"""

import logging
from collections import deque
from typing import Deque, Optional, Tuple

import pandas as pd

from toolbelt.analytics.timing import summarize_loop_timing
from toolbelt.config.settings import get_settings
from toolbelt.utils.errors import InvalidArgumentError
from toolbelt.utils.time import Clock, MonotonicClock
from toolbelt.utils.validation import validate_compensation_ms, validate_rate

logger = logging.getLogger(__name__)


def _elapsed_ms(clock: Clock, start_time: float) -> int:
    # Round to whole microseconds first so float noise (0.03 * 1000 = 29.999...)
    # does not drop a millisecond, then floor to milliseconds
    # A reading within half a microsecond of the next millisecond (99.9996 ms)
    # therefore counts as 100, where a plain truncation would give 99
    return int(round((clock.now() - start_time) * 1_000_000)) // 1000


def schedule_rate(
    rate: int,
    start_time: float,
    clock: Optional[Clock] = None,
    compensation_ms: Optional[int] = None,
) -> float:
    """
    Sleep so that a loop started at `start_time` iterates at most `rate` Hz.

    **Functionally**:
    - elapsed_ms = now - start_time, in whole milliseconds.
    - If elapsed_ms < 1000 // rate: sleep int(1000 / rate - elapsed_ms -
      compensation_ms) ms (skipped when not positive), then measure again.
    - Otherwise the loop is behind schedule: no sleep, the overrun is logged
      at DEBUG level.
    - Either way the actual elapsed seconds since start_time are returned, so
      callers can always observe real loop timing.

    **Example**:
        clock = MonotonicClock()
        while running:
            start = clock.now()
            poll_sensors()
            elapsed = schedule_rate(10, start, clock=clock)

    Args:
        rate: Target frequency in Hz (positive integer).
        start_time: Monotonic reading (seconds) taken at the start of the
            iteration, from the same clock.
        clock: Time source; defaults to MonotonicClock.
        compensation_ms: Milliseconds shaved off the sleep; defaults to
            TOOLBELT_RATE_COMPENSATION_MS (2).

    Returns:
        Elapsed seconds since start_time (millisecond resolution).

    Raises:
        InvalidArgumentError: If rate is not a positive integer or
            compensation_ms is negative.
    """
    validate_rate(rate)

    if clock is None:
        clock = MonotonicClock()
    if compensation_ms is None:
        compensation_ms = get_settings().rate_limiter.compensation_ms
    validate_compensation_ms(compensation_ms)

    elapsed_ms = _elapsed_ms(clock, start_time)
    target_ms = 1000 // rate

    if elapsed_ms >= target_ms:
        logger.debug(
            "Loop behind schedule: %d ms elapsed, target period %d ms (%d Hz)",
            elapsed_ms,
            target_ms,
            rate,
        )
        return elapsed_ms / 1000.0

    sleep_ms = int(1000.0 / rate - elapsed_ms - compensation_ms)
    if sleep_ms > 0:
        clock.sleep(sleep_ms / 1000.0)

    return _elapsed_ms(clock, start_time) / 1000.0


class LoopRateLimiter:
    """
    Stateful convenience wrapper around schedule_rate().

    **Conceptual**: Tracks the start of the current tick itself. Each sleep()
    throttles the tick that just finished, records how long it took, and
    starts the next tick.

    **Usage**:
        limiter = LoopRateLimiter(50)
        for _ in range(500):
            control_step()
            limiter.sleep()
        print(limiter.summary())

    Attributes:
        rate: Target frequency in Hz.
        warn: Log a WARNING (instead of DEBUG) when a tick overruns.
        ticks: Number of completed ticks since construction or reset().
    """

    def __init__(
        self,
        rate: int,
        clock: Optional[Clock] = None,
        compensation_ms: Optional[int] = None,
        history_size: Optional[int] = None,
        warn: bool = False,
    ):
        """
        Initialize the limiter and start the first tick.

        Args:
            rate: Target frequency in Hz (positive integer).
            clock: Time source; defaults to MonotonicClock.
            compensation_ms: Sleep compensation; defaults to settings.
            history_size: Number of tick durations kept; defaults to
                TOOLBELT_RATE_HISTORY_SIZE (1000).
            warn: Log overruns at WARNING level.

        Raises:
            InvalidArgumentError: If rate, compensation_ms or history_size is
                invalid.
        """
        validate_rate(rate)
        settings = get_settings().rate_limiter
        if history_size is None:
            history_size = settings.history_size
        if history_size < 1:
            raise InvalidArgumentError(
                f"history_size must be at least 1, got {history_size}"
            )

        self.rate = rate
        self.warn = warn
        if compensation_ms is None:
            compensation_ms = settings.compensation_ms
        validate_compensation_ms(compensation_ms)
        self.compensation_ms = compensation_ms
        self._clock = clock if clock is not None else MonotonicClock()
        self._history: Deque[float] = deque(maxlen=history_size)
        self.ticks = 0
        self._tick_start = self._clock.now()

    @property
    def period(self) -> float:
        """Target period in seconds."""
        return 1.0 / self.rate

    @property
    def history(self) -> Tuple[float, ...]:
        """Elapsed seconds of the most recent ticks, oldest first."""
        return tuple(self._history)

    def sleep(self) -> float:
        """
        Finish the current tick: throttle, record, and start the next one.

        Returns:
            Elapsed seconds of the finished tick (including any sleep).
        """
        elapsed = schedule_rate(
            self.rate,
            self._tick_start,
            clock=self._clock,
            compensation_ms=self.compensation_ms,
        )
        if self.warn and elapsed > self.period:
            logger.warning(
                "Tick %d overran: %.3f s elapsed, target period %.3f s",
                self.ticks,
                elapsed,
                self.period,
            )

        self._history.append(elapsed)
        self.ticks += 1
        self._tick_start = self._clock.now()
        return elapsed

    def reset(self) -> None:
        """Forget recorded ticks and start a fresh tick now."""
        self._history.clear()
        self.ticks = 0
        self._tick_start = self._clock.now()

    def summary(self) -> pd.Series:
        """Timing summary of the recorded ticks (see summarize_loop_timing)."""
        return summarize_loop_timing(list(self._history), self.rate)
