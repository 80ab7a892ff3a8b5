"""
Clock abstractions for loop timing and deterministic testing.

This module provides a testable way to read a monotonic "now" and to sleep,
via a clock object rather than calling time.monotonic()/time.sleep() directly.
Code that depends on a Clock can be driven by a ManualClock in tests, so
rate-limiter behaviour is checked exactly without waiting on real time.

Monotonic readings are plain floats in seconds with an arbitrary origin: only
differences between two readings of the same clock are meaningful. Wall-clock
time (for human-readable stamps) is a separate concern handled by
current_datetime_str().
"""

import time
from datetime import datetime
from typing import List, Optional, Protocol


class Clock(Protocol):
    """
    Abstract monotonic time source protocol.

    **Conceptual**: A Clock answers "how many seconds on a monotonic timeline
    is it now?" and can block the caller for a duration. A monotonic source
    never jumps when the system wall clock is adjusted, which is what loop
    timing needs.

    **Usage**: Consumers accept a Clock (constructor or function parameter)
    and call clock.now() / clock.sleep(). In production pass a MonotonicClock;
    in tests pass a ManualClock.

    **Example**:
        def tick(clock: Clock):
            start = clock.now()
            do_work()
            return clock.now() - start
    """

    def now(self) -> float:
        """Return the current monotonic time in seconds."""
        ...

    def sleep(self, seconds: float) -> None:
        """Block the caller for approximately `seconds` seconds."""
        ...


class MonotonicClock:
    """
    Clock backed by the operating system's monotonic timer.

    Delegates to time.monotonic() and time.sleep(). Sleeps are not
    cancellable and may overshoot by the OS scheduler's wake-up latency.
    """

    def now(self) -> float:
        return time.monotonic()

    def sleep(self, seconds: float) -> None:
        # time.sleep rejects negative durations
        if seconds > 0:
            time.sleep(seconds)


class ManualClock:
    """
    Clock whose time only moves when told to (for deterministic tests).

    **Conceptual**: sleep() does not block; it advances the clock by the
    requested duration and records it, so a test can assert exactly how long
    a rate limiter asked to sleep. advance() simulates time spent doing work
    inside a loop iteration.

    **Usage**:
        clock = ManualClock()
        start = clock.now()
        clock.advance(0.030)        # 30 ms of "work"
        schedule_rate(10, start, clock=clock)
        clock.sleeps                # [0.068]
    """

    def __init__(self, start: float = 0.0):
        """
        Initialize a ManualClock.

        Args:
            start: Initial monotonic reading in seconds.
        """
        self._now = float(start)
        self.sleeps: List[float] = []

    def now(self) -> float:
        return self._now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        if seconds > 0:
            self._now += seconds

    def advance(self, seconds: float) -> None:
        """Move the clock forward without recording a sleep."""
        if seconds < 0:
            raise ValueError(f"cannot move a clock backwards, got {seconds}")
        self._now += seconds


def get_monotonic_clock() -> Clock:
    """Factory function to create a MonotonicClock instance."""
    return MonotonicClock()


def get_manual_clock(start: float = 0.0) -> ManualClock:
    """Factory function to create a ManualClock starting at `start` seconds."""
    return ManualClock(start)


def current_datetime_str(
    fmt: str = "%Y-%m-%d %H:%M:%S",
    now: Optional[datetime] = None,
) -> str:
    """
    Format the current local date and time.

    **Functionally**:
    - Default format is "YYYY-MM-DD HH:MM:SS" in local time.
    - Pass `now` to format a specific datetime (deterministic in tests).
    - Uses wall-clock time; never use the result for interval measurement.

    Args:
        fmt: strftime format string.
        now: Datetime to format instead of the current local time.

    Returns:
        Formatted date/time string.
    """
    if now is None:
        now = datetime.now()
    return now.strftime(fmt)
