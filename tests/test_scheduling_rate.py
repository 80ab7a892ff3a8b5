"""
Tests for toolbelt/scheduling/rate.py

Most tests drive the limiter with a ManualClock, so sleeps are recorded rather
than performed and every expected duration can be computed by hand. One smoke
test uses the real monotonic clock with generous tolerances.
"""

import logging
import time

import numpy as np
import pytest

from toolbelt.scheduling.rate import LoopRateLimiter, schedule_rate
from toolbelt.utils.errors import InvalidArgumentError
from toolbelt.utils.time import ManualClock


def test_schedule_rate_sleeps_remaining_period_minus_compensation():
    """At 10 Hz with no work done, the limiter sleeps 100 - 2 = 98 ms."""
    clock = ManualClock(start=50.0)
    start = clock.now()

    elapsed = schedule_rate(10, start, clock=clock)

    assert clock.sleeps == [pytest.approx(0.098)]
    assert elapsed == pytest.approx(0.098)


def test_schedule_rate_subtracts_work_already_done():
    clock = ManualClock()
    start = clock.now()
    clock.advance(0.030)

    elapsed = schedule_rate(10, start, clock=clock)

    # 100 ms period - 30 ms work - 2 ms compensation
    assert clock.sleeps == [pytest.approx(0.068)]
    assert elapsed == pytest.approx(0.098)


def test_schedule_rate_behind_schedule_returns_elapsed_without_sleeping():
    clock = ManualClock(start=10.0)
    start = clock.now()
    clock.advance(0.4)

    elapsed = schedule_rate(10, start, clock=clock)

    assert clock.sleeps == []
    assert elapsed == pytest.approx(0.4)


def test_schedule_rate_exactly_one_period_counts_as_behind():
    clock = ManualClock()
    start = clock.now()
    clock.advance(0.1)

    elapsed = schedule_rate(10, start, clock=clock)

    assert clock.sleeps == []
    assert elapsed == pytest.approx(0.1)


def test_schedule_rate_uses_integer_target_period():
    """At 3 Hz the target is 1000 // 3 = 333 ms, so 333 ms elapsed is already late."""
    clock = ManualClock()
    start = clock.now()
    clock.advance(0.333)

    assert schedule_rate(3, start, clock=clock) == pytest.approx(0.333)
    assert clock.sleeps == []


def test_schedule_rate_sleep_uses_fractional_period():
    """At 3 Hz and 0 ms elapsed: int(333.33 - 0 - 2) = 331 ms."""
    clock = ManualClock()

    schedule_rate(3, clock.now(), clock=clock)

    assert clock.sleeps == [pytest.approx(0.331)]


def test_schedule_rate_skips_sleep_inside_compensation_window():
    """99 ms into a 100 ms period: 100 - 99 - 2 < 0, so no sleep."""
    clock = ManualClock()
    start = clock.now()
    clock.advance(0.099)

    elapsed = schedule_rate(10, start, clock=clock)

    assert clock.sleeps == []
    assert elapsed == pytest.approx(0.099)


def test_schedule_rate_custom_compensation():
    clock = ManualClock()

    schedule_rate(10, clock.now(), clock=clock, compensation_ms=0)

    assert clock.sleeps == [pytest.approx(0.100)]


@pytest.mark.parametrize("compensation_ms", [-1, -50])
def test_schedule_rate_rejects_negative_compensation(compensation_ms):
    clock = ManualClock()

    with pytest.raises(InvalidArgumentError, match="compensation_ms"):
        schedule_rate(10, clock.now(), clock=clock, compensation_ms=compensation_ms)

    assert clock.sleeps == []


def test_schedule_rate_compensation_from_environment(monkeypatch):
    from toolbelt.config.settings import reset_settings

    monkeypatch.setenv("TOOLBELT_RATE_COMPENSATION_MS", "10")
    reset_settings()
    clock = ManualClock()

    schedule_rate(10, clock.now(), clock=clock)

    assert clock.sleeps == [pytest.approx(0.090)]


@pytest.mark.parametrize("rate", [0, -5, 2.5, "10", True, None])
def test_schedule_rate_rejects_invalid_rates(rate):
    clock = ManualClock()

    with pytest.raises(InvalidArgumentError):
        schedule_rate(rate, clock.now(), clock=clock)

    assert clock.sleeps == []


def test_schedule_rate_accepts_numpy_integer_rate():
    clock = ManualClock()

    schedule_rate(np.int64(20), clock.now(), clock=clock)

    assert clock.sleeps == [pytest.approx(0.048)]


def test_schedule_rate_logs_overrun_at_debug(caplog):
    clock = ManualClock()
    start = clock.now()
    clock.advance(0.25)

    with caplog.at_level(logging.DEBUG, logger="toolbelt"):
        schedule_rate(10, start, clock=clock)

    assert any("behind schedule" in record.getMessage() for record in caplog.records)


def test_schedule_rate_real_clock_smoke():
    """With the real clock a 20 Hz call blocks for roughly 48 ms."""
    start = time.monotonic()

    elapsed = schedule_rate(20, start)

    waited = time.monotonic() - start
    assert 0.040 <= waited < 0.5
    assert elapsed == pytest.approx(waited, abs=0.005)


def test_loop_rate_limiter_records_history():
    clock = ManualClock()
    limiter = LoopRateLimiter(10, clock=clock)

    clock.advance(0.020)
    first = limiter.sleep()
    clock.advance(0.150)
    second = limiter.sleep()

    assert first == pytest.approx(0.098)
    assert second == pytest.approx(0.150)
    assert limiter.history == (pytest.approx(0.098), pytest.approx(0.150))
    assert limiter.ticks == 2
    assert clock.sleeps == [pytest.approx(0.078)]


def test_loop_rate_limiter_starts_next_tick_after_sleep():
    """The second tick is measured from the end of the first sleep."""
    clock = ManualClock()
    limiter = LoopRateLimiter(10, clock=clock)

    limiter.sleep()
    limiter.sleep()

    assert clock.sleeps == [pytest.approx(0.098), pytest.approx(0.098)]
    assert clock.now() == pytest.approx(0.196)


def test_loop_rate_limiter_history_is_bounded():
    clock = ManualClock()
    limiter = LoopRateLimiter(10, clock=clock, history_size=2)

    for work in (0.2, 0.3, 0.4):
        clock.advance(work)
        limiter.sleep()

    assert limiter.history == (pytest.approx(0.3), pytest.approx(0.4))
    assert limiter.ticks == 3


def test_loop_rate_limiter_reset():
    clock = ManualClock()
    limiter = LoopRateLimiter(10, clock=clock)
    clock.advance(0.5)
    limiter.sleep()

    limiter.reset()

    assert limiter.history == ()
    assert limiter.ticks == 0


def test_loop_rate_limiter_period():
    assert LoopRateLimiter(4, clock=ManualClock()).period == 0.25


def test_loop_rate_limiter_summary_counts_overruns():
    clock = ManualClock()
    limiter = LoopRateLimiter(10, clock=clock)

    limiter.sleep()
    clock.advance(0.3)
    limiter.sleep()

    summary = limiter.summary()
    assert summary["ticks"] == 2
    assert summary["overrun_count"] == 1
    assert summary["max_seconds"] == pytest.approx(0.3)


def test_loop_rate_limiter_warns_on_overrun(caplog):
    clock = ManualClock()
    limiter = LoopRateLimiter(10, clock=clock, warn=True)
    clock.advance(0.2)

    with caplog.at_level(logging.WARNING, logger="toolbelt"):
        limiter.sleep()

    assert any(record.levelno == logging.WARNING for record in caplog.records)


def test_loop_rate_limiter_rejects_invalid_arguments():
    with pytest.raises(InvalidArgumentError):
        LoopRateLimiter(0, clock=ManualClock())
    with pytest.raises(InvalidArgumentError):
        LoopRateLimiter(10, clock=ManualClock(), history_size=0)
    with pytest.raises(InvalidArgumentError, match="compensation_ms"):
        LoopRateLimiter(10, clock=ManualClock(), compensation_ms=-1)


def test_loop_rate_limiter_compensation_defaults_to_settings():
    limiter = LoopRateLimiter(10, clock=ManualClock())

    assert limiter.compensation_ms == 2


def test_elapsed_ms_rounds_sub_microsecond_noise_up():
    """99.9996 ms is within half a microsecond of 100 ms and counts as 100."""
    from toolbelt.scheduling.rate import _elapsed_ms

    assert _elapsed_ms(ManualClock(start=0.0999996), 0.0) == 100
    assert _elapsed_ms(ManualClock(start=0.0999994), 0.0) == 99
