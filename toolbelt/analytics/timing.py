"""
Timing summaries for rate-limited loops.

**Conceptual**: schedule_rate() returns the elapsed seconds of every tick.
Collected over a run, those values answer "did the loop actually hold its
rate?": the mean period shows drift, the standard deviation shows jitter, and
the overrun count shows how often work took longer than the target period.

All functions accept a plain sequence or a pandas Series of elapsed seconds
and return pandas objects so results print and compare cleanly.
"""

from typing import Sequence, Union

import numpy as np
import pandas as pd

from toolbelt.utils.validation import validate_rate

ElapsedSeconds = Union[Sequence[float], np.ndarray, pd.Series]

SUMMARY_FIELDS = [
    "ticks",
    "target_period_seconds",
    "mean_seconds",
    "std_seconds",
    "max_seconds",
    "overrun_count",
    "overrun_fraction",
    "achieved_rate_hz",
]


def count_overruns(elapsed_seconds: ElapsedSeconds, rate: int) -> int:
    """
    Count ticks whose elapsed time exceeded the target period 1 / rate.

    A tick that took exactly one period is on time, not an overrun.
    """
    validate_rate(rate)
    elapsed = pd.Series(elapsed_seconds, dtype="float64")
    return int((elapsed > 1.0 / rate).sum())


def summarize_loop_timing(elapsed_seconds: ElapsedSeconds, rate: int) -> pd.Series:
    """
    Summarize recorded tick durations against a target rate.

    **Functionally**:
    - ticks: number of recorded durations.
    - target_period_seconds: 1 / rate.
    - mean_seconds / std_seconds / max_seconds: statistics of the durations
      (std uses the sample estimator, so it is NaN for a single tick).
    - overrun_count: ticks longer than the target period.
    - overrun_fraction: overrun_count / ticks.
    - achieved_rate_hz: 1 / mean_seconds.

    **Edge cases**:
    - Empty input: ticks and overrun_count are 0, every statistic is NaN.
    - A zero mean (all ticks measured as 0 ms) gives achieved_rate_hz NaN.

    Args:
        elapsed_seconds: Elapsed seconds per tick (e.g. LoopRateLimiter.history).
        rate: Target rate in Hz (positive integer).

    Returns:
        Float Series indexed by SUMMARY_FIELDS, named "loop_timing".

    Raises:
        InvalidArgumentError: If rate is not a positive integer.
    """
    validate_rate(rate)
    elapsed = pd.Series(elapsed_seconds, dtype="float64")
    target_period = 1.0 / rate
    ticks = len(elapsed)

    if ticks == 0:
        values = [0.0, target_period, np.nan, np.nan, np.nan, 0.0, np.nan, np.nan]
        return pd.Series(values, index=SUMMARY_FIELDS, name="loop_timing")

    mean = elapsed.mean()
    overruns = count_overruns(elapsed, rate)
    achieved_rate = 1.0 / mean if mean > 0 else np.nan

    values = [
        float(ticks),
        target_period,
        mean,
        elapsed.std(),
        elapsed.max(),
        float(overruns),
        overruns / ticks,
        achieved_rate,
    ]
    return pd.Series(values, index=SUMMARY_FIELDS, name="loop_timing")
