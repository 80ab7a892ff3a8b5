#!/usr/bin/env python3
"""
Run a rate-limited telemetry loop and report how well it held its rate.

**Purpose**: Exercises the library end to end the way a control loop uses it.
Every tick advances a simulated heading, packs a small binary telemetry frame,
and then throttles with LoopRateLimiter. At the end a timing summary (mean
period, jitter, overruns) is printed.

**Frame layout** (10 bytes, big-endian):
  - int32   tick index
  - int16   heading in (-π, π], scaled by 10000
  - int32   elapsed seconds of the previous tick, scaled by 1e6 (microseconds)

**Usage**:
    From project root:
    ```bash
    python actions/run_rate_limited_loop.py --rate 20 --ticks 40
    python actions/run_rate_limited_loop.py --rate 50 --ticks 100 --work-ms 25 --log-level DEBUG
    ```
"""

import argparse
import math
import sys
import time
from pathlib import Path
from typing import List, Optional, Tuple

# Ensure project root is on path for imports
repo_root = Path(__file__).parent.parent
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from toolbelt.packing.frame import FrameBuilder
from toolbelt.scheduling.rate import LoopRateLimiter
from toolbelt.utils.logging import get_logger, setup_logging
from toolbelt.utils.math import normalize_angle
from toolbelt.utils.time import Clock, MonotonicClock, current_datetime_str

FRAME_SIZE = 10
HEADING_SCALE = 10_000
ELAPSED_SCALE = 1_000_000

# Heading advance per tick (radians)
HEADING_STEP = math.pi / 8

logger = get_logger("actions.run_rate_limited_loop")


def build_telemetry_frame(tick: int, heading: float, elapsed: float) -> bytes:
    """
    Pack one telemetry frame.

    Args:
        tick: Tick index.
        heading: Heading in radians (normalized to (-π, π] before packing).
        elapsed: Elapsed seconds of the previous tick.

    Returns:
        FRAME_SIZE bytes.
    """
    return (
        FrameBuilder(FRAME_SIZE)
        .int32(tick)
        .float16(normalize_angle(heading), HEADING_SCALE)
        .float32(elapsed, ELAPSED_SCALE)
        .tobytes()
    )


def run_loop(
    rate: int,
    ticks: int,
    work_seconds: float = 0.0,
    clock: Optional[Clock] = None,
) -> Tuple[List[bytes], LoopRateLimiter]:
    """
    Run `ticks` iterations at `rate` Hz, simulating `work_seconds` of work each.

    Args:
        rate: Target loop rate in Hz.
        ticks: Number of iterations.
        work_seconds: Simulated work per tick (slept on the clock).
        clock: Time source; MonotonicClock when omitted.

    Returns:
        (frames, limiter): the packed frames in order, and the limiter holding
        the recorded tick durations.
    """
    clock = clock if clock is not None else MonotonicClock()
    limiter = LoopRateLimiter(rate, clock=clock, history_size=max(ticks, 1))

    frames: List[bytes] = []
    heading = 0.0
    elapsed = 0.0

    for tick in range(ticks):
        frames.append(build_telemetry_frame(tick, heading, elapsed))
        heading += HEADING_STEP
        if work_seconds > 0:
            clock.sleep(work_seconds)
        elapsed = limiter.sleep()

    return frames, limiter


def main(argv: Optional[List[str]] = None) -> None:
    """
    Main entrypoint.

    Steps:
      1. Parse arguments and configure logging.
      2. Run the loop.
      3. Print the timing summary.
    """
    parser = argparse.ArgumentParser(
        description="Run a rate-limited telemetry loop and print a timing summary.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )

    parser.add_argument(
        "--rate",
        type=int,
        default=20,
        help="Target loop rate in Hz. Default: 20.",
    )

    parser.add_argument(
        "--ticks",
        type=int,
        default=40,
        help="Number of loop iterations. Default: 40.",
    )

    parser.add_argument(
        "--work-ms",
        type=float,
        default=5.0,
        help="Simulated work per tick in milliseconds. Default: 5.",
    )

    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        help="Log level (DEBUG, INFO, ...). Default: TOOLBELT_LOG_LEVEL or WARNING.",
    )

    args = parser.parse_args(argv)
    setup_logging(level=args.log_level)

    print("=" * 80)
    print(f"Rate-limited loop started {current_datetime_str()}")
    print("=" * 80)
    print(f"  Rate:  {args.rate} Hz")
    print(f"  Ticks: {args.ticks}")
    print(f"  Work:  {args.work_ms:.1f} ms per tick")
    print()

    started = time.monotonic()
    frames, limiter = run_loop(args.rate, args.ticks, work_seconds=args.work_ms / 1000.0)
    wall = time.monotonic() - started
    logger.info("Packed %d frames in %.3f s", len(frames), wall)

    summary = limiter.summary()
    print("Timing summary:")
    print("-" * 80)
    print(f"  Ticks:             {int(summary['ticks']):>10,}")
    print(f"  Target period:     {summary['target_period_seconds']:>10.4f} s")
    print(f"  Mean period:       {summary['mean_seconds']:>10.4f} s")
    print(f"  Jitter (std):      {summary['std_seconds']:>10.4f} s")
    print(f"  Max period:        {summary['max_seconds']:>10.4f} s")
    print(f"  Overruns:          {int(summary['overrun_count']):>10,}")
    print(f"  Achieved rate:     {summary['achieved_rate_hz']:>10.2f} Hz")
    print("-" * 80)
    print(f"  Last frame:        {frames[-1].hex() if frames else '-'}")
    print()


if __name__ == "__main__":
    main()
