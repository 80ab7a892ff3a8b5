"""
Timing analytics for rate-limited loops.

Includes summaries of recorded tick durations: mean period, jitter, and
overrun counts.
"""
