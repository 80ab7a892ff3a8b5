"""
Loop rate limiting for periodic control loops.

Includes the stateless schedule_rate() throttle and the LoopRateLimiter
convenience wrapper that tracks its own tick start times.
"""
