"""
toolbelt – small, independent helpers carried from project to project.

Includes big-endian buffer packing, a loop rate limiter, angle normalization,
loop-timing summaries, and environment-driven settings.
"""

__version__ = "0.1.0"
