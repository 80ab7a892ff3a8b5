"""
Generic utility functions shared across modules.

Includes monotonic clock abstractions, angle math, logging setup, and error
classes.
"""
