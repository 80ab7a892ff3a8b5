"""
Configuration loading and validation for library settings.

Provides strongly typed settings objects for the rate limiter and logging,
loaded from environment variables with upfront validation.
"""
