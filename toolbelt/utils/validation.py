"""Argument validation shared by the rate limiter and timing analytics."""

import numbers

from toolbelt.utils.errors import InvalidArgumentError


def validate_rate(rate: int) -> None:
    """
    Check that `rate` is a positive integer number of iterations per second.

    Raises:
        InvalidArgumentError: For zero, negative, bool, or non-integer rates.
    """
    if isinstance(rate, bool) or not isinstance(rate, numbers.Integral):
        raise InvalidArgumentError(f"rate must be a positive integer, got {rate!r}")
    if rate <= 0:
        raise InvalidArgumentError(f"rate must be a positive integer, got {rate}")


def validate_compensation_ms(compensation_ms: int) -> None:
    """Reject negative sleep compensation, which would lengthen every sleep."""
    if compensation_ms < 0:
        raise InvalidArgumentError(
            f"compensation_ms must be non-negative, got {compensation_ms}"
        )
