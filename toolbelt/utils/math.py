"""
Angle normalization and clamping utilities.

This module provides the small set of deterministic math helpers used around
control loops and telemetry: mapping angles into canonical ranges, finding the
shortest signed rotation between two headings, and clamping values to bounds.

All angle functions work in radians, accept either Python scalars or numpy
arrays (processed element-wise), and have no failure modes: NaN and infinite
inputs propagate as NaN following IEEE floating-point semantics.
"""

from typing import Union

import numpy as np

from toolbelt.utils.errors import InvalidArgumentError

TWO_PI = 2.0 * np.pi

AngleLike = Union[float, np.ndarray]


def _finish(result: np.ndarray) -> AngleLike:
    """Return a Python float for 0-d results, the array otherwise."""
    if np.ndim(result) == 0:
        return float(result)
    return result


def normalize_angle_positive(angle: AngleLike) -> AngleLike:
    """
    Map an angle onto the canonical range [0, 2π).

    **Conceptual**: Any number of full turns, positive or negative, is removed
    so that equal headings compare equal. -π/2 (a quarter turn clockwise)
    becomes 3π/2; 5π becomes π.

    **Mathematical**:
        a' = fmod(fmod(a, 2π) + 2π, 2π)
    fmod keeps the sign of its first argument, so the inner result lies in
    (-2π, 2π); adding 2π makes it positive and the outer fmod folds it back
    below 2π.

    **Edge cases**:
    - NaN or ±inf input yields NaN.
    - Results within floating error of 2π can round to 2π itself for inputs
      just below a multiple of 2π.

    Args:
        angle: Angle in radians (scalar or array).

    Returns:
        Angle in [0, 2π), same shape as input.
    """
    with np.errstate(invalid="ignore"):
        result = np.fmod(np.fmod(angle, TWO_PI) + TWO_PI, TWO_PI)
    return _finish(result)


def normalize_angle(angle: AngleLike) -> AngleLike:
    """
    Map an angle onto the canonical range (-π, π].

    **Mathematical**: Normalize into [0, 2π), then subtract 2π from anything
    strictly greater than π. π itself stays π; 3π/2 becomes -π/2.

    Args:
        angle: Angle in radians (scalar or array).

    Returns:
        Angle in (-π, π], same shape as input.
    """
    positive = np.asarray(normalize_angle_positive(angle))
    result = np.where(positive > np.pi, positive - TWO_PI, positive)
    return _finish(result)


def shortest_angular_distance(from_angle: AngleLike, to_angle: AngleLike) -> AngleLike:
    """
    Signed shortest rotation that takes `from_angle` to `to_angle`.

    **Conceptual**: Turning from heading 0 to heading 3π/2 can be done by
    rotating +3π/2 or -π/2; the shortest is -π/2. A positive result means
    counter-clockwise (increasing angle), negative means clockwise.

    **Mathematical**:
        d = normalize_positive(normalize_positive(to) - normalize_positive(from))
        if d > π: d = -(2π - d)
        result = normalize_angle(d)

    **Edge cases**:
    - from_angle == to_angle gives exactly 0.
    - Opposite headings give π (never -π).

    Args:
        from_angle: Starting angle in radians.
        to_angle: Target angle in radians.

    Returns:
        Rotation in (-π, π], broadcast shape of the inputs.
    """
    difference = np.asarray(
        normalize_angle_positive(
            np.asarray(normalize_angle_positive(to_angle))
            - np.asarray(normalize_angle_positive(from_angle))
        )
    )
    difference = np.where(difference > np.pi, -(TWO_PI - difference), difference)
    return normalize_angle(_finish(difference))


def clamp(value: AngleLike, lower: float, upper: float) -> AngleLike:
    """
    Limit a value (or each element of an array) to [lower, upper].

    Args:
        value: Scalar or array to clamp.
        lower: Lower bound (inclusive).
        upper: Upper bound (inclusive).

    Returns:
        Clamped value, same shape as input.

    Raises:
        InvalidArgumentError: If lower > upper.
    """
    if lower > upper:
        raise InvalidArgumentError(
            f"clamp lower bound {lower} is greater than upper bound {upper}"
        )
    return _finish(np.clip(value, lower, upper))
