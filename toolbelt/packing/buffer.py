"""
Fixed-width big-endian packing into a caller-owned buffer.

**Conceptual**: A binary telemetry frame is built by appending values one
after another into a pre-allocated byte buffer. The caller owns both the
buffer and a cursor (the offset of the next free byte); every append writes
its bytes most-significant first at the cursor and advances the cursor by the
number of bytes written (2 for 16-bit values, 4 for 32-bit values).

Real-valued measurements are sent as scaled integers: a reading of 1.5 with a
scale of 1000 is transmitted as the int16 1500. The decoder divides by the
same scale.

**Wire format**: big-endian, two's complement, no padding or framing.

**Checked vs unchecked**: the default path performs no bounds check before
writing; an append near the end of a bytearray surfaces as the container's
own IndexError, possibly after the first byte was written. Pass checked=True
to verify the cursor first: OutOfBoundsError is raised and neither the buffer
nor the cursor changes.

**Lossy quantization**: out-of-range scaled values are NOT clamped by
default; they wrap around per two's complement (40000 as int16 becomes
-25536). This matches the existing producers byte for byte. Pass
saturate=True to quantize_int16/quantize_int32 to clamp instead. A product
that overflows float32 is recomputed in double precision and wrapped; one
that is infinite even there becomes INDEFINITE_INTEGER before wrapping.
"""

import math
import operator
from dataclasses import dataclass
from typing import MutableSequence, Union

import numpy as np

from toolbelt.utils.errors import InvalidArgumentError, OutOfBoundsError

# Anything that supports len() and item assignment of ints 0-255:
# bytearray, memoryview (format "B"), numpy uint8 arrays.
Buffer = Union[bytearray, memoryview, np.ndarray, MutableSequence[int]]

INT16_WIDTH = 2
INT32_WIDTH = 4

# Result of an x86 float-to-int conversion that cannot be represented; used for
# products that stay infinite even in double precision
INDEFINITE_INTEGER = -(1 << 31)


@dataclass
class Cursor:
    """
    Mutable write/read offset into a buffer.

    Python integers are immutable, so the offset lives in a small object the
    caller passes to every append; each call advances `position` in place.

    Attributes:
        position: Index of the next byte to write (or read).
    """
    position: int = 0

    def advance(self, count: int) -> int:
        """Move forward `count` bytes and return the new position."""
        self.position += count
        return self.position


def check_bounds(buffer: Buffer, cursor: Cursor, width: int) -> None:
    """
    Verify that `width` bytes starting at the cursor fit inside the buffer.

    Raises:
        OutOfBoundsError: If the cursor is negative or the access would run
            past the end of the buffer.
    """
    length = len(buffer)
    if cursor.position < 0 or cursor.position + width > length:
        raise OutOfBoundsError(cursor.position, width, length)


def _wrap(number: int, bits: int) -> int:
    """Truncate an int to a signed `bits`-wide two's complement value."""
    half = 1 << (bits - 1)
    return ((number + half) & ((1 << bits) - 1)) - half


def _quantize(value: float, scale: float, bits: int, saturate: bool) -> int:
    # The products on the wire are computed in single precision
    with np.errstate(over="ignore", invalid="ignore"):
        product = float(np.float32(value) * np.float32(scale))

    if math.isnan(product):
        raise InvalidArgumentError(
            f"cannot quantize NaN product {value!r} * {scale!r}"
        )

    # float32 overflow: redo in double precision so finite inputs still wrap
    if math.isinf(product):
        product = float(value) * float(scale)

    low, high = -(1 << (bits - 1)), (1 << (bits - 1)) - 1

    if math.isinf(product):
        if saturate:
            return high if product > 0 else low
        return _wrap(INDEFINITE_INTEGER, bits)

    number = math.trunc(product)

    if saturate:
        return max(low, min(high, number))
    return _wrap(number, bits)


def quantize_int16(value: float, scale: float, saturate: bool = False) -> int:
    """
    Scale a real value and narrow it to a signed 16-bit integer.

    **Mathematical**: n = trunc(float32(value) * float32(scale)), then wrapped
    into [-32768, 32767] via two's complement (or clamped when saturate=True).

    **Edge cases**:
    - Truncation is toward zero: 2.7 -> 2, -2.7 -> -2.
    - 40000 -> -25536 (wraparound), or 32767 with saturate=True.
    - A float32 overflow (1e20 * 1e20) is redone in double precision and
      wrapped; +-inf becomes INDEFINITE_INTEGER wrapped (0 for int16), or
      the range limit with saturate=True.

    Args:
        value: Real-valued measurement.
        scale: Multiplier applied before truncation (e.g. 1000 for milli-units).
        saturate: Clamp to the int16 range instead of wrapping.

    Returns:
        Integer in [-32768, 32767].

    Raises:
        InvalidArgumentError: If value * scale is NaN.
    """
    return _quantize(value, scale, 16, saturate)


def quantize_int32(value: float, scale: float, saturate: bool = False) -> int:
    """Same as quantize_int16 but narrowing to the signed 32-bit range."""
    return _quantize(value, scale, 32, saturate)


def append_int16(buffer: Buffer, value: int, cursor: Cursor, checked: bool = False) -> None:
    """
    Write a 16-bit integer big-endian at the cursor and advance it by 2.

    Bits 15-8 go first, then bits 7-0. Values outside the int16 range are
    truncated to their low 16 bits.

    Args:
        buffer: Destination buffer (caller-owned, pre-allocated).
        value: Integer to write (any int-like, e.g. numpy.int16).
        cursor: Write position; advanced by 2.
        checked: Raise OutOfBoundsError instead of writing past the end.
    """
    if checked:
        check_bounds(buffer, cursor, INT16_WIDTH)

    number = operator.index(value)
    index = cursor.position
    buffer[index] = (number >> 8) & 0xFF
    buffer[index + 1] = number & 0xFF
    cursor.advance(INT16_WIDTH)


def append_int32(buffer: Buffer, value: int, cursor: Cursor, checked: bool = False) -> None:
    """
    Write a 32-bit integer big-endian at the cursor and advance it by 4.

    Bytes are written most-significant first: bits 31-24, 23-16, 15-8, 7-0.

    Args:
        buffer: Destination buffer (caller-owned, pre-allocated).
        value: Integer to write.
        cursor: Write position; advanced by 4.
        checked: Raise OutOfBoundsError instead of writing past the end.
    """
    if checked:
        check_bounds(buffer, cursor, INT32_WIDTH)

    number = operator.index(value)
    index = cursor.position
    buffer[index] = (number >> 24) & 0xFF
    buffer[index + 1] = (number >> 16) & 0xFF
    buffer[index + 2] = (number >> 8) & 0xFF
    buffer[index + 3] = number & 0xFF
    cursor.advance(INT32_WIDTH)


def append_float16(
    buffer: Buffer,
    value: float,
    scale: float,
    cursor: Cursor,
    checked: bool = False,
) -> None:
    """
    Quantize `value * scale` to int16 and append it (2 bytes).

    Out-of-range products wrap silently; see quantize_int16.
    """
    append_int16(buffer, quantize_int16(value, scale), cursor, checked=checked)


def append_float32(
    buffer: Buffer,
    value: float,
    scale: float,
    cursor: Cursor,
    checked: bool = False,
) -> None:
    """Quantize `value * scale` to int32 and append it (4 bytes)."""
    append_int32(buffer, quantize_int32(value, scale), cursor, checked=checked)
