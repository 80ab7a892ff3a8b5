"""
Readers for buffers produced by toolbelt.packing.buffer.

**Conceptual**: The consumer side of the wire format. Each read_* function
takes the bytes at the cursor, interprets them as a big-endian signed integer
of the given width, and advances the cursor, mirroring the append_* writers.
Scaled values are recovered by dividing by the same scale the producer used;
the quantization itself is lossy, so read_float16(append_float16(x)) returns x
only to within 1/scale.

Unlike the writers, reads are always bounds-checked: a truncated frame is an
input error, not a programming error.

decode_int16_array/decode_int32_array turn a whole buffer of back-to-back
values into a numpy array in one step.
"""

from typing import Union

import numpy as np

from toolbelt.packing.buffer import INT16_WIDTH, INT32_WIDTH, Cursor, check_bounds
from toolbelt.utils.errors import InvalidArgumentError

ReadableBuffer = Union[bytes, bytearray, memoryview, np.ndarray]


def _read_signed(buffer: ReadableBuffer, cursor: Cursor, width: int) -> int:
    check_bounds(buffer, cursor, width)
    start = cursor.position
    raw = bytes(buffer[start:start + width])
    cursor.advance(width)
    return int.from_bytes(raw, byteorder="big", signed=True)


def read_int16(buffer: ReadableBuffer, cursor: Cursor) -> int:
    """
    Read a big-endian int16 at the cursor and advance it by 2.

    Raises:
        OutOfBoundsError: If fewer than 2 bytes remain.
    """
    return _read_signed(buffer, cursor, INT16_WIDTH)


def read_int32(buffer: ReadableBuffer, cursor: Cursor) -> int:
    """
    Read a big-endian int32 at the cursor and advance it by 4.

    Raises:
        OutOfBoundsError: If fewer than 4 bytes remain.
    """
    return _read_signed(buffer, cursor, INT32_WIDTH)


def _check_scale(scale: float) -> None:
    if scale == 0:
        raise InvalidArgumentError("scale must be non-zero to decode a scaled value")


def read_float16(buffer: ReadableBuffer, scale: float, cursor: Cursor) -> float:
    """Read an int16 and divide it by `scale`."""
    _check_scale(scale)
    return read_int16(buffer, cursor) / scale


def read_float32(buffer: ReadableBuffer, scale: float, cursor: Cursor) -> float:
    """Read an int32 and divide it by `scale`."""
    _check_scale(scale)
    return read_int32(buffer, cursor) / scale


def _decode_array(data: ReadableBuffer, width: int, dtype: str) -> np.ndarray:
    raw = bytes(data)
    if len(raw) % width != 0:
        raise InvalidArgumentError(
            f"buffer length {len(raw)} is not a multiple of {width} bytes"
        )
    # Convert from the big-endian wire dtype to a native-order array
    return np.frombuffer(raw, dtype=dtype).astype(dtype[1:])


def decode_int16_array(data: ReadableBuffer) -> np.ndarray:
    """
    Decode back-to-back big-endian int16 values into a native int16 array.

    Raises:
        InvalidArgumentError: If len(data) is odd.
    """
    return _decode_array(data, INT16_WIDTH, ">i2")


def decode_int32_array(data: ReadableBuffer) -> np.ndarray:
    """
    Decode back-to-back big-endian int32 values into a native int32 array.

    Raises:
        InvalidArgumentError: If len(data) is not a multiple of 4.
    """
    return _decode_array(data, INT32_WIDTH, ">i4")
