"""
FrameBuilder: a fixed-size buffer and its cursor bundled together.

**Conceptual**: The most common use of the packer is "allocate N bytes, append
a handful of fields, send the bytes". FrameBuilder owns the zeroed bytearray
and the Cursor for that pattern and exposes chainable append methods:

    frame = (
        FrameBuilder(8)
        .int16(tick)
        .float16(heading, scale=1000)
        .float32(elapsed, scale=1e6)
        .tobytes()
    )

Appends are bounds-checked by default (checked=True); pass checked=False for
the raw, unchecked writers.
"""

from toolbelt.packing.buffer import (
    Cursor,
    append_float16,
    append_float32,
    append_int16,
    append_int32,
)
from toolbelt.utils.errors import InvalidArgumentError


class FrameBuilder:
    """
    Builds one binary frame of at most `size` bytes.

    Attributes:
        size: Capacity of the frame in bytes.
        checked: Whether appends verify the remaining capacity first.
    """

    def __init__(self, size: int, checked: bool = True):
        """
        Allocate a zero-filled frame.

        Args:
            size: Capacity in bytes (must be non-negative).
            checked: Raise OutOfBoundsError on overflow instead of relying on
                the unchecked writers.

        Raises:
            InvalidArgumentError: If size is negative.
        """
        if size < 0:
            raise InvalidArgumentError(f"frame size must be non-negative, got {size}")
        self.size = size
        self.checked = checked
        self._buffer = bytearray(size)
        self._cursor = Cursor()

    @property
    def position(self) -> int:
        """Number of bytes written so far."""
        return self._cursor.position

    @property
    def remaining(self) -> int:
        """Bytes still available before the frame is full."""
        return self.size - self._cursor.position

    def int16(self, value: int) -> "FrameBuilder":
        append_int16(self._buffer, value, self._cursor, checked=self.checked)
        return self

    def int32(self, value: int) -> "FrameBuilder":
        append_int32(self._buffer, value, self._cursor, checked=self.checked)
        return self

    def float16(self, value: float, scale: float) -> "FrameBuilder":
        append_float16(self._buffer, value, scale, self._cursor, checked=self.checked)
        return self

    def float32(self, value: float, scale: float) -> "FrameBuilder":
        append_float32(self._buffer, value, scale, self._cursor, checked=self.checked)
        return self

    def tobytes(self) -> bytes:
        """Return the bytes written so far (not the unused tail)."""
        return bytes(self._buffer[: self._cursor.position])

    def reset(self) -> None:
        """Zero the frame and move the cursor back to the start."""
        self._buffer[:] = bytes(self.size)
        self._cursor.position = 0
