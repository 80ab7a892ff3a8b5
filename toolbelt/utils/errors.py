"""
Error classes raised by toolbelt.

**Conceptual**: Every failure the library reports is an exception that
propagates to the caller. Nothing in toolbelt logs-and-exits; terminating the
process is a decision for the application that catches these errors.

The concrete classes also inherit from the matching built-in exception
(IndexError, ValueError) so callers that already catch the built-in keep
working.
"""


class ToolbeltError(Exception):
    """Base class for all errors raised by toolbelt."""
    pass


class OutOfBoundsError(ToolbeltError, IndexError):
    """
    Raised when a checked read or write would fall outside a buffer.

    **Conceptual**: The packer's default path performs no bounds check; the
    checked variants (and all decoders) verify the cursor first and raise this
    error before touching the buffer, so neither the buffer nor the cursor is
    modified on failure.

    Attributes:
        cursor: Cursor position at which the access was attempted.
        width: Number of bytes the access needed.
        length: Length of the buffer.
    """

    def __init__(self, cursor: int, width: int, length: int):
        self.cursor = cursor
        self.width = width
        self.length = length
        super().__init__(
            f"cannot access {width} bytes at offset {cursor} "
            f"in a buffer of length {length}"
        )


class InvalidArgumentError(ToolbeltError, ValueError):
    """
    Raised when an argument is outside the domain an operation accepts.

    Examples: a non-positive loop rate, a NaN value passed to quantization,
    reversed clamp bounds, or an invalid environment setting.
    """
    pass
