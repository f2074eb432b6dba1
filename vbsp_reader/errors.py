"""
BSP decode errors.

Every failure raised by the decoder derives from BSPError. I/O problems
(BSPIOError) are kept apart from malformed input (BSPFormatError) so a
caller can tell "could not read the file" from "the file is not a valid
VBSP". Each error carries the offending values as attributes.
"""
from __future__ import annotations

from pathlib import Path
from typing import Union

from .bsp_types import LumpKind


def _lump_label(lump_index: int) -> str:
    try:
        return f"lump {lump_index} ({LumpKind(lump_index).name.lower()})"
    except ValueError:
        return f"lump {lump_index}"


class BSPError(Exception):
    """Raised when a BSP file cannot be decoded."""
    pass


class BSPIOError(BSPError):
    """Raised when the BSP file is missing or unreadable."""

    def __init__(self, path: Union[str, Path], reason: str):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Cannot open file '{self.path}': {reason}")


class BSPFormatError(BSPError):
    """Raised when the file contents are not a well-formed VBSP."""
    pass


class TruncatedHeaderError(BSPFormatError):
    """Raised when the file is shorter than the fixed header."""

    def __init__(self, buffer_length: int, header_size: int):
        self.buffer_length = buffer_length
        self.header_size = header_size
        super().__init__(
            f"File too small to be a BSP: {buffer_length} bytes "
            f"(header needs {header_size})")


class BadMagicError(BSPFormatError):
    """Raised when the header identifier is not 'VBSP'."""

    def __init__(self, actual: int, expected: int):
        self.actual = actual
        self.expected = expected
        super().__init__(
            f"Not a VBSP file (ident=0x{actual:08X}, expected 0x{expected:08X})")


class LumpOutOfBoundsError(BSPFormatError):
    """Raised when a lump's byte range runs outside the file."""

    def __init__(self, lump_index: int, file_offset: int, byte_length: int,
                 buffer_length: int):
        self.lump_index = lump_index
        self.file_offset = file_offset
        self.byte_length = byte_length
        self.buffer_length = buffer_length
        super().__init__(
            f"{_lump_label(lump_index)} out of bounds: offset={file_offset}, "
            f"length={byte_length}, file size={buffer_length}")


class LumpExceedsMaximumError(BSPFormatError):
    """Raised when a lump holds more elements than the format allows."""

    def __init__(self, lump_index: int, count: int, maximum: int):
        self.lump_index = lump_index
        self.count = count
        self.maximum = maximum
        super().__init__(
            f"{_lump_label(lump_index)} has {count} elements, "
            f"more than the allowed {maximum}")
