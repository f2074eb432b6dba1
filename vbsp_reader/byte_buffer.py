"""
Byte buffer and file loader.

BSP files are read whole and eagerly; the format's own per-lump maxima keep
them bounded, and every lump is addressed absolutely from the file start.
"""
from __future__ import annotations

from pathlib import Path
from typing import Union

from .errors import BSPIOError


class ByteBuffer:
    """Immutable file contents with bounds-checked views."""
    __slots__ = ('_data',)

    def __init__(self, data: bytes):
        self._data = bytes(data)

    @classmethod
    def from_bytes(cls, data: Union[bytes, bytearray, memoryview]) -> ByteBuffer:
        return cls(bytes(data))

    @property
    def data(self) -> bytes:
        return self._data

    def __len__(self) -> int:
        return len(self._data)

    def contains(self, offset: int, length: int) -> bool:
        """True if [offset, offset + length) lies inside the buffer.

        An empty range is in bounds wherever it points.
        """
        if length == 0:
            return True
        if length < 0 or offset < 0:
            return False
        return offset + length <= len(self._data)

    def view(self, offset: int, length: int) -> memoryview:
        """Zero-copy view of [offset, offset + length)."""
        if not self.contains(offset, length):
            raise IndexError(
                f"range [{offset}, {offset + length}) outside buffer of "
                f"{len(self._data)} bytes")
        if length == 0:
            return memoryview(b'')
        return memoryview(self._data)[offset:offset + length]

    def __repr__(self) -> str:
        return f"ByteBuffer({len(self._data)} bytes)"


def load_file(filepath: Union[str, Path]) -> ByteBuffer:
    """Read a whole file into a ByteBuffer.

    Raises:
        BSPIOError: the file is missing, unreadable, or not a regular file
    """
    path = Path(filepath)
    try:
        data = path.read_bytes()
    except OSError as e:
        raise BSPIOError(path, e.strerror or str(e)) from e
    return ByteBuffer(data)
