from __future__ import annotations

import struct
from typing import Optional, Union

from .errors import OutOfBounds


_U8 = struct.Struct(">B")
_U16 = struct.Struct(">H")
_U24_HI = struct.Struct(">BH")
_I32 = struct.Struct(">i")
_U32 = struct.Struct(">I")


class JagBuffer:
    """Big-endian reader/writer over a fixed byte region with a cursor.

    Every read and write advances ``position`` by its width. Reads are bounds
    checked; writes assume the caller sized the region exactly.
    """

    def __init__(self, data: Union[bytes, bytearray, memoryview]):
        self.data = data
        self.position = 0

    @classmethod
    def allocate(cls, size: int) -> "JagBuffer":
        return cls(bytearray(size))

    @property
    def size(self) -> int:
        return len(self.data)

    def remaining(self) -> int:
        return self.size - self.position

    def _take(self, n: int) -> int:
        start = self.position
        if start + n > self.size:
            raise OutOfBounds(f"read of {n} byte(s) at {start} exceeds buffer of {self.size}")
        self.position = start + n
        return start

    # reads

    def read_u8(self) -> int:
        return _U8.unpack_from(self.data, self._take(1))[0]

    def read_u16(self) -> int:
        return _U16.unpack_from(self.data, self._take(2))[0]

    def read_u24(self) -> int:
        hi, lo = _U24_HI.unpack_from(self.data, self._take(3))
        return (hi << 16) | lo

    def read_i32(self) -> int:
        return _I32.unpack_from(self.data, self._take(4))[0]

    def read_bytes(self, length: int, offset: Optional[int] = None) -> bytes:
        """Return ``length`` bytes from ``offset`` (or the cursor).

        The cursor advances by ``length`` even when an explicit offset is
        given. Existing tools depend on this.
        """
        start = self.position if offset is None else offset
        end = start + length
        if start < 0 or length < 0 or end > self.size:
            raise OutOfBounds(f"slice [{start}:{end}] exceeds buffer of {self.size}")
        self.position += length
        return bytes(self.data[start:end])

    # writes

    def write_u8(self, value: int) -> None:
        _U8.pack_into(self.data, self.position, value & 0xFF)
        self.position += 1

    def write_u16(self, value: int) -> None:
        _U16.pack_into(self.data, self.position, value & 0xFFFF)
        self.position += 2

    def write_u24(self, value: int) -> None:
        _U24_HI.pack_into(self.data, self.position, (value >> 16) & 0xFF, value & 0xFFFF)
        self.position += 3

    def write_i32(self, value: int) -> None:
        _U32.pack_into(self.data, self.position, value & 0xFFFFFFFF)
        self.position += 4

    def write_bytes(self, data: bytes, offset: Optional[int] = None) -> None:
        # Same cursor rule as read_bytes: advance regardless of offset
        start = self.position if offset is None else offset
        if start + len(data) > self.size:
            raise OutOfBounds(f"write of {len(data)} byte(s) at {start} exceeds buffer of {self.size}")
        self.data[start : start + len(data)] = data
        self.position += len(data)

    def getvalue(self) -> bytes:
        return bytes(self.data)
