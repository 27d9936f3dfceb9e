from __future__ import annotations

import struct


def to_int32(value: int) -> int:
    """Wrap an arbitrary integer to a signed 32-bit value."""
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def hash_filename(name: str) -> int:
    """Return the archive index hash of ``name``.

    The name is upper-cased and folded one UTF-16 code unit at a time as
    ``hash = hash * 61 + unit - 32``, wrapping to signed 32 bits at every
    step. Archives are indexed only by this value.
    """
    h = 0
    units = name.upper().encode("utf-16-be", "surrogatepass")
    for (unit,) in struct.iter_unpack(">H", units):
        h = to_int32(to_int32(h * 61) + unit - 32)
    return h
