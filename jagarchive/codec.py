from __future__ import annotations

import bz2

from .constants import BZIP_HEADER, BZIP_LEVEL
from .errors import CompressionError, DecompressionError


class Codec:
    """bzip2 compression service for archive payloads.

    Archives store headerless bzip2 streams: the 4-byte ``BZh1`` magic is
    removed after compressing and restored before decompressing, so it never
    appears inside an archive.
    """

    def __init__(self, level: int = BZIP_LEVEL):
        if not 1 <= level <= 9:
            raise ValueError(f"bzip2 level must be 1..9, got {level}")
        self.level = level
        self.header = BZIP_HEADER[:3] + str(level).encode("ascii")

    def compress(self, data: bytes) -> bytes:
        try:
            out = bz2.compress(bytes(data), self.level)
        except (OSError, ValueError, TypeError) as e:
            raise CompressionError(f"bzip2 compression failed: {e}") from e
        if not out.startswith(self.header):
            raise CompressionError("bzip2 output is missing its stream header")
        return out[len(self.header) :]

    def decompress(self, data: bytes, expected_size: int) -> bytes:
        try:
            out = bz2.decompress(self.header + bytes(data))
        except (OSError, ValueError, EOFError) as e:
            raise DecompressionError(f"bzip2 decompression failed: {e}") from e
        if len(out) != expected_size:
            raise DecompressionError(f"decompressed {len(out)} byte(s), expected {expected_size}")
        return out


# bz2 keeps no state between calls, so one instance serves every archive
DEFAULT_CODEC = Codec()
