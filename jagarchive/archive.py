from __future__ import annotations

from typing import Dict, Iterator, List, Optional, Tuple, Union

from .buffer import JagBuffer
from .codec import Codec, DEFAULT_CODEC
from .constants import (
    DEFAULT_INDIVIDUAL_COMPRESS,
    ENTRY_COUNT_SIZE,
    HEADER_SIZE,
    INDEX_RECORD_SIZE,
    MAX_ENTRIES,
    MAX_FILE_SIZE,
)
from .errors import (
    EntryNotFound,
    EntryTooLarge,
    MalformedArchive,
    NoDecodedData,
    TooManyEntries,
)
from .keys import EntryKey, describe_key, resolve_hash


Key = Union[EntryKey, str]
Payload = Union[bytes, bytearray, memoryview]


def payload_offset(entry_count: int) -> int:
    """Offset of the first payload byte inside an index block."""
    return ENTRY_COUNT_SIZE + entry_count * INDEX_RECORD_SIZE


class JagArchive:
    """In-memory JAG archive: a table of filename hash -> payload bytes.

    Layout::

        u24 index block size || u24 body size || body

    The body is the index block itself when both sizes are equal, otherwise
    the index block compressed as one bzip2 stream. The index block is::

        u16 count || count * (i32 hash, u24 size, u24 stored size) || payloads

    A payload whose two sizes differ is an individually compressed stream.
    """

    def __init__(self, codec: Optional[Codec] = None):
        self.codec = codec or DEFAULT_CODEC
        self.entries: Dict[int, bytes] = {}
        # Compression mode the last decoded archive used (None until decoded)
        self.whole_block_compressed: Optional[bool] = None
        self._populated = False

    @classmethod
    def from_bytes(cls, data: Payload, codec: Optional[Codec] = None) -> "JagArchive":
        return cls(codec).read_archive(data)

    # decode

    def read_archive(self, data: Payload) -> "JagArchive":
        """Replace the entry table with the contents of ``data``.

        The table is left untouched if decoding fails.
        """
        data = bytes(data)
        if len(data) < HEADER_SIZE:
            raise MalformedArchive(f"archive is {len(data)} byte(s), shorter than its {HEADER_SIZE}-byte header")
        header = JagBuffer(data[:HEADER_SIZE])
        size = header.read_u24()
        compressed_size = header.read_u24()
        body = data[HEADER_SIZE:]
        if not body:
            raise MalformedArchive("archive has no body")

        whole = size != compressed_size
        if whole:
            if len(body) < compressed_size:
                raise MalformedArchive(f"body is {len(body)} byte(s), header declares {compressed_size}")
            index = self.codec.decompress(body[:compressed_size], size)
        else:
            if len(body) < size:
                raise MalformedArchive(f"index block is {len(body)} byte(s), header declares {size}")
            index = body[:size]

        entries = self._read_entries(JagBuffer(index))
        self.entries = entries
        self.whole_block_compressed = whole
        self._populated = True
        return self

    def _read_entries(self, index: JagBuffer) -> Dict[int, bytes]:
        count = index.read_u16()
        offset = payload_offset(count)
        if offset > index.size:
            raise MalformedArchive(f"index of {count} record(s) does not fit in {index.size} byte(s)")

        # Records and payloads are paired by position
        payloads = JagBuffer(index.data)
        payloads.position = offset

        entries: Dict[int, bytes] = {}
        for _ in range(count):
            name_hash = index.read_i32()
            size = index.read_u24()
            stored_size = index.read_u24()
            stored = payloads.read_bytes(stored_size)
            if size != stored_size:
                entries[name_hash] = self.codec.decompress(stored, size)
            else:
                entries[name_hash] = stored
        return entries

    # encode

    def to_archive(self, individual_compress: bool = DEFAULT_INDIVIDUAL_COMPRESS) -> bytes:
        """Serialize the entry table.

        With ``individual_compress`` each payload is compressed on its own and
        the index block is stored as is; otherwise payloads are stored raw and
        the whole index block is compressed once.
        """
        count = len(self.entries)
        if count > MAX_ENTRIES:
            raise TooManyEntries(f"too many entries ({count} > {MAX_ENTRIES})")

        stored: List[Tuple[int, int, bytes]] = []
        total = 0
        for name_hash, entry in self.entries.items():
            if len(entry) > MAX_FILE_SIZE:
                raise EntryTooLarge(f"entry {name_hash} is too big for archive ({len(entry)} > {MAX_FILE_SIZE})")
            packed = self._pack_entry(entry) if individual_compress else entry
            if len(packed) > MAX_FILE_SIZE:
                raise EntryTooLarge(
                    f"entry {name_hash} is too big for archive once compressed ({len(packed)} > {MAX_FILE_SIZE})"
                )
            stored.append((name_hash, len(entry), packed))
            total += len(packed)

        index = JagBuffer.allocate(payload_offset(count) + total)
        payloads = JagBuffer(index.data)
        payloads.position = payload_offset(count)
        index.write_u16(count)
        for name_hash, size, packed in stored:
            index.write_i32(name_hash)
            index.write_u24(size)
            index.write_u24(len(packed))
            payloads.write_bytes(packed)

        block = index.getvalue()
        body = block if individual_compress else self._pack_entry(block)
        if len(block) > MAX_FILE_SIZE or len(body) > MAX_FILE_SIZE:
            raise EntryTooLarge(f"index block of {len(block)} byte(s) is too big for archive")

        header = JagBuffer.allocate(HEADER_SIZE)
        header.write_u24(len(block))
        header.write_u24(len(body))
        return header.getvalue() + body

    def _pack_entry(self, data: bytes) -> bytes:
        # Equal sizes mean "stored raw", so only keep output that is smaller
        compressed = self.codec.compress(data)
        return compressed if len(compressed) < len(data) else bytes(data)

    # accessors

    def get_entry(self, key: Key) -> bytes:
        name_hash = resolve_hash(key)
        if not self._populated:
            raise NoDecodedData("no decoded archive data; read an archive or add entries first")
        try:
            return self.entries[name_hash]
        except KeyError:
            raise EntryNotFound(f"entry {describe_key(key)} ({name_hash}) not found") from None

    def put_entry(self, key: Key, data: Payload) -> int:
        """Insert or replace an entry; returns its hash. Sizes are checked on encode."""
        if isinstance(data, str):
            raise TypeError("entry payload must be bytes, not str")
        name_hash = resolve_hash(key)
        self.entries[name_hash] = bytes(data)
        self._populated = True
        return name_hash

    def remove_entry(self, key: Key) -> bytes:
        name_hash = resolve_hash(key)
        try:
            return self.entries.pop(name_hash)
        except KeyError:
            raise EntryNotFound(f"entry {describe_key(key)} ({name_hash}) not found") from None

    def has_entry(self, key: Key) -> bool:
        return resolve_hash(key) in self.entries

    def __contains__(self, key: Key) -> bool:
        return self.has_entry(key)

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[int]:
        return iter(self.entries)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} ({len(self.entries)})>"
