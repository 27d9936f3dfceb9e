from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Union

from .hashutil import hash_filename, to_int32


INT32_MIN = -0x80000000
INT32_MAX = 0x7FFFFFFF

_HASH_TEXT = re.compile(r"[+-]?[0-9]+")


@dataclass(frozen=True)
class ByName:
    name: str


@dataclass(frozen=True)
class ByHash:
    value: int

    def __post_init__(self):
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise TypeError(f"hash must be an int, got {type(self.value).__name__}")
        if not INT32_MIN <= self.value <= INT32_MAX:
            raise ValueError(f"hash {self.value} is outside the signed 32-bit range")


EntryKey = Union[ByName, ByHash]


def resolve_hash(key: Union[EntryKey, str]) -> int:
    """Resolve an entry key to its index hash. A bare ``str`` is a name."""
    if isinstance(key, ByHash):
        return key.value
    if isinstance(key, ByName):
        return hash_filename(key.name)
    if isinstance(key, str):
        return hash_filename(key)
    raise TypeError(f"expected ByName, ByHash or str, got {type(key).__name__}")


def parse_entry_key(text: str) -> EntryKey:
    """Interpret command-line text: decimal integers are hashes, anything else a name.

    Unsigned spellings of a hash (as printed by tools that treat it as u32)
    are accepted and wrapped.
    """
    if _HASH_TEXT.fullmatch(text):
        value = int(text)
        if INT32_MAX < value <= 0xFFFFFFFF:
            value = to_int32(value)
        return ByHash(value)
    return ByName(text)


def describe_key(key: Union[EntryKey, str]) -> str:
    if isinstance(key, ByName):
        return key.name
    if isinstance(key, ByHash):
        return str(key.value)
    return str(key)
