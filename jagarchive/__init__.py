"""
jagarchive — codec and command-line tool for JAG cache archives

JAG archives (.jag, .mem) pack many files into one blob indexed by a 32-bit
hash of the upper-cased filename. This package provides:

- A big-endian cursor buffer (jagarchive.buffer)
- The filename hash (jagarchive.hashutil) and name/hash entry keys (jagarchive.keys)
- bzip2 integration with the headerless stream framing the format uses (jagarchive.codec)
- The archive encoder/decoder, with per-entry or whole-block compression (jagarchive.archive)
- A CLI to extract, add, delete, list and hash (jagarchive.cli)

Filenames are not stored in archives; only their hashes are.
"""

from jagarchive.archive import JagArchive
from jagarchive.hashutil import hash_filename
from jagarchive.keys import ByHash, ByName

__version__ = "0.1"

__all__ = [
    "JagArchive",
    "ByHash",
    "ByName",
    "hash_filename",
    "constants",
    "errors",
    "buffer",
    "codec",
    "archive",
]
