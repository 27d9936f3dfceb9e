class JagError(Exception):
    """Base class for jagarchive errors."""


# Cursor buffer
class OutOfBounds(JagError):
    pass


# Decode
class MalformedArchive(JagError):
    pass


# Compression service
class CompressionError(JagError):
    pass


class DecompressionError(JagError):
    pass


# Encode-time capacity
class TooManyEntries(JagError):
    pass


class EntryTooLarge(JagError):
    pass


# Accessors
class EntryNotFound(JagError, KeyError):
    def __str__(self) -> str:
        # KeyError quotes its argument; keep plain messages
        return str(self.args[0]) if self.args else ""


class NoDecodedData(JagError):
    pass
