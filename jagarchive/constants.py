# Archive header: uncompressed index-block size (u24) || body size (u24)
HEADER_SIZE = 6

# Index block: entry count (u16) followed by fixed-size records
ENTRY_COUNT_SIZE = 2
INDEX_RECORD_SIZE = 10  # hash (i32) || size (u24) || compressed size (u24)

# Capacity limits imposed by the field widths
MAX_ENTRIES = 0xFFFF        # 65535
MAX_FILE_SIZE = 0xFFFFFF    # 16777215

# bzip2 stream header ("BZ", huffman, block size 1). Stripped before storage.
BZIP_HEADER = b"BZh1"
BZIP_LEVEL = 1

DEFAULT_INDIVIDUAL_COMPRESS = True
