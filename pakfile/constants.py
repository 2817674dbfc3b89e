# Magic
PAK_MAGIC = b"PACK"  # 4 bytes at offset 0

# Header: magic[4], dir_offset i32, dir_length i32
HEADER_SIZE = 12
DIR_OFFSET_POS = 4

# Directory record: name[56], position i32, length i32
NAME_FIELD_SIZE = 56
DIR_ENTRY_SIZE = 64

INT32_MAX = 2**31 - 1

# Streaming copy size for member contents
COPY_CHUNK_SIZE = 1_048_576  # 1 MiB

# Palette / LMP
PALETTE_COLORS = 256
PALETTE_BYTES = PALETTE_COLORS * 3
