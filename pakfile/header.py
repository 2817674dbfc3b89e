from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import BinaryIO

from .constants import DIR_ENTRY_SIZE, HEADER_SIZE, PAK_MAGIC
from .errors import BadMagicBytes
from .records import read_exact


# Header (fixed 12 bytes)
# struct: <4s i i
#  - magic[4] "PACK"
#  - dir_offset i32 (absolute offset of the directory table)
#  - dir_length i32 (64 * entry count)
_HEADER_STRUCT = struct.Struct("<4sii")
assert _HEADER_STRUCT.size == HEADER_SIZE


@dataclass
class Header:
    dir_offset: int
    dir_length: int

    @property
    def entry_count(self) -> int:
        return self.dir_length // DIR_ENTRY_SIZE

    def pack(self) -> bytes:
        return _HEADER_STRUCT.pack(PAK_MAGIC, self.dir_offset, self.dir_length)


def read_header(f: BinaryIO) -> Header:
    raw = read_exact(f, HEADER_SIZE)
    magic, dir_offset, dir_length = _HEADER_STRUCT.unpack(raw)
    if magic != PAK_MAGIC:
        raise BadMagicBytes(f"Bad archive magic: {magic!r}")
    return Header(dir_offset=dir_offset, dir_length=dir_length)


def write_header(f: BinaryIO, header: Header) -> None:
    f.write(header.pack())
