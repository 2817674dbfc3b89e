from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import BinaryIO

from .constants import DIR_ENTRY_SIZE, INT32_MAX, NAME_FIELD_SIZE
from .errors import ArchiveSizeError, EntryNameError, TruncatedReadError


# Directory record (fixed 64 bytes)
# struct: <56s i i
#  - name[56] ASCII, NUL padded; no NUL when all 56 bytes are used
#  - position i32 (absolute offset of member content)
#  - length i32 (member content size)
_DIR_ENTRY_STRUCT = struct.Struct("<56sii")
assert _DIR_ENTRY_STRUCT.size == DIR_ENTRY_SIZE


def read_exact(f: BinaryIO, n: int) -> bytes:
    b = f.read(n)
    while len(b) < n:
        more = f.read(n - len(b))
        if not more:
            raise TruncatedReadError(f"Unexpected EOF: wanted {n} bytes, got {len(b)}")
        b += more
    return b


def encode_name(name: str) -> bytes:
    """Encode ``name`` into the 56-byte NUL-padded name field."""
    try:
        raw = name.encode("ascii")
    except UnicodeEncodeError:
        raise EntryNameError(f"Member name is not ASCII: {name!r}") from None
    if len(raw) > NAME_FIELD_SIZE:
        raise EntryNameError(f"Member name longer than {NAME_FIELD_SIZE} bytes: {name!r}")
    if b"\x00" in raw:
        raise EntryNameError(f"Member name contains NUL: {name!r}")
    return raw.ljust(NAME_FIELD_SIZE, b"\x00")


def decode_name(field: bytes) -> str:
    nul = field.find(b"\x00")
    # No terminator: all 56 bytes belong to the name
    raw = field if nul < 0 else field[:nul]
    return raw.decode("ascii", errors="replace")


def check_int32(value: int, what: str) -> int:
    if value < 0 or value > INT32_MAX:
        raise ArchiveSizeError(f"{what} {value} does not fit a signed 32-bit field")
    return value


@dataclass
class DirectoryEntry:
    name_field: bytes
    position: int
    length: int

    @classmethod
    def create(cls, name: str, position: int, length: int) -> "DirectoryEntry":
        return cls(
            name_field=encode_name(name),
            position=check_int32(position, "position"),
            length=check_int32(length, "length"),
        )

    @property
    def name(self) -> str:
        return decode_name(self.name_field)

    @property
    def name_bytes(self) -> bytes:
        nul = self.name_field.find(b"\x00")
        return self.name_field if nul < 0 else self.name_field[:nul]

    def pack(self) -> bytes:
        return _DIR_ENTRY_STRUCT.pack(self.name_field, self.position, self.length)

    def __repr__(self) -> str:
        return f"DirectoryEntry(name={self.name!r}, position={self.position}, length={self.length})"


def read_entry(f: BinaryIO) -> DirectoryEntry:
    raw = read_exact(f, DIR_ENTRY_SIZE)
    name_field, position, length = _DIR_ENTRY_STRUCT.unpack(raw)
    return DirectoryEntry(name_field=name_field, position=position, length=length)


def write_entry(f: BinaryIO, entry: DirectoryEntry) -> None:
    f.write(entry.pack())
