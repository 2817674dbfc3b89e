from __future__ import annotations

import os
from pathlib import Path
from typing import BinaryIO, Callable, Iterator, List, Optional, Union

from .constants import COPY_CHUNK_SIZE, DIR_ENTRY_SIZE, HEADER_SIZE
from .errors import BadDirectory, BadFileName, FileNotFound, PakError, TruncatedReadError
from .header import Header, read_header
from .pathutil import member_to_host_path
from .records import DirectoryEntry, read_entry


def archive_display_name(path: Union[str, os.PathLike]) -> str:
    name = Path(path).name
    if not name or name in (".", ".."):
        raise BadFileName(f"Archive path has no file name: {str(path)!r}")
    return name


class PakReader:
    """Random-access view over a PACK archive's directory and contents."""

    def __init__(self, path: Union[str, os.PathLike]):
        self.path = path
        self.name = archive_display_name(path)
        self.f: Optional[BinaryIO] = None
        self.header: Optional[Header] = None
        self.entries: List[DirectoryEntry] = []
        self._owns_handle = True

    @classmethod
    def from_fileobj(cls, fh: BinaryIO, name: str) -> "PakReader":
        """Parse an archive from an already open, seekable binary stream.

        The stream stays owned by the caller; ``close()`` only drops the
        reference.
        """
        r = cls(name)
        r._owns_handle = False
        r.f = fh
        r._load_directory()
        return r

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def open(self):
        if self.f is not None:
            return
        self.f = open(self.path, "rb")
        try:
            self._load_directory()
        except (PakError, OSError, ValueError) as exc:
            # Ensure file handle is closed on failure to avoid leaks
            self.close()
            raise exc

    def close(self):
        if self.f is not None:
            if self._owns_handle:
                self.f.close()
            self.f = None

    def _load_directory(self):
        self.f.seek(0)
        header = read_header(self.f)
        if header.dir_offset < HEADER_SIZE:
            raise BadDirectory(f"Directory offset {header.dir_offset} overlaps the header")
        if header.dir_length < 0 or header.dir_length % DIR_ENTRY_SIZE:
            raise BadDirectory(f"Directory length {header.dir_length} is not a multiple of {DIR_ENTRY_SIZE}")
        self.f.seek(header.dir_offset)
        self.entries = [read_entry(self.f) for _ in range(header.entry_count)]
        self.header = header

    def list(self) -> List[DirectoryEntry]:
        return self.entries

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[DirectoryEntry]:
        return iter(self.entries)

    def __contains__(self, name: str) -> bool:
        return self.find(name) is not None

    def find(self, name: str) -> Optional[DirectoryEntry]:
        """Return the first entry named ``name`` in directory order."""
        try:
            wanted = name.encode("ascii")
        except UnicodeEncodeError:
            return None
        for e in self.entries:
            if e.name_bytes == wanted:
                return e
        return None

    def read_member(self, name: str) -> bytes:
        entry = self.find(name)
        if entry is None:
            raise FileNotFound(f"No member named {name!r} in {self.name}")
        return self.read_entry_data(entry)

    def read_entry_data(self, entry: DirectoryEntry) -> bytes:
        if self.f is None:
            raise RuntimeError("Archive not open")
        if entry.position < 0 or entry.length < 0:
            raise BadDirectory(f"Invalid bounds for {entry.name!r}: {entry.position}+{entry.length}")
        self.f.seek(entry.position)
        buf = bytearray()
        # Underlying streams may return short reads; keep going until done
        while len(buf) < entry.length:
            part = self.f.read(min(COPY_CHUNK_SIZE, entry.length - len(buf)))
            if not part:
                raise TruncatedReadError(
                    f"Unexpected EOF in {entry.name!r}: got {len(buf)} of {entry.length} bytes"
                )
            buf += part
        return bytes(buf)

    def extract_member(self, entry: DirectoryEntry, out_path: str):
        data = self.read_entry_data(entry)
        os.makedirs(os.path.dirname(out_path) or ".", exist_ok=True)
        with open(out_path, "wb") as wf:
            wf.write(data)

    def extract_all(
        self,
        dest_root: Union[str, os.PathLike],
        *,
        on_entry: Optional[Callable[[DirectoryEntry, str], None]] = None,
    ) -> int:
        """Extract every member under ``dest_root`` in directory order.

        The first failure aborts the run; files written before it stay on
        disk. Returns the number of members written.
        """
        if self.f is None:
            raise RuntimeError("Archive not open")
        root = os.fspath(dest_root)
        count = 0
        for e in self.entries:
            dst = member_to_host_path(root, e.name)
            # Duplicate names resolve to the first match, as for read_member
            self.extract_member(self.find(e.name) or e, dst)
            count += 1
            if on_entry is not None:
                on_entry(e, dst)
        return count
