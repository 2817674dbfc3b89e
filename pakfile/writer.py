from __future__ import annotations

import os
import stat
from typing import BinaryIO, Callable, Iterator, List, Optional, Set, Tuple, Union

from .constants import COPY_CHUNK_SIZE, DIR_ENTRY_SIZE, DIR_OFFSET_POS, HEADER_SIZE, PAK_MAGIC
from .errors import DuplicateEntryName
from .header import Header
from .pathutil import norm_member_name, relative_member_name
from .reader import PakReader
from .records import DirectoryEntry, check_int32, write_entry


class PakWriter:
    """Streaming writer for PACK archives.

    Contents are written as they are added; the directory table goes at the
    end and the header fields are back-patched by ``finalize()``.
    """

    def __init__(self, out_path: Union[str, os.PathLike]):
        self.out_path = out_path
        self.f: Optional[BinaryIO] = None
        self.entries: List[DirectoryEntry] = []
        self.cursor = HEADER_SIZE
        self.finalized = False
        self._names: Set[bytes] = set()

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def open(self):
        if self.f is not None:
            return
        self.f = open(self.out_path, "wb")
        # Offset/length are deferred until finalize()
        self.f.write(PAK_MAGIC)
        self.f.seek(HEADER_SIZE)
        self.cursor = HEADER_SIZE

    def close(self):
        if self.f is not None:
            self.f.close()
            self.f = None

    def _check_writable(self):
        if self.f is None:
            raise RuntimeError("Archive not open")
        if self.finalized:
            raise RuntimeError("Archive already finalized")

    def _new_entry(self, arc_name: str, length: int) -> DirectoryEntry:
        e = DirectoryEntry.create(arc_name, self.cursor, length)
        if e.name_field in self._names:
            raise DuplicateEntryName(f"Duplicate member name: {arc_name!r}")
        return e

    def _append(self, e: DirectoryEntry):
        self._names.add(e.name_field)
        self.entries.append(e)
        self.cursor += e.length

    def add_file(self, arc_name: str, fs_path: Union[str, os.PathLike]) -> DirectoryEntry:
        """Stream a filesystem file into the archive under ``arc_name``."""
        self._check_writable()
        arc_name = norm_member_name(arc_name)
        # Validate name and bounds before any content is written
        size = os.stat(fs_path).st_size
        e = self._new_entry(arc_name, size)
        check_int32(self.cursor + size, "offset")
        copied = 0
        try:
            with open(fs_path, "rb") as src:
                while True:
                    block = src.read(COPY_CHUNK_SIZE)
                    if not block:
                        break
                    self.f.write(block)
                    copied += len(block)
            e.length = check_int32(copied, "length")
            check_int32(self.cursor + copied, "offset")
        except BaseException:
            # Drop the partial content so later positions stay aligned
            self.f.seek(self.cursor)
            self.f.truncate()
            raise
        self._append(e)
        return e

    def add_bytes(self, arc_name: str, data: bytes) -> DirectoryEntry:
        self._check_writable()
        e = self._new_entry(norm_member_name(arc_name), len(data))
        check_int32(self.cursor + len(data), "offset")
        self.f.write(data)
        self._append(e)
        return e

    def finalize(self) -> Header:
        """Write the directory table and patch the header; returns the header."""
        self._check_writable()
        header = Header(
            dir_offset=check_int32(self.cursor, "directory offset"),
            dir_length=check_int32(DIR_ENTRY_SIZE * len(self.entries), "directory length"),
        )
        self.f.seek(header.dir_offset)
        for e in self.entries:
            write_entry(self.f, e)
        self.f.seek(DIR_OFFSET_POS)
        self.f.write(header.pack()[DIR_OFFSET_POS:])
        self.f.flush()
        self.finalized = True
        return header


def iter_source_files(source_root: Union[str, os.PathLike]) -> Iterator[Tuple[str, str]]:
    """Yield ``(member_name, fs_path)`` for each regular file under ``source_root``.

    Order is deterministic: names sorted, a directory's files before its
    subdirectories. Symlinks (files or directories) and other non-regular
    entries are skipped.
    """
    root_dir = os.fspath(source_root)
    if not os.path.isdir(root_dir):
        raise NotADirectoryError(f"Source is not a directory: {root_dir}")

    def _raise(exc: OSError):
        raise exc

    for root, dirnames, filenames in os.walk(root_dir, onerror=_raise):
        # prune symlink directories to avoid walking into them
        dirnames[:] = sorted(d for d in dirnames if not os.path.islink(os.path.join(root, d)))
        for fn in sorted(filenames):
            full = os.path.join(root, fn)
            st = os.lstat(full)
            if not stat.S_ISREG(st.st_mode):
                continue
            yield relative_member_name(full, root_dir), full


def create_pak(
    source_root: Union[str, os.PathLike],
    out_path: Union[str, os.PathLike],
    *,
    on_entry: Optional[Callable[[DirectoryEntry], None]] = None,
) -> PakReader:
    """Build an archive from ``source_root`` and return an opened reader over it.

    A failure leaves the partially written ``out_path`` on disk.
    """
    out_real = os.path.realpath(out_path)
    with PakWriter(out_path) as w:
        for arc_name, full in iter_source_files(source_root):
            # never copy the archive being written into itself
            if os.path.realpath(full) == out_real:
                continue
            e = w.add_file(arc_name, full)
            if on_entry is not None:
                on_entry(e)
        w.finalize()
    reader = PakReader(out_path)
    reader.open()
    return reader
