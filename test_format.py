from __future__ import annotations

import io
import os
import struct
import unittest

from pakfile.constants import DIR_ENTRY_SIZE, HEADER_SIZE, NAME_FIELD_SIZE
from pakfile.errors import ArchiveSizeError, BadMagicBytes, EntryNameError, TruncatedReadError
from pakfile.header import Header, read_header, write_header
from pakfile.records import DirectoryEntry, decode_name, encode_name, read_entry, write_entry


class HeaderCodecTests(unittest.TestCase):
    def test_write_layout(self):
        buf = io.BytesIO()
        write_header(buf, Header(dir_offset=15, dir_length=128))
        raw = buf.getvalue()
        self.assertEqual(len(raw), HEADER_SIZE)
        self.assertEqual(raw[:4], b"PACK")
        self.assertEqual(struct.unpack("<ii", raw[4:]), (15, 128))

    def test_read_consumes_exactly_twelve_bytes(self):
        buf = io.BytesIO(Header(dir_offset=1000, dir_length=640).pack() + b"trailing")
        h = read_header(buf)
        self.assertEqual((h.dir_offset, h.dir_length, h.entry_count), (1000, 640, 10))
        self.assertEqual(buf.tell(), HEADER_SIZE)

    def test_bad_magic_regardless_of_rest(self):
        for magic in (b"PAK0", b"pack", b"\x00\x00\x00\x00", b"KCAP"):
            for rest in (struct.pack("<ii", 12, 0), os.urandom(8)):
                with self.assertRaises(BadMagicBytes):
                    read_header(io.BytesIO(magic + rest))

    def test_truncated_header(self):
        with self.assertRaises(TruncatedReadError):
            read_header(io.BytesIO(b"PACK\x0c\x00"))
        # still an EOFError for callers that only know the builtin
        with self.assertRaises(EOFError):
            read_header(io.BytesIO(b""))


class DirectoryEntryCodecTests(unittest.TestCase):
    def test_write_layout(self):
        buf = io.BytesIO()
        write_entry(buf, DirectoryEntry.create("maps/e1m1.bsp", 12, 3))
        raw = buf.getvalue()
        self.assertEqual(len(raw), DIR_ENTRY_SIZE)
        self.assertEqual(raw[:13], b"maps/e1m1.bsp")
        self.assertEqual(raw[13:NAME_FIELD_SIZE], b"\x00" * (NAME_FIELD_SIZE - 13))
        self.assertEqual(struct.unpack("<ii", raw[NAME_FIELD_SIZE:]), (12, 3))

    def test_read_stops_at_first_nul(self):
        field = b"sound/a.wav\x00garbage".ljust(NAME_FIELD_SIZE, b"\x00")
        e = read_entry(io.BytesIO(field + struct.pack("<ii", 40, 9)))
        self.assertEqual(e.name, "sound/a.wav")
        self.assertEqual(e.name_bytes, b"sound/a.wav")
        self.assertEqual((e.position, e.length), (40, 9))

    def test_full_length_name_without_terminator(self):
        name = "d" * 40 + "/" + "f" * 11 + ".lmp"
        self.assertEqual(len(name), NAME_FIELD_SIZE)
        raw = name.encode("ascii") + struct.pack("<ii", 12, 0)
        e = read_entry(io.BytesIO(raw))
        self.assertEqual(e.name, name)
        self.assertEqual(len(e.name), NAME_FIELD_SIZE)
        self.assertEqual(e.pack(), raw)

    def test_encode_name_limits(self):
        self.assertEqual(len(encode_name("x" * NAME_FIELD_SIZE)), NAME_FIELD_SIZE)
        with self.assertRaises(EntryNameError):
            encode_name("x" * (NAME_FIELD_SIZE + 1))
        with self.assertRaises(EntryNameError):
            encode_name("café.txt")
        with self.assertRaises(ValueError):
            encode_name("a\x00b")

    def test_non_ascii_field_decodes_with_replacement(self):
        self.assertEqual(decode_name(b"a\xffb\x00"), "a\ufffdb")

    def test_truncated_entry(self):
        with self.assertRaises(TruncatedReadError):
            read_entry(io.BytesIO(b"name".ljust(60, b"\x00")))

    def test_offsets_must_fit_int32(self):
        with self.assertRaises(ArchiveSizeError):
            DirectoryEntry.create("big.bin", 2**31, 0)
        with self.assertRaises(ArchiveSizeError):
            DirectoryEntry.create("neg.bin", 12, -1)


if __name__ == "__main__":
    unittest.main()
