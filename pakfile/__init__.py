"""
pakfile: reader, builder and CLI for PACK game-content archives.

A PACK archive is a 12-byte header, a region of concatenated member contents,
and a trailing directory table of fixed 64-byte records (56-byte name,
position, length). Features:

- Random-access member lookup and whole-tree extraction (``PakReader``)
- Two-pass archive construction from a directory tree (``PakWriter``, ``create_pak``)
- Palette and indexed (LMP) image codecs that work over plain byte streams
- ``pakfile`` command line tool (create/extract/list/lmp2img/img2lmp)
"""

__version__ = "0.1"

__all__ = [
    "constants",
    "errors",
    "pathutil",
    "header",
    "records",
    "reader",
    "writer",
    "palette",
    "lmp",
    "cli",
]

# Programmatic API: pakfile.reader.PakReader and pakfile.writer.create_pak; the
# CLI functions in pakfile.cli (cmd_create/cmd_extract) take normal parameters.
