class PakError(Exception):
    """Base class for pakfile-specific errors."""


# Archive structure
class BadMagicBytes(PakError):
    pass


class BadFileName(PakError):
    pass


class FileNotFound(PakError):
    """Requested member is not in the directory table."""


class BadDirectory(PakError):
    """Header or directory record points outside the valid layout."""


class TruncatedReadError(PakError, EOFError):
    pass


class ArchiveSizeError(PakError):
    pass


# Member names
class EntryNameError(PakError, ValueError):
    pass


class DuplicateEntryName(EntryNameError):
    pass


# Palette / LMP codecs
class InvalidPaletteSize(PakError):
    pass


class InvalidLmp(PakError):
    pass


class ColorNotInPalette(PakError):
    pass
