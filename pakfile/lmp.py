from __future__ import annotations

import struct
from typing import BinaryIO

from PIL import Image

from .errors import InvalidLmp
from .palette import Color, Palette, rgb_pixels
from .records import read_exact


# LMP header: width u32, height u32 (little endian), then width*height palette indices
_LMP_HDR_STRUCT = struct.Struct("<II")


class LmpImage:
    """Indexed image; pixels are palette indices in row-major order."""

    def __init__(self, width: int, height: int, data: bytes):
        if len(data) != width * height:
            raise InvalidLmp(f"Expected {width * height} pixels for {width}x{height}, got {len(data)}")
        self.width = width
        self.height = height
        self.data = bytes(data)

    @classmethod
    def read(cls, f: BinaryIO) -> "LmpImage":
        width, height = _LMP_HDR_STRUCT.unpack(read_exact(f, _LMP_HDR_STRUCT.size))
        return cls(width, height, f.read())

    def write(self, f: BinaryIO) -> None:
        f.write(_LMP_HDR_STRUCT.pack(self.width, self.height))
        f.write(self.data)

    @classmethod
    def from_image(cls, image: Image.Image, palette: Palette) -> "LmpImage":
        data = bytes(palette.index_of(px) for px in rgb_pixels(image))
        return cls(image.width, image.height, data)

    def to_image(self, palette: Palette) -> Image.Image:
        raw = bytes(v for i in self.data for v in palette.get(i))
        return Image.frombytes("RGB", (self.width, self.height), raw)

    def save_as(self, path, palette: Palette) -> None:
        """Render through ``palette`` and save; format follows the file extension."""
        self.to_image(palette).save(path)

    def _index(self, x: int, y: int) -> int:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"Pixel ({x}, {y}) outside {self.width}x{self.height}")
        return y * self.width + x

    def get(self, x: int, y: int) -> int:
        return self.data[self._index(x, y)]

    def get_color(self, x: int, y: int, palette: Palette) -> Color:
        return palette.get(self.get(x, y))

    @property
    def pixels(self) -> bytes:
        return self.data
