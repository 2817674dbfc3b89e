from __future__ import annotations

from typing import BinaryIO, Dict, Iterator, List, Tuple

from PIL import Image

from .constants import PALETTE_BYTES, PALETTE_COLORS
from .errors import ColorNotInPalette, InvalidPaletteSize


Color = Tuple[int, int, int]


def rgb_pixels(image: Image.Image) -> Iterator[Color]:
    """Yield the pixels of ``image`` as RGB tuples in row-major order."""
    raw = image.convert("RGB").tobytes()
    for i in range(0, len(raw), 3):
        yield (raw[i], raw[i + 1], raw[i + 2])


class Palette:
    """256-entry RGB palette used to resolve indexed (LMP) pixels."""

    def __init__(self, colors: List[Color]):
        if not colors or len(colors) > PALETTE_COLORS:
            raise InvalidPaletteSize(f"Palette must hold 1..{PALETTE_COLORS} colors, got {len(colors)}")
        padded = [tuple(c) for c in colors] + [(0, 0, 0)] * (PALETTE_COLORS - len(colors))
        self._colors: List[Color] = padded  # type: ignore[assignment]
        self._lookup: Dict[Color, int] = {}
        for i, c in enumerate(self._colors):
            # First index wins for repeated colors
            self._lookup.setdefault(c, i)

    @classmethod
    def read(cls, f: BinaryIO) -> "Palette":
        """Read RGB triplets until end of stream."""
        data = f.read()
        if len(data) < 3 or len(data) > PALETTE_BYTES or len(data) % 3:
            raise InvalidPaletteSize(f"Palette data must be 3..{PALETTE_BYTES} bytes in RGB triplets, got {len(data)}")
        return cls([(data[i], data[i + 1], data[i + 2]) for i in range(0, len(data), 3)])

    def write(self, f: BinaryIO) -> None:
        f.write(bytes(v for c in self._colors for v in c))

    @classmethod
    def from_image(cls, image: Image.Image) -> "Palette":
        """Collect the distinct colors of ``image`` in first-seen order."""
        seen: Dict[Color, None] = {}
        for px in rgb_pixels(image):
            seen.setdefault(px, None)
            if len(seen) > PALETTE_COLORS:
                raise InvalidPaletteSize(f"Image has more than {PALETTE_COLORS} colors")
        return cls(list(seen))

    @property
    def colors(self) -> List[Color]:
        return list(self._colors)

    def get(self, index: int) -> Color:
        return self._colors[index]

    def index_of(self, color: Color) -> int:
        try:
            return self._lookup[tuple(color)]
        except KeyError:
            raise ColorNotInPalette(f"Color {tuple(color)} is not in the palette") from None

    def __len__(self) -> int:
        return len(self._colors)

    def __repr__(self) -> str:
        return f"Palette({len(self._colors)} colors)"
