"""Palettes and 8/24/32 bits-per-pixel memory bitmaps."""

from __future__ import annotations

from typing import Optional


def pack_rgb(r: int, g: int, b: int) -> int:
    """Pack a colour into an opaque 32-bit ARGB value."""
    return 0xFF000000 | (r & 0xFF) << 16 | (g & 0xFF) << 8 | (b & 0xFF)


class Palette:
    """An indexed table of packed 32-bit colours."""

    def __init__(self, count: int) -> None:
        if count < 0:
            raise ValueError("palette size must not be negative")
        self.colors = [0] * count

    def __len__(self) -> int:
        return len(self.colors)

    def _check(self, index: int) -> None:
        if not 0 <= index < len(self.colors):
            raise IndexError(f"palette index {index} out of range")

    def set_color(self, index: int, r: int, g: int, b: int) -> None:
        self._check(index)
        self.colors[index] = pack_rgb(r, g, b)

    def get_color(self, index: int) -> tuple[int, int, int]:
        """Return the ``(r, g, b)`` components of entry ``index``."""
        self._check(index)
        value = self.colors[index]
        return (value >> 16) & 0xFF, (value >> 8) & 0xFF, value & 0xFF

    def copy(self) -> "Palette":
        other = Palette(0)
        other.colors = list(self.colors)
        return other


class Bitmap:
    """A block of pixels with rows padded to a multiple of four bytes."""

    def __init__(
        self, width: int, height: int, bpp: int, palette: Optional[Palette] = None
    ) -> None:
        if width < 0 or height < 0 or bpp <= 0:
            raise ValueError("invalid bitmap dimensions")
        self.width = width
        self.height = height
        self.bpp = bpp
        self.pitch = (((width * bpp) >> 3) + 3) & ~0x03
        self.data = bytearray(self.pitch * height)
        self.palette = palette

    def clone(self) -> "Bitmap":
        """Return a copy with its own pixels, sharing the palette."""
        other = Bitmap(self.width, self.height, self.bpp, self.palette)
        other.data[:] = self.data
        return other

    def offset(self, x: int, y: int) -> int:
        """Return the index into ``data`` of pixel column ``x`` on row ``y``."""
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise ValueError(f"position ({x}, {y}) outside {self.width}x{self.height} bitmap")
        return y * self.pitch + x

    def row(self, y: int) -> memoryview:
        """Return a writable view of scanline ``y``."""
        start = self.offset(0, y)
        return memoryview(self.data)[start : start + self.pitch]