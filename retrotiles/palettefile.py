"""Loading colour palettes from Adobe colour table (.act) files."""

from __future__ import annotations

import struct

from .bitmap import Palette
from .loadfile import AssetLoader

ACT_ENTRIES = 256
_TRAILER = struct.Struct(">hh")
ACT_SIZE = ACT_ENTRIES * 3 + _TRAILER.size
"""Size of an .act file that carries the optional entry-count trailer."""


def load_palette(loader: AssetLoader, filename: str) -> Palette:
    """Load a palette from an .act file.

    A file of exactly ``ACT_SIZE`` bytes takes its number of entries from
    the big-endian trailer; any other file holds ``size // 3`` entries.
    Raises ``FileNotFoundError`` when the file is missing.
    """
    data = loader.read(filename)
    if len(data) == ACT_SIZE:
        entries, _transparent = _TRAILER.unpack_from(data, len(data) - _TRAILER.size)
    else:
        entries = len(data) // 3
    if entries < 0:
        raise ValueError(f"invalid palette entry count {entries} in {filename!r}")

    palette = Palette(entries)
    starts = range(0, len(data) - 2, 3)
    for index, start in zip(range(entries), starts):
        r, g, b = data[start : start + 3]
        palette.set_color(index, r, g, b)
    return palette