"""Loading PNG and BMP images as 8 bits-per-pixel indexed bitmaps."""

from __future__ import annotations

import io
import struct
from typing import Optional

from PIL import Image, UnidentifiedImageError

from .bitmap import Bitmap, Palette, pack_rgb
from .loadfile import AssetLoader

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"
MAX_COLORS = 255
TRANSPARENT_COLOR = 0xFFFF00FF
"""Palette entry 0 of a bitmap converted from true colour."""

_BMP_FILE_HEADER = struct.Struct("<2sIHHI")
_BMP_INFO_MAX = 124

_PNG_MODES = {"P": 1, "L": 1, "RGB": 3, "RGBA": 4}


class ImageFormatError(ValueError):
    """The image is not a PNG or BMP that can be turned into 8 bpp."""


def to_indexed(bitmap: Bitmap) -> Optional[Bitmap]:
    """Convert a 24 or 32 bpp bitmap to 8 bpp with a generated palette.

    Entry 0 of the palette is reserved for transparency; pixels whose alpha
    is below 128 map to it. Returns ``None`` once 255 distinct colours have
    been collected and another opaque pixel follows.
    """
    if bitmap.bpp not in (24, 32):
        raise ValueError(f"cannot index a {bitmap.bpp} bpp bitmap")
    channels = bitmap.bpp // 8
    stride = bitmap.width * channels
    result = Bitmap(bitmap.width, bitmap.height, 8)
    colors: dict[int, int] = {}

    for y in range(bitmap.height):
        source = bytes(bitmap.row(y)[:stride])
        target = result.row(y)
        pixels = zip(*[iter(source)] * channels)
        for x, pixel in enumerate(pixels):
            if channels == 4 and pixel[3] < 128:
                target[x] = 0
                continue
            if len(colors) == MAX_COLORS:
                return None
            value = pack_rgb(pixel[0], pixel[1], pixel[2])
            target[x] = colors.setdefault(value, len(colors) + 1)

    palette = Palette(len(colors) + 1)
    palette.colors[0] = TRANSPARENT_COLOR
    for value, index in colors.items():
        palette.colors[index] = value
    result.palette = palette
    return result


def _swap_red_blue(bitmap: Bitmap, channels: int) -> None:
    stride = bitmap.width * channels
    for y in range(bitmap.height):
        row = bitmap.row(y)
        pixels = bytearray(row[:stride])
        pixels[0::channels], pixels[2::channels] = pixels[2::channels], pixels[0::channels]
        row[:stride] = pixels


def _load_png(data: bytes) -> Bitmap:
    try:
        with Image.open(io.BytesIO(data)) as image:
            image.load()
            channels = _PNG_MODES.get(image.mode)
            if channels is None:
                raise ImageFormatError(f"unsupported PNG pixel mode {image.mode!r}")
            width, height = image.size
            raw = image.tobytes()
            colors = image.getpalette() if image.mode == "P" else None
    except (UnidentifiedImageError, OSError, SyntaxError) as exc:
        raise ImageFormatError(f"unreadable PNG data: {exc}") from exc

    bitmap = Bitmap(width, height, channels * 8)
    stride = width * channels
    for y in range(height):
        bitmap.row(y)[:stride] = raw[y * stride : (y + 1) * stride]

    if colors is not None:
        palette = Palette(len(colors) // 3)
        for index, rgb in enumerate(zip(*[iter(colors)] * 3)):
            palette.set_color(index, *rgb)
        bitmap.palette = palette
    return bitmap


def _load_bmp(data: bytes) -> Optional[Bitmap]:
    if len(data) < _BMP_FILE_HEADER.size + 4:
        return None
    kind, _size, _res1, _res2, offset_data = _BMP_FILE_HEADER.unpack_from(data)
    if kind != b"BM":
        return None

    header_start = _BMP_FILE_HEADER.size
    (info_size,) = struct.unpack_from("<I", data, header_start)
    info = data[header_start : header_start + min(info_size, _BMP_INFO_MAX)]
    info = info.ljust(_BMP_INFO_MAX, b"\0")
    width, height = struct.unpack_from("<ii", info, 4)
    (bit_count,) = struct.unpack_from("<H", info, 14)
    (colors_used,) = struct.unpack_from("<I", info, 32)

    try:
        bitmap = Bitmap(width, height, bit_count)
    except ValueError:
        return None

    pitch = bitmap.pitch
    for line in range(height):
        start = offset_data + line * pitch
        chunk = data[start : start + pitch]
        bitmap.row(height - line - 1)[: len(chunk)] = chunk

    if bit_count in (24, 32):
        _swap_red_blue(bitmap, bit_count // 8)

    if bit_count == 8:
        if colors_used == 0:
            colors_used = max((offset_data - header_start - info_size) // 4, 0)
        palette_start = header_start + info_size
        palette = Palette(colors_used)
        for index in range(colors_used):
            quad = data[palette_start + index * 4 : palette_start + index * 4 + 4]
            if len(quad) < 3:
                break
            blue, green, red = quad[:3]
            palette.set_color(index, red, green, blue)
        bitmap.palette = palette
    return bitmap


def load_bitmap(loader: AssetLoader, filename: str) -> Bitmap:
    """Load a PNG or BMP file as an 8 bpp bitmap.

    True-colour images are converted with :func:`to_indexed`. Raises
    ``FileNotFoundError`` for a missing file and :class:`ImageFormatError`
    when the result cannot be brought to 8 bpp.
    """
    data = loader.read(filename)
    if data.startswith(PNG_SIGNATURE):
        bitmap: Optional[Bitmap] = _load_png(data)
    else:
        bitmap = _load_bmp(data)
    if bitmap is None:
        raise ImageFormatError(f"{filename!r} is not a PNG or BMP image")

    if bitmap.bpp in (24, 32):
        indexed = to_indexed(bitmap)
        if indexed is not None:
            bitmap = indexed

    if bitmap.bpp != 8:
        raise ImageFormatError(f"{filename!r} cannot be converted to 8 bpp")
    return bitmap