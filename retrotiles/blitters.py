"""Scanline blitters from 8-bit indexed pixels to 8 or 32-bit targets."""

from __future__ import annotations

from collections.abc import Callable, Iterator, MutableSequence, Sequence
from typing import Optional

from .bitmap import Palette

FIXED_BITS = 16

BlendFunc = Callable[[int, int], int]
"""Combine a source and a destination channel value (0..255)."""

ScanBlitter = Callable[..., None]


def _fix_to_int(value: int) -> int:
    """Fixed point to integer, truncating toward zero."""
    whole = abs(value) >> FIXED_BITS
    return -whole if value < 0 else whole


def _positions(start: int, width: int, dx: int, offset: int, scaling: bool) -> Iterator[int]:
    if scaling:
        for _ in range(width):
            yield start + _fix_to_int(offset)
            offset += dx
    else:
        for step in range(width):
            yield start + step * dx


def _blend_pixel(blend: BlendFunc, src: int, dst: int) -> int:
    result = dst & 0xFF000000
    for shift in (0, 8, 16):
        channel = blend((src >> shift) & 0xFF, (dst >> shift) & 0xFF) & 0xFF
        result |= channel << shift
    return result


def _make_blitter(to32: bool, key: bool, scaling: bool, blending: bool) -> ScanBlitter:
    def blit(
        src: Sequence[int],
        src_start: int,
        palette: Optional[Palette],
        dst: MutableSequence[int],
        dst_start: int,
        width: int,
        dx: int,
        offset: int = 0,
        blend: Optional[BlendFunc] = None,
    ) -> None:
        if blending and blend is None:
            raise ValueError("blending blitter requires a blend function")
        if to32 and palette is None:
            raise ValueError("32 bpp blitter requires a palette")
        positions = _positions(src_start, width, dx, offset, scaling)
        for target, position in enumerate(positions, dst_start):
            value = src[position]
            if key and not value:
                continue
            if not to32:
                dst[target] = value
            elif blending:
                dst[target] = _blend_pixel(blend, palette.colors[value], dst[target])
            else:
                dst[target] = palette.colors[value] & 0xFFFFFFFF

    blit.__name__ = "blit_{}{}{}_8_{}".format(
        "key" if key else "fast",
        "_blend" if blending else "",
        "_scaling" if scaling else "",
        32 if to32 else 8,
    )
    return blit


_BLITTERS = {
    (to32, key, scaling, blending): _make_blitter(to32, key, scaling, blending)
    for to32 in (False, True)
    for key in (False, True)
    for scaling in (False, True)
    for blending in (False, True)
    if to32 or not blending
}


def get_blitter(bpp: int, key: bool, scaling: bool, blend: bool) -> ScanBlitter:
    """Return the scanline blitter for a target depth and drawing mode.

    A target depth of 32 draws palette colours; any other draws raw indices.
    The returned callable takes ``(src, src_start, palette, dst, dst_start,
    width, dx, offset=0, blend=None)``; ``dx`` is the source step, in 16.16
    fixed point when scaling, and ``offset`` the scaling start position.
    """
    to32 = bpp == 32
    try:
        return _BLITTERS[(to32, bool(key), bool(scaling), bool(blend))]
    except KeyError:
        raise ValueError("no blending blitter for 8 bpp targets") from None


def blit_color(dst: MutableSequence[int], start: int, color: int, width: int) -> None:
    """Fill ``width`` pixels from ``start`` with ``color``."""
    for target in range(start, start + width):
        dst[target] = color


def _mosaic_blocks(width: int, size: int) -> Iterator[tuple[int, int]]:
    if width > 0 and size <= 0:
        raise ValueError("mosaic size must be positive")
    done = 0
    while done < width:
        block = min(size, width - done)
        yield done, block
        done += block


def blit_mosaic_solid(
    src: Sequence[int],
    src_start: int,
    palette: Palette,
    dst: MutableSequence[int],
    dst_start: int,
    width: int,
    size: int,
) -> None:
    """Draw blocks of ``size`` pixels, each the colour of its first source pixel."""
    for done, block in _mosaic_blocks(width, size):
        value = src[src_start + done]
        if value:
            blit_color(dst, dst_start + done, palette.colors[value], block)


def blit_mosaic_blend(
    src: Sequence[int],
    src_start: int,
    palette: Palette,
    dst: MutableSequence[int],
    dst_start: int,
    width: int,
    size: int,
    blend: BlendFunc,
) -> None:
    """Like :func:`blit_mosaic_solid`, blending each block into the target."""
    for done, block in _mosaic_blocks(width, size):
        value = src[src_start + done]
        if value:
            color = palette.colors[value]
            for target in range(dst_start + done, dst_start + done + block):
                dst[target] = _blend_pixel(blend, color, dst[target])