"""Integer sine and cosine lookup tables in whole degrees."""

from __future__ import annotations

import math

_SIN_TABLE = tuple(int(math.sin(degree * math.pi / 180) * 256) for degree in range(360))
_COS_TABLE = tuple(int(math.cos(degree * math.pi / 180) * 256) for degree in range(360))


def calc_sin(angle: int, factor: int) -> int:
    """Return ``sin(angle) * factor`` in integer arithmetic (8-bit fraction)."""
    return (_SIN_TABLE[angle % 360] * factor) >> 8


def calc_cos(angle: int, factor: int) -> int:
    """Return ``cos(angle) * factor`` in integer arithmetic (8-bit fraction)."""
    return (_COS_TABLE[angle % 360] * factor) >> 8