"""CRC-32 checksum (reflected polynomial 0xEDB88320)."""

from __future__ import annotations

_POLYNOMIAL = 0xEDB88320
_MASK = 0xFFFFFFFF


def _build_table() -> tuple[int, ...]:
    table = []
    for value in range(256):
        for _ in range(8):
            value = (value >> 1) ^ _POLYNOMIAL if value & 1 else value >> 1
        table.append(value)
    return tuple(table)


_TABLE = _build_table()


def crc32(data: bytes, crc: int = 0) -> int:
    """Return the CRC-32 of ``data``, continuing from a previous ``crc``."""
    crc = (crc & _MASK) ^ _MASK
    for byte in data:
        crc = _TABLE[(crc ^ byte) & 0xFF] ^ (crc >> 8)
    return crc ^ _MASK