"""Lenient base64 decoder used for tile layer payloads."""

from __future__ import annotations

from itertools import dropwhile

_ALPHABET = b"ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789+/"

_WHITESPACE = 64
_EQUALS = 65
_INVALID = 66


def _build_table() -> tuple[int, ...]:
    table = [_INVALID] * 256
    for value, char in enumerate(_ALPHABET):
        table[char] = value
    table[ord("\t")] = _WHITESPACE
    table[ord("=")] = _EQUALS
    return tuple(table)


_TABLE = _build_table()


def _emit(out: bytearray, chunk: bytes, limit: int | None) -> None:
    if limit is not None and len(out) + len(chunk) > limit:
        raise ValueError(f"decoded data exceeds limit of {limit} bytes")
    out.extend(chunk)


def decode(data: bytes | str, limit: int | None = None) -> bytes:
    """Decode base64 ``data``.

    Leading bytes below ``'A'`` are skipped, tabs are ignored, and the first
    ``'='`` ends the data. Any other character outside the alphabet raises
    ``ValueError``, as does output longer than ``limit`` bytes.
    """
    if isinstance(data, str):
        data = data.encode("latin-1")

    out = bytearray()
    buf = 1
    for byte in dropwhile(lambda b: b < ord("A"), data):
        code = _TABLE[byte]
        if code == _WHITESPACE:
            continue
        if code == _INVALID:
            raise ValueError(f"invalid base64 character {byte!r}")
        if code == _EQUALS:
            break
        buf = buf << 6 | code
        if buf & 0x1000000:
            _emit(out, bytes(((buf >> 16) & 0xFF, (buf >> 8) & 0xFF, buf & 0xFF)), limit)
            buf = 1

    if buf & 0x40000:
        _emit(out, bytes(((buf >> 10) & 0xFF, (buf >> 2) & 0xFF)), limit)
    elif buf & 0x1000:
        _emit(out, bytes(((buf >> 4) & 0xFF,)), limit)

    return bytes(out)