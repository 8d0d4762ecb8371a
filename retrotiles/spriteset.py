"""Sprite sheets: an indexed image plus an atlas of named rectangles."""

from __future__ import annotations

import io
import json
import re
from dataclasses import dataclass, field
from typing import Any, Optional, Union

from .bitmap import Bitmap, Palette
from .imageload import load_bitmap
from .loadfile import AssetLoader, FileInfo, build_file_path, split_filename

_INT = re.compile(r"\s*([+-]?\d+)")
_WORD = re.compile(r"\s*(\S+)")
_EQUALS = re.compile(r"\s*=")
_CSV_NAME = re.compile(r"[^,]{1,64}")
_FIELDS = ("x", "y", "w", "h")


@dataclass
class SpriteEntry:
    name: str = ""
    x: int = 0
    y: int = 0
    w: int = 0
    h: int = 0


@dataclass
class Spriteset:
    bitmap: Bitmap
    sprites: list[SpriteEntry] = field(default_factory=list)

    @property
    def palette(self) -> Optional[Palette]:
        return self.bitmap.palette


def _scan_ints(line: str, pos: int, separator: Optional[str]) -> list[int]:
    values: list[int] = []
    while len(values) < len(_FIELDS):
        if values and separator:
            if not line.startswith(separator, pos):
                break
            pos += len(separator)
        match = _INT.match(line, pos)
        if not match:
            break
        values.append(int(match.group(1)))
        pos = match.end()
    return values


def _parse_line(line: str) -> SpriteEntry:
    entry = SpriteEntry()
    if "=" in line:
        word = _WORD.match(line)
        if not word:
            return entry
        entry.name = word.group(1)
        equals = _EQUALS.match(line, word.end())
        if not equals:
            return entry
        values = _scan_ints(line, equals.end(), None)
    elif "," in line:
        name = _CSV_NAME.match(line)
        if not name:
            return entry
        entry.name = name.group()
        if not line.startswith(",", name.end()):
            return entry
        values = _scan_ints(line, name.end() + 1, ",")
    else:
        return entry
    for attr, value in zip(_FIELDS, values):
        setattr(entry, attr, value)
    return entry


def parse_atlas_text(text: str) -> list[SpriteEntry]:
    """Parse an atlas with one sprite per line.

    Lines are either ``name = x y w h`` or ``name,x,y,w,h``; every line
    yields an entry, with unreadable fields left at zero.
    """
    return [_parse_line(line) for line in io.StringIO(text)]


def _lookup(obj: Any, key: str) -> Any:
    if not isinstance(obj, dict):
        return None
    return next((value for name, value in obj.items() if name.lower() == key), None)


def _int_value(value: Any) -> int:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return int(value)
    return 0


def _json_entry(item: Any) -> SpriteEntry:
    entry = SpriteEntry()
    filename = _lookup(item, "filename")
    if isinstance(filename, str):
        entry.name = filename
    frame = _lookup(item, "frame")
    if isinstance(frame, dict):
        for attr in _FIELDS:
            value = _lookup(frame, attr)
            if value is not None:
                setattr(entry, attr, _int_value(value))
    return entry


def parse_atlas_json(text: Union[str, bytes]) -> list[SpriteEntry]:
    """Parse a JSON atlas: ``frames`` holding ``{filename, frame: {x,y,w,h}}``.

    ``frames`` may be an array or an object; keys match ignoring case.
    Raises ``ValueError`` for invalid JSON or a missing ``frames`` item.
    """
    try:
        root = json.loads(text)
    except ValueError as exc:
        raise ValueError(f"invalid JSON atlas: {exc}") from exc
    frames = _lookup(root, "frames")
    if frames is None:
        raise ValueError("JSON atlas has no frames")
    if isinstance(frames, dict):
        items: list[Any] = list(frames.values())
    elif isinstance(frames, list):
        items = frames
    else:
        items = []
    return [_json_entry(item) for item in items]


def _load_atlas(loader: AssetLoader, info: FileInfo) -> list[SpriteEntry]:
    try:
        return parse_atlas_json(loader.read(build_file_path(info.path, info.name, "json")))
    except (OSError, ValueError):
        pass
    for ext in ("csv", "txt"):
        try:
            data = loader.read(build_file_path(info.path, info.name, ext))
        except OSError:
            continue
        return parse_atlas_text(data.decode("latin-1"))
    raise FileNotFoundError(f"no atlas found for sprite sheet {info.name!r}")


def load_spriteset(loader: AssetLoader, name: str) -> Spriteset:
    """Load a sprite sheet image and its atlas.

    ``name`` may omit the image extension, in which case ``.png`` is used.
    The atlas is looked for as .json, then .csv, then .txt next to it.
    Raises ``FileNotFoundError`` when the image or every atlas is missing.
    """
    info = split_filename(name)
    image = name if info.ext else build_file_path(info.path, info.name, "png")
    bitmap = load_bitmap(loader, image)
    return Spriteset(bitmap, _load_atlas(loader, info))