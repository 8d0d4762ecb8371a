"""Loading tile layers from Tiled .tmx maps."""

from __future__ import annotations

import re
import struct
import zlib
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional
from xml.etree import ElementTree

from .base64 import decode as decode_base64
from .loadfile import AssetLoader, split_filename
from .tmx import LayerType, load_tmx

_SEPARATORS = re.compile(r"[,\n]")
_UINT = re.compile(r"\s*([+-]?\d+)")


class _Encoding(Enum):
    XML = 0
    BASE64 = 1
    CSV = 2


class _Compression(Enum):
    NONE = 0
    ZLIB = 1


@dataclass
class Tile:
    """A map cell: 1-based tileset index (0 = empty) and flag bits."""

    index: int = 0
    flags: int = 0


@dataclass
class Tilemap:
    """A grid of tiles read from one layer of a map."""

    rows: int
    cols: int
    tiles: list[Tile] = field(default_factory=list)
    bgcolor: int = 0
    tileset_path: Optional[str] = None
    id: int = 0
    visible: bool = True


def _tile_from_value(value: int) -> Tile:
    return Tile(value & 0xFFFF, (value >> 16) & 0xFFFF)


def decode_csv(text: str, count: int) -> list[int]:
    """Read ``count`` unsigned integers from comma/newline separated text.

    Tokens beginning with a carriage return are skipped; tokens that are
    not numbers read as 0. Raises ``ValueError`` when too few tokens remain.
    """
    values: list[int] = []
    for token in filter(None, _SEPARATORS.split(text)):
        if len(values) == count:
            break
        if token.startswith("\r"):
            continue
        match = _UINT.match(token)
        values.append(int(match.group(1)) & 0xFFFFFFFF if match else 0)
    if len(values) < count:
        raise ValueError(f"expected {count} csv values, found {len(values)}")
    return values


def _inflate(raw: bytes, size: int) -> bytes:
    try:
        return zlib.decompressobj().decompress(raw, size)
    except zlib.error as exc:
        raise ValueError(f"corrupt compressed tile data: {exc}") from exc


class _LayerDataReader:
    """Collects the tile values of the layer with a given name."""

    def __init__(self, layer_name: str, numtiles: int) -> None:
        self.layer_name = layer_name.lower()
        self.numtiles = numtiles
        self.active = False
        self.encoding = _Encoding.XML
        self.compression = _Compression.NONE
        self.values: Optional[list[int]] = None

    def start(self, tag: str, attrs: dict[str, str]) -> None:
        if tag == "layer" and "name" in attrs:
            self.active = attrs["name"].lower() == self.layer_name
        elif tag == "data":
            for key, value in attrs.items():
                if not self.active:
                    break
                lowered = value.lower()
                if key == "encoding":
                    if lowered == "csv":
                        self.encoding = _Encoding.CSV
                    elif lowered == "base64":
                        self.encoding = _Encoding.BASE64
                    else:
                        self.active = False
                elif key == "compression":
                    if lowered == "gzip":
                        self.active = False
                    elif lowered == "zlib":
                        self.compression = _Compression.ZLIB

    def end(self, tag: str, text: Optional[str]) -> None:
        if tag == "data" and self.active:
            self.values = self._decode(text or "")

    def _decode(self, text: str) -> list[int]:
        if self.encoding is _Encoding.CSV:
            return decode_csv(text, self.numtiles)
        if self.encoding is _Encoding.BASE64:
            size = self.numtiles * 4
            raw = decode_base64(text.strip(), limit=size)
            if self.compression is _Compression.ZLIB:
                raw = _inflate(raw, size)
            raw = raw[:size].ljust(size, b"\0")
            return list(struct.unpack(f"<{self.numtiles}I", raw))
        return [0] * self.numtiles


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1].lower()


def load_tilemap(
    loader: AssetLoader, filename: str, layer_name: Optional[str] = None
) -> Tilemap:
    """Load one tile layer of a .tmx map.

    Without ``layer_name`` the first tile layer is used; names match
    ignoring case. Raises ``FileNotFoundError`` for a missing file,
    ``LookupError`` when the layer does not exist and ``ValueError`` when
    its data cannot be decoded.
    """
    info = load_tmx(loader, filename)
    if layer_name is not None:
        layer = info.find_layer(layer_name)
    else:
        layer = info.first_layer(LayerType.TILE)
    if layer is None:
        raise LookupError(f"no layer {layer_name!r} in {filename!r}")

    reader = _LayerDataReader(layer.name, layer.width * layer.height)
    parser = ElementTree.XMLPullParser(events=("start", "end"))
    try:
        parser.feed(loader.read(filename))
        parser.close()
    except ElementTree.ParseError as exc:
        line = exc.position[0] if exc.position else 0
        raise ValueError(f"parse error in {filename!r} on line {line}: {exc}") from exc

    for event, element in parser.read_events():
        tag = _local_name(element.tag)
        if event == "start":
            attrs = {key.lower(): value for key, value in element.attrib.items()}
            reader.start(tag, attrs)
        else:
            reader.end(tag, element.text)

    if reader.values is None:
        raise ValueError(f"layer {layer.name!r} in {filename!r} has no usable tile data")

    tiles = [_tile_from_value(value) for value in reader.values]
    gid = next((tile.index for tile in tiles if tile.index), 0)
    tmx_tileset = info.suitable_tileset(gid)
    firstgid = 0
    tileset_path: Optional[str] = None
    if tmx_tileset is not None:
        firstgid = tmx_tileset.firstgid
        directory = split_filename(filename).path
        source = tmx_tileset.source
        tileset_path = f"{directory}/{source}" if directory else source

    for tile in tiles:
        if tile.index:
            tile.index = (tile.index - firstgid + 1) & 0xFFFF

    return Tilemap(
        rows=layer.height,
        cols=layer.width,
        tiles=tiles,
        bgcolor=info.bgcolor,
        tileset_path=tileset_path,
        id=layer.id,
        visible=layer.visible,
    )