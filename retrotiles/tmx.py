"""Reading map-wide information from Tiled .tmx files."""

from __future__ import annotations

import io
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional
from xml.etree import ElementTree

from .loadfile import AssetLoader

TMX_MAX_LAYER = 64
TMX_MAX_TILESET = 64
_NAME_LENGTH = 64

_INT_PREFIX = re.compile(r"\s*([+-]?\d+)")
_HEX_PREFIX = re.compile(r"\s*(?:0[xX])?([0-9a-fA-F]+)")


class LayerType(Enum):
    NONE = 0
    TILE = 1
    OBJECT = 2


@dataclass
class TmxLayer:
    type: LayerType = LayerType.NONE
    name: str = ""
    width: int = 0
    height: int = 0
    num_objects: int = 0
    id: int = 0
    visible: bool = True


@dataclass
class TmxTileset:
    source: str = ""
    firstgid: int = 0


@dataclass
class TmxInfo:
    """Map size, background colour, layers and tileset references."""

    width: int = 0
    height: int = 0
    tilewidth: int = 0
    tileheight: int = 0
    bgcolor: int = 0
    layers: list[TmxLayer] = field(default_factory=list)
    tilesets: list[TmxTileset] = field(default_factory=list)

    def suitable_tileset(self, gid: int) -> Optional[TmxTileset]:
        """Return the tileset whose gid range holds ``gid``, else the last one."""
        if not self.tilesets:
            return None
        for current, following in zip(self.tilesets, self.tilesets[1:]):
            if current.firstgid <= gid < following.firstgid:
                return current
        return self.tilesets[-1]

    def first_layer(self, layer_type: LayerType) -> Optional[TmxLayer]:
        return next((layer for layer in self.layers if layer.type == layer_type), None)

    def find_layer(self, name: str) -> Optional[TmxLayer]:
        """Return the layer called ``name``, ignoring case."""
        wanted = name.lower()
        return next((layer for layer in self.layers if layer.name.lower() == wanted), None)


def _atoi(text: str) -> int:
    match = _INT_PREFIX.match(text)
    return int(match.group(1)) if match else 0


def _parse_bgcolor(text: str) -> int:
    match = _HEX_PREFIX.match(text[1:])
    value = int(match.group(1), 16) & 0xFFFFFFFF if match else 0
    return (value + 0xFF000000) & 0xFFFFFFFF


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1].lower()


def _apply_map(info: TmxInfo, attrs: dict[str, str]) -> None:
    for key, value in attrs.items():
        if key in ("width", "height", "tilewidth", "tileheight"):
            setattr(info, key, _atoi(value))
        elif key == "backgroundcolor":
            info.bgcolor = _parse_bgcolor(value)


def _apply_layer(layer: TmxLayer, attrs: dict[str, str]) -> None:
    for key, value in attrs.items():
        if key == "name":
            layer.name = value[:_NAME_LENGTH]
        elif key == "id":
            layer.id = _atoi(value)
        elif key == "visible":
            layer.visible = bool(_atoi(value))
        elif key in ("width", "height"):
            setattr(layer, key, _atoi(value))


def _apply_tileset(tileset: TmxTileset, attrs: dict[str, str]) -> None:
    for key, value in attrs.items():
        if key == "firstgid":
            tileset.firstgid = _atoi(value)
        elif key == "source":
            tileset.source = value[:_NAME_LENGTH]


def load_tmx(loader: AssetLoader, filename: str) -> TmxInfo:
    """Read the map, layer and tileset descriptions of a .tmx file.

    Raises ``FileNotFoundError`` when the file is missing and ``ValueError``
    when it is not well-formed XML.
    """
    data = loader.read(filename)
    info = TmxInfo()
    layer: Optional[TmxLayer] = None
    tileset: Optional[TmxTileset] = None

    try:
        for event, element in ElementTree.iterparse(io.BytesIO(data), events=("start", "end")):
            tag = _local_name(element.tag)
            if event == "start":
                attrs = {key.lower(): value for key, value in element.attrib.items()}
                if tag == "map":
                    _apply_map(info, attrs)
                elif tag in ("layer", "objectgroup"):
                    kind = LayerType.TILE if tag == "layer" else LayerType.OBJECT
                    layer = TmxLayer(type=kind)
                    _apply_layer(layer, attrs)
                elif tag == "tileset":
                    tileset = TmxTileset()
                    _apply_tileset(tileset, attrs)
            elif tag == "tileset":
                if tileset is not None and len(info.tilesets) < TMX_MAX_TILESET - 1:
                    info.tilesets.append(tileset)
                    tileset = None
            elif tag in ("layer", "objectgroup"):
                if layer is not None and len(info.layers) < TMX_MAX_LAYER - 1:
                    info.layers.append(layer)
                    layer = None
            elif tag == "object" and layer is not None:
                layer.num_objects += 1
    except ElementTree.ParseError as exc:
        line = exc.position[0] if exc.position else 0
        raise ValueError(f"parse error in {filename!r} on line {line}: {exc}") from exc

    return info