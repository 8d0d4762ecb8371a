"""Frame sequences and colour cycles, loaded from .sqx files."""

from __future__ import annotations

import dataclasses
import re
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Optional, Union
from xml.etree import ElementTree

from .loadfile import AssetLoader

MAX_FRAMES = 100
MAX_COLOR_STRIPS = 32
NAME_LENGTH = 15

_INT_PREFIX = re.compile(r"\s*([+-]?\d+)")
_FRAME_ITEM = re.compile(r"#([0-9A-Fa-f]*)|([0-9A-Fa-f]+)")
_DIGITS = re.compile(r"\d+")


@dataclass
class SequenceFrame:
    index: int = 0
    delay: int = 0


@dataclass
class ColorStrip:
    """A run of palette entries rotated every ``delay`` ticks.

    ``timer``, ``pos`` and ``t0`` hold playback state.
    """

    delay: int = 0
    first: int = 0
    count: int = 0
    dir: int = 0
    timer: int = 0
    pos: int = 0
    t0: int = 0


@dataclass
class Sequence:
    """Either a list of frames or, for a colour cycle, a list of strips."""

    name: str
    target: int = 0
    frames: list[SequenceFrame] = field(default_factory=list)
    strips: list[ColorStrip] = field(default_factory=list)
    cycle: bool = False

    @property
    def count(self) -> int:
        return len(self.strips) if self.cycle else len(self.frames)


class SequencePack:
    """An ordered collection of sequences looked up by name."""

    def __init__(self) -> None:
        self.sequences: list[Sequence] = []

    def add(self, sequence: Sequence) -> None:
        self.sequences.append(sequence)

    def find(self, name: str) -> Optional[Sequence]:
        return next((seq for seq in self.sequences if seq.name == name), None)

    def __len__(self) -> int:
        return len(self.sequences)

    def __iter__(self) -> Iterator[Sequence]:
        return iter(self.sequences)


def _atoi(text: str) -> int:
    match = _INT_PREFIX.match(text)
    return int(match.group(1)) if match else 0


def _frame_values(text: str) -> Iterator[int]:
    for match in _FRAME_ITEM.finditer(text):
        hex_digits, plain = match.groups()
        if hex_digits is not None:
            yield int(hex_digits, 16) if hex_digits else 0
        else:
            digits = _DIGITS.match(plain)
            yield int(digits.group()) if digits else 0


class _PackBuilder:
    """Parser state; values carry over from one sequence to the next."""

    def __init__(self) -> None:
        self.pack = SequencePack()
        self.name = ""
        self.target = 0
        self.count = 0
        self.delay = 0
        self.frames = [SequenceFrame() for _ in range(MAX_FRAMES)]
        self.strips = self._blank_strips()

    @staticmethod
    def _blank_strips() -> list[ColorStrip]:
        return [ColorStrip() for _ in range(MAX_COLOR_STRIPS)]

    def _current_strip(self) -> ColorStrip:
        if not 0 <= self.count < MAX_COLOR_STRIPS:
            raise ValueError(f"more than {MAX_COLOR_STRIPS} colour strips in a cycle")
        return self.strips[self.count]

    def start(self, tag: str, attrs: dict[str, str]) -> None:
        if tag == "cycle":
            self.count = 0
            self.strips = self._blank_strips()
        for key, value in attrs.items():
            self._attribute(tag, key, value)
        if tag == "strip" and self._current_strip().delay != 0:
            self.count += 1

    def _attribute(self, tag: str, key: str, value: str) -> None:
        if tag == "sequence":
            if key == "name":
                self.name = value[:NAME_LENGTH]
            elif key == "delay":
                self.delay = _atoi(value)
            elif key in ("first", "target"):
                self.target = _atoi(value)
            elif key == "count":
                self.count = _atoi(value)
        elif tag == "cycle":
            if key == "name":
                self.name = value[:NAME_LENGTH]
        elif tag == "strip":
            strip = self._current_strip()
            if key == "delay":
                strip.delay = _atoi(value)
            elif key in ("first", "count", "dir"):
                setattr(strip, key, _atoi(value) & 0xFF)

    def end(self, tag: str, text: Optional[str]) -> None:
        if tag == "sequence":
            if text and text.strip():
                self._read_frames(text)
            if not 0 <= self.count <= MAX_FRAMES:
                raise ValueError(f"invalid frame count {self.count} in sequence {self.name!r}")
            frames = [dataclasses.replace(frame) for frame in self.frames[: self.count]]
            self.pack.add(Sequence(self.name, self.target, frames=frames))
        elif tag == "cycle":
            strips = [dataclasses.replace(strip) for strip in self.strips[: self.count]]
            self.pack.add(Sequence(self.name, strips=strips, cycle=True))

    def _read_frames(self, text: str) -> None:
        values = list(_frame_values(text))
        if len(values) > MAX_FRAMES:
            raise ValueError(f"more than {MAX_FRAMES} frames in sequence {self.name!r}")
        self.frames[: len(values)] = [SequenceFrame(value, self.delay) for value in values]
        self.count = len(values)


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1].lower()


def parse_sequence_pack(text: Union[str, bytes]) -> SequencePack:
    """Parse the XML of an .sqx file; raises ``ValueError`` on bad input."""
    parser = ElementTree.XMLPullParser(events=("start", "end"))
    try:
        parser.feed(text)
        parser.close()
    except ElementTree.ParseError as exc:
        line = exc.position[0] if exc.position else 0
        raise ValueError(f"parse error on line {line}: {exc}") from exc

    builder = _PackBuilder()
    for event, element in parser.read_events():
        tag = _local_name(element.tag)
        if event == "start":
            attrs = {key.lower(): value for key, value in element.attrib.items()}
            builder.start(tag, attrs)
        else:
            builder.end(tag, element.text)
    return builder.pack


def load_sequence_pack(loader: AssetLoader, filename: str) -> SequencePack:
    """Load every sequence and cycle of an .sqx file."""
    return parse_sequence_pack(loader.read(filename))