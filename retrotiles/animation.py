"""Sprite, tileset and palette colour-cycle animations."""

from __future__ import annotations

from collections.abc import Callable, MutableSequence
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .bitmap import Palette
from .dlist import IndexList
from .sequences import ColorStrip, Sequence

FrameCallback = Callable[[int, int], None]
"""Called as ``callback(sprite_index, picture_index)`` for sprite frames."""


class AnimationKind(Enum):
    NONE = 0
    SPRITE = 1
    PALETTE = 2
    TILESET = 3


def _div(numerator: int, denominator: int) -> int:
    """Integer division truncating toward zero."""
    quotient = abs(numerator) // abs(denominator)
    return -quotient if (numerator < 0) != (denominator < 0) else quotient


def _lerp(x: int, x0: int, x1: int, fx0: int, fx1: int) -> int:
    if x1 == x0:
        return fx0
    return fx0 + _div((fx1 - fx0) * (x - x0), x1 - x0)


def _scale(value: int, factor: int) -> int:
    return value * factor // 255


def _blend_colors(first: int, second: int, dst: int, f0: int, f1: int) -> int:
    result = dst & 0xFF000000
    for shift in (0, 8, 16):
        a = (first >> shift) & 0xFF
        b = (second >> shift) & 0xFF
        result |= ((_scale(a, f0) + _scale(b, f1)) & 0xFF) << shift
    return result


def color_cycle(source: Palette, target: Palette, strip: ColorStrip) -> None:
    """Write the strip's entries of ``source``, rotated by ``strip.pos``, to ``target``."""
    count = strip.count
    steps = strip.pos
    rotated = [
        source.colors[strip.first + ((c - steps) if strip.dir else (c + steps)) % count]
        for c in range(count)
    ]
    target.colors[strip.first : strip.first + count] = rotated


def color_cycle_blend(source: Palette, target: Palette, strip: ColorStrip, time: int) -> None:
    """Like :func:`color_cycle`, mixing with the next step by the elapsed time.

    At ``time == strip.t0`` the result equals the current step; at
    ``time == strip.timer`` it equals the following one.
    """
    count = strip.count
    steps = strip.pos
    f1 = _lerp(time, strip.t0, strip.timer, 0, 255)
    f0 = 255 - f1
    for c in range(count):
        if strip.dir:
            idx0 = (c - steps) % count
            idx1 = (c - steps - 1) % count
        else:
            idx0 = (c + steps) % count
            idx1 = (c + steps + 1) % count
        first = source.colors[strip.first + idx0]
        second = source.colors[strip.first + idx1]
        slot = strip.first + c
        target.colors[slot] = _blend_colors(first, second, target.colors[slot], f0, f1)


@dataclass
class Animation:
    """Playback state of one sequence.

    ``loop`` is the number of times to play; 0 repeats forever.
    """

    kind: AnimationKind = AnimationKind.NONE
    sequence: Optional[Sequence] = None
    enabled: bool = False
    loop: int = 0
    pos: int = 0
    timer: int = 0
    nsprite: int = 0
    blend: bool = False
    palette: Optional[Palette] = None
    srcpalette: Optional[Palette] = None
    tiles: Optional[MutableSequence[int]] = None
    on_frame: Optional[FrameCallback] = None

    def start(self, sequence: Sequence, kind: AnimationKind) -> None:
        """Begin playing ``sequence`` from its first frame."""
        self.timer = 0
        self.enabled = True
        self.sequence = sequence
        self.kind = kind
        self.loop = 0
        self.pos = 0

    def update(self, time: int) -> None:
        """Advance the animation to ``time``."""
        sequence = self.sequence
        if sequence is None:
            return

        if self.kind is AnimationKind.PALETTE:
            if self.palette is None or self.srcpalette is None:
                raise ValueError("palette animation has no palette")
            for strip in sequence.strips:
                if time >= strip.timer:
                    strip.timer = time + strip.delay
                    strip.pos = (strip.pos + 1) % strip.count
                    strip.t0 = time
                    if not self.blend:
                        color_cycle(self.srcpalette, self.palette, strip)
                if self.blend:
                    color_cycle_blend(self.srcpalette, self.palette, strip, time)
            return

        if time < self.timer:
            return

        frame = sequence.frames[self.pos]
        self.timer = time + frame.delay
        if self.kind is AnimationKind.SPRITE:
            if self.on_frame is not None:
                self.on_frame(self.nsprite, frame.index)
        elif self.kind is AnimationKind.TILESET:
            if self.tiles is not None:
                self.tiles[sequence.target] = frame.index

        self.pos += 1
        if self.pos == sequence.count:
            if self.loop > 1:
                self.loop -= 1
                self.pos = 0
            elif self.loop == 1:
                self.enabled = False
            elif self.loop == 0:
                self.pos = 0


class Animator:
    """Palette animation slots and one animation per sprite."""

    def __init__(
        self,
        num_animations: int,
        num_sprites: int,
        on_sprite_frame: Optional[FrameCallback] = None,
    ) -> None:
        if num_animations < 0 or num_sprites < 0:
            raise ValueError("counts must not be negative")
        self.animations = [Animation() for _ in range(num_animations)]
        self.sprites = [
            Animation(nsprite=index, on_frame=on_sprite_frame) for index in range(num_sprites)
        ]
        self._active = IndexList(num_animations)

    def _palette_slot(self, index: int) -> Animation:
        if not 0 <= index < len(self.animations):
            raise IndexError(f"animation index {index} out of range")
        return self.animations[index]

    def _sprite_slot(self, index: int) -> Animation:
        if not 0 <= index < len(self.sprites):
            raise IndexError(f"sprite index {index} out of range")
        return self.sprites[index]

    def set_palette_animation(
        self, index: int, palette: Palette, sequence: Sequence, blend: bool
    ) -> None:
        """Start colour-cycling ``palette`` with the strips of ``sequence``."""
        animation = self._palette_slot(index)
        if animation.sequence is sequence:
            return
        if not isinstance(palette, Palette):
            raise TypeError("palette animation requires a Palette")
        if not isinstance(sequence, Sequence):
            raise TypeError("palette animation requires a Sequence")

        if not animation.enabled:
            self._active.append(index)
        animation.start(sequence, AnimationKind.PALETTE)
        animation.palette = palette
        animation.blend = blend
        for strip in sequence.strips:
            strip.timer = 0
            strip.t0 = 0
        animation.srcpalette = palette.copy()

    def set_palette_animation_source(self, index: int, palette: Palette) -> None:
        """Replace the colours a running colour cycle works from."""
        animation = self._palette_slot(index)
        if not isinstance(palette, Palette):
            raise TypeError("palette animation requires a Palette")
        if animation.palette is None:
            raise ValueError(f"animation {index} has no palette")
        animation.srcpalette = palette.copy()
        animation.palette.colors[:] = palette.colors

    def set_sprite_animation(self, index: int, sequence: Sequence, loop: int) -> None:
        """Animate sprite ``index``; ``loop`` 0 repeats forever."""
        animation = self._sprite_slot(index)
        if not isinstance(sequence, Sequence):
            raise TypeError("sprite animation requires a Sequence")
        animation.start(sequence, AnimationKind.SPRITE)
        animation.nsprite = index
        animation.loop = loop

    def animation_state(self, index: int) -> bool:
        """Return True while sprite ``index`` is animating."""
        return self._sprite_slot(index).enabled

    def set_animation_delay(self, index: int, frame: int, delay: int) -> None:
        """Change the delay of one frame of sprite ``index``'s sequence."""
        animation = self._sprite_slot(index)
        if animation.sequence is None:
            raise ValueError(f"sprite {index} has no animation")
        if not 0 <= frame < animation.sequence.count:
            raise IndexError(f"frame {frame} out of range")
        animation.sequence.frames[frame].delay = delay

    def available_animation(self) -> Optional[int]:
        """Return the first unused palette animation slot, or None."""
        return next(
            (index for index, anim in enumerate(self.animations) if not anim.enabled), None
        )

    def disable_palette_animation(self, index: int) -> None:
        animation = self._palette_slot(index)
        if animation.enabled:
            self._active.unlink(index)
        animation.enabled = False
        animation.kind = AnimationKind.NONE
        animation.sequence = None

    def disable_sprite_animation(self, index: int) -> None:
        animation = self._sprite_slot(index)
        animation.enabled = False
        animation.kind = AnimationKind.NONE
        animation.sequence = None

    def update(self, time: int) -> None:
        """Advance every running palette and sprite animation."""
        for index in list(self._active):
            self.animations[index].update(time)
        for animation in self.sprites:
            if animation.enabled:
                animation.update(time)