"""Fixed-size pool of moving game actors with hitboxes and timers."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Optional, Protocol

_UINT32 = 0xFFFFFFFF
NUM_TIMERS = 4


class _SpriteSink(Protocol):
    def set_position(self, index: int, x: int, y: int) -> None: ...

    def disable(self, index: int) -> None: ...

    def clear_blend(self, index: int) -> None: ...


@dataclass
class Rect:
    x1: int = 0
    y1: int = 0
    x2: int = 0
    y2: int = 0


@dataclass
class Actor:
    """One game object; ``state`` 0 means the slot is free."""

    index: int = 0
    type: int = 0
    state: int = 0
    w: int = 0
    h: int = 0
    x: int = 0
    y: int = 0
    vx: int = 0
    vy: int = 0
    life: int = 0
    hitbox: Rect = field(default_factory=Rect)
    timers: list[int] = field(default_factory=lambda: [0] * NUM_TIMERS)
    callback: Optional[Callable[["Actor"], None]] = None
    data: dict[str, Any] = field(default_factory=dict)

    def update_hitbox(self) -> None:
        """Recompute the collision box from position and size."""
        self.hitbox = Rect(self.x, self.y, self.x + self.w, self.y + self.h)

    def collides(self, other: "Actor") -> bool:
        """Return True when the two hitboxes overlap (touching edges do not)."""
        a, b = self.hitbox, other.hitbox
        return a.x1 < b.x2 and a.x2 > b.x1 and a.y1 < b.y2 and a.y2 > b.y1


class ActorPool:
    """A fixed number of actor slots, ticked once per frame.

    ``sprites`` is an optional object with ``set_position(index, x, y)``,
    ``disable(index)`` and ``clear_blend(index)`` that mirrors actors onto
    sprites with the same index.
    """

    def __init__(self, count: int, sprites: Optional[_SpriteSink] = None) -> None:
        if count < 0:
            raise ValueError("actor count must not be negative")
        self.actors = [Actor() for _ in range(count)]
        self.sprites = sprites
        self.time = 0

    def __len__(self) -> int:
        return len(self.actors)

    def available(self, first: int, length: int) -> Optional[int]:
        """Return the index of the first free slot in the range, or None."""
        for index in range(max(first, 0), min(first + length, len(self.actors))):
            if self.actors[index].state == 0:
                return index
        return None

    def get(self, index: int) -> Optional[Actor]:
        if 0 <= index < len(self.actors):
            return self.actors[index]
        return None

    def spawn(
        self,
        index: int,
        type: int,
        x: int,
        y: int,
        w: int,
        h: int,
        callback: Optional[Callable[[Actor], None]] = None,
    ) -> Optional[Actor]:
        """Activate slot ``index`` with the given properties."""
        actor = self.get(index)
        if actor is None:
            return None
        actor.index = index
        actor.type = type
        actor.callback = callback
        actor.state = 1
        actor.x, actor.y = x, y
        actor.w, actor.h = w, h
        actor.update_hitbox()
        return actor

    def release(self, actor: Actor) -> None:
        """Free the actor's slot."""
        if self.sprites is not None:
            self.sprites.clear_blend(actor.index)
        actor.state = 0

    def tasks(self, time: int) -> None:
        """Advance every active actor by one frame at ``time``."""
        self.time = time & _UINT32
        for actor in self.actors:
            if actor.state != 0:
                self._tick(actor)

    def _tick(self, actor: Actor) -> None:
        actor.x += actor.vx
        actor.y += actor.vy
        if actor.callback is not None:
            actor.callback(actor)

        if actor.state != 0:
            actor.update_hitbox()
            if self.sprites is not None:
                self.sprites.set_position(actor.index, actor.x, actor.y)
        elif self.sprites is not None:
            self.sprites.disable(actor.index)

    def set_timeout(self, actor: Actor, timer: int, timeout: int) -> None:
        """Arm ``timer`` to expire ``timeout`` ticks from the current time."""
        actor.timers[timer] = (self.time + timeout) & _UINT32

    def timeout_expired(self, actor: Actor, timer: int) -> bool:
        return self.time >= actor.timers[timer]