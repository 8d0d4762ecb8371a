"""Doubly linked list over a fixed set of integer-indexed nodes."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass


@dataclass
class _Node:
    prev: int | None = None
    next: int | None = None


class IndexList:
    """A doubly linked list whose members are the indices ``0..size-1``."""

    def __init__(self, size: int) -> None:
        self._nodes = [_Node() for _ in range(size)]
        self.first: int | None = None
        self.last: int | None = None

    def _node(self, index: int | None) -> _Node | None:
        if index is None:
            return None
        if not 0 <= index < len(self._nodes):
            raise IndexError(f"node {index} out of range")
        return self._nodes[index]

    def link(self, first: int | None, second: int | None) -> None:
        """Make ``second`` follow ``first``; either may be ``None``."""
        node = self._node(first)
        if node is not None:
            node.next = second
        node = self._node(second)
        if node is not None:
            node.prev = first

    def unlink(self, node: int) -> None:
        """Remove ``node`` from the chain."""
        current = self._node(node)
        prev_node = self._node(current.prev)
        next_node = self._node(current.next)
        if prev_node is not None:
            prev_node.next = current.next
        if next_node is not None:
            next_node.prev = current.prev
        if self.first == node:
            self.first = current.next
        if self.last == node:
            self.last = current.prev
        current.prev = None
        current.next = None

    def append(self, node: int) -> None:
        """Add ``node`` at the end of the chain."""
        self._node(node)
        if self.first is None:
            self.first = node
        self.link(self.last, node)
        self.last = node

    def prev_of(self, node: int) -> int | None:
        return self._node(node).prev

    def next_of(self, node: int) -> int | None:
        return self._node(node).next

    def __iter__(self) -> Iterator[int]:
        index = self.first
        seen = 0
        while index is not None:
            seen += 1
            if seen > len(self._nodes):
                raise RuntimeError("list is corrupted: cycle detected")
            yield index
            index = self._nodes[index].next

    def __len__(self) -> int:
        return sum(1 for _ in self)

    def __repr__(self) -> str:
        return f"IndexList({list(self)!r})"