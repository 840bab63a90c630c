"""
Integer grid coordinates.

x grows to the right (columns) and y grows downwards (rows), so the flat
row-major index of a cell is ``x + width * y``.
"""

from __future__ import annotations
from typing import List, NamedTuple


class Coord(NamedTuple):
    x: int
    y: int

    def __add__(self, other: Coord) -> Coord:
        return Coord(self.x + other.x, self.y + other.y)

    def index(self, width: int) -> int:
        """Row-major index of this coordinate in a grid of the given width."""
        return self.x + width * self.y

    def top(self) -> Coord:
        return Coord(self.x, self.y - 1)

    def bottom(self) -> Coord:
        return Coord(self.x, self.y + 1)

    def left(self) -> Coord:
        return Coord(self.x - 1, self.y)

    def right(self) -> Coord:
        return Coord(self.x + 1, self.y)

    def neighbors(self) -> List[Coord]:
        """The 4 axis-aligned neighbors (no diagonals), possibly out of range."""
        return [self.top(), self.bottom(), self.left(), self.right()]
