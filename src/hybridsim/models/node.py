"""Triangular lattice coordinate system using offset coordinates (x, y).

Every node has six neighbors.  Columns alternate their vertical offset:
for even ``x`` the north-east neighbor sits in the same row, for odd ``x``
it sits one row up.  Directions start at north and go clockwise:

    0 = N, 1 = NE, 2 = SE, 3 = S, 4 = SW, 5 = NW

Reference: https://doi.org/10.1007/s11047-019-09774-2
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Node:
    """Immutable lattice node.

    The default ``repr`` (``Node(x=1, y=2)``) is the textual node key used
    in serialized configurations, so it must not be overridden.

    Attributes:
        x: Column coordinate.
        y: Row coordinate.
    """

    x: int
    y: int

    # -- Adjacency -------------------------------------------------------

    def node_in_dir(self, direction: int) -> Node:
        """Return the neighbor in the given global ``direction`` (0..5)."""
        assert 0 <= direction <= 5, f"invalid direction {direction}"
        y_offsets = _Y_OFFSETS_EVEN if self.x % 2 == 0 else _Y_OFFSETS_ODD
        return Node(self.x + _X_OFFSETS[direction], self.y + y_offsets[direction])

    def neighbors(self) -> set[Node]:
        """Return the 6 adjacent nodes."""
        return {self.node_in_dir(direction) for direction in range(6)}

    # -- Scientific coordinates ------------------------------------------

    def scientific_coordinates(self) -> tuple[float, float]:
        """Convert to the continuous coordinates used in the hybrid model literature."""
        sc_y = float(self.y) - (0.0 if self.x % 2 == 0 else 0.5)
        return float(self.x), sc_y

    @classmethod
    def from_scientific(cls, sc_x: float, sc_y: float) -> Node:
        """Inverse of :meth:`scientific_coordinates`."""
        x = int(sc_x)
        y = int(sc_y + (0.0 if x % 2 == 0 else 0.5))
        return cls(x, y)


ORIGIN = Node(0, 0)

# Offsets per direction (N, NE, SE, S, SW, NW); y depends on column parity
_X_OFFSETS: tuple[int, ...] = (0, 1, 1, 0, -1, -1)
_Y_OFFSETS_EVEN: tuple[int, ...] = (-1, 0, 1, 1, 1, 0)
_Y_OFFSETS_ODD: tuple[int, ...] = (-1, -1, 0, 1, 0, -1)
