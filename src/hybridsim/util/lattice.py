"""Lattice utilities — geometry functions for the triangular lattice.

All functions operate on :class:`Node` (offset coordinates).
"""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable

from hybridsim.models.node import Node

NUM_DIRECTIONS = 6


def neighbor(node: Node, direction: int) -> Node:
    """Return the neighbor of ``node`` in the global ``direction`` (0..5)."""
    return node.node_in_dir(direction)


def neighbors(node: Node) -> set[Node]:
    """Return the 6 neighbors of a node."""
    return node.neighbors()


def opposite(direction: int) -> int:
    """Return the direction pointing back along ``direction``."""
    return (direction + 3) % NUM_DIRECTIONS


def connected_components(nodes: Iterable[Node]) -> list[set[Node]]:
    """Split ``nodes`` into components connected under 6-neighbor adjacency."""
    remaining = set(nodes)
    components: list[set[Node]] = []
    while remaining:
        start = remaining.pop()
        component = {start}
        queue = deque([start])
        while queue:
            current = queue.popleft()
            for nbr in current.neighbors():
                if nbr in remaining:
                    remaining.discard(nbr)
                    component.add(nbr)
                    queue.append(nbr)
        components.append(component)
    return components


def is_connected(nodes: Iterable[Node]) -> bool:
    """True if ``nodes`` form at most one connected component."""
    return len(connected_components(nodes)) <= 1


def frontier(region: set[Node]) -> set[Node]:
    """Return all nodes adjacent to ``region`` but not part of it."""
    result: set[Node] = set()
    for node in region:
        result |= node.neighbors()
    return result - region
