"""Configuration generator — random connected tile structures with targets.

Regions are grown from a seed by repeatedly drawing the next node
uniformly from the current frontier, so every intermediate region is
connected.  Custom strategies subclass :class:`Generator` and are
installed by the generator loader.
"""

from __future__ import annotations

import logging
from collections import deque
from typing import Callable

from hybridsim.models.descriptor import ConfigurationDescriptor
from hybridsim.models.node import ORIGIN, Node
from hybridsim.util.randomness import rng

log = logging.getLogger(__name__)


class Generator:
    """Default generator.

    ``generate(num_tiles, num_robots, num_overhang)`` returns a descriptor
    with ``num_tiles`` connected tile nodes, ``min(num_robots, num_tiles)``
    robots on distinct tiles, and optionally a target shape of the same
    size whose ``min(num_overhang, num_tiles - 1)`` demand nodes lie
    outside the tile structure.
    """

    def generate(self, num_tiles: int, num_robots: int, num_overhang: int = -1) -> ConfigurationDescriptor:
        """Generate a configuration descriptor.

        Args:
            num_tiles: Number of tiles; ``<= 0`` yields an empty descriptor.
            num_robots: Number of robots (capped at ``num_tiles``).
            num_overhang: ``< 0``: no targets; ``0``: targets equal the
                tile nodes; otherwise the number of overhang tiles.
        """
        descriptor = ConfigurationDescriptor()
        if num_tiles <= 0:
            return descriptor

        # Tiles
        tile_nodes = descriptor.tile_nodes
        _grow(tile_nodes, ORIGIN, num_tiles - 1, lambda node: node not in tile_nodes)

        # Robots
        num_placed = max(0, min(num_robots, num_tiles))
        descriptor.robot_nodes.update(rng.sample(_ordered(tile_nodes), num_placed))

        if num_overhang < 0:
            return descriptor
        if num_overhang == 0:
            descriptor.target_nodes.update(tile_nodes)
            return descriptor

        num_demand = min(num_overhang, num_tiles - 1)
        target_nodes = descriptor.target_nodes

        # Target tiles, grown inside the structure from an outer boundary tile
        outer = [node for node in _ordered(tile_nodes) if _is_at_outer_boundary(node, tile_nodes, num_tiles)]
        _grow(
            target_nodes, rng.choice(outer), num_tiles - num_demand - 1,
            lambda node: node in tile_nodes and node not in target_nodes,
        )

        # Demand nodes, grown outward from the target tiles
        candidates: set[Node] = set()
        for node in target_nodes:
            candidates |= node.neighbors()
        candidates -= tile_nodes
        for _ in range(num_demand):
            next_node = rng.choice(_ordered(candidates))
            target_nodes.add(next_node)
            candidates |= next_node.neighbors() - tile_nodes - target_nodes
            candidates.discard(next_node)

        log.debug("Generated %d tiles, %d robots, %d targets (%d demand)",
                  len(tile_nodes), len(descriptor.robot_nodes), len(target_nodes), num_demand)
        return descriptor


def _grow(region: set[Node], seed: Node, count: int, allowed: Callable[[Node], bool]) -> None:
    """Add ``seed`` and then ``count`` frontier nodes accepted by ``allowed`` to ``region``."""
    region.add(seed)
    candidates = {nbr for nbr in seed.neighbors() if allowed(nbr)}
    for _ in range(count):
        next_node = rng.choice(_ordered(candidates))
        region.add(next_node)
        candidates |= {nbr for nbr in next_node.neighbors() if allowed(nbr)}
        candidates.discard(next_node)


def _ordered(nodes: set[Node]) -> list[Node]:
    """Nodes in a fixed order so that seeded runs are reproducible."""
    return sorted(nodes, key=lambda node: (node.x, node.y))


def _is_at_outer_boundary(node: Node, tile_nodes: set[Node], num_tiles: int) -> bool:
    """Whether ``node`` touches the empty region surrounding the structure.

    Flood-fills empty nodes from the node's empty neighbors.  A hole inside
    a structure of ``num_tiles`` tiles holds fewer than ``num_tiles`` empty
    nodes, so exceeding that bound proves the fill escaped to the outside.
    """
    boundary = {nbr for nbr in node.neighbors() if nbr not in tile_nodes}
    if not boundary:
        return False
    queue = deque(boundary)
    while queue and len(boundary) <= num_tiles:
        current = queue.popleft()
        for nbr in current.neighbors():
            if nbr not in tile_nodes and nbr not in boundary:
                boundary.add(nbr)
                queue.append(nbr)
    return len(boundary) > num_tiles
