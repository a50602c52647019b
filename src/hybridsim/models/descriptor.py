"""Configuration descriptor — the output of a configuration generator."""

from __future__ import annotations

from dataclasses import dataclass, field

from hybridsim.models.node import Node


@dataclass
class ConfigurationDescriptor:
    """Three node sets describing a configuration before it is populated.

    Attributes:
        tile_nodes: Nodes that receive a tile.
        robot_nodes: Nodes that receive a robot (subset of ``tile_nodes``
            for the default generator).
        target_nodes: Nodes of the target shape.
    """

    tile_nodes: set[Node] = field(default_factory=set)
    robot_nodes: set[Node] = field(default_factory=set)
    target_nodes: set[Node] = field(default_factory=set)

    @property
    def is_empty(self) -> bool:
        return not (self.tile_nodes or self.robot_nodes or self.target_nodes)
