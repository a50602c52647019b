"""Pydantic models for the serialized configuration format.

Wire shape (JSON)::

    {
      "tiles":       {"Node(x=0, y=0)": {"node": {"x": 0, "y": 0}, "numPebbles": 0}},
      "robots":      {"Node(x=0, y=0)": {"orientation": 4, "node": {"x": 0, "y": 0}}},
      "targetNodes": [{"x": 0, "y": -1}]
    }

Map keys are informational only: entries are re-indexed by their embedded
``node`` on load.  Behavior-internal robot state is never persisted.
"""

from __future__ import annotations

from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field

from hybridsim.models.node import Node
from hybridsim.util.constants import MAX_PEBBLES_TILE


class NodeModel(BaseModel):
    x: int
    y: int

    @classmethod
    def from_node(cls, node: Node) -> NodeModel:
        return cls(x=node.x, y=node.y)

    def to_node(self) -> Node:
        return Node(self.x, self.y)


class TileModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    node: NodeModel
    num_pebbles: int = Field(default=0, alias="numPebbles", ge=0, le=MAX_PEBBLES_TILE)


class RobotModel(BaseModel):
    orientation: int = Field(ge=0, le=5)
    node: NodeModel


class ConfigurationSnapshot(BaseModel):
    """A complete configuration: tiles, robots, and target nodes."""

    model_config = ConfigDict(populate_by_name=True)

    tiles: Dict[str, TileModel] = Field(default_factory=dict)
    robots: Dict[str, RobotModel] = Field(default_factory=dict)
    target_nodes: List[NodeModel] = Field(default_factory=list, alias="targetNodes")
