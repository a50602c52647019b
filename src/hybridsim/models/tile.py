"""Tile model — a passive, movable unit of the structure.

A tile may carry a single pebble, which robots use as a marker.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from hybridsim.models.entity import Entity
from hybridsim.util.constants import (
    COLOR_DEFAULT,
    COLOR_NON_TARGET,
    COLOR_TARGET,
    MAX_PEBBLES_TILE,
)


@dataclass(eq=False)
class Tile(Entity):
    """A tile at a lattice node.

    Attributes:
        num_pebbles: Pebbles on the tile (0 or 1).
        color: Optional colour overriding the target-based default.
    """

    num_pebbles: int = 0
    color: Optional[str] = None

    def get_color(self) -> str:
        """Tile colour depends on whether the tile lies on a target node.

        Without any target nodes every tile is drawn in the default colour.
        """
        if self.color is not None:
            return self.color
        targets = self.configuration.target_nodes if self.configuration is not None else set()
        if not targets:
            return COLOR_DEFAULT
        return COLOR_TARGET if self.node in targets else COLOR_NON_TARGET

    def add_pebble(self) -> bool:
        """Put a pebble on the tile if there is room. Returns True if successful."""
        if self.num_pebbles >= MAX_PEBBLES_TILE:
            return False
        self.num_pebbles += 1
        return True

    def remove_pebble(self) -> bool:
        """Take the pebble off the tile if there is one. Returns True if successful."""
        if self.num_pebbles <= 0:
            return False
        self.num_pebbles -= 1
        return True

    def has_pebble(self) -> bool:
        return self.num_pebbles > 0
