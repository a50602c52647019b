"""Entity base — anything anchored to a lattice node.

Entities are bound to the :class:`~hybridsim.engine.configuration.Configuration`
that holds them; the store sets ``configuration`` when an entity is added.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from hybridsim.models.node import Node
from hybridsim.util.constants import COLOR_DEFAULT

if TYPE_CHECKING:
    from hybridsim.engine.configuration import Configuration


@dataclass(eq=False)
class Entity:
    """Base record for tiles and robots.

    Attributes:
        node: Lattice node the entity occupies.
        configuration: Store holding the entity (shared, never copied).
    """

    node: Node
    configuration: Configuration | None = field(default=None, repr=False, kw_only=True)

    def get_color(self) -> str:
        """Colour used by renderers to draw the entity."""
        return COLOR_DEFAULT

    def clone(self) -> Entity:
        """Deep copy that stays bound to the same configuration."""
        return copy.deepcopy(self)

    def __deepcopy__(self, memo: dict[int, Any]) -> Entity:
        duplicate = copy.copy(self)
        memo[id(self)] = duplicate
        for key, value in vars(self).items():
            if key != "configuration":
                setattr(duplicate, key, copy.deepcopy(value, memo))
        return duplicate
