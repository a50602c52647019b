"""Robot model — a constant-memory automaton with a purely local view.

A robot senses and acts only relative to its own node.  Every query and
action takes a *label* (0..5) that is resolved to a global direction via
the robot's fixed ``orientation``, so robots do not share a compass.

Algorithms subclass :class:`Robot` and override :meth:`Robot.activate`
(and optionally :meth:`Robot.finished` and :meth:`Robot.get_color`).  As
per the model, ``activate`` must be convertible to a finite state
automaton: constant time and constant space per activation.  The
simulator does not verify this.

Reference: https://doi.org/10.1007/s11047-019-09774-2
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

from hybridsim.models.entity import Entity
from hybridsim.models.node import Node
from hybridsim.models.tile import Tile
from hybridsim.util.constants import ROBOT_MAX_PEBBLES
from hybridsim.util.randomness import rng

if TYPE_CHECKING:
    from hybridsim.engine.configuration import Configuration

LABELS: tuple[int, ...] = (0, 1, 2, 3, 4, 5)


def _random_orientation() -> int:
    return rng.randrange(6)


@dataclass(eq=False)
class Robot(Entity):
    """A robot at a lattice node.

    The default implementation is inert: :meth:`activate` does nothing and
    :meth:`finished` is always False.

    Attributes:
        orientation: Offset (0..5) added to every label before lookup.
        carries_tile: Whether the robot currently holds a tile.
        num_pebbles: Pebbles carried by the robot.
        max_pebbles: Pebble capacity of the robot.
    """

    orientation: int = field(default_factory=_random_orientation)
    carries_tile: bool = False
    num_pebbles: int = 0
    max_pebbles: int = ROBOT_MAX_PEBBLES

    # -- Behavior --------------------------------------------------------

    def activate(self) -> None:
        """Code executed once per activation; overridden by algorithms."""
        return

    def trigger_activate(self, with_undo: bool = True) -> None:
        """Activate the robot, recording an undo step first if ``with_undo``."""
        if with_undo:
            self._store.add_undo_step()
        self.activate()

    def finished(self) -> bool:
        """Whether the robot is done; the scheduler stops once all are."""
        return False

    # -- Movement --------------------------------------------------------

    def move_to_label(self, label: int) -> bool:
        """Move to the node at ``label`` unless a robot occupies it."""
        target = self.node_at_label(label)
        if target in self._store.robots:
            return False
        self._store.move_robot(self.node, target)
        self.node = target
        return True

    def move_keeps_connectivity(self, label: int) -> bool:
        """Whether a move to ``label`` keeps the robot attached to the structure.

        A move from or onto a tile is always safe.  Otherwise one of the two
        nodes adjacent to both endpoints must hold a tile or a robot
        carrying one.
        """
        if self.is_on_tile() or self.has_tile_at_label(label):
            return True
        for nbr_label in ((label - 1) % 6, (label + 1) % 6):
            if self.has_tile_at_label(nbr_label):
                return True
            nbr = self.robot_at_label(nbr_label)
            if nbr is not None and nbr.carries_tile:
                return True
        return False

    def switch_with_robot_nbr(self, label: int) -> bool:
        """Swap places with the robot at ``label``. Returns True if successful."""
        nbr = self.robot_at_label(label)
        if nbr is None:
            return False
        target = self.node_at_label(label)
        self._store.switch_robots(self.node, target)
        nbr.node = self.node
        self.node = target
        return True

    # -- Tiles -----------------------------------------------------------

    def is_at_boundary(self) -> bool:
        """True if some neighbor node holds no tile."""
        return any(not self.has_tile_at_label(label) for label in LABELS)

    def is_on_tile(self) -> bool:
        return self.node in self._store.tiles

    def tile_below(self) -> Optional[Tile]:
        return self._store.tiles.get(self.node)

    def lift_tile(self) -> bool:
        """Lift the tile below unless it carries a pebble or a tile is already held."""
        tile = self.tile_below()
        if tile is None or self.carries_tile or tile.has_pebble():
            return False
        self._store.remove_tile(self.node)
        self.carries_tile = True
        return True

    def place_tile(self) -> bool:
        """Place the carried tile on the current (tile-free) node."""
        if self.is_on_tile() or not self.carries_tile:
            return False
        self._store.add_tile(Tile(self.node))
        self.carries_tile = False
        return True

    # -- Pebbles ---------------------------------------------------------

    def tile_has_pebble(self) -> bool:
        tile = self.tile_below()
        return tile is not None and tile.has_pebble()

    def put_pebble(self) -> bool:
        """Put one of the robot's pebbles on the tile below."""
        tile = self.tile_below()
        if tile is None or tile.has_pebble() or self.num_pebbles <= 0:
            return False
        tile.add_pebble()
        self.num_pebbles -= 1
        return True

    def take_pebble(self) -> bool:
        """Take the pebble from the tile below if the robot has room for it."""
        tile = self.tile_below()
        if tile is None or not tile.has_pebble() or self.num_pebbles >= self.max_pebbles:
            return False
        tile.remove_pebble()
        self.num_pebbles += 1
        return True

    # -- Tile neighbors --------------------------------------------------

    def has_tile_at_label(self, label: int) -> bool:
        return self.node_at_label(label) in self._store.tiles

    def tile_at_label(self, label: int) -> Optional[Tile]:
        return self._store.tiles.get(self.node_at_label(label))

    def tile_nbr_label(self) -> Optional[int]:
        """Label of a tile neighbor, or None."""
        return next((label for label in LABELS if self.has_tile_at_label(label)), None)

    def has_tile_nbr(self) -> bool:
        return self.tile_nbr_label() is not None

    def tile_nbr(self) -> Optional[Tile]:
        label = self.tile_nbr_label()
        return None if label is None else self.tile_at_label(label)

    # -- Robot neighbors -------------------------------------------------

    def has_robot_at_label(self, label: int) -> bool:
        return self.node_at_label(label) in self._store.robots

    def robot_at_label(self, label: int) -> Optional[Robot]:
        return self._store.robots.get(self.node_at_label(label))

    def robot_nbr_label(self) -> Optional[int]:
        """Label of a robot neighbor, or None."""
        return next((label for label in LABELS if self.has_robot_at_label(label)), None)

    def has_robot_nbr(self) -> bool:
        return self.robot_nbr_label() is not None

    def robot_nbr(self) -> Optional[Robot]:
        label = self.robot_nbr_label()
        return None if label is None else self.robot_at_label(label)

    def hanging_robot_nbr_label(self) -> Optional[int]:
        """Label of a robot neighbor that is not on a tile ("hanging"), or None."""
        return next(
            (label for label in LABELS
             if self.has_robot_at_label(label) and not self.has_tile_at_label(label)),
            None,
        )

    def has_hanging_robot_nbr(self) -> bool:
        return self.hanging_robot_nbr_label() is not None

    def hanging_robot_nbr(self) -> Optional[Robot]:
        label = self.hanging_robot_nbr_label()
        return None if label is None else self.robot_at_label(label)

    def all_robot_nbr_labels(self) -> list[int]:
        return [label for label in LABELS if self.has_robot_at_label(label)]

    def all_robot_nbrs(self) -> list[Robot]:
        return [self.robot_at_label(label) for label in self.all_robot_nbr_labels()]

    def all_hanging_robot_nbr_labels(self) -> list[int]:
        return [label for label in self.all_robot_nbr_labels() if not self.has_tile_at_label(label)]

    def all_hanging_robot_nbrs(self) -> list[Robot]:
        return [self.robot_at_label(label) for label in self.all_hanging_robot_nbr_labels()]

    # -- Targets ---------------------------------------------------------

    def is_on_target(self) -> bool:
        return self.node in self._store.target_nodes

    def label_is_target(self, label: int) -> bool:
        return self.node_at_label(label) in self._store.target_nodes

    def target_tile_nbr_label(self) -> Optional[int]:
        """Label of a tile neighbor lying on a target node, or None."""
        return next(
            (label for label in LABELS
             if self.has_tile_at_label(label) and self.label_is_target(label)),
            None,
        )

    def has_target_tile_nbr(self) -> bool:
        return self.target_tile_nbr_label() is not None

    def target_tile_nbr(self) -> Optional[Tile]:
        label = self.target_tile_nbr_label()
        return None if label is None else self.tile_at_label(label)

    def empty_target_nbr_label(self) -> Optional[int]:
        """Label of a tile-free target neighbor (a demand node), or None."""
        return next(
            (label for label in LABELS
             if not self.has_tile_at_label(label) and self.label_is_target(label)),
            None,
        )

    def has_empty_target_nbr(self) -> bool:
        return self.empty_target_nbr_label() is not None

    def empty_non_target_nbr_label(self) -> Optional[int]:
        """Label of a tile-free neighbor outside the target shape, or None."""
        return next(
            (label for label in LABELS
             if not self.has_tile_at_label(label) and not self.label_is_target(label)),
            None,
        )

    def has_empty_non_target_nbr(self) -> bool:
        return self.empty_non_target_nbr_label() is not None

    def overhang_nbr_label(self) -> Optional[int]:
        """Label of a tile neighbor outside the target shape (an overhang), or None."""
        return next(
            (label for label in LABELS
             if self.has_tile_at_label(label) and not self.label_is_target(label)),
            None,
        )

    def has_overhang_nbr(self) -> bool:
        return self.overhang_nbr_label() is not None

    def overhang_nbr(self) -> Optional[Tile]:
        label = self.overhang_nbr_label()
        return None if label is None else self.tile_at_label(label)

    # -- Boundaries ------------------------------------------------------

    def num_boundaries(self, tile_boundaries: bool = False) -> int:
        """Count maximal runs of adjacent empty nodes around the robot.

        With ``tile_boundaries`` the runs of adjacent tile nodes are counted
        instead.  A robot that sees only boundary nodes has one boundary.
        """
        boundary = [self.has_tile_at_label(label) == tile_boundaries for label in LABELS]
        if all(boundary):
            return 1
        return sum(1 for label in LABELS if boundary[label] and not boundary[(label + 1) % 6])

    # -- Helpers ---------------------------------------------------------

    def node_at_label(self, label: int) -> Node:
        """The neighbor node at the robot-relative ``label``."""
        return self.node.node_in_dir((self.orientation + label) % 6)

    @property
    def _store(self) -> Configuration:
        if self.configuration is None:
            raise RuntimeError(f"Robot at {self.node} is not part of a configuration")
        return self.configuration
