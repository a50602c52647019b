"""Configuration store — the single shared map of tiles, robots, and targets.

All mutation funnels through a small set of named operations so every
change can be captured on the bounded undo stack.  The store performs
unconditional map writes; callers (robots) validate occupancy first.

Concurrency discipline: one writer at a time.  Wholesale replacements
(``generate``, ``load_configuration``) stop the live scheduler first.
"""

from __future__ import annotations

import logging
from collections import deque
from contextlib import contextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Iterator, Optional

from hybridsim.engine.generator import Generator
from hybridsim.models.node import Node
from hybridsim.models.robot import Robot
from hybridsim.models.tile import Tile
from hybridsim.persistence.config_load import RawConfiguration, parse_configuration
from hybridsim.persistence.config_save import encode_configuration, serialize_configuration
from hybridsim.util.constants import MAX_UNDO_STATES, ROBOT_MAX_PEBBLES
from hybridsim.util.events import ConfigurationLoaded

if TYPE_CHECKING:
    from hybridsim.engine.scheduler import Scheduler
    from hybridsim.util.events import EventBus

log = logging.getLogger(__name__)


@dataclass
class _TimeState:
    """Deep-copied contents of the store at one point in time."""

    tiles: dict[Node, Tile]
    robots: dict[Node, Robot]
    target_nodes: set[Node]


class Configuration:
    """Tiles, robots, and target nodes of one simulation.

    Args:
        max_undo_states: Capacity of each of the undo and redo stacks; the
            oldest entry is discarded on overflow.
        robot_max_pebbles: Pebble capacity of default robots.

    Attributes:
        generator: Strategy used by :meth:`generate`.
        scheduler: Live scheduler to pause during wholesale replacements.
        robot_factory: Turns a plain robot into one running the loaded
            algorithm (set by the algorithm loader).
        event_bus: Optional bus notified when a snapshot is loaded.
    """

    def __init__(
        self,
        max_undo_states: int = MAX_UNDO_STATES,
        robot_max_pebbles: int = ROBOT_MAX_PEBBLES,
    ) -> None:
        self.tiles: dict[Node, Tile] = {}
        self.robots: dict[Node, Robot] = {}
        self.target_nodes: set[Node] = set()

        self.generator: Generator = Generator()
        self.scheduler: Optional[Scheduler] = None
        self.robot_factory: Optional[Callable[[Robot], Robot]] = None
        self.event_bus: Optional[EventBus] = None

        self.robot_max_pebbles = robot_max_pebbles
        self._undo_queue: deque[_TimeState] = deque(maxlen=max_undo_states)
        self._redo_queue: deque[_TimeState] = deque(maxlen=max_undo_states)

    # -- Generation ------------------------------------------------------

    def generate(self, num_tiles: int, num_robots: int, num_overhang: int = -1) -> None:
        """Replace the configuration with one produced by :attr:`generator`.

        No target nodes are generated if ``num_overhang`` < 0.
        """
        self._stop_scheduler()
        self.add_undo_step()
        self.clear(clear_queues=False)

        descriptor = self.generator.generate(num_tiles, num_robots, num_overhang)
        for node in descriptor.tile_nodes:
            self.add_tile(Tile(node))
        for node in descriptor.robot_nodes:
            self.add_robot(self._algorithm_robot(self.default_robot(node)))
        self.target_nodes = set(descriptor.target_nodes)
        log.debug("Generated configuration (%d tiles, %d robots, %d targets)",
                  len(self.tiles), len(self.robots), len(self.target_nodes))

    # -- Mutations -------------------------------------------------------

    def add_tile(self, tile: Tile, add_undo_step: bool = False) -> None:
        """Add ``tile`` at its node, replacing any tile already there."""
        if add_undo_step:
            self.add_undo_step()
        tile.configuration = self
        self.tiles[tile.node] = tile

    def remove_tile(self, node: Node, add_undo_step: bool = False) -> None:
        """Remove the tile at ``node`` if it exists."""
        if add_undo_step:
            self.add_undo_step()
        self.tiles.pop(node, None)

    def add_robot(self, robot: Robot, add_undo_step: bool = False) -> None:
        """Add ``robot`` at its node, replacing any robot already there."""
        if add_undo_step:
            self.add_undo_step()
        robot.configuration = self
        self.robots[robot.node] = robot

    def remove_robot(self, node: Node, add_undo_step: bool = False) -> None:
        """Remove the robot at ``node`` if it exists."""
        if add_undo_step:
            self.add_undo_step()
        self.robots.pop(node, None)

    def move_robot(self, start_node: Node, next_node: Node, add_undo_step: bool = False) -> None:
        """Re-key the robot at ``start_node`` to ``next_node`` if it exists.

        Does not update ``robot.node``; the moving robot does that itself.
        """
        if add_undo_step:
            self.add_undo_step()
        robot = self.robots.pop(start_node, None)
        if robot is None:
            return
        self.robots[next_node] = robot

    def switch_robots(self, node_a: Node, node_b: Node, add_undo_step: bool = False) -> None:
        """Swap the map entries of the robots at ``node_a`` and ``node_b``."""
        if add_undo_step:
            self.add_undo_step()
        robot_a = self.robots.pop(node_a, None)
        robot_b = self.robots.pop(node_b, None)
        if robot_a is not None:
            self.robots[node_b] = robot_a
        if robot_b is not None:
            self.robots[node_a] = robot_b

    def add_target(self, node: Node, add_undo_step: bool = False) -> None:
        """Add ``node`` to the target shape."""
        if add_undo_step:
            self.add_undo_step()
        self.target_nodes.add(node)

    def remove_target(self, node: Node, add_undo_step: bool = False) -> None:
        """Remove ``node`` from the target shape."""
        if add_undo_step:
            self.add_undo_step()
        self.target_nodes.discard(node)

    # -- Undo / redo -----------------------------------------------------

    def undo(self) -> bool:
        """Revert the last recorded operation. Returns True if successful."""
        return self._restore(self._undo_queue, self._redo_queue)

    def redo(self) -> bool:
        """Revert the last undo. Returns True if successful."""
        return self._restore(self._redo_queue, self._undo_queue)

    def undo_steps(self) -> int:
        """Number of steps that can be undone."""
        return len(self._undo_queue)

    def redo_steps(self) -> int:
        """Number of steps that can be redone."""
        return len(self._redo_queue)

    def add_undo_step(self) -> None:
        """Record the current state on the undo stack and drop the redo stack."""
        self._undo_queue.append(self._capture())
        self._redo_queue.clear()

    def clear_undo_queues(self) -> None:
        """Drop all history, e.g. after robots were replaced by a new algorithm."""
        self._undo_queue.clear()
        self._redo_queue.clear()

    def _restore(self, source: deque[_TimeState], sink: deque[_TimeState]) -> bool:
        """Pop a state from ``source`` after pushing the current one on ``sink``.

        For undo: source = undo stack, sink = redo stack (and vice versa).
        """
        if not source:
            return False
        sink.append(self._capture())
        state = source.pop()
        self.tiles = state.tiles
        self.robots = state.robots
        self.target_nodes = state.target_nodes
        return True

    def _capture(self) -> _TimeState:
        return _TimeState(
            tiles={node: tile.clone() for node, tile in self.tiles.items()},
            robots={node: robot.clone() for node, robot in self.robots.items()},
            target_nodes=set(self.target_nodes),
        )

    # -- Serialization ---------------------------------------------------

    def load_configuration(self, raw: RawConfiguration) -> None:
        """Replace tiles, robots, and targets with a serialized configuration.

        The snapshot is validated before anything changes.  Loaded robots
        keep only node and orientation and are rebound to the loaded
        algorithm.  Both history stacks are cleared.

        Raises:
            pydantic.ValidationError: If ``raw`` is not a valid configuration.
        """
        snapshot = parse_configuration(raw)
        with self._scheduler_paused():
            tiles: dict[Node, Tile] = {}
            for entry in snapshot.tiles.values():
                tile = Tile(entry.node.to_node(), entry.num_pebbles)
                tile.configuration = self
                tiles[tile.node] = tile
            robots: dict[Node, Robot] = {}
            for entry in snapshot.robots.values():
                robot = self._algorithm_robot(self.default_robot(entry.node.to_node(), entry.orientation))
                robot.configuration = self
                robots[robot.node] = robot
            self.tiles = tiles
            self.robots = robots
            self.target_nodes = {node.to_node() for node in snapshot.target_nodes}
            self.clear_undo_queues()

        log.info("Loaded configuration (%d tiles, %d robots, %d targets)",
                 len(self.tiles), len(self.robots), len(self.target_nodes))
        if self.event_bus is not None:
            self.event_bus.emit(ConfigurationLoaded(
                num_tiles=len(self.tiles),
                num_robots=len(self.robots),
                num_targets=len(self.target_nodes),
            ))

    def to_serialized_form(self) -> dict[str, Any]:
        """Serialized form: ``{"tiles": {...}, "robots": {...}, "targetNodes": [...]}``."""
        return serialize_configuration(self)

    def to_json(self, pretty_print: bool = False) -> str:
        return encode_configuration(self, pretty_print)

    # -- Housekeeping ----------------------------------------------------

    def clear(self, clear_queues: bool = True) -> None:
        """Empty tiles, robots, and targets (and the history if ``clear_queues``)."""
        self.tiles.clear()
        self.robots.clear()
        self.target_nodes.clear()
        if clear_queues:
            self.clear_undo_queues()

    def default_robot(self, node: Node, orientation: Optional[int] = None) -> Robot:
        """A default (inert) robot with this configuration's pebble capacity."""
        if orientation is None:
            return Robot(node, max_pebbles=self.robot_max_pebbles)
        return Robot(node, orientation, max_pebbles=self.robot_max_pebbles)

    def _algorithm_robot(self, robot: Robot) -> Robot:
        if self.robot_factory is None:
            return robot
        return self.robot_factory(robot)

    def _stop_scheduler(self) -> None:
        if self.scheduler is not None:
            self.scheduler.stop()

    @contextmanager
    def _scheduler_paused(self) -> Iterator[None]:
        """Stop the live scheduler for the block; restart it if it was running."""
        was_running = self.scheduler is not None and self.scheduler.is_running
        self._stop_scheduler()
        try:
            yield
        finally:
            if was_running and self.scheduler is not None:
                self.scheduler.start()
