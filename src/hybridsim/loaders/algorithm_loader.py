"""Algorithm loader — installs externally supplied robot behavior.

A behavior script must define::

    def get_robot(node: Node, orientation: int) -> Robot

(``getRobot`` is accepted as well).  The returned robot is typically an
instance of a ``Robot`` subclass overriding ``activate()``, ``finished()``
and ``get_color()``.

Load failures (missing entry point, syntax error, anything raised while
installing) are fatal and propagate; the previously installed factory
and all robots stay untouched in that case.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Optional

from hybridsim.loaders.plugin import compile_plugin, find_entry_point
from hybridsim.models.node import Node
from hybridsim.models.robot import Robot
from hybridsim.util.events import AlgorithmLoaded

if TYPE_CHECKING:
    from hybridsim.engine.configuration import Configuration
    from hybridsim.util.events import EventBus

log = logging.getLogger(__name__)

ENTRY_POINTS = ("get_robot", "getRobot")

RobotFactory = Callable[[Node, int], Robot]


class AlgorithmLoader:
    """Holds the active behavior factory of a configuration.

    Registers itself as the configuration's ``robot_factory`` so that
    generated and loaded robots run the active algorithm.

    Args:
        configuration: Store whose robots are rebound.
        event_bus: Optional bus notified after a successful load.
    """

    def __init__(self, configuration: Configuration, event_bus: Optional[EventBus] = None) -> None:
        self._configuration = configuration
        self._events = event_bus
        self._factory: Optional[RobotFactory] = None
        configuration.robot_factory = self.get_algorithm_robot

    @property
    def is_loaded(self) -> bool:
        return self._factory is not None

    def load_algorithm(
        self,
        script_file: Optional[str | Path] = None,
        script_string: Optional[str] = None,
    ) -> None:
        """Compile a behavior script and rebind every robot to it.

        Robots keep node and orientation; all behavior-internal state is
        discarded.  The undo/redo history is cleared since old snapshots
        hold robots of the previous algorithm.
        """
        # Never rebind robots while an activation could be in flight
        if self._configuration.scheduler is not None:
            self._configuration.scheduler.stop()

        module = compile_plugin("hybridsim_algorithm", script_file, script_string)
        factory = find_entry_point(module, ENTRY_POINTS)

        replacements = {
            node: _build_robot(factory, robot)
            for node, robot in self._configuration.robots.items()
        }
        self._factory = factory
        for robot in replacements.values():
            self._configuration.add_robot(robot)
        self._configuration.clear_undo_queues()

        name = str(script_file) if script_file is not None else "<string>"
        log.info("Loaded algorithm %s (%d robots replaced)", name, len(replacements))
        if self._events is not None:
            self._events.emit(AlgorithmLoaded(name=name))

    def replace_robot(self, node: Node) -> None:
        """Rebind the robot at ``node`` to the loaded algorithm.

        Does nothing if there is no robot at ``node`` or no algorithm loaded.
        """
        robot = self._configuration.robots.get(node)
        if robot is None or self._factory is None:
            return
        self._configuration.add_robot(self.get_algorithm_robot(robot))

    def get_algorithm_robot(self, robot: Robot) -> Robot:
        """A fresh robot running the loaded algorithm with ``robot``'s node and orientation.

        Returns ``robot`` itself if no algorithm is loaded.
        """
        if self._factory is None:
            return robot
        return _build_robot(self._factory, robot)

    def reset(self) -> None:
        """Drop the loaded algorithm and turn every robot into a default robot."""
        self._factory = None
        for robot in list(self._configuration.robots.values()):
            # Only node and orientation survive, everything else is algorithm-specific
            self._configuration.add_robot(self._configuration.default_robot(robot.node, robot.orientation))
        self._configuration.clear_undo_queues()
        log.debug("Algorithm reset to default robots")


def _build_robot(factory: RobotFactory, robot: Robot) -> Robot:
    new_robot = factory(robot.node, robot.orientation)
    if not isinstance(new_robot, Robot):
        raise RuntimeError(
            f"get_robot() returned {type(new_robot).__name__}, expected a Robot"
        )
    return new_robot
