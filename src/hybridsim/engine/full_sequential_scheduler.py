"""Full-round scheduler for headless experiments.

Every round activates each robot exactly once in a fresh random order.
No sleeping, no undo recording, and no error recovery: a crashing robot
aborts the run.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from hybridsim.util.randomness import rng

if TYPE_CHECKING:
    from hybridsim.engine.configuration import Configuration

log = logging.getLogger(__name__)


class FullSequentialScheduler:
    """Runs rounds until termination.

    Termination is checked every ``max(num_tiles, 1)`` rounds (tile count
    taken at the start of the run): the run ends when every robot reported
    ``finished()`` in the last round, or, if target nodes exist, when every
    target node that initially had no tile has been covered at a check.

    Args:
        configuration: Store whose robots are activated.
    """

    def __init__(self, configuration: Configuration) -> None:
        self._configuration = configuration

    def run(self, limit: int) -> Optional[int]:
        """Run until termination or until ``limit`` rounds have passed.

        Returns:
            The number of rounds (a multiple of the check interval) until
            termination, or None if the limit was reached first.
        """
        config = self._configuration
        remaining_target: Optional[set] = None
        if config.target_nodes:
            remaining_target = set(config.target_nodes) - config.tiles.keys()

        block = max(len(config.tiles), 1)
        rounds = 0
        finished = False
        while not finished:
            for _ in range(block):
                finished = True
                robots = list(config.robots.values())
                rng.shuffle(robots)
                for robot in robots:
                    robot.trigger_activate(with_undo=False)
                    finished = robot.finished() and finished

            if remaining_target is not None:
                remaining_target -= config.tiles.keys()
                if not remaining_target:
                    finished = True

            rounds += block
            if not finished and rounds >= limit:
                log.debug("Round limit %d reached", limit)
                return None

        log.debug("Terminated after %d rounds", rounds)
        return rounds
