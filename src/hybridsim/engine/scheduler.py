"""Live scheduler — asyncio loop of fair, strictly sequential activations.

Each cycle:
1. Record one undo step (optional) so a cycle can be undone as a whole
2. Activate ``activations_per_cycle`` robots, each drawn uniformly at
   random from the robots present at the start of the cycle
3. Stop if every robot reports ``finished()``
4. Sleep ``cycle_delay`` milliseconds

Uniform random selection gives every robot a nonzero chance in every
cycle, so over an unbounded run every robot is activated infinitely often
with probability 1 (a fair sequential scheduler).

Stopping is cooperative: it takes effect at the next check of the running
flag and never interrupts an activation.  A stopped scheduler keeps the
loop alive and polls until it is started again; :meth:`Scheduler.close`
ends :meth:`Scheduler.run`.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import TYPE_CHECKING, Optional

from hybridsim.util.constants import (
    DEFAULT_ACTIVATIONS_PER_CYCLE,
    DEFAULT_CYCLE_DELAY_MS,
    STOPPED_POLL_MS,
)
from hybridsim.util.events import (
    AllRobotsFinished,
    RobotCrashed,
    SchedulerStarted,
    SchedulerStopped,
)
from hybridsim.util.randomness import rng

if TYPE_CHECKING:
    from hybridsim.engine.configuration import Configuration
    from hybridsim.util.events import EventBus

log = logging.getLogger(__name__)


class Scheduler:
    """Drives robot activations against a configuration.

    Registers itself with the configuration so that wholesale replacements
    of the configuration can pause it.

    Args:
        configuration: Store whose robots are activated.
        event_bus: Optional bus for start/stop/crash notifications.
        record_undo: Record one undo step per cycle.
        stopped_poll_ms: Poll interval while stopped.
    """

    def __init__(
        self,
        configuration: Configuration,
        event_bus: Optional[EventBus] = None,
        record_undo: bool = True,
        stopped_poll_ms: float = STOPPED_POLL_MS,
    ) -> None:
        self._configuration = configuration
        self._events = event_bus
        self._record_undo = record_undo
        self._stopped_poll = stopped_poll_ms / 1000.0
        self._active = False
        self._closed = False
        configuration.scheduler = self

        self.cycle_delay: int = DEFAULT_CYCLE_DELAY_MS
        self.activations_per_cycle: int = DEFAULT_ACTIVATIONS_PER_CYCLE

        # --- Monitoring counters ---
        self.cycle_count: int = 0
        self.activation_count: int = 0
        self.started_at: float = 0.0

    # -- Control surface -------------------------------------------------

    @property
    def is_running(self) -> bool:
        return self._active

    def start(self) -> None:
        """Start (or resume) activating robots."""
        if not self._active:
            log.debug("Scheduler started")
            self._active = True
            self._emit(SchedulerStarted())

    def stop(self) -> None:
        """Stop after the current activation; the loop keeps polling."""
        if self._active:
            log.debug("Scheduler stopped")
            self._active = False
            self._emit(SchedulerStopped())

    def toggle(self) -> None:
        """Start the scheduler if it is stopped, stop it if it is running."""
        if self._active:
            self.stop()
        else:
            self.start()

    def close(self) -> None:
        """Stop the scheduler and make :meth:`run` return."""
        self.stop()
        self._closed = True

    def set_interval_time(self, interval_time: int) -> None:
        """Set the expected time between two activations in units of 0.01 ms.

        Short intervals are approximated by batching several activations
        into one cycle instead of sleeping for sub-millisecond periods.
        """
        i_time = max(1, int(interval_time))
        if i_time < 10:
            self.cycle_delay = i_time
            self.activations_per_cycle = 100
        elif i_time < 100:
            self.cycle_delay = i_time // 10
            self.activations_per_cycle = 10
        else:
            self.cycle_delay = i_time // 100
            self.activations_per_cycle = 1

    def get_interval_time(self) -> int:
        """Expected time between two activations in units of 0.01 ms."""
        return self.cycle_delay * 100 // self.activations_per_cycle

    # -- Loop ------------------------------------------------------------

    async def run(self) -> None:
        """Scheduling loop; runs until :meth:`close` is called."""
        self.started_at = time.monotonic()
        while not self._closed:
            if not self._active:
                await asyncio.sleep(self._stopped_poll)
                continue
            self.run_cycle()
            await asyncio.sleep(self.cycle_delay / 1000.0)

    def run_cycle(self) -> None:
        """Execute one activation cycle without sleeping."""
        robots = list(self._configuration.robots.values())
        if not robots:
            log.debug("No robots in configuration")
            self.stop()
            return

        if self._record_undo:
            self._configuration.add_undo_step()
        self.cycle_count += 1

        for _ in range(self.activations_per_cycle):
            robot = robots[rng.randrange(len(robots))]
            try:
                robot.trigger_activate(with_undo=False)
            except Exception as exc:
                log.exception("Robot at %s crashed!", robot.node)
                self.stop()
                self._emit(RobotCrashed(node=robot.node, error=repr(exc)))
                return
            self.activation_count += 1

        all_finished = True
        for robot in robots:
            try:
                all_finished = robot.finished() and all_finished
            except Exception as exc:
                log.exception("Robot at %s crashed during finished() call!", robot.node)
                self.stop()
                self._emit(RobotCrashed(node=robot.node, error=repr(exc)))
                return
        if all_finished:
            log.info("All robots finished after %d cycles", self.cycle_count)
            self.stop()
            self._emit(AllRobotsFinished(cycle=self.cycle_count))

    # -- Internals -------------------------------------------------------

    @property
    def uptime_seconds(self) -> float:
        """Seconds since the loop started."""
        if self.started_at == 0.0:
            return 0.0
        return time.monotonic() - self.started_at

    def _emit(self, event: object) -> None:
        if self._events is not None:
            self._events.emit(event)
