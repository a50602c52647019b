"""Typed event bus — decoupled notification of simulation collaborators.

Renderers and other front ends subscribe here instead of polling the
scheduler or the configuration store.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Callable, TypeVar, Type

from hybridsim.models.node import Node

T = TypeVar("T")


# -- Scheduler events ----------------------------------------------------

@dataclass(frozen=True)
class SchedulerStarted:
    """The live scheduler switched from stopped to running."""


@dataclass(frozen=True)
class SchedulerStopped:
    """The live scheduler switched from running to stopped."""


@dataclass(frozen=True)
class RobotCrashed:
    """A robot's behavior raised during activation; the scheduler halted."""
    node: Node
    error: str


@dataclass(frozen=True)
class AllRobotsFinished:
    """Every robot reported ``finished()`` after a cycle."""
    cycle: int


# -- Configuration events ------------------------------------------------

@dataclass(frozen=True)
class ConfigurationLoaded:
    """A snapshot replaced the configuration wholesale."""
    num_tiles: int
    num_robots: int
    num_targets: int


@dataclass(frozen=True)
class AlgorithmLoaded:
    """A robot behavior module was installed (``name`` is its origin)."""
    name: str


@dataclass(frozen=True)
class GeneratorLoaded:
    """A configuration generator module was installed."""
    name: str


# -- Event Bus -----------------------------------------------------------

Handler = Callable[[Any], None]


class EventBus:
    """Synchronous dispatch of simulation events, keyed by event class.

    Handlers run in subscription order on the emitting call stack, so a
    ``RobotCrashed`` handler sees the configuration exactly as the
    crashing activation left it.  A handler may unsubscribe itself (or
    others) while an event is being delivered.

    Usage:
        bus = EventBus()
        bus.on(RobotCrashed, lambda e: print(e.node))
        scheduler = Scheduler(configuration, bus)
    """

    def __init__(self) -> None:
        self._handlers: dict[type, list[Handler]] = defaultdict(list)

    def on(self, event_type: Type[T], handler: Callable[[T], None]) -> Callable[[T], None]:
        """Subscribe ``handler`` to ``event_type``; returns the handler."""
        self._handlers[event_type].append(handler)
        return handler

    def off(self, event_type: Type[T], handler: Callable[[T], None]) -> bool:
        """Unsubscribe ``handler``. Returns False if it was not subscribed."""
        handlers = self._handlers.get(event_type)
        if not handlers or handler not in handlers:
            return False
        handlers.remove(handler)
        return True

    def emit(self, event: object) -> None:
        """Deliver ``event`` to the handlers subscribed to its exact class."""
        for handler in tuple(self._handlers.get(type(event), ())):
            handler(event)

    def clear(self) -> None:
        """Drop every subscription."""
        self._handlers.clear()
