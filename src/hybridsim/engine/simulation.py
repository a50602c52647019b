"""Simulation session — owns one configuration and its collaborators.

Wiring order matters: the configuration comes first, then the scheduler
and the loaders, which attach themselves to it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from hybridsim.engine.configuration import Configuration
from hybridsim.engine.full_sequential_scheduler import FullSequentialScheduler
from hybridsim.engine.scheduler import Scheduler
from hybridsim.loaders.algorithm_loader import AlgorithmLoader
from hybridsim.loaders.generator_loader import GeneratorLoader
from hybridsim.loaders.settings_loader import SimConfig
from hybridsim.util import randomness
from hybridsim.util.events import EventBus

log = logging.getLogger(__name__)


@dataclass
class Simulation:
    """Holds references to all parts of one simulation."""

    settings: SimConfig = field(default_factory=SimConfig)
    event_bus: Optional[EventBus] = None
    configuration: Optional[Configuration] = None
    scheduler: Optional[Scheduler] = None
    full_scheduler: Optional[FullSequentialScheduler] = None
    algorithm_loader: Optional[AlgorithmLoader] = None
    generator_loader: Optional[GeneratorLoader] = None


def create_simulation(settings: Optional[SimConfig] = None) -> Simulation:
    """Instantiate and wire a simulation session.

    Reseeds the shared randomness if ``settings.seed`` is set.
    """
    settings = settings or SimConfig()
    if settings.seed is not None:
        randomness.seed(settings.seed)
        log.info("Randomness seeded with %d", settings.seed)

    event_bus = EventBus()
    configuration = Configuration(
        max_undo_states=settings.max_undo_states,
        robot_max_pebbles=settings.robot_max_pebbles,
    )
    configuration.event_bus = event_bus

    scheduler = Scheduler(
        configuration,
        event_bus=event_bus,
        record_undo=settings.record_undo_per_cycle,
        stopped_poll_ms=settings.stopped_poll_ms,
    )
    scheduler.set_interval_time(settings.interval_time)

    return Simulation(
        settings=settings,
        event_bus=event_bus,
        configuration=configuration,
        scheduler=scheduler,
        full_scheduler=FullSequentialScheduler(configuration),
        algorithm_loader=AlgorithmLoader(configuration, event_bus),
        generator_loader=GeneratorLoader(configuration, event_bus),
    )
