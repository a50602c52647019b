"""Simulator settings — loads tunable values from config/simulation.yaml.

Provides a single ``SimConfig`` dataclass that is loaded once at startup
and passed to :func:`hybridsim.engine.simulation.create_simulation`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Optional

import yaml

from hybridsim.util.constants import (
    DEFAULT_INTERVAL_TIME,
    MAX_UNDO_STATES,
    ROBOT_MAX_PEBBLES,
    STOPPED_POLL_MS,
)

log = logging.getLogger(__name__)

DEFAULT_SETTINGS_PATH = "config/simulation.yaml"


@dataclass
class SimConfig:
    """All tunable simulator values.

    Every field has a default so the simulator runs without the file.
    """

    # -- Scheduler ---------------------------------------------------
    interval_time: int = DEFAULT_INTERVAL_TIME
    record_undo_per_cycle: bool = True
    stopped_poll_ms: int = STOPPED_POLL_MS

    # -- Configuration -----------------------------------------------
    max_undo_states: int = MAX_UNDO_STATES
    robot_max_pebbles: int = ROBOT_MAX_PEBBLES

    # -- Reproducibility ---------------------------------------------
    seed: Optional[int] = None

    # -- Logging -----------------------------------------------------
    log_level: str = "INFO"


def load_sim_config(path: str | Path = DEFAULT_SETTINGS_PATH) -> SimConfig:
    """Load simulator settings from a YAML file.

    Missing keys fall back to dataclass defaults, unknown keys are
    ignored.  If the file does not exist, a warning is logged and pure
    defaults are returned.
    """
    p = Path(path)
    if not p.exists():
        log.warning("Simulation settings not found at %s, using defaults", p)
        return SimConfig()

    with p.open() as f:
        raw = yaml.safe_load(f) or {}

    known = {f.name for f in fields(SimConfig)}
    unknown = sorted(set(raw) - known)
    if unknown:
        log.warning("Ignoring unknown settings in %s: %s", p, ", ".join(unknown))
    log.info("Loaded simulation settings from %s (%d keys)", p, len(raw))
    return SimConfig(**{k: v for k, v in raw.items() if k in known})
