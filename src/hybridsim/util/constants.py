"""Simulator constants — history limits, pebble caps, scheduler timing, colours.

Defaults for everything that ``config/simulation.yaml`` may override.
"""

# -- History -------------------------------------------------------------

MAX_UNDO_STATES: int = 1000
"""Maximum number of snapshots kept on each of the undo and redo stacks."""

# -- Pebbles -------------------------------------------------------------

MAX_PEBBLES_TILE: int = 1
"""A tile carries at most one pebble."""

ROBOT_MAX_PEBBLES: int = 2
"""Default per-robot pebble capacity."""

# -- Scheduler -----------------------------------------------------------

DEFAULT_CYCLE_DELAY_MS: int = 120
"""Pause after each activation cycle of the live scheduler."""

DEFAULT_ACTIVATIONS_PER_CYCLE: int = 1
"""Robot activations per live scheduler cycle."""

DEFAULT_INTERVAL_TIME: int = DEFAULT_CYCLE_DELAY_MS * 100 // DEFAULT_ACTIVATIONS_PER_CYCLE
"""Expected interval between two activations, in units of 0.01 ms."""

STOPPED_POLL_MS: int = 10
"""How often a stopped scheduler checks whether it was restarted."""

# -- Colours -------------------------------------------------------------

COLOR_DEFAULT: str = "white"
COLOR_TARGET: str = "cyan"
COLOR_NON_TARGET: str = "coral"
