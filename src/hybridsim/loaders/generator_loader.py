"""Generator loader — installs a custom configuration generator.

A generator script must define ``get_generator() -> Generator`` (alias
``getGenerator``).  The generator's ``generate(num_tiles, num_robots,
num_overhang)`` must return a ``ConfigurationDescriptor``.  Load failures
are fatal and leave the active generator in place.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Optional

from hybridsim.engine.generator import Generator
from hybridsim.loaders.plugin import compile_plugin, find_entry_point
from hybridsim.util.events import GeneratorLoaded

if TYPE_CHECKING:
    from hybridsim.engine.configuration import Configuration
    from hybridsim.util.events import EventBus

log = logging.getLogger(__name__)

ENTRY_POINTS = ("get_generator", "getGenerator")


class GeneratorLoader:
    """Swaps the generator used by ``Configuration.generate``.

    Args:
        configuration: Store whose generator is replaced.
        event_bus: Optional bus notified after a successful load.
    """

    def __init__(self, configuration: Configuration, event_bus: Optional[EventBus] = None) -> None:
        self._configuration = configuration
        self._events = event_bus

    def load_generator(
        self,
        script_file: Optional[str | Path] = None,
        script_string: Optional[str] = None,
    ) -> None:
        """Compile a generator script and install the generator it provides."""
        module = compile_plugin("hybridsim_generator", script_file, script_string)
        generator = find_entry_point(module, ENTRY_POINTS)()
        if not callable(getattr(generator, "generate", None)):
            raise RuntimeError(
                f"get_generator() returned {type(generator).__name__} without generate()"
            )
        self._configuration.generator = generator

        name = str(script_file) if script_file is not None else "<string>"
        log.info("Loaded generator %s (%s)", name, type(generator).__name__)
        if self._events is not None:
            self._events.emit(GeneratorLoaded(name=name))

    def reset(self) -> None:
        """Restore the default generator."""
        self._configuration.generator = Generator()
