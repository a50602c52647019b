"""Plugin compilation — turns a behavior script into a module object.

Scripts are plain Python.  Their namespace is pre-seeded with the names a
behavior or generator needs, so a script can use ``Robot``, ``Node``,
``rng`` etc. without importing them.
"""

from __future__ import annotations

import importlib.util
import logging
import sys
from pathlib import Path
from types import ModuleType
from typing import Any, Callable, Optional, Sequence

from hybridsim.engine.generator import Generator
from hybridsim.models.descriptor import ConfigurationDescriptor
from hybridsim.models.node import ORIGIN, Node
from hybridsim.models.robot import LABELS, Robot
from hybridsim.models.tile import Tile
from hybridsim.util.randomness import rng

log = logging.getLogger(__name__)

DEFAULT_NAMESPACE: dict[str, Any] = {
    "Node": Node,
    "ORIGIN": ORIGIN,
    "Robot": Robot,
    "Tile": Tile,
    "LABELS": LABELS,
    "Generator": Generator,
    "ConfigurationDescriptor": ConfigurationDescriptor,
    "rng": rng,
}


def compile_plugin(
    module_name: str,
    script_file: Optional[str | Path] = None,
    script_string: Optional[str] = None,
) -> ModuleType:
    """Compile and execute a script from ``script_file`` or ``script_string``.

    Raises:
        ValueError: If neither a file nor a string is given.
        SyntaxError: If the script does not compile.
        Exception: Anything raised while executing the module body.
    """
    if script_file is not None:
        origin = str(script_file)
        source = Path(script_file).read_text(encoding="utf-8").strip()
    elif script_string is not None:
        origin = f"<{module_name}>"
        source = script_string
    else:
        raise ValueError(f"No script file or script string provided for {module_name}")

    spec = importlib.util.spec_from_loader(module_name, loader=None, origin=origin)
    module = importlib.util.module_from_spec(spec)
    module.__dict__.update(DEFAULT_NAMESPACE)
    code = compile(source, origin, "exec")

    # dataclasses and typing resolve a class's module through sys.modules
    previous = sys.modules.get(module_name)
    sys.modules[module_name] = module
    try:
        exec(code, module.__dict__)
    except BaseException:
        if previous is None:
            sys.modules.pop(module_name, None)
        else:
            sys.modules[module_name] = previous
        raise
    log.debug("Compiled plugin %s from %s", module_name, origin)
    return module


def find_entry_point(module: ModuleType, names: Sequence[str]) -> Callable[..., Any]:
    """Return the first callable among ``names`` defined by ``module``.

    Raises:
        RuntimeError: If the module defines none of them.
    """
    for name in names:
        entry = getattr(module, name, None)
        if callable(entry):
            return entry
    origin = module.__spec__.origin if module.__spec__ is not None else module.__name__
    raise RuntimeError(f"Script {origin} does not define {names[0]}()")
