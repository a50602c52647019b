"""Configuration load — parses serialized configurations.

Parsing is separate from applying: a snapshot is fully validated before
the live configuration is touched.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Union

from hybridsim.persistence.schema import ConfigurationSnapshot

log = logging.getLogger(__name__)

RawConfiguration = Union[str, bytes, dict[str, Any], ConfigurationSnapshot]


def parse_configuration(raw: RawConfiguration) -> ConfigurationSnapshot:
    """Validate a JSON string/bytes or an already decoded dict.

    Raises:
        pydantic.ValidationError: If the data does not match the wire format.
    """
    if isinstance(raw, ConfigurationSnapshot):
        return raw
    if isinstance(raw, (str, bytes)):
        return ConfigurationSnapshot.model_validate_json(raw)
    return ConfigurationSnapshot.model_validate(raw)


def read_configuration(path: str | Path) -> ConfigurationSnapshot:
    """Read and validate a configuration file."""
    config_file = Path(path)
    snapshot = parse_configuration(config_file.read_text(encoding="utf-8").strip())
    log.info("Read configuration %s (%d tiles, %d robots, %d targets)",
             config_file, len(snapshot.tiles), len(snapshot.robots), len(snapshot.target_nodes))
    return snapshot
