"""Configuration save — serializes the live configuration to JSON."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from hybridsim.models.node import Node
from hybridsim.persistence.schema import (
    ConfigurationSnapshot,
    NodeModel,
    RobotModel,
    TileModel,
)

if TYPE_CHECKING:
    from hybridsim.engine.configuration import Configuration

log = logging.getLogger(__name__)


def _node_order(node: Node) -> tuple[int, int]:
    return node.x, node.y


def snapshot_configuration(configuration: Configuration) -> ConfigurationSnapshot:
    """Build the wire model of ``configuration`` in node order."""
    tiles = {
        repr(node): TileModel(node=NodeModel.from_node(node), num_pebbles=tile.num_pebbles)
        for node, tile in sorted(configuration.tiles.items(), key=lambda item: _node_order(item[0]))
    }
    robots = {
        repr(node): RobotModel(orientation=robot.orientation, node=NodeModel.from_node(node))
        for node, robot in sorted(configuration.robots.items(), key=lambda item: _node_order(item[0]))
    }
    targets = [NodeModel.from_node(node) for node in sorted(configuration.target_nodes, key=_node_order)]
    return ConfigurationSnapshot(tiles=tiles, robots=robots, target_nodes=targets)


def serialize_configuration(configuration: Configuration) -> dict[str, Any]:
    """Return the JSON-compatible dict form of ``configuration``."""
    return snapshot_configuration(configuration).model_dump(by_alias=True)


def encode_configuration(configuration: Configuration, pretty_print: bool = False) -> str:
    """Encode ``configuration`` as a JSON string."""
    data = serialize_configuration(configuration)
    if pretty_print:
        return json.dumps(data, indent=2)
    return json.dumps(data, separators=(",", ":"))


def save_configuration(configuration: Configuration, path: str | Path, pretty_print: bool = True) -> None:
    """Write ``configuration`` to ``path`` atomically (tmp file + replace)."""
    out = Path(path)
    tmp = out.with_suffix(out.suffix + ".tmp")
    try:
        tmp.write_text(encode_configuration(configuration, pretty_print), encoding="utf-8")
        tmp.replace(out)
        log.info("Configuration saved to %s (%d tiles, %d robots, %d targets)",
                 out, len(configuration.tiles), len(configuration.robots),
                 len(configuration.target_nodes))
    except Exception:
        log.exception("Failed to save configuration to %s", out)
        if tmp.exists():
            tmp.unlink(missing_ok=True)
        raise
