"""Tiles on a straight north-south line; the target is the same line
shifted south by ``num_overhang`` nodes."""

from hybridsim.engine.generator import Generator
from hybridsim.models.descriptor import ConfigurationDescriptor
from hybridsim.models.node import Node


def get_generator():
    return LineGenerator()


class LineGenerator(Generator):
    def generate(self, num_tiles, num_robots, num_overhang=-1):
        descriptor = ConfigurationDescriptor()
        if num_tiles <= 0:
            return descriptor
        line = [Node(0, -i) for i in range(num_tiles)]
        descriptor.tile_nodes.update(line)
        descriptor.robot_nodes.update(line[:max(0, min(num_robots, num_tiles))])
        if num_overhang >= 0:
            shift = min(num_overhang, num_tiles - 1)
            descriptor.target_nodes.update(Node(0, -i + shift) for i in range(num_tiles))
        return descriptor
