"""Template for configuration generator scripts.

Keep ``get_generator()``: the simulator calls it when the script is
loaded.  ``generate`` must keep its signature and return a
``ConfigurationDescriptor``.  Use ``rng`` for randomness so that
``--seed`` makes runs reproducible.
"""

from hybridsim.engine.generator import Generator
from hybridsim.models.descriptor import ConfigurationDescriptor


def get_generator():
    return GeneratorImpl()


class GeneratorImpl(Generator):
    def generate(self, num_tiles, num_robots, num_overhang=-1):
        tile_nodes = set()
        robot_nodes = set()
        # May stay empty if no target shape is needed
        target_nodes = set()

        raise NotImplementedError("Fill the sets above with nodes")

        return ConfigurationDescriptor(tile_nodes, robot_nodes, target_nodes)
