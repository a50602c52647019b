"""Template for robot algorithm scripts.

Keep ``get_robot(node, orientation)``: the simulator calls it to create
every robot when the script is loaded.

Scripts run with ``Robot``, ``Tile``, ``Node``, ``ORIGIN``, ``LABELS``
and ``rng`` already in their namespace; the explicit imports below only
help editors.  Use ``rng`` for randomness so that ``--seed`` makes runs
reproducible.
"""

from hybridsim.models.robot import Robot


def get_robot(node, orientation):
    return RobotImpl(node, orientation)


class RobotImpl(Robot):
    def __init__(self, node, orientation):
        # Replace orientation with a constant (0..5) if robots should share a compass
        super().__init__(node, orientation, carries_tile=False, num_pebbles=2, max_pebbles=2)

    def activate(self):
        """Executed once per activation.

        Must run in constant time and space (finite state automaton), see
        https://doi.org/10.1007/s11047-019-09774-2
        """
        raise NotImplementedError("Replace with your algorithm implementation")

    def finished(self):
        """Return True once the robot is done; remove if it cannot tell."""
        return super().finished()

    def get_color(self):
        return super().get_color()
