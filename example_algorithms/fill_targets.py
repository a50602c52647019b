"""Greedy shape reconfiguration.

Robots lift tiles outside the target shape and carry them to adjacent
empty target nodes; otherwise they wander across the structure.  Not
guaranteed to terminate on every input, the full-round scheduler stops
once every target node is covered.
"""

from hybridsim.models.robot import LABELS, Robot
from hybridsim.util.randomness import rng


def get_robot(node, orientation):
    return RobotImpl(node, orientation)


class RobotImpl(Robot):
    def get_color(self):
        return "orange" if self.carries_tile else "teal"

    def activate(self):
        if self.carries_tile:
            if not self.is_on_tile() and self.is_on_target():
                self.place_tile()
                return
            label = self.empty_target_nbr_label()
            if label is not None and not self.has_robot_at_label(label):
                self.move_to_label(label)
                return
        elif self.is_on_tile() and not self.is_on_target() and not self.tile_has_pebble():
            self.lift_tile()
            return

        labels = [
            label for label in LABELS
            if self.has_tile_at_label(label) and not self.has_robot_at_label(label)
        ]
        if labels:
            self.move_to_label(rng.choice(labels))

    def finished(self):
        return not self.carries_tile and self.is_on_tile() and self.is_on_target()
