"""Robots that do something random on every activation."""

from hybridsim.models.robot import Robot
from hybridsim.util.randomness import rng

_PALETTE = ("orange", "teal", "skyblue", "red", "blue", "yellow", "brown")


def get_robot(node, orientation):
    return RobotImpl(node, orientation)


class RobotImpl(Robot):
    def __init__(self, node, orientation):
        super().__init__(node, orientation, num_pebbles=2, max_pebbles=2)
        self.color = "white"

    def get_color(self):
        return self.color

    def activate(self):
        self.color = rng.choice(_PALETTE)
        label = rng.randrange(6)
        coin = rng.random() < 0.5
        if self.is_on_tile() and not self.carries_tile and not self.tile_has_pebble() and coin:
            self.lift_tile()
        elif not self.is_on_tile() and self.carries_tile and coin:
            self.place_tile()
        elif self.is_on_tile() and not self.tile_has_pebble() and self.num_pebbles > 0 and coin:
            self.put_pebble()
        elif self.is_on_tile() and self.tile_has_pebble() and self.num_pebbles < self.max_pebbles and coin:
            self.take_pebble()
        elif (self.is_on_tile() or self.has_tile_at_label(label)) and not self.has_robot_at_label(label):
            self.move_to_label(label)
