"""Tests for robot actions and local queries."""

import pytest

from hybridsim.engine.configuration import Configuration
from hybridsim.models.node import ORIGIN, Node
from hybridsim.models.robot import Robot
from hybridsim.models.tile import Tile


@pytest.fixture
def config():
    return Configuration()


def _robot(config, node=ORIGIN, orientation=0, **kwargs):
    robot = Robot(node, orientation, **kwargs)
    config.add_robot(robot)
    return robot


def _tiles(config, *nodes):
    for node in nodes:
        config.add_tile(Tile(node))


class TestLabels:
    def test_orientation_rotates_labels(self, config):
        robot = _robot(config, orientation=4)
        assert robot.node_at_label(0) == ORIGIN.node_in_dir(4)
        assert robot.node_at_label(2) == ORIGIN.node_in_dir(0)

    def test_random_orientation_in_range(self):
        for _ in range(20):
            assert 0 <= Robot(ORIGIN).orientation <= 5

    def test_unbound_robot_raises(self):
        with pytest.raises(RuntimeError):
            Robot(ORIGIN, 0).is_on_tile()


class TestMovement:
    def test_move_to_empty_node(self, config):
        robot = _robot(config)
        assert robot.move_to_label(0)
        assert robot.node == Node(0, -1)
        assert config.robots == {Node(0, -1): robot}

    def test_move_blocked_by_robot(self, config):
        robot = _robot(config)
        _robot(config, node=Node(0, -1))
        assert not robot.move_to_label(0)
        assert robot.node == ORIGIN

    def test_move_ignores_connectivity(self, config):
        robot = _robot(config)
        assert robot.move_to_label(3)
        assert not robot.is_on_tile()

    def test_move_keeps_connectivity_on_tile(self, config):
        _tiles(config, ORIGIN)
        robot = _robot(config)
        assert robot.move_keeps_connectivity(3)

    def test_move_keeps_connectivity_via_common_neighbor(self, config):
        _tiles(config, ORIGIN.node_in_dir(1))
        robot = _robot(config)
        assert robot.move_keeps_connectivity(0)
        assert not robot.move_keeps_connectivity(3)

    def test_move_keeps_connectivity_via_carrying_robot(self, config):
        robot = _robot(config)
        _robot(config, node=ORIGIN.node_in_dir(4), carries_tile=True)
        assert robot.move_keeps_connectivity(3)

    def test_switch_with_robot_nbr(self, config):
        robot = _robot(config)
        other = _robot(config, node=Node(0, -1))
        assert robot.switch_with_robot_nbr(0)
        assert robot.node == Node(0, -1)
        assert other.node == ORIGIN
        assert config.robots[ORIGIN] is other
        assert config.robots[Node(0, -1)] is robot

    def test_switch_without_nbr_fails(self, config):
        robot = _robot(config)
        assert not robot.switch_with_robot_nbr(0)
        assert robot.node == ORIGIN


class TestTiles:
    def test_lift_and_place(self, config):
        _tiles(config, ORIGIN)
        robot = _robot(config)
        assert robot.lift_tile()
        assert robot.carries_tile
        assert ORIGIN not in config.tiles
        assert robot.place_tile()
        assert not robot.carries_tile
        assert config.tiles[ORIGIN].configuration is config

    def test_lift_without_tile_fails(self, config):
        robot = _robot(config)
        assert not robot.lift_tile()

    def test_lift_while_carrying_fails(self, config):
        _tiles(config, ORIGIN)
        robot = _robot(config, carries_tile=True)
        assert not robot.lift_tile()
        assert ORIGIN in config.tiles

    def test_lift_pebbled_tile_fails(self, config):
        config.add_tile(Tile(ORIGIN, num_pebbles=1))
        robot = _robot(config)
        assert not robot.lift_tile()

    def test_place_on_tile_fails(self, config):
        _tiles(config, ORIGIN)
        robot = _robot(config, carries_tile=True)
        assert not robot.place_tile()
        assert robot.carries_tile

    def test_place_without_tile_fails(self, config):
        robot = _robot(config)
        assert not robot.place_tile()
        assert ORIGIN not in config.tiles

    def test_is_at_boundary(self, config):
        robot = _robot(config)
        _tiles(config, *ORIGIN.neighbors())
        assert not robot.is_at_boundary()
        config.remove_tile(Node(0, 1))
        assert robot.is_at_boundary()


class TestPebbles:
    def test_put_and_take(self, config):
        _tiles(config, ORIGIN)
        robot = _robot(config, num_pebbles=1)
        assert robot.put_pebble()
        assert robot.tile_has_pebble()
        assert robot.num_pebbles == 0
        assert robot.take_pebble()
        assert robot.num_pebbles == 1
        assert not robot.tile_has_pebble()

    def test_put_without_pebbles_fails(self, config):
        _tiles(config, ORIGIN)
        robot = _robot(config, num_pebbles=0)
        assert not robot.put_pebble()
        assert not robot.tile_has_pebble()

    def test_put_on_pebbled_tile_fails(self, config):
        config.add_tile(Tile(ORIGIN, num_pebbles=1))
        robot = _robot(config, num_pebbles=2)
        assert not robot.put_pebble()
        assert robot.num_pebbles == 2

    def test_take_at_capacity_fails(self, config):
        config.add_tile(Tile(ORIGIN, num_pebbles=1))
        robot = _robot(config, num_pebbles=2, max_pebbles=2)
        assert not robot.take_pebble()
        assert robot.tile_has_pebble()

    def test_pebble_actions_need_tile(self, config):
        robot = _robot(config, num_pebbles=1)
        assert not robot.put_pebble()
        assert not robot.take_pebble()


class TestNeighborQueries:
    def test_tile_nbr(self, config):
        robot = _robot(config)
        assert robot.tile_nbr_label() is None
        assert not robot.has_tile_nbr()
        _tiles(config, Node(0, 1))
        assert robot.tile_nbr_label() == 3
        assert robot.tile_nbr() is config.tiles[Node(0, 1)]

    def test_robot_nbrs(self, config):
        robot = _robot(config)
        north = _robot(config, node=Node(0, -1))
        south = _robot(config, node=Node(0, 1))
        assert robot.has_robot_nbr()
        assert robot.robot_nbr() is north
        assert robot.all_robot_nbr_labels() == [0, 3]
        assert robot.all_robot_nbrs() == [north, south]

    def test_hanging_robot_nbrs(self, config):
        robot = _robot(config)
        _robot(config, node=Node(0, -1))
        hanging = _robot(config, node=Node(0, 1))
        _tiles(config, Node(0, -1))
        assert robot.hanging_robot_nbr_label() == 3
        assert robot.hanging_robot_nbr() is hanging
        assert robot.all_hanging_robot_nbrs() == [hanging]

    def test_target_queries(self, config):
        robot = _robot(config)
        _tiles(config, ORIGIN, Node(0, -1), Node(0, 1))
        config.add_target(ORIGIN)
        config.add_target(Node(0, -1))
        config.add_target(Node(1, 0))
        assert robot.is_on_target()
        assert robot.label_is_target(0)
        assert robot.target_tile_nbr_label() == 0
        assert robot.empty_target_nbr_label() == 1
        assert robot.overhang_nbr_label() == 3
        assert robot.overhang_nbr() is config.tiles[Node(0, 1)]
        assert robot.empty_non_target_nbr_label() == 2

    def test_no_targets(self, config):
        robot = _robot(config)
        assert not robot.has_target_tile_nbr()
        assert not robot.has_empty_target_nbr()
        assert robot.target_tile_nbr() is None


class TestNumBoundaries:
    def test_isolated_robot_has_one_boundary(self, config):
        robot = _robot(config)
        assert robot.num_boundaries() == 1

    def test_two_opposite_tiles(self, config):
        robot = _robot(config)
        _tiles(config, Node(0, -1), Node(0, 1))
        assert robot.num_boundaries() == 2
        assert robot.num_boundaries(tile_boundaries=True) == 2

    def test_surrounded_robot(self, config):
        robot = _robot(config)
        _tiles(config, *ORIGIN.neighbors())
        assert robot.num_boundaries() == 0
        assert robot.num_boundaries(tile_boundaries=True) == 1


class TestActivation:
    def test_default_robot_is_inert(self, config):
        robot = _robot(config)
        robot.trigger_activate(with_undo=False)
        assert robot.node == ORIGIN
        assert not robot.finished()

    def test_trigger_activate_records_undo(self, config):
        robot = _robot(config)
        robot.trigger_activate()
        assert config.undo_steps() == 1
