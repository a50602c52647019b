"""Tests for tiles and entity cloning."""

from hybridsim.engine.configuration import Configuration
from hybridsim.models.node import Node
from hybridsim.models.tile import Tile
from hybridsim.util.constants import COLOR_DEFAULT, COLOR_NON_TARGET, COLOR_TARGET


class TestPebbles:
    def test_add_pebble(self):
        tile = Tile(Node(0, 0))
        assert tile.add_pebble()
        assert tile.has_pebble()
        assert tile.num_pebbles == 1

    def test_single_pebble_capacity(self):
        tile = Tile(Node(0, 0), num_pebbles=1)
        assert not tile.add_pebble()
        assert tile.num_pebbles == 1

    def test_remove_pebble(self):
        tile = Tile(Node(0, 0), num_pebbles=1)
        assert tile.remove_pebble()
        assert not tile.has_pebble()

    def test_remove_from_empty_fails(self):
        tile = Tile(Node(0, 0))
        assert not tile.remove_pebble()
        assert tile.num_pebbles == 0


class TestColor:
    def test_default_without_targets(self):
        config = Configuration()
        tile = Tile(Node(0, 0))
        config.add_tile(tile)
        assert tile.get_color() == COLOR_DEFAULT

    def test_target_and_non_target(self):
        config = Configuration()
        on_target = Tile(Node(0, 0))
        off_target = Tile(Node(0, 1))
        config.add_tile(on_target)
        config.add_tile(off_target)
        config.add_target(Node(0, 0))
        assert on_target.get_color() == COLOR_TARGET
        assert off_target.get_color() == COLOR_NON_TARGET

    def test_override_color(self):
        tile = Tile(Node(0, 0), color="skyblue")
        assert tile.get_color() == "skyblue"

    def test_unbound_tile_is_default(self):
        assert Tile(Node(3, 3)).get_color() == COLOR_DEFAULT


class TestClone:
    def test_clone_is_independent(self):
        tile = Tile(Node(0, 0))
        duplicate = tile.clone()
        duplicate.add_pebble()
        assert not tile.has_pebble()
        assert duplicate.node == tile.node

    def test_clone_keeps_configuration(self):
        config = Configuration()
        tile = Tile(Node(0, 0))
        config.add_tile(tile)
        assert tile.clone().configuration is config
