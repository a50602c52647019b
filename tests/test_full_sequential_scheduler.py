"""Tests for the full-round scheduler used by headless runs."""

from pathlib import Path

import pytest

from hybridsim.engine.configuration import Configuration
from hybridsim.engine.full_sequential_scheduler import FullSequentialScheduler
from hybridsim.loaders.algorithm_loader import AlgorithmLoader
from hybridsim.models.node import ORIGIN, Node
from hybridsim.models.robot import Robot
from hybridsim.models.tile import Tile

ALGORITHMS_DIR = Path(__file__).resolve().parent.parent / "example_algorithms"


class Counting(Robot):
    def __init__(self, node, orientation=0, finish_after=None):
        super().__init__(node, orientation)
        self.activations = 0
        self.finish_after = finish_after

    def activate(self):
        self.activations += 1

    def finished(self):
        return self.finish_after is not None and self.activations >= self.finish_after


class Crashing(Robot):
    def activate(self):
        raise ValueError("boom")


@pytest.fixture
def config():
    return Configuration()


class TestTermination:
    def test_every_robot_once_per_round(self, config):
        robots = [Counting(Node(x, 0)) for x in range(4)]
        for robot in robots:
            config.add_robot(robot)
        assert FullSequentialScheduler(config).run(5) is None
        assert [robot.activations for robot in robots] == [5, 5, 5, 5]

    def test_finished_checked_per_block(self, config):
        for x in range(3):
            config.add_tile(Tile(Node(x, 0)))
        config.add_robot(Counting(ORIGIN, finish_after=1))
        # Block size is the tile count
        assert FullSequentialScheduler(config).run(100) == 3

    def test_no_tiles_checks_every_round(self, config):
        config.add_robot(Counting(ORIGIN, finish_after=2))
        assert FullSequentialScheduler(config).run(100) == 2

    def test_target_coverage_terminates(self, config):
        config.add_tile(Tile(ORIGIN))
        config.add_target(ORIGIN)
        config.add_robot(Counting(ORIGIN))
        assert FullSequentialScheduler(config).run(100) == 1

    def test_limit_reached(self, config):
        config.add_robot(Counting(ORIGIN))
        assert FullSequentialScheduler(config).run(10) is None

    def test_finishing_on_limit_round_counts(self, config):
        config.add_robot(Counting(ORIGIN, finish_after=4))
        assert FullSequentialScheduler(config).run(4) == 4

    def test_crash_propagates(self, config):
        config.add_robot(Crashing(ORIGIN, 0))
        with pytest.raises(ValueError):
            FullSequentialScheduler(config).run(10)

    def test_no_undo_recorded(self, config):
        config.add_robot(Counting(ORIGIN, finish_after=2))
        FullSequentialScheduler(config).run(10)
        assert config.undo_steps() == 0


class TestEndToEnd:
    def test_single_robot_moves_tile_onto_target(self, config):
        AlgorithmLoader(config).load_algorithm(script_file=ALGORITHMS_DIR / "fill_targets.py")
        config.load_configuration({
            "tiles": {"Node(x=0, y=0)": {"node": {"x": 0, "y": 0}, "numPebbles": 0}},
            "robots": {"Node(x=0, y=0)": {"orientation": 4, "node": {"x": 0, "y": 0}}},
            "targetNodes": [{"x": 0, "y": -1}],
        })
        assert FullSequentialScheduler(config).run(100) == 3
        assert set(config.tiles) == {Node(0, -1)}
        robot = config.robots[Node(0, -1)]
        assert robot.finished()
