"""Tests for events delivered by the simulator through its bus."""

import pytest

from hybridsim.engine.simulation import create_simulation
from hybridsim.models.node import ORIGIN, Node
from hybridsim.models.robot import Robot
from hybridsim.util.events import (
    AlgorithmLoaded,
    AllRobotsFinished,
    ConfigurationLoaded,
    GeneratorLoaded,
    RobotCrashed,
    SchedulerStarted,
    SchedulerStopped,
)

CRASHING_SCRIPT = """
class Crashing(Robot):
    def activate(self):
        raise RuntimeError("lost track of the boundary")


def get_robot(node, orientation):
    return Crashing(node, orientation)
"""

FINISHED_SCRIPT = """
def get_robot(node, orientation):
    robot = Robot(node, orientation)
    robot.finished = lambda: True
    return robot
"""

LINE_SCRIPT = """
class Single(Generator):
    def generate(self, num_tiles, num_robots, num_overhang=-1):
        return ConfigurationDescriptor({Node(0, 0)}, {Node(0, 0)}, set())


def get_generator():
    return Single()
"""


def _recorder(sim, *event_types):
    received = []
    for event_type in event_types:
        sim.event_bus.on(event_type, received.append)
    return received


class TestSimulatorEvents:
    def test_crashing_robot_reports_its_node(self):
        sim = create_simulation()
        sim.configuration.add_robot(Robot(Node(2, 3), 0))
        sim.algorithm_loader.load_algorithm(script_string=CRASHING_SCRIPT)
        received = _recorder(sim, RobotCrashed, SchedulerStopped)
        sim.scheduler.start()
        sim.scheduler.run_cycle()
        assert [type(e) for e in received] == [SchedulerStopped, RobotCrashed]
        assert received[1].node == Node(2, 3)
        assert "lost track of the boundary" in received[1].error

    def test_all_finished_reports_cycle(self):
        sim = create_simulation()
        sim.configuration.add_robot(Robot(ORIGIN, 0))
        sim.algorithm_loader.load_algorithm(script_string=FINISHED_SCRIPT)
        received = _recorder(sim, AllRobotsFinished)
        sim.scheduler.run_cycle()
        assert received == [AllRobotsFinished(cycle=1)]

    def test_load_configuration_reports_counts(self):
        sim = create_simulation()
        received = _recorder(sim, ConfigurationLoaded)
        sim.configuration.load_configuration({
            "tiles": {"a": {"node": {"x": 0, "y": 0}}, "b": {"node": {"x": 0, "y": 1}}},
            "robots": {"c": {"orientation": 0, "node": {"x": 0, "y": 0}}},
            "targetNodes": [],
        })
        assert received == [ConfigurationLoaded(num_tiles=2, num_robots=1, num_targets=0)]

    def test_loaders_report_names(self):
        sim = create_simulation()
        received = _recorder(sim, AlgorithmLoaded, GeneratorLoaded)
        sim.algorithm_loader.load_algorithm(script_string=FINISHED_SCRIPT)
        sim.generator_loader.load_generator(script_string=LINE_SCRIPT)
        assert received == [AlgorithmLoaded(name="<string>"), GeneratorLoaded(name="<string>")]

    def test_load_pauses_and_resumes_running_scheduler(self):
        sim = create_simulation()
        sim.scheduler.start()
        received = _recorder(sim, SchedulerStarted, SchedulerStopped)
        sim.configuration.load_configuration("{}")
        assert received == [SchedulerStopped(), SchedulerStarted()]

    def test_failed_load_reports_nothing(self):
        sim = create_simulation()
        received = _recorder(sim, AlgorithmLoaded)
        with pytest.raises(RuntimeError):
            sim.algorithm_loader.load_algorithm(script_string="x = 1")
        assert received == []


class TestSubscriptions:
    def test_handler_can_unsubscribe_during_delivery(self):
        sim = create_simulation()
        calls = []

        def once(event):
            calls.append(event)
            sim.event_bus.off(SchedulerStarted, once)

        sim.event_bus.on(SchedulerStarted, once)
        sim.scheduler.start()
        sim.scheduler.stop()
        sim.scheduler.start()
        assert calls == [SchedulerStarted()]
        assert not sim.event_bus.off(SchedulerStarted, once)
