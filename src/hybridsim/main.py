"""Headless experiment runner.

Runs a robot algorithm with the full-round scheduler on
1. one configuration file (``--configuration``), or
2. every ``*.json`` file of a directory (``--configuration-dir``), or
3. generated configurations for every combination of ``--num-tiles``,
   ``--num-robots`` and ``--num-overhangs`` (default or ``--generator``),

repeating each ``--num-runs`` times, and reports the rounds until
termination on stdout and optionally as CSV.

Usage:
    hybridsim --algorithm example_algorithms/fill_targets.py -n 20,40 -k 1,2 -m 3 -r 5 -o out.csv
    # or
    python -m hybridsim.main ...
"""

from __future__ import annotations

import argparse
import csv
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from hybridsim.engine.simulation import Simulation, create_simulation
from hybridsim.loaders.settings_loader import DEFAULT_SETTINGS_PATH, SimConfig, load_sim_config
from hybridsim.persistence.config_load import read_configuration

log = logging.getLogger(__name__)

CSV_HEADER = ["id", "numTiles", "numRobots", "numOverhang", "rounds"]


# ===================================================================
# Argument parsing
# ===================================================================


def _int_list(text: str) -> list[int]:
    try:
        return [int(part) for part in text.split(",") if part.strip()]
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected comma-separated integers, got {text!r}")


def _positive_int(text: str) -> int:
    value = int(text)
    if value < 1:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value}")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hybridsim",
        description="Run hybrid model algorithms on generated or stored configurations.",
    )
    parser.add_argument("--algorithm", "-a", type=Path, required=True,
                        help="Python script defining get_robot(node, orientation).")
    source = parser.add_mutually_exclusive_group()
    source.add_argument("--configuration", "-c", type=Path,
                        help="JSON file with an input configuration.")
    source.add_argument("--configuration-dir", "-C", type=Path,
                        help="Run on every *.json configuration in this directory.")
    parser.add_argument("--generator", "-g", type=Path,
                        help="Python script defining get_generator(); default generator otherwise.")
    parser.add_argument("--num-tiles", "-n", type=_int_list, default=[50],
                        help="Comma-separated tile counts for generated configurations.")
    parser.add_argument("--num-robots", "-k", type=_int_list, default=[1],
                        help="Comma-separated robot counts for generated configurations.")
    parser.add_argument("--num-overhangs", "-m", type=_int_list, default=[-1],
                        help="Comma-separated overhang counts (-1: no target nodes). "
                             "Lists starting with -1 need the form --num-overhangs=-1,2.")
    parser.add_argument("--num-runs", "-r", type=_positive_int, default=1,
                        help="Runs per configuration / parameter combination.")
    parser.add_argument("--limit", "-l", type=_positive_int, default=sys.maxsize,
                        help="Maximum number of rounds of a single run.")
    parser.add_argument("--start-id", type=int, default=0,
                        help="ID of the first run; later runs count upwards.")
    parser.add_argument("--output", "-o", type=Path,
                        help="CSV file for the run report (must not exist).")
    parser.add_argument("--seed", "-s", type=int,
                        help="Seed for the shared randomness.")
    parser.add_argument("--settings", type=Path, default=Path(DEFAULT_SETTINGS_PATH),
                        help="Simulator settings YAML.")
    parser.add_argument("--log-level", help="Overrides the log level of the settings file.")
    return parser


# ===================================================================
# Runs
# ===================================================================


def single_run(
    sim: Simulation,
    run_id: int,
    n: int,
    k: int,
    m: int,
    limit: int,
    output: Optional[Path],
) -> Optional[int]:
    """Run the full-round scheduler once and report the result."""
    rounds = sim.full_scheduler.run(limit)
    if rounds is None:
        print(f"id={run_id}, n={n}, k={k}, m={m}, rounds={limit} (limit!)")
    else:
        print(f"id={run_id}, n={n}, k={k}, m={m}, rounds={rounds}")
    if output is not None:
        with output.open("a", newline="") as f:
            csv.writer(f).writerow([run_id, n, k, m, "" if rounds is None else rounds])
    return rounds


def _stored_runs(sim: Simulation, files: list[Path], args: argparse.Namespace) -> None:
    run_id = args.start_id
    for config_file in files:
        snapshot = read_configuration(config_file)
        for _ in range(args.num_runs):
            configuration = sim.configuration
            configuration.load_configuration(snapshot)
            n = len(configuration.tiles)
            k = len(configuration.robots)
            m = len(configuration.tiles.keys() - configuration.target_nodes)
            single_run(sim, run_id, n, k, m, args.limit, args.output)
            run_id += 1


def _generated_runs(sim: Simulation, args: argparse.Namespace) -> None:
    run_id = args.start_id
    for n in args.num_tiles:
        for k in args.num_robots:
            for m in args.num_overhangs:
                for _ in range(args.num_runs):
                    sim.configuration.generate(n, k, m)
                    # Headless runs never undo
                    sim.configuration.clear_undo_queues()
                    single_run(sim, run_id, n, k, m, args.limit, args.output)
                    run_id += 1


def run_experiments(args: argparse.Namespace, settings: Optional[SimConfig] = None) -> int:
    """Execute all runs described by ``args``. Returns the exit code.

    ``settings`` are read from ``args.settings`` unless given.
    """
    if settings is None:
        settings = load_sim_config(args.settings)
    if args.seed is not None:
        settings.seed = args.seed
    sim = create_simulation(settings)

    # Load failures are fatal and propagate
    sim.algorithm_loader.load_algorithm(script_file=args.algorithm)
    if args.generator is not None:
        sim.generator_loader.load_generator(script_file=args.generator)

    if args.output is not None:
        if args.output.exists():
            print(f"Output file {args.output} already exists, aborting!", file=sys.stderr)
            return 1
        args.output.parent.mkdir(parents=True, exist_ok=True)
        with args.output.open("w", newline="") as f:
            csv.writer(f).writerow(CSV_HEADER)

    if args.configuration is not None:
        _stored_runs(sim, [args.configuration], args)
    elif args.configuration_dir is not None:
        _stored_runs(sim, sorted(args.configuration_dir.glob("*.json")), args)
    else:
        _generated_runs(sim, args)
    return 0


# ===================================================================
# Entry point
# ===================================================================


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Entry point for the ``hybridsim`` console script."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=(args.log_level or "INFO").upper(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    settings = load_sim_config(args.settings)
    if args.log_level is None:
        logging.getLogger().setLevel(settings.log_level.upper())
    log.info("=== HybridSim (headless) starting ===")
    sys.exit(run_experiments(args, settings))


if __name__ == "__main__":
    main()
