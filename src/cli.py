"""
Command-line interface for the mapper agent.

Usage:
    python -m src.cli run mazes/rooms.txt          Explore a maze and show the summary
    python -m src.cli run mazes/rooms.txt --show-map   Also draw the known map
    python -m src.cli verify                       Verify setup is correct
"""

import argparse
import json
import logging
import sys
from typing import Optional

from rich.console import Console

from src.config import Config, load_config, setup_logging

logger = logging.getLogger(__name__)

VERIFY_MAZE = """\
#######
#..+..#
#.@#..#
#####.#
    #.#
    ###
"""


def _run_maze(maze, config: Config, max_turns=None):
    from src.sim import SimulationRunner

    runner = SimulationRunner(maze, config)
    return runner, runner.run(max_turns)


def cmd_run(args: argparse.Namespace) -> int:
    """Explore a maze file in the simulator."""
    from src.sim import Maze, MazeFormatError, render_map, render_summary

    config: Config = args.config_obj
    if args.radius is not None:
        config.simulation.radius = args.radius

    try:
        maze = Maze.from_file(args.maze)
    except (OSError, MazeFormatError) as e:
        logger.error(f"Could not load maze {args.maze}: {e}")
        print(f"Error loading maze: {e}")
        return 1

    runner, result = _run_maze(maze, config, args.turns)

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
        return 0

    console = Console()
    console.print(render_summary(result))
    if args.show_map:
        engine = runner.client.engine
        console.print(render_map(engine.store, engine.state.position))
    return 0


def cmd_verify(args: argparse.Namespace) -> int:
    """Run a built-in maze and check the agent explores all of it."""
    from src.sim import Maze

    config: Config = args.config_obj
    console = Console()
    console.print(f"Merge policy: {config.agent.get_merge_policy().value}")
    console.print(f"Plan through closed doors: {config.agent.plan_through_closed_doors}")

    _, result = _run_maze(Maze.from_text(VERIFY_MAZE), config)

    if result.exhausted and result.position_consistent and result.coverage == 1.0:
        console.print("[green]Setup OK[/green]: built-in maze fully explored")
        return 0

    console.print(f"[red]Verification failed[/red]: {result.to_dict()}")
    return 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gridmapper",
        description="Explore grid mazes with a frontier-following agent",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--config", "-c", help="Path to a YAML config file")
    parser.add_argument(
        "--log-level",
        "-l",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Override logging.level",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    run_parser = subparsers.add_parser("run", help="Explore a maze file in the simulator")
    run_parser.add_argument("maze", help="Path to a maze text file")
    run_parser.add_argument("--turns", "-t", type=int, help="Turn limit (simulation.max_turns)")
    run_parser.add_argument("--radius", "-r", type=int, help="Surroundings radius (simulation.radius)")
    run_parser.add_argument("--show-map", action="store_true", help="Draw the map the agent built")
    run_parser.add_argument("--json", action="store_true", help="Print the run summary as JSON")
    run_parser.set_defaults(func=cmd_run)

    verify_parser = subparsers.add_parser("verify", help="Explore a built-in maze as a self-check")
    verify_parser.set_defaults(func=cmd_verify)
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    config = load_config(args.config)
    if args.log_level:
        config.logging.level = args.log_level
    setup_logging(config.logging)

    if args.command is None:
        parser.print_help()
        return 1

    args.config_obj = config
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
