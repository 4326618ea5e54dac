"""Pipewave pipe grid generator.

Fills a square grid with connected pipe tiles.  Every cell starts open to all twelve tiles;
the solver repeatedly fixes a lowest-uncertainty cell to a random tile and propagates the
edge constraints to the rest of the grid, until the grid is complete or a cell is left
without any fitting tile.  There is no backtracking: a contradiction ends the run.
"""

import argparse
from sys import exit

from .domain import ContradictionError
from .solver import solver
from .solver.config import config as solver_config


def build_parser() -> argparse.ArgumentParser:
    """Build the command-line argument parser."""
    parser = argparse.ArgumentParser(
        prog="pipewave",
        description="Generate a grid of connected pipe tiles",
    )
    parser.add_argument("--size", type=int, help="Number of rows (and columns) of the grid")
    parser.add_argument("--seed", type=int, help="Seed for the random source")
    log_group = parser.add_mutually_exclusive_group()
    log_group.add_argument("--log-dir", type=str, help="Directory for the run log file")
    log_group.add_argument("--no-log", action="store_true", help="Do not write a log file")
    parser.add_argument(
        "--max-sweeps",
        type=int,
        help="Maximum number of propagation sweeps after each collapse",
    )
    parser.add_argument(
        "--progress",
        action="store_true",
        help="Print progress reports to stdout",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the Pipewave generator."""
    args = build_parser().parse_args(argv)

    # Command-line arguments override the environment/.env configuration
    updates: dict[str, object] = {}
    if args.size is not None:
        updates["grid_size"] = args.size
    if args.seed is not None:
        updates["seed"] = args.seed
    if args.log_dir is not None:
        updates["log_dir"] = args.log_dir
    if args.no_log:
        updates["log_dir"] = None
    if args.max_sweeps is not None:
        updates["max_propagation_sweeps"] = args.max_sweeps
    if args.progress:
        updates["print_progress"] = True
    run_config = solver_config.model_copy(update=updates)

    if run_config.grid_size < 1:
        print(f"Grid size must be positive, got {run_config.grid_size}.")
        exit(2)

    result = solver.run(run_config)

    print()
    print(result.grid, end="")
    print()
    if result.solved:
        print(
            f"Solved {run_config.grid_size}x{run_config.grid_size} grid "
            f"(seed {result.seed}, {result.stats.collapses:,} collapses)."
        )
        return

    error = ContradictionError(result.contradiction)
    print(f"{type(error).__name__}: {error} (seed {result.seed})")
    exit(1)
