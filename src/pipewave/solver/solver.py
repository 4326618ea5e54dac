"""Main solver module for Pipewave grids."""

import random
import sys
from contextlib import nullcontext
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from pprint import pprint
from time import time
from typing import TextIO

import numpy as np

from pipewave.domain import ContradictionError
from pipewave.grid import Grid
from pipewave.solver.config import SolverConfig
from pipewave.solver.utils import TIMESTAMP_FMT, make_rng, time_str, validate_grid


class SolveStatus(Enum):
    """Outcome of a solve."""

    SOLVED = "solved"
    CONTRADICTION = "contradiction"


@dataclass
class SolverStats:
    """Statistics collected during solving."""

    collapses: int = 0
    """Number of cells fixed by random collapse (cells fixed by propagation are not counted)."""

    sweeps: int = 0
    """Number of propagation sweeps performed."""

    start_time: float = field(default_factory=time)
    """Timestamp when solving started."""

    end_time: float | None = None
    """Timestamp when solving finished, or None while running."""

    @property
    def elapsed(self) -> float:
        """Seconds spent solving so far."""
        end_time = self.end_time if self.end_time is not None else time()
        return end_time - self.start_time


@dataclass
class SolveResult:
    """The final state of a solve."""

    grid: Grid
    """The grid in its last evaluated state, including any contradiction."""

    status: SolveStatus

    stats: SolverStats

    seed: int | None = None
    """Seed of the random source, if known."""

    contradiction: tuple[int, int] | None = None
    """Coordinate of the first cell found in contradiction, if the solve failed."""

    @property
    def solved(self) -> bool:
        return self.status == SolveStatus.SOLVED


def _log(message: str, logf: TextIO | None, *, echo: bool = False) -> None:
    if logf is not None:
        print(message, file=logf, flush=True)
    if echo:
        print(message)


def propagate_to_fixed_point(
    grid: Grid,
    *,
    max_sweeps: int | None = None,
    stats: SolverStats | None = None,
) -> int:
    """Sweep the grid until its total uncertainty stops changing.

    Args:
        grid (Grid): The grid to propagate.  Modified in-place.
        max_sweeps (int | None): Maximum number of sweeps.  If None, no limit.
        stats (SolverStats | None): Statistics to update with the number of sweeps.

    Returns:
        The number of sweeps performed.

    Raises:
        ContradictionError: If a sweep finds a cell in contradiction, or leaves one behind.
    """
    previous: int | None = None
    sweeps = 0
    while max_sweeps is None or sweeps < max_sweeps:
        grid.propagate()
        sweeps += 1
        if stats is not None:
            stats.sweeps += 1
        current = grid.total_uncertainty()
        if current == previous:
            break
        previous = current
    return sweeps


def solve(
    grid: Grid,
    rng: random.Random,
    *,
    seed: int | None = None,
    logf: TextIO | None = None,
    max_propagation_sweeps: int | None = None,
    report_interval: int = 10,
    print_progress: bool = False,
) -> SolveResult:
    """Collapse and propagate until every cell is fixed or a contradiction is found.

    There is no backtracking: the first contradiction ends the solve, and the grid is
    returned as it was when the contradiction was detected.

    Args:
        grid (Grid): The grid to solve.  Modified in-place.
        rng (random.Random): Random source for cell selection and tile draws.
        seed (int | None): Seed `rng` was created with, recorded in the result.
        logf: File object to log the solving process, or None.
        max_propagation_sweeps (int | None): Cap on sweeps after each collapse.
        report_interval (int): Report progress every this many collapses (0 disables).
        print_progress (bool): Whether to echo progress reports to stdout.

    Returns:
        A SolveResult holding the grid and the outcome.
    """
    stats = SolverStats()
    first_contradiction: tuple[int, int] | None = None

    try:
        while grid.has_undetermined() and not grid.has_contradiction():
            if grid.collapse_lowest_uncertainty_cell(rng):
                stats.collapses += 1
            propagate_to_fixed_point(grid, max_sweeps=max_propagation_sweeps, stats=stats)

            if report_interval > 0 and stats.collapses % report_interval == 0:
                remaining = sum(1 for _, _, cell in grid.cells() if cell.is_undetermined)
                _log(
                    f"Collapsed {stats.collapses:,} cells in {stats.sweeps:,} sweeps "
                    f"({remaining:,} undetermined), elapsed {time_str(stats.elapsed)}",
                    logf,
                    echo=print_progress,
                )
    except ContradictionError as e:
        first_contradiction = e.position
        _log(f"Contradiction detected: {e}", logf, echo=print_progress)

    stats.end_time = time()

    if grid.has_contradiction():
        if first_contradiction is None:
            first_contradiction = grid.find_contradiction()
        status = SolveStatus.CONTRADICTION
    else:
        status = SolveStatus.SOLVED

    return SolveResult(
        grid=grid,
        status=status,
        stats=stats,
        seed=seed,
        contradiction=first_contradiction,
    )


def run(config: SolverConfig) -> SolveResult:
    """Run the solver with the given configuration.

    Args:
        config (SolverConfig): The configuration for the run.

    Returns:
        The SolveResult of the run.
    """
    rng, seed = make_rng(config.seed)
    print(f"config: {config}")
    print(f"Seed: {seed}")

    logfile: Path | None = None
    if config.log_dir is not None:
        size = config.grid_size
        logfile = Path(config.log_dir) / f"{size}x{size}" / f"seed-{seed}.log"
        print(f"Log file: {logfile}")
        logfile.parent.mkdir(parents=True, exist_ok=True)

    log_cm = open(logfile, "w", encoding="utf-8") if logfile is not None else nullcontext()
    with log_cm as logf:
        try:
            return solve_one(config, rng=rng, seed=seed, logf=logf)
        except KeyboardInterrupt:
            _log("Solver interrupted by user.", logf, echo=True)
            sys.exit(1)


def solve_one(
    config: SolverConfig,
    *,
    rng: random.Random,
    seed: int,
    logf: TextIO | None,
) -> SolveResult:
    """Solve a fresh grid and log the run.

    Args:
        config (SolverConfig): The configuration for the run.
        rng (random.Random): Random source, created from `seed`.
        seed (int): Seed of `rng`, for the log.
        logf: File object to log the solving process, or None.
    """
    grid = Grid(config.grid_size)

    if logf is not None:
        print("Solver config:", file=logf, flush=True)
        pprint(config.model_dump(), stream=logf, width=120)
    _log(f"Grid size: {grid.size}x{grid.size}", logf)
    _log(f"Seed: {seed}", logf)
    start_time_str = datetime.fromtimestamp(time()).astimezone().strftime(TIMESTAMP_FMT)
    _log(f"Start time: {start_time_str}", logf)
    _log("", logf)

    result = solve(
        grid,
        rng,
        seed=seed,
        logf=logf,
        max_propagation_sweeps=config.max_propagation_sweeps,
        report_interval=config.report_interval,
        print_progress=config.print_progress,
    )

    _log("", logf)
    if result.solved:
        valid = validate_grid(result.grid)
        _log(f"Solution found! (valid: {valid})", logf)
    else:
        _log(f"Contradiction at {result.contradiction}, no solution.", logf)
        _log("Uncertainty map (-1 marks a contradiction):", logf)
        _log(np.array2string(result.grid.uncertainty_map()), logf)
    _log(
        f"Collapses: {result.stats.collapses:,}, sweeps: {result.stats.sweeps:,}, "
        f"time taken: {time_str(result.stats.elapsed)}",
        logf,
    )
    _log("Final grid:", logf)
    _log(str(result.grid), logf)

    return result
