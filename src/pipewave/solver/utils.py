"""Utility functions for the Pipewave solver."""

import random

from pipewave.grid import Grid
from pipewave.tiles import Direction, fits

TIMESTAMP_FMT = "%Y-%m-%d %H:%M:%S.%f %Z%z"

SEED_BITS = 32
"""Number of random bits in a generated seed."""


def time_str(seconds: float) -> str:
    """Convert a time duration in seconds to a human-readable string.

    Args:
        seconds: Time duration in seconds.

    Returns:
        A string formatted as "HH:MM:SS.ss".
    """
    hours, rem = divmod(seconds, 3600)
    minutes, secs = divmod(rem, 60)
    return f"{int(hours):02}:{int(minutes):02}:{secs:05.2f}"


def make_rng(seed: int | None = None) -> tuple[random.Random, int]:
    """Create the random source for a solve.

    Args:
        seed: Seed to use.  If None, a fresh seed is drawn from system entropy.

    Returns:
        The random source and the seed it was created with, so the run can be replayed.
    """
    if seed is None:
        seed = random.SystemRandom().getrandbits(SEED_BITS)
    return random.Random(seed), seed


def validate_grid(grid: Grid) -> bool:
    """Validate that the grid is solved: every cell is fixed and every pair of neighbours fits."""
    for x, y, cell in grid.cells():
        tile = cell.tile
        if tile is None:
            return False
        # Checking RIGHT and BOTTOM covers every adjacent pair once
        for direction in (Direction.RIGHT, Direction.BOTTOM):
            position = grid.neighbor_positions(x, y).get(direction)
            if position is None:
                continue
            other = grid.get(*position).tile
            if other is None or not fits(tile, other, direction):
                return False
    return True
