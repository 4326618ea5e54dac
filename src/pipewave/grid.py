"""Classes and functions for representing the tile grid."""

import random
from collections.abc import Iterator

import numpy as np
from bitarray import bitarray
from bitarray.util import count_and, zeros

from pipewave.domain import CellDomain, ContradictionError
from pipewave.render import grid_to_str
from pipewave.tiles import FITS_MASKS, Direction, tile_count

OFFSETS: dict[Direction, tuple[int, int]] = {
    Direction.LEFT: (-1, 0),
    Direction.RIGHT: (1, 0),
    Direction.TOP: (0, -1),
    Direction.BOTTOM: (0, 1),
}
"""(dx, dy) offset of the neighbour on each side of a cell.  Rows grow downwards."""


class OutOfBoundsError(IndexError):
    """Raised when a coordinate lies outside the grid."""

    def __init__(self, x: int, y: int, size: int) -> None:
        super().__init__(f"Coordinate ({x}, {y}) is outside the {size}x{size} grid.")
        self.x = x
        self.y = y


class Grid:
    """Store a square matrix of CellDomain objects as a 1D list.

    Cells are addressed by (x, y), with x the column and y the row.  The grid owns its cells;
    `get` returns the cell itself, which may be modified in place.
    """

    def __init__(self, size: int) -> None:
        if size < 1:
            raise ValueError(f"Grid size must be positive, got {size}.")

        self.size: int = size
        """Number of rows (and columns) of the grid."""

        self._cells: list[CellDomain] = [CellDomain() for _ in range(size * size)]

        self.last_collapsed: tuple[int, int] | None = None
        """Coordinate of the cell fixed by the most recent `collapse_lowest_uncertainty_cell`."""

    def copy(self) -> "Grid":
        """Generate a copy of the grid."""
        grid = Grid(self.size)
        grid._cells = [cell.copy() for cell in self._cells]
        grid.last_collapsed = self.last_collapsed
        return grid

    def get_1d_idx(self, x: int, y: int) -> int:
        """Convert an (x, y) coordinate to a 1D index.

        Raises:
            OutOfBoundsError: If the coordinate lies outside the grid.
        """
        if not (0 <= x < self.size and 0 <= y < self.size):
            raise OutOfBoundsError(x, y, self.size)
        return y * self.size + x

    def get_2d_idx(self, one_d_idx: int) -> tuple[int, int]:
        """Convert a 1D index to an (x, y) coordinate."""
        y, x = divmod(one_d_idx, self.size)
        return x, y

    def get(self, x: int, y: int) -> CellDomain:
        """Get the cell at (x, y).

        Raises:
            OutOfBoundsError: If the coordinate lies outside the grid.
        """
        return self._cells[self.get_1d_idx(x, y)]

    def set(self, x: int, y: int, domain: CellDomain) -> None:
        """Replace the cell at (x, y).

        Raises:
            OutOfBoundsError: If the coordinate lies outside the grid.
        """
        self._cells[self.get_1d_idx(x, y)] = domain

    def __getitem__(self, idx: tuple[int, int]) -> CellDomain:
        """Get a cell by (x, y) coordinate."""
        if isinstance(idx, tuple) and len(idx) == 2:
            return self.get(*idx)
        raise TypeError("Grid indices must be (x, y) tuples.")

    def __setitem__(self, idx: tuple[int, int], domain: CellDomain) -> None:
        """Set a cell by (x, y) coordinate."""
        if isinstance(idx, tuple) and len(idx) == 2:
            self.set(*idx, domain)
            return
        raise TypeError("Grid indices must be (x, y) tuples.")

    def cells(self) -> Iterator[tuple[int, int, CellDomain]]:
        """Iterate over all cells in row-major order, as (x, y, cell)."""
        for idx, cell in enumerate(self._cells):
            x, y = self.get_2d_idx(idx)
            yield x, y, cell

    def neighbor_positions(self, x: int, y: int) -> dict[Direction, tuple[int, int]]:
        """Get the coordinates of the neighbours of (x, y).

        Sides on the edge of the grid have no neighbour and are left out.
        """
        positions: dict[Direction, tuple[int, int]] = {}
        for direction, (dx, dy) in OFFSETS.items():
            nx, ny = x + dx, y + dy
            if 0 <= nx < self.size and 0 <= ny < self.size:
                positions[direction] = (nx, ny)
        return positions

    def neighbors(self, x: int, y: int) -> dict[Direction, CellDomain | None]:
        """Get the neighbouring cells of (x, y), with None for sides on the grid edge."""
        positions = self.neighbor_positions(x, y)
        return {
            direction: self.get(*positions[direction]) if direction in positions else None
            for direction in Direction
        }

    def total_uncertainty(self) -> int:
        """Sum of the uncertainty of all cells.

        Raises:
            ContradictionError: If any cell is in the contradiction state.
        """
        total = 0
        for idx, cell in enumerate(self._cells):
            try:
                total += cell.uncertainty()
            except ContradictionError:
                raise ContradictionError(self.get_2d_idx(idx)) from None
        return total

    def has_undetermined(self) -> bool:
        return any(cell.is_undetermined for cell in self._cells)

    def has_contradiction(self) -> bool:
        return any(cell.is_contradiction for cell in self._cells)

    def is_fully_determined(self) -> bool:
        """Whether every cell is fixed."""
        return all(cell.is_fixed for cell in self._cells)

    def find_contradiction(self) -> tuple[int, int] | None:
        """Return the first cell in row-major order that is in contradiction, if any."""
        for x, y, cell in self.cells():
            if cell.is_contradiction:
                return x, y
        return None

    def uncertainty_map(self) -> np.ndarray:
        """Return the uncertainty of every cell as an array indexed [y, x].

        Cells in contradiction are reported as -1.
        """
        result = np.full((self.size, self.size), -1, dtype=int)
        for x, y, cell in self.cells():
            if not cell.is_contradiction:
                result[y, x] = cell.uncertainty()
        return result

    def collapse_lowest_uncertainty_cell(self, rng: random.Random) -> bool:
        """Fix one of the undetermined cells with the lowest uncertainty.

        Ties are broken uniformly at random.

        Args:
            rng: Random source for the tie-break and the weighted tile draw.

        Returns:
            True if a cell was collapsed, False if every cell is already fixed.

        Raises:
            ContradictionError: If any cell is in the contradiction state.
        """
        minimum_uncertainty = tile_count() + 1
        minimum_idxs: list[int] = []

        for idx, cell in enumerate(self._cells):
            try:
                uncertainty = cell.uncertainty()
            except ContradictionError:
                raise ContradictionError(self.get_2d_idx(idx)) from None
            if uncertainty == 0:
                continue

            if uncertainty < minimum_uncertainty:
                minimum_idxs.clear()
                minimum_uncertainty = uncertainty
            if uncertainty == minimum_uncertainty:
                minimum_idxs.append(idx)

        if not minimum_idxs:
            return False

        idx = rng.choice(minimum_idxs)
        self._cells[idx].collapse(rng)
        self.last_collapsed = self.get_2d_idx(idx)
        return True

    def propagate(self) -> None:
        """Narrow every cell to the tiles compatible with its neighbours, in one sweep.

        Cells are visited row by row, left to right.  Changes made to a cell are visible to
        the cells visited after it in the same sweep.

        Raises:
            ContradictionError: If a visited cell or one of its neighbours is in the
                contradiction state.
        """
        for idx, cell in enumerate(self._cells):
            x, y = self.get_2d_idx(idx)
            if cell.is_contradiction:
                raise ContradictionError((x, y))

            constraints: list[tuple[Direction, bitarray]] = []
            for direction, (nx, ny) in self.neighbor_positions(x, y).items():
                neighbor = self._cells[ny * self.size + nx]
                if neighbor.is_contradiction:
                    raise ContradictionError((nx, ny))
                # Fixed neighbours hold exactly their tile in `candidates`
                constraints.append((direction, neighbor.candidates))

            cell.restrict(self._allowed_tiles(cell, constraints))

    @staticmethod
    def _allowed_tiles(cell: CellDomain, constraints: list[tuple[Direction, bitarray]]) -> bitarray:
        """Mask of the candidates of `cell` that fit at least one tile of every neighbour."""
        allowed = zeros(tile_count())
        for tile in cell.tiles():
            if all(
                count_and(FITS_MASKS[direction][tile], neighbor_tiles) > 0
                for direction, neighbor_tiles in constraints
            ):
                allowed[tile] = 1
        return allowed

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Grid):
            return NotImplemented
        return self.size == other.size and self._cells == other._cells

    def __str__(self) -> str:
        """Returns a string representation of the grid."""
        return grid_to_str(self)
