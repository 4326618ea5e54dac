"""Module defining the CellDomain class representing the possible tiles of one grid cell."""

import random
from collections.abc import Iterable
from enum import IntEnum

from bitarray import bitarray
from bitarray.util import ones, zeros

from pipewave.tiles import TileState, mask_to_tiles, tile_count, tiles_to_mask


class ContradictionError(Exception):
    """Raised when a cell has no remaining valid tile."""

    def __init__(self, position: tuple[int, int] | None = None) -> None:
        self.position = position
        """The (x, y) coordinate of the offending cell, if known."""

        if position is None:
            super().__init__("no tile fits a cell")
        else:
            super().__init__(f"no tile fits cell {position}")


class DomainState(IntEnum):
    """Enumeration of the states a cell can be in."""

    UNDETERMINED = 0
    FIXED = 1
    CONTRADICTION = 2


class CellDomain:
    """The set of tiles still possible for a single cell.

    The `state` tag decides how the cell is interpreted:

    - UNDETERMINED: `candidates` holds the tiles still possible.
    - FIXED: the cell is resolved; `candidates` holds exactly the fixed tile.
    - CONTRADICTION: no tile is possible; `candidates` is empty.

    A new CellDomain is undetermined over every tile.
    """

    def __init__(self) -> None:
        self.state: DomainState = DomainState.UNDETERMINED
        """Tag describing how `candidates` should be read."""

        self.candidates: bitarray = ones(tile_count())
        """Bitarray of possible tiles; bit `i` is set if `TileState(i)` is possible."""

    @classmethod
    def undetermined(cls, tiles: Iterable[TileState]) -> "CellDomain":
        """Create a cell over the given tiles.

        No tiles give a contradiction and a single tile gives a fixed cell, so an undetermined
        cell always has at least two candidates.
        """
        domain = cls()
        domain.candidates = tiles_to_mask(tiles)
        n_candidates = domain.candidates.count()
        if n_candidates == 0:
            domain._contradict()
        elif n_candidates == 1:
            domain.state = DomainState.FIXED
        return domain

    @classmethod
    def fixed(cls, tile: TileState) -> "CellDomain":
        """Create a cell fixed to `tile`."""
        domain = cls()
        domain._fix(tile)
        return domain

    @classmethod
    def contradiction(cls) -> "CellDomain":
        """Create a cell in the contradiction state."""
        domain = cls()
        domain._contradict()
        return domain

    @property
    def is_undetermined(self) -> bool:
        return self.state == DomainState.UNDETERMINED

    @property
    def is_fixed(self) -> bool:
        return self.state == DomainState.FIXED

    @property
    def is_contradiction(self) -> bool:
        return self.state == DomainState.CONTRADICTION

    @property
    def tile(self) -> TileState | None:
        """The fixed tile, or None if the cell is not fixed."""
        if not self.is_fixed:
            return None
        index = self.candidates.find(1)
        # Disable assertion in production for efficiency
        assert index != -1, "Fixed cell has no bit set in candidates."
        return TileState(index)

    def tiles(self) -> list[TileState]:
        """Get the tiles still possible for this cell (the fixed tile for a fixed cell)."""
        return mask_to_tiles(self.candidates)

    def uncertainty(self) -> int:
        """Return the number of remaining candidates, or 0 if the cell is fixed.

        Raises:
            ContradictionError: If the cell is in the contradiction state.
        """
        if self.state == DomainState.CONTRADICTION:
            raise ContradictionError()
        if self.state == DomainState.FIXED:
            return 0
        return self.candidates.count()

    def collapse(self, rng: random.Random) -> None:
        """Fix the cell to one of its candidates, chosen by tile weight.

        Does nothing if the cell is already fixed or in contradiction.  An undetermined cell
        without candidates becomes a contradiction.

        Args:
            rng: Random source used for the weighted draw.
        """
        if self.state != DomainState.UNDETERMINED:
            return
        tiles = self.tiles()
        if not tiles:
            self._contradict()
            return
        tile = rng.choices(tiles, weights=[t.weight for t in tiles], k=1)[0]
        self._fix(tile)

    def restrict(self, allowed: bitarray) -> bool:
        """Keep only the candidates that are set in `allowed`.

        A fixed cell whose tile is not allowed becomes a contradiction.  An undetermined cell
        becomes a contradiction if no candidate is left, and is fixed if exactly one is left.

        Args:
            allowed: Mask of tiles that satisfy the constraints on this cell.

        Returns:
            Whether the cell changed.

        Raises:
            ValueError: If the mask has the wrong length.
        """
        if len(allowed) != tile_count():
            raise ValueError(f"Mask length {len(allowed)} does not match tile count.")
        if self.state == DomainState.CONTRADICTION:
            return False

        remaining = self.candidates & allowed
        n_remaining = remaining.count()
        if self.state == DomainState.FIXED:
            if n_remaining == 0:
                self._contradict()
                return True
            return False

        if n_remaining == 0:
            self._contradict()
        elif n_remaining == 1:
            self.state = DomainState.FIXED
            self.candidates = remaining
        else:
            if remaining == self.candidates:
                return False
            self.candidates = remaining
        return True

    def copy(self) -> "CellDomain":
        """Generate a copy of the cell."""
        domain = CellDomain()
        domain.state = self.state
        domain.candidates = self.candidates.copy()
        return domain

    def _fix(self, tile: TileState) -> None:
        self.state = DomainState.FIXED
        self.candidates = tiles_to_mask([tile])

    def _contradict(self) -> None:
        self.state = DomainState.CONTRADICTION
        self.candidates = zeros(tile_count())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CellDomain):
            return NotImplemented
        return self.state == other.state and self.candidates == other.candidates

    def __repr__(self) -> str:
        if self.is_fixed:
            return f"CellDomain.fixed({self.tile!r})"
        if self.is_contradiction:
            return "CellDomain.contradiction()"
        return f"CellDomain.undetermined({self.tiles()!r})"
