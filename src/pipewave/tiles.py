"""Module for tile-related classes and functions.

A tile is one of twelve pipe segments.  Each tile has up to four "arms" (left, right, top,
bottom); two tiles fit across a shared edge when both or neither of them has an arm on it.
"""

from collections.abc import Iterable
from enum import IntEnum
from typing import NamedTuple

from bitarray import bitarray
from bitarray.util import zeros


class TileState(IntEnum):
    """Enumeration of the tile orientations.

    The value of each member is its bit position in a candidate mask.
    Names list the arms of the tile: B(ottom), L(eft), T(op), R(ight).
    """

    EMPTY = 0
    BL = 1
    BLT = 2
    BLR = 3
    BT = 4
    BTR = 5
    BR = 6
    LT = 7
    LTR = 8
    LR = 9
    TR = 10
    BLTR = 11

    @property
    def connects_left(self) -> bool:
        """Whether the tile has an arm on its left edge."""
        return _TILE_SPECS[self].left

    @property
    def connects_right(self) -> bool:
        """Whether the tile has an arm on its right edge."""
        return _TILE_SPECS[self].right

    @property
    def connects_top(self) -> bool:
        """Whether the tile has an arm on its top edge."""
        return _TILE_SPECS[self].top

    @property
    def connects_bottom(self) -> bool:
        """Whether the tile has an arm on its bottom edge."""
        return _TILE_SPECS[self].bottom

    @property
    def weight(self) -> int:
        """Relative weight of the tile when an undetermined cell is sampled."""
        return _TILE_SPECS[self].weight


class Direction(IntEnum):
    """Side of a cell on which a neighbouring cell lies."""

    LEFT = 0
    RIGHT = 1
    TOP = 2
    BOTTOM = 3


class TileSpec(NamedTuple):
    """Fixed per-tile data."""

    left: bool
    right: bool
    top: bool
    bottom: bool
    weight: int


_TILE_SPECS: dict[TileState, TileSpec] = {
    #                          left   right  top    bottom weight
    TileState.EMPTY: TileSpec(False, False, False, False, 5),
    TileState.BL: TileSpec(True, False, False, True, 5),
    TileState.BLT: TileSpec(True, False, True, True, 5),
    TileState.BLR: TileSpec(True, True, False, True, 2),
    TileState.BT: TileSpec(False, False, True, True, 3),
    TileState.BTR: TileSpec(False, True, True, True, 2),
    TileState.BR: TileSpec(False, True, False, True, 3),
    TileState.LT: TileSpec(True, False, True, False, 3),
    TileState.LTR: TileSpec(True, True, True, False, 2),
    TileState.LR: TileSpec(True, True, False, False, 3),
    TileState.TR: TileSpec(False, True, True, False, 3),
    TileState.BLTR: TileSpec(True, True, True, True, 1),
}

if set(_TILE_SPECS) != set(TileState):
    raise RuntimeError(f"Missing tile specs for: {set(TileState) - set(_TILE_SPECS)}")


def all_tiles() -> list[TileState]:
    """Return every tile, in bit-position order."""
    return list(TileState)


def tile_count() -> int:
    """Return the number of distinct tiles."""
    return len(TileState)


def tile_weight(tile: TileState) -> int:
    """Return the sampling weight of `tile`."""
    return _TILE_SPECS[tile].weight


def fits_left(a: TileState, b: TileState) -> bool:
    """Whether `a` fits with `b` lying to its left."""
    return a.connects_left == b.connects_right


def fits_bottom(a: TileState, b: TileState) -> bool:
    """Whether `a` fits with `b` lying below it."""
    return a.connects_bottom == b.connects_top


def fits_right(a: TileState, b: TileState) -> bool:
    """Whether `a` fits with `b` lying to its right."""
    return fits_left(b, a)


def fits_top(a: TileState, b: TileState) -> bool:
    """Whether `a` fits with `b` lying above it."""
    return fits_bottom(b, a)


_FITS_BY_DIRECTION = {
    Direction.LEFT: fits_left,
    Direction.RIGHT: fits_right,
    Direction.TOP: fits_top,
    Direction.BOTTOM: fits_bottom,
}


def fits(a: TileState, b: TileState, direction: Direction) -> bool:
    """Whether `a` fits with `b` lying on side `direction` of it."""
    return _FITS_BY_DIRECTION[direction](a, b)


def tiles_to_mask(tiles: Iterable[TileState]) -> bitarray:
    """Convert a collection of tiles to a candidate mask."""
    mask = zeros(tile_count())
    for tile in tiles:
        mask[tile] = 1
    return mask


def mask_to_tiles(mask: bitarray) -> list[TileState]:
    """Convert a candidate mask to the list of tiles it contains."""
    return [TileState(i) for i in mask.search(1)]


def _build_fits_masks() -> list[list[bitarray]]:
    masks: list[list[bitarray]] = []
    for direction in Direction:
        masks.append(
            [tiles_to_mask(b for b in TileState if fits(a, b, direction)) for a in TileState]
        )
    return masks


FitsMasks = list[list[bitarray]]
"""Element [direction][tile] is a mask of the neighbour tiles that `tile` fits in `direction`."""

FITS_MASKS: FitsMasks = _build_fits_masks()
