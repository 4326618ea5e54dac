"""Text rendering of cells and grids."""

from typing import TYPE_CHECKING

from pipewave.domain import CellDomain
from pipewave.tiles import TileState

if TYPE_CHECKING:
    from pipewave.grid import Grid

GLYPH_WIDTH = 3

GLYPHS: dict[TileState, str] = {
    TileState.EMPTY: "   ",
    TileState.BL: "━┓ ",
    TileState.BLT: "━┫ ",
    TileState.BLR: "━┳━",
    TileState.BT: " ┃ ",
    TileState.BTR: " ┣━",
    TileState.BR: " ┏━",
    TileState.LT: "━┛ ",
    TileState.LTR: "━┻━",
    TileState.LR: "━━━",
    TileState.TR: " ┗━",
    TileState.BLTR: "━╋━",
}

if set(GLYPHS) != set(TileState):
    raise RuntimeError(f"Missing glyphs for: {set(TileState) - set(GLYPHS)}")

CONTRADICTION_MARKER = " ! "


def domain_to_str(domain: CellDomain) -> str:
    """Render a cell as a fixed-width string.

    Fixed cells show their glyph, undetermined cells their number of candidates, and cells
    in contradiction a "!" marker.
    """
    if domain.is_contradiction:
        return CONTRADICTION_MARKER
    tile = domain.tile
    if tile is not None:
        return GLYPHS[tile]
    return str(domain.uncertainty()).center(GLYPH_WIDTH)


def grid_to_str(grid: "Grid") -> str:
    """Render a grid, one newline-terminated line per row."""
    lines = []
    for y in range(grid.size):
        lines.append("".join(domain_to_str(grid.get(x, y)) for x in range(grid.size)) + "\n")
    return "".join(lines)
