"""
Fit N square covers onto a near-square grid for a given canvas height.
"""

from dataclasses import dataclass, field


DEFAULT_CANVAS_HEIGHT = 2160


@dataclass(frozen=True)
class GridTile:
    """Grid size in tiles (columns x rows)."""
    width: int
    height: int

    @property
    def capacity(self) -> int:
        return self.width * self.height

    def __str__(self) -> str:
        return f"{self.width}x{self.height}"


@dataclass(frozen=True)
class TilePlacement:
    """Where one cover goes on the canvas."""
    index: int
    column: int
    row: int
    x: int
    y: int
    size: int


@dataclass
class Layout:
    """A complete collage plan."""
    tile: GridTile
    edge: int  # pixel edge of one tile, 0 for an empty layout
    canvas_height: int
    placements: list = field(default_factory=list)

    @property
    def canvas_width(self) -> int:
        return self.tile.width * self.edge


def solve_grid(count: int) -> GridTile:
    """
    Find a near-square grid that holds count tiles.

    Starting from one column, the row count is recomputed as count // width
    while the width grows, stopping once rows <= columns. The result leans
    slightly wider than tall. count == 0 gives a 2x0 grid.
    """
    if count < 0:
        raise ValueError(f"Item count must be non-negative, got {count}")

    width, height = 1, 2
    while height > width:
        height = count // width
        width += 1

    # At the stop, rows >= columns - 2 so the leftover never exceeds a row
    return GridTile(width, height)


def tile_geometry(tile: GridTile, canvas_height: int) -> int:
    """Pixel edge of one square tile so that all rows fit canvas_height."""
    if tile.height <= 0:
        raise ValueError(f"Grid {tile} has no rows")
    edge = canvas_height // tile.height
    if edge < 1:
        raise ValueError(f"Canvas height {canvas_height} is smaller than {tile.height} rows")
    return edge


def tile_placements(count: int, tile: GridTile, edge: int) -> list[TilePlacement]:
    """Row-major positions for the first count tiles."""
    if count > tile.capacity:
        raise ValueError(f"Grid {tile} cannot hold {count} tiles")
    placements = []
    for i in range(count):
        row, column = divmod(i, tile.width)
        placements.append(TilePlacement(i, column, row, column * edge, row * edge, edge))
    return placements


def plan_layout(count: int, canvas_height: int = DEFAULT_CANVAS_HEIGHT) -> Layout:
    """
    Solve the grid and place every tile.

    Zero items give an empty layout (edge 0, no placements).
    """
    tile = solve_grid(count)
    if count == 0:
        return Layout(tile=tile, edge=0, canvas_height=canvas_height)

    edge = tile_geometry(tile, canvas_height)
    return Layout(
        tile=tile,
        edge=edge,
        canvas_height=canvas_height,
        placements=tile_placements(count, tile, edge),
    )
