"""
Board Geometry - Static layout of ring, home lanes and yards.

The board is a 15x15 grid. The ring runs clockwise around the cross, 13
cells per arm quarter, starting at red's entry cell on the top arm. Each
other color's quarter is red's quarter rotated by 90 degrees, so the
layout has the same 4-fold symmetry as the start offsets.

Geometry is presentation data only. Rules depend on the index math in
position.py, never on coordinates.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, NamedTuple

from .position import (
    COLORS,
    HOME_LANE_SIZE,
    Color,
    Piece,
    PieceKind,
    absolute_start_index,
    ring_index_to_absolute,
)


GRID_CELLS = 15
CELL_RADIUS_RATIO = 0.38

# Red's quarter of the ring, starting at its entry cell
_RED_RING_QUARTER = (
    [(8, y) for y in range(0, 6)]
    + [(x, 6) for x in range(9, 15)]
    + [(14, 7)]
)
_RED_HOME_LANE = [(7, y) for y in range(1, 7)]
_RED_YARD = [(10, 1), (13, 1), (10, 4), (13, 4)]


class Point(NamedTuple):
    """Center and radius of a drawable cell."""
    x: float
    y: float
    r: float


@dataclass(frozen=True)
class BoardGeometry:
    """
    Coordinates for every cell on the board.

    path: 52 ring cells indexed by absolute ring index
    home: 6 home lane cells per color, index 5 nearest the center
    yard: 4 yard slots per color, one per piece slot
    start_cell: each color's entry cell (path[start offset])
    """
    size: float
    cell_size: float
    path: tuple[Point, ...]
    home: dict[Color, tuple[Point, ...]]
    yard: dict[Color, tuple[Point, ...]]
    start_cell: dict[Color, Point]

    def to_dict(self) -> dict[str, Any]:
        return {
            "size": self.size,
            "cellSize": self.cell_size,
            "path": [p._asdict() for p in self.path],
            "home": {c.value: [p._asdict() for p in pts] for c, pts in self.home.items()},
            "yard": {c.value: [p._asdict() for p in pts] for c, pts in self.yard.items()},
            "startCell": {c.value: p._asdict() for c, p in self.start_cell.items()},
        }


def _rotate(cell: tuple[int, int], quarter_turns: int) -> tuple[int, int]:
    """Rotate a grid cell clockwise around the board center."""
    x, y = cell
    for _ in range(quarter_turns):
        x, y = GRID_CELLS - 1 - y, x
    return x, y


def build_board_geometry(size: float = 600) -> BoardGeometry:
    """Build the board layout for a square canvas of the given side length."""
    if size <= 0:
        raise ValueError(f"Board size must be positive, got {size}")

    cs = size / GRID_CELLS

    def to_point(cell: tuple[int, int]) -> Point:
        gx, gy = cell
        return Point(x=gx * cs + cs * 0.5, y=gy * cs + cs * 0.5, r=cs * CELL_RADIUS_RATIO)

    ring_cells = [
        _rotate(cell, turn)
        for turn in range(len(COLORS))
        for cell in _RED_RING_QUARTER
    ]
    path = tuple(to_point(cell) for cell in ring_cells)

    home = {}
    yard = {}
    start_cell = {}
    for turn, color in enumerate(COLORS):
        home[color] = tuple(to_point(_rotate(cell, turn)) for cell in _RED_HOME_LANE)
        yard[color] = tuple(to_point(_rotate(cell, turn)) for cell in _RED_YARD)
        start_cell[color] = path[absolute_start_index(color)]

    return BoardGeometry(
        size=size,
        cell_size=cs,
        path=path,
        home=home,
        yard=yard,
        start_cell=start_cell,
    )


def piece_point(geometry: BoardGeometry, color: Color | str, piece: Piece, slot: int) -> Point:
    """Where a piece is drawn: its yard slot, ring cell or home lane cell."""
    color = Color(color)
    if piece.kind == PieceKind.YARD:
        return geometry.yard[color][slot]
    if piece.kind == PieceKind.RING:
        return geometry.path[ring_index_to_absolute(color, piece.offset)]
    if piece.kind == PieceKind.HOME_LANE:
        return geometry.home[color][piece.offset]
    # Finished pieces rest on the last home cell
    return geometry.home[color][HOME_LANE_SIZE - 1]
