"""
Position Encoding - Colors, ring index math and piece positions.

Pieces travel a shared 52-cell ring, then turn into a private 6-cell home
lane. Internally a piece is a Piece(kind, offset) variant. The integer code
is only used at the interchange boundary:

    -1          yard
    0..51       offset along the color's own ring path
    100..106    home lane offset + 100 (106 = finished)
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, NamedTuple

if TYPE_CHECKING:
    from .state import GameState


RING_SIZE = 52
HOME_LANE_SIZE = 6
PIECES_PER_PLAYER = 4

YARD_CODE = -1
HOME_CODE_BASE = 100
FINISHED_CODE = HOME_CODE_BASE + HOME_LANE_SIZE  # 106


class Color(str, Enum):
    """Player colors, in join-assignment order."""
    RED = "red"
    BLUE = "blue"
    YELLOW = "yellow"
    GREEN = "green"


COLORS: tuple[Color, ...] = (Color.RED, Color.BLUE, Color.YELLOW, Color.GREEN)

COLOR_HEX = {
    Color.RED: "#ef4444",
    Color.BLUE: "#3b82f6",
    Color.YELLOW: "#eab308",
    Color.GREEN: "#22c55e",
}

# Entry cell of each color on the shared ring
START_OFFSET = {
    Color.RED: 0,
    Color.BLUE: 13,
    Color.YELLOW: 26,
    Color.GREEN: 39,
}

# Entry cells plus one star per quarter
SAFE_CELLS = frozenset({0, 8, 13, 21, 26, 34, 39, 47})


class PieceKind(Enum):
    """Where a piece currently is."""
    YARD = "yard"
    RING = "ring"
    HOME_LANE = "home_lane"
    FINISHED = "finished"


@dataclass(frozen=True)
class Piece:
    """
    Position of a single piece.

    offset is the relative ring offset (0..51) for RING pieces and the
    home lane offset (0..5) for HOME_LANE pieces; 0 otherwise.
    """
    kind: PieceKind = PieceKind.YARD
    offset: int = 0

    def __post_init__(self):
        if self.kind == PieceKind.RING and not 0 <= self.offset < RING_SIZE:
            raise ValueError(f"Ring offset out of range: {self.offset}")
        if self.kind == PieceKind.HOME_LANE and not 0 <= self.offset < HOME_LANE_SIZE:
            raise ValueError(f"Home lane offset out of range: {self.offset}")
        if self.kind in (PieceKind.YARD, PieceKind.FINISHED) and self.offset != 0:
            raise ValueError(f"{self.kind.value} piece carries no offset")

    @classmethod
    def in_yard(cls) -> Piece:
        return cls(PieceKind.YARD)

    @classmethod
    def on_ring(cls, offset: int) -> Piece:
        return cls(PieceKind.RING, offset)

    @classmethod
    def in_home_lane(cls, offset: int) -> Piece:
        return cls(PieceKind.HOME_LANE, offset)

    @classmethod
    def finished(cls) -> Piece:
        return cls(PieceKind.FINISHED)

    @classmethod
    def from_code(cls, code: int) -> Piece:
        """Decode the integer interchange code."""
        if isinstance(code, bool) or not isinstance(code, int):
            raise ValueError(f"Position code must be an integer, got {code!r}")
        if code == YARD_CODE:
            return cls.in_yard()
        if 0 <= code < RING_SIZE:
            return cls.on_ring(code)
        if code == FINISHED_CODE:
            return cls.finished()
        if HOME_CODE_BASE <= code < FINISHED_CODE:
            return cls.in_home_lane(code - HOME_CODE_BASE)
        raise ValueError(f"Invalid position code: {code}")

    @property
    def code(self) -> int:
        """Encode to the integer interchange code."""
        if self.kind == PieceKind.YARD:
            return YARD_CODE
        if self.kind == PieceKind.RING:
            return self.offset
        if self.kind == PieceKind.HOME_LANE:
            return HOME_CODE_BASE + self.offset
        return FINISHED_CODE

    @property
    def is_finished(self) -> bool:
        return self.kind == PieceKind.FINISHED

    def __repr__(self) -> str:
        return f"Piece({self.code})"


class Occupant(NamedTuple):
    """A piece standing on a ring cell."""
    player_id: str
    piece_slot: int
    color: Color


def absolute_start_index(color: Color | str) -> int:
    """Absolute ring index of a color's entry cell (0/13/26/39)."""
    return START_OFFSET[Color(color)]


def ring_index_to_absolute(color: Color | str, relative_offset: int) -> int:
    """Map a color-relative ring offset to the absolute ring cell."""
    if not 0 <= relative_offset < RING_SIZE:
        raise ValueError(f"Relative offset out of range: {relative_offset}")
    return (absolute_start_index(color) + relative_offset) % RING_SIZE


def is_safe_cell(index: int) -> bool:
    return index in SAFE_CELLS


def occupancy(state: GameState) -> dict[int, list[Occupant]]:
    """
    Map each occupied absolute ring index to the pieces standing on it.

    Pieces in the yard or home lane are not on the ring and are skipped.
    """
    cells: dict[int, list[Occupant]] = {}
    for player_id, pieces in state.positions.items():
        color = state.colors[player_id]
        for slot, piece in enumerate(pieces):
            if piece.kind != PieceKind.RING:
                continue
            index = ring_index_to_absolute(color, piece.offset)
            cells.setdefault(index, []).append(Occupant(player_id, slot, color))
    return cells
