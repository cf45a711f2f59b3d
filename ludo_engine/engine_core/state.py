"""
Game State - Immutable record of a single match.

Design principles:
- Immutable: transitions return a new GameState, never mutate one
- Serializable: to_dict/from_dict use the integer position codes
- Explicit: every field the rules read lives here, nothing hidden
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType
from typing import Any, Iterable, Mapping, NamedTuple, Sequence
import random

from .errors import InsufficientPlayers
from .position import (
    COLORS,
    PIECES_PER_PLAYER,
    Color,
    Piece,
)


MIN_PLAYERS = 2
MAX_PLAYERS = 4


class GameStatus(str, Enum):
    """Match lifecycle."""
    WAITING = "waiting"
    PLAYING = "playing"
    FINISHED = "finished"


class PlayerSeat(NamedTuple):
    """A player identifier bound to a color."""
    id: str
    color: Color


def _yard_pieces() -> tuple[Piece, ...]:
    return tuple(Piece.in_yard() for _ in range(PIECES_PER_PLAYER))


@dataclass(frozen=True)
class GameState:
    """
    Complete match state at a point in time.

    This is the value the rules engine reads and returns. The turn belongs
    to order[turn_index]; dice is None until that player rolls.
    """
    status: GameStatus = GameStatus.WAITING
    order: tuple[str, ...] = ()
    colors: Mapping[str, Color] = field(default_factory=dict)
    turn_index: int = 0
    dice: int | None = None
    positions: Mapping[str, tuple[Piece, ...]] = field(default_factory=dict)
    winners: tuple[str, ...] = ()

    def __post_init__(self):
        # Each state owns read-only copies of its maps
        object.__setattr__(self, "colors", MappingProxyType(dict(self.colors)))
        object.__setattr__(self, "positions", MappingProxyType(dict(self.positions)))

    @property
    def current_player_id(self) -> str | None:
        """Player whose turn it is, or None for an empty roster."""
        if not self.order:
            return None
        return self.order[self.turn_index]

    @property
    def is_playing(self) -> bool:
        return self.status == GameStatus.PLAYING

    @property
    def num_players(self) -> int:
        return len(self.order)

    def color_of(self, player_id: str) -> Color:
        return self.colors[player_id]

    def pieces_of(self, player_id: str) -> tuple[Piece, ...]:
        return self.positions[player_id]

    def codes_of(self, player_id: str) -> list[int]:
        """Integer position codes of a player's pieces."""
        return [piece.code for piece in self.positions[player_id]]

    def with_piece(self, player_id: str, slot: int, piece: Piece) -> GameState:
        """Return new state with one piece replaced."""
        pieces = list(self.positions[player_id])
        pieces[slot] = piece
        new_positions = dict(self.positions)
        new_positions[player_id] = tuple(pieces)
        return self._copy_with(positions=new_positions)

    def _copy_with(self, **kwargs) -> GameState:
        """Create a copy with some fields replaced."""
        return replace(self, **kwargs)

    # =========================================================================
    # Interchange
    # =========================================================================

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the documented interchange shape."""
        return {
            "status": self.status.value,
            "order": list(self.order),
            "colors": {pid: color.value for pid, color in self.colors.items()},
            "turnIndex": self.turn_index,
            "dice": self.dice,
            "positions": {pid: self.codes_of(pid) for pid in self.positions},
            "winners": list(self.winners),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> GameState:
        """
        Build a state from its interchange shape.

        Raises ValueError on malformed input rather than producing a
        state the rules engine cannot reason about.
        """
        order = tuple(data.get("order") or ())
        if len(set(order)) != len(order):
            raise ValueError("Player ids in order must be unique")

        colors = {pid: Color(color) for pid, color in (data.get("colors") or {}).items()}
        positions = {}
        for pid, codes in (data.get("positions") or {}).items():
            if not isinstance(codes, (list, tuple)) or len(codes) != PIECES_PER_PLAYER:
                raise ValueError(f"Player {pid} must have {PIECES_PER_PLAYER} pieces")
            positions[pid] = tuple(Piece.from_code(code) for code in codes)

        if not (set(order) == set(colors) == set(positions)):
            raise ValueError("order, colors and positions must name the same players")
        if len(set(colors.values())) != len(colors):
            raise ValueError("Colors must be unique per player")

        turn_index = data.get("turnIndex", 0)
        if isinstance(turn_index, bool) or not isinstance(turn_index, int):
            raise ValueError(f"turnIndex must be an integer, got {turn_index!r}")
        if order and not 0 <= turn_index < len(order):
            raise ValueError(f"turnIndex {turn_index} out of range for {len(order)} players")

        dice = data.get("dice")
        if dice is not None:
            if isinstance(dice, bool) or not isinstance(dice, int) or not 1 <= dice <= 6:
                raise ValueError(f"dice must be 1..6 or null, got {dice!r}")

        winners = tuple(data.get("winners") or ())
        if len(set(winners)) != len(winners) or not set(winners) <= set(order):
            raise ValueError("winners must be distinct players from order")

        return cls(
            status=GameStatus(data.get("status", GameStatus.WAITING.value)),
            order=order,
            colors=colors,
            turn_index=turn_index,
            dice=dice,
            positions=positions,
            winners=winners,
        )


# =============================================================================
# Construction helpers
# =============================================================================

def create_initial_state(players: Iterable[PlayerSeat | tuple[str, Color | str]]) -> GameState:
    """
    Create a waiting state for an ordered roster.

    Every piece starts in the yard; seating follows the given order.
    """
    seats = [PlayerSeat(pid, Color(color)) for pid, color in players]

    ids = [seat.id for seat in seats]
    if len(set(ids)) != len(ids):
        raise ValueError("Player ids must be unique")
    seat_colors = [seat.color for seat in seats]
    if len(set(seat_colors)) != len(seat_colors):
        raise ValueError("Colors must be unique per player")

    return GameState(
        status=GameStatus.WAITING,
        order=tuple(ids),
        colors={seat.id: seat.color for seat in seats},
        turn_index=0,
        dice=None,
        positions={seat.id: _yard_pieces() for seat in seats},
        winners=(),
    )


def next_color_for_join(colors_in_use: Iterable[Color | str]) -> Color | None:
    """First color in fixed order not yet taken, or None when all four are."""
    taken = {Color(c) for c in colors_in_use}
    for color in COLORS:
        if color not in taken:
            return color
    return None


def assign_colors(player_ids: Sequence[str]) -> list[PlayerSeat]:
    """Bind colors to players by registration order."""
    seats: list[PlayerSeat] = []
    for pid in player_ids:
        color = next_color_for_join(seat.color for seat in seats)
        if color is None:
            raise InsufficientPlayers(
                f"At most {MAX_PLAYERS} players can be seated",
                context={"players": len(player_ids)},
            )
        seats.append(PlayerSeat(pid, color))
    return seats


def start_match(player_ids: Sequence[str], rng: random.Random | None = None) -> GameState:
    """
    Start a match for players listed in registration order.

    Colors follow registration order; seating is then shuffled uniformly
    while each player keeps the color assigned to them.
    """
    if not MIN_PLAYERS <= len(player_ids) <= MAX_PLAYERS:
        raise InsufficientPlayers(
            f"Need {MIN_PLAYERS}-{MAX_PLAYERS} players to start",
            context={"players": len(player_ids)},
        )
    if len(set(player_ids)) != len(player_ids):
        raise ValueError("Player ids must be unique")

    rng = rng or random.SystemRandom()
    seats = assign_colors(player_ids)
    rng.shuffle(seats)

    state = create_initial_state(seats)
    return state._copy_with(status=GameStatus.PLAYING)
