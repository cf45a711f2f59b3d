"""
Engine Core - Deterministic Ludo rules.

The engine is a set of pure functions over an immutable GameState:
1. Builds board geometry and maps ring offsets to cells
2. Creates and starts matches
3. Enumerates legal moves for a die roll
4. Applies rolls, moves and passes via the reducer
"""

from .action import Action, ActionResult, ActionType, Move, MoveKind, MoveResult
from .action_generator import has_legal_move, legal_moves
from .board import BoardGeometry, Point, build_board_geometry, piece_point
from .dice import Die, draw_die
from .errors import (
    AlreadyStarted,
    InsufficientPlayers,
    InvalidTransition,
    LudoError,
    MatchNotPlaying,
    NotYourTurn,
    RollRequired,
    RoomFull,
    RoomNotFound,
)
from .position import (
    COLORS,
    SAFE_CELLS,
    START_OFFSET,
    Color,
    Occupant,
    Piece,
    PieceKind,
    absolute_start_index,
    is_safe_cell,
    occupancy,
    ring_index_to_absolute,
)
from .reducer import Reducer, apply_action, apply_move, pass_turn, roll_dice
from .state import (
    GameState,
    GameStatus,
    PlayerSeat,
    assign_colors,
    create_initial_state,
    next_color_for_join,
    start_match,
)

__all__ = [
    "Action",
    "ActionResult",
    "ActionType",
    "Move",
    "MoveKind",
    "MoveResult",
    "has_legal_move",
    "legal_moves",
    "BoardGeometry",
    "Point",
    "build_board_geometry",
    "piece_point",
    "Die",
    "draw_die",
    "AlreadyStarted",
    "InsufficientPlayers",
    "InvalidTransition",
    "LudoError",
    "MatchNotPlaying",
    "NotYourTurn",
    "RollRequired",
    "RoomFull",
    "RoomNotFound",
    "COLORS",
    "SAFE_CELLS",
    "START_OFFSET",
    "Color",
    "Occupant",
    "Piece",
    "PieceKind",
    "absolute_start_index",
    "is_safe_cell",
    "occupancy",
    "ring_index_to_absolute",
    "Reducer",
    "apply_action",
    "apply_move",
    "pass_turn",
    "roll_dice",
    "GameState",
    "GameStatus",
    "PlayerSeat",
    "assign_colors",
    "create_initial_state",
    "next_color_for_join",
    "start_match",
]
