"""
Action System - Moves, actions and results.

A Move is a fully specified piece movement produced by the action
generator. An Action is a player's request (roll, move, pass) handed to
the reducer. All state changes flow through actions.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, TYPE_CHECKING

if TYPE_CHECKING:
    from .state import GameState


class MoveKind(str, Enum):
    """How a piece moves."""
    ENTER = "enter"  # Yard to the entry cell, needs a 6
    MOVE = "move"  # Along the ring, possibly capturing
    HOME = "home"  # Off the ring into the home lane or to the finish


@dataclass(frozen=True)
class Move:
    """
    A legal piece movement for the current die.

    Codes use the integer interchange encoding. captured_player and
    captured_piece_slot are set together, only on capturing ring moves.
    """
    piece_slot: int
    from_code: int
    to_code: int
    kind: MoveKind
    captured_player: str | None = None
    captured_piece_slot: int | None = None

    @property
    def is_capture(self) -> bool:
        return self.captured_player is not None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "pieceSlot": self.piece_slot,
            "fromCode": self.from_code,
            "toCode": self.to_code,
            "kind": self.kind.value,
        }
        if self.is_capture:
            data["capturedPlayer"] = self.captured_player
            data["capturedPieceSlot"] = self.captured_piece_slot
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Move:
        return cls(
            piece_slot=data["pieceSlot"],
            from_code=data["fromCode"],
            to_code=data["toCode"],
            kind=MoveKind(data["kind"]),
            captured_player=data.get("capturedPlayer"),
            captured_piece_slot=data.get("capturedPieceSlot"),
        )


@dataclass(frozen=True)
class MoveResult:
    """Outcome of applying a move: the new state and whether the mover goes again."""
    new_state: GameState
    extra_turn: bool
    captured: tuple[str, int] | None = None


class ActionType(Enum):
    """Player actions the reducer accepts."""
    ROLL = "roll"
    MOVE = "move"
    PASS = "pass"


@dataclass
class Action:
    """
    A player's request for a transition.

    A move action names either the exact Move (as returned by the action
    generator) or only the piece slot; the reducer resolves a slot
    against the current legal moves.
    """
    action_type: ActionType
    player_id: str
    piece_slot: int | None = None
    move: Move | None = None

    @classmethod
    def roll(cls, player_id: str) -> Action:
        """Factory for a die roll."""
        return cls(action_type=ActionType.ROLL, player_id=player_id)

    @classmethod
    def move_piece(cls, player_id: str, piece_slot: int) -> Action:
        """Factory for moving a piece by slot."""
        return cls(action_type=ActionType.MOVE, player_id=player_id, piece_slot=piece_slot)

    @classmethod
    def play(cls, player_id: str, move: Move) -> Action:
        """Factory for applying an enumerated move."""
        return cls(
            action_type=ActionType.MOVE,
            player_id=player_id,
            piece_slot=move.piece_slot,
            move=move,
        )

    @classmethod
    def pass_turn(cls, player_id: str) -> Action:
        """Factory for forfeiting a turn with no legal move."""
        return cls(action_type=ActionType.PASS, player_id=player_id)


@dataclass
class ActionResult:
    """
    Result of applying an action.

    Contains:
    - Whether the action succeeded
    - New state (only on success)
    - Error message and code (only on failure)
    - Human-readable changes for logs and UI
    """
    success: bool
    new_state: GameState | None = None
    error: str | None = None
    error_code: str | None = None

    extra_turn: bool = False
    dice: int | None = None
    move: Move | None = None
    captured: tuple[str, int] | None = None
    changes: list[str] = field(default_factory=list)

    @classmethod
    def failure(cls, error: str, error_code: str | None = None) -> ActionResult:
        """Create a failure result."""
        return cls(success=False, error=error, error_code=error_code)

    @classmethod
    def success_with_state(
        cls,
        state: GameState,
        changes: list[str] | None = None,
        **kwargs,
    ) -> ActionResult:
        """Create a success result with new state."""
        return cls(success=True, new_state=state, changes=changes or [], **kwargs)
