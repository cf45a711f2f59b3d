"""
Engine Errors - Rejection taxonomy for game transitions.

Every rejection is local and synchronous: the transition is refused before
any state is produced, so the caller's state value stays authoritative.

Usage:
    from ludo_engine.engine_core.errors import InvalidTransition

    try:
        new_state = roll_dice(state, player_id, value)
    except InvalidTransition as e:
        logger.info(f"Rejected roll: {e.message}")
"""

from __future__ import annotations
from typing import Any

__all__ = [
    "LudoError",
    "InvalidTransition",
    "RollRequired",
    "NotYourTurn",
    "MatchNotPlaying",
    "InsufficientPlayers",
    "RoomNotFound",
    "RoomFull",
    "AlreadyStarted",
]


class LudoError(Exception):
    """Base exception for all engine and session rejections.

    Attributes:
        code: Machine-readable error code
        message: Human-readable description
        context: Extra values for debugging
    """
    code: str = "LUDO_ERROR"

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            ctx = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"[{self.code}] {self.message} ({ctx})"
        return f"[{self.code}] {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "code": self.code,
            "message": self.message,
            "context": self.context,
        }


# =============================================================================
# Transition Errors
# =============================================================================


class InvalidTransition(LudoError):
    """A roll, move or pass that the current state does not allow.

    Raised for moves outside the legal set, a second roll while the die is
    pending, a pass while a move exists, or an out-of-range die value.
    """
    code: str = "INVALID_TRANSITION"


class RollRequired(InvalidTransition):
    """Move or pass attempted before the die was rolled this turn."""
    code: str = "ROLL_REQUIRED"


class NotYourTurn(LudoError):
    """Caller is not the player at order[turn_index]."""
    code: str = "NOT_YOUR_TURN"


class MatchNotPlaying(LudoError):
    """Transition attempted while the match status is not 'playing'."""
    code: str = "MATCH_NOT_PLAYING"


class InsufficientPlayers(LudoError):
    """Match start with fewer than 2 or more than 4 players."""
    code: str = "INSUFFICIENT_PLAYERS"


# =============================================================================
# Room Errors
# =============================================================================


class RoomNotFound(LudoError):
    """No room is registered under the given code."""
    code: str = "ROOM_NOT_FOUND"


class RoomFull(LudoError):
    """A fifth player tried to join a room."""
    code: str = "ROOM_FULL"


class AlreadyStarted(LudoError):
    """Roster change attempted after the match started."""
    code: str = "MATCH_ALREADY_STARTED"
