"""
Bot Policy - Interface for bot decision-making.

A BotPolicy takes a game state and the legal moves for the current die
and returns a decision naming the move to play.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING
import random

if TYPE_CHECKING:
    from ..engine_core.action import Move
    from ..engine_core.state import GameState


@dataclass
class BotDecision:
    """
    A decision made by a bot.

    Contains:
    - The move to play
    - Explanation (for logs)
    - Confidence in the decision
    """
    move: Move
    explanation: str = ""
    confidence: float = 1.0
    evaluated_moves: int = 0


class BotPolicy(ABC):
    """
    Abstract base class for bot policies.

    A policy defines how a bot selects among legal moves.
    """

    @abstractmethod
    def select_move(
        self,
        state: GameState,
        player_id: str,
        legal: list[Move],
    ) -> BotDecision:
        """
        Select a move from the legal moves.

        Args:
            state: Current game state, die already rolled
            player_id: The player to move
            legal: Non-empty list of legal moves

        Returns:
            BotDecision with the selected move
        """
        pass

    def get_name(self) -> str:
        """Get the bot's name/identifier."""
        return self.__class__.__name__


class RandomPolicy(BotPolicy):
    """
    Random policy - selects moves uniformly at random.

    Used for:
    - Simulations
    - Baseline comparison
    """

    def __init__(self, seed: int | None = None, rng: random.Random | None = None):
        self.rng = rng or random.Random(seed)

    def select_move(
        self,
        state: GameState,
        player_id: str,
        legal: list[Move],
    ) -> BotDecision:
        if not legal:
            raise ValueError("No legal moves available")

        move = self.rng.choice(legal)
        return BotDecision(
            move=move,
            explanation="Selected randomly",
            confidence=1.0 / len(legal),
            evaluated_moves=len(legal),
        )


class FirstLegalPolicy(BotPolicy):
    """
    First-legal policy - always plays the lowest piece slot that can move.

    Used for deterministic testing.
    """

    def select_move(
        self,
        state: GameState,
        player_id: str,
        legal: list[Move],
    ) -> BotDecision:
        if not legal:
            raise ValueError("No legal moves available")

        return BotDecision(
            move=legal[0],
            explanation="Selected first legal move",
            evaluated_moves=1,
        )


class CapturePolicy(BotPolicy):
    """
    Prefers captures, then finishing moves, then the most advanced piece.

    Falls back to the first legal move on ties.
    """

    def select_move(
        self,
        state: GameState,
        player_id: str,
        legal: list[Move],
    ) -> BotDecision:
        if not legal:
            raise ValueError("No legal moves available")

        def score(move: Move) -> tuple[int, int, int]:
            return (int(move.is_capture), int(move.to_code >= 100), move.from_code)

        best = max(legal, key=score)
        return BotDecision(
            move=best,
            explanation="Capture" if best.is_capture else "Most advanced piece",
            evaluated_moves=len(legal),
        )
