"""
Reducer - Applies transitions to game state.

The reducer is the single point of state change.
All state changes go through roll_dice(), apply_move() or pass_turn().

Design principles:
- Pure functions: (state, input) -> new_state
- The input state is never mutated
- Rejections raise typed errors before anything is produced
- Reducer.apply() validates turn ownership and legality and reports
  the outcome as an ActionResult
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging

from .action import Action, ActionResult, ActionType, Move, MoveKind, MoveResult
from .action_generator import legal_moves
from .dice import DIE_FACES, Die
from .errors import (
    InvalidTransition,
    LudoError,
    MatchNotPlaying,
    NotYourTurn,
    RollRequired,
)
from .position import Piece
from .state import GameState, GameStatus

logger = logging.getLogger(__name__)

EXTRA_TURN_ROLL = 6


# =============================================================================
# Transitions
# =============================================================================

def _advance_turn(state: GameState) -> GameState:
    return state._copy_with(
        turn_index=(state.turn_index + 1) % len(state.order),
        dice=None,
    )


def _record_finish(state: GameState, player_id: str) -> GameState:
    """Append the player to winners once all their pieces are finished."""
    if player_id in state.winners:
        return state
    if not all(piece.is_finished for piece in state.pieces_of(player_id)):
        return state

    winners = state.winners + (player_id,)
    # The first finisher ends the match; later finishers are only recorded
    status = GameStatus.FINISHED if len(winners) == 1 else state.status
    return state._copy_with(winners=winners, status=status)


def apply_move(state: GameState, player_id: str, move: Move) -> MoveResult:
    """
    Apply a move drawn from legal_moves().

    Legality is not re-checked here; Reducer.apply() does that. A move of
    kind MOVE with a capture sends the captured piece to the yard in the
    same transition. A move made with a 6 keeps the turn.
    """
    piece = Piece.from_code(move.to_code)
    new_state = state.with_piece(player_id, move.piece_slot, piece)

    captured = None
    if move.kind == MoveKind.MOVE and move.is_capture:
        new_state = new_state.with_piece(
            move.captured_player, move.captured_piece_slot, Piece.in_yard()
        )
        captured = (move.captured_player, move.captured_piece_slot)

    new_state = _record_finish(new_state, player_id)

    extra_turn = state.dice == EXTRA_TURN_ROLL
    if extra_turn:
        new_state = new_state._copy_with(dice=None)
    else:
        new_state = _advance_turn(new_state)

    return MoveResult(new_state=new_state, extra_turn=extra_turn, captured=captured)


def roll_dice(state: GameState, player_id: str, value: int) -> GameState:
    """Record the turn's die value. Exactly one roll per turn."""
    if not state.is_playing:
        raise MatchNotPlaying(f"Match is {state.status.value}", context={"player": player_id})
    if state.dice is not None:
        raise InvalidTransition("Die already rolled this turn", context={"dice": state.dice})
    if isinstance(value, bool) or not isinstance(value, int) or not 1 <= value <= DIE_FACES:
        raise InvalidTransition(f"Die value must be 1..{DIE_FACES}", context={"value": value})
    return state._copy_with(dice=value)


def pass_turn(state: GameState, player_id: str) -> GameState:
    """
    Forfeit a turn in which no piece can move.

    The turn always advances, even on a 6: no move was made.
    """
    if not state.is_playing:
        raise MatchNotPlaying(f"Match is {state.status.value}", context={"player": player_id})
    if state.dice is None:
        raise RollRequired("Roll before passing", context={"player": player_id})
    if legal_moves(state, player_id):
        raise InvalidTransition(
            "Cannot pass while a legal move exists",
            context={"player": player_id, "dice": state.dice},
        )
    return _advance_turn(state)


# =============================================================================
# Checked entry point
# =============================================================================

@dataclass
class Reducer:
    """
    Reducer applies player actions to game state.

    Stateless apart from the die used for roll actions.
    """
    die: Die = field(default_factory=Die)

    def apply(self, state: GameState, action: Action) -> ActionResult:
        """
        Apply an action to the game state.

        Returns ActionResult with new state or error. The input state is
        left untouched either way.
        """
        handler = self._get_handler(action.action_type)
        if not handler:
            return ActionResult.failure(
                f"No handler for action type: {action.action_type}",
                error_code="NO_HANDLER",
            )

        try:
            self._validate_action(state, action)
            result = handler(state, action)
        except LudoError as e:
            logger.info(f"Rejected {action.action_type.value} by {action.player_id}: {e}")
            return ActionResult.failure(e.message, error_code=e.code)

        logger.debug(f"Applied {action.action_type.value} by {action.player_id}: {result.changes}")
        return result

    def _validate_action(self, state: GameState, action: Action) -> None:
        """Check match status and turn ownership."""
        if not state.is_playing:
            raise MatchNotPlaying(f"Match is {state.status.value}")
        if action.player_id != state.current_player_id:
            raise NotYourTurn(
                f"Not {action.player_id}'s turn",
                context={"current": state.current_player_id},
            )

    def _get_handler(self, action_type: ActionType):
        """Get the handler function for an action type."""
        handlers = {
            ActionType.ROLL: self._handle_roll,
            ActionType.MOVE: self._handle_move,
            ActionType.PASS: self._handle_pass,
        }
        return handlers.get(action_type)

    def _handle_roll(self, state: GameState, action: Action) -> ActionResult:
        """Handle die roll."""
        if state.dice is not None:
            raise InvalidTransition("Die already rolled this turn", context={"dice": state.dice})
        value = self.die.roll()
        new_state = roll_dice(state, action.player_id, value)
        return ActionResult.success_with_state(
            new_state,
            changes=[f"{action.player_id} rolled {value}"],
            dice=value,
        )

    def _handle_move(self, state: GameState, action: Action) -> ActionResult:
        """Handle piece move."""
        if state.dice is None:
            raise RollRequired("Roll first", context={"player": action.player_id})

        move = self._resolve_move(state, action)
        outcome = apply_move(state, action.player_id, move)

        changes = [f"{action.player_id} moved piece {move.piece_slot} ({move.kind.value}) "
                   f"from {move.from_code} to {move.to_code}"]
        if outcome.captured:
            captured_player, captured_slot = outcome.captured
            changes.append(f"{action.player_id} captured {captured_player}'s piece {captured_slot}")
        if action.player_id in outcome.new_state.winners and action.player_id not in state.winners:
            changes.append(f"{action.player_id} finished all pieces")
            logger.info(f"{action.player_id} finished in place {len(outcome.new_state.winners)}")

        return ActionResult.success_with_state(
            outcome.new_state,
            changes=changes,
            extra_turn=outcome.extra_turn,
            dice=state.dice,
            move=move,
            captured=outcome.captured,
        )

    def _handle_pass(self, state: GameState, action: Action) -> ActionResult:
        """Handle turn forfeit."""
        new_state = pass_turn(state, action.player_id)
        return ActionResult.success_with_state(
            new_state,
            changes=[f"{action.player_id} had no legal move and passed"],
            dice=state.dice,
        )

    def _resolve_move(self, state: GameState, action: Action) -> Move:
        """Find the requested move in the legal set or reject it."""
        legal = legal_moves(state, action.player_id)
        if action.move is not None:
            if action.move in legal:
                return action.move
        elif action.piece_slot is not None:
            for move in legal:
                if move.piece_slot == action.piece_slot:
                    return move
        raise InvalidTransition(
            "Illegal move",
            context={"player": action.player_id, "piece": action.piece_slot},
        )


def apply_action(state: GameState, action: Action, die: Die | None = None) -> ActionResult:
    """
    Convenience function to apply an action.

    Creates a Reducer and applies the action.
    """
    reducer = Reducer(die=die) if die else Reducer()
    return reducer.apply(state, action)
