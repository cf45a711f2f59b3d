"""
Game Loop - Plays whole matches between bot policies.

The loop, per turn:
1. Current player rolls
2. Legal moves are enumerated
3. The player's policy picks a move, or the player passes if none exist
4. Repeat until a player finishes, no piece can ever move again, or the
   turn limit is reached

Everything goes through the Reducer, exactly as a live room would.
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging
import random
from typing import Mapping, Sequence

from ..bots import BotPolicy, RandomPolicy
from ..engine_core.action import Action, ActionResult
from ..engine_core.action_generator import legal_moves
from ..engine_core.dice import Die
from ..engine_core.position import PieceKind
from ..engine_core.reducer import Reducer
from ..engine_core.state import GameState, GameStatus, start_match

logger = logging.getLogger(__name__)

DEFAULT_MAX_TURNS = 2000


@dataclass
class GameRecord:
    """
    Result of a simulated match.

    turns counts roll actions; transitions lists every change in order.
    """
    final_state: GameState
    turns: int = 0
    transitions: list[str] = field(default_factory=list)
    captures: int = 0
    stalled: bool = False

    @property
    def winner(self) -> str | None:
        return self.final_state.winners[0] if self.final_state.winners else None

    @property
    def completed(self) -> bool:
        return self.final_state.status == GameStatus.FINISHED


def _is_stalled(state: GameState) -> bool:
    """True once no piece on the board can ever move again."""
    return all(
        piece.kind in (PieceKind.HOME_LANE, PieceKind.FINISHED)
        for pid in state.order
        for piece in state.pieces_of(pid)
    )


def _apply(reducer: Reducer, state: GameState, action: Action) -> ActionResult:
    result = reducer.apply(state, action)
    if not result.success:
        # Actions here are built from the legal set, so a failure is a bug
        raise RuntimeError(f"Simulation produced a rejected action: {result.error_code} {result.error}")
    return result


def play_game(
    player_ids: Sequence[str],
    policies: Mapping[str, BotPolicy] | None = None,
    seed: int | None = None,
    max_turns: int = DEFAULT_MAX_TURNS,
) -> GameRecord:
    """
    Play a match to the first finisher.

    Args:
        player_ids: Players in registration order
        policies: Policy per player (RandomPolicy for any missing player)
        seed: Seed for seating, dice and default policies
        max_turns: Stop after this many rolls even if nobody finished

    Returns:
        GameRecord with the final state
    """
    rng = random.Random(seed)
    state = start_match(player_ids, rng=rng)
    reducer = Reducer(die=Die(rng))
    policies = dict(policies or {})
    for pid in player_ids:
        policies.setdefault(pid, RandomPolicy(rng=rng))

    record = GameRecord(final_state=state)

    while state.status == GameStatus.PLAYING and record.turns < max_turns:
        player_id = state.current_player_id

        result = _apply(reducer, state, Action.roll(player_id))
        state = result.new_state
        record.turns += 1
        record.transitions.extend(result.changes)

        legal = legal_moves(state, player_id)
        if legal:
            decision = policies[player_id].select_move(state, player_id, legal)
            result = _apply(reducer, state, Action.play(player_id, decision.move))
            if result.captured:
                record.captures += 1
        else:
            result = _apply(reducer, state, Action.pass_turn(player_id))

        state = result.new_state
        record.transitions.extend(result.changes)

        if state.status == GameStatus.PLAYING and _is_stalled(state):
            record.stalled = True
            logger.info(f"Game stalled after {record.turns} turns: every piece is in a home lane")
            break

    record.final_state = state
    logger.debug(f"Game ended after {record.turns} turns, winners={list(state.winners)}")
    return record
