"""
Action Generator - Enumerates the legal moves for a die roll.

The generator is used by:
1. Bots to pick a move
2. The API to show which pieces can move
3. Validation (is this move in legal_moves?)

Capture policy: a lone opposing piece on a non-safe cell is captured.
Any other mixed occupancy blocks the destination. Stacks of the mover's
own pieces are always a legal destination.

Safe cells protect their occupants: a move onto a safe cell holding any
opposing piece is not generated. Earlier versions of the game let a piece
share a safe cell with opponents. Here such a landing is blocked.
"""

from __future__ import annotations

from .action import Move, MoveKind
from .position import (
    HOME_CODE_BASE,
    HOME_LANE_SIZE,
    RING_SIZE,
    Occupant,
    PieceKind,
    is_safe_cell,
    occupancy,
    ring_index_to_absolute,
)
from .state import GameState

ENTRY_ROLL = 6


def _landing(
    occupants: list[Occupant],
    player_id: str,
    destination: int,
) -> tuple[bool, Occupant | None]:
    """
    Decide whether a ring cell can be landed on.

    Returns (legal, captured occupant or None).
    """
    if all(o.player_id == player_id for o in occupants):
        return True, None
    if len(occupants) == 1 and not is_safe_cell(destination):
        return True, occupants[0]
    return False, None


def legal_moves(state: GameState, player_id: str) -> list[Move]:
    """
    Enumerate legal moves for a player and the current die.

    Returns moves in piece-slot order. Empty when the die has not been
    rolled or no piece can move. Turn ownership is not checked here.
    """
    dice = state.dice
    if not dice:
        return []

    color = state.color_of(player_id)
    cells = occupancy(state)
    moves = []

    for slot, piece in enumerate(state.pieces_of(player_id)):
        if piece.kind == PieceKind.YARD:
            if dice == ENTRY_ROLL:
                moves.append(Move(slot, piece.code, 0, MoveKind.ENTER))
            continue

        if piece.kind != PieceKind.RING:
            continue

        target = piece.offset + dice
        if target < RING_SIZE:
            destination = ring_index_to_absolute(color, target)
            legal, captured = _landing(cells.get(destination, []), player_id, destination)
            if not legal:
                continue
            moves.append(
                Move(
                    piece_slot=slot,
                    from_code=piece.code,
                    to_code=target,
                    kind=MoveKind.MOVE,
                    captured_player=captured.player_id if captured else None,
                    captured_piece_slot=captured.piece_slot if captured else None,
                )
            )
        else:
            overflow = target - RING_SIZE
            if overflow <= HOME_LANE_SIZE:
                moves.append(Move(slot, piece.code, HOME_CODE_BASE + overflow, MoveKind.HOME))

    return moves


def has_legal_move(state: GameState, player_id: str) -> bool:
    return bool(legal_moves(state, player_id))
