"""
Pytest fixtures for Ludo Engine tests.
"""

import random

import pytest

from ..engine_core.position import Color, Piece
from ..engine_core.state import GameState, GameStatus, PlayerSeat, create_initial_state


FOUR_PLAYERS = [
    PlayerSeat("P1", Color.RED),
    PlayerSeat("P2", Color.BLUE),
    PlayerSeat("P3", Color.YELLOW),
    PlayerSeat("P4", Color.GREEN),
]


class ScriptedRandom(random.Random):
    """Random source that replays scripted die faces and never shuffles."""

    def __init__(self, faces):
        super().__init__(0)
        self.faces = list(faces)

    def randint(self, a, b):
        return self.faces.pop(0)

    def shuffle(self, x):
        pass


def make_state(
    positions: dict[str, list[int]] | None = None,
    dice: int | None = None,
    turn_index: int = 0,
    players: list[PlayerSeat] | None = None,
    status: GameStatus = GameStatus.PLAYING,
    winners: tuple[str, ...] = (),
) -> GameState:
    """Build a playing state, overriding position codes per player."""
    state = create_initial_state(players or FOUR_PLAYERS)
    new_positions = dict(state.positions)
    for pid, codes in (positions or {}).items():
        new_positions[pid] = tuple(Piece.from_code(code) for code in codes)
    return state._copy_with(
        status=status,
        positions=new_positions,
        dice=dice,
        turn_index=turn_index,
        winners=winners,
    )


@pytest.fixture
def four_player_state() -> GameState:
    """A freshly started 4-player match, P1 (red) to move."""
    return make_state()


@pytest.fixture
def two_player_state() -> GameState:
    """A freshly started 2-player match, P1 (red) vs P2 (blue)."""
    return make_state(players=FOUR_PLAYERS[:2])


@pytest.fixture
def rng() -> random.Random:
    """Seeded random source for replayable tests."""
    return random.Random(1234)
