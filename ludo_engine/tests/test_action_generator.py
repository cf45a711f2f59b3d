"""
Tests for legal move generation.
"""

import pytest

from ..engine_core.action import Move, MoveKind
from ..engine_core.action_generator import has_legal_move, legal_moves
from .conftest import make_state


class TestEntering:
    """Tests for leaving the yard."""

    def test_no_moves_before_roll(self, four_player_state):
        assert legal_moves(four_player_state, "P1") == []

    @pytest.mark.parametrize("dice", [1, 2, 3, 4, 5])
    def test_yard_pieces_need_a_six(self, dice):
        state = make_state(dice=dice)
        assert legal_moves(state, "P1") == []
        assert not has_legal_move(state, "P1")

    def test_single_yard_piece_enters_on_six(self):
        """Only piece 0 in the yard: a 6 yields exactly one enter move."""
        state = make_state(positions={"P1": [-1, 103, 104, 105]}, dice=6)
        assert legal_moves(state, "P1") == [Move(0, -1, 0, MoveKind.ENTER)]

    def test_six_enters_every_yard_piece(self):
        state = make_state(dice=6)
        moves = legal_moves(state, "P1")
        assert moves == [Move(slot, -1, 0, MoveKind.ENTER) for slot in range(4)]

    def test_enter_onto_own_piece(self):
        """Entering on a cell the mover already holds is allowed."""
        state = make_state(positions={"P1": [0, -1, -1, -1]}, dice=6)
        moves = legal_moves(state, "P1")
        assert Move(1, -1, 0, MoveKind.ENTER) in moves
        assert Move(0, 0, 6, MoveKind.MOVE) in moves


class TestRingMoves:
    """Tests for moves along the ring."""

    def test_simple_advance(self):
        state = make_state(positions={"P1": [10, -1, -1, -1]}, dice=4)
        assert legal_moves(state, "P1") == [Move(0, 10, 14, MoveKind.MOVE)]

    def test_moves_in_slot_order(self):
        state = make_state(positions={"P1": [30, 2, -1, 20]}, dice=1)
        assert [m.piece_slot for m in legal_moves(state, "P1")] == [0, 1, 3]

    def test_stack_on_own_piece(self):
        state = make_state(positions={"P1": [4, 7, -1, -1]}, dice=3)
        moves = legal_moves(state, "P1")
        assert Move(0, 4, 7, MoveKind.MOVE) in moves

    def test_uses_relative_offsets(self):
        """Blue offset 0 sits on absolute cell 13."""
        state = make_state(positions={"P2": [0, -1, -1, -1]}, dice=5, turn_index=1)
        assert legal_moves(state, "P2") == [Move(0, 0, 5, MoveKind.MOVE)]


class TestCapture:
    """Tests for landing on opposing pieces."""

    def test_capture_lone_piece(self):
        """Red 7 + 3 lands on absolute 10, where blue offset 49 sits."""
        state = make_state(positions={"P1": [7, -1, -1, -1], "P2": [49, -1, -1, -1]}, dice=3)
        moves = legal_moves(state, "P1")
        assert moves == [Move(0, 7, 10, MoveKind.MOVE, "P2", 0)]
        assert moves[0].is_capture

    def test_empty_safe_cell_is_plain_move(self):
        """Red 5 + 3 lands on safe absolute 8 with nobody there."""
        state = make_state(positions={"P1": [5, -1, -1, -1]}, dice=3)
        assert legal_moves(state, "P1") == [Move(0, 5, 8, MoveKind.MOVE)]

    def test_safe_cell_with_own_piece(self):
        state = make_state(positions={"P1": [5, 8, -1, -1]}, dice=3)
        assert Move(0, 5, 8, MoveKind.MOVE) in legal_moves(state, "P1")

    def test_safe_cell_blocks_single_opponent(self):
        """Absolute 8 is safe: a lone blue piece there cannot be landed on."""
        state = make_state(positions={"P1": [5, -1, -1, -1], "P2": [47, -1, -1, -1]}, dice=3)
        assert legal_moves(state, "P1") == []

    def test_opponent_entry_cell_is_safe(self):
        """Blue's entry cell (absolute 13) protects a blue piece on it."""
        state = make_state(positions={"P1": [10, -1, -1, -1], "P2": [0, -1, -1, -1]}, dice=3)
        assert legal_moves(state, "P1") == []

    def test_two_opponents_block(self):
        state = make_state(
            positions={"P1": [7, -1, -1, -1], "P2": [49, 49, -1, -1]},
            dice=3,
        )
        assert legal_moves(state, "P1") == []

    def test_mixed_stack_blocks(self):
        """One blue and one yellow piece on the same cell form a block."""
        # Yellow offset 36 is absolute (26 + 36) % 52 = 10
        state = make_state(
            positions={"P1": [7, -1, -1, -1], "P2": [49, -1, -1, -1], "P3": [36, -1, -1, -1]},
            dice=3,
        )
        assert legal_moves(state, "P1") == []

    def test_block_skips_only_that_piece(self):
        state = make_state(
            positions={"P1": [7, 20, -1, -1], "P2": [49, 49, -1, -1]},
            dice=3,
        )
        assert legal_moves(state, "P1") == [Move(1, 20, 23, MoveKind.MOVE)]


class TestHomeStretch:
    """Tests for leaving the ring."""

    def test_overflow_enters_home_lane(self):
        state = make_state(positions={"P1": [50, -1, -1, -1]}, dice=4)
        assert legal_moves(state, "P1") == [Move(0, 50, 102, MoveKind.HOME)]

    def test_exact_landing_on_52_is_home_zero(self):
        state = make_state(positions={"P1": [48, -1, -1, -1]}, dice=4)
        assert legal_moves(state, "P1") == [Move(0, 48, 100, MoveKind.HOME)]

    def test_scenario_offset_fifty_die_three(self):
        state = make_state(positions={"P1": [50, -1, -1, -1]}, dice=3)
        assert legal_moves(state, "P1") == [Move(0, 50, 101, MoveKind.HOME)]

    def test_furthest_home_move(self):
        """Offset 51 with a 6 overflows by 5, the deepest reachable home cell."""
        state = make_state(positions={"P1": [51, -1, -1, -1]}, dice=6)
        moves = legal_moves(state, "P1")
        assert Move(0, 51, 105, MoveKind.HOME) in moves

    def test_home_lane_pieces_do_not_move(self):
        state = make_state(positions={"P1": [103, 106, -1, -1]}, dice=3)
        assert legal_moves(state, "P1") == []

    def test_home_ignores_opponents(self):
        """Home lane cells are private, so ring occupancy never blocks them."""
        state = make_state(positions={"P1": [50, -1, -1, -1], "P4": [11, 11, -1, -1]}, dice=2)
        assert legal_moves(state, "P1") == [Move(0, 50, 100, MoveKind.HOME)]
