"""
Tests for position encoding and ring index math.
"""

import pytest

from ..engine_core.position import (
    SAFE_CELLS,
    Color,
    Occupant,
    Piece,
    PieceKind,
    absolute_start_index,
    is_safe_cell,
    occupancy,
    ring_index_to_absolute,
)
from .conftest import make_state


class TestPieceCodes:
    """Tests for the integer interchange encoding."""

    @pytest.mark.parametrize("code,kind,offset", [
        (-1, PieceKind.YARD, 0),
        (0, PieceKind.RING, 0),
        (51, PieceKind.RING, 51),
        (100, PieceKind.HOME_LANE, 0),
        (105, PieceKind.HOME_LANE, 5),
        (106, PieceKind.FINISHED, 0),
    ])
    def test_decode(self, code, kind, offset):
        """Each documented range decodes to its variant."""
        piece = Piece.from_code(code)
        assert piece.kind == kind
        assert piece.offset == offset
        assert piece.code == code

    @pytest.mark.parametrize("code", [-2, 52, 99, 107, 200])
    def test_out_of_range_codes_rejected(self, code):
        """Codes outside the three ranges are rejected."""
        with pytest.raises(ValueError):
            Piece.from_code(code)

    def test_non_integer_code_rejected(self):
        with pytest.raises(ValueError):
            Piece.from_code("5")

    def test_ring_offset_validated(self):
        """A ring piece cannot sit past cell 51."""
        with pytest.raises(ValueError):
            Piece.on_ring(52)

    def test_only_finished_counts_as_finished(self):
        assert Piece.finished().is_finished
        assert not Piece.in_home_lane(5).is_finished
        assert not Piece.on_ring(51).is_finished


class TestIndexMath:
    """Tests for start offsets and ring mapping."""

    def test_start_offsets(self):
        assert absolute_start_index(Color.RED) == 0
        assert absolute_start_index(Color.BLUE) == 13
        assert absolute_start_index("yellow") == 26
        assert absolute_start_index("green") == 39

    def test_ring_wraps(self):
        """Offsets wrap modulo 52 from the color's entry cell."""
        assert ring_index_to_absolute(Color.RED, 50) == 50
        assert ring_index_to_absolute(Color.BLUE, 49) == 10
        assert ring_index_to_absolute(Color.GREEN, 13) == 0

    @pytest.mark.parametrize("offset", [-1, 52])
    def test_ring_offset_domain(self, offset):
        with pytest.raises(ValueError):
            ring_index_to_absolute(Color.RED, offset)

    def test_safe_cells(self):
        """Eight safe cells including every entry cell."""
        assert len(SAFE_CELLS) == 8
        for color in Color:
            assert is_safe_cell(absolute_start_index(color))
        assert not is_safe_cell(10)


class TestOccupancy:
    """Tests for the ring occupancy map."""

    def test_only_ring_pieces_are_listed(self):
        """Yard, home lane and finished pieces are not on the ring."""
        state = make_state(positions={"P1": [-1, 5, 103, 106]})
        cells = occupancy(state)
        assert cells == {5: [Occupant("P1", 1, Color.RED)]}

    def test_absolute_index_uses_color_offset(self):
        """Blue offset 49 and red offset 10 share absolute cell 10."""
        state = make_state(positions={"P1": [10, -1, -1, -1], "P2": [49, -1, -1, -1]})
        cells = occupancy(state)
        assert sorted(o.player_id for o in cells[10]) == ["P1", "P2"]

    def test_stack_of_own_pieces(self):
        state = make_state(positions={"P1": [7, 7, -1, -1]})
        assert [o.piece_slot for o in occupancy(state)[7]] == [0, 1]
