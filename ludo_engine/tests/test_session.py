"""
Tests for rooms and the simulated game loop.
"""

import threading

import pytest

from ..engine_core.dice import Die
from ..engine_core.errors import (
    AlreadyStarted,
    InsufficientPlayers,
    RoomFull,
    RoomNotFound,
)
from ..engine_core.position import Color
from ..engine_core.state import GameStatus
from ..session import RoomManager, normalize_code, play_game
from .conftest import ScriptedRandom, make_state


def make_manager(*faces):
    rng = ScriptedRandom(faces)
    return RoomManager(die=Die(rng), rng=rng)


def started_room(manager, code="abc", players=("alice", "bob")):
    for pid in players:
        manager.join_room(code, pid, pid.title())
    manager.start_match(code, players[0])
    return manager.get_room(code)


class TestRoster:
    """Tests for joining and leaving."""

    def test_join_creates_room(self):
        manager = RoomManager()
        room = manager.join_room("abc", "alice", "Alice")
        assert room.code == "ABC"
        assert room.state.status == GameStatus.WAITING
        assert room.player_ids == ["alice"]

    def test_rejoin_updates_name_and_keeps_position(self):
        manager = RoomManager()
        manager.join_room("abc", "alice", "Alice")
        manager.join_room("abc", "bob", "Bob")
        room = manager.join_room("ABC", "alice", "Alicia")
        assert room.player_ids == ["alice", "bob"]
        assert room.get_player("alice").name == "Alicia"

    def test_fifth_player_rejected(self):
        manager = RoomManager()
        for pid in ["a", "b", "c", "d"]:
            manager.join_room("abc", pid)
        with pytest.raises(RoomFull):
            manager.join_room("abc", "e")

    def test_join_after_start_rejected(self):
        manager = make_manager()
        started_room(manager)
        with pytest.raises(AlreadyStarted):
            manager.join_room("abc", "carol")

    def test_leave_while_waiting(self):
        manager = RoomManager()
        manager.join_room("abc", "alice")
        manager.join_room("abc", "bob")
        room = manager.leave_room("abc", "alice")
        assert room.player_ids == ["bob"]
        manager.leave_room("abc", "nobody")
        assert room.player_ids == ["bob"]

    def test_leave_after_start_rejected(self):
        manager = make_manager()
        started_room(manager)
        with pytest.raises(AlreadyStarted):
            manager.leave_room("abc", "alice")

    def test_blank_code_rejected(self):
        with pytest.raises(ValueError):
            normalize_code("   ")


class TestStart:
    """Tests for starting a match."""

    def test_start_binds_colors_by_join_order(self):
        manager = make_manager()
        room = started_room(manager, players=("alice", "bob", "carol"))
        assert room.state.status == GameStatus.PLAYING
        assert room.state.colors == {
            "alice": Color.RED,
            "bob": Color.BLUE,
            "carol": Color.YELLOW,
        }
        assert room.state.order == ("alice", "bob", "carol")

    def test_start_needs_two_players(self):
        manager = RoomManager()
        manager.join_room("abc", "alice")
        with pytest.raises(InsufficientPlayers):
            manager.start_match("abc", "alice")

    def test_second_start_is_noop(self):
        manager = make_manager()
        room = started_room(manager)
        state = room.state
        assert manager.start_match("abc", "bob") is state

    def test_unknown_room(self):
        manager = RoomManager()
        with pytest.raises(RoomNotFound):
            manager.start_match("zzz")


class TestTransitions:
    """Tests for serialized roll, move and pass."""

    def test_roll_then_enter_with_extra_turn(self):
        manager = make_manager(6, 2)
        started_room(manager)

        result = manager.roll("abc", "alice")
        assert result.success
        assert result.dice == 6
        assert [m.piece_slot for m in manager.legal_moves("abc", "alice")] == [0, 1, 2, 3]

        result = manager.move("abc", "alice", 0)
        assert result.success
        assert result.extra_turn
        room = manager.get_room("abc")
        assert room.state.codes_of("alice") == [0, -1, -1, -1]
        assert room.state.current_player_id == "alice"

        assert manager.roll("abc", "alice").dice == 2

    def test_second_roll_leaves_state_untouched(self):
        manager = make_manager(3, 5)
        started_room(manager)
        manager.roll("abc", "alice")

        result = manager.roll("abc", "alice")

        assert not result.success
        assert result.error_code == "INVALID_TRANSITION"
        assert manager.get_room("abc").state.dice == 3

    def test_wrong_player(self):
        manager = make_manager(3)
        started_room(manager)
        result = manager.roll("abc", "bob")
        assert result.error_code == "NOT_YOUR_TURN"
        assert manager.get_room("abc").state.dice is None

    def test_illegal_slot_rejected(self):
        manager = make_manager(3)
        started_room(manager)
        manager.roll("abc", "alice")
        result = manager.move("abc", "alice", 0)
        assert result.error_code == "INVALID_TRANSITION"
        assert result.error == "Illegal move"

    def test_pass_when_stuck(self):
        manager = make_manager(3)
        started_room(manager)
        manager.roll("abc", "alice")
        result = manager.pass_turn("abc", "alice")
        assert result.success
        assert manager.get_room("abc").state.current_player_id == "bob"

    def test_roll_before_start(self):
        manager = RoomManager()
        manager.join_room("abc", "alice")
        result = manager.roll("abc", "alice")
        assert result.error_code == "MATCH_NOT_PLAYING"

    def test_legal_moves_for_unseated_player(self):
        manager = make_manager()
        started_room(manager)
        assert manager.legal_moves("abc", "stranger") == []

    def test_concurrent_rolls_apply_once(self):
        """Two racing rolls for the same turn: exactly one succeeds."""
        manager = make_manager(4, 4)
        started_room(manager)
        results = []

        def roll():
            results.append(manager.roll("abc", "alice"))

        threads = [threading.Thread(target=roll) for _ in range(2)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert sorted(r.success for r in results) == [False, True]


class TestRooms:
    """Tests for listing and closing rooms."""

    def test_list_and_close(self):
        manager = RoomManager()
        manager.join_room("one", "a")
        manager.join_room("two", "b")
        assert sorted(manager.list_rooms()) == ["ONE", "TWO"]
        assert manager.close_room("one")
        assert not manager.close_room("one")
        assert manager.list_rooms() == ["TWO"]

    def test_cleanup_finished_rooms(self):
        manager = RoomManager()
        room = manager.join_room("old", "a")
        room.state = make_state(status=GameStatus.FINISHED, winners=("P1",))
        room.created_at -= 7200
        manager.join_room("new", "b")

        assert manager.cleanup_finished_rooms(max_age_seconds=3600) == ["OLD"]
        assert manager.list_rooms() == ["NEW"]


class TestGameLoop:
    """Tests for simulated matches."""

    def test_same_seed_same_game(self):
        a = play_game(["A", "B"], seed=11, max_turns=300)
        b = play_game(["A", "B"], seed=11, max_turns=300)
        assert a.final_state == b.final_state
        assert a.transitions == b.transitions

    def test_respects_turn_limit(self):
        record = play_game(["A", "B", "C"], seed=3, max_turns=25)
        assert record.turns <= 25
        assert record.final_state.status == GameStatus.PLAYING

    def test_pieces_stay_in_valid_ranges(self):
        record = play_game(["A", "B", "C", "D"], seed=5, max_turns=500)
        state = record.final_state
        for pid in state.order:
            for code in state.codes_of(pid):
                assert code == -1 or 0 <= code <= 51 or 100 <= code <= 106

    def test_stall_ends_game(self):
        """Once every piece sits in a home lane the loop stops."""
        record = play_game(["A", "B"], seed=2, max_turns=20000)
        assert record.stalled or record.turns == 20000
        if record.stalled:
            assert not record.completed
            for pid in record.final_state.order:
                assert all(code >= 100 for code in record.final_state.codes_of(pid))

    def test_requires_two_players(self):
        with pytest.raises(InsufficientPlayers):
            play_game(["A"], seed=1)
