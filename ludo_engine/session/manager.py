"""
Room Manager - In-memory rooms with serialized transitions.

LIFECYCLE:
1. Players join a room by code (room created on first join, status waiting)
2. Any registered player starts the match (2-4 players)
3. During play the current player rolls, then moves a piece or passes
4. The first player to finish all four pieces ends the match
5. The room is closed explicitly

CONCURRENCY:
- Every transition of a room runs under that room's lock
- The stored state is replaced only after a transition succeeds
- A rejected transition leaves the stored state untouched

PERSISTENCE:
- None. Rooms live in process memory and vanish on restart.
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging
import random
import threading
import time

from ..engine_core.action import Action, ActionResult, Move
from ..engine_core.action_generator import legal_moves
from ..engine_core.dice import Die
from ..engine_core.errors import AlreadyStarted, RoomFull, RoomNotFound
from ..engine_core.reducer import Reducer
from ..engine_core.state import MAX_PLAYERS, GameState, GameStatus, start_match

logger = logging.getLogger(__name__)


@dataclass
class RoomPlayer:
    """A registered participant."""
    player_id: str
    name: str
    joined_at: float


@dataclass
class Room:
    """
    A match room.

    Contains:
    - Registered players in join order
    - The authoritative game state (waiting until started)
    - The lock serializing its transitions
    """
    code: str
    created_at: float
    players: list[RoomPlayer] = field(default_factory=list)
    state: GameState = field(default_factory=GameState)
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def get_player(self, player_id: str) -> RoomPlayer | None:
        for player in self.players:
            if player.player_id == player_id:
                return player
        return None

    @property
    def player_ids(self) -> list[str]:
        return [p.player_id for p in self.players]

    @property
    def is_active(self) -> bool:
        return self.state.status != GameStatus.FINISHED


def normalize_code(code: str) -> str:
    """Room codes are case-insensitive and surrounding whitespace is ignored."""
    normalized = code.strip().upper()
    if not normalized:
        raise ValueError("Room code must not be empty")
    return normalized


class RoomManager:
    """
    Manages match rooms.

    Responsibilities:
    - Create rooms on first join
    - Serialize roll, move and pass transitions per room
    - Clean up finished rooms

    No persistence - rooms are in-memory only.
    """

    def __init__(self, die: Die | None = None, rng: random.Random | None = None):
        self._rooms: dict[str, Room] = {}
        self._rooms_lock = threading.Lock()
        self.rng = rng or random.SystemRandom()
        self.reducer = Reducer(die=die or Die(self.rng))

    # =========================================================================
    # Roster
    # =========================================================================

    def join_room(self, code: str, player_id: str, name: str = "Player") -> Room:
        """
        Register a player, creating the room if needed.

        Re-joining keeps the original join position and updates the name.
        """
        code = normalize_code(code)
        with self._rooms_lock:
            room = self._rooms.get(code)
            if room is None:
                room = Room(code=code, created_at=time.time())
                self._rooms[code] = room
                logger.info(f"Room {code} created")

        with room.lock:
            existing = room.get_player(player_id)
            if existing:
                existing.name = name
                return room
            if room.state.status != GameStatus.WAITING:
                raise AlreadyStarted(f"Room {code} has already started", context={"room": code})
            if len(room.players) >= MAX_PLAYERS:
                raise RoomFull(f"Room {code} is full", context={"room": code})
            room.players.append(RoomPlayer(player_id=player_id, name=name, joined_at=time.time()))
            logger.info(f"{player_id} joined room {code} ({len(room.players)} players)")
        return room

    def leave_room(self, code: str, player_id: str) -> Room:
        """Remove a player while the room is waiting. Unknown players are ignored."""
        room = self.get_room(code)
        with room.lock:
            if room.state.status != GameStatus.WAITING:
                raise AlreadyStarted(f"Room {room.code} has already started", context={"room": room.code})
            room.players = [p for p in room.players if p.player_id != player_id]
        return room

    def start_match(self, code: str, player_id: str | None = None) -> GameState:
        """
        Start the match with the registered players.

        Starting a room that is already playing is a no-op.
        """
        room = self.get_room(code)
        with room.lock:
            if room.state.status == GameStatus.PLAYING:
                return room.state
            if room.state.status == GameStatus.FINISHED:
                raise AlreadyStarted(f"Room {room.code} has finished", context={"room": room.code})
            room.state = start_match(room.player_ids, rng=self.rng)
            logger.info(f"Room {room.code} started by {player_id}: order={list(room.state.order)}")
            return room.state

    # =========================================================================
    # Turn transitions
    # =========================================================================

    def roll(self, code: str, player_id: str) -> ActionResult:
        """Roll the die for the current player."""
        return self._transition(code, Action.roll(player_id))

    def move(self, code: str, player_id: str, piece_slot: int) -> ActionResult:
        """Move a piece by slot; rejected as an illegal move if that piece cannot move."""
        return self._transition(code, Action.move_piece(player_id, piece_slot))

    def pass_turn(self, code: str, player_id: str) -> ActionResult:
        """Forfeit a turn with no legal move."""
        return self._transition(code, Action.pass_turn(player_id))

    def legal_moves(self, code: str, player_id: str) -> list[Move]:
        room = self.get_room(code)
        with room.lock:
            state = room.state
        if player_id not in state.positions:
            return []
        return legal_moves(state, player_id)

    def _transition(self, code: str, action: Action) -> ActionResult:
        room = self.get_room(code)
        with room.lock:
            result = self.reducer.apply(room.state, action)
            if result.success and result.new_state is not None:
                room.state = result.new_state
                if room.state.status == GameStatus.FINISHED and room.state.winners:
                    logger.info(f"Room {room.code} finished, winner {room.state.winners[0]}")
            return result

    # =========================================================================
    # Rooms
    # =========================================================================

    def get_room(self, code: str) -> Room:
        """Get a room by code or raise RoomNotFound."""
        code = normalize_code(code)
        with self._rooms_lock:
            room = self._rooms.get(code)
        if room is None:
            raise RoomNotFound(f"Room {code} not found", context={"room": code})
        return room

    def list_rooms(self) -> list[str]:
        """List codes of rooms whose match has not finished."""
        with self._rooms_lock:
            return [code for code, room in self._rooms.items() if room.is_active]

    def close_room(self, code: str) -> bool:
        """Remove a room. Returns False if it did not exist."""
        code = normalize_code(code)
        with self._rooms_lock:
            room = self._rooms.pop(code, None)
        if room:
            logger.info(f"Room {code} closed")
        return room is not None

    def cleanup_finished_rooms(self, max_age_seconds: int = 3600) -> list[str]:
        """
        Close finished rooms older than max_age.

        Called periodically to free memory.
        """
        current_time = time.time()
        with self._rooms_lock:
            stale = [
                code for code, room in self._rooms.items()
                if not room.is_active and current_time - room.created_at > max_age_seconds
            ]
        for code in stale:
            self.close_room(code)
        return stale
