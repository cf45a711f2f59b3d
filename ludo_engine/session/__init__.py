"""
Session Module - Rooms around the rules engine.

A room represents one match:
- Created when the first player joins
- Holds the authoritative game state
- Serializes roll, move and pass transitions
- Closed explicitly when no longer needed

Rooms are EPHEMERAL: no persistence to database.
"""

from .manager import RoomManager, Room, RoomPlayer, normalize_code
from .game_loop import GameRecord, play_game

__all__ = [
    "RoomManager",
    "Room",
    "RoomPlayer",
    "normalize_code",
    "GameRecord",
    "play_game",
]
