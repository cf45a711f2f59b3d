"""
API Module - HTTP interface to rooms.

Exposes the engine via REST API:
1. Players join a room by code
2. Any player starts the match
3. The current player rolls, then moves or passes
4. Clients poll room state and board geometry

All state is room-scoped and in-memory. No user accounts.
"""

from .schemas import (
    # Requests
    JoinRequest,
    PlayerRequest,
    MoveRequest,
    # Responses
    RoomResponse,
    TransitionResponse,
    LegalMovesResponse,
    BoardResponse,
    ErrorResponse,
    # Shared
    PlayerInfo,
    MoveInfo,
    GameStateInfo,
    ErrorCode,
)
from .service import APIService
from .app import create_app

__all__ = [
    # Requests
    "JoinRequest",
    "PlayerRequest",
    "MoveRequest",
    # Responses
    "RoomResponse",
    "TransitionResponse",
    "LegalMovesResponse",
    "BoardResponse",
    "ErrorResponse",
    # Shared
    "PlayerInfo",
    "MoveInfo",
    "GameStateInfo",
    "ErrorCode",
    # Service
    "APIService",
    "create_app",
]
