"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the contract between clients and the room service.

Error Codes:
- INVALID_TRANSITION: Move not legal, second roll, or pass while a move exists
- ROLL_REQUIRED: Move or pass before rolling
- NOT_YOUR_TURN: Caller is not the current player
- MATCH_NOT_PLAYING: Match is waiting or finished
- INSUFFICIENT_PLAYERS: Start with fewer than 2 or more than 4 players
- ROOM_NOT_FOUND: Room code does not exist
- ROOM_FULL: Room already has 4 players
- MATCH_ALREADY_STARTED: Roster change after the match started
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


# =============================================================================
# Enums
# =============================================================================

class MatchStatus(str, Enum):
    """Match status values."""
    WAITING = "waiting"
    PLAYING = "playing"
    FINISHED = "finished"


class MoveKindInfo(str, Enum):
    """Kinds of piece movement."""
    ENTER = "enter"
    MOVE = "move"
    HOME = "home"


class ErrorCode(str, Enum):
    """Structured error codes."""
    INVALID_TRANSITION = "INVALID_TRANSITION"
    ROLL_REQUIRED = "ROLL_REQUIRED"
    NOT_YOUR_TURN = "NOT_YOUR_TURN"
    MATCH_NOT_PLAYING = "MATCH_NOT_PLAYING"
    INSUFFICIENT_PLAYERS = "INSUFFICIENT_PLAYERS"
    ROOM_NOT_FOUND = "ROOM_NOT_FOUND"
    ROOM_FULL = "ROOM_FULL"
    MATCH_ALREADY_STARTED = "MATCH_ALREADY_STARTED"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


# =============================================================================
# Shared Models
# =============================================================================

class PlayerInfo(BaseModel):
    """Player information for display."""
    player_id: str
    name: str
    color: Optional[str] = Field(None, description="Assigned once the match starts")
    seat: Optional[int] = Field(None, description="Index in the turn order")
    is_current_turn: bool = False
    positions: list[int] = Field(default_factory=list, description="Integer position codes")
    finished_pieces: int = 0
    place: Optional[int] = Field(None, description="Finishing place, 1-based")


class MoveInfo(BaseModel):
    """A legal or applied move."""
    piece_slot: int = Field(..., ge=0, le=3)
    from_code: int
    to_code: int
    kind: MoveKindInfo
    captured_player: Optional[str] = None
    captured_piece_slot: Optional[int] = None


class GameStateInfo(BaseModel):
    """The authoritative match state in interchange form."""
    status: MatchStatus
    order: list[str] = Field(default_factory=list)
    colors: dict[str, str] = Field(default_factory=dict)
    turn_index: int = 0
    dice: Optional[int] = Field(None, ge=1, le=6)
    positions: dict[str, list[int]] = Field(default_factory=dict)
    winners: list[str] = Field(default_factory=list)


class PointInfo(BaseModel):
    """Center and radius of a board cell."""
    x: float
    y: float
    r: float


# =============================================================================
# Request Models
# =============================================================================

class JoinRequest(BaseModel):
    """Request to join (or create) a room."""
    player_id: str = Field(..., min_length=1, description="Caller identity")
    name: str = Field("Player", description="Display name")


class PlayerRequest(BaseModel):
    """Request carrying only the caller identity."""
    player_id: str = Field(..., min_length=1, description="Caller identity")


class MoveRequest(BaseModel):
    """Request to move one of the caller's pieces."""
    player_id: str = Field(..., min_length=1, description="Caller identity")
    piece_slot: int = Field(..., ge=0, le=3, description="Piece slot 0-3")


# =============================================================================
# Response Models
# =============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str = Field(..., description="Human-readable error message")
    error_code: ErrorCode = Field(..., description="Machine-readable error code")
    details: Optional[dict] = Field(None, description="Additional error context")
    api_version: str = Field("v1", description="API version")


class RoomResponse(BaseModel):
    """Room roster and state."""
    code: str
    status: MatchStatus
    players: list[PlayerInfo] = Field(default_factory=list)
    current_turn_player_id: Optional[str] = None
    state: GameStateInfo
    created_at: float = 0.0
    api_version: str = "v1"


class TransitionResponse(BaseModel):
    """Response after a roll, move or pass."""
    success: bool
    room: RoomResponse
    dice: Optional[int] = None
    extra_turn: bool = False
    move: Optional[MoveInfo] = None
    changes: list[str] = Field(default_factory=list)
    api_version: str = "v1"


class LegalMovesResponse(BaseModel):
    """Legal moves for a player and the current die."""
    code: str
    player_id: str
    dice: Optional[int] = None
    moves: list[MoveInfo] = Field(default_factory=list)
    must_pass: bool = Field(
        False, description="Die rolled, caller's turn, and no piece can move"
    )
    api_version: str = "v1"


class BoardResponse(BaseModel):
    """Board geometry for rendering clients."""
    size: float
    cell_size: float
    path: list[PointInfo]
    home: dict[str, list[PointInfo]]
    yard: dict[str, list[PointInfo]]
    start_cell: dict[str, PointInfo]
    safe_cells: list[int]
    start_offsets: dict[str, int]
    palette: dict[str, str] = Field(default_factory=dict, description="Hex color per player color")


class RoomListResponse(BaseModel):
    """Response listing active rooms."""
    rooms: list[str]
    count: int


class CloseRoomResponse(BaseModel):
    """Response after closing a room."""
    success: bool
    code: str


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    service: str
    version: str
    env: str
