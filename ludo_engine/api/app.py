"""
FastAPI Application - REST API over in-memory rooms.

Endpoints:
    GET    /health                                   Health check
    GET    /api/v1/board                             Board geometry
    GET    /api/v1/rooms                             List active rooms
    GET    /api/v1/rooms/{code}                      Room roster and state
    DELETE /api/v1/rooms/{code}                      Close room
    POST   /api/v1/rooms/{code}/players              Join room
    DELETE /api/v1/rooms/{code}/players/{player_id}  Leave room
    POST   /api/v1/rooms/{code}/start                Start match
    GET    /api/v1/rooms/{code}/moves                Legal moves for a player
    POST   /api/v1/rooms/{code}/roll                 Roll the die
    POST   /api/v1/rooms/{code}/move                 Move a piece
    POST   /api/v1/rooms/{code}/pass                 Forfeit a turn with no legal move

Turn Flow:
    1. Current player calls POST /roll
    2. GET /moves lists the pieces that can move
    3. POST /move with a piece slot, or POST /pass when must_pass is true
    4. A 6 keeps the turn; otherwise the next seat plays

Identity is the caller-supplied player_id. Authentication is not handled here.
"""

from typing import Annotated, Optional
import logging

from ..config import Settings, configure_logging

logger = logging.getLogger(__name__)

# HTTP status per error code; anything unlisted is a 409 conflict
ERROR_STATUS = {
    "ROOM_NOT_FOUND": 404,
    "NOT_YOUR_TURN": 403,
    "VALIDATION_ERROR": 400,
    "INTERNAL_ERROR": 500,
}


def create_app(service=None, settings: Optional[Settings] = None):
    """
    Create the FastAPI application.

    Args:
        service: Optional APIService instance (creates new if not provided)
        settings: Optional Settings (read from the environment if not provided)

    Returns:
        FastAPI application instance
    """
    try:
        from fastapi import FastAPI, Query, Request
        from fastapi.middleware.cors import CORSMiddleware
        from fastapi.responses import JSONResponse
    except ImportError:
        raise ImportError(
            "FastAPI not installed. Install with: pip install fastapi uvicorn"
        )

    from .service import APIService
    from .schemas import (
        # Request models
        JoinRequest,
        PlayerRequest,
        MoveRequest,
        # Response models
        BoardResponse,
        CloseRoomResponse,
        ErrorResponse,
        HealthResponse,
        LegalMovesResponse,
        RoomListResponse,
        RoomResponse,
        TransitionResponse,
        # Enums
        ErrorCode,
    )
    from .. import __version__
    from ..engine_core.errors import LudoError

    settings = settings or Settings.from_env()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Ludo Engine API",
        description="""
Four-color race game rules engine behind in-memory rooms.

## Error Codes

| Code | Description |
|------|-------------|
| `INVALID_TRANSITION` | Illegal move, second roll, or pass while a move exists |
| `ROLL_REQUIRED` | Move or pass before rolling |
| `NOT_YOUR_TURN` | Caller is not the current player |
| `MATCH_NOT_PLAYING` | Match is waiting or finished |
| `INSUFFICIENT_PLAYERS` | Start needs 2-4 players |
| `ROOM_NOT_FOUND` | Room does not exist |
| `ROOM_FULL` | Room already has 4 players |
| `MATCH_ALREADY_STARTED` | Roster change after start |
        """,
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.allowed_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    api_service = service or APIService(settings=settings)
    app.state.service = api_service

    # =========================================================================
    # Error helpers
    # =========================================================================

    def make_error_response(
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Optional[dict] = None,
    ) -> JSONResponse:
        """Create a standardized error response."""
        return JSONResponse(
            status_code=status_code,
            content=ErrorResponse(
                error=message,
                error_code=error_code,
                details=details,
            ).model_dump(mode="json"),
        )

    @app.exception_handler(LudoError)
    async def ludo_error_handler(request: Request, exc: LudoError) -> JSONResponse:
        try:
            error_code = ErrorCode(exc.code)
        except ValueError:
            error_code = ErrorCode.INTERNAL_ERROR
        return make_error_response(
            error_code,
            exc.message,
            status_code=ERROR_STATUS.get(error_code.value, 409),
            details={k: str(v) for k, v in exc.context.items()} or None,
        )

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
        return make_error_response(ErrorCode.VALIDATION_ERROR, str(exc), status_code=400)

    error_responses = {
        403: {"model": ErrorResponse, "description": "Not your turn"},
        404: {"model": ErrorResponse, "description": "Room not found"},
        409: {"model": ErrorResponse, "description": "Transition rejected"},
    }

    # =========================================================================
    # Room Endpoints
    # =========================================================================

    @app.get(
        "/api/v1/rooms",
        response_model=RoomListResponse,
        tags=["Rooms"],
        summary="List active rooms",
    )
    def list_rooms() -> RoomListResponse:
        """List codes of rooms whose match has not finished."""
        rooms = api_service.list_rooms()
        return RoomListResponse(rooms=rooms, count=len(rooms))

    @app.get(
        "/api/v1/rooms/{code}",
        response_model=RoomResponse,
        responses={404: error_responses[404]},
        tags=["Rooms"],
        summary="Get room roster and state",
    )
    def get_room(code: str) -> RoomResponse:
        return api_service.get_room(code)

    @app.delete(
        "/api/v1/rooms/{code}",
        response_model=CloseRoomResponse,
        tags=["Rooms"],
        summary="Close a room",
    )
    def close_room(code: str) -> CloseRoomResponse:
        """Close a room and release its state."""
        success = api_service.close_room(code)
        return CloseRoomResponse(success=success, code=code.strip().upper())

    @app.post(
        "/api/v1/rooms/{code}/players",
        response_model=RoomResponse,
        responses={409: error_responses[409]},
        tags=["Rooms"],
        summary="Join a room, creating it if needed",
    )
    def join_room(code: str, request: JoinRequest) -> RoomResponse:
        return api_service.join_room(code, request)

    @app.delete(
        "/api/v1/rooms/{code}/players/{player_id}",
        response_model=RoomResponse,
        responses={404: error_responses[404], 409: error_responses[409]},
        tags=["Rooms"],
        summary="Leave a waiting room",
    )
    def leave_room(code: str, player_id: str) -> RoomResponse:
        return api_service.leave_room(code, player_id)

    @app.post(
        "/api/v1/rooms/{code}/start",
        response_model=RoomResponse,
        responses={404: error_responses[404], 409: error_responses[409]},
        tags=["Rooms"],
        summary="Start the match",
    )
    def start_match(code: str, request: PlayerRequest) -> RoomResponse:
        """
        Start the match with the registered players.

        Colors follow join order; seating is shuffled.
        """
        return api_service.start_match(code, request)

    # =========================================================================
    # Turn Endpoints
    # =========================================================================

    @app.get(
        "/api/v1/rooms/{code}/moves",
        response_model=LegalMovesResponse,
        responses={404: error_responses[404]},
        tags=["Turns"],
        summary="List legal moves for the current die",
    )
    def legal_moves(
        code: str,
        player_id: Annotated[str, Query(description="Player to list moves for")],
    ) -> LegalMovesResponse:
        return api_service.legal_moves(code, player_id)

    @app.post(
        "/api/v1/rooms/{code}/roll",
        response_model=TransitionResponse,
        responses=error_responses,
        tags=["Turns"],
        summary="Roll the die",
    )
    def roll(code: str, request: PlayerRequest) -> TransitionResponse:
        """Roll once per turn. A second roll before moving is rejected."""
        return api_service.roll(code, request)

    @app.post(
        "/api/v1/rooms/{code}/move",
        response_model=TransitionResponse,
        responses=error_responses,
        tags=["Turns"],
        summary="Move a piece",
    )
    def move(code: str, request: MoveRequest) -> TransitionResponse:
        return api_service.move(code, request)

    @app.post(
        "/api/v1/rooms/{code}/pass",
        response_model=TransitionResponse,
        responses=error_responses,
        tags=["Turns"],
        summary="Forfeit a turn with no legal move",
    )
    def pass_turn(code: str, request: PlayerRequest) -> TransitionResponse:
        return api_service.pass_turn(code, request)

    # =========================================================================
    # Board & System Endpoints
    # =========================================================================

    @app.get(
        "/api/v1/board",
        response_model=BoardResponse,
        tags=["Board"],
        summary="Board geometry for rendering",
    )
    def board(
        size: Annotated[Optional[float], Query(gt=0, description="Canvas side length")] = None,
    ) -> BoardResponse:
        return api_service.board(size)

    @app.get(
        "/health",
        response_model=HealthResponse,
        tags=["System"],
    )
    async def health_check() -> HealthResponse:
        return HealthResponse(
            status="healthy",
            service="ludo-engine",
            version=__version__,
            env=settings.env,
        )

    logger.info(f"Ludo Engine API created (env={settings.env})")
    return app
