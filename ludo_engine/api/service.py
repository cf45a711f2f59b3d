"""
API Service - Business logic layer between API and rooms.

The service:
1. Translates API requests to room manager calls
2. Raises typed errors for rejections
3. Formats responses for clients

This layer is framework-agnostic (can be used with FastAPI, Flask, etc.)
"""

from __future__ import annotations
from dataclasses import dataclass, field

from .schemas import (
    # Requests
    JoinRequest,
    MoveRequest,
    PlayerRequest,
    # Responses
    BoardResponse,
    LegalMovesResponse,
    RoomResponse,
    TransitionResponse,
    # Shared
    GameStateInfo,
    MoveInfo,
    PlayerInfo,
    PointInfo,
)
from ..config import Settings
from ..engine_core.action import ActionResult, Move
from ..engine_core.board import build_board_geometry
from ..engine_core.errors import LudoError
from ..engine_core.position import COLOR_HEX, SAFE_CELLS, START_OFFSET
from ..session import Room, RoomManager


@dataclass
class APIService:
    """
    Main API service.

    Usage:
        service = APIService()

        service.join_room("ABCD", JoinRequest(player_id="p1", name="Ada"))
        service.join_room("ABCD", JoinRequest(player_id="p2", name="Bo"))
        room = service.start_match("ABCD", PlayerRequest(player_id="p1"))

        result = service.roll("ABCD", PlayerRequest(player_id=room.current_turn_player_id))
    """
    room_manager: RoomManager = field(default_factory=RoomManager)
    settings: Settings = field(default_factory=Settings)

    def join_room(self, code: str, request: JoinRequest) -> RoomResponse:
        room = self.room_manager.join_room(code, request.player_id, request.name)
        return self._room_to_response(room)

    def leave_room(self, code: str, player_id: str) -> RoomResponse:
        room = self.room_manager.leave_room(code, player_id)
        return self._room_to_response(room)

    def start_match(self, code: str, request: PlayerRequest) -> RoomResponse:
        self.room_manager.start_match(code, request.player_id)
        return self.get_room(code)

    def get_room(self, code: str) -> RoomResponse:
        return self._room_to_response(self.room_manager.get_room(code))

    def list_rooms(self) -> list[str]:
        return self.room_manager.list_rooms()

    def close_room(self, code: str) -> bool:
        return self.room_manager.close_room(code)

    def legal_moves(self, code: str, player_id: str) -> LegalMovesResponse:
        room = self.room_manager.get_room(code)
        state = room.state
        moves = self.room_manager.legal_moves(code, player_id)
        must_pass = (
            state.is_playing
            and state.dice is not None
            and state.current_player_id == player_id
            and not moves
        )
        return LegalMovesResponse(
            code=room.code,
            player_id=player_id,
            dice=state.dice,
            moves=[self._move_to_info(m) for m in moves],
            must_pass=must_pass,
        )

    def roll(self, code: str, request: PlayerRequest) -> TransitionResponse:
        result = self.room_manager.roll(code, request.player_id)
        return self._result_to_response(code, result)

    def move(self, code: str, request: MoveRequest) -> TransitionResponse:
        result = self.room_manager.move(code, request.player_id, request.piece_slot)
        return self._result_to_response(code, result)

    def pass_turn(self, code: str, request: PlayerRequest) -> TransitionResponse:
        result = self.room_manager.pass_turn(code, request.player_id)
        return self._result_to_response(code, result)

    def board(self, size: float | None = None) -> BoardResponse:
        geometry = build_board_geometry(size or self.settings.board_size)

        def points(pts) -> list[PointInfo]:
            return [PointInfo(x=p.x, y=p.y, r=p.r) for p in pts]

        return BoardResponse(
            size=geometry.size,
            cell_size=geometry.cell_size,
            path=points(geometry.path),
            home={c.value: points(pts) for c, pts in geometry.home.items()},
            yard={c.value: points(pts) for c, pts in geometry.yard.items()},
            start_cell={
                c.value: PointInfo(x=p.x, y=p.y, r=p.r)
                for c, p in geometry.start_cell.items()
            },
            safe_cells=sorted(SAFE_CELLS),
            start_offsets={c.value: offset for c, offset in START_OFFSET.items()},
            palette={c.value: hex_code for c, hex_code in COLOR_HEX.items()},
        )

    # =========================================================================
    # Helper methods
    # =========================================================================

    def _result_to_response(self, code: str, result: ActionResult) -> TransitionResponse:
        """Convert a reducer result, raising on rejection."""
        if not result.success:
            raise LudoError(result.error or "Rejected", code=result.error_code)

        return TransitionResponse(
            success=True,
            room=self.get_room(code),
            dice=result.dice,
            extra_turn=result.extra_turn,
            move=self._move_to_info(result.move) if result.move else None,
            changes=result.changes,
        )

    def _room_to_response(self, room: Room) -> RoomResponse:
        """Convert Room to RoomResponse."""
        state = room.state
        players = []
        for player in room.players:
            started = player.player_id in state.positions
            codes = state.codes_of(player.player_id) if started else []
            players.append(
                PlayerInfo(
                    player_id=player.player_id,
                    name=player.name,
                    color=state.colors[player.player_id].value if started else None,
                    seat=state.order.index(player.player_id) if started else None,
                    is_current_turn=(
                        state.is_playing and player.player_id == state.current_player_id
                    ),
                    positions=codes,
                    finished_pieces=sum(
                        1 for piece in state.pieces_of(player.player_id) if piece.is_finished
                    ) if started else 0,
                    place=(
                        state.winners.index(player.player_id) + 1
                        if player.player_id in state.winners else None
                    ),
                )
            )

        data = state.to_dict()
        return RoomResponse(
            code=room.code,
            status=state.status.value,
            players=players,
            current_turn_player_id=state.current_player_id if state.is_playing else None,
            state=GameStateInfo(
                status=data["status"],
                order=data["order"],
                colors=data["colors"],
                turn_index=data["turnIndex"],
                dice=data["dice"],
                positions=data["positions"],
                winners=data["winners"],
            ),
            created_at=room.created_at,
        )

    def _move_to_info(self, move: Move) -> MoveInfo:
        return MoveInfo(
            piece_slot=move.piece_slot,
            from_code=move.from_code,
            to_code=move.to_code,
            kind=move.kind.value,
            captured_player=move.captured_player,
            captured_piece_slot=move.captured_piece_slot,
        )
