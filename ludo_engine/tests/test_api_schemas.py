"""
Tests for API Pydantic schemas.

Validates that:
- Request models reject malformed input
- Error codes line up with the engine's exceptions
- The OpenAPI schema lists every response model
"""

import pytest
from pydantic import ValidationError


class TestPydanticSchemas:
    """Tests for Pydantic schema validation."""

    def test_move_request_bounds(self):
        """MoveRequest only accepts piece slots 0-3."""
        from ludo_engine.api.schemas import MoveRequest

        assert MoveRequest(player_id="p1", piece_slot=3).piece_slot == 3
        with pytest.raises(ValidationError):
            MoveRequest(player_id="p1", piece_slot=4)

    def test_empty_player_id_rejected(self):
        """Requests need a non-empty caller identity."""
        from ludo_engine.api.schemas import PlayerRequest

        with pytest.raises(ValidationError):
            PlayerRequest(player_id="")

    def test_game_state_dice_range(self):
        """GameStateInfo rejects impossible die values."""
        from ludo_engine.api.schemas import GameStateInfo, MatchStatus

        with pytest.raises(ValidationError):
            GameStateInfo(status=MatchStatus.PLAYING, dice=7)

    def test_error_response_serializes(self):
        """ErrorResponse dumps its code as a plain string."""
        from ludo_engine.api.schemas import ErrorCode, ErrorResponse

        data = ErrorResponse(
            error="Not P2's turn",
            error_code=ErrorCode.NOT_YOUR_TURN,
        ).model_dump(mode="json")
        assert data == {
            "error": "Not P2's turn",
            "error_code": "NOT_YOUR_TURN",
            "details": None,
            "api_version": "v1",
        }

    def test_error_codes_cover_engine_errors(self):
        """Every engine exception code has an API error code."""
        from ludo_engine.api.schemas import ErrorCode
        from ludo_engine.engine_core import errors

        for name in errors.__all__:
            exc_cls = getattr(errors, name)
            if exc_cls is errors.LudoError:
                continue
            assert ErrorCode(exc_cls.code)


class TestOpenAPISchema:
    """Tests for OpenAPI schema generation."""

    def test_response_models_in_schema(self):
        """Response models appear in OpenAPI schema."""
        from fastapi.openapi.utils import get_openapi
        from ludo_engine.api import create_app
        from ludo_engine.config import Settings

        app = create_app(settings=Settings())
        schema = get_openapi(
            title=app.title,
            version=app.version,
            routes=app.routes,
        )

        schemas = schema["components"]["schemas"]
        for name in [
            "RoomResponse",
            "TransitionResponse",
            "LegalMovesResponse",
            "BoardResponse",
            "ErrorResponse",
        ]:
            assert name in schemas, f"Missing schema: {name}"

    def test_turn_endpoints_present(self):
        """Roll, move and pass are POST endpoints."""
        from fastapi.openapi.utils import get_openapi
        from ludo_engine.api import create_app
        from ludo_engine.config import Settings

        app = create_app(settings=Settings())
        paths = get_openapi(title=app.title, version=app.version, routes=app.routes)["paths"]
        for action in ["roll", "move", "pass"]:
            assert "post" in paths[f"/api/v1/rooms/{{code}}/{action}"]
