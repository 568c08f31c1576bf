"""
FastAPI Application - REST API for the game engine.

Endpoints:
    POST   /api/v1/games                 Create a game
    GET    /api/v1/games                 List active games
    GET    /api/v1/games/{id}            Get game summary
    DELETE /api/v1/games/{id}            End the game session
    GET    /api/v1/games/{id}/actions    Legal command strings
    POST   /api/v1/games/{id}/actions    Apply a command
    POST   /api/v1/games/{id}/bot-turn   Let the bot play the current turn
    GET    /api/v1/games/{id}/save       Save envelope JSON

Commands use the same strings as the CLI, e.g. "end-actions", "draw",
"infect", "discard:0,3", "event:airlift:1:Paris".

All responses are JSON with explicit Pydantic schemas.
"""

from typing import Any, Union

from .. import __version__, config
from ..logging_setup import configure_logging


def create_app(service=None):
    """
    Create the FastAPI application.

    Args:
        service: Optional APIService instance (creates new if not provided)

    Returns:
        FastAPI application instance
    """
    try:
        from fastapi import FastAPI
        from fastapi.middleware.cors import CORSMiddleware
        from fastapi.responses import JSONResponse
    except ImportError:
        raise ImportError(
            "FastAPI not installed. Install with: pip install fastapi uvicorn"
        )

    from .service import APIService
    from .schemas import (
        # Request models
        ActionRequest,
        CreateGameRequest,
        # Response models
        ActionResponse,
        EndGameResponse,
        ErrorResponse,
        GameResponse,
        HealthResponse,
        LegalActionsResponse,
        # Enums
        ErrorCode,
    )

    configure_logging()

    app = FastAPI(
        title="Pandemic Engine API",
        description="""
Cooperative disease-control game engine.

## Turn cycle

Each turn is `end-actions` -> `draw` -> `infect`. Events can be played at
any time with `event:<name>:...`. While a hand is over 7 cards only
`discard:` commands and events are accepted.

## Error Codes

| Code | Description |
|------|-------------|
| `SESSION_NOT_FOUND` | Game does not exist |
| `INVALID_ACTION` | Command malformed or rejected |
| `INVALID_CONFIG` | Player count or difficulty out of range |
| `GAME_OVER` | The game has been won or lost |
        """,
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    api_service = service or APIService()

    status_codes = {
        ErrorCode.SESSION_NOT_FOUND: 404,
        ErrorCode.INVALID_ACTION: 400,
        ErrorCode.INVALID_CONFIG: 400,
        ErrorCode.GAME_OVER: 409,
    }

    # =========================================================================
    # Error helpers
    # =========================================================================

    def make_error_response(error: ErrorResponse) -> JSONResponse:
        """Create a standardized error response."""
        return JSONResponse(
            status_code=status_codes.get(error.error_code, 400),
            content=error.model_dump(mode="json"),
        )

    # =========================================================================
    # Game Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/games",
        response_model=GameResponse,
        responses={400: {"model": ErrorResponse, "description": "Invalid configuration"}},
        tags=["Games"],
        summary="Create a new game",
    )
    async def create_game(request: CreateGameRequest) -> Union[GameResponse, JSONResponse]:
        """Deal a new game. The same seed always produces the same setup."""
        response = api_service.create_game(request)
        if isinstance(response, ErrorResponse):
            return make_error_response(response)
        return response

    @app.get(
        "/api/v1/games",
        tags=["Games"],
        summary="List active games",
    )
    async def list_games() -> dict[str, Any]:
        """List all active game IDs."""
        games = api_service.list_games()
        return {"games": games, "count": len(games)}

    @app.get(
        "/api/v1/games/{game_id}",
        response_model=GameResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Games"],
        summary="Get game summary",
    )
    async def get_game(game_id: str) -> Union[GameResponse, JSONResponse]:
        """Get the current state of a game."""
        response = api_service.get_game(game_id)
        if isinstance(response, ErrorResponse):
            return make_error_response(response)
        return response

    @app.delete(
        "/api/v1/games/{game_id}",
        response_model=EndGameResponse,
        tags=["Games"],
        summary="End a game session",
    )
    async def end_game(game_id: str) -> EndGameResponse:
        """End a game session and release it."""
        success = api_service.end_game(game_id)
        return EndGameResponse(success=success, game_id=game_id)

    # =========================================================================
    # Action Endpoints
    # =========================================================================

    @app.get(
        "/api/v1/games/{game_id}/actions",
        response_model=LegalActionsResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Actions"],
        summary="List legal commands",
    )
    async def get_actions(game_id: str) -> Union[LegalActionsResponse, JSONResponse]:
        """
        Legal commands for the current state.

        Targeted events (airlift, government_grant, forecast) are not
        listed but can still be submitted.
        """
        response = api_service.get_legal_actions(game_id)
        if isinstance(response, ErrorResponse):
            return make_error_response(response)
        return response

    @app.post(
        "/api/v1/games/{game_id}/actions",
        response_model=ActionResponse,
        responses={
            400: {"model": ErrorResponse, "description": "Invalid command"},
            404: {"model": ErrorResponse},
            409: {"model": ErrorResponse, "description": "Game over"},
        },
        tags=["Actions"],
        summary="Apply a command",
    )
    async def apply_action(
        game_id: str, request: ActionRequest
    ) -> Union[ActionResponse, JSONResponse]:
        """Apply one command string to the game."""
        response = api_service.apply_command(game_id, request.command)
        if isinstance(response, ErrorResponse):
            return make_error_response(response)
        return response

    @app.post(
        "/api/v1/games/{game_id}/bot-turn",
        response_model=ActionResponse,
        responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
        tags=["Actions"],
        summary="Let the bot play the current turn",
    )
    async def bot_turn(game_id: str) -> Union[ActionResponse, JSONResponse]:
        """Play actions with the game's bot policy until the turn passes."""
        response = api_service.bot_turn(game_id)
        if isinstance(response, ErrorResponse):
            return make_error_response(response)
        return response

    @app.get(
        "/api/v1/games/{game_id}/save",
        responses={404: {"model": ErrorResponse}},
        tags=["Games"],
        summary="Download the save envelope",
    )
    async def save_game(game_id: str):
        """The game as a versioned save envelope."""
        response = api_service.save_game(game_id)
        if isinstance(response, ErrorResponse):
            return make_error_response(response)
        return response

    # =========================================================================
    # Health Check
    # =========================================================================

    @app.get(
        "/health",
        response_model=HealthResponse,
        tags=["System"],
        summary="Health check",
    )
    async def health_check() -> HealthResponse:
        """Health check endpoint for load balancers."""
        return HealthResponse(
            status="healthy",
            service="pandemic-engine",
            version=__version__,
        )

    @app.get("/", tags=["System"])
    async def root():
        """Root endpoint with API info."""
        return {
            "name": "Pandemic Engine API",
            "version": __version__,
            "environment": config.PANDEMIC_ENV,
            "docs": "/api/docs",
            "health": "/health",
        }

    return app
