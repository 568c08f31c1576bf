"""
API Module - HTTP interface to the engine.

Exposes games via a REST API:
1. Create a game from a player count, difficulty and seed
2. Read the game summary and the legal commands
3. Apply commands or let a bot play a turn
4. Download a save

All state is session-scoped and in memory.
"""

from .schemas import (
    # Requests
    ActionRequest,
    CreateGameRequest,
    # Responses
    ActionResponse,
    ErrorResponse,
    GameResponse,
    LegalActionsResponse,
    # Enums
    ErrorCode,
)
from .service import APIService
from .app import create_app

__all__ = [
    # Requests
    "ActionRequest",
    "CreateGameRequest",
    # Responses
    "ActionResponse",
    "ErrorResponse",
    "GameResponse",
    "LegalActionsResponse",
    # Enums
    "ErrorCode",
    # Service
    "APIService",
    "create_app",
]
