"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the contract between HTTP clients and the engine.
All responses include explicit types for OpenAPI schema generation.

Error Codes:
- SESSION_NOT_FOUND: Session does not exist or has been ended
- INVALID_ACTION: Command could not be parsed or was rejected by the engine
- INVALID_CONFIG: Player count or difficulty out of range
- GAME_OVER: The game has already been won or lost
"""

from enum import Enum
from typing import Optional, Any
from pydantic import BaseModel, Field


# =============================================================================
# Enums
# =============================================================================

class ErrorCode(str, Enum):
    """Structured error codes."""
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    INVALID_ACTION = "INVALID_ACTION"
    INVALID_CONFIG = "INVALID_CONFIG"
    GAME_OVER = "GAME_OVER"


class PolicyName(str, Enum):
    """Built-in bot policies."""
    RANDOM = "random"
    FIRST = "first"


# =============================================================================
# Shared Models
# =============================================================================

class PlayerInfo(BaseModel):
    """Player information for display."""
    index: int
    role: str
    location: str
    hand: list[str] = Field(default_factory=list)
    stored_event_card: Optional[str] = None
    is_current_turn: bool = False


class CityInfo(BaseModel):
    """A city with cubes or a research station."""
    name: str
    cubes: dict[str, int] = Field(default_factory=dict)
    has_research_station: bool = False


# =============================================================================
# Request Models
# =============================================================================

class CreateGameRequest(BaseModel):
    """Request to start a new game."""
    player_count: int = Field(2, description="Number of players (2-4)")
    difficulty: Optional[int] = Field(
        None, description="Number of epidemic cards (4-6); server default if omitted"
    )
    random_seed: Optional[int] = Field(None, description="Seed for reproducible games")
    policy: PolicyName = Field(PolicyName.RANDOM, description="Bot policy for bot turns")


class ActionRequest(BaseModel):
    """A command string, e.g. "draw" or "event:airlift:1:Paris"."""
    command: str = Field(..., min_length=1, description="Action command string")


# =============================================================================
# Response Models
# =============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str = Field(..., description="Human-readable error message")
    error_code: ErrorCode = Field(..., description="Machine-readable error code")
    details: Optional[dict[str, Any]] = Field(None, description="Additional error context")
    api_version: str = Field("v1", description="API version")


class GameResponse(BaseModel):
    """Summary of a game for display."""
    game_id: str
    status: str
    phase: str
    turn_number: int = 0
    current_player_index: int
    actions_remaining: int
    infection_rate: int
    infection_rate_position: int
    outbreak_count: int
    cures: dict[str, str] = Field(default_factory=dict)
    cube_supply: dict[str, int] = Field(default_factory=dict)
    player_deck_size: int = 0
    infection_discard: list[str] = Field(default_factory=list)
    players: list[PlayerInfo] = Field(default_factory=list)
    infected_cities: list[CityInfo] = Field(default_factory=list)
    research_stations: list[str] = Field(default_factory=list)
    api_version: str = "v1"


class ActionResponse(BaseModel):
    """Result of applying one command or one bot turn."""
    game_id: str
    success: bool
    actions: list[str] = Field(default_factory=list)
    changes: list[str] = Field(default_factory=list)
    instructions: list[str] = Field(default_factory=list)
    game: GameResponse
    api_version: str = "v1"


class LegalActionsResponse(BaseModel):
    """Legal command strings for the current state."""
    game_id: str
    actions: list[str]
    count: int


class EndGameResponse(BaseModel):
    """Response after ending a game session."""
    success: bool
    game_id: str


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    service: str
    version: str
