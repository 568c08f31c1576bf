"""
Serialization - Save and load games as versioned JSON.

A save is an envelope around GameState.to_dict():

    {"version": 1, "timestamp": <ms since epoch>, "state": {...}}

Loading accepts the current version and older ones, rejects newer ones,
and checks that every required state field is present before building
the GameState.
"""

from __future__ import annotations
import json
import logging
from pathlib import Path
import time
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from .engine_core.state import CureStatus, GameState

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1

REQUIRED_STATE_FIELDS = (
    "config",
    "players",
    "current_player_index",
    "phase",
    "actions_remaining",
    "board",
    "cures",
    "cube_supply",
    "infection_rate_position",
    "outbreak_count",
    "player_deck",
    "player_discard",
    "infection_deck",
    "infection_discard",
    "status",
)


class DeserializationError(ValueError):
    """Raised when a save cannot be turned back into a GameState."""


class SavedGame(BaseModel):
    """The save envelope."""
    version: int = Field(SCHEMA_VERSION, description="Schema version of the state")
    timestamp: int = Field(..., description="Milliseconds since epoch")
    state: dict[str, Any]


class SavePreview(BaseModel):
    """Summary of a save for load menus."""
    diseases_cured: int = Field(..., ge=0, le=4)
    outbreak_count: int
    current_player_role: str


def serialize_game(state: GameState) -> str:
    """Serialize a game state into the save envelope JSON."""
    saved = SavedGame(
        version=SCHEMA_VERSION,
        timestamp=int(time.time() * 1000),
        state=state.to_dict(),
    )
    return saved.model_dump_json()


def deserialize_game(text: str) -> GameState:
    """
    Rebuild a game state from save envelope JSON.

    Raises:
        DeserializationError: For invalid JSON, a missing or newer schema
            version, or a state with missing or malformed fields
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise DeserializationError(f"Invalid JSON: {e}") from e

    if not isinstance(data, dict):
        raise DeserializationError("Deserialized data is not an object")

    version = data.get("version")
    if not isinstance(version, int) or isinstance(version, bool):
        raise DeserializationError("Missing or invalid schema version")
    if version > SCHEMA_VERSION:
        raise DeserializationError(
            f"Incompatible schema version: got {version}, expected {SCHEMA_VERSION} or lower"
        )

    if not isinstance(data.get("state"), dict):
        raise DeserializationError("Missing or invalid game state")

    try:
        saved = SavedGame.model_validate(data)
    except ValidationError as e:
        raise DeserializationError(f"Invalid save envelope: {e}") from e

    for name in REQUIRED_STATE_FIELDS:
        if name not in saved.state:
            raise DeserializationError(f"Missing required field: {name}")

    try:
        return GameState.from_dict(saved.state)
    except (KeyError, TypeError, ValueError) as e:
        raise DeserializationError(f"Invalid game state: {e}") from e


def save_game(path: str | Path, state: GameState) -> Path:
    """Write a save file. Returns the path written."""
    path = Path(path)
    path.write_text(serialize_game(state), encoding="utf-8")
    logger.info("Saved game to %s", path)
    return path


def load_game(path: str | Path) -> GameState:
    """Read a save file. Raises DeserializationError for bad content."""
    path = Path(path)
    state = deserialize_game(path.read_text(encoding="utf-8"))
    logger.info("Loaded game from %s", path)
    return state


def create_save_preview(state: GameState) -> SavePreview:
    """Cured diseases, outbreaks and the current player's role."""
    cured = sum(
        1 for status in state.cures.values()
        if status in (CureStatus.CURED, CureStatus.ERADICATED)
    )
    return SavePreview(
        diseases_cured=cured,
        outbreak_count=state.outbreak_count,
        current_player_role=state.current_player.role.value,
    )
