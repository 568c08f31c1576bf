"""
Session Module - Manages in-memory game sessions.

A session represents one play-through of a game:
- Created when a game is started (from a config and optional seed)
- Holds the current game state and the log of applied actions
- Drives bot turns through the game loop
- Removed when the game is ended

Sessions live in memory only; a game is persisted explicitly through
the save envelope in pandemic.serialization.
"""

from .manager import SessionManager, Session, SessionState
from .game_loop import GameLoop, LoopState, LoopSummary, TurnResult

__all__ = [
    "SessionManager",
    "Session",
    "SessionState",
    "GameLoop",
    "LoopState",
    "LoopSummary",
    "TurnResult",
]
