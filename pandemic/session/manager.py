"""
Session Manager - Creates and manages game sessions.

LIFECYCLE:
1. A game is started -> create_game() from the config and seed
2. During the game:
   - Actions (from a person or a bot) go through Session.apply()
   - Every applied action is recorded as a command string
3. The game ends (won / lost) -> further actions raise GameOverError
4. The session is ended -> removed from memory

PERSISTENCE:
- Sessions are in-memory only
- A game can be saved with pandemic.serialization and loaded into a new
  session with SessionManager.restore_session()
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
import logging
import random
import time
from typing import Any
import uuid

from ..bots import BotPolicy
from ..engine_core.action import Action, ActionResult, ActionType
from ..engine_core.deck import create_game
from ..engine_core.errors import GameOverError
from ..engine_core.reducer import Reducer
from ..engine_core.state import GameConfig, GameState
from ..engine_core.status import with_evaluated_status

logger = logging.getLogger(__name__)


class SessionState(Enum):
    """State of a game session."""
    ACTIVE = "active"  # Game in progress
    GAME_OVER = "game_over"  # Won or lost
    ABANDONED = "abandoned"  # Ended before the game finished


@dataclass
class Session:
    """
    An in-memory game session.

    Contains:
    - Current canonical game state
    - The RNG used for epidemic reshuffles
    - Optional bot policy for automated turns
    - The applied-action log and session metadata
    """
    session_id: str
    config: GameConfig
    created_at: float
    game_state: GameState

    random_seed: int | None = None
    rng: random.Random = field(default_factory=random.Random)
    policy: BotPolicy | None = None

    state: SessionState = SessionState.ACTIVE
    turn_number: int = 0
    action_log: list[str] = field(default_factory=list)

    # Instructions for a human mirroring the game (from the last bot turn)
    pending_instructions: list[str] = field(default_factory=list)

    metadata: dict[str, Any] = field(default_factory=dict)

    def is_active(self) -> bool:
        """Check if session is still active."""
        return self.state == SessionState.ACTIVE

    def refresh_status(self) -> None:
        """Re-evaluate the game status and end the session if the game is over."""
        self.game_state = with_evaluated_status(self.game_state)
        if self.is_active() and not self.game_state.is_ongoing:
            self.state = SessionState.GAME_OVER
            logger.info(
                "Session %s finished: %s after %d turns",
                self.session_id, self.game_state.status.value, self.turn_number,
            )

    def apply(self, action: Action) -> ActionResult:
        """
        Apply an action to the session's game.

        Failed actions leave the session untouched. Raises GameOverError
        once the game has ended.
        """
        self.refresh_status()
        if not self.is_active():
            raise GameOverError(self.game_state.status.value, "apply action")

        result = Reducer(rng=self.rng).apply(self.game_state, action)
        if not result.success:
            return result

        self.game_state = result.new_state
        self.action_log.append(action.to_command())
        if action.action_type == ActionType.INFECT and self.game_state.is_ongoing:
            self.turn_number += 1

        self.refresh_status()
        return result

    def get_instructions(self) -> list[str]:
        """Get pending instructions for human player."""
        instructions = self.pending_instructions.copy()
        self.pending_instructions.clear()
        return instructions


class SessionManager:
    """
    Manages game sessions.

    Responsibilities:
    - Create sessions from a config and seed
    - Track active sessions
    - Clean up ended sessions

    No persistence - sessions are in-memory only.
    """

    def __init__(self):
        self._sessions: dict[str, Session] = {}

    def create_session(
        self,
        config: GameConfig,
        random_seed: int | None = None,
        policy: BotPolicy | None = None,
    ) -> Session:
        """
        Create a new game session.

        Args:
            config: Player count and difficulty
            random_seed: Seed for setup and epidemic shuffles
            policy: Bot policy used by the game loop

        Returns:
            New Session in the Actions phase of the first turn

        Raises:
            ValueError: If the config is invalid
        """
        game_state = create_game(config, random_seed)
        return self._register(config, game_state, random_seed, policy)

    def restore_session(
        self,
        game_state: GameState,
        random_seed: int | None = None,
        policy: BotPolicy | None = None,
    ) -> Session:
        """Create a session around an existing (e.g. loaded) game state."""
        session = self._register(game_state.config, game_state, random_seed, policy)
        session.refresh_status()
        return session

    def _register(
        self,
        config: GameConfig,
        game_state: GameState,
        random_seed: int | None,
        policy: BotPolicy | None,
    ) -> Session:
        session = Session(
            session_id=str(uuid.uuid4()),
            config=config,
            created_at=time.time(),
            game_state=game_state,
            random_seed=random_seed,
            rng=random.Random(random_seed),
            policy=policy,
        )
        self._sessions[session.session_id] = session
        logger.info(
            "Created session %s (%d players, difficulty %d)",
            session.session_id, config.player_count, config.difficulty,
        )
        return session

    def get_session(self, session_id: str) -> Session | None:
        """Get a session by ID."""
        return self._sessions.get(session_id)

    def end_session(self, session_id: str, reason: str = "completed") -> bool:
        """
        End a session and remove it from memory.

        Returns False if no such session exists.
        """
        session = self._sessions.pop(session_id, None)
        if session is None:
            return False

        if session.game_state.is_ongoing:
            session.state = SessionState.ABANDONED
        else:
            session.state = SessionState.GAME_OVER
        session.pending_instructions.clear()
        logger.info("Ended session %s (%s)", session_id, reason)
        return True

    def list_active_sessions(self) -> list[str]:
        """List IDs of active sessions."""
        return [
            sid for sid, session in self._sessions.items()
            if session.is_active()
        ]

    def cleanup_stale_sessions(self, max_age_seconds: int = 3600):
        """
        Clean up finished sessions older than max_age.

        Called periodically to free memory.
        """
        current_time = time.time()
        to_remove = [
            session_id for session_id, session in self._sessions.items()
            if current_time - session.created_at > max_age_seconds and not session.is_active()
        ]

        for session_id in to_remove:
            self.end_session(session_id, reason="stale")
