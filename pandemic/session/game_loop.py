"""
Game Loop - Drives bot turns through a session.

The loop:
1. Generate the legal actions
2. Ask the policy for a decision
3. Apply it through the session
4. Repeat until the turn passes to the next player or the game ends

run() repeats whole turns up to a turn limit and summarizes the result.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
import logging
from typing import TYPE_CHECKING

from ..bots import BotPolicy, FirstLegalPolicy
from ..engine_core.action import ActionType
from ..engine_core.action_generator import legal_actions
from ..engine_core.errors import GameOverError
from ..engine_core.state import GameStatus

if TYPE_CHECKING:
    from .manager import Session

logger = logging.getLogger(__name__)

# Upper bound on actions in one turn; a turn is a handful of steps plus events
MAX_ACTIONS_PER_TURN = 100


class LoopState(Enum):
    """State of the game loop."""
    READY = "ready"
    RUNNING_AUTOMA = "running_automa"
    GAME_OVER = "game_over"


@dataclass
class TurnResult:
    """
    Result of playing one turn.

    Contains the applied commands, the engine's change log and
    instructions for a human mirroring the game on a physical table.
    """
    success: bool
    loop_state: LoopState
    player_index: int

    actions: list[str] = field(default_factory=list)
    changes: list[str] = field(default_factory=list)

    # Instructions for human to execute on physical table
    instructions: list[str] = field(default_factory=list)

    errors: list[str] = field(default_factory=list)
    status: GameStatus = GameStatus.ONGOING


@dataclass
class LoopSummary:
    """Outcome of run()."""
    turns_played: int
    status: GameStatus
    outbreak_count: int
    infection_rate_position: int
    actions_applied: int


class GameLoop:
    """
    The bot game loop driver.

    Usage:
        loop = GameLoop(session, RandomPolicy(seed=7))
        result = loop.play_turn()
        summary = loop.run(max_turns=50)
    """

    def __init__(self, session: Session, policy: BotPolicy | None = None):
        self.session = session
        self.policy = policy or session.policy or FirstLegalPolicy()
        self.state = LoopState.READY if session.is_active() else LoopState.GAME_OVER

    def play_turn(self) -> TurnResult:
        """
        Play actions until the turn passes or the game ends.

        Raises:
            GameOverError: If the session's game has already ended
        """
        self.session.refresh_status()
        game = self.session.game_state
        if not self.session.is_active() or not game.is_ongoing:
            self.state = LoopState.GAME_OVER
            raise GameOverError(game.status.value, "play turn")

        self.state = LoopState.RUNNING_AUTOMA
        result = TurnResult(
            success=True,
            loop_state=self.state,
            player_index=game.current_player_index,
        )

        for _ in range(MAX_ACTIONS_PER_TURN):
            state = self.session.game_state
            legal = legal_actions(state)
            if not legal:
                break

            decision = self.policy.select_action(state, legal)
            applied = self.session.apply(decision.action)
            if not applied.success:
                # Generated actions should always apply
                logger.error(
                    "Legal action %s failed: %s", decision.action.to_command(), applied.error
                )
                result.success = False
                result.errors.append(applied.error or "Action failed")
                break

            result.actions.append(decision.action.to_command())
            result.changes.extend(applied.state_changes)
            result.instructions.extend(decision.physical_instructions)

            if not self.session.game_state.is_ongoing:
                break
            if decision.action.action_type == ActionType.INFECT:
                break

        result.status = self.session.game_state.status
        self.state = LoopState.READY if self.session.is_active() else LoopState.GAME_OVER
        result.loop_state = self.state
        self.session.pending_instructions = list(result.instructions)
        return result

    def run(self, max_turns: int = 100) -> LoopSummary:
        """Play turns until the game ends or max_turns have been played."""
        turns = 0
        actions = 0
        while turns < max_turns and self.session.is_active():
            result = self.play_turn()
            turns += 1
            actions += len(result.actions)
            if not result.success:
                break

        game = self.session.game_state
        logger.info(
            "Loop finished after %d turns: %s (%d outbreaks)",
            turns, game.status.value, game.outbreak_count,
        )
        return LoopSummary(
            turns_played=turns,
            status=game.status,
            outbreak_count=game.outbreak_count,
            infection_rate_position=game.infection_rate_position,
            actions_applied=actions,
        )
