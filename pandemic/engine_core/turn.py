"""
Turn-phase state machine.

    Actions -> Draw -> Infect -> Actions (next player)

Transitions are pure: they return a new GameState and leave the input alone.
Spending actions belongs to the action resolver; advancing out of the
Actions phase with actions left is the caller's call.
"""

from __future__ import annotations
import logging

from .errors import GameOverError, PhaseError
from .state import ACTIONS_PER_TURN, GameState, Player, TurnPhase

logger = logging.getLogger(__name__)


def get_current_player(state: GameState) -> Player:
    """The player whose turn it is. Raises ValueError for a corrupt index."""
    if not 0 <= state.current_player_index < len(state.players):
        raise ValueError(f"Invalid current player index: {state.current_player_index}")
    return state.players[state.current_player_index]


def advance_phase(state: GameState) -> GameState:
    """
    Move to the next turn phase.

    Actions -> Draw and Draw -> Infect only change the phase.
    Infect -> Actions passes the turn to the next player, restores 4 actions
    and clears the per-turn special-move flag.
    """
    if not state.is_ongoing:
        raise GameOverError(state.status.value, "advance phase")

    if state.phase == TurnPhase.ACTIONS:
        return state._copy_with(phase=TurnPhase.DRAW)

    if state.phase == TurnPhase.DRAW:
        return state._copy_with(phase=TurnPhase.INFECT)

    if state.phase == TurnPhase.INFECT:
        next_index = (state.current_player_index + 1) % state.num_players
        logger.debug("Turn passes to player %d", next_index)
        return state._copy_with(
            phase=TurnPhase.ACTIONS,
            current_player_index=next_index,
            actions_remaining=ACTIONS_PER_TURN,
            operations_expert_special_move_used=False,
        )

    raise ValueError(f"Unknown turn phase: {state.phase}")


def end_turn(state: GameState) -> GameState:
    """Finish the Infect phase and start the next player's turn."""
    if state.phase != TurnPhase.INFECT:
        raise PhaseError(
            f"Cannot end turn: must be in Infect phase, currently in {state.phase.value} phase"
        )
    return advance_phase(state)
