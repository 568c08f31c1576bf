"""
Tests for the turn-phase state machine.
"""

import pytest

from ..engine_core.errors import GameOverError, PhaseError
from ..engine_core.state import GameStatus, TurnPhase
from ..engine_core.turn import advance_phase, end_turn, get_current_player
from .conftest import build_state


class TestAdvancePhase:
    """Actions -> Draw -> Infect -> Actions (next player)."""

    def test_actions_to_draw(self, empty_state):
        new_state = advance_phase(empty_state)
        assert new_state.phase == TurnPhase.DRAW
        assert new_state.current_player_index == 0

    def test_draw_to_infect(self):
        new_state = advance_phase(build_state(phase=TurnPhase.DRAW))
        assert new_state.phase == TurnPhase.INFECT

    def test_infect_starts_next_turn(self):
        state = build_state(
            phase=TurnPhase.INFECT,
            actions_remaining=0,
            operations_expert_special_move_used=True,
        )

        new_state = advance_phase(state)

        assert new_state.phase == TurnPhase.ACTIONS
        assert new_state.current_player_index == 1
        assert new_state.actions_remaining == 4
        assert new_state.operations_expert_special_move_used is False

    def test_turn_order_wraps(self):
        state = build_state(phase=TurnPhase.INFECT, current_player_index=1)
        assert advance_phase(state).current_player_index == 0

    def test_input_state_untouched(self, empty_state):
        advance_phase(empty_state)
        assert empty_state.phase == TurnPhase.ACTIONS

    def test_skip_flag_survives_transition(self):
        state = build_state(phase=TurnPhase.DRAW, skip_next_infection_phase=True)
        assert advance_phase(state).skip_next_infection_phase is True

    def test_finished_game_rejected(self):
        state = build_state(status=GameStatus.LOST)
        with pytest.raises(GameOverError, match="game has ended"):
            advance_phase(state)


class TestEndTurn:
    def test_end_turn_from_infect(self):
        state = build_state(phase=TurnPhase.INFECT)
        new_state = end_turn(state)
        assert new_state.phase == TurnPhase.ACTIONS
        assert new_state.current_player_index == 1

    def test_end_turn_wrong_phase(self, empty_state):
        with pytest.raises(PhaseError, match="must be in Infect phase"):
            end_turn(empty_state)

    def test_phase_error_is_value_error(self, empty_state):
        with pytest.raises(ValueError):
            end_turn(empty_state)


class TestCurrentPlayer:
    def test_current_player(self, empty_state):
        assert get_current_player(empty_state) is empty_state.players[0]

    def test_invalid_index(self):
        state = build_state(current_player_index=5)
        with pytest.raises(ValueError, match="Invalid current player index: 5"):
            get_current_player(state)
