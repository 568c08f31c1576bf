"""
Reducer - Applies core actions to game state.

The reducer is the single entry point the session, bots and API use to
change a game. It maps each Action onto the engine functions and chains
the turn steps:

    END_ACTIONS  Actions -> Draw
    DRAW_CARDS   draw 2 (epidemics resolve), then Draw -> Infect
    INFECT       infection phase, then Infect -> Actions (next player)

Design principles:
- Pure function: (state, action) -> ActionResult
- Validates before applying, gating on the evaluated game status
- Stamps the evaluated status onto every resulting state
- Engine exceptions become failure results; nothing raises past apply()
"""

from __future__ import annotations
from dataclasses import dataclass
import logging
import random

from .action import Action, ActionResult, ActionType
from .cards import EventType, describe_card
from .draw import draw_player_cards, enforce_hand_limit
from .events import (
    airlift,
    forecast,
    government_grant,
    one_quiet_night,
    resilient_population,
    store_event_card,
)
from .infection import execute_infection_phase
from .state import HAND_LIMIT, GameState, GameStatus, TurnPhase
from .status import current_status, with_evaluated_status
from .turn import advance_phase, end_turn

logger = logging.getLogger(__name__)

# Actions allowed while some hand is over the limit
_HAND_LIMIT_EXEMPT = {ActionType.DISCARD, ActionType.PLAY_EVENT}

_REQUIRED_PHASE = {
    ActionType.END_ACTIONS: TurnPhase.ACTIONS,
    ActionType.DRAW_CARDS: TurnPhase.DRAW,
    ActionType.INFECT: TurnPhase.INFECT,
}


def players_over_hand_limit(state: GameState) -> list[int]:
    """Indices of players holding more than 7 cards."""
    return [i for i, p in enumerate(state.players) if len(p.hand) > HAND_LIMIT]


@dataclass
class Reducer:
    """
    Reducer applies actions to game state.

    Stateless - all state is in GameState. The optional rng drives
    epidemic reshuffles.
    """
    rng: random.Random | None = None

    def apply(self, state: GameState, action: Action) -> ActionResult:
        """
        Apply an action to the game state.

        Returns ActionResult with new state or error.
        """
        status = current_status(state)
        if status != GameStatus.ONGOING:
            return ActionResult.failure(
                f"Cannot apply {action.action_type.value}: game has ended with status {status.value}",
                error_code="GAME_OVER",
            )

        validation_error = self._validate_action(state, action)
        if validation_error:
            return ActionResult.failure(validation_error, error_code="INVALID_ACTION")

        handler = self._get_handler(action.action_type)
        if not handler:
            return ActionResult.failure(
                f"No handler for action type: {action.action_type}",
                error_code="NO_HANDLER",
            )

        try:
            result = handler(state, action)
        except ValueError as e:
            logger.warning("Engine rejected %s: %s", action.to_command(), e)
            return ActionResult.failure(str(e), error_code="ENGINE_ERROR")

        if result.success:
            logger.debug("Applied %s", action.to_command())
            result.new_state = with_evaluated_status(result.new_state)
            if not result.new_state.is_ongoing:
                logger.info("Game over after %s: %s", action.to_command(), result.new_state.status.value)
        return result

    def _validate_action(self, state: GameState, action: Action) -> str | None:
        """
        Validate that an action is legal in the current state.

        Returns error message if invalid, None if valid.
        """
        if action.action_type not in _HAND_LIMIT_EXEMPT:
            over = players_over_hand_limit(state)
            if over:
                return f"Player {over[0]} must discard down to {HAND_LIMIT} cards first"

        required = _REQUIRED_PHASE.get(action.action_type)
        if required is not None and state.phase != required:
            return (
                f"Cannot {action.action_type.value}: must be in {required.value} phase, "
                f"currently in {state.phase.value} phase"
            )

        if action.action_type in (ActionType.PLAY_EVENT, ActionType.STORE_EVENT):
            if action.payload.event is None:
                return "No event specified"

        return None

    def _get_handler(self, action_type: ActionType):
        """Get the handler function for an action type."""
        handlers = {
            ActionType.END_ACTIONS: self._handle_end_actions,
            ActionType.DRAW_CARDS: self._handle_draw,
            ActionType.INFECT: self._handle_infect,
            ActionType.DISCARD: self._handle_discard,
            ActionType.PLAY_EVENT: self._handle_play_event,
            ActionType.STORE_EVENT: self._handle_store_event,
        }
        return handlers.get(action_type)

    def _handle_end_actions(self, state: GameState, action: Action) -> ActionResult:
        """Handle the end of the Actions phase."""
        return ActionResult.success_with_state(
            advance_phase(state),
            changes=[f"Player {state.current_player_index} ended their actions"],
        )

    def _handle_draw(self, state: GameState, action: Action) -> ActionResult:
        """Handle the Draw phase: draw 2, resolve epidemics, move on to Infect."""
        before = len(state.current_player.hand)
        result = draw_player_cards(state, self.rng)
        new_state = result.state

        changes = []
        drawn = new_state.current_player.hand[before:]
        if drawn:
            changes.append(f"Drew {', '.join(describe_card(c) for c in drawn)}")
        for epidemic in result.epidemics:
            changes.append(
                f"Epidemic! {epidemic.infected_city} infected with 3 "
                f"{epidemic.infected_color.value} cubes"
            )

        if new_state.is_ongoing:
            new_state = advance_phase(new_state)
        else:
            changes.append("The game is lost")

        return ActionResult.success_with_state(new_state, changes=changes)

    def _handle_infect(self, state: GameState, action: Action) -> ActionResult:
        """Handle the Infect phase, then pass the turn."""
        result = execute_infection_phase(state)
        new_state = result.state

        if result.skipped:
            changes = ["One Quiet Night: no infection this turn"]
        else:
            changes = [f"Infected {card.city}" for card in result.cities_infected]
        changes.extend(f"Outbreak in {city}" for city in result.outbreaks)

        if new_state.is_ongoing:
            new_state = end_turn(new_state)
        else:
            changes.append("The game is lost")

        return ActionResult.success_with_state(new_state, changes=changes)

    def _handle_discard(self, state: GameState, action: Action) -> ActionResult:
        """Handle hand-limit discards."""
        payload = action.payload
        player_index = payload.player_index
        if player_index is None:
            # Default to whoever is over the limit, current player first
            over = players_over_hand_limit(state)
            if over and state.current_player_index not in over:
                player_index = over[0]
        return enforce_hand_limit(state, player_index, payload.card_indices)

    def _handle_play_event(self, state: GameState, action: Action) -> ActionResult:
        """Dispatch an event card play."""
        p = action.payload
        if p.event == EventType.AIRLIFT:
            if p.target_player_index is None or p.city is None:
                return ActionResult.failure("Airlift requires a target player and a city")
            return airlift(state, p.target_player_index, p.city, p.player_index)

        if p.event == EventType.GOVERNMENT_GRANT:
            if p.city is None:
                return ActionResult.failure("Government Grant requires a city")
            return government_grant(state, p.city, p.city_to_remove_station, p.player_index)

        if p.event == EventType.ONE_QUIET_NIGHT:
            return one_quiet_night(state, p.player_index)

        if p.event == EventType.RESILIENT_POPULATION:
            if p.city is None:
                return ActionResult.failure("Resilient Population requires a city")
            return resilient_population(state, p.city, p.player_index)

        if p.event == EventType.FORECAST:
            return forecast(state, p.forecast_order, p.player_index)

        return ActionResult.failure(f"Unknown event: {p.event}")

    def _handle_store_event(self, state: GameState, action: Action) -> ActionResult:
        """Handle the Contingency Planner storing an event card."""
        return store_event_card(state, action.payload.event)


def apply_action(state: GameState, action: Action, rng: random.Random | None = None) -> ActionResult:
    """
    Convenience function to apply an action.

    Creates a Reducer and applies the action.
    """
    return Reducer(rng=rng).apply(state, action)
