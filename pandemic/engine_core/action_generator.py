"""
Action Generator - Generates the legal core actions from a game state.

The action generator is used by:
1. Bots to enumerate possible moves
2. The API and CLI to show available commands
3. Validation (is this action in legal_actions?)

Design: Generates Action objects, not just action types.
Targeted events (Airlift, Government Grant, Forecast) have too many
possible targets to enumerate and are left to the caller.
"""

from __future__ import annotations
from dataclasses import dataclass
from itertools import combinations

from .action import Action
from .cards import EventCard, EventType, Role
from .reducer import players_over_hand_limit
from .state import HAND_LIMIT, GameState, GameStatus, TurnPhase
from .status import current_status


@dataclass
class ActionGenerator:
    """Generates legal actions for the current game state."""

    def generate(self, state: GameState) -> list[Action]:
        """
        Generate all legal actions.

        Returns a list of fully-specified Action objects.
        """
        if current_status(state) != GameStatus.ONGOING:
            return []

        # An over-limit hand must be resolved before anything else
        over = players_over_hand_limit(state)
        if over:
            return self._generate_discard_actions(state, over[0])

        actions = [self._generate_phase_step(state)]
        actions.extend(self._generate_store_actions(state))
        actions.extend(self._generate_event_actions(state))
        return actions

    def _generate_phase_step(self, state: GameState) -> Action:
        if state.phase == TurnPhase.ACTIONS:
            return Action.end_actions()
        if state.phase == TurnPhase.DRAW:
            return Action.draw()
        return Action.infect()

    def _generate_discard_actions(self, state: GameState, player_index: int) -> list[Action]:
        """One action per set of cards that brings the hand down to the limit."""
        hand = state.players[player_index].hand
        excess = len(hand) - HAND_LIMIT
        return [
            Action.discard(list(indices), player_index=player_index)
            for indices in combinations(range(len(hand)), excess)
        ]

    def _generate_store_actions(self, state: GameState) -> list[Action]:
        """Contingency Planner: one action per distinct event in the discard pile."""
        player = state.current_player
        if (
            state.phase != TurnPhase.ACTIONS
            or state.actions_remaining <= 0
            or player.role != Role.CONTINGENCY_PLANNER
            or player.stored_event_card is not None
        ):
            return []

        events = []
        for card in state.player_discard:
            if isinstance(card, EventCard) and card.event not in events:
                events.append(card.event)
        return [Action.store_event(event) for event in events]

    def _generate_event_actions(self, state: GameState) -> list[Action]:
        """Untargeted event plays for every player holding the card."""
        discard_cities = list(dict.fromkeys(card.city for card in state.infection_discard))

        actions = []
        for index, player in enumerate(state.players):
            held = {card.event for card in player.hand if isinstance(card, EventCard)}
            if player.stored_event_card is not None:
                held.add(player.stored_event_card.event)

            if EventType.ONE_QUIET_NIGHT in held:
                actions.append(Action.one_quiet_night(player_index=index))
            if EventType.RESILIENT_POPULATION in held:
                actions.extend(
                    Action.resilient_population(city, player_index=index)
                    for city in discard_cities
                )
        return actions


def legal_actions(state: GameState) -> list[Action]:
    """
    Convenience function to get legal actions.

    Creates an ActionGenerator and generates actions.
    """
    return ActionGenerator().generate(state)


def get_available_actions(state: GameState) -> list[str]:
    """Legal actions rendered as command strings."""
    return [action.to_command() for action in legal_actions(state)]


def is_legal(state: GameState, action: Action) -> bool:
    """Check if a specific action is among the generated legal actions."""
    command = action.to_command()
    return any(a.to_command() == command for a in legal_actions(state))
