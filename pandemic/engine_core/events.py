"""
Event Engine - The five event cards and the Contingency Planner's stored event.

Events:
- Are playable by any player, in any phase, at any time the game is ongoing
- Never cost an action
- Come from the player's hand (then discarded) or from the Contingency
  Planner's stored slot (then removed from the game)

Every event returns an ActionResult. Argument problems are failures, not
exceptions, and leave the input state untouched.
"""

from __future__ import annotations
from collections import Counter
import logging
from typing import Sequence

from .action import ActionResult
from .cards import EventCard, EventType, Role
from .state import MAX_RESEARCH_STATIONS, GameState, TurnPhase

logger = logging.getLogger(__name__)

FORECAST_DEPTH = 6


def _acting_index(state: GameState, player_index: int | None) -> int:
    return state.current_player_index if player_index is None else player_index


def has_event_card(state: GameState, event_type: EventType, player_index: int | None = None) -> bool:
    """Whether a player holds an event card, in hand or stored."""
    index = _acting_index(state, player_index)
    if not 0 <= index < len(state.players):
        return False
    player = state.players[index]
    in_hand = any(isinstance(c, EventCard) and c.event == event_type for c in player.hand)
    stored = player.stored_event_card is not None and player.stored_event_card.event == event_type
    return in_hand or stored


def play_event_card(
    state: GameState,
    event_type: EventType,
    player_index: int | None = None,
) -> ActionResult:
    """
    Spend an event card without applying its effect.

    Checks the game is ongoing and the player holds the card, then removes
    it: a hand card goes to the player discard pile, a stored card leaves
    the game.
    """
    if not state.is_ongoing:
        return ActionResult.failure(
            f"Cannot play event card: game has ended with status {state.status.value}",
            error_code="GAME_OVER",
        )

    index = _acting_index(state, player_index)
    if not 0 <= index < len(state.players):
        return ActionResult.failure(f"Invalid player index: {index}")

    player = state.players[index]
    hand_index = next(
        (
            i for i, card in enumerate(player.hand)
            if isinstance(card, EventCard) and card.event == event_type
        ),
        None,
    )

    if hand_index is not None:
        card = player.hand[hand_index]
        new_hand = player.hand[:hand_index] + player.hand[hand_index + 1:]
        new_state = state.with_player(index, player.with_hand(new_hand))._copy_with(
            player_discard=state.player_discard + [card],
        )
        return ActionResult.success_with_state(
            new_state, changes=[f"Player {index} played {event_type.value}"]
        )

    stored = player.stored_event_card
    if stored is not None and stored.event == event_type:
        return ActionResult.success_with_state(
            state.with_player(index, player.with_stored_event(None)),
            changes=[f"Player {index} played stored {event_type.value}; it leaves the game"],
        )

    return ActionResult.failure(
        f"Player does not have {event_type.value} event card in hand or stored"
    )


def airlift(
    state: GameState,
    target_player_index: int,
    destination_city: str,
    event_player_index: int | None = None,
) -> ActionResult:
    """Move any pawn to any city."""
    played = play_event_card(state, EventType.AIRLIFT, event_player_index)
    if not played.success:
        return played
    new_state: GameState = played.new_state

    if not 0 <= target_player_index < len(new_state.players):
        return ActionResult.failure(f"Invalid target player index: {target_player_index}")

    if destination_city not in new_state.board:
        return ActionResult.failure(f"Invalid destination city: {destination_city}")

    target = new_state.players[target_player_index]
    logger.info("Airlift: player %d to %s", target_player_index, destination_city)
    return ActionResult.success_with_state(
        new_state.with_player(target_player_index, target.with_location(destination_city)),
        changes=played.state_changes + [f"Player {target_player_index} airlifted to {destination_city}"],
    )


def government_grant(
    state: GameState,
    city: str,
    city_to_remove_station: str | None = None,
    event_player_index: int | None = None,
) -> ActionResult:
    """
    Build a research station anywhere, with no city card and no pawn there.

    With all 6 stations on the board, a city to take one from is required;
    with fewer, naming one is an error.
    """
    played = play_event_card(state, EventType.GOVERNMENT_GRANT, event_player_index)
    if not played.success:
        return played
    new_state: GameState = played.new_state

    city_state = new_state.board.get(city)
    if city_state is None:
        return ActionResult.failure(f"Invalid city: {city}")

    if city_state.has_research_station:
        return ActionResult.failure(
            f"Cannot build research station in {city}: research station already exists here"
        )

    if new_state.research_station_count() >= MAX_RESEARCH_STATIONS:
        if not city_to_remove_station:
            return ActionResult.failure(
                "Cannot build research station: all 6 stations are in use. "
                "Must specify a city to remove one from."
            )
        remove_state = new_state.board.get(city_to_remove_station)
        if remove_state is None:
            return ActionResult.failure(
                f"Invalid city to remove station from: {city_to_remove_station}"
            )
        if not remove_state.has_research_station:
            return ActionResult.failure(
                f"Cannot remove research station from {city_to_remove_station}: "
                "no research station exists there"
            )
        new_state = new_state.with_city(
            city_to_remove_station, remove_state.with_research_station(False)
        )
    elif city_to_remove_station:
        return ActionResult.failure(
            "Cannot remove research station: only remove stations when all 6 are in use"
        )

    logger.info("Government Grant: research station in %s", city)
    changes = played.state_changes + [f"Research station built in {city}"]
    if city_to_remove_station:
        changes.append(f"Research station removed from {city_to_remove_station}")
    return ActionResult.success_with_state(
        new_state.with_city(city, city_state.with_research_station(True)),
        changes=changes,
    )


def one_quiet_night(state: GameState, event_player_index: int | None = None) -> ActionResult:
    """Skip the next Infect phase."""
    played = play_event_card(state, EventType.ONE_QUIET_NIGHT, event_player_index)
    if not played.success:
        return played
    return ActionResult.success_with_state(
        played.new_state._copy_with(skip_next_infection_phase=True),
        changes=played.state_changes + ["The next infection phase will be skipped"],
    )


def resilient_population(
    state: GameState,
    city: str,
    event_player_index: int | None = None,
) -> ActionResult:
    """Remove one card from the infection discard pile from the game."""
    played = play_event_card(state, EventType.RESILIENT_POPULATION, event_player_index)
    if not played.success:
        return played
    new_state: GameState = played.new_state

    position = next(
        (i for i, card in enumerate(new_state.infection_discard) if card.city == city),
        None,
    )
    if position is None:
        return ActionResult.failure(f"{city} is not in the infection discard pile")

    discard = new_state.infection_discard
    logger.info("Resilient Population: %s removed from the game", city)
    return ActionResult.success_with_state(
        new_state._copy_with(infection_discard=discard[:position] + discard[position + 1:]),
        changes=played.state_changes + [f"{city} infection card removed from the game"],
    )


def forecast(
    state: GameState,
    new_order: Sequence[str],
    event_player_index: int | None = None,
) -> ActionResult:
    """
    Rearrange the top cards of the infection deck.

    new_order lists city names, top first, and must be a permutation of the
    top min(6, deck size) cards. Cards below are untouched.
    """
    played = play_event_card(state, EventType.FORECAST, event_player_index)
    if not played.success:
        return played
    new_state: GameState = played.new_state

    depth = min(FORECAST_DEPTH, len(new_state.infection_deck))
    top = new_state.infection_deck[:depth]

    if len(new_order) != depth:
        return ActionResult.failure(
            f"Forecast order must contain exactly {depth} card(s), got {len(new_order)}"
        )
    if Counter(new_order) != Counter(card.city for card in top):
        return ActionResult.failure(
            "Forecast order must be a rearrangement of the top infection cards"
        )

    by_city = {card.city: card for card in top}
    reordered = [by_city[city] for city in new_order]
    return ActionResult.success_with_state(
        new_state._copy_with(infection_deck=reordered + new_state.infection_deck[depth:]),
        changes=played.state_changes + ["Top of the infection deck rearranged"],
    )


def store_event_card(state: GameState, event_type: EventType) -> ActionResult:
    """
    Contingency Planner: take an event card from the discard pile onto the role card.

    Costs one action. Only one card can be stored at a time.
    """
    if not state.is_ongoing:
        return ActionResult.failure(
            f"Cannot perform action: game has ended with status {state.status.value}",
            error_code="GAME_OVER",
        )
    if state.phase != TurnPhase.ACTIONS:
        return ActionResult.failure(
            f"Cannot perform action: current phase is {state.phase.value}, not actions"
        )
    if state.actions_remaining <= 0:
        return ActionResult.failure("Cannot perform action: no actions remaining this turn")

    player = state.current_player
    if player.role != Role.CONTINGENCY_PLANNER:
        return ActionResult.failure(
            "Cannot use Contingency Planner ability: current player is not Contingency Planner"
        )
    if player.stored_event_card is not None:
        return ActionResult.failure(
            "Cannot store event card: Contingency Planner already has a stored event card"
        )

    position = next(
        (
            i for i, card in enumerate(state.player_discard)
            if isinstance(card, EventCard) and card.event == event_type
        ),
        None,
    )
    if position is None:
        return ActionResult.failure(
            f"Cannot take event card: {event_type.value} not found in player discard pile"
        )

    card = state.player_discard[position]
    new_state = state.with_player(
        state.current_player_index, player.with_stored_event(card)
    )._copy_with(
        player_discard=state.player_discard[:position] + state.player_discard[position + 1:],
        actions_remaining=state.actions_remaining - 1,
    )
    return ActionResult.success_with_state(
        new_state, changes=[f"Contingency Planner stored {event_type.value}"]
    )
