"""
Draw phase - Player card draws, epidemics, and the hand limit.

Epidemic cards are resolved the moment they are drawn, before the next card
comes off the deck. The 7-card hand limit is a separate step so callers can
ask the player which cards to discard.
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging
import random
from typing import Sequence

from .action import ActionResult
from .cards import Disease, EpidemicCard, describe_card
from .errors import GameOverError, PhaseError
from .infection import resolve_epidemic
from .state import HAND_LIMIT, GameState, GameStatus, TurnPhase
from .turn import get_current_player

logger = logging.getLogger(__name__)

CARDS_PER_DRAW = 2


@dataclass
class EpidemicInfo:
    """What one epidemic did, for the UI and logs."""
    infected_city: str
    infected_color: Disease
    infection_rate_position: int


@dataclass
class DrawResult:
    state: GameState
    epidemics: list[EpidemicInfo] = field(default_factory=list)


def draw_player_cards(state: GameState, rng: random.Random | None = None) -> DrawResult:
    """
    Draw 2 player cards into the current player's hand.

    - Fewer than 2 cards left before drawing: the game is lost, nothing is drawn
    - Epidemic cards are resolved immediately, never enter the hand, and go
      to the player discard pile afterwards
    - Drawing stops as soon as the game is lost

    Does NOT enforce the hand limit; call enforce_hand_limit() afterwards.
    """
    if not state.is_ongoing:
        raise GameOverError(state.status.value, "draw cards")
    if state.phase != TurnPhase.DRAW:
        raise PhaseError(
            f"Cannot draw cards: must be in Draw phase, currently in {state.phase.value} phase"
        )

    if len(state.player_deck) < CARDS_PER_DRAW:
        logger.info("Game lost: player deck has %d card(s) left", len(state.player_deck))
        return DrawResult(state=state._copy_with(status=GameStatus.LOST))

    current = state
    epidemics: list[EpidemicInfo] = []

    for _ in range(CARDS_PER_DRAW):
        if not current.player_deck:
            logger.info("Game lost: player deck ran out mid-draw")
            return DrawResult(state=current._copy_with(status=GameStatus.LOST), epidemics=epidemics)

        card = current.player_deck[0]
        remaining = current.player_deck[1:]

        if isinstance(card, EpidemicCard):
            result = resolve_epidemic(current._copy_with(player_deck=remaining), rng)
            current = result.state._copy_with(
                player_discard=result.state.player_discard + [card],
            )
            epidemics.append(
                EpidemicInfo(
                    infected_city=result.infected_city,
                    infected_color=result.infected_color,
                    infection_rate_position=current.infection_rate_position,
                )
            )
            if not current.is_ongoing:
                return DrawResult(state=current, epidemics=epidemics)
        else:
            player = get_current_player(current)
            logger.debug("Player %d drew %s", current.current_player_index, describe_card(card))
            current = current.with_player(
                current.current_player_index,
                player.with_hand(player.hand + [card]),
            )._copy_with(player_deck=remaining)

    return DrawResult(state=current, epidemics=epidemics)


def enforce_hand_limit(
    state: GameState,
    player_index: int | None = None,
    cards_to_discard: Sequence[int] = (),
) -> ActionResult:
    """
    Discard down to 7 cards by hand index.

    Exactly len(hand) - 7 distinct, in-range indices are required when the
    hand is over the limit. A hand at or under the limit is left untouched.
    """
    if not state.is_ongoing:
        return ActionResult.failure(
            f"Cannot discard: game has ended with status {state.status.value}",
            error_code="GAME_OVER",
        )

    index = state.current_player_index if player_index is None else player_index
    if not 0 <= index < len(state.players):
        return ActionResult.failure(f"Invalid player index: {index}")

    player = state.players[index]
    hand_size = len(player.hand)
    if hand_size <= HAND_LIMIT:
        return ActionResult.success_with_state(state)

    surplus = hand_size - HAND_LIMIT
    if len(cards_to_discard) != surplus:
        return ActionResult.failure(
            f"Must discard exactly {surplus} card(s) to reach hand limit of {HAND_LIMIT} "
            f"(currently have {hand_size})"
        )

    if len(set(cards_to_discard)) != len(cards_to_discard):
        return ActionResult.failure("Cannot discard the same card multiple times")

    for card_index in cards_to_discard:
        if not 0 <= card_index < hand_size:
            return ActionResult.failure(
                f"Invalid card index: {card_index} (hand has {hand_size} cards)"
            )

    discarding = set(cards_to_discard)
    discarded = [player.hand[i] for i in cards_to_discard]
    kept = [card for i, card in enumerate(player.hand) if i not in discarding]

    new_state = state.with_player(index, player.with_hand(kept))._copy_with(
        player_discard=state.player_discard + discarded,
    )
    return ActionResult.success_with_state(
        new_state,
        changes=[f"Player {index} discarded {', '.join(describe_card(c) for c in discarded)}"],
    )
