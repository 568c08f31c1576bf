"""
Deck Builder - Creates the decks, players and initial board for a new game.

This module handles:
- Building the infection deck (one card per city)
- Building the player deck with epidemics spread across piles
- Assigning roles and dealing starting hands
- The 3/2/1 initial infection
- Assembling the initial GameState

Shuffling is the only randomness in the engine. Every function takes an
optional random.Random so setup is reproducible from a seed.
"""

from __future__ import annotations
from dataclasses import dataclass
import logging
import random
from typing import Sequence, TypeVar

from .cards import (
    CityCard,
    Disease,
    EpidemicCard,
    EventCard,
    EventType,
    InfectionCard,
    PlayerCard,
    Role,
)
from .state import (
    ACTIONS_PER_TURN,
    CUBES_PER_COLOR,
    CityState,
    CureStatus,
    GameConfig,
    GameState,
    GameStatus,
    Player,
    TurnPhase,
)
from ..games.pandemic.cities import CITIES, START_CITY

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Starting hand size by player count
STARTING_HAND_SIZE = {2: 4, 3: 3, 4: 2}

# Initial infection: three batches of three cards, placing 3, 2, then 1 cube
INITIAL_INFECTION_BATCHES = (3, 2, 1)
INITIAL_INFECTION_CARDS_PER_BATCH = 3


def shuffled(items: Sequence[T], rng: random.Random | None = None) -> list[T]:
    """Return a shuffled copy of items (Fisher-Yates via random.shuffle)."""
    result = list(items)
    (rng or random.Random()).shuffle(result)
    return result


def initialize_board() -> dict[str, CityState]:
    """All cities empty, with a research station in the start city."""
    return {
        city.name: CityState(has_research_station=city.name == START_CITY)
        for city in CITIES
    }


def initial_cube_supply() -> dict[Disease, int]:
    return {color: CUBES_PER_COLOR for color in Disease}


def create_infection_deck(rng: random.Random | None = None) -> list[InfectionCard]:
    """One infection card per city, shuffled."""
    return shuffled([InfectionCard(city=c.name, color=c.color) for c in CITIES], rng)


def create_player_deck(difficulty: int, rng: random.Random | None = None) -> list[PlayerCard]:
    """
    Build the player deck with one epidemic card in each of `difficulty` piles.

    City and event cards are shuffled together, split into contiguous piles
    (the last pile takes the remainder), an epidemic is added to every pile,
    each pile is shuffled on its own, and the piles are stacked in order.
    """
    if difficulty < 1:
        raise ValueError(f"Invalid difficulty: {difficulty}")

    city_cards: list[PlayerCard] = [CityCard(city=c.name, color=c.color) for c in CITIES]
    event_cards: list[PlayerCard] = [EventCard(event=event) for event in EventType]
    base_deck = shuffled(city_cards + event_cards, rng)

    pile_size = len(base_deck) // difficulty
    final_deck: list[PlayerCard] = []
    for i in range(difficulty):
        start = i * pile_size
        end = len(base_deck) if i == difficulty - 1 else (i + 1) * pile_size
        pile = base_deck[start:end] + [EpidemicCard()]
        final_deck.extend(shuffled(pile, rng))

    return final_deck


@dataclass
class PlayerSetupResult:
    players: list[Player]
    player_deck: list[PlayerCard]


def setup_players(
    player_count: int,
    player_deck: Sequence[PlayerCard],
    rng: random.Random | None = None,
) -> PlayerSetupResult:
    """
    Assign unique random roles and deal starting hands off the top of the deck.

    Hands are dealt player by player in turn order. All pawns start in the
    start city.
    """
    if player_count not in STARTING_HAND_SIZE:
        raise ValueError(f"Invalid player count: {player_count}. Must be 2, 3, or 4.")

    roles = shuffled(list(Role), rng)
    hand_size = STARTING_HAND_SIZE[player_count]

    needed = hand_size * player_count
    if len(player_deck) < needed:
        raise ValueError(
            f"Not enough cards in deck to deal starting hands: need {needed}, have {len(player_deck)}"
        )

    deck = list(player_deck)
    players = []
    for i in range(player_count):
        hand, deck = deck[:hand_size], deck[hand_size:]
        players.append(Player(role=roles[i], location=START_CITY, hand=hand))

    return PlayerSetupResult(players=players, player_deck=deck)


@dataclass
class InitialInfectionResult:
    board: dict[str, CityState]
    infection_deck: list[InfectionCard]
    infection_discard: list[InfectionCard]
    cube_supply: dict[Disease, int]


def perform_initial_infection(
    board: dict[str, CityState],
    infection_deck: Sequence[InfectionCard],
    cube_supply: dict[Disease, int] | None = None,
) -> InitialInfectionResult:
    """
    Seed the board: 3 cards with 3 cubes, 3 with 2, 3 with 1 (18 cubes).

    No outbreak check happens here; the nine drawn cities are distinct.
    """
    needed = len(INITIAL_INFECTION_BATCHES) * INITIAL_INFECTION_CARDS_PER_BATCH
    if len(infection_deck) < needed:
        raise ValueError(
            f"Infection deck is too small for initial infection: need {needed}, have {len(infection_deck)}"
        )

    new_board = dict(board)
    supply = dict(cube_supply) if cube_supply is not None else initial_cube_supply()
    deck = list(infection_deck)
    discard: list[InfectionCard] = []

    for cube_count in INITIAL_INFECTION_BATCHES:
        for _ in range(INITIAL_INFECTION_CARDS_PER_BATCH):
            card = deck.pop(0)
            city_state = new_board.get(card.city)
            if city_state is None:
                raise ValueError(f"City {card.city} not found on board")
            new_board[card.city] = city_state.with_cubes(
                card.color, city_state.cubes(card.color) + cube_count
            )
            supply[card.color] -= cube_count
            discard.append(card)

    return InitialInfectionResult(
        board=new_board,
        infection_deck=deck,
        infection_discard=discard,
        cube_supply=supply,
    )


def create_game(config: GameConfig, random_seed: int | None = None) -> GameState:
    """
    Set up a new game.

    Epidemic cards are shuffled into the player deck before hands are dealt,
    so a starting hand may hold one. It stays in the hand unresolved; only
    epidemics drawn in the Draw phase are resolved.

    Args:
        config: Player count and difficulty
        random_seed: Seed for deterministic shuffling

    Returns:
        Initial GameState: first player's Actions phase with 4 actions
    """
    config.validate()
    rng = random.Random(random_seed)

    infection = perform_initial_infection(initialize_board(), create_infection_deck(rng))
    player_deck = create_player_deck(config.difficulty, rng)
    setup = setup_players(config.player_count, player_deck, rng)

    logger.info(
        "Created game: %d players, difficulty %d, roles %s",
        config.player_count,
        config.difficulty,
        ", ".join(p.role.value for p in setup.players),
    )

    return GameState(
        config=config,
        players=setup.players,
        board=infection.board,
        cures={color: CureStatus.UNCURED for color in Disease},
        cube_supply=infection.cube_supply,
        current_player_index=0,
        phase=TurnPhase.ACTIONS,
        actions_remaining=ACTIONS_PER_TURN,
        infection_rate_position=1,
        outbreak_count=0,
        player_deck=setup.player_deck,
        player_discard=[],
        infection_deck=infection.infection_deck,
        infection_discard=infection.infection_discard,
        status=GameStatus.ONGOING,
    )
