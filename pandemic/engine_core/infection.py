"""
Infection & Outbreak Resolver - Cube placement, outbreaks, epidemics.

Everything that puts cubes on the board during play goes through
CubePlacer, which works on private copies of the board and supply and
writes them back into a new GameState at the end.

Outbreak cascade:
- A city asked to go above 3 cubes of a color is filled to 3 and outbreaks
- An outbreak adds one cube of that color to every connected city
- Each city outbreaks at most once per chain; the visited set lives for
  one infection card (or one epidemic infect step)
- The cascade is a work queue, bounded only by the visited set

No cube is ever placed in a Quarantine Specialist's city or its neighbors,
whether from an infection card, an epidemic or an outbreak. Placing the last
cube of a color loses the game.
"""

from __future__ import annotations
from collections import deque
from dataclasses import dataclass, field
import logging
import random

from .cards import Disease, InfectionCard, Role
from .deck import shuffled
from .errors import GameOverError, PhaseError
from .state import (
    MAX_CUBES_PER_CITY,
    MAX_INFECTION_RATE_POSITION,
    MAX_OUTBREAKS,
    CityState,
    CureStatus,
    GameState,
    GameStatus,
    TurnPhase,
)
from ..games.pandemic.cities import neighbors

logger = logging.getLogger(__name__)

# Infection rate track: cards drawn per Infect phase at positions 1-7
INFECTION_RATE_TRACK = (2, 2, 2, 3, 3, 4, 4)

EPIDEMIC_CUBES = 3


def get_infection_rate(position: int) -> int:
    """Number of infection cards drawn at a track position (1-7)."""
    if position < 1 or position > len(INFECTION_RATE_TRACK):
        raise ValueError(
            f"Invalid infection rate position: {position}. Must be between 1 and 7."
        )
    return INFECTION_RATE_TRACK[position - 1]


def quarantined_cities(state: GameState) -> frozenset[str]:
    """Cities no cube can be placed in: each Quarantine Specialist's city and its neighbors."""
    cities: set[str] = set()
    for player in state.players:
        if player.role == Role.QUARANTINE_SPECIALIST:
            cities.add(player.location)
            cities.update(neighbors(player.location))
    return frozenset(cities)


@dataclass
class CubePlacer:
    """
    Working copy of the cube-related parts of a GameState.

    Usage:
        placer = CubePlacer.from_state(state)
        placer.place("Paris", Disease.BLUE, 1)
        new_state = placer.apply_to(state)
    """
    board: dict[str, CityState]
    cube_supply: dict[Disease, int]
    cures: dict[Disease, CureStatus]
    outbreak_count: int
    status: GameStatus
    quarantined: frozenset[str] = frozenset()
    outbreaks: list[str] = field(default_factory=list)

    @classmethod
    def from_state(cls, state: GameState) -> CubePlacer:
        return cls(
            board=dict(state.board),
            cube_supply=dict(state.cube_supply),
            cures=state.cures,
            outbreak_count=state.outbreak_count,
            status=state.status,
            quarantined=quarantined_cities(state),
        )

    @property
    def lost(self) -> bool:
        return self.status == GameStatus.LOST

    def apply_to(self, state: GameState) -> GameState:
        return state._copy_with(
            board=self.board,
            cube_supply=self.cube_supply,
            outbreak_count=self.outbreak_count,
            status=self.status,
        )

    def place(self, city: str, color: Disease, count: int) -> list[str]:
        """
        Place `count` cubes of `color` in `city`, cascading outbreaks.

        Returns the cities that outbroke during this placement, in order.
        """
        if self.cures.get(color) == CureStatus.ERADICATED:
            logger.debug("Skipping %s cube in %s: disease eradicated", color.value, city)
            return []

        outbroken: set[str] = set()
        chain: list[str] = []
        pending = deque([(city, count)])

        while pending and not self.lost:
            name, amount = pending.popleft()
            city_state = self.board.get(name)
            if city_state is None:
                raise ValueError(f"City not found: {name}")
            if name in self.quarantined:
                logger.debug("Skipping %s cube in %s: quarantined", color.value, name)
                continue

            current = city_state.cubes(color)
            if current + amount <= MAX_CUBES_PER_CITY:
                self._add_cubes(name, color, amount)
                continue

            if name in outbroken:
                # Already outbroke in this chain: stays at 3
                continue

            self._add_cubes(name, color, MAX_CUBES_PER_CITY - current)
            if self.lost:
                break

            outbroken.add(name)
            chain.append(name)
            self.outbreak_count += 1
            logger.info(
                "Outbreak of %s in %s (outbreak %d)", color.value, name, self.outbreak_count
            )

            if self.outbreak_count >= MAX_OUTBREAKS:
                logger.info("Game lost: %d outbreaks", self.outbreak_count)
                self.status = GameStatus.LOST
                break

            for neighbor in neighbors(name):
                pending.append((neighbor, 1))

        self.outbreaks.extend(chain)
        return chain

    def _add_cubes(self, city: str, color: Disease, amount: int) -> None:
        """Move cubes from supply to a city; running short loses the game."""
        if amount <= 0:
            return
        supply = self.cube_supply[color]
        if supply < amount:
            logger.info("Game lost: %s cube supply exhausted", color.value)
            self.status = GameStatus.LOST
            return
        city_state = self.board[city]
        self.board[city] = city_state.with_cubes(color, city_state.cubes(color) + amount)
        self.cube_supply[color] = supply - amount
        if self.cube_supply[color] <= 0:
            logger.info("Game lost: last %s cube placed", color.value)
            self.status = GameStatus.LOST


@dataclass
class PlacementResult:
    state: GameState
    outbreaks: list[str]


def place_cubes(state: GameState, city: str, color: Disease, count: int = 1) -> PlacementResult:
    """Place cubes with outbreak handling and return the new state."""
    placer = CubePlacer.from_state(state)
    outbreaks = placer.place(city, color, count)
    return PlacementResult(state=placer.apply_to(state), outbreaks=outbreaks)


@dataclass
class EpidemicResult:
    """Result of resolving one epidemic card."""
    state: GameState
    infected_city: str
    infected_color: Disease
    outbreaks: list[str] = field(default_factory=list)


def resolve_epidemic(state: GameState, rng: random.Random | None = None) -> EpidemicResult:
    """
    Resolve an epidemic: Increase, Infect, Intensify.

    1. Increase: infection rate marker moves up one (capped at 7)
    2. Infect: bottom infection card gets 3 cubes (outbreaks apply), then is discarded
    3. Intensify: infection discard is shuffled onto the top of the infection deck

    If the game is lost in step 2, step 3 is skipped.
    """
    if not state.is_ongoing:
        raise GameOverError(state.status.value, "resolve epidemic")
    if not state.infection_deck:
        raise ValueError("Cannot resolve epidemic: infection deck is empty")

    # Increase
    new_position = min(state.infection_rate_position + 1, MAX_INFECTION_RATE_POSITION)

    # Infect
    bottom_card = state.infection_deck[-1]
    remaining_deck = state.infection_deck[:-1]
    placer = CubePlacer.from_state(state)
    outbreaks = placer.place(bottom_card.city, bottom_card.color, EPIDEMIC_CUBES)
    discard = state.infection_discard + [bottom_card]

    logger.info(
        "Epidemic in %s (%s), infection rate position %d",
        bottom_card.city,
        bottom_card.color.value,
        new_position,
    )

    new_state = placer.apply_to(state)._copy_with(infection_rate_position=new_position)

    if placer.lost:
        return EpidemicResult(
            state=new_state._copy_with(infection_deck=remaining_deck, infection_discard=discard),
            infected_city=bottom_card.city,
            infected_color=bottom_card.color,
            outbreaks=outbreaks,
        )

    # Intensify
    new_state = new_state._copy_with(
        infection_deck=shuffled(discard, rng) + remaining_deck,
        infection_discard=[],
    )

    return EpidemicResult(
        state=new_state,
        infected_city=bottom_card.city,
        infected_color=bottom_card.color,
        outbreaks=outbreaks,
    )


@dataclass
class InfectionPhaseResult:
    """Result of the Infect phase."""
    state: GameState
    cities_infected: list[InfectionCard] = field(default_factory=list)
    outbreaks: list[str] = field(default_factory=list)
    skipped: bool = False


def execute_infection_phase(state: GameState) -> InfectionPhaseResult:
    """
    Run the Infect phase for the current turn.

    Draws `infection rate` cards from the top of the infection deck; each one
    places a single cube in its city and goes to the discard pile. A pending
    One Quiet Night skips all of it and clears the flag. Resolution stops as
    soon as the game is lost.
    """
    if not state.is_ongoing:
        raise GameOverError(state.status.value, "infect cities")
    if state.phase != TurnPhase.INFECT:
        raise PhaseError(
            f"Cannot infect cities: must be in Infect phase, currently in {state.phase.value} phase"
        )

    if state.skip_next_infection_phase:
        logger.info("One Quiet Night: infection phase skipped")
        return InfectionPhaseResult(
            state=state._copy_with(skip_next_infection_phase=False),
            skipped=True,
        )

    rate = get_infection_rate(state.infection_rate_position)
    if len(state.infection_deck) < rate:
        raise ValueError(
            f"Infection deck doesn't have enough cards: need {rate}, have {len(state.infection_deck)}"
        )

    placer = CubePlacer.from_state(state)
    deck = list(state.infection_deck)
    discard = list(state.infection_discard)
    drawn: list[InfectionCard] = []

    for _ in range(rate):
        card = deck.pop(0)
        drawn.append(card)
        placer.place(card.city, card.color, 1)
        discard.append(card)
        if placer.lost:
            break

    logger.debug("Infected: %s", ", ".join(card.city for card in drawn))

    new_state = placer.apply_to(state)._copy_with(
        infection_deck=deck,
        infection_discard=discard,
    )
    return InfectionPhaseResult(
        state=new_state,
        cities_infected=drawn,
        outbreaks=list(placer.outbreaks),
    )
