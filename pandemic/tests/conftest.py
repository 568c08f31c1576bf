"""
Pytest fixtures for engine tests.
"""

import pytest

from ..engine_core.cards import Disease, InfectionCard, Role
from ..engine_core.deck import create_game, initial_cube_supply, initialize_board
from ..engine_core.state import (
    CureStatus,
    GameConfig,
    GameState,
    Player,
    TurnPhase,
)
from ..games.pandemic.cities import CITY_MAP, START_CITY


def infection_card(city: str) -> InfectionCard:
    """Infection card for a city, colored from the board data."""
    return InfectionCard(city=city, color=CITY_MAP[city].color)


def set_cubes(state: GameState, city: str, color: Disease, count: int) -> GameState:
    """Put `count` cubes on a city, taking the difference from the supply."""
    city_state = state.board[city]
    delta = count - city_state.cubes(color)
    supply = dict(state.cube_supply)
    supply[color] -= delta
    return state.with_city(city, city_state.with_cubes(color, count))._copy_with(
        cube_supply=supply
    )


def build_state(
    roles=(Role.MEDIC, Role.SCIENTIST),
    hands=None,
    phase=TurnPhase.ACTIONS,
    **overrides,
) -> GameState:
    """A clean hand-built state: empty board, full supply, no cards dealt."""
    hands = hands or [[] for _ in roles]
    players = [
        Player(role=role, location=START_CITY, hand=list(hand))
        for role, hand in zip(roles, hands)
    ]
    state = GameState(
        config=GameConfig(player_count=len(players), difficulty=4),
        players=players,
        board=initialize_board(),
        cures={color: CureStatus.UNCURED for color in Disease},
        cube_supply=initial_cube_supply(),
        phase=phase,
    )
    return state._copy_with(**overrides) if overrides else state


@pytest.fixture
def two_player_config() -> GameConfig:
    return GameConfig(player_count=2, difficulty=4)


@pytest.fixture
def new_game(two_player_config) -> GameState:
    """A freshly dealt, seeded 2-player game."""
    return create_game(two_player_config, random_seed=42)


@pytest.fixture
def empty_state() -> GameState:
    """Hand-built 2-player state in the Actions phase."""
    return build_state()
