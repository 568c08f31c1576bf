"""
Status Evaluator and read-only queries.

get_game_status() checks, first match wins:
1. Won  - every disease cured or eradicated
2. Lost - 8 or more outbreaks
3. Lost - any cube supply at or below 0
4. Lost - empty player deck during the Draw phase
5. Ongoing

current_status() and with_evaluated_status() apply the evaluator to states
whose status field still says Ongoing; the reducer, the action generator and
sessions gate on them.
"""

from __future__ import annotations

from .cards import Disease
from .state import MAX_OUTBREAKS, CityState, CureStatus, GameState, GameStatus, TurnPhase


def get_game_status(state: GameState) -> GameStatus:
    """Evaluate Won / Lost / Ongoing from the board, cures and decks."""
    if all(
        status in (CureStatus.CURED, CureStatus.ERADICATED)
        for status in state.cures.values()
    ):
        return GameStatus.WON

    if state.outbreak_count >= MAX_OUTBREAKS:
        return GameStatus.LOST

    if any(supply <= 0 for supply in state.cube_supply.values()):
        return GameStatus.LOST

    if not state.player_deck and state.phase == TurnPhase.DRAW:
        return GameStatus.LOST

    return GameStatus.ONGOING


def get_city_state(state: GameState, city: str) -> CityState:
    """Cubes and research station of a city. Raises ValueError for unknown cities."""
    city_state = state.board.get(city)
    if city_state is None:
        raise ValueError(f"City not found: {city}")
    # frozen, safe to return directly
    return city_state


def get_cure_status(state: GameState) -> dict[Disease, CureStatus]:
    """Copy of the cure status per disease."""
    return dict(state.cures)


def cubes_on_board(state: GameState, color: Disease) -> int:
    """Total cubes of one color across all cities."""
    return sum(city.cubes(color) for city in state.board.values())


def current_status(state: GameState) -> GameStatus:
    """The stored status once the game has ended, otherwise the evaluated one."""
    if not state.is_ongoing:
        return state.status
    return get_game_status(state)


def with_evaluated_status(state: GameState) -> GameState:
    """Return the state with its status field brought in line with get_game_status()."""
    status = current_status(state)
    if status == state.status:
        return state
    return state._copy_with(status=status)
