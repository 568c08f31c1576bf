"""
Tests for cube placement, outbreaks, epidemics and the Infect phase.

Tests:
- Outbreak cascades on the real city graph
- Loss conditions during placement
- Epidemic Increase / Infect / Intensify
- Infection phase draws and One Quiet Night
"""

import random

import pytest

from ..engine_core.cards import Disease, Role
from ..engine_core.errors import GameOverError, PhaseError
from ..engine_core.infection import (
    execute_infection_phase,
    get_infection_rate,
    place_cubes,
    quarantined_cities,
    resolve_epidemic,
)
from ..engine_core.state import CUBES_PER_COLOR, CureStatus, GameStatus, TurnPhase
from ..engine_core.status import cubes_on_board
from .conftest import build_state, infection_card, set_cubes


def assert_cube_totals(state):
    for color in Disease:
        assert cubes_on_board(state, color) + state.cube_supply[color] == CUBES_PER_COLOR


class TestInfectionRate:
    def test_track(self):
        assert [get_infection_rate(p) for p in range(1, 8)] == [2, 2, 2, 3, 3, 4, 4]

    @pytest.mark.parametrize("position", [0, 8, -1])
    def test_invalid_position(self, position):
        with pytest.raises(ValueError, match="Invalid infection rate position"):
            get_infection_rate(position)


class TestPlaceCubes:
    """Tests for place_cubes and the outbreak cascade."""

    def test_simple_placement(self, empty_state):
        result = place_cubes(empty_state, "Paris", Disease.BLUE, 2)

        assert result.state.board["Paris"].blue == 2
        assert result.state.cube_supply[Disease.BLUE] == 22
        assert result.outbreaks == []
        assert empty_state.board["Paris"].blue == 0

    def test_outbreak_spreads_to_neighbors(self, empty_state):
        state = set_cubes(empty_state, "Paris", Disease.BLUE, 3)

        result = place_cubes(state, "Paris", Disease.BLUE, 1)
        new_state = result.state

        assert result.outbreaks == ["Paris"]
        assert new_state.outbreak_count == 1
        assert new_state.board["Paris"].blue == 3
        for city in ("Algiers", "Essen", "London", "Madrid", "Milan"):
            assert new_state.board[city].blue == 1
        assert_cube_totals(new_state)

    def test_outbreak_cubes_keep_disease_color(self, empty_state):
        state = set_cubes(empty_state, "Paris", Disease.BLUE, 3)
        new_state = place_cubes(state, "Paris", Disease.BLUE).state

        # Algiers is a black city but receives a blue cube
        assert new_state.board["Algiers"].blue == 1
        assert new_state.board["Algiers"].black == 0

    def test_chain_reaction(self, empty_state):
        state = set_cubes(empty_state, "Paris", Disease.BLUE, 3)
        state = set_cubes(state, "London", Disease.BLUE, 3)

        result = place_cubes(state, "Paris", Disease.BLUE)
        new_state = result.state

        assert result.outbreaks == ["Paris", "London"]
        assert new_state.outbreak_count == 2
        assert new_state.board["Essen"].blue == 2
        assert new_state.board["Madrid"].blue == 2
        assert new_state.board["New York"].blue == 1
        assert new_state.board["Paris"].blue == 3
        assert_cube_totals(new_state)

    def test_each_city_outbreaks_once_per_chain(self, empty_state):
        # Paris, London and Essen form a cycle
        state = empty_state
        for city in ("Paris", "London", "Essen", "Madrid"):
            state = set_cubes(state, city, Disease.BLUE, 3)

        result = place_cubes(state, "Paris", Disease.BLUE)

        assert sorted(result.outbreaks) == ["Essen", "London", "Madrid", "Paris"]
        assert len(result.outbreaks) == len(set(result.outbreaks))
        assert result.state.outbreak_count == 4
        assert all(c.blue <= 3 for c in result.state.board.values())
        assert_cube_totals(result.state)

    def test_cascade_over_full_board_terminates(self, empty_state):
        state = empty_state
        for city in state.board:
            state = state.with_city(city, state.board[city].with_cubes(Disease.BLUE, 3))
        state = state._copy_with(cube_supply={**state.cube_supply, Disease.BLUE: 500})

        result = place_cubes(state, "Atlanta", Disease.BLUE)

        assert result.state.outbreak_count == 8
        assert result.state.status == GameStatus.LOST
        assert len(set(result.outbreaks)) == 8

    def test_eighth_outbreak_loses_and_stops(self, empty_state):
        state = set_cubes(empty_state, "Paris", Disease.BLUE, 3)._copy_with(outbreak_count=7)

        result = place_cubes(state, "Paris", Disease.BLUE)

        assert result.state.outbreak_count == 8
        assert result.state.status == GameStatus.LOST
        assert result.state.board["Essen"].blue == 0

    def test_supply_exhaustion_loses(self, empty_state):
        state = empty_state._copy_with(cube_supply={**empty_state.cube_supply, Disease.RED: 0})

        result = place_cubes(state, "Tokyo", Disease.RED)

        assert result.state.status == GameStatus.LOST
        assert result.state.board["Tokyo"].red == 0

    def test_last_cube_loses(self, empty_state):
        state = empty_state._copy_with(cube_supply={**empty_state.cube_supply, Disease.BLUE: 1})

        result = place_cubes(state, "Atlanta", Disease.BLUE)

        assert result.state.board["Atlanta"].blue == 1
        assert result.state.cube_supply[Disease.BLUE] == 0
        assert result.state.status == GameStatus.LOST

    def test_eradicated_disease_not_placed(self, empty_state):
        state = empty_state._copy_with(
            cures={**empty_state.cures, Disease.BLUE: CureStatus.ERADICATED}
        )

        result = place_cubes(state, "Paris", Disease.BLUE, 3)

        assert result.state.board["Paris"].blue == 0
        assert result.state.cube_supply[Disease.BLUE] == 24

    def test_unknown_city(self, empty_state):
        with pytest.raises(ValueError, match="City not found"):
            place_cubes(empty_state, "Atlantis", Disease.BLUE)


class TestEpidemic:
    """Tests for resolve_epidemic."""

    def test_increase_infect_intensify(self, empty_state):
        paris, lima, tokyo = infection_card("Paris"), infection_card("Lima"), infection_card("Tokyo")
        state = empty_state._copy_with(infection_deck=[paris, lima], infection_discard=[tokyo])

        result = resolve_epidemic(state, random.Random(0))
        new_state = result.state

        assert result.infected_city == "Lima"
        assert result.infected_color == Disease.YELLOW
        assert new_state.infection_rate_position == 2
        assert new_state.board["Lima"].yellow == 3
        assert new_state.infection_discard == []
        # Old discard plus the epidemic city on top, untouched cards below
        assert set(new_state.infection_deck[:2]) == {lima, tokyo}
        assert new_state.infection_deck[2:] == [paris]
        assert_cube_totals(new_state)

    def test_rate_capped_at_seven(self, empty_state):
        state = empty_state._copy_with(
            infection_deck=[infection_card("Lima")], infection_rate_position=7
        )
        assert resolve_epidemic(state).state.infection_rate_position == 7

    def test_epidemic_on_infected_city_cascades(self, empty_state):
        state = set_cubes(empty_state, "Lima", Disease.YELLOW, 1)._copy_with(
            infection_deck=[infection_card("Paris"), infection_card("Lima")]
        )

        result = resolve_epidemic(state, random.Random(0))
        new_state = result.state

        assert result.outbreaks == ["Lima"]
        assert new_state.outbreak_count == 1
        assert new_state.board["Lima"].yellow == 3
        for city in ("Bogota", "Mexico City", "Santiago"):
            assert new_state.board[city].yellow == 1
        assert_cube_totals(new_state)

    def test_loss_skips_intensify(self, empty_state):
        paris, lima, tokyo = infection_card("Paris"), infection_card("Lima"), infection_card("Tokyo")
        state = set_cubes(empty_state, "Lima", Disease.YELLOW, 3)._copy_with(
            outbreak_count=7,
            infection_deck=[paris, lima],
            infection_discard=[tokyo],
        )

        new_state = resolve_epidemic(state).state

        assert new_state.status == GameStatus.LOST
        assert new_state.infection_deck == [paris]
        assert new_state.infection_discard == [tokyo, lima]

    def test_empty_deck(self, empty_state):
        with pytest.raises(ValueError, match="infection deck is empty"):
            resolve_epidemic(empty_state)

    def test_finished_game(self, empty_state):
        state = empty_state._copy_with(
            status=GameStatus.WON, infection_deck=[infection_card("Lima")]
        )
        with pytest.raises(GameOverError):
            resolve_epidemic(state)


class TestInfectionPhase:
    """Tests for execute_infection_phase."""

    def test_draws_infection_rate_cards(self):
        cards = [infection_card(c) for c in ("Paris", "London", "Tokyo")]
        state = build_state(phase=TurnPhase.INFECT, infection_deck=cards)

        result = execute_infection_phase(state)
        new_state = result.state

        assert result.cities_infected == cards[:2]
        assert new_state.board["Paris"].blue == 1
        assert new_state.board["London"].blue == 1
        assert new_state.board["Tokyo"].red == 0
        assert new_state.infection_deck == cards[2:]
        assert new_state.infection_discard == cards[:2]
        assert new_state.phase == TurnPhase.INFECT

    def test_rate_follows_track(self):
        cards = [infection_card(c) for c in ("Paris", "London", "Tokyo", "Lima", "Cairo")]
        state = build_state(phase=TurnPhase.INFECT, infection_deck=cards, infection_rate_position=6)

        result = execute_infection_phase(state)

        assert len(result.cities_infected) == 4
        assert result.state.infection_deck == cards[4:]

    def test_one_quiet_night_skips(self):
        cards = [infection_card(c) for c in ("Paris", "London")]
        state = build_state(
            phase=TurnPhase.INFECT, infection_deck=cards, skip_next_infection_phase=True
        )

        result = execute_infection_phase(state)

        assert result.skipped
        assert result.cities_infected == []
        assert result.state.skip_next_infection_phase is False
        assert result.state.infection_deck == cards
        assert result.state.board == state.board

    def test_stops_when_lost(self):
        paris, london = infection_card("Paris"), infection_card("London")
        state = set_cubes(build_state(phase=TurnPhase.INFECT), "Paris", Disease.BLUE, 3)._copy_with(
            outbreak_count=7, infection_deck=[paris, london]
        )

        result = execute_infection_phase(state)

        assert result.state.status == GameStatus.LOST
        assert result.cities_infected == [paris]
        assert result.state.infection_deck == [london]

    def test_wrong_phase(self, empty_state):
        with pytest.raises(PhaseError, match="must be in Infect phase"):
            execute_infection_phase(empty_state)

    def test_deck_too_short(self):
        state = build_state(phase=TurnPhase.INFECT, infection_deck=[infection_card("Paris")])
        with pytest.raises(ValueError, match="doesn't have enough cards"):
            execute_infection_phase(state)

    def test_finished_game(self):
        state = build_state(phase=TurnPhase.INFECT, status=GameStatus.LOST)
        with pytest.raises(GameOverError):
            execute_infection_phase(state)


@pytest.fixture
def quarantine_state():
    """Quarantine Specialist in Atlanta, protecting Chicago, Miami and Washington too."""
    return build_state(roles=(Role.QUARANTINE_SPECIALIST, Role.MEDIC))


class TestQuarantineSpecialist:
    """No cubes are placed in or next to the Quarantine Specialist's city."""

    def test_protected_cities(self, quarantine_state):
        assert quarantined_cities(quarantine_state) == {"Atlanta", "Chicago", "Miami", "Washington"}

    def test_follows_the_pawn(self, quarantine_state):
        moved = quarantine_state.players[0].with_location("Paris")
        state = quarantine_state.with_player(0, moved)

        protected = quarantined_cities(state)

        assert "Paris" in protected and "London" in protected
        assert "Atlanta" not in protected

    def test_no_protection_without_the_role(self, empty_state):
        assert quarantined_cities(empty_state) == frozenset()

    def test_infection_phase(self, quarantine_state):
        atlanta, chicago = infection_card("Atlanta"), infection_card("Chicago")
        state = quarantine_state._copy_with(
            phase=TurnPhase.INFECT, infection_deck=[atlanta, chicago]
        )

        result = execute_infection_phase(state)
        new_state = result.state

        assert new_state.board["Atlanta"].blue == 0
        assert new_state.board["Chicago"].blue == 0
        assert new_state.cube_supply[Disease.BLUE] == CUBES_PER_COLOR
        # Cards are still drawn and discarded
        assert result.cities_infected == [atlanta, chicago]
        assert new_state.infection_discard == [atlanta, chicago]

    def test_epidemic_infect_step(self, quarantine_state):
        paris, atlanta = infection_card("Paris"), infection_card("Atlanta")
        state = quarantine_state._copy_with(infection_deck=[paris, atlanta])

        result = resolve_epidemic(state, random.Random(0))
        new_state = result.state

        assert result.infected_city == "Atlanta"
        assert new_state.board["Atlanta"].blue == 0
        assert new_state.infection_rate_position == 2
        assert new_state.infection_discard == []
        assert new_state.infection_deck == [atlanta, paris]

    def test_outbreak_skips_protected_neighbors(self, quarantine_state):
        state = set_cubes(quarantine_state, "Montreal", Disease.BLUE, 3)

        result = place_cubes(state, "Montreal", Disease.BLUE)
        new_state = result.state

        assert result.outbreaks == ["Montreal"]
        assert new_state.board["Chicago"].blue == 0
        assert new_state.board["Washington"].blue == 0
        assert new_state.board["New York"].blue == 1
        assert_cube_totals(new_state)

    def test_protected_city_never_outbreaks(self, quarantine_state):
        state = set_cubes(quarantine_state, "Chicago", Disease.BLUE, 3)

        result = place_cubes(state, "Chicago", Disease.BLUE)

        assert result.outbreaks == []
        assert result.state.outbreak_count == 0
