"""
Engine Core - Deterministic game state management for the disease-control core.

The engine is the runtime that:
1. Builds the initial GameState from a GameConfig and a seed
2. Drives the Actions -> Draw -> Infect turn cycle
3. Resolves infections, outbreak chains and epidemics
4. Plays event cards
5. Evaluates win / loss
6. Generates legal actions and applies them via the reducer
"""

# cards first: the board module imports it while the engine is still loading
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
    CityState,
    CureStatus,
    GameConfig,
    GameState,
    GameStatus,
    Player,
    TurnPhase,
)
from .errors import GameOverError, PhaseError
from .deck import create_game, create_infection_deck, create_player_deck, setup_players
from .turn import advance_phase, end_turn, get_current_player
from .infection import execute_infection_phase, get_infection_rate, place_cubes, resolve_epidemic
from .draw import draw_player_cards, enforce_hand_limit
from .action import Action, ActionPayload, ActionResult, ActionType, parse_action
from .events import (
    airlift,
    forecast,
    government_grant,
    one_quiet_night,
    play_event_card,
    resilient_population,
    store_event_card,
)
from .status import get_city_state, get_cure_status, get_game_status
from .reducer import Reducer, apply_action
from .action_generator import ActionGenerator, get_available_actions, legal_actions

__all__ = [
    "CityCard",
    "Disease",
    "EpidemicCard",
    "EventCard",
    "EventType",
    "InfectionCard",
    "PlayerCard",
    "Role",
    "CityState",
    "CureStatus",
    "GameConfig",
    "GameState",
    "GameStatus",
    "Player",
    "TurnPhase",
    "GameOverError",
    "PhaseError",
    "create_game",
    "create_infection_deck",
    "create_player_deck",
    "setup_players",
    "advance_phase",
    "end_turn",
    "get_current_player",
    "execute_infection_phase",
    "get_infection_rate",
    "place_cubes",
    "resolve_epidemic",
    "draw_player_cards",
    "enforce_hand_limit",
    "Action",
    "ActionPayload",
    "ActionResult",
    "ActionType",
    "parse_action",
    "airlift",
    "forecast",
    "government_grant",
    "one_quiet_night",
    "play_event_card",
    "resilient_population",
    "store_event_card",
    "get_city_state",
    "get_cure_status",
    "get_game_status",
    "Reducer",
    "apply_action",
    "ActionGenerator",
    "get_available_actions",
    "legal_actions",
]
