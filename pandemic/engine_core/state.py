"""
Game State - The complete, plain-data snapshot the engine operates on.

Design principles:
- Immutable-friendly: every transition returns a new state, inputs are never mutated
- Serializable: to_dict()/from_dict() round-trip through plain JSON types
- No handles: no RNG, no callbacks, no references back into the engine
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any

from .cards import (
    Disease,
    EventCard,
    EventType,
    InfectionCard,
    PlayerCard,
    Role,
    player_card_from_dict,
)


MAX_CUBES_PER_CITY = 3
CUBES_PER_COLOR = 24
MAX_OUTBREAKS = 8
MAX_RESEARCH_STATIONS = 6
HAND_LIMIT = 7
ACTIONS_PER_TURN = 4
MAX_INFECTION_RATE_POSITION = 7


class TurnPhase(Enum):
    """The three phases of a player's turn."""
    ACTIONS = "actions"
    DRAW = "draw"
    INFECT = "infect"


class GameStatus(Enum):
    ONGOING = "ongoing"
    WON = "won"
    LOST = "lost"


class CureStatus(Enum):
    UNCURED = "uncured"
    CURED = "cured"
    ERADICATED = "eradicated"


@dataclass(frozen=True)
class GameConfig:
    """Player count (2-4) and difficulty (number of epidemic cards, 4-6)."""
    player_count: int
    difficulty: int

    def validate(self) -> None:
        if self.player_count not in (2, 3, 4):
            raise ValueError(f"Invalid player count: {self.player_count}. Must be 2, 3, or 4.")
        if self.difficulty not in (4, 5, 6):
            raise ValueError(f"Invalid difficulty: {self.difficulty}. Must be 4, 5, or 6.")


@dataclass(frozen=True)
class CityState:
    """Disease cubes per color and the research station flag for one city."""
    blue: int = 0
    yellow: int = 0
    black: int = 0
    red: int = 0
    has_research_station: bool = False

    def cubes(self, color: Disease) -> int:
        return getattr(self, color.value)

    def with_cubes(self, color: Disease, count: int) -> CityState:
        return replace(self, **{color.value: count})

    def with_research_station(self, present: bool) -> CityState:
        return replace(self, has_research_station=present)

    @property
    def total_cubes(self) -> int:
        return self.blue + self.yellow + self.black + self.red

    def to_dict(self) -> dict[str, Any]:
        return {
            "blue": self.blue,
            "yellow": self.yellow,
            "black": self.black,
            "red": self.red,
            "has_research_station": self.has_research_station,
        }


@dataclass
class Player:
    """
    A player's role, pawn location and hand.

    stored_event_card is only ever set for the Contingency Planner: a card
    taken back out of the discard pile, removed from the game once played.
    """
    role: Role
    location: str
    hand: list[PlayerCard] = field(default_factory=list)
    stored_event_card: EventCard | None = None

    def with_hand(self, hand: list[PlayerCard]) -> Player:
        return replace(self, hand=list(hand))

    def with_location(self, location: str) -> Player:
        return replace(self, location=location)

    def with_stored_event(self, card: EventCard | None) -> Player:
        return replace(self, stored_event_card=card)

    def to_dict(self) -> dict[str, Any]:
        return {
            "role": self.role.value,
            "location": self.location,
            "hand": [card.to_dict() for card in self.hand],
            "stored_event_card": (
                self.stored_event_card.to_dict() if self.stored_event_card else None
            ),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Player:
        stored = data.get("stored_event_card")
        return cls(
            role=Role(data["role"]),
            location=data["location"],
            hand=[player_card_from_dict(card) for card in data.get("hand", [])],
            stored_event_card=EventCard(event=EventType(stored["event"])) if stored else None,
        )


@dataclass
class GameState:
    """
    Complete game state at a point in time.

    One-shot flags:
    - operations_expert_special_move_used: set by the (external) action
      resolver, cleared by the Infect -> Actions transition.
    - skip_next_infection_phase: set by One Quiet Night, cleared by the next
      infection phase resolution.
    """
    config: GameConfig
    players: list[Player]
    board: dict[str, CityState]
    cures: dict[Disease, CureStatus]
    cube_supply: dict[Disease, int]

    current_player_index: int = 0
    phase: TurnPhase = TurnPhase.ACTIONS
    actions_remaining: int = ACTIONS_PER_TURN
    infection_rate_position: int = 1
    outbreak_count: int = 0

    player_deck: list[PlayerCard] = field(default_factory=list)
    player_discard: list[PlayerCard] = field(default_factory=list)
    infection_deck: list[InfectionCard] = field(default_factory=list)
    infection_discard: list[InfectionCard] = field(default_factory=list)

    status: GameStatus = GameStatus.ONGOING
    operations_expert_special_move_used: bool = False
    skip_next_infection_phase: bool = False

    @property
    def current_player(self) -> Player:
        return self.players[self.current_player_index]

    @property
    def num_players(self) -> int:
        return len(self.players)

    @property
    def is_ongoing(self) -> bool:
        return self.status == GameStatus.ONGOING

    def research_station_count(self) -> int:
        return sum(1 for city in self.board.values() if city.has_research_station)

    def with_player(self, index: int, player: Player) -> GameState:
        """Return new state with the player at index replaced."""
        new_players = list(self.players)
        new_players[index] = player
        return self._copy_with(players=new_players)

    def with_city(self, name: str, city_state: CityState) -> GameState:
        """Return new state with one city replaced."""
        new_board = dict(self.board)
        new_board[name] = city_state
        return self._copy_with(board=new_board)

    def _copy_with(self, **kwargs) -> GameState:
        """Create a copy with some fields replaced."""
        return replace(self, **kwargs)

    def to_dict(self) -> dict[str, Any]:
        return {
            "config": {
                "player_count": self.config.player_count,
                "difficulty": self.config.difficulty,
            },
            "players": [player.to_dict() for player in self.players],
            "current_player_index": self.current_player_index,
            "phase": self.phase.value,
            "actions_remaining": self.actions_remaining,
            "board": {name: city.to_dict() for name, city in self.board.items()},
            "cures": {color.value: status.value for color, status in self.cures.items()},
            "cube_supply": {color.value: count for color, count in self.cube_supply.items()},
            "infection_rate_position": self.infection_rate_position,
            "outbreak_count": self.outbreak_count,
            "player_deck": [card.to_dict() for card in self.player_deck],
            "player_discard": [card.to_dict() for card in self.player_discard],
            "infection_deck": [card.to_dict() for card in self.infection_deck],
            "infection_discard": [card.to_dict() for card in self.infection_discard],
            "status": self.status.value,
            "operations_expert_special_move_used": self.operations_expert_special_move_used,
            "skip_next_infection_phase": self.skip_next_infection_phase,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> GameState:
        return cls(
            config=GameConfig(**data["config"]),
            players=[Player.from_dict(p) for p in data["players"]],
            current_player_index=data["current_player_index"],
            phase=TurnPhase(data["phase"]),
            actions_remaining=data["actions_remaining"],
            board={name: CityState(**city) for name, city in data["board"].items()},
            cures={Disease(color): CureStatus(status) for color, status in data["cures"].items()},
            cube_supply={Disease(color): count for color, count in data["cube_supply"].items()},
            infection_rate_position=data["infection_rate_position"],
            outbreak_count=data["outbreak_count"],
            player_deck=[player_card_from_dict(c) for c in data["player_deck"]],
            player_discard=[player_card_from_dict(c) for c in data["player_discard"]],
            infection_deck=[InfectionCard.from_dict(c) for c in data["infection_deck"]],
            infection_discard=[InfectionCard.from_dict(c) for c in data["infection_discard"]],
            status=GameStatus(data["status"]),
            operations_expert_special_move_used=data.get(
                "operations_expert_special_move_used", False
            ),
            skip_next_infection_phase=data.get("skip_next_infection_phase", False),
        )
