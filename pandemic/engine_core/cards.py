"""
Cards - Immutable value types for the player and infection decks.

Player deck:    CityCard, EventCard, EpidemicCard
Infection deck: InfectionCard

Cards carry no behavior beyond (de)serialization to plain dicts.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Any, Union


class Disease(Enum):
    """The four disease colors."""
    BLUE = "blue"
    YELLOW = "yellow"
    BLACK = "black"
    RED = "red"


class EventType(Enum):
    """The five event cards."""
    AIRLIFT = "airlift"
    FORECAST = "forecast"
    GOVERNMENT_GRANT = "government_grant"
    ONE_QUIET_NIGHT = "one_quiet_night"
    RESILIENT_POPULATION = "resilient_population"


class Role(Enum):
    """The seven player roles."""
    CONTINGENCY_PLANNER = "contingency_planner"
    DISPATCHER = "dispatcher"
    MEDIC = "medic"
    OPERATIONS_EXPERT = "operations_expert"
    QUARANTINE_SPECIALIST = "quarantine_specialist"
    RESEARCHER = "researcher"
    SCIENTIST = "scientist"


@dataclass(frozen=True)
class CityCard:
    """A city card in the player deck."""
    city: str
    color: Disease

    card_type = "city"

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.card_type, "city": self.city, "color": self.color.value}


@dataclass(frozen=True)
class EventCard:
    """An event card in the player deck."""
    event: EventType

    card_type = "event"

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.card_type, "event": self.event.value}


@dataclass(frozen=True)
class EpidemicCard:
    """An epidemic card. Resolved when drawn, never held in a hand."""

    card_type = "epidemic"

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.card_type}


PlayerCard = Union[CityCard, EventCard, EpidemicCard]


@dataclass(frozen=True)
class InfectionCard:
    """A card in the infection deck: which city gets a cube of which color."""
    city: str
    color: Disease

    def to_dict(self) -> dict[str, Any]:
        return {"city": self.city, "color": self.color.value}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> InfectionCard:
        return cls(city=data["city"], color=Disease(data["color"]))


def player_card_from_dict(data: dict[str, Any]) -> PlayerCard:
    """Rebuild a player card from its dict form."""
    card_type = data.get("type")
    if card_type == "city":
        return CityCard(city=data["city"], color=Disease(data["color"]))
    if card_type == "event":
        return EventCard(event=EventType(data["event"]))
    if card_type == "epidemic":
        return EpidemicCard()
    raise ValueError(f"Unknown player card type: {card_type}")


def describe_card(card: PlayerCard) -> str:
    """Short human-readable label for logs and UI."""
    if isinstance(card, CityCard):
        return f"{card.city} ({card.color.value})"
    if isinstance(card, EventCard):
        return f"event: {card.event.value}"
    return "epidemic"
