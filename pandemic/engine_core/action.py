"""
Action System - Actions, payloads, results, and the command-string protocol.

Actions represent the core's own steps:
1. Turn steps (end actions, draw cards, infect)
2. Hand-limit discards
3. Event card plays and the Contingency Planner's stored event

Command strings such as "draw" or "event:airlift:1:Paris" are parsed once
at the boundary into an Action; nothing past the parser handles raw strings.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .cards import EventType


class ActionType(Enum):
    """Types of actions the core understands."""
    END_ACTIONS = "end-actions"
    DRAW_CARDS = "draw"
    INFECT = "infect"
    DISCARD = "discard"
    PLAY_EVENT = "event"
    STORE_EVENT = "store-event"


@dataclass
class ActionPayload:
    """
    Parameters of an action.

    Different action types use different fields; the reducer validates.
    """
    player_index: int | None = None
    event: EventType | None = None

    # DISCARD
    card_indices: list[int] = field(default_factory=list)

    # Event targets
    target_player_index: int | None = None
    city: str | None = None
    city_to_remove_station: str | None = None
    forecast_order: list[str] = field(default_factory=list)


@dataclass
class Action:
    """A fully specified action to apply to a GameState."""
    action_type: ActionType
    payload: ActionPayload = field(default_factory=ActionPayload)

    @classmethod
    def end_actions(cls) -> Action:
        return cls(action_type=ActionType.END_ACTIONS)

    @classmethod
    def draw(cls) -> Action:
        return cls(action_type=ActionType.DRAW_CARDS)

    @classmethod
    def infect(cls) -> Action:
        return cls(action_type=ActionType.INFECT)

    @classmethod
    def discard(cls, card_indices: list[int], player_index: int | None = None) -> Action:
        return cls(
            action_type=ActionType.DISCARD,
            payload=ActionPayload(player_index=player_index, card_indices=list(card_indices)),
        )

    @classmethod
    def airlift(cls, target_player_index: int, city: str, player_index: int | None = None) -> Action:
        return cls(
            action_type=ActionType.PLAY_EVENT,
            payload=ActionPayload(
                player_index=player_index,
                event=EventType.AIRLIFT,
                target_player_index=target_player_index,
                city=city,
            ),
        )

    @classmethod
    def government_grant(
        cls,
        city: str,
        city_to_remove_station: str | None = None,
        player_index: int | None = None,
    ) -> Action:
        return cls(
            action_type=ActionType.PLAY_EVENT,
            payload=ActionPayload(
                player_index=player_index,
                event=EventType.GOVERNMENT_GRANT,
                city=city,
                city_to_remove_station=city_to_remove_station,
            ),
        )

    @classmethod
    def one_quiet_night(cls, player_index: int | None = None) -> Action:
        return cls(
            action_type=ActionType.PLAY_EVENT,
            payload=ActionPayload(player_index=player_index, event=EventType.ONE_QUIET_NIGHT),
        )

    @classmethod
    def resilient_population(cls, city: str, player_index: int | None = None) -> Action:
        return cls(
            action_type=ActionType.PLAY_EVENT,
            payload=ActionPayload(
                player_index=player_index,
                event=EventType.RESILIENT_POPULATION,
                city=city,
            ),
        )

    @classmethod
    def forecast(cls, order: list[str], player_index: int | None = None) -> Action:
        return cls(
            action_type=ActionType.PLAY_EVENT,
            payload=ActionPayload(
                player_index=player_index,
                event=EventType.FORECAST,
                forecast_order=list(order),
            ),
        )

    @classmethod
    def store_event(cls, event: EventType) -> Action:
        return cls(action_type=ActionType.STORE_EVENT, payload=ActionPayload(event=event))

    def to_command(self) -> str:
        """Render the action in the command-string protocol."""
        p = self.payload
        if self.action_type == ActionType.DISCARD:
            command = "discard:" + ",".join(str(i) for i in p.card_indices)
        elif self.action_type == ActionType.STORE_EVENT:
            return f"store-event:{p.event.value}"
        elif self.action_type == ActionType.PLAY_EVENT:
            parts = ["event", p.event.value]
            if p.event == EventType.AIRLIFT:
                parts += [str(p.target_player_index), p.city]
            elif p.event == EventType.GOVERNMENT_GRANT:
                parts.append(p.city)
                if p.city_to_remove_station:
                    parts.append(p.city_to_remove_station)
            elif p.event == EventType.RESILIENT_POPULATION:
                parts.append(p.city)
            elif p.event == EventType.FORECAST:
                parts.append(",".join(p.forecast_order))
            command = ":".join(parts)
        else:
            return self.action_type.value

        if p.player_index is not None:
            command += f"@{p.player_index}"
        return command


def _parse_int(text: str, what: str) -> int:
    try:
        return int(text)
    except ValueError:
        raise ValueError(f"Invalid {what}: {text!r}") from None


def parse_action(command: str) -> Action:
    """
    Parse a command string into an Action.

    Raises ValueError on anything malformed.
    """
    text = command.strip()
    if not text:
        raise ValueError("Empty command")

    player_index = None
    if "@" in text:
        text, _, suffix = text.rpartition("@")
        player_index = _parse_int(suffix, "player index")

    head, _, rest = text.partition(":")

    if head in (ActionType.END_ACTIONS.value, ActionType.DRAW_CARDS.value, ActionType.INFECT.value):
        if rest:
            raise ValueError(f"Command {head!r} takes no arguments")
        if player_index is not None:
            raise ValueError(f"Command {head!r} takes no player index")
        return Action(action_type=ActionType(head))

    if head == ActionType.DISCARD.value:
        if not rest:
            raise ValueError("discard requires card indices")
        indices = [_parse_int(part, "card index") for part in rest.split(",")]
        return Action.discard(indices, player_index=player_index)

    if head == ActionType.STORE_EVENT.value:
        if player_index is not None:
            raise ValueError(f"Command {head!r} takes no player index")
        return Action.store_event(_parse_event(rest))

    if head == ActionType.PLAY_EVENT.value:
        event_name, _, args_text = rest.partition(":")
        event = _parse_event(event_name)
        args = args_text.split(":") if args_text else []
        return _parse_event_action(event, args, player_index)

    raise ValueError(f"Unknown command: {command!r}")


def _parse_event(name: str) -> EventType:
    try:
        return EventType(name)
    except ValueError:
        raise ValueError(f"Unknown event: {name!r}") from None


def _parse_event_action(event: EventType, args: list[str], player_index: int | None) -> Action:
    if event == EventType.AIRLIFT:
        if len(args) != 2:
            raise ValueError("airlift requires <player>:<city>")
        return Action.airlift(_parse_int(args[0], "player index"), args[1], player_index)

    if event == EventType.GOVERNMENT_GRANT:
        if len(args) not in (1, 2):
            raise ValueError("government_grant requires <city>[:<city to remove station from>]")
        remove = args[1] if len(args) == 2 else None
        return Action.government_grant(args[0], remove, player_index)

    if event == EventType.ONE_QUIET_NIGHT:
        if args:
            raise ValueError("one_quiet_night takes no arguments")
        return Action.one_quiet_night(player_index)

    if event == EventType.RESILIENT_POPULATION:
        if len(args) != 1:
            raise ValueError("resilient_population requires <city>")
        return Action.resilient_population(args[0], player_index)

    # Forecast
    if len(args) != 1 or not args[0]:
        raise ValueError("forecast requires <city>,<city>,...")
    return Action.forecast(args[0].split(","), player_index)


@dataclass
class ActionResult:
    """
    Result of a result-returning operation.

    Contains:
    - Whether it succeeded
    - New state (if succeeded)
    - Error message and code (if failed)
    - Human-readable changes (for logs and UI)
    """
    success: bool
    new_state: Any | None = None  # GameState
    error: str | None = None
    error_code: str | None = None
    state_changes: list[str] = field(default_factory=list)

    @classmethod
    def failure(cls, error: str, error_code: str | None = None) -> ActionResult:
        """Create a failure result."""
        return cls(success=False, error=error, error_code=error_code)

    @classmethod
    def success_with_state(cls, state: Any, changes: list[str] | None = None) -> ActionResult:
        """Create a success result with new state."""
        return cls(success=True, new_state=state, state_changes=changes or [])
