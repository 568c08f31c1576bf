"""
API Service - Business logic layer between API and engine.

The service:
1. Translates API requests to engine calls
2. Manages sessions and their game loops
3. Formats engine state for responses

This layer is framework-agnostic; failures are returned as ErrorResponse
objects and the app maps them onto HTTP status codes.
"""

from __future__ import annotations
from dataclasses import dataclass, field
import json
import logging
from typing import Any

from .schemas import (
    ActionResponse,
    CityInfo,
    CreateGameRequest,
    ErrorCode,
    ErrorResponse,
    GameResponse,
    LegalActionsResponse,
    PlayerInfo,
)
from .. import config
from ..bots import create_policy
from ..engine_core.action import parse_action
from ..engine_core.action_generator import get_available_actions
from ..engine_core.cards import Disease, describe_card
from ..engine_core.errors import GameOverError
from ..engine_core.infection import get_infection_rate
from ..engine_core.state import GameConfig
from ..serialization import serialize_game
from ..session import GameLoop, Session, SessionManager

logger = logging.getLogger(__name__)


def _not_found(game_id: str) -> ErrorResponse:
    return ErrorResponse(
        error=f"Game not found: {game_id}",
        error_code=ErrorCode.SESSION_NOT_FOUND,
    )


def _game_over(session: Session) -> ErrorResponse:
    return ErrorResponse(
        error=f"Game has ended with status {session.game_state.status.value}",
        error_code=ErrorCode.GAME_OVER,
        details={"status": session.game_state.status.value},
    )


@dataclass
class APIService:
    """
    Main API service.

    Usage:
        service = APIService()
        game = service.create_game(CreateGameRequest(player_count=2, random_seed=1))
        service.apply_command(game.game_id, "end-actions")
        service.bot_turn(game.game_id)
    """
    session_manager: SessionManager = field(default_factory=SessionManager)

    # Game loops per session
    _game_loops: dict[str, GameLoop] = field(default_factory=dict)

    def create_game(self, request: CreateGameRequest) -> GameResponse | ErrorResponse:
        """Start a new game."""
        difficulty = request.difficulty if request.difficulty is not None else config.DEFAULT_DIFFICULTY
        game_config = GameConfig(player_count=request.player_count, difficulty=difficulty)
        policy = create_policy(request.policy.value, request.random_seed)

        try:
            session = self.session_manager.create_session(
                game_config, random_seed=request.random_seed, policy=policy
            )
        except ValueError as e:
            return ErrorResponse(error=str(e), error_code=ErrorCode.INVALID_CONFIG)

        self._game_loops[session.session_id] = GameLoop(session)
        return self._build_game_response(session)

    def get_game(self, game_id: str) -> GameResponse | ErrorResponse:
        """Get the game summary."""
        session = self.session_manager.get_session(game_id)
        if not session:
            return _not_found(game_id)
        return self._build_game_response(session)

    def end_game(self, game_id: str) -> bool:
        """End a session. Returns False if it did not exist."""
        self._game_loops.pop(game_id, None)
        return self.session_manager.end_session(game_id, reason="user_ended")

    def list_games(self) -> list[str]:
        """List active game IDs."""
        return self.session_manager.list_active_sessions()

    def get_legal_actions(self, game_id: str) -> LegalActionsResponse | ErrorResponse:
        """Legal command strings for the current state."""
        session = self.session_manager.get_session(game_id)
        if not session:
            return _not_found(game_id)
        actions = get_available_actions(session.game_state)
        return LegalActionsResponse(game_id=game_id, actions=actions, count=len(actions))

    def apply_command(self, game_id: str, command: str) -> ActionResponse | ErrorResponse:
        """Parse and apply one command string."""
        session = self.session_manager.get_session(game_id)
        if not session:
            return _not_found(game_id)
        session.refresh_status()
        if not session.is_active():
            return _game_over(session)

        try:
            action = parse_action(command)
        except ValueError as e:
            return ErrorResponse(
                error=str(e),
                error_code=ErrorCode.INVALID_ACTION,
                details={"command": command},
            )

        result = session.apply(action)
        if not result.success:
            return ErrorResponse(
                error=result.error or "Action failed",
                error_code=ErrorCode.INVALID_ACTION,
                details={"command": command, "engine_code": result.error_code},
            )

        return ActionResponse(
            game_id=game_id,
            success=True,
            actions=[action.to_command()],
            changes=result.state_changes,
            game=self._build_game_response(session),
        )

    def bot_turn(self, game_id: str) -> ActionResponse | ErrorResponse:
        """Let the session's bot play the rest of the current turn."""
        session = self.session_manager.get_session(game_id)
        if not session:
            return _not_found(game_id)

        game_loop = self._game_loops.get(game_id)
        if game_loop is None:
            game_loop = self._game_loops[game_id] = GameLoop(session)

        try:
            result = game_loop.play_turn()
        except GameOverError:
            return _game_over(session)

        return ActionResponse(
            game_id=game_id,
            success=result.success,
            actions=result.actions,
            changes=result.changes + result.errors,
            instructions=result.instructions,
            game=self._build_game_response(session),
        )

    def save_game(self, game_id: str) -> dict[str, Any] | ErrorResponse:
        """The save envelope for a game, as a JSON object."""
        session = self.session_manager.get_session(game_id)
        if not session:
            return _not_found(game_id)
        return json.loads(serialize_game(session.game_state))

    def _build_game_response(self, session: Session) -> GameResponse:
        """Build a game summary from session state."""
        state = session.game_state

        players = [
            PlayerInfo(
                index=i,
                role=player.role.value,
                location=player.location,
                hand=[describe_card(card) for card in player.hand],
                stored_event_card=(
                    player.stored_event_card.event.value if player.stored_event_card else None
                ),
                is_current_turn=(i == state.current_player_index),
            )
            for i, player in enumerate(state.players)
        ]

        infected = [
            CityInfo(
                name=name,
                cubes={
                    color.value: city.cubes(color)
                    for color in Disease if city.cubes(color)
                },
                has_research_station=city.has_research_station,
            )
            for name, city in state.board.items()
            if city.total_cubes
        ]

        return GameResponse(
            game_id=session.session_id,
            status=state.status.value,
            phase=state.phase.value,
            turn_number=session.turn_number,
            current_player_index=state.current_player_index,
            actions_remaining=state.actions_remaining,
            infection_rate=get_infection_rate(state.infection_rate_position),
            infection_rate_position=state.infection_rate_position,
            outbreak_count=state.outbreak_count,
            cures={color.value: status.value for color, status in state.cures.items()},
            cube_supply={color.value: count for color, count in state.cube_supply.items()},
            player_deck_size=len(state.player_deck),
            infection_discard=[card.city for card in state.infection_discard],
            players=players,
            infected_cities=infected,
            research_stations=[
                name for name, city in state.board.items() if city.has_research_station
            ],
        )
