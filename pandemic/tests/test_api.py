"""
Tests for API layer.

Tests:
- API service methods
- Session lifecycle via API
- Error handling
- HTTP routes and status codes
"""

import pytest

from ..api.app import create_app
from ..api.schemas import (
    ActionResponse,
    CreateGameRequest,
    ErrorCode,
    ErrorResponse,
    GameResponse,
    PolicyName,
)
from ..api.service import APIService


@pytest.fixture
def service():
    """Create a fresh API service."""
    return APIService()


@pytest.fixture
def game(service):
    return service.create_game(
        CreateGameRequest(player_count=2, difficulty=4, random_seed=7, policy=PolicyName.FIRST)
    )


class TestAPIService:
    """Tests for APIService."""

    def test_create_game(self, game):
        """Can create a game via API."""
        assert isinstance(game, GameResponse)
        assert game.status == "ongoing"
        assert game.phase == "actions"
        assert game.actions_remaining == 4
        assert game.infection_rate == 2
        assert len(game.players) == 2
        assert game.players[0].is_current_turn
        assert game.research_stations == ["Atlanta"]
        # 3 cities each with 3, 2 and 1 cubes
        assert len(game.infected_cities) == 9

    def test_default_difficulty(self, service):
        response = service.create_game(CreateGameRequest(random_seed=1))
        assert isinstance(response, GameResponse)

    def test_invalid_config(self, service):
        """Out-of-range player count is a config error."""
        response = service.create_game(CreateGameRequest(player_count=5))

        assert isinstance(response, ErrorResponse)
        assert response.error_code == ErrorCode.INVALID_CONFIG

    def test_get_nonexistent_game(self, service):
        """Getting nonexistent game returns error."""
        response = service.get_game("nonexistent-id")

        assert isinstance(response, ErrorResponse)
        assert response.error_code == ErrorCode.SESSION_NOT_FOUND

    def test_end_game(self, service, game):
        """Can end a game."""
        assert service.end_game(game.game_id)
        assert service.list_games() == []
        assert not service.end_game(game.game_id)

    def test_legal_actions(self, service, game):
        response = service.get_legal_actions(game.game_id)

        assert response.actions[0] == "end-actions"
        assert response.count == len(response.actions)

    def test_apply_command(self, service, game):
        response = service.apply_command(game.game_id, "end-actions")

        assert isinstance(response, ActionResponse)
        assert response.success
        assert response.actions == ["end-actions"]
        assert response.game.phase == "draw"

    def test_malformed_command(self, service, game):
        response = service.apply_command(game.game_id, "fly:Paris")

        assert response.error_code == ErrorCode.INVALID_ACTION
        assert response.details == {"command": "fly:Paris"}

    def test_rejected_command(self, service, game):
        """A well-formed command in the wrong phase is rejected by the engine."""
        response = service.apply_command(game.game_id, "infect")

        assert response.error_code == ErrorCode.INVALID_ACTION
        assert response.details["engine_code"] == "INVALID_ACTION"
        assert "must be in infect phase" in response.error

    def test_bot_turn(self, service, game):
        response = service.bot_turn(game.game_id)

        assert response.success
        assert response.actions == ["end-actions", "draw", "infect"]
        assert response.instructions
        assert response.game.current_player_index == 1
        assert response.game.turn_number == 1

    def test_finished_game(self, service, game):
        for _ in range(500):
            response = service.bot_turn(game.game_id)
            if isinstance(response, ErrorResponse):
                break

        assert response.error_code == ErrorCode.GAME_OVER
        assert service.get_game(game.game_id).status == "lost"
        assert service.apply_command(game.game_id, "draw").error_code == ErrorCode.GAME_OVER

    def test_save_game(self, service, game):
        saved = service.save_game(game.game_id)

        assert saved["version"] == 1
        assert saved["state"]["current_player_index"] == 0


class TestRoutes:
    """HTTP routes through the FastAPI test client."""

    @pytest.fixture
    def client(self):
        from fastapi.testclient import TestClient

        return TestClient(create_app(APIService()))

    @pytest.fixture
    def game_id(self, client):
        response = client.post("/api/v1/games", json={"player_count": 2, "random_seed": 3})
        assert response.status_code == 200
        return response.json()["game_id"]

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_list_games(self, client, game_id):
        assert client.get("/api/v1/games").json() == {"games": [game_id], "count": 1}

    def test_get_game(self, client, game_id):
        response = client.get(f"/api/v1/games/{game_id}")
        assert response.status_code == 200
        assert response.json()["phase"] == "actions"

    def test_unknown_game(self, client):
        response = client.get("/api/v1/games/missing")
        assert response.status_code == 404
        assert response.json()["error_code"] == "SESSION_NOT_FOUND"

    def test_invalid_config(self, client):
        response = client.post("/api/v1/games", json={"player_count": 5})
        assert response.status_code == 400
        assert response.json()["error_code"] == "INVALID_CONFIG"

    def test_actions(self, client, game_id):
        listed = client.get(f"/api/v1/games/{game_id}/actions").json()
        assert "end-actions" in listed["actions"]

        response = client.post(f"/api/v1/games/{game_id}/actions", json={"command": "end-actions"})
        assert response.status_code == 200
        assert response.json()["game"]["phase"] == "draw"

    def test_bad_command(self, client, game_id):
        response = client.post(f"/api/v1/games/{game_id}/actions", json={"command": "bogus"})
        assert response.status_code == 400
        assert response.json()["error_code"] == "INVALID_ACTION"

    def test_bot_turn(self, client, game_id):
        response = client.post(f"/api/v1/games/{game_id}/bot-turn")
        assert response.status_code == 200
        assert response.json()["actions"]

    def test_save(self, client, game_id):
        response = client.get(f"/api/v1/games/{game_id}/save")
        assert response.status_code == 200
        assert response.json()["version"] == 1

    def test_delete(self, client, game_id):
        response = client.delete(f"/api/v1/games/{game_id}")
        assert response.json() == {"success": True, "game_id": game_id}
        assert client.get(f"/api/v1/games/{game_id}").status_code == 404
