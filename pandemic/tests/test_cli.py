"""
Tests for the command-line interface.
"""

import json

import pytest

from ..cli import main


class TestNewCommand:
    def test_prints_state(self, capsys):
        main(["new", "--seed", "1"])
        out = capsys.readouterr().out

        assert "Status: ongoing" in out
        assert "actions phase, 4 action(s) left" in out
        assert "Infected cities:" in out

    def test_writes_save(self, tmp_path, capsys):
        path = tmp_path / "game.json"
        main(["new", "--seed", "1", "--players", "3", "-o", str(path)])

        data = json.loads(path.read_text())
        assert data["version"] == 1
        assert len(data["state"]["players"]) == 3
        assert f"Saved to {path}" in capsys.readouterr().out

    def test_invalid_players(self, capsys):
        with pytest.raises(SystemExit):
            main(["new", "--players", "6"])
        assert "Error: Invalid player count" in capsys.readouterr().out


class TestShowCommand:
    def test_show_save(self, tmp_path, capsys):
        path = tmp_path / "game.json"
        main(["new", "--seed", "2", "-o", str(path)])
        capsys.readouterr()

        main(["show", str(path)])
        out = capsys.readouterr().out

        assert "Diseases cured: 0" in out
        assert "Status: ongoing" in out

    def test_missing_file(self, tmp_path, capsys):
        with pytest.raises(SystemExit):
            main(["show", str(tmp_path / "missing.json")])
        assert "File not found" in capsys.readouterr().out

    def test_corrupt_file(self, tmp_path, capsys):
        path = tmp_path / "bad.json"
        path.write_text("{oops")
        with pytest.raises(SystemExit):
            main(["show", str(path)])
        assert "Invalid JSON" in capsys.readouterr().out


class TestSimulateCommand:
    def test_simulate_to_the_end(self, capsys):
        main(["simulate", "--seed", "4", "--policy", "first", "--max-turns", "500"])
        out = capsys.readouterr().out

        assert "Result: lost" in out
        assert "Turns played:" in out

    def test_turn_limit(self, capsys):
        main(["simulate", "--seed", "4", "--policy", "first", "--max-turns", "1"])
        assert "Turns played: 1" in capsys.readouterr().out


class TestPlayCommand:
    def test_typed_commands(self, monkeypatch, capsys):
        lines = iter(["actions", "end-actions", "bogus", "infect", "quit"])
        monkeypatch.setattr("builtins.input", lambda prompt="": next(lines))

        main(["play", "--seed", "5"])
        out = capsys.readouterr().out

        assert "  end-actions" in out
        assert "Player 0 ended their actions" in out
        assert "Error: Unknown command: 'bogus'" in out
        assert "Error: Cannot infect: must be in infect phase" in out
        assert out.rstrip().endswith("Game ongoing.")

    def test_bot_turn_and_eof(self, monkeypatch, capsys):
        lines = iter(["bot"])

        def fake_input(prompt=""):
            try:
                return next(lines)
            except StopIteration:
                raise EOFError

        monkeypatch.setattr("builtins.input", fake_input)

        main(["play", "--seed", "5"])
        out = capsys.readouterr().out

        assert "\n  Infected " in out


def test_no_command(capsys):
    with pytest.raises(SystemExit):
        main([])
