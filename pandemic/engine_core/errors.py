"""
Engine exceptions.

These signal caller mistakes (wrong phase, finished game), not game
outcomes. Losing is a status, never an exception.
"""

from __future__ import annotations


class PhaseError(ValueError):
    """A phase-specific operation was called in the wrong phase."""


class GameOverError(ValueError):
    """A state-mutating operation was called on a finished game."""

    def __init__(self, status: str, operation: str = "continue"):
        super().__init__(f"Cannot {operation}: game has ended with status {status}")
        self.status = status
