"""
Pandemic - Cooperative disease-control game engine

A deterministic engine for the turn cycle of a cooperative epidemic board
game. It provides:
- State management
- Infection, outbreak and epidemic resolution
- Event cards
- Legal action generation
- Bot policies, sessions and an HTTP API for automated play
"""

__version__ = "0.1.0"

# The board data imports engine_core.cards; loading the engine here fixes the order.
from . import engine_core  # noqa: E402,F401
