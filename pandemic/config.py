"""Runtime settings read from the environment, shared by the CLI and the API."""
from __future__ import annotations

import os


def _env_int(name: str, default: int) -> int:
    """Read an integer env var, falling back to default when unset."""
    val = os.environ.get(name, "").strip()
    if not val:
        return default
    try:
        return int(val)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {val!r}") from None


PANDEMIC_ENV = os.environ.get("PANDEMIC_ENV", "development").strip()
LOG_LEVEL = os.environ.get("PANDEMIC_LOG_LEVEL", "INFO").strip().upper()

# Turn limit for simulations and bot runs
MAX_TURNS = _env_int("PANDEMIC_MAX_TURNS", 200)

# Number of epidemic cards when a request does not say (4 easy, 5 standard, 6 heroic)
DEFAULT_DIFFICULTY = _env_int("PANDEMIC_DEFAULT_DIFFICULTY", 4)
DEFAULT_PLAYER_COUNT = 2

ALLOWED_ORIGINS = [
    o.strip() for o in os.environ.get("ALLOWED_ORIGINS", "*").split(",") if o.strip()
]
