"""
Bots module - Automated players for the core turn cycle.

Provides:
- BotPolicy: Interface for bot decision-making
- RandomPolicy: Uniform choice among legal actions
- FirstLegalPolicy: Deterministic first-legal choice
"""

from .policy import BotPolicy, BotDecision, RandomPolicy, FirstLegalPolicy, create_policy

__all__ = [
    "BotPolicy",
    "BotDecision",
    "RandomPolicy",
    "FirstLegalPolicy",
    "create_policy",
]
