"""
Bot Policy - Interface for bot decision-making.

A BotPolicy takes a game state and the legal actions and returns a decision.
Decisions include:
- Which action to take
- Explanation for logs and the API
- Instructions for a human mirroring the game on a physical table
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
import random
from typing import TYPE_CHECKING

from ..engine_core.action import ActionType
from ..engine_core.cards import describe_card

if TYPE_CHECKING:
    from ..engine_core.state import GameState
    from ..engine_core.action import Action


@dataclass
class BotDecision:
    """
    A decision made by a bot.

    Contains:
    - The action to take
    - Explanation (for UI/debugging)
    - Instructions for human (what to physically do)
    - Confidence in the decision
    """
    action: Action
    explanation: str = ""
    confidence: float = 1.0

    # For the human player to execute on physical table
    physical_instructions: list[str] = field(default_factory=list)

    evaluated_actions: int = 0

    def add_instruction(self, instruction: str):
        """Add a physical instruction."""
        self.physical_instructions.append(instruction)


def describe_for_table(state: GameState, action: Action) -> list[str]:
    """What a person at the table does to mirror an action."""
    p = action.payload
    if action.action_type == ActionType.END_ACTIONS:
        return ["End the actions phase"]
    if action.action_type == ActionType.DRAW_CARDS:
        return ["Draw 2 player cards"]
    if action.action_type == ActionType.INFECT:
        return ["Flip infection cards equal to the infection rate"]
    if action.action_type == ActionType.DISCARD:
        index = state.current_player_index if p.player_index is None else p.player_index
        hand = state.players[index].hand
        return [f"Player {index} discards {describe_card(hand[i])}" for i in p.card_indices]
    if action.action_type == ActionType.STORE_EVENT:
        return [f"Move {p.event.value} from the discard pile onto the Contingency Planner card"]
    return [f"Play {p.event.value}"]


class BotPolicy(ABC):
    """
    Abstract base class for bot policies.

    A policy defines how a bot selects actions.
    """

    @abstractmethod
    def select_action(
        self,
        state: GameState,
        legal_actions: list[Action],
    ) -> BotDecision:
        """
        Select an action from the legal actions.

        Args:
            state: Current game state
            legal_actions: List of legal actions to choose from

        Returns:
            BotDecision with the selected action
        """
        pass

    def get_name(self) -> str:
        """Get the bot's name/identifier."""
        return self.__class__.__name__


class RandomPolicy(BotPolicy):
    """
    Random policy - selects actions uniformly at random.

    Used for:
    - Simulations
    - Baseline comparison
    """

    def __init__(self, seed: int | None = None):
        self.rng = random.Random(seed)

    def select_action(
        self,
        state: GameState,
        legal_actions: list[Action],
    ) -> BotDecision:
        if not legal_actions:
            raise ValueError("No legal actions available")

        action = self.rng.choice(legal_actions)
        return BotDecision(
            action=action,
            explanation="Selected randomly",
            confidence=1.0 / len(legal_actions),
            physical_instructions=describe_for_table(state, action),
            evaluated_actions=len(legal_actions),
        )


class FirstLegalPolicy(BotPolicy):
    """
    First-legal policy - always selects the first legal action.

    The generator lists the phase step first, so this policy plays the
    turn cycle straight through without events.
    """

    def select_action(
        self,
        state: GameState,
        legal_actions: list[Action],
    ) -> BotDecision:
        if not legal_actions:
            raise ValueError("No legal actions available")

        action = legal_actions[0]
        return BotDecision(
            action=action,
            explanation="Selected first legal action",
            physical_instructions=describe_for_table(state, action),
            evaluated_actions=1,
        )


POLICIES = {
    "random": RandomPolicy,
    "first": FirstLegalPolicy,
}


def create_policy(name: str, seed: int | None = None) -> BotPolicy:
    """Build a policy by name. Raises ValueError for unknown names."""
    if name not in POLICIES:
        raise ValueError(f"Unknown policy: {name}. Choose from {', '.join(POLICIES)}")
    if name == "random":
        return RandomPolicy(seed)
    return POLICIES[name]()
