"""
Value functions for evaluating Amarillo positions.

A value function maps a game state to one win-likelihood estimate per
player. The search calls it on the positions reached by its playouts and
treats the finished-game shares as ground truth.
"""
from abc import ABC, abstractmethod
from typing import List

from amarillo_ai.core.game import GameState


class ValueFunction(ABC):
    """
    Abstract base class for position evaluators.

    Subclasses implement `get_in_progress_value`; finished games are
    scored from the state's own win shares.
    """

    def get_value(self, state: GameState) -> List[float]:
        """
        Get each player's estimated share of the win.

        Args:
            state: Game state to evaluate (not modified)

        Returns:
            List with one value per player
        """
        if state.is_finished:
            return list(state.player_scores)
        return self.get_in_progress_value(state)

    @abstractmethod
    def get_in_progress_value(self, state: GameState) -> List[float]:
        """
        Estimate each player's share of the win for an unfinished game.

        Args:
            state: Game state to evaluate (not modified)

        Returns:
            List with one value per player
        """
        pass


class HeuristicValueFunction(ValueFunction):
    """
    Score-based evaluator.

    Each player's projected score is their current score plus the bonuses
    already locked in on their wall. Values blend the player's share of the
    projected points with a bonus for leading.
    """

    def __init__(self, share_weight: float = 0.8):
        """
        Initialize the evaluator.

        Args:
            share_weight: Weight of the point share (the rest goes to the leader bonus)
        """
        if not 0.0 <= share_weight <= 1.0:
            raise ValueError("share_weight must be between 0 and 1")
        self.share_weight = share_weight

    def get_in_progress_value(self, state: GameState) -> List[float]:
        projected = [board.score + board.bonus_points() for board in state.boards]
        num_players = len(projected)
        total = sum(projected)
        best = max(projected)
        leaders = [points == best for points in projected]
        num_leaders = sum(leaders)

        values = []
        for points, leads in zip(projected, leaders):
            share = points / total if total > 0 else 1.0 / num_players
            lead_bonus = 1.0 / num_leaders if leads else 0.0
            values.append(self.share_weight * share + (1.0 - self.share_weight) * lead_bonus)
        return values
