"""
Monte Carlo Tree Search Agent for Amarillo.

This module provides the MCTSAgent class, a ready-to-use AI player that
picks actions with a time-bounded Monte Carlo Tree Search guided by a
value function, and keeps statistics about its searches.
"""
from dataclasses import replace
from typing import Any, Callable, Dict, List, Optional, Tuple
import random

from loguru import logger

from amarillo_ai.core.actions import Action
from amarillo_ai.core.game import GameState
from amarillo_ai.mcts.config import MCTSConfig
from amarillo_ai.mcts.node import StateTree
from amarillo_ai.mcts.search import mcts_search, get_principal_variation
from amarillo_ai.value.base import ValueFunction, HeuristicValueFunction


class MCTSAgent:
    """
    Monte Carlo Tree Search agent for playing Amarillo.
    """

    def __init__(
        self,
        value_function: Optional[ValueFunction] = None,
        config: Optional[MCTSConfig] = None,
        name: str = "MCTS Agent",
        verbose: bool = False
    ):
        """
        Initialize an MCTS agent.

        Args:
            value_function: Evaluator for playout results (heuristic if None)
            config: MCTS configuration parameters (its seed, if set, seeds the
                sequence of per-search seeds)
            name: Name of the agent
            verbose: Whether to log each decision at INFO level
        """
        self.value_function = value_function or HeuristicValueFunction()
        self.config = config or MCTSConfig()
        self.name = name
        self.verbose = verbose

        # Statistics from the most recent search
        self.last_stats: Dict[str, Any] = {}

        # Root node of the last search
        self.last_root: Optional[StateTree] = None

        self.num_searches = 0

        # Draws a fresh playout seed for each search
        self._seed_source = None if self.config.seed is None else random.Random(self.config.seed)

    def next_search_config(self) -> MCTSConfig:
        """
        Get the configuration for the next search.

        A seeded agent gives every search its own seed drawn from the
        agent's seed, so searches are reproducible but do not replay the
        same playouts.
        """
        if self._seed_source is None:
            return self.config
        return replace(self.config, seed=self._seed_source.randrange(2 ** 32))

    def select_action(self, state: GameState) -> Action:
        """
        Select an action for the player to move.

        Args:
            state: Current game state

        Returns:
            Selected action
        """
        valid_actions = state.get_valid_actions()
        if not valid_actions:
            raise ValueError("No valid actions available")

        # If there's only one valid action, no need to search
        if len(valid_actions) == 1:
            self.last_stats = {"iterations": 0, "forced_move": True}
            self.last_root = None
            return valid_actions[0]

        action, stats = mcts_search(state, self.value_function, self.next_search_config())
        self.last_root = stats.pop("root")
        self.last_stats = stats
        self.num_searches += 1

        if self.verbose:
            logger.info(
                f"{self.name} (player {state.player_to_play}) selected: {action} "
                f"[{stats['iterations']} playouts in {stats['time_elapsed']:.3f}s"
                f"{', tree fully explored' if stats['fully_explored'] else ''}]"
            )
        return action

    def get_action_callback(self) -> Callable[[GameState], Action]:
        """
        Get a callback function for selecting actions.

        This is useful for registering the agent with a Game object.
        """
        return self.select_action

    def get_principal_variation(self) -> List[Tuple[Action, float]]:
        if self.last_root is None:
            return []
        return get_principal_variation(self.last_root)

    def reset_statistics(self) -> None:
        """Reset all statistics."""
        self.last_stats = {}
        self.last_root = None
        self.num_searches = 0

    def __str__(self) -> str:
        return f"{self.name} (MCTS, {self.config.time_limit}s per move)"
