"""
Configuration for Monte Carlo Tree Search (MCTS).

This module defines the configuration parameters for the MCTS algorithm:
the time budget, an optional iteration cap, the exploration constant and
invariant checking during simulation.
"""
from dataclasses import dataclass, fields
from typing import Optional

from amarillo_ai.core.constants import DEFAULT_EXPLORATION_WEIGHT, DEFAULT_TIME_LIMIT


@dataclass
class MCTSConfig:
    """
    Configuration parameters for Monte Carlo Tree Search.

    The search stops at whichever comes first: the time limit, the
    iteration cap or the full exploration of the tree.
    """
    time_limit: Optional[float] = DEFAULT_TIME_LIMIT
    """Time budget per move in seconds (None = no limit)"""

    iterations: Optional[int] = None
    """Maximum number of select-expand-simulate-backpropagate cycles (None = no cap)"""

    exploration_weight: float = DEFAULT_EXPLORATION_WEIGHT
    """UCT exploration constant"""

    check_invariants: bool = False
    """Whether simulated steps validate actions and tile counts (slow, for debugging)"""

    seed: Optional[int] = None
    """Seed for the random playouts (None = nondeterministic)"""

    def __post_init__(self):
        """Validate configuration parameters."""
        if self.time_limit is None and self.iterations is None:
            raise ValueError("At least one of time_limit and iterations must be set")

        if self.time_limit is not None and self.time_limit <= 0:
            raise ValueError("time_limit must be positive or None")

        if self.iterations is not None and self.iterations <= 0:
            raise ValueError("iterations must be positive or None")

        if self.exploration_weight < 0:
            raise ValueError("exploration_weight must be non-negative")

    @classmethod
    def default(cls) -> 'MCTSConfig':
        return cls()

    @classmethod
    def fast(cls) -> 'MCTSConfig':
        """
        Get a configuration optimized for speed.

        Returns:
            Fast MCTSConfig object
        """
        return cls(time_limit=0.1)

    @classmethod
    def deep(cls) -> 'MCTSConfig':
        """
        Get a configuration optimized for deep search.

        Returns:
            Deep MCTSConfig object
        """
        return cls(time_limit=5.0)

    @classmethod
    def debug(cls) -> 'MCTSConfig':
        """Default search with every simulated step validated."""
        return cls(check_invariants=True)

    @classmethod
    def from_dict(cls, config_dict: dict) -> 'MCTSConfig':
        """
        Create a configuration from a dictionary.

        Unknown keys are ignored.

        Args:
            config_dict: Dictionary of configuration parameters

        Returns:
            MCTSConfig object
        """
        valid_names = {f.name for f in fields(cls)}
        valid_params = {k: v for k, v in config_dict.items() if k in valid_names}
        return cls(**valid_params)

    def to_dict(self) -> dict:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def __str__(self) -> str:
        params = ", ".join(f"{name}={value}" for name, value in self.to_dict().items())
        return f"MCTSConfig({params})"
