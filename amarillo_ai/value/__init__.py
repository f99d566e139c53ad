"""
Position evaluation for Amarillo AI.

The search only depends on the ValueFunction contract; this package also
provides a score-based heuristic and a PyTorch network implementation.
"""

from amarillo_ai.value.base import ValueFunction, HeuristicValueFunction
from amarillo_ai.value.features import FEATURES_PER_PLAYER, encode_state, encode_states
from amarillo_ai.value.network import (
    NetworkConfig, ValueNetwork, NetworkValueFunction, set_seed
)

__all__ = [
    'ValueFunction',
    'HeuristicValueFunction',
    'FEATURES_PER_PLAYER',
    'encode_state',
    'encode_states',
    'NetworkConfig',
    'ValueNetwork',
    'NetworkValueFunction',
    'set_seed'
]
