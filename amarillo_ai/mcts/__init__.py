"""
Monte Carlo Tree Search (MCTS) implementation for Amarillo.

The search repeatedly:

1. Selection: Starting from the root, follow the UCT formula through
   already-expanded nodes, skipping subtrees that are fully explored.
2. Expansion: Apply the first action that has no child yet.
3. Simulation: Play random moves to the end of the current round and
   evaluate the position with a value function.
4. Backpropagation: Update the running mean score of every edge on the path.

The best root action (highest mean score) is returned when the time limit
passes or the tree has been explored completely.
"""

from amarillo_ai.mcts.node import (
    ActionTree, StateTree, Selection,
    create_state_tree, choose_mcts_action, select, uct_value
)
from amarillo_ai.mcts.agent import MCTSAgent
from amarillo_ai.mcts.search import (
    mcts_search,
    make_move,
    select_expand_simulate,
    random_playout,
    backpropagate,
    update_tree,
    highest_score_action,
    count_nodes,
    get_action_statistics,
    get_principal_variation
)
from amarillo_ai.mcts.config import MCTSConfig

# Default configuration
DEFAULT_CONFIG = MCTSConfig(
    time_limit=0.4,           # Seconds per move
    exploration_weight=1.41,  # UCT exploration constant
)

__all__ = [
    'MCTSAgent',
    'ActionTree',
    'StateTree',
    'Selection',
    'MCTSConfig',
    'create_state_tree',
    'choose_mcts_action',
    'select',
    'uct_value',
    'mcts_search',
    'make_move',
    'select_expand_simulate',
    'random_playout',
    'backpropagate',
    'update_tree',
    'highest_score_action',
    'count_nodes',
    'get_action_statistics',
    'get_principal_variation',
    'DEFAULT_CONFIG'
]
