"""
Monte Carlo search tree for Amarillo.

The tree alternates two kinds of objects:
- StateTree: a node holding a game state and its visit count
- ActionTree: an edge for one legal action of that state, holding its visit
  count, its running mean score and (once visited) the resulting StateTree

Scores on an edge are from the perspective of the player to move in the
state the edge leaves.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Dict, Optional, Tuple
import math

from amarillo_ai.core.actions import Action, get_valid_actions
from amarillo_ai.core.constants import DEFAULT_EXPLORATION_WEIGHT
from amarillo_ai.core.game import GameState


@dataclass(eq=False)
class ActionTree:
    """Game tree starting from a particular action."""
    num_plays: int = 0
    """Number of playouts that went through this action"""

    score: float = 0.0
    """Mean score of those playouts for the player who took the action"""

    post_state: Optional[StateTree] = None
    """Tree of the resulting state, None until the action is first visited"""

    @property
    def is_complete(self) -> bool:
        return self.post_state is not None and self.post_state.is_complete


@dataclass(eq=False)
class StateTree:
    """Game tree starting from a particular state."""
    state: GameState
    num_plays: int = 0
    actions: Dict[Action, ActionTree] = field(default_factory=dict)
    is_complete: bool = False
    """Whether every line of play below this node has been explored"""

    def update_completeness(self) -> bool:
        """Recompute `is_complete` from the edges (children must be current)."""
        self.is_complete = all(edge.is_complete for edge in self.actions.values())
        return self.is_complete

    def __str__(self) -> str:
        return (f"StateTree(player={self.state.player_to_play}, "
                f"visits={self.num_plays}, "
                f"actions={len(self.actions)}, "
                f"complete={self.is_complete})")


def create_state_tree(state: GameState) -> StateTree:
    """
    Create an unvisited node with one edge per legal action.

    Edges keep the enumeration order of `get_valid_actions`. A node without
    legal actions is complete from the start.
    """
    actions = {action: ActionTree() for action in get_valid_actions(state)}
    return StateTree(state=state, actions=actions, is_complete=not actions)


class Selection(Enum):
    """Outcome of selecting an edge of a node."""
    DESCEND = auto()    # The chosen edge already has a child
    EXPAND = auto()     # The chosen edge has no child yet
    EXHAUSTED = auto()  # No edge is eligible


def uct_value(parent_plays: int, edge: ActionTree, exploration_weight: float) -> float:
    """
    UCT value of an edge.

    value = score + C * sqrt(ln(1 + N_parent) / (1 + N_edge))

    Unvisited edges are worth infinity so that every edge is tried once
    before any is revisited.
    """
    if edge.num_plays == 0:
        return math.inf
    exploration = math.sqrt(math.log(1 + parent_plays) / (1 + edge.num_plays))
    return edge.score + exploration_weight * exploration


def choose_mcts_action(
    tree: StateTree,
    exploration_weight: float = DEFAULT_EXPLORATION_WEIGHT,
    skip_complete: bool = False
) -> Optional[Action]:
    """
    Choose the action with the maximum UCT value for further exploration.

    Ties go to the earliest edge in enumeration order.

    Args:
        tree: Node to choose from
        exploration_weight: UCT exploration constant
        skip_complete: Whether to ignore edges whose subtree is fully explored

    Returns:
        The chosen action, or None if no edge is eligible
    """
    best_action = None
    best_value = -math.inf
    for action, edge in tree.actions.items():
        if skip_complete and edge.is_complete:
            continue
        value = uct_value(tree.num_plays, edge, exploration_weight)
        if best_action is None or value > best_value:
            best_action = action
            best_value = value
    return best_action


def select(
    tree: StateTree,
    exploration_weight: float = DEFAULT_EXPLORATION_WEIGHT
) -> Tuple[Selection, Optional[Action]]:
    """
    Select the next edge to follow from a node, skipping explored subtrees.

    Returns:
        Tuple of (selection outcome, chosen action or None when exhausted)
    """
    action = choose_mcts_action(tree, exploration_weight, skip_complete=True)
    if action is None:
        return Selection.EXHAUSTED, None
    if tree.actions[action].post_state is None:
        return Selection.EXPAND, action
    return Selection.DESCEND, action
