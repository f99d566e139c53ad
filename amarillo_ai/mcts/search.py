"""
Monte Carlo Tree Search (MCTS) algorithm for Amarillo.

This module implements the search cycle:
1. Selection: follow UCT through the tree, skipping explored subtrees
2. Expansion: apply the first action without a child and add its node
3. Simulation: play uniformly random moves until the end of the round and
   evaluate the result with a value function
4. Backpropagation: update the edge means along the path

The search never refills the factory displays, so the tree only covers
the current round and can be explored completely near its end.
"""
from __future__ import annotations
from typing import Any, Dict, List, Optional, Tuple
import random
import time

from loguru import logger

from amarillo_ai.core.actions import Action, get_valid_actions
from amarillo_ai.core.game import GameState, step
from amarillo_ai.mcts.config import MCTSConfig
from amarillo_ai.mcts.node import StateTree, Selection, create_state_tree, select
from amarillo_ai.value.base import ValueFunction


def random_playout(
    state: GameState,
    rng: random.Random,
    check_invariants: bool = True
) -> Tuple[GameState, int]:
    """
    Play uniformly random actions until the round ends.

    Args:
        state: State to start from (not modified)
        rng: Random number generator
        check_invariants: Whether each step validates actions and tile counts

    Returns:
        Tuple of (final state, number of actions played)
    """
    steps = 0
    while True:
        valid_actions = get_valid_actions(state)
        if not valid_actions:
            break
        state, empty_center = step(state, rng.choice(valid_actions), check_invariants)
        steps += 1
        if empty_center:
            break
    return state, steps


def select_expand_simulate(
    root: StateTree,
    value_function: ValueFunction,
    config: MCTSConfig,
    rng: random.Random
) -> Optional[Tuple[List[Action], List[float], int]]:
    """
    Run the selection, expansion and simulation phases once.

    Args:
        root: Root of the search tree
        value_function: Evaluator for the position reached by the playout
        config: MCTS configuration parameters
        rng: Random number generator for the playout

    Returns:
        Tuple of (actions from the root, scores, playout length), or None if
        the tree has been fully explored
    """
    path: List[Action] = []
    tree = root
    while True:
        outcome, action = select(tree, config.exploration_weight)
        if outcome is Selection.EXHAUSTED:
            # Only the root can be exhausted: complete children are never entered
            return None
        path.append(action)
        edge = tree.actions[action]
        if outcome is Selection.DESCEND:
            tree = edge.post_state
            continue

        next_state, _ = step(tree.state, action, config.check_invariants)
        edge.post_state = create_state_tree(next_state)
        final_state, steps = random_playout(next_state, rng, config.check_invariants)
        return path, value_function.get_value(final_state), steps


def backpropagate(root: StateTree, path: List[Action], scores: List[float]) -> None:
    """
    Update statistics along a path from the root.

    Each edge's mean is updated with the score of the player who was to
    move in the edge's parent state.

    Args:
        root: Root of the search tree
        path: Actions followed from the root
        scores: One score per player
    """
    visited = []
    tree = root
    for action in path:
        tree.num_plays += 1
        edge = tree.actions[action]
        player_score = scores[tree.state.player_to_play]
        edge.score = (edge.score * edge.num_plays + player_score) / (edge.num_plays + 1)
        edge.num_plays += 1
        visited.append(tree)
        tree = edge.post_state

    for node in reversed(visited):
        node.update_completeness()


def update_tree(
    root: StateTree,
    value_function: ValueFunction,
    config: MCTSConfig,
    rng: random.Random
) -> Optional[int]:
    """
    Run one full search cycle.

    Returns:
        The playout length, or None if the tree was already fully explored
    """
    result = select_expand_simulate(root, value_function, config, rng)
    if result is None:
        return None
    path, scores, steps = result
    backpropagate(root, path, scores)
    return steps


def highest_score_action(root: StateTree) -> Action:
    """
    Get the root action with the highest mean score.

    Only visited edges compete; ties go to the earliest edge in enumeration
    order. If no edge has been visited the first legal action is returned.

    Raises:
        ValueError: If the root has no actions
    """
    if not root.actions:
        raise ValueError(f"No actions available in state:\n{root.state}")
    best_action = None
    best_score = None
    for action, edge in root.actions.items():
        if edge.num_plays == 0:
            continue
        if best_score is None or edge.score > best_score:
            best_action = action
            best_score = edge.score
    if best_action is None:
        return next(iter(root.actions))
    return best_action


def mcts_search(
    state: GameState,
    value_function: ValueFunction,
    config: Optional[MCTSConfig] = None
) -> Tuple[Action, Dict[str, Any]]:
    """
    Run Monte Carlo Tree Search to find the best action.

    Cycles run until the time limit passes, the iteration cap is reached or
    the tree is fully explored. The deadline is only checked between cycles.

    Args:
        state: Current game state
        value_function: Evaluator for playout results
        config: MCTS configuration parameters

    Returns:
        Tuple of (best action, search statistics)
    """
    if config is None:
        config = MCTSConfig()
    rng = random.Random(config.seed)

    root = create_state_tree(state)
    if not root.actions:
        raise ValueError(f"No actions available in state:\n{state}")

    stats: Dict[str, Any] = {
        "iterations": 0,
        "total_simulation_steps": 0,
        "max_simulation_steps": 0,
        "fully_explored": False,
    }

    start_time = time.time()
    deadline = None if config.time_limit is None else start_time + config.time_limit
    while deadline is None or time.time() < deadline:
        if config.iterations is not None and stats["iterations"] >= config.iterations:
            break
        steps = update_tree(root, value_function, config, rng)
        if steps is None:
            stats["fully_explored"] = True
            break
        stats["iterations"] += 1
        stats["total_simulation_steps"] += steps
        stats["max_simulation_steps"] = max(stats["max_simulation_steps"], steps)

    best_action = highest_score_action(root)

    stats["time_elapsed"] = time.time() - start_time
    stats["iterations_per_second"] = stats["iterations"] / max(0.001, stats["time_elapsed"])
    stats["node_count"] = count_nodes(root)
    stats["action_statistics"] = get_action_statistics(root)
    stats["root"] = root

    logger.debug(
        f"{root.num_plays} playouts{' (tree fully explored)' if stats['fully_explored'] else ''}, "
        f"{stats['node_count']} nodes, best {best_action}"
    )
    return best_action, stats


def make_move(
    state: GameState,
    time_limit: float,
    value_function: ValueFunction,
    config: Optional[MCTSConfig] = None
) -> Action:
    """
    Pick an action for the player to move within a time budget.

    Args:
        state: Current game state
        time_limit: Time budget in seconds
        value_function: Evaluator for playout results
        config: Further search settings (its time limit is replaced)

    Returns:
        The chosen action
    """
    settings = (config or MCTSConfig()).to_dict()
    settings["time_limit"] = time_limit
    action, _ = mcts_search(state, value_function, MCTSConfig.from_dict(settings))
    return action


def count_nodes(node: StateTree) -> int:
    """
    Count the total number of nodes in the tree.

    Args:
        node: Root node of the tree

    Returns:
        Total number of nodes
    """
    count = 1
    for edge in node.actions.values():
        if edge.post_state is not None:
            count += count_nodes(edge.post_state)
    return count


def get_principal_variation(root: StateTree, max_depth: int = 10) -> List[Tuple[Action, float]]:
    """
    Get the principal variation (highest-scoring visited path) from the root.

    Args:
        root: Root node of the search tree
        max_depth: Maximum depth to explore

    Returns:
        List of (action, mean score) pairs
    """
    result = []
    current = root
    while current is not None and len(result) < max_depth:
        visited = [(action, edge) for action, edge in current.actions.items() if edge.num_plays > 0]
        if not visited:
            break
        action, edge = max(visited, key=lambda item: item[1].score)
        result.append((action, edge.score))
        current = edge.post_state
    return result


def get_action_statistics(root: StateTree) -> Dict[str, Dict[str, float]]:
    """
    Get statistics for all actions from the root.

    Args:
        root: Root node of the search tree

    Returns:
        Dictionary mapping action strings to statistics
    """
    return {
        str(action): {
            "visits": edge.num_plays,
            "score": edge.score,
            "complete": edge.is_complete,
        }
        for action, edge in root.actions.items()
    }
