#!/usr/bin/env python
"""
Tests for the Amarillo Monte Carlo Tree Search.

Covers UCT selection, backpropagation, the visit-count bookkeeping of a
real search, full exploration near the end of a round and the agent
wrapper.
"""
import math
import random
import unittest

from amarillo_ai.core.actions import Action, get_valid_actions
from amarillo_ai.core.constants import TileColor, FLOOR_LINE
from amarillo_ai.core.game import create_initial_state
from amarillo_ai.mcts.agent import MCTSAgent
from amarillo_ai.mcts.config import MCTSConfig
from amarillo_ai.mcts.node import (
    ActionTree, StateTree, Selection, create_state_tree, choose_mcts_action, select, uct_value
)
from amarillo_ai.mcts.search import (
    backpropagate, highest_score_action, make_move, mcts_search, random_playout
)
from amarillo_ai.value.base import HeuristicValueFunction

from state_builders import make_state, stage_tiles


def end_of_round_state():
    """Player 0 to open a round with a single tile left to draft."""
    return make_state({0: {TileColor.BLUE: 1}})


class TestMCTSConfig(unittest.TestCase):
    """Test case for search configuration."""

    def test_defaults(self):
        config = MCTSConfig()
        self.assertEqual(config.time_limit, 0.4)
        self.assertIsNone(config.iterations)
        self.assertAlmostEqual(config.exploration_weight, 1.41)
        self.assertFalse(config.check_invariants)
        self.assertTrue(MCTSConfig.debug().check_invariants)

    def test_validation(self):
        with self.assertRaises(ValueError):
            MCTSConfig(time_limit=None, iterations=None)
        with self.assertRaises(ValueError):
            MCTSConfig(time_limit=0)
        with self.assertRaises(ValueError):
            MCTSConfig(iterations=-5)
        with self.assertRaises(ValueError):
            MCTSConfig(exploration_weight=-1.0)

    def test_from_dict_ignores_unknown_keys(self):
        config = MCTSConfig.from_dict({"time_limit": 1.5, "seed": 3, "unused": True})
        self.assertEqual(config.time_limit, 1.5)
        self.assertEqual(config.seed, 3)
        self.assertEqual(MCTSConfig.from_dict(config.to_dict()), config)


class TestSelection(unittest.TestCase):
    """Test case for UCT selection over hand-built trees."""

    def setUp(self):
        self.state = create_initial_state(seed=0)
        self.first, self.second, self.third = get_valid_actions(self.state)[:3]

    def test_unvisited_edge_is_infinite(self):
        self.assertEqual(uct_value(10, ActionTree(), 1.41), math.inf)

    def test_uct_formula(self):
        edge = ActionTree(num_plays=3, score=0.5)
        expected = 0.5 + 1.41 * math.sqrt(math.log(11) / 4)
        self.assertAlmostEqual(uct_value(10, edge, 1.41), expected)
        self.assertAlmostEqual(uct_value(10, edge, 0.0), 0.5)

    def test_ties_go_to_first_edge(self):
        tree = create_state_tree(self.state)
        self.assertEqual(choose_mcts_action(tree), get_valid_actions(self.state)[0])

        tree = StateTree(state=self.state, num_plays=2, actions={
            self.first: ActionTree(num_plays=1, score=0.4),
            self.second: ActionTree(num_plays=1, score=0.4),
        })
        self.assertEqual(choose_mcts_action(tree), self.first)

    def test_prefers_higher_value(self):
        tree = StateTree(state=self.state, num_plays=2, actions={
            self.first: ActionTree(num_plays=1, score=0.2),
            self.second: ActionTree(num_plays=1, score=0.7),
        })
        self.assertEqual(choose_mcts_action(tree, 1.41), self.second)

    def test_select_outcomes(self):
        leaf = StateTree(state=self.state, actions={self.third: ActionTree()})
        tree = StateTree(state=self.state, num_plays=1, actions={
            self.first: ActionTree(num_plays=1, score=0.5, post_state=leaf),
            self.second: ActionTree(),
        })
        self.assertEqual(select(tree), (Selection.EXPAND, self.second))

        del tree.actions[self.second]
        self.assertEqual(select(tree), (Selection.DESCEND, self.first))

        leaf.is_complete = True
        self.assertEqual(select(tree), (Selection.EXHAUSTED, None))

    def test_empty_node(self):
        tree = create_state_tree(make_state())
        self.assertTrue(tree.is_complete)
        self.assertIsNone(choose_mcts_action(tree))
        self.assertEqual(select(tree), (Selection.EXHAUSTED, None))


class TestBackpropagation(unittest.TestCase):
    """Test case for updating statistics along a path."""

    def test_scores_follow_player_to_move(self):
        root_state = create_initial_state(seed=1)
        child_state = root_state.clone()
        child_state.player_to_play = 1
        first = get_valid_actions(root_state)[0]
        reply = get_valid_actions(child_state)[0]

        child = StateTree(state=child_state, actions={reply: ActionTree()})
        root = StateTree(state=root_state, actions={first: ActionTree(post_state=child)})

        backpropagate(root, [first, reply], [0.2, 0.5, 0.3])
        self.assertEqual(root.num_plays, 1)
        self.assertEqual(child.num_plays, 1)
        self.assertAlmostEqual(root.actions[first].score, 0.2)
        self.assertAlmostEqual(child.actions[reply].score, 0.5)

        backpropagate(root, [first, reply], [1.0, 0.0, 0.0])
        self.assertEqual(root.actions[first].num_plays, 2)
        self.assertAlmostEqual(root.actions[first].score, 0.6)
        self.assertAlmostEqual(child.actions[reply].score, 0.25)

    def test_highest_score_action(self):
        state = create_initial_state(seed=2)
        first, second, third = get_valid_actions(state)[:3]
        root = StateTree(state=state, actions={
            first: ActionTree(),
            second: ActionTree(num_plays=2, score=0.3),
            third: ActionTree(num_plays=5, score=0.3),
        })
        # Unvisited edges never win, equal means go to the earlier edge
        self.assertEqual(highest_score_action(root), second)

        root.actions[third].score = 0.31
        self.assertEqual(highest_score_action(root), third)

        unvisited = StateTree(state=state, actions={first: ActionTree(), second: ActionTree()})
        self.assertEqual(highest_score_action(unvisited), first)

        with self.assertRaises(ValueError):
            highest_score_action(StateTree(state=state))


class TestSearch(unittest.TestCase):
    """Test case for complete searches."""

    def setUp(self):
        self.value_function = HeuristicValueFunction()

    def assert_visit_counts(self, node):
        if not node.actions:
            return
        self.assertEqual(node.num_plays, sum(edge.num_plays for edge in node.actions.values()))
        for edge in node.actions.values():
            if edge.post_state is None:
                self.assertEqual(edge.num_plays, 0)
            else:
                self.assertEqual(edge.num_plays, edge.post_state.num_plays + 1)
                self.assert_visit_counts(edge.post_state)

    def test_visit_counts(self):
        state = create_initial_state(seed=4)
        config = MCTSConfig(time_limit=None, iterations=60, seed=0, check_invariants=True)

        action, stats = mcts_search(state, self.value_function, config)

        root = stats["root"]
        self.assertIn(action, get_valid_actions(state))
        self.assertEqual(stats["iterations"], 60)
        self.assertEqual(root.num_plays, 60)
        self.assertFalse(stats["fully_explored"])
        self.assert_visit_counts(root)
        self.assertEqual(stats["node_count"], 61)

    def test_search_is_reproducible_with_seed(self):
        state = create_initial_state(seed=5)
        config = MCTSConfig(time_limit=None, iterations=40, seed=7)
        first, _ = mcts_search(state, self.value_function, config)
        second, _ = mcts_search(state, self.value_function, config)
        self.assertEqual(first, second)

    def test_full_exploration(self):
        state = end_of_round_state()
        config = MCTSConfig(time_limit=10.0, seed=0)

        action, stats = mcts_search(state, self.value_function, config)

        self.assertTrue(stats["fully_explored"])
        self.assertEqual(stats["iterations"], 6)
        self.assertTrue(stats["root"].is_complete)
        # Every outcome scores the same, so the first legal action wins
        self.assertEqual(action, Action(0, TileColor.BLUE, 0))

    def test_no_actions(self):
        with self.assertRaises(ValueError):
            mcts_search(make_state(), self.value_function, MCTSConfig(time_limit=0.05))
        with self.assertRaises(ValueError):
            make_move(make_state(), 0.05, self.value_function)

    def test_make_move(self):
        state = create_initial_state(seed=6)
        action = make_move(state, 0.05, self.value_function)
        self.assertIn(action, get_valid_actions(state))

    def test_random_playout_stops_at_round_end(self):
        state = create_initial_state(seed=8)
        final_state, steps = random_playout(state, random.Random(0))
        self.assertGreater(steps, 0)
        self.assertTrue(final_state.has_empty_center())
        self.assertEqual(final_state.moves_this_round, 0)
        self.assertFalse(state.has_empty_center())


class TestMCTSAgent(unittest.TestCase):
    """Test case for the MCTS agent."""

    def test_select_action(self):
        agent = MCTSAgent(config=MCTSConfig(time_limit=None, iterations=20, seed=1), name="Test")
        state = create_initial_state(seed=9)

        action = agent.select_action(state)

        self.assertIn(action, get_valid_actions(state))
        self.assertEqual(agent.num_searches, 1)
        self.assertEqual(agent.last_stats["iterations"], 20)
        self.assertNotIn("root", agent.last_stats)
        self.assertTrue(agent.get_principal_variation())

        agent.reset_statistics()
        self.assertEqual(agent.num_searches, 0)
        self.assertEqual(agent.get_principal_variation(), [])

    def test_each_search_gets_its_own_seed(self):
        config = MCTSConfig(time_limit=None, iterations=10, seed=3)
        agent = MCTSAgent(config=config)
        twin = MCTSAgent(config=config)

        seeds = [agent.next_search_config().seed for _ in range(5)]

        self.assertEqual(len(set(seeds)), 5)
        self.assertEqual([twin.next_search_config().seed for _ in range(5)], seeds)
        self.assertEqual(agent.config.seed, 3)
        self.assertEqual(agent.next_search_config().iterations, 10)

        unseeded = MCTSAgent(config=MCTSConfig(time_limit=0.1))
        self.assertIsNone(unseeded.next_search_config().seed)

    def test_forced_move(self):
        state = end_of_round_state()
        for row in range(5):
            stage_tiles(state, 0, row, TileColor.YELLOW, 1)
        agent = MCTSAgent()

        self.assertEqual(agent.select_action(state), Action(0, TileColor.BLUE, FLOOR_LINE))
        self.assertTrue(agent.last_stats["forced_move"])
        self.assertEqual(agent.num_searches, 0)

    def test_no_actions(self):
        with self.assertRaises(ValueError):
            MCTSAgent().select_action(make_state())


if __name__ == "__main__":
    unittest.main()
