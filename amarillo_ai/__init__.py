"""
Amarillo AI - A rules engine and MCTS player for a three-player tile-drafting game.

This package provides a complete implementation of the Amarillo rules, along
with a Monte Carlo Tree Search agent guided by pluggable value functions.
"""

__version__ = "0.1.0"
__author__ = "Amarillo AI Team"

# Make key components available at package level
from amarillo_ai.core.game import Game, GameState, create_initial_state, step, refill
from amarillo_ai.core.actions import Action, get_valid_actions
from amarillo_ai.mcts.agent import MCTSAgent
from amarillo_ai.mcts.search import make_move
from amarillo_ai.value.base import ValueFunction, HeuristicValueFunction

# Version info as a tuple for programmatic access
VERSION_INFO = tuple(map(int, __version__.split('.')))
