"""
Amarillo AI Core Package

This package contains the rules engine for Amarillo, including:
- Game state representation
- Legal-move enumeration and move application
- Round resolution, scoring and game-end detection
- Refilling the factory displays between rounds
- Constants, enums and exceptions

All core components can be imported directly from this package.
"""

# Game and game state
from amarillo_ai.core.game import (
    Game, GameState,
    create_initial_state, step, refill, is_game_over,
    fill_factory_displays, simulate_random_game
)

# Boards and supply
from amarillo_ai.core.board import (
    PlayerBoard, PatternLine,
    score_tile_placement, floor_penalty
)
from amarillo_ai.core.supply import CentralPool, weighted_choice

# Actions
from amarillo_ai.core.actions import Action, get_valid_actions, is_valid_action

# Constants
from amarillo_ai.core.constants import (
    TileColor, TILE_COLORS, ALL_TILES,
    NUM_PLAYERS, NUM_FACTORY_DISPLAYS, DUMP_INDEX, FLOOR_LINE,
    TILES_PER_COLOR, WALL_SIZE, wall_column, wall_color
)

# Exceptions
from amarillo_ai.core.exceptions import (
    ContractViolation, IllegalActionError, TileCountError, MarkerError
)

__all__ = [
    # Game
    'Game', 'GameState',
    'create_initial_state', 'step', 'refill', 'is_game_over',
    'fill_factory_displays', 'simulate_random_game',

    # Boards and supply
    'PlayerBoard', 'PatternLine', 'score_tile_placement', 'floor_penalty',
    'CentralPool', 'weighted_choice',

    # Actions
    'Action', 'get_valid_actions', 'is_valid_action',

    # Constants
    'TileColor', 'TILE_COLORS', 'ALL_TILES',
    'NUM_PLAYERS', 'NUM_FACTORY_DISPLAYS', 'DUMP_INDEX', 'FLOOR_LINE',
    'TILES_PER_COLOR', 'WALL_SIZE', 'wall_column', 'wall_color',

    # Exceptions
    'ContractViolation', 'IllegalActionError', 'TileCountError', 'MarkerError'
]
