"""
Feature encoding of Amarillo positions for learned value functions.

Each player board is encoded into a fixed-length vector; a state is the
stack of its three board vectors, ordered by player index.
"""
from typing import List

import numpy as np

from amarillo_ai.core.constants import NUM_COLORS, NUM_PATTERN_LINES, WALL_SIZE, TileColor
from amarillo_ai.core.board import PlayerBoard
from amarillo_ai.core.game import GameState

# Pattern line fill (5) + pattern line color one-hot (25) + wall (25)
# + relative score, fullest column, fullest color, marker, floor size (5)
FEATURES_PER_PLAYER = (
    NUM_PATTERN_LINES
    + NUM_PATTERN_LINES * NUM_COLORS
    + WALL_SIZE * WALL_SIZE
    + 5
)

SCORE_SCALE = 20.0
FLOOR_SCALE = 7.0


def encode_board(board: PlayerBoard, min_score: int) -> np.ndarray:
    """
    Encode a single player board.

    Args:
        board: Board to encode
        min_score: Lowest score among all players (scores are encoded relative to it)

    Returns:
        Float32 vector of length FEATURES_PER_PLAYER
    """
    features = np.zeros(FEATURES_PER_PLAYER, dtype=np.float32)
    offset = 0

    for row_id, row in enumerate(board.rows):
        features[offset + row_id] = row.count / (row_id + 1)
    offset += NUM_PATTERN_LINES

    for row_id, row in enumerate(board.rows):
        if row.count > 0:
            features[offset + row_id * NUM_COLORS + row.color] = 1.0
    offset += NUM_PATTERN_LINES * NUM_COLORS

    wall = np.array(board.wall, dtype=np.float32)
    features[offset:offset + WALL_SIZE * WALL_SIZE] = wall.reshape(-1)
    offset += WALL_SIZE * WALL_SIZE

    column_counts = wall.sum(axis=0)
    color_counts = np.zeros(NUM_COLORS, dtype=np.float32)
    for row_id in range(WALL_SIZE):
        for col in range(WALL_SIZE):
            if board.wall[row_id][col]:
                color_counts[(col - row_id) % WALL_SIZE] += 1

    features[offset] = (board.score - min_score) / SCORE_SCALE
    features[offset + 1] = column_counts.max() / WALL_SIZE
    features[offset + 2] = color_counts.max() / WALL_SIZE
    features[offset + 3] = float(board.floor[TileColor.FIRST_PLAYER] > 0)
    features[offset + 4] = sum(board.floor) / FLOOR_SCALE
    return features


def encode_state(state: GameState) -> np.ndarray:
    """
    Encode a game state.

    Args:
        state: State to encode (not modified)

    Returns:
        Float32 array of shape (num_players, FEATURES_PER_PLAYER)
    """
    min_score = min(board.score for board in state.boards)
    return np.stack([encode_board(board, min_score) for board in state.boards])


def encode_states(states: List[GameState]) -> np.ndarray:
    """Encode a batch of states into shape (batch, num_players, FEATURES_PER_PLAYER)."""
    return np.stack([encode_state(state) for state in states])
