"""
Helpers for building hand-crafted Amarillo positions in tests.

Every helper takes the tiles it places from the bag, so the positions
keep the tile-count invariant.
"""
from typing import Dict, Optional

from amarillo_ai.core.board import PatternLine
from amarillo_ai.core.constants import TileColor, DUMP_INDEX, wall_column
from amarillo_ai.core.game import GameState


def take_from_bag(state: GameState, color: int, count: int) -> None:
    if state.bag[color] < count:
        raise ValueError(f"Bag only holds {state.bag[color]} tiles of color {color}")
    state.bag[color] -= count


def make_state(
    displays: Optional[Dict[int, Dict[int, int]]] = None,
    player_to_play: int = 0,
    marker_holder: Optional[int] = 0,
    moves_this_round: int = 0
) -> GameState:
    """
    Build a position with the given source contents.

    Args:
        displays: Mapping of source index to {color: count}
        player_to_play: Player to move
        marker_holder: Player whose floor holds the marker (None = the dump)
        moves_this_round: Actions already played this round

    Returns:
        GameState
    """
    state = GameState(player_to_play=player_to_play, moves_this_round=moves_this_round)
    if marker_holder is None:
        state.pool.sources[DUMP_INDEX][TileColor.FIRST_PLAYER] = 1
    else:
        state.boards[marker_holder].floor[TileColor.FIRST_PLAYER] = 1
    for display, tiles in (displays or {}).items():
        for color, count in tiles.items():
            take_from_bag(state, color, count)
            state.pool.sources[display][color] += count
    return state


def place_on_wall(state: GameState, player: int, row: int, color: int) -> None:
    take_from_bag(state, color, 1)
    state.boards[player].wall[row][wall_column(row, color)] = True


def stage_tiles(state: GameState, player: int, row: int, color: int, count: int) -> None:
    take_from_bag(state, color, count)
    state.boards[player].rows[row] = PatternLine(color, count)
