"""
Constants for the Amarillo game.

This module defines the game constants used throughout the Amarillo
implementation, including tile colors, board geometry, tile supply and
scoring values.
"""
from enum import IntEnum
from typing import Dict, Final, List, Tuple


class TileColor(IntEnum):
    """Enum representing the tile colors, plus the first-player marker."""
    BLUE = 0
    YELLOW = 1
    RED = 2
    GREEN = 3
    CYAN = 4
    FIRST_PLAYER = 5  # Marker tile, never drawn from the bag


# Drawable colors (excluding the marker)
TILE_COLORS: Final[List[TileColor]] = [
    TileColor.BLUE,
    TileColor.YELLOW,
    TileColor.RED,
    TileColor.GREEN,
    TileColor.CYAN,
]

# All tile kinds including the marker
ALL_TILES: Final[List[TileColor]] = TILE_COLORS + [TileColor.FIRST_PLAYER]

NUM_COLORS: Final[int] = len(TILE_COLORS)
NUM_TILE_KINDS: Final[int] = len(ALL_TILES)

# Single-letter names (for compact printing)
COLOR_NAMES: Final[Dict[TileColor, str]] = {
    TileColor.BLUE: "B",
    TileColor.YELLOW: "Y",
    TileColor.RED: "R",
    TileColor.GREEN: "G",
    TileColor.CYAN: "C",
    TileColor.FIRST_PLAYER: "F",
}

# Players
NUM_PLAYERS: Final[int] = 3

# Central pool: seven factory displays followed by the dump (centre)
NUM_FACTORY_DISPLAYS: Final[int] = 7
DUMP_INDEX: Final[int] = NUM_FACTORY_DISPLAYS
NUM_SOURCES: Final[int] = NUM_FACTORY_DISPLAYS + 1
TILES_PER_DISPLAY: Final[int] = 4

# Board geometry
WALL_SIZE: Final[int] = 5
NUM_PATTERN_LINES: Final[int] = WALL_SIZE
FLOOR_LINE: Final[int] = NUM_PATTERN_LINES  # Destination index meaning "floor"

# Tile supply
TILES_PER_COLOR: Final[int] = 20
INITIAL_SUPPLY: Final[Tuple[int, ...]] = (TILES_PER_COLOR,) * NUM_COLORS + (1,)

# Floor penalties for the 1st, 2nd, ... floor tile; later tiles use the last value
FLOOR_PENALTIES: Final[Tuple[int, ...]] = (1, 1, 2, 2, 3, 3)

# End-of-game bonuses
ROW_BONUS: Final[int] = 2
COLUMN_BONUS: Final[int] = 7
COLOR_BONUS: Final[int] = 10

# AI settings
DEFAULT_EXPLORATION_WEIGHT: Final[float] = 1.41  # UCT exploration constant
DEFAULT_TIME_LIMIT: Final[float] = 0.4  # Seconds per AI move


def wall_column(row: int, color: int) -> int:
    """Column of the wall cell reserved for `color` in `row`."""
    return (row + color) % WALL_SIZE


def wall_color(row: int, col: int) -> TileColor:
    """Color whose tile belongs at wall cell (`row`, `col`)."""
    return TileColor((col - row) % WALL_SIZE)
