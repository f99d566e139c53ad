"""
Player board representation for the Amarillo game.

This module defines the PlayerBoard class which tracks a player's wall,
pattern lines, floor line and score, together with the scoring rules that
only depend on a single board (tile placement, floor penalties and
end-of-game bonuses).
"""
from dataclasses import dataclass, field
from typing import List, Set

from amarillo_ai.core.constants import (
    TileColor, TILE_COLORS, NUM_TILE_KINDS, WALL_SIZE, NUM_PATTERN_LINES,
    FLOOR_PENALTIES, ROW_BONUS, COLUMN_BONUS, COLOR_BONUS, COLOR_NAMES,
    wall_column
)


@dataclass
class PatternLine:
    """
    A staging line for tiles of a single color.

    The line at position `p` holds up to `p + 1` tiles. `color` is only
    meaningful while `count > 0`.
    """
    color: int = 0
    count: int = 0

    def is_empty(self) -> bool:
        return self.count == 0

    def clear(self) -> None:
        self.color = 0
        self.count = 0


def score_tile_placement(wall: List[List[bool]], row: int, col: int) -> int:
    """
    Score a tile just placed on the wall at (`row`, `col`).

    Contiguous filled cells are counted in each direction from the placed
    tile. With `h` the length of the horizontal run and `v` the length of
    the vertical run (both including the tile), a lone run scores the
    other run's length; otherwise both runs score.

    Args:
        wall: Wall grid, with the new tile already set
        row: Row of the placed tile
        col: Column of the placed tile

    Returns:
        Points scored by the placement
    """
    left = 0
    while col - left > 0 and wall[row][col - left - 1]:
        left += 1
    right = 0
    while col + right < WALL_SIZE - 1 and wall[row][col + right + 1]:
        right += 1
    up = 0
    while row - up > 0 and wall[row - up - 1][col]:
        up += 1
    down = 0
    while row + down < WALL_SIZE - 1 and wall[row + down + 1][col]:
        down += 1

    horizontal = left + right + 1
    vertical = up + down + 1
    if min(horizontal, vertical) == 1:
        return max(horizontal, vertical)
    return horizontal + vertical


def floor_penalty(floor: List[int]) -> int:
    """
    Total penalty for the tiles on a floor line.

    Tiles are counted in color order (the marker included). The n-th tile
    costs FLOOR_PENALTIES[n], and every tile past the end of that schedule
    costs its last value.
    """
    num_tiles = sum(floor)
    penalty = 0
    for i in range(num_tiles):
        penalty += FLOOR_PENALTIES[min(i, len(FLOOR_PENALTIES) - 1)]
    return penalty


@dataclass
class PlayerBoard:
    """
    Represents one player's board.

    Tracks the wall (5x5 placed tiles), the five pattern lines, the floor
    line (one count per tile kind, marker included) and the score.
    """
    wall: List[List[bool]] = field(
        default_factory=lambda: [[False] * WALL_SIZE for _ in range(WALL_SIZE)]
    )
    rows: List[PatternLine] = field(
        default_factory=lambda: [PatternLine() for _ in range(NUM_PATTERN_LINES)]
    )
    floor: List[int] = field(default_factory=lambda: [0] * NUM_TILE_KINDS)
    score: int = 0

    def clone(self) -> 'PlayerBoard':
        """
        Create an independent copy of the board.

        Returns:
            Copy of the board
        """
        return PlayerBoard(
            wall=[list(wall_row) for wall_row in self.wall],
            rows=[PatternLine(row.color, row.count) for row in self.rows],
            floor=list(self.floor),
            score=self.score,
        )

    @property
    def has_marker(self) -> bool:
        """Whether the first-player marker sits on this floor line."""
        return self.floor[TileColor.FIRST_PLAYER] > 0

    def is_color_on_wall(self, row: int, color: int) -> bool:
        """Check if `color` has already been placed in wall row `row`."""
        return self.wall[row][wall_column(row, color)]

    def allowed_colors(self, row_id: int) -> Set[int]:
        """
        Get the colors that pattern line `row_id` may receive.

        A line holding tiles accepts more of the same color while it has
        space. An empty line accepts any color not yet on its wall row.

        Args:
            row_id: Index of the pattern line

        Returns:
            Set of allowed colors
        """
        row = self.rows[row_id]
        if row.count > 0:
            if row.count < row_id + 1:
                return {row.color}
            return set()
        return {
            int(color) for color in TILE_COLORS
            if not self.is_color_on_wall(row_id, color)
        }

    def wall_tile_count(self) -> int:
        return sum(sum(1 for cell in wall_row if cell) for wall_row in self.wall)

    def full_rows(self) -> int:
        """Number of completely filled wall rows."""
        return sum(1 for wall_row in self.wall if all(wall_row))

    def full_columns(self) -> int:
        """Number of completely filled wall columns."""
        return sum(
            1 for col in range(WALL_SIZE)
            if all(self.wall[row][col] for row in range(WALL_SIZE))
        )

    def full_colors(self) -> int:
        """Number of colors placed in every wall row."""
        return sum(
            1 for color in TILE_COLORS
            if all(self.is_color_on_wall(row, color) for row in range(WALL_SIZE))
        )

    def bonus_points(self) -> int:
        """End-of-game bonus for rows, columns and complete colors."""
        return (
            ROW_BONUS * self.full_rows()
            + COLUMN_BONUS * self.full_columns()
            + COLOR_BONUS * self.full_colors()
        )

    def resolve_pattern_lines(self, lid: List[int]) -> int:
        """
        Move every full pattern line onto the wall.

        One tile of each full line is placed on the wall and scored, the
        rest go to the lid.

        Args:
            lid: Lid counts, updated in place

        Returns:
            Points gained
        """
        gained = 0
        for row_id, row in enumerate(self.rows):
            if row.count < row_id + 1:
                continue
            col = wall_column(row_id, row.color)
            lid[row.color] += row.count - 1
            self.wall[row_id][col] = True
            row.clear()
            gained += score_tile_placement(self.wall, row_id, col)
        self.score += gained
        return gained

    def apply_floor_penalty(self, lid: List[int]) -> int:
        """
        Subtract the floor penalty and empty the floor line.

        The score never drops below zero. Colored floor tiles go to the lid;
        the marker stays on the floor.

        Args:
            lid: Lid counts, updated in place

        Returns:
            The penalty before clamping
        """
        penalty = floor_penalty(self.floor)
        self.score = max(self.score - penalty, 0)
        for color in TILE_COLORS:
            lid[color] += self.floor[color]
            self.floor[color] = 0
        return penalty

    def __str__(self) -> str:
        lines = []
        for row_id, row in enumerate(self.rows):
            staged = COLOR_NAMES[TileColor(row.color)] * row.count if row.count else ""
            staged = staged.rjust(NUM_PATTERN_LINES, ".")
            wall_str = "".join(
                COLOR_NAMES[TileColor((col - row_id) % WALL_SIZE)] if cell else "."
                for col, cell in enumerate(self.wall[row_id])
            )
            lines.append(f"{staged} {wall_str}")
        floor_str = "".join(
            COLOR_NAMES[TileColor(color)] * count for color, count in enumerate(self.floor)
        )
        lines.append(f"floor {floor_str or '-'}")
        lines.append(f"score {self.score}")
        return "\n".join(lines)
