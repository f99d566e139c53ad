"""
Actions for the Amarillo game.

A turn consists of a single drafting action: take every tile of one color
from one source (a factory display or the dump) and place them on one
pattern line or directly on the floor line.

This module defines the Action type and the legal-move enumeration.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, List

from amarillo_ai.core.constants import (
    TileColor, TILE_COLORS, NUM_SOURCES, NUM_PATTERN_LINES, FLOOR_LINE,
    DUMP_INDEX, COLOR_NAMES
)


@dataclass(frozen=True)
class Action:
    """
    Drafting action.

    Attributes:
        display: Source index, 0-6 for factory displays and 7 for the dump
        color: Color of the tiles taken
        destination: Pattern line index (0-4) or FLOOR_LINE
    """
    display: int
    color: int
    destination: int

    @property
    def from_dump(self) -> bool:
        return self.display == DUMP_INDEX

    @property
    def to_floor(self) -> bool:
        return self.destination == FLOOR_LINE

    def to_dict(self) -> Dict[str, int]:
        return {
            "display": self.display,
            "color": self.color,
            "destination": self.destination,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, int]) -> Action:
        return cls(
            display=int(data["display"]),
            color=int(data["color"]),
            destination=int(data["destination"]),
        )

    def __str__(self) -> str:
        source = "dump" if self.from_dump else f"display {self.display}"
        target = "floor" if self.to_floor else f"row {self.destination}"
        return f"Move {COLOR_NAMES[TileColor(self.color)]} tiles from {source} to {target}."


def get_valid_actions(state) -> List[Action]:
    """
    Get all legal actions for the player to move.

    Actions are ordered by source, then color, then destination. The list
    is empty exactly when no source holds a colored tile. The marker is
    never drafted on its own.

    Args:
        state: Current game state (not modified)

    Returns:
        List of legal actions
    """
    board = state.boards[state.player_to_play]

    # destinations[color] lists the allowed destinations for that color
    destinations: List[List[int]] = [[] for _ in TILE_COLORS]
    for row_id in range(NUM_PATTERN_LINES):
        for color in board.allowed_colors(row_id):
            destinations[color].append(row_id)
    for color in TILE_COLORS:
        destinations[color].append(FLOOR_LINE)

    valid_actions = []
    for display in range(NUM_SOURCES):
        source = state.pool.sources[display]
        for color, allowed in enumerate(destinations):
            if source[color] == 0:
                continue
            for destination in allowed:
                valid_actions.append(Action(display, color, destination))
    return valid_actions


def is_valid_action(state, action: Action) -> bool:
    """
    Check if an action is legal in the given state.

    Args:
        state: Current game state
        action: Action to check

    Returns:
        True if the action is legal, False otherwise
    """
    return action in get_valid_actions(state)
