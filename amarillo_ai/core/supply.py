"""
Shared tile supply for the Amarillo game.

This module defines the CentralPool (the seven factory displays and the
dump that tiles are drafted from) and the weighted draw used to refill the
displays from the bag.
"""
import random
from dataclasses import dataclass, field
from typing import List, Sequence

from amarillo_ai.core.constants import (
    TileColor, TILE_COLORS, NUM_SOURCES, NUM_TILE_KINDS, DUMP_INDEX, COLOR_NAMES
)


def weighted_choice(weights: Sequence[int], rng: random.Random) -> int:
    """
    Choose an index with probability proportional to its weight.

    Args:
        weights: Non-negative integer weights, at least one positive
        rng: Random number generator

    Returns:
        The chosen index
    """
    total = sum(weights)
    if total <= 0:
        raise ValueError("Cannot draw from empty weights")
    p = rng.random()
    running = 0
    for i, weight in enumerate(weights):
        running += weight
        if running / total > p:
            return i
    return len(weights) - 1


@dataclass
class CentralPool:
    """
    The eight tile sources shared by all players.

    Sources 0-6 are factory displays and source 7 is the dump. Each source
    holds one count per tile kind; the marker slot is only used by the dump.
    """
    sources: List[List[int]] = field(
        default_factory=lambda: [[0] * NUM_TILE_KINDS for _ in range(NUM_SOURCES)]
    )

    def clone(self) -> 'CentralPool':
        return CentralPool(sources=[list(source) for source in self.sources])

    @property
    def dump(self) -> List[int]:
        return self.sources[DUMP_INDEX]

    def is_empty(self) -> bool:
        """Check if no source holds any tile (marker included)."""
        return all(count == 0 for source in self.sources for count in source)

    def color_total(self, color: int) -> int:
        return sum(source[color] for source in self.sources)

    def colored_tile_count(self) -> int:
        """Number of draftable tiles left (the marker excluded)."""
        return sum(self.color_total(color) for color in TILE_COLORS)

    def __str__(self) -> str:
        parts = []
        for index, source in enumerate(self.sources):
            tiles = "".join(
                COLOR_NAMES[TileColor(color)] * count for color, count in enumerate(source)
            )
            parts.append(f"{index}:{tiles or '-'}")
        return " ".join(parts)
