"""
Game state and flow management for Amarillo.

This module defines the core game mechanics, including:
- GameState: Complete snapshot of a game in progress
- step/refill: The state transitions used by drivers and by the search
- Round resolution, scoring and game-end detection
- Game: A simple driver that alternates agents and refills between rounds

Transitions never modify their input: `step` and `refill` work on a clone
and return it, so states can be shared freely (e.g. by search tree nodes).
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple, Union
import random

from loguru import logger

from amarillo_ai.core.constants import (
    TileColor, TILE_COLORS, ALL_TILES, NUM_PLAYERS, NUM_FACTORY_DISPLAYS,
    DUMP_INDEX, FLOOR_LINE, TILES_PER_COLOR, TILES_PER_DISPLAY,
    INITIAL_SUPPLY, NUM_COLORS, COLOR_NAMES, wall_column
)
from amarillo_ai.core.board import PlayerBoard
from amarillo_ai.core.supply import CentralPool, weighted_choice
from amarillo_ai.core.actions import Action, get_valid_actions
from amarillo_ai.core.exceptions import (
    ContractViolation, IllegalActionError, TileCountError, MarkerError
)

RandomSource = Union[int, random.Random, None]


def _as_rng(seed: RandomSource) -> random.Random:
    """Turn a seed (or an existing generator) into a random.Random."""
    if isinstance(seed, random.Random):
        return seed
    return random.Random(seed)


@dataclass
class GameState:
    """
    Complete representation of an Amarillo game state.

    Contains the three player boards, the central pool, the bag and lid,
    whose turn it is and, once the game has finished, each player's share
    of the win.
    """
    boards: List[PlayerBoard] = field(
        default_factory=lambda: [PlayerBoard() for _ in range(NUM_PLAYERS)]
    )
    pool: CentralPool = field(default_factory=CentralPool)
    player_to_play: int = 0
    bag: List[int] = field(default_factory=lambda: [TILES_PER_COLOR] * NUM_COLORS)
    lid: List[int] = field(default_factory=lambda: [0] * NUM_COLORS)
    is_finished: bool = False
    player_scores: List[float] = field(default_factory=lambda: [0.0] * NUM_PLAYERS)
    moves_this_round: int = 0

    def clone(self) -> GameState:
        """
        Create an independent copy of the game state.

        Returns:
            Copy of the game state
        """
        return GameState(
            boards=[board.clone() for board in self.boards],
            pool=self.pool.clone(),
            player_to_play=self.player_to_play,
            bag=list(self.bag),
            lid=list(self.lid),
            is_finished=self.is_finished,
            player_scores=list(self.player_scores),
            moves_this_round=self.moves_this_round,
        )

    @property
    def current_board(self) -> PlayerBoard:
        return self.boards[self.player_to_play]

    def get_valid_actions(self) -> List[Action]:
        """Get all legal actions for the player to move."""
        return get_valid_actions(self)

    def has_empty_center(self) -> bool:
        return self.pool.is_empty()

    def is_first_move(self) -> bool:
        """Check if no tile has been drafted yet this round."""
        return self.moves_this_round == 0

    def marker_holder(self) -> Optional[int]:
        """Index of the player whose floor holds the marker, if any."""
        holder = None
        for player_id, board in enumerate(self.boards):
            if board.has_marker:
                holder = player_id
        return holder

    def tile_counts(self) -> List[int]:
        """
        Count every tile in the game, per tile kind.

        Returns:
            List with one total per tile kind (marker last)
        """
        counts = [0] * len(ALL_TILES)
        for color in ALL_TILES:
            counts[color] += self.pool.color_total(color)
            for board in self.boards:
                counts[color] += board.floor[color]
        for color in TILE_COLORS:
            counts[color] += self.bag[color] + self.lid[color]
            for board in self.boards:
                for row in board.rows:
                    if row.count > 0 and row.color == color:
                        counts[color] += row.count
                for wall_row_id, wall_row in enumerate(board.wall):
                    if wall_row[wall_column(wall_row_id, color)]:
                        counts[color] += 1
        return counts

    def check_counts(self) -> None:
        """
        Check that no tiles have been gained or lost.

        Raises:
            TileCountError: If any tile kind's total differs from the supply
        """
        counts = self.tile_counts()
        for color, (count, expected) in enumerate(zip(counts, INITIAL_SUPPLY)):
            if count != expected:
                raise TileCountError(
                    f"Expected {expected} {COLOR_NAMES[TileColor(color)]} tiles, "
                    f"state has {count}:\n{self}"
                )

    def __str__(self) -> str:
        result = []
        for player_id, board in enumerate(self.boards):
            marker = " (to play)" if player_id == self.player_to_play and not self.is_finished else ""
            result.append(f"Player {player_id}{marker}")
            result.append(str(board))
        result.append(f"pool {self.pool}")
        result.append(f"bag {self.bag} lid {self.lid}")
        if self.is_finished:
            result.append(f"finished, shares {self.player_scores}")
        return "\n".join(result)


def fill_factory_displays(state: GameState, rng: random.Random) -> None:
    """
    Fill the factory displays in place, four tiles each.

    Each tile is drawn with probability proportional to the remaining bag
    counts. When the bag runs out the lid is poured back into it; when both
    are empty the remaining slots stay empty.
    """
    remaining = sum(state.bag)
    for display in range(NUM_FACTORY_DISPLAYS):
        for _ in range(TILES_PER_DISPLAY):
            if remaining == 0:
                for color in TILE_COLORS:
                    state.bag[color] += state.lid[color]
                    state.lid[color] = 0
                remaining = sum(state.bag)
                if remaining == 0:
                    return
            color = weighted_choice(state.bag, rng)
            state.bag[color] -= 1
            state.pool.sources[display][color] += 1
            remaining -= 1


def refill(state: GameState, seed: RandomSource = None, check_invariants: bool = True) -> GameState:
    """
    Refill the factory displays for a new round.

    Args:
        state: State with an empty central pool (not modified)
        seed: Seed or random.Random used for the draws
        check_invariants: Whether to verify tile conservation

    Returns:
        New state with filled displays

    Raises:
        ContractViolation: If the central pool is not empty
    """
    if not state.has_empty_center():
        raise ContractViolation(f"Cannot refill a non-empty centre:\n{state}")
    new_state = state.clone()
    fill_factory_displays(new_state, _as_rng(seed))
    if check_invariants:
        new_state.check_counts()
    return new_state


def create_initial_state(seed: RandomSource = None) -> GameState:
    """
    Create the opening position of a game.

    Walls are empty, all tiles are in the bag, player 0 holds the marker
    and the displays are filled from the bag.

    Args:
        seed: Seed or random.Random used for the initial deal

    Returns:
        Initial game state
    """
    state = GameState()
    state.boards[0].floor[TileColor.FIRST_PLAYER] = 1
    fill_factory_displays(state, _as_rng(seed))
    return state


def is_game_over(state: GameState) -> bool:
    """
    Determine whether the game is finished.

    The game is over when there are no tiles left to draft and either a
    player has completed a wall row or there are no tiles left in the bag
    and lid to refill with.
    """
    if get_valid_actions(state):
        return False
    if any(board.full_rows() > 0 for board in state.boards):
        return True
    return sum(state.bag) + sum(state.lid) == 0


def _score_bonuses(state: GameState) -> None:
    """Add end-of-game bonuses and split the win among the best scores."""
    for board in state.boards:
        board.score += board.bonus_points()
    best = max(board.score for board in state.boards)
    winners = [i for i, board in enumerate(state.boards) if board.score == best]
    state.player_scores = [
        1.0 / len(winners) if i in winners else 0.0 for i in range(NUM_PLAYERS)
    ]


def _resolve_round(state: GameState) -> None:
    """Score and reset all boards at the end of a round, in place."""
    holder = state.marker_holder()
    if holder is None:
        raise MarkerError(f"No player holds the marker at the end of the round:\n{state}")
    state.player_to_play = holder
    state.moves_this_round = 0

    for player_id, board in enumerate(state.boards):
        gained = board.resolve_pattern_lines(state.lid)
        penalty = board.apply_floor_penalty(state.lid)
        logger.debug(
            f"Player {player_id}: +{gained} placement, -{penalty} floor, score {board.score}"
        )


def step(state: GameState, action: Action, check_invariants: bool = True) -> Tuple[GameState, bool]:
    """
    Apply an action, returning the resulting state.

    Does not refill the factory displays. When the action empties the
    central pool the round is resolved, game end is detected and, if the
    game is over, bonuses are scored.

    Args:
        state: Current game state (not modified)
        action: A legal action for the player to move
        check_invariants: Whether to validate the action and tile conservation

    Returns:
        Tuple of (new game state, whether the centre is now empty)

    Raises:
        IllegalActionError: If the action is not legal in `state`
        TileCountError: If tiles were gained or lost
        MarkerError: If the marker is not where the rules require
    """
    if check_invariants:
        if action not in get_valid_actions(state):
            raise IllegalActionError(f"Tried to play invalid action {action} in state:\n{state}")
        state.check_counts()

    state = state.clone()
    state.player_scores = [0.0] * NUM_PLAYERS
    player = state.player_to_play
    board = state.boards[player]
    sources = state.pool.sources
    source = sources[action.display]
    num_tiles = source[action.color]

    # Move the other tiles of a factory display to the dump
    if action.display != DUMP_INDEX:
        for color in ALL_TILES:
            if color == action.color:
                continue
            sources[DUMP_INDEX][color] += source[color]
            source[color] = 0

    if state.is_first_move():
        if not board.has_marker:
            raise MarkerError(
                f"Player {player} makes the first move without the marker:\n{state}"
            )
        board.floor[TileColor.FIRST_PLAYER] = 0
        sources[DUMP_INDEX][TileColor.FIRST_PLAYER] = 1

    # Drafting from the dump while it holds the marker takes the marker
    if source[TileColor.FIRST_PLAYER] > 0:
        board.floor[TileColor.FIRST_PLAYER] = 1
        source[TileColor.FIRST_PLAYER] = 0

    if action.destination == FLOOR_LINE:
        board.floor[action.color] += num_tiles
    else:
        row = board.rows[action.destination]
        row.count += num_tiles
        row.color = action.color
    source[action.color] = 0

    # Move overflow tiles to the floor
    if action.destination != FLOOR_LINE:
        row = board.rows[action.destination]
        capacity = action.destination + 1
        if row.count > capacity:
            board.floor[action.color] += row.count - capacity
            row.count = capacity

    # A marker left alone in the dump goes to whoever took the last tiles
    dump = sources[DUMP_INDEX]
    if dump[TileColor.FIRST_PLAYER] > 0 and state.pool.colored_tile_count() == 0:
        dump[TileColor.FIRST_PLAYER] = 0
        board.floor[TileColor.FIRST_PLAYER] = 1

    state.player_to_play = (player + 1) % NUM_PLAYERS
    state.moves_this_round += 1

    empty_center = state.has_empty_center()
    if empty_center:
        _resolve_round(state)
        state.is_finished = is_game_over(state)
        if state.is_finished:
            _score_bonuses(state)
            logger.debug(
                f"Game over: scores {[b.score for b in state.boards]}, shares {state.player_scores}"
            )

    if check_invariants:
        state.check_counts()
    return state, empty_center


class Game:
    """
    Driver for an Amarillo game.

    Owns the random generator used for refills, the current state and the
    agent callbacks for each seat, and refills the displays between rounds.
    """

    def __init__(self, seed: Optional[int] = None, check_invariants: bool = True):
        """
        Initialize a new game.

        Args:
            seed: Random seed for the deal and refills
            check_invariants: Whether transitions validate actions and tile counts
        """
        self.rng = random.Random(seed)
        self.check_invariants = check_invariants
        self.state = create_initial_state(self.rng)
        self.agent_callbacks: Dict[int, Callable[[GameState], Action]] = {}
        self.num_actions = 0
        self.num_rounds = 1

    def register_agent(self, player_id: int, agent_callback: Callable[[GameState], Action]) -> None:
        """
        Register an agent for a seat.

        Args:
            player_id: Seat index
            agent_callback: Function that selects an action given the game state
        """
        if not 0 <= player_id < NUM_PLAYERS:
            raise ValueError(f"Player id must be between 0 and {NUM_PLAYERS - 1}")
        self.agent_callbacks[player_id] = agent_callback

    def play_action(self, action: Action) -> GameState:
        """
        Apply an action and refill the displays if the round ended.

        Args:
            action: Action for the player to move

        Returns:
            New game state
        """
        if self.state.is_finished:
            raise ValueError("The game is already finished")
        self.state, round_ended = step(self.state, action, self.check_invariants)
        self.num_actions += 1
        if round_ended and not self.state.is_finished:
            self.state = refill(self.state, self.rng, self.check_invariants)
            self.num_rounds += 1
            logger.debug(f"Round {self.num_rounds} starts with player {self.state.player_to_play}")
        return self.state

    def step(self) -> GameState:
        """Let the registered agent of the player to move play one action."""
        player = self.state.player_to_play
        if player not in self.agent_callbacks:
            raise ValueError(f"No agent callback registered for player {player}")
        return self.play_action(self.agent_callbacks[player](self.state))

    def run_game(self, max_actions: Optional[int] = None) -> GameState:
        """
        Run the game until it finishes or `max_actions` actions were played.

        Returns:
            Final game state
        """
        for player_id in range(NUM_PLAYERS):
            if player_id not in self.agent_callbacks:
                raise ValueError(f"No agent callback registered for player {player_id}")
        while not self.state.is_finished:
            if max_actions is not None and self.num_actions >= max_actions:
                break
            self.step()
        return self.state

    def get_scores(self) -> List[int]:
        return [board.score for board in self.state.boards]

    def get_winners(self) -> List[int]:
        """
        Get the players sharing the best final score.

        Returns:
            Winning player ids, or an empty list if the game is not over
        """
        if not self.state.is_finished:
            return []
        return [i for i, share in enumerate(self.state.player_scores) if share > 0]


def simulate_random_game(seed: Optional[int] = None) -> Tuple[GameState, List[int]]:
    """
    Simulate a game where every player picks uniformly random actions.

    Args:
        seed: Random seed for the deal, refills and move choices

    Returns:
        Tuple of (final game state, scores)
    """
    game = Game(seed=seed)
    chooser = random.Random(seed)
    for player_id in range(NUM_PLAYERS):
        game.register_agent(player_id, lambda state: chooser.choice(get_valid_actions(state)))
    final_state = game.run_game()
    return final_state, game.get_scores()
