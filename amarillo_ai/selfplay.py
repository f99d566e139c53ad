#!/usr/bin/env python
"""
Self-play script for Amarillo AI.

Plays complete games between three MCTS agents and reports the results.

Example usage:
    # Ten games with the heuristic value function
    amarillo-selfplay --games 10 --time-limit 0.2

    # One game with a trained value network
    amarillo-selfplay --value network --model models/value.pt
"""
import argparse
import sys
import time
from typing import Any, Dict, List

from loguru import logger
from rich.console import Console
from rich.table import Table
from tqdm import tqdm

from amarillo_ai.core.constants import NUM_PLAYERS
from amarillo_ai.core.game import Game
from amarillo_ai.mcts.agent import MCTSAgent
from amarillo_ai.mcts.config import MCTSConfig
from amarillo_ai.utils.logging import setup_logging
from amarillo_ai.value.base import HeuristicValueFunction, ValueFunction
from amarillo_ai.value.network import NetworkValueFunction, set_seed


def parse_args(argv=None):
    """Parse command-line arguments for self-play."""
    parser = argparse.ArgumentParser(description="Play Amarillo games between MCTS agents")

    parser.add_argument("--games", type=int, default=1,
                        help="Number of games to play")
    parser.add_argument("--time-limit", type=float, default=0.4,
                        help="Search time per move in seconds")
    parser.add_argument("--iterations", type=int, default=None,
                        help="Optional cap on search cycles per move")
    parser.add_argument("--seed", type=int, default=None,
                        help="Random seed (game n uses seed + n)")

    parser.add_argument("--value", type=str, default="heuristic",
                        choices=["heuristic", "network"],
                        help="Value function guiding the search")
    parser.add_argument("--model", type=str, default=None,
                        help="Value network checkpoint (with --value network)")

    parser.add_argument("--log-level", type=str, default="WARNING",
                        help="Minimum log level")
    parser.add_argument("--log-file", type=str, default=None,
                        help="Optional log file")

    args = parser.parse_args(argv)
    if args.games <= 0:
        parser.error("--games must be positive")
    if args.model is not None and args.value != "network":
        parser.error("--model requires --value network")
    return args


def create_value_function(args) -> ValueFunction:
    """Build the value function selected on the command line."""
    if args.value == "network":
        if args.model is None:
            logger.warning("No --model given, using an untrained value network")
            return NetworkValueFunction()
        return NetworkValueFunction.from_checkpoint(args.model)
    return HeuristicValueFunction()


def create_agents(args, value_function: ValueFunction) -> List[MCTSAgent]:
    """One MCTS agent per seat; with --seed each seat gets its own seed."""
    agents = []
    for player_id in range(NUM_PLAYERS):
        seed = None if args.seed is None else args.seed * NUM_PLAYERS + player_id
        config = MCTSConfig(time_limit=args.time_limit, iterations=args.iterations, seed=seed)
        agents.append(MCTSAgent(value_function, config, name=f"MCTS {player_id}"))
    return agents


def play_one_game(seed, agents: List[MCTSAgent]) -> Dict[str, Any]:
    """
    Play a single game between the given agents.

    Returns:
        Dictionary with the final scores, winners and game length
    """
    game = Game(seed=seed)
    for player_id, agent in enumerate(agents):
        game.register_agent(player_id, agent.get_action_callback())

    start_time = time.time()
    game.run_game()
    return {
        "scores": game.get_scores(),
        "winners": game.get_winners(),
        "actions": game.num_actions,
        "rounds": game.num_rounds,
        "duration": time.time() - start_time,
    }


def print_results(results: List[Dict[str, Any]]) -> None:
    """Print a table with one row per game and the win totals."""
    table = Table(title="Self-play results")
    table.add_column("Game", justify="right")
    for player_id in range(NUM_PLAYERS):
        table.add_column(f"P{player_id}", justify="right")
    table.add_column("Winner(s)")
    table.add_column("Rounds", justify="right")
    table.add_column("Time (s)", justify="right")

    wins = [0.0] * NUM_PLAYERS
    for index, result in enumerate(results):
        for winner in result["winners"]:
            wins[winner] += 1.0 / len(result["winners"])
        table.add_row(
            str(index + 1),
            *(str(score) for score in result["scores"]),
            ", ".join(str(w) for w in result["winners"]),
            str(result["rounds"]),
            f"{result['duration']:.1f}",
        )
    table.add_section()
    table.add_row("Wins", *(f"{w:g}" for w in wins), "", "", "")

    Console().print(table)


def main(argv=None) -> int:
    """Main function."""
    args = parse_args(argv)
    setup_logging(level=args.log_level, log_file=args.log_file)

    if args.seed is not None:
        set_seed(args.seed)

    agents = create_agents(args, create_value_function(args))

    results = []
    try:
        for game_index in tqdm(range(args.games), desc="Self-play"):
            seed = None if args.seed is None else args.seed + game_index
            result = play_one_game(seed, agents)
            logger.info(f"Game {game_index + 1}: scores {result['scores']}, winners {result['winners']}")
            results.append(result)
    except KeyboardInterrupt:
        logger.warning("Interrupted by user")

    if results:
        print_results(results)
    return 0


if __name__ == "__main__":
    sys.exit(main())
