"""
cli.py - Command-line interface for gridmatch

This module lets a person play a match against the reference AI in a
terminal, list the configured rounds and time the core operations.
"""

import argparse
import sys
from dataclasses import replace
from typing import List, Optional

import numpy as np

from gridmatch.ai.random_agent import RandomAIFactory
from gridmatch.debug import debug, DebugLevel
from gridmatch.game.board import Board
from gridmatch.game.match import Match
from gridmatch.game.players import Player, create_human_player
from gridmatch.game.rounds import load_rounds
from gridmatch.utils import PlayerType, RoundsExhaustedError

QUIT = -1


class SimpleCLI:
    """Terminal front end driving the human side of a Match."""

    def __init__(self, argv: Optional[List[str]] = None):
        self.argv = argv
        self.args = None
        self.match: Optional[Match] = None

    def build_parser(self) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(description='gridmatch command line')
        parser.add_argument('--debug', action='store_true', help='Enable debug logging')
        parser.add_argument('--debug-level', default='warning',
                            choices=[level.name.lower() for level in DebugLevel],
                            help='Logging level when --debug is not given')
        parser.add_argument('--log-file', default=None, help='Also write logs to this file')

        subparsers = parser.add_subparsers(dest='command', help='Command to run')

        play_parser = subparsers.add_parser('play', help='Play a match interactively')
        play_parser.add_argument('--rounds', default=None, help='JSON file with round levels')
        play_parser.add_argument('--seed', type=int, default=None, help='Random seed')
        play_parser.add_argument('--name', default='You', help='Your player name')

        rounds_parser = subparsers.add_parser('rounds', help='List the configured rounds')
        rounds_parser.add_argument('--rounds', default=None, help='JSON file with round levels')

        benchmark_parser = subparsers.add_parser('benchmark', help='Benchmark performance')
        benchmark_parser.add_argument('--iterations', type=int, default=200,
                                      help='Number of iterations for benchmarking')
        benchmark_parser.add_argument('--seed', type=int, default=None, help='Random seed')

        return parser

    def parse_args(self) -> argparse.Namespace:
        """Parse command-line arguments and apply the logging options."""
        self.args = self.build_parser().parse_args(self.argv)

        if self.args.debug:
            debug.configure(level=DebugLevel.DEBUG)
        else:
            debug.set_from_string(self.args.debug_level)
        if self.args.log_file:
            debug.configure(log_file=self.args.log_file)

        return self.args

    def run(self) -> int:
        """Run the selected command and return the exit status."""
        if not self.args:
            self.parse_args()

        if self.args.command == 'play':
            return self.play_match()
        elif self.args.command == 'rounds':
            return self.list_rounds()
        elif self.args.command == 'benchmark':
            return self.benchmark()

        print("Please specify a command. Use --help for options.")
        return 1

    # Notification sinks
    @staticmethod
    def show_speech(player: Player, message: str) -> None:
        print(f"{player.name}: \"{message}\"")

    @staticmethod
    def show_message(message: str) -> None:
        print(f"** {message}")

    def play_match(self) -> int:
        """Play every configured round against the reference AI."""
        rounds = load_rounds(self.args.rounds)
        rng = np.random.default_rng(self.args.seed)
        human = create_human_player(self.args.name)
        self.match = Match(human, rounds=rounds, ai_factory=RandomAIFactory(rng), rng=rng,
                           on_speak=self.show_speech, on_message=self.show_message)

        print("Enter a column number to drop a coin, 'q' to quit.")
        self.match.prepare_next_round()
        self.match.start_round()

        while True:
            print(self.match.board.render())

            if self.match.round_over:
                if self.match.finished:
                    break
                input("Press Enter for the next round...")
                try:
                    self.match.prepare_next_round()
                except RoundsExhaustedError as e:
                    print(e)
                    break
                self.match.start_round()
                continue

            move = self.get_human_move(self.match.board)
            if move is None:
                continue
            if move == QUIT:
                print("Quitting match.")
                return 0
            human.submit_column(move)

        print("Match over!")
        return 0

    def get_human_move(self, board: Board) -> Optional[int]:
        """
        Read one column choice from the keyboard.

        Returns:
            Column index, QUIT, or None if the input was not understood
        """
        user_input = input(f"Your move (0-{board.columns - 1}, q): ").strip().lower()
        if user_input == 'q':
            return QUIT
        try:
            move = int(user_input)
        except ValueError:
            print("Invalid input. Please enter a column number or 'q'.")
            return None

        if not 0 <= move < board.columns:
            print(f"Column must be between 0 and {board.columns - 1}.")
            return None
        # Full columns are still submitted; the match rejects and asks again
        return move

    def list_rounds(self) -> int:
        for round_ in load_rounds(self.args.rounds):
            print(f"Round {round_.index + 1}: {round_.ai_name:<10} "
                  f"{round_.rows}x{round_.columns}, connect {round_.min_win_length}")
        return 0

    def benchmark(self) -> int:
        """Time board construction, random games and pattern search."""
        iterations = max(1, self.args.iterations)
        rng = np.random.default_rng(self.args.seed)

        debug.start_timer("board_init")
        for _ in range(iterations):
            Board()
        board_init_time = debug.end_timer("board_init")
        print(f"Board construction: {board_init_time / iterations * 1000:.4f} ms per board")

        debug.start_timer("random_games")
        total_moves = 0
        bench_round = replace(load_rounds()[1], index=0)
        for _ in range(iterations):
            human = create_human_player("Bench")
            match = Match(human, rounds=[bench_round], rng=rng)
            match.prepare_next_round()
            match.start_round()
            while not match.round_over:
                human.submit_column(int(rng.choice(match.board.available_columns())))
            total_moves += match.turn
        games_time = debug.end_timer("random_games")
        print(f"Played {iterations} games, {total_moves} turns: "
              f"{games_time / iterations * 1000:.4f} ms per game")

        board = Board()
        player = create_human_player("Bench")
        for column in rng.integers(0, board.columns, size=20):
            board.place_coin(int(column), player)
        search = PlayerType.HUMAN.marker * 2
        debug.start_timer("find_pattern")
        for _ in range(iterations):
            for line in board.lines:
                line.invalidate()
            board.find_pattern(search)
        search_time = debug.end_timer("find_pattern")
        print(f"Pattern search: {search_time / iterations * 1000:.4f} ms per search")
        return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI."""
    cli = SimpleCLI(argv)
    return cli.run()


if __name__ == "__main__":
    sys.exit(main())
