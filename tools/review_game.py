#!/usr/bin/env python3
"""
CLI tool for reviewing a chess game with a UCI engine.

Usage:
    python tools/review_game.py game.pgn

    python tools/review_game.py game.pgn \\
        --engine /usr/local/bin/stockfish \\
        --depth 18 \\
        --multipv 3 \\
        --lines --progress \\
        --log-file review.log --verbose
"""

import argparse
import sys
from pathlib import Path
from typing import Optional

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from chess_review.analysis.game import GameEval, GameEvaluator
from chess_review.analysis.parser import LineEval
from chess_review.config import EngineConfig
from chess_review.data.pgn_loader import GameRecord, load_game_file
from chess_review.engine.errors import GameEvaluationError
from chess_review.engine.session import EngineSession
from chess_review.utils.log import setup_file_logger, setup_logging


def format_score(line: Optional[LineEval]) -> str:
    """Render a line's score the way engines print it."""
    if line is None:
        return "-"
    if line.mate_in is not None:
        return f"#{line.mate_in}"
    if line.centipawn is not None:
        return f"{line.centipawn / 100:+.2f}"
    return "-"


def format_accuracy(value: Optional[float]) -> str:
    return "n/a" if value is None else f"{value:.1f} %"


def format_line(index: int, line: LineEval) -> str:
    """One row of the --lines listing: rank, score, depth and the first moves."""
    depth = "-" if line.depth is None else line.depth
    return f"         {index}. {format_score(line):>7}  d{depth:<3} {' '.join(line.moves[:8])}"


def print_report(record: GameRecord, game_eval: GameEval, show_lines: bool = False):
    """Print headers, one row per ply and the accuracies."""
    if record.has_players:
        print(f"{record.white} vs {record.black}")
    print(f"Site : {record.site}   Date : {record.date}   Result : {record.termination}")
    print()

    for ply, (san, move_eval) in enumerate(zip(record.moves, game_eval.moves)):
        move_number = ply // 2 + 1
        prefix = f"{move_number}." if ply % 2 == 0 else f"{move_number}..."
        print(
            f"{prefix:<6} {san:<8} best {move_eval.best_move:<6} "
            f"{format_score(move_eval.principal_line)}"
        )

        if show_lines:
            for index, line in enumerate(move_eval.lines, 1):
                print(format_line(index, line))

    print()
    print(f"Accuracy  white: {format_accuracy(game_eval.accuracy.white)}"
          f"   black: {format_accuracy(game_eval.accuracy.black)}")


def review_game(args):
    """Evaluate the game in args.pgn and print the report."""
    pgn_path = Path(args.pgn)
    if not pgn_path.exists():
        print(f"Error: PGN file not found: {pgn_path}")
        sys.exit(1)

    record = load_game_file(pgn_path)

    config = EngineConfig(
        engine_path=args.engine,
        depth=args.depth,
        multipv=args.multipv,
        threads=args.threads,
        request_timeout=args.timeout,
        show_progress=args.progress,
    )

    with EngineSession.create(config) as session:
        evaluator = GameEvaluator(session)
        try:
            game_eval = evaluator.evaluate_game(record.fens)
        except GameEvaluationError as e:
            print(f"Error: {e}")
            print(f"{len(e.partial)} position(s) were evaluated before the failure")
            sys.exit(1)

    print_report(record, game_eval, show_lines=args.lines)


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Review a chess game with a UCI engine",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    parser.add_argument(
        "pgn",
        help="PGN file holding the game to review",
    )
    parser.add_argument(
        "--engine",
        type=str,
        default=None,
        help="Path to UCI engine binary (default: auto-detect Stockfish)",
    )
    parser.add_argument(
        "--depth",
        type=int,
        default=16,
        help="Search depth per position",
    )
    parser.add_argument(
        "--multipv",
        type=int,
        default=3,
        help="Number of lines per position",
    )
    parser.add_argument(
        "--threads",
        type=int,
        default=1,
        help="Engine search threads",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=120.0,
        help="Seconds allowed per position",
    )
    parser.add_argument(
        "--lines",
        action="store_true",
        help="Print every principal variation, not only the best score",
    )
    parser.add_argument(
        "--progress",
        action="store_true",
        help="Show a progress bar",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--log-file",
        type=str,
        default=None,
        help="Also write the package log, engine traffic included, to this file",
    )

    args = parser.parse_args()

    setup_logging(verbose=args.verbose)
    if args.log_file:
        setup_file_logger(Path(args.log_file), debug=args.verbose)

    try:
        review_game(args)
    except KeyboardInterrupt:
        print("\n\nInterrupted by user")
        sys.exit(1)
    except Exception as e:
        print(f"\n\nError: {e}")
        if args.verbose:
            import traceback

            traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
