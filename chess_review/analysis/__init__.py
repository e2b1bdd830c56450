"""
Evaluation results and game-level aggregation.

    parser:   engine search output → MoveEval
    game:     positions of a game → GameEval
    accuracy: principal-line scores → per-side accuracy
"""

from chess_review.analysis.accuracy import (
    Accuracy,
    AccuracyAccumulator,
    calculate_accuracy,
)
from chess_review.analysis.game import GameEval, GameEvaluator, side_to_move
from chess_review.analysis.parser import (
    LineEval,
    MoveEval,
    ResponseParser,
    parse_response,
    sort_lines,
)

__all__ = [
    "Accuracy",
    "AccuracyAccumulator",
    "calculate_accuracy",
    "GameEval",
    "GameEvaluator",
    "side_to_move",
    "LineEval",
    "MoveEval",
    "ResponseParser",
    "parse_response",
    "sort_lines",
]
