"""
Per-side accuracy from principal-line scores.

For every evaluated position the best line's score (side to move's
perspective) is added to the mover's ceiling and to the opponent's total:

    accuracy(side) = 100 * total(side) / ceiling(side)

A side's accuracy is None when it cannot be computed, never NaN or inf.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional

import chess

logger = logging.getLogger(__name__)


def calculate_accuracy(total: float, ceiling: float) -> Optional[float]:
    """
    Accuracy percentage for one side.

    Args:
        total: Accumulated score credited to the side
        ceiling: Accumulated best-available score of the side's own moves

    Returns:
        100 * total / ceiling, or None if ceiling is zero
    """
    if ceiling == 0:
        return None
    return 100.0 * total / ceiling


@dataclass(frozen=True)
class Accuracy:
    """Accuracy per side; None means undefined."""

    white: Optional[float] = None
    black: Optional[float] = None

    def for_color(self, color: chess.Color) -> Optional[float]:
        return self.white if color == chess.WHITE else self.black


class AccuracyAccumulator:
    """Running per-side totals for one game."""

    def __init__(self):
        self.totals: Dict[chess.Color, int] = {chess.WHITE: 0, chess.BLACK: 0}
        self.ceilings: Dict[chess.Color, int] = {chess.WHITE: 0, chess.BLACK: 0}
        self.samples: Dict[chess.Color, int] = {chess.WHITE: 0, chess.BLACK: 0}

    def add(self, mover: chess.Color, score: int) -> None:
        """
        Record the best-line score of a position.

        Args:
            mover: Side to move in the evaluated position
            score: Principal line score from the mover's perspective
        """
        opponent = not mover
        self.ceilings[mover] += score
        self.totals[opponent] += score
        self.samples[mover] += 1
        self.samples[opponent] += 1

    def accuracy_for(self, color: chess.Color) -> Optional[float]:
        """
        Accuracy of one side.

        None when the side has no recorded positions. When both total and
        ceiling stayed at zero the side gave nothing away, which counts as
        100 rather than an undefined 0/0.
        """
        if self.samples[color] == 0:
            return None

        total = self.totals[color]
        ceiling = self.ceilings[color]
        if total == 0 and ceiling == 0:
            return 100.0

        accuracy = calculate_accuracy(total, ceiling)
        if accuracy is None:
            logger.debug(
                f"Accuracy undefined for {chess.COLOR_NAMES[color]}: "
                f"total={total}, ceiling=0"
            )
        return accuracy

    def result(self) -> Accuracy:
        return Accuracy(
            white=self.accuracy_for(chess.WHITE),
            black=self.accuracy_for(chess.BLACK),
        )
