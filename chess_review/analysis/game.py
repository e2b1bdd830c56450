"""
Whole-game evaluation.

Runs one engine search per position, in game order, and derives
per-side accuracy from the principal-line scores.
"""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterator, List, Optional, Sequence, Tuple

import chess
from tqdm import tqdm

from chess_review.analysis.accuracy import Accuracy, AccuracyAccumulator
from chess_review.analysis.parser import MoveEval
from chess_review.engine.errors import EngineError, GameEvaluationError

if TYPE_CHECKING:
    from chess_review.engine.session import EngineSession

logger = logging.getLogger(__name__)

# Score used when the engine reports no evaluation for a position
NO_SCORE_FALLBACK = 0


def side_to_move(fen: str) -> chess.Color:
    """
    Read the side to move from the second FEN field.

    Raises:
        ValueError: If the field is missing or not 'w'/'b'
    """
    fields = fen.split()
    if len(fields) < 2 or fields[1] not in ("w", "b"):
        raise ValueError(f"Cannot read side to move from FEN: {fen!r}")
    return chess.WHITE if fields[1] == "w" else chess.BLACK


@dataclass(frozen=True)
class GameEval:
    """Evaluations of every position of a game plus per-side accuracy."""

    moves: Tuple[MoveEval, ...]
    accuracy: Accuracy


class GameEvaluator:
    """Evaluate games position by position on one engine session."""

    def __init__(
        self,
        session: "EngineSession",
        mate_score: Optional[int] = None,
        show_progress: Optional[bool] = None,
    ):
        """
        Args:
            session: Initialized engine session
            mate_score: Centipawn value of a forced mate (default: session config)
            show_progress: Show a tqdm progress bar (default: session config)
        """
        self.session = session
        self.mate_score = session.config.mate_score if mate_score is None else mate_score
        self.show_progress = (
            session.config.show_progress if show_progress is None else show_progress
        )

    def principal_score(self, move_eval: MoveEval) -> int:
        """
        Score of the best line, from the side to move's perspective.

        Positions where the engine gave no score count as NO_SCORE_FALLBACK.
        """
        line = move_eval.principal_line
        score = line.to_centipawns(self.mate_score) if line is not None else None
        if score is None:
            logger.debug(f"No score for best move {move_eval.best_move!r}, using fallback")
            return NO_SCORE_FALLBACK
        return score

    def iter_game(
        self,
        positions: Sequence[str],
        depth: Optional[int] = None,
        accumulator: Optional[AccuracyAccumulator] = None,
    ) -> Iterator[MoveEval]:
        """
        Evaluate positions one at a time, yielding each result as it is ready.

        Args:
            positions: FEN of every position, in game order
            depth: Search depth (default: session config)
            accumulator: Receives each position's principal score

        Yields:
            MoveEval per position, in order

        Raises:
            ValueError: If a FEN has no readable side to move
            InvalidState: If the session is not ready
            GameEvaluationError: If a position fails; carries earlier results
        """
        positions = list(positions)
        movers = [side_to_move(fen) for fen in positions]

        self.session.new_game()

        completed: List[MoveEval] = []
        for ply, (fen, mover) in enumerate(
            tqdm(
                list(zip(positions, movers)),
                desc="Evaluating game",
                disable=not self.show_progress,
                leave=False,
            )
        ):
            logger.debug(f"Evaluating ply {ply}: {fen}")
            try:
                move_eval = self.session.evaluate_position(fen, depth)
            except EngineError as e:
                logger.error(f"Evaluation failed at ply {ply}: {e}")
                raise GameEvaluationError(ply, tuple(completed), e) from e

            if accumulator is not None:
                accumulator.add(mover, self.principal_score(move_eval))

            completed.append(move_eval)
            yield move_eval

    def evaluate_game(self, positions: Sequence[str], depth: Optional[int] = None) -> GameEval:
        """
        Evaluate every position of a game.

        Args:
            positions: FEN of every position, in game order
            depth: Search depth (default: session config)

        Returns:
            GameEval with one MoveEval per position and per-side accuracy
        """
        accumulator = AccuracyAccumulator()
        moves = tuple(self.iter_game(positions, depth, accumulator))
        accuracy = accumulator.result()

        logger.info(
            f"Game evaluated: {len(moves)} positions, "
            f"accuracy white={_format_accuracy(accuracy.white)}, "
            f"black={_format_accuracy(accuracy.black)}"
        )
        return GameEval(moves=moves, accuracy=accuracy)


def _format_accuracy(value: Optional[float]) -> str:
    return "n/a" if value is None else f"{value:.1f}%"
