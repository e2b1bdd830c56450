"""
UCI Search Output Parser

Turns the lines an engine prints during one search into a MoveEval:
the best move plus every principal variation, ranked best first.

Recognized lines:
    bestmove e2e4 ponder e7e5
    info depth 16 seldepth 22 multipv 1 score cp 31 nodes 123456 pv e2e4 e7e5 g1f3
    info depth 16 multipv 2 score mate 3 pv d1h5 g7g6 h5e5

The pv may come before or after the score fields and runs until the next
info keyword. An info line only counts when it carries both a multipv
rank and a pv.
Deeper iterations for the same rank replace shallower ones. Fields that
are present but malformed (a keyword with no value, a non-integer score)
are skipped without affecting the rest of the line.

Scores are from the side to move's perspective, as UCI reports them.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

logger = logging.getLogger(__name__)

# Field names of a UCI info line; a pv runs until the next one
INFO_KEYWORDS = frozenset([
    "depth", "seldepth", "time", "nodes", "pv", "multipv", "score", "cp", "mate",
    "lowerbound", "upperbound", "wdl", "currmove", "currmovenumber", "hashfull",
    "nps", "tbhits", "sbhits", "cpuload", "string", "refutation", "currline",
])


@dataclass(frozen=True)
class LineEval:
    """One principal variation reported by the engine."""

    moves: Tuple[str, ...]
    centipawn: Optional[int] = None
    mate_in: Optional[int] = None
    rank: int = 1  # engine multipv index
    depth: Optional[int] = None

    @property
    def is_mate(self) -> bool:
        """Check if the line carries a mate score."""
        return self.mate_in is not None

    def sort_key(self) -> Tuple[int, int]:
        """
        Ordering key, smaller sorts first.

        Groups: winning mates (shortest first), then centipawn lines
        (highest first), then losing mates (longest first). A missing
        centipawn orders as 0.
        """
        if self.mate_in is not None:
            if self.mate_in > 0:
                return (0, self.mate_in)
            return (2, self.mate_in)
        return (1, -(self.centipawn or 0))

    def to_centipawns(self, mate_score: int = 10000) -> Optional[int]:
        """
        Collapse the score into centipawns.

        A mate for the side to move becomes +mate_score, a mate against it
        (including mate 0, already mated) becomes -mate_score.

        Args:
            mate_score: Centipawn value standing in for a forced mate

        Returns:
            Centipawn score, or None if the line has no score at all
        """
        if self.mate_in is not None:
            return mate_score if self.mate_in > 0 else -mate_score
        return self.centipawn


@dataclass(frozen=True)
class MoveEval:
    """Engine result for one position."""

    best_move: str
    lines: Tuple[LineEval, ...] = ()
    ponder: Optional[str] = None

    @property
    def principal_line(self) -> Optional[LineEval]:
        """The most preferred line, if the engine reported any."""
        return self.lines[0] if self.lines else None


def sort_lines(lines: Iterable[LineEval]) -> List[LineEval]:
    """Sort lines best first. Stable, so sorting twice changes nothing."""
    return sorted(lines, key=LineEval.sort_key)


def _value_after(tokens: List[str], keyword: str) -> Optional[str]:
    try:
        index = tokens.index(keyword)
    except ValueError:
        return None
    if index + 1 >= len(tokens):
        logger.debug(f"Skipping '{keyword}': no value follows")
        return None
    return tokens[index + 1]


def _int_after(tokens: List[str], keyword: str) -> Optional[int]:
    value = _value_after(tokens, keyword)
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        logger.debug(f"Skipping '{keyword}': not an integer: {value!r}")
        return None


class ResponseParser:
    """
    Accumulates search output lines into a MoveEval.

    Feed lines with consume() in arrival order, then call result().
    A parser holds state for one search only.
    """

    def __init__(self):
        self._best_move = ""
        self._ponder: Optional[str] = None
        self._lines: Dict[int, LineEval] = {}

    def consume(self, line: str) -> None:
        """Parse a single engine output line."""
        tokens = line.split()
        if not tokens:
            return

        if tokens[0] == "bestmove":
            self._parse_bestmove(tokens)
        elif tokens[0] == "info":
            self._parse_info(tokens)

    def _parse_bestmove(self, tokens: List[str]) -> None:
        best_move = _value_after(tokens, "bestmove")
        if best_move:
            self._best_move = best_move
        self._ponder = _value_after(tokens, "ponder")

    def _parse_info(self, tokens: List[str]) -> None:
        if "pv" not in tokens:
            return

        pv_start = tokens.index("pv") + 1
        pv_end = pv_start
        while pv_end < len(tokens) and tokens[pv_end] not in INFO_KEYWORDS:
            pv_end += 1

        moves = tuple(tokens[pv_start:pv_end])
        # Everything but the moves, so a move can never be read as a keyword
        fields = tokens[:pv_start] + tokens[pv_end:]
        rank = _int_after(fields, "multipv")
        if not moves or rank is None:
            return

        self._lines[rank] = LineEval(
            moves=moves,
            centipawn=_int_after(fields, "cp"),
            mate_in=_int_after(fields, "mate"),
            rank=rank,
            depth=_int_after(fields, "depth"),
        )

    def result(self) -> MoveEval:
        """Build the MoveEval from everything consumed so far."""
        return MoveEval(
            best_move=self._best_move,
            lines=tuple(sort_lines(self._lines.values())),
            ponder=self._ponder,
        )


def parse_response(lines: Iterable[str]) -> MoveEval:
    """
    Parse the full output of one search.

    Args:
        lines: Engine output lines in arrival order

    Returns:
        MoveEval with lines sorted best first
    """
    parser = ResponseParser()
    for line in lines:
        parser.consume(line)
    return parser.result()
