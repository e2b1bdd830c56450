"""
PGN loading for game reviews.

Turns a PGN game into the ordered positions an engine should evaluate,
plus the header metadata shown alongside a review.
"""

import io
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterator, List, Optional

import chess
import chess.pgn

logger = logging.getLogger(__name__)

UNKNOWN = "?"


@dataclass
class GameRecord:
    """A game ready for review."""

    fens: List[str]  # position before each mainline move
    moves: List[str]  # SAN of each mainline move
    headers: Dict[str, str] = field(default_factory=dict)

    def header(self, name: str) -> str:
        """Header value, or '?' when the PGN does not provide it."""
        value = self.headers.get(name, UNKNOWN)
        return value if value else UNKNOWN

    @property
    def white(self) -> str:
        return self.header("White")

    @property
    def black(self) -> str:
        return self.header("Black")

    @property
    def site(self) -> str:
        return self.header("Site")

    @property
    def date(self) -> str:
        return self.header("Date")

    @property
    def result(self) -> str:
        return self.header("Result")

    @property
    def termination(self) -> str:
        """Termination header, falling back to the result."""
        termination = self.headers.get("Termination")
        return termination if termination else self.result

    @property
    def has_players(self) -> bool:
        return self.white != UNKNOWN or self.black != UNKNOWN


def game_to_record(game: chess.pgn.Game) -> GameRecord:
    """
    Walk the mainline of a game.

    Args:
        game: Parsed PGN game

    Returns:
        GameRecord with one FEN per move, taken before the move is played
    """
    board = game.board()
    fens: List[str] = []
    moves: List[str] = []

    for move in game.mainline_moves():
        fens.append(board.fen())
        moves.append(board.san(move))
        board.push(move)

    return GameRecord(fens=fens, moves=moves, headers=dict(game.headers))


def load_game(pgn_text: str) -> GameRecord:
    """
    Load the first game of a PGN string.

    Raises:
        ValueError: If the text holds no game or the game has illegal moves
    """
    game = chess.pgn.read_game(io.StringIO(pgn_text))
    if game is None:
        raise ValueError("No game found in PGN text")

    if game.errors:
        raise ValueError(f"Invalid PGN: {game.errors[0]}")

    record = game_to_record(game)
    logger.info(f"Loaded game {record.white} vs {record.black}: {len(record.moves)} moves")
    return record


def iter_games(pgn_path: Path, max_games: Optional[int] = None) -> Iterator[GameRecord]:
    """
    Stream games from a PGN file.

    Games that fail to parse are skipped with a warning.

    Args:
        pgn_path: Path to PGN file
        max_games: Maximum number of games to yield (None = unlimited)

    Yields:
        GameRecord per game
    """
    if not pgn_path.exists():
        raise FileNotFoundError(f"PGN file not found: {pgn_path}")

    logger.info(f"Reading PGN file: {pgn_path}")
    count = 0

    with open(pgn_path, "r", encoding="utf-8", errors="ignore") as pgn_file:
        while max_games is None or count < max_games:
            game = chess.pgn.read_game(pgn_file)
            if game is None:
                break

            if game.errors:
                logger.warning(f"Skipping game with errors: {game.errors[0]}")
                continue

            count += 1
            yield game_to_record(game)

    logger.info(f"Read {count} games from {pgn_path}")


def load_game_file(pgn_path: Path) -> GameRecord:
    """
    Load the first valid game of a PGN file.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file holds no valid game
    """
    for record in iter_games(pgn_path, max_games=1):
        return record
    raise ValueError(f"No valid game found in {pgn_path}")
