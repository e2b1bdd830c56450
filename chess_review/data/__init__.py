"""
Game sources for reviews.
"""

from chess_review.data.pgn_loader import (
    GameRecord,
    game_to_record,
    iter_games,
    load_game,
    load_game_file,
)

__all__ = [
    "GameRecord",
    "game_to_record",
    "iter_games",
    "load_game",
    "load_game_file",
]
