"""
Utilities shared by the review tools.
"""

from chess_review.utils.log import setup_file_logger, setup_logging

__all__ = [
    "setup_logging",
    "setup_file_logger",
]
