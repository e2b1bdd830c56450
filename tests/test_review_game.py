"""Tests for the review_game command-line tool."""

import logging
import sys

import pytest

from chess_review.analysis.parser import LineEval
from tools import review_game


class TestFormatting:
    """Tests for report formatting."""

    @pytest.mark.parametrize(
        "line, expected",
        [
            (LineEval(moves=("e2e4",), centipawn=31), "+0.31"),
            (LineEval(moves=("e2e4",), centipawn=-150), "-1.50"),
            (LineEval(moves=("d1h5",), mate_in=3), "#3"),
            (LineEval(moves=("e2e4",)), "-"),
            (None, "-"),
        ],
    )
    def test_format_score(self, line, expected):
        assert review_game.format_score(line) == expected

    def test_format_line_shows_depth(self):
        line = LineEval(moves=("e2e4", "e7e5"), centipawn=30, depth=18)

        row = review_game.format_line(1, line)

        assert "1.   +0.30" in row
        assert "d18" in row
        assert row.endswith("e2e4 e7e5")

    def test_format_line_without_depth(self):
        row = review_game.format_line(2, LineEval(moves=("d2d4",), centipawn=-10))

        assert "d- " in row

    def test_format_line_truncates_moves(self):
        moves = tuple(f"m{i}" for i in range(12))

        row = review_game.format_line(1, LineEval(moves=moves, centipawn=0, depth=5))

        assert row.endswith("m0 m1 m2 m3 m4 m5 m6 m7")

    def test_format_accuracy(self):
        assert review_game.format_accuracy(None) == "n/a"
        assert review_game.format_accuracy(87.24) == "87.2 %"


class TestMain:
    """Tests for argument handling."""

    @pytest.fixture
    def package_logger(self):
        logger = logging.getLogger("chess_review")
        handlers, level = list(logger.handlers), logger.level
        yield logger
        for handler in logger.handlers:
            handler.close()
        logger.handlers[:] = handlers
        logger.setLevel(level)

    def test_log_file_option(self, tmp_path, monkeypatch, package_logger):
        log_file = tmp_path / "review.log"
        missing = tmp_path / "missing.pgn"
        monkeypatch.setattr(
            sys, "argv", ["review_game.py", str(missing), "--log-file", str(log_file)]
        )

        with pytest.raises(SystemExit):
            review_game.main()

        assert log_file.exists()
        assert package_logger.handlers[0].baseFilename == str(log_file)
        assert package_logger.level == logging.INFO

    def test_missing_pgn(self, tmp_path, monkeypatch, capsys):
        monkeypatch.setattr(sys, "argv", ["review_game.py", str(tmp_path / "missing.pgn")])

        with pytest.raises(SystemExit) as excinfo:
            review_game.main()

        assert excinfo.value.code == 1
        assert "PGN file not found" in capsys.readouterr().out
