"""
Unit Tests for the search output parser

Tests cover:
    - bestmove / ponder extraction
    - multipv lines: ranking, replacement by deeper iterations
    - mate and centipawn ordering
    - malformed fields being skipped
"""

import pytest

from chess_review.analysis.parser import (
    LineEval,
    MoveEval,
    ResponseParser,
    parse_response,
    sort_lines,
)


class TestBestMove:
    """Tests for 'bestmove' lines."""

    def test_best_move_and_ponder(self):
        result = parse_response(["bestmove e2e4 ponder e7e5"])

        assert result.best_move == "e2e4"
        assert result.ponder == "e7e5"
        assert result.lines == ()

    def test_best_move_without_ponder(self):
        result = parse_response(["bestmove g1f3"])

        assert result.best_move == "g1f3"
        assert result.ponder is None

    def test_bestmove_without_move_is_skipped(self):
        result = parse_response(["bestmove"])

        assert result.best_move == ""

    def test_no_output(self):
        result = parse_response([])

        assert result == MoveEval(best_move="", lines=())
        assert result.principal_line is None


class TestInfoLines:
    """Tests for principal variation parsing."""

    def test_two_lines_example(self):
        """Rank 1 at +30 and rank 2 at -10 come out in that order."""
        result = parse_response([
            "info depth 16 multipv 1 score cp 30 pv e2e4 e7e5",
            "info depth 16 multipv 2 score cp -10 pv d2d4 d7d5",
            "bestmove e2e4",
        ])

        assert result.best_move == "e2e4"
        assert result.lines[0].centipawn == 30
        assert result.lines[1].centipawn == -10
        assert result.lines[0].moves == ("e2e4", "e7e5")
        assert result.principal_line is result.lines[0]

    def test_one_entry_per_rank(self):
        lines = [
            f"info depth 12 multipv {rank} score cp {100 - rank * 10} pv a2a3"
            for rank in range(1, 6)
        ]
        result = parse_response(lines + ["bestmove a2a3"])

        assert len(result.lines) == 5
        assert [line.rank for line in result.lines] == [1, 2, 3, 4, 5]

    def test_deeper_iteration_replaces_shallower(self):
        result = parse_response([
            "info depth 10 multipv 1 score cp 15 pv e2e4",
            "info depth 11 multipv 1 score cp 42 pv d2d4 g8f6",
            "bestmove d2d4",
        ])

        assert len(result.lines) == 1
        assert result.lines[0].centipawn == 42
        assert result.lines[0].moves == ("d2d4", "g8f6")
        assert result.lines[0].depth == 11

    def test_info_without_multipv_ignored(self):
        result = parse_response(["info depth 5 score cp 20 pv e2e4", "bestmove e2e4"])

        assert result.lines == ()

    def test_info_without_pv_ignored(self):
        result = parse_response(["info depth 5 multipv 1 score cp 20 nodes 100"])

        assert result.lines == ()

    def test_info_string_ignored(self):
        result = parse_response(["info string NNUE evaluation using nn-xyz.nnue"])

        assert result.lines == ()

    def test_empty_pv_ignored(self):
        result = parse_response(["info depth 5 multipv 1 score cp 20 pv"])

        assert result.lines == ()

    def test_missing_score_left_empty(self):
        result = parse_response(["info depth 1 multipv 1 pv e2e4"])

        line = result.lines[0]
        assert line.centipawn is None
        assert line.mate_in is None

    def test_mate_score(self):
        result = parse_response(["info depth 8 multipv 1 score mate 2 pv d1h5 g7g6 h5e5"])

        assert result.lines[0].mate_in == 2
        assert result.lines[0].centipawn is None
        assert result.lines[0].is_mate

    def test_bound_qualifier_ignored(self):
        result = parse_response(["info depth 9 multipv 1 score cp 55 lowerbound pv e2e4"])

        assert result.lines[0].centipawn == 55

    def test_score_after_pv(self):
        result = parse_response(["info depth 5 multipv 1 pv e2e4 e7e5 score cp 30"])

        line = result.lines[0]
        assert line.moves == ("e2e4", "e7e5")
        assert line.centipawn == 30
        assert line.depth == 5

    def test_mate_after_pv(self):
        result = parse_response(["info multipv 2 pv d1h5 g7g6 score mate -4 depth 8 nodes 900"])

        line = result.lines[0]
        assert line.moves == ("d1h5", "g7g6")
        assert line.mate_in == -4
        assert line.depth == 8

    def test_pv_before_rank(self):
        result = parse_response(["info depth 7 pv g1f3 d7d5 multipv 3 score cp 12"])

        assert result.lines[0].rank == 3
        assert result.lines[0].moves == ("g1f3", "d7d5")


class TestMalformedFields:
    """Malformed fields are dropped without losing the rest of the line."""

    def test_non_integer_score_skipped(self):
        result = parse_response([
            "info depth 9 multipv 1 score cp abc pv e2e4",
            "info depth 9 multipv 2 score cp 10 pv d2d4",
        ])

        assert len(result.lines) == 2
        assert result.lines[0].centipawn == 10
        assert result.lines[1].centipawn is None
        assert result.lines[1].moves == ("e2e4",)

    def test_non_integer_depth_skipped(self):
        result = parse_response(["info depth x multipv 1 score cp 12 pv e2e4"])

        assert result.lines[0].depth is None
        assert result.lines[0].centipawn == 12

    def test_non_integer_rank_drops_line(self):
        result = parse_response(["info depth 9 multipv one score cp 12 pv e2e4", "bestmove e2e4"])

        assert result.lines == ()
        assert result.best_move == "e2e4"

    def test_blank_lines(self):
        result = parse_response(["", "   ", "bestmove e2e4"])

        assert result.best_move == "e2e4"


class TestOrdering:
    """Tests for line ordering."""

    def test_higher_centipawn_first(self):
        lines = [
            LineEval(moves=("a",), centipawn=-50, rank=1),
            LineEval(moves=("b",), centipawn=120, rank=2),
            LineEval(moves=("c",), centipawn=10, rank=3),
        ]

        assert [line.centipawn for line in sort_lines(lines)] == [120, 10, -50]

    def test_winning_mate_outranks_centipawns(self):
        lines = [
            LineEval(moves=("a",), centipawn=900, rank=1),
            LineEval(moves=("b",), mate_in=5, rank=2),
        ]

        assert sort_lines(lines)[0].mate_in == 5

    def test_shorter_winning_mate_first(self):
        lines = [
            LineEval(moves=("a",), mate_in=4, rank=1),
            LineEval(moves=("b",), mate_in=1, rank=2),
        ]

        assert [line.mate_in for line in sort_lines(lines)] == [1, 4]

    def test_losing_mate_ranks_last(self):
        lines = [
            LineEval(moves=("a",), mate_in=-2, rank=1),
            LineEval(moves=("b",), centipawn=-800, rank=2),
            LineEval(moves=("c",), mate_in=3, rank=3),
        ]

        ordered = sort_lines(lines)
        assert [line.rank for line in ordered] == [3, 2, 1]

    def test_slower_losing_mate_first(self):
        lines = [
            LineEval(moves=("a",), mate_in=-1, rank=1),
            LineEval(moves=("b",), mate_in=-6, rank=2),
        ]

        assert [line.mate_in for line in sort_lines(lines)] == [-6, -1]

    def test_sorting_is_idempotent(self):
        lines = [
            LineEval(moves=("a",), centipawn=5, rank=1),
            LineEval(moves=("b",), mate_in=-3, rank=2),
            LineEval(moves=("c",), mate_in=2, rank=3),
            LineEval(moves=("d",), rank=4),
            LineEval(moves=("e",), centipawn=5, rank=5),
        ]

        once = sort_lines(lines)
        assert sort_lines(once) == once

    def test_parser_sorts_by_score_not_rank(self):
        result = parse_response([
            "info depth 10 multipv 1 score cp 20 pv e2e4",
            "info depth 10 multipv 2 score mate 3 pv d1h5",
            "bestmove d1h5",
        ])

        assert [line.rank for line in result.lines] == [2, 1]


class TestLineEval:
    """Tests for LineEval helpers."""

    @pytest.mark.parametrize(
        "line, expected",
        [
            (LineEval(moves=("a",), centipawn=35), 35),
            (LineEval(moves=("a",), mate_in=3), 10000),
            (LineEval(moves=("a",), mate_in=-3), -10000),
            (LineEval(moves=("a",), mate_in=0), -10000),
            (LineEval(moves=("a",)), None),
        ],
    )
    def test_to_centipawns(self, line, expected):
        assert line.to_centipawns() == expected

    def test_custom_mate_score(self):
        assert LineEval(moves=("a",), mate_in=1).to_centipawns(mate_score=2000) == 2000


class TestResponseParser:
    """Tests for incremental parsing."""

    def test_incremental_consume(self):
        parser = ResponseParser()
        parser.consume("info depth 1 multipv 1 score cp 5 pv e2e4")
        parser.consume("bestmove e2e4")

        result = parser.result()
        assert result.best_move == "e2e4"
        assert len(result.lines) == 1

    def test_results_are_immutable(self):
        result = parse_response(["info depth 1 multipv 1 score cp 5 pv e2e4", "bestmove e2e4"])

        with pytest.raises(AttributeError):
            result.best_move = "d2d4"
        with pytest.raises(AttributeError):
            result.lines[0].centipawn = 0
