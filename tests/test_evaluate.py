"""
Tests for the static evaluator.

Covers:
- Start position balance
- Hand-computed piece-square deltas after pawn moves
- Color-mirror symmetry
- Material counting and king-only positions
"""

import chess
import pytest

from engine.constants import KING_TABLE, PAWN_TABLE
from engine.evaluate import evaluate, material_score, positional_score

from tests.conftest import random_position


def _play(board: chess.Board, *moves: str) -> chess.Board:
    for move in moves:
        board.push_uci(move)
    return board


class TestStartPosition:
    def test_positional_term_is_zero(self):
        assert positional_score(chess.Board()) == 0

    def test_total_is_zero(self):
        assert evaluate(chess.Board()) == 0

    def test_returns_int(self):
        assert isinstance(evaluate(chess.Board()), int)


class TestPawnMoves:
    def test_double_push_gains_table_difference(self):
        board = _play(chess.Board(), "e2e4")
        expected = PAWN_TABLE[chess.E4] - PAWN_TABLE[chess.E2]
        assert expected == 40
        assert positional_score(board) == expected

    def test_black_reply_cancels(self):
        board = _play(chess.Board(), "e2e4", "e7e5")
        assert positional_score(board) == 0
        assert evaluate(board) == 0

    def test_kings_gambit_accepted(self):
        board = _play(chess.Board(), "e2e4", "e7e5", "f2f4", "e5f4")
        assert positional_score(board) == 0
        assert material_score(board) == -100
        assert evaluate(board) == -100

    def test_score_ignores_side_to_move(self):
        fen = "rnbqkbnr/pppp1ppp/8/4p3/4P3/8/PPPP1PPP/RNBQKBNR {} KQkq - 0 2"
        assert evaluate(chess.Board(fen.format("w"))) == evaluate(chess.Board(fen.format("b")))


class TestSymmetry:
    @pytest.mark.parametrize("seed", range(20))
    def test_mirror_negates_score(self, seed):
        board = random_position(seed, plies=5 + seed * 2)
        assert evaluate(board.mirror()) == -evaluate(board)
        assert positional_score(board.mirror()) == -positional_score(board)

    def test_mirror_of_lopsided_position(self):
        board = chess.Board("r3k2r/1pp2ppp/8/8/3Q4/8/P4PPP/4K2R w Kkq - 0 1")
        assert evaluate(board.mirror()) == -evaluate(board)


class TestMaterial:
    def test_white_up_queen(self):
        board = chess.Board("4k3/8/8/8/8/8/8/3QK3 w - - 0 1")
        assert material_score(board) == 900
        assert evaluate(board) > 800

    def test_black_up_rook(self):
        board = chess.Board("r3k3/8/8/8/8/8/8/4K3 w - - 0 1")
        assert material_score(board) == -500
        assert evaluate(board) < -400

    def test_minor_pieces_weigh_the_same(self):
        board = chess.Board("4kb2/8/8/8/8/8/8/4KN2 w - - 0 1")
        assert material_score(board) == 0

    def test_kings_only_scores_king_tables(self):
        board = chess.Board("4k3/8/8/8/8/8/8/6K1 w - - 0 1")
        assert material_score(board) == 0
        expected = KING_TABLE[chess.G1] - KING_TABLE[chess.square_mirror(chess.E8)]
        assert expected == 30
        assert evaluate(board) == expected

    def test_symmetric_kings_score_zero(self):
        assert evaluate(chess.Board("4k3/8/8/8/8/8/8/4K3 w - - 0 1")) == 0
