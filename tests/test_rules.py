"""Tests for the python-chess rules provider."""

import chess
import pytest

from engine.errors import IllegalMoveError, ParseError
from engine.rules import ChessRules, Outcome

from tests.conftest import BLACK_WON_FEN, WHITE_WON_FEN


@pytest.fixture
def rules():
    return ChessRules()


class TestClassify:
    def test_start_is_ongoing(self, rules):
        assert rules.classify(chess.Board()) is Outcome.ONGOING

    def test_white_win(self, rules):
        assert rules.classify(chess.Board(WHITE_WON_FEN)) is Outcome.WHITE_WINS

    def test_black_win(self, rules):
        assert rules.classify(chess.Board(BLACK_WON_FEN)) is Outcome.BLACK_WINS

    def test_insufficient_material_is_drawn(self, rules):
        assert rules.classify(chess.Board("8/8/4k3/8/8/8/8/4K3 w - - 0 1")) is Outcome.DRAWN

    def test_side_to_move(self, rules):
        board = chess.Board()
        assert rules.side_to_move(board) == chess.WHITE
        board.push_uci("e2e4")
        assert rules.side_to_move(board) == chess.BLACK


class TestSuccessors:
    def test_start_has_twenty(self, rules):
        successors = list(rules.legal_successors(chess.Board()))
        assert len(successors) == 20
        assert [move for move, _ in successors] == rules.legal_moves(chess.Board())

    def test_children_are_independent_copies(self, rules):
        board = chess.Board()
        children = [child for _, child in rules.legal_successors(board)]
        assert board == chess.Board()
        assert len({child.fen() for child in children}) == 20
        assert all(child.turn == chess.BLACK for child in children)

    def test_checkmate_has_none(self, rules):
        assert list(rules.legal_successors(chess.Board(BLACK_WON_FEN))) == []


class TestNotation:
    def test_starting_position(self, rules):
        assert rules.starting_position().fen() == chess.STARTING_FEN

    def test_parse_position(self, rules):
        assert rules.parse_position(WHITE_WON_FEN).fen() == WHITE_WON_FEN

    @pytest.mark.parametrize("fen", ["", "garbage", "8/8/8 w - - 0 1"])
    def test_parse_error(self, rules, fen):
        with pytest.raises(ParseError):
            rules.parse_position(fen)

    def test_apply_move_returns_new_board(self, rules):
        board = chess.Board()
        after = rules.apply_move(board, "e2e4")
        assert board == chess.Board()
        assert after.piece_at(chess.E4) == chess.Piece(chess.PAWN, chess.WHITE)
        assert after.move_stack == [chess.Move.from_uci("e2e4")]

    @pytest.mark.parametrize("move", ["e2e5", "zz", "", "e7e5"])
    def test_apply_illegal_move(self, rules, move):
        with pytest.raises(IllegalMoveError) as info:
            rules.apply_move(chess.Board(), move)
        assert info.value.move == move

    def test_format_move(self, rules):
        board = chess.Board("8/P6k/8/8/8/8/8/4K3 w - - 0 1")
        assert rules.format_move(board, chess.Move.from_uci("a7a8q")) == "a7a8q"
