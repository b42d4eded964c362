"""
Rules provider: the narrow window through which the engine sees chess rules.

The search and the session controller never generate moves or detect mate
themselves. They ask a RulesProvider, which answers four kinds of question:
what are the legal successors of a position, is the game over (and who won),
whose turn is it, and how do positions and moves translate to and from text.

ChessRules is the production implementation on top of python-chess. Tests
substitute small hand-built providers to check the search on game trees whose
minimax value is known in advance.
"""

import enum
from typing import Any, Iterator, Protocol

import chess

from engine.errors import IllegalMoveError, ParseError


class Outcome(enum.Enum):
    """Terminal classification of a position."""

    ONGOING = "ongoing"
    WHITE_WINS = "white_wins"
    BLACK_WINS = "black_wins"
    DRAWN = "drawn"


class RulesProvider(Protocol):
    """Capabilities the engine core needs from a rules implementation."""

    def legal_successors(self, position: Any) -> Iterator[tuple[Any, Any]]:
        """Yield (move, resulting position) pairs in a deterministic order."""
        ...

    def legal_moves(self, position: Any) -> list[Any]:
        ...

    def classify(self, position: Any) -> Outcome:
        ...

    def side_to_move(self, position: Any) -> chess.Color:
        ...

    def starting_position(self) -> Any:
        ...

    def parse_position(self, notation: str) -> Any:
        ...

    def apply_move(self, position: Any, move_notation: str) -> Any:
        ...

    def format_move(self, position: Any, move: Any) -> str:
        ...


class ChessRules:
    """
    RulesProvider backed by python-chess.

    Positions are chess.Board objects and moves are chess.Move objects.
    Successor boards are copied without their move stack: the search only
    needs the current placement, castling rights and en passant square, and
    copying a long game history at every node would dominate the search time.
    The consequence is that repetition draws are only detected along the
    history the root position already carries.
    """

    def legal_successors(self, position: chess.Board) -> Iterator[tuple[chess.Move, chess.Board]]:
        for move in position.legal_moves:
            child = position.copy(stack=False)
            child.push(move)
            yield move, child

    def legal_moves(self, position: chess.Board) -> list[chess.Move]:
        return list(position.legal_moves)

    def classify(self, position: chess.Board) -> Outcome:
        """
        Classify a position as ongoing, won, or drawn.

        Uses python-chess's automatic game-ending rules only (checkmate,
        stalemate, insufficient material, 75-move rule, fivefold repetition);
        draws that must be claimed do not end the game here.
        """
        outcome = position.outcome()
        if outcome is None:
            return Outcome.ONGOING
        if outcome.winner == chess.WHITE:
            return Outcome.WHITE_WINS
        if outcome.winner == chess.BLACK:
            return Outcome.BLACK_WINS
        return Outcome.DRAWN

    def side_to_move(self, position: chess.Board) -> chess.Color:
        return position.turn

    def starting_position(self) -> chess.Board:
        return chess.Board()

    def parse_position(self, notation: str) -> chess.Board:
        """
        Build a board from a FEN string.

        Raises:
            ParseError: The FEN is malformed.
        """
        try:
            return chess.Board(notation)
        except ValueError as exc:
            raise ParseError(f"invalid FEN {notation!r}: {exc}") from exc

    def apply_move(self, position: chess.Board, move_notation: str) -> chess.Board:
        """
        Return a new board with a UCI move played; the input is not modified.

        Raises:
            IllegalMoveError: The move is malformed or not legal here.
        """
        try:
            move = position.parse_uci(move_notation)
        except ValueError as exc:
            raise IllegalMoveError(move_notation, position.fen()) from exc
        child = position.copy()
        child.push(move)
        return child

    def format_move(self, position: chess.Board, move: chess.Move) -> str:
        return position.uci(move)


# Shared default instance; ChessRules holds no state.
DEFAULT_RULES = ChessRules()
