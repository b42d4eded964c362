"""
Static evaluation: material plus piece-square tables.

The evaluator assigns a centipawn score to any position so the search can
compare the leaves of its tree. It knows nothing about whose turn it is: the
score is always from White's point of view (positive = White is better,
negative = Black is better). The search picks the maximum or the minimum
depending on the side to move, so no sign flipping happens here.

Two terms are added together:

- Material: pawn 100, knight 300, bishop 300, rook 500, queen 900, counted
  for each side and subtracted (White minus Black). Kings are not material.
- Position: every piece, kings included, earns the entry of its role's table
  at the square it stands on. Tables are written from White's side; a Black
  piece is looked up at the vertically mirrored square, so a Black pawn on e5
  is scored like a White pawn on e4. White's entries are added, Black's
  subtracted.

Because the tables are mirrored rather than duplicated, a position and its
color-reversed twin always evaluate to exact negatives of each other.
"""

import chess

from engine.constants import PIECE_SQUARE_TABLES, PIECE_VALUES


def material_score(board: chess.Board) -> int:
    """Material balance in centipawns, White minus Black."""
    score = 0
    for piece_type, value in PIECE_VALUES.items():
        white = len(board.pieces(piece_type, chess.WHITE))
        black = len(board.pieces(piece_type, chess.BLACK))
        score += (white - black) * value
    return score


def positional_score(board: chess.Board) -> int:
    """
    Piece-square balance, White minus Black.

    Example:
        >>> positional_score(chess.Board())
        0
    """
    score = 0
    for square, piece in board.piece_map().items():
        table = PIECE_SQUARE_TABLES[piece.piece_type]
        if piece.color == chess.WHITE:
            score += table[square]
        else:
            score -= table[chess.square_mirror(square)]
    return score


def evaluate(board: chess.Board) -> int:
    """
    Centipawn evaluation of a position from White's perspective.

    Pure function: the board is not modified and the result does not depend
    on the side to move.

    Args:
        board: The position to score.

    Returns:
        material_score(board) + positional_score(board).
    """
    return material_score(board) + positional_score(board)
