"""Exception types raised by the rules provider and the search."""


class EngineError(Exception):
    """Base class for every recoverable engine error."""


class ParseError(EngineError):
    """A position string (FEN) could not be parsed."""


class IllegalMoveError(EngineError):
    """A move string is malformed or not legal in the given position."""

    def __init__(self, move: str, fen: str) -> None:
        super().__init__(f"illegal move {move!r} in position {fen}")
        self.move = move
        self.fen = fen


class NoLegalMoveError(EngineError):
    """A move was requested for a position where the side to move has none."""
