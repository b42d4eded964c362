"""
Session controller: the engine's state between UCI commands.

A session holds exactly one current position and at most one pending search.
The UCI loop drives it:

    go        -> activate()            (flag only, no searching yet)
    (loop)    -> run_search()          (search once, cache the move)
    bestmove  -> deactivate()          (clear the move, back to TIMED)

run_search() searches only when no move is cached, so the loop can call it
after every command while a session stays active (as it does in INFINITE mode,
waiting for "stop") without repeating the work.

The search itself never sees this object; it receives the position and depth
and returns a SearchResult.
"""

import enum
import logging
from typing import Any

from engine.constants import SEARCH_DEPTH
from engine.errors import NoLegalMoveError
from engine.evaluate import evaluate
from engine.rules import DEFAULT_RULES, RulesProvider
from engine.search import Evaluator, best_move

_log = logging.getLogger(__name__)


class SearchMode(enum.Enum):
    """INFINITE searches report only on "stop"; TIMED searches report at once."""

    INFINITE = "infinite"
    TIMED = "timed"


class EngineSession:
    """
    State machine with two states, inactive (initial) and active.

    Attributes:
        search_mode: INFINITE or TIMED. Callers set it before or after
                     activating; deactivate() resets it to TIMED.
        depth:       Fixed search depth in plies.
        nodes:       Positions visited by the most recent search.
        last_score:  White-perspective score of the most recent search.
    """

    def __init__(
        self,
        depth: int = SEARCH_DEPTH,
        rules: RulesProvider = DEFAULT_RULES,
        evaluator: Evaluator = evaluate,
    ) -> None:
        self.depth = depth
        self.rules = rules
        self.evaluator = evaluator
        self.search_mode = SearchMode.TIMED
        self.nodes = 0
        self.last_score: int | None = None
        self._position: Any = rules.starting_position()
        self._active = False
        self._best_move: Any | None = None

    # -----------------------------------------------------------------------
    # State transitions
    # -----------------------------------------------------------------------

    def activate(self) -> None:
        self._active = True

    def deactivate(self) -> None:
        """Leave the active state. Safe to call while already inactive."""
        self._active = False
        self.search_mode = SearchMode.TIMED
        self._best_move = None

    def set_position(self, position: Any) -> None:
        """
        Replace the current position wholesale.

        The active flag is untouched. A cached move belongs to the old
        position, so it is dropped and the next run_search() searches again.
        """
        self._position = position
        self._best_move = None

    def run_search(self) -> None:
        """
        Search the current position unless a best move is already cached.

        Callers must not ask for a move in a position with no legal moves.
        If they do anyway, the failure is logged and no move is cached.
        """
        if self._best_move is not None:
            return

        try:
            result = best_move(self._position, self.depth, self.rules, self.evaluator)
        except NoLegalMoveError as exc:
            _log.warning("cannot search: %s", exc)
            self.nodes = 0
            self.last_score = None
            return

        self.nodes = result.nodes
        self.last_score = result.score
        self._best_move = result.move
        _log.info("position count: %d", result.nodes)

    # -----------------------------------------------------------------------
    # Queries
    # -----------------------------------------------------------------------

    @property
    def active(self) -> bool:
        return self._active

    @property
    def best_move(self) -> Any | None:
        return self._best_move

    @property
    def current_position(self) -> Any:
        return self._position
