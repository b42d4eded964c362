"""
Search: fixed-depth minimax with alpha-beta pruning.

Scores are always from White's point of view (see engine.evaluate), so the
search is written as minimax rather than negamax: White's nodes maximize,
Black's nodes minimize. Both roles share one recursive function; the side to
move at the node decides which bound moves and which comparison cuts off.

The window [alpha, beta] carries the usual meaning:

    alpha: the best score the maximizer is already guaranteed elsewhere.
    beta:  the best score the minimizer is already guaranteed elsewhere.

At a maximizing node a child scoring >= beta means the minimizer above will
never let play reach this node, so the remaining siblings are skipped and beta
is returned (a fail-hard cutoff). A child scoring > alpha becomes the new best
move and raises alpha. Minimizing nodes mirror this with <= alpha cutoffs and
< beta improvements. The root is searched with the full sentinel window, so
its score is exactly the minimax value of the tree.

Chess rules come from a RulesProvider and leaf scores from an evaluator
callable. Neither is imported implicitly inside the recursion, so tests can
search toy game trees with known values.

The number of positions visited is returned with every result instead of
being accumulated in shared state. It is diagnostic only and never affects
which move is chosen.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable

import chess

from engine.constants import (
    BLACK_WIN_SCORE,
    DRAW_SCORE,
    SEARCH_DEPTH,
    WHITE_WIN_SCORE,
)
from engine.errors import NoLegalMoveError
from engine.evaluate import evaluate
from engine.rules import DEFAULT_RULES, Outcome, RulesProvider

_log = logging.getLogger(__name__)

Evaluator = Callable[[Any], int]


@dataclass(frozen=True)
class SearchResult:
    """
    Outcome of searching one node.

    Attributes:
        move:  Best move found at the node, or None at a terminal node, at
               the horizon, or when no move beat the inherited bound.
        score: Score of the node from White's perspective.
        nodes: Positions visited while producing this result, the node
               itself included.
    """

    move: Any | None
    score: int
    nodes: int = 1


def alphabeta(
    position: Any,
    depth: int,
    alpha: int,
    beta: int,
    rules: RulesProvider = DEFAULT_RULES,
    evaluator: Evaluator = evaluate,
) -> SearchResult:
    """
    Alpha-beta minimax over the successors supplied by the rules provider.

    Args:
        position: Node to search. Never modified.
        depth:    Remaining plies. At 0 (or below) the evaluator scores the position.
        alpha:    Lower bound of the window (maximizer's guarantee).
        beta:     Upper bound of the window (minimizer's guarantee).
        rules:    Source of successors, terminal classification and turn.
        evaluator: Static evaluation used at the horizon.

    Returns:
        SearchResult whose score is clamped to [alpha, beta]. On a cutoff
        the refuting move is reported together with the bound.
    """
    outcome = rules.classify(position)
    if outcome is Outcome.WHITE_WINS:
        return SearchResult(None, WHITE_WIN_SCORE)
    if outcome is Outcome.BLACK_WINS:
        return SearchResult(None, BLACK_WIN_SCORE)
    if outcome is Outcome.DRAWN:
        return SearchResult(None, DRAW_SCORE)

    if depth <= 0:
        return SearchResult(None, evaluator(position))

    maximizing = rules.side_to_move(position) == chess.WHITE
    nodes = 1
    best_move = None

    for move, child in rules.legal_successors(position):
        result = alphabeta(child, depth - 1, alpha, beta, rules, evaluator)
        nodes += result.nodes
        score = result.score

        if maximizing:
            if score >= beta:
                return SearchResult(move, beta, nodes)
            if score > alpha:
                alpha = score
                best_move = move
        else:
            if score <= alpha:
                return SearchResult(move, alpha, nodes)
            if score < beta:
                beta = score
                best_move = move

    return SearchResult(best_move, alpha if maximizing else beta, nodes)


def search(
    position: Any,
    depth: int = SEARCH_DEPTH,
    rules: RulesProvider = DEFAULT_RULES,
    evaluator: Evaluator = evaluate,
) -> SearchResult:
    """
    Search a position to a fixed depth with the full sentinel window.

    The side to move at the root decides whether the root maximizes or
    minimizes. A terminal root yields its classification score and no move.
    """
    result = alphabeta(position, depth, BLACK_WIN_SCORE, WHITE_WIN_SCORE, rules, evaluator)
    _log.debug(
        "search depth=%d score=%d nodes=%d move=%s",
        depth, result.score, result.nodes, result.move,
    )
    return result


def best_move(
    position: Any,
    depth: int = SEARCH_DEPTH,
    rules: RulesProvider = DEFAULT_RULES,
    evaluator: Evaluator = evaluate,
) -> SearchResult:
    """
    Search and guarantee a move for any position that has one.

    If the search commits to no move (every line loses outright, or the root
    is already decided) the first legal move in provider order is returned
    with the search score.

    Raises:
        NoLegalMoveError: The side to move has no legal moves.
    """
    result = search(position, depth, rules, evaluator)
    if result.move is not None:
        return result

    moves = rules.legal_moves(position)
    if not moves:
        raise NoLegalMoveError("no legal moves in the current position")
    _log.info("search produced no move, falling back to first legal move %s", moves[0])
    return SearchResult(moves[0], result.score, result.nodes)
