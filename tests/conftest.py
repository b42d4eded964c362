"""Shared pytest fixtures and helpers: a toy rules provider and plain minimax."""

import random

import chess
import pytest

from engine.constants import BLACK_WIN_SCORE, DRAW_SCORE, WHITE_WIN_SCORE
from engine.rules import Outcome

# Black has just been mated (scholar's mate).
WHITE_WON_FEN = "r1bqkb1r/pppp1Qpp/2n2n2/4p3/2B1P3/8/PPPP1PPP/RNB1K1NR b KQkq - 0 4"
# White has just been mated (fool's mate).
BLACK_WON_FEN = "rnb1kbnr/pppp1ppp/8/4p3/6Pq/5P2/PPPPP2P/RNBQKBNR w KQkq - 1 3"
# White to move, Ra8 is the only mate.
MATE_IN_ONE_FEN = "6k1/5ppp/8/8/8/8/5PPP/R5K1 w - - 0 1"


class TreeRules:
    """
    Rules provider over an explicit game tree.

    Positions are node names. `tree` maps an inner node to its (move, child)
    pairs in search order; leaves are scored by `scores` through the
    `evaluate` method. Nodes listed in `outcomes` are terminal. Sides
    alternate with depth, starting with `root_side` at `root`.
    """

    def __init__(self, tree, scores, root="root", root_side=chess.WHITE, outcomes=None):
        self.tree = tree
        self.scores = scores
        self.root = root
        self.outcomes = outcomes or {}
        self.sides = {root: root_side}
        self.visited = []
        pending = [root]
        while pending:
            node = pending.pop()
            for _, child in tree.get(node, []):
                self.sides[child] = not self.sides[node]
                pending.append(child)

    def legal_successors(self, position):
        self.visited.append(position)
        return iter(self.tree.get(position, []))

    def legal_moves(self, position):
        return [move for move, _ in self.tree.get(position, [])]

    def classify(self, position):
        return self.outcomes.get(position, Outcome.ONGOING)

    def side_to_move(self, position):
        return self.sides[position]

    def starting_position(self):
        return self.root

    def parse_position(self, notation):
        return notation

    def apply_move(self, position, move_notation):
        return dict(self.tree[position])[move_notation]

    def format_move(self, position, move):
        return move

    def evaluate(self, position):
        return self.scores[position]


def minimax(position, depth, rules, evaluator):
    """Unpruned minimax; returns (move, score) with first-best tie-breaking."""
    outcome = rules.classify(position)
    if outcome is Outcome.WHITE_WINS:
        return None, WHITE_WIN_SCORE
    if outcome is Outcome.BLACK_WINS:
        return None, BLACK_WIN_SCORE
    if outcome is Outcome.DRAWN:
        return None, DRAW_SCORE
    if depth == 0:
        return None, evaluator(position)

    maximizing = rules.side_to_move(position) == chess.WHITE
    best_move, best_score = None, None
    for move, child in rules.legal_successors(position):
        _, score = minimax(child, depth - 1, rules, evaluator)
        if best_score is None or (score > best_score if maximizing else score < best_score):
            best_move, best_score = move, score
    return best_move, best_score


def random_position(seed: int, plies: int) -> chess.Board:
    """
    Play `plies` random legal moves from the start.

    Moves that would end the game are never chosen, so the result always has
    legal moves and is not yet decided.
    """
    rng = random.Random(seed)
    board = chess.Board()
    for _ in range(plies):
        moves = []
        for move in board.legal_moves:
            board.push(move)
            if not board.is_game_over():
                moves.append(move)
            board.pop()
        if not moves:
            break
        board.push(rng.choice(moves))
    return board


@pytest.fixture
def textbook_tree():
    """
    Two-ply tree with a known cutoff.

        root (max)
        ├── a -> A (min): a1 -> 3, a2 -> 5
        └── b -> B (min): b1 -> 2, b2 -> 9   (b2 is pruned)
    """
    tree = {
        "root": [("a", "A"), ("b", "B")],
        "A": [("a1", "A1"), ("a2", "A2")],
        "B": [("b1", "B1"), ("b2", "B2")],
    }
    scores = {"A1": 3, "A2": 5, "B1": 2, "B2": 9}
    return TreeRules(tree, scores)
