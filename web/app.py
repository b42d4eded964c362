"""
FastAPI web application for the engine.

Exposes two JSON endpoints over the same search and evaluator the UCI loop
uses:

    POST /api/move      FEN + depth -> best move, resulting FEN, score, nodes
    POST /api/evaluate  FEN -> static evaluation split into its two terms

Architecture notes:
- Sync endpoints (not async): FastAPI runs sync handlers in a thread pool,
  which is the correct pattern for CPU-bound blocking calls like a search.
- Stateless per request: the client sends the full FEN each time; no
  session state is kept between requests.
- Scores are from White's perspective, like everywhere else in the engine.

Run with: uvicorn web.app:app
"""

import logging

import chess
from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, field_validator

from engine.constants import SEARCH_DEPTH
from engine.errors import NoLegalMoveError, ParseError
from engine.evaluate import material_score, positional_score
from engine.rules import DEFAULT_RULES
from engine.search import best_move

_log = logging.getLogger(__name__)

# Full-width search without pruning heuristics gets slow quickly in Python;
# the API refuses to spend more than this many plies on one request.
MAX_API_DEPTH = 5

app = FastAPI(title="xanadu", version="1.0.0")


# ---------------------------------------------------------------------------
# Request / response models
# ---------------------------------------------------------------------------


class MoveRequest(BaseModel):
    """
    Client request for an engine move.

    Fields:
        fen:   Full FEN string of the position to move in.
        depth: Search depth in plies, clamped to [1, MAX_API_DEPTH].
    """

    fen: str
    depth: int = SEARCH_DEPTH

    @field_validator("depth")
    @classmethod
    def clamp_depth(cls, v: int) -> int:
        """Clamp depth to a safe operating range."""
        return max(1, min(v, MAX_API_DEPTH))


class MoveResponse(BaseModel):
    """
    Engine reply.

    Fields:
        move:  Best move in UCI notation (e.g. "e2e4", "e7e8q").
        fen:   FEN after the move is applied.
        score: Search score in centipawns, positive = good for White.
        nodes: Positions visited by the search.
    """

    move: str
    fen: str
    score: int
    nodes: int


class EvaluateRequest(BaseModel):
    fen: str


class EvaluateResponse(BaseModel):
    score: int
    material: int
    positional: int


def _parse_board(fen: str) -> chess.Board:
    try:
        return DEFAULT_RULES.parse_position(fen)
    except ParseError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


# ---------------------------------------------------------------------------
# API routes
# ---------------------------------------------------------------------------


@app.post("/api/move", response_model=MoveResponse)
def api_move(request: MoveRequest) -> MoveResponse:
    """
    Compute the engine's best move for the given position.

    Raises:
        HTTPException 400: Malformed FEN or game already over.
    """
    board = _parse_board(request.fen)

    if board.is_game_over():
        raise HTTPException(
            status_code=400,
            detail=f"Game is already over: {board.result()}",
        )

    try:
        result = best_move(board, request.depth)
    except NoLegalMoveError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    _log.info(
        "Move=%s score=%d depth=%d nodes=%d fen=%s",
        result.move.uci(),
        result.score,
        request.depth,
        result.nodes,
        request.fen[:40],
    )

    after = DEFAULT_RULES.apply_move(board, result.move.uci())
    return MoveResponse(
        move=result.move.uci(),
        fen=after.fen(),
        score=result.score,
        nodes=result.nodes,
    )


@app.post("/api/evaluate", response_model=EvaluateResponse)
def api_evaluate(request: EvaluateRequest) -> EvaluateResponse:
    """Static evaluation of a position, no search."""
    board = _parse_board(request.fen)
    material = material_score(board)
    positional = positional_score(board)
    return EvaluateResponse(
        score=material + positional,
        material=material,
        positional=positional,
    )
