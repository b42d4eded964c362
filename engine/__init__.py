"""
xanadu engine package.

This package implements a small classical chess engine: fixed-depth minimax
with alpha-beta pruning over a material + piece-square-table evaluation.
Chess rules come from python-chess through a narrow rules-provider interface.

Modules:
    constants — Piece values, piece-square tables, sentinel scores, defaults
    config    — EngineConfig: defaults, TOML file and environment overrides
    errors    — ParseError, IllegalMoveError, NoLegalMoveError
    rules     — RulesProvider protocol and the python-chess implementation
    evaluate  — Static evaluation (White's perspective)
    search    — Alpha-beta minimax and the best-move fallback
    session   — Session controller driven by the UCI loop
"""
