#!/usr/bin/env python3
"""
Benchmark: nodes visited and time per move at the fixed search depth.

Run before and after touching the search or the evaluator. Alpha-beta with
an unchanged evaluator must pick the same moves; a lower node count at the
same depth means more pruning, a lower time at the same node count means a
faster evaluator or rules provider.

Pass a baseline file to check move agreement. If it does not exist yet the
run's moves are written to it; otherwise every move is compared against it
and the run exits non-zero when any position changed its bestmove.

Usage: python3 tools/bench.py [depth] [baseline.json]
"""
import json
import os
import subprocess
import sys

REPO = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
PYTHON = sys.executable
ENGINE = os.path.join(REPO, "interface", "uci.py")

# Fixed forever so every version is measured on the same positions.
POSITIONS = [
    ("Start",        "startpos"),
    ("After 1.e4",   "startpos moves e2e4"),
    ("Sicilian",     "startpos moves e2e4 c7c5"),
    ("Italian",      "startpos moves e2e4 e7e5 g1f3 b8c6 f1c4"),
    ("Mid-open",     "fen r1bqkb1r/pppp1ppp/2n2n2/4p3/2B1P3/5N2/PPPP1PPP/RNBQK2R w KQkq - 4 4"),
    ("Mate in one",  "fen 6k1/5ppp/8/8/8/8/5PPP/R5K1 w - - 0 1"),
    ("Rook ending",  "fen 8/5pk1/6p1/7p/7P/6P1/5PK1/8 w - - 0 1"),
    ("Pawn race",    "fen 8/1p4k1/p7/P1K5/8/8/8/8 w - - 0 1"),
]


def run_position(label: str, pos_spec: str, depth: int | None) -> dict:
    """Run one position through a fresh engine process and parse its info line.

    Args:
        label: Human-readable position name for display.
        pos_spec: UCI position arguments (e.g. "startpos" or "fen <FEN>").
        depth: Search depth override, or None for the engine default.

    Returns:
        Dict with keys: label, move, score, nodes, time_ms.
    """
    env = {**os.environ, "PYTHONPATH": REPO}
    if depth is not None:
        env["XANADU_SEARCH_DEPTH"] = str(depth)
    proc = subprocess.Popen(
        [PYTHON, ENGINE],
        stdin=subprocess.PIPE,
        stdout=subprocess.PIPE,
        stderr=subprocess.DEVNULL,
        text=True,
        env=env,
    )
    out, _ = proc.communicate(f"uci\nisready\nposition {pos_spec}\ngo\nquit\n", timeout=600)

    nodes = time_ms = score = 0
    move = "(none)"
    for line in out.splitlines():
        parts = line.split()
        if line.startswith("info depth"):

            def _get(key: str) -> int:
                try:
                    return int(parts[parts.index(key) + 1])
                except (ValueError, IndexError):
                    return 0

            score = _get("cp")
            nodes = _get("nodes")
            time_ms = _get("time")
        elif line.startswith("bestmove"):
            move = parts[1]

    return {"label": label, "move": move, "score": score, "nodes": nodes, "time_ms": time_ms}


def compare_moves(results: list[dict], baseline: dict[str, str]) -> list[str]:
    """Return the labels whose bestmove differs from the baseline.

    Positions missing from the baseline are not counted as changes.
    """
    return [
        r["label"] for r in results
        if r["label"] in baseline and baseline[r["label"]] != r["move"]
    ]


def main() -> None:
    """Run all benchmark positions and print a summary table."""
    depth = int(sys.argv[1]) if len(sys.argv) > 1 else None
    baseline_path = sys.argv[2] if len(sys.argv) > 2 else None
    baseline = None
    if baseline_path and os.path.exists(baseline_path):
        with open(baseline_path) as f:
            baseline = json.load(f)

    print(f"xanadu benchmark — {PYTHON}")
    print(f"Engine: {ENGINE}  depth: {depth or 'default'}")
    print()
    print(f"{'Position':<14} {'Move':<7} {'Score':>6} {'Nodes':>9} {'Time(ms)':>9} {'NPS':>8}")
    print("-" * 58)

    results = []
    for label, pos in POSITIONS:
        r = run_position(label, pos, depth)
        results.append(r)
        nps = r["nodes"] * 1000 // r["time_ms"] if r["time_ms"] else 0
        print(
            f"{r['label']:<14} {r['move']:<7} {r['score']:>6} "
            f"{r['nodes']:>9,} {r['time_ms']:>9,} {nps:>8,}"
        )

    valid = [r for r in results if r["nodes"] > 0]
    if valid:
        total_nodes = sum(r["nodes"] for r in valid)
        total_time = sum(r["time_ms"] for r in valid)
        print("-" * 58)
        print(
            f"{'TOTAL':<14} {'':<7} {'':>6} {total_nodes:>9,} {total_time:>9,} "
            f"{total_nodes * 1000 // max(1, total_time):>8,}"
        )

    if baseline_path is None:
        return
    if baseline is None:
        with open(baseline_path, "w") as f:
            json.dump({r["label"]: r["move"] for r in results}, f, indent=2)
        print(f"\nBaseline written to {baseline_path}")
        return

    changed = compare_moves(results, baseline)
    moves = {r["label"]: r["move"] for r in results}
    compared = sum(1 for label in moves if label in baseline)
    print()
    for label in changed:
        print(f"CHANGED  {label:<14} {baseline[label]} -> {moves[label]}")
    print(f"Move agreement: {compared - len(changed)}/{compared}")
    if changed:
        sys.exit(1)


if __name__ == "__main__":
    main()
