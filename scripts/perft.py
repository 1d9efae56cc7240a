#!/usr/bin/env python3
# ruff: noqa: E402
from __future__ import annotations

import argparse
import os
import sys
import time

# Allow running this script directly via `python scripts/perft.py`
# by adding the repo root (which contains `royalchess/`) to sys.path.
REPO_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)

from royalchess.engine.board import COLORS, STARTPOS_DIAGRAM, WHITE, Board, opponent
from royalchess.engine.executor import apply_move, undo_move
from royalchess.engine.movegen import all_legal_moves
from royalchess.engine.perft import perft

KIWIPETE_DIAGRAM = (
    "r...k..r",
    "p.ppqpb.",
    "bn..pnp.",
    "...PN...",
    ".p..P...",
    "..N..Q.p",
    "PPPBBPPP",
    "R...K..R",
)
NAMED = {"startpos": STARTPOS_DIAGRAM, "kiwipete": KIWIPETE_DIAGRAM}


def load_board(position: str) -> Board:
    """Accept a named position or eight comma-separated diagram rows."""
    rows = NAMED.get(position)
    if rows is None:
        rows = tuple(position.split(","))
    return Board.from_diagram(rows)


def main() -> None:
    parser = argparse.ArgumentParser(description="Count legal move tree leaves (one move per ply)")
    parser.add_argument(
        "--position",
        type=str,
        default="startpos",
        help="startpos, kiwipete, or 8 comma-separated diagram rows (rank 8 first)",
    )
    parser.add_argument("--color", choices=COLORS, default=WHITE, help="Side to move")
    parser.add_argument("--depth", type=int, default=3, help="Perft depth (default: 3)")
    parser.add_argument("--divide", action="store_true", help="Print node counts per root move")
    args = parser.parse_args()

    try:
        board = load_board(args.position)
    except ValueError as e:
        raise SystemExit(f"invalid position: {e}")

    start = time.perf_counter()
    if args.divide and args.depth > 0:
        nodes = 0
        for m in all_legal_moves(board, args.color):
            outcome = apply_move(board, m.from_sq, m.to_sq)
            try:
                count = perft(board, opponent(args.color), args.depth - 1, m)
            finally:
                undo_move(board, outcome)
            print(f"{m.to_str()}: {count}")
            nodes += count
    else:
        nodes = perft(board, args.color, args.depth)
    dt = time.perf_counter() - start
    print(f"nodes={nodes} depth={args.depth} time_ms={int(dt*1000)} nps={int(nodes/max(dt,1e-9))}")


if __name__ == "__main__":
    main()
