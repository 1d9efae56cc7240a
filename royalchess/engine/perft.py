from __future__ import annotations

from typing import Optional

from .board import Board, opponent
from .executor import apply_move, undo_move
from .move import Move
from .movegen import all_legal_moves


def perft(board: Board, color: str, depth: int, last_move: Optional[Move] = None) -> int:
    """Count leaf nodes of the legal move tree with standard one-move turns.

    Definition:
    - depth == 0 returns 1 (the current node).
    - depth > 0 returns the sum over all legal child positions' perft(depth-1).

    Used to check the move generator against published standard-chess
    counts. A promotion counts as one move (the kind is chosen later), so
    compare only at depths where no promotion is reachable.
    """
    if depth < 0:
        raise ValueError("depth must be >= 0")
    if depth == 0:
        return 1

    moves = all_legal_moves(board, color, last_move)
    if depth == 1:
        return len(moves)
    nodes = 0
    for m in moves:
        outcome = apply_move(board, m.from_sq, m.to_sq)
        try:
            nodes += perft(board, opponent(color), depth - 1, m)
        finally:
            undo_move(board, outcome)
    return nodes
