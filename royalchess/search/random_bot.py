from __future__ import annotations

import random
from typing import AbstractSet, Optional

from ..engine.board import Board
from ..engine.move import PROMOTION_KINDS, Coord, Move
from ..engine.movegen import all_legal_moves


class RandomBot:
    """Uniform random mover over the shared legality filter.

    Notes:
    - No evaluation: every legal ``(from, to)`` pair is equally likely.
    - The RNG is injectable for reproducible games and tests.
    - Returns ``None`` when nothing can move; deciding checkmate or
      stalemate is left to the caller.
    """

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self.rng = rng if rng is not None else random.Random()

    def choose_move(
        self,
        board: Board,
        pieces_moved_this_turn: AbstractSet[Coord],
        color: str,
        last_move: Optional[Move] = None,
    ) -> Optional[Move]:
        pool = all_legal_moves(board, color, last_move, exclude=pieces_moved_this_turn)
        if not pool:
            return None
        return self.rng.choice(pool)

    def choose_promotion(self) -> str:
        return self.rng.choice(PROMOTION_KINDS)
