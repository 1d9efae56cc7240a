from __future__ import annotations

import random

from royalchess.engine.board import BLACK, WHITE, Board
from royalchess.engine.move import PROMOTION_KINDS, str_to_coord
from royalchess.search.random_bot import RandomBot


def test_seeded_bots_agree() -> None:
    b = Board.startpos()
    first = RandomBot(random.Random(42))
    second = RandomBot(random.Random(42))
    picks_a = [first.choose_move(b, frozenset(), WHITE) for _ in range(10)]
    picks_b = [second.choose_move(b, frozenset(), WHITE) for _ in range(10)]
    assert picks_a == picks_b
    assert all(m is not None for m in picks_a)


def test_moved_pieces_are_excluded() -> None:
    b = Board.startpos()
    movable = {str_to_coord("g1")}
    exclude = frozenset(sq for sq, _ in b.pieces(WHITE) if sq not in movable)
    bot = RandomBot(random.Random(0))
    for _ in range(20):
        m = bot.choose_move(b, exclude, WHITE)
        assert m is not None
        assert m.from_sq == str_to_coord("g1")
        assert m.to_sq in (str_to_coord("f3"), str_to_coord("h3"))


def test_returns_none_when_nothing_can_move() -> None:
    b = Board.startpos()
    everything = frozenset(sq for sq, _ in b.pieces(BLACK))
    assert RandomBot().choose_move(b, everything, BLACK) is None

    stalemate = Board.from_diagram(["k.......", "..Q....."] + ["........"] * 5 + ["....K..."])
    assert RandomBot().choose_move(stalemate, frozenset(), BLACK) is None


def test_promotion_choice_is_a_promotion_kind() -> None:
    bot = RandomBot(random.Random(3))
    assert {bot.choose_promotion() for _ in range(50)} <= set(PROMOTION_KINDS)
