from __future__ import annotations

import pytest

from royalchess.engine.board import BLACK, WHITE, Board
from royalchess.engine.errors import InvariantViolation
from royalchess.engine.executor import apply_move
from royalchess.engine.game import Game, replay
from royalchess.engine.move import Coord, Move, coord_to_str, str_to_coord
from royalchess.engine.movegen import (
    all_legal_moves,
    find_king,
    has_any_legal_move,
    is_in_check,
    is_square_attacked,
    legal_moves,
    pseudo_legal_moves,
)


EMPTY = "........"
_OPENING = [("e2", "e4"), ("a7", "a6"), ("b7", "b6"), ("e4", "e5"), ("h2", "h3")]


def sq(name: str) -> Coord:
    return str_to_coord(name)


def names(coords: list[Coord]) -> set[str]:
    return {coord_to_str(c) for c in coords}


def test_startpos_move_counts() -> None:
    b = Board.startpos()
    assert names(legal_moves(b, sq("g1"))) == {"f3", "h3"}
    assert names(legal_moves(b, sq("e2"))) == {"e3", "e4"}
    assert legal_moves(b, sq("a1")) == []
    assert legal_moves(b, sq("e4")) == []
    assert len(all_legal_moves(b, WHITE)) == 20
    assert len(all_legal_moves(b, BLACK)) == 20


def test_rook_slides_until_blocked() -> None:
    b = Board.from_diagram(
        [
            ".......k",
            "........",
            "...p....",
            "........",
            "...R.P..",
            "........",
            "........",
            ".......K",
        ]
    )
    assert names(legal_moves(b, sq("d4"))) == {
        "d5",
        "d6",
        "d3",
        "d2",
        "d1",
        "c4",
        "b4",
        "a4",
        "e4",
    }


def test_bishop_and_queen_rays() -> None:
    b = Board.from_diagram(
        [
            "k.......",
            "........",
            "........",
            "........",
            "...B....",
            "........",
            ".....P..",
            "Q......K",
        ]
    )
    bishop = names(legal_moves(b, sq("d4")))
    assert bishop == {"c5", "b6", "a7", "e5", "f6", "g7", "h8", "c3", "b2", "e3"}
    queen = names(legal_moves(b, sq("a1")))
    # a8 holds the black king; the bishop on d4 stops the diagonal
    a_file = {"a2", "a3", "a4", "a5", "a6", "a7"}
    first_rank = {"b1", "c1", "d1", "e1", "f1", "g1"}
    assert queen == a_file | first_rank | {"b2", "c3"}


def test_pawn_pushes_and_captures() -> None:
    b = Board.from_diagram(
        [
            "....k...",
            "........",
            "........",
            "........",
            "........",
            "...r.p..",
            "....P...",
            "....K...",
        ]
    )
    assert names(legal_moves(b, sq("e2"))) == {"e3", "e4", "d3", "f3"}
    blocked = Board.from_diagram(
        [
            "....k...",
            "........",
            "........",
            "........",
            "........",
            "....n...",
            "....P...",
            "....K...",
        ]
    )
    assert legal_moves(blocked, sq("e2")) == []


def test_pinned_piece_cannot_move() -> None:
    b = Board.from_diagram(
        [
            "k...r...",
            "........",
            "........",
            "........",
            "........",
            "........",
            "....B...",
            "....K...",
        ]
    )
    assert legal_moves(b, sq("e2")) == []
    assert names(legal_moves(b, sq("e1"))) == {"d1", "f1", "d2", "f2"}


def test_king_squares_are_never_legal_destinations() -> None:
    b = Board.from_diagram(
        [
            "....k...",
            "........",
            "........",
            "........",
            "....R...",
            "........",
            "........",
            "K.......",
        ]
    )
    assert sq("e8") in pseudo_legal_moves(b, sq("e4"))
    assert sq("e8") not in legal_moves(b, sq("e4"))


def test_legal_moves_leave_board_unchanged() -> None:
    b = Board.startpos()
    before = b.copy()
    all_legal_moves(b, WHITE)
    all_legal_moves(b, BLACK)
    assert b == before


def test_en_passant_requires_adjacent_double_step() -> None:
    b = Board.from_diagram(
        [
            "....k...",
            "...p....",
            "........",
            "....P...",
            "........",
            "........",
            "........",
            "....K...",
        ]
    )
    apply_move(b, sq("d7"), sq("d5"))
    double_step = Move(sq("d7"), sq("d5"))
    assert sq("d6") in legal_moves(b, sq("e5"), double_step)
    assert sq("d6") not in legal_moves(b, sq("e5"))
    assert sq("d6") not in legal_moves(b, sq("e5"), Move(sq("e1"), sq("e2")))

    outcome = apply_move(b, sq("e5"), sq("d6"))
    assert outcome.is_en_passant
    assert outcome.captured_sq == sq("d5")
    assert b.get(sq("d5")) is None
    assert b.get(sq("d6")).color == WHITE


def test_en_passant_offered_right_after_double_step() -> None:
    game = replay(_OPENING + [("h7", "h6"), ("d7", "d5")])
    assert game.request_move(sq("e5"), sq("d6"))
    assert game.captured[BLACK][0].kind == "pawn"
    assert game.notation[-1].notation == "exd6"


def test_en_passant_expires_after_another_move() -> None:
    game = replay(_OPENING + [("d7", "d5"), ("h7", "h6")])
    assert not game.request_move(sq("e5"), sq("d6"))
    assert sq("d6") not in game.legal_moves_from(sq("e5"))


def test_square_attack_by_pawns_is_directional() -> None:
    b = Board.from_diagram(
        [
            "....k...",
            "........",
            "........",
            "...p....",
            "....P...",
            "........",
            "........",
            "....K...",
        ]
    )
    assert is_square_attacked(b, sq("d5"), WHITE)
    assert is_square_attacked(b, sq("f5"), WHITE)
    assert not is_square_attacked(b, sq("e5"), WHITE)
    assert is_square_attacked(b, sq("e4"), BLACK)
    assert is_square_attacked(b, sq("c4"), BLACK)
    assert not is_square_attacked(b, sq("d4"), BLACK)


def test_sliding_attack_is_blocked() -> None:
    b = Board.from_diagram(
        [
            "....k...",
            "........",
            "........",
            "........",
            "........",
            "........",
            "....P...",
            "....RK..",
        ]
    )
    assert not is_square_attacked(b, sq("e8"), WHITE)
    assert is_square_attacked(b, sq("a1"), WHITE)
    assert not is_in_check(b, BLACK)


def test_check_oracle_without_king_and_with_two_kings() -> None:
    no_black_king = Board.from_diagram([EMPTY] * 7 + ["R...K..."])
    assert find_king(no_black_king, BLACK) is None
    assert not is_in_check(no_black_king, BLACK)

    two_kings = Board.from_diagram(["....k..."] + [EMPTY] * 6 + ["K...K..."])
    with pytest.raises(InvariantViolation):
        is_in_check(two_kings, WHITE)


def test_no_legal_moves_means_mate_or_stalemate() -> None:
    mate = Board.from_diagram(["R......k", "......pp"] + [EMPTY] * 5 + ["......K."])
    assert is_in_check(mate, BLACK)
    assert not has_any_legal_move(mate, BLACK)

    stalemate = Board.from_diagram(["k.......", "..Q....."] + [EMPTY] * 5 + ["....K..."])
    assert not is_in_check(stalemate, BLACK)
    assert not has_any_legal_move(stalemate, BLACK)
    assert has_any_legal_move(stalemate, WHITE)


def test_selectable_moves_match_legality_filter() -> None:
    game = Game.new()
    selectable = game.selectable_moves()
    assert len(selectable) == 10
    assert sum(len(d) for d in selectable.values()) == 20
