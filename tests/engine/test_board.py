from __future__ import annotations

import pytest

from royalchess.engine.board import BLACK, KING, PAWN, STARTPOS_DIAGRAM, WHITE, Board, Piece
from royalchess.engine.move import Move, coord_to_str, parse_move, parse_piece_kind, str_to_coord


def test_square_names_map_to_row_col() -> None:
    assert str_to_coord("a8") == (0, 0)
    assert str_to_coord("e4") == (4, 4)
    assert str_to_coord("h1") == (7, 7)
    assert coord_to_str((6, 4)) == "e2"
    for bad in ("", "e", "i1", "a9", "a0", "e44"):
        with pytest.raises(ValueError):
            str_to_coord(bad)
    with pytest.raises(ValueError):
        coord_to_str((8, 0))


def test_parse_move_accepts_separators() -> None:
    expected = Move((6, 4), (4, 4))
    assert parse_move("e2e4") == expected
    assert parse_move(" e2-e4 ") == expected
    assert parse_move("e2 e4") == expected
    assert expected.to_str() == "e2e4"
    with pytest.raises(ValueError):
        parse_move("e2e9")
    with pytest.raises(ValueError):
        parse_move("e2")


def test_parse_piece_kind_aliases() -> None:
    assert parse_piece_kind("q") == "queen"
    assert parse_piece_kind("N") == "knight"
    assert parse_piece_kind("Rook") == "rook"
    for bad in ("king", "pawn", "x", ""):
        with pytest.raises(ValueError):
            parse_piece_kind(bad)


def test_startpos_layout() -> None:
    b = Board.startpos()
    assert b.to_diagram() == list(STARTPOS_DIAGRAM)
    assert b.get(str_to_coord("e1")) == Piece(KING, WHITE)
    assert b.get(str_to_coord("d7")) == Piece(PAWN, BLACK)
    assert b.get(str_to_coord("e4")) is None
    assert len(list(b.pieces(WHITE))) == 16
    assert len(list(b.pieces(BLACK))) == 16
    assert b.find_kings(BLACK) == [str_to_coord("e8")]


def test_from_diagram_validation() -> None:
    with pytest.raises(ValueError):
        Board.from_diagram(["........"] * 7)
    with pytest.raises(ValueError):
        Board.from_diagram(["......."] + ["........"] * 7)
    with pytest.raises(ValueError):
        Board.from_diagram(["...x...."] + ["........"] * 7)
    with pytest.raises(ValueError):
        Board.from_diagram(["........"] * 8, moved=["e1"])


def test_from_diagram_marks_moved_pieces() -> None:
    b = Board.from_diagram(STARTPOS_DIAGRAM, moved=["e1", "h8"])
    assert b.get(str_to_coord("e1")).has_moved
    assert b.get(str_to_coord("h8")).has_moved
    assert not b.get(str_to_coord("a1")).has_moved


def test_copy_is_independent_and_compares_by_value() -> None:
    b = Board.startpos()
    c = b.copy()
    assert c == b
    c.relocate(str_to_coord("e2"), str_to_coord("e4"))
    assert c != b
    assert b.get(str_to_coord("e2")) == Piece(PAWN, WHITE)


def test_render_labels_ranks_and_files() -> None:
    lines = Board.startpos().render().splitlines()
    assert lines[0] == "8 r n b q k b n r"
    assert lines[7] == "1 R N B Q K B N R"
    assert lines[8] == "  a b c d e f g h"


def test_describe_square() -> None:
    b = Board.startpos()
    assert b.describe(str_to_coord("g1")) == "white knight on g1"
    assert b.describe(str_to_coord("e5")) == "empty e5"
