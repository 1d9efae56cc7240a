from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .board import KING, PAWN, WHITE, Board, Piece
from .move import PROMOTION_KINDS, Coord


@dataclass(frozen=True)
class MoveOutcome:
    """What `apply_move` did, with enough detail to reverse it.

    Attributes:
        from_sq (Coord): Origin square.
        to_sq (Coord): Destination square.
        moved_piece (Piece): The piece as it stood before moving.
        captured (Optional[Piece]): Captured piece, if any.
        captured_sq (Optional[Coord]): Where the captured piece stood
            (differs from ``to_sq`` for en passant).
        is_en_passant (bool): Pawn captured diagonally onto an empty square.
        is_castle (bool): King moved two files.
        rook_from (Optional[Coord]): Castling rook origin.
        rook_to (Optional[Coord]): Castling rook destination.
        rook (Optional[Piece]): Castling rook before it moved.
        pending_promotion (bool): A pawn reached the last rank and waits
            for a promotion kind.
    """

    from_sq: Coord
    to_sq: Coord
    moved_piece: Piece
    captured: Optional[Piece] = None
    captured_sq: Optional[Coord] = None
    is_en_passant: bool = False
    is_castle: bool = False
    rook_from: Optional[Coord] = None
    rook_to: Optional[Coord] = None
    rook: Optional[Piece] = None
    pending_promotion: bool = False

    @property
    def was_capture(self) -> bool:
        return self.captured is not None


def apply_move(board: Board, from_sq: Coord, to_sq: Coord) -> MoveOutcome:
    """Apply a move to `board` in place.

    The move is assumed to be legal; the caller validates it first.

    Handles en passant (the passed pawn is removed from the origin row),
    castling (the rook jumps beside the king) and marks the moved piece as
    moved. A pawn arriving on the far rank stays a pawn and the outcome
    reports ``pending_promotion``; see `promote`.

    Raises:
        ValueError: If ``from_sq`` is empty.
    """
    piece = board.get(from_sq)
    if piece is None:
        raise ValueError("no piece to move from from_sq")
    fr, fc = from_sq
    tr, tc = to_sq

    captured = board.get(to_sq)
    captured_sq: Optional[Coord] = to_sq if captured is not None else None
    is_en_passant = False
    if piece.kind == PAWN and captured is None and fc != tc:
        # En passant: the passed pawn sits on the origin row, destination file
        captured_sq = (fr, tc)
        captured = board.get(captured_sq)
        board.set(captured_sq, None)
        is_en_passant = True

    rook_from: Optional[Coord] = None
    rook_to: Optional[Coord] = None
    rook: Optional[Piece] = None
    is_castle = piece.kind == KING and abs(tc - fc) == 2
    if is_castle:
        kingside = tc > fc
        rook_from = (fr, 7 if kingside else 0)
        rook_to = (fr, 5 if kingside else 3)
        rook = board.get(rook_from)
        board.set(rook_from, None)
        board.set(rook_to, rook.moved() if rook is not None else None)

    board.set(from_sq, None)
    board.set(to_sq, piece.moved())

    last_rank = 0 if piece.color == WHITE else 7
    return MoveOutcome(
        from_sq=from_sq,
        to_sq=to_sq,
        moved_piece=piece,
        captured=captured,
        captured_sq=captured_sq,
        is_en_passant=is_en_passant,
        is_castle=is_castle,
        rook_from=rook_from,
        rook_to=rook_to,
        rook=rook,
        pending_promotion=piece.kind == PAWN and tr == last_rank,
    )


def undo_move(board: Board, outcome: MoveOutcome) -> None:
    """Reverse `apply_move` exactly, including ``has_moved`` flags.

    Works whether or not the pawn of a promotion move has been promoted.
    """
    board.set(outcome.to_sq, None)
    board.set(outcome.from_sq, outcome.moved_piece)
    if outcome.captured_sq is not None:
        board.set(outcome.captured_sq, outcome.captured)
    if outcome.is_castle and outcome.rook_from is not None and outcome.rook_to is not None:
        board.set(outcome.rook_to, None)
        board.set(outcome.rook_from, outcome.rook)


def promote(board: Board, square: Coord, kind: str) -> Piece:
    """Replace the pawn on `square` with a piece of `kind`.

    Raises:
        ValueError: If ``kind`` is not a promotion kind or no pawn is there.
    """
    if kind not in PROMOTION_KINDS:
        raise ValueError(f"invalid promotion piece: {kind!r}")
    pawn = board.get(square)
    if pawn is None or pawn.kind != PAWN:
        raise ValueError("no pawn to promote")
    promoted = Piece(kind, pawn.color, has_moved=True)
    board.set(square, promoted)
    return promoted
