from __future__ import annotations

import logging
from typing import AbstractSet, List, Optional

from .board import BISHOP, KING, KNIGHT, PAWN, QUEEN, ROOK, WHITE, Board, Piece, opponent
from .errors import InvariantViolation
from .executor import apply_move, undo_move
from .move import Coord, Move, in_bounds


logger = logging.getLogger(__name__)

ROOK_DIRS = ((-1, 0), (0, 1), (1, 0), (0, -1))
BISHOP_DIRS = ((-1, -1), (-1, 1), (1, -1), (1, 1))
QUEEN_DIRS = ROOK_DIRS + BISHOP_DIRS
KNIGHT_OFFSETS = ((-2, -1), (-2, 1), (-1, -2), (-1, 2), (1, -2), (1, 2), (2, -1), (2, 1))
KING_OFFSETS = QUEEN_DIRS


def pawn_direction(color: str) -> int:
    return -1 if color == WHITE else 1


def pawn_home_row(color: str) -> int:
    return 6 if color == WHITE else 1


# --- Move generator ---
def pseudo_legal_moves(
    board: Board,
    coord: Coord,
    last_move: Optional[Move] = None,
) -> List[Coord]:
    """Return destinations that are geometrically valid for the piece on `coord`.

    Does not consider whether the mover's own king ends up in check.

    Args:
        board (Board): Position to inspect; not modified.
        coord (Coord): Square of the piece to move.
        last_move (Optional[Move]): Previously applied move, consulted only
            for the en passant precondition.

    Returns:
        List[Coord]: Destination squares; empty when ``coord`` is empty.
    """
    piece = board.get(coord)
    if piece is None:
        return []
    if piece.kind == PAWN:
        return _pawn_moves(board, coord, piece, last_move)
    if piece.kind == ROOK:
        return _slide(board, coord, piece, ROOK_DIRS)
    if piece.kind == BISHOP:
        return _slide(board, coord, piece, BISHOP_DIRS)
    if piece.kind == QUEEN:
        return _slide(board, coord, piece, QUEEN_DIRS)
    if piece.kind == KNIGHT:
        return _step(board, coord, piece, KNIGHT_OFFSETS)
    return _step(board, coord, piece, KING_OFFSETS) + _castling_moves(board, coord, piece)


def _pawn_moves(board: Board, coord: Coord, piece: Piece, last_move: Optional[Move]) -> List[Coord]:
    moves: List[Coord] = []
    row, col = coord
    d = pawn_direction(piece.color)
    ahead = row + d
    if not in_bounds(ahead, col):
        return moves

    # Pushes
    if board.get((ahead, col)) is None:
        moves.append((ahead, col))
        two = row + 2 * d
        if row == pawn_home_row(piece.color) and board.get((two, col)) is None:
            moves.append((two, col))

    # Captures
    for dc in (-1, 1):
        c = col + dc
        if not in_bounds(ahead, c):
            continue
        target = board.get((ahead, c))
        if target is not None and target.color != piece.color:
            moves.append((ahead, c))

    # En passant: previous move was an enemy pawn double step landing beside us
    if last_move is not None:
        (lfr, _), (ltr, ltc) = last_move.from_sq, last_move.to_sq
        passed = board.get(last_move.to_sq)
        if (
            abs(lfr - ltr) == 2
            and passed is not None
            and passed.kind == PAWN
            and passed.color != piece.color
            and ltr == row
            and abs(ltc - col) == 1
            and board.get((ahead, ltc)) is None
        ):
            moves.append((ahead, ltc))
    return moves


def _slide(board: Board, coord: Coord, piece: Piece, dirs) -> List[Coord]:
    moves: List[Coord] = []
    row, col = coord
    for dr, dc in dirs:
        r, c = row + dr, col + dc
        while in_bounds(r, c):
            target = board.get((r, c))
            if target is None:
                moves.append((r, c))
            else:
                if target.color != piece.color:
                    moves.append((r, c))
                break
            r += dr
            c += dc
    return moves


def _step(board: Board, coord: Coord, piece: Piece, offsets) -> List[Coord]:
    moves: List[Coord] = []
    row, col = coord
    for dr, dc in offsets:
        r, c = row + dr, col + dc
        if not in_bounds(r, c):
            continue
        target = board.get((r, c))
        if target is None or target.color != piece.color:
            moves.append((r, c))
    return moves


def _castling_moves(board: Board, coord: Coord, king: Piece) -> List[Coord]:
    row, col = coord
    if king.has_moved or col != 4 or row != (7 if king.color == WHITE else 0):
        return []
    enemy = opponent(king.color)
    if is_square_attacked(board, coord, enemy):
        return []
    moves: List[Coord] = []
    # (rook col, squares that must be empty, king transit col, king destination col)
    for rook_col, between, transit, dest in (
        (7, range(col + 1, 7), col + 1, col + 2),
        (0, range(1, col), col - 1, col - 2),
    ):
        rook = board.get((row, rook_col))
        if rook is None or rook.kind != ROOK or rook.color != king.color or rook.has_moved:
            continue
        if any(board.get((row, c)) is not None for c in between):
            continue
        if _king_safe_on(board, coord, (row, transit), king.color) and _king_safe_on(
            board, coord, (row, dest), king.color
        ):
            moves.append((row, dest))
    return moves


def _king_safe_on(board: Board, king_sq: Coord, probe_sq: Coord, color: str) -> bool:
    # Probe board: king standing on probe_sq, everything else unchanged
    displaced = board.relocate(king_sq, probe_sq)
    try:
        return not is_square_attacked(board, probe_sq, opponent(color))
    finally:
        board.relocate(probe_sq, king_sq)
        board.set(probe_sq, displaced)


# --- Check oracle ---
def is_square_attacked(board: Board, target: Coord, by_color: str) -> bool:
    """Return True if any piece of `by_color` could move onto `target`.

    Scans outward from ``target``; the reach matches each attacker's
    pseudo-legal moves (castling and pawn pushes never capture).
    """
    row, col = target

    # Pawns attack diagonally forward, so look one row behind the target
    pr = row - pawn_direction(by_color)
    for dc in (-1, 1):
        if in_bounds(pr, col + dc):
            p = board.get((pr, col + dc))
            if p is not None and p.color == by_color and p.kind == PAWN:
                return True

    for kind, offsets in ((KNIGHT, KNIGHT_OFFSETS), (KING, KING_OFFSETS)):
        for dr, dc in offsets:
            r, c = row + dr, col + dc
            if in_bounds(r, c):
                p = board.get((r, c))
                if p is not None and p.color == by_color and p.kind == kind:
                    return True

    for dirs, sliders in ((ROOK_DIRS, (ROOK, QUEEN)), (BISHOP_DIRS, (BISHOP, QUEEN))):
        for dr, dc in dirs:
            r, c = row + dr, col + dc
            while in_bounds(r, c):
                p = board.get((r, c))
                if p is not None:
                    if p.color == by_color and p.kind in sliders:
                        return True
                    break
                r += dr
                c += dc
    return False


def find_king(board: Board, color: str) -> Optional[Coord]:
    """Locate the unique king of `color`.

    Returns:
        Optional[Coord]: King square, or ``None`` when no king is present.

    Raises:
        InvariantViolation: If more than one king of ``color`` is present.
    """
    kings = board.find_kings(color)
    if len(kings) > 1:
        logger.error("board holds %d %s kings", len(kings), color)
        raise InvariantViolation(f"board holds {len(kings)} {color} kings")
    return kings[0] if kings else None


def is_in_check(board: Board, color: str) -> bool:
    """Return True if the king of `color` is attacked; False without a king."""
    ksq = find_king(board, color)
    if ksq is None:
        return False
    return is_square_attacked(board, ksq, opponent(color))


# --- Legality filter ---
def legal_moves(board: Board, coord: Coord, last_move: Optional[Move] = None) -> List[Coord]:
    """Return pseudo-legal destinations that keep the mover's king safe.

    Each candidate is made and unmade on ``board`` itself; the board is
    unchanged on return. Destinations holding a king are never legal.
    """
    piece = board.get(coord)
    if piece is None:
        return []
    result: List[Coord] = []
    for to_sq in pseudo_legal_moves(board, coord, last_move):
        target = board.get(to_sq)
        if target is not None and target.kind == KING:
            continue
        outcome = apply_move(board, coord, to_sq)
        try:
            safe = not is_in_check(board, piece.color)
        finally:
            undo_move(board, outcome)
        if safe:
            result.append(to_sq)
    return result


def all_legal_moves(
    board: Board,
    color: str,
    last_move: Optional[Move] = None,
    exclude: AbstractSet[Coord] = frozenset(),
) -> List[Move]:
    """Return every legal move for `color`, skipping pieces on `exclude`."""
    moves: List[Move] = []
    for sq, _ in list(board.pieces(color)):
        if sq in exclude:
            continue
        moves.extend(Move(sq, to) for to in legal_moves(board, sq, last_move))
    return moves


def has_any_legal_move(
    board: Board,
    color: str,
    last_move: Optional[Move] = None,
    exclude: AbstractSet[Coord] = frozenset(),
) -> bool:
    for sq, _ in list(board.pieces(color)):
        if sq not in exclude and legal_moves(board, sq, last_move):
            return True
    return False
