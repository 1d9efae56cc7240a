from __future__ import annotations

from typing import Optional

from .board import KNIGHT, PAWN, KIND_TO_CHAR
from .executor import MoveOutcome
from .move import FILES, coord_to_str


def piece_letter(kind: str) -> str:
    # Knight takes "N" so it does not clash with the king
    if kind == KNIGHT:
        return "N"
    return KIND_TO_CHAR[kind].upper()


def move_notation(
    outcome: MoveOutcome,
    *,
    promotion: Optional[str] = None,
    gives_check: bool = False,
    is_checkmate: bool = False,
) -> str:
    """Render an executed move in short algebraic style.

    Examples: ``e4``, ``exd5``, ``Nf3``, ``Qxh7+``, ``O-O``, ``e8=Q#``.
    Checkmate takes precedence over check.
    """
    to = coord_to_str(outcome.to_sq)
    if outcome.is_castle:
        text = "O-O" if outcome.to_sq[1] > outcome.from_sq[1] else "O-O-O"
    elif outcome.moved_piece.kind == PAWN:
        text = f"{FILES[outcome.from_sq[1]]}x{to}" if outcome.was_capture else to
        if promotion is not None:
            text += "=" + piece_letter(promotion)
    else:
        text = piece_letter(outcome.moved_piece.kind) + ("x" if outcome.was_capture else "") + to

    if is_checkmate:
        text += "#"
    elif gives_check:
        text += "+"
    return text
