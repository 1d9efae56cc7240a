from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


# (row, col); row 0 is rank 8, col 0 is file a
Coord = Tuple[int, int]

FILES = "abcdefgh"

PROMOTION_KINDS = ("queen", "rook", "bishop", "knight")
_PROMOTION_ALIASES = {"q": "queen", "r": "rook", "b": "bishop", "n": "knight"}


@dataclass(frozen=True)
class Move:
    """A move intent between two board coordinates.

    Attributes:
        from_sq (Coord): Origin ``(row, col)``.
        to_sq (Coord): Destination ``(row, col)``.

    Promotion is not part of the intent; the kind is supplied after the
    pawn has landed on the last rank.
    """

    from_sq: Coord
    to_sq: Coord

    def to_str(self) -> str:
        """Serialize the move as two concatenated square names.

        Returns:
            str: Move encoded like ``"e2e4"``.
        """
        return coord_to_str(self.from_sq) + coord_to_str(self.to_sq)


def parse_move(text: str) -> Move:
    """Parse a move written as two square names.

    Args:
        text (str): Move such as ``"e2e4"`` (surrounding whitespace and a
            separating space or dash are tolerated).

    Returns:
        Move: Parsed move.

    Raises:
        ValueError: If the string is not two valid squares.
    """
    cleaned = text.strip().replace(" ", "").replace("-", "")
    if len(cleaned) != 4:
        raise ValueError(f"invalid move: {text!r}")
    return Move(str_to_coord(cleaned[0:2]), str_to_coord(cleaned[2:4]))


def parse_piece_kind(text: str) -> str:
    """Normalize a promotion choice (``"q"`` or ``"queen"``) to a kind name.

    Raises:
        ValueError: If ``text`` does not name a promotion piece.
    """
    key = text.strip().lower()
    kind = _PROMOTION_ALIASES.get(key, key)
    if kind not in PROMOTION_KINDS:
        raise ValueError(f"invalid promotion piece: {text!r}")
    return kind


def str_to_coord(s: str) -> Coord:
    """Convert algebraic notation into a ``(row, col)`` coordinate.

    Args:
        s (str): Square name such as ``"e4"``.

    Returns:
        Coord: Row counted from rank 8, column counted from file a.

    Raises:
        ValueError: If ``s`` is not a valid square.
    """
    if len(s) != 2 or s[0] < "a" or s[0] > "h" or s[1] < "1" or s[1] > "8":
        raise ValueError(f"invalid square: {s!r}")
    col = ord(s[0]) - ord("a")
    row = 8 - int(s[1])
    return (row, col)


def coord_to_str(coord: Coord) -> str:
    """Convert a ``(row, col)`` coordinate into algebraic notation.

    Raises:
        ValueError: If ``coord`` lies outside the board.
    """
    row, col = coord
    if not in_bounds(row, col):
        raise ValueError(f"invalid coordinate: {coord!r}")
    return FILES[col] + str(8 - row)


def in_bounds(row: int, col: int) -> bool:
    return 0 <= row < 8 and 0 <= col < 8
