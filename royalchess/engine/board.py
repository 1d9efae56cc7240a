from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple

from .move import Coord, coord_to_str, str_to_coord


WHITE = "white"
BLACK = "black"
COLORS = (WHITE, BLACK)

PAWN, ROOK, KNIGHT, BISHOP, QUEEN, KING = "pawn", "rook", "knight", "bishop", "queen", "king"
KINDS = (PAWN, ROOK, KNIGHT, BISHOP, QUEEN, KING)
KIND_TO_CHAR = {
    PAWN: "p",
    ROOK: "r",
    KNIGHT: "n",
    BISHOP: "b",
    QUEEN: "q",
    KING: "k",
}
CHAR_TO_KIND = {v: k for k, v in KIND_TO_CHAR.items()}
# Captured pieces are listed in this order, not in capture order
KIND_ORDER_CAPTURED = (BISHOP, KING, KNIGHT, PAWN, QUEEN, ROOK)

EMPTY_CHAR = "."
STARTPOS_DIAGRAM = (
    "rnbqkbnr",
    "pppppppp",
    "........",
    "........",
    "........",
    "........",
    "PPPPPPPP",
    "RNBQKBNR",
)


def opponent(color: str) -> str:
    return BLACK if color == WHITE else WHITE


@dataclass(frozen=True)
class Piece:
    """A chess piece. Immutable; moving it produces a new value."""

    kind: str
    color: str
    has_moved: bool = False

    def moved(self) -> "Piece":
        return replace(self, has_moved=True)

    @property
    def symbol(self) -> str:
        ch = KIND_TO_CHAR[self.kind]
        return ch.upper() if self.color == WHITE else ch


def _empty_grid() -> List[List[Optional[Piece]]]:
    return [[None] * 8 for _ in range(8)]


@dataclass
class Board:
    """8x8 grid of optional pieces.

    Notes:
    - Row 0 is rank 8, row 7 is rank 1; col 0 is file a.
    - Pure data: rules live in ``movegen`` and ``executor``.
    """

    grid: List[List[Optional[Piece]]] = field(default_factory=_empty_grid)

    @classmethod
    def startpos(cls) -> "Board":
        """Create a board initialized to the standard chess starting position."""
        return cls.from_diagram(STARTPOS_DIAGRAM)

    @classmethod
    def from_diagram(cls, rows: Sequence[str], moved: Iterable[str] = ()) -> "Board":
        """Build a board from eight 8-character rows, rank 8 first.

        Args:
            rows (Sequence[str]): Uppercase letters are white pieces,
                lowercase black, ``.`` an empty square.
            moved (Iterable[str]): Square names whose pieces are marked as
                having moved already.

        Raises:
            ValueError: If the diagram is not 8x8 or holds unknown symbols.
        """
        if len(rows) != 8:
            raise ValueError("diagram must have 8 rows")
        board = cls()
        for row, line in enumerate(rows):
            if len(line) != 8:
                raise ValueError(f"diagram row {row} must have 8 squares")
            for col, ch in enumerate(line):
                if ch == EMPTY_CHAR:
                    continue
                kind = CHAR_TO_KIND.get(ch.lower())
                if kind is None:
                    raise ValueError(f"invalid piece in diagram: {ch!r}")
                color = WHITE if ch.isupper() else BLACK
                board.grid[row][col] = Piece(kind, color)
        for name in moved:
            coord = str_to_coord(name)
            piece = board.get(coord)
            if piece is None:
                raise ValueError(f"no piece on {name} to mark as moved")
            board.set(coord, piece.moved())
        return board

    def to_diagram(self) -> List[str]:
        return [
            "".join(p.symbol if p is not None else EMPTY_CHAR for p in row) for row in self.grid
        ]

    def render(self) -> str:
        """Return a text board with rank and file labels, rank 8 on top."""
        lines = []
        for row, line in enumerate(self.to_diagram()):
            lines.append(f"{8 - row} {' '.join(line)}")
        lines.append("  a b c d e f g h")
        return "\n".join(lines)

    def get(self, coord: Coord) -> Optional[Piece]:
        row, col = coord
        return self.grid[row][col]

    def set(self, coord: Coord, piece: Optional[Piece]) -> None:
        row, col = coord
        self.grid[row][col] = piece

    def relocate(self, from_sq: Coord, to_sq: Coord) -> Optional[Piece]:
        """Move whatever stands on ``from_sq`` to ``to_sq`` without any rules.

        Returns:
            Optional[Piece]: The piece previously on ``to_sq``.
        """
        displaced = self.get(to_sq)
        self.set(to_sq, self.get(from_sq))
        self.set(from_sq, None)
        return displaced

    def copy(self) -> "Board":
        # Pieces are immutable, so copying the rows is enough
        return Board(grid=[list(row) for row in self.grid])

    def pieces(self, color: Optional[str] = None) -> Iterator[Tuple[Coord, Piece]]:
        """Yield ``(coord, piece)`` in row-major order, optionally by color."""
        for row in range(8):
            for col in range(8):
                piece = self.grid[row][col]
                if piece is not None and (color is None or piece.color == color):
                    yield (row, col), piece

    def find_kings(self, color: str) -> List[Coord]:
        return [sq for sq, p in self.pieces(color) if p.kind == KING]

    def describe(self, coord: Coord) -> str:
        piece = self.get(coord)
        name = coord_to_str(coord)
        if piece is None:
            return f"empty {name}"
        return f"{piece.color} {piece.kind} on {name}"
