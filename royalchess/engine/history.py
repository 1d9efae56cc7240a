from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from .board import Board, Piece
from .move import Move
from .turns import TurnState


@dataclass(frozen=True)
class NotationEntry:
    notation: str
    player: str
    move_number: int


@dataclass(frozen=True)
class Snapshot:
    """Everything needed to put a game back to the instant before a move."""

    board: Board
    turn: TurnState
    last_move: Optional[Move]
    captured: Dict[str, Tuple[Piece, ...]]
    notation: Tuple[NotationEntry, ...]
    moving_piece: Optional[Piece] = None
    captured_piece: Optional[Piece] = None


class HistoryLedger:
    """LIFO stack of pre-move snapshots. No redo."""

    def __init__(self) -> None:
        self._stack: List[Snapshot] = []

    def record(self, snapshot: Snapshot) -> None:
        self._stack.append(snapshot)

    def undo(self) -> Optional[Snapshot]:
        """Pop the latest snapshot; ``None`` when the ledger is empty."""
        if not self._stack:
            return None
        return self._stack.pop()

    def clear(self) -> None:
        self._stack.clear()

    def __len__(self) -> int:
        return len(self._stack)
