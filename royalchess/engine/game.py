from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional, Tuple

from .board import COLORS, KIND_ORDER_CAPTURED, BLACK, WHITE, Board, Piece, opponent
from .errors import InvariantViolation
from .executor import MoveOutcome, apply_move, promote
from .history import HistoryLedger, NotationEntry, Snapshot
from .move import Coord, Move, coord_to_str, in_bounds, parse_piece_kind, str_to_coord
from .movegen import is_in_check, legal_moves
from .notation import move_notation
from .turns import (
    CHECKMATE,
    TIMEOUT,
    TurnState,
    after_move,
    end_turn,
    status_message,
    time_out,
    turn_complete,
)
from ..search.random_bot import RandomBot


logger = logging.getLogger(__name__)

SOLO = "solo"
TWO_PLAYER = "two-player"
MODES = (SOLO, TWO_PLAYER)


@dataclass(frozen=True)
class PendingPromotion:
    """A pawn standing on the last rank, waiting for its new kind."""

    outcome: MoveOutcome

    @property
    def square(self) -> Coord:
        return self.outcome.to_sq

    @property
    def color(self) -> str:
        return self.outcome.moved_piece.color

    @property
    def origin(self) -> Coord:
        return self.outcome.from_sq

    @property
    def was_capture(self) -> bool:
        return self.outcome.was_capture


@dataclass(frozen=True)
class GameView:
    """Read-only picture of a game for presentation layers."""

    board: List[str]
    turn: TurnState
    status_message: str
    notation: List[NotationEntry]
    captured: Dict[str, List[str]]
    last_move: Optional[Move]
    pending_promotion: Optional[Coord]
    selectable: Dict[Coord, List[Coord]]
    history_size: int


def _empty_captured() -> Dict[str, List[Piece]]:
    return {WHITE: [], BLACK: []}


@dataclass
class Game:
    """The single mutable owner of a two-move chess game.

    Responsibility: validate and apply move requests, run the turn state
    machine, keep the undo ledger and the display state (notation, captured
    pieces, last move). All mutation goes through the ``request_*``,
    ``resolve_promotion`` and ``report_timeout`` methods; each returns
    ``True`` when accepted and ``False`` (with no state change) otherwise.
    """

    board: Board = field(default_factory=Board.startpos)
    mode: str = TWO_PLAYER
    turn: TurnState = field(default_factory=TurnState)
    last_move: Optional[Move] = None
    captured: Dict[str, List[Piece]] = field(default_factory=_empty_captured)
    notation: List[NotationEntry] = field(default_factory=list)
    pending_promotion: Optional[PendingPromotion] = None
    history: HistoryLedger = field(default_factory=HistoryLedger, repr=False)
    bot: RandomBot = field(default_factory=RandomBot, repr=False)

    @classmethod
    def new(cls, mode: str = TWO_PLAYER, *, seed: Optional[int] = None) -> "Game":
        if mode not in MODES:
            raise ValueError(f"invalid mode: {mode!r}")
        return cls(mode=mode, bot=RandomBot(random.Random(seed)))

    # --- Queries ---
    @property
    def is_over(self) -> bool:
        return self.turn.is_over

    def legal_moves_from(self, coord: Coord) -> List[Coord]:
        """Legal destinations for the piece on `coord` if it may move now."""
        if not self._selectable(coord):
            return []
        return legal_moves(self.board, coord, self.last_move)

    def selectable_moves(self) -> Dict[Coord, List[Coord]]:
        result: Dict[Coord, List[Coord]] = {}
        for sq, _ in list(self.board.pieces(self.turn.side_to_move)):
            dests = self.legal_moves_from(sq)
            if dests:
                result[sq] = dests
        return result

    def status_message(self) -> str:
        return status_message(self.turn, solo=self.mode == SOLO)

    def view(self) -> GameView:
        return GameView(
            board=self.board.to_diagram(),
            turn=self.turn,
            status_message=self.status_message(),
            notation=list(self.notation),
            captured={c: [p.kind for p in self.captured[c]] for c in COLORS},
            last_move=self.last_move,
            pending_promotion=self.pending_promotion.square if self.pending_promotion else None,
            selectable=self.selectable_moves(),
            history_size=len(self.history),
        )

    # --- Mutations ---
    def request_move(self, from_sq: Coord, to_sq: Coord) -> bool:
        if not (in_bounds(*from_sq) and in_bounds(*to_sq)):
            return self._reject("move", "coordinates off the board")
        if self.turn.is_over:
            return self._reject("move", f"game is over ({self.turn.status})")
        if self.pending_promotion is not None:
            return self._reject("move", "promotion pending")
        piece = self.board.get(from_sq)
        if piece is None or piece.color != self.turn.side_to_move:
            return self._reject("move", f"{self.board.describe(from_sq)} is not selectable")
        if from_sq in self.turn.pieces_moved_this_turn:
            return self._reject("move", f"{self.board.describe(from_sq)} already moved this turn")
        if to_sq not in legal_moves(self.board, from_sq, self.last_move):
            return self._reject(
                "move", f"{coord_to_str(from_sq)}{coord_to_str(to_sq)} is not a legal move"
            )

        before = self._snapshot()
        outcome = apply_move(self.board, from_sq, to_sq)
        self._check_kings(before)
        self.history.record(
            replace(before, moving_piece=outcome.moved_piece, captured_piece=outcome.captured)
        )
        self.last_move = Move(from_sq, to_sq)
        if outcome.captured is not None:
            self._add_captured(outcome.captured)

        if outcome.pending_promotion:
            self.pending_promotion = PendingPromotion(outcome)
            logger.debug("promotion pending on %s", coord_to_str(to_sq))
            return True
        self._complete_move(outcome)
        return True

    def resolve_promotion(self, kind: str) -> bool:
        pending = self.pending_promotion
        if pending is None:
            return self._reject("promotion", "no promotion pending")
        try:
            kind = parse_piece_kind(kind)
        except ValueError as e:
            return self._reject("promotion", str(e))
        promote(self.board, pending.square, kind)
        self.pending_promotion = None
        self._complete_move(pending.outcome, promotion=kind)
        return True

    def request_undo(self) -> bool:
        if self.turn.status == TIMEOUT:
            return self._reject("undo", "game ended on time")
        snapshot = self.history.undo()
        if snapshot is None:
            return self._reject("undo", "no moves to undo")
        self._restore(snapshot)
        return True

    def request_reset(self) -> bool:
        self.board = Board.startpos()
        self.turn = TurnState()
        self.last_move = None
        self.captured = _empty_captured()
        self.notation = []
        self.pending_promotion = None
        self.history.clear()
        logger.info("game reset")
        return True

    def report_timeout(self, color: str) -> bool:
        if color not in COLORS:
            return self._reject("timeout", f"invalid color {color!r}")
        if self.turn.is_over:
            return self._reject("timeout", f"game is over ({self.turn.status})")
        self.pending_promotion = None
        self.turn = time_out(self.turn, color)
        logger.info("%s ran out of time; %s wins", color, opponent(color))
        return True

    def request_bot_move(self) -> bool:
        """Let the bot play one move for the side to move."""
        if self.turn.is_over or self.pending_promotion is not None:
            return self._reject("bot move", "game is over or a promotion is pending")
        choice = self.bot.choose_move(
            self.board, self.turn.pieces_moved_this_turn, self.turn.side_to_move, self.last_move
        )
        if choice is None:
            return self._reject("bot move", "bot found no legal move")
        accepted = self.request_move(choice.from_sq, choice.to_sq)
        if accepted and self.pending_promotion is not None:
            self.resolve_promotion(self.bot.choose_promotion())
        return accepted

    # --- Internals ---
    def _selectable(self, coord: Coord) -> bool:
        if not in_bounds(*coord) or self.turn.is_over or self.pending_promotion is not None:
            return False
        piece = self.board.get(coord)
        return (
            piece is not None
            and piece.color == self.turn.side_to_move
            and coord not in self.turn.pieces_moved_this_turn
        )

    def _complete_move(self, outcome: MoveOutcome, promotion: Optional[str] = None) -> None:
        mover = self.turn.side_to_move
        played_in_turn = self.turn.turn_number
        self.turn = after_move(self.turn, outcome.to_sq)
        if turn_complete(self.turn, self.board, self.last_move):
            self.turn = end_turn(self.turn, self.board, self.last_move)
        text = move_notation(
            outcome,
            promotion=promotion,
            gives_check=is_in_check(self.board, opponent(mover)),
            is_checkmate=self.turn.status == CHECKMATE,
        )
        self.notation.append(NotationEntry(text, mover, played_in_turn))

    def _add_captured(self, piece: Piece) -> None:
        bucket = self.captured[piece.color]
        bucket.append(piece)
        bucket.sort(key=lambda p: KIND_ORDER_CAPTURED.index(p.kind))

    def _check_kings(self, before: Snapshot) -> None:
        """Raise if a color lacks exactly one king, restoring ``before`` first."""
        for color in COLORS:
            kings = self.board.find_kings(color)
            if len(kings) != 1:
                logger.error("%s has %d kings after a move", color, len(kings))
                self._restore(before)
                raise InvariantViolation(f"{color} has {len(kings)} kings after a move")

    def _snapshot(self) -> Snapshot:
        return Snapshot(
            board=self.board.copy(),
            turn=self.turn,
            last_move=self.last_move,
            captured={c: tuple(self.captured[c]) for c in COLORS},
            notation=tuple(self.notation),
        )

    def _restore(self, snapshot: Snapshot) -> None:
        self.board = snapshot.board.copy()
        self.turn = snapshot.turn
        self.last_move = snapshot.last_move
        self.captured = {c: list(snapshot.captured[c]) for c in COLORS}
        self.notation = list(snapshot.notation)
        self.pending_promotion = None

    def _reject(self, action: str, reason: str) -> bool:
        logger.debug("%s rejected: %s", action, reason)
        return False


def replay(moves: List[Tuple[str, str]], mode: str = TWO_PLAYER) -> Game:
    """Build a game by playing ``(from, to)`` square-name pairs in order.

    Raises:
        ValueError: If a move is rejected.
    """
    game = Game.new(mode)
    for frm, to in moves:
        if not game.request_move(str_to_coord(frm), str_to_coord(to)):
            raise ValueError(f"move {frm}{to} rejected")
    return game
