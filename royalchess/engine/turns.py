from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import FrozenSet, Optional

from .board import BLACK, WHITE, Board, opponent
from .move import Coord, Move
from .movegen import has_any_legal_move, is_in_check


logger = logging.getLogger(__name__)

PLAYING = "playing"
CHECK = "check"
CHECKMATE = "checkmate"
STALEMATE = "stalemate"
TIMEOUT = "timeout"
TERMINAL_STATUSES = frozenset({CHECKMATE, STALEMATE, TIMEOUT})

OPENING_MOVES = 1
MOVES_PER_TURN = 2
CHECK_RESPONSE_MOVES = 1


@dataclass(frozen=True)
class TurnState:
    """Whose turn it is and how much of it is left.

    Attributes:
        side_to_move (str): ``"white"`` or ``"black"``.
        moves_remaining (int): Moves left in the current turn.
        pieces_moved_this_turn (FrozenSet[Coord]): Squares the mover's
            pieces landed on this turn; those pieces cannot move again until
            the side to move changes.
        turn_number (int): 1-based, incremented on every side flip.
        checking_player_retains_moves (bool): Set when a turn ends with the
            opponent in check; cleared once the checked side has answered.
        in_check (Optional[str]): Side placed in check at the last turn end.
        status (str): One of ``playing``, ``check``, ``checkmate``,
            ``stalemate``, ``timeout``.
        winner (Optional[str]): Set for checkmate and timeout.
    """

    side_to_move: str = WHITE
    moves_remaining: int = OPENING_MOVES
    pieces_moved_this_turn: FrozenSet[Coord] = field(default_factory=frozenset)
    turn_number: int = 1
    checking_player_retains_moves: bool = False
    in_check: Optional[str] = None
    status: str = PLAYING
    winner: Optional[str] = None

    @property
    def is_over(self) -> bool:
        return self.status in TERMINAL_STATUSES


def after_move(state: TurnState, landed_on: Coord) -> TurnState:
    """Count one completed move by the side to move."""
    return replace(
        state,
        moves_remaining=state.moves_remaining - 1,
        pieces_moved_this_turn=state.pieces_moved_this_turn | {landed_on},
    )


def turn_complete(state: TurnState, board: Board, last_move: Optional[Move]) -> bool:
    """Return True when the mover has used up the turn.

    The turn is also complete when moves remain but none of the mover's
    pieces that have not moved yet has a legal move.
    """
    if state.moves_remaining <= 0:
        return True
    if has_any_legal_move(board, state.side_to_move, last_move, state.pieces_moved_this_turn):
        return False
    logger.info(
        "%s has no legal move with the remaining pieces; forfeiting %d move(s)",
        state.side_to_move,
        state.moves_remaining,
    )
    return True


def end_turn(state: TurnState, board: Board, last_move: Optional[Move]) -> TurnState:
    """Run the turn-end transition for the side that just moved.

    Order of evaluation:
    1. opponent in check with no legal move: checkmate, mover wins;
    2. opponent not in check with no legal move: stalemate;
    3. opponent in check: opponent gets exactly one move and the mover is
       owed a full turn;
    4. the mover has just answered a check: the checking side gets two moves
       and the owed-turn flag clears;
    5. otherwise two moves.
    """
    mover = state.side_to_move
    opp = opponent(mover)
    opp_in_check = is_in_check(board, opp)
    opp_can_move = has_any_legal_move(board, opp, last_move)

    if not opp_can_move:
        if opp_in_check:
            logger.info("checkmate: %s wins", mover)
            return replace(state, moves_remaining=0, in_check=opp, status=CHECKMATE, winner=mover)
        logger.info("stalemate: %s has no legal move", opp)
        return replace(state, moves_remaining=0, in_check=None, status=STALEMATE, winner=None)

    flipped = replace(
        state,
        side_to_move=opp,
        pieces_moved_this_turn=frozenset(),
        turn_number=state.turn_number + 1,
    )
    if opp_in_check:
        nxt = replace(
            flipped,
            moves_remaining=CHECK_RESPONSE_MOVES,
            checking_player_retains_moves=True,
            in_check=opp,
            status=CHECK,
        )
    elif state.checking_player_retains_moves and state.in_check == mover:
        nxt = replace(
            flipped,
            moves_remaining=MOVES_PER_TURN,
            checking_player_retains_moves=False,
            in_check=None,
            status=PLAYING,
        )
    else:
        nxt = replace(flipped, moves_remaining=MOVES_PER_TURN, in_check=None, status=PLAYING)
    logger.info(
        "turn %d: %s to move with %d move(s)%s",
        nxt.turn_number,
        nxt.side_to_move,
        nxt.moves_remaining,
        " (in check)" if nxt.status == CHECK else "",
    )
    return nxt


def time_out(state: TurnState, loser: str) -> TurnState:
    return replace(state, moves_remaining=0, status=TIMEOUT, winner=opponent(loser))


def _name(color: Optional[str]) -> str:
    return "White" if color == WHITE else "Black"


def _plural(n: int) -> str:
    return f"{n} move{'' if n == 1 else 's'}"


def status_message(state: TurnState, *, solo: bool = False) -> str:
    """Human-readable one-line status for display."""
    if state.status == CHECK:
        if state.checking_player_retains_moves:
            return (
                f"{_name(state.in_check)} is in check! Must resolve with 1 move, "
                f"then {_name(opponent(state.side_to_move))} gets 2 moves."
            )
        return f"{_name(state.in_check)} is in check! {_plural(state.moves_remaining)} to resolve."
    if state.status == CHECKMATE:
        return f"Checkmate! {_name(state.winner)} wins!"
    if state.status == TIMEOUT:
        return f"Time's up! {_name(state.winner)} wins!"
    if state.status == STALEMATE:
        return "Stalemate! It's a draw!"
    player = "Bot" if solo and state.side_to_move == BLACK else _name(state.side_to_move)
    return f"{player}'s turn - {_plural(state.moves_remaining)} remaining (Turn {state.turn_number})"
