from __future__ import annotations

import sys
import time
from typing import Callable, Iterable, List, Optional

from ...engine.board import BLACK, COLORS
from ...engine.clock import GameClock
from ...engine.game import SOLO, Game
from ...engine.move import coord_to_str, parse_move, str_to_coord


Writer = Callable[[str], None]
Sleeper = Callable[[float], None]

HELP_TEXT = (
    "commands: show | moves <sq> | move <from><to> | promote <q|r|b|n> | undo | reset"
    " | bot | timeout <white|black> | help | quit"
)


class ConsoleSession:
    """Text command adapter around one game.

    Notes:
    - The engine stays synchronous; the bot delay is applied here.
    - Each command writes one or more lines through the injected writer.
    - In solo mode the bot answers for Black after every accepted move and undo.
    """

    def __init__(
        self,
        game: Optional[Game] = None,
        *,
        bot_delay_ms: int = 0,
        clock: Optional[GameClock] = None,
        sleep: Sleeper = time.sleep,
    ) -> None:
        self.game: Game = game if game is not None else Game.new()
        self.bot_delay_ms = bot_delay_ms
        self.clock = clock
        self._sleep = sleep

    # ---- Command handlers ----
    def cmd_show(self, write: Writer) -> None:
        for line in self.game.board.render().splitlines():
            write(line)
        last = self.game.last_move
        if last is not None:
            write(f"last move: {last.to_str()}")
        if self.game.notation:
            write("notation: " + " ".join(n.notation for n in self.game.notation))
        for color in COLORS:
            taken = self.game.captured[color]
            if taken:
                write(f"captured {color}: " + ", ".join(p.kind for p in taken))
        if self.clock is not None:
            write(f"clock: white {self.clock.format('white')} black {self.clock.format('black')}")
        write(self.game.status_message())

    def cmd_moves(self, args: List[str], write: Writer) -> None:
        if not args:
            write("error: usage: moves <square>")
            return
        try:
            coord = str_to_coord(args[0])
        except ValueError as e:
            write(f"error: {e}")
            return
        dests = [coord_to_str(c) for c in self.game.legal_moves_from(coord)]
        write(f"{args[0]}: {' '.join(dests) if dests else '(none)'}")

    def cmd_move(self, args: List[str], write: Writer) -> None:
        try:
            mv = parse_move("".join(args))
        except ValueError as e:
            write(f"error: {e}")
            return
        if not self.game.request_move(mv.from_sq, mv.to_sq):
            write(f"rejected: {mv.to_str()}")
            return
        if self.game.pending_promotion is not None:
            write("promote with: promote <queen|rook|bishop|knight>")
            return
        self._after_accepted(write)

    def cmd_promote(self, args: List[str], write: Writer) -> None:
        if not args or not self.game.resolve_promotion(args[0]):
            write("rejected: promotion")
            return
        self._after_accepted(write)

    def cmd_undo(self, write: Writer) -> None:
        if not self.game.request_undo():
            write("rejected: nothing to undo")
            return
        self._run_solo_bot(write)
        write(self.game.status_message())

    def cmd_reset(self, write: Writer) -> None:
        self.game.request_reset()
        if self.clock is not None:
            self.clock.reset()
        write(self.game.status_message())

    def cmd_bot(self, write: Writer) -> None:
        if not self._play_bot_move(write):
            write("rejected: bot has no move")
            return
        write(self.game.status_message())

    def cmd_timeout(self, args: List[str], write: Writer) -> None:
        color = args[0].lower() if args else ""
        if not self.game.report_timeout(color):
            write("rejected: timeout")
            return
        write(self.game.status_message())

    # ---- Utilities ----
    def _after_accepted(self, write: Writer) -> None:
        write(f"played {self.game.notation[-1].notation}")
        self._run_solo_bot(write)
        write(self.game.status_message())

    def _run_solo_bot(self, write: Writer) -> None:
        if self.game.mode != SOLO:
            return
        while self.game.turn.side_to_move == BLACK and not self.game.is_over:
            if not self._play_bot_move(write):
                break

    def _play_bot_move(self, write: Writer) -> bool:
        if self.bot_delay_ms > 0:
            self._sleep(self.bot_delay_ms / 1000.0)
        if not self.game.request_bot_move():
            return False
        write(f"bot played {self.game.notation[-1].notation}")
        return True

    def handle(self, line: str, write: Writer) -> bool:
        """Dispatch one command line; return False when the session should end."""
        parts = line.split()
        if not parts:
            return True
        cmd, args = parts[0].lower(), parts[1:]
        if cmd in ("quit", "exit"):
            return False
        if cmd == "show":
            self.cmd_show(write)
        elif cmd == "moves":
            self.cmd_moves(args, write)
        elif cmd == "move":
            self.cmd_move(args, write)
        elif cmd == "promote":
            self.cmd_promote(args, write)
        elif cmd == "undo":
            self.cmd_undo(write)
        elif cmd == "reset":
            self.cmd_reset(write)
        elif cmd == "bot":
            self.cmd_bot(write)
        elif cmd == "timeout":
            self.cmd_timeout(args, write)
        elif cmd == "help":
            write(HELP_TEXT)
        else:
            write(f"unknown command: {cmd}")
        return True


def _default_writer(line: str) -> None:
    sys.stdout.write(line + "\n")
    sys.stdout.flush()


def run_console(session: ConsoleSession, lines: Optional[Iterable[str]] = None) -> None:
    source = sys.stdin if lines is None else lines
    last = time.monotonic()
    session.cmd_show(_default_writer)
    for raw in source:
        if session.clock is not None:
            now = time.monotonic()
            if session.clock.tick(now - last):
                _default_writer(session.game.status_message())
            last = now
        if not session.handle(raw.strip(), _default_writer):
            break
