from __future__ import annotations

import argparse
from typing import List, Optional

import uvicorn

from ..config import Settings, configure_logging
from ..engine.clock import GameClock
from ..engine.game import MODES, SOLO, Game
from ..protocol.console.loop import ConsoleSession, run_console


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="royalchess", description="Two-move chess variant")
    parser.add_argument("--log-level", type=str, default=None, help="Logging level (default: INFO)")
    sub = parser.add_subparsers(dest="command")

    serve = sub.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", type=str, default=None)
    serve.add_argument("--port", type=int, default=None)

    play = sub.add_parser("play", help="Play in the terminal")
    play.add_argument("--mode", choices=MODES, default=SOLO)
    play.add_argument("--seed", type=int, default=None, help="Bot RNG seed")
    play.add_argument("--bot-delay-ms", type=int, default=None)
    play.add_argument("--clock-seconds", type=int, default=None)
    play.add_argument("--no-clock", action="store_true", help="Disable the countdown clock")
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    settings = Settings.from_env().merged(log_level=args.log_level)

    if args.command == "play":
        settings = settings.merged(
            bot_seed=args.seed,
            bot_delay_ms=args.bot_delay_ms,
            clock_seconds=args.clock_seconds,
        )
        configure_logging(settings.log_level)
        game = Game.new(args.mode, seed=settings.bot_seed)
        clock = None if args.no_clock else GameClock(game, settings.clock_seconds)
        run_console(ConsoleSession(game, bot_delay_ms=settings.bot_delay_ms, clock=clock))
        return

    # Default command: serve
    settings = settings.merged(
        host=getattr(args, "host", None),
        port=getattr(args, "port", None),
    )
    configure_logging(settings.log_level)
    uvicorn.run(
        "royalchess.protocol.http.app:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
