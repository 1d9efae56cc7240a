#!/usr/bin/env python3
# ruff: noqa: E402
from __future__ import annotations

import argparse
import json
import os
import platform
import subprocess
import sys
import time
from collections import Counter
from typing import Any, Dict, List, Optional

# Ensure repo root (which contains `royalchess/`) is importable when running directly
REPO_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)

from royalchess.engine.game import TWO_PLAYER, Game


def _git_info() -> Dict[str, Optional[str]]:
    def run(cmd: List[str]) -> Optional[str]:
        try:
            out = subprocess.check_output(cmd, cwd=REPO_ROOT, stderr=subprocess.DEVNULL)
            return out.decode().strip()
        except (OSError, subprocess.CalledProcessError):
            return None

    return {
        "commit": run(["git", "rev-parse", "HEAD"]),
        "describe": run(["git", "describe", "--dirty", "--tags", "--always"]),
    }


def play_game(seed: int, max_turns: int) -> Dict[str, Any]:
    """Let the random bot play both sides until the game ends or the turn cap."""
    game = Game.new(TWO_PLAYER, seed=seed)
    t0 = time.perf_counter()
    while not game.is_over and game.turn.turn_number <= max_turns:
        if not game.request_bot_move():
            break
    dt_ms = int((time.perf_counter() - t0) * 1000)
    return {
        "seed": seed,
        "status": game.turn.status,
        "winner": game.turn.winner,
        "turns": game.turn.turn_number,
        "moves": len(game.notation),
        "captured": {c: len(p) for c, p in game.captured.items()},
        "time_ms": dt_ms,
        "notation": [n.notation for n in game.notation],
    }


def main() -> None:
    parser = argparse.ArgumentParser(description="Run random-bot self-play games")
    parser.add_argument("--games", type=int, default=10, help="Number of games to play")
    parser.add_argument("--seed", type=int, default=0, help="Seed of the first game")
    parser.add_argument("--max-turns", type=int, default=300, help="Stop a game after N turns")
    parser.add_argument("--out", type=str, default=None, help="Write JSON results to file path")
    parser.add_argument("--pretty", action="store_true", help="Pretty-print JSON output")
    parser.add_argument(
        "--progress", action="store_true", help="Print per-game progress to stderr"
    )
    args = parser.parse_args()

    results: List[Dict[str, Any]] = []
    t0 = time.perf_counter()
    for idx in range(max(1, args.games)):
        seed = args.seed + idx
        res = play_game(seed, args.max_turns)
        results.append(res)
        if args.progress:
            sys.stderr.write(
                f"[{idx + 1}/{args.games}] seed={seed} status={res['status']} "
                f"winner={res['winner']} turns={res['turns']} time={res['time_ms']}ms\n"
            )
            sys.stderr.flush()

    dt_ms = int((time.perf_counter() - t0) * 1000)
    outcomes = Counter(r["status"] if r["winner"] is None else r["winner"] for r in results)

    payload = {
        "meta": {
            "timestamp": time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime()),
            "python": sys.version.split()[0],
            "platform": platform.platform(),
            "git": _git_info(),
            "config": {"games": len(results), "seed": args.seed, "max_turns": args.max_turns},
        },
        "results": results,
        "summary": {
            "games": len(results),
            "outcomes": dict(outcomes),
            "total_time_ms": dt_ms,
            "avg_moves": sum(r["moves"] for r in results) / max(1, len(results)),
        },
    }

    if args.out:
        out_path = args.out
        os.makedirs(os.path.dirname(out_path) or ".", exist_ok=True)
        with open(out_path, "w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2 if args.pretty else None)
        print(out_path)
    else:
        print(json.dumps(payload, indent=2 if args.pretty else None))


if __name__ == "__main__":
    main()
