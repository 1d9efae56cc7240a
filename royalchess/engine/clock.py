from __future__ import annotations

import logging
from typing import Dict, Optional

from .board import BLACK, WHITE
from .game import Game


logger = logging.getLogger(__name__)

DEFAULT_SECONDS = 600.0


class GameClock:
    """Fixed countdown per side that reports timeouts into a game.

    The caller drives time: `tick` charges elapsed seconds to the side to
    move while the game is live. No threads, no wall clock.
    """

    def __init__(self, game: Game, seconds: float = DEFAULT_SECONDS) -> None:
        if seconds <= 0:
            raise ValueError("clock seconds must be > 0")
        self.game = game
        self.initial = float(seconds)
        self.remaining: Dict[str, float] = {WHITE: self.initial, BLACK: self.initial}

    def reset(self) -> None:
        self.remaining = {WHITE: self.initial, BLACK: self.initial}

    def tick(self, elapsed: float) -> Optional[str]:
        """Charge `elapsed` seconds to the side to move.

        Returns:
            Optional[str]: The color that ran out of time on this tick.
        """
        if elapsed < 0:
            raise ValueError("elapsed must be >= 0")
        if self.game.is_over:
            return None
        side = self.game.turn.side_to_move
        self.remaining[side] = max(0.0, self.remaining[side] - elapsed)
        if self.remaining[side] > 0:
            return None
        logger.info("%s clock reached zero", side)
        self.game.report_timeout(side)
        return side

    def format(self, color: str) -> str:
        """Render remaining time as ``m:ss``."""
        secs = int(self.remaining[color] + 0.999)
        return f"{secs // 60}:{secs % 60:02d}"
