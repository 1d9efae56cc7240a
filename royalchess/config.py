from __future__ import annotations

import logging
import os
from typing import Mapping, Optional

from pydantic import BaseModel, Field


ENV_PREFIX = "ROYALCHESS_"


class Settings(BaseModel):
    """Runtime settings shared by the HTTP server and the console.

    Values come from defaults, then ``ROYALCHESS_*`` environment variables,
    then CLI flags.
    """

    host: str = "0.0.0.0"
    port: int = Field(default=8000, ge=1, le=65535)
    log_level: str = "INFO"
    bot_delay_ms: int = Field(default=1000, ge=0)
    clock_seconds: int = Field(default=600, ge=1)
    bot_seed: Optional[int] = None
    max_sessions: int = Field(default=1000, ge=1)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ
        values = {}
        for name in cls.model_fields:
            raw = env.get(ENV_PREFIX + name.upper())
            if raw is not None and raw != "":
                values[name] = raw
        return cls(**values)

    def merged(self, **overrides) -> "Settings":
        """Return a copy with every non-None override applied."""
        return self.model_copy(update={k: v for k, v in overrides.items() if v is not None})


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
