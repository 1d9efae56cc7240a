from __future__ import annotations

import pytest
from pydantic import ValidationError

from royalchess.cli.main import build_parser
from royalchess.config import Settings


def test_defaults() -> None:
    s = Settings.from_env({})
    assert s.host == "0.0.0.0"
    assert s.port == 8000
    assert s.log_level == "INFO"
    assert s.bot_delay_ms == 1000
    assert s.clock_seconds == 600
    assert s.bot_seed is None
    assert s.max_sessions == 1000


def test_env_overrides() -> None:
    s = Settings.from_env(
        {"ROYALCHESS_PORT": "9001", "ROYALCHESS_BOT_SEED": "7", "ROYALCHESS_HOST": ""}
    )
    assert s.port == 9001
    assert s.bot_seed == 7
    assert s.host == "0.0.0.0"


def test_invalid_env_value_raises() -> None:
    with pytest.raises(ValidationError):
        Settings.from_env({"ROYALCHESS_PORT": "0"})
    with pytest.raises(ValidationError):
        Settings.from_env({"ROYALCHESS_BOT_DELAY_MS": "soon"})


def test_merged_skips_none() -> None:
    s = Settings().merged(port=None, log_level="DEBUG")
    assert s.port == 8000
    assert s.log_level == "DEBUG"


def test_cli_parser() -> None:
    parser = build_parser()
    args = parser.parse_args(["--log-level", "DEBUG", "play", "--mode", "two-player", "--no-clock"])
    assert args.command == "play"
    assert args.mode == "two-player"
    assert args.no_clock
    assert args.log_level == "DEBUG"

    args = parser.parse_args(["serve", "--port", "8080"])
    assert args.command == "serve"
    assert args.port == 8080
    with pytest.raises(SystemExit):
        parser.parse_args(["play", "--mode", "online"])
