from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from chessroom.ai.service import Difficulty


ENV_PREFIX = "CHESSROOM_"


@dataclass(frozen=True)
class Settings:
    """Service settings, read from ``CHESSROOM_*`` environment variables."""

    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"
    default_difficulty: Difficulty = Difficulty.MEDIUM
    max_perft_depth: int = 4


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """Build settings from ``env`` (default: ``os.environ``).

    Raises:
        ValueError: If a variable holds a value of the wrong type or range.
    """
    source = os.environ if env is None else env
    defaults = Settings()

    def get(name: str) -> Optional[str]:
        value = source.get(ENV_PREFIX + name)
        return value.strip() if value is not None and value.strip() else None

    port = _int(get("PORT"), defaults.port, "PORT")
    if not 0 < port < 65536:
        raise ValueError(f"{ENV_PREFIX}PORT out of range: {port}")

    log_level = (get("LOG_LEVEL") or defaults.log_level).upper()
    if not isinstance(logging.getLevelName(log_level), int):
        raise ValueError(f"{ENV_PREFIX}LOG_LEVEL is not a logging level: {log_level!r}")

    max_depth = _int(get("MAX_PERFT_DEPTH"), defaults.max_perft_depth, "MAX_PERFT_DEPTH")
    if max_depth < 0:
        raise ValueError(f"{ENV_PREFIX}MAX_PERFT_DEPTH must be >= 0")

    difficulty = get("DEFAULT_DIFFICULTY")
    return Settings(
        host=get("HOST") or defaults.host,
        port=port,
        log_level=log_level,
        default_difficulty=(
            Difficulty.parse(difficulty) if difficulty else defaults.default_difficulty
        ),
        max_perft_depth=max_depth,
    )


def _int(raw: Optional[str], default: int, name: str) -> int:
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"{ENV_PREFIX}{name} must be an integer, got {raw!r}") from e
