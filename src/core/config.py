"""Runtime configuration, read from environment variables."""

import os


def _as_bool(value: str) -> bool:
    return value.strip().lower() in {"1", "true", "yes", "on"}


class Config:
    DATABASE_URL = os.environ.get("DATABASE_URL") or "sqlite:///./ludo.db"
    DATABASE_ECHO = _as_bool(os.environ.get("DATABASE_ECHO", "false"))
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
    # Seats per game. The board has four colors, so MAX_PLAYERS cannot go above 4.
    MIN_PLAYERS = int(os.environ.get("MIN_PLAYERS", "2"))
    MAX_PLAYERS = min(int(os.environ.get("MAX_PLAYERS", "4")), 4)
