"""Runtime settings read from the environment (and .env via the CLI)."""

import os
from dataclasses import dataclass

from unoroom.engine.game import MAX_PLAYERS, MIN_PLAYERS


def _flag(raw: str) -> bool:
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _clamp_players(n: int) -> int:
    # One deck deals seven each to at most MAX_PLAYERS seats
    return max(MIN_PLAYERS, min(n, MAX_PLAYERS))


@dataclass(frozen=True)
class Settings:
    host: str = "0.0.0.0"
    port: int = 3000
    cors_origin: str = "*"
    log_level: str = "INFO"
    log_json: bool = True
    draw_debounce_ms: int = 500
    max_players: int = 10

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            host=os.environ.get("UNO_HOST", cls.host),
            port=int(os.environ.get("PORT", cls.port)),
            cors_origin=os.environ.get("CORS_ORIGIN", cls.cors_origin),
            log_level=os.environ.get("UNO_LOG_LEVEL", cls.log_level).upper(),
            log_json=_flag(os.environ.get("UNO_LOG_JSON", "true")),
            draw_debounce_ms=int(os.environ.get("UNO_DRAW_DEBOUNCE_MS", cls.draw_debounce_ms)),
            max_players=_clamp_players(int(os.environ.get("UNO_MAX_PLAYERS", cls.max_players))),
        )
