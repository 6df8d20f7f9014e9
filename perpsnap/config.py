from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from perpsnap.utils.timeframes import get_timeframe

OUTPUT_FORMATS = ("text", "json")


def _getenv(name: str, default: Optional[str] = None) -> str:
    val = os.getenv(name, default)
    if val is None:
        raise RuntimeError(f"Missing required env var: {name}")
    return val


def _getenv_int(name: str, default: int) -> int:
    raw = _getenv(name, str(default))
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"Env var {name} must be an integer, got {raw!r}") from None


@dataclass(frozen=True)
class AppConfig:
    app_env: str
    symbol: str

    # Binance USD-M futures
    binance_base_url: str
    http_timeout_sec: float

    # Timeframes + over-fetch sizes
    long_interval: str
    short_interval: str
    long_limit: int
    short_limit: int

    output_format: str

    @staticmethod
    def load() -> "AppConfig":
        long_interval = get_timeframe(_getenv("LONG_INTERVAL", "4h")).name
        short_interval = get_timeframe(_getenv("SHORT_INTERVAL", "15m")).name

        output_format = _getenv("OUTPUT_FORMAT", "text").lower()
        if output_format not in OUTPUT_FORMATS:
            raise ValueError(f"OUTPUT_FORMAT must be one of {OUTPUT_FORMATS}, got {output_format!r}")

        timeout_raw = _getenv("HTTP_TIMEOUT_SEC", "10")
        try:
            timeout = float(timeout_raw)
        except ValueError:
            raise ValueError(f"Env var HTTP_TIMEOUT_SEC must be a number, got {timeout_raw!r}") from None

        return AppConfig(
            app_env=_getenv("APP_ENV", "dev"),
            symbol=_getenv("SYMBOL", "BTC"),
            binance_base_url=_getenv("BINANCE_BASE_URL", "https://fapi.binance.com").rstrip("/"),
            http_timeout_sec=timeout,
            long_interval=long_interval,
            short_interval=short_interval,
            long_limit=_getenv_int("LONG_LIMIT", 60),
            short_limit=_getenv_int("SHORT_LIMIT", 40),
            output_format=output_format,
        )
