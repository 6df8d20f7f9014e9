"""
Market-data error hierarchy.

Everything raised by the exchange client and the snapshot aggregator derives
from MarketDataError so callers can catch at one boundary.
"""
from __future__ import annotations

from typing import Optional


class MarketDataError(Exception):
    """Base exception for market-data failures."""


class FetchError(MarketDataError):
    """Transport failure, timeout or non-2xx response."""


class ExchangeError(MarketDataError):
    """The exchange answered with a structured {code, msg} error object."""

    def __init__(self, code: int, message: str) -> None:
        self.code = code
        self.message = message
        super().__init__(f"Binance API error {code}: {message}")


class ParseError(MarketDataError):
    """Response body did not have the expected shape."""


class SeriesUnavailableError(MarketDataError):
    """A required candle series could not be obtained for the snapshot."""

    def __init__(self, interval: str, cause: Optional[BaseException] = None, reason: str = "") -> None:
        self.interval = interval
        self.cause = cause
        detail = reason or (str(cause) if cause is not None else "unknown error")
        super().__init__(f"failed to get {interval} candles: {detail}")
