from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List

from perpsnap.data.models import Candle


class ExchangeClient(ABC):
    name: str

    @abstractmethod
    def ping(self) -> bool:
        """Return True if exchange is reachable."""
        raise NotImplementedError

    @abstractmethod
    def fetch_ohlcv(self, symbol: str, interval: str, limit: int = 200) -> List[Candle]:
        """
        Ascending candles for symbol/interval. Raises FetchError, ExchangeError or
        ParseError; never returns a partial series.
        """
        raise NotImplementedError

    @abstractmethod
    def fetch_open_interest(self, symbol: str) -> float:
        raise NotImplementedError

    @abstractmethod
    def fetch_funding_rate(self, symbol: str) -> float:
        """Last funding rate (per funding interval, as a fraction)."""
        raise NotImplementedError
