from __future__ import annotations

import logging
import time
from typing import List

from perpsnap.data.completeness import filter_completed
from perpsnap.data.models import Candle
from perpsnap.exchange.base import ExchangeClient
from perpsnap.utils.clock import Clock, system_clock_ms

logger = logging.getLogger("perpsnap")


class MarketFetcher:
    """Fetches a fresh candle series per call and keeps only closed candles."""

    def __init__(self, client: ExchangeClient, clock: Clock = system_clock_ms) -> None:
        self.client = client
        self.clock = clock

    def get_candles(self, symbol: str, interval: str, limit: int = 200) -> List[Candle]:
        t0 = time.monotonic()
        candles = self.client.fetch_ohlcv(symbol=symbol, interval=interval, limit=limit)
        completed = filter_completed(candles, self.clock())
        logger.debug(
            "CANDLES %s %s | fetched=%d completed=%d | %.0fms",
            symbol,
            interval,
            len(candles),
            len(completed),
            (time.monotonic() - t0) * 1000.0,
        )
        return completed
