"""
Snapshot aggregation.

Fans out the four exchange reads for one symbol, applies the failure policy
(candle series are required, open interest and funding degrade to zero), then
runs the indicator engine over the closed candles and assembles a Snapshot.
"""
from __future__ import annotations

import logging
import time
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FuturesTimeoutError
from typing import List, Optional, Sequence, TypeVar

from perpsnap.data.derivatives_fetcher import DerivativesFetcher
from perpsnap.data.market_fetcher import MarketFetcher
from perpsnap.data.models import Candle, LongerTermContext, OpenInterestReading, Snapshot
from perpsnap.exchange.base import ExchangeClient
from perpsnap.exchange.errors import FetchError, SeriesUnavailableError
from perpsnap.indicators.moving_average import ema, sma
from perpsnap.indicators.oscillators import atr, macd, rsi
from perpsnap.utils.clock import Clock, system_clock_ms
from perpsnap.utils.symbols import normalize_symbol

logger = logging.getLogger("perpsnap")

T = TypeVar("T")

# 4 x 15m candles back == 1h; a fixed count, not a time lookup
PRICE_CHANGE_1H_OFFSET = 4
MA_LONG_PERIOD = 21
MA_SHORT_PERIOD = 15
TREND_POINTS = 3
SERIES_TAIL = 10
RSI_PERIOD = 14
MACD_MIN_INDEX = 25
RSI_MIN_INDEX = 14


def _pct_change(current: float, ref: float) -> float:
    if ref > 0:
        return ((current - ref) / ref) * 100.0
    return 0.0


def compute_longer_term(candles: Sequence[Candle]) -> LongerTermContext:
    n = len(candles)

    current_volume = 0.0
    average_volume = 0.0
    if n > 0:
        current_volume = candles[-1].v
        average_volume = sum(k.v for k in candles) / n

    # Each value is computed over the growing prefix ending at index i.
    macd_values: List[float] = []
    rsi_values: List[float] = []
    for i in range(max(0, n - SERIES_TAIL), n):
        prefix = candles[: i + 1]
        if i >= MACD_MIN_INDEX:
            macd_values.append(macd(prefix))
        if i >= RSI_MIN_INDEX:
            rsi_values.append(rsi(prefix, RSI_PERIOD))

    return LongerTermContext(
        ema20=ema(candles, 20),
        ema50=ema(candles, 50),
        atr3=atr(candles, 3),
        atr14=atr(candles, 14),
        current_volume=current_volume,
        average_volume=average_volume,
        macd_values=tuple(macd_values),
        rsi14_values=tuple(rsi_values),
    )


def ma_trend_series(candles: Sequence[Candle], period: int = MA_LONG_PERIOD, points: int = TREND_POINTS) -> List[float]:
    """SMA over the last `points` growing prefixes, oldest first; empty without enough history."""
    n = len(candles)
    if n < period + points - 1:
        return []
    return [sma(candles[: i + 1], period) for i in range(n - points, n)]


def assemble_snapshot(
    symbol: str,
    long_candles: Sequence[Candle],
    short_candles: Sequence[Candle],
    open_interest: OpenInterestReading,
    funding_rate: float,
    long_interval: str = "4h",
    short_interval: str = "15m",
) -> Snapshot:
    """Pure part of the pipeline. Both series must be non-empty and already filtered."""
    if not long_candles:
        raise ValueError(f"{long_interval} series is empty")
    if not short_candles:
        raise ValueError(f"{short_interval} series is empty")

    current_price = short_candles[-1].c

    price_change_1h = 0.0
    if len(short_candles) >= PRICE_CHANGE_1H_OFFSET + 1:
        price_change_1h = _pct_change(current_price, short_candles[-(PRICE_CHANGE_1H_OFFSET + 1)].c)

    price_change_4h = 0.0
    if len(long_candles) >= 2:
        price_change_4h = _pct_change(current_price, long_candles[-2].c)

    return Snapshot(
        symbol=symbol,
        current_price=current_price,
        price_change_1h=price_change_1h,
        price_change_4h=price_change_4h,
        open_interest=open_interest,
        funding_rate=funding_rate,
        longer_term=compute_longer_term(long_candles),
        ma21_long=sma(long_candles, MA_LONG_PERIOD),
        ma21_long_series=tuple(ma_trend_series(long_candles)),
        ma15_short=sma(short_candles, MA_SHORT_PERIOD),
        long_interval=long_interval,
        short_interval=short_interval,
    )


class SnapshotAggregator:
    def __init__(
        self,
        client: ExchangeClient,
        clock: Clock = system_clock_ms,
        long_interval: str = "4h",
        short_interval: str = "15m",
        long_limit: int = 60,
        short_limit: int = 40,
        timeout_sec: float = 10.0,
    ) -> None:
        self.market = MarketFetcher(client, clock=clock)
        self.deriv = DerivativesFetcher(client)
        self.long_interval = long_interval
        self.short_interval = short_interval
        self.long_limit = long_limit
        self.short_limit = short_limit
        self.timeout_sec = timeout_sec

    def build(self, symbol: str, deadline_sec: Optional[float] = None) -> Snapshot:
        """
        Build one snapshot. Raises SeriesUnavailableError when either candle
        series cannot be fetched (or has no closed candles) within its timeout.
        `deadline_sec` caps the whole request; pending fetches are cancelled
        once it expires or a required series fails.
        """
        symbol = normalize_symbol(symbol)
        deadline_at = time.monotonic() + deadline_sec if deadline_sec is not None else None

        pool = ThreadPoolExecutor(max_workers=4, thread_name_prefix=f"snap-{symbol}")
        try:
            f_long = pool.submit(self.market.get_candles, symbol, self.long_interval, self.long_limit)
            f_short = pool.submit(self.market.get_candles, symbol, self.short_interval, self.short_limit)
            f_oi = pool.submit(self.deriv.get_open_interest, symbol)
            f_funding = pool.submit(self.deriv.get_funding_rate, symbol)

            long_candles = self._join_series(f_long, self.long_interval, deadline_at)
            short_candles = self._join_series(f_short, self.short_interval, deadline_at)
            open_interest = self._join_optional(
                f_oi, "open_interest", OpenInterestReading(latest=0.0, average=0.0), symbol, deadline_at
            )
            funding_rate = self._join_optional(f_funding, "funding_rate", 0.0, symbol, deadline_at)
        finally:
            pool.shutdown(wait=False, cancel_futures=True)

        snap = assemble_snapshot(
            symbol,
            long_candles,
            short_candles,
            open_interest,
            funding_rate,
            long_interval=self.long_interval,
            short_interval=self.short_interval,
        )
        logger.info(
            "SNAPSHOT %s | ex=%s | price=%s | chg1h=%.3f | chg%s=%.3f | oi=%s | funding=%s | ma21=%s | ma15=%s",
            snap.symbol,
            self.market.client.name,
            snap.current_price,
            snap.price_change_1h,
            self.long_interval,
            snap.price_change_4h,
            snap.open_interest.latest,
            snap.funding_rate,
            snap.ma21_long,
            snap.ma15_short,
        )
        return snap

    def _wait_for(self, deadline_at: Optional[float]) -> float:
        timeout = self.timeout_sec
        if deadline_at is not None:
            timeout = max(0.0, min(timeout, deadline_at - time.monotonic()))
        return timeout

    def _join_series(self, fut: "Future[List[Candle]]", interval: str, deadline_at: Optional[float]) -> List[Candle]:
        timeout = self._wait_for(deadline_at)
        try:
            candles = fut.result(timeout=timeout)
        except FuturesTimeoutError:
            fut.cancel()
            raise SeriesUnavailableError(interval, FetchError(f"timed out after {timeout:.1f}s")) from None
        except Exception as e:
            # any client failure still surfaces with its interval attached
            raise SeriesUnavailableError(interval, e) from e

        if not candles:
            raise SeriesUnavailableError(interval, reason="no completed candles")
        return candles

    def _join_optional(
        self,
        fut: "Future[T]",
        what: str,
        default: T,
        symbol: str,
        deadline_at: Optional[float],
    ) -> T:
        timeout = self._wait_for(deadline_at)
        try:
            return fut.result(timeout=timeout)
        except FuturesTimeoutError:
            fut.cancel()
            logger.warning("%s %s timed out after %.1fs, using default", symbol, what, timeout)
        except Exception as e:
            # best-effort only: snapshot is still produced
            logger.warning("%s %s unavailable, using default: %s", symbol, what, e)
        return default
