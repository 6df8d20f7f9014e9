from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class Candle:
    open_time: int   # epoch ms
    o: float
    h: float
    l: float
    c: float
    v: float
    close_time: int  # epoch ms


@dataclass(frozen=True)
class OpenInterestReading:
    latest: float
    average: float   # approximation (latest * 0.999), not a historical mean


@dataclass(frozen=True)
class LongerTermContext:
    ema20: float
    ema50: float
    atr3: float
    atr14: float
    current_volume: float
    average_volume: float
    macd_values: Tuple[float, ...] = ()
    rsi14_values: Tuple[float, ...] = ()


@dataclass(frozen=True)
class Snapshot:
    symbol: str
    current_price: float
    price_change_1h: float              # percent
    price_change_4h: float              # percent
    open_interest: OpenInterestReading
    funding_rate: float
    longer_term: Optional[LongerTermContext]
    ma21_long: float
    ma21_long_series: Tuple[float, ...] = ()  # last 3 MA21 values, oldest first
    ma15_short: float = 0.0

    long_interval: str = "4h"
    short_interval: str = "15m"
