from __future__ import annotations

from typing import Sequence

from perpsnap.data.models import Candle


def sma(candles: Sequence[Candle], period: int) -> float:
    """Mean close of the last `period` candles; 0.0 when history is too short."""
    if len(candles) < period:
        return 0.0
    total = 0.0
    for k in candles[len(candles) - period:]:
        total += k.c
    return total / period


def ema(candles: Sequence[Candle], period: int) -> float:
    """
    EMA seeded with the SMA of the FIRST `period` candles of the slice, then
    walked forward over the rest of that same slice.
    Returns 0.0 when history is too short.
    """
    if len(candles) < period:
        return 0.0

    total = 0.0
    for i in range(period):
        total += candles[i].c
    value = total / period

    k = 2.0 / (period + 1)
    for i in range(period, len(candles)):
        value = (candles[i].c - value) * k + value
    return value
