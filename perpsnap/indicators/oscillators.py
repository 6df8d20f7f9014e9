from __future__ import annotations

from typing import List, Sequence

from perpsnap.data.models import Candle
from perpsnap.indicators.moving_average import ema

MACD_FAST = 12
MACD_SLOW = 26


def true_range(candle: Candle, prev_close: float) -> float:
    return max(
        candle.h - candle.l,
        abs(candle.h - prev_close),
        abs(candle.l - prev_close),
    )


def macd(candles: Sequence[Candle]) -> float:
    # both EMAs run over the same full slice
    if len(candles) < MACD_SLOW:
        return 0.0
    return ema(candles, MACD_FAST) - ema(candles, MACD_SLOW)


def rsi(candles: Sequence[Candle], period: int = 14) -> float:
    """
    Wilder RSI over closes. Needs more than `period` candles, else 0.0.
    A flat delta is treated as a (zero) loss.
    """
    if len(candles) <= period:
        return 0.0

    gains = 0.0
    losses = 0.0
    for i in range(1, period + 1):
        change = candles[i].c - candles[i - 1].c
        if change > 0:
            gains += change
        else:
            losses += -change

    avg_gain = gains / period
    avg_loss = losses / period

    for i in range(period + 1, len(candles)):
        change = candles[i].c - candles[i - 1].c
        if change > 0:
            avg_gain = (avg_gain * (period - 1) + change) / period
            avg_loss = (avg_loss * (period - 1)) / period
        else:
            avg_gain = (avg_gain * (period - 1)) / period
            avg_loss = (avg_loss * (period - 1) + (-change)) / period

    if avg_loss == 0:
        return 100.0

    rs = avg_gain / avg_loss
    return 100.0 - (100.0 / (1.0 + rs))


def atr(candles: Sequence[Candle], period: int) -> float:
    """Wilder ATR. Candle 0 has no true range; needs more than `period` candles, else 0.0."""
    if len(candles) <= period:
        return 0.0

    trs: List[float] = [0.0] * len(candles)
    for i in range(1, len(candles)):
        trs[i] = true_range(candles[i], candles[i - 1].c)

    value = sum(trs[1:period + 1]) / period
    for i in range(period + 1, len(candles)):
        value = (value * (period - 1) + trs[i]) / period
    return value
