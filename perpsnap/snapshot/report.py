from __future__ import annotations

from typing import List, Sequence

from perpsnap.data.models import Snapshot
from perpsnap.indicators.trend import classify_trend
from perpsnap.snapshot.aggregator import TREND_POINTS


def format_series(values: Sequence[float]) -> str:
    return "[" + ", ".join(f"{v:.3f}" for v in values) + "]"


def price_distance_pct(price: float, ma: float) -> float:
    # ma == 0 is the insufficient-history sentinel
    if ma == 0:
        return 0.0
    return ((price - ma) / ma) * 100.0


def format_snapshot(snap: Snapshot) -> str:
    """Plain-text report, stable line order for downstream prompt templates."""
    long_tf = snap.long_interval
    short_tf = snap.short_interval
    lines: List[str] = []

    lines.append(f"current_price = {snap.current_price:.2f}\n\n")

    lines.append(f"MA21_{long_tf}: {snap.ma21_long:.2f}\n")
    if len(snap.ma21_long_series) >= TREND_POINTS:
        trend = classify_trend(snap.ma21_long_series)
        lines.append(
            f"{long_tf} trend (MA21 x{TREND_POINTS}): {trend} (series: {format_series(snap.ma21_long_series)})\n"
        )

    lines.append(f"MA15_{short_tf}: {snap.ma15_short:.2f}\n")
    dist = price_distance_pct(snap.current_price, snap.ma15_short)
    lines.append(f"Price distance from MA15_{short_tf}: {dist:.2f}%\n\n")

    lines.append(
        f"In addition, here is the latest {snap.symbol} open interest and funding rate for perps:\n\n"
    )
    lines.append(
        f"Open Interest: Latest: {snap.open_interest.latest:.2f} "
        f"Average: {snap.open_interest.average:.2f}\n\n"
    )
    lines.append(f"Funding Rate: {snap.funding_rate:.2e}\n\n")

    ctx = snap.longer_term
    if ctx is not None:
        lines.append(f"Longer-term context ({long_tf} timeframe):\n\n")
        lines.append(f"20-Period EMA: {ctx.ema20:.3f} vs. 50-Period EMA: {ctx.ema50:.3f}\n\n")
        lines.append(f"3-Period ATR: {ctx.atr3:.3f} vs. 14-Period ATR: {ctx.atr14:.3f}\n\n")
        lines.append(
            f"Current Volume: {ctx.current_volume:.3f} vs. Average Volume: {ctx.average_volume:.3f}\n\n"
        )
        if ctx.macd_values:
            lines.append(f"MACD indicators: {format_series(ctx.macd_values)}\n\n")
        if ctx.rsi14_values:
            lines.append(f"RSI indicators (14-Period): {format_series(ctx.rsi14_values)}\n\n")

    return "".join(lines)
