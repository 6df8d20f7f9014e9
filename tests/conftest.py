# tests/conftest.py
from typing import Callable, List, Optional, Sequence

import pytest

from perpsnap.data.models import Candle
from perpsnap.utils.clock import Clock

NOW_MS = 1767225600000  # 2026-01-01 00:00:00 UTC
MS_15M = 15 * 60 * 1000
MS_4H = 4 * 60 * 60 * 1000


def fixed_clock(now_ms: int) -> Clock:
    def _now() -> int:
        return now_ms
    return _now


def build_candles(
    closes: Sequence[float],
    interval_ms: int,
    end_ms: int = NOW_MS,
    volumes: Optional[Sequence[float]] = None,
    wick: float = 1.0,
) -> List[Candle]:
    """Consecutive closed candles; the last one closes 1ms before end_ms (Binance close_time convention)."""
    n = len(closes)
    out: List[Candle] = []
    prev = closes[0] if n else 0.0
    for i, c in enumerate(closes):
        close_time = end_ms - (n - 1 - i) * interval_ms - 1
        open_time = close_time - interval_ms + 1
        o = prev
        out.append(
            Candle(
                open_time=open_time,
                o=o,
                h=max(o, c) + wick,
                l=min(o, c) - wick,
                c=float(c),
                v=float(volumes[i]) if volumes is not None else 100.0 + i,
                close_time=close_time,
            )
        )
        prev = c
    return out


@pytest.fixture
def now_ms() -> int:
    return NOW_MS


@pytest.fixture
def make_candles() -> Callable[..., List[Candle]]:
    """Factory for candle series from a list of closes (default 4h spacing)."""
    def _make(closes: Sequence[float], interval_ms: int = MS_4H, **kwargs) -> List[Candle]:
        return build_candles(closes, interval_ms, **kwargs)
    return _make
