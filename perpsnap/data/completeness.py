from __future__ import annotations

from typing import List, Sequence

from perpsnap.data.models import Candle


def is_closed(candle: Candle, now_ms: int) -> bool:
    return candle.close_time <= now_ms


def filter_completed(candles: Sequence[Candle], now_ms: int) -> List[Candle]:
    """
    Drop candles that have not closed yet (close_time > now_ms).
    Any failing candle is dropped, not only the trailing one; order is preserved.
    """
    return [c for c in candles if is_closed(c, now_ms)]
