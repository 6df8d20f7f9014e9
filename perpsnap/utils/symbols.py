from __future__ import annotations

QUOTE_ASSET = "USDT"


def normalize_symbol(symbol: str) -> str:
    """'btc' -> 'BTCUSDT'; already-suffixed symbols are only uppercased."""
    s = symbol.strip().upper()
    if s.endswith(QUOTE_ASSET):
        return s
    return s + QUOTE_ASSET
