from __future__ import annotations

import logging
import math
from typing import Any, Dict, List, Optional

import requests

from perpsnap.config import AppConfig
from perpsnap.data.models import Candle
from perpsnap.exchange.base import ExchangeClient
from perpsnap.exchange.errors import ExchangeError, FetchError, ParseError

logger = logging.getLogger("perpsnap")

DEFAULT_BASE_URL = "https://fapi.binance.com"


def parse_float(v: Any) -> float:
    """Binance sends prices/volumes as strings and times as numbers; accept both."""
    if isinstance(v, bool):
        raise ParseError(f"unsupported type: {type(v).__name__}")
    if isinstance(v, (int, float)):
        return float(v)
    if isinstance(v, str):
        try:
            return float(v)
        except ValueError:
            raise ParseError(f"not a number: {v!r}") from None
    raise ParseError(f"unsupported type: {type(v).__name__}")


def parse_int(v: Any) -> int:
    """Epoch-ms timestamps; NaN and infinities are rejected."""
    f = parse_float(v)
    if not math.isfinite(f):
        raise ParseError(f"not a finite number: {v!r}")
    return int(f)


def _error_code(body: Any) -> Optional[int]:
    # {"code": -1121, "msg": "Invalid symbol."}
    if not isinstance(body, dict) or "code" not in body:
        return None
    try:
        code = int(body["code"])
    except (TypeError, ValueError, OverflowError):
        return None
    return code if code != 0 else None


class BinanceFuturesClient(ExchangeClient):
    name = "binance"

    def __init__(self, base_url: str = DEFAULT_BASE_URL, timeout_sec: float = 10.0) -> None:
        self.base = base_url.rstrip("/")
        self.timeout_sec = timeout_sec

    @classmethod
    def from_config(cls, cfg: AppConfig) -> "BinanceFuturesClient":
        return cls(base_url=cfg.binance_base_url, timeout_sec=cfg.http_timeout_sec)

    def ping(self) -> bool:
        try:
            r = requests.get(f"{self.base}/fapi/v1/ping", timeout=5)
            return r.status_code == 200
        except requests.RequestException:
            return False

    def _get_json(self, path: str, params: Dict[str, Any]) -> Any:
        url = f"{self.base}{path}"
        try:
            r = requests.get(url, params=params, timeout=self.timeout_sec)
        except requests.Timeout as e:
            raise FetchError(f"GET {path} timed out after {self.timeout_sec}s") from e
        except requests.RequestException as e:
            raise FetchError(f"GET {path} failed: {e}") from e

        try:
            body = r.json()
        except ValueError as e:
            if not r.ok:
                raise FetchError(f"GET {path} returned HTTP {r.status_code}") from e
            raise ParseError(f"GET {path} returned a non-JSON body") from e

        # Error objects come back with 4xx as well, so check them before the status.
        code = _error_code(body)
        if code is not None:
            raise ExchangeError(code, str(body.get("msg", "")))
        if not r.ok:
            raise FetchError(f"GET {path} returned HTTP {r.status_code}")
        return body

    def fetch_ohlcv(self, symbol: str, interval: str, limit: int = 200) -> List[Candle]:
        # interval: "15m", "1h", "4h"
        data = self._get_json("/fapi/v1/klines", {"symbol": symbol, "interval": interval, "limit": limit})
        if not isinstance(data, list):
            raise ParseError(f"klines: expected a list, got {type(data).__name__}")

        out: List[Candle] = []
        for i, row in enumerate(data):
            # row: [open_time, o, h, l, c, v, close_time, ...]
            if not isinstance(row, (list, tuple)) or len(row) < 7:
                raise ParseError(f"klines row {i}: expected at least 7 fields")
            try:
                out.append(
                    Candle(
                        open_time=parse_int(row[0]),
                        o=parse_float(row[1]),
                        h=parse_float(row[2]),
                        l=parse_float(row[3]),
                        c=parse_float(row[4]),
                        v=parse_float(row[5]),
                        close_time=parse_int(row[6]),
                    )
                )
            except ParseError as e:
                raise ParseError(f"klines row {i}: {e}") from e
        logger.debug("klines %s %s %s: %d rows", self.name, symbol, interval, len(out))
        return out

    def fetch_open_interest(self, symbol: str) -> float:
        # Binance USD-M returns openInterest in contracts (base-asset units).
        j = self._get_json("/fapi/v1/openInterest", {"symbol": symbol})
        if not isinstance(j, dict) or "openInterest" not in j:
            raise ParseError("openInterest: missing 'openInterest' field")
        return parse_float(j["openInterest"])

    def fetch_funding_rate(self, symbol: str) -> float:
        j = self._get_json("/fapi/v1/premiumIndex", {"symbol": symbol})
        if not isinstance(j, dict) or "lastFundingRate" not in j:
            raise ParseError("premiumIndex: missing 'lastFundingRate' field")
        return parse_float(j["lastFundingRate"])
