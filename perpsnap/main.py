from __future__ import annotations

import json
import sys
from typing import List, Optional

from perpsnap.config import AppConfig
from perpsnap.exchange.binance_futures import BinanceFuturesClient
from perpsnap.exchange.errors import SeriesUnavailableError
from perpsnap.snapshot.aggregator import SnapshotAggregator
from perpsnap.snapshot.output import snapshot_to_dict
from perpsnap.snapshot.report import format_snapshot
from perpsnap.utils.logger import setup_logger


def build_aggregator(cfg: AppConfig) -> SnapshotAggregator:
    client = BinanceFuturesClient.from_config(cfg)
    return SnapshotAggregator(
        client,
        long_interval=cfg.long_interval,
        short_interval=cfg.short_interval,
        long_limit=cfg.long_limit,
        short_limit=cfg.short_limit,
        timeout_sec=cfg.http_timeout_sec,
    )


def main(argv: Optional[List[str]] = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    log = setup_logger()
    cfg = AppConfig.load()

    symbol = args[0] if args else cfg.symbol
    aggregator = build_aggregator(cfg)

    try:
        snap = aggregator.build(symbol)
    except SeriesUnavailableError as e:
        log.error("Snapshot failed for %s: %s", symbol, e)
        return 1

    if cfg.output_format == "json":
        print(json.dumps(snapshot_to_dict(snap), indent=2))
    else:
        print(format_snapshot(snap), end="")
    return 0


if __name__ == "__main__":
    sys.exit(main())
