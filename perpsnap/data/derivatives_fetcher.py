from __future__ import annotations

import logging

from perpsnap.data.models import OpenInterestReading
from perpsnap.exchange.base import ExchangeClient

logger = logging.getLogger("perpsnap")

# Cheap stand-in for an average; no OI history is fetched.
OI_AVERAGE_FACTOR = 0.999


class DerivativesFetcher:
    """
    Open interest + funding for one symbol. Errors propagate; the aggregator
    decides whether they are fatal.
    """

    def __init__(self, client: ExchangeClient) -> None:
        self.client = client

    def get_open_interest(self, symbol: str) -> OpenInterestReading:
        oi = self.client.fetch_open_interest(symbol=symbol)
        return OpenInterestReading(latest=oi, average=oi * OI_AVERAGE_FACTOR)

    def get_funding_rate(self, symbol: str) -> float:
        return self.client.fetch_funding_rate(symbol=symbol)
