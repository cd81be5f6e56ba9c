"""Kraken fetcher.

Endpoint: https://api.kraken.com/0/public/Ticker?pair=BTCUSD
Response: {"error": [], "result": {"XXBTZUSD": {"a": ["67890.5", "1", "1.000"], ...}}}

Kraken uses XBT for bitcoin and answers with its own pair name ``XXBTZUSD``.
``a`` is the ask array: [price, whole lot volume, lot volume].
"""

from typing import Any

from ..errors import MissingFieldFailure
from .base import BaseFetcher, PriceEncoding, ProviderSpec, register_fetcher


@register_fetcher
class KrakenFetcher(BaseFetcher):
    """Fetcher for Kraken public API.

    No API key required.
    """

    spec = ProviderSpec(
        name="kraken",
        endpoint="https://api.kraken.com/0/public/Ticker?pair=BTCUSD",
        price_path=("result", "XXBTZUSD", "a", 0),
        encoding=PriceEncoding.STRING,
    )

    def extract(self, raw: Any) -> float:
        """Surface Kraken's in-band error list before walking the path.

        :param raw: Decoded JSON body.
        :returns: Ask price as float.
        """
        if isinstance(raw, dict) and raw.get("error"):
            raise MissingFieldFailure(self.name, f"API error: {raw['error']}")
        return super().extract(raw)
