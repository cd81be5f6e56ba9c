"""BTSE fetcher.

Endpoint: https://api.btse.com/spot/api/v3.2/price?symbol=BTC-USD
Response: [{"symbol": "BTC-USD", "lastPrice": 67890.5, "indexPrice": ..., ...}]
"""

from .base import BaseFetcher, PriceEncoding, ProviderSpec, register_fetcher


@register_fetcher
class BTSEFetcher(BaseFetcher):
    """Fetcher for BTSE spot prices. Price is a JSON number."""

    spec = ProviderSpec(
        name="btse",
        endpoint="https://api.btse.com/spot/api/v3.2/price?symbol=BTC-USD",
        price_path=(0, "lastPrice"),
        encoding=PriceEncoding.NUMBER,
    )
