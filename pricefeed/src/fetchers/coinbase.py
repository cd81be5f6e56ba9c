"""Coinbase Exchange fetcher.

Endpoint: https://api.exchange.coinbase.com/products/BTC-USD/ticker
Response: {"trade_id": 1, "price": "67890.50", "size": "0.01", ...}
"""

from .base import BaseFetcher, PriceEncoding, ProviderSpec, register_fetcher


@register_fetcher
class CoinbaseFetcher(BaseFetcher):
    """Fetcher for Coinbase Exchange API.

    Native USD pair. No API key required for public ticker endpoint.
    """

    spec = ProviderSpec(
        name="coinbase",
        endpoint="https://api.exchange.coinbase.com/products/BTC-USD/ticker",
        price_path=("price",),
        encoding=PriceEncoding.STRING,
    )
