"""Bitrue fetcher.

Endpoint: https://openapi.bitrue.com/api/v1/ticker/price?symbol=btcusdt
Response: {"symbol": "BTCUSDT", "price": "67890.5"}
"""

from .base import BaseFetcher, PriceEncoding, ProviderSpec, register_fetcher


@register_fetcher
class BitrueFetcher(BaseFetcher):
    """Fetcher for the Bitrue symbol price ticker (BTC/USDT)."""

    spec = ProviderSpec(
        name="bitrue",
        endpoint="https://openapi.bitrue.com/api/v1/ticker/price?symbol=btcusdt",
        price_path=("price",),
        encoding=PriceEncoding.STRING,
    )
