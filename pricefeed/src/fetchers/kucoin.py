"""KuCoin fetcher.

Endpoint: https://api.kucoin.com/api/v1/market/orderbook/level1?symbol=BTC-USDC
Response: {"code": "200000", "data": {"price": "67890.5", "bestBid": ..., ...}}
"""

from .base import BaseFetcher, PriceEncoding, ProviderSpec, register_fetcher


@register_fetcher
class KuCoinFetcher(BaseFetcher):
    """Fetcher for KuCoin level-1 order book (BTC/USDC)."""

    spec = ProviderSpec(
        name="kucoin",
        endpoint="https://api.kucoin.com/api/v1/market/orderbook/level1?symbol=BTC-USDC",
        price_path=("data", "price"),
        encoding=PriceEncoding.STRING,
    )
