"""Huobi (HTX) fetcher.

Endpoint: https://api.huobi.pro/market/trade?symbol=btcusdt
Response: {"status": "ok", "tick": {"data": [{"price": 67890.5, "amount": ...}]}}
"""

from .base import BaseFetcher, PriceEncoding, ProviderSpec, register_fetcher


@register_fetcher
class HuobiFetcher(BaseFetcher):
    """Fetcher for the latest Huobi trade (BTC/USDT). Price is a JSON number."""

    spec = ProviderSpec(
        name="huobi",
        endpoint="https://api.huobi.pro/market/trade?symbol=btcusdt",
        price_path=("tick", "data", 0, "price"),
        encoding=PriceEncoding.NUMBER,
    )
