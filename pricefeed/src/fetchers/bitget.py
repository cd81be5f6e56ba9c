"""Bitget fetcher.

Endpoint: https://api.bitget.com/api/v2/spot/market/tickers?symbol=BTCUSDT
Response: {"code": "00000", "data": [{"symbol": "BTCUSDT", "lastPr": "67890.5", ...}]}
"""

from .base import BaseFetcher, PriceEncoding, ProviderSpec, register_fetcher


@register_fetcher
class BitgetFetcher(BaseFetcher):
    """Fetcher for Bitget spot tickers (BTC/USDT)."""

    spec = ProviderSpec(
        name="bitget",
        endpoint="https://api.bitget.com/api/v2/spot/market/tickers?symbol=BTCUSDT",
        price_path=("data", 0, "lastPr"),
        encoding=PriceEncoding.STRING,
    )
