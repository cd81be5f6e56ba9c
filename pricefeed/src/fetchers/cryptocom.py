"""Crypto.com fetcher.

Endpoint: https://api.crypto.com/v2/public/get-ticker?instrument_name=BTC_USDT
Response: {"code": 0, "result": {"data": [{"i": "BTC_USDT", "a": "67890.5", ...}]}}

Field ``a`` is the latest trade price.
"""

from .base import BaseFetcher, PriceEncoding, ProviderSpec, register_fetcher


@register_fetcher
class CryptoComFetcher(BaseFetcher):
    """Fetcher for the Crypto.com Exchange public ticker (BTC/USDT)."""

    spec = ProviderSpec(
        name="cryptocom",
        endpoint="https://api.crypto.com/v2/public/get-ticker?instrument_name=BTC_USDT",
        price_path=("result", "data", 0, "a"),
        encoding=PriceEncoding.STRING,
    )
