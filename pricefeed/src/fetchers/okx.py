"""OKX fetcher.

Endpoint: https://www.okx.com/api/v5/market/ticker?instId=BTC-USDC
Response: {"code": "0", "data": [{"instId": "BTC-USDC", "last": "67890.5", ...}]}
"""

from .base import BaseFetcher, PriceEncoding, ProviderSpec, register_fetcher


@register_fetcher
class OKXFetcher(BaseFetcher):
    """Fetcher for the OKX v5 market ticker (BTC/USDC)."""

    spec = ProviderSpec(
        name="okx",
        endpoint="https://www.okx.com/api/v5/market/ticker?instId=BTC-USDC",
        price_path=("data", 0, "last"),
        encoding=PriceEncoding.STRING,
    )
