"""Gate fetcher.

Endpoint: https://data.gateapi.io/api2/1/ticker/sbtc_usdt
Response: {"result": "true", "last": "67890.5", "lowestAsk": ..., ...}
"""

from .base import BaseFetcher, PriceEncoding, ProviderSpec, register_fetcher


@register_fetcher
class GateFetcher(BaseFetcher):
    """Fetcher for the Gate legacy v2 ticker (BTC/USDT)."""

    spec = ProviderSpec(
        name="gate",
        endpoint="https://data.gateapi.io/api2/1/ticker/sbtc_usdt",
        price_path=("last",),
        encoding=PriceEncoding.STRING,
    )
