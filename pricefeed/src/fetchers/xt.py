"""XT fetcher.

Endpoint: https://sapi.xt.com/v4/public/ticker?symbol=BTC_usdt
Response: {"rc": 0, "result": [{"s": "btc_usdt", "c": "67890.5", ...}]}

Field ``c`` is the close (latest) price.
"""

from .base import BaseFetcher, PriceEncoding, ProviderSpec, register_fetcher


@register_fetcher
class XTFetcher(BaseFetcher):
    """Fetcher for the XT v4 public ticker (BTC/USDT)."""

    spec = ProviderSpec(
        name="xt",
        endpoint="https://sapi.xt.com/v4/public/ticker?symbol=BTC_usdt",
        price_path=("result", 0, "c"),
        encoding=PriceEncoding.STRING,
    )
