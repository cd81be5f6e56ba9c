"""Bitfinex fetcher.

Endpoint: https://api.bitfinex.com/v2/ticker/tBTCUSD
Response: flat numeric array
    [BID, BID_SIZE, ASK, ASK_SIZE, DAILY_CHANGE, DAILY_CHANGE_RELATIVE,
     LAST_PRICE, VOLUME, HIGH, LOW]
"""

from .base import BaseFetcher, PriceEncoding, ProviderSpec, register_fetcher


@register_fetcher
class BitfinexFetcher(BaseFetcher):
    """Fetcher for the Bitfinex v2 public ticker.

    The last traded price is the 7th element of the array.
    """

    spec = ProviderSpec(
        name="bitfinex",
        endpoint="https://api.bitfinex.com/v2/ticker/tBTCUSD",
        price_path=(6,),
        encoding=PriceEncoding.NUMBER,
    )
