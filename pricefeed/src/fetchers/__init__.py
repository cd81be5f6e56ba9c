"""
Price fetchers for the supported BTC/USD providers.

Each provider module declares one BaseFetcher subclass with a ProviderSpec
and registers it on import. Adding a provider means adding a module here and
importing it below.

Usage:
    from pricefeed.src.fetchers import get_fetcher, get_available_fetchers

    # Get list of available fetchers
    available = get_available_fetchers()
    # ['bitfinex', 'bitget', 'bitrue', 'btse', 'coinbase', 'cryptocom',
    #  'gate', 'huobi', 'kraken', 'kucoin', 'okx', 'xt']

    # Create a fetcher instance
    fetcher = get_fetcher("coinbase")
    price = await fetcher.fetch()
"""

# Import base classes and utilities
from ..errors import (
    DecodeFailure,
    FetcherConfigError,
    FetcherError,
    FetcherHTTPError,
    FormatFailure,
    MissingFieldFailure,
    TransportFailure,
    ValidationFailure,
)
from .base import (
    FETCHER_REGISTRY,
    BaseFetcher,
    PriceEncoding,
    ProviderSpec,
    get_available_fetchers,
    get_fetcher,
    register_fetcher,
)

# Import all fetcher implementations to trigger registration
from .bitfinex import BitfinexFetcher
from .bitget import BitgetFetcher
from .bitrue import BitrueFetcher
from .btse import BTSEFetcher
from .coinbase import CoinbaseFetcher
from .cryptocom import CryptoComFetcher
from .gate import GateFetcher
from .huobi import HuobiFetcher
from .kraken import KrakenFetcher
from .kucoin import KuCoinFetcher
from .okx import OKXFetcher
from .xt import XTFetcher

__all__ = [
    # Base classes
    "BaseFetcher",
    "PriceEncoding",
    "ProviderSpec",
    # Errors
    "FetcherError",
    "FetcherConfigError",
    "FetcherHTTPError",
    "TransportFailure",
    "DecodeFailure",
    "MissingFieldFailure",
    "FormatFailure",
    "ValidationFailure",
    # Registry functions
    "register_fetcher",
    "get_fetcher",
    "get_available_fetchers",
    "FETCHER_REGISTRY",
    # Fetcher implementations
    "BitfinexFetcher",
    "BitgetFetcher",
    "BitrueFetcher",
    "BTSEFetcher",
    "CoinbaseFetcher",
    "CryptoComFetcher",
    "GateFetcher",
    "HuobiFetcher",
    "KrakenFetcher",
    "KuCoinFetcher",
    "OKXFetcher",
    "XTFetcher",
]
