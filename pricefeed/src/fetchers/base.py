"""Base fetcher interface and shared HTTP client management.

All price fetchers inherit from BaseFetcher and describe their provider with a
declarative ProviderSpec. The shared fetch skeleton issues the request, decodes
the JSON body, walks ``price_path`` to the price field, parses it and validates
the result. A shared httpx.AsyncClient is used across all fetchers to avoid
connection overhead.

.. code-block:: python

    @register_fetcher
    class MyFetcher(BaseFetcher):
        spec = ProviderSpec(
            name="myexchange",
            endpoint="https://api.example.com/ticker/btcusd",
            price_path=("data", 0, "last"),
            encoding=PriceEncoding.STRING,
        )

Providers whose body cannot be described by a path may override extract().
"""

from __future__ import annotations

import enum
import logging
from abc import ABC
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, ClassVar

import httpx

from ..errors import (
    DecodeFailure,
    FetcherConfigError,
    FetcherError,
    FetcherHTTPError,
    FormatFailure,
    MissingFieldFailure,
    TransportFailure,
)
from ..validation import NormalizedPrice, validate_price

logger = logging.getLogger(__name__)


class PriceEncoding(enum.Enum):
    """How a provider encodes its price field in JSON."""

    NUMBER = "number"
    STRING = "string"


@dataclass(frozen=True)
class ProviderSpec:
    """Static description of one price provider.

    :ivar name: Unique identifier for the provider.
    :ivar endpoint: Full ticker URL, query string included.
    :ivar price_path: Dict keys (str) and list indexes (int) leading from the
        decoded body to the price field.
    :ivar encoding: Whether the price is a JSON number or a decimal string.
    """

    name: str
    endpoint: str
    price_path: tuple[str | int, ...]
    encoding: PriceEncoding = PriceEncoding.STRING


class BaseFetcher(ABC):
    """Abstract base class for price fetchers.

    Subclasses must define:
        - spec: ProviderSpec describing endpoint and response shape

    :cvar spec: Provider description.
    :cvar DEFAULT_TIMEOUT: Default HTTP request timeout in seconds.
    :ivar timeout: Request timeout in seconds.
    """

    # Class-level shared HTTP client
    _shared_client: ClassVar[httpx.AsyncClient | None] = None

    spec: ClassVar[ProviderSpec]

    # Default timeout for HTTP requests (seconds)
    DEFAULT_TIMEOUT = 10.0

    def __init__(self, timeout: float | None = None):
        """Initialize the fetcher.

        :param timeout: Request timeout in seconds (default: 10).
        """
        self.timeout = timeout or self.DEFAULT_TIMEOUT

    @property
    def name(self) -> str:
        """Provider name from the spec."""
        return self.spec.name

    @classmethod
    def get_shared_client(cls) -> httpx.AsyncClient:
        """Get or create the shared HTTP client.

        The client is stored on BaseFetcher so every fetcher reuses it.

        :returns: Shared httpx.AsyncClient instance.
        """
        if BaseFetcher._shared_client is None or BaseFetcher._shared_client.is_closed:
            BaseFetcher._shared_client = httpx.AsyncClient(
                timeout=httpx.Timeout(30.0, connect=10.0),
                limits=httpx.Limits(max_connections=50, max_keepalive_connections=20),
                headers={"Accept": "application/json"},
                follow_redirects=True,
            )
        return BaseFetcher._shared_client

    @classmethod
    async def close_shared_client(cls) -> None:
        """Close the shared HTTP client."""
        client = BaseFetcher._shared_client
        if client is not None and not client.is_closed:
            await client.aclose()
        BaseFetcher._shared_client = None

    async def fetch(self) -> NormalizedPrice:
        """Fetch, extract and validate the provider's current price.

        :returns: Validated NormalizedPrice.
        :raises FetcherError: Subclass describing why the provider failed.
        """
        response = await self._get(self.spec.endpoint)
        try:
            raw = response.json()
        except ValueError as e:
            raise DecodeFailure(self.name, e) from e

        value = self.extract(raw)
        price = validate_price(NormalizedPrice(provider=self.name, value=value))
        logger.debug(f"[{self.name}] price {price.value}")
        return price

    def extract(self, raw: Any) -> float:
        """Pull the price out of a decoded response body.

        :param raw: Decoded JSON body.
        :returns: Price as float, not yet validated.
        :raises DecodeFailure: If a container has the wrong type.
        :raises MissingFieldFailure: If a key/index is absent or the field is empty.
        :raises FormatFailure: If a string price is not a decimal number.
        """
        node = raw
        for step in self.spec.price_path:
            node = self._step(node, step)
        return self._parse_price(node)

    def _step(self, node: Any, step: str | int) -> Any:
        if isinstance(step, int):
            if not isinstance(node, list):
                raise DecodeFailure(
                    self.name, f"expected array at {step!r}, got {type(node).__name__}"
                )
            if not -len(node) <= step < len(node):
                raise MissingFieldFailure(
                    self.name, f"index {step} out of range (length {len(node)})"
                )
            return node[step]

        if not isinstance(node, dict):
            raise DecodeFailure(
                self.name, f"expected object at {step!r}, got {type(node).__name__}"
            )
        if node.get(step) is None:
            raise MissingFieldFailure(self.name, f"field {step!r} missing")
        return node[step]

    def _parse_price(self, field: Any) -> float:
        if self.spec.encoding is PriceEncoding.NUMBER:
            if isinstance(field, bool) or not isinstance(field, (int, float)):
                raise DecodeFailure(
                    self.name, f"expected number, got {type(field).__name__}"
                )
            try:
                return float(field)
            except OverflowError as e:
                raise DecodeFailure(self.name, f"number out of range: {e}") from e

        if not isinstance(field, str):
            raise DecodeFailure(self.name, f"expected string, got {type(field).__name__}")
        if not field.strip():
            raise MissingFieldFailure(self.name, "empty price field")
        # float() rejects signaling NaN with ValueError
        try:
            return float(Decimal(field.strip()))
        except (InvalidOperation, ValueError) as e:
            raise FormatFailure(self.name, field) from e

    async def _get(
        self,
        url: str,
        *,
        params: dict | None = None,
        headers: dict | None = None,
    ) -> httpx.Response:
        """Make an HTTP GET request using the shared client.

        :param url: Request URL.
        :param params: Optional query parameters.
        :param headers: Optional request headers.
        :returns: httpx.Response object.
        :raises FetcherHTTPError: On non-2xx response.
        :raises TransportFailure: On network/timeout errors.
        """
        client = self.get_shared_client()
        try:
            response = await client.get(
                url,
                params=params,
                headers=headers,
                timeout=self.timeout,
            )
        except httpx.TimeoutException as e:
            raise TransportFailure(self.name, f"timeout: {e!r}") from e
        except httpx.RequestError as e:
            raise TransportFailure(self.name, e) from e

        if not response.is_success:
            logger.debug(
                "HTTP GET %s failed with status %s: %s",
                url,
                response.status_code,
                response.text[:200],
            )
            raise FetcherHTTPError(self.name, response.status_code, response.text[:200])
        return response


# Registry of available fetchers (populated by subclass imports)
FETCHER_REGISTRY: dict[str, type[BaseFetcher]] = {}


def register_fetcher(cls: type[BaseFetcher]) -> type[BaseFetcher]:
    """Decorator to register a fetcher class in the global registry.

    :param cls: Fetcher class to register.
    :returns: The registered class (unchanged).
    :raises FetcherConfigError: If the fetcher has no spec or a duplicate name.

    .. code-block:: python

        @register_fetcher
        class CoinbaseFetcher(BaseFetcher):
            spec = ProviderSpec(name="coinbase", ...)
    """
    spec = getattr(cls, "spec", None)
    if not isinstance(spec, ProviderSpec) or not spec.name:
        raise FetcherConfigError(
            cls.__name__, "fetcher must define a 'spec' class variable with a name"
        )
    existing = FETCHER_REGISTRY.get(spec.name)
    if existing is not None and existing is not cls:
        raise FetcherConfigError(
            spec.name, f"already registered by {existing.__name__}"
        )
    FETCHER_REGISTRY[spec.name] = cls
    return cls


def get_fetcher(name: str, timeout: float | None = None) -> BaseFetcher:
    """Get a fetcher instance by name.

    :param name: Fetcher name (e.g., "coinbase", "kraken").
    :param timeout: Optional request timeout in seconds.
    :returns: Fetcher instance.
    :raises FetcherConfigError: If fetcher name is unknown.
    """
    if name not in FETCHER_REGISTRY:
        available = ", ".join(sorted(FETCHER_REGISTRY.keys()))
        raise FetcherConfigError(name, f"Unknown fetcher. Available: {available}")
    return FETCHER_REGISTRY[name](timeout=timeout)


def get_available_fetchers() -> list[str]:
    """Get list of available fetcher names.

    :returns: Sorted list of registered fetcher names.
    """
    return sorted(FETCHER_REGISTRY.keys())
