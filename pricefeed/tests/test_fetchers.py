"""Unit tests for the price fetchers."""

from __future__ import annotations

import math

import httpx
import pytest
import respx

from pricefeed.src.errors import (
    DecodeFailure,
    FetcherConfigError,
    FetcherHTTPError,
    FormatFailure,
    MissingFieldFailure,
    TransportFailure,
    ValidationFailure,
)
from pricefeed.src.fetchers import (
    FETCHER_REGISTRY,
    BaseFetcher,
    PriceEncoding,
    ProviderSpec,
    get_available_fetchers,
    get_fetcher,
    register_fetcher,
)
from pricefeed.src.validation import NormalizedPrice

# One response per provider, shaped like the real API answer.
PROVIDER_FIXTURES = {
    "bitfinex": [67880.0, 1.2, 67890.0, 0.8, 120.5, 0.0018, 67890.5, 1523.4, 68000.0, 67000.0],
    "bitget": {"code": "00000", "data": [{"symbol": "BTCUSDT", "lastPr": "67890.5"}]},
    "bitrue": {"symbol": "BTCUSDT", "price": "67890.50"},
    "btse": [{"symbol": "BTC-USD", "lastPrice": 67890.5, "indexPrice": 67885.1}],
    "coinbase": {"trade_id": 1, "price": "67890.50", "size": "0.01"},
    "cryptocom": {"code": 0, "result": {"data": [{"i": "BTC_USDT", "a": "67890.5"}]}},
    "gate": {"result": "true", "last": "67890.5", "lowestAsk": "67891"},
    "huobi": {"status": "ok", "tick": {"data": [{"price": 67890.5, "amount": 0.1}]}},
    "kraken": {"error": [], "result": {"XXBTZUSD": {"a": ["67890.5", "1", "1.0"]}}},
    "kucoin": {"code": "200000", "data": {"price": "67890.5", "bestBid": "67890.4"}},
    "okx": {"code": "0", "data": [{"instId": "BTC-USDC", "last": "67890.5"}]},
    "xt": {"rc": 0, "result": [{"s": "btc_usdt", "c": "67890.5"}]},
}


class TestRegistry:
    """Test fetcher registration and lookup."""

    def test_all_providers_registered(self) -> None:
        """Every supported exchange has a fetcher."""
        assert get_available_fetchers() == sorted(PROVIDER_FIXTURES)

    def test_get_fetcher(self) -> None:
        """get_fetcher returns a configured instance."""
        fetcher = get_fetcher("coinbase", timeout=3.0)

        assert fetcher.name == "coinbase"
        assert fetcher.timeout == 3.0

    def test_default_timeout(self) -> None:
        """Fetchers use the default timeout unless told otherwise."""
        assert get_fetcher("kraken").timeout == BaseFetcher.DEFAULT_TIMEOUT

    def test_unknown_fetcher(self) -> None:
        """Unknown names raise FetcherConfigError listing what exists."""
        with pytest.raises(FetcherConfigError, match="Available: bitfinex"):
            get_fetcher("mtgox")

    def test_register_requires_spec(self) -> None:
        """A fetcher without a ProviderSpec cannot be registered."""
        with pytest.raises(FetcherConfigError, match="must define a 'spec'"):
            @register_fetcher
            class NoSpecFetcher(BaseFetcher):
                pass

    def test_register_rejects_duplicate_name(self) -> None:
        """Two fetchers cannot share a provider name."""
        with pytest.raises(FetcherConfigError, match="already registered"):
            @register_fetcher
            class SecondCoinbase(BaseFetcher):
                spec = ProviderSpec(
                    name="coinbase",
                    endpoint="https://example.com",
                    price_path=("price",),
                )

        assert FETCHER_REGISTRY["coinbase"].__name__ == "CoinbaseFetcher"

    def test_new_provider_needs_only_a_spec(self) -> None:
        """A declarative spec is enough to extract a new provider's price."""

        class ExampleFetcher(BaseFetcher):
            spec = ProviderSpec(
                name="example",
                endpoint="https://api.example.com/ticker",
                price_path=("ticker", "last", 1),
                encoding=PriceEncoding.NUMBER,
            )

        fetcher = ExampleFetcher()
        assert fetcher.extract({"ticker": {"last": [0, 42.5]}}) == 42.5


class TestExtract:
    """Test price extraction from per-provider response fixtures."""

    @pytest.mark.parametrize("name", sorted(PROVIDER_FIXTURES))
    def test_fixture_price(self, name: str) -> None:
        """Each provider's fixture yields the exact expected price."""
        fetcher = get_fetcher(name)
        assert fetcher.extract(PROVIDER_FIXTURES[name]) == 67890.5

    @pytest.mark.parametrize(
        "name,body,error",
        [
            ("bitfinex", [], MissingFieldFailure),
            ("bitfinex", [1.0, 2.0, 3.0], MissingFieldFailure),
            ("bitfinex", {"error": "ratelimit"}, DecodeFailure),
            ("bitfinex", [0, 0, 0, 0, 0, 0, "67890.5"], DecodeFailure),
            ("bitget", {"code": "00000", "data": []}, MissingFieldFailure),
            ("bitget", {"data": [{"lastPr": ""}]}, MissingFieldFailure),
            ("bitrue", {}, MissingFieldFailure),
            ("bitrue", {"price": "not-a-number"}, FormatFailure),
            ("btse", [], MissingFieldFailure),
            ("btse", [{"symbol": "BTC-USD"}], MissingFieldFailure),
            ("coinbase", {"message": "NotFound"}, MissingFieldFailure),
            ("coinbase", {"price": ""}, MissingFieldFailure),
            ("coinbase", {"price": "12,345.6"}, FormatFailure),
            ("coinbase", {"price": 67890.5}, DecodeFailure),
            ("coinbase", ["67890.5"], DecodeFailure),
            ("cryptocom", {"code": 0, "result": {}}, MissingFieldFailure),
            ("cryptocom", {"code": 0, "result": {"data": []}}, MissingFieldFailure),
            ("gate", {"result": "false", "last": None}, MissingFieldFailure),
            ("huobi", {"status": "error"}, MissingFieldFailure),
            ("huobi", {"tick": {"data": []}}, MissingFieldFailure),
            ("huobi", {"tick": {"data": [{"price": "67890.5"}]}}, DecodeFailure),
            ("huobi", {"tick": {"data": [{"price": True}]}}, DecodeFailure),
            ("kraken", {"error": ["EQuery:Unknown asset pair"], "result": {}}, MissingFieldFailure),
            ("kraken", {"error": [], "result": {"XXBTZUSD": {"a": []}}}, MissingFieldFailure),
            ("kucoin", {"code": "200000", "data": None}, MissingFieldFailure),
            ("kucoin", {"code": "200000", "data": {"price": "abc"}}, FormatFailure),
            ("okx", {"code": "0", "data": []}, MissingFieldFailure),
            ("xt", {"rc": 0, "result": []}, MissingFieldFailure),
            ("xt", {"rc": 0, "result": {"c": "67890.5"}}, DecodeFailure),
            ("coinbase", {"price": "sNaN"}, FormatFailure),
            ("okx", {"code": "0", "data": [{"last": "-sNaN"}]}, FormatFailure),
            ("btse", [{"lastPrice": 10**400}], DecodeFailure),
            ("bitfinex", [0, 0, 0, 0, 0, 0, -(10**400)], DecodeFailure),
        ],
    )
    def test_malformed_response(self, name: str, body, error: type) -> None:
        """Malformed or empty bodies raise a correctly classified failure."""
        fetcher = get_fetcher(name)

        with pytest.raises(error) as exc_info:
            fetcher.extract(body)

        assert exc_info.value.provider == name

    def test_format_failure_keeps_raw_value(self) -> None:
        """FormatFailure carries the string that could not be parsed."""
        with pytest.raises(FormatFailure) as exc_info:
            get_fetcher("okx").extract({"data": [{"last": "1.2.3"}]})

        assert exc_info.value.raw_value == "1.2.3"

    def test_string_price_whitespace_trimmed(self) -> None:
        """Surrounding whitespace in a decimal string is ignored."""
        assert get_fetcher("gate").extract({"last": " 67890.5 "}) == 67890.5

    def test_string_nan_parses_then_fails_validation_later(self) -> None:
        """extract() parses 'NaN'; rejecting it is the validation step's job."""
        assert math.isnan(get_fetcher("coinbase").extract({"price": "NaN"}))

    def test_failures_reexported_from_fetchers_package(self) -> None:
        """Every failure class is importable from the fetchers package."""
        import pricefeed.src.fetchers as fetchers

        assert fetchers.ValidationFailure is ValidationFailure
        assert "ValidationFailure" in fetchers.__all__


@pytest.mark.asyncio
class TestFetch:
    """Test the full fetch path against mocked provider endpoints."""

    @respx.mock
    async def test_fetch_success(self) -> None:
        """A good response yields a NormalizedPrice."""
        fetcher = get_fetcher("coinbase")
        route = respx.get(fetcher.spec.endpoint).mock(
            return_value=httpx.Response(200, json=PROVIDER_FIXTURES["coinbase"])
        )

        price = await fetcher.fetch()

        assert price == NormalizedPrice(provider="coinbase", value=67890.5)
        assert route.calls.last.request.headers["Accept"] == "application/json"
        await BaseFetcher.close_shared_client()

    @respx.mock
    async def test_fetch_query_string_endpoint(self) -> None:
        """Endpoints carrying a query string are requested as-is."""
        fetcher = get_fetcher("kraken")
        route = respx.get(fetcher.spec.endpoint).mock(
            return_value=httpx.Response(200, json=PROVIDER_FIXTURES["kraken"])
        )

        assert (await fetcher.fetch()).value == 67890.5
        assert route.calls.last.request.url.params["pair"] == "BTCUSD"
        await BaseFetcher.close_shared_client()

    @respx.mock
    async def test_fetch_http_error(self) -> None:
        """Non-2xx status raises FetcherHTTPError, a TransportFailure."""
        fetcher = get_fetcher("bitfinex")
        respx.get(fetcher.spec.endpoint).mock(
            return_value=httpx.Response(503, text="maintenance")
        )

        with pytest.raises(FetcherHTTPError) as exc_info:
            await fetcher.fetch()

        assert isinstance(exc_info.value, TransportFailure)
        assert exc_info.value.status_code == 503
        assert exc_info.value.provider == "bitfinex"
        await BaseFetcher.close_shared_client()

    @respx.mock
    async def test_fetch_connection_error(self) -> None:
        """Connection errors raise TransportFailure."""
        fetcher = get_fetcher("okx")
        respx.get(fetcher.spec.endpoint).mock(side_effect=httpx.ConnectError("refused"))

        with pytest.raises(TransportFailure) as exc_info:
            await fetcher.fetch()

        assert exc_info.value.kind == "transport"
        await BaseFetcher.close_shared_client()

    @respx.mock
    async def test_fetch_timeout(self) -> None:
        """Request timeouts raise TransportFailure."""
        fetcher = get_fetcher("xt")
        respx.get(fetcher.spec.endpoint).mock(side_effect=httpx.ReadTimeout("slow"))

        with pytest.raises(TransportFailure, match="timeout"):
            await fetcher.fetch()
        await BaseFetcher.close_shared_client()

    @respx.mock
    async def test_fetch_invalid_json(self) -> None:
        """A non-JSON body raises DecodeFailure."""
        fetcher = get_fetcher("gate")
        respx.get(fetcher.spec.endpoint).mock(
            return_value=httpx.Response(200, text="<html>oops</html>")
        )

        with pytest.raises(DecodeFailure):
            await fetcher.fetch()
        await BaseFetcher.close_shared_client()

    @respx.mock
    @pytest.mark.parametrize("value", [0, -1.5])
    async def test_fetch_non_positive_price(self, value: float) -> None:
        """Zero or negative prices raise ValidationFailure."""
        fetcher = get_fetcher("btse")
        respx.get(fetcher.spec.endpoint).mock(
            return_value=httpx.Response(200, json=[{"lastPrice": value}])
        )

        with pytest.raises(ValidationFailure) as exc_info:
            await fetcher.fetch()

        assert exc_info.value.value == value
        await BaseFetcher.close_shared_client()

    @respx.mock
    async def test_fetch_signaling_nan_string(self) -> None:
        """A signaling NaN string surfaces as FormatFailure from fetch()."""
        fetcher = get_fetcher("okx")
        respx.get(fetcher.spec.endpoint).mock(
            return_value=httpx.Response(200, json={"code": "0", "data": [{"last": "sNaN"}]})
        )

        with pytest.raises(FormatFailure) as exc_info:
            await fetcher.fetch()

        assert exc_info.value.raw_value == "sNaN"
        await BaseFetcher.close_shared_client()

    @respx.mock
    async def test_fetch_nan_string(self) -> None:
        """A 'NaN' price string is parsed but rejected by validation."""
        fetcher = get_fetcher("coinbase")
        respx.get(fetcher.spec.endpoint).mock(
            return_value=httpx.Response(200, json={"price": "NaN"})
        )

        with pytest.raises(ValidationFailure):
            await fetcher.fetch()
        await BaseFetcher.close_shared_client()


@pytest.mark.asyncio
class TestSharedClient:
    """Test shared HTTP client lifecycle."""

    async def test_client_shared_across_fetchers(self) -> None:
        """All fetchers use one client."""
        client = get_fetcher("coinbase").get_shared_client()

        assert get_fetcher("kraken").get_shared_client() is client
        await BaseFetcher.close_shared_client()

    async def test_close_and_recreate(self) -> None:
        """Closing drops the client; the next call creates a fresh one."""
        client = BaseFetcher.get_shared_client()
        await BaseFetcher.close_shared_client()

        assert client.is_closed
        assert BaseFetcher.get_shared_client() is not client
        await BaseFetcher.close_shared_client()
