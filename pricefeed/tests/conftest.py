"""Shared fixtures for the price feed tests."""

from __future__ import annotations

import asyncio
from typing import Any

import pytest

from pricefeed.src.fetchers import BaseFetcher
from pricefeed.src.validation import NormalizedPrice, validate_price


class FakeFetcher(BaseFetcher):
    """Fetcher returning a canned price or raising a canned error.

    :ivar outcome: Price value to report, or an exception to raise.
    :ivar delay: Seconds to wait before answering.
    :ivar calls: Number of fetch() calls.
    """

    def __init__(self, name: str, outcome: Any, delay: float = 0.0) -> None:
        super().__init__()
        self._name = name
        self.outcome = outcome
        self.delay = delay
        self.calls = 0

    @property
    def name(self) -> str:
        return self._name

    async def fetch(self) -> NormalizedPrice:
        self.calls += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if isinstance(self.outcome, BaseException):
            raise self.outcome
        return validate_price(NormalizedPrice(provider=self._name, value=self.outcome))


def make_fetchers(outcomes: dict[str, Any]) -> dict[str, FakeFetcher]:
    """Build FakeFetchers keyed by name."""
    return {name: FakeFetcher(name, outcome) for name, outcome in outcomes.items()}


@pytest.fixture(autouse=True)
def fresh_http_client():
    """Give every test its own shared HTTP client."""
    BaseFetcher._shared_client = None
    yield
    BaseFetcher._shared_client = None
