"""PriceAggregator: Unweighted mean of validated provider prices.

Algorithm:
    1. Filter out None, non-numeric, non-finite and non-positive prices
    2. Return a None price if none remain
    3. Return the arithmetic mean of the remaining prices

There is no outlier rejection: a single provider far from its peers shifts the
mean by its full share.

.. code-block:: python

    >>> aggregator = PriceAggregator()
    >>> result = aggregator.aggregate({"coinbase": 100.0, "kraken": 101.0, "down": None})
    >>> result.price
    100.5
    >>> result.metadata["rejected"]
    ['down']
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TypedDict

from .validation import is_valid_price


class AggregationMetadata(TypedDict, total=False):
    """Metadata about an aggregation.

    :ivar sources: List of sources used in the mean.
    :ivar rejected: Sources whose price was missing or invalid.
    :ivar count: Number of sources used.
    """

    sources: list[str]
    rejected: list[str]
    count: int


@dataclass
class AggregationResult:
    """Result of price aggregation.

    :ivar price: Aggregated price, or None if aggregation failed.
    :ivar metadata: Sources used and rejected.
    """

    price: float | None
    metadata: AggregationMetadata

    @property
    def success(self) -> bool:
        """Check if aggregation was successful."""
        return self.price is not None


class PriceAggregator:
    """Averages prices from multiple sources.

    .. code-block:: python

        >>> agg = PriceAggregator()
        >>> agg.aggregate({"a": 100.0, "b": 101.0, "c": 99.0}).price
        100.0
    """

    def aggregate(self, prices: dict[str, float | None]) -> AggregationResult:
        """Aggregate prices from multiple sources into a single mean price.

        :param prices: Dict mapping source name to price (or None if fetch failed).
        :returns: AggregationResult; price is None when no source is valid.
        """
        valid: dict[str, float] = {}
        rejected: list[str] = []
        for source, price in prices.items():
            if is_valid_price(price):
                valid[source] = float(price)
            else:
                rejected.append(source)

        if not valid:
            return AggregationResult(
                price=None,
                metadata={"sources": [], "rejected": rejected, "count": 0},
            )

        # fsum is exactly rounded, so the mean does not depend on source order
        mean = math.fsum(valid.values()) / len(valid)

        return AggregationResult(
            price=mean,
            metadata={
                "sources": list(valid.keys()),
                "rejected": rejected,
                "count": len(valid),
            },
        )
