"""AggregationCycle: One round of fetching, averaging and publishing.

Architecture:
    - Calls fetch() on every configured fetcher exactly once
    - Fetches run concurrently by default, or one after another
    - Each fetch is bounded by fetch_timeout
    - Failed providers are logged, counted and left out of the mean
    - The mean of the remaining prices is published to PublishedState
    - If no provider succeeds, nothing is published
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import TYPE_CHECKING

from .errors import FetcherError
from .PriceAggregator import PriceAggregator
from .PublishedState import CycleResult, PublishedState
from .SourceStats import SourceStats

if TYPE_CHECKING:
    from .fetchers import BaseFetcher
    from .validation import NormalizedPrice

logger = logging.getLogger(__name__)


class AggregationCycle:
    """Runs aggregation rounds over a fixed set of fetchers.

    :ivar fetchers: Dict mapping source names to fetcher instances.
    :ivar state: Where successful results are published.
    :ivar stats: Per-source outcome counters.
    :ivar fetch_timeout: Timeout for each fetch in seconds.
    :ivar concurrent: Fetch all sources at once instead of sequentially.
    """

    def __init__(
        self,
        fetchers: dict[str, BaseFetcher],
        state: PublishedState,
        stats: SourceStats | None = None,
        fetch_timeout: float = 10.0,
        concurrent: bool = True,
    ) -> None:
        """Initialize the cycle.

        :param fetchers: Dict mapping source names to fetcher instances.
        :param state: Published state to write results to.
        :param stats: Optional outcome counters (created if omitted).
        :param fetch_timeout: Timeout for each fetch (default: 10.0).
        :param concurrent: Run fetches concurrently (default: True).
        :raises ValueError: If no fetchers are given.
        """
        if not fetchers:
            raise ValueError("At least one fetcher is required")

        self.fetchers = fetchers
        self.state = state
        self.stats = stats or SourceStats(list(fetchers))
        self.fetch_timeout = fetch_timeout
        self.concurrent = concurrent
        self.aggregator = PriceAggregator()

    async def run_cycle(self) -> CycleResult | None:
        """Fetch every source once and publish the mean.

        :returns: The published CycleResult, or None if no source succeeded.
        """
        started = time.monotonic()

        if self.concurrent:
            prices = await asyncio.gather(
                *(self._fetch_single(f) for f in self.fetchers.values())
            )
        else:
            prices = [await self._fetch_single(f) for f in self.fetchers.values()]

        results = dict(zip(self.fetchers, prices, strict=True))
        agg_result = self.aggregator.aggregate(results)
        elapsed = time.monotonic() - started

        if not agg_result.success:
            logger.warning(
                f"No valid prices from {len(self.fetchers)} sources "
                f"({elapsed:.1f}s), keeping previous average"
            )
            return None

        cycle_result = CycleResult(
            consensus_value=agg_result.price,
            contributing_count=agg_result.metadata["count"],
            sources=tuple(agg_result.metadata["sources"]),
        )
        self.state.publish(cycle_result)

        failed = agg_result.metadata["rejected"]
        logger.info(
            f"Average price ${cycle_result.consensus_value:,.2f} from "
            f"{cycle_result.contributing_count}/{len(self.fetchers)} sources "
            f"({elapsed:.1f}s)" + (f", failed: {failed}" if failed else "")
        )
        return cycle_result

    async def _fetch_single(self, fetcher: BaseFetcher) -> float | None:
        """Fetch one source with timeout, recording the outcome.

        :param fetcher: Fetcher instance to use.
        :returns: Validated price, or None on any failure.
        """
        try:
            price: NormalizedPrice = await asyncio.wait_for(
                fetcher.fetch(),
                timeout=self.fetch_timeout,
            )
        except asyncio.TimeoutError:
            logger.warning(f"[{fetcher.name}] Timeout after {self.fetch_timeout}s")
            self.stats.record_failure(fetcher.name, "timeout")
            return None
        except FetcherError as e:
            logger.warning(f"[{fetcher.name}] {e.kind} failure: {e}")
            self.stats.record_failure(fetcher.name, e.kind)
            return None
        except Exception as e:
            logger.warning(f"[{fetcher.name}] Unexpected error: {e!r}")
            self.stats.record_failure(fetcher.name, "unexpected")
            return None

        self.stats.record_success(fetcher.name)
        return price.value
