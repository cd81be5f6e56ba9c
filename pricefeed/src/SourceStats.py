"""SourceStats: Per-source outcome counters.

Every cycle reports each provider's outcome here. The counters are purely
observational: a failing provider is still queried on the next cycle, there is
no backoff.

.. code-block:: python

    >>> stats = SourceStats(["coinbase", "kraken"])
    >>> stats.record_failure("kraken", "transport")
    1
    >>> stats.record_failure("kraken", "decode")
    2
    >>> stats.record_success("kraken")
    >>> stats.get_source_status("kraken").consecutive_failures
    0
"""

from __future__ import annotations

import threading
import time
from dataclasses import asdict, dataclass


@dataclass
class SourceStatus:
    """Tracks the outcomes of a single source.

    :ivar consecutive_failures: Number of failures since the last success.
    :ivar total_failures: Total failures since tracking began.
    :ivar total_successes: Total successes since tracking began.
    :ivar last_error: Failure kind of the most recent failure, if any.
    :ivar last_success: Unix timestamp of the most recent success.
    """

    consecutive_failures: int = 0
    total_failures: int = 0
    total_successes: int = 0
    last_error: str | None = None
    last_success: float | None = None


class SourceStats:
    """Counts successes and failures per source.

    Updated by the aggregation cycle, read by the status endpoint.

    :ivar sources: List of tracked source names.
    """

    def __init__(self, sources: list[str]) -> None:
        """Initialize the tracker.

        :param sources: List of source names to track.
        """
        self.sources = list(sources)
        self._lock = threading.Lock()
        self._status: dict[str, SourceStatus] = {s: SourceStatus() for s in sources}

    def _get_or_add(self, source: str) -> SourceStatus:
        if source not in self._status:
            self.sources.append(source)
            self._status[source] = SourceStatus()
        return self._status[source]

    def record_failure(self, source: str, kind: str) -> int:
        """Record a failure for a source.

        :param source: Source name that failed.
        :param kind: Failure kind (e.g. "transport", "validation").
        :returns: Number of consecutive failures for this source.
        """
        with self._lock:
            status = self._get_or_add(source)
            status.consecutive_failures += 1
            status.total_failures += 1
            status.last_error = kind
            return status.consecutive_failures

    def record_success(self, source: str) -> None:
        """Record a successful fetch, resetting the failure streak.

        :param source: Source name that succeeded.
        """
        with self._lock:
            status = self._get_or_add(source)
            status.consecutive_failures = 0
            status.total_successes += 1
            status.last_success = time.time()

    def get_source_status(self, source: str) -> SourceStatus | None:
        """Get the status of a specific source.

        :param source: Source name to query.
        :returns: Copy of the SourceStatus, or None if source not tracked.
        """
        with self._lock:
            status = self._status.get(source)
            return SourceStatus(**asdict(status)) if status else None

    def get_all_status(self) -> dict[str, dict]:
        """Get status of all sources as plain dicts.

        :returns: Dict mapping source names to their counters.
        """
        with self._lock:
            return {s: asdict(st) for s, st in self._status.items()}

