"""Latest consensus price shared between the scheduler and readers.

The scheduler publishes a new CycleResult after every successful cycle. Query
handlers read it at any time. Results are immutable and are swapped in as a
whole, so a reader sees either the previous result or the new one.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CycleResult:
    """Outcome of one successful aggregation cycle.

    :ivar consensus_value: Mean of the validated provider prices.
    :ivar contributing_count: Number of providers in the mean.
    :ivar timestamp: Unix timestamp when the cycle finished.
    :ivar sources: Names of the contributing providers.
    """

    consensus_value: float
    contributing_count: int
    timestamp: float = field(default_factory=time.time)
    sources: tuple[str, ...] = ()


class PublishedState:
    """Thread-safe holder for the most recent CycleResult.

    Writers are serialized by a lock held only for the assignment. Readers take
    the current reference without locking.
    """

    def __init__(self) -> None:
        self._result: CycleResult | None = None
        self._write_lock = threading.Lock()

    def publish(self, result: CycleResult) -> None:
        """Replace the published result.

        :param result: The new cycle result.
        """
        with self._write_lock:
            self._result = result
        logger.debug(
            f"Published average {result.consensus_value:.2f} "
            f"from {result.contributing_count} sources"
        )

    def read(self) -> CycleResult | None:
        """Get the latest result.

        :returns: The latest CycleResult, or None before the first successful cycle.
        """
        return self._result

    def get_current_average(self) -> dict[str, float | None]:
        """Get the latest consensus value in the query response shape.

        :returns: ``{"average_price": value}``; value is None if no cycle has
            succeeded yet.
        """
        result = self._result
        return {"average_price": result.consensus_value if result else None}

    def get_age(self) -> float | None:
        """Get the age of the published result in seconds.

        :returns: Age in seconds, or None if nothing has been published.
        """
        result = self._result
        if result is None:
            return None
        return time.time() - result.timestamp
