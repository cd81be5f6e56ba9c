"""
BTC/USD Price Feed - Multi-Source Aggregation Module

This module averages the BTC/USD price across exchanges:
- fetchers: One declarative fetcher per exchange
- validation: Admission rule for provider prices
- PriceAggregator: Unweighted mean of valid prices
- AggregationCycle: One fetch/average/publish round
- PriceScheduler: Fixed-interval loop with start/stop lifecycle
- PublishedState: Latest result shared with readers
- SourceStats: Per-source success/failure counters
"""

from .AggregationCycle import AggregationCycle
from .errors import (
    DecodeFailure,
    FetcherError,
    FetcherHTTPError,
    FormatFailure,
    MissingFieldFailure,
    TransportFailure,
    ValidationFailure,
)
from .PriceAggregator import AggregationResult, PriceAggregator
from .PriceScheduler import DEFAULT_INTERVAL, PriceScheduler, SchedulerState
from .PublishedState import CycleResult, PublishedState
from .SourceStats import SourceStats, SourceStatus
from .validation import NormalizedPrice, validate_price

__all__ = [
    "AggregationCycle",
    "AggregationResult",
    "CycleResult",
    "DEFAULT_INTERVAL",
    "DecodeFailure",
    "FetcherError",
    "FetcherHTTPError",
    "FormatFailure",
    "MissingFieldFailure",
    "NormalizedPrice",
    "PriceAggregator",
    "PriceScheduler",
    "PublishedState",
    "SchedulerState",
    "SourceStats",
    "SourceStatus",
    "TransportFailure",
    "ValidationFailure",
    "validate_price",
]
