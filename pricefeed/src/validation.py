"""Provider-agnostic admission rule for normalized prices.

A price is accepted only if it is a finite, strictly positive real number.
There is no cross-provider plausibility check: a provider reporting a price
far from its peers still counts toward the mean.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from numbers import Real
from typing import Any

from .errors import ValidationFailure


@dataclass(frozen=True)
class NormalizedPrice:
    """A single provider's price for the tracked asset.

    :ivar provider: Provider name.
    :ivar value: Price in USD.
    """

    provider: str
    value: float


def is_valid_price(value: Any) -> bool:
    """Check whether a value may contribute to the consensus price."""
    if isinstance(value, bool) or not isinstance(value, Real):
        return False
    return math.isfinite(value) and value > 0


def validate_price(price: NormalizedPrice) -> NormalizedPrice:
    """Admit a normalized price or reject it.

    :param price: Price produced by a fetcher.
    :returns: The same price, unchanged.
    :raises ValidationFailure: If the value is <= 0, NaN, infinite or not numeric.
    """
    if not is_valid_price(price.value):
        raise ValidationFailure(price.provider, price.value)
    return price
