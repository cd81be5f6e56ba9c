"""Per-provider failure taxonomy.

Every failure names the provider it belongs to and is recoverable at the
cycle level: the provider is left out of that cycle's average.

.. code-block:: text

    FetcherError
    ├── FetcherConfigError
    ├── TransportFailure
    │   └── FetcherHTTPError
    ├── DecodeFailure
    ├── MissingFieldFailure
    ├── FormatFailure
    └── ValidationFailure
"""

from __future__ import annotations

from typing import Any


class FetcherError(Exception):
    """Base exception for fetcher errors.

    :ivar provider: Name of the provider the failure belongs to.
    :cvar kind: Short failure label used in logs and counters.
    """

    kind = "error"

    def __init__(self, provider: str, message: str):
        self.provider = provider
        super().__init__(message)


class FetcherConfigError(FetcherError):
    """Raised when fetcher configuration is invalid (e.g., unknown source)."""

    kind = "config"


class TransportFailure(FetcherError):
    """Raised when the request could not be completed.

    :ivar cause: Underlying transport error or description.
    """

    kind = "transport"

    def __init__(self, provider: str, cause: Exception | str):
        self.cause = cause
        super().__init__(provider, f"Request failed: {cause}")


class FetcherHTTPError(TransportFailure):
    """Raised when the provider answers with a non-2xx status.

    :ivar status_code: HTTP status code from the failed request.
    """

    def __init__(self, provider: str, status_code: int, message: str):
        self.status_code = status_code
        super().__init__(provider, f"HTTP {status_code}: {message}")


class DecodeFailure(FetcherError):
    """Raised when the body is not JSON or does not have the expected shape."""

    kind = "decode"

    def __init__(self, provider: str, cause: Exception | str):
        self.cause = cause
        super().__init__(provider, f"Failed to decode response: {cause}")


class MissingFieldFailure(FetcherError):
    """Raised when the price field is absent or empty."""

    kind = "missing_field"

    def __init__(self, provider: str, detail: str = "price field missing"):
        super().__init__(provider, detail)


class FormatFailure(FetcherError):
    """Raised when a string-encoded price is not a decimal number.

    :ivar raw_value: The unparseable string.
    """

    kind = "format"

    def __init__(self, provider: str, raw_value: str):
        self.raw_value = raw_value
        super().__init__(provider, f"Cannot parse price {raw_value!r}")


class ValidationFailure(FetcherError):
    """Raised when a price is not a finite positive number.

    :ivar value: The rejected value.
    """

    kind = "validation"

    def __init__(self, provider: str, value: Any):
        self.value = value
        super().__init__(provider, f"Invalid price value: {value!r}")
