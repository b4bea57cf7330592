"""
Provider error classification.

Adapters raise these internally and absorb them at their public boundary;
nothing here ever reaches the resolver.
"""

from enum import Enum
from typing import Optional


class ErrorCategory(str, Enum):
    """Categories of upstream failures."""

    NETWORK = "network"           # Connection refused, DNS, reset
    TIMEOUT = "timeout"           # Request exceeded the configured timeout
    HTTP_STATUS = "http_status"   # Non-2xx response
    MALFORMED = "malformed"       # Body is not the JSON shape we expect


class ProviderError(Exception):
    """An upstream balance source could not be read."""

    def __init__(
        self,
        message: str,
        provider: str,
        category: ErrorCategory = ErrorCategory.MALFORMED,
        status_code: Optional[int] = None,
    ):
        super().__init__(message)
        self.message = message
        self.provider = provider
        self.category = category
        self.status_code = status_code

    def __str__(self) -> str:
        if self.status_code is not None:
            return f"{self.provider}: {self.message} (HTTP {self.status_code})"
        return f"{self.provider}: {self.message}"
