from __future__ import annotations


class OsvClientError(RuntimeError):
    """Base class for every error raised by osv_client."""


class BatchSizeExceededError(OsvClientError, ValueError):
    """Raised when a batch holds more queries than the service accepts in one call."""

    def __init__(self, size: int, limit: int) -> None:
        self.size = size
        self.limit = limit
        super().__init__(f"Batch of {size} queries exceeds the maximum of {limit}; split it into several batches")


class OsvTransportError(OsvClientError):
    """Raised when the request could not be completed (connection, timeout, redirects)."""


class OsvHttpStatusError(OsvTransportError):
    """Raised when the service answers with a non-success status code."""

    def __init__(self, status_code: int, url: str, body: str | None = None) -> None:
        self.status_code = status_code
        self.url = url
        self.body = body
        super().__init__(f"HTTP {status_code} for {url}")


class OsvDecodeError(OsvClientError):
    """Raised when a response body cannot be decoded into the expected records."""
