from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable, Mapping, Optional, TypeVar

import httpx

from ..config.settings import DEFAULT_MAX_CONCURRENCY
from ..core.errors import OsvDecodeError, OsvHttpStatusError, OsvTransportError
from .transport import HostLimitedTransport

logger = logging.getLogger(__name__)

T = TypeVar("T")


class HttpClient:
    """Blocking JSON-over-HTTP client sized for high fan-out of short requests.

    ``max_concurrency`` bounds the connection pool (in-flight requests across
    all hosts) and the worker pool used by :meth:`submit`.
    ``max_concurrency_per_host`` bounds in-flight requests to one host and
    defaults to the same value. The instance is thread-safe; release it with
    :meth:`close` or by using it as a context manager.

    Example:
        with HttpClient(max_concurrency=20) as http:
            futures = [http.submit(http.get_json, url) for url in urls]
            payloads = [f.result() for f in futures]
    """

    def __init__(
        self,
        base_headers: Optional[Mapping[str, str]] = None,
        timeout_seconds: float = 30.0,
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
        max_concurrency_per_host: Optional[int] = None,
        max_redirects: int = 10,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be >= 1")
        per_host = max_concurrency_per_host or max_concurrency
        if transport is None:
            transport = httpx.HTTPTransport(
                limits=httpx.Limits(max_connections=max_concurrency, max_keepalive_connections=max_concurrency)
            )
        self._max_concurrency = max_concurrency
        self._max_concurrency_per_host = per_host
        self._client = httpx.Client(
            timeout=timeout_seconds,
            headers=dict(base_headers or {}),
            follow_redirects=True,
            max_redirects=max_redirects,
            transport=HostLimitedTransport(transport, max_per_host=per_host),
        )
        self._executor = ThreadPoolExecutor(max_workers=max_concurrency, thread_name_prefix="osv-http")
        self._closed = False
        logger.debug(f"HttpClient created (max_concurrency={max_concurrency}, per_host={per_host})")

    @property
    def max_concurrency(self) -> int:
        return self._max_concurrency

    @property
    def max_concurrency_per_host(self) -> int:
        return self._max_concurrency_per_host

    @property
    def closed(self) -> bool:
        return self._closed

    def _request(self, method: str, url: str, payload: Optional[dict] = None) -> httpx.Response:
        logger.debug(f"{method} {url}")
        try:
            resp = self._client.request(method, url, json=payload)
        except httpx.RequestError as e:
            raise OsvTransportError(f"{method} {url} failed: {e}") from e
        try:
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise OsvHttpStatusError(resp.status_code, str(resp.request.url), resp.text) from e
        return resp

    @staticmethod
    def _json_object(resp: httpx.Response) -> dict:
        try:
            data = resp.json()
        except ValueError as e:
            raise OsvDecodeError(f"Response from {resp.request.url} is not valid JSON: {e}") from e
        if not isinstance(data, dict):
            raise OsvDecodeError(f"Response from {resp.request.url} is not a JSON object")
        return data

    def get_json(self, url: str) -> dict:
        return self._json_object(self._request("GET", url))

    def post_json(self, url: str, payload: dict) -> dict:
        return self._json_object(self._request("POST", url, payload))

    def submit(self, fn: Callable[..., T], *args: Any, **kwargs: Any) -> "Future[T]":
        """Run ``fn`` on the worker pool and return its future.

        A future that has not started yet can be cancelled without affecting
        the others.
        """
        return self._executor.submit(fn, *args, **kwargs)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._executor.shutdown(wait=True, cancel_futures=True)
        self._client.close()
        logger.debug("HttpClient closed")

    def __enter__(self) -> "HttpClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
