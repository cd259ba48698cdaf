from __future__ import annotations

import logging
from threading import BoundedSemaphore, Lock
from typing import Iterator

import httpx

logger = logging.getLogger(__name__)


class _ReleasingStream(httpx.SyncByteStream):
    """Response body that gives its host slot back once closed."""

    def __init__(self, stream: httpx.SyncByteStream, semaphore: BoundedSemaphore) -> None:
        self._stream = stream
        self._semaphore = semaphore
        self._released = False
        self._lock = Lock()

    def __iter__(self) -> Iterator[bytes]:
        yield from self._stream

    def close(self) -> None:
        try:
            self._stream.close()
        finally:
            with self._lock:
                if not self._released:
                    self._released = True
                    self._semaphore.release()


class HostLimitedTransport(httpx.BaseTransport):
    """Caps simultaneous in-flight requests per destination host.

    A slot is held from the moment the request is sent until its response
    body has been read or closed. The global cap is enforced by the wrapped
    transport's connection pool.

    Example:
        inner = httpx.HTTPTransport(limits=httpx.Limits(max_connections=100))
        client = httpx.Client(transport=HostLimitedTransport(inner, max_per_host=100))
    """

    def __init__(self, transport: httpx.BaseTransport, max_per_host: int) -> None:
        if max_per_host < 1:
            raise ValueError("max_per_host must be >= 1")
        self._transport = transport
        self._max_per_host = max_per_host
        self._semaphores: dict[str, BoundedSemaphore] = {}
        self._lock = Lock()

    def _semaphore_for(self, host: str) -> BoundedSemaphore:
        with self._lock:
            semaphore = self._semaphores.get(host)
            if semaphore is None:
                semaphore = BoundedSemaphore(self._max_per_host)
                self._semaphores[host] = semaphore
            return semaphore

    def handle_request(self, request: httpx.Request) -> httpx.Response:
        semaphore = self._semaphore_for(request.url.host)
        semaphore.acquire()
        try:
            response = self._transport.handle_request(request)
        except BaseException:
            semaphore.release()
            raise
        return httpx.Response(
            status_code=response.status_code,
            headers=response.headers,
            stream=_ReleasingStream(response.stream, semaphore),
            extensions=response.extensions,
        )

    def close(self) -> None:
        self._transport.close()
