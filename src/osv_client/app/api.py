from __future__ import annotations

from concurrent.futures import Future
from typing import Iterable, Sequence

from dependency_injector import providers

from .container import Container
from ..config.settings import ClientConfig
from ..config.urls import Server
from ..core.domain.models import BatchQuery, BatchResult, PackageQuery
from ..core.domain.vulnerability import Vulnerability
from ..infra.http_client import HttpClient


class OsvApiClient:
    """Client for the OSV.dev vulnerability database.

    Every call is one request/response exchange: no retries, no caching, no
    automatic batch splitting. The client itself holds no mutable state, so
    one instance can be used from many threads at once.

    Example:
        # Production server, default transport (100 concurrent requests)
        with OsvApiClient() as client:
            vulns = client.get_vulnerabilities_for_package(
                by_version(Package(name="django", ecosystem="PyPI"), "1.4.2")
            )

        # Staging server
        with OsvApiClient(Server.STAGING) as client:
            record = client.get_vulnerability_for_id("GHSA-xxxx-xxxx-xxxx")

        # Arbitrary URL and a caller-owned transport (not closed by the client)
        http = HttpClient(max_concurrency=20)
        client = OsvApiClient(base_url="http://localhost:8080", http_client=http)
    """

    def __init__(
        self,
        server: Server | str | None = None,
        *,
        base_url: str | None = None,
        http_client: HttpClient | None = None,
        max_concurrency: int | None = None,
        max_concurrency_per_host: int | None = None,
        timeout_seconds: float | None = None,
    ):
        """Initialize the OSV client.

        Args:
            server: Server.PRODUCTION or Server.STAGING (or their names).
                    If None, uses OSV_CLIENT_SERVER or production.
            base_url: Arbitrary server URL; overrides server.
            http_client: Pre-configured transport. It is used as-is and left
                         open on close(); the concurrency and timeout
                         arguments are ignored when it is given.
            max_concurrency: In-flight request cap for the default transport.
                             If None, uses OSV_CLIENT_MAX_CONCURRENCY or 100.
            max_concurrency_per_host: Per-host cap for the default transport.
                                      If None, equals max_concurrency.
            timeout_seconds: Per-request timeout for the default transport.
        """
        self._container = Container()

        # Build config dict with only provided values
        config_dict = {}
        if server is not None:
            config_dict["server"] = server
        if base_url is not None:
            config_dict["base_url"] = base_url
        if max_concurrency is not None:
            config_dict["max_concurrency"] = max_concurrency
        if max_concurrency_per_host is not None:
            config_dict["max_concurrency_per_host"] = max_concurrency_per_host
        if timeout_seconds is not None:
            config_dict["timeout_seconds"] = timeout_seconds

        # Re-read OSV_CLIENT_* now; the class-level default was built at import.
        self._container.config.from_pydantic(ClientConfig(**config_dict))

        self._owns_transport = http_client is None
        if http_client is not None:
            self._container.http_client.override(providers.Object(http_client))
        else:
            self._container.init_resources()

        self._api = self._container.osv_api()
        self._fetch_many = self._container.fetch_vulnerabilities_uc()

    @property
    def base_url(self) -> str:
        return self._api.base_url

    def get_vulnerabilities_for_package(self, query: PackageQuery) -> list[Vulnerability]:
        """Return the full records of every vulnerability affecting the queried package.

        Args:
            query: Built with by_version(pkg, version) or by_commit(commit, pkg).

        Raises:
            OsvTransportError: Network failure or non-success status.
            OsvDecodeError: The response does not match the expected shape.
        """
        return self._api.get_vulnerabilities_for_package(query)

    def get_vulnerability_ids_for_packages(self, batch: BatchQuery | Sequence[PackageQuery]) -> BatchResult:
        """Return, per query, the ids and modification times of matching vulnerabilities.

        Entry i of the result answers query i. At most MAX_BATCH_SIZE queries
        are accepted; larger input raises BatchSizeExceededError without any
        request being sent.
        """
        return self._api.get_vulnerability_ids_for_packages(batch)

    def get_vulnerability_for_id(self, id: str) -> Vulnerability:
        """Return the vulnerability record with the given id (e.g. GHSA-..., PYSEC-..., CVE-...)."""
        return self._api.get_vulnerability_for_id(id)

    def submit_vulnerability_for_id(self, id: str) -> "Future[Vulnerability]":
        """Queue a by-id fetch on the transport's worker pool and return its future."""
        return self._api.submit_vulnerability_for_id(id)

    def get_vulnerabilities_for_ids(self, ids: Iterable[str]) -> list[Vulnerability]:
        """Fetch many records concurrently, one request per id, in input order."""
        return self._fetch_many.execute(ids)

    def close(self) -> None:
        """Release the default transport (threads and connections).

        A transport passed in by the caller is left open.
        """
        if self._owns_transport:
            self._container.shutdown_resources()

    def __enter__(self) -> OsvApiClient:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


__all__ = [
    "OsvApiClient",
    "ClientConfig",
]
