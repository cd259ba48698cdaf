from __future__ import annotations

import logging
from concurrent.futures import Future
from typing import Sequence

from ..config.urls import Server, get_query_batch_url, get_query_url, get_vuln_url, resolve_base_url
from ..core.domain.models import BatchQuery, BatchResult, PackageQuery
from ..core.domain.vulnerability import Vulnerability
from ..core.ports.osv_port import OsvApiPort
from .codec import decode_batch_result, decode_vulnerabilities, decode_vulnerability, encode_batch, encode_query
from .http_client import HttpClient

logger = logging.getLogger(__name__)


class OsvApiAdapter(OsvApiPort):
    """OSV.dev REST binding: POST /v1/query, POST /v1/querybatch, GET /v1/vulns/{id}.

    Holds no mutable state of its own, so one instance may be shared across threads.
    """

    def __init__(self, http_client: HttpClient, base_url: str = Server.PRODUCTION.value) -> None:
        self._http = http_client
        self._base_url = resolve_base_url(base_url=base_url)

    @property
    def base_url(self) -> str:
        return self._base_url

    def get_vulnerabilities_for_package(self, query: PackageQuery) -> list[Vulnerability]:
        payload = self._http.post_json(get_query_url(self._base_url), encode_query(query))
        return decode_vulnerabilities(payload)

    def get_vulnerability_ids_for_packages(self, batch: BatchQuery | Sequence[PackageQuery]) -> BatchResult:
        batch = BatchQuery.of(batch)  # raises before sending if oversized
        if len(batch) == 0:
            logger.debug("Empty batch; skipping request")
            return BatchResult(())
        payload = self._http.post_json(get_query_batch_url(self._base_url), encode_batch(batch))
        return decode_batch_result(payload, expected_size=len(batch))

    def get_vulnerability_for_id(self, id: str) -> Vulnerability:
        return decode_vulnerability(self._http.get_json(get_vuln_url(self._base_url, id)))

    def submit_vulnerability_for_id(self, id: str) -> "Future[Vulnerability]":
        return self._http.submit(self.get_vulnerability_for_id, id)
