from __future__ import annotations

import logging
from typing import Iterable

from ..domain.vulnerability import Vulnerability
from ..ports.osv_port import OsvApiPort

logger = logging.getLogger(__name__)


class FetchVulnerabilitiesUseCase:
    """Resolve many ids with one GET each, issued concurrently.

    There is no batch-by-id endpoint. Results come back in input order; the
    first failure cancels the requests that have not started and is re-raised.
    """

    def __init__(self, api: OsvApiPort) -> None:
        self._api = api

    def execute(self, ids: Iterable[str]) -> list[Vulnerability]:
        futures = []
        try:
            for id in ids:
                futures.append(self._api.submit_vulnerability_for_id(id))
            logger.info(f"Fetching {len(futures)} vulnerabilities by id")
            return [f.result() for f in futures]
        except BaseException:
            for f in futures:
                f.cancel()
            raise
