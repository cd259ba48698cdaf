from __future__ import annotations

from concurrent.futures import Future
from typing import Protocol, Sequence

from ..domain.models import BatchQuery, BatchResult, PackageQuery
from ..domain.vulnerability import Vulnerability


class OsvApiPort(Protocol):
    def get_vulnerabilities_for_package(self, query: PackageQuery) -> list[Vulnerability]:
        """Return the full records of every vulnerability matching ``query``."""
        ...

    def get_vulnerability_ids_for_packages(self, batch: BatchQuery | Sequence[PackageQuery]) -> BatchResult:
        """Return id + modification time per query, positionally aligned with ``batch``.

        ``batch`` may not hold more than MAX_BATCH_SIZE queries; nothing is sent otherwise.
        """
        ...

    def get_vulnerability_for_id(self, id: str) -> Vulnerability:
        """Return the record with the given identifier."""
        ...

    def submit_vulnerability_for_id(self, id: str) -> "Future[Vulnerability]":
        """Non-blocking variant of get_vulnerability_for_id."""
        ...
