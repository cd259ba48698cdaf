from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Iterator, Optional, Sequence, Union

from ..errors import BatchSizeExceededError

# Maximum number of queries the service accepts in one /v1/querybatch call.
MAX_BATCH_SIZE = 1000


@dataclass(frozen=True)
class Package:
    """Package coordinate: ecosystem + name, or a purl."""

    name: Optional[str] = None
    ecosystem: Optional[str] = None
    purl: Optional[str] = None


@dataclass(frozen=True)
class CommitQuery:
    """Query by source commit hash, optionally scoped to a package."""

    commit: str
    pkg: Optional[Package] = None


@dataclass(frozen=True)
class VersionQuery:
    """Query by package + version."""

    pkg: Package
    version: str


PackageQuery = Union[CommitQuery, VersionQuery]


def by_commit(commit: str, pkg: Optional[Package] = None) -> CommitQuery:
    return CommitQuery(commit=commit, pkg=pkg)


def by_version(pkg: Package, version: str) -> VersionQuery:
    return VersionQuery(pkg=pkg, version=version)


@dataclass(frozen=True)
class BatchQuery:
    """Ordered queries sent in one batch call.

    Holds at most MAX_BATCH_SIZE queries; larger input is rejected here so it
    never reaches the network. Splitting is up to the caller.
    """

    queries: tuple[PackageQuery, ...] = ()

    def __post_init__(self) -> None:
        queries = tuple(self.queries)
        if len(queries) > MAX_BATCH_SIZE:
            raise BatchSizeExceededError(len(queries), MAX_BATCH_SIZE)
        object.__setattr__(self, "queries", queries)

    @classmethod
    def of(cls, queries: Sequence[PackageQuery]) -> "BatchQuery":
        return queries if isinstance(queries, BatchQuery) else cls(tuple(queries))

    def __len__(self) -> int:
        return len(self.queries)

    def __iter__(self) -> Iterator[PackageQuery]:
        return iter(self.queries)


@dataclass(frozen=True)
class VulnerabilitySummary:
    """Id + last modification time, the shape returned inside batch results."""

    id: str
    modified_at: datetime


@dataclass(frozen=True)
class VulnerabilityIdList:
    vulnerabilities: tuple[VulnerabilitySummary, ...] = ()

    @property
    def ids(self) -> list[str]:
        return [v.id for v in self.vulnerabilities]

    def __len__(self) -> int:
        return len(self.vulnerabilities)

    def __iter__(self) -> Iterator[VulnerabilitySummary]:
        return iter(self.vulnerabilities)


@dataclass(frozen=True)
class BatchResult:
    """One VulnerabilityIdList per query, in the order the queries were sent."""

    results: tuple[VulnerabilityIdList, ...] = ()

    def __len__(self) -> int:
        return len(self.results)

    def __iter__(self) -> Iterator[VulnerabilityIdList]:
        return iter(self.results)

    def __getitem__(self, index: int) -> VulnerabilityIdList:
        return self.results[index]

    def correlate(self, batch: BatchQuery) -> list[tuple[PackageQuery, VulnerabilityIdList]]:
        """Pair each query of ``batch`` with its result by position."""
        if len(batch) != len(self.results):
            raise ValueError(f"Batch has {len(batch)} queries but result has {len(self.results)} entries")
        return list(zip(batch.queries, self.results))
