"""JSON codec between domain records and OSV wire payloads.

Encoders return plain JSON-ready dicts (snake_case keys, ISO-8601 timestamps).
Decoders accept parsed JSON and raise OsvDecodeError for anything that does
not match the expected shape; required fields are never defaulted.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Optional, Sequence, TypeVar

from pydantic import BaseModel, ValidationError

from ..core.domain.models import (
    BatchQuery,
    BatchResult,
    CommitQuery,
    Package,
    PackageQuery,
    VersionQuery,
    VulnerabilityIdList,
    VulnerabilitySummary,
)
from ..core.domain.vulnerability import Vulnerability
from ..core.errors import OsvDecodeError
from .schemas import (
    BatchQueryWire,
    BatchResponseWire,
    PackageWire,
    QueryResponseWire,
    QueryWire,
    VulnerabilityIdListWire,
    VulnerabilityIdWire,
)

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


def _validate(model: type[M], payload: Any) -> M:
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        logger.warning(f"Response does not match {model.__name__}: {e.error_count()} error(s)")
        raise OsvDecodeError(f"Invalid {model.__name__} payload: {e}") from e


def _dump_request(model: BaseModel) -> dict:
    # Absent commit, version or package must not appear on the wire.
    return model.model_dump(mode="json", by_alias=True, exclude_none=True)


def _dump_response(model: BaseModel) -> dict:
    # Only what was set is written back, explicit nulls included.
    return model.model_dump(mode="json", by_alias=True, exclude_unset=True)


# Queries ---------------------------------------------------------------------

def _package_to_wire(pkg: Optional[Package]) -> Optional[PackageWire]:
    if pkg is None:
        return None
    return PackageWire(name=pkg.name, ecosystem=pkg.ecosystem, purl=pkg.purl)


def _package_from_wire(pkg: Optional[PackageWire]) -> Optional[Package]:
    if pkg is None:
        return None
    return Package(name=pkg.name, ecosystem=pkg.ecosystem, purl=pkg.purl)


def _query_to_wire(query: PackageQuery) -> QueryWire:
    if isinstance(query, CommitQuery):
        return QueryWire(commit=query.commit, pkg=_package_to_wire(query.pkg))
    if isinstance(query, VersionQuery):
        return QueryWire(pkg=_package_to_wire(query.pkg), version=query.version)
    raise TypeError(f"Unsupported query type: {type(query).__name__}")


def _query_from_wire(wire: QueryWire) -> PackageQuery:
    if wire.commit is not None and wire.version is not None:
        raise OsvDecodeError("Query sets both 'commit' and 'version'")
    if wire.commit is not None:
        return CommitQuery(commit=wire.commit, pkg=_package_from_wire(wire.pkg))
    if wire.version is not None:
        if wire.pkg is None:
            raise OsvDecodeError("Query by version requires 'package'")
        return VersionQuery(pkg=_package_from_wire(wire.pkg), version=wire.version)
    raise OsvDecodeError("Query sets neither 'commit' nor 'version'")


def encode_query(query: PackageQuery) -> dict:
    return _dump_request(_query_to_wire(query))


def decode_query(payload: Any) -> PackageQuery:
    return _query_from_wire(_validate(QueryWire, payload))


def encode_batch(batch: BatchQuery) -> dict:
    return _dump_request(BatchQueryWire(queries=[_query_to_wire(q) for q in batch]))


def decode_batch(payload: Any) -> BatchQuery:
    wire = _validate(BatchQueryWire, payload)
    return BatchQuery(tuple(_query_from_wire(q) for q in wire.queries))


# Vulnerabilities -------------------------------------------------------------

def encode_vulnerability(vulnerability: Vulnerability) -> dict:
    return _dump_response(vulnerability)


def decode_vulnerability(payload: Any) -> Vulnerability:
    return _validate(Vulnerability, payload)


def encode_vulnerabilities(vulnerabilities: Iterable[Vulnerability]) -> dict:
    return _dump_response(QueryResponseWire(vulnerabilities=list(vulnerabilities)))


def decode_vulnerabilities(payload: Any) -> list[Vulnerability]:
    """Decode a /v1/query response body into its list of records."""
    return list(_validate(QueryResponseWire, payload).vulnerabilities)


# Batch results ---------------------------------------------------------------

def _id_list_to_wire(id_list: VulnerabilityIdList) -> VulnerabilityIdListWire:
    return VulnerabilityIdListWire(
        vulnerabilities=[VulnerabilityIdWire(id=s.id, modified_at=s.modified_at) for s in id_list]
    )


def _id_list_from_wire(wire: VulnerabilityIdListWire) -> VulnerabilityIdList:
    return VulnerabilityIdList(
        tuple(VulnerabilitySummary(id=s.id, modified_at=s.modified_at) for s in wire.vulnerabilities)
    )


def encode_batch_result(result: BatchResult) -> dict:
    return _dump_response(BatchResponseWire(results=[_id_list_to_wire(r) for r in result]))


def decode_batch_result(payload: Any, expected_size: Optional[int] = None) -> BatchResult:
    """Decode a /v1/querybatch response body.

    When ``expected_size`` is given the number of result entries must match
    it, since entries are correlated with queries by position only.
    """
    wire = _validate(BatchResponseWire, payload)
    if expected_size is not None and len(wire.results) != expected_size:
        raise OsvDecodeError(
            f"Batch response has {len(wire.results)} result entries for {expected_size} queries"
        )
    return BatchResult(tuple(_id_list_from_wire(r) for r in wire.results))


def decode_queries(payloads: Sequence[Any]) -> list[PackageQuery]:
    """Decode a list of query objects (wire format), e.g. read from a file."""
    return [decode_query(p) for p in payloads]
