from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from ..core.domain.vulnerability import Vulnerability
from ..shared.naming import wire_name


class WireModel(BaseModel):
	"""Base for request/response bodies; keys are renamed through WIRE_NAMES."""
	model_config = ConfigDict(alias_generator=wire_name, populate_by_name=True, extra="ignore")


class PackageWire(WireModel):
	name: Optional[str] = None
	ecosystem: Optional[str] = None
	purl: Optional[str] = None


class QueryWire(WireModel):
	"""Body of POST /v1/query and one entry of a batch.

	The wire shape has room for both commit and version; the domain types
	do not, so the codec rejects such payloads when decoding.
	"""
	commit: Optional[str] = None
	pkg: Optional[PackageWire] = None
	version: Optional[str] = None


class BatchQueryWire(WireModel):
	queries: list[QueryWire]


class QueryResponseWire(WireModel):
	# The service omits "vulns" when nothing matches.
	vulnerabilities: list[Vulnerability] = Field(default_factory=list)


class VulnerabilityIdWire(WireModel):
	id: str
	modified_at: datetime


class VulnerabilityIdListWire(WireModel):
	vulnerabilities: list[VulnerabilityIdWire] = Field(default_factory=list)


class BatchResponseWire(WireModel):
	results: list[VulnerabilityIdListWire]
