"""OSV vulnerability record.

Returned by POST /v1/query and GET /v1/vulns/{id}. Only ``id`` and
``modified`` are required; everything else is optional and fields unknown to
this model are kept as extras so a record survives a decode/encode cycle.

Example (abridged):

{
  "id": "GHSA-xxxx-xxxx-xxxx",
  "modified": "2024-02-01T00:00:00Z",
  "published": "2024-01-01T12:34:56Z",
  "aliases": ["CVE-2024-1234"],
  "summary": "Short human-readable title",
  "affected": [
    {
      "package": {"ecosystem": "PyPI", "name": "django"},
      "ranges": [{"type": "ECOSYSTEM", "events": [{"introduced": "0"}, {"fixed": "1.4.3"}]}]
    }
  ],
  "references": [{"type": "FIX", "url": "https://github.com/owner/repo/commit/<sha>"}]
}
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict

from ...shared.naming import wire_name


class OsvRecord(BaseModel):
	model_config = ConfigDict(
		frozen=True,
		alias_generator=wire_name,
		populate_by_name=True,
		extra="allow",
	)


class Severity(OsvRecord):
	"""Severity entry, e.g. a CVSS vector"""
	type: str
	score: str


class AffectedPackage(OsvRecord):
	ecosystem: Optional[str] = None
	name: Optional[str] = None
	purl: Optional[str] = None


class Event(OsvRecord):
	"""Start or end of an affected version range"""
	introduced: Optional[str] = None
	fixed: Optional[str] = None
	last_affected: Optional[str] = None
	limit: Optional[str] = None


class Range(OsvRecord):
	type: str
	repo: Optional[str] = None
	events: list[Event]
	database_specific: Optional[dict[str, Any]] = None


class Affected(OsvRecord):
	package: Optional[AffectedPackage] = None
	severity: Optional[list[Severity]] = None
	ranges: Optional[list[Range]] = None
	versions: Optional[list[str]] = None
	ecosystem_specific: Optional[dict[str, Any]] = None
	database_specific: Optional[dict[str, Any]] = None


class Reference(OsvRecord):
	type: Optional[str] = None
	url: str


class Credit(OsvRecord):
	name: str
	contact: Optional[list[str]] = None
	type: Optional[str] = None


class Vulnerability(OsvRecord):
	"""Top-level OSV record"""
	schema_version: Optional[str] = None
	id: str
	modified: datetime
	published: Optional[datetime] = None
	withdrawn: Optional[datetime] = None
	aliases: Optional[list[str]] = None
	related: Optional[list[str]] = None
	upstream: Optional[list[str]] = None
	summary: Optional[str] = None
	details: Optional[str] = None
	severity: Optional[list[Severity]] = None
	affected: Optional[list[Affected]] = None
	references: Optional[list[Reference]] = None
	credits: Optional[list[Credit]] = None
	database_specific: Optional[dict[str, Any]] = None
