from __future__ import annotations

from enum import Enum
from urllib.parse import quote


class Server(str, Enum):
	"""Well-known OSV API servers; both share the same path/schema contract."""

	PRODUCTION = "https://api.osv.dev"
	STAGING = "https://api-staging.osv.dev"

	@classmethod
	def parse(cls, value: "Server | str") -> "Server":
		"""Accept a member, its URL or its name (case-insensitive)."""
		if isinstance(value, cls):
			return value
		try:
			return cls(value)
		except ValueError:
			pass
		try:
			return cls[str(value).strip().upper()]
		except KeyError:
			raise ValueError(f"Unknown OSV server: {value!r} (expected one of: production, staging)") from None


def resolve_base_url(server: Server | str | None = None, base_url: str | None = None) -> str:
	"""An explicit base_url wins over server; default is production."""
	if base_url:
		return base_url.rstrip("/")
	if server is None:
		return Server.PRODUCTION.value
	return Server.parse(server).value


def get_query_url(base_url: str) -> str:
	return f"{base_url}/v1/query"


def get_query_batch_url(base_url: str) -> str:
	return f"{base_url}/v1/querybatch"


def get_vuln_url(base_url: str, vuln_id: str) -> str:
	return f"{base_url}/v1/vulns/{quote(vuln_id, safe='')}"
