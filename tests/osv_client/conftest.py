"""tests/osv_client/conftest.py

Common fixtures for the entire test suite: an in-process OSV fixture server
served through httpx.MockTransport.
"""

from __future__ import annotations

import json
import threading
import time
from typing import Any

import httpx
import pytest
from typer.testing import CliRunner

DJANGO_GHSA = {
    "id": "GHSA-xxxx-xxxx-xxxx",
    "modified": "2024-02-01T10:00:00.123456Z",
    "published": "2012-11-01T00:00:00Z",
    "aliases": ["CVE-2012-4520"],
    "summary": "Host header poisoning in Django",
    "details": "Django 1.4.x before 1.4.2 allows remote attackers to generate and display arbitrary URLs.",
    "affected": [
        {
            "package": {"ecosystem": "PyPI", "name": "django", "purl": "pkg:pypi/django"},
            "ranges": [{"type": "ECOSYSTEM", "events": [{"introduced": "1.4"}, {"fixed": "1.4.3"}]}],
            "versions": ["1.4", "1.4.1", "1.4.2"],
        }
    ],
    "references": [{"type": "ADVISORY", "url": "https://nvd.nist.gov/vuln/detail/CVE-2012-4520"}],
    "schema_version": "1.6.0",
}

DJANGO_PYSEC = {
    "id": "PYSEC-2012-15",
    "modified": "2023-11-08T04:13:32Z",
    "aliases": ["CVE-2012-4520"],
    "details": "The django.http.HttpRequest.get_host function does not validate the Host header.",
    "affected": [
        {
            "package": {"ecosystem": "PyPI", "name": "django"},
            "ranges": [{"type": "ECOSYSTEM", "events": [{"introduced": "0"}, {"fixed": "1.4.3"}]}],
        }
    ],
    "database_specific": {"source": "pysec"},
}

LIBFOO_COMMIT = {
    "id": "OSV-2020-111",
    "modified": "2022-04-13T03:04:39.780694Z",
    "summary": "Heap-buffer-overflow in libfoo",
    "affected": [
        {
            "ranges": [
                {
                    "type": "GIT",
                    "repo": "https://github.com/example/libfoo",
                    "events": [{"introduced": "0"}, {"fixed": "6879efc2c1596d11a6a6ad296f80063b558d5e0f"}],
                }
            ]
        }
    ],
}

RECORDS = {r["id"]: r for r in (DJANGO_GHSA, DJANGO_PYSEC, LIBFOO_COMMIT)}

# (ecosystem, name, version) -> matching ids
BY_VERSION = {
    ("PyPI", "django", "1.4.2"): ["GHSA-xxxx-xxxx-xxxx", "PYSEC-2012-15"],
}

BY_COMMIT = {
    "6879efc2c1596d11a6a6ad296f80063b558d5e0f": ["OSV-2020-111"],
}


class FakeOsvServer:
    """Answers /v1/query, /v1/querybatch and /v1/vulns/{id} from the fixture records.

    Records every request in ``calls`` as (method, path) and keeps track of the
    highest number of requests it was serving at the same time.
    """

    def __init__(self) -> None:
        self.calls: list[tuple[str, str]] = []
        self.bodies: list[Any] = []
        self.delay_seconds = 0.0
        self.batch_override: dict | None = None
        self.status_override: int | None = None
        self._lock = threading.Lock()
        self._in_flight = 0
        self.peak_in_flight = 0

    def _matches(self, query: dict) -> list[str]:
        if "commit" in query:
            return BY_COMMIT.get(query["commit"], [])
        pkg = query.get("package") or {}
        return BY_VERSION.get((pkg.get("ecosystem"), pkg.get("name"), query.get("version")), [])

    def _respond(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        if self.status_override is not None:
            return httpx.Response(self.status_override, json={"code": 13, "message": "Internal error"})
        if request.method == "POST" and path == "/v1/query":
            ids = self._matches(json.loads(request.content))
            return httpx.Response(200, json={"vulns": [RECORDS[i] for i in ids]} if ids else {})
        if request.method == "POST" and path == "/v1/querybatch":
            if self.batch_override is not None:
                return httpx.Response(200, json=self.batch_override)
            results = []
            for q in json.loads(request.content)["queries"]:
                ids = self._matches(q)
                results.append({"vulns": [{"id": i, "modified": RECORDS[i]["modified"]} for i in ids]} if ids else {})
            return httpx.Response(200, json={"results": results})
        if request.method == "GET" and path.startswith("/v1/vulns/"):
            vuln_id = path[len("/v1/vulns/"):]
            if vuln_id in RECORDS:
                return httpx.Response(200, json=RECORDS[vuln_id])
            return httpx.Response(404, json={"code": 5, "message": "Bug not found."})
        return httpx.Response(404, text=f"Mock URL not found: {request.method} {request.url}")

    def handle(self, request: httpx.Request) -> httpx.Response:
        with self._lock:
            self.calls.append((request.method, request.url.path))
            self.bodies.append(json.loads(request.content) if request.content else None)
            self._in_flight += 1
            self.peak_in_flight = max(self.peak_in_flight, self._in_flight)
        try:
            if self.delay_seconds:
                time.sleep(self.delay_seconds)
            return self._respond(request)
        finally:
            with self._lock:
                self._in_flight -= 1

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)


@pytest.fixture(scope="session")
def runner() -> CliRunner:
    """Provides a Typer CliRunner instance."""
    return CliRunner()


@pytest.fixture
def osv_server() -> FakeOsvServer:
    return FakeOsvServer()


@pytest.fixture
def mock_osv_transport(monkeypatch, osv_server: FakeOsvServer) -> FakeOsvServer:
    """Routes every default HttpClient to the fixture server.

    Replaces httpx.HTTPTransport (the default inner transport) with the
    server's MockTransport, so code paths that build their own HttpClient
    (OsvApiClient without http_client, the CLI) stay offline.
    """

    def patched_transport(*args, **kwargs):
        return osv_server.transport()

    monkeypatch.setattr(httpx, "HTTPTransport", patched_transport)
    return osv_server


@pytest.fixture
def osv_records() -> dict[str, dict]:
    """Fixture vulnerability records keyed by id (fresh copies per test)."""
    return json.loads(json.dumps(RECORDS))
