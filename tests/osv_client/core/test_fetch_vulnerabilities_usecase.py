from __future__ import annotations

import threading
from concurrent.futures import Future, ThreadPoolExecutor
from datetime import datetime, timezone

import pytest

from osv_client.core.domain.vulnerability import Vulnerability
from osv_client.core.errors import OsvHttpStatusError
from osv_client.core.usecases.fetch_vulnerabilities import FetchVulnerabilitiesUseCase


class _StubApi:
    def __init__(self, missing: set[str] | None = None, workers: int = 4):
        self._missing = missing or set()
        self._pool = ThreadPoolExecutor(max_workers=workers)
        self.requested: list[str] = []
        self._lock = threading.Lock()

    def get_vulnerability_for_id(self, id: str) -> Vulnerability:
        with self._lock:
            self.requested.append(id)
        if id in self._missing:
            raise OsvHttpStatusError(404, f"http://osv.test/v1/vulns/{id}")
        return Vulnerability(id=id, modified=datetime(2024, 1, 1, tzinfo=timezone.utc))

    def submit_vulnerability_for_id(self, id: str) -> "Future[Vulnerability]":
        return self._pool.submit(self.get_vulnerability_for_id, id)

    def close(self) -> None:
        self._pool.shutdown(wait=True)


@pytest.fixture
def stub_api():
    api = _StubApi()
    yield api
    api.close()


def test_fetch_many_returns_records_in_input_order(stub_api):
    ids = [f"GHSA-{i:04d}" for i in range(50)]
    out = FetchVulnerabilitiesUseCase(stub_api).execute(ids)
    assert [v.id for v in out] == ids
    assert sorted(stub_api.requested) == sorted(ids)


def test_fetch_many_with_no_ids_returns_empty_list(stub_api):
    assert FetchVulnerabilitiesUseCase(stub_api).execute([]) == []
    assert stub_api.requested == []


def test_fetch_many_fails_as_a_whole():
    api = _StubApi(missing={"GHSA-0003"})
    try:
        with pytest.raises(OsvHttpStatusError):
            FetchVulnerabilitiesUseCase(api).execute([f"GHSA-{i:04d}" for i in range(10)])
    finally:
        api.close()


class _ClosingStubApi(_StubApi):
    """Accepts ``accepted`` submissions, then behaves like a shut-down pool."""

    def __init__(self, accepted: int):
        super().__init__(workers=1)
        self._accepted = accepted
        self._gate = threading.Event()
        self.futures: list[Future] = []

    def get_vulnerability_for_id(self, id: str) -> Vulnerability:
        self._gate.wait(timeout=10)
        return super().get_vulnerability_for_id(id)

    def submit_vulnerability_for_id(self, id: str) -> "Future[Vulnerability]":
        if len(self.futures) == self._accepted:
            raise RuntimeError("cannot schedule new futures after shutdown")
        future = super().submit_vulnerability_for_id(id)
        self.futures.append(future)
        return future

    def close(self) -> None:
        self._gate.set()
        super().close()


def test_fetch_many_cancels_submitted_requests_when_submit_fails():
    api = _ClosingStubApi(accepted=3)
    try:
        with pytest.raises(RuntimeError):
            FetchVulnerabilitiesUseCase(api).execute([f"GHSA-{i:04d}" for i in range(5)])
        # One worker: the first request is running, the two queued behind it are cancelled.
        assert [f.cancelled() for f in api.futures[1:]] == [True, True]
    finally:
        api.close()
    assert "GHSA-0001" not in api.requested
    assert "GHSA-0002" not in api.requested
