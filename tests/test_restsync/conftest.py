"""Shared fixtures for restsync tests.

``FakeTransport`` is an in-memory stand-in for a REST resource that records
every call, so collection tests can assert which requests were issued
without going through HTTP.
"""

from __future__ import annotations

import itertools
from typing import Any

import pytest

from restsync.collection import RecordCollection
from restsync.errors import SyncError

BASE_URL = "https://api.example.com/tasks"


class FakeTransport:
    def __init__(self, base_url: str = BASE_URL, *, list_response: Any = None) -> None:
        self.base_url = base_url
        self.list_response = list_response if list_response is not None else []
        self.calls: list[tuple[str, str, Any]] = []
        self.fail_with: SyncError | None = None
        self.sends_partial_updates = False
        self._ids = itertools.count(1000)

    def record_url(self, record_id) -> str:
        return f"{self.base_url}/{record_id}"

    def _record(self, method: str, url: str, body: Any = None) -> None:
        self.calls.append((method, url, body))
        if self.fail_with is not None:
            raise self.fail_with

    async def list(self) -> Any:
        self._record("GET", self.base_url)
        return self.list_response

    async def create(self, fields: dict[str, Any]) -> Any:
        self._record("POST", self.base_url, fields)
        return {**fields, "id": next(self._ids)}

    async def read(self, record_id) -> Any:
        self._record("GET", self.record_url(record_id))
        return {"id": record_id, "title": "from server"}

    async def update(self, record_id, fields: dict[str, Any]) -> Any:
        method = "PATCH" if self.sends_partial_updates else "PUT"
        self._record(method, self.record_url(record_id), fields)
        return {**fields, "id": record_id}

    async def delete(self, record_id) -> None:
        self._record("DELETE", self.record_url(record_id))


@pytest.fixture()
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture()
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture()
def tasks(transport: FakeTransport) -> RecordCollection:
    return RecordCollection(transport, envelope_key="tasks")
