"""Tests for restsync.transport.http.HttpTransport, driven through httpx.MockTransport."""

from __future__ import annotations

import json
import logging

import httpx
import pytest

from restsync.errors import HttpStatusError, MalformedResponse, NetworkError, NotFound
from restsync.transport.base import Transport
from restsync.transport.http import HttpTransport

pytestmark = pytest.mark.anyio

BASE = "https://api.example.com/tasks"


class Recorder:
    """Mock request handler: logs each request and replays a canned response."""

    def __init__(self, status: int = 200, body=None, *, content: bytes | None = None) -> None:
        self.status = status
        self.body = body
        self.content = content
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.content is not None:
            return httpx.Response(self.status, content=self.content)
        if self.body is None:
            return httpx.Response(self.status)
        return httpx.Response(self.status, json=self.body)


def _transport(handler, **kwargs) -> HttpTransport:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return HttpTransport(BASE, client=client, **kwargs)


# ---------------------------------------------------------------------------
# URLs and methods
# ---------------------------------------------------------------------------


class TestRequests:
    def test_satisfies_protocol(self):
        assert isinstance(_transport(Recorder()), Transport)

    def test_record_url(self):
        t = HttpTransport(BASE + "/")
        assert t.base_url == BASE
        assert t.record_url(42) == f"{BASE}/42"
        assert t.record_url("a/b c") == f"{BASE}/a%2Fb%20c"

    async def test_list(self):
        handler = Recorder(body={"tasks": [{"id": 1}]})
        assert await _transport(handler).list() == {"tasks": [{"id": 1}]}
        assert handler.requests[0].method == "GET"
        assert str(handler.requests[0].url) == BASE

    async def test_create_posts_json(self):
        handler = Recorder(201, body={"id": 5, "title": "X"})
        result = await _transport(handler).create({"title": "X"})
        request = handler.requests[0]
        assert result == {"id": 5, "title": "X"}
        assert request.method == "POST"
        assert json.loads(request.content) == {"title": "X"}
        assert request.headers["content-type"] == "application/json"

    async def test_update_uses_put_by_default(self):
        handler = Recorder(body={"id": 5})
        await _transport(handler).update(5, {"title": "Y"})
        assert handler.requests[0].method == "PUT"
        assert str(handler.requests[0].url) == f"{BASE}/5"

    async def test_update_with_patch(self):
        handler = Recorder(body={"id": 5})
        t = _transport(handler, update_method="patch")
        await t.update(5, {"title": "Y"})
        assert t.sends_partial_updates
        assert handler.requests[0].method == "PATCH"

    async def test_read(self):
        handler = Recorder(body={"id": 3})
        assert await _transport(handler).read(3) == {"id": 3}
        assert str(handler.requests[0].url) == f"{BASE}/3"

    async def test_delete(self):
        handler = Recorder(204)
        assert await _transport(handler).delete(42) is None
        assert handler.requests[0].method == "DELETE"
        assert str(handler.requests[0].url) == f"{BASE}/42"

    async def test_bearer_token(self):
        handler = Recorder(body=[])
        await _transport(handler, api_token="s3cret").list()
        assert handler.requests[0].headers["authorization"] == "Bearer s3cret"

    def test_invalid_update_method(self):
        with pytest.raises(ValueError):
            HttpTransport(BASE, update_method="POST")


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class TestErrors:
    async def test_non_2xx(self):
        with pytest.raises(HttpStatusError) as exc_info:
            await _transport(Recorder(500, body={"error": "boom"})).list()
        assert exc_info.value.status_code == 500
        assert exc_info.value.method == "GET"
        assert "boom" in exc_info.value.body

    async def test_update_missing_record(self):
        with pytest.raises(NotFound):
            await _transport(Recorder(404)).update(9, {"title": "Y"})

    async def test_delete_missing_record_succeeds(self):
        handler = Recorder(404)
        await _transport(handler).delete(9)
        assert len(handler.requests) == 1

    async def test_missing_record_logged_as_warning(self, caplog):
        caplog.set_level(logging.DEBUG, logger="restsync.transport.http")
        with pytest.raises(NotFound):
            await _transport(Recorder(404)).read(9)
        assert [r.levelno for r in caplog.records if "404" in r.getMessage()] == [logging.WARNING]

    async def test_delete_missing_record_not_warned(self, caplog):
        caplog.set_level(logging.DEBUG, logger="restsync.transport.http")
        await _transport(Recorder(404)).delete(9)
        assert not [r for r in caplog.records if r.levelno >= logging.WARNING]

    async def test_delete_server_error_raises(self):
        with pytest.raises(HttpStatusError):
            await _transport(Recorder(500)).delete(9)

    async def test_connection_failure(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(NetworkError) as exc_info:
            await _transport(handler).list()
        assert exc_info.value.url == BASE
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

    async def test_non_json_body(self):
        with pytest.raises(MalformedResponse):
            await _transport(Recorder(content=b"<html>oops</html>")).list()

    async def test_empty_body_is_none(self):
        assert await _transport(Recorder(200)).update(1, {}) is None


# ---------------------------------------------------------------------------
# Lifecycle
# ---------------------------------------------------------------------------


class TestLifecycle:
    async def test_injected_client_left_open(self):
        client = httpx.AsyncClient(transport=httpx.MockTransport(Recorder(body=[])))
        async with HttpTransport(BASE, client=client) as t:
            await t.list()
        assert not client.is_closed
        await client.aclose()

    async def test_owned_client_closed(self):
        t = HttpTransport(BASE)
        await t.aclose()
        assert t._client.is_closed
