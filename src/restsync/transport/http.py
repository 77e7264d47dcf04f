"""httpx-based REST transport.

A thin async HTTP client for one remote collection resource.  URIs are
built by an explicit rule instead of framework conventions:

GET     {base}          – list the collection
POST    {base}          – create a record
GET     {base}/{id}     – read a record
PUT     {base}/{id}     – update a record (PATCH when configured)
DELETE  {base}/{id}     – delete a record

Request and response bodies are JSON.  When an API token is configured it
is sent as ``Authorization: Bearer <token>``.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any
from urllib.parse import quote

import httpx

from restsync.errors import HttpStatusError, MalformedResponse, NetworkError, NotFound
from restsync.record import RecordId

if TYPE_CHECKING:
    from restsync.config import SyncConfig

logger = logging.getLogger(__name__)

UPDATE_METHODS = ("PUT", "PATCH")


class HttpTransport:
    """REST transport backed by :class:`httpx.AsyncClient`."""

    def __init__(
        self,
        base_url: str,
        *,
        api_token: str | None = None,
        timeout: float = 10.0,
        update_method: str = "PUT",
        client: httpx.AsyncClient | None = None,
    ) -> None:
        if update_method.upper() not in UPDATE_METHODS:
            raise ValueError(f"update_method must be one of {UPDATE_METHODS}, got {update_method!r}")

        self.base_url = base_url.rstrip("/")
        self.update_method = update_method.upper()

        headers = {"Accept": "application/json", "Content-Type": "application/json"}
        if api_token:
            headers["Authorization"] = f"Bearer {api_token}"

        # An injected client is owned by the caller and is not closed here
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._headers = headers

    @classmethod
    def from_config(cls, config: "SyncConfig", *, client: httpx.AsyncClient | None = None) -> "HttpTransport":
        return cls(
            config.base_url,
            api_token=config.api_token,
            timeout=config.timeout,
            update_method=config.update_method,
            client=client,
        )

    @property
    def sends_partial_updates(self) -> bool:
        return self.update_method == "PATCH"

    def record_url(self, record_id: RecordId) -> str:
        return f"{self.base_url}/{quote(str(record_id), safe='')}"

    # ------------------------------------------------------------------
    # Requests
    # ------------------------------------------------------------------

    async def _request(
        self,
        method: str,
        url: str,
        body: dict[str, Any] | None = None,
        *,
        missing_ok: bool = False,
    ) -> httpx.Response | None:
        """Send one request. With *missing_ok* a 404 returns ``None`` instead of raising."""
        logger.debug("%s %s", method, url)
        try:
            response = await self._client.request(method, url, json=body, headers=self._headers)
        except httpx.TransportError as exc:
            logger.warning("%s %s failed: %s", method, url, exc)
            raise NetworkError(f"{method} {url} failed: {exc}", method=method, url=url) from exc

        if response.status_code == 404:
            if missing_ok:
                logger.debug("%s %s returned HTTP 404, already gone", method, url)
                return None
            logger.warning("%s %s returned HTTP 404", method, url)
            raise NotFound(404, method=method, url=url, body=response.text)
        if not response.is_success:
            logger.warning("%s %s returned HTTP %d", method, url, response.status_code)
            raise HttpStatusError(response.status_code, method=method, url=url, body=response.text)
        return response

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        if not response.content:
            return None
        try:
            return response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise MalformedResponse(
                f"{response.request.method} {response.request.url} returned a non-JSON body"
            ) from exc

    # ------------------------------------------------------------------
    # Collection
    # ------------------------------------------------------------------

    async def list(self) -> Any:
        response = await self._request("GET", self.base_url)
        return self._decode(response)

    async def create(self, fields: dict[str, Any]) -> Any:
        response = await self._request("POST", self.base_url, fields)
        return self._decode(response)

    # ------------------------------------------------------------------
    # Record
    # ------------------------------------------------------------------

    async def read(self, record_id: RecordId) -> Any:
        response = await self._request("GET", self.record_url(record_id))
        return self._decode(response)

    async def update(self, record_id: RecordId, fields: dict[str, Any]) -> Any:
        response = await self._request(self.update_method, self.record_url(record_id), fields)
        return self._decode(response)

    async def delete(self, record_id: RecordId) -> None:
        await self._request("DELETE", self.record_url(record_id), missing_ok=True)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "HttpTransport":
        return self

    async def __aexit__(self, *_: object) -> None:
        await self.aclose()
