"""Abstract transport protocol."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from restsync.record import RecordId


@runtime_checkable
class Transport(Protocol):
    """Common interface shared by all transports.

    Every method is a coroutine; the caller suspends while the request is in
    flight.  Failures are raised as :mod:`restsync.errors` types.
    """

    base_url: str
    #: True when updates send only changed fields (PATCH)
    sends_partial_updates: bool

    def record_url(self, record_id: RecordId) -> str:
        """Return ``<base URI>/<id>`` for single-record requests."""
        ...

    # ------------------------------------------------------------ collection

    async def list(self) -> Any:
        """Read the collection; return the decoded body for the normaliser."""
        ...

    async def create(self, fields: dict[str, Any]) -> Any:
        """Create a record; return the server's representation of it."""
        ...

    # ---------------------------------------------------------------- record

    async def read(self, record_id: RecordId) -> Any:
        """Read a single record."""
        ...

    async def update(self, record_id: RecordId, fields: dict[str, Any]) -> Any:
        """Write *fields* to an existing record; return the updated representation."""
        ...

    async def delete(self, record_id: RecordId) -> None:
        """Delete a record. A record that is already gone counts as deleted."""
        ...
