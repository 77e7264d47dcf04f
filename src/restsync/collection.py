"""RecordCollection: in-memory ordered records synchronised with one remote resource."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from typing import Any

from restsync.errors import MalformedResponse, SyncError
from restsync.normalizer import normalize, normalize_one
from restsync.record import Record, RecordId
from restsync.transport.base import Transport

logger = logging.getLogger(__name__)


def _check_id(record_id: Any, url: str) -> None:
    # bool is an int subclass but never a valid identifier
    if isinstance(record_id, bool) or not isinstance(record_id, (int, str)):
        raise MalformedResponse(
            f"identifier {record_id!r} from {url} is {type(record_id).__name__}, expected int or str"
        )


class RecordCollection:
    """Local truth for one remote collection, reconciled on demand.

    Nothing here talks to the server implicitly: :meth:`add` and
    :meth:`Record.set` are local, and only :meth:`load`, :meth:`persist`,
    :meth:`remove` and :meth:`refresh` issue requests.  Failures propagate to
    the awaiting caller; optimistic local changes are never rolled back.
    """

    def __init__(
        self,
        transport: Transport,
        *,
        envelope_key: str | None = None,
        id_attribute: str = "id",
    ) -> None:
        self.transport = transport
        self.envelope_key = envelope_key
        self.id_attribute = id_attribute
        self._records: list[Record] = []

    # ------------------------------------------------------------------
    # Sequence protocol
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[Record]:
        return iter(list(self._records))

    def __contains__(self, record: object) -> bool:
        return any(r is record for r in self._records)

    @property
    def records(self) -> tuple[Record, ...]:
        return tuple(self._records)

    @property
    def url(self) -> str:
        return self.transport.base_url

    # ------------------------------------------------------------------
    # Query helpers
    # ------------------------------------------------------------------

    def get(self, record_id: RecordId) -> Record | None:
        """Return the record with *record_id*, or ``None``."""
        for record in self._records:
            if record.id is not None and record.id == record_id:
                return record
        return None

    def where(self, **fields: Any) -> list[Record]:
        """Return records whose fields equal every given value."""
        return [
            r for r in self._records
            if all(name in r.fields and r.fields[name] == value for name, value in fields.items())
        ]

    def to_wire(self) -> list[dict[str, Any]]:
        return [r.to_wire(self.id_attribute) for r in self._records]

    # ------------------------------------------------------------------
    # Sync operations
    # ------------------------------------------------------------------

    async def load(self) -> None:
        """Replace the whole local sequence with the server's collection.

        Unsaved local records are discarded.  If the request or the response
        shape fails, the current contents are left as they were.
        """
        raw = await self.transport.list()
        items = normalize(raw, self.envelope_key)

        loaded = [Record.from_wire(item, self.id_attribute) for item in items]
        seen: set[RecordId] = set()
        for record in loaded:
            if record.id is None:
                continue
            _check_id(record.id, self.url)
            if record.id in seen:
                raise MalformedResponse(f"duplicate identifier {record.id!r} in {self.url} response")
            seen.add(record.id)

        self._records = loaded
        logger.debug("loaded %d records from %s", len(loaded), self.url)

    def add(self, fields: Mapping[str, Any] | None = None, /, **kwargs: Any) -> Record:
        """Append a new unidentified record locally. No request is made.

        Identifiers are assigned by the server, so *fields* may not carry one.
        """
        values = dict(fields or {}, **kwargs)
        if self.id_attribute in values:
            raise ValueError(f"new records cannot set {self.id_attribute!r}; the server assigns it")
        record = Record(fields=values)
        self._records.append(record)
        logger.debug("added new record to %s", self.url)
        return record

    async def persist(self, record: Record) -> Record:
        """Create *record* on the server if new, otherwise update it.

        The server's representation is merged back into *record* (the
        identifier, for a create).  On failure the local values stay as the
        caller set them and the error is raised.
        """
        if record.is_new:
            raw = await self.transport.create(record.to_wire(self.id_attribute))
            data = normalize_one(raw, self.envelope_key)
            new_id = data.get(self.id_attribute)
            if new_id is None:
                raise MalformedResponse(
                    f"create response from {self.url} carried no {self.id_attribute!r}"
                )
            _check_id(new_id, self.url)
            holder = self.get(new_id)
            if holder is not None and holder is not record:
                raise MalformedResponse(f"create response from {self.url} reused identifier {new_id!r}")
            record.merge(data, self.id_attribute)
            logger.debug("created record %s at %s", record.id, self.url)
            return record

        if self.transport.sends_partial_updates:
            body = record.changed
        else:
            body = record.to_wire(self.id_attribute)
        raw = await self.transport.update(record.id, body)
        record.merge(normalize_one(raw, self.envelope_key), self.id_attribute)
        logger.debug("updated record %s at %s", record.id, self.url)
        return record

    async def persist_all(self) -> list[tuple[Record, SyncError]]:
        """Persist every new or changed record in order.

        Keeps going past failures and returns them as ``(record, error)`` pairs.
        """
        failures: list[tuple[Record, SyncError]] = []
        for record in list(self._records):
            if not record.has_changed:
                continue
            try:
                await self.persist(record)
            except SyncError as exc:
                failures.append((record, exc))
        return failures

    async def remove(self, record: Record) -> None:
        """Drop *record* locally, then delete it remotely if it was ever saved.

        The local removal happens before any request and is not undone if
        the delete fails.  Removing a record this collection does not hold is
        a no-op.
        """
        if record not in self:
            logger.debug("record %s not in %s, nothing to remove", record.id, self.url)
            return
        self._records = [r for r in self._records if r is not record]
        if record.is_new:
            logger.debug("removed unsaved record from %s", self.url)
            return
        await self.transport.delete(record.id)
        logger.debug("deleted record %s at %s", record.id, self.url)

    async def refresh(self, record: Record) -> Record:
        """Re-read a saved record from the server and merge it."""
        if record.is_new:
            raise ValueError("cannot refresh a record that has never been persisted")
        raw = await self.transport.read(record.id)
        record.merge(normalize_one(raw, self.envelope_key), self.id_attribute)
        return record
