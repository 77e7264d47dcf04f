"""Core Record dataclass."""

from __future__ import annotations

import copy
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

logger = logging.getLogger(__name__)

#: Identifier types a server may assign (``42`` or ``"a1b2"``).
RecordId = int | str


@dataclass(eq=False)
class Record:
    """One item of domain data (a task, an album, ...).

    ``id`` stays ``None`` until the first successful persist, or until the
    record is materialised from server data.
    """

    fields: dict[str, Any] = field(default_factory=dict)
    id: RecordId | None = None
    #: Field values as of the last sync with the server
    _synced: dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_wire(cls, data: Mapping[str, Any], id_attribute: str = "id") -> "Record":
        """Build an identified record from a server representation."""
        fields = dict(data)
        record_id = fields.pop(id_attribute, None)
        return cls(fields=fields, id=record_id, _synced=copy.deepcopy(fields))

    # ------------------------------------------------------------------
    # Field access
    # ------------------------------------------------------------------

    def get(self, name: str, default: Any = None) -> Any:
        return self.fields.get(name, default)

    def set(self, values: Mapping[str, Any] | None = None, /, **kwargs: Any) -> None:
        """Update local field values. Nothing is sent until the record is persisted."""
        updates = dict(values or {}, **kwargs)
        self.fields.update(updates)
        logger.debug("record %s: set %s", self.id, sorted(updates))

    def __getitem__(self, name: str) -> Any:
        return self.fields[name]

    def __setitem__(self, name: str, value: Any) -> None:
        self.set({name: value})

    # ------------------------------------------------------------------
    # Sync state
    # ------------------------------------------------------------------

    @property
    def is_new(self) -> bool:
        return self.id is None

    @property
    def changed(self) -> dict[str, Any]:
        """Fields whose value differs from the last synced state."""
        return {
            name: value
            for name, value in self.fields.items()
            if name not in self._synced or self._synced[name] != value
        }

    @property
    def has_changed(self) -> bool:
        return self.is_new or bool(self.changed)

    def to_wire(self, id_attribute: str = "id") -> dict[str, Any]:
        """Flat field mapping for a request body, identifier included once assigned."""
        data = dict(self.fields)
        if self.id is not None:
            data[id_attribute] = self.id
        return data

    def merge(self, data: Mapping[str, Any], id_attribute: str = "id") -> None:
        """Apply a server representation on top of local state (last write wins)."""
        fields = dict(data)
        record_id = fields.pop(id_attribute, None)
        if record_id is not None:
            self.id = record_id
        self.fields.update(fields)
        self._synced = copy.deepcopy(self.fields)
