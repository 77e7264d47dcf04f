"""Response shape normalisation.

Remote APIs return collections in one of two shapes::

    [{"title": "A"}, {"title": "B"}]                 # bare array
    {"tasks": [{"title": "A"}, {"title": "B"}]}      # envelope, key "tasks"

:func:`normalize` turns either into a plain ordered list of field mappings.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from restsync.errors import MalformedResponse


def _as_fields(item: Any, position: int) -> dict[str, Any]:
    if not isinstance(item, Mapping):
        raise MalformedResponse(
            f"record at position {position} is {type(item).__name__}, expected an object"
        )
    return dict(item)


def normalize(data: Any, envelope_key: str | None = None) -> list[dict[str, Any]]:
    """Extract the ordered list of raw records from *data*.

    Raises :class:`MalformedResponse` when *data* is neither a bare list nor
    a mapping holding a list under *envelope_key*.
    """
    if isinstance(data, list):
        items = data
    elif isinstance(data, Mapping) and envelope_key is not None and envelope_key in data:
        items = data[envelope_key]
        if not isinstance(items, list):
            raise MalformedResponse(
                f"envelope key {envelope_key!r} holds {type(items).__name__}, expected an array"
            )
    elif isinstance(data, Mapping):
        expected = f"key {envelope_key!r}" if envelope_key else "a bare array"
        raise MalformedResponse(f"unrecognised envelope (keys: {sorted(data)}), expected {expected}")
    else:
        raise MalformedResponse(f"unexpected response of type {type(data).__name__}")

    return [_as_fields(item, i) for i, item in enumerate(items)]


def normalize_one(data: Any, envelope_key: str | None = None) -> dict[str, Any]:
    """Extract a single raw record from a create/update/read response.

    Accepts a bare object or one nested under *envelope_key*.  An empty body
    (``None``) yields an empty mapping.
    """
    if data is None:
        return {}
    if envelope_key is not None and isinstance(data, Mapping) and isinstance(data.get(envelope_key), Mapping):
        data = data[envelope_key]
    if not isinstance(data, Mapping):
        raise MalformedResponse(f"expected a record object, got {type(data).__name__}")
    return dict(data)
