"""Connection settings for one remote collection.

Settings can be given directly, read from a TOML file::

    [restsync]
    base_url      = "https://api.example.com/tasks"
    envelope_key  = "tasks"
    update_method = "PATCH"

or picked up from the environment (direct values take precedence):
    RESTSYNC_BASE_URL       – collection URI (e.g. https://api.example.com/tasks)
    RESTSYNC_ENVELOPE_KEY   – key wrapping the record array, if any
    RESTSYNC_ID_ATTRIBUTE   – name of the identifier field (default: ``id``)
    RESTSYNC_UPDATE_METHOD  – ``PUT`` or ``PATCH`` (default: ``PUT``)
    RESTSYNC_API_TOKEN      – bearer token
    RESTSYNC_TIMEOUT        – request timeout in seconds (default: 10)
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any

from restsync.transport.http import UPDATE_METHODS

if TYPE_CHECKING:
    import httpx

    from restsync.collection import RecordCollection

_FIELDS = ("base_url", "envelope_key", "id_attribute", "update_method", "api_token", "timeout")


@dataclass
class SyncConfig:
    base_url: str
    envelope_key: str | None = None
    id_attribute: str = "id"
    update_method: str = "PUT"
    api_token: str | None = None
    timeout: float = 10.0

    def __post_init__(self) -> None:
        self.update_method = self.update_method.upper()
        self.timeout = float(self.timeout)
        if not self.base_url:
            raise ValueError("base_url must not be empty")
        if self.update_method not in UPDATE_METHODS:
            raise ValueError(f"update_method must be one of {UPDATE_METHODS}, got {self.update_method!r}")
        if self.timeout <= 0:
            raise ValueError(f"timeout must be positive, got {self.timeout}")
        if not self.id_attribute:
            raise ValueError("id_attribute must not be empty")

    @classmethod
    def from_env(cls, **overrides: Any) -> "SyncConfig":
        """Build a config from ``RESTSYNC_*`` variables; keyword arguments win."""
        values: dict[str, Any] = {}
        for name in _FIELDS:
            env = os.getenv(f"RESTSYNC_{name.upper()}")
            if env:
                values[name] = env
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls.from_dict(values)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SyncConfig":
        section = data.get("restsync", data)
        unknown = set(section) - set(_FIELDS)
        if unknown:
            raise ValueError(f"unknown config keys: {sorted(unknown)}")
        if "base_url" not in section:
            raise ValueError("base_url is required")
        return cls(**section)

    @classmethod
    def from_toml(cls, path: Path | str) -> "SyncConfig":
        with open(path, "rb") as fh:
            data = tomllib.load(fh)
        return cls.from_dict(data)


def open_collection(config: SyncConfig, *, client: "httpx.AsyncClient | None" = None) -> "RecordCollection":
    """Wire an :class:`HttpTransport` and a :class:`RecordCollection` from *config*."""
    from restsync.collection import RecordCollection
    from restsync.transport.http import HttpTransport

    transport = HttpTransport.from_config(config, client=client)
    return RecordCollection(
        transport,
        envelope_key=config.envelope_key,
        id_attribute=config.id_attribute,
    )
