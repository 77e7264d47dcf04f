"""restsync: keep an in-memory record collection in sync with a REST resource."""

from restsync.collection import RecordCollection
from restsync.config import SyncConfig, open_collection
from restsync.errors import HttpStatusError, MalformedResponse, NetworkError, NotFound, SyncError
from restsync.normalizer import normalize, normalize_one
from restsync.record import Record
from restsync.transport.http import HttpTransport

__all__ = [
    "Record",
    "RecordCollection",
    "HttpTransport",
    "SyncConfig",
    "open_collection",
    "normalize",
    "normalize_one",
    "SyncError",
    "NetworkError",
    "HttpStatusError",
    "NotFound",
    "MalformedResponse",
]
