"""Typed failures surfaced by sync operations.

Every error raised by :mod:`restsync` derives from :class:`SyncError`, so an
embedding application can catch the whole family in one place::

    try:
        await tasks.persist(record)
    except HttpStatusError as exc:
        print(exc.status_code)
    except SyncError:
        ...
"""

from __future__ import annotations


class SyncError(Exception):
    """Base class for all sync adapter failures."""


class NetworkError(SyncError):
    """The request could not be sent, or no response was received."""

    def __init__(self, message: str, *, method: str = "", url: str = "") -> None:
        super().__init__(message)
        self.method = method
        self.url = url


class HttpStatusError(SyncError):
    """The server answered with a non-success status code."""

    def __init__(self, status_code: int, *, method: str = "", url: str = "", body: str = "") -> None:
        super().__init__(f"{method} {url} returned HTTP {status_code}".strip())
        self.status_code = status_code
        self.method = method
        self.url = url
        self.body = body


class NotFound(HttpStatusError):
    """HTTP 404: the identifier no longer exists server-side."""


class MalformedResponse(SyncError):
    """The response body did not match the expected shape."""
