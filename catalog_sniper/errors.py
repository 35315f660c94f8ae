"""Exception taxonomy shared by fetch and storage layers."""

from __future__ import annotations


class CatalogSniperError(Exception):
    """Base class for all expected failures raised by catalog-sniper."""


class FetchError(CatalogSniperError):
    """A single upstream request could not produce a usable payload."""

    def __init__(self, message: str, url: str | None = None) -> None:
        super().__init__(message)
        self.url = url


class NetworkError(FetchError):
    """Connection-level failure; the only request error worth retrying."""


class RequestTimeoutError(FetchError, TimeoutError):
    """No response arrived before the request deadline."""


class HttpStatusError(FetchError):
    """Upstream answered with a non-success status code."""

    def __init__(self, status_code: int, url: str | None = None) -> None:
        super().__init__(f"HTTP {status_code}", url=url)
        self.status_code = status_code


class PayloadError(FetchError):
    """Response body is not the JSON object we expect."""


class StorageError(CatalogSniperError):
    """Base class for persisted document failures."""

    def __init__(self, message: str, key: str | None = None) -> None:
        super().__init__(message)
        self.key = key


class StorageReadError(StorageError):
    """Persisted document exists but cannot be read or decoded."""


class StorageWriteError(StorageError):
    """Persisted document could not be written."""


__all__ = [
    "CatalogSniperError",
    "FetchError",
    "HttpStatusError",
    "NetworkError",
    "PayloadError",
    "RequestTimeoutError",
    "StorageError",
    "StorageReadError",
    "StorageWriteError",
]
