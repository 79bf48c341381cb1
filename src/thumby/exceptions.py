"""
Custom exceptions for thumby.

All thumby exceptions inherit from ThumbyError for easy catching. None of
them escape a block resolution: they are raised by providers, storage and
the cache codec, and handled by the operations that call them.
"""

from __future__ import annotations

from typing import Any


class ThumbyError(Exception):
    """Base exception for all thumby errors.

    Attributes:
        message: Human-readable error message
        category: Error classification (e.g., "network", "not_found")
        details: Additional diagnostic information
    """

    category = "unknown"

    def __init__(self, message: str, *, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a structured dict for JSON output."""
        result: dict[str, Any] = {
            "type": self.__class__.__name__,
            "message": self.message,
            "category": self.category,
        }
        if self.details:
            result["details"] = self.details
        return result


class NetworkError(ThumbyError):
    """Transport-level failure: the request never produced a response."""

    category = "network"

    def __init__(
        self,
        message: str,
        *,
        details: dict[str, Any] | None = None,
        url: str | None = None,
    ):
        details = details or {}
        if url:
            details["url"] = url
        super().__init__(message, details=details)
        self.url = url


class MetadataError(ThumbyError):
    """A provider answered, but the answer was unusable.

    Covers non-2xx responses and bodies that cannot be decoded. Distinct from
    NetworkError: the provider was reachable.
    """

    category = "metadata"

    def __init__(
        self,
        message: str,
        *,
        details: dict[str, Any] | None = None,
        http_code: int | None = None,
    ):
        details = details or {}
        if http_code:
            details["http_code"] = http_code
        super().__init__(message, details=details)
        self.http_code = http_code


class VideoNotFoundError(MetadataError):
    """Well-formed response indicating there is no such video."""

    category = "not_found"


class CacheError(ThumbyError):
    """Malformed or policy-inconsistent cache block."""

    category = "cache"


class StorageError(ThumbyError):
    """Local write failure while saving a thumbnail."""

    category = "storage"


class ConfigurationError(ThumbyError):
    """Invalid configuration, e.g. a configured image folder that does not exist."""

    category = "configuration"
