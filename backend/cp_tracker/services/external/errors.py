from __future__ import annotations

from ...schemas.platform import Platform


class PlatformError(Exception):
    """Base class for failures reported by a platform adapter."""

    def __init__(self, platform: Platform, handle: str, detail: str = ""):
        self.platform = platform
        self.handle = handle
        self.detail = detail
        super().__init__(f"{platform.value}:{handle}: {detail}" if detail else f"{platform.value}:{handle}")


class NotFound(PlatformError):
    """The handle does not exist upstream. The user has to correct it."""


class UpstreamError(PlatformError):
    """Transport failure, malformed payload or non-OK status. Safe to retry."""


# Raised while coercing an upstream payload into our schemas. pydantic's
# ValidationError subclasses ValueError.
MALFORMED = (ValueError, TypeError, KeyError, AttributeError, IndexError, OverflowError)
