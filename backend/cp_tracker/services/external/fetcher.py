from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Dict, List, Mapping, Optional

import httpx

from ...config import Settings, settings as default_settings
from ...schemas.platform import FetchedProfile, Platform, Submission
from . import codechef_stats, codeforces_stats, leetcode_stats
from .errors import NotFound, PlatformError

logger = logging.getLogger(__name__)

Adapter = Callable[..., Awaitable[FetchedProfile]]

ADAPTERS: Dict[Platform, Adapter] = {
    Platform.LEETCODE: leetcode_stats.fetch_profile,
    Platform.CODEFORCES: codeforces_stats.fetch_profile,
    Platform.CODECHEF: codechef_stats.fetch_profile,
}


class FetchOutcome:
    """Result of one adapter call inside a fan-out: either a profile or an error."""

    def __init__(self, platform: Platform, result: Optional[FetchedProfile] = None, error: Optional[PlatformError] = None):
        self.platform = platform
        self.result = result
        self.error = error

    @property
    def ok(self) -> bool:
        return self.error is None


class PlatformFetcher:
    """
    Handle for the three platform adapters. Holds the settings and, when
    given, a shared ``httpx.AsyncClient`` so callers and tests control the
    transport.
    """

    def __init__(self, config: Optional[Settings] = None, client: Optional[httpx.AsyncClient] = None):
        self.config = config or default_settings
        self.client = client

    async def fetch(self, platform: Platform, username: str) -> FetchedProfile:
        handle = username.strip()
        if not handle:
            raise NotFound(platform, handle, "handle is blank")
        return await ADAPTERS[platform](handle, self.client, self.config)

    async def _settle(self, platform: Platform, username: str) -> FetchOutcome:
        try:
            return FetchOutcome(platform, result=await self.fetch(platform, username))
        except PlatformError as exc:
            logger.warning("Fetch failed for %s: %s", platform.value, exc)
            return FetchOutcome(platform, error=exc)

    async def fetch_all(self, handles: Mapping[Platform, str]) -> Dict[Platform, FetchOutcome]:
        """Fetch every platform in ``handles`` concurrently; failures stay per-platform."""
        platforms = list(handles)
        outcomes = await asyncio.gather(*(self._settle(p, handles[p]) for p in platforms))
        return dict(zip(platforms, outcomes))

    async def fetch_submissions(self, username: str) -> List[Submission]:
        """Codeforces history only; the other platforms expose no submission list."""
        handle = username.strip()
        if not handle:
            raise NotFound(Platform.CODEFORCES, handle, "handle is blank")
        return await codeforces_stats.fetch_submissions(handle, self.client, self.config)
