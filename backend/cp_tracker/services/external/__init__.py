from . import codechef_stats, codeforces_stats, leetcode_stats
from .errors import NotFound, PlatformError, UpstreamError
from .fetcher import FetchOutcome, PlatformFetcher

__all__ = [
    "codechef_stats",
    "codeforces_stats",
    "leetcode_stats",
    "FetchOutcome",
    "NotFound",
    "PlatformError",
    "PlatformFetcher",
    "UpstreamError",
]
