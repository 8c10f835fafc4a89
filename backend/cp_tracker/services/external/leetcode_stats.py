from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx

from ...config import Settings, settings as default_settings
from ...schemas.platform import FetchedProfile, Platform, PlatformProfile
from ._http import open_client
from .errors import MALFORMED, NotFound, UpstreamError

logger = logging.getLogger(__name__)

PROFILE_QUERY = """
query getUserProfile($username: String!) {
    matchedUser(username: $username) {
        username
        profile {
            ranking
            reputation
        }
        submitStats {
            acSubmissionNum {
                difficulty
                count
            }
        }
    }
    userContestRanking(username: $username) {
        rating
    }
}
"""


def _count_for(ac_list: List[Dict[str, Any]], difficulty: str) -> int:
    for item in ac_list:
        if isinstance(item, dict) and item.get("difficulty") == difficulty:
            return int(item.get("count") or 0)
    return 0


def parse_profile(handle: str, data: Dict[str, Any]) -> PlatformProfile:
    """
    Normalize the ``data`` object of a GraphQL response.

    LeetCode reports counts by difficulty only, so no submission history is
    attached and tag/streak analytics stay unavailable for this platform.
    """
    user = data.get("matchedUser") or {}
    ac_list = (user.get("submitStats") or {}).get("acSubmissionNum") or []
    ranking = (user.get("profile") or {}).get("ranking")
    contest = data.get("userContestRanking") or {}

    return PlatformProfile(
        username=user.get("username") or handle,
        problems_solved=_count_for(ac_list, "All"),
        easy_solved=_count_for(ac_list, "Easy"),
        medium_solved=_count_for(ac_list, "Medium"),
        hard_solved=_count_for(ac_list, "Hard"),
        rating=int(round(contest.get("rating") or 0)),
        rank=str(ranking) if ranking else None,
    )


async def fetch_profile(
    handle: str,
    client: Optional[httpx.AsyncClient] = None,
    config: Optional[Settings] = None,
) -> FetchedProfile:
    config = config or default_settings
    body = {"query": PROFILE_QUERY, "variables": {"username": handle}}
    headers = {"Content-Type": "application/json", "Referer": "https://leetcode.com"}

    async with open_client(client, config.HTTP_TIMEOUT_SECONDS) as http:
        try:
            resp = await http.post(config.LEETCODE_GRAPHQL_URL, json=body, headers=headers)
        except httpx.HTTPError as exc:
            logger.warning("LeetCode request failed for %s: %s", handle, exc)
            raise UpstreamError(Platform.LEETCODE, handle, str(exc)) from exc

    try:
        payload = resp.json()
    except ValueError as exc:
        raise UpstreamError(Platform.LEETCODE, handle, f"malformed response (HTTP {resp.status_code})") from exc
    if not isinstance(payload, dict):
        raise UpstreamError(Platform.LEETCODE, handle, "unexpected payload shape")

    errors = payload.get("errors") or []
    if errors:
        message = str((errors[0] or {}).get("message", "")) if isinstance(errors[0], dict) else str(errors[0])
        if "does not exist" in message.lower():
            raise NotFound(Platform.LEETCODE, handle, message)
        logger.warning("LeetCode GraphQL error for %s: %s", handle, message)
        raise UpstreamError(Platform.LEETCODE, handle, message)

    if resp.status_code >= 400:
        raise UpstreamError(Platform.LEETCODE, handle, f"HTTP {resp.status_code}")

    data = payload.get("data") or {}
    if not isinstance(data, dict):
        raise UpstreamError(Platform.LEETCODE, handle, "unexpected payload shape")
    if not data.get("matchedUser"):
        raise NotFound(Platform.LEETCODE, handle, "User not found")

    try:
        profile = parse_profile(handle, data)
    except MALFORMED as exc:
        logger.warning("Malformed LeetCode profile for %s: %s", handle, exc)
        raise UpstreamError(Platform.LEETCODE, handle, "malformed profile") from exc
    return FetchedProfile(platform=Platform.LEETCODE, profile=profile)
