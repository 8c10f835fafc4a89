from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import httpx

from ...config import Settings, settings as default_settings
from ...schemas.platform import FetchedProfile, Platform, PlatformProfile, RatingChange, Submission
from ..analysis.submissions import summarize_submissions
from ._http import open_client
from .errors import MALFORMED, NotFound, UpstreamError

logger = logging.getLogger(__name__)


async def _call(http: httpx.AsyncClient, config: Settings, method: str, handle: str, params: Dict[str, Any]) -> Any:
    """
    Issue one Codeforces API call and unwrap the ``{status, result|comment}``
    envelope. Codeforces answers unknown handles with HTTP 400 and a FAILED
    envelope, so the body is inspected before the status code.
    """
    url = f"{config.CODEFORCES_API_BASE}/{method}"
    try:
        resp = await http.get(url, params=params)
    except httpx.HTTPError as exc:
        logger.warning("Codeforces %s failed for %s: %s", method, handle, exc)
        raise UpstreamError(Platform.CODEFORCES, handle, str(exc)) from exc

    try:
        payload = resp.json()
    except ValueError as exc:
        raise UpstreamError(Platform.CODEFORCES, handle, f"malformed response (HTTP {resp.status_code})") from exc
    if not isinstance(payload, dict):
        raise UpstreamError(Platform.CODEFORCES, handle, "unexpected payload shape")

    if payload.get("status") != "OK":
        comment = str(payload.get("comment") or "")
        if "not found" in comment.lower():
            raise NotFound(Platform.CODEFORCES, handle, comment)
        logger.warning("Codeforces %s returned %s for %s: %s", method, payload.get("status"), handle, comment)
        raise UpstreamError(Platform.CODEFORCES, handle, comment or f"HTTP {resp.status_code}")

    return payload.get("result")


def parse_submission(raw: Dict[str, Any]) -> Optional[Submission]:
    """Normalize one ``user.status`` record; ``None`` when it is incomplete or malformed."""
    problem = raw.get("problem") or {}
    index = problem.get("index")
    created = raw.get("creationTimeSeconds")
    if raw.get("id") is None or index is None or created is None:
        return None
    try:
        return Submission(
            id=raw["id"],
            problem_key=(int(problem.get("contestId") or 0), str(index)),
            problem_name=problem.get("name"),
            problem_rating=problem.get("rating"),
            tags=list(problem.get("tags") or []),
            verdict=raw.get("verdict") or "",
            creation_time=datetime.fromtimestamp(int(created), tz=timezone.utc),
        )
    except MALFORMED:
        return None


def _expect_list(result: Any, handle: str, method: str) -> List[Any]:
    if result is None:
        return []
    if not isinstance(result, list):
        raise UpstreamError(Platform.CODEFORCES, handle, f"malformed {method} result")
    return result


async def fetch_user(handle: str, client: Optional[httpx.AsyncClient] = None, config: Optional[Settings] = None) -> Dict[str, Any]:
    config = config or default_settings
    async with open_client(client, config.HTTP_TIMEOUT_SECONDS) as http:
        result = _expect_list(await _call(http, config, "user.info", handle, {"handles": handle}), handle, "user.info")
    if not result:
        raise NotFound(Platform.CODEFORCES, handle, "empty user.info result")
    if not isinstance(result[0], dict):
        raise UpstreamError(Platform.CODEFORCES, handle, "malformed user.info result")
    return result[0]


async def fetch_submissions(handle: str, client: Optional[httpx.AsyncClient] = None, config: Optional[Settings] = None) -> List[Submission]:
    """Fetch up to ``CODEFORCES_SUBMISSION_LIMIT`` submissions, newest first."""
    config = config or default_settings
    params = {"handle": handle, "from": 1, "count": config.CODEFORCES_SUBMISSION_LIMIT}
    async with open_client(client, config.HTTP_TIMEOUT_SECONDS) as http:
        result = _expect_list(await _call(http, config, "user.status", handle, params), handle, "user.status")

    submissions: List[Submission] = []
    skipped = 0
    for raw in result:
        sub = parse_submission(raw) if isinstance(raw, dict) else None
        if sub is None:
            skipped += 1
            continue
        submissions.append(sub)
    if skipped:
        logger.info("Skipped %d incomplete or malformed Codeforces submissions for %s", skipped, handle)
    return submissions


async def fetch_rating_history(handle: str, client: Optional[httpx.AsyncClient] = None, config: Optional[Settings] = None) -> List[RatingChange]:
    config = config or default_settings
    async with open_client(client, config.HTTP_TIMEOUT_SECONDS) as http:
        result = _expect_list(await _call(http, config, "user.rating", handle, {"handle": handle}), handle, "user.rating")

    try:
        return [
            RatingChange(
                contest_id=item["contestId"],
                contest_name=item.get("contestName", ""),
                rank=item.get("rank", 0),
                old_rating=item.get("oldRating", 0),
                new_rating=item.get("newRating", 0),
                updated_at=datetime.fromtimestamp(item.get("ratingUpdateTimeSeconds", 0), tz=timezone.utc),
            )
            for item in result
            if isinstance(item, dict) and "contestId" in item
        ]
    except MALFORMED as exc:
        logger.warning("Malformed Codeforces rating history for %s: %s", handle, exc)
        raise UpstreamError(Platform.CODEFORCES, handle, "malformed user.rating result") from exc


async def fetch_profile(
    handle: str,
    client: Optional[httpx.AsyncClient] = None,
    config: Optional[Settings] = None,
) -> FetchedProfile:
    config = config or default_settings
    async with open_client(client, config.HTTP_TIMEOUT_SECONDS) as http:
        user, submissions = await asyncio.gather(
            fetch_user(handle, http, config),
            fetch_submissions(handle, http, config),
        )

    summary = summarize_submissions(submissions)
    try:
        profile = PlatformProfile(
            username=user.get("handle") or handle,
            problems_solved=summary.unique_solved_count,
            rating=max(int(user.get("rating") or 0), 0),
            max_rating=max(int(user.get("maxRating") or 0), 0),
            rank=user.get("rank") or "Unrated",
            max_rank=user.get("maxRank") or "Unrated",
        )
    except MALFORMED as exc:
        logger.warning("Malformed Codeforces user.info for %s: %s", handle, exc)
        raise UpstreamError(Platform.CODEFORCES, handle, "malformed user.info result") from exc
    return FetchedProfile(platform=Platform.CODEFORCES, profile=profile, submissions=submissions)
