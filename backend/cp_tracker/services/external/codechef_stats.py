from __future__ import annotations

import logging
import re
from typing import Optional

import httpx
from bs4 import BeautifulSoup  # type: ignore

from ...config import Settings, settings as default_settings
from ...schemas.platform import FetchedProfile, Platform, PlatformProfile
from ._http import open_client
from .errors import NotFound, UpstreamError

logger = logging.getLogger(__name__)

UNRATED = "Unrated"
SOLVED_PATTERN = re.compile(r"Total Problems Solved:?\s*(\d+)", re.IGNORECASE)


def _first_int(text: Optional[str]) -> Optional[int]:
    if not text:
        return None
    m = re.search(r"\d+", text)
    return int(m.group()) if m else None


def parse_profile_html(html: str, handle: str) -> PlatformProfile:
    """
    Best-effort extraction from the public profile page. A missing element
    leaves the field at its neutral value instead of failing the fetch.
    """
    soup = BeautifulSoup(html, "html.parser")

    rating_el = soup.select_one(".rating-number")
    rating = _first_int(rating_el.get_text(strip=True) if rating_el else None) or 0

    stars = "".join(span.get_text(strip=True) for span in soup.select(".rating-star span")) or UNRATED

    title_el = soup.select_one(".rating-title")
    rank = (title_el.get_text(strip=True) if title_el else "") or UNRATED

    max_rating = None
    for el in soup.select(".rating-header small"):
        text = el.get_text(" ", strip=True)
        if "highest rating" in text.lower():
            max_rating = _first_int(text)
            break

    problems_solved = 0
    for h3 in soup.select(".problems-solved h3"):
        m = SOLVED_PATTERN.search(h3.get_text(" ", strip=True))
        if m:
            problems_solved = int(m.group(1))
            break
    else:
        # Layout drift: fall back to the page text
        m = SOLVED_PATTERN.search(soup.get_text(" ", strip=True))
        if m:
            problems_solved = int(m.group(1))

    return PlatformProfile(
        username=handle,
        rating=rating,
        max_rating=max_rating,
        stars=stars,
        rank=rank,
        problems_solved=problems_solved,
    )


async def fetch_profile(
    handle: str,
    client: Optional[httpx.AsyncClient] = None,
    config: Optional[Settings] = None,
) -> FetchedProfile:
    config = config or default_settings
    url = f"{config.CODECHEF_PROFILE_URL}/{handle}"

    async with open_client(client, config.HTTP_TIMEOUT_SECONDS) as http:
        try:
            resp = await http.get(url, follow_redirects=False)
        except httpx.HTTPError as exc:
            logger.warning("CodeChef request failed for %s: %s", handle, exc)
            raise UpstreamError(Platform.CODECHEF, handle, str(exc)) from exc

    # Unknown users get a 404 or a redirect away from /users/<handle>
    if resp.status_code == 404 or resp.is_redirect:
        raise NotFound(Platform.CODECHEF, handle, "User not found")
    if resp.status_code >= 400:
        raise UpstreamError(Platform.CODECHEF, handle, f"HTTP {resp.status_code}")

    return FetchedProfile(platform=Platform.CODECHEF, profile=parse_profile_html(resp.text, handle))
