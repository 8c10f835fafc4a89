from typing import List

from fastapi import APIRouter, Depends

from ..schemas.platform import FetchedProfile, Platform, RatingChange
from ..services.external import codeforces_stats
from ..services.external.errors import PlatformError
from ..services.external.fetcher import PlatformFetcher
from .deps import get_fetcher, platform_http_error

router = APIRouter()


@router.get("/platforms/{platform}/{handle}", response_model=FetchedProfile, response_model_exclude={"submissions"})
async def fetch_platform_profile(
    platform: Platform,
    handle: str,
    fetcher: PlatformFetcher = Depends(get_fetcher),
):
    """
    Look up a handle without storing anything.
    """
    try:
        return await fetcher.fetch(platform, handle)
    except PlatformError as exc:
        raise platform_http_error(exc)


@router.get("/platforms/codeforces/{handle}/rating-history", response_model=List[RatingChange])
async def codeforces_rating_history(
    handle: str,
    fetcher: PlatformFetcher = Depends(get_fetcher),
):
    try:
        return await codeforces_stats.fetch_rating_history(handle, fetcher.client, fetcher.config)
    except PlatformError as exc:
        raise platform_http_error(exc)
