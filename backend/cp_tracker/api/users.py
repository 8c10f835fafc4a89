from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ..config import Settings
from ..schemas.analytics import TopicStrength
from ..schemas.platform import Platform
from ..schemas.user import ConnectRequest, RefreshReport, UserAggregate, UserCreate
from ..services import profiles
from ..services.analysis.topics import LIST_LIMIT
from ..services.external.errors import PlatformError
from ..services.external.fetcher import PlatformFetcher
from ..services.store import DocumentStore
from .deps import get_fetcher, get_settings, get_store, malformed_user, platform_http_error, user_not_found

router = APIRouter()


@router.post("/users", response_model=UserAggregate, status_code=status.HTTP_201_CREATED)
async def register_user_endpoint(
    payload: UserCreate,
    store: DocumentStore = Depends(get_store),
    config: Settings = Depends(get_settings),
):
    """
    Register a member (pending approval) or, with a valid access code, a mentor.
    """
    try:
        return profiles.register_user(store, payload, config)
    except profiles.InvalidMentorCode:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid mentor access code")


@router.get("/users/{user_id}", response_model=UserAggregate)
async def get_user_endpoint(user_id: str, store: DocumentStore = Depends(get_store)):
    try:
        return profiles.load_user(store, user_id)
    except profiles.UserNotFound:
        raise user_not_found()
    except profiles.MalformedUserRecord:
        raise malformed_user()


@router.post("/users/{user_id}/platforms/{platform}", response_model=UserAggregate)
async def connect_platform_endpoint(
    user_id: str,
    platform: Platform,
    request: ConnectRequest,
    store: DocumentStore = Depends(get_store),
    fetcher: PlatformFetcher = Depends(get_fetcher),
):
    """
    Connect (or reconnect) a platform handle. The stored profile is replaced wholesale.
    """
    try:
        return await profiles.connect_platform(store, fetcher, user_id, platform, request.username)
    except profiles.UserNotFound:
        raise user_not_found()
    except profiles.MalformedUserRecord:
        raise malformed_user()
    except PlatformError as exc:
        raise platform_http_error(exc)


@router.post("/users/{user_id}/refresh", response_model=RefreshReport)
async def refresh_user_endpoint(
    user_id: str,
    store: DocumentStore = Depends(get_store),
    fetcher: PlatformFetcher = Depends(get_fetcher),
):
    """
    Re-fetch all connected platforms. Per-platform failures are reported, not raised.
    """
    try:
        return await profiles.refresh_user(store, fetcher, user_id)
    except profiles.UserNotFound:
        raise user_not_found()
    except profiles.MalformedUserRecord:
        raise malformed_user()


@router.get("/users/{user_id}/topics", response_model=List[TopicStrength])
async def user_topics_endpoint(
    user_id: str,
    limit: Optional[int] = Query(LIST_LIMIT, gt=0, le=100),
    store: DocumentStore = Depends(get_store),
    fetcher: PlatformFetcher = Depends(get_fetcher),
):
    """
    Topic strengths from the user's Codeforces history (empty when not connected).
    """
    try:
        return await profiles.user_topics(store, fetcher, user_id, limit)
    except profiles.UserNotFound:
        raise user_not_found()
    except profiles.MalformedUserRecord:
        raise malformed_user()
    except PlatformError as exc:
        raise platform_http_error(exc)
