from typing import AsyncIterator

import httpx
from fastapi import Depends, HTTPException, status

from ..config import Settings, settings
from ..database import SessionLocal
from ..services.external._http import HEADERS
from ..services.external.errors import NotFound, PlatformError
from ..services.external.fetcher import PlatformFetcher
from ..services.store import DocumentStore, SqlDocumentStore

_store = SqlDocumentStore(SessionLocal)


def get_settings() -> Settings:
    return settings


def get_store() -> DocumentStore:
    return _store


async def get_fetcher(config: Settings = Depends(get_settings)) -> AsyncIterator[PlatformFetcher]:
    async with httpx.AsyncClient(timeout=config.HTTP_TIMEOUT_SECONDS, headers=HEADERS) as client:
        yield PlatformFetcher(config, client)


def platform_http_error(exc: PlatformError) -> HTTPException:
    if isinstance(exc, NotFound):
        return HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Could not find {exc.platform.value} user \"{exc.handle}\"",
        )
    return HTTPException(
        status_code=status.HTTP_502_BAD_GATEWAY,
        detail=f"{exc.platform.value} is unavailable, try again later",
    )


def user_not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")


def malformed_user() -> HTTPException:
    return HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Stored user record is malformed")
