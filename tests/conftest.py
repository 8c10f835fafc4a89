import os

os.environ.setdefault("DATABASE_URL", "sqlite://")

from datetime import date, datetime, timezone

import httpx
import pytest

from cp_tracker.config import Settings
from cp_tracker.schemas.platform import Submission
from cp_tracker.services.store import InMemoryDocumentStore

TODAY = date(2025, 3, 15)


@pytest.fixture
def config():
    return Settings(DATABASE_URL="sqlite://", MENTOR_ACCESS_CODE="TSAP2026", STREAK_TIMEZONE="UTC")


@pytest.fixture
def store():
    return InMemoryDocumentStore()


def mock_client(handler):
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def submission(sub_id, contest, index, verdict="OK", tags=(), day=TODAY, rating=None):
    return Submission(
        id=sub_id,
        problem_key=(contest, index),
        tags=list(tags),
        verdict=verdict,
        problem_rating=rating,
        creation_time=datetime(day.year, day.month, day.day, 12, 0, tzinfo=timezone.utc),
    )


def user_record(user_id, name=None, role="member", approved=True, batch=None, platforms=None, stats=None):
    record = {
        "id": user_id,
        "name": name or user_id,
        "role": role,
        "approved": approved,
        "joinedAt": "2025-01-01T00:00:00Z",
        "platforms": platforms or {},
        "stats": stats or {},
    }
    if batch is not None:
        record["batch"] = batch
    return record


def platform(username, solved=0, rating=0, connected=True, **extra):
    data = {
        "username": username,
        "connected": connected,
        "problemsSolved": solved,
        "rating": rating,
        "lastSynced": "2025-03-01T00:00:00Z",
    }
    data.update(extra)
    return data
