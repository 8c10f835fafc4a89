from __future__ import annotations

import logging
from typing import AsyncIterator, Iterable, List

from pydantic import ValidationError

from ..schemas.analytics import BatchPerformance, ClubSummary
from ..schemas.leaderboard import LeaderboardEntry, Timeframe
from ..schemas.user import UserAggregate
from .analysis import ranking
from .profiles import USERS
from .store import DocumentStore, Record

logger = logging.getLogger(__name__)


def load_users(records: Iterable[Record]) -> List[UserAggregate]:
    """Parse stored user records, skipping any that fail validation."""
    users = []
    for record in records:
        try:
            users.append(UserAggregate.model_validate(record))
        except ValidationError as exc:
            logger.warning("Skipping malformed user record %s (%d errors)", record.get("id"), exc.error_count())
    return users


def snapshot(store: DocumentStore) -> List[UserAggregate]:
    return load_users(store.query(USERS))


def leaderboard(store: DocumentStore, timeframe: Timeframe = Timeframe.ALL) -> List[LeaderboardEntry]:
    return ranking.rank_users(snapshot(store), timeframe)


def top_performers(store: DocumentStore, limit: int = ranking.TOP_PERFORMERS) -> List[LeaderboardEntry]:
    return ranking.top_performers(snapshot(store), limit)


def batch_performance(store: DocumentStore) -> List[BatchPerformance]:
    return ranking.batch_performance(snapshot(store))


def club_summary(store: DocumentStore) -> ClubSummary:
    return ranking.club_summary(snapshot(store))


async def watch_leaderboard(store: DocumentStore, timeframe: Timeframe = Timeframe.ALL) -> AsyncIterator[List[LeaderboardEntry]]:
    """Re-rank once per store snapshot. Nothing is carried between snapshots."""
    async for records in store.watch(USERS):
        yield ranking.rank_users(load_users(records), timeframe)
