from __future__ import annotations

import hmac
import logging
import uuid
from datetime import date, datetime
from typing import List, Optional, Tuple
from zoneinfo import ZoneInfo

from pydantic import ValidationError

from ..config import Settings
from ..schemas.analytics import TopicStrength
from ..schemas.platform import Platform, PlatformProfile, Submission
from ..schemas.user import RefreshReport, Role, UserAggregate, UserCreate, UserPlatforms, UserStats
from .analysis import activity, streaks, topics
from .analysis.aggregator import aggregate_profiles
from .analysis.submissions import summarize_submissions
from .external.fetcher import PlatformFetcher
from .store import DocumentStore

logger = logging.getLogger(__name__)

USERS = "users"


class UserNotFound(Exception):
    pass


class MalformedUserRecord(Exception):
    pass


class InvalidMentorCode(Exception):
    pass


def today_in(config: Settings) -> date:
    return datetime.now(ZoneInfo(config.STREAK_TIMEZONE)).date()


def load_user(store: DocumentStore, user_id: str) -> UserAggregate:
    record = store.get(USERS, user_id)
    if record is None:
        raise UserNotFound(user_id)
    try:
        return UserAggregate.model_validate(record)
    except ValidationError as exc:
        logger.warning("Malformed user record %s (%d errors)", user_id, exc.error_count())
        raise MalformedUserRecord(user_id) from exc


def register_user(store: DocumentStore, payload: UserCreate, config: Settings) -> UserAggregate:
    """
    Create a user document. Members start unapproved; a matching mentor
    access code creates an approved mentor instead.
    """
    role, approved = Role.MEMBER, False
    if payload.mentor_code is not None:
        expected = config.MENTOR_ACCESS_CODE
        if not expected or not hmac.compare_digest(payload.mentor_code.encode(), expected.encode()):
            raise InvalidMentorCode()
        role, approved = Role.MENTOR, True

    user = UserAggregate(
        id=uuid.uuid4().hex,
        name=payload.name,
        email=payload.email,
        batch=payload.batch,
        roll_number=payload.roll_number,
        role=role,
        approved=approved,
    )
    store.put(USERS, user.id, user.to_document())
    logger.info("Registered %s %s", role.value, user.id)
    return user


def recompute_stats(
    platforms: UserPlatforms,
    previous: UserStats,
    submissions: Optional[List[Submission]],
    today: date,
    config: Settings,
) -> UserStats:
    """
    Derive stats from the live platform profiles. Activity fields need a
    submission history; without one the previous values are carried over.
    """
    totals = aggregate_profiles(platforms)
    stats = previous.model_copy(update={
        "total_problems": totals.total_problems,
        "easy_problems": totals.easy_problems,
        "medium_problems": totals.medium_problems,
        "hard_problems": totals.hard_problems,
    })
    if submissions is None:
        return stats

    tz = ZoneInfo(config.STREAK_TIMEZONE)
    streak = streaks.compute_streaks(activity.accepted_days(submissions, tz), today)
    return stats.model_copy(update={
        "weekly_problems": activity.solved_within(submissions, today, activity.WEEK_DAYS, tz),
        "monthly_problems": activity.solved_within(submissions, today, activity.MONTH_DAYS, tz),
        "current_streak": streak.current_streak,
        "max_streak": streak.max_streak,
        "last_submission_date": activity.last_accepted_at(submissions),
    })


def _platform_update(platform: Platform, profile: PlatformProfile) -> Tuple[str, dict]:
    return f"platforms.{platform.value}", profile.to_document()


async def connect_platform(
    store: DocumentStore,
    fetcher: PlatformFetcher,
    user_id: str,
    platform: Platform,
    username: str,
    today: Optional[date] = None,
) -> UserAggregate:
    """Fetch, validate and store one platform profile, replacing any previous one."""
    user = load_user(store, user_id)
    fetched = await fetcher.fetch(platform, username)

    platforms = user.platforms.model_copy(update={platform.value: fetched.profile})
    stats = recompute_stats(
        platforms, user.stats, fetched.submissions, today or today_in(fetcher.config), fetcher.config
    )

    key, value = _platform_update(platform, fetched.profile)
    store.put(USERS, user_id, {key: value, "stats": stats.to_document()})
    logger.info("Connected %s handle %s for user %s", platform.value, fetched.profile.username, user_id)
    return load_user(store, user_id)


async def refresh_user(
    store: DocumentStore,
    fetcher: PlatformFetcher,
    user_id: str,
    today: Optional[date] = None,
) -> RefreshReport:
    """Re-fetch every connected platform concurrently and keep whatever succeeded."""
    user = load_user(store, user_id)
    handles = {platform: profile.username for platform, profile in user.platforms.connected().items()}
    outcomes = await fetcher.fetch_all(handles)

    updates = {}
    errors = {}
    platforms = user.platforms
    submissions = None
    for platform, outcome in outcomes.items():
        if not outcome.ok:
            errors[platform.value] = str(outcome.error)
            continue
        key, value = _platform_update(platform, outcome.result.profile)
        updates[key] = value
        platforms = platforms.model_copy(update={platform.value: outcome.result.profile})
        if outcome.result.submissions is not None:
            submissions = outcome.result.submissions

    stats = recompute_stats(platforms, user.stats, submissions, today or today_in(fetcher.config), fetcher.config)
    updates["stats"] = stats.to_document()
    store.put(USERS, user_id, updates)
    return RefreshReport(user=load_user(store, user_id), errors=errors)


async def user_topics(
    store: DocumentStore,
    fetcher: PlatformFetcher,
    user_id: str,
    limit: Optional[int] = None,
) -> List[TopicStrength]:
    """Topic strengths from Codeforces history, computed per request and not stored."""
    user = load_user(store, user_id)
    codeforces = user.platforms.codeforces
    if codeforces is None or not codeforces.connected:
        return []
    submissions = await fetcher.fetch_submissions(codeforces.username)
    return topics.topic_strengths(summarize_submissions(submissions).tag_stats, limit)
