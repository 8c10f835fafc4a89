from __future__ import annotations

from typing import Iterable, Optional

from ...schemas.analytics import PlatformTotals
from ...schemas.platform import PlatformProfile
from ...schemas.user import UserPlatforms


def _connected(profiles: Iterable[Optional[PlatformProfile]]) -> list:
    return [p for p in profiles if p is not None and p.connected]


def average_rating(profiles: Iterable[Optional[PlatformProfile]]) -> float:
    """Mean over rated platforms only; 0 when none is rated."""
    ratings = [p.rating for p in _connected(profiles) if p.rating]
    return sum(ratings) / len(ratings) if ratings else 0.0


def aggregate_profiles(platforms: UserPlatforms) -> PlatformTotals:
    connected = list(platforms.connected().values())
    ratings = [p.rating for p in connected if p.rating]
    return PlatformTotals(
        total_problems=sum(p.problems_solved for p in connected),
        easy_problems=sum(p.easy_solved or 0 for p in connected),
        medium_problems=sum(p.medium_solved or 0 for p in connected),
        hard_problems=sum(p.hard_solved or 0 for p in connected),
        average_rating=average_rating(connected),
        rated_platforms=len(ratings),
    )
