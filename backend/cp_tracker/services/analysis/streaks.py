from __future__ import annotations

from datetime import date, timedelta
from typing import Iterable, Set

from ...schemas.analytics import StreakStats

ONE_DAY = timedelta(days=1)


def current_streak(days: Set[date], today: date) -> int:
    """Consecutive days ending at ``today``. No grace period: if today is missing the streak is 0."""
    streak = 0
    check = today
    while check in days:
        streak += 1
        check -= ONE_DAY
    return streak


def max_streak(days: Iterable[date]) -> int:
    ordered = sorted(set(days))
    if not ordered:
        return 0

    best = running = 1
    for prev, curr in zip(ordered, ordered[1:]):
        if curr - prev == ONE_DAY:
            running += 1
            best = max(best, running)
        else:
            running = 1
    return best


def compute_streaks(days: Iterable[date], today: date) -> StreakStats:
    unique = set(days)
    return StreakStats(current_streak=current_streak(unique, today), max_streak=max_streak(unique))
