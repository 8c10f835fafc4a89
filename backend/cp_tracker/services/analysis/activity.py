from __future__ import annotations

from datetime import date, datetime, timedelta, tzinfo
from typing import Dict, Iterable, Optional, Set

from ...schemas.platform import Submission
from .submissions import ProblemKey, is_accepted

WEEK_DAYS = 7
MONTH_DAYS = 30


def local_day(moment: datetime, tz: tzinfo) -> date:
    return moment.astimezone(tz).date()


def accepted_days(submissions: Iterable[Submission], tz: tzinfo) -> Set[date]:
    """Distinct platform-local calendar days with at least one accepted submission."""
    return {local_day(sub.creation_time, tz) for sub in submissions if is_accepted(sub)}


def first_solved_days(submissions: Iterable[Submission], tz: tzinfo) -> Dict[ProblemKey, date]:
    first: Dict[ProblemKey, date] = {}
    for sub in submissions:
        if not is_accepted(sub):
            continue
        day = local_day(sub.creation_time, tz)
        if sub.problem_key not in first or day < first[sub.problem_key]:
            first[sub.problem_key] = day
    return first


def solved_within(submissions: Iterable[Submission], today: date, days: int, tz: tzinfo) -> int:
    """Problems whose first acceptance falls in the ``days``-long window ending at ``today``."""
    start = today - timedelta(days=days - 1)
    return sum(1 for day in first_solved_days(submissions, tz).values() if start <= day <= today)


def last_accepted_at(submissions: Iterable[Submission]) -> Optional[datetime]:
    times = [sub.creation_time for sub in submissions if is_accepted(sub)]
    return max(times) if times else None
