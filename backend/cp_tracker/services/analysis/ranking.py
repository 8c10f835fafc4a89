from __future__ import annotations

import math
from collections import defaultdict
from typing import Callable, Dict, Iterable, List, Tuple

from ...schemas.analytics import BatchPerformance, ClubSummary, PlatformDistribution
from ...schemas.leaderboard import EntryUser, LeaderboardEntry, PlatformSolved, Timeframe
from ...schemas.platform import Platform
from ...schemas.user import Role, UserAggregate
from .aggregator import aggregate_profiles

TOP_PERFORMERS = 5

SortKey = Callable[[LeaderboardEntry], Tuple[int, ...]]

# Descending sorts expressed as ascending on negated values; sorted() is
# stable, so exact ties keep input order.
SORT_KEYS: Dict[Timeframe, SortKey] = {
    Timeframe.ALL: lambda e: (-e.total_problems, -e.average_rating),
    Timeframe.MONTHLY: lambda e: (-e.monthly_problems, -e.total_problems, -e.average_rating),
    Timeframe.WEEKLY: lambda e: (-e.weekly_problems, -e.total_problems, -e.average_rating),
}


def eligible(users: Iterable[UserAggregate]) -> List[UserAggregate]:
    return [u for u in users if u.is_ranked]


def _solved_on(user: UserAggregate, platform: Platform) -> int:
    profile = user.platforms.get(platform)
    return profile.problems_solved if profile is not None and profile.connected else 0


def build_entry(user: UserAggregate) -> LeaderboardEntry:
    totals = aggregate_profiles(user.platforms)
    return LeaderboardEntry(
        user_id=user.id,
        user=EntryUser(name=user.name, batch=user.batch, roll_number=user.roll_number),
        total_problems=totals.total_problems,
        weekly_problems=user.stats.weekly_problems,
        monthly_problems=user.stats.monthly_problems,
        current_streak=user.stats.current_streak,
        average_rating=math.floor(totals.average_rating),
        platforms=PlatformSolved(**{p.value: _solved_on(user, p) for p in Platform}),
    )


def rank_users(users: Iterable[UserAggregate], timeframe: Timeframe = Timeframe.ALL) -> List[LeaderboardEntry]:
    """
    Build the leaderboard for approved members.

    Ranks are 1-based positions after sorting, so tied entries still get
    distinct consecutive ranks.
    """
    entries = sorted((build_entry(u) for u in eligible(users)), key=SORT_KEYS[timeframe])
    for position, entry in enumerate(entries, start=1):
        entry.rank = position
    return entries


def top_performers(users: Iterable[UserAggregate], limit: int = TOP_PERFORMERS) -> List[LeaderboardEntry]:
    return rank_users(users, Timeframe.ALL)[:limit]


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def batch_performance(users: Iterable[UserAggregate]) -> List[BatchPerformance]:
    totals: Dict[str, List[int]] = defaultdict(list)
    for user in eligible(users):
        if user.batch:
            totals[user.batch].append(aggregate_profiles(user.platforms).total_problems)

    batches = [
        BatchPerformance(
            batch=batch,
            name=f"Batch {batch}",
            members=len(solved),
            total_solved=sum(solved),
            avg_solved=_round_half_up(sum(solved) / len(solved)),
        )
        for batch, solved in totals.items()
    ]
    return sorted(batches, key=lambda b: -b.avg_solved)


def club_summary(users: Iterable[UserAggregate]) -> ClubSummary:
    users = list(users)
    members = eligible(users)
    distribution = PlatformDistribution(
        **{p.value: sum(_solved_on(u, p) for u in members) for p in Platform}
    )
    return ClubSummary(
        total_members=len(members),
        total_solved=distribution.leetcode + distribution.codeforces + distribution.codechef,
        platform_distribution=distribution,
        mentors=sum(1 for u in users if u.role == Role.MENTOR),
        admins=sum(1 for u in users if u.role == Role.ADMIN),
        pending_approvals=sum(1 for u in users if u.role == Role.MEMBER and not u.approved),
    )
