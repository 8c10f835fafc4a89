from __future__ import annotations

from .base import CamelModel


class PlatformTotals(CamelModel):
    total_problems: int = 0
    easy_problems: int = 0
    medium_problems: int = 0
    hard_problems: int = 0
    average_rating: float = 0.0
    rated_platforms: int = 0


class StreakStats(CamelModel):
    current_streak: int = 0
    max_streak: int = 0


class TopicStrength(CamelModel):
    tag: str
    solved_count: int
    wrong_count: int = 0
    percentage: float


class BatchPerformance(CamelModel):
    batch: str
    name: str
    members: int
    total_solved: int
    avg_solved: int


class PlatformDistribution(CamelModel):
    leetcode: int = 0
    codeforces: int = 0
    codechef: int = 0


class ClubSummary(CamelModel):
    total_members: int = 0
    total_solved: int = 0
    platform_distribution: PlatformDistribution
    mentors: int = 0
    admins: int = 0
    pending_approvals: int = 0


