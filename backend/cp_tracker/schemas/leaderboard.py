from __future__ import annotations

from enum import Enum
from typing import Optional

from .base import CamelModel


class Timeframe(str, Enum):
    ALL = "all"
    MONTHLY = "monthly"
    WEEKLY = "weekly"


class EntryUser(CamelModel):
    name: str
    batch: Optional[str] = None
    roll_number: Optional[str] = None


class PlatformSolved(CamelModel):
    leetcode: int = 0
    codeforces: int = 0
    codechef: int = 0


class LeaderboardEntry(CamelModel):
    user_id: str
    user: EntryUser
    rank: int = 0  # assigned after sorting
    total_problems: int = 0
    weekly_problems: int = 0
    monthly_problems: int = 0
    current_streak: int = 0
    average_rating: int = 0
    platforms: PlatformSolved
