from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Dict, List, Optional, Tuple

from pydantic import Field

from .base import CamelModel


class Platform(str, Enum):
    LEETCODE = "leetcode"
    CODEFORCES = "codeforces"
    CODECHEF = "codechef"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class PlatformProfile(CamelModel):
    username: str
    connected: bool = True
    problems_solved: int = Field(0, ge=0)
    rating: int = Field(0, ge=0)
    max_rating: Optional[int] = Field(None, ge=0)
    rank: Optional[str] = None
    max_rank: Optional[str] = None
    stars: Optional[str] = None
    easy_solved: Optional[int] = Field(None, ge=0)
    medium_solved: Optional[int] = Field(None, ge=0)
    hard_solved: Optional[int] = Field(None, ge=0)
    last_synced: datetime = Field(default_factory=utc_now)


class Submission(CamelModel):
    id: int
    problem_key: Tuple[int, str]
    problem_name: Optional[str] = None
    problem_rating: Optional[int] = None
    tags: List[str] = Field(default_factory=list)
    verdict: str = ""
    creation_time: datetime


class TagCount(CamelModel):
    solved: int = Field(0, ge=0)
    wrong: int = Field(0, ge=0)


TagStats = Dict[str, TagCount]


class SubmissionSummary(CamelModel):
    unique_solved_count: int = 0
    tag_stats: Dict[str, TagCount] = Field(default_factory=dict)
    total_submissions: int = 0
    accepted_submissions: int = 0
    problems_by_rating: Dict[int, int] = Field(default_factory=dict)


class RatingChange(CamelModel):
    contest_id: int
    contest_name: str
    rank: int
    old_rating: int
    new_rating: int
    updated_at: datetime


class FetchedProfile(CamelModel):
    """A normalized profile plus whatever extra history the platform exposes.

    Only Codeforces fills ``submissions``; consumers check for ``None`` rather
    than expecting every platform to provide history.
    """

    platform: Platform
    profile: PlatformProfile
    submissions: Optional[List[Submission]] = None
