from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Dict, Optional

from pydantic import EmailStr, Field, field_validator

from .base import CamelModel
from .platform import Platform, PlatformProfile, utc_now


class Role(str, Enum):
    MEMBER = "member"
    MENTOR = "mentor"
    ADMIN = "admin"


class UserPlatforms(CamelModel):
    leetcode: Optional[PlatformProfile] = None
    codeforces: Optional[PlatformProfile] = None
    codechef: Optional[PlatformProfile] = None

    def get(self, platform: Platform) -> Optional[PlatformProfile]:
        return getattr(self, platform.value)

    def connected(self) -> dict:
        return {
            platform: profile
            for platform in Platform
            if (profile := self.get(platform)) is not None and profile.connected
        }


class UserStats(CamelModel):
    total_problems: int = Field(0, ge=0)
    easy_problems: int = Field(0, ge=0)
    medium_problems: int = Field(0, ge=0)
    hard_problems: int = Field(0, ge=0)
    weekly_problems: int = Field(0, ge=0)
    monthly_problems: int = Field(0, ge=0)
    current_streak: int = Field(0, ge=0)
    max_streak: int = Field(0, ge=0)
    last_submission_date: Optional[datetime] = None


class UserAggregate(CamelModel):
    id: str
    name: str = "Anonymous"
    email: Optional[EmailStr] = None
    batch: Optional[str] = None
    roll_number: Optional[str] = None
    role: Role = Role.MEMBER
    approved: bool = False
    joined_at: datetime = Field(default_factory=utc_now)
    platforms: UserPlatforms = Field(default_factory=UserPlatforms)
    stats: UserStats = Field(default_factory=UserStats)

    @property
    def is_ranked(self) -> bool:
        return self.role == Role.MEMBER and self.approved


class UserCreate(CamelModel):
    name: str
    email: Optional[EmailStr] = None
    batch: Optional[str] = None
    roll_number: Optional[str] = None
    mentor_code: Optional[str] = None


class ConnectRequest(CamelModel):
    username: str = Field(..., min_length=1)

    @field_validator("username")
    @classmethod
    def strip_username(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("username must not be blank")
        return value


class RefreshReport(CamelModel):
    user: UserAggregate
    errors: Dict[str, str] = Field(default_factory=dict)
