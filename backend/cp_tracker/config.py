from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional

class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./cp_tracker.db"
    MENTOR_ACCESS_CODE: Optional[str] = None  # Mentor signup is refused while unset

    LEETCODE_GRAPHQL_URL: str = "https://leetcode.com/graphql"
    CODEFORCES_API_BASE: str = "https://codeforces.com/api"
    CODECHEF_PROFILE_URL: str = "https://www.codechef.com/users"

    CODEFORCES_SUBMISSION_LIMIT: int = 10000
    HTTP_TIMEOUT_SECONDS: float = 30.0
    STREAK_TIMEZONE: str = "UTC"
    LOG_LEVEL: str = "INFO"

    # Pydantic v2 settings configuration
    model_config = SettingsConfigDict(env_file=["../.env", ".env"], env_file_encoding="utf-8", extra="ignore")

settings = Settings()
