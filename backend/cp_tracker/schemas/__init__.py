from . import analytics, leaderboard, platform, user

__all__ = ["analytics", "leaderboard", "platform", "user"]
