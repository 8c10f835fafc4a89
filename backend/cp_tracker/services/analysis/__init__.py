from . import activity, aggregator, ranking, streaks, submissions, topics

__all__ = ["activity", "aggregator", "ranking", "streaks", "submissions", "topics"]
