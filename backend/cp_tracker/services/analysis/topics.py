from __future__ import annotations

from typing import List, Mapping, Optional

from ...schemas.analytics import TopicStrength
from ...schemas.platform import TagCount

RADAR_LIMIT = 6
LIST_LIMIT = 10


def topic_strengths(tag_stats: Mapping[str, TagCount], limit: Optional[int] = None) -> List[TopicStrength]:
    """
    Rank tags by solved count (ties alphabetical) and express each count as a
    percentage of the strongest tag, which is always 100.
    """
    ordered = sorted(tag_stats.items(), key=lambda item: (-item[1].solved, item[0]))
    top = ordered[0][1].solved if ordered else 0

    strengths = [
        TopicStrength(
            tag=tag,
            solved_count=counts.solved,
            wrong_count=counts.wrong,
            percentage=round(counts.solved * 100 / top, 2) if top else 0.0,
        )
        for tag, counts in ordered
    ]
    return strengths[:limit] if limit is not None else strengths
