from __future__ import annotations

from collections import defaultdict
from typing import Dict, Iterable, Set, Tuple

from ...schemas.platform import Submission, SubmissionSummary, TagCount

ACCEPTED_VERDICTS = frozenset({"OK"})

ProblemKey = Tuple[int, str]


def is_accepted(submission: Submission) -> bool:
    return submission.verdict in ACCEPTED_VERDICTS


def summarize_submissions(submissions: Iterable[Submission]) -> SubmissionSummary:
    """
    Collapse a raw submission list into unique solved problems and per-tag
    counts.

    A problem counts towards ``solved`` (for itself and each of its tags) the
    first time an accepted submission for it is seen. Every non-accepted
    submission counts towards ``wrong``, including repeats and attempts on
    problems that were solved later. Only membership matters, so the result
    does not depend on submission order.
    """
    solved: Set[ProblemKey] = set()
    tags: Dict[str, Dict[str, int]] = defaultdict(lambda: {"solved": 0, "wrong": 0})
    by_rating: Dict[int, int] = defaultdict(int)
    total = 0
    accepted = 0

    for sub in submissions:
        total += 1
        if is_accepted(sub):
            accepted += 1
            if sub.problem_key in solved:
                continue
            solved.add(sub.problem_key)
            for tag in sub.tags:
                tags[tag]["solved"] += 1
            if sub.problem_rating:
                by_rating[sub.problem_rating] += 1
        else:
            for tag in sub.tags:
                tags[tag]["wrong"] += 1

    return SubmissionSummary(
        unique_solved_count=len(solved),
        tag_stats={tag: TagCount(**counts) for tag, counts in sorted(tags.items())},
        total_submissions=total,
        accepted_submissions=accepted,
        problems_by_rating=dict(sorted(by_rating.items())),
    )
