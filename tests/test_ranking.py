from conftest import platform, user_record
from cp_tracker.schemas.leaderboard import Timeframe
from cp_tracker.schemas.user import UserAggregate
from cp_tracker.services.analysis import ranking


def users(*records):
    return [UserAggregate.model_validate(r) for r in records]


def _scenario():
    return users(
        user_record("A", platforms={"codeforces": platform("a", solved=120, rating=1600)}),
        user_record("B", platforms={"codeforces": platform("b", solved=120, rating=1800)}),
        user_record("C", platforms={"codechef": platform("c", solved=90, rating=2000)}),
    )


def test_all_time_orders_by_total_then_rating():
    board = ranking.rank_users(_scenario(), Timeframe.ALL)
    assert [e.user_id for e in board] == ["B", "A", "C"]
    assert [e.rank for e in board] == [1, 2, 3]


def test_all_time_ordering_holds_pairwise():
    population = users(*[
        user_record(f"u{i}", platforms={
            "leetcode": platform("lc", solved=(i * 7) % 5, rating=1000 + (i * 37) % 400),
            "codeforces": platform("cf", solved=(i * 3) % 4, rating=(i * 53) % 900),
        })
        for i in range(20)
    ])
    board = ranking.rank_users(population, Timeframe.ALL)
    for upper, lower in zip(board, board[1:]):
        assert upper.total_problems >= lower.total_problems
        if upper.total_problems == lower.total_problems:
            assert upper.average_rating >= lower.average_rating


def test_ties_get_distinct_consecutive_ranks():
    population = users(
        user_record("x", platforms={"codeforces": platform("x", solved=10, rating=1200)}),
        user_record("y", platforms={"codeforces": platform("y", solved=10, rating=1200)}),
    )
    board = ranking.rank_users(population)
    assert [e.user_id for e in board] == ["x", "y"]
    assert [e.rank for e in board] == [1, 2]


def test_only_approved_members_are_ranked():
    population = users(
        user_record("member"),
        user_record("pending", approved=False),
        user_record("mentor", role="mentor"),
        user_record("admin", role="admin"),
    )
    board = ranking.rank_users(population)
    assert [e.user_id for e in board] == ["member"]


def test_weekly_sorts_by_weekly_then_total():
    population = users(
        user_record("a", stats={"weeklyProblems": 3}, platforms={"leetcode": platform("a", solved=5)}),
        user_record("b", stats={"weeklyProblems": 7}),
        user_record("c", stats={"weeklyProblems": 3}, platforms={"leetcode": platform("c", solved=50)}),
    )
    board = ranking.rank_users(population, Timeframe.WEEKLY)
    assert [e.user_id for e in board] == ["b", "c", "a"]


def test_monthly_sorts_by_monthly():
    population = users(
        user_record("a", stats={"monthlyProblems": 1}),
        user_record("b", stats={"monthlyProblems": 9}),
    )
    assert [e.user_id for e in ranking.rank_users(population, Timeframe.MONTHLY)] == ["b", "a"]


def test_entry_uses_live_totals_not_cached_stats():
    population = users(
        user_record("a", stats={"totalProblems": 999}, platforms={
            "leetcode": platform("a", solved=40, rating=1500),
            "codechef": platform("a", solved=10, rating=1700),
        }),
    )
    entry = ranking.rank_users(population)[0]
    assert entry.total_problems == 50
    assert entry.average_rating == 1600
    assert (entry.platforms.leetcode, entry.platforms.codeforces, entry.platforms.codechef) == (40, 0, 10)


def test_average_rating_is_floored():
    population = users(user_record("a", platforms={
        "codeforces": platform("a", solved=1, rating=1501),
        "codechef": platform("a", solved=1, rating=1502),
    }))
    assert ranking.rank_users(population)[0].average_rating == 1501


def test_input_is_not_reordered():
    population = _scenario()
    ranking.rank_users(population)
    assert [u.id for u in population] == ["A", "B", "C"]


def test_top_performers_caps_at_five():
    population = users(*[
        user_record(f"u{i}", platforms={"leetcode": platform("lc", solved=i)}) for i in range(8)
    ])
    top = ranking.top_performers(population)
    assert [e.user_id for e in top] == ["u7", "u6", "u5", "u4", "u3"]
    assert len(ranking.top_performers(population[:2])) == 2


def test_batch_performance_sorted_by_average():
    population = users(
        user_record("a", batch="2024", platforms={"leetcode": platform("a", solved=10)}),
        user_record("b", batch="2024", platforms={"leetcode": platform("b", solved=15)}),
        user_record("c", batch="2025", platforms={"leetcode": platform("c", solved=40)}),
        user_record("d", platforms={"leetcode": platform("d", solved=100)}),
        user_record("e", batch="2023", approved=False, platforms={"leetcode": platform("e", solved=500)}),
    )
    batches = ranking.batch_performance(population)
    assert [b.batch for b in batches] == ["2025", "2024"]
    assert batches[1].avg_solved == 13  # 12.5 rounds half up
    assert batches[1].name == "Batch 2024"
    assert batches[1].members == 2


def test_club_summary_counts_roles():
    population = users(
        user_record("a", platforms={"leetcode": platform("a", solved=10), "codechef": platform("a", solved=5)}),
        user_record("b", platforms={"codeforces": platform("b", solved=20)}),
        user_record("p", approved=False, platforms={"leetcode": platform("p", solved=99)}),
        user_record("m", role="mentor"),
        user_record("x", role="admin"),
    )
    summary = ranking.club_summary(population)
    assert summary.total_members == 2
    assert summary.total_solved == 35
    assert summary.platform_distribution.leetcode == 10
    assert (summary.mentors, summary.admins, summary.pending_approvals) == (1, 1, 1)
