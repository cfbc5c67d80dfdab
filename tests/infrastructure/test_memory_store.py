from senko.domain.review.models import DailyStat
from senko.infrastructure.adapters import InMemoryStore


def test_daily_stats_merge_by_date():
    store = InMemoryStore(daily_stats=[DailyStat("2024-03-10", 1, 0, 1)])

    store.add_daily_stat(DailyStat("2024-03-10", 2, 1, 3))
    store.add_daily_stat(DailyStat("2024-03-11", 4, 4, 4))

    assert store.list_daily_stats() == [
        DailyStat("2024-03-10", 3, 1, 4),
        DailyStat("2024-03-11", 4, 4, 4),
    ]


def test_list_returns_copies():
    store = InMemoryStore()
    store.list_sessions().append("x")
    assert store.sessions == []
