from datetime import date
from unittest.mock import MagicMock

from senko.application.stats.service import StatsService
from senko.domain.constants import MS_PER_DAY
from senko.domain.review.models import CardReview, DailyStat, StudySession
from senko.infrastructure.adapters.memory_store import InMemoryStore

NOW = 1_710_000_000_000


def _history() -> InMemoryStore:
    reviews = tuple(
        CardReview(card_id=f"card_{i}", question="Tricky", rating=1, timestamp=NOW, time_spent=2)
        for i in range(3)
    )
    session = StudySession(
        id="session_1",
        deck_id="deck-a",
        start_time=NOW - MS_PER_DAY,
        end_time=NOW - MS_PER_DAY + 120_000,
        cards_reviewed=4,
        cards_mastered=1,
        ratings={1: 3, 2: 0, 3: 0, 4: 1},
        card_reviews=reviews,
    )
    daily = DailyStat(date="2024-03-09", cards_reviewed=4, cards_mastered=1, time_spent=2)
    return InMemoryStore(sessions=[session], daily_stats=[daily])


def test_dashboard_combines_calculators():
    store = _history()
    service = StatsService(session_store=store, daily_store=store)

    dash = service.dashboard(today=date(2024, 3, 10), now=NOW)

    assert dash.total_sessions == 1
    assert dash.streak.current_streak == 1
    assert dash.efficiency.total_study_time == 2
    assert dash.efficiency.cards_per_minute == 2.0
    assert [p.days_since_review for p in dash.retention] == [1]
    assert dash.retention[0].retention_rate == 0.25
    assert dash.problem_cards == ["Tricky"]


def test_individual_queries():
    store = _history()
    service = StatsService(session_store=store, daily_store=store)

    assert service.streak(today=date(2024, 3, 20)).current_streak == 0
    assert len(service.heatmap(days_back=6, today=date(2024, 3, 10))) == 7
    assert service.deck_difficulty("deck-a") == 1.75
    assert service.retention(now=NOW)[0].sample_size == 4


def test_service_reads_through_ports():
    sessions = MagicMock()
    sessions.list_sessions.return_value = []
    daily = MagicMock()
    daily.list_daily_stats.return_value = []

    service = StatsService(session_store=sessions, daily_store=daily)
    eff = service.efficiency()

    assert eff.peak_hour is None
    sessions.list_sessions.assert_called_once()
    daily.list_daily_stats.assert_called_once()
