"""
Stats Service: Application layer orchestrator.

Loads history from the stores and runs the analytics calculators over it.
"""

import logging
from dataclasses import dataclass
from datetime import date

from senko.domain.constants import HEATMAP_DAYS_BACK
from senko.domain.review.ports import DailyStatStore, SessionStore
from senko.domain.stats.models import HeatmapValue, RetentionPoint, StreakData, StudyEfficiency

from .analytics import (
    calculate_deck_difficulty,
    calculate_retention_curve,
    calculate_streak,
    calculate_study_efficiency,
    generate_heatmap_data,
    identify_problem_cards,
)

logger = logging.getLogger(__name__)


@dataclass
class StatsDashboard:
    """Everything the stats views show, computed from one history load."""

    streak: StreakData
    efficiency: StudyEfficiency
    retention: list[RetentionPoint]
    problem_cards: list[str]
    total_sessions: int


class StatsService:
    """
    Application service for study analytics.

    Depends on the store ports, not on a concrete adapter. The calculators
    themselves do no I/O; this service supplies them the full history.
    """

    def __init__(self, session_store: SessionStore, daily_store: DailyStatStore):
        self._sessions = session_store
        self._daily = daily_store

    def streak(self, today: date | None = None) -> StreakData:
        return calculate_streak(self._daily.list_daily_stats(), today=today)

    def retention(self, now: int | None = None) -> list[RetentionPoint]:
        return calculate_retention_curve(self._sessions.list_sessions(), now=now)

    def efficiency(self) -> StudyEfficiency:
        return calculate_study_efficiency(
            self._sessions.list_sessions(), self._daily.list_daily_stats()
        )

    def heatmap(
        self, days_back: int = HEATMAP_DAYS_BACK, today: date | None = None
    ) -> list[HeatmapValue]:
        return generate_heatmap_data(self._daily.list_daily_stats(), days_back, today=today)

    def deck_difficulty(self, deck_id: str) -> float:
        return calculate_deck_difficulty(self._sessions.list_sessions(), deck_id)

    def dashboard(self, today: date | None = None, now: int | None = None) -> StatsDashboard:
        sessions = self._sessions.list_sessions()
        daily = self._daily.list_daily_stats()
        logger.debug(f"Building dashboard from {len(sessions)} sessions, {len(daily)} days")

        return StatsDashboard(
            streak=calculate_streak(daily, today=today),
            efficiency=calculate_study_efficiency(sessions, daily),
            retention=calculate_retention_curve(sessions, now=now),
            problem_cards=identify_problem_cards(sessions),
            total_sessions=len(sessions),
        )
