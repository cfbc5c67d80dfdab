"""
In-Memory Store: process-local implementation of the persistence ports.

Used by tests and anywhere history should not outlive the process.
"""

from senko.domain.review.models import DailyStat, StudySession
from senko.domain.review.ports import DailyStatStore, SessionStore


class InMemoryStore(SessionStore, DailyStatStore):
    def __init__(
        self,
        sessions: list[StudySession] | None = None,
        daily_stats: list[DailyStat] | None = None,
    ):
        self.sessions: list[StudySession] = list(sessions or [])
        self.daily_stats: list[DailyStat] = list(daily_stats or [])

    def add_session(self, session: StudySession) -> None:
        self.sessions.append(session)

    def list_sessions(self) -> list[StudySession]:
        return list(self.sessions)

    def add_daily_stat(self, stat: DailyStat) -> None:
        for idx, existing in enumerate(self.daily_stats):
            if existing.date == stat.date:
                self.daily_stats[idx] = existing.merged(stat)
                return
        self.daily_stats.append(stat)

    def list_daily_stats(self) -> list[DailyStat]:
        return list(self.daily_stats)
