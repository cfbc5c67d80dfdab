"""
Session recorder: hands finished sessions to the persistence ports.
"""

import logging

from senko.application.utils.clock import date_key
from senko.domain.constants import MS_PER_MINUTE
from senko.domain.review.models import DailyStat, StudySession
from senko.domain.review.ports import DailyStatStore, SessionStore

logger = logging.getLogger(__name__)


def daily_delta(session: StudySession) -> DailyStat:
    """Per-day totals contributed by one finished session."""
    end_time = session.end_time if session.end_time is not None else session.start_time
    return DailyStat(
        date=date_key(end_time),
        cards_reviewed=session.cards_reviewed,
        cards_mastered=session.cards_mastered,
        time_spent=max(0, (end_time - session.start_time) // MS_PER_MINUTE),
    )


class SessionRecorder:
    """
    Writes a finished session and its daily delta.

    No retries: the stores swallow their own failures, and the in-memory
    session state is never rolled back.
    """

    def __init__(self, session_store: SessionStore, daily_store: DailyStatStore):
        self._sessions = session_store
        self._daily = daily_store

    def record(self, session: StudySession) -> DailyStat:
        delta = daily_delta(session)
        self._sessions.add_session(session)
        self._daily.add_daily_stat(delta)
        logger.debug(f"Recorded session {session.id} into {delta.date}")
        return delta
