"""
Ports (interfaces) for session persistence.

These define the contract that infrastructure adapters must implement.
Application services depend on these abstractions, not concrete implementations.
"""

from abc import ABC, abstractmethod

from .models import DailyStat, StudySession


class SessionStore(ABC):
    """
    Append-only sink for finished study sessions.

    Implementations:
        - JsonFileStore: sessions.json in the data directory.
        - InMemoryStore: process-local list, for tests and previews.
    """

    @abstractmethod
    def add_session(self, session: StudySession) -> None:
        """
        Append a finished session to history.

        Failures are the store's concern: implementations log and drop the
        write rather than raise.
        """
        pass

    @abstractmethod
    def list_sessions(self) -> list[StudySession]:
        """Return the full session history, oldest first."""
        pass


class DailyStatStore(ABC):
    """Per-day aggregate store keyed by calendar date."""

    @abstractmethod
    def add_daily_stat(self, stat: DailyStat) -> None:
        """
        Merge a delta into the record for ``stat.date``.

        Existing records are summed field by field; a missing date is inserted.
        """
        pass

    @abstractmethod
    def list_daily_stats(self) -> list[DailyStat]:
        """Return all daily records in storage order."""
        pass
