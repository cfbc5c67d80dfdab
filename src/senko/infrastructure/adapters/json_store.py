"""
JSON File Store: Infrastructure adapter for local history files.

Implements SessionStore and DailyStatStore on top of two JSON files in the
data directory. Every operation is a synchronous read-modify-write.

Failures are logged and swallowed: a corrupt or unreadable file loads as an
empty history, and a failed write is dropped.
"""

import json
import logging
from pathlib import Path
from typing import Any

from senko.domain.constants import DAILY_STATS_FILE, SESSIONS_FILE
from senko.domain.review.models import DailyStat, StudySession
from senko.domain.review.ports import DailyStatStore, SessionStore

logger = logging.getLogger(__name__)


class JsonFileStore(SessionStore, DailyStatStore):
    """
    File-backed history store.

    Layout:
        <data_dir>/sessions.json     -- list of session objects, oldest first
        <data_dir>/daily_stats.json  -- list of per-day totals
    """

    def __init__(self, data_dir: Path):
        self.data_dir = data_dir
        self.sessions_path = data_dir / SESSIONS_FILE
        self.daily_stats_path = data_dir / DAILY_STATS_FILE

    # ------------------------------------------------------------------
    # Sessions
    # ------------------------------------------------------------------

    def add_session(self, session: StudySession) -> None:
        records = self._load(self.sessions_path)
        records.append(session.to_dict())
        self._save(self.sessions_path, records)

    def list_sessions(self) -> list[StudySession]:
        sessions = []
        for record in self._load(self.sessions_path):
            try:
                sessions.append(StudySession.from_dict(record))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning(f"Skipping malformed session record: {e}")
        return sessions

    # ------------------------------------------------------------------
    # Daily stats
    # ------------------------------------------------------------------

    def add_daily_stat(self, stat: DailyStat) -> None:
        stats = self.list_daily_stats()
        for idx, existing in enumerate(stats):
            if existing.date == stat.date:
                stats[idx] = existing.merged(stat)
                break
        else:
            stats.append(stat)
        self._save(self.daily_stats_path, [s.to_dict() for s in stats])

    def list_daily_stats(self) -> list[DailyStat]:
        stats = []
        for record in self._load(self.daily_stats_path):
            try:
                stats.append(DailyStat.from_dict(record))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning(f"Skipping malformed daily stat record: {e}")
        return stats

    # ------------------------------------------------------------------
    # File helpers
    # ------------------------------------------------------------------

    def _load(self, path: Path) -> list[dict[str, Any]]:
        if not path.exists():
            return []
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Failed to load {path}: {e}")
            return []

        if not isinstance(data, list):
            logger.warning(f"Ignoring {path}: expected a JSON list")
            return []
        return [r for r in data if isinstance(r, dict)]

    def _save(self, path: Path, records: list[dict[str, Any]]) -> None:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp = path.with_suffix(path.suffix + ".tmp")
            tmp.write_text(json.dumps(records, indent=2), encoding="utf-8")
            tmp.replace(path)
        except OSError as e:
            logger.warning(f"Failed to save {path}: {e}")
