"""Wall-clock helpers. Timestamps are epoch milliseconds, dates are local."""

import time
from datetime import date, datetime


def now_ms() -> int:
    return int(time.time() * 1000)


def local_datetime(timestamp_ms: int) -> datetime:
    return datetime.fromtimestamp(timestamp_ms / 1000)


def date_key(timestamp_ms: int | None = None) -> str:
    """Local calendar date (YYYY-MM-DD) of a timestamp, default now."""
    if timestamp_ms is None:
        timestamp_ms = now_ms()
    return local_datetime(timestamp_ms).date().isoformat()


def parse_date_key(value: str) -> date:
    return date.fromisoformat(value)
