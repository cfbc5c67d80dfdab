"""
Derived analytics structures.

Recomputed on demand from session and daily history; never persisted.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class StreakData:
    """
    Attributes:
        current_streak: Consecutive study days ending today or yesterday.
        longest_streak: Longest run of consecutive study days ever.
        last_study_date: Date of the latest daily record (YYYY-MM-DD).
    """

    current_streak: int
    longest_streak: int
    last_study_date: str | None


@dataclass(frozen=True)
class RetentionPoint:
    days_since_review: int
    retention_rate: float  # 0.0-1.0, share of ratings that were 3 or 4
    sample_size: int


@dataclass(frozen=True)
class StudyEfficiency:
    cards_per_minute: float
    average_time_per_card: float  # seconds
    peak_hour: int | None  # 0-23, local time
    total_study_time: int  # minutes


@dataclass(frozen=True)
class HeatmapValue:
    date: str
    count: int
