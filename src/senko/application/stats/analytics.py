"""
Analytics over persisted study history.

This is a pure computation module with no I/O: callers pass the full
session and daily-stat history and get derived structures back. Empty
history always yields zero / None results, never an exception.
"""

from collections import defaultdict
from collections.abc import Iterable, Sequence
from datetime import date, timedelta

from senko.application.utils.clock import local_datetime, now_ms, parse_date_key
from senko.domain.constants import (
    HEATMAP_DAYS_BACK,
    MS_PER_DAY,
    PROBLEM_CARD_LOW_RATING,
    PROBLEM_CARD_LOW_RATIO,
    PROBLEM_CARD_MIN_REVIEWS,
    RETAINED_RATINGS,
    RETENTION_MAX_DAYS,
)
from senko.domain.review.models import DailyStat, StudySession
from senko.domain.stats.models import HeatmapValue, RetentionPoint, StreakData, StudyEfficiency

# ---------- Streaks ----------


def calculate_streak(daily_stats: Sequence[DailyStat], today: date | None = None) -> StreakData:
    """
    Compute current and longest study streaks.

    The two streaks treat zero-review days differently and this is kept
    as-is: the current streak passes over a zero-review day without counting
    it, but still stops at the first calendar gap of more than one day; the
    longest streak ignores zero-review days entirely, so they never break a
    run by themselves.

    ``last_study_date`` is the latest record's date even when that record
    has no reviews.
    """
    if not daily_stats:
        return StreakData(current_streak=0, longest_streak=0, last_study_date=None)

    today = today or date.today()
    latest_first = sorted(daily_stats, key=lambda s: s.date, reverse=True)
    last_study_date = latest_first[0].date

    current_streak = 0
    if last_study_date in (today.isoformat(), (today - timedelta(days=1)).isoformat()):
        check_date = parse_date_key(last_study_date)
        for stat in latest_first:
            stat_date = parse_date_key(stat.date)
            gap = (check_date - stat_date).days
            if gap > 1:
                break
            if stat.cards_reviewed > 0:
                current_streak += 1
                check_date = stat_date

    longest_streak = 0
    running = 0
    prev_date: date | None = None
    for stat in reversed(latest_first):
        if stat.cards_reviewed == 0:
            continue
        stat_date = parse_date_key(stat.date)
        if prev_date is not None and (stat_date - prev_date).days == 1:
            running += 1
        else:
            running = 1
        longest_streak = max(longest_streak, running)
        prev_date = stat_date

    return StreakData(
        current_streak=current_streak,
        longest_streak=longest_streak,
        last_study_date=last_study_date,
    )


# ---------- Retention ----------


def calculate_retention_curve(
    sessions: Iterable[StudySession], now: int | None = None
) -> list[RetentionPoint]:
    """
    Estimate retention by how long ago each session took place.

    Sessions are bucketed by whole days since their start; within a bucket,
    ratings of 3 and 4 count as retained. Unfinished sessions and sessions
    without ratings are skipped, and buckets older than 90 days are dropped.
    """
    now = now_ms() if now is None else now
    buckets: dict[int, list[int]] = {}

    for session in sessions:
        if session.end_time is None:
            continue
        total = session.total_ratings
        if total == 0:
            continue
        good = sum(session.ratings.get(r, 0) for r in RETAINED_RATINGS)
        # Sessions stamped after `now` (clock skew) fall into today's bucket.
        days = max(0, (now - session.start_time) // MS_PER_DAY)
        bucket = buckets.setdefault(days, [0, 0])
        bucket[0] += total
        bucket[1] += good

    return [
        RetentionPoint(
            days_since_review=days,
            retention_rate=good / total if total > 0 else 0.0,
            sample_size=total,
        )
        for days, (total, good) in sorted(buckets.items())
        if days <= RETENTION_MAX_DAYS
    ]


# ---------- Efficiency ----------


def calculate_study_efficiency(
    sessions: Sequence[StudySession], daily_stats: Sequence[DailyStat]
) -> StudyEfficiency:
    """
    Derive throughput metrics and the most productive hour of the day.

    Study time comes from the daily records (minutes); reviewed-card counts
    come from the sessions. The peak hour is the local start hour with the
    strictly largest number of reviewed cards; on a tie the hour seen first,
    going through sessions in start order, wins. With no sessions, or only
    sessions that reviewed nothing, there is no peak hour.
    """
    total_study_time = sum(stat.time_spent for stat in daily_stats)
    total_cards = sum(session.cards_reviewed for session in sessions)

    cards_per_minute = total_cards / total_study_time if total_study_time > 0 else 0.0
    average_time_per_card = (total_study_time * 60) / total_cards if total_cards > 0 else 0.0

    hour_counts: dict[int, int] = {}
    for session in sorted(sessions, key=lambda s: s.start_time):
        hour = local_datetime(session.start_time).hour
        hour_counts[hour] = hour_counts.get(hour, 0) + session.cards_reviewed

    peak_hour: int | None = None
    max_count = 0
    for hour, count in hour_counts.items():
        if count > max_count:
            max_count = count
            peak_hour = hour

    return StudyEfficiency(
        cards_per_minute=cards_per_minute,
        average_time_per_card=average_time_per_card,
        peak_hour=peak_hour,
        total_study_time=total_study_time,
    )


# ---------- Activity ----------


def generate_heatmap_data(
    daily_stats: Iterable[DailyStat],
    days_back: int = HEATMAP_DAYS_BACK,
    today: date | None = None,
) -> list[HeatmapValue]:
    """One value per day from ``today - days_back`` through today, zero-filled."""
    today = today or date.today()
    counts = {stat.date: stat.cards_reviewed for stat in daily_stats}
    start = today - timedelta(days=days_back)
    return [
        HeatmapValue(date=day.isoformat(), count=counts.get(day.isoformat(), 0))
        for day in (start + timedelta(days=offset) for offset in range(days_back + 1))
    ]


def calculate_deck_difficulty(sessions: Iterable[StudySession], deck_id: str) -> float:
    """
    Mean rating across a deck's sessions (1.0-4.0); lower is harder.

    Returns 0.0 when the deck has no rated sessions.
    """
    weighted = 0
    count = 0
    for session in sessions:
        if session.deck_id != deck_id:
            continue
        weighted += sum(rating * n for rating, n in session.ratings.items())
        count += session.total_ratings
    return weighted / count if count > 0 else 0.0


def identify_problem_cards(sessions: Iterable[StudySession]) -> list[str]:
    """
    Questions that are consistently rated poorly.

    Card ids only live for one session, so reviews are grouped by question
    text. A question is a problem when it has at least 3 logged reviews and
    more than half of them were rated 1 or 2.
    """
    totals: dict[str, list[int]] = defaultdict(lambda: [0, 0])
    for session in sessions:
        for review in session.card_reviews:
            entry = totals[review.question]
            entry[0] += 1
            if review.rating <= PROBLEM_CARD_LOW_RATING:
                entry[1] += 1

    return [
        question
        for question, (total, low) in totals.items()
        if total >= PROBLEM_CARD_MIN_REVIEWS and low / total > PROBLEM_CARD_LOW_RATIO
    ]


# ---------- Formatting ----------


def format_duration(minutes: float) -> str:
    """Format minutes for display, e.g. ``<1m``, ``45m``, ``2h``, ``1h 30m``."""
    if minutes < 1:
        return "<1m"
    if minutes < 60:
        return f"{round(minutes)}m"

    hours = int(minutes // 60)
    mins = round(minutes % 60)
    if mins == 0:
        return f"{hours}h"
    return f"{hours}h {mins}m"


def format_hour(hour: int) -> str:
    """Format an hour of day, e.g. ``14`` -> ``2:00 PM``."""
    period = "PM" if hour >= 12 else "AM"
    display = 12 if hour == 0 else hour - 12 if hour > 12 else hour
    return f"{display}:00 {period}"
