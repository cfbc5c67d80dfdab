# Domain Review Package
from .models import (
    CardReview,
    CardStatus,
    DailyStat,
    QueueState,
    RatingResult,
    RatingTally,
    ReviewCard,
    StudySession,
)
from .ports import DailyStatStore, SessionStore

__all__ = [
    "CardReview",
    "CardStatus",
    "DailyStat",
    "QueueState",
    "RatingResult",
    "RatingTally",
    "ReviewCard",
    "StudySession",
    "SessionStore",
    "DailyStatStore",
]
