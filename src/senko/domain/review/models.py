"""
Domain models for review sessions.

These are pure data structures with no I/O or external dependencies.
Timestamps are epoch milliseconds; dates are ISO ``YYYY-MM-DD`` strings.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from senko.domain.constants import VALID_RATINGS
from senko.domain.questions import QuestionItem

RatingTally = dict[int, int]


def empty_tally() -> RatingTally:
    return {rating: 0 for rating in VALID_RATINGS}


def tally_from_dict(data: dict[Any, Any] | None) -> RatingTally:
    """Rebuild a tally from JSON, where keys come back as strings."""
    tally = empty_tally()
    for key, value in (data or {}).items():
        rating = int(key)
        if rating in tally:
            tally[rating] = int(value)
    return tally


class CardStatus(str, Enum):
    UNSEEN = "unseen"
    LEARNING = "learning"
    MASTERED = "mastered"


class QueueState(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    EMPTY = "empty"


@dataclass
class ReviewCard:
    """
    Review state of one question for the duration of a single session.

    Attributes:
        id: Unique card id, regenerated every session.
        question: The authored question this card presents.
        status: unseen -> learning/mastered as ratings arrive.
        last_rating: Most recent rating (1-4), None before the first review.
        review_count: Number of ratings received this session.
        created_at: Epoch ms when the card was materialized.
        last_reviewed_at: Epoch ms of the most recent rating.
    """

    id: str
    question: QuestionItem
    created_at: int
    status: CardStatus = CardStatus.UNSEEN
    last_rating: int | None = None
    review_count: int = 0
    last_reviewed_at: int | None = None


@dataclass(frozen=True)
class CardReview:
    """
    A single rating given during a session.

    Attributes:
        card_id: Ephemeral id of the reviewed card.
        question: Question text, stable across sessions.
        rating: Button pressed (1=Again, 2=Hard, 3=Good, 4=Easy).
        timestamp: Epoch ms of the rating.
        time_spent: Seconds since the card was presented.
    """

    card_id: str
    question: str
    rating: int
    timestamp: int
    time_spent: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "card_id": self.card_id,
            "question": self.question,
            "rating": self.rating,
            "timestamp": self.timestamp,
            "time_spent": self.time_spent,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CardReview":
        return cls(
            card_id=str(data.get("card_id", "")),
            question=str(data.get("question", "")),
            rating=int(data["rating"]),
            timestamp=int(data.get("timestamp", 0)),
            time_spent=int(data.get("time_spent", 0)),
        )


@dataclass(frozen=True)
class StudySession:
    """A finished study session. Written once, never updated."""

    id: str
    deck_id: str
    start_time: int
    end_time: int | None
    cards_reviewed: int
    cards_mastered: int
    ratings: RatingTally
    card_reviews: tuple[CardReview, ...] = ()

    @property
    def total_ratings(self) -> int:
        return sum(self.ratings.values())

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "deck_id": self.deck_id,
            "start_time": self.start_time,
            "end_time": self.end_time,
            "cards_reviewed": self.cards_reviewed,
            "cards_mastered": self.cards_mastered,
            "ratings": {str(k): v for k, v in self.ratings.items()},
            "card_reviews": [r.to_dict() for r in self.card_reviews],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "StudySession":
        end_time = data.get("end_time")
        return cls(
            id=str(data["id"]),
            deck_id=str(data.get("deck_id", "")),
            start_time=int(data["start_time"]),
            end_time=int(end_time) if end_time is not None else None,
            cards_reviewed=int(data.get("cards_reviewed", 0)),
            cards_mastered=int(data.get("cards_mastered", 0)),
            ratings=tally_from_dict(data.get("ratings")),
            card_reviews=tuple(CardReview.from_dict(r) for r in data.get("card_reviews") or []),
        )


@dataclass(frozen=True)
class DailyStat:
    """Per-day totals. ``time_spent`` is in minutes."""

    date: str
    cards_reviewed: int
    cards_mastered: int
    time_spent: int

    def merged(self, other: "DailyStat") -> "DailyStat":
        """Sum another delta for the same date into this record."""
        return DailyStat(
            date=self.date,
            cards_reviewed=self.cards_reviewed + other.cards_reviewed,
            cards_mastered=self.cards_mastered + other.cards_mastered,
            time_spent=self.time_spent + other.time_spent,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.date,
            "cards_reviewed": self.cards_reviewed,
            "cards_mastered": self.cards_mastered,
            "time_spent": self.time_spent,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DailyStat":
        return cls(
            date=str(data["date"]),
            cards_reviewed=int(data.get("cards_reviewed", 0)),
            cards_mastered=int(data.get("cards_mastered", 0)),
            time_spent=int(data.get("time_spent", 0)),
        )


@dataclass(frozen=True)
class RatingResult:
    """Outcome of one rating: the next card to show, and whether the session ended."""

    next_card: ReviewCard | None
    completed: bool = False


@dataclass
class SessionSnapshot:
    """Counters of an in-progress session, for display."""

    state: QueueState
    cards_reviewed: int
    cards_mastered: int
    ratings: RatingTally = field(default_factory=empty_tally)
    remaining: int = 0
