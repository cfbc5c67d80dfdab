"""
Review queue scheduler for a single study session.

The queue decides which card is shown next purely from self-rated recall,
without wall-clock due dates:

1. A rating of 4 masters the card and sends it to the back of the queue.
2. A miss (1-3) while new cards remain slots the card in right after the
   run of unseen cards, so new material is shown before repeats.
3. Once everything has been seen, misses are spaced by confidence:
   1 goes to the front, 2 a third of the way back, 3 two thirds back.

The session completes when a card is rated 4 and every other card in the
queue is already mastered.
"""

import logging
import random
from collections.abc import Callable, Sequence

from senko.application.id_service import generate_session_id
from senko.application.materializer import materialize
from senko.application.session_recorder import SessionRecorder
from senko.application.utils.clock import now_ms
from senko.domain.constants import (
    GOOD_MIN_POSITION,
    HARD_MIN_POSITION,
    MS_PER_SECOND,
    RATING_AGAIN,
    RATING_EASY,
    RATING_HARD,
    VALID_RATINGS,
)
from senko.domain.errors import InvalidRatingError
from senko.domain.questions import QuestionItem
from senko.domain.review.models import (
    CardReview,
    CardStatus,
    QueueState,
    RatingResult,
    RatingTally,
    ReviewCard,
    SessionSnapshot,
    StudySession,
    empty_tally,
)

logger = logging.getLogger(__name__)


def requeue_position(queue: Sequence[ReviewCard], rating: int) -> int:
    """
    Index at which a card rated ``rating`` is reinserted into ``queue``.

    ``queue`` is the queue after the card was removed from the head.
    """
    if rating == RATING_EASY:
        return len(queue)

    for idx, card in enumerate(queue):
        if card.status is CardStatus.UNSEEN and (
            idx == len(queue) - 1 or queue[idx + 1].status is not CardStatus.UNSEEN
        ):
            return idx + 1

    n = len(queue)
    if rating == RATING_AGAIN:
        return 0
    if rating == RATING_HARD:
        return max(n // 3, HARD_MIN_POSITION)
    return max((n * 2) // 3, GOOD_MIN_POSITION)


class ReviewQueueScheduler:
    """
    State machine for one pass through a deck.

    States:
        ACTIVE: cards remain and ratings are accepted.
        COMPLETED: terminal; the queue is frozen and the session was recorded.
        EMPTY: terminal; the deck had no questions.

    Ratings submitted outside ACTIVE are ignored.
    """

    def __init__(
        self,
        deck_id: str,
        questions: Sequence[QuestionItem],
        recorder: SessionRecorder | None = None,
        rng: random.Random | None = None,
        clock: Callable[[], int] = now_ms,
    ):
        """
        Args:
            deck_id: Id of the deck being studied, stored on the session.
            questions: The deck's questions; kept for reset().
            recorder: Sink for the finished session; nothing is persisted if None.
            rng: Random source for shuffling.
            clock: Epoch-ms clock.
        """
        self.deck_id = deck_id
        self._questions = list(questions)
        self._recorder = recorder
        self._rng = rng
        self._clock = clock

        self.queue: list[ReviewCard] = []
        self.cards_reviewed = 0
        self.cards_mastered = 0
        self.ratings: RatingTally = empty_tally()
        self.completed = False
        self.session_id = ""
        self.start_time = 0
        self.last_session: StudySession | None = None
        self._card_reviews: list[CardReview] = []
        self._mastered_ids: set[str] = set()
        self._presented_at = 0

        self.reset()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def state(self) -> QueueState:
        if self.completed:
            return QueueState.COMPLETED
        if not self.queue:
            return QueueState.EMPTY
        return QueueState.ACTIVE

    @property
    def current_card(self) -> ReviewCard | None:
        if self.completed or not self.queue:
            return None
        return self.queue[0]

    @property
    def total_cards(self) -> int:
        return len(self._questions)

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            state=self.state,
            cards_reviewed=self.cards_reviewed,
            cards_mastered=self.cards_mastered,
            ratings=dict(self.ratings),
            remaining=sum(1 for c in self.queue if c.status is not CardStatus.MASTERED),
        )

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def reset(self) -> None:
        """Start over with a freshly shuffled queue. Persisted history is untouched."""
        self.queue = materialize(self._questions, rng=self._rng, clock=self._clock)
        self.cards_reviewed = 0
        self.cards_mastered = 0
        self.ratings = empty_tally()
        self.completed = False
        self.session_id = generate_session_id()
        self.start_time = self._clock()
        self.last_session = None
        self._card_reviews = []
        self._mastered_ids = set()
        self._presented_at = self.start_time

        if not self.queue:
            logger.info(f"Deck {self.deck_id} has no questions; nothing to review")

    def submit_rating(self, rating: int) -> RatingResult:
        """
        Apply a recall rating to the card at the head of the queue.

        Args:
            rating: 1 (again), 2 (hard), 3 (good) or 4 (easy).

        Returns:
            The next card to present, or None with ``completed`` set once the
            session is over.

        Raises:
            InvalidRatingError: if ``rating`` is not one of 1-4.
        """
        if rating not in VALID_RATINGS:
            raise InvalidRatingError(rating)

        if self.state is not QueueState.ACTIVE:
            logger.debug(f"Ignoring rating {rating}: session is {self.state.value}")
            return RatingResult(next_card=None, completed=self.completed)

        now = self._clock()
        card = self.queue.pop(0)
        card.status = CardStatus.MASTERED if rating == RATING_EASY else CardStatus.LEARNING
        card.last_rating = rating
        card.review_count += 1
        card.last_reviewed_at = now

        self.cards_reviewed += 1
        self.ratings[rating] += 1
        # A card counts once per session, however often it is demoted and re-mastered.
        if card.status is CardStatus.MASTERED and card.id not in self._mastered_ids:
            self._mastered_ids.add(card.id)
            self.cards_mastered += 1

        self._card_reviews.append(
            CardReview(
                card_id=card.id,
                question=card.question.question,
                rating=rating,
                timestamp=now,
                time_spent=max(0, (now - self._presented_at) // MS_PER_SECOND),
            )
        )
        self._presented_at = now

        if rating == RATING_EASY and all(c.status is CardStatus.MASTERED for c in self.queue):
            self.completed = True
            self._finish(now)
            return RatingResult(next_card=None, completed=True)

        self.queue.insert(requeue_position(self.queue, rating), card)
        return RatingResult(next_card=self.queue[0], completed=False)

    def _finish(self, end_time: int) -> None:
        session = StudySession(
            id=self.session_id,
            deck_id=self.deck_id,
            start_time=self.start_time,
            end_time=end_time,
            cards_reviewed=self.cards_reviewed,
            cards_mastered=self.cards_mastered,
            ratings=dict(self.ratings),
            card_reviews=tuple(self._card_reviews),
        )
        self.last_session = session
        logger.info(
            f"Session {session.id} completed: {session.cards_reviewed} reviewed, "
            f"{session.cards_mastered} mastered"
        )
        if self._recorder is not None:
            self._recorder.record(session)
