"""
Keyboard dispatch for study sessions.

Translates raw key names into the three domain events the review queue
understands: flip, rate(1-4) and reset. Reset is bound to a two-key
sequence (``g`` then ``r``) that must be completed within a timeout.

Sequence handling is a small state machine:
    start   -- the prefix key arrives; a cancellable timer is armed.
    consume -- the next key arrives; the timer is cancelled and the pair is
               resolved (unknown pairs are dropped).
    expire  -- the timer fires first; the pending prefix is discarded.

The timer only ever clears the pending prefix. It never touches the
scheduler, which is driven solely through dispatch_event().
"""

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from senko.application.review_queue import ReviewQueueScheduler
from senko.domain.constants import (
    FLIP_KEY,
    RATING_KEYS,
    RESET_SEQUENCE,
    SEQUENCE_PREFIX,
    SEQUENCE_TIMEOUT,
)
from senko.domain.review.models import RatingResult

logger = logging.getLogger(__name__)


class EventKind(str, Enum):
    FLIP = "flip"
    RATE = "rate"
    RESET = "reset"


@dataclass(frozen=True)
class KeyEvent:
    kind: EventKind
    rating: int | None = None


class InputMode(str, Enum):
    QUESTION = "question"
    ANSWER = "answer-rating"


class Timer(Protocol):
    def start(self) -> None: ...

    def cancel(self) -> None: ...


TimerFactory = Callable[[float, Callable[[], None]], Timer]

SEQUENCES: dict[tuple[str, str], KeyEvent] = {
    RESET_SEQUENCE: KeyEvent(EventKind.RESET),
}


def daemon_timer(interval: float, function: Callable[[], None]) -> threading.Timer:
    """A ``threading.Timer`` that does not keep the interpreter alive."""
    timer = threading.Timer(interval, function)
    timer.daemon = True
    return timer


class KeySequenceDispatcher:
    """Stateful key-to-event translator with two-key sequence support."""

    def __init__(
        self,
        timeout: float = SEQUENCE_TIMEOUT,
        timer_factory: TimerFactory = daemon_timer,
    ):
        """
        Args:
            timeout: Seconds allowed between the prefix and the second key.
            timer_factory: Builds the expiry timer; a daemon ``threading.Timer`` by default.
        """
        self.timeout = timeout
        self._timer_factory = timer_factory
        self._pending: str | None = None
        self._timer: Timer | None = None
        self._generation = 0
        self._lock = threading.Lock()

    @property
    def pending(self) -> str | None:
        return self._pending

    def feed(self, key: str, mode: InputMode) -> KeyEvent | None:
        """
        Process one key press.

        Returns the resulting event, or None when the key only advanced (or
        aborted) a sequence or has no binding in the current mode.
        """
        with self._lock:
            if self._pending is not None:
                return self._resolve(self._take_pending(), key)
            if key == SEQUENCE_PREFIX:
                self._arm(key)
                return None

        if key == FLIP_KEY:
            return KeyEvent(EventKind.FLIP) if mode is InputMode.QUESTION else None

        if key in RATING_KEYS:
            if mode is InputMode.ANSWER:
                return KeyEvent(EventKind.RATE, rating=RATING_KEYS[key])
            return None

        return None

    def start(self, prefix: str) -> None:
        with self._lock:
            self._arm(prefix)

    def consume(self, key: str) -> KeyEvent | None:
        with self._lock:
            prefix = self._take_pending()
        if prefix is None:
            return None
        return self._resolve(prefix, key)

    def expire(self, generation: int | None = None) -> None:
        """Drop the pending prefix. A timer from an earlier sequence is ignored."""
        with self._lock:
            if generation is not None and generation != self._generation:
                return
            if self._pending is not None:
                logger.debug(f"Key sequence {self._pending!r} timed out")
            self._pending = None
            self._timer = None

    # Callers hold self._lock.

    def _arm(self, prefix: str) -> None:
        self._cancel_timer()
        self._generation += 1
        generation = self._generation
        self._pending = prefix
        self._timer = self._timer_factory(self.timeout, lambda: self.expire(generation))
        self._timer.start()

    def _take_pending(self) -> str | None:
        prefix = self._pending
        self._pending = None
        self._cancel_timer()
        return prefix

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    @staticmethod
    def _resolve(prefix: str, key: str) -> KeyEvent | None:
        event = SEQUENCES.get((prefix, key))
        if event is None:
            logger.debug(f"Dropped unknown key sequence {prefix!r} {key!r}")
        return event


def dispatch_event(scheduler: ReviewQueueScheduler, event: KeyEvent) -> RatingResult | None:
    """
    Apply an event to the scheduler.

    Flipping only changes what the UI shows, so it never reaches the queue.
    Returns the rating result for RATE events, None otherwise.
    """
    if event.kind is EventKind.RATE and event.rating is not None:
        return scheduler.submit_rating(event.rating)
    if event.kind is EventKind.RESET:
        scheduler.reset()
    return None
