from unittest.mock import MagicMock

import pytest

from senko.application.key_sequence import (
    EventKind,
    InputMode,
    KeyEvent,
    KeySequenceDispatcher,
    daemon_timer,
    dispatch_event,
)
from senko.application.review_queue import ReviewQueueScheduler
from senko.domain.review.models import CardStatus


class FakeTimer:
    def __init__(self, interval, function):
        self.interval = interval
        self.function = function
        self.started = False
        self.cancelled = False

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    def fire(self):
        self.function()


@pytest.fixture
def timers():
    return []


@pytest.fixture
def dispatcher(timers):
    def factory(interval, function):
        timer = FakeTimer(interval, function)
        timers.append(timer)
        return timer

    return KeySequenceDispatcher(timeout=0.5, timer_factory=factory)


# ---------- Single keys ----------


def test_space_flips_only_on_question(dispatcher):
    assert dispatcher.feed("space", InputMode.QUESTION) == KeyEvent(EventKind.FLIP)
    assert dispatcher.feed("space", InputMode.ANSWER) is None


@pytest.mark.parametrize("key, rating", [("1", 1), ("2", 2), ("3", 3), ("4", 4)])
def test_digits_rate_only_on_answer(dispatcher, key, rating):
    assert dispatcher.feed(key, InputMode.ANSWER) == KeyEvent(EventKind.RATE, rating=rating)
    assert dispatcher.feed(key, InputMode.QUESTION) is None


def test_unbound_keys_are_ignored(dispatcher):
    assert dispatcher.feed("x", InputMode.QUESTION) is None
    assert dispatcher.feed("5", InputMode.ANSWER) is None
    assert dispatcher.pending is None


# ---------- Sequences ----------


def test_reset_sequence(dispatcher, timers):
    assert dispatcher.feed("g", InputMode.QUESTION) is None
    assert dispatcher.pending == "g"
    assert timers[0].started
    assert timers[0].interval == 0.5

    event = dispatcher.feed("r", InputMode.QUESTION)

    assert event == KeyEvent(EventKind.RESET)
    assert timers[0].cancelled
    assert dispatcher.pending is None


def test_reset_sequence_works_in_answer_mode(dispatcher):
    dispatcher.feed("g", InputMode.ANSWER)
    assert dispatcher.feed("r", InputMode.ANSWER) == KeyEvent(EventKind.RESET)


def test_unknown_pair_consumes_second_key(dispatcher):
    dispatcher.feed("g", InputMode.ANSWER)

    assert dispatcher.feed("3", InputMode.ANSWER) is None
    assert dispatcher.pending is None
    # The next press is handled normally again.
    assert dispatcher.feed("3", InputMode.ANSWER) == KeyEvent(EventKind.RATE, rating=3)


def test_timeout_clears_pending_prefix(dispatcher, timers):
    dispatcher.feed("g", InputMode.QUESTION)

    timers[0].fire()

    assert dispatcher.pending is None
    assert dispatcher.feed("r", InputMode.QUESTION) is None


def test_repeated_prefix_rearms_timer(dispatcher, timers):
    dispatcher.feed("g", InputMode.QUESTION)
    assert dispatcher.feed("g", InputMode.QUESTION) is None
    # "g g" is not a sequence; the second g is consumed.
    assert dispatcher.pending is None
    assert timers[0].cancelled
    assert len(timers) == 1


def test_daemon_timer_does_not_block_exit():
    timer = daemon_timer(10, lambda: None)
    assert timer.daemon is True
    assert timer.interval == 10


# ---------- Dispatch ----------


def test_dispatch_rate_and_flip():
    scheduler = MagicMock()
    scheduler.submit_rating.return_value = "result"

    assert dispatch_event(scheduler, KeyEvent(EventKind.RATE, rating=2)) == "result"
    scheduler.submit_rating.assert_called_once_with(2)

    assert dispatch_event(scheduler, KeyEvent(EventKind.FLIP)) is None
    scheduler.reset.assert_not_called()


def test_dispatch_reset_rebuilds_session(questions, clock, rng):
    scheduler = ReviewQueueScheduler("d", questions, rng=rng, clock=clock)
    scheduler.submit_rating(4)

    assert dispatch_event(scheduler, KeyEvent(EventKind.RESET)) is None

    assert scheduler.cards_reviewed == 0
    assert all(c.status is CardStatus.UNSEEN for c in scheduler.queue)


def test_stale_timer_does_not_cancel_new_sequence(dispatcher, timers):
    dispatcher.feed("g", InputMode.QUESTION)
    dispatcher.feed("x", InputMode.QUESTION)
    dispatcher.feed("g", InputMode.QUESTION)

    timers[0].fire()  # first timer fires late, after cancellation

    assert dispatcher.pending == "g"
    assert dispatcher.feed("r", InputMode.QUESTION) == KeyEvent(EventKind.RESET)


def test_feed_checks_and_consumes_under_one_lock(dispatcher):
    dispatcher.feed("g", InputMode.QUESTION)
    lock = MagicMock()
    dispatcher._lock = lock

    event = dispatcher.feed("r", InputMode.QUESTION)

    assert event == KeyEvent(EventKind.RESET)
    lock.__enter__.assert_called_once()
    lock.__exit__.assert_called_once()
