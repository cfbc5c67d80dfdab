"""
Card materializer: turns a deck's questions into a fresh review queue.
"""

import random
from collections.abc import Callable, Sequence
from typing import TypeVar

from senko.application.id_service import generate_card_id
from senko.application.utils.clock import now_ms
from senko.domain.questions import QuestionItem
from senko.domain.review.models import ReviewCard


T = TypeVar("T")


def shuffle(items: Sequence[T], rng: random.Random | None = None) -> list[T]:
    """Return a Fisher-Yates shuffled copy of ``items``."""
    rng = rng or random.SystemRandom()
    shuffled = list(items)
    for i in range(len(shuffled) - 1, 0, -1):
        j = rng.randint(0, i)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


def materialize(
    questions: Sequence[QuestionItem],
    rng: random.Random | None = None,
    clock: Callable[[], int] = now_ms,
) -> list[ReviewCard]:
    """
    Build an unseen ReviewCard for every question, in random order.

    Args:
        questions: The deck's questions, in authoring order.
        rng: Random source; unseeded system randomness when omitted.
        clock: Epoch-ms clock used for ``created_at``.

    Returns:
        The shuffled queue. Empty input yields an empty queue.
    """
    created_at = clock()
    cards = [
        ReviewCard(id=generate_card_id(), question=q, created_at=created_at) for q in questions
    ]
    return shuffle(cards, rng)
