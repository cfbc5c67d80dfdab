"""
Question definitions authored in a deck.

Each question type is its own frozen dataclass; ``QuestionItem`` is the union
of all of them. The review queue only reads the common fields
(``question``, ``answer``, ``image_url``), so type-specific fields are only
relevant to rendering and deck files.
"""

from dataclasses import dataclass, field
from typing import Any, ClassVar, Literal, Union

QuestionType = Literal[
    "flashcard",
    "multiple-choice",
    "true-false",
    "fill-in-blank",
    "matching",
    "ordering",
    "multi-select",
]


@dataclass(frozen=True)
class MatchPair:
    left: str
    right: str


@dataclass(frozen=True)
class Flashcard:
    type: ClassVar[QuestionType] = "flashcard"

    question: str
    answer: str
    image_url: str | None = None


@dataclass(frozen=True)
class MultipleChoice:
    type: ClassVar[QuestionType] = "multiple-choice"

    question: str
    answer: str
    options: tuple[str, ...] = ()
    image_url: str | None = None


@dataclass(frozen=True)
class TrueFalse:
    type: ClassVar[QuestionType] = "true-false"

    question: str
    answer: str
    image_url: str | None = None


@dataclass(frozen=True)
class FillInBlank:
    type: ClassVar[QuestionType] = "fill-in-blank"

    question: str
    answer: str
    blanks: tuple[str, ...] = ()  # Correct answer for each blank, in order
    image_url: str | None = None


@dataclass(frozen=True)
class Matching:
    type: ClassVar[QuestionType] = "matching"

    question: str
    answer: str
    match_pairs: tuple[MatchPair, ...] = ()
    image_url: str | None = None


@dataclass(frozen=True)
class Ordering:
    type: ClassVar[QuestionType] = "ordering"

    question: str
    answer: str
    order_items: tuple[str, ...] = ()  # Items in their correct order
    image_url: str | None = None


@dataclass(frozen=True)
class MultiSelect:
    type: ClassVar[QuestionType] = "multi-select"

    question: str
    answer: str
    options: tuple[str, ...] = ()
    correct_answers: tuple[str, ...] = ()
    image_url: str | None = None


QuestionItem = Union[
    Flashcard, MultipleChoice, TrueFalse, FillInBlank, Matching, Ordering, MultiSelect
]

QUESTION_TYPES: dict[str, type] = {
    cls.type: cls
    for cls in (Flashcard, MultipleChoice, TrueFalse, FillInBlank, Matching, Ordering, MultiSelect)
}


@dataclass
class Deck:
    """A named collection of questions."""

    id: str
    name: str
    questions: list[QuestionItem] = field(default_factory=list)
    description: str | None = None


def _strings(value: Any) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, (list, tuple)):
        return tuple(str(v) for v in value)
    return (str(value),)


def question_from_dict(data: dict[str, Any]) -> QuestionItem:
    """
    Build the matching question variant from a mapping.

    Accepts both the snake_case keys used here and the camelCase keys of
    exported decks (``imageUrl``, ``matchPairs``, ...). A missing or unknown
    ``type`` falls back to a plain flashcard.

    Raises:
        KeyError: if ``question`` or ``answer`` is missing.
    """
    qtype = data.get("type") or "flashcard"
    cls = QUESTION_TYPES.get(qtype, Flashcard)

    common = {
        "question": str(data["question"]),
        "answer": str(data["answer"]),
        "image_url": data.get("image_url", data.get("imageUrl")),
    }

    if cls is MultipleChoice:
        return MultipleChoice(options=_strings(data.get("options")), **common)
    if cls is FillInBlank:
        return FillInBlank(blanks=_strings(data.get("blanks")), **common)
    if cls is Matching:
        raw_pairs = data.get("match_pairs", data.get("matchPairs")) or []
        pairs = tuple(MatchPair(left=str(p["left"]), right=str(p["right"])) for p in raw_pairs)
        return Matching(match_pairs=pairs, **common)
    if cls is Ordering:
        items = data.get("order_items", data.get("orderItems"))
        return Ordering(order_items=_strings(items), **common)
    if cls is MultiSelect:
        correct = data.get("correct_answers", data.get("correctAnswers"))
        return MultiSelect(
            options=_strings(data.get("options")),
            correct_answers=_strings(correct),
            **common,
        )
    return cls(**common)


def question_to_dict(item: QuestionItem) -> dict[str, Any]:
    """Serialize a question back to a plain mapping (camelCase, like deck exports)."""
    out: dict[str, Any] = {"type": item.type, "question": item.question, "answer": item.answer}
    if item.image_url:
        out["imageUrl"] = item.image_url
    if isinstance(item, (MultipleChoice, MultiSelect)):
        out["options"] = list(item.options)
    if isinstance(item, FillInBlank):
        out["blanks"] = list(item.blanks)
    if isinstance(item, Matching):
        out["matchPairs"] = [{"left": p.left, "right": p.right} for p in item.match_pairs]
    if isinstance(item, Ordering):
        out["orderItems"] = list(item.order_items)
    if isinstance(item, MultiSelect):
        out["correctAnswers"] = list(item.correct_answers)
    return out
