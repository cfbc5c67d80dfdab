import pytest

from senko.domain.questions import (
    FillInBlank,
    Flashcard,
    MatchPair,
    Matching,
    MultiSelect,
    Ordering,
    TrueFalse,
    question_from_dict,
    question_to_dict,
)


def test_unknown_type_falls_back_to_flashcard():
    item = question_from_dict({"type": "essay", "question": "Q", "answer": "A"})
    assert item == Flashcard(question="Q", answer="A")


def test_missing_type_is_flashcard():
    assert isinstance(question_from_dict({"question": "Q", "answer": "A"}), Flashcard)


def test_missing_answer_raises():
    with pytest.raises(KeyError):
        question_from_dict({"question": "Q"})


def test_true_false():
    item = question_from_dict({"type": "true-false", "question": "Sky is blue", "answer": "true"})
    assert isinstance(item, TrueFalse)


def test_snake_and_camel_case_keys():
    camel = question_from_dict(
        {
            "type": "multi-select",
            "question": "Primes?",
            "answer": "2, 3",
            "options": ["2", "3", "4"],
            "correctAnswers": ["2", "3"],
        }
    )
    snake = question_from_dict(
        {
            "type": "multi-select",
            "question": "Primes?",
            "answer": "2, 3",
            "options": ["2", "3", "4"],
            "correct_answers": ["2", "3"],
        }
    )
    assert camel == snake
    assert isinstance(camel, MultiSelect)
    assert camel.correct_answers == ("2", "3")


def test_ordering_and_blanks():
    ordering = question_from_dict(
        {"type": "ordering", "question": "Sort", "answer": "a b", "orderItems": ["a", "b"]}
    )
    blanks = question_from_dict(
        {"type": "fill-in-blank", "question": "_ is _", "answer": "x", "blanks": "one"}
    )
    assert isinstance(ordering, Ordering)
    assert ordering.order_items == ("a", "b")
    assert isinstance(blanks, FillInBlank)
    assert blanks.blanks == ("one",)


def test_to_dict_writes_export_keys():
    item = Matching(
        question="Match",
        answer="pairs",
        match_pairs=(MatchPair(left="a", right="b"),),
        image_url="img.png",
    )
    data = question_to_dict(item)
    assert data == {
        "type": "matching",
        "question": "Match",
        "answer": "pairs",
        "imageUrl": "img.png",
        "matchPairs": [{"left": "a", "right": "b"}],
    }
    assert question_from_dict(data) == item
