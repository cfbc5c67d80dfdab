"""Loading decks from files on disk.

Three formats are accepted:
    markdown -- YAML frontmatter with ``deck`` (name) and a ``cards`` list.
    json     -- a deck export ``{"name": ..., "questions": [...]}`` or a bare list.
    text     -- ``question`` / ``===`` / ``answer`` blocks.
"""

import json
import logging
from pathlib import Path
from typing import Any, Literal

from senko.application.utils.text import (
    parse_frontmatter,
    parse_question_blocks,
    scrub_internal_keys,
)
from senko.domain.errors import DeckFormatError
from senko.domain.questions import Deck, Flashcard, QuestionItem, question_from_dict

logger = logging.getLogger(__name__)

DeckFormat = Literal["markdown", "json", "text"]

MARKDOWN_SUFFIXES = {".md", ".markdown"}


def detect_deck_format(path: Path, text: str) -> DeckFormat:
    suffix = path.suffix.lower()
    if suffix == ".json":
        return "json"
    if suffix in MARKDOWN_SUFFIXES:
        return "markdown"

    stripped = text.lstrip("\ufeff").lstrip()
    if stripped.startswith("---"):
        return "markdown"
    if stripped.startswith("{") or stripped.startswith("["):
        return "json"
    return "text"


def load_deck(path: Path) -> Deck:
    """
    Read a deck file.

    Raises:
        DeckFormatError: if the file cannot be read or holds no valid questions.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise DeckFormatError(f"Could not read {path}: {e}") from e

    fmt = detect_deck_format(path, text)
    logger.debug(f"Loading {path.name} as {fmt}")

    if fmt == "markdown":
        deck = _deck_from_markdown(path, text)
    elif fmt == "json":
        deck = _deck_from_json(path, text)
    else:
        deck = Deck(
            id=path.stem,
            name=path.stem,
            questions=[Flashcard(question=q, answer=a) for q, a in parse_question_blocks(text)],
        )

    if not deck.questions:
        logger.warning(f"Deck {path} has no questions")
    return deck


def _deck_from_markdown(path: Path, text: str) -> Deck:
    meta, _body = parse_frontmatter(text)
    if "__yaml_error__" in meta:
        raise DeckFormatError(f"Invalid frontmatter in {path.name}: {meta['__yaml_error__']}")

    cards = meta.get("cards", [])
    if not isinstance(cards, list):
        raise DeckFormatError("'cards' must be a list", line=meta.get("__line__"))

    questions = [_question(card) for card in cards]
    name = str(meta.get("deck") or path.stem)
    return Deck(
        id=str(meta.get("id") or path.stem),
        name=name,
        questions=questions,
        description=meta.get("description"),
    )


def _deck_from_json(path: Path, text: str) -> Deck:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise DeckFormatError(f"Invalid JSON: {e.msg}", line=e.lineno) from e

    if isinstance(data, list):
        raw_questions, name, description, deck_id = data, path.stem, None, path.stem
    elif isinstance(data, dict):
        raw_questions = data.get("questions", [])
        name = str(data.get("name") or path.stem)
        description = data.get("description")
        deck_id = str(data.get("id") or path.stem)
    else:
        raise DeckFormatError("Expected a deck object or a list of questions")

    if not isinstance(raw_questions, list):
        raise DeckFormatError("'questions' must be a list")

    return Deck(
        id=deck_id,
        name=name,
        questions=[_question(q) for q in raw_questions],
        description=description,
    )


def _question(raw: Any) -> QuestionItem:
    if not isinstance(raw, dict):
        raise DeckFormatError(f"Expected a question mapping, got {type(raw).__name__}")

    line = raw.get("__line__")

    data = scrub_internal_keys(raw)
    missing = [key for key in ("question", "answer") if not data.get(key)]
    if missing:
        raise DeckFormatError(f"Question is missing {', '.join(missing)}", line=line)

    try:
        return question_from_dict(data)
    except (KeyError, TypeError) as e:
        raise DeckFormatError(f"Malformed question: {e}", line=line) from e
