import re
from typing import Any

import yaml  # type: ignore
import yaml.constructor

# ---------- Frontmatter helpers ----------


class UniqueKeyLoader(yaml.SafeLoader):
    """Custom YAML loader that forbids duplicate keys."""

    def construct_mapping(self, node, deep=False):
        mapping = set()
        for key_node, _ in node.value:
            key = self.construct_object(key_node, deep=deep)
            if key in mapping:
                raise yaml.constructor.ConstructorError(
                    None, None, f"found duplicate key '{key}'", key_node.start_mark
                )
            mapping.add(key)

        result = super().construct_mapping(node, deep)
        if isinstance(result, dict):
            # Inject line number (1-based)
            result["__line__"] = node.start_mark.line + 1
        return result


def split_frontmatter(md_text: str) -> tuple[str | None, str]:
    """Split markdown into (raw YAML frontmatter, body).
    Uses line-by-line parsing instead of regex for reliability.
    Returns (None, text) when there is no closed frontmatter block.
    """
    # Handle potential BOM (Byte Order Mark)
    md_text = md_text.lstrip("\ufeff")

    lines = md_text.split("\n")

    # Check for opening ---
    if not lines or lines[0].strip() != "---":
        return None, md_text

    # Find closing ---
    for i, line in enumerate(lines[1:], start=1):
        if line.strip() == "---":
            return "\n".join(lines[1:i]), "\n".join(lines[i + 1 :])

    return None, md_text


def parse_frontmatter(md_text: str) -> tuple[dict[str, Any], str]:
    """Parse YAML frontmatter from markdown text.

    Returns ``({"__yaml_error__": message}, text)`` if the YAML is invalid, so
    callers can report the problem instead of crashing.
    """
    raw, body = split_frontmatter(md_text)
    if raw is None:
        return {}, md_text

    # Fix tabs (common user error)
    if "\t" in raw:
        raw = raw.replace("\t", "  ")

    try:
        meta = yaml.load(raw, Loader=UniqueKeyLoader) or {}
    except yaml.YAMLError as e:
        return {"__yaml_error__": str(e)}, md_text

    if not isinstance(meta, dict):
        return {"__yaml_error__": "frontmatter is not a mapping"}, md_text

    # Add offset to __line__ to make it absolute (account for opening ---)
    _add_line_offset(meta, 1)
    return meta, body


def _add_line_offset(d: Any, offset: int) -> None:
    if isinstance(d, dict):
        if "__line__" in d:
            d["__line__"] += offset
        for v in d.values():
            _add_line_offset(v, offset)
    elif isinstance(d, list):
        for v in d:
            _add_line_offset(v, offset)


def scrub_internal_keys(d: Any) -> Any:
    """Recursively remove keys starting with __"""
    if isinstance(d, dict):
        return {k: scrub_internal_keys(v) for k, v in d.items() if not k.startswith("__")}
    elif isinstance(d, list):
        return [scrub_internal_keys(v) for v in d]
    return d


# ---------- Plain-text question blocks ----------

# A question line, a line holding only "===", then the answer up to the next block.
QUESTION_BLOCK_RE = re.compile(r"([^\n]*)\n===\n([\s\S]*?)(?=\n[^\n]*\n===\n|$)")


def parse_question_blocks(text: str) -> list[tuple[str, str]]:
    """Parse ``question\\n===\\nanswer`` blocks; blocks missing either side are skipped."""
    if not text.strip():
        return []

    text = text.replace("\r\n", "\n")
    pairs = []
    for m in QUESTION_BLOCK_RE.finditer(text):
        question = m.group(1).strip()
        answer = m.group(2).strip()
        if question and answer:
            pairs.append((question, answer))
    return pairs
