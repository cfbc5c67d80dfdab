"""Service for generating ids for cards and sessions."""

from ulid import ULID


def generate_id(prefix: str) -> str:
    """Generate a sortable unique id, e.g. ``session_01HV...``."""
    return f"{prefix}_{ULID()}"


def generate_card_id() -> str:
    return generate_id("card")


def generate_session_id() -> str:
    return generate_id("session")
