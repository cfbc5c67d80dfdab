import random

import pytest

from senko.domain.questions import Flashcard
from senko.infrastructure.adapters.memory_store import InMemoryStore


class FakeClock:
    """Epoch-ms clock that only moves when told to."""

    def __init__(self, start: int = 1_700_000_000_000):
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def questions():
    return [Flashcard(question=f"Q{i}", answer=f"A{i}") for i in range(1, 4)]


@pytest.fixture
def mock_home(tmp_path, monkeypatch):
    """Mocks Path.home() to point to a temp dir."""
    home = tmp_path / "home"
    home.mkdir()

    # Isolate config files and default data directories from the real home
    monkeypatch.setenv("HOME", str(home))
    for var in ("SENKO_DATA_DIR", "SENKO_HEATMAP_DAYS", "SENKO_PORT"):
        monkeypatch.delenv(var, raising=False)
    return home
