import json

import pytest

from senko.domain.review.models import CardReview, DailyStat, StudySession
from senko.infrastructure.adapters.json_store import JsonFileStore


@pytest.fixture
def json_store(tmp_path):
    return JsonFileStore(tmp_path / "data")


def _session(idx: int) -> StudySession:
    return StudySession(
        id=f"session_{idx}",
        deck_id="deck",
        start_time=1_000 * idx,
        end_time=1_000 * idx + 500,
        cards_reviewed=2,
        cards_mastered=1,
        ratings={1: 1, 2: 0, 3: 0, 4: 1},
        card_reviews=(CardReview("card_a", "Q", 1, 10, 4), CardReview("card_a", "Q", 4, 20, 1)),
    )


def test_missing_files_load_empty(json_store):
    assert json_store.list_sessions() == []
    assert json_store.list_daily_stats() == []


def test_sessions_are_appended_in_order(json_store):
    json_store.add_session(_session(1))
    json_store.add_session(_session(2))

    assert [s.id for s in json_store.list_sessions()] == ["session_1", "session_2"]
    assert json_store.list_sessions()[0] == _session(1)

    raw = json.loads(json_store.sessions_path.read_text())
    assert raw[0]["ratings"] == {"1": 1, "2": 0, "3": 0, "4": 1}


def test_daily_stats_merge_by_date(json_store):
    json_store.add_daily_stat(DailyStat("2024-03-10", 5, 2, 10))
    json_store.add_daily_stat(DailyStat("2024-03-11", 1, 0, 1))
    json_store.add_daily_stat(DailyStat("2024-03-10", 3, 1, 4))

    assert json_store.list_daily_stats() == [
        DailyStat("2024-03-10", 8, 3, 14),
        DailyStat("2024-03-11", 1, 0, 1),
    ]


def test_corrupt_file_loads_empty(json_store, caplog):
    json_store.data_dir.mkdir(parents=True)
    json_store.sessions_path.write_text("{not json")

    assert json_store.list_sessions() == []
    assert "Failed to load" in caplog.text


def test_non_list_file_loads_empty(json_store):
    json_store.data_dir.mkdir(parents=True)
    json_store.daily_stats_path.write_text('{"date": "2024-03-10"}')

    assert json_store.list_daily_stats() == []


def test_malformed_records_are_skipped(json_store, caplog):
    json_store.data_dir.mkdir(parents=True)
    json_store.sessions_path.write_text(
        json.dumps([{"deck_id": "no-id"}, _session(3).to_dict(), "junk"])
    )

    sessions = json_store.list_sessions()

    assert [s.id for s in sessions] == ["session_3"]
    assert "Skipping malformed session" in caplog.text


def test_corrupt_file_is_replaced_on_next_write(json_store):
    json_store.data_dir.mkdir(parents=True)
    json_store.sessions_path.write_text("garbage")

    json_store.add_session(_session(1))

    assert [s.id for s in json_store.list_sessions()] == ["session_1"]


def test_write_failure_is_swallowed(tmp_path, caplog):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    store = JsonFileStore(blocker / "data")

    store.add_session(_session(1))

    assert "Failed to save" in caplog.text
    assert store.list_sessions() == []
