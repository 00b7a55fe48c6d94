import json
from datetime import datetime, timedelta, timezone

import pytest

from scorekid import storage
from scorekid.config import BASKETBALL, SOCCER, VOLLEYBALL
from scorekid.models import BasketballScore, SoccerScore, TeamPair, VolleyballScore
from scorekid.results import build_match
from scorekid.storage import InMemoryMatchStore, JsonMatchStore

T0 = datetime(2024, 3, 10, 9, 0, tzinfo=timezone.utc)


def make_match(profile_id="kid-1", sport=SOCCER, score=None, minutes=0):
    return build_match(
        profile_id,
        sport,
        score if score is not None else SoccerScore(2, 1),
        is_finished=True,
        now=T0 + timedelta(minutes=minutes),
    )


# ---------- IN MEMORY ----------

def test_in_memory_filters_by_profile_newest_first():
    store = InMemoryMatchStore()
    store.save(make_match(minutes=0))
    store.save(make_match(profile_id="other", minutes=5))
    store.save(make_match(minutes=10))

    loaded = store.load_for_profile("kid-1")

    assert [m.date for m in loaded] == [
        (T0 + timedelta(minutes=10)).isoformat(),
        T0.isoformat(),
    ]


# ---------- JSON FILE ----------

def test_json_round_trip(tmp_path):
    store = JsonMatchStore(tmp_path / "nested" / "matches.json")
    score = BasketballScore(
        quarters=(TeamPair(10, 8),),
        current_quarter=TeamPair(2, 3),
        total_score=TeamPair(12, 11),
        fouls=TeamPair(5, 1),
        timeouts=TeamPair(1, 2),
    )
    match = make_match(sport=BASKETBALL, score=score)

    store.save(match)
    loaded = store.load_for_profile("kid-1")

    assert loaded == [match]


def test_json_appends_and_sorts(tmp_path):
    store = JsonMatchStore(tmp_path / "matches.json")
    store.save(make_match(minutes=1))
    store.save(make_match(sport=VOLLEYBALL, score=VolleyballScore(sets=(TeamPair(25, 20),)), minutes=30))

    loaded = store.load_for_profile("kid-1")

    assert [m.sport for m in loaded] == [VOLLEYBALL, SOCCER]
    assert len(json.loads((tmp_path / "matches.json").read_text(encoding="utf-8"))) == 2


def test_missing_file_is_empty(tmp_path):
    assert JsonMatchStore(tmp_path / "nope.json").load_for_profile("kid-1") == []


def test_corrupt_file_reads_empty_and_is_replaced(tmp_path):
    path = tmp_path / "matches.json"
    path.write_text("{not json", encoding="utf-8")
    store = JsonMatchStore(path)

    assert store.load_for_profile("kid-1") == []

    store.save(make_match())
    assert len(store.load_for_profile("kid-1")) == 1


def test_non_list_file_reads_empty(tmp_path):
    path = tmp_path / "matches.json"
    path.write_text(json.dumps({"id": "1"}), encoding="utf-8")

    assert JsonMatchStore(path).load_for_profile("kid-1") == []


def test_bad_record_is_skipped(tmp_path):
    path = tmp_path / "matches.json"
    good = make_match().to_dict()
    broken = {"profile_id": "kid-1", "sport": SOCCER}
    path.write_text(json.dumps([broken, good]), encoding="utf-8")

    loaded = JsonMatchStore(path).load_for_profile("kid-1")

    assert [m.id for m in loaded] == [good["id"]]


def test_failed_write_keeps_previous_history(tmp_path, monkeypatch):
    path = tmp_path / "matches.json"
    store = JsonMatchStore(path)
    store.save(make_match(minutes=0))

    def broken_dump(*args, **kwargs):
        raise OSError("disk full")

    monkeypatch.setattr(storage.json, "dump", broken_dump)
    with pytest.raises(OSError):
        store.save(make_match(minutes=5))
    monkeypatch.undo()

    assert len(store.load_for_profile("kid-1")) == 1
    assert [p.name for p in tmp_path.iterdir()] == ["matches.json"]
