import time
from datetime import datetime, timezone

import pytest

from scorekid.config import BASEBALL, BASKETBALL, OTHER, SOCCER, VOLLEYBALL
from scorekid.exceptions import InvalidScoreError, NoEventsLoadedError
from scorekid.match_session import MatchSession
from scorekid.models import BasketballScore, GameStatus, GenericScore, TeamPair, VolleyballScore
from scorekid.storage import InMemoryMatchStore


def finish_volleyball(session):
    for _ in range(75):
        session.update_score("my_team")


# ---------- GATING ----------

def test_points_ignored_after_match_finished():
    session = MatchSession(VOLLEYBALL)
    finish_volleyball(session)

    assert session.is_match_finished is True
    final_score = session.score
    final_status = session.status

    status = session.update_score("rival_team")

    assert status == final_status
    assert session.score == final_score
    assert len(session.export_events()) == 75


def test_unsupported_action_is_ignored():
    session = MatchSession(VOLLEYBALL)

    status = session.special_action("foul", "my_team")

    assert status == GameStatus()
    assert session.export_events() == []


def test_special_actions_route_values():
    session = MatchSession(SOCCER)
    session.special_action("card", "rival_team", "yellow")
    assert session.score.cards.rival_team.yellow == 1

    session = MatchSession(BASEBALL)
    session.special_action("base", value="third")
    session.special_action("out")
    assert session.score.bases.third is True
    assert session.score.outs == 1


# ---------- UNDO / REPLAY ----------

def test_undo_replays_all_but_last():
    session = MatchSession(OTHER)
    session.update_score("my_team", points=2)
    session.update_score("rival_team", points=3)

    session.undo()

    assert session.score == GenericScore(2, 0)
    assert len(session.get_timeline()) == 1


def test_undo_reopens_finished_match():
    session = MatchSession(VOLLEYBALL)
    finish_volleyball(session)

    session.undo()

    assert session.is_match_finished is False
    assert session.score.current_set == TeamPair(24, 0)
    session.update_score("my_team")
    assert session.is_match_finished is True


def test_undo_on_empty_session():
    session = MatchSession(VOLLEYBALL)

    assert session.undo() == GameStatus()
    assert session.score == VolleyballScore()


def test_load_events_replays_and_exports():
    events = [
        {"action": "point", "team": "my_team", "points": 2},
        {"action": "foul", "team": "rival_team"},
        {"action": "next_quarter"},
    ]
    session = MatchSession(BASKETBALL)

    timeline = session.load_events(events)

    assert len(timeline) == 3
    assert session.score.quarters == (TeamPair(2, 0),)
    assert session.get_snapshot()["command_index"] == 3
    assert [e["action"] for e in session.export_events()] == ["point", "foul", "next_quarter"]


def test_load_events_is_atomic():
    session = MatchSession(VOLLEYBALL)
    session.update_score("my_team")
    before = session.score

    with pytest.raises(ValueError):
        session.load_events([
            {"action": "point", "team": "my_team"},
            {"action": "point", "team": "nobody"},
        ])

    with pytest.raises(ValueError):
        session.load_events([{"action": "card", "team": "my_team", "card": "red"}])

    with pytest.raises(ValueError):
        session.load_events({"action": "point"})

    assert session.score == before
    assert len(session.export_events()) == 1


def test_snapshot_requires_events():
    with pytest.raises(NoEventsLoadedError):
        MatchSession(VOLLEYBALL).get_snapshot()


def test_timeline_is_a_copy():
    session = MatchSession(OTHER)
    session.update_score("my_team")

    session.get_timeline().clear()

    assert len(session.get_timeline()) == 1


# ---------- TIMER ----------

def test_untimed_sport_timer_calls_are_noops():
    session = MatchSession(VOLLEYBALL)

    assert session.timer is None
    assert session.tick() is None
    assert session.toggle_timer() is None
    assert session.next_period() is None


def test_soccer_half_time_recorded_on_period_change():
    session = MatchSession(SOCCER)
    session.update_score("my_team")
    session.update_score("my_team")
    session.update_score("rival_team")

    timer = session.next_period()

    assert timer.period == 2
    assert session.score.half_time == TeamPair(2, 1)

    session.update_score("rival_team")
    session.next_period()
    assert session.score.half_time == TeamPair(2, 1)


def test_soccer_stoppage_through_session():
    session = MatchSession(SOCCER)

    assert session.add_stoppage(300).stoppage == 300
    with pytest.raises(ValueError):
        session.add_stoppage(45)


def test_basketball_ignores_stoppage():
    session = MatchSession(BASKETBALL)

    timer = session.add_stoppage(60)

    assert timer.stoppage == 0


def test_half_time_survives_undo():
    session = MatchSession(SOCCER)
    session.update_score("my_team")
    session.update_score("my_team")
    session.next_period()
    session.update_score("rival_team")

    session.undo()

    assert session.score.half_time == TeamPair(2, 0)
    assert (session.score.my_team, session.score.rival_team) == (2, 0)
    assert session.get_snapshot()["score"].half_time == TeamPair(2, 0)


def test_half_time_is_exported_and_reloaded():
    session = MatchSession(SOCCER)
    session.update_score("my_team")
    session.next_period()

    events = session.export_events()
    assert [e["action"] for e in events] == ["point", "half_time"]

    restored = MatchSession(SOCCER)
    restored.load_events(events)

    assert restored.score.half_time == TeamPair(1, 0)
    assert restored.timer.period == 2


def test_background_clock_ticks_running_timer():
    session = MatchSession(BASKETBALL)
    session.toggle_timer()

    session.start_clock(interval=0.01)
    deadline = time.monotonic() + 2.0
    while session.timer.current_time < 3 and time.monotonic() < deadline:
        time.sleep(0.01)
    session.stop_clock()

    ticks = session.timer.current_time
    assert ticks >= 3

    time.sleep(0.05)
    assert session.timer.current_time == ticks


# ---------- EDIT + SAVE ----------

def test_invalid_edit_blocks_save():
    session = MatchSession(VOLLEYBALL, profile_id="kid-1")
    store = InMemoryMatchStore()

    result = session.edit_score(VolleyballScore(sets=(TeamPair(25, 24),)))

    assert result.is_valid is False
    with pytest.raises(InvalidScoreError) as exc:
        session.save(store)
    assert exc.value.errors == result.errors
    assert store.load_for_profile("kid-1") == []

    session.cancel_edit()
    session.save(store)
    assert len(store.load_for_profile("kid-1")) == 1


def test_edit_recalculates_basketball_totals():
    session = MatchSession(BASKETBALL, profile_id="kid-1")
    edited = BasketballScore(quarters=(TeamPair(10, 4),), total_score=TeamPair(0, 0))

    result = session.edit_score(edited)

    assert result.is_valid
    assert session.edited_score.total_score == TeamPair(10, 4)


def test_save_uses_edited_score_and_resets():
    session = MatchSession(OTHER, profile_id="kid-1")
    session.update_score("my_team")
    session.edit_score(GenericScore(1, 4))
    store = InMemoryMatchStore()
    now = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)

    match = session.save(store, notes="Corregido", now=now)

    assert match.score == GenericScore(1, 4)
    assert match.result == "defeat"
    assert match.is_finished is False
    assert match.notes == "Corregido"
    assert session.score == GenericScore(0, 0)
    assert session.edited_score is None
    assert session.export_events() == []


def test_saved_match_keeps_timer():
    session = MatchSession(SOCCER, profile_id="kid-1")
    session.toggle_timer()
    session.tick()

    match = session.save(InMemoryMatchStore())

    assert match.timer.current_time == 1
    assert match.result == "tie"
