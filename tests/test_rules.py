import pytest

from scorekid.config import BASEBALL, BASKETBALL, OTHER, SOCCER, SWIMMING, TENNIS, VOLLEYBALL
from scorekid.rules import (
    SPORT_RULES,
    get_categories_for_sport,
    get_category_by_id,
    get_default_category,
    get_rules,
    scoring_unit,
    volleyball_points_to_win,
)


def test_unknown_sport_falls_back_to_other():
    assert get_rules("Curling") is SPORT_RULES[OTHER]


@pytest.mark.parametrize("sport, has_timer", [
    (SOCCER, True),
    (BASKETBALL, True),
    (VOLLEYBALL, False),
    (TENNIS, False),
    (BASEBALL, False),
    (OTHER, False),
])
def test_timed_sports(sport, has_timer):
    assert get_rules(sport).has_timer is has_timer


def test_win_conditions():
    assert get_rules(VOLLEYBALL).win_condition.sets_to_win == 3
    assert get_rules(TENNIS).win_condition.sets_to_win == 2
    assert get_rules(BASKETBALL).win_condition.quarters_to_play == 4
    assert get_rules(BASEBALL).win_condition.innings_to_play == 9
    assert get_rules(SOCCER).time_limit.has_stoppage is True


@pytest.mark.parametrize("set_number, points", [(1, 25), (4, 25), (5, 15)])
def test_volleyball_points_to_win(set_number, points):
    assert volleyball_points_to_win(set_number) == points


@pytest.mark.parametrize("sport, unit", [
    (SOCCER, "goles"),
    (BASEBALL, "carreras"),
    (BASKETBALL, "puntos"),
    ("Curling", "puntos"),
])
def test_scoring_unit(sport, unit):
    assert scoring_unit(sport) == unit


# ---------- CATEGORIES ----------

def test_every_sport_has_recreational_default():
    for sport in SPORT_RULES:
        assert get_default_category(sport).id == "recreativo"


def test_category_descriptions():
    assert get_category_by_id(VOLLEYBALL, "mini").description == "Niños 6-10 años"
    assert get_category_by_id(SWIMMING, "master").description == "Adultos 25+ años"
    assert get_category_by_id(TENNIS, "amarilla").description == "Niños 12+ años"
    assert get_default_category(SOCCER).description == "Cualquier edad"


def test_unknown_category_and_sport():
    assert get_category_by_id(BASEBALL, "pro") is None
    assert get_categories_for_sport("Curling") == get_categories_for_sport(OTHER)
