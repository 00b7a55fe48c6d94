"""
Static per-sport rule table.

Each sport name maps to an immutable SportRules record describing how
points are counted, when periods and matches are won, and which special
rules (tie-break, fouls, outs, cards...) apply. Unknown sport names always
resolve to the generic "Otro" rules.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Literal, Optional, Tuple

from scorekid.config import (
    ATHLETICS,
    BASEBALL,
    BASKETBALL,
    OTHER,
    SOCCER,
    SWIMMING,
    TENNIS,
    VOLLEYBALL,
)


ScoringSystem = Literal["sets", "quarters", "innings", "tennis", "halves", "points"]


@dataclass(frozen=True)
class WinCondition:
    points_to_win: Optional[int] = None
    sets_to_win: Optional[int] = None
    quarters_to_play: Optional[int] = None
    innings_to_play: Optional[int] = None
    halves_to_play: Optional[int] = None
    must_win_by_two: bool = False
    allow_ties: bool = False


@dataclass(frozen=True)
class TimeLimit:
    enabled: bool = True
    duration: int = 0  # minutes, whole match
    periods: int = 1
    has_stoppage: bool = False

    @property
    def period_seconds(self) -> int:
        return int(self.duration / self.periods * 60)


@dataclass(frozen=True)
class SpecialRules:
    has_tie_break: bool = False
    has_timeouts: bool = False
    has_fouls: bool = False
    has_outs: bool = False
    has_bases: bool = False
    has_cards: bool = False


@dataclass(frozen=True)
class SportRules:
    name: str
    scoring_system: ScoringSystem
    point_increments: Tuple[int, ...] = (1,)
    win_condition: WinCondition = field(default_factory=WinCondition)
    time_limit: Optional[TimeLimit] = None
    special_rules: SpecialRules = field(default_factory=SpecialRules)

    @property
    def has_timer(self) -> bool:
        return self.time_limit is not None and self.time_limit.enabled


# Volleyball: sets 1-4 to 25, set 5 to 15
VOLLEYBALL_POINTS_TO_WIN = 25
VOLLEYBALL_DECIDING_SET = 5
VOLLEYBALL_DECIDING_SET_POINTS = 15

TENNIS_GAMES_TO_WIN_SET = 6
TENNIS_TIE_BREAK_POINTS = 7
TENNIS_MAX_SET_GAMES = 7


SPORT_RULES: Dict[str, SportRules] = {
    VOLLEYBALL: SportRules(
        name=VOLLEYBALL,
        scoring_system="sets",
        win_condition=WinCondition(
            points_to_win=VOLLEYBALL_POINTS_TO_WIN,
            sets_to_win=3,
            must_win_by_two=True,
        ),
    ),
    TENNIS: SportRules(
        name=TENNIS,
        scoring_system="tennis",
        win_condition=WinCondition(sets_to_win=2, must_win_by_two=True),
        special_rules=SpecialRules(has_tie_break=True),
    ),
    SOCCER: SportRules(
        name=SOCCER,
        scoring_system="halves",
        win_condition=WinCondition(halves_to_play=2, allow_ties=True),
        time_limit=TimeLimit(duration=90, periods=2, has_stoppage=True),
        special_rules=SpecialRules(has_cards=True),
    ),
    BASKETBALL: SportRules(
        name=BASKETBALL,
        scoring_system="quarters",
        point_increments=(1, 2, 3),
        win_condition=WinCondition(quarters_to_play=4, allow_ties=False),
        time_limit=TimeLimit(duration=48, periods=4),
        special_rules=SpecialRules(has_timeouts=True, has_fouls=True),
    ),
    BASEBALL: SportRules(
        name=BASEBALL,
        scoring_system="innings",
        win_condition=WinCondition(innings_to_play=9, allow_ties=False),
        special_rules=SpecialRules(has_outs=True, has_bases=True),
    ),
    SWIMMING: SportRules(
        name=SWIMMING,
        scoring_system="points",
        win_condition=WinCondition(allow_ties=False),
    ),
    ATHLETICS: SportRules(
        name=ATHLETICS,
        scoring_system="points",
        win_condition=WinCondition(allow_ties=True),
    ),
    OTHER: SportRules(
        name=OTHER,
        scoring_system="points",
        point_increments=(1, 2, 3),
        win_condition=WinCondition(allow_ties=True),
    ),
}


def get_rules(sport: str) -> SportRules:
    return SPORT_RULES.get(sport, SPORT_RULES[OTHER])


def volleyball_points_to_win(set_number: int) -> int:
    if set_number == VOLLEYBALL_DECIDING_SET:
        return VOLLEYBALL_DECIDING_SET_POINTS
    return get_rules(VOLLEYBALL).win_condition.points_to_win


_SCORING_UNITS = {
    SOCCER: "goles",
    BASEBALL: "carreras",
}


def scoring_unit(sport: str) -> str:
    return _SCORING_UNITS.get(sport, "puntos")


# =============================================================================
# Age categories
# =============================================================================

@dataclass(frozen=True)
class SportCategory:
    id: str
    name: str
    description: str
    age_range: Optional[str] = None


def _cat(id: str, name: str, age_range: str) -> SportCategory:
    if age_range == "Todas":
        description = "Cualquier edad"
    elif age_range.endswith("+") and int(age_range[:-1]) >= 18:
        description = f"Adultos {age_range} años"
    else:
        description = f"Niños {age_range} años"
    return SportCategory(id=id, name=name, description=description, age_range=age_range)


_RECREATIONAL = _cat("recreativo", "Recreativo", "Todas")

SPORT_CATEGORIES: Dict[str, List[SportCategory]] = {
    VOLLEYBALL: [
        _cat("mini", "Mini Voleibol", "6-10"),
        _cat("infantil", "Infantil", "11-12"),
        _cat("cadete", "Cadete", "13-14"),
        _cat("juvenil", "Juvenil", "15-16"),
        _cat("junior", "Junior", "17-18"),
        _cat("senior", "Senior", "19+"),
        _RECREATIONAL,
    ],
    BASKETBALL: [
        _cat("mini", "Mini Basket", "6-9"),
        _cat("prebenjamin", "Prebenjamín", "8-9"),
        _cat("benjamin", "Benjamín", "10-11"),
        _cat("alevin", "Alevín", "12-13"),
        _cat("infantil", "Infantil", "14-15"),
        _cat("cadete", "Cadete", "16-17"),
        _cat("junior", "Junior", "18-19"),
        _cat("senior", "Senior", "20+"),
        _RECREATIONAL,
    ],
    SOCCER: [
        _cat("futbol7", "Fútbol 7", "6-8"),
        _cat("prebenjamin", "Prebenjamín", "8-9"),
        _cat("benjamin", "Benjamín", "10-11"),
        _cat("alevin", "Alevín", "12-13"),
        _cat("infantil", "Infantil", "14-15"),
        _cat("cadete", "Cadete", "16-17"),
        _cat("juvenil", "Juvenil", "18-19"),
        _cat("senior", "Senior", "20+"),
        _RECREATIONAL,
    ],
    TENNIS: [
        _cat("roja", "Pelota Roja", "5-8"),
        _cat("naranja", "Pelota Naranja", "8-10"),
        _cat("verde", "Pelota Verde", "10-12"),
        _cat("amarilla", "Pelota Amarilla", "12+"),
        _cat("infantil", "Infantil", "12-14"),
        _cat("cadete", "Cadete", "14-16"),
        _cat("juvenil", "Juvenil", "16-18"),
        _cat("senior", "Senior", "18+"),
        _RECREATIONAL,
    ],
    BASEBALL: [
        _cat("teeball", "Tee Ball", "4-6"),
        _cat("rookie", "Rookie", "6-8"),
        _cat("minor", "Minor", "8-10"),
        _cat("major", "Major", "10-12"),
        _cat("junior", "Junior", "13-14"),
        _cat("senior", "Senior", "15+"),
        _RECREATIONAL,
    ],
    SWIMMING: [
        _cat("escuela", "Escuela", "4-8"),
        _cat("benjamín", "Benjamín", "8-10"),
        _cat("alevin", "Alevín", "10-12"),
        _cat("infantil", "Infantil", "12-14"),
        _cat("cadete", "Cadete", "14-16"),
        _cat("juvenil", "Juvenil", "16-18"),
        _cat("senior", "Senior", "18+"),
        _cat("master", "Master", "25+"),
        _RECREATIONAL,
    ],
    ATHLETICS: [
        _cat("escuela", "Escuela", "6-10"),
        _cat("benjamín", "Benjamín", "10-12"),
        _cat("alevin", "Alevín", "12-14"),
        _cat("infantil", "Infantil", "14-16"),
        _cat("cadete", "Cadete", "16-18"),
        _cat("juvenil", "Juvenil", "18-20"),
        _cat("promesa", "Promesa", "20-23"),
        _cat("senior", "Senior", "23+"),
        _cat("master", "Master", "35+"),
        _RECREATIONAL,
    ],
    OTHER: [
        _cat("infantil", "Infantil", "6-12"),
        _cat("juvenil", "Juvenil", "13-17"),
        _cat("senior", "Senior", "18+"),
        _RECREATIONAL,
    ],
}


def get_categories_for_sport(sport: str) -> List[SportCategory]:
    return SPORT_CATEGORIES.get(sport, SPORT_CATEGORIES[OTHER])


def get_category_by_id(sport: str, category_id: str) -> Optional[SportCategory]:
    for category in get_categories_for_sport(sport):
        if category.id == category_id:
            return category
    return None


def get_default_category(sport: str) -> SportCategory:
    categories = get_categories_for_sport(sport)
    return get_category_by_id(sport, "recreativo") or categories[0]
