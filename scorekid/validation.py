"""
Consistency checks for manually edited scores.

validate() never raises for a score of the sport's own variant; it returns
a list of human-readable problems (empty == valid). recalculate() heals the
derived totals of basketball and baseball scores.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import List, Sequence

from scorekid.config import BASEBALL, BASKETBALL, INITIAL_TIMEOUTS, OUTS_PER_HALF, TEAM_LABELS, TENNIS, VOLLEYBALL
from scorekid.models import (
    TENNIS_LADDER,
    BaseballScore,
    BasketballScore,
    GenericScore,
    Score,
    SoccerScore,
    TeamPair,
    TennisScore,
    VolleyballScore,
)
from scorekid.rules import (
    TENNIS_GAMES_TO_WIN_SET,
    TENNIS_MAX_SET_GAMES,
    TENNIS_TIE_BREAK_POINTS,
    volleyball_points_to_win,
)


@dataclass(frozen=True)
class ValidationResult:
    is_valid: bool
    errors: List[str] = field(default_factory=list)


def _result(errors: List[str]) -> ValidationResult:
    return ValidationResult(is_valid=not errors, errors=errors)


def _negative(pair: TeamPair) -> bool:
    return pair.my_team < 0 or pair.rival_team < 0


def _sum_periods(periods: Sequence[TeamPair], current: TeamPair) -> TeamPair:
    return TeamPair(
        sum(p.my_team for p in periods) + current.my_team,
        sum(p.rival_team for p in periods) + current.rival_team,
    )


def _check_totals(periods, current, total: TeamPair, unit: str) -> List[str]:
    problems: List[str] = []
    expected = _sum_periods(periods, current)
    for team in ("my_team", "rival_team"):
        if expected.get(team) != total.get(team):
            problems.append(
                f"{TEAM_LABELS[team]}: La suma de {unit} ({expected.get(team)}) "
                f"no coincide con el total ({total.get(team)})"
            )
    return problems


def _check_periods_non_negative(periods, current, label: str) -> List[str]:
    problems: List[str] = []
    for i, p in enumerate(periods, 1):
        if _negative(p):
            problems.append(f"{label} {i}: Los puntos no pueden ser negativos")
    if _negative(current):
        problems.append(f"{label} actual: Los puntos no pueden ser negativos")
    return problems


# =============================================================================
# Per-sport validators
# =============================================================================

def validate_volleyball(score: VolleyballScore) -> ValidationResult:
    problems: List[str] = []

    for i, s in enumerate(score.sets, 1):
        if _negative(s):
            problems.append(f"Set {i}: Los puntos no pueden ser negativos")
            continue

        threshold = volleyball_points_to_win(i)
        winner_points = max(s.my_team, s.rival_team)
        loser_points = min(s.my_team, s.rival_team)

        if winner_points < threshold:
            problems.append(f"Set {i}: El ganador debe llegar al menos a {threshold} puntos")
        if winner_points - loser_points < 2:
            problems.append(f"Set {i}: Debe ganar con al menos 2 puntos de diferencia")

    if _negative(score.current_set):
        problems.append("Set actual: Los puntos no pueden ser negativos")

    return _result(problems)


def validate_basketball(score: BasketballScore) -> ValidationResult:
    problems = _check_totals(score.quarters, score.current_quarter, score.total_score, "cuartos")
    problems += _check_periods_non_negative(score.quarters, score.current_quarter, "Cuarto")

    if _negative(score.fouls):
        problems.append("Las faltas no pueden ser negativas")

    for team in ("my_team", "rival_team"):
        if not 0 <= score.timeouts.get(team) <= INITIAL_TIMEOUTS:
            problems.append(f"Los tiempos muertos deben estar entre 0 y {INITIAL_TIMEOUTS}")
            break

    return _result(problems)


def validate_baseball(score: BaseballScore) -> ValidationResult:
    problems = _check_totals(score.innings, score.current_inning, score.total_score, "innings")
    problems += _check_periods_non_negative(score.innings, score.current_inning, "Inning")

    if not 0 <= score.outs <= OUTS_PER_HALF:
        problems.append(f"Los outs deben estar entre 0 y {OUTS_PER_HALF}")

    return _result(problems)


def _tennis_set_problem(s) -> str:
    winner_games = max(s.my_team, s.rival_team)
    loser_games = min(s.my_team, s.rival_team)

    if winner_games == loser_games == TENNIS_GAMES_TO_WIN_SET:
        # Recorded at tie-break entry; the tie-break decides the set
        tb = s.tie_break
        if tb is None or _negative(tb):
            return "Un set 6-6 necesita el resultado del tie-break"
        tb_high = max(tb.my_team, tb.rival_team)
        tb_low = min(tb.my_team, tb.rival_team)
        if tb_high < TENNIS_TIE_BREAK_POINTS or tb_high - tb_low < 2:
            return "El tie-break se gana a 7 puntos con 2 de diferencia"
        return ""
    if winner_games < TENNIS_GAMES_TO_WIN_SET:
        return "Se necesitan al menos 6 games para ganar un set"
    if winner_games == TENNIS_GAMES_TO_WIN_SET and loser_games >= 5:
        return "Con 6-5 o más se debe ir a 7 games o tie-break"
    if winner_games == TENNIS_MAX_SET_GAMES and loser_games not in (5, 6):
        return "Un 7-X solo es válido si X=5 o X=6 (tie-break)"
    if winner_games > TENNIS_MAX_SET_GAMES:
        return "No se pueden ganar más de 7 games en un set"
    return ""


def validate_tennis(score: TennisScore) -> ValidationResult:
    problems: List[str] = []

    for i, s in enumerate(score.sets, 1):
        if _negative(s):
            problems.append(f"Set {i}: Los games no pueden ser negativos")
            continue
        problem = _tennis_set_problem(s)
        if problem:
            problems.append(f"Set {i}: {problem}")

    current_set = score.current_set
    if _negative(current_set.games):
        problems.append("Los games actuales no pueden ser negativos")

    game = current_set.current_game
    if game.my_team not in TENNIS_LADDER or game.rival_team not in TENNIS_LADDER:
        problems.append("Los puntos del game actual deben ser 0, 15, 30, 40 o ADV")

    if current_set.tie_break is not None and _negative(current_set.tie_break):
        problems.append("Los puntos del tie-break no pueden ser negativos")

    return _result(problems)


def validate_soccer(score: SoccerScore) -> ValidationResult:
    problems: List[str] = []

    if score.my_team < 0 or score.rival_team < 0:
        problems.append("Los goles no pueden ser negativos")
    if _negative(score.half_time):
        problems.append("Los goles al descanso no pueden ser negativos")

    cards = (score.cards.my_team, score.cards.rival_team)
    if any(c.yellow < 0 or c.red < 0 for c in cards):
        problems.append("Las tarjetas no pueden ser negativas")

    return _result(problems)


def validate_generic(score: GenericScore) -> ValidationResult:
    if score.my_team < 0 or score.rival_team < 0:
        return _result(["Los puntos no pueden ser negativos"])
    return _result([])


_VALIDATORS = {
    VolleyballScore: validate_volleyball,
    BasketballScore: validate_basketball,
    BaseballScore: validate_baseball,
    TennisScore: validate_tennis,
    SoccerScore: validate_soccer,
    GenericScore: validate_generic,
}


def validate(score: Score, sport: str) -> ValidationResult:
    """Dispatch on the score variant; the sport name is kept for callers that pass it."""
    validator = _VALIDATORS.get(type(score))
    if validator is None:
        raise TypeError(f"Unsupported score type: {type(score).__name__}")
    return validator(score)


# =============================================================================
# Correction
# =============================================================================

def recalculate(score: Score, sport: str) -> Score:
    """Force derived totals to match their periods. No-op for other sports."""
    if sport == BASKETBALL and isinstance(score, BasketballScore):
        return replace(score, total_score=_sum_periods(score.quarters, score.current_quarter))
    if sport == BASEBALL and isinstance(score, BaseballScore):
        return replace(score, total_score=_sum_periods(score.innings, score.current_inning))
    return score
