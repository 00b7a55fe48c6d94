from __future__ import annotations

from dataclasses import replace
from typing import Dict, Iterable, Optional, Tuple, Type

from scorekid.config import (
    BASEBALL,
    BASKETBALL,
    BONUS_FOULS,
    MY_TEAM,
    OUTS_PER_HALF,
    RIVAL_TEAM,
    SOCCER,
    TEAM_LABELS,
    TEAMS,
    TENNIS,
    VOLLEYBALL,
)
from scorekid.models import (
    ADV,
    BaseballInning,
    BaseballScore,
    Bases,
    BasketballScore,
    CardType,
    GameStatus,
    GenericScore,
    Operation,
    Score,
    SoccerScore,
    Team,
    TeamPair,
    TennisGame,
    TennisScore,
    TennisSet,
    TennisSetScore,
    VolleyballScore,
)
from scorekid.rules import (
    TENNIS_GAMES_TO_WIN_SET,
    TENNIS_TIE_BREAK_POINTS,
    get_rules,
    volleyball_points_to_win,
)


ScoreUpdate = Tuple[Score, GameStatus]

OPERATIONS = ("add", "subtract")
CARD_TYPES = ("yellow", "red")
BASE_NAMES = ("first", "second", "third")

# 0 -> 15 -> 30 -> 40; ADV handled separately
_LADDER_UP = {0: 15, 15: 30, 30: 40}
_LADDER_DOWN = {ADV: 40, 40: 30, 30: 15, 15: 0, 0: 0}


# =========================================================
# HELPERS
# =========================================================

def other_team(team: Team) -> Team:
    return RIVAL_TEAM if team == MY_TEAM else MY_TEAM


def team_label(team: Team) -> str:
    return TEAM_LABELS[team]


def count_sets_won(sets: Iterable[TeamPair]) -> TeamPair:
    """Sets won per side; tennis tie-break sets are decided by their tie-break."""
    my_sets = 0
    rival_sets = 0
    for s in sets:
        winner = s.winner() if isinstance(s, TennisSetScore) else s.leader()
        if winner == MY_TEAM:
            my_sets += 1
        elif winner == RIVAL_TEAM:
            rival_sets += 1
    return TeamPair(my_sets, rival_sets)


def _step(value: int, operation: str, points: int = 1) -> int:
    if operation == "add":
        return value + points
    return max(0, value - points)


def _clamp_points(points) -> int:
    return max(0, int(points))


def _validate_team(team: str):
    if team not in TEAMS:
        raise ValueError(f"Invalid team: {team}")


def _validate_operation(operation: str):
    if operation not in OPERATIONS:
        raise ValueError(f"Invalid operation: {operation}")


def _won_by_two(pair: TeamPair, threshold: int) -> Optional[str]:
    for team in TEAMS:
        mine = pair.get(team)
        theirs = pair.get(other_team(team))
        if mine >= threshold and mine - theirs >= 2:
            return team
    return None


def _match_over_message(winner: str, pair: TeamPair) -> str:
    high = max(pair.my_team, pair.rival_team)
    low = min(pair.my_team, pair.rival_team)
    return f"¡Partido terminado! Ganó {team_label(winner)} {high}-{low}"


class SportEngine:
    """
    Scoring strategy for one sport.

    Every transition is a pure function: it takes a score value and returns
    a new score plus a GameStatus. Nothing here refuses calls after the
    match is finished; that gate belongs to the caller.
    """

    sport: str = ""
    score_type: Type = GenericScore

    # =========================================================
    # PUBLIC API
    # =========================================================

    def initial_score(self) -> Score:
        return self.score_type()

    def apply_point(self, score, team: Team, operation: Operation = "add", points: int = 1) -> ScoreUpdate:
        raise NotImplementedError

    # =========================================================
    # VALIDATION
    # =========================================================

    def _validate(self, score, team: Optional[str] = None, operation: Optional[str] = None):
        if not isinstance(score, self.score_type):
            raise TypeError(
                f"{type(self).__name__} expects {self.score_type.__name__}, "
                f"got {type(score).__name__}"
            )
        if team is not None:
            _validate_team(team)
        if operation is not None:
            _validate_operation(operation)

    @property
    def rules(self):
        return get_rules(self.sport)


# =============================================================================
# Volleyball
# =============================================================================

class VolleyballEngine(SportEngine):
    sport = VOLLEYBALL
    score_type = VolleyballScore

    def apply_point(self, score: VolleyballScore, team: Team, operation: Operation = "add", points: int = 1) -> ScoreUpdate:
        self._validate(score, team, operation)

        current = score.current_set.with_value(team, _step(score.current_set.get(team), operation))

        set_number = len(score.sets) + 1
        winner = _won_by_two(current, volleyball_points_to_win(set_number))

        if winner is None:
            return replace(score, current_set=current), GameStatus()

        return self._finalize_set(score, current, winner, set_number)

    def _finalize_set(self, score: VolleyballScore, finished: TeamPair, winner: str, set_number: int) -> ScoreUpdate:
        new_score = VolleyballScore(sets=score.sets + (finished,), current_set=TeamPair())

        won = count_sets_won(new_score.sets)
        sets_to_win = self.rules.win_condition.sets_to_win
        is_match_finished = won.my_team >= sets_to_win or won.rival_team >= sets_to_win

        if is_match_finished:
            message = _match_over_message(winner, won)
        else:
            set_name = "Set decisivo" if set_number == 5 else f"Set {set_number}"
            message = (
                f"{set_name} terminado: {finished.my_team}-{finished.rival_team}. "
                f"Ganó {team_label(winner)}"
            )

        return new_score, GameStatus(
            is_set_finished=True,
            is_match_finished=is_match_finished,
            winner=winner,
            message=message,
        )


# =============================================================================
# Tennis
# =============================================================================

class TennisEngine(SportEngine):
    sport = TENNIS
    score_type = TennisScore

    def apply_point(self, score: TennisScore, team: Team, operation: Operation = "add", points: int = 1) -> ScoreUpdate:
        self._validate(score, team, operation)

        if score.current_set.tie_break is not None:
            return self._tie_break_point(score, team, operation)

        game = score.current_set.current_game

        if operation == "subtract":
            # Best-effort undo inside the current game only
            game = game.with_value(team, _LADDER_DOWN.get(game.get(team), 0))
            return self._with_game(score, game), GameStatus()

        mine = game.get(team)
        theirs = game.get(other_team(team))

        if mine == ADV:
            return self._win_game(score, team)

        if mine == 40:
            if theirs == 40:
                return self._with_game(score, game.with_value(team, ADV)), GameStatus(message="Ventaja")
            if theirs == ADV:
                game = game.with_value(other_team(team), 40)
                return self._with_game(score, game), GameStatus(message="Iguales")
            return self._win_game(score, team)

        return self._with_game(score, game.with_value(team, _LADDER_UP.get(mine, 15))), GameStatus()

    # =========================================================
    # GAME LOGIC
    # =========================================================

    @staticmethod
    def _with_game(score: TennisScore, game: TennisGame) -> TennisScore:
        return replace(score, current_set=replace(score.current_set, current_game=game))

    def _win_game(self, score: TennisScore, team: Team) -> ScoreUpdate:
        games = score.current_set.games
        games = games.with_value(team, games.get(team) + 1)

        if games.my_team == TENNIS_GAMES_TO_WIN_SET and games.rival_team == TENNIS_GAMES_TO_WIN_SET:
            new_set = TennisSet(games=games, current_game=TennisGame(), tie_break=TeamPair())
            return replace(score, current_set=new_set), GameStatus(message="Tie-break")

        winner = _won_by_two(games, TENNIS_GAMES_TO_WIN_SET)
        if winner is None:
            new_set = TennisSet(games=games, current_game=TennisGame())
            return replace(score, current_set=new_set), GameStatus(message=f"Juego para {team_label(team)}")

        finished = TennisSetScore(my_team=games.my_team, rival_team=games.rival_team)
        message = f"Set terminado: {games.my_team}-{games.rival_team}. Ganó {team_label(winner)}"
        return self._finalize_set(score, finished, winner, message)

    # =========================================================
    # TIE-BREAK
    # =========================================================

    def _tie_break_point(self, score: TennisScore, team: Team, operation: Operation) -> ScoreUpdate:
        current_set = score.current_set
        tie_break = current_set.tie_break.with_value(team, _step(current_set.tie_break.get(team), operation))

        winner = _won_by_two(tie_break, TENNIS_TIE_BREAK_POINTS)
        if winner is None:
            return replace(score, current_set=replace(current_set, tie_break=tie_break)), GameStatus()

        finished = TennisSetScore(
            my_team=current_set.games.my_team,
            rival_team=current_set.games.rival_team,
            tie_break=tie_break,
        )
        message = f"Set terminado en tie-break: {tie_break.my_team}-{tie_break.rival_team}"
        return self._finalize_set(score, finished, winner, message)

    # =========================================================
    # SET / MATCH LOGIC
    # =========================================================

    def _finalize_set(self, score: TennisScore, finished: TennisSetScore, winner: str, message: str) -> ScoreUpdate:
        new_score = TennisScore(sets=score.sets + (finished,), current_set=TennisSet())

        won = count_sets_won(new_score.sets)
        sets_to_win = self.rules.win_condition.sets_to_win
        is_match_finished = won.my_team >= sets_to_win or won.rival_team >= sets_to_win

        if is_match_finished:
            message = _match_over_message(winner, won)

        return new_score, GameStatus(
            is_set_finished=True,
            is_match_finished=is_match_finished,
            winner=winner,
            message=message,
        )


# =============================================================================
# Basketball
# =============================================================================

class BasketballEngine(SportEngine):
    sport = BASKETBALL
    score_type = BasketballScore

    def apply_point(self, score: BasketballScore, team: Team, operation: Operation = "add", points: int = 1) -> ScoreUpdate:
        self._validate(score, team, operation)
        points = _clamp_points(points)

        if operation == "add":
            delta = points
        else:
            # Never take more than the current quarter holds
            delta = -min(points, score.current_quarter.get(team))

        new_score = replace(
            score,
            current_quarter=score.current_quarter.with_value(team, score.current_quarter.get(team) + delta),
            total_score=score.total_score.with_value(team, score.total_score.get(team) + delta),
        )
        return new_score, GameStatus()

    def add_foul(self, score: BasketballScore, team: Team, operation: Operation = "add") -> ScoreUpdate:
        self._validate(score, team, operation)

        fouls = score.fouls.with_value(team, _step(score.fouls.get(team), operation))
        message = None
        if fouls.get(team) >= BONUS_FOULS:
            message = f"{team_label(team)} en bonus"

        return replace(score, fouls=fouls), GameStatus(message=message)

    def use_timeout(self, score: BasketballScore, team: Team) -> ScoreUpdate:
        self._validate(score, team)

        remaining = score.timeouts.get(team)
        if remaining <= 0:
            return score, GameStatus(message=f"Sin tiempos muertos - {team_label(team)}")

        new_score = replace(score, timeouts=score.timeouts.with_value(team, remaining - 1))
        return new_score, GameStatus(message=f"Tiempo muerto - {team_label(team)}")

    def advance_quarter(self, score: BasketballScore) -> ScoreUpdate:
        self._validate(score)

        finished = TeamPair(score.current_quarter.my_team, score.current_quarter.rival_team)
        new_score = replace(score, quarters=score.quarters + (finished,), current_quarter=TeamPair())

        quarters_to_play = self.rules.win_condition.quarters_to_play
        winner = new_score.total_score.leader()
        is_match_finished = len(new_score.quarters) >= quarters_to_play and winner is not None

        if is_match_finished:
            message = _match_over_message(winner, new_score.total_score)
        else:
            message = f"Final del cuarto {len(new_score.quarters)}"

        return new_score, GameStatus(
            is_quarter_finished=True,
            is_match_finished=is_match_finished,
            winner=winner if is_match_finished else None,
            message=message,
        )


# =============================================================================
# Baseball
# =============================================================================

class BaseballEngine(SportEngine):
    sport = BASEBALL
    score_type = BaseballScore

    def apply_point(self, score: BaseballScore, team: Team, operation: Operation = "add", points: int = 1) -> ScoreUpdate:
        self._validate(score, team, operation)
        points = _clamp_points(points)

        if operation == "add":
            delta = points
        else:
            delta = -min(points, score.current_inning.get(team))

        new_score = replace(
            score,
            current_inning=score.current_inning.with_value(team, score.current_inning.get(team) + delta),
            total_score=score.total_score.with_value(team, score.total_score.get(team) + delta),
        )
        return new_score, GameStatus()

    def add_out(self, score: BaseballScore, operation: Operation = "add") -> ScoreUpdate:
        self._validate(score, operation=operation)

        if operation == "subtract":
            return replace(score, outs=max(0, score.outs - 1)), GameStatus()

        outs = score.outs + 1
        if outs < OUTS_PER_HALF:
            return replace(score, outs=outs), GameStatus()

        if not score.current_inning.is_bottom_half:
            new_score = replace(
                score,
                current_inning=replace(score.current_inning, is_bottom_half=True),
                outs=0,
                bases=Bases(),
            )
            return new_score, GameStatus(message="Cambio de turno")

        return self._finalize_inning(score)

    def toggle_base(self, score: BaseballScore, base: str) -> ScoreUpdate:
        self._validate(score)
        if base not in BASE_NAMES:
            raise ValueError(f"Invalid base: {base}")

        bases = replace(score.bases, **{base: not getattr(score.bases, base)})
        return replace(score, bases=bases), GameStatus()

    def _finalize_inning(self, score: BaseballScore) -> ScoreUpdate:
        finished = TeamPair(score.current_inning.my_team, score.current_inning.rival_team)
        new_score = replace(
            score,
            innings=score.innings + (finished,),
            current_inning=BaseballInning(),
            outs=0,
            bases=Bases(),
        )

        innings_to_play = self.rules.win_condition.innings_to_play
        winner = new_score.total_score.leader()
        is_match_finished = len(new_score.innings) >= innings_to_play and winner is not None

        if is_match_finished:
            message = _match_over_message(winner, new_score.total_score)
        else:
            message = f"Final inning {len(new_score.innings)}"

        return new_score, GameStatus(
            is_inning_finished=True,
            is_match_finished=is_match_finished,
            winner=winner if is_match_finished else None,
            message=message,
        )


# =============================================================================
# Soccer
# =============================================================================

class SoccerEngine(SportEngine):
    sport = SOCCER
    score_type = SoccerScore

    def apply_point(self, score: SoccerScore, team: Team, operation: Operation = "add", points: int = 1) -> ScoreUpdate:
        self._validate(score, team, operation)
        return score.with_value(team, _step(score.get(team), operation)), GameStatus()

    def add_card(self, score: SoccerScore, team: Team, card_type: CardType, operation: Operation = "add") -> ScoreUpdate:
        self._validate(score, team, operation)
        if card_type not in CARD_TYPES:
            raise ValueError(f"Invalid card type: {card_type}")

        counts = score.cards.get(team)
        counts = replace(counts, **{card_type: _step(getattr(counts, card_type), operation)})
        new_score = replace(score, cards=score.cards.with_value(team, counts))

        colour = "amarilla" if card_type == "yellow" else "roja"
        return new_score, GameStatus(message=f"Tarjeta {colour} - {team_label(team)}")

    def record_half_time(self, score: SoccerScore) -> ScoreUpdate:
        self._validate(score)
        half_time = TeamPair(score.my_team, score.rival_team)
        message = f"Descanso: {half_time.my_team}-{half_time.rival_team}"
        return replace(score, half_time=half_time), GameStatus(message=message)


# =============================================================================
# Generic
# =============================================================================

class GenericEngine(SportEngine):
    sport = ""
    score_type = GenericScore

    def apply_point(self, score: GenericScore, team: Team, operation: Operation = "add", points: int = 1) -> ScoreUpdate:
        self._validate(score, team, operation)
        points = _clamp_points(points)
        return score.with_value(team, _step(score.get(team), operation, points)), GameStatus()


# =============================================================================
# Registry + module-level contract
# =============================================================================

VOLLEYBALL_ENGINE = VolleyballEngine()
TENNIS_ENGINE = TennisEngine()
BASKETBALL_ENGINE = BasketballEngine()
BASEBALL_ENGINE = BaseballEngine()
SOCCER_ENGINE = SoccerEngine()
GENERIC_ENGINE = GenericEngine()

_ENGINES: Dict[str, SportEngine] = {
    VOLLEYBALL: VOLLEYBALL_ENGINE,
    TENNIS: TENNIS_ENGINE,
    BASKETBALL: BASKETBALL_ENGINE,
    BASEBALL: BASEBALL_ENGINE,
    SOCCER: SOCCER_ENGINE,
}

_ENGINES_BY_TYPE: Dict[type, SportEngine] = {
    engine.score_type: engine
    for engine in list(_ENGINES.values()) + [GENERIC_ENGINE]
}


def engine_for(sport: str) -> SportEngine:
    return _ENGINES.get(sport, GENERIC_ENGINE)


def engine_for_score(score: Score) -> SportEngine:
    try:
        return _ENGINES_BY_TYPE[type(score)]
    except KeyError:
        raise TypeError(f"Unsupported score type: {type(score).__name__}") from None


def initialize_score(sport: str) -> Score:
    return engine_for(sport).initial_score()


def apply_point(score: Score, team: Team, operation: Operation = "add", points: int = 1) -> ScoreUpdate:
    return engine_for_score(score).apply_point(score, team, operation, points)


def add_foul(score: BasketballScore, team: Team, operation: Operation = "add") -> ScoreUpdate:
    return BASKETBALL_ENGINE.add_foul(score, team, operation)


def use_timeout(score: BasketballScore, team: Team) -> ScoreUpdate:
    return BASKETBALL_ENGINE.use_timeout(score, team)


def advance_quarter(score: BasketballScore) -> ScoreUpdate:
    return BASKETBALL_ENGINE.advance_quarter(score)


def add_out(score: BaseballScore, operation: Operation = "add") -> ScoreUpdate:
    return BASEBALL_ENGINE.add_out(score, operation)


def toggle_base(score: BaseballScore, base: str) -> ScoreUpdate:
    return BASEBALL_ENGINE.toggle_base(score, base)


def add_card(score: SoccerScore, team: Team, card_type: CardType, operation: Operation = "add") -> ScoreUpdate:
    return SOCCER_ENGINE.add_card(score, team, card_type, operation)


def record_half_time(score: SoccerScore) -> ScoreUpdate:
    return SOCCER_ENGINE.record_half_time(score)
