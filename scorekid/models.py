from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Literal, Optional, Tuple, Union

from scorekid.config import (
    BASEBALL,
    BASKETBALL,
    INITIAL_TIMEOUTS,
    MY_TEAM_COLOR,
    RIVAL_TEAM_COLOR,
    SCHEMA_VERSION,
    SOCCER,
    TEAM_LABELS,
    TENNIS,
    VOLLEYBALL,
)


Team = Literal["my_team", "rival_team"]
Operation = Literal["add", "subtract"]
CardType = Literal["yellow", "red"]
MatchResult = Literal["victory", "defeat", "tie"]

# 0 | 15 | 30 | 40 | "ADV"
TennisPoint = Union[int, str]

ADV = "ADV"
TENNIS_LADDER: Tuple[TennisPoint, ...] = (0, 15, 30, 40, ADV)


class _Sides:
    """Shared accessors for records keyed by my_team / rival_team."""

    def get(self, team: str):
        return getattr(self, team)

    def with_value(self, team: str, value):
        return replace(self, **{team: value})


# =============================================================================
# Score building blocks
# =============================================================================

@dataclass(frozen=True)
class TeamPair(_Sides):
    my_team: int = 0
    rival_team: int = 0

    def leader(self) -> Optional[str]:
        if self.my_team > self.rival_team:
            return "my_team"
        if self.rival_team > self.my_team:
            return "rival_team"
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {"my_team": self.my_team, "rival_team": self.rival_team}

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "TeamPair":
        return TeamPair(
            my_team=int(d.get("my_team", 0)),
            rival_team=int(d.get("rival_team", 0)),
        )


@dataclass(frozen=True)
class BaseballInning(TeamPair):
    is_bottom_half: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "my_team": self.my_team,
            "rival_team": self.rival_team,
            "is_bottom_half": self.is_bottom_half,
        }

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "BaseballInning":
        return BaseballInning(
            my_team=int(d.get("my_team", 0)),
            rival_team=int(d.get("rival_team", 0)),
            is_bottom_half=bool(d.get("is_bottom_half", False)),
        )


@dataclass(frozen=True)
class Bases:
    first: bool = False
    second: bool = False
    third: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {"first": self.first, "second": self.second, "third": self.third}

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "Bases":
        return Bases(
            first=bool(d.get("first", False)),
            second=bool(d.get("second", False)),
            third=bool(d.get("third", False)),
        )


@dataclass(frozen=True)
class TennisGame(_Sides):
    my_team: TennisPoint = 0
    rival_team: TennisPoint = 0

    def to_dict(self) -> Dict[str, Any]:
        return {"my_team": self.my_team, "rival_team": self.rival_team}

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "TennisGame":
        return TennisGame(
            my_team=_tennis_point(d.get("my_team", 0)),
            rival_team=_tennis_point(d.get("rival_team", 0)),
        )


def _tennis_point(raw: Any) -> TennisPoint:
    if raw == ADV:
        return ADV
    return int(raw)


@dataclass(frozen=True)
class TennisSetScore(TeamPair):
    """
    A completed tennis set.

    Sets decided by a tie-break keep the games score at tie-break entry
    (6-6) and carry the tie-break points, which name the winner.
    """
    tie_break: Optional[TeamPair] = None

    def winner(self) -> Optional[str]:
        leader = self.leader()
        if leader is None and self.tie_break is not None:
            return self.tie_break.leader()
        return leader

    def to_dict(self) -> Dict[str, Any]:
        return {
            "my_team": self.my_team,
            "rival_team": self.rival_team,
            "tie_break": self.tie_break.to_dict() if self.tie_break else None,
        }

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "TennisSetScore":
        tie_break = d.get("tie_break")
        return TennisSetScore(
            my_team=int(d.get("my_team", 0)),
            rival_team=int(d.get("rival_team", 0)),
            tie_break=TeamPair.from_dict(tie_break) if tie_break else None,
        )


@dataclass(frozen=True)
class TennisSet:
    games: TeamPair = field(default_factory=TeamPair)
    current_game: TennisGame = field(default_factory=TennisGame)
    tie_break: Optional[TeamPair] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "games": self.games.to_dict(),
            "current_game": self.current_game.to_dict(),
            "tie_break": self.tie_break.to_dict() if self.tie_break else None,
        }

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "TennisSet":
        tie_break = d.get("tie_break")
        return TennisSet(
            games=TeamPair.from_dict(d.get("games", {})),
            current_game=TennisGame.from_dict(d.get("current_game", {})),
            tie_break=TeamPair.from_dict(tie_break) if tie_break else None,
        )


@dataclass(frozen=True)
class CardCount:
    yellow: int = 0
    red: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {"yellow": self.yellow, "red": self.red}

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "CardCount":
        return CardCount(yellow=int(d.get("yellow", 0)), red=int(d.get("red", 0)))


@dataclass(frozen=True)
class Cards(_Sides):
    my_team: CardCount = field(default_factory=CardCount)
    rival_team: CardCount = field(default_factory=CardCount)

    def to_dict(self) -> Dict[str, Any]:
        return {"my_team": self.my_team.to_dict(), "rival_team": self.rival_team.to_dict()}

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "Cards":
        return Cards(
            my_team=CardCount.from_dict(d.get("my_team", {})),
            rival_team=CardCount.from_dict(d.get("rival_team", {})),
        )


def _pairs(raw) -> Tuple[TeamPair, ...]:
    return tuple(TeamPair.from_dict(p) for p in (raw or []))


# =============================================================================
# Sport scores
# =============================================================================

@dataclass(frozen=True)
class VolleyballScore:
    sets: Tuple[TeamPair, ...] = ()
    current_set: TeamPair = field(default_factory=TeamPair)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sets": [s.to_dict() for s in self.sets],
            "current_set": self.current_set.to_dict(),
        }

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "VolleyballScore":
        return VolleyballScore(
            sets=_pairs(d.get("sets")),
            current_set=TeamPair.from_dict(d.get("current_set", {})),
        )


@dataclass(frozen=True)
class BasketballScore:
    quarters: Tuple[TeamPair, ...] = ()
    current_quarter: TeamPair = field(default_factory=TeamPair)
    total_score: TeamPair = field(default_factory=TeamPair)
    fouls: TeamPair = field(default_factory=TeamPair)
    timeouts: TeamPair = field(
        default_factory=lambda: TeamPair(INITIAL_TIMEOUTS, INITIAL_TIMEOUTS)
    )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "quarters": [q.to_dict() for q in self.quarters],
            "current_quarter": self.current_quarter.to_dict(),
            "total_score": self.total_score.to_dict(),
            "fouls": self.fouls.to_dict(),
            "timeouts": self.timeouts.to_dict(),
        }

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "BasketballScore":
        timeouts = d.get("timeouts")
        return BasketballScore(
            quarters=_pairs(d.get("quarters")),
            current_quarter=TeamPair.from_dict(d.get("current_quarter", {})),
            total_score=TeamPair.from_dict(d.get("total_score", {})),
            fouls=TeamPair.from_dict(d.get("fouls", {})),
            timeouts=(
                TeamPair.from_dict(timeouts)
                if timeouts is not None
                else TeamPair(INITIAL_TIMEOUTS, INITIAL_TIMEOUTS)
            ),
        )


@dataclass(frozen=True)
class BaseballScore:
    innings: Tuple[TeamPair, ...] = ()
    current_inning: BaseballInning = field(default_factory=BaseballInning)
    total_score: TeamPair = field(default_factory=TeamPair)
    outs: int = 0
    bases: Bases = field(default_factory=Bases)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "innings": [i.to_dict() for i in self.innings],
            "current_inning": self.current_inning.to_dict(),
            "total_score": self.total_score.to_dict(),
            "outs": self.outs,
            "bases": self.bases.to_dict(),
        }

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "BaseballScore":
        return BaseballScore(
            innings=_pairs(d.get("innings")),
            current_inning=BaseballInning.from_dict(d.get("current_inning", {})),
            total_score=TeamPair.from_dict(d.get("total_score", {})),
            outs=int(d.get("outs", 0)),
            bases=Bases.from_dict(d.get("bases", {})),
        )


@dataclass(frozen=True)
class TennisScore:
    sets: Tuple[TennisSetScore, ...] = ()
    current_set: TennisSet = field(default_factory=TennisSet)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sets": [s.to_dict() for s in self.sets],
            "current_set": self.current_set.to_dict(),
        }

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "TennisScore":
        return TennisScore(
            sets=tuple(TennisSetScore.from_dict(s) for s in (d.get("sets") or [])),
            current_set=TennisSet.from_dict(d.get("current_set", {})),
        )


@dataclass(frozen=True)
class SoccerScore(_Sides):
    my_team: int = 0
    rival_team: int = 0
    half_time: TeamPair = field(default_factory=TeamPair)
    cards: Cards = field(default_factory=Cards)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "my_team": self.my_team,
            "rival_team": self.rival_team,
            "half_time": self.half_time.to_dict(),
            "cards": self.cards.to_dict(),
        }

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "SoccerScore":
        return SoccerScore(
            my_team=int(d.get("my_team", 0)),
            rival_team=int(d.get("rival_team", 0)),
            half_time=TeamPair.from_dict(d.get("half_time", {})),
            cards=Cards.from_dict(d.get("cards", {})),
        )


@dataclass(frozen=True)
class GenericScore(_Sides):
    my_team: int = 0
    rival_team: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {"my_team": self.my_team, "rival_team": self.rival_team}

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "GenericScore":
        return GenericScore(
            my_team=int(d.get("my_team", 0)),
            rival_team=int(d.get("rival_team", 0)),
        )


Score = Union[
    VolleyballScore,
    BasketballScore,
    BaseballScore,
    TennisScore,
    SoccerScore,
    GenericScore,
]

SCORE_TYPES = {
    VOLLEYBALL: VolleyballScore,
    BASKETBALL: BasketballScore,
    BASEBALL: BaseballScore,
    TENNIS: TennisScore,
    SOCCER: SoccerScore,
}


def score_type_for(sport: str):
    """Score variant for a sport name; anything unrecognised is generic."""
    return SCORE_TYPES.get(sport, GenericScore)


def score_to_dict(score: Score) -> Dict[str, Any]:
    return score.to_dict()


def score_from_dict(sport: str, d: Dict[str, Any]) -> Score:
    return score_type_for(sport).from_dict(d or {})


# =============================================================================
# Transient status / timer
# =============================================================================

@dataclass(frozen=True)
class GameStatus:
    """Per-operation report. Never persisted."""
    is_set_finished: bool = False
    is_match_finished: bool = False
    is_quarter_finished: bool = False
    is_inning_finished: bool = False
    winner: Optional[str] = None
    message: Optional[str] = None


@dataclass(frozen=True)
class GameTimer:
    is_running: bool = False
    current_time: int = 0  # seconds
    total_time: int = 0  # seconds per period
    period: int = 1
    total_periods: int = 1
    stoppage: int = 0  # seconds, soccer only

    def to_dict(self) -> Dict[str, Any]:
        return {
            "is_running": self.is_running,
            "current_time": self.current_time,
            "total_time": self.total_time,
            "period": self.period,
            "total_periods": self.total_periods,
            "stoppage": self.stoppage,
        }

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "GameTimer":
        return GameTimer(
            is_running=bool(d.get("is_running", False)),
            current_time=int(d.get("current_time", 0)),
            total_time=int(d.get("total_time", 0)),
            period=int(d.get("period", 1)),
            total_periods=int(d.get("total_periods", 1)),
            stoppage=int(d.get("stoppage", 0) or 0),
        )


# =============================================================================
# Persisted match
# =============================================================================

@dataclass(frozen=True)
class TeamInfo:
    name: str
    color: str
    avatar: Optional[str] = None
    image_url: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "color": self.color,
            "avatar": self.avatar,
            "image_url": self.image_url,
        }

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "TeamInfo":
        return TeamInfo(
            name=str(d.get("name", "")),
            color=str(d.get("color", "")),
            avatar=d.get("avatar"),
            image_url=d.get("image_url"),
        )


@dataclass(frozen=True)
class TeamSettings(_Sides):
    my_team: TeamInfo = field(
        default_factory=lambda: TeamInfo(TEAM_LABELS["my_team"], MY_TEAM_COLOR)
    )
    rival_team: TeamInfo = field(
        default_factory=lambda: TeamInfo(TEAM_LABELS["rival_team"], RIVAL_TEAM_COLOR)
    )

    def to_dict(self) -> Dict[str, Any]:
        return {"my_team": self.my_team.to_dict(), "rival_team": self.rival_team.to_dict()}

    @staticmethod
    def from_dict(d: Optional[Dict[str, Any]]) -> "TeamSettings":
        if not d:
            return TeamSettings()
        return TeamSettings(
            my_team=TeamInfo.from_dict(d.get("my_team", {})),
            rival_team=TeamInfo.from_dict(d.get("rival_team", {})),
        )


@dataclass(frozen=True)
class Match:
    """
    A saved match. Written once at save time and never mutated in place;
    corrections go through the score editor and a new save.
    """
    id: str
    profile_id: str
    sport: str
    score: Score
    team_settings: TeamSettings
    date: str  # ISO-8601
    result: MatchResult
    is_finished: bool
    notes: str = ""
    timer: Optional[GameTimer] = None
    schema_version: int = SCHEMA_VERSION

    def to_dict(self) -> Dict[str, Any]:
        return {
            "schema_version": self.schema_version,
            "id": self.id,
            "profile_id": self.profile_id,
            "sport": self.sport,
            "score": score_to_dict(self.score),
            "team_settings": self.team_settings.to_dict(),
            "date": self.date,
            "notes": self.notes,
            "result": self.result,
            "is_finished": self.is_finished,
            "timer": self.timer.to_dict() if self.timer else None,
        }

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "Match":
        sport = str(d["sport"])
        timer = d.get("timer")
        return Match(
            id=str(d["id"]),
            profile_id=str(d["profile_id"]),
            sport=sport,
            score=score_from_dict(sport, d.get("score", {})),
            team_settings=TeamSettings.from_dict(d.get("team_settings")),
            date=str(d.get("date", "")),
            notes=str(d.get("notes", "") or ""),
            result=str(d.get("result", "tie")),  # type: ignore
            is_finished=bool(d.get("is_finished", True)),
            timer=GameTimer.from_dict(timer) if timer else None,
            schema_version=int(d.get("schema_version", SCHEMA_VERSION)),
        )
