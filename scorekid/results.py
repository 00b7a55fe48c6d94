from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional

from scorekid.engine import count_sets_won
from scorekid.models import (
    BaseballScore,
    BasketballScore,
    GameTimer,
    Match,
    MatchResult,
    Score,
    TeamPair,
    TeamSettings,
    TennisScore,
    VolleyballScore,
)


def _compare(pair: TeamPair) -> MatchResult:
    if pair.my_team > pair.rival_team:
        return "victory"
    if pair.rival_team > pair.my_team:
        return "defeat"
    return "tie"


def sets_won(score: Score) -> Optional[TeamPair]:
    """Sets won per side for set-based sports, None otherwise."""
    if isinstance(score, (VolleyballScore, TennisScore)):
        return count_sets_won(score.sets)
    return None


def final_totals(score: Score) -> TeamPair:
    """The pair a result is decided on: sets won, running totals or goals/points."""
    won = sets_won(score)
    if won is not None:
        return won
    if isinstance(score, (BasketballScore, BaseballScore)):
        return score.total_score
    return TeamPair(score.my_team, score.rival_team)


def derive_result(score: Score, sport: str) -> MatchResult:
    """
    Victory / defeat / tie from my team's point of view.

    Reports whatever the score shows; a tie is returned even for sports
    whose rules do not allow one.
    """
    return _compare(final_totals(score))


def build_match(
    profile_id: str,
    sport: str,
    score: Score,
    *,
    is_finished: bool,
    team_settings: Optional[TeamSettings] = None,
    notes: str = "",
    timer: Optional[GameTimer] = None,
    now: Optional[datetime] = None,
) -> Match:
    now = now or datetime.now(timezone.utc)
    return Match(
        id=str(int(now.timestamp() * 1000)),
        profile_id=profile_id,
        sport=sport,
        score=score,
        team_settings=team_settings or TeamSettings(),
        date=now.isoformat(),
        notes=notes,
        result=derive_result(score, sport),
        is_finished=is_finished,
        timer=timer,
    )


# =============================================================================
# Match history
# =============================================================================

@dataclass(frozen=True)
class HistoryStats:
    victories: int = 0
    defeats: int = 0
    ties: int = 0
    total: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {
            "victories": self.victories,
            "defeats": self.defeats,
            "ties": self.ties,
            "total": self.total,
        }


def _pair_text(pair: TeamPair) -> str:
    return f"{pair.my_team}-{pair.rival_team}"


def _set_text(s: TeamPair) -> str:
    tie_break = getattr(s, "tie_break", None)
    if tie_break is not None:
        return f"{_pair_text(s)} ({_pair_text(tie_break)})"
    return _pair_text(s)


def match_summary(match: Match) -> str:
    """One-line score for a history list entry."""
    score = match.score

    if isinstance(score, VolleyballScore):
        if match.is_finished and score.sets:
            return f"Sets: {_pair_text(count_sets_won(score.sets))}"
        return f"{_pair_text(score.current_set)} (Set {len(score.sets) + 1})"

    if isinstance(score, TennisScore):
        won = _pair_text(count_sets_won(score.sets))
        if match.is_finished and score.sets:
            return f"Sets: {won}"
        return f"Sets: {won}, Juegos: {_pair_text(score.current_set.games)}"

    return _pair_text(final_totals(score))


def match_details(match: Match) -> List[str]:
    """
    Per-set lines for set-based sports, plus the set in progress when the
    match was saved unfinished. Other sports have no detail lines.
    """
    score = match.score
    if not isinstance(score, (VolleyballScore, TennisScore)):
        return []

    details = [f"Set {i}: {_set_text(s)}" for i, s in enumerate(score.sets, 1)]
    if match.is_finished:
        return details

    if isinstance(score, VolleyballScore):
        details.append(f"Set actual: {_pair_text(score.current_set)}")
        return details

    current_set = score.current_set
    details.append(f"Juegos actuales: {_pair_text(current_set.games)}")
    if current_set.tie_break is not None:
        details.append(f"Tie-break: {_pair_text(current_set.tie_break)}")
    else:
        game = current_set.current_game
        details.append(f"Puntos: {game.my_team}-{game.rival_team}")
    return details


def history_stats(matches: Iterable[Match]) -> HistoryStats:
    results = [m.result for m in matches]
    return HistoryStats(
        victories=results.count("victory"),
        defeats=results.count("defeat"),
        ties=results.count("tie"),
        total=len(results),
    )
