from __future__ import annotations

from typing import Any, Dict

from scorekid.engine import count_sets_won
from scorekid.models import (
    BaseballScore,
    BasketballScore,
    Score,
    SoccerScore,
    TennisScore,
    VolleyballScore,
)
from scorekid.rules import VOLLEYBALL_DECIDING_SET, volleyball_points_to_win


def volleyball_set_info(score: VolleyballScore) -> Dict[str, Any]:
    set_number = len(score.sets) + 1
    points_to_win = volleyball_points_to_win(set_number)
    won = count_sets_won(score.sets)

    return {
        "current_set_number": set_number,
        "is_fifth_set": set_number == VOLLEYBALL_DECIDING_SET,
        "points_to_win": points_to_win,
        "my_won_sets": won.my_team,
        "rival_won_sets": won.rival_team,
        "is_match_point": (
            score.current_set.my_team >= points_to_win - 1
            or score.current_set.rival_team >= points_to_win - 1
        ),
        "can_finish_match": won.my_team == 2 or won.rival_team == 2,
    }


def display_score(score: Score, sport: str) -> Dict[str, Any]:
    """
    Renderable summary of the current score.

    Pure: the same score and sport always produce an equal dict.
    Dispatches on the score variant; sport is accepted for callers.
    """
    if isinstance(score, VolleyballScore):
        set_number = len(score.sets) + 1
        is_fifth_set = set_number == VOLLEYBALL_DECIDING_SET
        if is_fifth_set:
            info = f"Set 5 (Decisivo - a {volleyball_points_to_win(set_number)} pts)"
        else:
            info = f"Set {set_number} (a {volleyball_points_to_win(set_number)} pts)"
        return {
            "my_team": str(score.current_set.my_team),
            "rival_team": str(score.current_set.rival_team),
            "sets": [s.to_dict() for s in score.sets],
            "current_set_info": info,
            "is_fifth_set": is_fifth_set,
        }

    if isinstance(score, BasketballScore):
        return {
            "my_team": str(score.total_score.my_team),
            "rival_team": str(score.total_score.rival_team),
            "quarters": [q.to_dict() for q in score.quarters],
            "current_quarter": score.current_quarter.to_dict(),
            "current_quarter_info": f"Cuarto {len(score.quarters) + 1}",
            "fouls": score.fouls.to_dict(),
            "timeouts": score.timeouts.to_dict(),
        }

    if isinstance(score, BaseballScore):
        half = "Abajo" if score.current_inning.is_bottom_half else "Arriba"
        return {
            "my_team": str(score.total_score.my_team),
            "rival_team": str(score.total_score.rival_team),
            "innings": [i.to_dict() for i in score.innings],
            "current_inning": score.current_inning.to_dict(),
            "current_inning_info": f"Inning {len(score.innings) + 1} ({half})",
            "outs": score.outs,
            "bases": score.bases.to_dict(),
        }

    if isinstance(score, TennisScore):
        current_set = score.current_set
        summary = {
            "sets": [s.to_dict() for s in score.sets],
            "games": current_set.games.to_dict(),
        }
        if current_set.tie_break is not None:
            summary.update(
                my_team=str(current_set.tie_break.my_team),
                rival_team=str(current_set.tie_break.rival_team),
                current_game_info="Tie-break",
                is_tie_break=True,
            )
        else:
            game_number = current_set.games.my_team + current_set.games.rival_team + 1
            summary.update(
                my_team=str(current_set.current_game.my_team),
                rival_team=str(current_set.current_game.rival_team),
                current_game_info=f"Juego {game_number}",
                is_tie_break=False,
            )
        return summary

    if isinstance(score, SoccerScore):
        return {
            "my_team": str(score.my_team),
            "rival_team": str(score.rival_team),
            "half_time": score.half_time.to_dict(),
            "cards": score.cards.to_dict(),
        }

    return {
        "my_team": str(score.my_team),
        "rival_team": str(score.rival_team),
    }
