from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Tuple

from scorekid import engine
from scorekid.display import display_score
from scorekid.models import BaseballScore, BasketballScore, GameStatus, Score, SoccerScore

ACTIONS = ("point", "foul", "timeout", "next_quarter", "out", "base", "card", "half_time")

# Actions that only make sense for one score variant
_ACTION_SCORE_TYPES = {
    "foul": BasketballScore,
    "timeout": BasketballScore,
    "next_quarter": BasketballScore,
    "out": BaseballScore,
    "base": BaseballScore,
    "card": SoccerScore,
    "half_time": SoccerScore,
}


@dataclass(frozen=True)
class ScoreCommand:
    """One recorded user action on the scoreboard."""
    action: str = "point"
    team: Optional[str] = None
    operation: str = "add"
    points: int = 1
    card: Optional[str] = None  # "yellow" | "red"
    base: Optional[str] = None  # "first" | "second" | "third"

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {"action": self.action, "operation": self.operation, "points": self.points}
        if self.team is not None:
            d["team"] = self.team
        if self.card is not None:
            d["card"] = self.card
        if self.base is not None:
            d["base"] = self.base
        return d

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "ScoreCommand":
        if not isinstance(d, dict) or "action" not in d:
            raise ValueError("invalid command format")
        if d["action"] not in ACTIONS:
            raise ValueError(f"Invalid action: {d['action']}")
        return ScoreCommand(
            action=str(d["action"]),
            team=d.get("team"),
            operation=str(d.get("operation", "add")),
            points=int(d.get("points", 1)),
            card=d.get("card"),
            base=d.get("base"),
        )


def supports(score: Score, command: ScoreCommand) -> bool:
    required = _ACTION_SCORE_TYPES.get(command.action)
    return required is None or isinstance(score, required)


def apply_command(score: Score, command: ScoreCommand) -> Tuple[Score, GameStatus]:
    action = command.action

    if not supports(score, command):
        raise ValueError(f"Action {action} is not supported for {type(score).__name__}")

    if action == "point":
        return engine.apply_point(score, command.team, command.operation, command.points)
    if action == "foul":
        return engine.add_foul(score, command.team, command.operation)
    if action == "timeout":
        return engine.use_timeout(score, command.team)
    if action == "next_quarter":
        return engine.advance_quarter(score)
    if action == "out":
        return engine.add_out(score, command.operation)
    if action == "base":
        return engine.toggle_base(score, command.base)
    if action == "card":
        return engine.add_card(score, command.team, command.card, command.operation)
    if action == "half_time":
        return engine.record_half_time(score)

    raise ValueError(f"Invalid action: {action}")


def make_snapshot(index: int, score: Score, status: GameStatus, sport: str) -> Dict[str, Any]:
    view = display_score(score, sport)
    return {
        "command_index": index,
        "my_team": view["my_team"],
        "rival_team": view["rival_team"],
        "is_set_finished": status.is_set_finished,
        "is_quarter_finished": status.is_quarter_finished,
        "is_inning_finished": status.is_inning_finished,
        "is_finished": status.is_match_finished,
        "winner": status.winner,
        "message": status.message,
        "score": score,
        "status": status,
    }


def build_score_timeline(sport: str, commands: Iterable[ScoreCommand]) -> List[Dict[str, Any]]:
    """
    Replays a match from scratch using the command sequence.
    Returns a flattened snapshot after each command and stops once the
    match is finished. Does NOT mutate external state.
    """

    score = engine.initialize_score(sport)

    timeline: List[Dict[str, Any]] = []

    for index, command in enumerate(commands):

        score, status = apply_command(score, command)

        timeline.append(make_snapshot(index + 1, score, status, sport))

        if status.is_match_finished:
            break

    return timeline
