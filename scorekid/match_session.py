import logging
import threading
from copy import deepcopy
from datetime import datetime
from typing import Any, Dict, List, Optional

from scorekid import timer as clock
from scorekid.config import SOCCER
from scorekid.engine import initialize_score
from scorekid.exceptions import InvalidScoreError, NoEventsLoadedError
from scorekid.models import GameStatus, GameTimer, Match, Score, TeamSettings
from scorekid.results import build_match
from scorekid.storage import MatchStore
from scorekid.timeline import ScoreCommand, apply_command, build_score_timeline, make_snapshot, supports
from scorekid.validation import ValidationResult, recalculate, validate

logger = logging.getLogger(__name__)


class MatchSession:
    """
    Single open match view.

    Responsibilities:
    - Own the live score and timer for one sport
    - Ignore score commands once the match is finished
    - Serialise clock ticks and score updates through one lock
    - Keep the command log (undo, export, atomic bulk replay)
    - Validate manual corrections and save the finished match
    """

    def __init__(self, sport: str, profile_id: str = "", team_settings: Optional[TeamSettings] = None):
        self.sport = sport
        self.profile_id = profile_id
        self.team_settings = team_settings or TeamSettings()

        self._lock = threading.Lock()
        self._clock_thread: Optional[threading.Thread] = None
        self._clock_stop = threading.Event()

        self._reset_state()

    def _reset_state(self):
        self._score: Score = initialize_score(self.sport)
        self._timer: Optional[GameTimer] = clock.initialize_timer(self.sport)
        self._status = GameStatus()
        self._is_match_finished = False
        self._events: List[ScoreCommand] = []
        self._timeline: List[Dict[str, Any]] = []
        self._edited_score: Optional[Score] = None
        self._edit_errors: List[str] = []

    # ---------------------------------------------------------
    # State
    # ---------------------------------------------------------

    @property
    def score(self) -> Score:
        return self._score

    @property
    def timer(self) -> Optional[GameTimer]:
        return self._timer

    @property
    def status(self) -> GameStatus:
        return self._status

    @property
    def is_match_finished(self) -> bool:
        return self._is_match_finished

    @property
    def edited_score(self) -> Optional[Score]:
        return self._edited_score

    # ---------------------------------------------------------
    # Score commands
    # ---------------------------------------------------------

    def update_score(self, team: str, operation: str = "add", points: int = 1) -> GameStatus:
        return self.execute(ScoreCommand(action="point", team=team, operation=operation, points=points))

    def special_action(self, action: str, team: Optional[str] = None, value: Optional[str] = None) -> GameStatus:
        """foul / timeout / next_quarter / out / base / card, as offered by the sport."""
        command = ScoreCommand(
            action=action,
            team=team,
            card=value if action == "card" else None,
            base=value if action == "base" else None,
        )
        return self.execute(command)

    def execute(self, command: ScoreCommand) -> GameStatus:
        with self._lock:
            return self._execute(command)

    def _execute(self, command: ScoreCommand) -> GameStatus:
        # caller holds self._lock
        if self._is_match_finished:
            logger.debug("Match finished, ignoring %s", command.action)
            return self._status

        if not supports(self._score, command):
            logger.debug("%s does not support %s", self.sport, command.action)
            return GameStatus()

        self._score, self._status = apply_command(self._score, command)
        self._events.append(command)
        self._timeline.append(
            make_snapshot(len(self._events), self._score, self._status, self.sport)
        )

        if self._status.is_match_finished:
            self._is_match_finished = True
            logger.info("Match finished: %s", self._status.message)

        return self._status

    def undo(self) -> GameStatus:
        """Replay every recorded command except the last one."""
        with self._lock:
            if not self._events:
                return self._status

            commands = self._events[:-1]
            timeline = build_score_timeline(self.sport, commands)
            self._commit_replay(commands, timeline)
            return self._status

    def load_events(self, events: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """
        Bulk load recorded commands from list of dicts.
        Atomic: if any command fails -> no state mutation.
        """
        if not isinstance(events, list):
            raise ValueError("events must be a list")

        commands = [ScoreCommand.from_dict(e) for e in events]
        timeline = build_score_timeline(self.sport, commands)

        with self._lock:
            self._commit_replay(commands[:len(timeline)], timeline)
            self._timer = clock.initialize_timer(self.sport)
            if self._timer is not None and any(c.action == "half_time" for c in self._events):
                self._timer = clock.advance_period(self._timer)
            return deepcopy(self._timeline)

    def _commit_replay(self, commands: List[ScoreCommand], timeline: List[Dict[str, Any]]):
        if timeline:
            self._score = timeline[-1]["score"]
            self._status = timeline[-1]["status"]
        else:
            self._score = initialize_score(self.sport)
            self._status = GameStatus()
        self._is_match_finished = self._status.is_match_finished
        self._events = list(commands)
        self._timeline = list(timeline)

    def get_snapshot(self) -> Dict[str, Any]:
        if not self._timeline:
            raise NoEventsLoadedError("No events loaded")

        return self._timeline[-1]

    def get_timeline(self) -> List[Dict[str, Any]]:
        return deepcopy(self._timeline)

    def export_events(self) -> List[Dict[str, Any]]:
        return [c.to_dict() for c in self._events]

    # ---------------------------------------------------------
    # Timer
    # ---------------------------------------------------------

    def tick(self) -> Optional[GameTimer]:
        with self._lock:
            if self._timer is not None:
                self._timer = clock.tick(self._timer)
            return self._timer

    def toggle_timer(self) -> Optional[GameTimer]:
        with self._lock:
            if self._timer is not None:
                self._timer = clock.toggle(self._timer)
            return self._timer

    def reset_timer(self) -> Optional[GameTimer]:
        with self._lock:
            if self._timer is not None:
                self._timer = clock.reset(self._timer)
            return self._timer

    def next_period(self) -> Optional[GameTimer]:
        with self._lock:
            if self._timer is None:
                return None

            if self.sport == SOCCER and self._timer.period == 1 and clock.can_advance_period(self._timer):
                self._execute(ScoreCommand(action="half_time"))

            self._timer = clock.advance_period(self._timer)
            return self._timer

    def add_stoppage(self, seconds: int) -> Optional[GameTimer]:
        """Added time, for sports whose rules allow it; ignored otherwise."""
        with self._lock:
            if self._timer is None:
                return None

            if not clock.has_stoppage(self.sport):
                logger.debug("%s has no stoppage time, ignoring +%ss", self.sport, seconds)
                return self._timer

            self._timer = clock.add_stoppage(self._timer, seconds)
            return self._timer

    def start_clock(self, interval: float = 1.0):
        """Tick the timer from a background thread every `interval` seconds."""
        if self._timer is None:
            return
        if self._clock_thread is not None and self._clock_thread.is_alive():
            return

        self._clock_stop.clear()
        self._clock_thread = threading.Thread(
            target=self._run_clock, args=(interval,), name="scorekid-clock", daemon=True
        )
        self._clock_thread.start()

    def stop_clock(self):
        self._clock_stop.set()
        if self._clock_thread is not None:
            self._clock_thread.join()
            self._clock_thread = None

    def _run_clock(self, interval: float):
        while not self._clock_stop.wait(interval):
            self.tick()

    # ---------------------------------------------------------
    # Manual correction + save
    # ---------------------------------------------------------

    def edit_score(self, new_score: Score) -> ValidationResult:
        """Recalculate derived totals, then validate the corrected score."""
        with self._lock:
            corrected = recalculate(new_score, self.sport)
            result = validate(corrected, self.sport)
            self._edited_score = corrected
            self._edit_errors = list(result.errors)
            return result

    def cancel_edit(self):
        with self._lock:
            self._edited_score = None
            self._edit_errors = []

    def save(self, store: MatchStore, notes: str = "", now: Optional[datetime] = None) -> Match:
        with self._lock:
            if self._edit_errors:
                raise InvalidScoreError(self._edit_errors)

            final_score = self._edited_score if self._edited_score is not None else self._score

            match = build_match(
                self.profile_id,
                self.sport,
                final_score,
                is_finished=self._is_match_finished,
                team_settings=self.team_settings,
                notes=notes,
                timer=self._timer,
                now=now,
            )

            store.save(match)
            logger.info("Saved %s match %s (%s)", self.sport, match.id, match.result)

            self._reset_state()
            return match

    def reset(self):
        with self._lock:
            self._reset_state()
