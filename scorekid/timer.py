from __future__ import annotations

from dataclasses import replace
from typing import Optional

from scorekid.config import BASKETBALL, SOCCER, STOPPAGE_INCREMENTS
from scorekid.models import GameTimer
from scorekid.rules import get_rules


def initialize_timer(sport: str) -> Optional[GameTimer]:
    """Fresh period clock, or None when the sport has no time limit."""
    rules = get_rules(sport)
    if not rules.has_timer:
        return None

    return GameTimer(
        is_running=False,
        current_time=0,
        total_time=rules.time_limit.period_seconds,
        period=1,
        total_periods=rules.time_limit.periods,
        stoppage=0,
    )


def tick(timer: GameTimer) -> GameTimer:
    if not timer.is_running:
        return timer
    return replace(timer, current_time=timer.current_time + 1)


def toggle(timer: GameTimer) -> GameTimer:
    return replace(timer, is_running=not timer.is_running)


def reset(timer: GameTimer) -> GameTimer:
    return replace(timer, current_time=0, is_running=False)


def advance_period(timer: GameTimer) -> GameTimer:
    return replace(
        timer,
        period=min(timer.period + 1, timer.total_periods),
        current_time=0,
        is_running=False,
    )


def add_stoppage(timer: GameTimer, seconds: int) -> GameTimer:
    """Added time is shown next to the clock, never counted on it."""
    if seconds not in STOPPAGE_INCREMENTS:
        raise ValueError(f"Stoppage must be one of {STOPPAGE_INCREMENTS}, got {seconds}")
    return replace(timer, stoppage=timer.stoppage + seconds)


def can_advance_period(timer: GameTimer) -> bool:
    return timer.period < timer.total_periods


def remaining_time(timer: GameTimer) -> int:
    return max(0, timer.total_time - timer.current_time)


def is_time_up(timer: GameTimer, sport: str) -> bool:
    # Soccer counts up past the period length
    if sport == SOCCER:
        return False
    return timer.current_time >= timer.total_time


def format_time(seconds: int) -> str:
    minutes, remaining = divmod(max(0, int(seconds)), 60)
    return f"{minutes:02d}:{remaining:02d}"


def time_display(timer: GameTimer, sport: str) -> str:
    if sport == SOCCER:
        return format_time(timer.current_time)
    return format_time(remaining_time(timer))


def has_stoppage(sport: str) -> bool:
    time_limit = get_rules(sport).time_limit
    return time_limit is not None and time_limit.has_stoppage


def stoppage_display(timer: GameTimer, sport: str) -> Optional[str]:
    """Only sports with added time show it."""
    if not has_stoppage(sport) or timer.stoppage <= 0:
        return None
    return f"+{format_time(timer.stoppage)} tiempo añadido"


def period_name(timer: GameTimer, sport: str) -> str:
    if sport == BASKETBALL:
        return f"Cuarto {timer.period}"
    if sport == SOCCER:
        return "Primer Tiempo" if timer.period == 1 else "Segundo Tiempo"
    return f"Período {timer.period}"
