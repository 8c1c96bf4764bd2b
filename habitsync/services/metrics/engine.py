"""
Metrics Engine - Derived habit progress from completion dates
Pure functions; no I/O. Callers pin `reference_now` for deterministic results.
"""
from dataclasses import dataclass
from datetime import date, timedelta
from typing import List, Set
import math

from habitsync.models import Habit
from habitsync.utils.timezone import normalize_to_calendar_date, parse_timestamp

SECONDS_PER_DAY = 24 * 60 * 60


@dataclass(frozen=True)
class HabitStats:
    """Derived view of one habit"""
    habit_id: str
    streak: int
    total_completions: int
    completed_today: bool
    last_7_days: List[bool]
    completion_rate: int


@dataclass(frozen=True)
class DashboardSummary:
    """Totals shown above the habit list"""
    total_points: int
    active_habits: int
    badges_earned: int


def completed_date_set(habit: Habit, tz=None) -> Set[date]:
    """
    Normalize a habit's completion values to a set of calendar dates

    Args:
        habit: The habit
        tz: Reference timezone

    Returns:
        Set of dates; unparseable entries are dropped
    """
    days = set()
    for value in habit.completed_dates:
        day = normalize_to_calendar_date(value, tz)
        if day is not None:
            days.add(day)
    return days


def _reference_day(reference_now, tz=None) -> date:
    day = normalize_to_calendar_date(reference_now, tz)
    if day is None:
        raise ValueError(f"Invalid reference time: {reference_now!r}")
    return day


def is_completed_today(habit: Habit, reference_now, tz=None) -> bool:
    """
    Check whether the habit has a completion on the reference day

    Args:
        habit: The habit
        reference_now: Current time (datetime, date or ISO string)
        tz: Reference timezone

    Returns:
        True if some completion falls on the same calendar day
    """
    return _reference_day(reference_now, tz) in completed_date_set(habit, tz)


def last_n_days_bitmap(habit: Habit, reference_now, days: int, tz=None) -> List[bool]:
    """
    Completion flags for the last `days` days, oldest first, ending today

    Args:
        habit: The habit
        reference_now: Current time
        days: Window length
        tz: Reference timezone

    Returns:
        List of `days` booleans
    """
    if days < 1:
        raise ValueError("days must be at least 1")

    today = _reference_day(reference_now, tz)
    completed = completed_date_set(habit, tz)
    return [
        (today - timedelta(days=days - 1 - offset)) in completed
        for offset in range(days)
    ]


def last_7_days_bitmap(habit: Habit, reference_now, tz=None) -> List[bool]:
    """Seven completion flags, six days ago through today"""
    return last_n_days_bitmap(habit, reference_now, 7, tz)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def days_since_created(habit: Habit, reference_now) -> int:
    """
    Whole days since creation, counting the creation day itself

    A missing creation time counts as created now. Never less than 1.
    """
    now = parse_timestamp(reference_now)
    if now is None:
        raise ValueError(f"Invalid reference time: {reference_now!r}")
    created = habit.created_at or now
    if created.tzinfo is None:
        created = parse_timestamp(created)

    elapsed = (now - created).total_seconds() / SECONDS_PER_DAY
    return max(1, math.floor(elapsed) + 1)


def completion_rate(habit: Habit, reference_now) -> int:
    """
    Percentage of days since creation with a completion

    Not clamped: server counters ahead of the clock can push it above 100.

    Args:
        habit: The habit
        reference_now: Current time

    Returns:
        Integer percentage, rounded half up
    """
    return _round_half_up(100 * habit.total_completions / days_since_created(habit, reference_now))


def habit_stats(habit: Habit, reference_now, tz=None) -> HabitStats:
    """Compute every derived metric for one habit"""
    bitmap = last_7_days_bitmap(habit, reference_now, tz)
    return HabitStats(
        habit_id=habit.id,
        streak=habit.streak,
        total_completions=habit.total_completions,
        completed_today=bitmap[-1],
        last_7_days=bitmap,
        completion_rate=completion_rate(habit, reference_now)
    )


def dashboard_summary(state) -> DashboardSummary:
    """
    Summary totals for an application state

    Args:
        state: AppState

    Returns:
        DashboardSummary
    """
    return DashboardSummary(
        total_points=state.total_points,
        active_habits=len(state.habits),
        badges_earned=len(state.badges)
    )
