"""
Metrics module
Pure derived metrics over habits
"""
from .engine import (
    HabitStats,
    DashboardSummary,
    completed_date_set,
    is_completed_today,
    last_n_days_bitmap,
    last_7_days_bitmap,
    days_since_created,
    completion_rate,
    habit_stats,
    dashboard_summary
)

__all__ = [
    'HabitStats',
    'DashboardSummary',
    'completed_date_set',
    'is_completed_today',
    'last_n_days_bitmap',
    'last_7_days_bitmap',
    'days_since_created',
    'completion_rate',
    'habit_stats',
    'dashboard_summary'
]
