"""
Pydantic models for the application
"""
from habitsync.models.badge import Badge
from habitsync.models.user import User, AuthResult, Credentials
from habitsync.models.habit import (
    Habit,
    CreateHabitRequest,
    ToggleResult,
    CATEGORY_LABELS,
    DEFAULT_CATEGORY
)

__all__ = [
    "Badge",
    "User",
    "AuthResult",
    "Credentials",
    "Habit",
    "CreateHabitRequest",
    "ToggleResult",
    "CATEGORY_LABELS",
    "DEFAULT_CATEGORY"
]
