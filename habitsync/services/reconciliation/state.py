"""
Application state held by the reconciliation controller
Only the transition methods below mutate it
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional
import logging

from habitsync.models import Badge, Habit, User, DEFAULT_CATEGORY
from habitsync.services.gamification import merge_badges, replace_badges

logger = logging.getLogger(__name__)


class AuthMode(Enum):
    """Session state machine"""
    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATING = "authenticating"
    AUTH_FAILED = "auth_failed"
    AUTHENTICATED = "authenticated"


@dataclass
class HabitDraft:
    """Contents of the habit creation form"""
    name: str = ""
    category: str = DEFAULT_CATEGORY


@dataclass
class AppState:
    mode: AuthMode = AuthMode.UNAUTHENTICATED
    user: Optional[User] = None
    habits: List[Habit] = field(default_factory=list)
    total_points: int = 0
    badges: List[Badge] = field(default_factory=list)
    # Last failure message per scope (auth, profile, habits, toggle, create)
    errors: Dict[str, str] = field(default_factory=dict)
    draft: HabitDraft = field(default_factory=HabitDraft)

    @property
    def is_authenticated(self) -> bool:
        return self.mode == AuthMode.AUTHENTICATED

    def reset(self) -> None:
        """Full teardown back to the unauthenticated state"""
        self.mode = AuthMode.UNAUTHENTICATED
        self.user = None
        self.habits = []
        self.total_points = 0
        self.badges = []
        self.errors = {}
        self.draft = HabitDraft()

    def apply_profile(self, user: User) -> None:
        """Replace user, points and badges wholesale from a profile snapshot"""
        self.user = user
        self.total_points = user.total_points
        self.badges = replace_badges(user.badges)

    def apply_habits(self, habits: List[Habit]) -> None:
        self.habits = list(habits)

    def replace_habit(self, habit: Habit) -> bool:
        """
        Swap in the authoritative version of one habit, keeping list order

        Returns:
            True if a habit with the same id was found
        """
        for index, current in enumerate(self.habits):
            if current.id == habit.id:
                self.habits = self.habits[:index] + [habit] + self.habits[index + 1:]
                return True
        logger.warning(f"Toggled habit {habit.id} is not in the local list")
        return False

    def append_badges(self, incoming: List[Badge], dedupe: bool = False) -> None:
        self.badges = merge_badges(self.badges, incoming, dedupe=dedupe)

    def record_error(self, scope: str, message: str) -> None:
        self.errors[scope] = message

    def clear_error(self, scope: str) -> None:
        self.errors.pop(scope, None)
