"""Test doubles and factories for habitsync tests."""

import json
from typing import Any, Dict, List, Optional

import requests

from habitsync.models import AuthResult, Badge, Habit, User


def make_habit(habit_id: str, **overrides: Any) -> Habit:
    """Build a habit from wire-shaped fields."""
    data: Dict[str, Any] = {
        "_id": habit_id,
        "name": f"Habit {habit_id}",
        "category": "health",
        "streak": 0,
        "totalCompletions": 0,
        "completedDates": [],
        "createdAt": "2024-01-01T00:00:00Z",
    }
    data.update(overrides)
    return Habit.model_validate(data)


def make_user(**overrides: Any) -> User:
    data: Dict[str, Any] = {
        "_id": "u1",
        "username": "ada",
        "email": "ada@example.com",
        "totalPoints": 0,
        "badges": [],
    }
    data.update(overrides)
    return User.model_validate(data)


class FakeGateway:
    """
    Gateway double. Each operation returns its scripted outcome: a value,
    an exception instance (raised), or a callable invoked with the call args.
    """

    def __init__(self) -> None:
        self.outcomes: Dict[str, Any] = {
            "authenticate": AuthResult(token="tok-1", user=make_user()),
            "fetch_profile": make_user(),
            "fetch_habits": [],
            "create_habit": make_habit("new"),
            "toggle_completion": None,
        }
        self.calls: List[tuple] = []

    def _run(self, name: str, *args: Any) -> Any:
        self.calls.append((name, *args))
        outcome = self.outcomes[name]
        if isinstance(outcome, BaseException):
            raise outcome
        if callable(outcome):
            return outcome(*args)
        return outcome

    def call_names(self) -> List[str]:
        return [call[0] for call in self.calls]

    def authenticate(self, mode, credentials):
        return self._run("authenticate", mode, credentials)

    def fetch_profile(self):
        return self._run("fetch_profile")

    def fetch_habits(self):
        return self._run("fetch_habits")

    def create_habit(self, name, category):
        return self._run("create_habit", name, category)

    def toggle_completion(self, habit_id):
        return self._run("toggle_completion", habit_id)


def badge_ids(badges: List[Badge]) -> List[Optional[str]]:
    return [b.badge_id for b in badges]


def json_response(status: int, payload: Any) -> requests.Response:
    """Build a real requests.Response carrying a JSON body."""
    response = requests.Response()
    response.status_code = status
    response._content = json.dumps(payload).encode()
    return response
