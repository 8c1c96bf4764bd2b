"""Smoke tests for the CLI command dispatch and rendering."""

import asyncio

import pytest

from habitsync import cli
from habitsync.models import ToggleResult
from tests.helpers import make_habit, make_user


@pytest.fixture
def signed_in(controller, gateway):
    """Controller logged in through the same event-loop entry point the CLI uses."""
    gateway.outcomes["fetch_profile"] = make_user(totalPoints=40, badges=["habit_collector"])
    gateway.outcomes["fetch_habits"] = [make_habit("h1"), make_habit("h2", streak=2)]
    assert asyncio.run(controller.login("ada@example.com", "secret")).success
    gateway.calls.clear()
    return controller


class TestDispatch:
    """Tests for dispatch."""

    def test_help(self, controller) -> None:
        assert "toggle <n>" in cli.dispatch(controller, "help")

    def test_unknown_command(self, controller) -> None:
        assert "Unknown command" in cli.dispatch(controller, "fly away")

    def test_commands_need_a_session(self, controller, gateway) -> None:
        assert "log in" in cli.dispatch(controller, "habits")
        assert gateway.calls == []

    def test_habits_render_dashboard(self, signed_in) -> None:
        output = cli.dispatch(signed_in, "habits")

        assert "40 points" in output
        assert "2 habits" in output
        assert "1. " in output and "Habit h1" in output
        assert "last 7 days" in output

    def test_toggle_by_number(self, signed_in, gateway) -> None:
        gateway.outcomes["toggle_completion"] = ToggleResult(habit=make_habit("h2", streak=9))

        output = cli.dispatch(signed_in, "toggle 2")

        assert gateway.calls[0] == ("toggle_completion", "h2")
        assert "9 day streak" in output

    def test_toggle_bad_number(self, signed_in, gateway) -> None:
        assert "between 1 and 2" in cli.dispatch(signed_in, "toggle 7")
        assert gateway.calls == []

    def test_add_with_category(self, signed_in, gateway) -> None:
        cli.dispatch(signed_in, "add learning Read a chapter")
        assert gateway.calls[0] == ("create_habit", "Read a chapter", "learning")

    def test_badges(self, signed_in) -> None:
        assert "Habit Collector" in cli.dispatch(signed_in, "badges")

    def test_logout(self, signed_in) -> None:
        cli.dispatch(signed_in, "logout")
        assert not signed_in.state.is_authenticated
