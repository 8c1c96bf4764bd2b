#!/usr/bin/env python3
"""
habitsync CLI - Interactive habit tracker client
"""
from getpass import getpass
from typing import Callable, Dict, List
import asyncio
import logging

from habitsync.core.config import settings
from habitsync.core.dependencies import get_controller
from habitsync.models import CATEGORY_LABELS, DEFAULT_CATEGORY
from habitsync.services.gamification import get_badge_info
from habitsync.services.metrics import dashboard_summary, habit_stats
from habitsync.services.reconciliation import OperationResult, ReconciliationController
from habitsync.utils.timezone import get_reference_now, get_reference_tz

logger = logging.getLogger(__name__)

HELP_TEXT = """Commands:
  login                    Log in with email and password
  register                 Create an account
  logout                   End the session
  habits                   Show habits and progress
  add <category> <name>    Add a habit (categories: health, learning, productivity, social)
  toggle <n>               Mark habit number n done/undone for today
  badges                   Show earned badges
  refresh                  Reload everything from the server
  quit                     Leave"""


def configure_logging() -> None:
    """Configure root logging for the CLI process"""
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    # Silence noisy third-party loggers
    logging.getLogger('urllib3').setLevel(logging.WARNING)


def render_habits(controller: ReconciliationController) -> str:
    """Format the dashboard and the habit list"""
    state = controller.state
    summary = dashboard_summary(state)
    lines = [
        f"⭐ {summary.total_points} points | 📈 {summary.active_habits} habits | 🏆 {summary.badges_earned} badges",
        ""
    ]

    if not state.habits:
        lines.append("No habits yet. Start building your routine!")
        return "\n".join(lines)

    tz = get_reference_tz()
    now = get_reference_now(tz)
    for number, habit in enumerate(state.habits, start=1):
        stats = habit_stats(habit, now, tz)
        mark = "✅" if stats.completed_today else "⬜"
        strip = "".join("■" if done else "□" for done in stats.last_7_days)
        lines.append(f"{number}. {mark} {habit.name} [{habit.category_label}]")
        lines.append(
            f"   🔥 {stats.streak} day streak | {stats.total_completions} total | "
            f"{stats.completion_rate}% | last 7 days {strip}"
        )
    return "\n".join(lines)


def render_badges(controller: ReconciliationController) -> str:
    badges = controller.state.badges
    if not badges:
        return "No badges yet."
    return "\n".join(
        f"{info.icon} {info.name}" for info in (get_badge_info(badge) for badge in badges)
    )


def report(result: OperationResult, success_text: str = "") -> str:
    """Turn an operation result into one line for the user"""
    if result.logged_out:
        return "🔒 Session ended. Please log in again."
    if result.success:
        return success_text
    return f"❌ {result.message}" if result.message else ""


def cmd_login(controller: ReconciliationController, args: List[str]) -> str:
    email = input("Email: ").strip()
    password = getpass("Password: ")
    result = asyncio.run(controller.login(email, password))
    return report(result, f"Welcome back, {controller.state.user.username if controller.state.user else email}!")


def cmd_register(controller: ReconciliationController, args: List[str]) -> str:
    username = input("Username: ").strip()
    email = input("Email: ").strip()
    password = getpass("Password: ")
    result = asyncio.run(controller.register(username, email, password))
    return report(result, f"Account created. Welcome, {username}!")


def cmd_logout(controller: ReconciliationController, args: List[str]) -> str:
    controller.logout()
    return "👋 Logged out."


def cmd_habits(controller: ReconciliationController, args: List[str]) -> str:
    return render_habits(controller)


def cmd_add(controller: ReconciliationController, args: List[str]) -> str:
    if args and args[0] in CATEGORY_LABELS:
        category, name_parts = args[0], args[1:]
    else:
        category, name_parts = DEFAULT_CATEGORY, args
    result = asyncio.run(controller.create_habit(" ".join(name_parts), category))
    return report(result, render_habits(controller))


def cmd_toggle(controller: ReconciliationController, args: List[str]) -> str:
    habits = controller.state.habits
    try:
        habit = habits[int(args[0]) - 1]
    except (IndexError, ValueError):
        return f"❌ Pick a habit number between 1 and {len(habits)}"
    result = asyncio.run(controller.toggle(habit.id))
    return report(result, render_habits(controller))


def cmd_badges(controller: ReconciliationController, args: List[str]) -> str:
    return render_badges(controller)


def cmd_refresh(controller: ReconciliationController, args: List[str]) -> str:
    result = asyncio.run(controller.refresh_all())
    return report(result, render_habits(controller))


COMMANDS: Dict[str, Callable[[ReconciliationController, List[str]], str]] = {
    "login": cmd_login,
    "register": cmd_register,
    "logout": cmd_logout,
    "habits": cmd_habits,
    "add": cmd_add,
    "toggle": cmd_toggle,
    "badges": cmd_badges,
    "refresh": cmd_refresh,
}

# Usable without a session
PUBLIC_COMMANDS = {"login", "register"}


def dispatch(controller: ReconciliationController, line: str) -> str:
    """Run one command line and return the text to print"""
    parts = line.split()
    name, args = parts[0].lower(), parts[1:]

    if name == "help":
        return HELP_TEXT
    command = COMMANDS.get(name)
    if command is None:
        return f"Unknown command: {name} (type 'help')"
    if name not in PUBLIC_COMMANDS and not controller.state.is_authenticated:
        return "🔒 Please log in or register first."
    return command(controller, args)


def main():
    """Main CLI loop"""
    configure_logging()
    controller = get_controller()

    print("🎯 habitsync")
    print("Build better habits, one day at a time")
    print(f"Connected to: {settings.api_base}")
    print("Type 'help' for commands, 'quit' to leave\n")

    restored = asyncio.run(controller.restore())
    if controller.state.is_authenticated:
        print(render_habits(controller))
    elif restored.logged_out:
        print("🔒 Saved session expired. Please log in again.")

    while True:
        try:
            user_input = input("> ").strip()

            if not user_input:
                continue

            if user_input.lower() in ("quit", "exit", "q"):
                print("👋 Bye!")
                break

            output = dispatch(controller, user_input)
            if output:
                print(output)
            print()

        except (KeyboardInterrupt, EOFError):
            print("\n👋 Bye!")
            break


if __name__ == "__main__":
    main()
