"""Shared fixtures: a scriptable gateway double and a wired controller."""

import pytest

from habitsync.services.reconciliation import ReconciliationController
from habitsync.services.session import MemoryTokenStorage, SessionStore
from tests.helpers import FakeGateway, make_habit, make_user


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
def session() -> SessionStore:
    return SessionStore(MemoryTokenStorage())


@pytest.fixture
def controller(gateway: FakeGateway, session: SessionStore) -> ReconciliationController:
    return ReconciliationController(gateway, session)


@pytest.fixture
async def logged_in(controller: ReconciliationController, gateway: FakeGateway) -> ReconciliationController:
    """Controller after a successful login with two habits and one badge."""
    gateway.outcomes["fetch_profile"] = make_user(totalPoints=40, badges=["habit_collector"])
    gateway.outcomes["fetch_habits"] = [make_habit("h1"), make_habit("h2", streak=2)]
    result = await controller.login("ada@example.com", "secret")
    assert result.success
    gateway.calls.clear()
    return controller


