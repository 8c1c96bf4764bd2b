"""Tests for HabitGateway request marshaling and response checks."""

import json
from typing import Any, Optional
from unittest.mock import MagicMock

import pytest
import requests

from habitsync.core.exceptions import AuthError, NetworkError, Unauthorized, ValidationError
from habitsync.models import Credentials
from habitsync.services.gateway import HabitGateway
from habitsync.services.session import MemoryTokenStorage, SessionStore

BASE = "http://api.test/api"


def _response(status: int, payload: Optional[Any] = None, raw: Optional[bytes] = None) -> requests.Response:
    response = requests.Response()
    response.status_code = status
    response._content = raw if raw is not None else json.dumps(payload).encode()
    return response


@pytest.fixture
def http() -> MagicMock:
    return MagicMock(spec=requests.Session)


@pytest.fixture
def store() -> SessionStore:
    return SessionStore(MemoryTokenStorage("tok"))


@pytest.fixture
def gw(http: MagicMock, store: SessionStore) -> HabitGateway:
    return HabitGateway(BASE + "/", store, http=http)


def _sent(http: MagicMock):
    args, kwargs = http.request.call_args
    return args[0], args[1], kwargs


class TestRequestEnvelope:
    """Tests for headers and success-flag handling."""

    def test_bearer_attached_when_present(self, gw, http) -> None:
        http.request.return_value = _response(200, {"success": True, "data": []})
        gw.fetch_habits()

        method, url, kwargs = _sent(http)
        assert (method, url) == ("GET", f"{BASE}/habits")
        assert kwargs["headers"]["Authorization"] == "Bearer tok"
        assert kwargs["timeout"] is None

    def test_bearer_omitted_when_absent(self, http) -> None:
        gw = HabitGateway(BASE, SessionStore(MemoryTokenStorage()), http=http)
        http.request.return_value = _response(200, {"success": True, "data": []})
        gw.fetch_habits()

        _, _, kwargs = _sent(http)
        assert "Authorization" not in kwargs["headers"]

    def test_missing_success_flag_is_failure(self, gw, http) -> None:
        http.request.return_value = _response(200, {"data": []})
        with pytest.raises(NetworkError):
            gw.fetch_habits()

    def test_false_success_carries_message(self, gw, http) -> None:
        http.request.return_value = _response(200, {"success": False, "message": "Habit not found"})
        with pytest.raises(NetworkError) as excinfo:
            gw.toggle_completion("h1")
        assert excinfo.value.message == "Habit not found"

    def test_401_raises_unauthorized(self, gw, http) -> None:
        http.request.return_value = _response(401, {"success": False, "message": "Token expired"})
        with pytest.raises(Unauthorized):
            gw.fetch_profile()

    def test_non_json_body(self, gw, http) -> None:
        http.request.return_value = _response(502, raw=b"<html>Bad Gateway</html>")
        with pytest.raises(NetworkError) as excinfo:
            gw.fetch_profile()
        assert excinfo.value.message is None

    @pytest.mark.parametrize("payload", [
        {"success": True},
        {"success": True, "data": None},
        {"success": True, "data": {}},
        {"success": True, "data": []},
    ])
    def test_profile_without_data_is_malformed(self, gw, http, payload) -> None:
        http.request.return_value = _response(200, payload)
        with pytest.raises(NetworkError) as excinfo:
            gw.fetch_profile()
        assert excinfo.value.message is None

    def test_habits_without_data_is_malformed(self, gw, http) -> None:
        http.request.return_value = _response(200, {"success": True})
        with pytest.raises(NetworkError):
            gw.fetch_habits()

    def test_toggle_without_data_is_malformed(self, gw, http) -> None:
        http.request.return_value = _response(200, {"success": True, "newBadges": ["week_warrior"]})
        with pytest.raises(NetworkError):
            gw.toggle_completion("h1")

    def test_transport_failure(self, gw, http) -> None:
        http.request.side_effect = requests.ConnectionError("refused")
        with pytest.raises(NetworkError):
            gw.fetch_habits()

    def test_timeout_is_network_error(self, gw, http) -> None:
        http.request.side_effect = requests.Timeout("slow")
        with pytest.raises(NetworkError):
            gw.fetch_habits()


class TestAuthenticate:
    """Tests for login and registration."""

    def test_login_body_and_result(self, gw, http) -> None:
        http.request.return_value = _response(200, {
            "success": True,
            "data": {"token": "new", "id": "u1", "username": "ada", "email": "a@x.io",
                     "totalPoints": 10, "badges": ["week_warrior"]},
        })

        result = gw.authenticate("login", Credentials(email="a@x.io", password="pw"))

        method, url, kwargs = _sent(http)
        assert (method, url) == ("POST", f"{BASE}/auth/login")
        assert kwargs["json"] == {"email": "a@x.io", "password": "pw"}
        assert result.token == "new"
        assert result.user.total_points == 10

    def test_register_body(self, gw, http) -> None:
        http.request.return_value = _response(201, {
            "success": True, "data": {"token": "new", "id": "u1", "username": "ada"},
        })
        gw.authenticate("register", Credentials(username="ada", email="a@x.io", password="pw"))

        _, url, kwargs = _sent(http)
        assert url == f"{BASE}/auth/register"
        assert kwargs["json"] == {"username": "ada", "email": "a@x.io", "password": "pw"}

    def test_refusal_is_auth_error(self, gw, http) -> None:
        http.request.return_value = _response(400, {"success": False, "message": "Invalid credentials"})
        with pytest.raises(AuthError) as excinfo:
            gw.authenticate("login", Credentials(email="a@x.io", password="bad"))
        assert excinfo.value.message == "Invalid credentials"

    def test_401_on_login_is_auth_error(self, gw, http) -> None:
        http.request.return_value = _response(401, {"success": False, "message": "Invalid credentials"})
        with pytest.raises(AuthError):
            gw.authenticate("login", Credentials(email="a@x.io", password="bad"))

    def test_missing_token_is_malformed(self, gw, http) -> None:
        http.request.return_value = _response(200, {"success": True, "data": {"id": "u1"}})
        with pytest.raises(NetworkError):
            gw.authenticate("login", Credentials(email="a@x.io", password="pw"))

    def test_unknown_mode(self, gw) -> None:
        with pytest.raises(ValueError):
            gw.authenticate("sso", Credentials(email="a@x.io", password="pw"))


class TestHabitCalls:
    """Tests for habit list, creation and toggling."""

    def test_fetch_habits(self, gw, http) -> None:
        http.request.return_value = _response(200, {
            "success": True,
            "data": [{"_id": "h1", "name": "Run"}, {"_id": "h2", "name": "Read"}],
        })
        assert [h.id for h in gw.fetch_habits()] == ["h1", "h2"]

    def test_fetch_habits_malformed_item(self, gw, http) -> None:
        http.request.return_value = _response(200, {"success": True, "data": [{"name": "no id"}]})
        with pytest.raises(NetworkError):
            gw.fetch_habits()

    def test_create_habit(self, gw, http) -> None:
        http.request.return_value = _response(201, {
            "success": True, "data": {"_id": "h9", "name": "Walk", "category": "health", "streak": 0},
        })
        habit = gw.create_habit(" Walk ", "health")

        method, url, kwargs = _sent(http)
        assert (method, url) == ("POST", f"{BASE}/habits")
        assert kwargs["json"] == {"name": "Walk", "category": "health"}
        assert habit.id == "h9"

    def test_create_habit_blank_name_never_sent(self, gw, http) -> None:
        with pytest.raises(ValidationError):
            gw.create_habit("   ", "health")
        http.request.assert_not_called()

    def test_create_habit_server_refusal(self, gw, http) -> None:
        http.request.return_value = _response(400, {"success": False, "message": "Name too long"})
        with pytest.raises(ValidationError) as excinfo:
            gw.create_habit("Walk", "health")
        assert excinfo.value.message == "Name too long"

    def test_toggle_with_new_badges(self, gw, http) -> None:
        http.request.return_value = _response(200, {
            "success": True,
            "data": {"_id": "h1", "streak": 5},
            "newBadges": [{"badgeId": "week_warrior"}, "month_master"],
        })
        result = gw.toggle_completion("h1")

        method, url, _ = _sent(http)
        assert (method, url) == ("PUT", f"{BASE}/habits/h1/toggle")
        assert result.habit.streak == 5
        assert [b.badge_id for b in result.new_badges] == ["week_warrior", "month_master"]

    @pytest.mark.parametrize("new_badges", [None, "week_warrior", {"badgeId": "x"}])
    def test_toggle_non_list_badges_are_empty(self, gw, http, new_badges) -> None:
        payload = {"success": True, "data": {"_id": "h1"}}
        if new_badges is not None:
            payload["newBadges"] = new_badges
        http.request.return_value = _response(200, payload)

        assert gw.toggle_completion("h1").new_badges == []
