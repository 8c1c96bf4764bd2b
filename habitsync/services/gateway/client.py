"""
Remote Habit Gateway - Typed wrapper over the habit service HTTP API
Marshals requests and responses; holds no business logic
"""
from typing import Any, Dict, List, Optional
import logging

import requests
from pydantic import ValidationError as PayloadValidationError

from habitsync.core.exceptions import (
    AuthError,
    NetworkError,
    Unauthorized,
    ValidationError
)
from habitsync.models import (
    AuthResult,
    Badge,
    CreateHabitRequest,
    Credentials,
    Habit,
    ToggleResult,
    User
)

logger = logging.getLogger(__name__)

AUTH_MODES = ("login", "register")


class HabitGateway:
    """
    Client for the remote habit/auth service

    Every call attaches the session's bearer token when one is present. Any
    HTTP 401 raises Unauthorized; a response without a truthy `success` flag
    is a failure even when the transport status was 2xx.
    """

    def __init__(self, base_url: str, session_store, http: Optional[requests.Session] = None,
                 timeout: Optional[float] = None):
        self.base_url = base_url.rstrip("/")
        self.session_store = session_store
        self.http = http or requests.Session()
        self.timeout = timeout

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        token = self.session_store.get_token()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def _request(self, method: str, path: str, body: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Send a request and return the decoded envelope

        Args:
            method: HTTP method
            path: Path below the API base, e.g. "/habits"
            body: Optional JSON body

        Returns:
            Response envelope dict with a truthy `success` flag

        Raises:
            Unauthorized: On HTTP 401
            NetworkError: On transport failure, non-JSON body or falsy success flag
        """
        url = f"{self.base_url}{path}"
        try:
            response = self.http.request(
                method,
                url,
                json=body,
                headers=self._headers(),
                timeout=self.timeout
            )
        except requests.RequestException as e:
            logger.error(f"{method} {path} failed: {e}")
            raise NetworkError(None) from e

        try:
            payload = response.json()
        except ValueError:
            payload = None

        message = payload.get("message") if isinstance(payload, dict) else None

        if response.status_code == 401:
            logger.warning(f"{method} {path} rejected with 401")
            raise Unauthorized(message)

        if not isinstance(payload, dict):
            logger.error(f"{method} {path} returned a non-JSON body (status {response.status_code})")
            raise NetworkError(None)

        if not response.ok or not payload.get("success"):
            logger.warning(f"{method} {path} unsuccessful (status {response.status_code}): {message}")
            raise NetworkError(message)

        return payload

    def _data(self, payload: Dict[str, Any], path: str, expected: type = dict):
        """
        Extract the `data` member of a successful envelope

        Raises:
            NetworkError: If `data` is missing, empty (objects only) or of the wrong type
        """
        data = payload.get("data")
        if not isinstance(data, expected) or (expected is dict and not data):
            logger.error(f"{path} returned success without usable data")
            raise NetworkError(None)
        return data

    def authenticate(self, mode: str, credentials: Credentials) -> AuthResult:
        """
        Log in or register

        Args:
            mode: "login" or "register"
            credentials: Email/password, plus username for registration

        Returns:
            AuthResult with token and user summary

        Raises:
            AuthError: If the service refuses the credentials
            NetworkError: On transport failure or malformed payload
        """
        if mode not in AUTH_MODES:
            raise ValueError(f"Unknown auth mode: {mode}")

        body = credentials.login_body() if mode == "login" else credentials.register_body()
        try:
            payload = self._request("POST", f"/auth/{mode}", body)
        except Unauthorized as e:
            # Bad credentials may come back as 401; that is not a session expiry
            raise AuthError(e.message) from e
        except NetworkError as e:
            if e.message:
                raise AuthError(e.message) from e
            raise

        try:
            return AuthResult.from_payload(self._data(payload, f"/auth/{mode}"))
        except PayloadValidationError as e:
            logger.error(f"Malformed auth payload: {e}")
            raise NetworkError(None) from e

    def fetch_profile(self) -> User:
        """
        Get the authenticated user's profile (points and full badge set)

        Raises:
            Unauthorized: If the token is invalid or expired
            NetworkError: On transport failure or malformed payload
        """
        payload = self._request("GET", "/auth/me")
        try:
            return User.model_validate(self._data(payload, "/auth/me"))
        except PayloadValidationError as e:
            logger.error(f"Malformed profile payload: {e}")
            raise NetworkError(None) from e

    def fetch_habits(self) -> List[Habit]:
        """
        Get all habits of the authenticated user

        Raises:
            Unauthorized: If the token is invalid or expired
            NetworkError: On transport failure or malformed payload
        """
        payload = self._request("GET", "/habits")
        try:
            return [Habit.model_validate(item) for item in self._data(payload, "/habits", list)]
        except (PayloadValidationError, TypeError) as e:
            logger.error(f"Malformed habit list payload: {e}")
            raise NetworkError(None) from e

    def create_habit(self, name: str, category: str) -> Habit:
        """
        Create a habit

        Args:
            name: Habit name
            category: Habit category

        Returns:
            The created habit with server-assigned fields

        Raises:
            ValidationError: If the name is empty or the server rejects the habit
            Unauthorized: If the token is invalid or expired
            NetworkError: On transport failure or malformed payload
        """
        try:
            request = CreateHabitRequest(name=name, category=category)
        except PayloadValidationError as e:
            raise ValidationError("Habit name is required") from e

        try:
            payload = self._request("POST", "/habits", request.model_dump())
        except NetworkError as e:
            if e.message:
                raise ValidationError(e.message) from e
            raise

        try:
            return Habit.model_validate(self._data(payload, "/habits"))
        except PayloadValidationError as e:
            logger.error(f"Malformed habit payload: {e}")
            raise NetworkError(None) from e

    def toggle_completion(self, habit_id: str) -> ToggleResult:
        """
        Toggle today's completion of a habit

        Args:
            habit_id: The habit ID

        Returns:
            ToggleResult with the updated habit and badges earned by this toggle

        Raises:
            Unauthorized: If the token is invalid or expired
            NetworkError: On transport failure, refusal or malformed payload
        """
        payload = self._request("PUT", f"/habits/{habit_id}/toggle")

        new_badges = payload.get("newBadges")
        if not isinstance(new_badges, list):
            new_badges = []

        try:
            return ToggleResult(
                habit=Habit.model_validate(self._data(payload, f"/habits/{habit_id}/toggle")),
                new_badges=[Badge.model_validate(b) for b in new_badges]
            )
        except PayloadValidationError as e:
            logger.error(f"Malformed toggle payload: {e}")
            raise NetworkError(None) from e
