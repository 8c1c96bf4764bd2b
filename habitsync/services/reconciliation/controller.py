"""
Reconciliation Controller - Remote calls and merging their results into AppState

Local state changes only after the server confirms a mutation. Every public
operation returns an OperationResult and never raises.
"""
from dataclasses import dataclass
from typing import Any, Callable, Optional, Set
import asyncio
import logging

from pydantic import ValidationError as PayloadValidationError

from habitsync.core.exceptions import (
    AuthError,
    HabitSyncException,
    Unauthorized,
    ValidationError
)
from habitsync.models import Credentials
from .state import AppState, AuthMode, HabitDraft

logger = logging.getLogger(__name__)

AUTH_FAILED_MESSAGE = "Authentication failed"
SERVER_ERROR_MESSAGE = "Server error. Please try again."
PROFILE_FAILED_MESSAGE = "Failed to load profile"
HABITS_FAILED_MESSAGE = "Failed to load habits"
TOGGLE_FAILED_MESSAGE = "Failed to toggle habit"
CREATE_FAILED_MESSAGE = "Failed to create habit"
BUSY_MESSAGE = "Operation already in progress"
NOT_AUTHENTICATED_MESSAGE = "Not logged in"


@dataclass(frozen=True)
class OperationResult:
    """Outcome of a controller operation"""
    success: bool
    message: Optional[str] = None
    # The session ended during this operation (logout or 401)
    logged_out: bool = False


class ReconciliationController:
    """
    Orchestrates gateway calls and applies the authoritative responses

    Args:
        gateway: HabitGateway (or any object with the same methods)
        session: SessionStore owning the bearer token
        state: Optional AppState to drive; a fresh one is created otherwise
        dedupe_badges: Drop already-owned badges when appending toggle rewards
    """

    def __init__(self, gateway, session, state: Optional[AppState] = None, dedupe_badges: bool = False):
        self.gateway = gateway
        self.session = session
        self.state = state or AppState()
        self.dedupe_badges = dedupe_badges
        # Keys of user actions currently awaiting the server
        self._in_flight: Set[str] = set()

    # ------------------------------------------------------------------
    # helpers
    # ------------------------------------------------------------------

    async def _call(self, func: Callable[..., Any], *args) -> Any:
        """Run a blocking gateway call without blocking the event loop"""
        return await asyncio.to_thread(func, *args)

    def _is_stale(self, generation: int) -> bool:
        return generation != self.session.generation

    def _stale(self, what: str) -> OperationResult:
        logger.info(f"Discarding {what} result from an ended session")
        return OperationResult(False)

    def _fail(self, scope: str, error: BaseException, fallback: str) -> OperationResult:
        message = getattr(error, "message", None) or fallback
        if isinstance(error, HabitSyncException):
            logger.warning(f"{scope} failed: {message}")
        else:
            logger.error(f"Unexpected {scope} failure: {error!r}", exc_info=error)
        self.state.record_error(scope, message)
        return OperationResult(False, message)

    def _unauthorized(self, generation: int) -> OperationResult:
        if self._is_stale(generation):
            return self._stale("401")
        logger.warning("Session rejected by server, logging out")
        return self.logout()

    def _auth_failed(self, error: BaseException, fallback: str) -> OperationResult:
        self.state.mode = AuthMode.AUTH_FAILED
        return self._fail("auth", error, fallback)

    def _begin(self, key: str) -> bool:
        if key in self._in_flight:
            logger.debug(f"Ignoring duplicate request: {key}")
            return False
        self._in_flight.add(key)
        return True

    # ------------------------------------------------------------------
    # session
    # ------------------------------------------------------------------

    async def login(self, email: str, password: str) -> OperationResult:
        """Log in with email and password, then load profile and habits"""
        return await self._authenticate("login", email=email, password=password)

    async def register(self, username: str, email: str, password: str) -> OperationResult:
        """Create an account, then load profile and habits"""
        return await self._authenticate("register", username=username, email=email, password=password)

    async def _authenticate(self, mode: str, **fields) -> OperationResult:
        if not self._begin("auth"):
            return OperationResult(False, BUSY_MESSAGE)

        try:
            self.state.mode = AuthMode.AUTHENTICATING
            self.state.clear_error("auth")

            try:
                credentials = Credentials(**fields)
            except PayloadValidationError:
                return self._auth_failed(ValidationError("Email and password are required"), AUTH_FAILED_MESSAGE)

            try:
                result = await self._call(self.gateway.authenticate, mode, credentials)
            except AuthError as e:
                return self._auth_failed(e, AUTH_FAILED_MESSAGE)
            except Exception as e:
                return self._auth_failed(e, SERVER_ERROR_MESSAGE)

            self.session.set_token(result.token)
            self.state.errors = {}
            # Seed from the immediate response; refresh_all replaces it
            self.state.apply_profile(result.user)
            self.state.mode = AuthMode.AUTHENTICATED
            logger.info(f"Authenticated as {result.user.username or result.user.email}")

            refreshed = await self._refresh_all()
            if refreshed.logged_out:
                return refreshed
            return OperationResult(True)
        finally:
            self._in_flight.discard("auth")

    async def restore(self) -> OperationResult:
        """Resume a persisted session at startup"""
        if not self.session.get_token():
            self.state.mode = AuthMode.UNAUTHENTICATED
            return OperationResult(False)

        self.state.mode = AuthMode.AUTHENTICATED
        return await self.refresh_all()

    def logout(self) -> OperationResult:
        """
        End the session and discard all user state

        Safe to call on an already-ended session.
        """
        self.session.clear()
        self.state.reset()
        return OperationResult(True, logged_out=True)

    # ------------------------------------------------------------------
    # refresh
    # ------------------------------------------------------------------

    async def refresh_all(self) -> OperationResult:
        """
        Fetch profile and habits concurrently and apply each independently

        A failure in one does not affect the other. Unauthorized from either
        ends the session regardless of the other result.
        """
        if not self._begin("refresh"):
            return OperationResult(False, BUSY_MESSAGE)
        try:
            return await self._refresh_all()
        finally:
            self._in_flight.discard("refresh")

    async def _refresh_all(self) -> OperationResult:
        if not self.session.is_authenticated:
            return OperationResult(False, NOT_AUTHENTICATED_MESSAGE)

        generation = self.session.generation
        profile, habits = await asyncio.gather(
            self._call(self.gateway.fetch_profile),
            self._call(self.gateway.fetch_habits),
            return_exceptions=True
        )

        if any(isinstance(outcome, Unauthorized) for outcome in (profile, habits)):
            return self._unauthorized(generation)
        if self._is_stale(generation):
            return self._stale("refresh")

        messages = []
        for scope, outcome, apply, fallback in (
            ("profile", profile, self.state.apply_profile, PROFILE_FAILED_MESSAGE),
            ("habits", habits, self.state.apply_habits, HABITS_FAILED_MESSAGE),
        ):
            if isinstance(outcome, BaseException):
                messages.append(self._fail(scope, outcome, fallback).message)
            else:
                apply(outcome)
                self.state.clear_error(scope)

        if messages:
            return OperationResult(False, "; ".join(messages))
        return OperationResult(True)

    async def refresh_profile(self) -> OperationResult:
        """Reload the profile, replacing user, points and badges wholesale"""
        if not self.session.is_authenticated:
            return OperationResult(False, NOT_AUTHENTICATED_MESSAGE)

        generation = self.session.generation
        try:
            user = await self._call(self.gateway.fetch_profile)
        except Unauthorized:
            return self._unauthorized(generation)
        except Exception as e:
            if self._is_stale(generation):
                return self._stale("profile")
            return self._fail("profile", e, PROFILE_FAILED_MESSAGE)

        if self._is_stale(generation):
            return self._stale("profile")

        self.state.apply_profile(user)
        self.state.clear_error("profile")
        return OperationResult(True)

    # ------------------------------------------------------------------
    # mutations
    # ------------------------------------------------------------------

    async def toggle(self, habit_id: str) -> OperationResult:
        """
        Toggle today's completion of a habit

        The local habit list changes only after the server answers. The
        matching habit is replaced in place, the profile is reloaded for
        points, then badges earned by this toggle are appended.
        """
        if not self.state.is_authenticated:
            return OperationResult(False, NOT_AUTHENTICATED_MESSAGE)

        key = f"toggle:{habit_id}"
        if not self._begin(key):
            return OperationResult(False, BUSY_MESSAGE)

        try:
            generation = self.session.generation
            try:
                result = await self._call(self.gateway.toggle_completion, habit_id)
            except Unauthorized:
                return self._unauthorized(generation)
            except Exception as e:
                if self._is_stale(generation):
                    return self._stale("toggle")
                return self._fail("toggle", e, TOGGLE_FAILED_MESSAGE)

            if self._is_stale(generation):
                return self._stale("toggle")

            self.state.replace_habit(result.habit)
            self.state.clear_error("toggle")

            profile = await self.refresh_profile()
            if profile.logged_out:
                return profile
            if self._is_stale(generation):
                return self._stale("toggle")

            if result.new_badges:
                self.state.append_badges(result.new_badges, dedupe=self.dedupe_badges)
                logger.info(f"Earned {len(result.new_badges)} new badge(s)")

            return OperationResult(True)
        finally:
            self._in_flight.discard(key)

    async def create_habit(self, name: Optional[str] = None, category: Optional[str] = None) -> OperationResult:
        """
        Create a habit, then reload everything from the server

        Args:
            name: Habit name; defaults to the draft's name
            category: Habit category; defaults to the draft's category
        """
        name = self.state.draft.name if name is None else name
        category = category or self.state.draft.category

        if not name.strip():
            return self._fail("create", ValidationError("Habit name is required"), CREATE_FAILED_MESSAGE)
        if not self.state.is_authenticated:
            return OperationResult(False, NOT_AUTHENTICATED_MESSAGE)
        if not self._begin("create"):
            return OperationResult(False, BUSY_MESSAGE)

        try:
            generation = self.session.generation
            try:
                await self._call(self.gateway.create_habit, name.strip(), category)
            except Unauthorized:
                return self._unauthorized(generation)
            except Exception as e:
                if self._is_stale(generation):
                    return self._stale("create")
                return self._fail("create", e, CREATE_FAILED_MESSAGE)

            if self._is_stale(generation):
                return self._stale("create")

            self.state.draft = HabitDraft()
            self.state.clear_error("create")

            refreshed = await self._refresh_all()
            if refreshed.logged_out:
                return refreshed
            return OperationResult(True)
        finally:
            self._in_flight.discard("create")
