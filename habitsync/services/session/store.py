"""
Session Store - Bearer token lifecycle backed by a durable key-value slot
"""
from pathlib import Path
from typing import Optional, Union
import json
import logging

logger = logging.getLogger(__name__)

# Fixed key of the token inside the storage slot
TOKEN_KEY = "token"


class TokenStorage:
    """
    JSON file holding the persisted token

    The file survives process restarts; a missing or corrupt file reads as
    "no token".
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def read(self) -> Optional[str]:
        """
        Read the persisted token

        Returns:
            Token string, or None if absent
        """
        if not self.path.exists():
            return None
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(f"Could not read token file {self.path}: {e}")
            return None
        token = data.get(TOKEN_KEY) if isinstance(data, dict) else None
        return token or None

    def write(self, token: str) -> None:
        """Persist the token, creating the parent directory if needed"""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps({TOKEN_KEY: token}), encoding="utf-8")

    def delete(self) -> bool:
        """
        Remove the persisted token

        Returns:
            True if a file was removed, False if there was nothing to remove
        """
        try:
            self.path.unlink()
            return True
        except FileNotFoundError:
            return False


class MemoryTokenStorage:
    """Non-durable slot, for embedding and tests"""

    def __init__(self, token: Optional[str] = None):
        self._token = token

    def read(self) -> Optional[str]:
        return self._token

    def write(self, token: str) -> None:
        self._token = token

    def delete(self) -> bool:
        existed = self._token is not None
        self._token = None
        return existed


class SessionStore:
    """
    Owns the bearer token and the authenticated/unauthenticated mode

    `generation` increases on every token change so that callers can detect
    that a result belongs to a session that no longer exists.
    """

    def __init__(self, storage):
        self.storage = storage
        self._token = storage.read()
        self._generation = 0

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def is_authenticated(self) -> bool:
        return self._token is not None

    def set_token(self, token: str) -> None:
        """
        Persist a token and mark the session authenticated

        Args:
            token: Opaque bearer token from a successful authenticate call
        """
        if not token:
            raise ValueError("token must be a non-empty string")
        self.storage.write(token)
        self._token = token
        self._generation += 1
        logger.info("Session token stored")

    def get_token(self) -> Optional[str]:
        """
        Get the current token

        Returns:
            Token string, or None when unauthenticated
        """
        return self._token

    def clear(self) -> bool:
        """
        Remove the token and reset to unauthenticated

        Clearing an already-cleared session is a no-op. Callers must also
        discard user, habit and badge state.

        Returns:
            True if a session existed and was cleared, False otherwise
        """
        if self._token is None:
            # Storage may still hold a stale token written by another process
            self.storage.delete()
            return False

        self.storage.delete()
        self._token = None
        self._generation += 1
        logger.info("Session cleared")
        return True
